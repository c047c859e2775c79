"""Snapshot store adapters."""

from .json_file import JsonSnapshotStore
from .memory import MemorySnapshotStore

__all__ = ["JsonSnapshotStore", "MemorySnapshotStore"]

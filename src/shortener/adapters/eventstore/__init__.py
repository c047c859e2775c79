"""Event store adapters."""

from .memory import MemoryEventStore

__all__ = ["MemoryEventStore"]

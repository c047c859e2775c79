"""Fixtures for SnapshotStore contract tests."""

from collections.abc import Iterable

import pytest

from shortener.adapters.snapshot_store import JsonSnapshotStore, MemorySnapshotStore
from shortener.interfaces.snapshot_store import SnapshotStore


@pytest.fixture(params=["json", "memory"])
def snapshot_store(request: pytest.FixtureRequest, tmp_path) -> Iterable[SnapshotStore]:
    """Return a fresh, empty SnapshotStore for the requested backend.

    Supported params:
      - `"json"` → JsonSnapshotStore in a temporary directory
      - `"memory"` → MemorySnapshotStore
    """
    match request.param:
        case "json":
            yield JsonSnapshotStore(tmp_path / "snapshots" / "snapshot.json")
        case "memory":
            yield MemorySnapshotStore()
        case _:
            raise ValueError(f"unknown snapshot store type: {request.param}")

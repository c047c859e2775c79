"""Global pytest fixtures for SHORTENER."""

from __future__ import annotations

from pathlib import Path

import pytest

from shortener.adapters.id_generators import SimpleIdGenerator
from shortener.adapters.snapshot_store import JsonSnapshotStore, MemorySnapshotStore
from shortener.bootstrap import AppContainer, bootstrap

# pylint: disable=redefined-outer-name

TESTS_ROOT = Path(__file__).parent.resolve()

# first directory under tests/ -> default marker
DIRECTORY_MARKERS = {
    "unit": "unit",
    "contract": "contract",
    "integration": "integration",
    "e2e": "e2e",
}


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config,  # pylint: disable=unused-argument
    items: list[pytest.Item],
) -> None:
    """Mark each test after the top-level test directory it lives in."""
    for item in items:
        try:
            relative = item.path.resolve().relative_to(TESTS_ROOT)
        except ValueError:
            continue
        marker = DIRECTORY_MARKERS.get(relative.parts[0])
        if marker and not any(m.name == marker for m in item.iter_markers()):
            item.add_marker(getattr(pytest.mark, marker))


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    """A snapshot file location inside the test's temporary directory."""
    return tmp_path / "state" / "snapshot.json"


@pytest.fixture
def json_snapshot_store(snapshot_path: Path) -> JsonSnapshotStore:
    """A JSON snapshot store writing to `snapshot_path`."""
    return JsonSnapshotStore(snapshot_path)


@pytest.fixture
def memory_snapshot_store() -> MemorySnapshotStore:
    """A fresh in-memory snapshot store."""
    return MemorySnapshotStore()


@pytest.fixture
def app(memory_snapshot_store: MemorySnapshotStore) -> AppContainer:
    """A fully wired service with no saved state and predictable slugs."""
    return bootstrap(
        snapshot_store=memory_snapshot_store,
        slug_generator=SimpleIdGenerator(length=6),
    )

"""In-memory snapshot store.

Keeps the encoded snapshot in a bytes buffer so it goes through the same
JSON round trip as the file store. Use for tests and throwaway sessions.
"""

from shortener.domain.snapshot import ServiceState
from shortener.interfaces.snapshot_store import SnapshotNotFoundError, SnapshotStore

from .json_file import decode_state, encode_state


class MemorySnapshotStore(SnapshotStore):
    """SnapshotStore that never touches the filesystem."""

    def __init__(self) -> None:
        self._data: bytes | None = None
        self.saves = 0

    def save(self, state: ServiceState) -> None:
        self._data = encode_state(state)
        self.saves += 1

    def load(self) -> ServiceState:
        if self._data is None:
            raise SnapshotNotFoundError("no snapshot saved in memory")
        return decode_state(self._data)

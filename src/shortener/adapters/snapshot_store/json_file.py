"""Local filesystem JSON snapshot store adapter."""

import contextlib
import json
import logging
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

from filelock import FileLock, Timeout

from shortener.domain.snapshot import InvalidStateError, ServiceState
from shortener.interfaces.snapshot_store import (
    InvalidSnapshotError,
    SnapshotError,
    SnapshotLockedError,
    SnapshotNotFoundError,
    SnapshotStore,
)

logger = logging.getLogger(__name__)

ENCODING = "utf-8"
LOCK_SUFFIX = ".lock"  # pragma: no mutate


def encode_state(state: ServiceState) -> bytes:
    """Serialize *state* to its JSON wire form."""
    return json.dumps(state.to_mapping(), indent=2, sort_keys=True).encode(ENCODING)


def decode_state(data: bytes) -> ServiceState:
    """Deserialize a JSON snapshot.

    Raises:
        InvalidSnapshotError: If *data* is not valid JSON or is ill-shaped.
    """
    try:
        return ServiceState.from_mapping(json.loads(data.decode(ENCODING)))
    except (UnicodeDecodeError, json.JSONDecodeError, InvalidStateError) as e:
        raise InvalidSnapshotError(f"cannot decode snapshot: {e}") from e


class JsonSnapshotStore(SnapshotStore):
    """SnapshotStore writing one JSON file.

    Saves are truncate-writes made atomic by writing a temporary file in the
    target directory and moving it over the destination with `os.replace`, so
    readers only ever see the previous or the new snapshot.

    `exclusive()` takes an OS file lock on ``<snapshot>.lock`` beside the
    snapshot, which serializes processes sharing the file.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        """Destination file of the snapshot."""
        return self._path

    @property
    def lock_path(self) -> Path:
        """File locked by `exclusive()`."""
        return self._path.with_name(self._path.name + LOCK_SUFFIX)

    @contextlib.contextmanager
    def exclusive(self, timeout: float | None = None) -> Iterator[None]:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SnapshotError(f"cannot create {self._path.parent}: {e}") from e

        lock = FileLock(self.lock_path, timeout=-1 if timeout is None else timeout)
        try:
            lock.acquire()
        except Timeout as e:
            raise SnapshotLockedError(
                f"snapshot {self._path} is in use by another process"
            ) from e
        logger.debug("Locked %s", self.lock_path)
        try:
            yield
        finally:
            lock.release()
            logger.debug("Unlocked %s", self.lock_path)

    def save(self, state: ServiceState) -> None:
        data = encode_state(state)
        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            # disable mutmut because it likes to replace False with None,
            # which is falsy and thus equivalent here
            with tempfile.NamedTemporaryFile(dir=self._path.parent, prefix=f".{self._path.name}.", delete=False) as tmp:  # pragma: no mutate # fmt: skip # pylint:disable=line-too-long
                tmp_path = Path(tmp.name)
                tmp.write(data)
            os.replace(tmp_path, self._path)
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise SnapshotError(f"cannot write snapshot to {self._path}: {e}") from e
        logger.debug("Saved %d link(s) to %s", len(state), self._path)

    def load(self) -> ServiceState:
        try:
            data = self._path.read_bytes()
        except FileNotFoundError:
            raise SnapshotNotFoundError(f"no snapshot at {self._path}") from None
        except OSError as e:
            raise SnapshotError(f"cannot read snapshot {self._path}: {e}") from e
        state = decode_state(data)
        logger.debug("Loaded %d link(s) from %s", len(state), self._path)
        return state

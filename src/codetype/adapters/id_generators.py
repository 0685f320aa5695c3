"""ID generators for history entries."""

import threading

from ulid import monotonic

from codetype.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods


class ULIDGenerator(IdGenerator):
    """Thread-safe monotonic ULID generator (production default).

    ULIDs sort by creation time, which gives history entries completed at
    the same instant a stable, insertion-ordered tie-break.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            return str(monotonic.new())


class SequentialIdGenerator(IdGenerator):
    """Zero-padded counter IDs ("0001", "0002", ...).

    Note:
        Not suitable for production use; for tests and demos.
    """

    def __init__(self, length: int = 26) -> None:
        self._counter = 0
        self._length = length

    def new_id(self) -> str:
        self._counter += 1
        return f"{self._counter:0{self._length}d}"

"""SQLAlchemy-backed Unit of Work for CODETYPE.

Each `with uow:` block checks a connection out of the engine's pool, exposes
a `SqlAlchemyHistoryStore` bound to it, and returns the connection on exit.
Work not committed before exit is rolled back. Failures to connect or to
commit surface as `HistoryStoreUnavailableError`.

One instance is shared by the message bus across request threads, so the
connection and store live in thread-local state: concurrent blocks on
different threads use different connections.

Blocks do not nest: entering again on a thread whose block is still open
raises `RuntimeError`.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from codetype.adapters.history_store import SqlAlchemyHistoryStore
from codetype.interfaces.history_store import HistoryStoreUnavailableError
from codetype.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

    from codetype.interfaces.id_generator import IdGenerator


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work."""

    def __init__(self, engine: Engine, id_generator: IdGenerator):
        self.engine = engine
        self.id_generator = id_generator
        self._local = threading.local()

    @property
    def connection(self) -> Connection:
        """The connection of the current thread's open block."""
        return self._local.connection

    @property
    def history(self) -> SqlAlchemyHistoryStore:  # type: ignore[override]
        return self._local.history

    def __enter__(self):
        if hasattr(self._local, "connection"):
            raise RuntimeError("unit of work is already active on this thread")
        try:
            connection = self.engine.connect()
        except SQLAlchemyError as e:
            raise HistoryStoreUnavailableError(f"connect: {e}") from e
        self._local.connection = connection
        self._local.history = SqlAlchemyHistoryStore(connection, self.id_generator)
        return super().__enter__()

    def __exit__(self, *args):
        try:
            super().__exit__(*args)
        finally:
            self.connection.close()
            del self._local.connection, self._local.history

    def commit(self):
        try:
            self.connection.commit()
        except SQLAlchemyError as e:
            raise HistoryStoreUnavailableError(f"commit: {e}") from e

    def rollback(self):
        self.connection.rollback()

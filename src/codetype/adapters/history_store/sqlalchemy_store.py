"""SQLAlchemy-backed HistoryStore adapter.

Works on a caller-supplied `Connection`, so transaction boundaries belong to
the unit of work. Every driver error, including a value the driver cannot
convert to a column integer, is wrapped in `HistoryStoreUnavailableError`
with the operation and user it concerned.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import SQLAlchemyError

from codetype.adapters.db.schema import practice_history
from codetype.domain.history import (
    HistoryEntry,
    Language,
    NewHistoryEntry,
    clamp_limit,
    clamp_offset,
)
from codetype.interfaces.history_store import (
    HistoryStore,
    HistoryStoreUnavailableError,
)

if TYPE_CHECKING:
    from sqlalchemy import RowMapping
    from sqlalchemy.engine import Connection

    from codetype.interfaces.id_generator import IdGenerator


class SqlAlchemyHistoryStore(HistoryStore):
    """HistoryStore over the ``practice_history`` table."""

    def __init__(self, connection: Connection, id_generator: IdGenerator):
        self.connection = connection
        self.id_generator = id_generator

    def create(self, user_id: str, entry: NewHistoryEntry) -> HistoryEntry:
        stmt = (
            insert(practice_history)
            .values(
                id=self.id_generator.new_id(),
                user_id=user_id,
                language=entry.language.value,
                wpm=entry.wpm,
                accuracy=entry.accuracy,
                errors=entry.errors,
                duration_seconds=entry.duration_seconds,
                completed_at=entry.completed_at,
            )
            .returning(practice_history)
        )
        try:
            row = self.connection.execute(stmt).mappings().one()
        except (SQLAlchemyError, OverflowError) as e:
            raise HistoryStoreUnavailableError(
                f"insert history entry for user {user_id}: {e}"
            ) from e
        return self._to_entry(row)

    def list_by_user(
        self, user_id: str, limit: int | None = None, offset: int | None = None
    ) -> list[HistoryEntry]:
        stmt = (
            select(practice_history)
            .where(practice_history.c.user_id == user_id)
            .order_by(
                practice_history.c.completed_at.desc(),
                practice_history.c.id.desc(),  # stable pages on equal timestamps
            )
            .limit(clamp_limit(limit))
            .offset(clamp_offset(offset))
        )
        try:
            rows = self.connection.execute(stmt).mappings().all()
        except (SQLAlchemyError, OverflowError) as e:
            raise HistoryStoreUnavailableError(
                f"query history entries for user {user_id}: {e}"
            ) from e
        return [self._to_entry(row) for row in rows]

    def delete_by_user(self, user_id: str) -> None:
        stmt = delete(practice_history).where(practice_history.c.user_id == user_id)
        try:
            self.connection.execute(stmt)
        except (SQLAlchemyError, OverflowError) as e:
            raise HistoryStoreUnavailableError(
                f"delete history entries for user {user_id}: {e}"
            ) from e

    @staticmethod
    def _to_entry(row: RowMapping) -> HistoryEntry:
        return HistoryEntry(
            id=row["id"],
            user_id=row["user_id"],
            language=Language(row["language"]),
            wpm=row["wpm"],
            accuracy=row["accuracy"],
            errors=row["errors"],
            duration_seconds=row["duration_seconds"],
            completed_at=row["completed_at"],
            created_at=row["created_at"],
        )

"""In-memory HistoryStore.

Non-durable: all data is lost when the instance is discarded. Use for unit
tests and prototyping. Passes the same contract tests as the SQLAlchemy
adapter.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from codetype.domain.history import (
    HistoryEntry,
    NewHistoryEntry,
    clamp_limit,
    clamp_offset,
)
from codetype.interfaces.history_store import HistoryStore

if TYPE_CHECKING:
    from codetype.interfaces.id_generator import IdGenerator


class InMemoryHistoryStore(HistoryStore):
    """HistoryStore keeping entries in a list.

    Args:
        id_generator: Source of entry identifiers.
        entries: Optional backing list, shared with other instances to
            emulate one database seen through several units of work.
    """

    def __init__(
        self, id_generator: IdGenerator, entries: list[HistoryEntry] | None = None
    ):
        self.id_generator = id_generator
        self._entries = entries if entries is not None else []

    def create(self, user_id: str, entry: NewHistoryEntry) -> HistoryEntry:
        stored = HistoryEntry(
            id=self.id_generator.new_id(),
            user_id=user_id,
            language=entry.language,
            wpm=entry.wpm,
            accuracy=entry.accuracy,
            errors=entry.errors,
            duration_seconds=entry.duration_seconds,
            completed_at=entry.completed_at,
            created_at=datetime.now(timezone.utc),
        )
        self._entries.append(stored)
        return stored

    def list_by_user(
        self, user_id: str, limit: int | None = None, offset: int | None = None
    ) -> list[HistoryEntry]:
        start = clamp_offset(offset)
        matching = sorted(
            (e for e in self._entries if e.user_id == user_id),
            key=lambda e: (e.completed_at, e.id),
            reverse=True,
        )
        return matching[start : start + clamp_limit(limit)]

    def delete_by_user(self, user_id: str) -> None:
        self._entries[:] = [e for e in self._entries if e.user_id != user_id]

"""History store port.

Contract overview
-----------------
Create:
- `create(user_id, entry)` inserts one row, assigns `id` and `created_at`,
  and returns the full persisted `HistoryEntry` as read back from the store.

List:
- `list_by_user(user_id, limit, offset)` returns entries ordered by
  `completed_at` descending (most recent practice first).
- `limit` is clamped to [1, 100] with 50 used for missing or non-positive
  values; `offset` is clamped to >= 0.
- No matching rows yields an empty list, never an error.

Delete:
- `delete_by_user(user_id)` removes every row of that user. Deleting when
  nothing matches is a successful no-op, which is what makes repeated
  account deletion idempotent.

Errors:
- `HistoryStoreUnavailableError` for driver/connectivity/query failures.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codetype.domain.history import HistoryEntry, NewHistoryEntry


class HistoryStoreError(Exception):
    """Base class for history store errors."""


class HistoryStoreUnavailableError(HistoryStoreError):
    """Operational/connection/query failure in the underlying store."""


class HistoryStore(abc.ABC):
    """Typed access to the practice history of users."""

    @abc.abstractmethod
    def create(self, user_id: str, entry: NewHistoryEntry) -> HistoryEntry:
        """Persist `entry` for `user_id` and return the stored row."""

    @abc.abstractmethod
    def list_by_user(
        self, user_id: str, limit: int | None = None, offset: int | None = None
    ) -> list[HistoryEntry]:
        """Return one page of `user_id`'s entries, most recently completed first."""

    @abc.abstractmethod
    def delete_by_user(self, user_id: str) -> None:
        """Delete every entry of `user_id` (no-op when there are none)."""

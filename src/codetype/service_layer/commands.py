"""Commands (state-changing requests) and queries (reads).

Every message carries the caller identity explicitly; nothing is read from
ambient request state.
"""

from dataclasses import dataclass

from codetype.domain.history import NewHistoryEntry


@dataclass(frozen=True)
class Message:
    """Base class for everything the message bus dispatches."""


@dataclass(frozen=True)
class Command(Message):
    """Base class for all commands."""


@dataclass(frozen=True)
class Query(Message):
    """Base class for all queries."""


@dataclass(frozen=True)
class RecordPractice(Command):
    """Store one practice result for a user."""

    user_id: str
    entry: NewHistoryEntry


@dataclass(frozen=True)
class ClearHistory(Command):
    """Delete all practice history of a user."""

    user_id: str


@dataclass(frozen=True)
class DeleteAccount(Command):
    """Delete a user's identity at the provider, then purge their history."""

    user_id: str


@dataclass(frozen=True)
class ListHistory(Query):
    """Read one page of a user's history, most recent practice first.

    `limit` and `offset` are clamped by the store; None means the default.
    """

    user_id: str
    limit: int | None = None
    offset: int | None = None

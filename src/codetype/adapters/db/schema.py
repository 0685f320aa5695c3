"""Table definitions for CODETYPE.

Two tables:

- ``schema_migrations``: one row per applied migration (name + UTC time).
  Created idempotently by the migrator itself, before any migration runs.
- ``practice_history``: one row per practice session result. Created by the
  packaged migration scripts; the definition here mirrors them.

| Constraint on practice_history            | Purpose                     |
|-------------------------------------------|-----------------------------|
| PRIMARY KEY(id)                           | application-generated ULID  |
| CHECK(language IN (...))                  | supported languages only    |
| CHECK(wpm/errors/duration_seconds >= 0)   | non-negative counters       |
| CHECK(accuracy BETWEEN 0 AND 100)         | percentage                  |
| INDEX(user_id)                            | per-user filtering/deletion |
| INDEX(user_id, completed_at)              | per-user listing order      |
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    Index,
    Integer,
    String,
    Table,
    text,
)

from codetype.adapters.db.metadata import metadata
from codetype.adapters.db.sa_types import UTCDateTime

__all__ = ["practice_history", "schema_migrations"]

schema_migrations = Table(
    "schema_migrations",
    metadata,
    Column("id", String, primary_key=True, comment="Migration name."),
    Column(
        "applied_at",
        UTCDateTime(),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
    comment="Applied schema migrations, one row per migration name.",
)

practice_history = Table(
    "practice_history",
    metadata,
    Column("id", String, primary_key=True),
    Column("user_id", String, nullable=False, comment="Caller identity."),
    Column("language", String, nullable=False),
    Column("wpm", Integer, nullable=False),
    Column("accuracy", Integer, nullable=False),
    Column("errors", Integer, nullable=False),
    Column("duration_seconds", Integer, nullable=False),
    Column(
        "completed_at",
        UTCDateTime(),
        nullable=False,
        comment="When the session was completed, as reported by the client.",
    ),
    Column(
        "created_at",
        UTCDateTime(),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="Server-assigned insert time.",
    ),
    CheckConstraint(
        "language IN ('javascript', 'python', 'go')", name="supported_language"
    ),
    CheckConstraint("wpm >= 0", name="non_negative_wpm"),
    CheckConstraint("accuracy BETWEEN 0 AND 100", name="accuracy_percentage"),
    CheckConstraint("errors >= 0", name="non_negative_errors"),
    CheckConstraint("duration_seconds >= 0", name="non_negative_duration"),
    Index(None, "user_id"),
    Index(None, "user_id", "completed_at"),
    comment="Append-only practice session results.",
)

"""Migration descriptors and errors.

A migration is an immutable `(name, body)` pair. Migrations are applied in
lexicographic order of `name`, so names must sort in the intended apply
order (e.g. zero-padded prefixes: `0001_...`, `0002_...`). Each name is
applied at most once per database.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True, slots=True)
class Migration:
    """A named schema-change script."""

    name: str
    body: str

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("migration name must be non-empty")


@dataclass(frozen=True, slots=True)
class AppliedMigration:
    """A row of the migration tracking table."""

    id: str
    applied_at: datetime


@dataclass(frozen=True, slots=True)
class MigrationStatus:
    """Applied and pending migration names, both in apply order."""

    applied: tuple[str, ...]
    pending: tuple[str, ...]

    @property
    def up_to_date(self) -> bool:
        """True when nothing is pending."""
        return not self.pending


class MigrationError(Exception):
    """A migration could not be applied; fatal to startup.

    Attributes:
        name: Name of the offending migration, or None when the failure
            happened before any migration was selected.
    """

    def __init__(self, message: str, name: str | None = None) -> None:
        super().__init__(
            f"migration {name}: {message}" if name is not None else message
        )
        self.name = name

"""Forward-only schema migrator.

Applies an ordered set of named SQL scripts exactly once per database,
tracking applied names in ``schema_migrations``.

Algorithm
---------
1. Create the tracking table if it does not exist.
2. Read the names already recorded there.
3. For each migration not yet recorded, in lexicographic order of name,
   open a transaction, run the script's statements, insert its tracking
   row and commit.

A migration's effects and its tracking row commit together or not at all.
Any failure aborts that migration's transaction and raises
`MigrationError` naming it; nothing after it runs. There is no retry and no
downgrade: fix the environment and start again.

The guarantee is "exactly once per name", not "safe to rerun": a script
is never executed again once its name is recorded, so scripts need not be
idempotent themselves.

Script format
-------------
A script may hold several statements separated by ``;``. Statements are
split naively, so semicolons must not appear inside string literals or
comments. Chunks holding only ``--`` comments are skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from importlib.resources import files
from typing import TYPE_CHECKING

from sqlalchemy import insert, select
from sqlalchemy.exc import SQLAlchemyError

from codetype.adapters.db.dialects import DialectName
from codetype.adapters.db.schema import schema_migrations
from codetype.interfaces.migrations import (
    AppliedMigration,
    Migration,
    MigrationError,
    MigrationStatus,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

MIGRATIONS_PACKAGE = "codetype.adapters.db.migrations"  # pragma: no mutate
SCRIPT_SUFFIX = ".sql"  # pragma: no mutate


def split_statements(body: str) -> list[str]:
    """Split a script into its individual statements."""
    statements = []
    for chunk in body.split(";"):
        lines = [line for line in chunk.strip().splitlines() if line.strip()]
        if all(line.lstrip().startswith("--") for line in lines):
            continue
        statements.append(chunk.strip())
    return statements


def load_migrations(dialect: DialectName | str) -> list[Migration]:
    """Load the packaged migration scripts for `dialect`, sorted by name.

    Raises:
        UnsupportedDialect: If `dialect` is not a supported dialect name.
    """
    dialect = (
        dialect if isinstance(dialect, DialectName) else DialectName.from_string(dialect)
    )
    directory = files(MIGRATIONS_PACKAGE) / dialect.value
    migrations = [
        Migration(name=entry.name, body=entry.read_text(encoding="utf-8"))
        for entry in directory.iterdir()
        if entry.is_file() and entry.name.endswith(SCRIPT_SUFFIX)
    ]
    return sorted(migrations, key=lambda m: m.name)


def order_migrations(migrations: Iterable[Migration]) -> list[Migration]:
    """Return migrations in apply order (lexicographic by name).

    Raises:
        MigrationError: If two migrations share a name.
    """
    ordered = sorted(migrations, key=lambda m: m.name)
    for previous, current in zip(ordered, ordered[1:]):
        if previous.name == current.name:
            raise MigrationError("duplicate migration name", name=current.name)
    return ordered


class Migrator:
    """Applies migrations against one database.

    Single-threaded by construction: run it once, before the service starts
    handling requests. Concurrent runners against the same database are not
    supported.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #

    def apply(self, migrations: Iterable[Migration]) -> list[str]:
        """Apply every pending migration, in order.

        Args:
            migrations: The full migration set; already-applied names are skipped.

        Returns:
            Names of the migrations applied by this call (empty when up to date).

        Raises:
            MigrationError: On any failure; the failing migration is rolled back
                and no later migration is attempted.
        """
        ordered = order_migrations(migrations)
        self.ensure_tracking_table()
        applied = {record.id for record in self.applied()}

        pending = [m for m in ordered if m.name not in applied]
        if not pending:
            logger.info("Schema up to date (%d migrations applied)", len(applied))
            return []

        for migration in pending:
            self._apply_one(migration)
        logger.info("Applied %d migration(s)", len(pending))
        return [m.name for m in pending]

    def status(self, migrations: Iterable[Migration]) -> MigrationStatus:
        """Report which of `migrations` are applied and which are pending.

        Does not create the tracking table; a database without one reports
        everything as pending.
        """
        ordered = order_migrations(migrations)
        applied = {record.id for record in self.applied(missing_ok=True)}
        return MigrationStatus(
            applied=tuple(m.name for m in ordered if m.name in applied),
            pending=tuple(m.name for m in ordered if m.name not in applied),
        )

    def ensure_tracking_table(self) -> None:
        """Create the tracking table if it does not exist (idempotent)."""
        try:
            with self.engine.begin() as conn:
                schema_migrations.create(conn, checkfirst=True)
        except SQLAlchemyError as e:
            raise MigrationError(f"create {schema_migrations.name} table: {e}") from e

    def applied(self, missing_ok: bool = False) -> Sequence[AppliedMigration]:
        """Return the tracking rows, ordered by migration name.

        Args:
            missing_ok: Return an empty list instead of failing when the
                tracking table does not exist yet.
        """
        try:
            with self.engine.connect() as conn:
                if missing_ok and not self.engine.dialect.has_table(
                    conn, schema_migrations.name
                ):
                    return []
                rows = conn.execute(
                    select(schema_migrations).order_by(schema_migrations.c.id)
                ).all()
        except SQLAlchemyError as e:
            raise MigrationError(f"query applied migrations: {e}") from e
        return [AppliedMigration(id=row.id, applied_at=row.applied_at) for row in rows]

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _apply_one(self, migration: Migration) -> None:
        logger.info("Applying migration %s", migration.name)
        try:
            with self.engine.begin() as conn:
                for statement in split_statements(migration.body):
                    conn.exec_driver_sql(statement)
                conn.execute(insert(schema_migrations).values(id=migration.name))
        except SQLAlchemyError as e:
            logger.error("Migration %s failed; rolled back", migration.name)
            raise MigrationError(str(e), name=migration.name) from e
        logger.debug("Recorded migration %s", migration.name)

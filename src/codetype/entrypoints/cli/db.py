"""CODETYPE DB CLI: forward-only schema migrations.

Wraps the packaged migrator. There is no downgrade; destructive operations
are not offered.

Behavior
- Human-oriented notices go to **stderr**; status details to **stdout**.
- ``migrate`` prompts for confirmation unless ``--force`` is given.

Failure modes
- Missing/invalid ``CODETYPE_DB_URL`` or unreachable DB -> ``ClickException``
  with guidance.
- A failing migration -> ``ClickException`` naming it; it was rolled back and
  nothing after it ran.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click
import click_extra as clickx
from sqlalchemy.exc import ArgumentError, OperationalError

from codetype import config
from codetype.adapters.db.dialects import DialectName, UnsupportedDialect
from codetype.adapters.db.engine import make_engine, ping
from codetype.adapters.db.migrator import Migrator, load_migrations
from codetype.interfaces.migrations import MigrationError

from .helpers import error, sanitize_url, success, warn
from .helpers.app import INVALID_URL_FORMAT_MSG, MISSING_DB_URL_MSG

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

CANNOT_CONNECT_MSG = (
    f"{config.DB_URL_ENV} is set, but the database is not reachable.\n"
    "Please ensure the database is running and the URL is correct."
)

MIGRATE_SCHEMA_WARNING = (
    "This will apply all pending migrations to the database.\n"
    "Please ensure you have a backup before proceeding."
)

MIGRATE_INSTRUCTIONS = "Run 'codetype db migrate' to update the schema."


def _get_engine() -> Engine:
    try:
        url = config.get_db_url()
    except config.DatabaseUrlNotSetError as e:
        raise click.ClickException(MISSING_DB_URL_MSG) from e
    try:
        engine = make_engine(url)
        ping(engine)
    except OperationalError as e:
        raise click.ClickException(CANNOT_CONNECT_MSG) from e
    except ArgumentError as e:
        raise click.ClickException(INVALID_URL_FORMAT_MSG) from e
    return engine


def _get_migrations(engine: Engine):
    try:
        return load_migrations(DialectName.from_sqlalchemy(engine))
    except UnsupportedDialect as e:
        raise click.ClickException(str(e)) from e


@click.group(cls=clickx.ExtraGroup)
def db() -> None:
    """Database management commands."""


@db.command()
@click.option("--force", is_flag=True, help="Migrate without confirmation.")
def migrate(force: bool) -> None:
    """Apply all pending schema migrations."""
    engine = _get_engine()
    try:
        migrations = _get_migrations(engine)
        migrator = Migrator(engine)
        pending = migrator.status(migrations).pending
        if not pending:
            success("Schema up to date.")
            return
        if not force:
            warn(MIGRATE_SCHEMA_WARNING)
            click.secho(f"db: {click.style(sanitize_url(str(engine.url)), underline=True)}")
            click.echo(f"pending: {', '.join(pending)}")
            click.confirm("Are you sure you want to proceed?", abort=True)
        applied = migrator.apply(migrations)
    except MigrationError as e:
        raise click.ClickException(f"Migration failed: {e}") from e
    finally:
        engine.dispose()
    success(f"Applied {len(applied)} migration(s).")


@db.command()
def status() -> None:
    """Show database connection and schema status."""
    engine = _get_engine()
    try:
        migrations = _get_migrations(engine)
        migration_status = Migrator(engine).status(migrations)
    except MigrationError as e:
        error("Cannot read schema status")
        raise click.ClickException(str(e)) from e
    finally:
        engine.dispose()

    success("Database reachable")
    click.echo(f"Backend : {engine.dialect.name}")
    click.echo(f"URL     : {sanitize_url(str(engine.url))}")
    click.echo(f"Applied : {len(migration_status.applied)}")
    for name in migration_status.pending:
        click.echo(f"Pending : {name}")
    if migration_status.up_to_date:
        click.echo("Schema  : up to date")
    else:
        click.echo("Schema  : out of date")
        warn(MIGRATE_INSTRUCTIONS)

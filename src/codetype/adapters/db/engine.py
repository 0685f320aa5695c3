"""Database engine factory and helpers.

All Engines are created here so every connection is configured the same way:

- **PostgreSQL** (and other server backends): a bounded connection pool
  (10 open at most, 5 idle, one-hour lifetime) with pre-ping.
- **SQLite**: connection PRAGMAs (foreign keys, WAL, tuned durability) and
  the pysqlite transaction fix. The stdlib driver does not open a
  transaction before DDL, so it is switched to driver-level autocommit and
  an explicit ``BEGIN`` is emitted whenever SQLAlchemy starts a transaction.
  That makes ``CREATE TABLE`` inside a migration roll back like any other
  statement.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import URL, make_url

from codetype import config

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Connection, Engine

SQLITE_NAMES = {"sqlite", "sqlite+pysqlite"}


def is_sqlite(url: str | URL) -> bool:
    """Return True if the given SQLAlchemy URL or string corresponds to SQLite."""
    u = make_url(str(url))
    return u.get_backend_name() in SQLITE_NAMES


def make_engine(url: str | URL, *, echo: bool = False) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    Args:
        url: Database connection URL (str or :class:`URL`).
        echo: If True, log SQL statements.

    Returns:
        Engine: Configured SQLAlchemy Engine.
    """

    if is_sqlite(url):
        engine = create_engine(url, echo=echo)

        @event.listens_for(engine, "connect")
        def _sqlite_connect(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
            # hand transaction control to the "begin" listener below
            dbapi_conn.isolation_level = None
            cur = dbapi_conn.cursor()
            cur.execute("PRAGMA foreign_keys=ON;")
            cur.execute("PRAGMA journal_mode=WAL;")
            cur.execute("PRAGMA synchronous=NORMAL;")
            cur.execute("PRAGMA temp_store=MEMORY;")
            cur.close()

        @event.listens_for(engine, "begin")
        def _sqlite_begin(conn: Connection) -> None:
            conn.exec_driver_sql("BEGIN")

        return engine

    pool_options: dict[str, Any] = {
        "pool_size": config.POOL_SIZE,
        "max_overflow": config.POOL_MAX_OVERFLOW,
        "pool_recycle": config.POOL_RECYCLE_SECONDS,
        "pool_pre_ping": True,
    }
    return create_engine(url, echo=echo, **pool_options)


def ping(engine: Engine) -> None:
    """Run a trivial query to prove the database is reachable.

    Raises:
        sqlalchemy.exc.SQLAlchemyError: If the database cannot be reached.
    """
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))

"""Unit tests for the engine factory."""

import pytest
from sqlalchemy import text

from codetype import config
from codetype.adapters.db.engine import is_sqlite, make_engine, ping

# pylint: disable=magic-value-comparison


@pytest.mark.parametrize(
    "url, expected",
    [
        ("sqlite:///:memory:", True),
        ("sqlite+pysqlite:///tmp/x.db", True),
        ("postgresql+psycopg://u:p@localhost/db", False),
    ],
)
def test_is_sqlite(url, expected):
    assert is_sqlite(url) is expected


def test_sqlite_foreign_keys_enabled():
    engine = make_engine("sqlite+pysqlite:///:memory:")
    with engine.connect() as conn:
        assert conn.execute(text("PRAGMA foreign_keys")).scalar() == 1
    engine.dispose()


def test_sqlite_ddl_is_transactional():
    engine = make_engine("sqlite+pysqlite:///:memory:")
    with engine.connect() as conn:
        conn.exec_driver_sql("CREATE TABLE t (x INTEGER)")
        conn.rollback()
        tables = conn.exec_driver_sql(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='t'"
        ).all()
    assert tables == []
    engine.dispose()


def test_server_backends_use_bounded_pool():
    engine = make_engine("postgresql+psycopg://u:p@localhost:5432/codetype")
    assert engine.pool.size() == config.POOL_SIZE
    assert engine.pool._max_overflow == config.POOL_MAX_OVERFLOW  # pylint: disable=protected-access
    assert engine.pool._recycle == config.POOL_RECYCLE_SECONDS  # pylint: disable=protected-access
    engine.dispose()


def test_ping_succeeds_on_reachable_database():
    engine = make_engine("sqlite+pysqlite:///:memory:")
    ping(engine)
    engine.dispose()

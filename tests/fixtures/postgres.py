"""PostgreSQL related fixtures for CODETYPE.

PostgreSQL engines are backed by a temporary Postgres 17 instance launched with
Testcontainers and migrated with the packaged migrations.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import TYPE_CHECKING

import docker
import pytest
from sqlalchemy import text

from codetype.adapters.db.dialects import DialectName
from codetype.adapters.db.engine import make_engine
from codetype.adapters.db.migrator import Migrator, load_migrations

try:
    from testcontainers.postgres import (
        PostgresContainer,  # pyright: ignore[reportMissingTypeStubs]
    )
except Exception:  # pragma: no cover # pylint: disable=broad-except
    PostgresContainer = None  # pylint: disable=invalid-name

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# pylint: disable=redefined-outer-name

PG_FIXTURES = {"postgres_engine", "pg_url", "pg_url_base"}


def _docker_available() -> bool:
    try:
        docker.from_env().ping()
    except Exception:  # pylint: disable=broad-except
        return False
    return True


DOCKER_UP = _docker_available()


def pytest_collection_modifyitems(items):
    """Skip Postgres/Testcontainers tests if Docker is unavailable."""
    if DOCKER_UP:
        return
    skip = pytest.mark.skip(reason="Docker/Testcontainers backend not available")
    for item in items:
        if PG_FIXTURES & set(getattr(item, "fixturenames", ())):
            item.add_marker(skip)
        elif "postgres" in item.nodeid:
            item.add_marker(skip)


def _container() -> PostgresContainer:
    if PostgresContainer is None:
        pytest.skip("testcontainers not installed")
    return PostgresContainer(
        image="postgres:17",
        username="codetype",
        password="abc123",
        dbname="codetype",
    )


def _psycopg3(url: str) -> str:
    # testcontainers returns psycopg2 URLs by default
    return re.sub(r"\+psycopg2\b", "+psycopg", url)


@pytest.fixture
def pg_url_base() -> Iterator[str]:
    """Per-test Postgres 17 container URL, unmigrated."""
    with _container() as pg:
        yield _psycopg3(pg.get_connection_url())


@pytest.fixture(scope="session")
def pg_url() -> Iterator[str]:
    """Session Postgres 17 container URL, migrated once."""
    with _container() as pg:
        url = _psycopg3(pg.get_connection_url())
        eng = make_engine(url)
        try:
            Migrator(eng).apply(load_migrations(DialectName.POSTGRES))
        finally:
            eng.dispose()
        yield url


@pytest.fixture
def postgres_engine(pg_url: str) -> Iterator[Engine]:
    """Per-test Postgres engine bound to the session container.

    Truncates `practice_history` after the test and disposes the engine.
    """
    eng = make_engine(pg_url)
    try:
        yield eng
    finally:
        with eng.begin() as conn:
            conn.execute(text("TRUNCATE TABLE practice_history"))
        eng.dispose()

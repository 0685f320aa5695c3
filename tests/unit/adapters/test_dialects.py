"""Unit tests for database dialect handling."""

import pytest
from sqlalchemy import create_engine

from codetype.adapters.db.dialects import DialectName, UnsupportedDialect


@pytest.mark.parametrize(
    "input_str,expected",
    [
        ("postgresql", DialectName.POSTGRES),
        ("postgres", DialectName.POSTGRES),
        ("postgresql+psycopg", DialectName.POSTGRES),
        ("sqlite", DialectName.SQLITE),
        ("SQLite+pysqlite", DialectName.SQLITE),
    ],
)
def test_from_string_aliases(input_str, expected):
    assert DialectName.from_string(input_str) is expected


@pytest.mark.parametrize("bad", [None, "", "  ", "mysql", "duckdb"])
def test_from_string_rejects_unsupported(bad):
    with pytest.raises(UnsupportedDialect):
        DialectName.from_string(bad)


def test_from_sqlalchemy_reads_engine_dialect():
    engine = create_engine("sqlite:///:memory:")
    assert DialectName.from_sqlalchemy(engine) is DialectName.SQLITE


def test_from_sqlalchemy_rejects_non_engines():
    with pytest.raises(UnsupportedDialect, match="does not expose"):
        DialectName.from_sqlalchemy(object())  # type: ignore[arg-type]


def test_value_names_migration_directory():
    assert {d.value for d in DialectName} == {"postgresql", "sqlite"}

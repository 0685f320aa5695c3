"""Fixtures for end-to-end CLI tests.

Also marks everything under `tests/e2e/` as `e2e`. Commands run against a
fresh SQLite file per test with the flight recorder writing into the test's
temp dir.
"""

import logging
from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from codetype import config
from codetype.entrypoints.cli.main import codetype
from tests.helpers.markers import mark_items_under

# pylint: disable=redefined-outer-name, unused-argument

SUITE_ROOT = Path(__file__).parent.resolve()


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add default `e2e` marks to items in `tests/e2e/`."""
    mark_items_under(SUITE_ROOT, "e2e", items)


@click.command()
def log_demo():
    """Emit representative log messages for logging-option tests."""
    logger = logging.getLogger("codetype.demo")
    logger.debug("This is a debug-level test message.")
    logger.info("This is an info-level test message.")
    logger.warning("This is a warning-level test message.")
    third_party_logger = logging.getLogger("urllib3.connectionpool")
    third_party_logger.info("This is an info-level third-party test message.")
    third_party_logger.warning("This is a warning-level third-party test message.")


def _remove_command_everywhere(group, name: str) -> None:
    """Remove a command from a Click group and its internal sections."""
    group.commands.pop(name, None)
    if hasattr(group, "_default_section"):
        group._default_section.commands.pop(name, None)  # pylint: disable=protected-access
    for sec in getattr(group, "_sections", []):
        getattr(sec, "commands", {}).pop(name, None)


@pytest.fixture
def registered_log_demo():
    """Register the 'log-demo' command for the duration of a test."""
    codetype.add_command(log_demo, name="log-demo")
    try:
        yield
    finally:
        _remove_command_everywhere(codetype, "log-demo")


@pytest.fixture
def runner():
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def cli_env(monkeypatch, tmp_path, sqlite_url):
    """Environment for CLI runs: a fresh SQLite DB and a temp log path."""
    monkeypatch.setenv(config.DB_URL_ENV, sqlite_url)
    monkeypatch.delenv(config.IDENTITY_ADMIN_URL_ENV, raising=False)
    monkeypatch.setenv("CODETYPE_LOG_PATH", str(tmp_path / "codetype.log"))
    return sqlite_url


@pytest.fixture
def invoke(runner, cli_env):
    """Invoke `codetype` with the given arguments."""

    def _invoke(*args: str, input: str | None = None):  # pylint: disable=redefined-builtin
        return runner.invoke(codetype, list(args), input=input)

    return _invoke

"""CODETYPE CLI entry point.

Defines the top-level ``codetype`` command (via Click-Extra) and registers
the command groups:

- ``codetype db`` forward-only schema migrations (migrate/status).
- ``codetype history`` list, add and clear a user's practice history.
- ``codetype account`` delete a user's account.

Examples
    $ codetype --version
    $ codetype db migrate
    $ codetype -v account delete 6f1c2c1e-7e55-4b0b-9d55-2a1f0c1d9a10
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from codetype import __version__
from codetype.logging import (
    config_console_handler,
    config_flight_recorder,
    log_startup,
)

from .account import account as account_group
from .db import db as db_group
from .history import history as history_group
from .helpers.log_level_parser import parse_log_level

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """CODETYPE command-line interface.

    Operator tooling for the CODETYPE practice-typing service: apply schema
    migrations, inspect or clear a user's practice history, and delete
    accounts at the identity provider together with their stored history.
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help=(
        "Increase the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help=(
        "Decrease the default WARNING verbosity by one level "
        "for each additional repetition of the option."
    ),
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (enables extra developer diagnostics beyond -vvv).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to log file written by the flight recorder.",
    default=Path(user_log_dir("codetype", appauthor=False, ensure_exists=True))
    / "latest.log",
    envvar="CODETYPE_LOG_PATH",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=int,
    default=2000,
    hidden=True,
    envvar="CODETYPE_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Enable the in-memory flight recorder. Keeps the last N log records "
        "at DEBUG granularity (unaffected by -v/-q) and writes them to "
        "--log-path when a WARNING/ERROR occurs, or on exit if --force-flush "
        "is set."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help="Force-flush the flight recorder buffer to --log-path on program exit.",
    default=False,
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    help=(
        "Set MINIMUM LEVEL for specific LOGGERS (NAME=LEVEL), for both console "
        "and flight recorder. Repeatable (e.g. -L sqlalchemy=INFO "
        "-L urllib3=DEBUG) or via CODETYPE_LOGGER_LEVELS (comma/space list)."
    ),
    default=("sqlalchemy=WARNING", "urllib3=WARNING"),
    show_default=True,
    show_envvar=True,
)
@clickx.pass_context
def codetype(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """CODETYPE command-line interface."""

    # 0) compute effective verbosity
    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    handlers: list[Handler] = []

    # 1) console
    use_color = ctx.color is not False  # None or True => allow color
    handlers.append(
        config_console_handler(level=level, debug_mode=debug, color=use_color)
    )

    # 2) flight recorder
    if flight_recorder:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
            )
        )

    # 3) root logger captures everything; handlers filter
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    # 4) third-party levels
    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        logger_levels=logger_levels,
    )

    ctx.call_on_close(logging.shutdown)


codetype.add_command(db_group)
codetype.add_command(history_group)
codetype.add_command(account_group)

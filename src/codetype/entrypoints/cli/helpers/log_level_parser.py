"""Helpers for parsing logger-level CLI options.

Parses options of the form NAME=LEVEL (repeatable or comma/space-separated)
into a mapping of logger names to numeric logging levels.
"""

import logging
import re

import click

DEFAULT_LIB_LEVELS = {"sqlalchemy": logging.WARNING, "urllib3": logging.WARNING}


def _normalize_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Split the option value(s) on commas and whitespace, dropping empties."""
    items: list[str] = []
    if isinstance(value, (tuple, list)):
        for v in value:
            items.extend([s for s in re.split(r"[,\s]+", v) if s])
    else:  # plain string, e.g. from an env var
        items.extend([s for s in re.split(r"[,\s]+", value) if s])
    return items


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback that parses NAME=LEVEL pairs into a name->level dict.

    Starts from DEFAULT_LIB_LEVELS; later items override earlier ones.

    Raises:
        click.BadParameter: If an item is not NAME=LEVEL or LEVEL is unknown.
    """

    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _normalize_items(value):
        try:
            name, level_str = item.split("=", 1)
        except ValueError as e:
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}") from e
        if (lvl := getattr(logging, level_str.strip().upper(), None)) is None:
            raise click.BadParameter(f"Invalid log level: {level_str}")
        levels[name.strip()] = lvl
    return levels

"""CODETYPE history CLI: inspect and maintain one user's practice history.

``list`` and ``add`` print JSON (one object per line) on **stdout** in the
same shape the service returns to clients; notices go to **stderr**.
"""

import json

import click
import click_extra as clickx

from codetype.domain.errors import DomainError
from codetype.entrypoints.payloads import (
    parse_create_request,
    parse_limit,
    parse_offset,
    serialize_entry,
)
from codetype.interfaces.history_store import HistoryStoreError
from codetype.service_layer import commands

from .helpers import build_app, fail, success

LOAD_FAILED_MSG = "Failed to load history"
SAVE_FAILED_MSG = "Failed to save history entry"
CLEAR_FAILED_MSG = "Failed to clear history"


@click.group(cls=clickx.ExtraGroup)
def history() -> None:
    """Practice history commands."""


@history.command(name="list")
@click.argument("user_id")
@click.option("--limit", type=int, default=None, help="Page size (default 50, max 100).")
@click.option("--offset", type=int, default=None, help="Entries to skip (default 0).")
@click.pass_context
def list_(
    ctx: click.Context, user_id: str, limit: int | None, offset: int | None
) -> None:
    """List USER_ID's history, most recent practice first."""
    app = build_app()
    ctx.call_on_close(app.close)
    query = commands.ListHistory(
        user_id=user_id, limit=parse_limit(limit), offset=parse_offset(offset)
    )
    try:
        entries = app.message_bus.handle(query)
    except (DomainError, HistoryStoreError) as e:
        raise fail(e, LOAD_FAILED_MSG) from e
    for entry in entries:
        click.echo(json.dumps(serialize_entry(entry)))


@history.command()
@click.argument("user_id")
@click.argument("payload")
@click.pass_context
def add(ctx: click.Context, user_id: str, payload: str) -> None:
    """Record a practice result for USER_ID.

    PAYLOAD is a JSON object with language, wpm, accuracy, errors, time and
    date (RFC 3339); pass - to read it from stdin.
    """
    raw = click.get_text_stream("stdin").read() if payload == "-" else payload
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.ClickException("Invalid JSON payload (BAD_REQUEST)") from e

    app = build_app()
    ctx.call_on_close(app.close)
    try:
        entry = app.message_bus.handle(
            commands.RecordPractice(user_id=user_id, entry=parse_create_request(decoded))
        )
    except (DomainError, HistoryStoreError) as e:
        raise fail(e, SAVE_FAILED_MSG) from e
    click.echo(json.dumps(serialize_entry(entry)))


@history.command()
@click.argument("user_id")
@click.pass_context
def clear(ctx: click.Context, user_id: str) -> None:
    """Delete all of USER_ID's history (no-op when there is none)."""
    app = build_app()
    ctx.call_on_close(app.close)
    try:
        app.message_bus.handle(commands.ClearHistory(user_id=user_id))
    except (DomainError, HistoryStoreError) as e:
        raise fail(e, CLEAR_FAILED_MSG) from e
    success("History cleared")

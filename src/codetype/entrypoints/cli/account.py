"""CODETYPE account CLI: delete a user's account.

``account delete`` runs the same two-phase deletion the service runs:
identity at the provider first, then the user's practice history. Both
phases are idempotent, so rerunning it completes a deletion whose second
phase failed.
"""

import click
import click_extra as clickx

from codetype.domain.errors import DomainError
from codetype.service_layer import commands
from codetype.service_layer.errors import AccountDeletionError

from .helpers import build_app, fail, success, warn

DELETE_FAILED_MSG = "Failed to delete account"

DELETE_ACCOUNT_WARNING = (
    "This will permanently delete the user's identity and practice history."
)

IDENTITY_REMOVED_WARNING = (
    "The identity was deleted but the history was retained.\n"
    "Rerun this command once the database is available."
)


@click.group(cls=clickx.ExtraGroup)
def account() -> None:
    """Account commands."""


@account.command()
@click.argument("user_id")
@click.option("--force", is_flag=True, help="Delete without confirmation.")
@click.pass_context
def delete(ctx: click.Context, user_id: str, force: bool) -> None:
    """Delete USER_ID's identity and all of their practice history."""
    app = build_app(require_identity_admin=True)
    ctx.call_on_close(app.close)
    if not force:
        warn(DELETE_ACCOUNT_WARNING)
        click.echo(f"user: {user_id}")
        click.confirm("Are you sure you want to proceed?", abort=True)
    try:
        app.message_bus.handle(commands.DeleteAccount(user_id=user_id))
    except AccountDeletionError as e:
        if e.identity_removed:
            warn(IDENTITY_REMOVED_WARNING)
        raise fail(e, DELETE_FAILED_MSG) from e
    except DomainError as e:
        raise fail(e, DELETE_FAILED_MSG) from e
    success("Account deleted")

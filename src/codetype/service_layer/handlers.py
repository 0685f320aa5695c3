"""Service layer handlers.

Handlers receive their message plus injected dependencies (`uow`,
`identity_provider`) and return a result for queries and for commands that
produce one.
"""

import logging
from collections.abc import Callable

from codetype.domain.history import HistoryEntry
from codetype.domain.identity import require_identity, require_identity_format
from codetype.interfaces.history_store import HistoryStoreError
from codetype.interfaces.identity_provider import (
    IdentityProviderAdmin,
    IdentityProviderError,
)
from codetype.interfaces.unit_of_work import AbstractUnitOfWork

from . import commands
from .errors import AccountDeletionError, DeletionPhase

logger = logging.getLogger(__name__)

# ============================================================================
#                           Practice history
# ============================================================================


def record_practice(
    cmd: commands.RecordPractice, uow: AbstractUnitOfWork
) -> HistoryEntry:
    """Persist a practice result and return the stored entry."""

    user_id = require_identity(cmd.user_id)
    with uow:
        entry = uow.history.create(user_id, cmd.entry)
        uow.commit()
    logger.debug("Recorded practice %s for user %s", entry.id, user_id)
    return entry


def list_history(
    query: commands.ListHistory, uow: AbstractUnitOfWork
) -> list[HistoryEntry]:
    """Return one page of the user's history, most recent practice first."""

    user_id = require_identity(query.user_id)
    with uow:
        return uow.history.list_by_user(user_id, query.limit, query.offset)


def clear_history(cmd: commands.ClearHistory, uow: AbstractUnitOfWork) -> None:
    """Delete all history of the user (no-op when there is none)."""

    user_id = require_identity(cmd.user_id)
    with uow:
        uow.history.delete_by_user(user_id)
        uow.commit()
    logger.info("Cleared practice history of user %s", user_id)


# ============================================================================
#                           Account deletion
# ============================================================================


def delete_account(
    cmd: commands.DeleteAccount,
    uow: AbstractUnitOfWork,
    identity_provider: IdentityProviderAdmin,
) -> None:
    """Delete the user's identity at the provider, then purge their history.

    The two phases always run in this order and are not transactional
    together. A removed identity is what sanctions the purge, so a failed
    first phase leaves local data untouched. A failed second phase leaves
    the identity removed and the history retained; that is reported as an
    error and logged, not repaired. Both phases are idempotent, so running
    the deletion again finishes the job.

    Raises:
        NotAuthenticatedError: If the identity is missing.
        InvalidIdentityError: If the identity is not a provider identifier.
        AccountDeletionError: If either phase fails.
    """

    user_id = require_identity_format(cmd.user_id)

    # no database connection is held across the remote call
    try:
        identity_provider.delete_identity(user_id)
    except IdentityProviderError as e:
        logger.warning("Identity deletion failed for user %s: %s", user_id, e)
        raise AccountDeletionError(user_id, DeletionPhase.IDENTITY, e) from e
    logger.info("Deleted identity of user %s at provider", user_id)

    try:
        with uow:
            uow.history.delete_by_user(user_id)
            uow.commit()
    except HistoryStoreError as e:
        logger.error(
            "Identity of user %s was deleted but purging history failed; "
            "history retained until deletion is rerun: %s",
            user_id,
            e,
        )
        raise AccountDeletionError(user_id, DeletionPhase.HISTORY, e) from e
    logger.info("Purged practice history of deleted user %s", user_id)


HANDLERS: dict[type[commands.Message], Callable] = {
    commands.RecordPractice: record_practice,
    commands.ListHistory: list_history,
    commands.ClearHistory: clear_history,
    commands.DeleteAccount: delete_account,
}

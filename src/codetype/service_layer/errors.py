"""Service-layer errors."""

from enum import Enum


class DeletionPhase(str, Enum):
    """Steps of account deletion, in the order they run."""

    IDENTITY = "identity"
    HISTORY = "history"


class AccountDeletionError(Exception):
    """Account deletion failed in one of its phases.

    When `phase` is `DeletionPhase.HISTORY` the identity has already been
    removed at the provider while the user's history is still stored. That
    state is not reconciled automatically; rerunning the deletion for the
    same user completes it.

    Attributes:
        user_id: The identity being deleted.
        phase: The phase that failed.
    """

    def __init__(self, user_id: str, phase: DeletionPhase, cause: Exception) -> None:
        super().__init__(f"delete account {user_id}: {phase.value} phase: {cause}")
        self.user_id = user_id
        self.phase = phase

    @property
    def identity_removed(self) -> bool:
        """True when the failure left the identity deleted but history retained."""
        return self.phase is DeletionPhase.HISTORY

"""Identity provider admin port.

The identity provider is the external system of record for user identities.
Only its administrative deletion endpoint is used.

Contract:
- `delete_identity(user_id)` returns normally when the identity was deleted
  or was already absent, so repeated calls are idempotent.
- Any other outcome raises `IdentityProviderError`. Implementations do not
  retry; retry policy belongs to the caller.
"""

import abc

# pylint: disable=too-few-public-methods


class IdentityProviderError(Exception):
    """The identity provider could not confirm the deletion."""


class IdentityProviderTimeout(IdentityProviderError):
    """The call did not complete within the configured timeout."""


class IdentityProviderUnavailable(IdentityProviderError):
    """Transport failure or unexpected HTTP status from the identity provider.

    Attributes:
        status_code: HTTP status returned by the provider, or None for
            transport failures.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class IdentityProviderAdmin(abc.ABC):
    """Administrative operations on the identity provider."""

    @abc.abstractmethod
    def delete_identity(self, user_id: str) -> None:
        """Delete `user_id` at the provider; an already-absent identity is success."""

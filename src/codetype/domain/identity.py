"""Caller identity rules.

A caller identity is an opaque string validated upstream. The core only
re-checks that it is present and, before account deletion, that it looks
like an identity-provider identifier (a UUID).
"""

import uuid

from codetype.domain.errors import InvalidIdentityError, NotAuthenticatedError


def require_identity(user_id: str | None) -> str:
    """Return `user_id` if it is a non-blank string.

    Raises:
        NotAuthenticatedError: If the identity is missing or blank.
    """
    if user_id is None or not user_id.strip():
        raise NotAuthenticatedError
    return user_id


def require_identity_format(user_id: str | None) -> str:
    """Return `user_id` if it is present and parses as a UUID.

    Raises:
        NotAuthenticatedError: If the identity is missing or blank.
        InvalidIdentityError: If the identity is not a UUID.
    """
    user_id = require_identity(user_id)
    try:
        uuid.UUID(user_id)
    except ValueError as e:
        raise InvalidIdentityError(user_id) from e
    return user_id

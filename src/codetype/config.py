"""Configuration utilities for CODETYPE.

Settings are read from environment variables on demand. Nothing here caches
values, so tests can patch the environment freely.
"""

import os
from dataclasses import dataclass

DB_URL_ENV = "CODETYPE_DB_URL"  # pragma: no mutate
IDENTITY_ADMIN_URL_ENV = "CODETYPE_IDENTITY_ADMIN_URL"  # pragma: no mutate
IDENTITY_TIMEOUT_ENV = "CODETYPE_IDENTITY_TIMEOUT_SECONDS"  # pragma: no mutate

DEFAULT_IDENTITY_TIMEOUT_SECONDS = 10.0

# Connection pool bounds: 10 open connections at most, 5 kept idle,
# recycled after one hour.
POOL_SIZE = 5
POOL_MAX_OVERFLOW = 5
POOL_RECYCLE_SECONDS = 3600


class ConfigurationError(Exception):
    """Base class for configuration errors."""


class DatabaseUrlNotSetError(ConfigurationError):
    """Raised when the CODETYPE_DB_URL environment variable is not set."""


class IdentityAdminUrlNotSetError(ConfigurationError):
    """Raised when the CODETYPE_IDENTITY_ADMIN_URL environment variable is not set."""


class InvalidSettingError(ConfigurationError):
    """Raised when an environment variable holds an unusable value."""

    def __init__(self, name: str, value: str, reason: str) -> None:
        super().__init__(f"{name}={value!r} is invalid: {reason}")
        self.name = name
        self.value = value
        self.reason = reason


@dataclass(frozen=True, slots=True)
class Settings:
    """Process settings needed to build the application.

    `identity_admin_url` may be None for processes that never delete
    accounts (e.g. history maintenance commands).
    """

    db_url: str
    identity_admin_url: str | None = None
    identity_timeout_seconds: float = DEFAULT_IDENTITY_TIMEOUT_SECONDS


def get_db_url() -> str:
    """Get the database URL from the environment.

    Returns:
        The value of the `CODETYPE_DB_URL` environment variable.

    Raises:
        DatabaseUrlNotSetError: If `CODETYPE_DB_URL` is not set.
    """
    if not (url := os.environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError
    return url


def get_identity_admin_url() -> str:
    """Get the identity provider admin base URL from the environment.

    Raises:
        IdentityAdminUrlNotSetError: If `CODETYPE_IDENTITY_ADMIN_URL` is not set.
    """
    if not (url := os.environ.get(IDENTITY_ADMIN_URL_ENV)):
        raise IdentityAdminUrlNotSetError
    return url


def get_identity_timeout() -> float:
    """Get the admin client timeout in seconds (defaults to 10).

    Raises:
        InvalidSettingError: If the value is not a positive number.
    """
    raw = os.environ.get(IDENTITY_TIMEOUT_ENV)
    if not raw:
        return DEFAULT_IDENTITY_TIMEOUT_SECONDS
    try:
        value = float(raw)
    except ValueError as e:
        raise InvalidSettingError(IDENTITY_TIMEOUT_ENV, raw, "not a number") from e
    if value <= 0:
        raise InvalidSettingError(IDENTITY_TIMEOUT_ENV, raw, "must be positive")
    return value


def load_settings(require_identity_admin: bool = True) -> Settings:
    """Read all settings from the environment.

    Args:
        require_identity_admin: Fail when the identity provider admin URL is
            not set. Pass False for processes that never delete accounts.

    Raises:
        ConfigurationError: If a required variable is missing or invalid.
    """
    identity_admin_url = (
        get_identity_admin_url()
        if require_identity_admin
        else os.environ.get(IDENTITY_ADMIN_URL_ENV) or None
    )
    return Settings(
        db_url=get_db_url(),
        identity_admin_url=identity_admin_url,
        identity_timeout_seconds=get_identity_timeout(),
    )

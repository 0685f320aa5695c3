"""Domain-layer error definitions."""


class DomainError(Exception):
    """Base class for domain-layer errors."""


class ValidationError(DomainError):
    """Raised when caller input is malformed or out of range.

    Surfaced to the caller as a client error; never retried.

    Attributes:
        field: Name of the offending input field, if any.
        reason: Human-readable reason, safe to show to the caller.
    """

    def __init__(self, reason: str, field: str | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.field = field


class InvalidIdentityError(ValidationError):
    """Raised when a caller identity does not have the expected format."""

    def __init__(self, user_id: str) -> None:
        super().__init__("Invalid user ID format", field="user_id")
        self.user_id = user_id


class NotAuthenticatedError(DomainError):
    """Raised when an operation needs a caller identity and none was supplied."""

    def __init__(self, reason: str = "User not authenticated") -> None:
        super().__init__(reason)
        self.reason = reason

"""Request/response translation at the service boundary.

Inbound:
- `parse_create_request` turns a decoded JSON object into a validated
  `NewHistoryEntry`.
- `parse_limit` / `parse_offset` turn raw query parameters into page
  bounds. Invalid values fall back to the defaults; they never raise.

Outbound:
- `serialize_entry` renders a `HistoryEntry` in the public shape, where
  ``date`` and ``completed_at`` are the same instant and ``time`` is the
  duration in seconds.
- `describe_error` maps any exception to a status, a stable error code and
  a caller-safe message.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from codetype.domain.errors import (
    InvalidIdentityError,
    NotAuthenticatedError,
    ValidationError,
)
from codetype.domain.history import (
    DEFAULT_LIMIT,
    HistoryEntry,
    NewHistoryEntry,
    clamp_limit,
    clamp_offset,
)

RFC3339_UTC = "%Y-%m-%dT%H:%M:%SZ"  # pragma: no mutate
RFC3339_PATTERN = re.compile(
    r"(\d{4}-\d{2}-\d{2})[Tt](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})",
    re.ASCII,
)

# query integers outside the signed 64-bit range are treated as unparseable
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

GENERIC_SERVER_MESSAGE = "Internal server error"


class MalformedRequestError(ValidationError):
    """The request could not be read at all (wrong shape, unparseable date)."""


# ============================================================================
#                                 Inbound
# ============================================================================


def parse_timestamp(raw: object) -> datetime:
    """Parse an RFC 3339 timestamp; an explicit UTC offset is required.

    Only the RFC 3339 profile of ISO 8601 is accepted: a full date, ``T``,
    a full time with optional fractional seconds, and ``Z`` or ``±hh:mm``.
    Fractional seconds beyond microseconds are truncated.

    Raises:
        ValidationError: If the value is missing or blank.
        MalformedRequestError: If the value is not an RFC 3339 timestamp.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("date is required", field="date")
    match = RFC3339_PATTERN.fullmatch(raw.strip())
    if match is None:
        raise MalformedRequestError(
            "Invalid date format, expected RFC3339", field="date"
        )
    date, clock, fraction, offset = match.groups()
    fraction = (fraction or "")[:6].ljust(6, "0")
    offset = "+00:00" if offset.upper() == "Z" else offset
    try:
        return datetime.fromisoformat(f"{date}T{clock}.{fraction}{offset}")
    except ValueError as e:
        raise MalformedRequestError(
            "Invalid date format, expected RFC3339", field="date"
        ) from e


def parse_create_request(payload: object) -> NewHistoryEntry:
    """Validate a create-history request body.

    Expected shape::

        {"language": str, "wpm": int, "accuracy": int, "errors": int,
         "time": int, "date": "<RFC 3339 timestamp>"}

    Raises:
        MalformedRequestError: If the payload is not an object or the date
            cannot be parsed.
        ValidationError: If a field is missing or out of range.
    """
    if not isinstance(payload, Mapping):
        raise MalformedRequestError("Invalid JSON payload")

    return NewHistoryEntry(
        language=payload.get("language") or "",
        wpm=payload.get("wpm", 0),
        accuracy=payload.get("accuracy", 0),
        errors=payload.get("errors", 0),
        duration_seconds=payload.get("time", 0),
        completed_at=parse_timestamp(payload.get("date")),
    )


def _parse_int(raw: object) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        value = raw
    else:
        try:
            value = int(str(raw).strip())
        except ValueError:
            return None
    return value if INT64_MIN <= value <= INT64_MAX else None


def parse_limit(raw: object = None) -> int:
    """Page size from a raw query value: default 50, at most 100."""
    value = _parse_int(raw)
    return clamp_limit(value) if value is not None else DEFAULT_LIMIT


def parse_offset(raw: object = None) -> int:
    """Page offset from a raw query value: default and minimum 0."""
    return clamp_offset(_parse_int(raw))


# ============================================================================
#                                 Outbound
# ============================================================================


def format_timestamp(value: datetime) -> str:
    """Render a datetime as an RFC 3339 UTC string (second precision)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(RFC3339_UTC)


def serialize_entry(entry: HistoryEntry) -> dict[str, Any]:
    """Render a history entry in the public response shape."""
    completed_at = format_timestamp(entry.completed_at)
    return {
        "id": entry.id,
        "language": entry.language.value,
        "wpm": entry.wpm,
        "accuracy": entry.accuracy,
        "errors": entry.errors,
        "time": entry.duration_seconds,
        "date": completed_at,
        "created_at": format_timestamp(entry.created_at),
        "completed_at": completed_at,
    }


@dataclass(frozen=True, slots=True)
class ErrorResponse:
    """A caller-facing error: status, reason phrase, message and stable code."""

    status: int
    error: str
    message: str
    code: str

    def as_dict(self) -> dict[str, Any]:
        """The JSON body, without the status."""
        body = asdict(self)
        del body["status"]
        return body


ERROR_CODES = {
    HTTPStatus.BAD_REQUEST: "BAD_REQUEST",
    HTTPStatus.UNAUTHORIZED: "UNAUTHORIZED",
    HTTPStatus.FORBIDDEN: "FORBIDDEN",
    HTTPStatus.NOT_FOUND: "NOT_FOUND",
    HTTPStatus.UNPROCESSABLE_ENTITY: "VALIDATION_ERROR",
}


def _response(status: HTTPStatus, message: str) -> ErrorResponse:
    code = "SERVER_ERROR" if status >= 500 else ERROR_CODES.get(status, "UNKNOWN_ERROR")
    return ErrorResponse(
        status=int(status), error=status.phrase, message=message, code=code
    )


def describe_error(
    exc: BaseException, server_message: str = GENERIC_SERVER_MESSAGE
) -> ErrorResponse:
    """Map an exception to the response a caller should see.

    Client errors carry their own reason. Everything else is a server error
    reported with `server_message` only, so internal details never leak; in
    particular a failed account deletion does not reveal whether the
    identity was already removed.

    Args:
        exc: The exception raised while serving the request.
        server_message: Message for server errors, naming the failed
            operation (e.g. "Failed to delete account").
    """
    if isinstance(exc, NotAuthenticatedError):
        return _response(HTTPStatus.UNAUTHORIZED, exc.reason)
    if isinstance(exc, (InvalidIdentityError, MalformedRequestError)):
        return _response(HTTPStatus.BAD_REQUEST, exc.reason)
    if isinstance(exc, ValidationError):
        return _response(HTTPStatus.UNPROCESSABLE_ENTITY, exc.reason)
    return _response(HTTPStatus.INTERNAL_SERVER_ERROR, server_message)

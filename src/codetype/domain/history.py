"""Practice history entries.

A history entry is one persisted practice-session result. Entries are
append-only: they are created one at a time and only ever destroyed in bulk,
per user. There is no update-in-place.

Validation rules (enforced by `NewHistoryEntry`):

| Field              | Rule                                   |
|--------------------|----------------------------------------|
| `language`         | one of `Language`                      |
| `wpm`              | integer in [0, MAX_COUNT]              |
| `accuracy`         | integer in [0, 100]                    |
| `errors`           | integer in [0, MAX_COUNT]              |
| `duration_seconds` | integer in [0, MAX_COUNT]              |
| `completed_at`     | `datetime` (naive values read as UTC)  |
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum

from codetype.domain.errors import ValidationError

DEFAULT_LIMIT = 50
MAX_LIMIT = 100

MIN_ACCURACY = 0
MAX_ACCURACY = 100

# storage bounds: counters are 32-bit INTEGER columns, offsets 64-bit
MAX_COUNT = 2**31 - 1
MAX_OFFSET = 2**63 - 1


class Language(str, Enum):
    """Languages a practice session can be run in."""

    JAVASCRIPT = "javascript"
    PYTHON = "python"
    GO = "go"

    @classmethod
    def parse(cls, value: str | Language) -> Language:
        """Convert a raw string into a Language.

        Raises:
            ValidationError: If the value is empty or not a supported language.
        """
        if isinstance(value, cls):
            return value
        if not value:
            raise ValidationError("language is required", field="language")
        try:
            return cls(value)
        except ValueError as e:
            raise ValidationError("unsupported language", field="language") from e


def _require_int(value: object, field: str) -> int:
    # bool is an int subclass; a JSON `true` is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", field=field)
    if value > MAX_COUNT:
        raise ValidationError(f"{field} must be at most {MAX_COUNT}", field=field)
    return value


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True, slots=True)
class NewHistoryEntry:
    """A validated practice result waiting to be stored.

    Raises:
        ValidationError: On construction, if any field breaks the rules above.
    """

    language: Language
    wpm: int
    accuracy: int
    errors: int
    duration_seconds: int
    completed_at: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "language", Language.parse(self.language))

        if _require_int(self.wpm, "wpm") < 0:
            raise ValidationError("wpm must be non-negative", field="wpm")
        accuracy = _require_int(self.accuracy, "accuracy")
        if not MIN_ACCURACY <= accuracy <= MAX_ACCURACY:
            raise ValidationError(
                "accuracy must be between 0 and 100", field="accuracy"
            )
        if _require_int(self.errors, "errors") < 0:
            raise ValidationError("errors must be non-negative", field="errors")
        if _require_int(self.duration_seconds, "time") < 0:
            raise ValidationError("time must be non-negative", field="time")

        if not isinstance(self.completed_at, datetime):
            raise ValidationError("date is required", field="date")
        object.__setattr__(self, "completed_at", _as_utc(self.completed_at))


@dataclass(frozen=True, slots=True)
class HistoryEntry:  # pylint: disable=too-many-instance-attributes
    """A persisted practice result.

    `id` and `created_at` are assigned by the store at insert time;
    `completed_at` is whatever instant the caller reported.
    """

    id: str
    user_id: str
    language: Language
    wpm: int
    accuracy: int
    errors: int
    duration_seconds: int
    completed_at: datetime
    created_at: datetime


def clamp_limit(limit: int | None) -> int:
    """Clamp a page size to [1, MAX_LIMIT], using DEFAULT_LIMIT for missing or non-positive values."""
    if limit is None or limit <= 0:
        return DEFAULT_LIMIT
    return min(limit, MAX_LIMIT)


def clamp_offset(offset: int | None) -> int:
    """Clamp a page offset to [0, MAX_OFFSET]; missing or out-of-range means 0."""
    if offset is None or not 0 <= offset <= MAX_OFFSET:
        return 0
    return offset

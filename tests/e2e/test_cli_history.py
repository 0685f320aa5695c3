"""End-to-end tests for `codetype history`."""

import json

import pytest

from tests.helpers.cli import assert_in_output, json_lines

# pylint: disable=redefined-outer-name, magic-value-comparison

USER = "6f1c2c1e-7e55-4b0b-9d55-2a1f0c1d9a10"


def _payload(date: str, **overrides) -> str:
    body = {"language": "python", "wpm": 70, "accuracy": 96, "errors": 2, "time": 60, "date": date}
    body.update(overrides)
    return json.dumps(body)


@pytest.fixture
def seeded(invoke):
    """Three entries for USER completed at T1 < T2 < T3."""
    for date in ("2024-01-01T10:00:00Z", "2024-01-01T12:00:00Z", "2024-01-01T11:00:00Z"):
        assert invoke("history", "add", USER, _payload(date)).exit_code == 0


def test_add_prints_stored_entry(invoke):
    result = invoke("history", "add", USER, _payload("2024-03-01T09:30:00+02:00"))

    assert result.exit_code == 0
    (entry,) = json_lines(result.output)
    assert entry["language"] == "python"
    assert entry["date"] == entry["completed_at"] == "2024-03-01T07:30:00Z"
    assert len(entry["id"]) == 26


def test_add_reads_payload_from_stdin(invoke):
    result = invoke("history", "add", USER, "-", input=_payload("2024-03-01T09:30:00Z"))
    assert result.exit_code == 0
    assert len(json_lines(result.output)) == 1


@pytest.mark.parametrize(
    "payload, message",
    [
        ("not json", r"Invalid JSON payload \(BAD_REQUEST\)"),
        ("[1, 2]", r"Invalid JSON payload \(BAD_REQUEST\)"),
        (_payload("2024-03-01T09:30:00Z", accuracy=101), r"accuracy must be between 0 and 100 \(VALIDATION_ERROR\)"),
        (_payload("2024-03-01T09:30:00Z", wpm=-1), r"wpm must be non-negative \(VALIDATION_ERROR\)"),
        (_payload("2024-03-01T09:30:00Z", wpm=2**70), r"wpm must be at most 2147483647 \(VALIDATION_ERROR\)"),
        (_payload("2024-03-01T09:30:00Z", language="ruby"), r"unsupported language \(VALIDATION_ERROR\)"),
        (_payload("yesterday"), r"Invalid date format, expected RFC3339 \(BAD_REQUEST\)"),
        (_payload("2024-01-01T00:00Z"), r"Invalid date format, expected RFC3339 \(BAD_REQUEST\)"),
    ],
)
def test_add_rejects_invalid_payloads(invoke, payload, message):
    result = invoke("history", "add", USER, payload)
    assert result.exit_code != 0
    assert_in_output(message, result.output)
    assert json_lines(invoke("history", "list", USER).output) == []


def test_list_most_recent_first(invoke, seeded):
    result = invoke("history", "list", USER)

    assert result.exit_code == 0
    dates = [e["date"] for e in json_lines(result.output)]
    assert dates == ["2024-01-01T12:00:00Z", "2024-01-01T11:00:00Z", "2024-01-01T10:00:00Z"]


def test_list_pages(invoke, seeded):
    result = invoke("history", "list", USER, "--limit", "1", "--offset", "1")
    assert [e["date"] for e in json_lines(result.output)] == ["2024-01-01T11:00:00Z"]


def test_list_offset_beyond_storage_range_starts_at_first_page(invoke, seeded):
    result = invoke("history", "list", USER, "--offset", "99999999999999999999999")

    assert result.exit_code == 0
    assert len(json_lines(result.output)) == 3


def test_list_non_positive_limit_uses_default(invoke, seeded):
    result = invoke("history", "list", USER, "--limit", "0")
    assert len(json_lines(result.output)) == 3


def test_list_unknown_user_prints_nothing(invoke):
    result = invoke("history", "list", "nobody")
    assert result.exit_code == 0
    assert json_lines(result.output) == []


def test_clear_is_idempotent(invoke, seeded):
    assert invoke("history", "clear", USER).exit_code == 0
    second = invoke("history", "clear", USER)

    assert second.exit_code == 0
    assert_in_output("History cleared", second.output)
    assert json_lines(invoke("history", "list", USER).output) == []


def test_history_runs_without_identity_admin_url(invoke):
    result = invoke("history", "list", USER)
    assert result.exit_code == 0

"""Contract tests for the HistoryStore port.

Backend-agnostic behavior:
- create returns the persisted row (id and created_at assigned)
- list ordering (completed_at descending) and user scoping
- limit/offset clamping, including offsets beyond the storage integer range
- delete_by_user scoping and no-op on empty
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

import pytest

from codetype.adapters.history_store import InMemoryHistoryStore, SqlAlchemyHistoryStore
from codetype.adapters.id_generators import ULIDGenerator
from codetype.domain.history import DEFAULT_LIMIT, MAX_LIMIT, Language
from codetype.interfaces.history_store import HistoryStore

from tests.fixtures.history import T0

# pylint: disable=redefined-outer-name, magic-value-comparison


@pytest.fixture(params=["memory", "sqlite", "postgres"])
def store(request: pytest.FixtureRequest) -> Iterable[HistoryStore]:
    """Return a fresh HistoryStore for the requested backend.

    SQL backends run inside one transaction per test.
    """
    match request.param:
        case "memory":
            yield InMemoryHistoryStore(ULIDGenerator())
        case "sqlite" | "postgres":
            fixture = (
                "sqlite_engine_memory" if request.param == "sqlite" else "postgres_engine"
            )
            engine = request.getfixturevalue(fixture)
            with engine.begin() as connection:
                yield SqlAlchemyHistoryStore(connection, ULIDGenerator())
        case _:
            raise ValueError(f"unknown store type: {request.param}")


def _fill(store, user_id, make_new_entry, n):
    return [
        store.create(user_id, make_new_entry(completed_at=T0 + timedelta(minutes=i)))
        for i in range(n)
    ]


# ===========================================================================
#                                 Create
# ===========================================================================


def test_create_returns_persisted_entry(store: HistoryStore, user_id, make_new_entry):
    before = datetime.now(timezone.utc) - timedelta(minutes=5)

    entry = store.create(
        user_id,
        make_new_entry(language="javascript", wpm=88, accuracy=99, errors=1, duration_seconds=30),
    )

    assert entry.id
    assert entry.user_id == user_id
    assert entry.language is Language.JAVASCRIPT
    assert (entry.wpm, entry.accuracy, entry.errors, entry.duration_seconds) == (88, 99, 1, 30)
    assert entry.completed_at == T0
    assert entry.completed_at.tzinfo is not None
    assert entry.created_at >= before


def test_created_entry_is_listed(store: HistoryStore, user_id, make_new_entry):
    entry = store.create(user_id, make_new_entry())
    assert store.list_by_user(user_id) == [entry]


def test_create_assigns_distinct_ids(store: HistoryStore, user_id, make_new_entry):
    entries = _fill(store, user_id, make_new_entry, 3)
    assert len({e.id for e in entries}) == 3


# ===========================================================================
#                                  List
# ===========================================================================


def test_list_most_recent_first(store: HistoryStore, user_id, make_new_entry):
    t1, t2, t3 = T0, T0 + timedelta(hours=1), T0 + timedelta(hours=2)
    for completed_at in (t2, t1, t3):
        store.create(user_id, make_new_entry(completed_at=completed_at))

    listed = store.list_by_user(user_id)

    assert [e.completed_at for e in listed] == [t3, t2, t1]


def test_list_is_scoped_to_user(store: HistoryStore, user_id, make_new_entry):
    _fill(store, user_id, make_new_entry, 2)
    _fill(store, "another-user", make_new_entry, 3)

    assert {e.user_id for e in store.list_by_user(user_id)} == {user_id}
    assert len(store.list_by_user("another-user")) == 3


def test_list_unknown_user_is_empty(store: HistoryStore):
    assert store.list_by_user("nobody") == []


def test_limit_and_offset_page_through(store: HistoryStore, user_id, make_new_entry):
    entries = _fill(store, user_id, make_new_entry, 5)
    newest_first = list(reversed(entries))

    assert store.list_by_user(user_id, limit=2) == newest_first[:2]
    assert store.list_by_user(user_id, limit=2, offset=2) == newest_first[2:4]
    assert store.list_by_user(user_id, limit=2, offset=10) == []


@pytest.mark.parametrize("limit", [None, 0, -5])
def test_missing_or_non_positive_limit_uses_default(
    store: HistoryStore, user_id, make_new_entry, limit
):
    _fill(store, user_id, make_new_entry, DEFAULT_LIMIT + 5)
    assert len(store.list_by_user(user_id, limit=limit)) == DEFAULT_LIMIT


def test_limit_is_capped(store: HistoryStore, user_id, make_new_entry):
    _fill(store, user_id, make_new_entry, MAX_LIMIT + 5)
    assert len(store.list_by_user(user_id, limit=500)) == MAX_LIMIT


def test_negative_offset_is_zero(store: HistoryStore, user_id, make_new_entry):
    _fill(store, user_id, make_new_entry, 3)
    assert store.list_by_user(user_id, offset=-3) == store.list_by_user(user_id)


def test_offset_beyond_storage_range_is_zero(store: HistoryStore, user_id, make_new_entry):
    _fill(store, user_id, make_new_entry, 3)
    assert store.list_by_user(user_id, offset=2**70) == store.list_by_user(user_id)


# ===========================================================================
#                                 Delete
# ===========================================================================


def test_delete_removes_all_of_the_users_entries(store: HistoryStore, user_id, make_new_entry):
    _fill(store, user_id, make_new_entry, 3)
    _fill(store, "another-user", make_new_entry, 2)

    store.delete_by_user(user_id)

    assert store.list_by_user(user_id) == []
    assert len(store.list_by_user("another-user")) == 2


def test_delete_without_entries_is_noop(store: HistoryStore, user_id):
    store.delete_by_user(user_id)
    store.delete_by_user(user_id)
    assert store.list_by_user(user_id) == []

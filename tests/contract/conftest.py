"""Default marks for tests under `tests/contract/`."""

from pathlib import Path

import pytest

from tests.helpers.markers import mark_items_under

# pylint: disable=unused-argument

SUITE_ROOT = Path(__file__).parent.resolve()


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add default `contract` marks to items in `tests/contract/`."""
    mark_items_under(SUITE_ROOT, "contract", items)

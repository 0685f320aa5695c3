"""Port for generating history entry identifiers."""

import abc

# pylint: disable=too-few-public-methods


class IdGenerator(abc.ABC):
    """Produces unique string identifiers for new history entries."""

    @abc.abstractmethod
    def new_id(self) -> str:
        """Return a fresh identifier, never returned before by this generator."""

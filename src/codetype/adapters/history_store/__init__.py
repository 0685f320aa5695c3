"""HistoryStore adapters."""

from .memory import InMemoryHistoryStore
from .sqlalchemy_store import SqlAlchemyHistoryStore

__all__ = ["InMemoryHistoryStore", "SqlAlchemyHistoryStore"]

"""CODETYPE

Data-lifecycle core of a practice-typing service. It applies versioned schema
changes at process start, persists and serves per-user practice history, and
orchestrates deletion of a user's account across the identity provider and
the local history store.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"

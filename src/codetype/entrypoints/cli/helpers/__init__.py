"""CLI helpers for CODETYPE.

URL sanitization for safe display, message emitters that write to stderr
with emoji->ASCII fallbacks, logger-level option parsing, and application
assembly with CLI-friendly errors.
"""

from .app import build_app, fail
from .db_url import sanitize_url
from .messages import error, success, warn

__all__ = ["build_app", "fail", "sanitize_url", "warn", "success", "error"]

"""HTTP client for the identity provider's admin API.

Only the deletion endpoint is implemented::

    DELETE {base_url}/identities/{id}

| Response            | Outcome                                      |
|---------------------|----------------------------------------------|
| 204 No Content      | success                                      |
| 404 Not Found       | success (already deleted; keeps it idempotent) |
| any other status    | `IdentityProviderUnavailable` with the status |
| timeout             | `IdentityProviderTimeout`                    |
| transport failure   | `IdentityProviderUnavailable`                |

Each call is bounded by a fixed timeout. `requests` applies it to the
connect and to every socket read separately, not to the exchange as a
whole: a provider that keeps trickling bytes can stretch one call past it.
DELETE answers carry no meaningful body, so in practice the bound is the
connect plus the wait for the status line. No retries are made here.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from urllib.parse import quote

import requests

from codetype.config import DEFAULT_IDENTITY_TIMEOUT_SECONDS
from codetype.interfaces.identity_provider import (
    IdentityProviderAdmin,
    IdentityProviderTimeout,
    IdentityProviderUnavailable,
)

logger = logging.getLogger(__name__)

SUCCESS_STATUSES = frozenset({HTTPStatus.NO_CONTENT, HTTPStatus.NOT_FOUND})


class HttpIdentityProviderAdmin(IdentityProviderAdmin):
    """Identity provider admin API over HTTP.

    Args:
        base_url: Admin endpoint root, e.g. ``http://kratos:4434``.
        timeout: Connect and per-read timeout in seconds.
        session: Optional `requests.Session` (connection reuse, testing).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_IDENTITY_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, user_id: str) -> str:
        return f"{self.base_url}/identities/{quote(user_id, safe='')}"

    def delete_identity(self, user_id: str) -> None:
        url = self._url(user_id)
        try:
            response = self.session.delete(url, timeout=self.timeout)
        except requests.Timeout as e:
            raise IdentityProviderTimeout(
                f"DELETE {url} timed out after {self.timeout}s"
            ) from e
        except requests.RequestException as e:
            raise IdentityProviderUnavailable(f"DELETE {url} failed: {e}") from e

        logger.debug("DELETE %s -> %s", url, response.status_code)
        if response.status_code in SUCCESS_STATUSES:
            if response.status_code == HTTPStatus.NOT_FOUND:
                logger.info("Identity %s already absent at provider", user_id)
            return

        raise IdentityProviderUnavailable(
            f"identity provider admin API returned {response.status_code} {response.reason}",
            status_code=response.status_code,
        )

"""HTTP endpoint probe backed by httpx."""

from __future__ import annotations

import logging

import httpx

from deploycheck.core.errors import ProbeError
from deploycheck.models.pipeline import ProbeResponse

logger = logging.getLogger(__name__)


def normalize_address(address: str) -> str:
    """Prefix bare hosts (``203.0.113.7``, ``example.com/health``) with http://."""
    if "://" in address:
        return address
    return f"http://{address}"


class HttpxProbe:
    """Issues GET requests against a deployed endpoint.

    The client holds no per-run state beyond its connection pool, so one
    probe may be reused across runs.

    Parameters
    ----------
    timeout:
        Per-request timeout in seconds.
    client:
        Optional pre-built ``httpx.Client`` (tests pass one with a
        ``MockTransport``).
    headers:
        Extra headers sent with every request.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        *,
        client: httpx.Client | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)
        self._timeout = timeout
        self._headers = headers or {}

    def request(self, address: str) -> ProbeResponse:
        url = normalize_address(address)
        try:
            response = self._client.get(url, headers=self._headers, timeout=self._timeout)
        except httpx.HTTPError as exc:
            logger.debug("GET %s failed: %s", url, exc)
            raise ProbeError(f"GET {url} failed: {exc}") from exc
        return ProbeResponse(status_code=response.status_code, body=response.text)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> HttpxProbe:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

"""Rate-limited, retrying HTTP transport for the Tradervue REST API.

Every request is an authenticated GET. Requests are serialized and spaced:
the remote service must never see bursts, so the transport blocks until a
minimum interval has elapsed since the previous request was *issued*.

Usage::

    with RateLimitedTransport(base_url, username, password) as transport:
        body = transport.get("/trades", {"count": 100, "page": 1})
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from tradervue_export.core.errors import (
    AuthError,
    ParseError,
    RetriesExhaustedError,
    TransientError,
    TransportError,
    UnexpectedStatusError,
    ValidationError,
)

logger = logging.getLogger(__name__)


class RateLimitedTransport:
    """Authenticated GET with request spacing and bounded retry.

    Parameters
    ----------
    base_url:
        API root, e.g. ``https://app.tradervue.com/api/v1``.
    username, password:
        HTTP basic auth credentials.
    user_agent:
        Value of the ``User-Agent`` header (Tradervue requires one).
    min_interval:
        Minimum seconds between the issue of consecutive requests.
    max_retries:
        Maximum attempts per call, including the first.
    base_backoff:
        Backoff base in seconds; attempt ``i`` (0-based) waits
        ``base_backoff * 2**i`` before being issued, for ``i > 0``.
    timeout:
        HTTP request timeout in seconds.
    transport:
        Optional ``httpx`` transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        *,
        user_agent: str = "tvue-cli (tradervue-export)",
        min_interval: float = 0.2,
        max_retries: int = 3,
        base_backoff: float = 1.0,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self._base_url = base_url.rstrip("/")
        self._auth = httpx.BasicAuth(username, password)
        self._user_agent = user_agent
        self._min_interval = min_interval
        self._max_retries = max_retries
        self._base_backoff = base_backoff
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None
        # Monotonic issue time of the previous request; None before the first
        self._last_request_at: float | None = None

    # -- Lifecycle -----------------------------------------------------------

    def open(self) -> None:
        """Create the HTTP client."""
        if self._client is None:
            self._client = httpx.Client(
                base_url=self._base_url,
                auth=self._auth,
                headers={
                    "User-Agent": self._user_agent,
                    "Accept": "application/json",
                },
                timeout=httpx.Timeout(self._timeout),
                transport=self._transport,
            )

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> RateLimitedTransport:
        self.open()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # -- Requests ------------------------------------------------------------

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET *path* and return the parsed JSON body.

        Raises
        ------
        AuthError
            HTTP 401. Not retried.
        ValidationError
            HTTP 400. Not retried.
        UnexpectedStatusError
            Any other non-success status below 500. Not retried.
        TransportError
            A request error that is not a network fault (redirect loop,
            undecodable content). Not retried.
        RetriesExhaustedError
            Every attempt hit a 5xx or a network failure.
        ParseError
            Success status with a body that is not JSON.
        """
        self.open()
        assert self._client is not None

        last_error: Exception | None = None
        for attempt in range(self._max_retries):
            if attempt > 0:
                wait = self._backoff_delay(attempt)
                logger.warning(
                    "Retrying GET %s in %.1fs (attempt %d/%d): %s",
                    path, wait, attempt + 1, self._max_retries, last_error,
                )
                time.sleep(wait)

            self._wait_for_slot()
            try:
                resp = self._client.get(path, params=params)
            except httpx.TransportError as exc:
                last_error = exc
                continue
            except httpx.RequestError as exc:
                # Redirect loops, undecodable content: not transient
                raise TransportError(f"GET {path} failed: {exc}") from exc

            status = resp.status_code
            if status == 401:
                raise AuthError(
                    "authentication failed (HTTP 401): check your username and password"
                )
            if status == 400:
                raise ValidationError(resp.text)
            if status >= 500:
                last_error = TransientError(f"server error (HTTP {status}): {resp.text}")
                continue
            if not resp.is_success:
                raise UnexpectedStatusError(status, resp.text)

            try:
                return resp.json()
            except ValueError as exc:
                raise ParseError(f"parsing response from {path}: {exc}") from exc

        raise RetriesExhaustedError(self._max_retries, last_error) from last_error

    def _wait_for_slot(self) -> None:
        """Block until ``min_interval`` has passed since the last request issue."""
        if self._last_request_at is not None:
            elapsed = time.monotonic() - self._last_request_at
            if elapsed < self._min_interval:
                time.sleep(self._min_interval - elapsed)
        self._last_request_at = time.monotonic()

    def _backoff_delay(self, attempt: int) -> float:
        """Exponential backoff: ``base * 2**attempt``."""
        return self._base_backoff * (2 ** attempt)

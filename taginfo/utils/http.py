"""
Async HTTP transport for the hosting platform backends.

One :class:`HTTPClient` is opened per backend. It speaks HTTP/2 through
httpx and hides the failure modes of public APIs from the callers:

* timeouts, connection drops and 5xx answers are retried with jittered
  exponential backoff;
* ``429 Too Many Requests`` waits for ``Retry-After`` and does not use up
  a regular attempt;
* any other 4xx is final and surfaces as :class:`NetworkError` with the
  status code, so a backend can tell "no such tag" (404) from an outage.
"""

from __future__ import annotations

import httpx
import random
import asyncio
from typing import Any, Dict, Iterable, Mapping, Optional

from taginfo.utils.logger import get_logger
from taginfo.__version__ import __version__
from taginfo.exceptions import NetworkError
from taginfo.constants import (
    DEFAULT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_CONCURRENCY,
    USER_AGENT_TEMPLATE,
)

logger = get_logger("http")

# errors worth another attempt; 4xx other than 429 never are
_TRANSIENT_ERRORS = (httpx.TimeoutException, httpx.NetworkError)


def _retry_after_seconds(response: httpx.Response) -> int:
    """Read ``Retry-After`` as whole seconds, defaulting to one."""
    try:
        return max(int(response.headers.get("Retry-After", "1")), 0)
    except ValueError:
        return 1


def _backoff(attempt: int) -> float:
    return 2**attempt + random.uniform(0.0, 0.3)


class HTTPClient:
    """Shared async client for platform REST APIs.

    Args:
        timeout: Per-request timeout in seconds.
        max_retries: Extra attempts after the first for transient failures.
        verify_ssl: Verify TLS certificates. Self-hosted Gitea instances
            with private CAs may need this off.
        user_agent: ``User-Agent`` header; defaults to ``taginfo/<version>``.
        max_concurrency: Requests allowed in flight at once.
        headers: Sent with every request, e.g. ``Accept`` or ``Authorization``.
        auth: httpx authentication, e.g. ``httpx.BasicAuth`` for Bitbucket.
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        verify_ssl: bool = True,
        user_agent: Optional[str] = None,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        headers: Optional[Mapping[str, str]] = None,
        auth: Optional[httpx.Auth] = None,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.verify_ssl = verify_ssl
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.max_concurrency = max_concurrency
        self.headers: Dict[str, str] = dict(headers or {})
        self.auth = auth

        self._client: Optional[httpx.AsyncClient] = None
        self._slots = asyncio.Semaphore(max_concurrency)
        self._max_429_retries = 5

    async def __aenter__(self) -> "HTTPClient":
        self._open()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _open(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                http2=True,
                timeout=httpx.Timeout(self.timeout),
                verify=self.verify_ssl,
                follow_redirects=True,
                headers={**self.headers, "User-Agent": self.user_agent},
                auth=self.auth,
            )
        return self._client

    async def close(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """GET ``url``, retrying transient failures."""
        return await self._request_with_retry("GET", url, **kwargs)

    async def _request_with_retry(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        client = self._open()
        attempts = self.max_retries + 1
        attempt = 0
        rate_limited = 0
        last_error: Optional[Exception] = None

        while attempt < attempts:
            try:
                async with self._slots:
                    response = await client.request(method, url, **kwargs)
            except _TRANSIENT_ERRORS as exc:
                last_error = exc
                logger.warning("%s on attempt %d/%d: %s", type(exc).__name__, attempt + 1, attempts, url)
            else:
                if response.status_code == 429:
                    rate_limited += 1
                    if rate_limited > self._max_429_retries:
                        raise NetworkError(
                            f"Rate limit exceeded after {self._max_429_retries} retries",
                            url=url,
                            status_code=429,
                        )
                    wait = _retry_after_seconds(response)
                    logger.warning(
                        "Rate limited by %s, waiting %ds (%d/%d)",
                        url,
                        wait,
                        rate_limited,
                        self._max_429_retries,
                    )
                    await asyncio.sleep(wait)
                    continue

                try:
                    response.raise_for_status()
                except httpx.HTTPStatusError as exc:
                    status = response.status_code
                    if status < 500:
                        raise NetworkError(
                            f"HTTP {status} error for {url}",
                            url=url,
                            status_code=status,
                            response_body=response.text,
                        ) from exc
                    last_error = exc
                    logger.warning("HTTP %d on attempt %d/%d: %s", status, attempt + 1, attempts, url)
                else:
                    return response

            attempt += 1
            if attempt < attempts:
                delay = _backoff(attempt - 1)
                logger.debug("Backing off %.2fs before retrying %s", delay, url)
                await asyncio.sleep(delay)

        raise NetworkError(
            f"Request failed after {attempts} attempts: {url}",
            url=url,
        ) from last_error

    async def get_json(self, url: str, **kwargs: Any) -> Any:
        """GET ``url`` and decode the body; objects and arrays alike."""
        response = await self.get(url, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc

    async def batch_get_json(self, urls: Iterable[str]) -> Dict[str, Any]:
        """Fetch several JSON documents concurrently.

        Duplicate URLs are fetched once. A URL that fails maps to ``None``
        instead of failing the batch; GitHub commit lookups use this to
        leave single dates empty.

        Returns:
            Decoded JSON (or ``None``) keyed by URL.
        """
        unique = list(dict.fromkeys(urls))
        outcomes = await asyncio.gather(
            *(self.get_json(url) for url in unique),
            return_exceptions=True,
        )

        results: Dict[str, Any] = {}
        for url, outcome in zip(unique, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning("Failed to fetch %s: %s", url, outcome)
                outcome = None
            results[url] = outcome
        return results

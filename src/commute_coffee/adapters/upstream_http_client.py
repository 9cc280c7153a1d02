"""HTTP client for upstream requests bounded by a deadline."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import aiohttp

from commute_coffee.adapters.api_request_logger import log_api_request
from commute_coffee.domain.models.fetch_error import FetchError, FetchErrorKind

if TYPE_CHECKING:
    from commute_coffee.adapters.api_rate_limiter import ApiRateLimiter
    from commute_coffee.domain.models.deadline import Deadline

logger = logging.getLogger(__name__)

# Payload problems that mean the upstream answered with something we cannot read
PARSE_ERRORS: tuple[type[Exception], ...] = (
    KeyError,
    IndexError,
    ValueError,
    TypeError,
    AttributeError,
)


@asynccontextmanager
async def upstream_errors(source_name: str, deadline: Deadline) -> AsyncIterator[None]:
    """Run a block under a deadline and translate every failure into FetchError.

    Raises:
        FetchError: TIMEOUT when the deadline passes, UPSTREAM_REJECTED for HTTP error
            statuses, NETWORK for connection problems and PARSE for malformed payloads.
    """
    if deadline.expired:
        raise FetchError(FetchErrorKind.TIMEOUT, "deadline already passed", source_name)
    try:
        async with asyncio.timeout(deadline.remaining()):
            yield
    except FetchError as e:
        if not e.source_name:
            e.source_name = source_name
        raise
    except TimeoutError as e:
        raise FetchError(FetchErrorKind.TIMEOUT, "no response before deadline", source_name) from e
    except aiohttp.ContentTypeError as e:
        raise FetchError(FetchErrorKind.PARSE, f"unexpected content type: {e.message}", source_name) from e
    except aiohttp.ClientResponseError as e:
        raise FetchError(
            FetchErrorKind.UPSTREAM_REJECTED,
            f"HTTP {e.status} {e.message}",
            source_name,
            status_code=e.status,
        ) from e
    except aiohttp.ClientError as e:
        raise FetchError(FetchErrorKind.NETWORK, str(e) or type(e).__name__, source_name) from e
    except PARSE_ERRORS as e:
        raise FetchError(FetchErrorKind.PARSE, f"malformed payload: {e!r}", source_name) from e


class UpstreamHttpClient:
    """GET requests against one upstream, sharing an aiohttp session."""

    def __init__(
        self,
        source_name: str,
        session: aiohttp.ClientSession | None,
        rate_limiter: ApiRateLimiter | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            source_name: Name used in logs and errors.
            session: Shared aiohttp session. Requests fail with NETWORK when missing.
            rate_limiter: Optional limiter applied before every request.
        """
        self._source_name = source_name
        self._session = session
        self._rate_limiter = rate_limiter

    async def get_json(
        self,
        url: str,
        deadline: Deadline,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """GET a URL and decode the JSON body regardless of the declared content type."""
        async with self._get(url, deadline, params, headers) as response:
            return await response.json(content_type=None)

    async def get_bytes(
        self,
        url: str,
        deadline: Deadline,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> bytes:
        """GET a URL and return the raw body."""
        async with self._get(url, deadline, params, headers) as response:
            return await response.read()

    @asynccontextmanager
    async def _get(
        self,
        url: str,
        deadline: Deadline,
        params: dict[str, Any] | None,
        headers: dict[str, str] | None,
    ) -> AsyncIterator[aiohttp.ClientResponse]:
        if self._session is None:
            raise FetchError(
                FetchErrorKind.NETWORK, "an aiohttp session is required", self._source_name
            )
        if self._rate_limiter is not None:
            await self._rate_limiter.acquire(deadline)

        log_api_request(self._source_name, url, params, headers)
        timeout = aiohttp.ClientTimeout(total=deadline.remaining())
        async with self._session.get(url, params=params, headers=headers, timeout=timeout) as response:
            if response.status >= 400:
                await self._log_error_response(response, url)
            response.raise_for_status()
            yield response

    async def _log_error_response(self, response: aiohttp.ClientResponse, url: str) -> None:
        error_text = await response.text()
        error_body = error_text[:500] if error_text else "(empty response body)"
        retry_after = response.headers.get("Retry-After")
        extra = f" [Retry-After: {retry_after}]" if retry_after else ""
        logger.warning(
            f"{self._source_name} returned status {response.status} for {url}: {error_body}{extra}"
        )

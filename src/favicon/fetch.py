"""Bounded outbound GET: total time budget and response size cap per call."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchLimits:
    """Limits applied to every outbound request.

    ``timeout_seconds`` covers the whole exchange (connect, redirects and
    body), unlike httpx's per-operation timeouts.
    """

    timeout_seconds: float = 5.0
    max_bytes: int = 2_000_000


DEFAULT_LIMITS = FetchLimits()


class FetchError(Exception):
    """An outbound request failed before a complete response was read."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"fetching {url} failed: {reason}")
        self.url = url
        self.reason = reason


class FetchTimeoutError(FetchError):
    def __init__(self, url: str, timeout_seconds: float) -> None:
        super().__init__(url, f"no complete response within {timeout_seconds}s")


class ResponseTooLargeError(FetchError):
    def __init__(self, url: str, max_bytes: int) -> None:
        super().__init__(url, f"response body exceeds {max_bytes} bytes")


@dataclass(frozen=True)
class FetchedResponse:
    url: str  # final URL, after redirects
    status_code: int
    reason_phrase: str
    headers: httpx.Headers
    content: bytes
    encoding: str | None = None

    @property
    def host(self) -> str:
        return httpx.URL(self.url).netloc.decode("ascii")

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def text(self) -> str:
        try:
            return self.content.decode(self.encoding or "utf-8", errors="replace")
        except LookupError:
            return self.content.decode("utf-8", errors="replace")


async def _read_capped(response: httpx.Response, url: str, max_bytes: int) -> bytes:
    declared = response.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        raise ResponseTooLargeError(url, max_bytes)

    body = bytearray()
    async for chunk in response.aiter_bytes():
        body.extend(chunk)
        if len(body) > max_bytes:
            raise ResponseTooLargeError(url, max_bytes)
    return bytes(body)


async def fetch_url(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str] | None = None,
    limits: FetchLimits = DEFAULT_LIMITS,
) -> FetchedResponse:
    """GET *url*, following redirects, within *limits*.

    Any status code is returned as-is. Transport errors, an exhausted time
    budget and oversized bodies raise ``FetchError``.
    """
    try:
        async with asyncio.timeout(limits.timeout_seconds):
            async with client.stream("GET", url, headers=headers, follow_redirects=True) as response:
                content = await _read_capped(response, url, limits.max_bytes)
                return FetchedResponse(
                    url=str(response.url),
                    status_code=response.status_code,
                    reason_phrase=response.reason_phrase,
                    headers=response.headers,
                    content=content,
                    encoding=response.charset_encoding,
                )
    except TimeoutError as exc:
        logger.debug("fetch timed out", extra={"url": url, "timeout_seconds": limits.timeout_seconds})
        raise FetchTimeoutError(url, limits.timeout_seconds) from exc
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        raise FetchError(url, type(exc).__name__) from exc

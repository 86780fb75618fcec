"""Remote image downloader: fetches a URL and names it by its content type."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import urlparse

import httpx

from src.favicon.fetch import DEFAULT_LIMITS, FetchError, FetchLimits, fetch_url

logger = logging.getLogger(__name__)

_VALID_SCHEMES = {"http", "https"}

DEFAULT_CONTENT_TYPE = "image/png"

EXTENSION_MAP: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/x-icon": "ico",
    "image/vnd.microsoft.icon": "ico",
    "image/svg+xml": "svg",
}


class DownloadError(Exception):
    """The remote image could not be fetched."""


class InvalidDownloadURLError(DownloadError, ValueError):
    """The URL is unparsable or uses a scheme other than http/https."""


class UnsupportedContentTypeError(DownloadError):
    """The upstream answered with a content type we have no extension for."""

    def __init__(self, content_type: str) -> None:
        super().__init__(f"unsupported content type: {content_type}")
        self.content_type = content_type


@dataclass(frozen=True)
class DownloadedImage:
    content: bytes
    content_type: str
    extension: str

    @property
    def filename(self) -> str:
        return f"favicon.{self.extension}"

    @property
    def content_disposition(self) -> str:
        return f"attachment; filename={self.filename}"


def parse_download_url(url: str) -> str:
    """Validate *url* for download and return it unchanged."""
    try:
        parsed = urlparse(url)
    except ValueError:
        raise InvalidDownloadURLError(url) from None
    if parsed.scheme not in _VALID_SCHEMES or not parsed.hostname:
        raise InvalidDownloadURLError(url)
    return url


def media_type(content_type: str) -> str:
    """Strip parameters: ``"image/png; charset=binary"`` -> ``"image/png"``."""
    return content_type.split(";", 1)[0].strip().lower()


def extension_for(content_type: str) -> str:
    try:
        return EXTENSION_MAP[media_type(content_type)]
    except KeyError:
        raise UnsupportedContentTypeError(content_type) from None


async def download_image(
    client: httpx.AsyncClient,
    url: str,
    limits: FetchLimits = DEFAULT_LIMITS,
) -> DownloadedImage:
    """Fetch *url* and return its bytes with a download-friendly extension.

    Raises ``InvalidDownloadURLError`` before any network access when the URL
    is not http/https, ``UnsupportedContentTypeError`` when the response type
    has no known extension, and ``DownloadError`` for any fetch failure.
    """
    url = parse_download_url(url)

    try:
        response = await fetch_url(client, url, limits=limits)
    except FetchError as exc:
        logger.warning("download failed", extra={"url": url, "reason": exc.reason}, exc_info=True)
        raise DownloadError(exc.reason) from exc
    if not response.is_success:
        logger.warning(
            "download upstream returned error status",
            extra={"url": url, "status_code": response.status_code},
        )
        raise DownloadError(f"upstream returned HTTP {response.status_code}")

    content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
    extension = extension_for(content_type)
    logger.info(
        "image downloaded",
        extra={"url": url, "content_type": content_type, "bytes": len(response.content)},
    )
    return DownloadedImage(
        content=response.content,
        content_type=content_type,
        extension=extension,
    )

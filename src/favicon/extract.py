"""Icon extractor: scans a page's markup for ``<link rel="...icon...">`` tags."""

from __future__ import annotations

import html
import logging
import re
from urllib.parse import urljoin, urlparse

import httpx

from .fetch import DEFAULT_LIMITS, FetchError, FetchLimits, fetch_url
from .models import UNKNOWN_SIZE, IconCandidate, ResolutionResult

logger = logging.getLogger(__name__)

# Tag-level scan; real-world markup is too often malformed for a strict parser.
_ICON_LINK_RE = re.compile(r"""<link[^>]*rel=['"][^'"]*icon[^'"]*['"][^>]*>""", re.IGNORECASE)
_HREF_RE = re.compile(r"""href=['"](.*?)['"]""", re.IGNORECASE)
_SIZES_RE = re.compile(r"""sizes=['"](.*?)['"]""", re.IGNORECASE)

FAILED_STATUS_TEXT = "Failed to fetch icons"

# Only these can be fetched later; data:, javascript: and the like are skipped.
_FETCHABLE_SCHEMES = {"http", "https"}


def _origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}/"


def parse_icon_links(markup: str, base_url: str) -> list[IconCandidate]:
    """Return the icon candidates declared in *markup*, in document order.

    Relative hrefs are resolved against the scheme and host of *base_url*.
    """
    origin = _origin(base_url)
    icons: list[IconCandidate] = []

    for match in _ICON_LINK_RE.finditer(markup):
        tag = match.group(0)

        href_match = _HREF_RE.search(tag)
        if not href_match or not href_match.group(1).strip():
            continue
        href = html.unescape(href_match.group(1).strip())

        sizes_match = _SIZES_RE.search(tag)
        sizes = sizes_match.group(1).strip() if sizes_match else ""

        try:
            absolute = urljoin(origin, href)
        except ValueError:
            logger.debug("skipping unparsable icon href", extra={"href": href[:200]})
            continue
        if urlparse(absolute).scheme not in _FETCHABLE_SCHEMES:
            logger.debug("skipping non-http icon href", extra={"href": href[:200]})
            continue

        icons.append(IconCandidate(href=absolute, sizes=sizes or UNKNOWN_SIZE))

    return icons


async def extract_icons(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str] | None = None,
    limits: FetchLimits = DEFAULT_LIMITS,
) -> ResolutionResult:
    """Fetch *url* and list its icon links. Never raises.

    Failures come back as a ``ResolutionResult`` with status 500, no icons and
    the reason in ``error``.
    """
    try:
        response = await fetch_url(client, url, headers, limits)
    except FetchError as exc:
        logger.warning(
            "icon extraction failed",
            extra={"url": url, "error": exc.reason},
            exc_info=True,
        )
        requested = urlparse(url)
        return ResolutionResult(
            source_url=url,
            host=requested.netloc,
            status_code=500,
            status_text=FAILED_STATUS_TEXT,
            error=exc.reason,
        )

    final_url = response.url
    icons = parse_icon_links(response.text, final_url)
    logger.debug(
        "icon links extracted",
        extra={
            "url": url,
            "final_url": final_url,
            "status_code": response.status_code,
            "icon_count": len(icons),
        },
    )
    return ResolutionResult(
        source_url=final_url,
        host=response.host,
        status_code=response.status_code,
        status_text=response.reason_phrase,
        icons=icons,
    )

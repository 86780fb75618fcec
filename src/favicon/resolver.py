"""Favicon resolver: probes a domain over HTTP then HTTPS and picks an icon."""

from __future__ import annotations

import logging
import re
import time
from urllib.parse import urlparse

import httpx

from .errors import InvalidDomainError, SelectedFetchError
from .extract import extract_icons
from .fetch import DEFAULT_LIMITS, FetchError, FetchLimits, fetch_url
from .models import FaviconImage, IconCandidate, ResolutionResult, ResolvedFavicon

logger = logging.getLogger(__name__)

# Labels of 1-63 alphanumerics/hyphens (no leading or trailing hyphen),
# followed by an alphabetic TLD of at least two characters.
_DOMAIN_RE = re.compile(r"(?:[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?\.)+[a-zA-Z]{2,}")
_WIDTH_RE = re.compile(r"\s*(\d+)")

# Plain HTTP first: legacy sites may only serve it, and most others redirect.
PROBE_SCHEMES: tuple[str, ...] = ("http", "https")

DEFAULT_ICON_CONTENT_TYPE = "image/png"


def normalize_domain(domain: str) -> str:
    """Return the ASCII hostname form of *domain*, or raise ``InvalidDomainError``."""
    try:
        hostname = urlparse(f"http://{domain.strip()}").hostname or ""
        ascii_host = hostname.encode("idna").decode("ascii")
    except (UnicodeError, ValueError):
        raise InvalidDomainError(domain) from None

    if not _DOMAIN_RE.fullmatch(ascii_host):
        raise InvalidDomainError(domain)
    return ascii_host


def icon_width(sizes: str) -> int:
    """Width declared by a ``sizes`` value such as ``"32x32"``; 0 when unknown."""
    match = _WIDTH_RE.match(sizes)
    return int(match.group(1)) if match else 0


def select_icon(icons: list[IconCandidate], prefer_larger: bool = False) -> IconCandidate:
    """Pick one candidate from a non-empty list.

    Without *prefer_larger* the first declared icon wins. With it, the widest
    icon wins and ties keep the earliest one.
    """
    if not icons:
        raise ValueError("select_icon() needs at least one candidate")
    if not prefer_larger:
        return icons[0]
    # max() returns the first maximal element
    return max(icons, key=lambda icon: icon_width(icon.sizes))


async def probe_domain(
    client: httpx.AsyncClient,
    domain: str,
    headers: dict[str, str] | None = None,
    limits: FetchLimits = DEFAULT_LIMITS,
) -> ResolutionResult:
    """Run the HTTP probe, then the HTTPS probe if the first found nothing.

    Returns the first result with icons, otherwise the last probe's result.
    """
    for scheme in PROBE_SCHEMES:
        result = await extract_icons(client, f"{scheme}://{domain}", headers, limits)
        logger.info(
            "probe finished",
            extra={
                "domain": domain,
                "scheme": scheme,
                "outcome": result.outcome.value,
                "status_code": result.status_code,
                "icon_count": len(result.icons),
            },
        )
        if result.icons:
            return result
    return result


async def fetch_icon(
    client: httpx.AsyncClient,
    icon: IconCandidate,
    headers: dict[str, str] | None = None,
    limits: FetchLimits = DEFAULT_LIMITS,
) -> FaviconImage:
    """Download the bytes of *icon*. Raises ``SelectedFetchError`` on failure."""
    try:
        response = await fetch_url(client, icon.href, headers, limits)
    except FetchError as exc:
        raise SelectedFetchError(icon.href, exc.reason) from exc
    if not response.is_success:
        raise SelectedFetchError(icon.href, f"HTTP {response.status_code}")

    return FaviconImage(
        content=response.content,
        content_type=response.headers.get("content-type") or DEFAULT_ICON_CONTENT_TYPE,
        source=response.url,
    )


async def resolve_favicon(
    client: httpx.AsyncClient,
    domain: str,
    headers: dict[str, str] | None = None,
    prefer_larger: bool = False,
    limits: FetchLimits = DEFAULT_LIMITS,
) -> ResolvedFavicon | None:
    """Resolve the favicon a domain declares in its own markup.

    Returns ``None`` when neither probe finds an icon link; callers fall back
    to third-party providers in that case. A failure to download the selected
    icon raises ``SelectedFetchError`` and is not retried elsewhere.
    """
    started = time.perf_counter()
    domain = normalize_domain(domain)

    probe = await probe_domain(client, domain, headers, limits)
    if not probe.icons:
        logger.info("no icons found", extra={"domain": domain})
        return None

    selected = select_icon(probe.icons, prefer_larger)
    logger.debug(
        "icon selected",
        extra={
            "domain": domain,
            "href": selected.href,
            "sizes": selected.sizes,
            "prefer_larger": prefer_larger,
        },
    )

    image = await fetch_icon(client, selected, headers, limits)
    elapsed_ms = int((time.perf_counter() - started) * 1000)
    logger.info(
        "favicon resolved",
        extra={"domain": domain, "href": selected.href, "elapsed_ms": elapsed_ms},
    )
    return ResolvedFavicon(
        icons=probe.icons,
        selected=selected,
        image=image,
        elapsed_ms=elapsed_ms,
    )

"""Fallback proxy: third-party favicon providers and a placeholder image."""

from __future__ import annotations

import logging

import httpx

from .fetch import DEFAULT_LIMITS, FetchError, FetchLimits, fetch_url
from .models import FaviconImage

logger = logging.getLogger(__name__)

# Tried in order; earlier providers are preferred.
FALLBACK_PROVIDERS: tuple[str, ...] = (
    "https://www.google.com/s2/favicons?domain={domain}",
    "https://icons.duckduckgo.com/ip3/{domain}.ico",
)

# Queried before anything else when the caller asks for a larger icon.
LARGE_ICON_PROVIDER = "https://icons.duckduckgo.com/ip3/{domain}.ico"

DEFAULT_PROVIDER_CONTENT_TYPE = "image/x-icon"
PLACEHOLDER_SOURCE = "placeholder"

_PLACEHOLDER_SVG = (
    '<svg width="100" height="100" xmlns="http://www.w3.org/2000/svg">'
    '<rect width="100%" height="100%" fill="#cccccc"/>'
    '<text x="50%" y="50%" font-size="48" text-anchor="middle" '
    'dominant-baseline="middle" fill="#000000">{letter}</text>'
    "</svg>"
)


def placeholder_svg(domain: str) -> str:
    letter = domain[:1].upper()
    return _PLACEHOLDER_SVG.format(letter=letter)


def placeholder_image(domain: str) -> FaviconImage:
    return FaviconImage(
        content=placeholder_svg(domain).encode("utf-8"),
        content_type="image/svg+xml",
        source=PLACEHOLDER_SOURCE,
    )


async def _fetch_provider(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str] | None,
    limits: FetchLimits = DEFAULT_LIMITS,
) -> FaviconImage | None:
    """Return the provider's image on HTTP 200, ``None`` on anything else."""
    try:
        response = await fetch_url(client, url, headers, limits)
    except FetchError:
        logger.warning("favicon provider unreachable", extra={"provider": url}, exc_info=True)
        return None

    if response.status_code != 200:
        logger.info(
            "favicon provider declined",
            extra={"provider": url, "status_code": response.status_code},
        )
        return None

    return FaviconImage(
        content=response.content,
        content_type=response.headers.get("content-type") or DEFAULT_PROVIDER_CONTENT_TYPE,
        source=url,
    )


async def fetch_fallback(
    client: httpx.AsyncClient,
    domain: str,
    headers: dict[str, str] | None = None,
    providers: tuple[str, ...] = FALLBACK_PROVIDERS,
    limits: FetchLimits = DEFAULT_LIMITS,
) -> FaviconImage:
    """Return the first provider image for *domain*, or a placeholder.

    Providers are queried one at a time in order. This never fails.
    """
    for template in providers:
        url = template.format(domain=domain)
        image = await _fetch_provider(client, url, headers, limits)
        if image is not None:
            logger.info("favicon served by provider", extra={"domain": domain, "provider": url})
            return image

    logger.info(
        "all favicon providers failed, serving placeholder",
        extra={"domain": domain, "providers_tried": len(providers)},
    )
    return placeholder_image(domain)


async def fetch_large_icon(
    client: httpx.AsyncClient,
    domain: str,
    headers: dict[str, str] | None = None,
    limits: FetchLimits = DEFAULT_LIMITS,
) -> FaviconImage | None:
    """Query the high-resolution provider; ``None`` unless it answers 200."""
    url = LARGE_ICON_PROVIDER.format(domain=domain)
    return await _fetch_provider(client, url, headers, limits)

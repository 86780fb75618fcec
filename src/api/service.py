"""Service layer — orchestrates favicon lookups for the API routes."""

from __future__ import annotations

import logging
from collections.abc import Mapping

import httpx

from src.api.schemas import IconCandidateOut, IconListResponse
from src.config import Settings
from src.favicon import (
    FaviconImage,
    fetch_fallback,
    fetch_large_icon,
    forwardable_headers,
    normalize_domain,
    probe_domain,
    resolve_favicon,
)
from src.links import canonical_link

logger = logging.getLogger(__name__)


async def get_favicon(
    client: httpx.AsyncClient,
    settings: Settings,
    domain: str,
    headers: Mapping[str, str] | None = None,
    larger: bool = False,
) -> FaviconImage:
    """Return the best favicon image for *domain*.

    Order: the high-resolution provider when *larger* is set, then the
    domain's own markup, then the fallback providers and placeholder.
    Raises ``InvalidDomainError`` before any request when *domain* is
    malformed, and ``SelectedFetchError`` when the icon picked from the
    markup cannot be downloaded.
    """
    domain = normalize_domain(domain)
    forwarded = forwardable_headers(headers, settings.user_agent)
    limits = settings.fetch_limits()
    logger.info("favicon requested", extra={"domain": domain, "larger": larger})

    if larger:
        image = await fetch_large_icon(client, domain, forwarded, limits)
        if image is not None:
            logger.info("large icon provider hit", extra={"domain": domain})
            return image

    resolved = await resolve_favicon(client, domain, forwarded, prefer_larger=larger, limits=limits)
    if resolved is None:
        return await fetch_fallback(client, domain, forwarded, limits=limits)
    return resolved.image


async def list_icons(
    client: httpx.AsyncClient,
    settings: Settings,
    domain: str,
    host: str,
    headers: Mapping[str, str] | None = None,
) -> IconListResponse:
    """Describe the icon links *domain* declares, without fetching any icon."""
    domain = normalize_domain(domain)
    forwarded = forwardable_headers(headers, settings.user_agent)
    result = await probe_domain(client, domain, forwarded, settings.fetch_limits())

    return IconListResponse(
        domain=domain,
        source_url=result.source_url,
        host=result.host,
        status_code=result.status_code,
        status_text=result.status_text,
        outcome=result.outcome.value,
        icons=[IconCandidateOut(href=icon.href, sizes=icon.sizes) for icon in result.icons],
        favicon_url=canonical_link(host, f"/favicon/{domain}", settings.environment),
    )

"""Favicon resolution pipeline: page probing, provider fallback, placeholder."""

from __future__ import annotations

from .errors import FaviconError, InvalidDomainError, SelectedFetchError
from .extract import extract_icons, parse_icon_links
from .fallback import (
    FALLBACK_PROVIDERS,
    LARGE_ICON_PROVIDER,
    fetch_fallback,
    fetch_large_icon,
    placeholder_image,
    placeholder_svg,
)
from .fetch import FetchError, FetchLimits, fetch_url
from .headers import forwardable_headers
from .models import (
    FaviconImage,
    IconCandidate,
    ProbeOutcome,
    ResolutionResult,
    ResolvedFavicon,
)
from .resolver import normalize_domain, probe_domain, resolve_favicon, select_icon

__all__ = [
    "FALLBACK_PROVIDERS",
    "LARGE_ICON_PROVIDER",
    "FaviconError",
    "FaviconImage",
    "FetchError",
    "FetchLimits",
    "IconCandidate",
    "InvalidDomainError",
    "ProbeOutcome",
    "ResolutionResult",
    "ResolvedFavicon",
    "SelectedFetchError",
    "extract_icons",
    "fetch_fallback",
    "fetch_url",
    "fetch_large_icon",
    "forwardable_headers",
    "normalize_domain",
    "parse_icon_links",
    "placeholder_image",
    "placeholder_svg",
    "probe_domain",
    "resolve_favicon",
    "select_icon",
]

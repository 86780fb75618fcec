"""Helpers for forwarding a caller's request headers to upstream servers."""

from __future__ import annotations

from collections.abc import Mapping

# Headers describing the inbound connection or body, not the outbound request.
_DROPPED_HEADERS = frozenset({
    "content-length",
    "host",
    "connection",
    "keep-alive",
    "transfer-encoding",
    "te",
    "trailer",
    "upgrade",
    "proxy-authorization",
    "proxy-authenticate",
    "proxy-connection",
    "accept-encoding",
})


def forwardable_headers(
    headers: Mapping[str, str] | None,
    default_user_agent: str = "",
) -> dict[str, str]:
    """Copy *headers* minus the ones that must not be replayed upstream.

    Content-Length is always stale here: outbound requests are body-less GETs.
    """
    forwarded: dict[str, str] = {}
    for name, value in (headers or {}).items():
        if name.lower() in _DROPPED_HEADERS:
            continue
        forwarded[name.lower()] = value

    if default_user_agent and "user-agent" not in forwarded:
        forwarded["user-agent"] = default_user_agent
    return forwarded

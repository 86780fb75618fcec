"""Data models for the favicon pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

UNKNOWN_SIZE = "unknown"


class ProbeOutcome(str, Enum):
    FOUND = "found"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True)
class IconCandidate:
    """An icon link declared by a page, not yet fetched."""

    href: str  # always absolute
    sizes: str = UNKNOWN_SIZE


@dataclass
class ResolutionResult:
    """Outcome of a single probe (one scheme) against a domain.

    ``icons`` keeps the order in which the links appear in the document;
    preference is applied later by the selection step.
    """

    source_url: str
    host: str
    status_code: int
    status_text: str
    icons: list[IconCandidate] = field(default_factory=list)
    error: str | None = None

    @property
    def outcome(self) -> ProbeOutcome:
        if self.icons:
            return ProbeOutcome.FOUND
        if self.error is not None:
            return ProbeOutcome.FAILED
        return ProbeOutcome.EMPTY


@dataclass(frozen=True)
class FaviconImage:
    content: bytes
    content_type: str
    source: str  # upstream URL, or "placeholder"


@dataclass
class ResolvedFavicon:
    """Icon picked from a domain's own markup, with its bytes."""

    icons: list[IconCandidate]
    selected: IconCandidate
    image: FaviconImage
    elapsed_ms: int

"""Exceptions raised by the favicon pipeline."""


class FaviconError(Exception):
    """Base class for favicon pipeline failures."""


class InvalidDomainError(FaviconError, ValueError):
    """The requested domain is not a syntactically valid hostname."""

    def __init__(self, domain: str) -> None:
        super().__init__(f"invalid domain name: {domain!r}")
        self.domain = domain


class SelectedFetchError(FaviconError):
    """The icon chosen from the page markup could not be downloaded."""

    def __init__(self, href: str, reason: str) -> None:
        super().__init__(f"failed to fetch {href}: {reason}")
        self.href = href
        self.reason = reason

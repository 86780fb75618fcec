"""Environment-aware absolute links to this service."""


def canonical_link(domain: str, pathname: str, environment: str = "development") -> str:
    """Build an absolute URL; production links use HTTPS, others plain HTTP."""
    scheme = "https" if environment.lower() == "production" else "http"
    return f"{scheme}://{domain}{pathname}"

"""Pydantic Settings — loads configuration from environment variables."""

from functools import lru_cache

import httpx
from pydantic_settings import BaseSettings

from src.favicon.fetch import FetchLimits


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "extra": "ignore"}

    log_level: str = "INFO"
    environment: str = "development"

    # Total budget for one outbound request, body included.
    fetch_timeout_seconds: float = 5.0
    connect_timeout_seconds: float = 3.0
    max_redirects: int = 5
    max_response_bytes: int = 2_000_000
    user_agent: str = "Mozilla/5.0 (compatible; FaviconService/1.0)"

    cache_max_age_seconds: int = 86400

    @property
    def cache_control(self) -> str:
        return f"public, max-age={self.cache_max_age_seconds}"

    def http_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(self.fetch_timeout_seconds, connect=self.connect_timeout_seconds)

    def fetch_limits(self) -> FetchLimits:
        return FetchLimits(
            timeout_seconds=self.fetch_timeout_seconds,
            max_bytes=self.max_response_bytes,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()

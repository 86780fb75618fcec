"""Settings, logging and link helper tests."""

import json
import logging

import pytest

from src.config import Settings
from src.links import canonical_link
from src.logging_config import setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_settings_defaults(monkeypatch):
    for name in ("LOG_LEVEL", "ENVIRONMENT", "FETCH_TIMEOUT_SECONDS", "CACHE_MAX_AGE_SECONDS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.log_level == "INFO"
    assert settings.environment == "development"
    assert settings.fetch_timeout_seconds == 5.0
    assert settings.cache_control == "public, max-age=86400"


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("CACHE_MAX_AGE_SECONDS", "60")
    monkeypatch.setenv("FETCH_TIMEOUT_SECONDS", "2.5")

    settings = Settings(_env_file=None)

    assert settings.cache_control == "public, max-age=60"
    timeout = settings.http_timeout()
    assert timeout.read == 2.5
    assert timeout.connect == settings.connect_timeout_seconds


def test_settings_fetch_limits(monkeypatch):
    monkeypatch.setenv("FETCH_TIMEOUT_SECONDS", "1.5")
    monkeypatch.setenv("MAX_RESPONSE_BYTES", "4096")

    limits = Settings(_env_file=None).fetch_limits()

    assert limits.timeout_seconds == 1.5
    assert limits.max_bytes == 4096


def test_setup_logging_emits_json(capsys, restore_root_logger):
    setup_logging("DEBUG")

    logging.getLogger("src.test").info("favicon resolved", extra={"domain": "example.com"})

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["message"] == "favicon resolved"
    assert record["level"] == "INFO"
    assert record["logger"] == "src.test"
    assert record["domain"] == "example.com"


def test_setup_logging_quiets_http_client(restore_root_logger):
    setup_logging("DEBUG")
    assert logging.getLogger("httpx").level == logging.WARNING


def test_canonical_link_by_environment():
    assert canonical_link("favicons.example", "/favicon/example.com", "production") == (
        "https://favicons.example/favicon/example.com"
    )
    assert canonical_link("localhost:8000", "/favicon/example.com") == (
        "http://localhost:8000/favicon/example.com"
    )

"""Bounded fetch tests: deadline, size cap, error mapping."""

import asyncio

import httpx
import pytest

from src.favicon.fetch import (
    FetchError,
    FetchLimits,
    FetchTimeoutError,
    ResponseTooLargeError,
    fetch_url,
)


async def _chunks(count: int, size: int):
    for _ in range(count):
        yield b"a" * size


async def _stall():
    yield b"GIF89a"
    await asyncio.sleep(30)
    yield b"never"


@pytest.mark.asyncio
async def test_fetch_returns_body_and_final_url(upstream, http_client):
    upstream.add("http://example.com/", httpx.Response(302, headers={"Location": "https://example.com/home"}))
    upstream.add(
        "https://example.com/home",
        httpx.Response(200, headers={"Content-Type": "text/html; charset=utf-8"}, content="café".encode()),
    )

    response = await fetch_url(http_client, "http://example.com")

    assert response.url == "https://example.com/home"
    assert response.host == "example.com"
    assert response.is_success
    assert response.text == "café"


@pytest.mark.asyncio
async def test_fetch_returns_error_statuses(upstream, http_client):
    upstream.add("http://example.com/gone", httpx.Response(410, content=b"gone"))

    response = await fetch_url(http_client, "http://example.com/gone")

    assert response.status_code == 410
    assert not response.is_success
    assert response.content == b"gone"


@pytest.mark.asyncio
async def test_fetch_caps_streamed_body_without_length(upstream, http_client):
    upstream.add("http://example.com/big", lambda request: httpx.Response(200, content=_chunks(10, 100)))

    with pytest.raises(ResponseTooLargeError):
        await fetch_url(http_client, "http://example.com/big", limits=FetchLimits(max_bytes=250))


@pytest.mark.asyncio
async def test_fetch_rejects_declared_length_over_cap(upstream, http_client):
    upstream.add("http://example.com/big", httpx.Response(200, content=b"a" * 300))

    with pytest.raises(ResponseTooLargeError, match="250 bytes"):
        await fetch_url(http_client, "http://example.com/big", limits=FetchLimits(max_bytes=250))


@pytest.mark.asyncio
async def test_fetch_body_at_cap_is_accepted(upstream, http_client):
    upstream.add("http://example.com/exact", lambda request: httpx.Response(200, content=_chunks(5, 50)))

    response = await fetch_url(http_client, "http://example.com/exact", limits=FetchLimits(max_bytes=250))

    assert len(response.content) == 250


@pytest.mark.asyncio
async def test_fetch_stalled_body_times_out(upstream, http_client):
    upstream.add("http://example.com/stall", lambda request: httpx.Response(200, content=_stall()))

    with pytest.raises(FetchTimeoutError):
        await fetch_url(http_client, "http://example.com/stall", limits=FetchLimits(timeout_seconds=0.2))


@pytest.mark.asyncio
async def test_fetch_transport_error_is_fetch_error(http_client):
    with pytest.raises(FetchError) as exc_info:
        await fetch_url(http_client, "http://unreachable.example/")

    assert exc_info.value.reason == "ConnectError"
    assert exc_info.value.url == "http://unreachable.example/"

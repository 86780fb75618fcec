"""GET /favicon/{domain}, GET /icons/{domain}, GET /download/{url} handlers."""

from __future__ import annotations

import logging
import time

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from src.api.schemas import IconListResponse
from src.api.service import get_favicon, list_icons
from src.config import Settings
from src.download import (
    DownloadError,
    InvalidDownloadURLError,
    UnsupportedContentTypeError,
    download_image,
)
from src.favicon import InvalidDomainError, SelectedFetchError

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def _get_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/favicon/{domain}")
async def favicon(
    domain: str,
    request: Request,
    larger: str = "false",
    client: httpx.AsyncClient = Depends(_get_client),
    settings: Settings = Depends(_get_settings),
):
    started = time.perf_counter()
    try:
        image = await get_favicon(
            client,
            settings,
            domain,
            headers=request.headers,
            larger=larger.lower() == "true",
        )
    except InvalidDomainError:
        raise HTTPException(status_code=400, detail="Invalid domain name format")
    except SelectedFetchError as exc:
        logger.warning(
            "selected icon fetch failed",
            extra={"domain": domain, "href": exc.href, "reason": exc.reason},
        )
        raise HTTPException(status_code=500, detail="Failed to fetch the icon")

    execution_ms = int((time.perf_counter() - started) * 1000)
    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={
            "Cache-Control": settings.cache_control,
            "Content-Length": str(len(image.content)),
            "X-Execution-Time": f"{execution_ms}ms",
        },
    )


@router.get("/icons/{domain}", response_model=IconListResponse)
async def icons(
    domain: str,
    request: Request,
    client: httpx.AsyncClient = Depends(_get_client),
    settings: Settings = Depends(_get_settings),
):
    try:
        return await list_icons(
            client,
            settings,
            domain,
            host=request.url.netloc,
            headers=request.headers,
        )
    except InvalidDomainError:
        raise HTTPException(status_code=400, detail="Invalid domain name format")


@router.get("/download/{url:path}")
async def download(
    url: str,
    request: Request,
    client: httpx.AsyncClient = Depends(_get_client),
    settings: Settings = Depends(_get_settings),
):
    # An unencoded "?" splits the target URL across path and query string.
    if request.url.query:
        url = f"{url}?{request.url.query}"

    try:
        image = await download_image(client, url, settings.fetch_limits())
    except InvalidDownloadURLError:
        raise HTTPException(status_code=400, detail="Invalid URL")
    except UnsupportedContentTypeError as exc:
        logger.warning("unsupported content type", extra={"url": url, "content_type": exc.content_type})
        raise HTTPException(status_code=500, detail="Unsupported Content-Type")
    except DownloadError:
        raise HTTPException(status_code=500, detail="Failed to download image")

    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={"Content-Disposition": image.content_disposition},
    )

"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from src.api.routes import router
from src.config import get_settings
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # Initialize logging FIRST so all subsequent operations produce JSON logs
    setup_logging(settings.log_level)
    logger.info("starting favicon service")

    # One pooled client per process; every outbound call is bounded by its timeout
    http_client = httpx.AsyncClient(
        timeout=settings.http_timeout(),
        follow_redirects=True,
        max_redirects=settings.max_redirects,
    )

    app.state.settings = settings
    app.state.http_client = http_client

    logger.info(
        "favicon service ready",
        extra={
            "environment": settings.environment,
            "fetch_timeout_seconds": settings.fetch_timeout_seconds,
            "max_redirects": settings.max_redirects,
        },
    )

    yield

    logger.info("shutting down favicon service")
    await http_client.aclose()


app = FastAPI(title="Favicon Service", lifespan=lifespan)
app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}

"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tablefetch.api.routes import router
from tablefetch.config import get_settings
from tablefetch.extraction import Fetcher
from tablefetch.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    setup_logging(settings.log_level, json_output=settings.log_json)
    logger.info("starting tablefetch service")

    app.state.settings = settings
    app.state.fetcher = Fetcher.from_settings(settings)

    logger.info(
        "tablefetch service ready",
        extra={
            "fetch_timeout": settings.fetch_timeout,
            "user_agent": settings.user_agent,
            "page_size": settings.page_size,
        },
    )

    yield

    logger.info("shutting down tablefetch service")


app = FastAPI(title="tablefetch", lifespan=lifespan)
app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}

"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from .routes import router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the effective load defaults on startup."""
    logger.info(
        f"RecordSmith {__version__} ready (encoding={settings.default_encoding}, "
        f"separator={settings.default_separator}, header={settings.default_header_policy}, "
        f"max upload={settings.max_upload_bytes} bytes)"
    )
    yield
    logger.info("RecordSmith shutting down")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="RecordSmith",
        description="Load delimited or JSON records and export them through profiles",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Downloads carry their file name in Content-Disposition
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    app.include_router(router, prefix="/api")

    return app

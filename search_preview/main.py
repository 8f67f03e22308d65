"""Main FastAPI application."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from opensearchpy import OpenSearch

from .api import previews_router, redirect_router
from .api.deps import get_search_client
from .core.config import settings, ConfigurationError
from .core.logging_config import setup_logging
from .database import init_db
from .middleware.exception_handler import preview_exception_handler
from .middleware.request_context import RequestContextMiddleware
from .exceptions import PreviewException

setup_logging(log_level=settings.log_level, log_format=settings.log_format)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    logger.info(f"Environment: {settings.environment.value}")
    try:
        settings.validate_production_config()
    except ConfigurationError as e:
        logger.critical(f"STARTUP BLOCKED: {e}")
        raise SystemExit(1) from e

    if not settings.frontend_base_url:
        logger.warning(
            "FRONTEND_BASE_URL is empty. Preview redirects will be relative to this service."
        )

    init_db()

    yield


app = FastAPI(
    title="Search Preview API",
    description=(
        "Builds throwaway search indices holding one in-progress content entity "
        "and redirects editors to the front-end application rendering it."
    ),
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
)
app.add_middleware(RequestContextMiddleware)

app.add_exception_handler(PreviewException, preview_exception_handler)

logger.info(
    "Search Preview API started | env=%s | search=%s | prefix=%s | expire=%ss",
    settings.environment.value,
    ",".join(settings.get_opensearch_hosts()),
    settings.preview_index_prefix,
    settings.preview_expire,
)

app.include_router(previews_router)
app.include_router(redirect_router)


@app.get("/")
def root():
    """Root endpoint."""
    return {
        "name": "Search Preview API",
        "version": VERSION,
        "status": "running"
    }


_startup_time = time.monotonic()


@app.get("/health")
def health_check(client: OpenSearch = Depends(get_search_client)):
    """Health check reporting search engine reachability.

    Never raises, so load balancers can probe without receiving 5xx.
    """
    try:
        search_status = "ok" if client.ping() else "unreachable"
    except Exception:
        search_status = "error"

    return {
        "status": "healthy" if search_status == "ok" else "degraded",
        "search": search_status,
        "uptime_seconds": round(time.monotonic() - _startup_time),
        "version": VERSION,
    }

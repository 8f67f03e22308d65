"""Shared FastAPI dependencies."""

from functools import lru_cache

from fastapi import Depends
from opensearchpy import OpenSearch
from sqlalchemy.orm import Session

from ..core.config import Settings, settings
from ..core.search_client import create_search_client
from ..database import get_db
from ..indices import IndexRegistry, index_registry
from ..services.preview_service import PreviewService
from ..services.preview_store import PreviewStore


def get_settings() -> Settings:
    return settings


@lru_cache(maxsize=1)
def _search_client() -> OpenSearch:
    return create_search_client(settings)


def get_search_client() -> OpenSearch:
    """Process-wide search client (connection pooling lives in the client)."""
    return _search_client()


def get_registry() -> IndexRegistry:
    return index_registry


def get_preview_service(
    registry: IndexRegistry = Depends(get_registry),
    client: OpenSearch = Depends(get_search_client),
    app_settings: Settings = Depends(get_settings),
) -> PreviewService:
    return PreviewService(registry, client, app_settings)


def get_preview_store(
    db: Session = Depends(get_db),
    app_settings: Settings = Depends(get_settings),
) -> PreviewStore:
    return PreviewStore(db, app_settings)

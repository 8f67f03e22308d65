"""Shared test fixtures for the preview service test suite.

Tests run against an in-memory SQLite database and ``FakeSearchClient``, an
in-process stand-in for the search engine that records every call.
"""

import os

# Configure the app before any imports read the settings.
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["LOG_FORMAT"] = "text"
os.environ["FRONTEND_BASE_URL"] = "https://front.example.com/"
os.environ["PREVIEW_EXPIRE"] = "60"
os.environ.pop("PREVIEW_INDEX_PREFIX", None)

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from opensearchpy.exceptions import NotFoundError, TransportError

from search_preview.api.deps import get_search_client
from search_preview.core.config import Settings
from search_preview.database import SessionLocal, init_db
from search_preview.indices import IndexPlugin, IndexRegistry
from search_preview.main import app
from search_preview.models import Entity, PreviewHandle


class _FakeIndices:
    def __init__(self, client: "FakeSearchClient"):
        self._client = client

    def exists(self, index: str) -> bool:
        self._client.calls.append(("indices.exists", index))
        return index in self._client.documents

    def create(self, index: str, body: Optional[dict] = None) -> dict:
        self._client.calls.append(("indices.create", index))
        if self._client.fail_on == "indices.create":
            raise self._client.error
        self._client.documents.setdefault(index, {})
        self._client.created[index] = body or {}
        return {"acknowledged": True, "index": index}

    def delete(self, index: str, ignore_unavailable: bool = False) -> dict:
        self._client.calls.append(("indices.delete", index))
        self._client.delete_calls.append(index.split(","))
        if len(self._client.delete_calls) in self._client.failing_delete_calls:
            raise self._client.error
        missing = [name for name in index.split(",") if name not in self._client.documents]
        if missing and not ignore_unavailable:
            raise NotFoundError(404, "index_not_found_exception", {"index": missing[0]})
        for name in index.split(","):
            self._client.documents.pop(name, None)
        return {"acknowledged": True}


class _FakeCat:
    def __init__(self, client: "FakeSearchClient"):
        self._client = client

    def indices(self, index: str, **params: Any) -> List[dict]:
        self._client.calls.append(("cat.indices", index))
        self._client.cat_params = dict(params, index=index)
        if self._client.fail_on == "cat.indices":
            raise self._client.error
        return list(self._client.cat_rows)


class FakeSearchClient:
    """Records search engine calls and keeps documents in memory.

    ``fail_on`` names one operation that raises ``error``;
    ``failing_delete_calls`` holds 1-based numbers of delete calls that fail.
    """

    def __init__(self):
        self.documents: Dict[str, Dict[str, dict]] = {}
        self.created: Dict[str, dict] = {}
        self.calls: List[tuple] = []
        self.index_params: List[dict] = []
        self.delete_calls: List[List[str]] = []
        self.failing_delete_calls: set = set()
        self.cat_rows: List[dict] = []
        self.cat_params: Dict[str, Any] = {}
        self.fail_on: Optional[str] = None
        self.drop_documents = False
        self.error: Exception = TransportError(500, "internal_error", {})
        self.indices = _FakeIndices(self)
        self.cat = _FakeCat(self)

    def index(self, index: str, id: str, body: dict, **params: Any) -> dict:
        self.calls.append(("index", index))
        self.index_params.append(dict(params, index=index, id=id, body=body))
        if self.fail_on == "index":
            raise self.error
        if not self.drop_documents:
            self.documents.setdefault(index, {})[str(id)] = body
        return {"_index": index, "_id": str(id), "result": "created"}

    def get(self, index: str, id: str) -> dict:
        self.calls.append(("get", index))
        if self.fail_on == "get":
            raise self.error
        source = self.documents.get(index, {}).get(str(id))
        if source is None:
            raise NotFoundError(404, "not_found", {"_index": index, "_id": str(id), "found": False})
        return {"_index": index, "_id": str(id), "found": True, "_source": source}

    def ping(self) -> bool:
        return True


class ArticleIndex(IndexPlugin):
    """Test plugin indexing entity fields as they are."""

    def serialize(self, entity, context=None):
        document = dict(entity.fields)
        document.update({"id": entity.id, "uuid": entity.uuid, "title": entity.label})
        return document


@pytest.fixture()
def search_client() -> FakeSearchClient:
    return FakeSearchClient()


@pytest.fixture()
def test_settings() -> Settings:
    return Settings(
        preview_expire=60,
        frontend_base_url="https://front.example.com",
        database_url="sqlite:///:memory:",
    )


@pytest.fixture()
def registry() -> IndexRegistry:
    """Registry with one previewable article index."""
    reg = IndexRegistry()
    reg.register(
        "article",
        index_name="articles",
        entity_type="node",
        bundle="article",
        preview={
            "default": {"path": "/articles/{slug}"},
            "landing-page": {"path": "//{_index}/{_id}"},
        },
    )(ArticleIndex)
    return reg


@pytest.fixture(autouse=True)
def _clean_tables():
    """Empty the preview handle table before each test."""
    init_db()
    db = SessionLocal()
    try:
        db.query(PreviewHandle).delete()
        db.commit()
    finally:
        db.close()
    yield


@pytest.fixture()
def db():
    """Per-test database session."""
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture()
def client(search_client):
    """FastAPI TestClient using the fake search client and shipped registry."""
    app.dependency_overrides[get_search_client] = lambda: search_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_entity(**overrides) -> Entity:
    """Factory for an unsaved article."""
    values = {
        "entity_type": "node",
        "bundle": "article",
        "uuid": "5f0c3c1e-2b1f-4f57-9a4e-6f2f8f1a9b10",
        "label": "Hello world",
        "fields": {"slug": "hello-world", "body": "Draft body"},
    }
    values.update(overrides)
    return Entity(**values)

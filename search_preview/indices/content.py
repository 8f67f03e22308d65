"""Content index shipped with the service."""

from typing import Any, Dict

from ..models.entity import Entity
from .base import DEFAULT_CONTEXT, IndexingContext, IndexPlugin
from .registry import index_registry


@index_registry.register(
    "content",
    index_name="content",
    entity_type="node",
    multilingual=True,
    languages=("en",),
    preview={
        "default": {"path": "/{langcode}/{bundle}/{id}"},
        # Landing pages are rendered straight from the preview document.
        "landing-page": {"path": "/landing/{_index}/{_id}"},
    },
)
class ContentIndex(IndexPlugin):
    """Indexes content nodes of every bundle, one index per language."""

    def mappings(self) -> Dict[str, Any]:
        return {
            "properties": {
                "id": {"type": "keyword"},
                "uuid": {"type": "keyword"},
                "bundle": {"type": "keyword"},
                "langcode": {"type": "keyword"},
                "label": {"type": "text", "fields": {"raw": {"type": "keyword"}}},
                "status": {"type": "boolean"},
            }
        }

    def should_index(self, entity: Entity) -> bool:
        # Unpublished content only reaches preview indices.
        return entity.published

    def serialize(self, entity: Entity, context: IndexingContext = DEFAULT_CONTEXT) -> Dict[str, Any]:
        document: Dict[str, Any] = dict(entity.fields)
        document.update({
            "id": entity.id,
            "uuid": entity.uuid,
            "bundle": entity.bundle,
            "langcode": entity.langcode,
            "label": entity.label,
            "status": entity.published,
        })
        return document

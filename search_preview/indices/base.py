"""Index plugin base class.

An index plugin turns entities into search documents and writes them to the
index (or per-language family of indices) its definition names. The preview
service only relies on three operations: ``setup``, ``index`` and ``get``.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from opensearchpy import OpenSearch
from opensearchpy.exceptions import NotFoundError

from ..core.search_client import remote_call
from ..models.entity import Entity
from .definition import IndexDefinition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexingContext:
    """Options passed alongside an entity into an indexing call.

    ``in_preview`` marks a write made for a preview index; the entity itself
    is never flagged.
    """

    in_preview: bool = False
    refresh: Optional[str] = None


DEFAULT_CONTEXT = IndexingContext()
PREVIEW_CONTEXT = IndexingContext(in_preview=True, refresh="wait_for")


class IndexPlugin:
    """Base class for index plugins.

    Subclasses override ``serialize`` and usually ``mappings``. Construct
    plugins through ``IndexRegistry.create_instance`` so the definition
    overrides (index name, multilingual) are applied.
    """

    def __init__(self, client: OpenSearch, definition: IndexDefinition):
        self.client = client
        self.definition = definition

    @property
    def plugin_id(self) -> str:
        return self.definition.plugin_id

    def mappings(self) -> Dict[str, Any]:
        """Index mappings used by ``setup``."""
        return {}

    def index_names(self) -> List[str]:
        """All indices this plugin writes to."""
        if self.definition.multilingual:
            return [f"{self.definition.index_name}-{lang}" for lang in self.definition.languages]
        return [self.definition.index_name]

    def get_index_name(self, entity: Entity) -> str:
        """Index the entity's document lives in."""
        if self.definition.multilingual:
            return f"{self.definition.index_name}-{entity.langcode}"
        return self.definition.index_name

    def document_id(self, entity: Entity) -> str:
        return str(entity.id)

    def setup(self) -> None:
        """Create missing indices. Safe to call repeatedly."""
        for index_name in self.index_names():
            with remote_call("indices.exists", plugin_id=self.plugin_id, index_name=index_name):
                exists = self.client.indices.exists(index=index_name)
            if exists:
                continue

            body: Dict[str, Any] = {}
            mappings = self.mappings()
            if mappings:
                body["mappings"] = mappings

            with remote_call("indices.create", plugin_id=self.plugin_id, index_name=index_name):
                self.client.indices.create(index=index_name, body=body)
            logger.info(
                f"Created index {index_name}",
                extra={"plugin_id": self.plugin_id, "index_name": index_name},
            )

    def serialize(self, entity: Entity, context: IndexingContext = DEFAULT_CONTEXT) -> Dict[str, Any]:
        """Build the document source for an entity."""
        raise NotImplementedError

    def should_index(self, entity: Entity) -> bool:
        """Production filter. Preview writes are never filtered."""
        return True

    def index(self, entity: Entity, context: Optional[IndexingContext] = None) -> bool:
        """Write the entity's document.

        Returns:
            False when the entity was filtered out, True otherwise.
        """
        context = context or DEFAULT_CONTEXT

        if not context.in_preview and not self.should_index(entity):
            logger.debug(
                f"Skipping {entity.entity_type} {entity.id} for {self.plugin_id}",
                extra={"plugin_id": self.plugin_id},
            )
            return False

        index_name = self.get_index_name(entity)
        params: Dict[str, Any] = {
            "index": index_name,
            "id": self.document_id(entity),
            "body": self.serialize(entity, context),
        }
        if context.refresh:
            params["refresh"] = context.refresh

        with remote_call("index", plugin_id=self.plugin_id, index_name=index_name):
            self.client.index(**params)
        return True

    def get(self, entity: Entity) -> Optional[Dict[str, Any]]:
        """Read the entity's document back; None when it does not exist."""
        index_name = self.get_index_name(entity)
        with remote_call("get", plugin_id=self.plugin_id, index_name=index_name):
            try:
                document = self.client.get(index=index_name, id=self.document_id(entity))
            except NotFoundError:
                return None

        if not document or not document.get("found", True):
            return None
        return document

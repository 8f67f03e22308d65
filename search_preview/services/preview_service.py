"""Preview service: selects an index plugin and builds preview indices.

A preview index is a throwaway index holding exactly one document: the
in-progress entity, serialized by the same plugin that indexes it in
production. The service never deletes preview indices; that is left to
``PreviewGarbageCollector``.
"""

import logging
import uuid
from typing import Dict, Optional

from opensearchpy import OpenSearch

from ..core.config import Settings
from ..exceptions import BuildError, IndexDefinitionNotFoundError, ValidationError
from ..indices import PREVIEW_CONTEXT, IndexPlugin, IndexRegistry
from ..models.entity import Entity
from .path_resolver import PreviewPath, prepare_preview_path
from .preview_definition import CONTEXT_DEFAULT, PreviewDefinition
from .preview_record import EntityReference, PreviewRecord

# Id given to entities that have not been saved yet. A negative integer is
# accepted by both integer and keyword id fields and never matches a saved
# entity.
PREVIEW_ENTITY_ID = -1

logger = logging.getLogger(__name__)


class PreviewService:
    """Candidate selection and preview index creation.

    Args:
        registry: Index definitions to choose from.
        client: Search engine client.
        settings: Application settings (index prefix).
    """

    def __init__(self, registry: IndexRegistry, client: OpenSearch, settings: Settings):
        self.registry = registry
        self.client = client
        self.settings = settings

    def get_preview_definition(self, plugin_id: str) -> Optional[PreviewDefinition]:
        """Preview definition of a plugin, or None if it cannot preview."""
        try:
            definition = self.registry.get_definition(plugin_id)
            if definition.preview is not None:
                return PreviewDefinition(plugin_id, definition.preview)
        except (IndexDefinitionNotFoundError, ValidationError) as e:
            logger.error(e.message, extra={"plugin_id": plugin_id})
        return None

    def select_candidates(self, entity: Entity, context: str = CONTEXT_DEFAULT) -> Dict[str, PreviewDefinition]:
        """Preview definitions able to preview *entity* in *context*.

        Returns:
            Definitions keyed by plugin id, in registry order. An empty dict
            means the entity cannot be previewed.
        """
        result: Dict[str, PreviewDefinition] = {}

        for plugin_id, definition in self.registry.get_definitions().items():
            if definition.preview is None:
                continue
            if definition.entity_type != entity.entity_type:
                continue
            if entity.bundle and definition.bundle and definition.bundle != entity.bundle:
                continue

            # A broken preview block only removes its own plugin.
            try:
                preview_definition = PreviewDefinition(plugin_id, definition.preview)
            except ValidationError as e:
                logger.error(e.message, extra={"plugin_id": plugin_id})
                continue

            if context in preview_definition.contexts:
                result[plugin_id] = preview_definition

        return result

    def supports_preview(self, entity: Entity, context: str = CONTEXT_DEFAULT) -> bool:
        return bool(self.select_candidates(entity, context))

    def generate_preview_hash(self) -> str:
        return str(uuid.uuid4())

    def get_preview_index_prefix(self) -> str:
        return self.settings.preview_index_prefix

    def get_preview_index_name(self, preview_hash: str) -> str:
        return f"{self.get_preview_index_prefix()}-{preview_hash}"

    def get_preview_plugin_instance(self, plugin_id: str, index_name: str) -> IndexPlugin:
        """Plugin instance writing to *index_name* instead of its own index.

        Preview indices are single indices, so multilingual index creation is
        switched off.
        """
        return self.registry.create_instance(
            plugin_id,
            self.client,
            index_name=index_name,
            multilingual=False,
        )

    def prepare_entity(self, entity: Entity) -> Entity:
        """Copy of *entity* ready for preview indexing."""
        if entity.is_new:
            return entity.with_id(PREVIEW_ENTITY_ID)
        return entity

    def build(
        self,
        entity: Entity,
        preview_definition: PreviewDefinition,
        context: str = CONTEXT_DEFAULT,
    ) -> PreviewRecord:
        """Create a preview index holding *entity* and resolve its preview path.

        Three search engine round trips at least: setup, index, get. A
        failure after setup leaves an index behind for the garbage collector.

        Raises:
            BuildError: If the document cannot be read back or the path
                cannot be resolved.
            RemoteError: If a search engine call fails.
        """
        plugin_id = preview_definition.plugin_id

        template = preview_definition.get_path(context)
        if template is None:
            raise BuildError(
                f"Preview context '{context}' is not defined",
                plugin_id=plugin_id,
            )

        index_name = self.get_preview_index_name(self.generate_preview_hash())
        plugin = self.get_preview_plugin_instance(plugin_id, index_name)

        plugin.setup()

        prepared = self.prepare_entity(entity)
        plugin.index(prepared, PREVIEW_CONTEXT)

        document = plugin.get(prepared)
        if not document:
            logger.error(
                "Preview document missing after indexing",
                extra={"plugin_id": plugin_id, "index_name": index_name},
            )
            raise BuildError(
                "Entity could not be serialized",
                plugin_id=plugin_id,
                index_name=index_name,
            )

        try:
            path = PreviewPath(prepare_preview_path(template, document))
        except BuildError as e:
            e.details.update({"plugin_id": plugin_id, "index_name": index_name})
            logger.error(e.message, extra=e.details)
            raise

        logger.info(
            f"Built preview for {entity.entity_type} {entity.uuid}",
            extra={"plugin_id": plugin_id, "index_name": index_name, "context": context},
        )

        return PreviewRecord(
            entity=EntityReference.from_entity(prepared),
            path=path,
            index_name=document["_index"],
            document_id=str(document["_id"]),
        )

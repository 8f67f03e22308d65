"""Index definition registry.

Maps plugin ids to their definition and to the constructor that builds the
plugin. Constructors are registered together with the definition, either
through the ``register`` class decorator or ``add``.
"""

from typing import Any, Callable, Dict, Iterable, Optional

from opensearchpy import OpenSearch

from ..exceptions import IndexDefinitionNotFoundError
from .base import IndexPlugin
from .definition import IndexDefinition

PluginFactory = Callable[[OpenSearch, IndexDefinition], IndexPlugin]


class IndexRegistry:
    """Registry of index definitions and plugin constructors."""

    def __init__(self):
        self._definitions: Dict[str, IndexDefinition] = {}
        self._factories: Dict[str, PluginFactory] = {}

    def add(self, definition: IndexDefinition, factory: PluginFactory) -> None:
        if definition.plugin_id in self._definitions:
            raise ValueError(f"Index plugin already registered: {definition.plugin_id}")
        self._definitions[definition.plugin_id] = definition
        self._factories[definition.plugin_id] = factory

    def register(
        self,
        plugin_id: str,
        *,
        index_name: str,
        entity_type: str,
        bundle: Optional[str] = None,
        preview: Optional[Dict[str, Any]] = None,
        multilingual: bool = False,
        languages: Iterable[str] = (),
    ) -> Callable[[type], type]:
        """Class decorator registering an IndexPlugin subclass.

        Example::

            @index_registry.register(
                "article",
                index_name="articles",
                entity_type="node",
                bundle="article",
                preview={"default": {"path": "/articles/{slug}"}},
            )
            class ArticleIndex(IndexPlugin):
                ...
        """
        definition = IndexDefinition(
            plugin_id=plugin_id,
            index_name=index_name,
            entity_type=entity_type,
            bundle=bundle,
            preview=preview,
            multilingual=multilingual,
            languages=tuple(languages),
        )

        def decorator(plugin_class: type) -> type:
            self.add(definition, plugin_class)
            return plugin_class

        return decorator

    def get_definition(self, plugin_id: str) -> IndexDefinition:
        """Get a definition by plugin id. Raises IndexDefinitionNotFoundError if missing."""
        try:
            return self._definitions[plugin_id]
        except KeyError:
            raise IndexDefinitionNotFoundError(plugin_id) from None

    def get_definitions(self) -> Dict[str, IndexDefinition]:
        """All definitions keyed by plugin id, in registration order."""
        return dict(self._definitions)

    def create_instance(
        self,
        plugin_id: str,
        client: OpenSearch,
        *,
        index_name: Optional[str] = None,
        multilingual: Optional[bool] = None,
    ) -> IndexPlugin:
        """Build a plugin, optionally bound to another index name.

        Args:
            plugin_id: Registered plugin id.
            client: Search engine client the plugin writes through.
            index_name: Replaces the definition's index name.
            multilingual: Replaces the definition's multilingual flag.
        """
        definition = self.get_definition(plugin_id)

        changes: Dict[str, Any] = {}
        if index_name is not None:
            changes["index_name"] = index_name
        if multilingual is not None:
            changes["multilingual"] = multilingual
        if changes:
            definition = definition.override(**changes)

        return self._factories[plugin_id](client, definition)


# Registry holding the index plugins shipped with the service.
index_registry = IndexRegistry()

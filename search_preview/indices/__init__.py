"""Index plugins and the registry they are declared in."""

from .base import IndexingContext, IndexPlugin, PREVIEW_CONTEXT
from .definition import IndexDefinition
from .registry import IndexRegistry, index_registry
from . import content  # noqa: F401  registers the shipped plugins

__all__ = [
    "IndexDefinition",
    "IndexingContext",
    "IndexPlugin",
    "IndexRegistry",
    "PREVIEW_CONTEXT",
    "index_registry",
]

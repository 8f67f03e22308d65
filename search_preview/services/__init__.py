"""Preview services."""

from .garbage_collector import PreviewGarbageCollector
from .preview_definition import CONTEXT_DEFAULT, PreviewDefinition
from .preview_record import EntityReference, PreviewRecord
from .preview_service import PreviewService
from .preview_store import PreviewStore

__all__ = [
    "CONTEXT_DEFAULT",
    "EntityReference",
    "PreviewDefinition",
    "PreviewGarbageCollector",
    "PreviewRecord",
    "PreviewService",
    "PreviewStore",
]

"""Domain and database models."""

from .entity import Entity, EntityId
from .preview_handle import PreviewHandle

__all__ = ["Entity", "EntityId", "PreviewHandle"]

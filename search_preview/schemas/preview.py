"""Preview request and response schemas."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union

from ..models.entity import Entity
from ..services.preview_definition import CONTEXT_DEFAULT


class EntityPayload(BaseModel):
    """Entity being edited, as submitted by the editor's form."""
    entity_type: str = Field(..., min_length=1)
    uuid: str = Field(..., min_length=1)
    bundle: Optional[str] = None
    id: Optional[Union[int, str]] = None
    label: str = ""
    langcode: str = "en"
    published: bool = False
    fields: Dict[str, Any] = Field(default_factory=dict)

    def to_entity(self) -> Entity:
        return Entity(
            entity_type=self.entity_type,
            uuid=self.uuid,
            bundle=self.bundle,
            id=self.id,
            label=self.label,
            langcode=self.langcode,
            published=self.published,
            fields=dict(self.fields),
        )


class PreviewCreate(BaseModel):
    """Request to build a preview."""
    entity: EntityPayload
    context: str = CONTEXT_DEFAULT


class PreviewResponse(BaseModel):
    """Built preview."""
    handle: str
    preview_url: str
    path: str
    index_name: str
    document_id: str
    plugin_id: str


class CandidatesResponse(BaseModel):
    """Index plugins able to preview an entity."""
    context: str
    plugin_ids: List[str]

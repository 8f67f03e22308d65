"""Result of a preview build."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..models.entity import Entity, EntityId
from .path_resolver import PreviewPath


@dataclass(frozen=True)
class EntityReference:
    """Identity of the previewed entity."""

    entity_type: str
    uuid: str
    bundle: Optional[str] = None
    id: Optional[EntityId] = None
    label: str = ""

    @classmethod
    def from_entity(cls, entity: Entity) -> "EntityReference":
        return cls(
            entity_type=entity.entity_type,
            uuid=entity.uuid,
            bundle=entity.bundle,
            id=entity.id,
            label=entity.label,
        )


@dataclass(frozen=True)
class PreviewRecord:
    """Built preview: which entity, where to view it and where it is indexed."""

    entity: EntityReference
    path: PreviewPath
    index_name: str
    document_id: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entity": {
                "entity_type": self.entity.entity_type,
                "uuid": self.entity.uuid,
                "bundle": self.entity.bundle,
                "id": self.entity.id,
                "label": self.entity.label,
            },
            "path": self.path.path,
            "max_age": self.path.max_age,
            "index_name": self.index_name,
            "document_id": self.document_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PreviewRecord":
        return cls(
            entity=EntityReference(**data["entity"]),
            path=PreviewPath(data["path"], data.get("max_age", 0)),
            index_name=data["index_name"],
            document_id=data["document_id"],
        )

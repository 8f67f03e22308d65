"""Content entity passed in for previewing."""

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

EntityId = Union[int, str]


@dataclass(frozen=True)
class Entity:
    """In-progress content item, identified by type, optional bundle and id.

    ``id`` is ``None`` until the entity has been saved.
    """

    entity_type: str
    uuid: str
    bundle: Optional[str] = None
    id: Optional[EntityId] = None
    label: str = ""
    langcode: str = "en"
    published: bool = False
    fields: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_new(self) -> bool:
        return self.id is None

    def with_id(self, new_id: EntityId) -> "Entity":
        """Return a copy carrying another id."""
        return dataclasses.replace(self, id=new_id)

"""Index definition: the static description of an index plugin."""

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class IndexDefinition:
    """What an index plugin indexes and where.

    ``preview`` maps preview context names to ``{"path": template}``. It is
    kept as declared; ``PreviewDefinition`` validates it.
    """

    plugin_id: str
    index_name: str
    entity_type: str
    bundle: Optional[str] = None
    preview: Optional[Dict[str, Any]] = None
    multilingual: bool = False
    languages: Tuple[str, ...] = ()

    def override(self, **changes: Any) -> "IndexDefinition":
        """Return a copy with some attributes replaced."""
        return dataclasses.replace(self, **changes)

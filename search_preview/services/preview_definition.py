"""Preview definition of an index plugin.

Index plugins that support previewing declare a ``preview`` block::

    preview = {
        "<context>": {"path": "<path template>"},
    }

The context key describes what the preview URL shows in the front-end
application, e.g. ``"default"`` or ``"landing-page"``.
"""

import copy
from typing import Any, Dict, List, Mapping, Optional

from ..exceptions import ValidationError

# Preview context used when the caller does not ask for another one.
CONTEXT_DEFAULT = "default"

_REQUIRED_FIELDS = ("path",)


class PreviewDefinition:
    """Validated, read-only view of one index plugin's preview block."""

    def __init__(self, plugin_id: str, definition: Mapping[str, Any]):
        self.validate(definition, plugin_id)

        self._plugin_id = plugin_id
        self._definition: Dict[str, Dict[str, Any]] = copy.deepcopy(dict(definition))

    @staticmethod
    def validate(definition: Any, plugin_id: Optional[str] = None) -> None:
        """Check the preview block.

        Raises:
            ValidationError: If the block is empty or a context lacks a path.
        """
        if not definition or not isinstance(definition, Mapping):
            raise ValidationError("Preview definition is empty.", plugin_id=plugin_id)

        for context, context_settings in definition.items():
            for field in _REQUIRED_FIELDS:
                value = context_settings.get(field) if isinstance(context_settings, Mapping) else None
                if not value or not isinstance(value, str):
                    raise ValidationError(
                        f'Field "{field}" is missing in preview context "{context}".',
                        plugin_id=plugin_id,
                        context=str(context),
                    )

    @property
    def plugin_id(self) -> str:
        return self._plugin_id

    @property
    def definition(self) -> Dict[str, Dict[str, Any]]:
        """Copy of the preview block."""
        return copy.deepcopy(self._definition)

    @property
    def contexts(self) -> List[str]:
        return list(self._definition)

    def get_path(self, context: str = CONTEXT_DEFAULT) -> Optional[str]:
        """Path template for a context, or None if the context is not declared."""
        return self._definition.get(context, {}).get("path")

    def __repr__(self) -> str:
        return f"PreviewDefinition(plugin_id={self._plugin_id!r}, contexts={self.contexts!r})"

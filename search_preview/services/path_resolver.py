"""Preview path resolution.

Path templates contain ``{name}`` placeholders that are filled from the
indexed preview document: its ``_source`` fields plus ``_index`` and ``_id``.
"""

import re
from dataclasses import dataclass
from typing import Any, Mapping

from ..exceptions import UnresolvedPlaceholderError

_PLACEHOLDER = re.compile(r"{([_\-\w\d]*)}")
_LEADING_SLASHES = re.compile(r"^/+")

_SCALAR_TYPES = (str, int, float)


@dataclass(frozen=True)
class PreviewPath:
    """Front-end relative preview path.

    ``max_age`` is the cache lifetime any response serving this path may
    declare; previews are never cached.
    """

    path: str
    max_age: int = 0

    def to_url(self, base_url: str) -> str:
        """Absolute front-end URL for this path."""
        return base_url.rstrip("/") + self.path

    def __str__(self) -> str:
        return self.path


def replace_placeholders(template: str, data: Mapping[str, Any]) -> str:
    """Replace every ``{name}`` placeholder in *template* with ``data[name]``.

    Raises:
        UnresolvedPlaceholderError: If a placeholder has no scalar value.
    """

    def _substitute(match: "re.Match[str]") -> str:
        key = match.group(1)
        value = data.get(key)
        # bool is an int subclass but "True" is never a useful path segment.
        if value is None or isinstance(value, bool) or not isinstance(value, _SCALAR_TYPES):
            raise UnresolvedPlaceholderError(key, template)
        return str(value)

    return _PLACEHOLDER.sub(_substitute, template)


def prepare_preview_path(template: str, document: Mapping[str, Any]) -> str:
    """Resolve *template* against a search document.

    The result always starts with exactly one slash.
    """
    placeholders = dict(document.get("_source") or {})
    placeholders["_index"] = document.get("_index")
    placeholders["_id"] = document.get("_id")

    preview_path = "/" + replace_placeholders(template, placeholders)

    return _LEADING_SLASHES.sub("/", preview_path)


def resolve(template: str, document: Mapping[str, Any]) -> PreviewPath:
    """Resolve *template* into a PreviewPath.

    Accepts either a raw search document (with ``_source``) or a flat
    mapping of field values that already carries ``_index`` and ``_id``.
    """
    if "_source" not in document:
        document = {
            "_source": document,
            "_index": document.get("_index"),
            "_id": document.get("_id"),
        }
    return PreviewPath(prepare_preview_path(template, document))

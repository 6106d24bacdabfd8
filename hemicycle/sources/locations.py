"""Location templates: symbolic keys such as ``k.mp`` mapped to URLs or local paths."""

import json
import logging
import re
from pathlib import Path
from typing import Any, Mapping

from hemicycle.config import settings
from hemicycle.errors import MissingPlaceholderError, NotFoundError

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"{([A-Za-z]+)}")


class LocationResolver:
    """Resolve dotted keys to concrete locations.

    ``templates`` is keyed by parliament (``"k"`` for the Chamber, ``"s"`` for
    the Senate). A ``baseUrl`` entry of a parliament is prepended to every
    template below it, recursively, when the resolver is built.
    """

    def __init__(self, templates: Mapping[str, Any]):
        self._templates: dict[str, Any] = {
            key: _prepend_base_url(parliament) if isinstance(parliament, Mapping) else parliament
            for key, parliament in templates.items()
        }

    @classmethod
    def from_file(cls, path: str | Path) -> "LocationResolver":
        """Load templates from a JSON file shaped as ``{"parliaments": {...}}``."""
        with Path(path).open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        return cls(data["parliaments"])

    def resolve(self, key: str, values: Mapping[str, Any] | None = None) -> str:
        """Return the location for ``key`` with its placeholders filled from ``values``.

        Raises:
            NotFoundError: if ``key`` does not lead to a template string.
            MissingPlaceholderError: if a placeholder has no value.
        """
        template = self._lookup(key)
        values = values or {}

        for placeholder in _PLACEHOLDER.findall(template):
            value = values.get(placeholder)
            if value is None:
                raise MissingPlaceholderError(key, placeholder)
            template = template.replace(f"{{{placeholder}}}", str(value))

        return template

    def _lookup(self, key: str) -> str:
        node: Any = self._templates
        for segment in key.split("."):
            if not isinstance(node, Mapping) or segment not in node:
                raise NotFoundError(key)
            node = node[segment]

        if not isinstance(node, str) or not node:
            raise NotFoundError(key)
        return node


def _prepend_base_url(patterns: Mapping[str, Any], base_url: str = "") -> dict[str, Any]:
    patterns = dict(patterns)
    # Nested groups may extend the prefix of their parent
    base_url += patterns.pop("baseUrl", "")

    for key, pattern in patterns.items():
        if isinstance(pattern, Mapping):
            patterns[key] = _prepend_base_url(pattern, base_url)
        else:
            patterns[key] = f"{base_url}{pattern}"

    return patterns


def load_default_resolver() -> LocationResolver:
    """Build a resolver from the configured locations file."""
    logger.debug(f"Loading location templates from {settings.locations_file}")
    return LocationResolver.from_file(settings.locations_file)

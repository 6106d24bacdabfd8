"""Declarative reshaping of a labelled tree.

A mapping is plain data::

    {
        "title": {
            "destination": "meta",         # where the group is written
            "source": None,                # optional dot-path of the input
            "each": False,                 # apply the fields to every item of the source list
            "fields": {
                "intitule.intitule-complet": "title",
                "type.code": {"destination": "dossierType", "dictionary": "dossierTypes"},
                "date-de-depot": {"destination": "dates.submission", "modifier": "dateToIso"},
            },
        },
    }

A bare string field is shorthand for ``{"destination": ...}``. For each field
the value at the source dot-path is read, passed through the modifier and then
looked up in the dictionary, and written at the destination dot-path.
"""

import logging
from collections.abc import Hashable
from typing import Any, Callable, Mapping

from hemicycle.errors import DictionaryMissError, PathConflictError, UnknownModifierError

logger = logging.getLogger(__name__)


def get_by_dot_path(tree: Any, path: str) -> Any:
    """Read a value by dot-path; numeric segments index lists.

    Any missing segment gives ``None``.
    """
    node = tree
    for segment in path.split("."):
        if isinstance(node, Mapping):
            if segment not in node:
                return None
            node = node[segment]
        elif isinstance(node, list) and segment.isdigit():
            index = int(segment)
            if index >= len(node):
                return None
            node = node[index]
        else:
            return None
    return node


def set_by_dot_path(tree: dict[str, Any], path: str, value: Any) -> None:
    """Write a value by dot-path, creating intermediate dicts.

    Raises:
        PathConflictError: if a segment other than the last holds a non-dict value.
    """
    segments = path.split(".")
    node = tree
    for depth, segment in enumerate(segments[:-1]):
        child = node.setdefault(segment, {})
        if not isinstance(child, dict):
            prefix = ".".join(segments[: depth + 1])
            raise PathConflictError(f"Cannot write [{path}]: [{prefix}] already holds {child!r}")
        node = child
    node[segments[-1]] = value


class Transformer:
    """Apply a mapping to a labelled tree.

    Args:
        mapping: Group name to group definition, see the module docstring.
        dictionaries: Static lookup tables referenced by name from fields.
        modifiers: Value functions referenced by name from fields.
    """

    def __init__(
        self,
        mapping: Mapping[str, Mapping[str, Any]],
        dictionaries: Mapping[str, Mapping[str, Any]] | None = None,
        modifiers: Mapping[str, Callable[[Any], Any]] | None = None,
    ):
        self.mapping = mapping
        self.dictionaries = dictionaries or {}
        self.modifiers = modifiers or {}

    def transform(self, source: Mapping[str, Any]) -> dict[str, Any]:
        result: dict[str, Any] = {}

        for name, group in self.mapping.items():
            scope = get_by_dot_path(source, group["source"]) if group.get("source") else source
            destination = group.get("destination", name)

            if group.get("each"):
                items = scope if isinstance(scope, list) else []
                set_by_dot_path(result, destination, [self.apply_fields(item, group["fields"]) for item in items])
            else:
                fields = self.apply_fields(scope or {}, group["fields"])
                current = get_by_dot_path(result, destination)
                if isinstance(current, dict):
                    current.update(fields)
                else:
                    set_by_dot_path(result, destination, fields)

        return result

    def apply_fields(self, source: Any, fields: Mapping[str, Any]) -> dict[str, Any]:
        """Build one output mapping from ``fields`` entries read in ``source``."""
        output: dict[str, Any] = {}
        for source_path, entry in fields.items():
            if isinstance(entry, str):
                entry = {"destination": entry}
            value = self.transform_value(get_by_dot_path(source, source_path), entry)
            set_by_dot_path(output, entry["destination"], value)
        return output

    def transform_value(self, value: Any, entry: Mapping[str, Any]) -> Any:
        """Run a value through the entry's modifier then its dictionary.

        Absent values stay ``None``: neither step applies to them, but the
        names of the modifier and dictionary are still checked.
        """
        modifier = None
        if modifier_name := entry.get("modifier"):
            modifier = self.modifiers.get(modifier_name)
            if modifier is None:
                raise UnknownModifierError(f"Unknown modifier [{modifier_name}]")

        dictionary = None
        if dictionary_name := entry.get("dictionary"):
            dictionary = self.dictionaries.get(dictionary_name)
            if dictionary is None:
                raise DictionaryMissError(dictionary_name, value)

        if value is None:
            return None

        if modifier is not None:
            value = modifier(value)

        if dictionary is not None:
            # A repeated label reads as a list, which no dictionary key matches
            if not isinstance(value, Hashable) or value not in dictionary:
                logger.error(f"No entry for {value!r} in dictionary {dictionary_name}")
                raise DictionaryMissError(dictionary_name, value)
            value = dictionary[value]

        return value

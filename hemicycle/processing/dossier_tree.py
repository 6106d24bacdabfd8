"""Convert the dossier XML tree into nested dicts and lists."""

import xml.etree.ElementTree as ET
from typing import Any

from hemicycle.processing.dossier_html import ROOT_TAG, VALUE_ATTRIBUTE

PATH_SEPARATOR = " > "

# Paths whose values are always lists, even with a single occurrence
PLURAL_PATHS = (
    # Main document(s)
    "chambre-etou-senat > document-principal",
    # Authors of a main document
    "chambre-etou-senat > document-principal > auteur",
    # Following documents
    "chambre-etou-senat > document-principal > sous-documents > documents-suivants",
    # Linked dossiers
    "chambre-etou-senat > document-principal > documents-jointslies",
    # Authors of following documents
    "chambre-etou-senat > document-principal > sous-documents > documents-suivants > auteurs",
    "toutes-les-commissions > commission",
    # Reporters inside a committee
    "toutes-les-commissions > commission > rapporteur",
    # Committee agenda items
    "toutes-les-commissions > commission > calendrier",
    "descripteurs-mots-cles > descripteurs-eurovoc",
)


def _anchor(path: str) -> str:
    if path == ROOT_TAG or path.startswith(f"{ROOT_TAG}{PATH_SEPARATOR}"):
        return path
    return f"{ROOT_TAG}{PATH_SEPARATOR}{path}"


class XmlToTree:
    """Turn an element tree into the labelled tree read by the transformer.

    An element becomes a key. Its value is the conversion of its children,
    or its value attribute for a leaf. When an element has siblings with the
    same tag, or its path is one of ``plural_paths``, values are collected in
    a list under that key.
    """

    def __init__(self, plural_paths: tuple[str, ...] = PLURAL_PATHS):
        self.plural_paths = frozenset(_anchor(path) for path in plural_paths)

    def convert(self, root: ET.Element) -> dict[str, Any]:
        return self._convert_children(root, (root.tag,))

    def _convert_children(self, element: ET.Element, path: tuple[str, ...]) -> dict[str, Any]:
        tree: dict[str, Any] = {}
        children = list(element)
        tags = [child.tag for child in children]

        for child in children:
            child_path = (*path, child.tag)
            if len(child):
                content: Any = self._convert_children(child, child_path)
            else:
                content = child.get(VALUE_ATTRIBUTE, "")

            if tags.count(child.tag) > 1 or PATH_SEPARATOR.join(child_path) in self.plural_paths:
                tree.setdefault(child.tag, []).append(content)
            else:
                tree[child.tag] = content

        return tree


def xml_to_tree(xml: str | ET.Element) -> dict[str, Any]:
    """Convert an XML string or element to the labelled tree, without the root element."""
    root = ET.fromstring(xml) if isinstance(xml, str) else xml
    return XmlToTree().convert(root)

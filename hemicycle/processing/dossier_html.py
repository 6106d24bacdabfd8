"""Convert the Chamber's dossier page into an XML tree.

The page is one long table; a row's nesting level is only shown by the number
of ``puce`` bullet images in its first cell. Comparing each row's depth with
the next one tells whether the row opens a group or is a leaf.
"""

import logging
import xml.etree.ElementTree as ET

from bs4 import BeautifulSoup, Tag

from hemicycle.utils.text import normalize_whitespace, slugify

logger = logging.getLogger(__name__)

ROOT_TAG = "root"
VALUE_ATTRIBUTE = "v"
DEPTH_MARKER_CLASS = "puce"


def row_depth(row: Tag | None) -> int:
    """Count the depth markers of a row's first cell; a missing row has depth 0."""
    if row is None:
        return 0
    cells = row.find_all(["td", "th"], recursive=False)
    if not cells:
        return 0
    first = cells[0]
    markers = first.find_all(class_=DEPTH_MARKER_CLASS)
    return len(markers) + (1 if DEPTH_MARKER_CLASS in (first.get("class") or []) else 0)


def _parse_row(row: Tag) -> tuple[str, str]:
    cells = row.find_all(["td", "th"], recursive=False)
    if not cells:
        return "", ""
    key = slugify(cells[0].get_text())
    value = normalize_whitespace(cells[-1].get_text())
    return key, value


def to_element(html: str) -> ET.Element:
    """Build the XML tree of a dossier page.

    Rows whose label slugifies to an empty string cannot be element names
    and are skipped; their descendants go to the nearest open ancestor.
    """
    soup = BeautifulSoup(html, "lxml")
    root = ET.Element(ROOT_TAG)
    open_elements = [root]

    for row in soup.select("table > tr"):
        key, value = _parse_row(row)
        depth = row_depth(row)
        next_depth = row_depth(row.find_next_sibling("tr"))

        # At most one open element per level above this row
        del open_elements[depth + 1 :]
        parent = open_elements[-1]
        if not key:
            logger.debug("Skipping dossier row without a label")
        elif next_depth > depth:
            # The value of a group lives on its descendants
            open_elements.append(ET.SubElement(parent, key))
        else:
            ET.SubElement(parent, key, {VALUE_ATTRIBUTE: value})

    return root


def convert(html: str) -> str:
    """Return the XML document of a dossier page as a string."""
    return ET.tostring(to_element(html), encoding="unicode")

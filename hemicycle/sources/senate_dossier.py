"""Senate dossier scraper.

A dossier page is a stack of tables: metadata, keywords, documents, history
and status. Both the French and Dutch pages are fetched; their tables line up
row for row, so Dutch texts are read at the same positions.
"""

import logging
import re
from html import unescape
from typing import Any, Mapping

from bs4 import BeautifulSoup, Tag

from hemicycle.errors import DictionaryMissError, InvalidOptionsError, ScrapeStructureError
from hemicycle.models import (
    DocumentLink,
    DossierAuthor,
    DossierMeta,
    HistoryItem,
    SenateDocument,
    SenateDossier,
    StatusItem,
)
from hemicycle.sources.base import ProviderArguments, ScrapeOptions
from hemicycle.sources.fetcher import build_document
from hemicycle.sources.senate import SenateScraper
from hemicycle.utils.dates import parse_localized_date
from hemicycle.utils.text import match, normalize_whitespace, strip_tags

logger = logging.getLogger(__name__)

LANGUAGES = ("fr", "nl")

SENATE_URL = "http://senate.be"

DOSSIER_IDENTIFIER_PATTERN = re.compile(r"(\d+)S(\d+)")
DOCUMENT_TITLE_PATTERN = re.compile(r"(\d+-\d+(?:/\d+)?).+\((.+)\)$")
_BR = re.compile(r"<br\s*/?>", re.IGNORECASE)

DOCUMENT_TYPES = {
    "Proposition de loi": "LAW_PROPOSAL",
    "Projet de loi": "LAW_PROJECT",
    "Révision de la constitution": "CONSTITUTIONAL_REVISION",
    "Projet transmis par le Sénat": "PROJECT_SENT_BY_SENATE",
    "Amendement": "AMENDMENT",
    "Amendements": "AMENDMENTS",
    "Amendementen": "AMENDMENTS",
    "Rapport fait au nom de la commission": "COMMITTEE_REPORT",
    "Texte corrigé par la commission": "UPDATED_BY_COMMITTEE",
    "Texte adopté par la commission": "APPROVED_BY_COMMITTEE",
    "Texte adopté en séance plénière et transmis à la Chambre": "APPROVED_BY_PLENARY-SENT_TO_CHAMBER",
    "Texte adopté en séance plénière et transmis au Sénat": "APPROVED_BY_PLENARY-SENT_TO_SENATE",
    "Texte adopté en séance plénière et soumis à la sanction royale": "APPROVED_BY_PLENARY-SENT_TO_KING",
    "Liste": "LIST",
    "Avis du Conseil d'Etat": "OPINION_COUNCIL_OF_STATE",
}

PROCEDURE_TYPES = {
    "Monocamérale Sénat": "UNICAMERAL",
    "Bicaméral, initiative Sénat": "BICAMERAL-FROM-SENATE",
    "(81) Partiellement bicaméral, initiative Sénat": "PARTLY_BICAMERAL-FROM-SENATE_81",
    "(78+79+80) Procédure d'évocation (urgence)": "URGENCY_PROCEDURE_78-79-80",
    "Procédure libre": "FREE_PROCEDURE",
}


def parse_dossier_identifier(identifier: str) -> tuple[str, str]:
    """Split a ``5S1234`` identifier into legislature and dossier numbers."""
    found = match(DOSSIER_IDENTIFIER_PATTERN, identifier)
    if not found:
        raise InvalidOptionsError(f"Invalid Senate dossier identifier [{identifier}]")
    return found[1], found[2]


def _lookup(dictionary_name: str, dictionary: Mapping[str, str], value: str) -> str:
    if value not in dictionary:
        logger.error(f"No entry for {value!r} in dictionary {dictionary_name}")
        raise DictionaryMissError(dictionary_name, value)
    return dictionary[value]


def _cells(row: Tag) -> list[Tag]:
    return row.find_all(["td", "th"], recursive=False)


def _cell_text(cells: list[Tag], index: int) -> str:
    return normalize_whitespace(cells[index].get_text()) if index < len(cells) else ""


def _multiline_text(cell: Tag | None) -> str:
    """Cell text with line breaks kept as newlines."""
    if cell is None:
        return ""
    html = _BR.sub("\n", cell.decode_contents())
    return unescape(strip_tags(html)).strip()


def document_url(href: str) -> str:
    # Links to the Chamber's site are absolute; the Senate's own are relative
    if "lachambre.be" in href:
        return href
    return f"{SENATE_URL}{href}"


def parse_document_links(node: Tag) -> list[DocumentLink]:
    """Document links of a node, without duplicates and without unparseable titles."""
    links: dict[str, DocumentLink] = {}
    for anchor in node.find_all("a", href=True):
        url = document_url(anchor["href"])
        found = match(DOCUMENT_TITLE_PATTERN, anchor.get("title", "").strip())
        if not found or url in links:
            continue
        links[url] = DocumentLink(url=url, label=found[1], format=found[2].lower())
    return list(links.values())


def document_numbers(links: list[DocumentLink]) -> list[str]:
    return list(dict.fromkeys(link.label for link in links))


class DossierScraper(SenateScraper):
    """Scraper for a Senate dossier."""

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        legislature, number = parse_dossier_identifier(self._require_identifier(options))
        return ProviderArguments(
            key="s.dossier",
            values={
                "legislatureNumber": legislature,
                "dossierNumber": number,
                "lang": options.lang or "fr",
            },
        )

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> SenateDossier:
        options = ScrapeOptions.coerce(options)
        pages = {}
        for lang in LANGUAGES:
            arguments = self.provider_arguments(options.with_changes(lang=lang))
            pages[lang] = build_document(self.provider.get(arguments.key, arguments.values))

        return parse_dossier(pages["fr"], pages["nl"])


def parse_dossier(french: BeautifulSoup, dutch: BeautifulSoup) -> SenateDossier:
    """Extract a dossier from its French and Dutch pages."""
    meta = _metadata(french, dutch)
    return SenateDossier(
        meta=meta,
        keywords=_keywords({"fr": french, "nl": dutch}),
        documents=_documents(french),
        history=_HistoryParser(meta.procedure).parse(french, dutch),
        status=_status(french, dutch),
    )


# ----------------------------------------------------------------------
# Metadata and keywords
# ----------------------------------------------------------------------


def _metadata(french: BeautifulSoup, dutch: BeautifulSoup) -> DossierMeta:
    rows = french.select("table:first-child tr")
    dutch_rows = dutch.select("table:first-child tr")
    if len(rows) < 2 or len(dutch_rows) < 2:
        raise ScrapeStructureError("table:first-child tr", "dossier metadata table not found")

    # First cell of the first row holds the full number, e.g. "5-1234"
    first_cells = _cells(rows[0])
    found = match(r"(\d+)-(\d+)", str(first_cells[0]) if first_cells else "")
    if not found:
        raise ScrapeStructureError("dossier number", "no <legislature>-<number> in first row")

    return DossierMeta(
        legislature=found[1],
        number=found[2],
        title={
            "fr": normalize_whitespace(rows[1].get_text()),
            "nl": normalize_whitespace(dutch_rows[1].get_text()),
        },
        authors=_authors(rows[-1]),
        procedure=_procedure(french),
    )


def _authors(row: Tag) -> list[DossierAuthor] | None:
    authors = []
    for anchor in row.find_all("a"):
        found = match(r"ID=(\d+)", anchor.get("href"))
        if found:
            authors.append(DossierAuthor(identifier=found[1], given_name_surname=normalize_whitespace(anchor.get_text())))
    return authors or None


def _procedure(french: BeautifulSoup) -> str | None:
    cell = french.select_one("table:nth-of-type(4) tr:nth-child(3) th:nth-child(2)")
    if cell is None:
        return None
    return _lookup("procedureTypes", PROCEDURE_TYPES, normalize_whitespace(cell.get_text()))


def _keywords(pages: dict[str, BeautifulSoup]) -> dict[str, list[str]] | None:
    keywords = {}
    for lang, page in pages.items():
        cell = page.select_one("table:nth-of-type(2) td")
        if cell is None:
            return None
        # One keyword per line
        parts = _BR.split(cell.decode_contents())
        keywords[lang] = [text for part in parts if (text := normalize_whitespace(unescape(strip_tags(part))))]
    return keywords


# ----------------------------------------------------------------------
# Documents
# ----------------------------------------------------------------------


def _documents(french: BeautifulSoup) -> list[SenateDocument]:
    documents = []
    # The first row holds the column names
    for row in french.select("table:nth-of-type(3) tr:nth-child(n+2)"):
        cells = _cells(row)
        if len(cells) < 3:
            logger.debug("Skipping incomplete document row")
            continue
        links = parse_document_links(cells[0])
        numbers = document_numbers(links)
        documents.append(
            SenateDocument(
                number=numbers[0] if numbers else None,
                type=_lookup("documentTypes", DOCUMENT_TYPES, _cell_text(cells, 1)),
                date=parse_localized_date(_cell_text(cells, 2)),
                links=links,
            )
        )
    return documents


# ----------------------------------------------------------------------
# History
# ----------------------------------------------------------------------


class _HistoryParser:
    """Walk the history table and name each item's group.

    Rows with a ``bgcolor`` start a named group at the depth given by their
    colspan. Other rows are indented by the colspan of their third cell; when
    the indentation changes, the group name is the one last seen at that depth.
    """

    def __init__(self, procedure: str | None):
        self.procedure = procedure
        self.groups: dict[int, str] = {}
        self.group_name: str | None = None
        self.depth: int | None = None

    def parse(self, french: BeautifulSoup, dutch: BeautifulSoup) -> list[HistoryItem]:
        # Skip the header rows, one more when the procedure row is present
        skip = 4 if self.procedure is not None else 3
        selector = f"table:nth-of-type(4) tr:nth-child(n+{skip})"
        rows = french.select(selector)
        dutch_rows = dutch.select(selector)

        history = []
        for index, row in enumerate(rows):
            if self._starts_group(row) or len(_cells(row)) != 4:
                continue
            self._update_group(row)

            cells = _cells(row)
            dutch_cells = _cells(dutch_rows[index]) if index < len(dutch_rows) else []
            item: dict[str, Any] = {
                "group_name": self.group_name,
                "date": parse_localized_date(_cell_text(cells, 0)),
                "content_fr": _multiline_text(cells[2]),
                "content_nl": _multiline_text(dutch_cells[2] if len(dutch_cells) > 2 else None),
            }
            if links := parse_document_links(row):
                item["documents"] = document_numbers(links)
            history.append(HistoryItem(**item))

        return history

    def _starts_group(self, row: Tag) -> bool:
        if row.get("bgcolor") is None:
            return False
        name = normalize_whitespace(row.get_text())
        first = row.find("td")
        self.groups[_colspan(first)] = name
        self.group_name = name
        return True

    def _update_group(self, row: Tag) -> None:
        depth = 5 - _colspan(row.select_one("td:nth-child(3)"))
        if depth == self.depth:
            return

        self.depth = depth
        self.group_name = self.groups.get(depth)
        if depth == 1 and self.procedure is not None:
            self.group_name = self.procedure


def _colspan(cell: Tag | None) -> int:
    if cell is None:
        return 0
    value = cell.get("colspan")
    return int(value) if value and str(value).isdigit() else 0


# ----------------------------------------------------------------------
# Status
# ----------------------------------------------------------------------


def _status(french: BeautifulSoup, dutch: BeautifulSoup) -> list[StatusItem]:
    # The first two rows hold no status
    selector = "table:nth-of-type(5) tr:nth-child(n+3)"
    rows = french.select(selector)
    dutch_rows = dutch.select(selector)

    status = []
    for index, row in enumerate(rows):
        cells = _cells(row)
        dutch_cells = _cells(dutch_rows[index]) if index < len(dutch_rows) else []
        dates = [parse_localized_date(part) for part in _cell_text(cells, 2).split(",") if part.strip()]
        status.append(
            StatusItem(
                group_name=_cell_text(cells, 0),
                status_fr=_cell_text(cells, 1),
                status_nl=_cell_text(dutch_cells, 1),
                dates=dates or None,
            )
        )
    return status

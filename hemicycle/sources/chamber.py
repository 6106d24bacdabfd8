"""Chamber of Representatives (lachambre.be) scrapers.

The Chamber's pages are Latin-1 and its server rejects percent-encoded query
strings, so every scraper here fetches with query encoding disabled.
"""

import logging
import re
from typing import Any, Mapping

from bs4 import BeautifulSoup, Tag

from hemicycle.config import settings
from hemicycle.errors import InvalidOptionsError, ScrapeStructureError
from hemicycle.models import ChamberMember, Committee, CommitteeListEntry, MemberListEntry, Seat
from hemicycle.processing.dossier_html import to_element
from hemicycle.processing.dossier_mapping import dossier_transformer
from hemicycle.processing.dossier_tree import XmlToTree
from hemicycle.sources.base import BaseScraper, ProviderArguments, ScrapeOptions
from hemicycle.sources.fetcher import build_document
from hemicycle.utils.dates import extract_date
from hemicycle.utils.text import (
    decode_group_identifier,
    match,
    normalize_record,
    normalize_whitespace,
    remove_label_tags,
)

logger = logging.getLogger(__name__)

# Identifiers are digits but may contain a capital "O" standing for a zero
MEMBER_KEY_PATTERN = re.compile(r"key=([\dO]+)")
GROUP_KEY_PATTERN = re.compile(r"namegroup=([^&]+)&")
COMMITTEE_LINK_PATTERN = re.compile(r"com\.cfm\?com=(\d+)")
DOSSIER_IDENTIFIER_PATTERN = re.compile(r"(\d+)K(\d+)")

EMPTY_SEAT = "Siège non attribué"

LANGUAGES = {
    "Français": "fr",
    "Néerlandais": "nl",
}


class ChamberScraper(BaseScraper):
    """Base for Chamber scrapers."""

    encode_query = False


# ----------------------------------------------------------------------
# Members
# ----------------------------------------------------------------------


class MPScraper(ChamberScraper):
    """Scraper for the page of a member of the Chamber."""

    # Role headings of the committee section; matched by "contains", in order
    roles = {
        "president": "Président",
        "member": "Membre Effectif",
        "substitute": "Membre Suppléant",
        "nonvoter": "Membre sans voix délibérative",
    }

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        return ProviderArguments(
            key="k.mp",
            values={
                "identifier": options.identifier,
                "lang": "fr",
                "legislatureNumber": options.legislature_number or settings.default_legislature,
            },
        )

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> ChamberMember:
        options = ScrapeOptions.coerce(options)
        identifier = self._require_identifier(options)
        soup = self._fetch(options)

        name = self._select_one_or_fail(soup, "center", "full name")

        return ChamberMember(
            identifier=identifier,
            given_name_surname=normalize_whitespace(name.get_text()),
            legislatures=self._legislatures(soup),
            committees=self._committees(soup),
            **self._contact_details(soup),
            **self._parse_cv(soup),
        )

    def _legislatures(self, soup: BeautifulSoup) -> list[int]:
        legislatures = []
        for link in soup.select('[class="menu"]:nth-of-type(1) a'):
            # Links read "54e législature"; only the leading number matters
            if found := match(r"^\s*(\d+)", link.get_text()):
                legislatures.append(int(found[1]))
        return sorted(legislatures)

    def _committees(self, soup: BeautifulSoup) -> dict[str, list[str]] | None:
        committees: dict[str, list[str]] = {}
        role = None

        for node in soup.select('h5, a[href*="com.cfm?com="]'):
            if node.name == "h5":
                role = self._committee_role(node.get_text())
                continue

            if role is None:
                logger.debug(f"Committee link before any role heading: {node.get('href')}")
                continue

            # A member may hold several roles in the same committee
            if found := match(r"\d+$", node.get("href", "")):
                committees.setdefault(found[0], []).append(role)

        return committees or None

    def _committee_role(self, heading: str) -> str:
        for role, needle in self.roles.items():
            if needle in heading:
                return role
        logger.error(f"Unknown committee role heading: {heading!r}")
        raise ScrapeStructureError("committee role", f"cannot determine role from [{normalize_whitespace(heading)}]")

    def _contact_details(self, soup: BeautifulSoup) -> dict[str, Any]:
        data: dict[str, Any] = {}

        picture = soup.select_one("[alt='Picture']")
        table = picture.find_parent("table") if picture else None
        if table is None:
            logger.debug("No contact details block on member page")
            return data

        for paragraph in table.select("p"):
            html = paragraph.decode_contents()
            if "Langue:" in html:
                data["lang"] = LANGUAGES.get(_text_without_labels(html))
            elif "Adresse:" in html:
                data["address"] = _text_without_labels(html) or None
            elif "email" in html or "website" in html:
                data.update(_email_and_website(paragraph))

        return data

    def _cv_lines(self, soup: BeautifulSoup) -> list[str] | None:
        heading = soup.select_one("h4:-soup-contains('CV: ')")
        table = heading.find_parent("table") if heading else None
        paragraph = table.select_one("p") if table else None
        if paragraph is None:
            return None

        content = paragraph.get_text().strip()
        if not content:
            return None
        # Sentences are (usually) separated by runs of spaces
        return re.split(r"\s{2,}", content)

    def _parse_cv(self, soup: BeautifulSoup) -> dict[str, Any]:
        data: dict[str, Any] = {"gender": None, "party": None, "birthdate": None}

        for line in self._cv_lines(soup) or []:
            if line.startswith("Député") and data["party"] is None:
                data["party"] = _extract_party(line)

            if line.startswith(("Né", "né")) or ". Né" in line:
                data["gender"] = "f" if line.startswith(("Née ", "née ")) else "m"
                data["birthdate"] = extract_date(line)

        return data


def _text_without_labels(html: str) -> str:
    text = BeautifulSoup(remove_label_tags(html), "lxml").get_text(" ")
    return normalize_whitespace(text)


def _email_and_website(paragraph: Tag) -> dict[str, str | None]:
    data: dict[str, str | None] = {"email": None, "website": None}
    for link in paragraph.find_all("a"):
        text = link.get_text().strip()
        if text:
            data["email" if "@" in text else "website"] = text
    return data


def _extract_party(line: str) -> str | None:
    if line.startswith("Député FDF") or " FDF " in line:
        return "FDF"
    if " du Vlaams Belang" in line:
        return "Vlaams Belang"
    if found := match(r"\((.+?)\)", line):
        return found[1]
    return None


class MPListScraper(ChamberScraper):
    """Scraper for the list of members, current or of a past legislature.

    Lists of past legislatures only carry the member column.
    """

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        if options.legislature_number:
            return ProviderArguments(
                key="k.mp_list.legislature",
                values={"legislatureNumber": options.legislature_number},
            )
        return ProviderArguments(key="k.mp_list.current")

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> list[MemberListEntry]:
        options = ScrapeOptions.coerce(options)
        soup = self._fetch(options)
        historical = bool(options.legislature_number)

        members = []
        for row in soup.select('table[width="100%"] tr'):
            entry = self._parse_row(row, historical)
            if entry is not None:
                members.append(MemberListEntry(**normalize_record(entry)))

        logger.info(f"Found {len(members)} members in Chamber list")
        return members

    def _parse_row(self, row: Tag, historical: bool) -> dict[str, Any] | None:
        cells = row.find_all(["td", "th"], recursive=False)
        anchor = cells[0].find("a") if cells else None
        if anchor is None:
            return None

        found = match(MEMBER_KEY_PATTERN, anchor.get("href"))
        if not found:
            logger.debug(f"Member link without identifier: {anchor.get('href')}")
            return None

        entry: dict[str, Any] = {
            "identifier": found[1],
            "surname_given_name": anchor.get_text(),
        }
        if historical:
            return entry

        group = cells[1].find("a") if len(cells) > 1 else None
        group_key = match(GROUP_KEY_PATTERN, group.get("href")) if group else []
        entry["political_group"] = group.get_text() if group else None
        entry["political_group_identifier"] = decode_group_identifier(group_key[1]) if group_key else None

        entry["email"] = entry["website"] = None
        for cell in cells[2:]:
            for link in cell.find_all("a", href=True):
                href = link["href"].strip()
                if href.lower().startswith("mailto:"):
                    entry["email"] = href[len("mailto:"):]
                elif href.startswith(("http://", "https://")):
                    entry["website"] = href

        return entry


# ----------------------------------------------------------------------
# Committees
# ----------------------------------------------------------------------


class CommitteeScraper(ChamberScraper):
    """Scraper for the composition of a Chamber committee."""

    # Matched by "starts with", in order
    roles = {
        "presidents": "Président",
        "vice-presidents": "Vice-Président",
        "members": "Membres Effectifs",
        "substitutes": "Membres Suppléants",
        "nonvoters": "Membres sans voix délibérative",
    }

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        return ProviderArguments(
            key="k.committee",
            values={"identifier": options.identifier, "lang": options.lang or "fr"},
        )

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> Committee:
        options = ScrapeOptions.coerce(options)
        identifier = self._require_identifier(options)

        if options.document is not None:
            content = str(options.document)
        else:
            content = self._fetch_content(options.with_changes(lang="fr"))
        # Vacant seats are plain text; turn them into empty links to count them
        scope = self._scope(build_document(content.replace(EMPTY_SEAT, "<a></a>")))

        name_fr = self._select_one_or_fail(scope, "h4", "committee name")
        return Committee(
            identifier=identifier,
            name_fr=normalize_whitespace(name_fr.get_text()),
            name_nl=self._dutch_name(options),
            roles=self._roles(scope),
        )

    def _scope(self, soup: BeautifulSoup) -> Tag:
        # The page has several elements with the id "story"; the data is in the second
        stories = soup.select("#story")
        if len(stories) < 2:
            logger.error(f"Expected two #story blocks, found {len(stories)}")
            raise ScrapeStructureError("#story[1]")
        return stories[1]

    def _dutch_name(self, options: ScrapeOptions) -> str:
        arguments = self.provider_arguments(options.with_changes(lang="nl"))
        soup = build_document(self.provider.get(arguments.key, arguments.values))
        heading = self._select_one_or_fail(soup, "#story h4", "committee name (nl)")
        return normalize_whitespace(heading.get_text())

    def _roles(self, scope: Tag) -> dict[str, list[Seat]]:
        roles: dict[str, list[Seat]] = {}
        for paragraph in scope.select("p"):
            label = paragraph.find("b")
            if label is None:
                continue
            role = self._role(label.get_text())
            roles.setdefault(role, []).extend(self._seats(label))
        return roles

    def _role(self, text: str) -> str:
        text = normalize_whitespace(text)
        for role, needle in self.roles.items():
            if text.startswith(needle):
                return role
        logger.error(f"Unknown committee role: {text!r}")
        raise ScrapeStructureError("committee role", f"cannot determine role from [{text}]")

    def _seats(self, label: Tag) -> list[Seat]:
        seats = []
        group = None
        for node in label.find_next_siblings():
            if node.name == "b":
                # Group label, applies to the seats that follow it
                group = normalize_whitespace(node.get_text()).rstrip(":").strip()
            elif node.name == "a":
                found = match(MEMBER_KEY_PATTERN, node.get("href"))
                seats.append(
                    Seat(
                        identifier=found[1] if found else None,
                        given_name_surname=normalize_whitespace(node.get_text()) if found else None,
                        political_group=group,
                    )
                )
        return seats


class CommitteeListScraper(ChamberScraper):
    """Scraper for the list of Chamber committees."""

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        return ProviderArguments(key="k.committee_list", values={"lang": options.lang or "fr"})

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> list[CommitteeListEntry]:
        options = ScrapeOptions.coerce(options)
        soup = self._fetch(options)

        committees: dict[str, CommitteeListEntry] = {}
        for link in soup.find_all("a", href=True):
            found = match(COMMITTEE_LINK_PATTERN, link["href"])
            name = normalize_whitespace(link.get_text())
            if not found or not name or found[1] in committees:
                continue
            committees[found[1]] = CommitteeListEntry(identifier=found[1], name=name)

        return list(committees.values())


# ----------------------------------------------------------------------
# Dossiers
# ----------------------------------------------------------------------


class DossierScraper(ChamberScraper):
    """Scraper for a Chamber dossier.

    The page is converted to a labelled tree and reshaped by the dossier
    mapping into ``meta``, ``documents`` and ``keywords`` sections.
    """

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        legislature, number = parse_dossier_identifier(self._require_identifier(options))
        return ProviderArguments(
            key="k.dossier",
            values={
                "legislatureNumber": legislature,
                "dossierNumber": number,
                "lang": options.lang or "fr",
            },
        )

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> dict[str, Any]:
        options = ScrapeOptions.coerce(options)
        parse_dossier_identifier(self._require_identifier(options))

        if options.document is not None:
            content = str(options.document)
        else:
            content = self._fetch_content(options)

        tree = XmlToTree().convert(to_element(content))
        return dossier_transformer().transform(tree)


def parse_dossier_identifier(identifier: str) -> tuple[str, str]:
    """Split a ``54K1234`` identifier into legislature and dossier numbers."""
    found = match(DOSSIER_IDENTIFIER_PATTERN, identifier)
    if not found:
        raise InvalidOptionsError(f"Invalid Chamber dossier identifier [{identifier}]")
    return found[1], found[2]

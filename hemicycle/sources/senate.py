"""Senate (senate.be) scrapers for members, committees and agendas."""

import logging
import re
from typing import Any, Mapping

from bs4 import BeautifulSoup, Tag

from hemicycle.errors import DictionaryMissError, ScrapeStructureError
from hemicycle.models import Committee, Meeting, MemberListEntry, SenateMember, SenateSeat
from hemicycle.sources.base import BaseScraper, ProviderArguments, ScrapeOptions
from hemicycle.sources.fetcher import build_document
from hemicycle.utils.dates import extract_date, month_first_date_to_iso
from hemicycle.utils.text import match, normalize_record, normalize_whitespace

logger = logging.getLogger(__name__)

MEMBER_ID_PATTERN = re.compile(r"ID=([\dO]+)")

# Parliaments that senators of federated entities come from
ORIGINS = {
    "Groupe linguistique français du Parlement de la Région de Bruxelles-Capitale":
        "French-speaking group of the Parliament of the Brussels-Capital Region",
    "Parlement de la Communauté française": "Parliament of the French Community",
    "Parlement de la Communauté germanophone": "Parliament of the German-speaking Community",
    "Parlement flamand": "Flemish Parliament",
    "Parlement wallon": "Walloon Parliament",
}

WEEK_TYPES = ("week", "next_week")


class SenateScraper(BaseScraper):
    """Base for Senate scrapers."""


# ----------------------------------------------------------------------
# Members
# ----------------------------------------------------------------------


class MPScraper(SenateScraper):
    """Scraper for the page of a senator."""

    # Matched by "contains", in order; "Membre suppléant" must not read as "Membre"
    roles = {
        "president": "Président",
        "substitute": "Suppléant",
        "member": "Membre",
    }

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        return ProviderArguments(key="s.mp", values={"identifier": options.identifier})

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> SenateMember:
        options = ScrapeOptions.coerce(options)
        identifier = self._require_identifier(options)
        soup = self._fetch(options)

        name, group = self._name_and_group(soup)
        senator_type, origin = self._type_and_origin(soup)

        return SenateMember(
            identifier=identifier,
            given_name_surname=name,
            political_group=group,
            legislatures=self._legislatures(soup),
            committees=self._committees(soup),
            birthdate=self._birthdate(soup),
            type=senator_type,
            origin=origin,
        )

    def _name_and_group(self, soup: BeautifulSoup) -> tuple[str, str | None]:
        # "Given Surname - Group"
        heading = self._select_one_or_fail(soup, "th", "name heading")
        parts = heading.get_text().split(" - ")
        group = normalize_whitespace(parts[1]) if len(parts) > 1 else None
        return normalize_whitespace(parts[0]), group or None

    def _legislatures(self, soup: BeautifulSoup) -> list[int]:
        heading = soup.select_one("th:-soup-contains('Travail parlementaire')")
        row = heading.find_parent("tr") if heading else None
        links_row = row.find_next_sibling("tr") if row else None
        if links_row is None:
            return []

        legislatures = []
        for link in links_row.find_all("a"):
            if found := match(r"LEG=(\d+)", link.get("href")):
                legislatures.append(int(found[1]))
        return sorted(legislatures)

    def _committee_rows(self, soup: BeautifulSoup) -> list[Tag]:
        heading = soup.select_one("th:-soup-contains('Appartenance aux commissions')")
        row = heading.find_parent("tr") if heading else None
        if row is None:
            return []

        # Committee rows are the ones right after the heading that carry a background color
        rows = []
        for sibling in row.find_next_siblings("tr"):
            if sibling.get("bgcolor") is None:
                break
            rows.append(sibling)
        return rows

    def _committees(self, soup: BeautifulSoup) -> dict[str, list[str]] | None:
        committees: dict[str, list[str]] = {}
        role = None

        for row in self._committee_rows(soup):
            for node in row.select("u, a"):
                # Role headings are underlined text
                if node.name == "u":
                    role = self._committee_role(node.get_text())
                    continue
                if role is None:
                    continue
                if found := match(r"\d+", node.get("href")):
                    committees.setdefault(found[0], []).append(role)

        return committees or None

    def _committee_role(self, heading: str) -> str:
        for role, needle in self.roles.items():
            if needle in heading:
                return role
        logger.error(f"Unknown committee role heading: {heading!r}")
        raise ScrapeStructureError("committee role", f"cannot determine role from [{normalize_whitespace(heading)}]")

    def _birthdate(self, soup: BeautifulSoup) -> str | None:
        cell = soup.select_one("td:-soup-contains('Né '), td:-soup-contains('Née ')")
        if cell is None:
            return None
        return extract_date(normalize_whitespace(cell.get_text()))

    def _type_and_origin(self, soup: BeautifulSoup) -> tuple[str | None, str | None]:
        cell = soup.select_one('td[colspan="3"]')
        if cell is None:
            return None, None

        text = normalize_whitespace(cell.get_text())
        # Senators of federated entities have their parliament in parentheses
        if found := match(r"\((.+)\)", text):
            if found[1] not in ORIGINS:
                logger.error(f"Unknown parliament of origin: {found[1]!r}")
                raise DictionaryMissError("origins", found[1])
            return "federated entities", ORIGINS[found[1]]
        if "coopté" in text:
            return "co-opted", None
        return None, None


class MPListScraper(SenateScraper):
    """Scraper for the list of senators."""

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        if options.legislature_number:
            return ProviderArguments(
                key="s.mp_list.legislature",
                values={"legislatureNumber": options.legislature_number},
            )
        return ProviderArguments(key="s.mp_list.current")

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> list[MemberListEntry]:
        options = ScrapeOptions.coerce(options)
        soup = self._fetch(options)

        members = []
        # The list is the second table of the page
        for row in soup.select("table:nth-of-type(2) > tr"):
            anchor = row.find("a")
            found = match(MEMBER_ID_PATTERN, anchor.get("href")) if anchor else []
            if not found:
                # Trailing empty rows
                continue
            entry = {"identifier": found[1], "surname_given_name": anchor.get_text()}
            members.append(MemberListEntry(**normalize_record(entry)))

        logger.info(f"Found {len(members)} members in Senate list")
        return members


# ----------------------------------------------------------------------
# Committees
# ----------------------------------------------------------------------


class CommitteeScraper(SenateScraper):
    """Scraper for the composition of a Senate committee."""

    # Headings must match exactly
    roles = {
        "presidents": "Président",
        "first_vice_presidents": "Premier Vice-Président",
        "second_vice_presidents": "Deuxième Vice-Président",
        "members": "Membres",
        "substitutes": "Membres Suppléants",
    }

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        return ProviderArguments(
            key="s.committee",
            values={"identifier": options.identifier, "lang": options.lang or "fr"},
        )

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> Committee:
        options = ScrapeOptions.coerce(options)
        identifier = self._require_identifier(options)
        soup = self._fetch(options.with_changes(lang="fr"))

        arguments = self.provider_arguments(options.with_changes(lang="nl"))
        dutch = build_document(self.provider.get(arguments.key, arguments.values))

        return Committee(
            identifier=identifier,
            name_fr=normalize_whitespace(self._select_one_or_fail(soup, "h1", "committee name").get_text()),
            name_nl=normalize_whitespace(self._select_one_or_fail(dutch, "h1", "committee name (nl)").get_text()),
            roles=self._roles(soup),
        )

    def _roles(self, soup: BeautifulSoup) -> dict[str, list[SenateSeat]]:
        roles: dict[str, list[SenateSeat]] = {}
        role = None

        for node in soup.select("h3, ul"):
            if node.name == "h3":
                role = self._role(node.get_text())
                continue
            # The site sometimes repeats a list; only the first one counts
            if role is not None and role not in roles:
                roles[role] = self._seats(node)

        return roles

    def _role(self, heading: str) -> str:
        heading = normalize_whitespace(heading)
        for role, name in self.roles.items():
            if heading == name:
                return role
        logger.error(f"Unknown committee role: {heading!r}")
        raise ScrapeStructureError("committee role", f"cannot determine role from [{heading}]")

    def _seats(self, node: Tag) -> list[SenateSeat]:
        seats = []
        for item in node.find_all("li"):
            anchor = item.find("a")
            found = match(MEMBER_ID_PATTERN, anchor.get("href")) if anchor else []
            if not found:
                continue
            group = match(r"\((.+)\)\s*$", item.get_text())
            seats.append(
                SenateSeat(
                    identifier=found[1],
                    surname_given_name=normalize_whitespace(anchor.get_text()),
                    political_group=normalize_whitespace(group[1]) if group else None,
                )
            )
        return seats


# ----------------------------------------------------------------------
# Agendas
# ----------------------------------------------------------------------


class MeetingListScraper(SenateScraper):
    """Meetings linked from a weekly agenda page, sorted by identifier."""

    link_pattern: re.Pattern
    location_key: str

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        return ProviderArguments(
            key=self.location_key,
            values={"lang": "fr", "weekType": options.week_type or "week"},
        )

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> list[Meeting]:
        options = ScrapeOptions.coerce(options)
        soup = self._fetch(options)

        meetings: dict[str, Meeting] = {}
        for anchor in soup.find_all("a", href=True):
            found = self.link_pattern.search(anchor["href"])
            if not found:
                continue
            date = found.group("date")
            meetings[found.group("identifier")] = Meeting(
                identifier=found.group("identifier"),
                date=month_first_date_to_iso(date) if date else None,
            )

        return sort_meetings(meetings.values())


class PlenaryMeetingListScraper(MeetingListScraper):
    link_pattern = re.compile(r"DATUM='(?P<date>\d{2}/\d{2}/\d{4})'&ID=(?P<identifier>\d+)&TYP=plenag")
    location_key = "s.agenda_list.plenary_weeks"


class CommitteeMeetingListScraper(MeetingListScraper):
    # Committee links do not always carry a date
    link_pattern = re.compile(r"(?:DATUM='(?P<date>\d{2}/\d{2}/\d{4})'&)?ID=(?P<identifier>\d+)&TYP=comag")
    location_key = "s.agenda_list.committee_weeks"


class AgendaListScraper(SenateScraper):
    """Meetings of this week and next week, merged."""

    meeting_list_scraper: type[MeetingListScraper]

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        return self.meeting_list_scraper(self.provider).provider_arguments(options)

    def week_urls(self) -> list[str]:
        urls = []
        for week_type in WEEK_TYPES:
            arguments = self.provider_arguments(ScrapeOptions(week_type=week_type))
            urls.append(self.provider.resolve(arguments.key, arguments.values))
        return urls

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> list[Meeting]:
        scraper = self.meeting_list_scraper(self.provider)

        meetings: dict[str, Meeting] = {}
        for url in self.week_urls():
            for meeting in scraper.scrape(ScrapeOptions(url=url)):
                meetings.setdefault(meeting.identifier, meeting)

        return sort_meetings(meetings.values())


class PlenaryAgendaListScraper(AgendaListScraper):
    meeting_list_scraper = PlenaryMeetingListScraper


class CommitteeAgendaListScraper(AgendaListScraper):
    meeting_list_scraper = CommitteeMeetingListScraper


def sort_meetings(meetings) -> list[Meeting]:
    return sorted(meetings, key=lambda meeting: int(meeting.identifier))

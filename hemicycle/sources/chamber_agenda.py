"""Chamber agenda scrapers: plenary weeks, committee weeks and committee meetings."""

import logging
import re
from typing import Any, Mapping, Sequence

from bs4 import BeautifulSoup

from hemicycle.errors import ScraperNotImplementedError
from hemicycle.models import AgendaWeek
from hemicycle.processing.agenda import (
    COMMITTEE_WEEK_TEMPLATES,
    PLENARY_AGENDA_TEMPLATES,
    PLENARY_WEEK_TEMPLATES,
    DateRangeTemplate,
    parse_date_range,
    remove_duplicates,
    remove_outdated,
)
from hemicycle.sources.base import ProviderArguments, ScrapeOptions
from hemicycle.sources.chamber import ChamberScraper
from hemicycle.utils.text import match, normalize_whitespace

logger = logging.getLogger(__name__)

COMMITTEE_MEETING_PATTERN = re.compile(r"pat=PROD-commissions&type=full&com=(\d+-\d+_\d+)")
COMMITTEE_WEEK_PATTERN = re.compile(r"pat=PROD-commissions&week=(\d+)")
PLENARY_WEEK_PATTERN = re.compile(r"pat=PROD-Plenum&plen=(\d+_\d+)&type=full")


def _agenda_links(soup: BeautifulSoup, pattern: re.Pattern) -> list[tuple[str, str]]:
    """Return ``(identifier, label)`` for every content link matching ``pattern``."""
    links = []
    for anchor in soup.select("#content a"):
        found = match(pattern, anchor.get("href"))
        if found:
            links.append((found[1], normalize_whitespace(anchor.get_text())))
    return links


class CommitteeAgendaListScraper(ChamberScraper):
    """Agenda of a single committee.

    The page was never mapped; scraping it raises instead of returning an
    empty list that would look like "no meetings".
    """

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        return ProviderArguments(key="k.agenda_list.committee_weeks")

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> list[Any]:
        raise ScraperNotImplementedError("The Chamber committee agenda list is not supported yet")


class CommitteeMeetingListScraper(ChamberScraper):
    """Identifiers of committee meetings (``<committee>-<number>_<version>``), in page order."""

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        return ProviderArguments(key="k.agenda_list.committee")

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> list[str]:
        options = ScrapeOptions.coerce(options)
        soup = self._fetch(options)
        identifiers = [identifier for identifier, _ in _agenda_links(soup, COMMITTEE_MEETING_PATTERN)]
        return list(dict.fromkeys(identifiers))


class CommitteeMeetingWeekListScraper(ChamberScraper):
    """Weeks with committee meetings, with their date range and agenda URL."""

    templates: Sequence[DateRangeTemplate] = COMMITTEE_WEEK_TEMPLATES

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        return ProviderArguments(key="k.agenda_list.committee_weeks")

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> list[AgendaWeek]:
        options = ScrapeOptions.coerce(options)
        soup = self._fetch(options)

        weeks = []
        for identifier, label in _agenda_links(soup, COMMITTEE_WEEK_PATTERN):
            start, end = parse_date_range(label, self.templates)
            weeks.append(
                AgendaWeek(
                    identifier=identifier,
                    start_date=start,
                    end_date=end,
                    url=self.provider.resolve("k.agenda_page.committee_week", {"identifier": identifier}),
                )
            )

        return remove_duplicates(weeks)


class PlenaryAgendaListScraper(ChamberScraper):
    """Plenary weeks (``<week>_<version>``), keeping only the latest version of each week."""

    templates: Sequence[DateRangeTemplate] = PLENARY_AGENDA_TEMPLATES
    # Location of each week's agenda page; None to leave URLs out
    week_page_key: str | None = "k.agenda_page.plenary_week"

    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        if options.identifier:
            return ProviderArguments(
                key="k.agenda_list.plenary_custom",
                values={"identifier": options.identifier},
            )
        return ProviderArguments(key="k.agenda_list.plenary")

    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> list[AgendaWeek]:
        options = ScrapeOptions.coerce(options)
        soup = self._fetch(options)

        weeks = []
        for identifier, label in _agenda_links(soup, PLENARY_WEEK_PATTERN):
            if "Semaine" not in label:
                continue
            start, end = parse_date_range(label, self.templates)
            fields: dict[str, Any] = {"identifier": identifier, "start_date": start, "end_date": end}
            if self.week_page_key:
                fields["url"] = self.provider.resolve(self.week_page_key, {"identifier": identifier})
            weeks.append(AgendaWeek(**fields))

        weeks = remove_outdated(remove_duplicates(weeks))
        logger.info(f"Found {len(weeks)} plenary weeks")
        return weeks


class PlenaryMeetingWeekListScraper(PlenaryAgendaListScraper):
    """Plenary weeks with the full "du lundi ... au vendredi ..." labels, without URLs."""

    templates = PLENARY_WEEK_TEMPLATES
    week_page_key = None

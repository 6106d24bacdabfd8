"""Base scraper class and registry for Chamber and Senate scrapers."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping

from bs4 import BeautifulSoup, Tag
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from hemicycle.config import settings
from hemicycle.errors import InvalidOptionsError, ScrapeStructureError
from hemicycle.models import as_record
from hemicycle.sources.fetcher import DocumentProvider, build_document, create_provider

logger = logging.getLogger(__name__)


class ScrapeOptions(BaseModel):
    """Options accepted by every scraper; each scraper reads the ones it needs."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, populate_by_name=True, extra="forbid")

    identifier: str | None = None
    legislature_number: int | None = None
    lang: str | None = None
    # Use this exact location instead of resolving one
    url: str | None = None
    # Already parsed page, so that a page fetched once can feed several scrapers
    document: BeautifulSoup | None = Field(None, validation_alias=AliasChoices("document", "crawler"))
    # Senate weekly agendas: "week" or "next_week"
    week_type: str | None = None

    @field_validator("identifier", mode="before")
    @classmethod
    def _identifier_as_string(cls, value: Any) -> Any:
        # Identifiers may contain letters ("12O45"); never keep them as numbers
        if isinstance(value, int):
            return str(value)
        return value

    @classmethod
    def coerce(cls, options: "ScrapeOptions | Mapping[str, Any] | None") -> "ScrapeOptions":
        """Build options from a mapping, an instance or nothing."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        try:
            return cls.model_validate(dict(options))
        except ValidationError as e:
            raise InvalidOptionsError(f"Invalid scrape options: {e}") from e

    def with_changes(self, **changes: Any) -> "ScrapeOptions":
        return self.model_copy(update=changes)


class ProviderArguments(BaseModel):
    """The location key a scraper needs and the values filling its placeholders."""

    model_config = ConfigDict(frozen=True)

    key: str
    values: dict[str, Any] = Field(default_factory=dict)


class BaseScraper(ABC):
    """Abstract base class for page scrapers.

    Each scraper is responsible for:
    1. Declaring where its page lives (:meth:`provider_arguments`)
    2. Extracting a normalized record, or a list of records, from that page

    Structural surprises in the markup raise :class:`ScrapeStructureError`;
    optional fields that are absent come back as ``None``.
    """

    # Fetch options of the site the scraper targets
    encode_query: bool = True

    def __init__(self, provider: DocumentProvider | None = None):
        provider = provider or create_provider()
        self.provider = provider.with_options(
            encode_query=self.encode_query,
            charset=settings.default_charset,
        )

    @abstractmethod
    def scrape(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> Any:
        """Scrape a page and return its record(s)."""

    @abstractmethod
    def provider_arguments(self, options: ScrapeOptions) -> ProviderArguments:
        """Return the location key and placeholder values of the page to scrape."""

    def scrape_record(self, options: ScrapeOptions | Mapping[str, Any] | None = None) -> Any:
        """Like :meth:`scrape` but with plain mappings and lists in place of models."""
        return as_record(self.scrape(options))

    def _fetch(self, options: ScrapeOptions) -> BeautifulSoup:
        """Return the parsed page, honouring the ``document`` then ``url`` overrides."""
        if options.document is not None:
            return options.document
        return build_document(self._fetch_content(options))

    def _fetch_content(self, options: ScrapeOptions) -> str:
        if options.url:
            return self.provider.get_location(options.url)
        arguments = self.provider_arguments(options)
        return self.provider.get(arguments.key, arguments.values)

    @staticmethod
    def _require_identifier(options: ScrapeOptions) -> str:
        if not options.identifier:
            raise InvalidOptionsError("The 'identifier' option is required")
        return options.identifier

    @staticmethod
    def _select_one_or_fail(node: Tag, selector: str, step: str | None = None) -> Tag:
        found = node.select_one(selector)
        if found is None:
            logger.error(f"Expected node missing: {selector}")
            raise ScrapeStructureError(step or selector)
        return found


# Scraper registry
_SCRAPERS: dict[str, type[BaseScraper]] = {}


def register_scraper(key: str, scraper: type[BaseScraper]):
    """Register a scraper class under a key such as ``k.mp``."""
    _SCRAPERS[key] = scraper


def get_scraper(key: str, provider: DocumentProvider | None = None) -> BaseScraper:
    """Instantiate the scraper registered under ``key``."""
    if key not in _SCRAPERS:
        # Lazy import and register scrapers
        _register_all_scrapers()

    if key not in _SCRAPERS:
        raise ValueError(f"No scraper registered for key: {key}")

    return _SCRAPERS[key](provider)


def available_scrapers() -> list[str]:
    _register_all_scrapers()
    return sorted(_SCRAPERS)


def _register_all_scrapers():
    """Register all available scrapers."""
    from hemicycle.sources import chamber, chamber_agenda, senate, senate_dossier

    builtin = {
        "k.mp": chamber.MPScraper,
        "k.mp_list": chamber.MPListScraper,
        "k.committee": chamber.CommitteeScraper,
        "k.committee_list": chamber.CommitteeListScraper,
        "k.dossier": chamber.DossierScraper,
        "k.committee_agenda_list": chamber_agenda.CommitteeAgendaListScraper,
        "k.committee_meeting_list": chamber_agenda.CommitteeMeetingListScraper,
        "k.committee_meeting_week_list": chamber_agenda.CommitteeMeetingWeekListScraper,
        "k.plenary_agenda_list": chamber_agenda.PlenaryAgendaListScraper,
        "k.plenary_meeting_week_list": chamber_agenda.PlenaryMeetingWeekListScraper,
        "s.mp": senate.MPScraper,
        "s.mp_list": senate.MPListScraper,
        "s.committee": senate.CommitteeScraper,
        "s.plenary_meeting_list": senate.PlenaryMeetingListScraper,
        "s.committee_meeting_list": senate.CommitteeMeetingListScraper,
        "s.plenary_agenda_list": senate.PlenaryAgendaListScraper,
        "s.committee_agenda_list": senate.CommitteeAgendaListScraper,
        "s.dossier": senate_dossier.DossierScraper,
    }
    for key, scraper in builtin.items():
        if key not in _SCRAPERS:
            register_scraper(key, scraper)

"""Exception hierarchy shared by resolvers, fetchers, scrapers and the dossier pipeline."""


class HemicycleError(Exception):
    """Base class for every error raised by this package."""


class LocationError(HemicycleError):
    """A location could not be resolved from the template repository."""


class NotFoundError(LocationError):
    """No template exists for the requested key."""

    def __init__(self, key: str):
        super().__init__(f"No location found for key [{key}]")
        self.key = key


class MissingPlaceholderError(LocationError):
    """A template placeholder has no value."""

    def __init__(self, key: str, placeholder: str):
        super().__init__(f"No value provided for placeholder {{{placeholder}}} of [{key}]")
        self.key = key
        self.placeholder = placeholder


class FetchError(HemicycleError):
    """A document could not be read or downloaded."""

    def __init__(self, location: str, message: str):
        super().__init__(f"Could not fetch {location}: {message}")
        self.location = location


class ScrapeStructureError(HemicycleError):
    """The markup of a page does not match what a scraper expects.

    ``step`` names the selector or extraction step that failed so that the
    scraper needing an update can be found quickly.
    """

    def __init__(self, step: str, message: str | None = None):
        super().__init__(f"[{step}] {message}" if message else f"[{step}] expected node not found")
        self.step = step


class DictionaryMissError(ScrapeStructureError):
    """A value has no entry in a static dictionary (the dictionary is stale)."""

    def __init__(self, dictionary: str, key: object):
        super().__init__(f"dictionary:{dictionary}", f"no entry for {key!r}")
        self.dictionary = dictionary
        self.key = key


class UnrecognizedDateFormatError(HemicycleError, ValueError):
    """A string matches none of the known date formats."""


class UnknownModifierError(HemicycleError):
    """A mapping entry names a modifier that does not exist."""


class PathConflictError(HemicycleError):
    """A dot-path assignment would have to descend through a scalar value."""


class InvalidOptionsError(HemicycleError, ValueError):
    """Scrape options are missing or malformed."""


class ScraperNotImplementedError(HemicycleError, NotImplementedError):
    """The scraper exists for symmetry but its page has never been mapped."""

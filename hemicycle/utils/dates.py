"""Date parsing for French and Dutch pages.

Every function returns ISO 8601 strings (``YYYY-MM-DD``) because records are
plain JSON-like mappings.
"""

import re

from hemicycle.errors import UnrecognizedDateFormatError

FRENCH_MONTHS = (
    "janvier", "février", "mars",
    "avril", "mai", "juin",
    "juillet", "août", "septembre",
    "octobre", "novembre", "décembre",
)

DUTCH_MONTHS = (
    "januari", "februari", "maart",
    "april", "mei", "juni",
    "juli", "augustus", "september",
    "oktober", "november", "december",
)

_SLASHED = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")
_COMPACT = re.compile(r"\b(\d{4})(\d{2})(\d{2})\b")
_SPELLED = re.compile(r"\b(\d{1,2})(?:er|e)?\s+([^\W\d_]+)\s+(\d{4})\b")


def month_number(name: str, months: tuple[str, ...] = FRENCH_MONTHS) -> int:
    """Return the 1-based number of a spelled month name."""
    try:
        return months.index(name.strip().lower()) + 1
    except ValueError:
        raise UnrecognizedDateFormatError(f"Unknown month name [{name}]") from None


def format_date(year: int | str, month: int | str, day: int | str, months: tuple[str, ...] = FRENCH_MONTHS) -> str:
    """Format date components into ``YYYY-MM-DD``; ``month`` may be a spelled name."""
    if isinstance(month, str) and not month.isdigit():
        month = month_number(month, months)
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"


def parse_localized_date(value: str, months: tuple[str, ...] = FRENCH_MONTHS) -> str:
    """Find the first date in ``value`` and return it in ISO 8601.

    Supported forms, tried in this order:

    - ``DD/MM/YYYY`` (one or two digit day and month)
    - ``YYYYMMDD``
    - ``D[er] <month name> YYYY`` using the ``months`` table

    Raises:
        UnrecognizedDateFormatError: if no known form is found or the
            month name is not in ``months``.
    """
    if found := _SLASHED.search(value):
        day, month, year = found.groups()
        return format_date(year, month, day)

    if found := _COMPACT.search(value):
        year, month, day = found.groups()
        return format_date(year, month, day)

    for found in _SPELLED.finditer(value):
        day, name, year = found.groups()
        if name.lower() in months:
            return format_date(year, name, day, months)

    raise UnrecognizedDateFormatError(f"Could not find any date in [{value}]")


def extract_date(value: str | None, months: tuple[str, ...] = FRENCH_MONTHS) -> str | None:
    """Like :func:`parse_localized_date` but for optional fields: ``None`` when absent."""
    if not value:
        return None
    try:
        return parse_localized_date(value, months)
    except UnrecognizedDateFormatError:
        return None


def month_first_date_to_iso(value: str) -> str:
    """Convert the Senate's ``MM/DD/YYYY`` link dates to ISO 8601."""
    parts = value.strip().split("/")
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        raise UnrecognizedDateFormatError(f"Expected MM/DD/YYYY, got [{value}]")
    month, day, year = parts
    return format_date(year, month, day)

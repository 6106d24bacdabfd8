"""Week labels and identifier clean-up shared by the agenda list scrapers."""

import logging
import re
from dataclasses import dataclass
from typing import Any, Iterable, Sequence, TypeVar

from hemicycle.errors import UnrecognizedDateFormatError
from hemicycle.utils.dates import DUTCH_MONTHS, FRENCH_MONTHS, format_date, month_number

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DateRangeTemplate:
    """A week label pattern and the positions of its date groups.

    ``start`` and ``end`` are ``(day, month, year)`` group numbers; a year of
    ``None`` means the label does not give it. A template with no ``end``
    only describes the first day of the week.
    """

    name: str
    pattern: re.Pattern
    start: tuple[int, int, int | None]
    end: tuple[int, int, int | None] | None = None
    months: tuple[str, ...] = FRENCH_MONTHS


# Ordered: later templates are looser and would also match earlier cases.
COMMITTEE_WEEK_TEMPLATES = (
    # "Semaine du lundi 10 février 2015 au vendredi 14 février 2015"
    DateRangeTemplate(
        "week",
        re.compile(r"du\s+(?:\w+)\s+(\d{1,2})(?:er)?\s+(\w+)\s+(\d{4})\s+au\s+(?:.+)\s+(\d{1,2})(?:er)?\s+(\w+)\s+(\d{4})"),
        start=(1, 2, 3),
        end=(4, 5, 6),
    ),
    # "Semaine du lundi 10 février au vendredi 14 février 2015"
    DateRangeTemplate(
        "week_with_missing_year",
        re.compile(r"du (?:\w+) (\d{1,2}) (\w+) au (?:.+) (\d{1,2}) (\w+) (\d{4})"),
        start=(1, 2, 5),
        end=(3, 4, 5),
    ),
    # "Semaine du lundi 10 octobre"
    DateRangeTemplate(
        "week_with_missing_end_of_range",
        re.compile(r"du (?:\w+) (\d{1,2}) (\w+)"),
        start=(1, 2, None),
    ),
    # "Week van maandag 10 februari 2015 tot vrijdag 14 februari 2015"
    DateRangeTemplate(
        "week_nl",
        re.compile(r"van\s+(?:\w+)\s+(\d{1,2})\s+(\w+)\s+(\d{4})\s+tot\s+(?:.+)\s+(\d{1,2})\s+(\w+)\s+(\d{4})"),
        start=(1, 2, 3),
        end=(4, 5, 6),
        months=DUTCH_MONTHS,
    ),
    # "Week van maandag 10 februari tot vrijdag 14 februari 2015"
    DateRangeTemplate(
        "week_with_missing_year_nl",
        re.compile(r"van (?:\w+) (\d{1,2}) (\w+) tot (?:.+) (\d{1,2}) (\w+) (\d{4})"),
        start=(1, 2, 5),
        end=(3, 4, 5),
        months=DUTCH_MONTHS,
    ),
    # "Week van maandag 10 oktober"
    DateRangeTemplate(
        "week_with_missing_end_of_range_nl",
        re.compile(r"van (?:\w+) (\d{1,2}) (\w+)"),
        start=(1, 2, None),
        months=DUTCH_MONTHS,
    ),
)

PLENARY_AGENDA_TEMPLATES = (
    # "Semaine du 10 au 14 février 2015"
    DateRangeTemplate(
        "week",
        re.compile(r"du (\d{1,2}) au (\d{1,2}) (.+) (\d{4})"),
        start=(1, 3, 4),
        end=(2, 3, 4),
    ),
)

PLENARY_WEEK_TEMPLATES = (
    # "Semaine du lundi 1er février 2015 au vendredi 5 février 2015"
    DateRangeTemplate(
        "week",
        re.compile(r"du (\d{1,2})(?:er)? au (\d{1,2})(?:er)? (\w+) (\d{4})"),
        start=(1, 3, 4),
        end=(2, 3, 4),
    ),
    # "Semaine du 28 janvier au 1er février 2015"
    DateRangeTemplate(
        "week_overlapping_two_months",
        re.compile(r"du (\d{1,2})(?:er)? (\w+) au (\d{1,2})(?:er)? (\w+) (\d{4})"),
        start=(1, 2, 5),
        end=(3, 4, 5),
    ),
)


def _format_part(found: re.Match, positions: tuple[int, int, int | None], months: tuple[str, ...]) -> str:
    day_group, month_group, year_group = positions
    day, month = found.group(day_group), found.group(month_group)
    if year_group is None:
        # No year in the label: ISO 8601 "--MM-DD" form
        number = int(month) if month.isdigit() else month_number(month, months)
        return f"--{number:02d}-{int(day):02d}"
    return format_date(found.group(year_group), month, day, months)


def parse_date_range(label: str, templates: Sequence[DateRangeTemplate]) -> tuple[str, str | None]:
    """Return the ``(start, end)`` dates of a week label using the first matching template.

    Raises:
        UnrecognizedDateFormatError: if no template matches, or a month name is unknown.
    """
    for template in templates:
        found = template.pattern.search(label)
        if not found:
            continue
        start = _format_part(found, template.start, template.months)
        end = _format_part(found, template.end, template.months) if template.end else None
        return start, end

    raise UnrecognizedDateFormatError(f"Could not find any date range in [{label}]")


def remove_duplicates(items: Iterable[T], key: str = "identifier") -> list[T]:
    """Keep the first occurrence of each identifier, in order."""
    seen: set[Any] = set()
    unique = []
    for item in items:
        value = _get(item, key)
        if value in seen:
            continue
        seen.add(value)
        unique.append(item)
    return unique


def remove_outdated(items: Iterable[T], key: str = "identifier") -> list[T]:
    """Keep the most recent version of each week.

    Identifiers are ``<week>_<version>``. Versions are compared as strings,
    so "9" beats "10". Weeks keep the position of their first occurrence.
    """
    versions: dict[str, str] = {}
    latest: dict[str, T] = {}
    for item in items:
        week, _, version = str(_get(item, key)).partition("_")
        if week not in versions or version > versions[week]:
            versions[week] = version
            latest[week] = item
    return list(latest.values())


def _get(item: Any, key: str) -> Any:
    if isinstance(item, dict):
        return item[key]
    return getattr(item, key)

"""String helpers for the loosely formatted pages of both chambers."""

import re
from typing import Any
from urllib.parse import unquote_plus

from unidecode import unidecode

_NBSP = re.compile("[\u00a0\u202f]")
_MULTISPACE = re.compile(r"\s{2,}")
_LABEL_TAGS = re.compile(r"<(\w+)>.+?</\1>", re.DOTALL)

# Characters dropped outright before transliteration ("N°" must give "n")
_SLUG_DROPPED = str.maketrans("", "", "°º")


def match(pattern: str | re.Pattern, subject: str | None, offset: int = 0) -> list[str]:
    """Match ``pattern`` against ``subject`` and return the full match and its groups.

    An empty list means no match. Unmatched optional groups come back as
    ``None``, so callers must check the result before indexing.
    """
    if subject is None:
        return []
    regex = pattern if isinstance(pattern, re.Pattern) else re.compile(pattern)
    found = regex.search(subject, offset)
    if not found:
        return []
    return [found.group(0), *found.groups()]


def normalize_whitespace(value: str) -> str:
    """Turn non-breaking spaces into spaces, collapse runs of whitespace and trim."""
    value = _NBSP.sub(" ", value)
    value = _MULTISPACE.sub(" ", value)
    return value.strip()


def normalize_record(value: Any) -> Any:
    """Apply :func:`normalize_whitespace` to every string of a nested structure."""
    if isinstance(value, str):
        return normalize_whitespace(value)
    if isinstance(value, dict):
        return {key: normalize_record(item) for key, item in value.items()}
    if isinstance(value, list):
        return [normalize_record(item) for item in value]
    if isinstance(value, tuple):
        return tuple(normalize_record(item) for item in value)
    return value


def slugify(text: str, separator: str = "-") -> str:
    """Build the ASCII slug of a row label, e.g. ``"Chambre et/ou Sénat"`` -> ``"chambre-etou-senat"``."""
    text = unidecode(text.translate(_SLUG_DROPPED))
    flip = "_" if separator == "-" else "-"
    text = re.sub(f"[{re.escape(flip)}]+", separator, text)
    text = re.sub(rf"[^{re.escape(separator)}\w\s]+", "", text.lower())
    text = re.sub(rf"[{re.escape(separator)}\s]+", separator, text)
    return text.strip(separator)


def remove_label_tags(html: str) -> str:
    """Drop ``<b>Label:</b>`` style tag pairs (and their content) from a HTML fragment."""
    return _LABEL_TAGS.sub("", html)


def strip_tags(html: str) -> str:
    return re.sub(r"<[^>]+>", "", html)


def decode_group_identifier(value: str) -> str:
    """URL-decode a political group identifier.

    The Chamber percent-encodes Latin-1 bytes (``%E9`` for ``é``), which a
    UTF-8 decoder turns into replacement characters.
    """
    return unquote_plus(value, encoding="latin-1")

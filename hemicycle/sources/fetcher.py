"""Document fetching: local files or remote pages, returned as decoded text."""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping
from urllib.parse import parse_qsl, urlsplit, urlunsplit

import httpx
from bs4 import BeautifulSoup

from hemicycle.config import settings
from hemicycle.errors import FetchError
from hemicycle.sources.locations import LocationResolver, load_default_resolver

logger = logging.getLogger(__name__)


def _build_http_client(timeout: float, user_agent: str) -> httpx.Client:
    return httpx.Client(
        timeout=timeout,
        follow_redirects=settings.follow_redirects,
        headers={
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "fr-BE,fr;q=0.9,nl-BE;q=0.8",
        },
    )


def is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://"))


class DocumentFetcher:
    """Fetch raw page content from a local path or a remote URL."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        *,
        timeout: float | None = None,
        user_agent: str | None = None,
    ):
        self._owns_client = client is None
        self._client = client
        self.timeout = timeout or settings.http_timeout
        self.user_agent = user_agent or settings.user_agent

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = _build_http_client(self.timeout, self.user_agent)
        return self._client

    def fetch(self, location: str, *, encode_query: bool = True, charset: str | None = None) -> str:
        """Return the content at ``location`` as text.

        Args:
            location: A local path or an ``http(s)://`` URL.
            encode_query: When false the query string is sent as written. The
                Chamber's server rejects percent-encoded query strings.
            charset: Encoding of the document. Remote documents default to the
                encoding announced by the server, local files to UTF-8.

        Raises:
            FetchError: if the file cannot be read or the request fails.
        """
        if is_remote(location):
            content, declared = self._download(location, encode_query)
        else:
            content, declared = self._load(location), None

        text = content.decode(charset or declared or "utf-8", errors="replace")
        logger.info(f"Fetched {location} ({len(content)} bytes)")
        return text

    def _download(self, url: str, encode_query: bool) -> tuple[bytes, str | None]:
        kwargs: dict[str, Any] = {}
        if encode_query:
            parts = urlsplit(url)
            if parts.query:
                kwargs["params"] = parse_qsl(parts.query, keep_blank_values=True)
                url = urlunsplit(parts._replace(query=""))

        try:
            response = self.client.get(url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching {url}: {e.response.status_code}")
            raise FetchError(url, f"status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Request error fetching {url}: {e}")
            raise FetchError(url, str(e)) from e

        return response.content, response.charset_encoding

    def _load(self, path: str) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as e:
            logger.error(f"Could not read {path}: {e}")
            raise FetchError(path, str(e)) from e

    def close(self) -> None:
        """Close the underlying HTTP client if this fetcher created it."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "DocumentFetcher":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@dataclass(frozen=True)
class DocumentProvider:
    """Resolve a location key and fetch its document in one call.

    Instances are immutable; chamber-specific fetch options are applied with
    :meth:`with_options`, which returns a copy.
    """

    resolver: LocationResolver
    fetcher: DocumentFetcher
    encode_query: bool = True
    charset: str | None = None

    def resolve(self, key: str, values: Mapping[str, Any] | None = None) -> str:
        return self.resolver.resolve(key, values)

    def get(self, key: str, values: Mapping[str, Any] | None = None) -> str:
        """Fetch the document registered under ``key``."""
        return self.get_location(self.resolve(key, values))

    def get_location(self, location: str) -> str:
        """Fetch the document at an explicit location."""
        return self.fetcher.fetch(location, encode_query=self.encode_query, charset=self.charset)

    def with_options(self, *, encode_query: bool | None = None, charset: str | None = None) -> "DocumentProvider":
        changes: dict[str, Any] = {}
        if encode_query is not None:
            changes["encode_query"] = encode_query
        if charset is not None:
            changes["charset"] = charset
        return replace(self, **changes)


def create_provider(
    resolver: LocationResolver | None = None,
    fetcher: DocumentFetcher | None = None,
) -> DocumentProvider:
    """Assemble a provider from the configured locations file and a fresh fetcher."""
    return DocumentProvider(
        resolver=resolver or load_default_resolver(),
        fetcher=fetcher or DocumentFetcher(),
    )


def build_document(content: str) -> BeautifulSoup:
    """Parse page content into a queryable document."""
    return BeautifulSoup(content, "lxml")

import httpx
import pytest

from hemicycle.errors import FetchError
from hemicycle.sources.fetcher import DocumentFetcher, DocumentProvider, build_document, is_remote
from hemicycle.sources.locations import LocationResolver


def _fetcher(handler) -> DocumentFetcher:
    return DocumentFetcher(client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_is_remote():
    assert is_remote("http://www.senate.be/www/")
    assert is_remote("https://www.lachambre.be/")
    assert not is_remote("fixtures/mp.html")


def test_fetch_reads_local_files_with_charset(tmp_path):
    path = tmp_path / "mp.html"
    path.write_bytes("<p>Député Sénat</p>".encode("latin-1"))

    fetcher = DocumentFetcher()

    assert fetcher.fetch(str(path), charset="ISO-8859-1") == "<p>Député Sénat</p>"
    assert fetcher.fetch(str(path)) != "<p>Député Sénat</p>"


def test_fetch_of_missing_file_raises(tmp_path):
    with pytest.raises(FetchError) as excinfo:
        DocumentFetcher().fetch(str(tmp_path / "missing.html"))

    assert excinfo.value.location.endswith("missing.html")


def test_fetch_encodes_query_by_default():
    seen = []

    def handler(request):
        seen.append(request.url)
        return httpx.Response(200, content=b"<p>ok</p>")

    fetcher = _fetcher(handler)
    fetcher.fetch("http://www.senate.be/www/?MIval=/showSenator&ID=42&LANG=fr")

    assert seen[0].path == "/www/"
    assert dict(seen[0].params) == {"MIval": "/showSenator", "ID": "42", "LANG": "fr"}


def test_fetch_keeps_query_as_written_when_encoding_is_disabled():
    seen = []

    def handler(request):
        seen.append(request.url.query)
        return httpx.Response(200, content=b"<p>ok</p>")

    fetcher = _fetcher(handler)
    fetcher.fetch("http://www.lachambre.be/kvvcr/showpage.cfm?cfm=/site/cvview54.cfm?key=01234", encode_query=False)

    assert b"%2F" not in seen[0]
    assert b"cvview54.cfm" in seen[0]


def test_fetch_decodes_with_declared_charset_unless_overridden():
    def handler(request):
        return httpx.Response(
            200,
            content="Sénat".encode("latin-1"),
            headers={"Content-Type": "text/html; charset=ISO-8859-1"},
        )

    fetcher = _fetcher(handler)

    assert fetcher.fetch("http://www.senate.be/") == "Sénat"
    assert fetcher.fetch("http://www.senate.be/", charset="ISO-8859-1") == "Sénat"


def test_fetch_wraps_http_errors():
    fetcher = _fetcher(lambda request: httpx.Response(503))

    with pytest.raises(FetchError) as excinfo:
        fetcher.fetch("http://www.lachambre.be/kvvcr/index.cfm")

    assert "503" in str(excinfo.value)


def test_fetch_wraps_transport_errors():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(FetchError):
        _fetcher(handler).fetch("http://www.lachambre.be/kvvcr/index.cfm")


def test_provider_resolves_then_fetches_with_its_options():
    calls = []

    class DummyFetcher:
        def fetch(self, location, *, encode_query=True, charset=None):
            calls.append((location, encode_query, charset))
            return "<p>page</p>"

    provider = DocumentProvider(
        resolver=LocationResolver({"k": {"baseUrl": "http://k/", "mp": "mp?key={identifier}"}}),
        fetcher=DummyFetcher(),
    )
    chamber = provider.with_options(encode_query=False, charset="ISO-8859-1")

    assert chamber.get("k.mp", {"identifier": "1"}) == "<p>page</p>"
    assert calls == [("http://k/mp?key=1", False, "ISO-8859-1")]
    # The source provider is untouched
    assert provider.encode_query is True
    assert provider.charset is None


def test_build_document_parses_html():
    soup = build_document("<table><tr><td>Membre</td></tr></table>")

    assert soup.select_one("table > tr td").get_text() == "Membre"


def test_fetcher_closes_only_its_own_client():
    client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200)))

    with DocumentFetcher(client=client) as fetcher:
        assert fetcher.client is client

    assert not client.is_closed
    client.close()

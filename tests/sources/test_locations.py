import json

import pytest

from hemicycle.errors import LocationError, MissingPlaceholderError, NotFoundError
from hemicycle.sources.locations import LocationResolver, load_default_resolver

TEMPLATES = {
    "k": {
        "baseUrl": "http://www.lachambre.be/kvvcr/",
        "mp": "showpage.cfm?key={identifier}&lactivity={legislatureNumber}",
        "agenda": {
            "baseUrl": "agenda/",
            "plenary": "plen.cfm?plen={identifier}",
        },
    },
    "s": {
        "mp": "fixtures/senator-{identifier}.html",
    },
}


def test_resolve_fills_placeholders_and_prepends_base_url():
    resolver = LocationResolver(TEMPLATES)

    assert resolver.resolve("k.mp", {"identifier": "12O45", "legislatureNumber": 54}) == (
        "http://www.lachambre.be/kvvcr/showpage.cfm?key=12O45&lactivity=54"
    )


def test_nested_base_urls_are_stacked():
    resolver = LocationResolver(TEMPLATES)

    assert resolver.resolve("k.agenda.plenary", {"identifier": "12_1"}) == (
        "http://www.lachambre.be/kvvcr/agenda/plen.cfm?plen=12_1"
    )


def test_templates_without_base_url_are_kept_as_is():
    assert LocationResolver(TEMPLATES).resolve("s.mp", {"identifier": 7}) == "fixtures/senator-7.html"


def test_unknown_keys_raise_not_found():
    resolver = LocationResolver(TEMPLATES)

    with pytest.raises(NotFoundError) as excinfo:
        resolver.resolve("k.committee")
    assert excinfo.value.key == "k.committee"

    # A group is not a template
    with pytest.raises(NotFoundError):
        resolver.resolve("k.agenda")


def test_missing_placeholder_value_raises():
    resolver = LocationResolver(TEMPLATES)

    with pytest.raises(MissingPlaceholderError) as excinfo:
        resolver.resolve("k.mp", {"identifier": "1"})

    assert excinfo.value.placeholder == "legislatureNumber"
    assert isinstance(excinfo.value, LocationError)


def test_from_file_reads_parliaments(tmp_path):
    path = tmp_path / "locations.json"
    path.write_text(json.dumps({"parliaments": TEMPLATES}), encoding="utf-8")

    resolver = LocationResolver.from_file(path)

    assert resolver.resolve("s.mp", {"identifier": "3"}) == "fixtures/senator-3.html"


def test_packaged_locations_cover_every_scraper_key():
    resolver = load_default_resolver()

    assert resolver.resolve("k.mp_list.current").startswith("http://www.lachambre.be/kvvcr/")
    assert resolver.resolve(
        "s.dossier", {"legislatureNumber": 5, "dossierNumber": 1234, "lang": "nl"}
    ) == "http://www.senate.be/www/?MIval=/dossier&LEG=5&NR=1234&LANG=nl"
    assert "week=33" in resolver.resolve("k.agenda_page.committee_week", {"identifier": "33"})

import pytest

from hemicycle.errors import DictionaryMissError, ScrapeStructureError
from hemicycle.sources.base import ScrapeOptions
from hemicycle.sources.fetcher import build_document, create_provider
from hemicycle.sources.locations import load_default_resolver
from hemicycle.sources.senate import (
    CommitteeAgendaListScraper,
    CommitteeMeetingListScraper,
    CommitteeScraper,
    MPListScraper,
    MPScraper,
    PlenaryAgendaListScraper,
    PlenaryMeetingListScraper,
)

SENATOR_PAGE = """
<html><body>
<table>
<tr><th>Jean   Dupont - PS</th></tr>
<tr><td colspan="3">Sénateur de communauté (Parlement wallon)</td></tr>
<tr><td>Né à Namur le 3 avril 1965</td></tr>
<tr><th>Travail parlementaire</th></tr>
<tr><td><a href="?MIval=/Dossiers&amp;LEG=6&amp;ID=42">Législature 6</a>
<a href="?MIval=/Dossiers&amp;LEG=5&amp;ID=42">Législature 5</a></td></tr>
<tr><th>Appartenance aux commissions</th></tr>
<tr bgcolor="#eeeeee"><td><u>Président</u> <a href="?MIval=/Registers/ViewReg&amp;PUID=123">Justice</a></td></tr>
<tr bgcolor="#eeeeee"><td><u>Membre Suppléant</u> <a href="?MIval=/Registers/ViewReg&amp;PUID=456">Finances</a></td></tr>
<tr bgcolor="#eeeeee"><td><u>Membre</u> <a href="?MIval=/Registers/ViewReg&amp;PUID=123">Justice</a>
<a href="?MIval=/Registers/ViewReg&amp;PUID=789">Affaires sociales</a></td></tr>
<tr><td><a href="?MIval=/Registers/ViewReg&amp;PUID=999">Toutes les commissions</a></td></tr>
</table>
</body></html>
"""

SENATOR_LIST_PAGE = """
<html><body>
<table><tr><td><a href="?MIval=/index">Accueil</a></td></tr></table>
<table>
<tr><td><a href="?MIval=/showSenator&amp;ID=42&amp;LANG=fr">Dupont   Jean</a></td><td>PS</td></tr>
<tr><td><a href="?MIval=/showSenator&amp;ID=12O45&amp;LANG=fr">Peeters Anne</a></td><td>N-VA</td></tr>
<tr><td></td></tr>
</table>
</body></html>
"""

COMMITTEE_PAGE = """
<html><body>
<h1>Commission de la Justice</h1>
<h3>Président</h3>
<ul><li><a href="?MIval=/showSenator&amp;ID=42&amp;LANG=fr">Dupont Jean</a> (PS)</li></ul>
<h3>Membres</h3>
<ul>
<li><a href="?MIval=/showSenator&amp;ID=43&amp;LANG=fr">Peeters Anne</a> (N-VA)</li>
<li><a href="?MIval=/showSenator&amp;ID=44&amp;LANG=fr">Janssens Luc</a></li>
</ul>
<ul><li><a href="?MIval=/showSenator&amp;ID=43&amp;LANG=fr">Peeters Anne</a> (N-VA)</li></ul>
<h3>Membres Suppléants</h3>
<ul><li><a href="?MIval=/showSenator&amp;ID=46&amp;LANG=fr">Lambert Marie</a> (Ecolo)</li></ul>
</body></html>
"""

DUTCH_COMMITTEE_PAGE = "<html><body><h1>Commissie voor de Justitie</h1></body></html>"

THIS_WEEK_PAGE = """
<html><body>
<a href="?MIval=/Agenda/Plen&amp;DATUM='03/26/2015'&amp;ID=12&amp;TYP=plenag&amp;LANG=fr">Jeudi 26 mars</a>
<a href="?MIval=/Agenda/Plen&amp;DATUM='03/25/2015'&amp;ID=9&amp;TYP=plenag&amp;LANG=fr">Mercredi 25 mars</a>
<a href="?MIval=/Agenda/Com&amp;DATUM='03/24/2015'&amp;ID=7&amp;TYP=comag&amp;LANG=fr">Commission de la Justice</a>
<a href="?MIval=/Agenda/Plen&amp;DATUM='03/26/2015'&amp;ID=12&amp;TYP=plenag&amp;LANG=fr">Jeudi 26 mars (suite)</a>
</body></html>
"""

NEXT_WEEK_PAGE = """
<html><body>
<a href="?MIval=/Agenda/Plen&amp;DATUM='04/02/2015'&amp;ID=13&amp;TYP=plenag&amp;LANG=fr">Jeudi 2 avril</a>
<a href="?MIval=/Agenda/Plen&amp;DATUM='03/26/2015'&amp;ID=12&amp;TYP=plenag&amp;LANG=fr">Jeudi 26 mars</a>
<a href="?MIval=/Agenda/Com&amp;ID=8&amp;TYP=comag&amp;LANG=fr">Commission des Finances</a>
</body></html>
"""


class DummyFetcher:
    def __init__(self, pages):
        self.pages = pages
        self.calls = []

    def fetch(self, location, *, encode_query=True, charset=None):
        self.calls.append((location, encode_query))
        for fragment, content in self.pages.items():
            if fragment in location:
                return content
        raise AssertionError(f"unexpected fetch of {location}")


def _provider(pages):
    return create_provider(load_default_resolver(), DummyFetcher(pages))


# ----------------------------------------------------------------------
# Members
# ----------------------------------------------------------------------


def test_mp_scraper_extracts_senator_record():
    record = MPScraper().scrape_record({"identifier": "42", "document": build_document(SENATOR_PAGE)})

    assert record == {
        "identifier": "42",
        "given_name_surname": "Jean Dupont",
        "political_group": "PS",
        "legislatures": [5, 6],
        "committees": {"123": ["president", "member"], "456": ["substitute"], "789": ["member"]},
        "birthdate": "1965-04-03",
        "type": "federated entities",
        "origin": "Walloon Parliament",
    }


def test_mp_scraper_recognizes_co_opted_senators():
    page = SENATOR_PAGE.replace("Sénateur de communauté (Parlement wallon)", "Sénateur coopté")

    senator = MPScraper().scrape({"identifier": "42", "document": build_document(page)})

    assert senator.type == "co-opted"
    assert senator.origin is None


def test_mp_scraper_rejects_unknown_parliament_of_origin():
    page = SENATOR_PAGE.replace("Parlement wallon", "Parlement européen")

    with pytest.raises(DictionaryMissError) as excinfo:
        MPScraper().scrape({"identifier": "42", "document": build_document(page)})

    assert excinfo.value.dictionary == "origins"


def test_mp_scraper_without_optional_sections():
    page = "<html><body><table><tr><th>Anne Peeters</th></tr></table></body></html>"

    record = MPScraper().scrape_record({"identifier": "43", "document": build_document(page)})

    assert record == {
        "identifier": "43",
        "given_name_surname": "Anne Peeters",
        "political_group": None,
        "legislatures": [],
        "committees": None,
        "birthdate": None,
        "type": None,
        "origin": None,
    }


def test_mp_list_scraper_reads_second_table():
    records = MPListScraper().scrape_record({"document": build_document(SENATOR_LIST_PAGE)})

    assert records == [
        {"identifier": "42", "surname_given_name": "Dupont Jean"},
        {"identifier": "12O45", "surname_given_name": "Peeters Anne"},
    ]


def test_mp_list_scraper_location_depends_on_legislature():
    scraper = MPListScraper(_provider({}))

    assert scraper.provider_arguments(ScrapeOptions()).key == "s.mp_list.current"

    arguments = scraper.provider_arguments(ScrapeOptions(legislature_number=5))
    assert arguments.key == "s.mp_list.legislature"
    assert arguments.values == {"legislatureNumber": 5}


# ----------------------------------------------------------------------
# Committees
# ----------------------------------------------------------------------


def test_committee_scraper_reads_both_languages():
    fetcher = DummyFetcher({"LANG=fr": COMMITTEE_PAGE, "LANG=nl": DUTCH_COMMITTEE_PAGE})
    scraper = CommitteeScraper(create_provider(load_default_resolver(), fetcher))

    record = scraper.scrape_record({"identifier": "123"})

    assert record == {
        "identifier": "123",
        "name_fr": "Commission de la Justice",
        "name_nl": "Commissie voor de Justitie",
        "presidents": [{"identifier": "42", "surname_given_name": "Dupont Jean", "political_group": "PS"}],
        "members": [
            {"identifier": "43", "surname_given_name": "Peeters Anne", "political_group": "N-VA"},
            {"identifier": "44", "surname_given_name": "Janssens Luc", "political_group": None},
        ],
        "substitutes": [{"identifier": "46", "surname_given_name": "Lambert Marie", "political_group": "Ecolo"}],
    }
    # The Senate accepts encoded query strings
    assert all(encode_query for _, encode_query in fetcher.calls)


def test_committee_scraper_keeps_letter_o_in_seat_identifiers():
    page = COMMITTEE_PAGE.replace("ID=44&amp;", "ID=12O45&amp;")
    scraper = CommitteeScraper(_provider({"LANG=nl": DUTCH_COMMITTEE_PAGE}))

    committee = scraper.scrape_record({"identifier": "123", "document": build_document(page)})

    assert [seat["identifier"] for seat in committee["members"]] == ["43", "12O45"]


def test_committee_scraper_rejects_unknown_role():
    page = COMMITTEE_PAGE.replace("<h3>Président</h3>", "<h3>Rapporteurs</h3>")
    scraper = CommitteeScraper(_provider({"LANG=nl": DUTCH_COMMITTEE_PAGE}))

    with pytest.raises(ScrapeStructureError):
        scraper.scrape({"identifier": "123", "document": build_document(page)})


# ----------------------------------------------------------------------
# Agendas
# ----------------------------------------------------------------------


def test_plenary_meeting_list_sorts_by_identifier():
    records = PlenaryMeetingListScraper().scrape_record({"document": build_document(THIS_WEEK_PAGE)})

    assert records == [
        {"identifier": "9", "date": "2015-03-25"},
        {"identifier": "12", "date": "2015-03-26"},
    ]


def test_committee_meeting_list_allows_links_without_date():
    records = CommitteeMeetingListScraper().scrape_record({"document": build_document(NEXT_WEEK_PAGE)})

    assert records == [{"identifier": "8", "date": None}]


def test_meeting_list_location_uses_week_type():
    arguments = PlenaryMeetingListScraper(_provider({})).provider_arguments(ScrapeOptions(week_type="next_week"))

    assert arguments.key == "s.agenda_list.plenary_weeks"
    assert arguments.values == {"lang": "fr", "weekType": "next_week"}


def test_agenda_list_week_urls():
    scraper = PlenaryAgendaListScraper(_provider({}))

    assert scraper.week_urls() == [
        "http://www.senate.be/www/?MIval=/Agenda/Week&when=week&LANG=fr",
        "http://www.senate.be/www/?MIval=/Agenda/Week&when=next_week&LANG=fr",
    ]


def test_plenary_agenda_list_merges_this_week_and_next_week():
    scraper = PlenaryAgendaListScraper(_provider({"when=week&": THIS_WEEK_PAGE, "when=next_week&": NEXT_WEEK_PAGE}))

    records = scraper.scrape_record()

    assert records == [
        {"identifier": "9", "date": "2015-03-25"},
        {"identifier": "12", "date": "2015-03-26"},
        {"identifier": "13", "date": "2015-04-02"},
    ]


def test_committee_agenda_list_merges_both_weeks():
    scraper = CommitteeAgendaListScraper(_provider({"when=week&": THIS_WEEK_PAGE, "when=next_week&": NEXT_WEEK_PAGE}))

    assert [meeting.identifier for meeting in scraper.scrape()] == ["7", "8"]

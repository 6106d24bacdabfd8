from hemicycle.utils.text import (
    decode_group_identifier,
    match,
    normalize_record,
    normalize_whitespace,
    remove_label_tags,
    slugify,
    strip_tags,
)


def test_match_returns_full_match_then_groups():
    assert match(r"key=(\d+)&lang=(\w+)", "cfm?key=123&lang=fr") == ["key=123&lang=fr", "123", "fr"]


def test_match_returns_empty_list_without_match_or_subject():
    assert match(r"key=(\d+)", "nothing here") == []
    assert match(r"key=(\d+)", None) == []


def test_match_keeps_unmatched_optional_groups_as_none():
    assert match(r"(a)?(b)", "b") == ["b", None, "b"]


def test_match_honours_offset():
    assert match(r"\d+", "12 34", offset=2) == ["34"]


def test_normalize_whitespace_collapses_nbsp_and_runs():
    assert normalize_whitespace("a\u00a0   b") == "a b"
    assert normalize_whitespace("  Jean\n\t Dupont  ") == "Jean Dupont"


def test_normalize_whitespace_is_idempotent():
    value = normalize_whitespace("  Vice-Président   : ")
    assert normalize_whitespace(value) == value


def test_normalize_record_walks_nested_structures():
    record = {"name": " Jean  Dupont ", "groups": [" PS ", 3], "nested": {"a": "x  y"}}

    assert normalize_record(record) == {"name": "Jean Dupont", "groups": ["PS", 3], "nested": {"a": "x y"}}


def test_slugify_builds_ascii_row_labels():
    assert slugify("Chambre et/ou Sénat") == "chambre-etou-senat"
    assert slugify("N° du document") == "n-du-document"
    assert slugify("Date d'envoi") == "date-denvoi"
    assert slugify("  Intitulé  court ") == "intitule-court"


def test_slugify_returns_empty_string_for_symbols_only():
    assert slugify(" : ") == ""


def test_remove_label_tags_drops_label_and_content():
    assert remove_label_tags("<b>Adresse:</b> Rue de la Loi 16") == " Rue de la Loi 16"


def test_strip_tags_keeps_text():
    assert strip_tags("<i>Loi</i> du <b>jour</b>") == "Loi du jour"


def test_decode_group_identifier_maps_latin1_escapes():
    assert decode_group_identifier("cd%26v") == "cd&v"
    assert decode_group_identifier("Ecolo-Groen+%21") == "Ecolo-Groen !"
    assert decode_group_identifier("ind%E9pendant") == "indépendant"
    assert decode_group_identifier("Cr%E8che+%E0+l%27%EAtre") == "Crèche à l'être"

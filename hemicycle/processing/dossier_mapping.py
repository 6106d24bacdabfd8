"""Mapping, dictionaries and modifiers for the Chamber's dossiers."""

from hemicycle.processing.transformer import Transformer
from hemicycle.utils.dates import parse_localized_date

DOSSIER_TYPES = {
    "05": "LAW_PROPOSAL",
    "06": "RESOLUTION_PROPOSAL",
    "07": "DECLARATION_PROPOSAL",
    "08": "CONSTITUTIONAL_REVISION_PROPOSAL",
    # Code seen on the site but never explained
    "11": "???",
    "15": "COMMUNICATION_TO_PARLIAMENT",
    "23": "REPORT",
    "31": "AMENDMENT",
    "36": "OPINION_COUNCIL_OF_STATE",
    "50": "TABLE_OR_LIST",
    "64": "CONCERTATION_COMMITTEE_DECISION",
    "66": "ELECTIONS",
}

DOSSIER_STATUSES = {
    "PENDANT CHAMBRE": "PENDING",
    "RETIRE CHAMBRE": "REMOVED",
    "CADUQUE CHAMBRE": "VOID",
}

DICTIONARIES = {
    "dossierTypes": DOSSIER_TYPES,
    "dossierStatuses": DOSSIER_STATUSES,
}

MODIFIERS = {
    "dateToIso": parse_localized_date,
}

_MAIN_DOCUMENT = "chambre-etou-senat.document-principal"

DOSSIER_MAPPING = {
    "meta": {
        "destination": "meta",
        "fields": {
            "intitule.intitule-complet": "title",
            "intitule-court": "shortTitle",
            # Dossier number, 00K0000 format
            "n-du-document": "number",
            f"{_MAIN_DOCUMENT}.0.n-bicam": "bicameralNumber",
            "legislature": "legislature",
            f"{_MAIN_DOCUMENT}.0.type.code": {
                "destination": "dossierType",
                "dictionary": "dossierTypes",
            },
            "etat-davancement.chambre-fr": {
                "destination": "status.chamber",
                "dictionary": "dossierStatuses",
            },
            "article-constitution.code": "constitutionalArticle",
            f"{_MAIN_DOCUMENT}.0.date-de-depot": {
                "destination": "dates.submission",
                "modifier": "dateToIso",
            },
            f"{_MAIN_DOCUMENT}.0.prise-en-consideration": {
                "destination": "dates.consideration",
                "modifier": "dateToIso",
            },
            f"{_MAIN_DOCUMENT}.0.date-de-distribution": {
                "destination": "dates.distribution",
                "modifier": "dateToIso",
            },
            f"{_MAIN_DOCUMENT}.0.date-denvoi": {
                "destination": "dates.sending",
                "modifier": "dateToIso",
            },
        },
    },
    "main_document": {
        "destination": "documents",
        "source": _MAIN_DOCUMENT,
        "each": True,
        "fields": {
            # Document number, 00K0000000 format
            "n-du-document": "number",
            "type.code": {
                "destination": "dossierType",
                "dictionary": "dossierTypes",
            },
            "date-de-depot": {
                "destination": "dates.submission",
                "modifier": "dateToIso",
            },
            "date-de-distribution": {
                "destination": "dates.distribution",
                "modifier": "dateToIso",
            },
        },
    },
    "keywords": {
        "destination": "keywords",
        "fields": {
            "descripteurs-mots-cles.descripteurs-eurovoc": "eurovoc",
        },
    },
}


def dossier_transformer() -> Transformer:
    return Transformer(DOSSIER_MAPPING, DICTIONARIES, MODIFIERS)

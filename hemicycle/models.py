"""Pydantic models for scraped records.

Models are frozen: a record is produced by one scrape call and never changed.
``to_record()`` returns the plain nested mapping handed to callers.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer


class Record(BaseModel):
    """Base for every scraped record."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


def as_record(value: Any) -> Any:
    """Convert models nested in lists or mappings to plain records."""
    if isinstance(value, Record):
        return value.to_record()
    if isinstance(value, list):
        return [as_record(item) for item in value]
    if isinstance(value, dict):
        return {key: as_record(item) for key, item in value.items()}
    return value


# ----------------------------------------------------------------------
# Members
# ----------------------------------------------------------------------


class ChamberMember(Record):
    """A member of the Chamber.

    Contact fields are only present when the page has a paragraph for them;
    CV fields (gender, party, birthdate) are always present.
    """
    identifier: str
    given_name_surname: str
    legislatures: list[int]
    committees: Optional[dict[str, list[str]]] = None
    lang: Optional[str] = None
    address: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    gender: Optional[str] = None
    party: Optional[str] = None
    birthdate: Optional[str] = None

    def to_record(self) -> dict[str, Any]:
        return dict(sorted(super().to_record().items()))


class SenateMember(Record):
    """A senator; ``type`` is "federated entities", "co-opted" or ``None``."""
    identifier: str
    given_name_surname: str
    political_group: Optional[str] = None
    legislatures: list[int]
    committees: Optional[dict[str, list[str]]] = None
    birthdate: Optional[str] = None
    type: Optional[str] = None
    origin: Optional[str] = None


class MemberListEntry(Record):
    """One row of a member list; historical lists only carry the name and identifier."""
    identifier: str
    surname_given_name: str
    political_group: Optional[str] = None
    political_group_identifier: Optional[str] = None
    email: Optional[str] = Field(None, alias="e-mail")
    website: Optional[str] = None


# ----------------------------------------------------------------------
# Committees
# ----------------------------------------------------------------------


class Seat(Record):
    """A committee seat. A vacant seat has no identifier and no name."""
    identifier: Optional[str] = None
    given_name_surname: Optional[str] = None
    political_group: Optional[str] = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


class SenateSeat(Record):
    identifier: str
    surname_given_name: str
    political_group: Optional[str] = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


class Committee(Record):
    """A committee and its seats grouped by role.

    The role keys depend on the chamber, so they are kept in ``roles`` and
    flattened next to the names in the record.
    """
    identifier: str
    name_fr: Optional[str] = None
    name_nl: Optional[str] = None
    roles: dict[str, list[Seat | SenateSeat]] = Field(default_factory=dict)

    @model_serializer
    def _flatten_roles(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "identifier": self.identifier,
            "name_fr": self.name_fr,
            "name_nl": self.name_nl,
        }
        for role, seats in self.roles.items():
            record[role] = [seat.to_record() for seat in seats]
        return record

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


class CommitteeListEntry(Record):
    identifier: str
    name: str


# ----------------------------------------------------------------------
# Agendas and meetings
# ----------------------------------------------------------------------


class AgendaWeek(Record):
    """A week of meetings; dates are ISO 8601, or ``--MM-DD`` when the year is not given."""
    identifier: str
    start_date: Optional[str] = Field(None, alias="startDate")
    end_date: Optional[str] = Field(None, alias="endDate")
    url: Optional[str] = None


class Meeting(Record):
    identifier: str
    date: Optional[str] = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


# ----------------------------------------------------------------------
# Senate dossiers
# ----------------------------------------------------------------------


class DossierAuthor(Record):
    identifier: str
    given_name_surname: str


class DossierMeta(Record):
    legislature: str
    number: str
    title: dict[str, str]
    authors: Optional[list[DossierAuthor]] = None
    procedure: Optional[str] = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


class DocumentLink(Record):
    url: str
    label: str
    format: str


class SenateDocument(Record):
    number: Optional[str] = None
    type: str
    date: str
    links: list[DocumentLink]

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


class HistoryItem(Record):
    """One step of a dossier's history; ``documents`` only when the row references some."""
    group_name: Optional[str] = None
    date: str
    content_fr: str
    content_nl: str
    documents: Optional[list[str]] = None


class StatusItem(Record):
    group_name: str
    status_fr: str
    status_nl: str
    dates: Optional[list[str]] = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump()


class SenateDossier(Record):
    meta: DossierMeta
    keywords: Optional[dict[str, list[str]]] = None
    documents: list[SenateDocument]
    history: list[HistoryItem]
    status: list[StatusItem]

    def to_record(self) -> dict[str, Any]:
        return {
            "meta": self.meta.to_record(),
            "keywords": self.keywords,
            "documents": as_record(self.documents),
            "history": as_record(self.history),
            "status": as_record(self.status),
        }

"""Case, filter and page types for the Single Justice Procedure lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Generic, Literal, TypeVar

LONDON_POSTCODES = "LONDON_POSTCODES"
LONDON_POSTCODE_AREAS = frozenset({"E", "EC", "N", "NW", "SE", "SW", "W", "WC"})

ListKind = Literal["press", "public"]

CaseT = TypeVar("CaseT")


@dataclass(frozen=True)
class SjpOffence:
    title: str
    wording: str | None = None
    reporting_restriction: bool = False


@dataclass(frozen=True)
class SjpCase:
    """A press-list case: the accused, their offences and who prosecutes."""

    case_id: str
    name: str
    postcode: str | None = None
    offences: tuple[SjpOffence, ...] = ()
    date_of_birth: date | None = None
    age: int | None = None
    reference: str | None = None
    address: str | None = None
    prosecutor: str | None = None

    @property
    def reporting_restriction(self) -> bool:
        return any(offence.reporting_restriction for offence in self.offences)

    @property
    def offence(self) -> str | None:
        """First offence title (or wording when untitled)."""
        if not self.offences:
            return None
        first = self.offences[0]
        return first.title or first.wording or None


@dataclass(frozen=True)
class SjpPublicCase:
    """A public-list case: no date of birth, address or reference."""

    case_id: str
    name: str
    postcode: str | None = None
    offence: str | None = None
    prosecutor: str | None = None


@dataclass(frozen=True)
class SearchFilters:
    """
    Filters applied in order: search query, postcodes, prosecutors.

    Empty values mean "no filter". ``postcodes`` may contain the
    ``LONDON_POSTCODES`` sentinel.
    """

    search_query: str | None = None
    postcodes: tuple[str, ...] = ()
    prosecutors: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "postcodes", tuple(p for p in self.postcodes if p))
        object.__setattr__(self, "prosecutors", tuple(p for p in self.prosecutors if p))

    @property
    def is_empty(self) -> bool:
        return not (self.search_query and self.search_query.strip()) and not self.postcodes and not self.prosecutors


@dataclass(frozen=True)
class CasePage(Generic[CaseT]):
    cases: list[CaseT]
    total_cases: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return -(-self.total_cases // self.page_size) if self.total_cases else 0


@dataclass(frozen=True)
class PostcodeSummary:
    has_london_postcodes: bool
    postcodes: list[str] = field(default_factory=list)
    london_postcodes: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SjpListMetadata:
    artefact_id: str
    list_kind: ListKind
    publication_date: str | None
    case_count: int


__all__ = [
    "LONDON_POSTCODES",
    "LONDON_POSTCODE_AREAS",
    "ListKind",
    "SjpOffence",
    "SjpCase",
    "SjpPublicCase",
    "SearchFilters",
    "CasePage",
    "PostcodeSummary",
    "SjpListMetadata",
]

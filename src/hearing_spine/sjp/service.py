"""
Search, filter, sort and paginate SJP cases read from the artefact store.

Manifesto:
    SJP lists carry tens of thousands of cases, published as one JSON
    document per list. Every query re-reads the document, extracts the cases
    and filters them in memory: there is no per-case persistence, so results
    always reflect the current file for the artefact.

Architecture:
    ::

        store.read_json(artefact_id) ──► extract_press_cases
                                             │
                        apply_filters: search ─► postcodes ─► prosecutors
                                             │
                              sort (collation key, stable)
                                             │
                         slice [(page-1)*size, page*size)  ──► CasePage

Examples:
    >>> service = SjpCaseService(store)
    >>> page = service.get_press_cases("abc", SearchFilters(postcodes=("LONDON_POSTCODES",)), page=1)
    >>> page.total_cases, len(page.cases)
    (300, 200)

Tags:
    sjp, search, filtering, pagination, hearing-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Callable, Sequence
from datetime import date
from typing import Any, TypeVar

from hearing_spine.core.errors import ArtefactNotFoundError
from hearing_spine.core.logging import get_logger
from hearing_spine.core.settings import CASES_PER_PAGE
from hearing_spine.sjp.models import (
    LONDON_POSTCODE_AREAS,
    LONDON_POSTCODES,
    CasePage,
    PostcodeSummary,
    SearchFilters,
    SjpCase,
    SjpListMetadata,
    SjpPublicCase,
)
from hearing_spine.sjp.parser import (
    determine_list_kind,
    extract_case_count,
    extract_press_cases,
    publication_date,
    to_public_case,
)
from hearing_spine.storage.local import ArtefactStore

logger = get_logger(__name__)

PUBLIC_SORT_FIELDS = ("name", "postcode", "offence", "prosecutor")

_POSTAL_AREA = re.compile(r"^[A-Za-z]+")

CaseT = TypeVar("CaseT", SjpCase, SjpPublicCase)


def collation_key(value: str | None) -> str:
    """Accent- and case-insensitive sort key; ``None`` sorts as empty."""
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(c for c in decomposed if not unicodedata.combining(c)).casefold()


def is_london_postcode(postcode: str | None) -> bool:
    """True when the postcode's postal area (its leading letters) is a London area."""
    if not postcode:
        return False
    match = _POSTAL_AREA.match(postcode.strip())
    return bool(match) and match.group(0).upper() in LONDON_POSTCODE_AREAS


def _matches_postcode(postcode: str | None, selections: Sequence[str]) -> bool:
    if not postcode:
        return False
    lowered = postcode.lower()
    for selection in selections:
        if selection == LONDON_POSTCODES:
            if is_london_postcode(postcode):
                return True
        elif lowered.startswith(selection.strip().lower()):
            return True
    return False


def apply_filters(cases: Sequence[CaseT], filters: SearchFilters | None) -> list[CaseT]:
    """Apply search, then postcode, then prosecutor filters, keeping order."""
    result = list(cases)
    if filters is None:
        return result

    query = (filters.search_query or "").strip().lower()
    if query:
        result = [
            case
            for case in result
            if query in case.name.lower()
            or query in (getattr(case, "reference", None) or "").lower()
        ]

    if filters.postcodes:
        result = [case for case in result if _matches_postcode(case.postcode, filters.postcodes)]

    if filters.prosecutors:
        allowed = set(filters.prosecutors)
        result = [case for case in result if case.prosecutor in allowed]

    return result


def paginate(cases: Sequence[CaseT], page: int, page_size: int) -> CasePage[CaseT]:
    page = max(page, 1)
    start = (page - 1) * page_size
    return CasePage(
        cases=list(cases[start : start + page_size]),
        total_cases=len(cases),
        page=page,
        page_size=page_size,
    )


class SjpCaseService:
    """Queries over the SJP document stored for an artefact."""

    def __init__(
        self,
        store: ArtefactStore,
        page_size: int = CASES_PER_PAGE,
        today: Callable[[], date] = date.today,
    ):
        if page_size < 1:
            raise ValueError("page_size must be positive")
        self.store = store
        self.page_size = page_size
        self._today = today

    # =========================================================================
    # Loading
    # =========================================================================

    def _load_document(self, artefact_id: str) -> Any:
        document = self.store.read_json(artefact_id)
        if document is None:
            logger.warning("sjp_document_missing", artefact_id=artefact_id)
            raise ArtefactNotFoundError(artefact_id)
        return document

    def _press_cases(self, artefact_id: str) -> list[SjpCase]:
        return extract_press_cases(self._load_document(artefact_id), today=self._today())

    # =========================================================================
    # Case queries
    # =========================================================================

    def get_all_press_cases(self, artefact_id: str, filters: SearchFilters | None = None) -> list[SjpCase]:
        """Every matching press case sorted by name; used for CSV export."""
        cases = apply_filters(self._press_cases(artefact_id), filters)
        cases.sort(key=lambda case: collation_key(case.name))
        return cases

    def get_press_cases(
        self,
        artefact_id: str,
        filters: SearchFilters | None = None,
        page: int = 1,
    ) -> CasePage[SjpCase]:
        cases = self.get_all_press_cases(artefact_id, filters)
        result = paginate(cases, page, self.page_size)
        logger.debug(
            "sjp_press_cases_queried",
            artefact_id=artefact_id,
            page=result.page,
            total_cases=result.total_cases,
        )
        return result

    def get_public_cases(
        self,
        artefact_id: str,
        filters: SearchFilters | None = None,
        page: int = 1,
        sort_by: str = "name",
        sort_order: str = "asc",
    ) -> CasePage[SjpPublicCase]:
        """
        Public cases, sortable by name, postcode, offence or prosecutor.

        An unknown ``sort_by`` raises ``ValueError``; any ``sort_order`` other
        than ``desc`` sorts ascending.
        """
        if sort_by not in PUBLIC_SORT_FIELDS:
            raise ValueError(f"Unsupported sort field: {sort_by}")

        cases = apply_filters([to_public_case(c) for c in self._press_cases(artefact_id)], filters)
        cases.sort(
            key=lambda case: collation_key(getattr(case, sort_by)),
            reverse=sort_order.lower() == "desc",
        )
        result = paginate(cases, page, self.page_size)
        logger.debug(
            "sjp_public_cases_queried",
            artefact_id=artefact_id,
            page=result.page,
            total_cases=result.total_cases,
            sort_by=sort_by,
        )
        return result

    # =========================================================================
    # Auxiliary queries
    # =========================================================================

    def get_unique_prosecutors(self, artefact_id: str) -> list[str]:
        return sorted({case.prosecutor for case in self._press_cases(artefact_id) if case.prosecutor})

    def get_unique_postcodes(self, artefact_id: str) -> PostcodeSummary:
        postcodes = sorted({case.postcode for case in self._press_cases(artefact_id) if case.postcode})
        london = [postcode for postcode in postcodes if is_london_postcode(postcode)]
        return PostcodeSummary(
            has_london_postcodes=bool(london),
            postcodes=postcodes,
            london_postcodes=london,
        )

    def get_list_metadata(self, artefact_id: str) -> SjpListMetadata:
        document = self._load_document(artefact_id)
        return SjpListMetadata(
            artefact_id=artefact_id,
            list_kind=determine_list_kind(document),
            publication_date=publication_date(document),
            case_count=extract_case_count(document),
        )


__all__ = [
    "PUBLIC_SORT_FIELDS",
    "SjpCaseService",
    "apply_filters",
    "collation_key",
    "is_london_postcode",
    "paginate",
]

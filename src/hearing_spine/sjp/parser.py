"""
Extraction of SJP cases from a published hearing-list document.

The document nests hearings as
``courtLists[].courtHouse.courtRoom[].session[].sittings[].hearing[]``.
Every level is optional: a missing or malformed level contributes no
hearings rather than raising, so a partially populated list still renders.

A case's ``case_id`` is its 1-based position among all hearings in document
order (``case-1``, ``case-2``, ...), stable across re-reads of the same
document.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping
from datetime import date, datetime
from typing import Any

from hearing_spine.sjp.models import ListKind, SjpCase, SjpOffence, SjpPublicCase

ACCUSED_ROLE = "ACCUSED"
PROSECUTOR_ROLES = frozenset({"PROSECUTOR", "Prosecuter"})

OUTWARD_CODE_PATTERN = re.compile(r"^[A-Z]{1,2}[0-9]{0,2}[A-Z]?$")


def _items(container: Any, key: str) -> list[Any]:
    """``container[key]`` when it is a list, else ``[]``."""
    if not isinstance(container, Mapping):
        return []
    value = container.get(key)
    return value if isinstance(value, list) else []


def _mapping(container: Any, key: str) -> Mapping[str, Any]:
    if not isinstance(container, Mapping):
        return {}
    value = container.get(key)
    return value if isinstance(value, Mapping) else {}


def _text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


# =============================================================================
# Hearing walk
# =============================================================================


def iter_hearings(document: Any) -> Iterator[Mapping[str, Any]]:
    for court_list in _items(document, "courtLists"):
        court_house = _mapping(court_list, "courtHouse")
        for court_room in _items(court_house, "courtRoom"):
            for session in _items(court_room, "session"):
                for sitting in _items(session, "sittings"):
                    for hearing in _items(sitting, "hearing"):
                        if isinstance(hearing, Mapping):
                            yield hearing


def extract_all_hearings(document: Any) -> list[Mapping[str, Any]]:
    return list(iter_hearings(document))


def extract_case_count(document: Any) -> int:
    return sum(1 for _ in iter_hearings(document))


# =============================================================================
# Party helpers
# =============================================================================


def _find_party(hearing: Mapping[str, Any], roles: frozenset[str]) -> Mapping[str, Any] | None:
    for party in _items(hearing, "party"):
        if isinstance(party, Mapping) and party.get("partyRole") in roles:
            return party
    return None


def _party_address(party: Mapping[str, Any] | None) -> Mapping[str, Any]:
    if party is None:
        return {}
    return _mapping(_mapping(party, "individualDetails"), "address") or _mapping(
        _mapping(party, "organisationDetails"), "address"
    )


def format_name(party: Mapping[str, Any] | None) -> str:
    if party is None:
        return "Unknown"

    individual = _mapping(party, "individualDetails")
    if individual:
        parts = [
            _text(individual.get(key))
            for key in ("title", "individualForenames", "individualMiddleName", "individualSurname")
        ]
        name = " ".join(part for part in parts if part)
        if name:
            return name

    organisation_name = _text(_mapping(party, "organisationDetails").get("organisationName"))
    return organisation_name or "Unknown"


def format_address(party: Mapping[str, Any] | None) -> str | None:
    address = _party_address(party)
    if not address:
        return None

    parts = [_text(line) for line in _items(address, "line")]
    parts += [_text(address.get(key)) for key in ("town", "county", "postCode")]
    joined = ", ".join(part for part in parts if part)
    return joined or None


def postcode_outward_code(postcode: Any) -> str | None:
    """
    Outward code of a UK postcode.

    ``"BS8 1AB"`` -> ``"BS8"``; ``"EC1A"`` -> ``"EC1A"``; unrecognisable
    values without a space -> ``None``.
    """
    text = _text(postcode)
    if text is None:
        return None
    head, sep, _ = text.partition(" ")
    if sep and head:
        return head
    return text if OUTWARD_CODE_PATTERN.match(text) else None


def parse_date_of_birth(value: Any) -> date | None:
    """Accept ``dd/mm/yyyy`` or an ISO-8601 date or datetime."""
    text = _text(value)
    if text is None:
        return None

    if "/" in text:
        parts = text.split("/")
        if len(parts) != 3:
            return None
        try:
            day, month, year = (int(part) for part in parts)
            return date(year, month, day)
        except ValueError:
            return None

    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def calculate_age(date_of_birth: date | None, today: date | None = None) -> int | None:
    if date_of_birth is None:
        return None
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


def _offences(hearing: Mapping[str, Any]) -> tuple[SjpOffence, ...]:
    offences = []
    for offence in _items(hearing, "offence"):
        if not isinstance(offence, Mapping):
            continue
        offences.append(
            SjpOffence(
                title=_text(offence.get("offenceTitle")) or "",
                wording=_text(offence.get("offenceWording")),
                reporting_restriction=offence.get("reportingRestriction") is True,
            )
        )
    return tuple(offences)


def _reference(hearing: Mapping[str, Any]) -> str | None:
    cases = _items(hearing, "case")
    if cases and isinstance(cases[0], Mapping):
        return _text(cases[0].get("caseUrn"))
    return None


# =============================================================================
# Public API
# =============================================================================


def hearing_to_case(hearing: Mapping[str, Any], position: int, today: date | None = None) -> SjpCase:
    accused = _find_party(hearing, frozenset({ACCUSED_ROLE}))
    prosecutor = _find_party(hearing, PROSECUTOR_ROLES)
    date_of_birth = parse_date_of_birth(_mapping(accused, "individualDetails").get("dateOfBirth"))

    return SjpCase(
        case_id=f"case-{position}",
        name=format_name(accused),
        postcode=postcode_outward_code(_party_address(accused).get("postCode")),
        offences=_offences(hearing),
        date_of_birth=date_of_birth,
        age=calculate_age(date_of_birth, today),
        reference=_reference(hearing),
        address=format_address(accused),
        prosecutor=_text(_mapping(prosecutor, "organisationDetails").get("organisationName")),
    )


def extract_press_cases(document: Any, today: date | None = None) -> list[SjpCase]:
    return [
        hearing_to_case(hearing, position, today)
        for position, hearing in enumerate(iter_hearings(document), start=1)
    ]


def to_public_case(case: SjpCase) -> SjpPublicCase:
    return SjpPublicCase(
        case_id=case.case_id,
        name=case.name,
        postcode=case.postcode,
        offence=case.offence,
        prosecutor=case.prosecutor,
    )


def extract_public_cases(document: Any) -> list[SjpPublicCase]:
    return [to_public_case(case) for case in extract_press_cases(document)]


def determine_list_kind(document: Any) -> ListKind:
    """``press`` when the first hearing's accused has a date of birth."""
    first = next(iter_hearings(document), None)
    if first is None:
        return "public"
    accused = _find_party(first, frozenset({ACCUSED_ROLE}))
    return "press" if _text(_mapping(accused, "individualDetails").get("dateOfBirth")) else "public"


def publication_date(document: Any) -> str | None:
    return _text(_mapping(document, "document").get("publicationDate"))


__all__ = [
    "iter_hearings",
    "extract_all_hearings",
    "extract_case_count",
    "format_name",
    "format_address",
    "postcode_outward_code",
    "parse_date_of_birth",
    "calculate_age",
    "hearing_to_case",
    "extract_press_cases",
    "extract_public_cases",
    "to_public_case",
    "determine_list_kind",
    "publication_date",
]

"""
Validation of inbound publication requests.

Unlike spreadsheet conversion, which stops at the first problem, this
validator checks every field and returns all errors at once: the publishing
system is an automated client and fixes its payload in a single round trip.

A court id that does not match a known location is not an error. The
result's ``location_exists`` flag is False and the artefact is stored
flagged as "no match" for an administrator to resolve later.

Examples:
    >>> result = validate_ingestion_request(
    ...     IngestionRequest(provenance="FAX"),
    ...     body_size=128,
    ...     location_directory=InMemoryLocationDirectory.default(),
    ... )
    >>> result.is_valid
    False
    >>> result.messages_for("provenance")
    ['Invalid provenance. Allowed values: XHIBIT, MANUAL_UPLOAD, SNL, COMMON_PLATFORM']

Tags:
    ingestion, validation, publication, hearing-spine
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from hearing_spine.core.logging import get_logger
from hearing_spine.core.settings import MAX_PAYLOAD_BYTES
from hearing_spine.ingestion.models import IngestionRequest, IngestionValidationResult, ValidationIssue
from hearing_spine.reference import (
    KNOWN_LIST_TYPES,
    Language,
    ListType,
    LocationDirectory,
    Provenance,
    Sensitivity,
)

logger = get_logger(__name__)

# Returns the messages describing what is wrong with the hearing list (empty when valid)
HearingListValidator = Callable[[int, Any], Sequence[str]]

REQUIRED_FIELDS = (
    "court_id",
    "provenance",
    "content_date",
    "list_type",
    "sensitivity",
    "language",
    "display_from",
    "display_to",
    "hearing_list",
)

_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _parse_iso_datetime(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    # Naive timestamps are taken as UTC so they compare with aware ones
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def parse_iso_date(value: Any) -> date | None:
    if not isinstance(value, str) or not _ISO_DATE_PREFIX.match(value.strip()):
        return None
    parsed = _parse_iso_datetime(value)
    return parsed.date() if parsed else None


def parse_iso_datetime(value: Any) -> datetime | None:
    """An ISO-8601 timestamp with a time part (``T`` separator), else ``None``."""
    if not isinstance(value, str) or "T" not in value:
        return None
    return _parse_iso_datetime(value)


def _parse_court_id(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _allowed(enum: type[Enum]) -> list[str]:
    return [member.value for member in enum]


def _format_megabytes(size: int) -> str:
    return f"{size / 1024 / 1024:g}MB"


def validate_ingestion_request(
    request: IngestionRequest,
    body_size: int,
    *,
    location_directory: LocationDirectory,
    list_types: Iterable[ListType] = KNOWN_LIST_TYPES,
    max_payload_bytes: int = MAX_PAYLOAD_BYTES,
    hearing_list_validator: HearingListValidator | None = None,
) -> IngestionValidationResult:
    """Check every field of ``request`` and collect all failures."""
    errors: list[ValidationIssue] = []

    def error(field_name: str, message: str) -> None:
        errors.append(ValidationIssue(field_name, message))

    if body_size > max_payload_bytes:
        error("body", f"Payload too large. Maximum size is {_format_megabytes(max_payload_bytes)}")

    for field_name in REQUIRED_FIELDS:
        if _is_missing(getattr(request, field_name)):
            error(field_name, f"{field_name} is required")

    # Enumerated values
    for field_name, enum in (
        ("provenance", Provenance),
        ("sensitivity", Sensitivity),
        ("language", Language),
    ):
        value = getattr(request, field_name)
        if not _is_missing(value) and value not in _allowed(enum):
            error(field_name, f"Invalid {field_name}. Allowed values: {', '.join(_allowed(enum))}")

    list_types = list(list_types)
    list_type_id: int | None = None
    if not _is_missing(request.list_type):
        match = next((lt for lt in list_types if lt.name == request.list_type), None)
        if match is None:
            error(
                "list_type",
                f"Invalid list type. Allowed values: {', '.join(lt.name for lt in list_types)}",
            )
        else:
            list_type_id = match.id

    # Dates
    if not _is_missing(request.content_date) and parse_iso_date(request.content_date) is None:
        error("content_date", "content_date must be a valid ISO 8601 date")

    display_from = display_to = None
    if not _is_missing(request.display_from):
        display_from = parse_iso_datetime(request.display_from)
        if display_from is None:
            error("display_from", "display_from must be a valid ISO 8601 datetime")
    if not _is_missing(request.display_to):
        display_to = parse_iso_datetime(request.display_to)
        if display_to is None:
            error("display_to", "display_to must be a valid ISO 8601 datetime")
    if display_from is not None and display_to is not None and display_to <= display_from:
        error("display_to", "display_to must be after display_from")

    # Location: a miss is reported through location_exists, not as an error
    location_exists = False
    if not _is_missing(request.court_id):
        court_id = _parse_court_id(request.court_id)
        if court_id is None:
            error("court_id", "court_id must be a valid number")
        else:
            location_exists = location_directory.get_location_by_id(court_id) is not None

    if hearing_list_validator is not None and list_type_id is not None and not errors:
        try:
            messages = hearing_list_validator(list_type_id, request.hearing_list)
        except Exception as e:
            logger.warning("hearing_list_validator_failed", list_type_id=list_type_id, error=str(e))
            messages = ["Failed to validate hearing_list against schema"]
        for message in messages:
            error("hearing_list", message or "Invalid hearing_list structure")

    result = IngestionValidationResult(
        errors=errors,
        location_exists=location_exists,
        list_type_id=list_type_id,
    )
    if errors:
        logger.info(
            "ingestion_rejected",
            fields=sorted({issue.field for issue in errors}),
            error_count=len(errors),
        )
    return result


__all__ = [
    "HearingListValidator",
    "REQUIRED_FIELDS",
    "parse_iso_date",
    "parse_iso_datetime",
    "validate_ingestion_request",
]

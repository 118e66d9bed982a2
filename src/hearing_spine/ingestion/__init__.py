"""Validation of inbound publication requests."""

from hearing_spine.ingestion.models import IngestionRequest, IngestionValidationResult, ValidationIssue
from hearing_spine.ingestion.validation import HearingListValidator, validate_ingestion_request

__all__ = [
    "HearingListValidator",
    "IngestionRequest",
    "IngestionValidationResult",
    "ValidationIssue",
    "validate_ingestion_request",
]

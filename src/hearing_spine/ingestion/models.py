"""Inbound publication request and validation result types."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from typing import Any


@dataclass
class IngestionRequest:
    """
    Publication metadata plus the hearing list body, exactly as received.

    Every field is optional so that absent values reach the validator and
    are reported, rather than failing at construction.
    """

    court_id: Any = None
    provenance: Any = None
    content_date: Any = None
    list_type: Any = None
    sensitivity: Any = None
    language: Any = None
    display_from: Any = None
    display_to: Any = None
    hearing_list: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> IngestionRequest:
        """Build from a decoded JSON payload; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass
class IngestionValidationResult:
    errors: list[ValidationIssue] = field(default_factory=list)
    location_exists: bool = False
    list_type_id: int | None = None

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def messages_for(self, field_name: str) -> list[str]:
        return [issue.message for issue in self.errors if issue.field == field_name]

    def to_dict(self) -> dict[str, Any]:
        """Wire shape returned to the publishing system."""
        return {
            "isValid": self.is_valid,
            "errors": [issue.to_dict() for issue in self.errors],
            "locationExists": self.location_exists,
            "listTypeId": self.list_type_id,
        }


__all__ = ["IngestionRequest", "ValidationIssue", "IngestionValidationResult"]

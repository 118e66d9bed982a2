"""
Structured error types for the hearing-list pipeline.

Every failure the pipeline reports to a caller is a ``HearingSpineError``
subclass carrying a category, structured context and an optional chained
cause. Callers branch on the type (``ConverterNotFoundError`` vs
``ConversionError``) rather than parsing messages; the message itself is the
human-readable text shown to the uploader.

Manifesto:
    - **Typed hierarchy:** one subclass per failure domain
    - **Messages are UX:** converter messages are shown verbatim to uploaders
    - **Rich context:** row numbers, field names and artefact ids travel with
      the error for logging
    - **Error chaining:** wrap low-level exceptions with ``cause=``

Architecture:
    ::

        HearingSpineError (category, context, cause)
        ├── ValidationError            (VALIDATION)
        │   ├── FieldValidationError   row_number, field, reason
        │   └── ConversionError        row_number (optional)
        ├── RegistryError              (REGISTRY)
        │   └── ConverterNotFoundError list_type_id
        ├── StorageError               (STORAGE)
        │   ├── InvalidArtefactIdError
        │   ├── InvalidFileError
        │   └── ArtefactNotFoundError
        └── ConfigError                (CONFIG)

Examples:
    >>> err = ConverterNotFoundError(999)
    >>> str(err)
    'No converter found for list type ID: 999'
    >>> err.to_dict()["category"]
    'REGISTRY'

Tags:
    error-handling, exception-hierarchy, error-context, hearing-spine

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as dataclass_field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories used for classification and log routing."""

    VALIDATION = "VALIDATION"     # Uploaded data or payload is wrong
    PARSE = "PARSE"               # Bytes could not be decoded at all
    REGISTRY = "REGISTRY"         # List type has no converter
    STORAGE = "STORAGE"           # File store, identifiers, file names
    CONFIG = "CONFIG"             # Missing or invalid settings
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only non-None fields are serialized by ``to_dict()``; anything that has no
    dedicated field goes into ``metadata``.
    """

    artefact_id: str | None = None
    list_type_id: int | None = None
    row_number: int | None = None
    field: str | None = None
    metadata: dict[str, Any] = dataclass_field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["artefact_id", "list_type_id", "row_number", "field"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class HearingSpineError(Exception):
    """
    Base exception for all pipeline errors.

    Subclasses set ``default_category``; instances may override it. The
    original exception, when wrapping one, is passed as ``cause`` and chained
    as ``__cause__`` so tracebacks keep the root failure.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> HearingSpineError:
        """
        Add context to this error (fluent API).

        Usage:
            raise StorageError("Write failed").with_context(artefact_id="abc")
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(HearingSpineError):
    """Submitted data violates a rule. The data must be fixed and resubmitted."""

    default_category = ErrorCategory.VALIDATION


class FieldValidationError(ValidationError):
    """
    A single cell value failed a field validator.

    Carries the 1-based spreadsheet row, the field's display name and the
    bare reason so callers can render their own message if needed.
    """

    def __init__(
        self,
        message: str,
        *,
        row_number: int,
        field: str,
        reason: str,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.row_number = row_number
        self.field = field
        self.reason = reason
        self.context.row_number = row_number
        self.context.field = field


class ConversionError(ValidationError):
    """A spreadsheet could not be converted. The first problem found aborts."""

    def __init__(self, message: str, *, row_number: int | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.row_number = row_number
        if row_number is not None:
            self.context.row_number = row_number


# =============================================================================
# REGISTRY ERRORS
# =============================================================================


class RegistryError(HearingSpineError):
    """Converter registry misuse (duplicate id, registration after freeze)."""

    default_category = ErrorCategory.REGISTRY


class ConverterNotFoundError(RegistryError):
    """No converter is registered for the requested list type."""

    def __init__(self, list_type_id: int):
        super().__init__(f"No converter found for list type ID: {list_type_id}")
        self.list_type_id = list_type_id
        self.context.list_type_id = list_type_id


# =============================================================================
# STORAGE ERRORS
# =============================================================================


class StorageError(HearingSpineError):
    """File store failure."""

    default_category = ErrorCategory.STORAGE


class InvalidArtefactIdError(StorageError):
    """Artefact identifier is not safe to use as a file name."""

    pass


class InvalidFileError(StorageError):
    """Uploaded file name has no extension or a disallowed one."""

    pass


class ArtefactNotFoundError(StorageError):
    """No stored content exists for the artefact."""

    def __init__(self, artefact_id: str):
        super().__init__(f"No stored content for artefact: {artefact_id}")
        self.artefact_id = artefact_id
        self.context.artefact_id = artefact_id


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(HearingSpineError):
    """Configuration error."""

    default_category = ErrorCategory.CONFIG


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "HearingSpineError",
    "ValidationError",
    "FieldValidationError",
    "ConversionError",
    "RegistryError",
    "ConverterNotFoundError",
    "StorageError",
    "InvalidArtefactIdError",
    "InvalidFileError",
    "ArtefactNotFoundError",
    "ConfigError",
]

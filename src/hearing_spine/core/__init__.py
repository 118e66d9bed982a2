"""Ambient primitives shared by every hearing-spine module: errors, logging, settings."""

from hearing_spine.core.errors import (
    ArtefactNotFoundError,
    ConfigError,
    ConversionError,
    ConverterNotFoundError,
    ErrorCategory,
    ErrorContext,
    FieldValidationError,
    HearingSpineError,
    InvalidArtefactIdError,
    InvalidFileError,
    RegistryError,
    StorageError,
    ValidationError,
)
from hearing_spine.core.logging import LogContext, configure_logging, get_logger
from hearing_spine.core.settings import HearingSpineSettings, get_settings, reset_settings

__all__ = [
    "ArtefactNotFoundError",
    "ConfigError",
    "ConversionError",
    "ConverterNotFoundError",
    "ErrorCategory",
    "ErrorContext",
    "FieldValidationError",
    "HearingSpineError",
    "InvalidArtefactIdError",
    "InvalidFileError",
    "RegistryError",
    "StorageError",
    "ValidationError",
    "LogContext",
    "configure_logging",
    "get_logger",
    "HearingSpineSettings",
    "get_settings",
    "reset_settings",
]

"""Artefact file store."""

from hearing_spine.storage.content_type import file_name_for, get_content_type
from hearing_spine.storage.local import (
    ALLOWED_EXTENSIONS,
    ArtefactStore,
    StoredFile,
    validate_artefact_id,
)

__all__ = [
    "ALLOWED_EXTENSIONS",
    "ArtefactStore",
    "StoredFile",
    "file_name_for",
    "get_content_type",
    "validate_artefact_id",
]

"""Content-type and download file-name helpers for stored artefacts."""

from __future__ import annotations

DEFAULT_CONTENT_TYPE = "application/octet-stream"
DEFAULT_EXTENSION = ".pdf"

CONTENT_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".htm": "text/html",
    ".html": "text/html",
    ".csv": "text/csv",
    ".json": "application/json",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def normalize_extension(extension: str | None) -> str:
    """``"PDF"``, ``".Pdf"`` and ``"pdf"`` all become ``".pdf"``; blank stays blank."""
    if not extension:
        return ""
    extension = extension.strip().lower()
    if not extension:
        return ""
    return extension if extension.startswith(".") else f".{extension}"


def get_content_type(extension: str | None) -> str:
    """MIME type for a file extension, ``application/octet-stream`` when unknown."""
    return CONTENT_TYPES.get(normalize_extension(extension), DEFAULT_CONTENT_TYPE)


def file_name_for(artefact_id: str, extension: str | None = None) -> str:
    """Download file name for an artefact; PDF when no extension is known."""
    return f"{artefact_id}{normalize_extension(extension) or DEFAULT_EXTENSION}"


__all__ = [
    "CONTENT_TYPES",
    "DEFAULT_CONTENT_TYPE",
    "DEFAULT_EXTENSION",
    "normalize_extension",
    "get_content_type",
    "file_name_for",
]

"""
Local filesystem artefact store.

One flat directory, one file per artefact: ``<root>/<artefact_id><ext>``.
The artefact identifier is the only key. Saving a new file for an artefact
replaces whatever was stored before, whatever its extension.

Manifesto:
    Artefact identifiers arrive from URLs and payloads, so they are treated
    as hostile. An identifier is checked against a strict character set
    before any filesystem call, and every resolved path is re-checked to be
    inside the root before it is read. Read accessors never raise: a missing,
    unreadable or unsafe artefact is logged and reported as ``None``, which
    the caller renders as "not found".

Architecture:
    ::

        save(id, name, data)                retrieve(id)
            │                                   │
        validate id ─► extension allow-list  validate id ─► scandir(root)
            │                                   │
        remove siblings (other ext)          exact "<id>.<ext>" else first
            │                                sorted "<id>*" entry
        write <root>/<id><ext>                  │
                                             contained in root? ─► read bytes

Examples:
    >>> store = ArtefactStore(tmp_path)
    >>> store.save("abc-123", "list.PDF", b"%PDF")
    PosixPath('.../abc-123.pdf')
    >>> store.retrieve("abc-123").file_name
    'abc-123.pdf'
    >>> store.retrieve("../etc/passwd") is None
    True

Tags:
    storage, filesystem, artefacts, path-safety, hearing-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import asyncio
import json
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from hearing_spine.core.errors import InvalidArtefactIdError, InvalidFileError, StorageError
from hearing_spine.core.logging import get_logger
from hearing_spine.storage.content_type import DEFAULT_EXTENSION, get_content_type

logger = get_logger(__name__)

MAX_ARTEFACT_ID_LENGTH = 255
ARTEFACT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
ALLOWED_EXTENSIONS = frozenset(
    {".pdf", ".doc", ".docx", ".htm", ".html", ".csv", ".json", ".xlsx", ".xls", ".txt"}
)


def validate_artefact_id(artefact_id: str) -> str:
    """Return ``artefact_id`` unchanged if it is safe to use as a file stem."""
    if not isinstance(artefact_id, str) or not artefact_id:
        raise InvalidArtefactIdError("Invalid artefactId: must be a non-empty string")
    if len(artefact_id) > MAX_ARTEFACT_ID_LENGTH:
        raise InvalidArtefactIdError(
            f"Invalid artefactId: must be at most {MAX_ARTEFACT_ID_LENGTH} characters"
        )
    # The pattern already excludes "/", "\", "." and NUL
    if not ARTEFACT_ID_PATTERN.match(artefact_id):
        raise InvalidArtefactIdError(
            "Invalid artefactId: only alphanumeric characters, hyphens, and underscores are allowed"
        )
    return artefact_id


@dataclass(frozen=True)
class StoredFile:
    """Bytes of a stored artefact plus the name it is served under."""

    data: bytes
    file_name: str
    extension: str

    @property
    def content_type(self) -> str:
        return get_content_type(self.extension)


class ArtefactStore:
    """Flat directory of artefact files keyed by artefact identifier."""

    def __init__(self, root: str | Path):
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"ArtefactStore(root={str(self.root)!r})"

    # =========================================================================
    # Writes
    # =========================================================================

    def save(self, artefact_id: str, original_file_name: str, data: bytes) -> Path:
        """
        Store ``data`` as ``<root>/<artefact_id><ext>``.

        ``<ext>`` is the lower-cased extension of ``original_file_name``.
        Any file already stored for the artefact under another extension is
        removed; one with the same extension is overwritten.

        Raises:
            InvalidArtefactIdError: identifier fails the character rules
            InvalidFileError: no extension, or one outside the allow-list
        """
        validate_artefact_id(artefact_id)

        extension = Path(original_file_name or "").suffix.lower()
        if not extension:
            raise InvalidFileError("Invalid file: no file extension provided").with_context(
                artefact_id=artefact_id
            )
        if extension not in ALLOWED_EXTENSIONS:
            raise InvalidFileError(f"Invalid file extension: {extension}").with_context(
                artefact_id=artefact_id
            )

        self.root.mkdir(parents=True, exist_ok=True)
        target = self._contained(self.root / f"{artefact_id}{extension}")

        for name in self._artefact_entries(artefact_id):
            if name != target.name:
                (self.root / name).unlink(missing_ok=True)
                logger.debug("artefact_sibling_removed", artefact_id=artefact_id, file=name)

        target.write_bytes(data)
        logger.info("artefact_saved", artefact_id=artefact_id, file=target.name, size=len(data))
        return target

    def save_json(self, artefact_id: str, payload: Any) -> Path:
        """Serialize ``payload`` and store it as ``<artefact_id>.json``."""
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        return self.save(artefact_id, f"{artefact_id}.json", data)

    def delete(self, artefact_id: str) -> bool:
        """Remove every file stored for the artefact. Returns False if none existed."""
        validate_artefact_id(artefact_id)
        if not self.root.is_dir():
            return False

        removed = False
        for name in self._artefact_entries(artefact_id):
            (self.root / name).unlink(missing_ok=True)
            removed = True

        if removed:
            logger.info("artefact_deleted", artefact_id=artefact_id)
        return removed

    # =========================================================================
    # Reads (never raise)
    # =========================================================================

    def retrieve(self, artefact_id: str) -> StoredFile | None:
        """Return the stored file for the artefact, or ``None`` on any failure."""
        try:
            validate_artefact_id(artefact_id)
            name = self._find_entry(artefact_id)
            if name is None:
                logger.debug("artefact_not_found", artefact_id=artefact_id)
                return None

            path = self._contained(self.root / name)
            data = path.read_bytes()
        except (StorageError, OSError) as e:
            logger.warning("artefact_read_failed", artefact_id=artefact_id, error=str(e))
            return None

        return StoredFile(data=data, file_name=name, extension=Path(name).suffix.lower())

    def read_json(self, artefact_id: str) -> Any | None:
        """Decode ``<artefact_id>.json``; ``None`` if absent, unsafe or not JSON."""
        try:
            if "\x00" in artefact_id:
                raise InvalidArtefactIdError("Invalid artefactId: contains NUL byte")
            validate_artefact_id(artefact_id)
            path = self._contained(self.root / f"{artefact_id}.json")
            if not path.is_file():
                logger.debug("artefact_json_not_found", artefact_id=artefact_id)
                return None
            return json.loads(path.read_text(encoding="utf-8"))
        except (StorageError, OSError, TypeError, ValueError) as e:
            logger.warning("artefact_read_failed", artefact_id=artefact_id, error=str(e))
            return None

    def get_file_extension(self, artefact_id: str) -> str:
        """Extension of the stored file, ``.pdf`` when nothing usable is stored."""
        try:
            validate_artefact_id(artefact_id)
            name = self._find_entry(artefact_id)
        except (StorageError, OSError) as e:
            logger.warning("artefact_read_failed", artefact_id=artefact_id, error=str(e))
            return DEFAULT_EXTENSION
        if name is None:
            return DEFAULT_EXTENSION
        return Path(name).suffix.lower() or DEFAULT_EXTENSION

    # =========================================================================
    # Async wrappers
    # =========================================================================

    async def asave(self, artefact_id: str, original_file_name: str, data: bytes) -> Path:
        return await asyncio.to_thread(self.save, artefact_id, original_file_name, data)

    async def aretrieve(self, artefact_id: str) -> StoredFile | None:
        return await asyncio.to_thread(self.retrieve, artefact_id)

    async def aread_json(self, artefact_id: str) -> Any | None:
        return await asyncio.to_thread(self.read_json, artefact_id)

    # =========================================================================
    # Internals
    # =========================================================================

    def _contained(self, path: Path) -> Path:
        """Resolve ``path`` and refuse it unless it sits inside the root."""
        root = self.root.resolve()
        resolved = path.resolve()
        try:
            resolved.relative_to(root)
        except ValueError:
            raise InvalidArtefactIdError(f"Path escapes storage root: {path.name}") from None
        return resolved

    def _list_names(self) -> list[str]:
        with os.scandir(self.root) as entries:
            return sorted(entry.name for entry in entries if entry.is_file())

    def _artefact_entries(self, artefact_id: str) -> list[str]:
        """Names stored for exactly this artefact (``<id>`` plus an extension)."""
        if not self.root.is_dir():
            return []
        return [
            name
            for name in self._list_names()
            if name.startswith(f"{artefact_id}.") and Path(name).stem == artefact_id
        ]

    def _find_entry(self, artefact_id: str) -> str | None:
        """First (sorted) entry of this artefact; ``abc`` never matches ``abc-2.pdf``."""
        if not self.root.is_dir():
            raise FileNotFoundError(f"Storage root does not exist: {self.root}")
        names = self._artefact_entries(artefact_id)
        return names[0] if names else None


__all__ = [
    "ALLOWED_EXTENSIONS",
    "MAX_ARTEFACT_ID_LENGTH",
    "ArtefactStore",
    "StoredFile",
    "validate_artefact_id",
]

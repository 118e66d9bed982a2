"""
Publication pipeline: validate, convert and store.

Wires the ingestion validator, converter registry and artefact stores
together for the two ways a list arrives:

- ``ingest``: an automated feed posts JSON metadata and a hearing list
- ``upload_spreadsheet``: an administrator uploads an ``.xlsx`` for a
  non-strategic list type

Both are synchronous and blocking; async hosts call the ``a*`` variants.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from hearing_spine.conversion.registry import ConverterRegistry
from hearing_spine.core.errors import HearingSpineError
from hearing_spine.core.logging import LogContext, get_logger
from hearing_spine.core.settings import HearingSpineSettings
from hearing_spine.ingestion.models import IngestionRequest, IngestionValidationResult
from hearing_spine.ingestion.validation import HearingListValidator, validate_ingestion_request
from hearing_spine.reference import KNOWN_LIST_TYPES, ListType, LocationDirectory
from hearing_spine.storage.local import ArtefactStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class PublicationOutcome:
    artefact_id: str
    validation: IngestionValidationResult
    stored_path: Path | None = None

    @property
    def no_match(self) -> bool:
        """Stored against a court id that matches no known location."""
        return not self.validation.location_exists


@dataclass(frozen=True)
class UploadOutcome:
    artefact_id: str
    list_type_id: int
    original_path: Path
    converted_path: Path
    converted: Any


class PublicationPipeline:
    def __init__(
        self,
        store: ArtefactStore,
        registry: ConverterRegistry,
        location_directory: LocationDirectory,
        settings: HearingSpineSettings,
        converted_store: ArtefactStore | None = None,
        list_types: tuple[ListType, ...] = KNOWN_LIST_TYPES,
        hearing_list_validator: HearingListValidator | None = None,
    ):
        self.store = store
        self.registry = registry
        self.location_directory = location_directory
        self.settings = settings
        self.converted_store = converted_store or ArtefactStore(settings.resolved_converted_dir)
        self.list_types = list_types
        self.hearing_list_validator = hearing_list_validator

    @classmethod
    def from_settings(
        cls,
        settings: HearingSpineSettings,
        registry: ConverterRegistry,
        location_directory: LocationDirectory,
    ) -> PublicationPipeline:
        return cls(ArtefactStore(settings.storage_dir), registry, location_directory, settings)

    def ingest(
        self,
        artefact_id: str,
        payload: IngestionRequest | Mapping[str, Any],
        body_size: int,
    ) -> PublicationOutcome:
        """
        Validate a publication request and, if valid, store its hearing list.

        Invalid requests are returned with their errors and nothing is
        written. Storage failures (e.g. an unsafe ``artefact_id``) raise.
        """
        request = payload if isinstance(payload, IngestionRequest) else IngestionRequest.from_dict(payload)

        with LogContext(artefact_id=artefact_id):
            validation = validate_ingestion_request(
                request,
                body_size,
                location_directory=self.location_directory,
                list_types=self.list_types,
                max_payload_bytes=self.settings.max_payload_bytes,
                hearing_list_validator=self.hearing_list_validator,
            )
            if not validation.is_valid:
                return PublicationOutcome(artefact_id=artefact_id, validation=validation)

            stored_path = self.store.save_json(artefact_id, request.hearing_list)
            outcome = PublicationOutcome(artefact_id, validation, stored_path)
            logger.info(
                "publication_ingested",
                list_type_id=validation.list_type_id,
                no_match=outcome.no_match,
            )
            return outcome

    def upload_spreadsheet(
        self,
        artefact_id: str,
        list_type_id: int,
        file_name: str,
        buffer: bytes,
    ) -> UploadOutcome:
        """
        Store an uploaded spreadsheet and its JSON conversion.

        The original is kept under ``artefact_id`` in the main store; the
        converted JSON goes to the converted store under the same id.
        Conversion errors propagate to the uploader unchanged.
        """
        with LogContext(artefact_id=artefact_id, list_type_id=list_type_id):
            try:
                converted = self.registry.convert_excel_for_list_type(list_type_id, buffer)
            except HearingSpineError as e:
                logger.info("conversion_failed", error=e.message)
                raise e.with_context(artefact_id=artefact_id, list_type_id=list_type_id)

            original_path = self.store.save(artefact_id, file_name, buffer)
            converted_path = self.converted_store.save_json(artefact_id, converted)
            logger.info("spreadsheet_published", converted_path=str(converted_path))
            return UploadOutcome(
                artefact_id=artefact_id,
                list_type_id=list_type_id,
                original_path=original_path,
                converted_path=converted_path,
                converted=converted,
            )

    async def aingest(
        self,
        artefact_id: str,
        payload: IngestionRequest | Mapping[str, Any],
        body_size: int,
    ) -> PublicationOutcome:
        return await asyncio.to_thread(self.ingest, artefact_id, payload, body_size)

    async def aupload_spreadsheet(
        self,
        artefact_id: str,
        list_type_id: int,
        file_name: str,
        buffer: bytes,
    ) -> UploadOutcome:
        return await asyncio.to_thread(self.upload_spreadsheet, artefact_id, list_type_id, file_name, buffer)


__all__ = ["PublicationOutcome", "UploadOutcome", "PublicationPipeline"]

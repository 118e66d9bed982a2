"""
Configuration-driven spreadsheet to JSON conversion.

A ``ConverterConfig`` declares, per output field, which column header to read
(matched case-insensitively), whether the value is required, and which
validators to run. ``convert_excel_to_json`` applies it to the first
worksheet of an ``.xlsx`` buffer and returns one flat record per data row,
in row order.

Manifesto:
    Uploaders fix one problem at a time. Conversion is fail-fast: the first
    row that fails any check aborts the whole conversion with a single
    message naming the row and the column. No partial result is returned.
    Missing columns are the exception: every missing header is reported in
    one message, because they are all fixed in the same edit.

Architecture:
    ::

        buffer ──► openpyxl workbook ──► first worksheet
                                            │
                     header row ◄───────────┤
                         │                  │
               match configured headers     │ data rows (blank rows skipped)
               (report ALL missing)         │
                         │                  ▼
                    min_rows check ──► per row: trim → required → validators
                                            │          (first failure aborts)
                                            ▼
                                   list[ConvertedRecord]

Examples:
    >>> config = ConverterConfig(
    ...     fields=[
    ...         FieldSpec("Venue", "venue", validators=[no_html_tags("Venue")]),
    ...         FieldSpec("Notes", "notes", required=False),
    ...     ],
    ... )
    >>> records = convert_excel_to_json(buffer, config)
    >>> records[0]
    {'venue': 'Court 1', 'notes': ''}

Tags:
    conversion, spreadsheet, excel, validation, fail-fast, hearing-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, time
from io import BytesIO
from typing import Any

from openpyxl import load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from hearing_spine.conversion.validators import FieldValidator
from hearing_spine.core.errors import ConversionError, FieldValidationError
from hearing_spine.core.logging import get_logger

logger = get_logger(__name__)

# Day zero of the Windows 1900 date system
EXCEL_EPOCH_DATE = date(1899, 12, 30)

ConvertedRecord = dict[str, str]


@dataclass(frozen=True)
class FieldSpec:
    """One output field: the column it is read from and the rules it must pass."""

    header: str
    field_name: str
    required: bool = True
    validators: tuple[FieldValidator, ...] = ()

    def __post_init__(self) -> None:
        # Accept any sequence of validators but store an immutable tuple
        object.__setattr__(self, "validators", tuple(self.validators))


@dataclass(frozen=True)
class ConverterConfig:
    """Ordered field specs plus the minimum number of data rows required."""

    fields: tuple[FieldSpec, ...]
    min_rows: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        if self.min_rows < 0:
            raise ValueError("min_rows must not be negative")

        seen: set[str] = set()
        for spec in self.fields:
            if spec.field_name in seen:
                raise ValueError(f"Duplicate field name in converter config: {spec.field_name}")
            seen.add(spec.field_name)

    @property
    def headers(self) -> list[str]:
        return [spec.header for spec in self.fields]


# =============================================================================
# Public API
# =============================================================================


def load_excel_workbook(buffer: bytes) -> Any:
    """Open an ``.xlsx`` buffer, failing with a ``ConversionError`` if unreadable."""
    try:
        return load_workbook(BytesIO(buffer), read_only=True, data_only=True)
    except Exception as e:
        logger.warning("workbook_unreadable", error=str(e))
        raise ConversionError("Unable to read Excel file", cause=e) from e


def convert_excel_to_json(buffer: bytes, config: ConverterConfig) -> list[ConvertedRecord]:
    """Convert the first worksheet of ``buffer`` using ``config``."""
    workbook = load_excel_workbook(buffer)
    try:
        if not workbook.worksheets:
            raise ConversionError("Excel file must contain at least one worksheet")
        return convert_sheet(workbook.worksheets[0], config)
    finally:
        workbook.close()


def convert_sheet(worksheet: Worksheet, config: ConverterConfig) -> list[ConvertedRecord]:
    """
    Convert a single worksheet using ``config``.

    Used directly by multi-sheet list types, which pick their sheets by name
    and apply a config to each.
    """
    rows = _read_rows(worksheet)
    header_row = rows[0][1] if rows else []
    data_rows = rows[1:]

    column_index = _match_headers(header_row, config)

    if len(data_rows) < config.min_rows:
        plural = "s" if config.min_rows > 1 else ""
        raise ConversionError(
            f"Excel file must contain at least {config.min_rows} data row{plural}"
        )

    records: list[ConvertedRecord] = []
    for row_number, cells in data_rows:
        records.append(_parse_row(cells, row_number, config, column_index))

    logger.debug("sheet_converted", sheet=getattr(worksheet, "title", None), rows=len(records))
    return records


# =============================================================================
# Internals
# =============================================================================


def _time_to_text(value: time) -> str:
    """12-hour clock with am/pm, e.g. ``10:30am`` or ``2:15pm``."""
    hour = value.hour % 12 or 12
    suffix = "am" if value.hour < 12 else "pm"
    return f"{hour}:{value.minute:02d}{suffix}"


def _cell_to_text(value: Any) -> str:
    """Render a cell value the way it is displayed, not its raw type."""
    if value is None:
        return ""
    if isinstance(value, time):
        return _time_to_text(value)
    if isinstance(value, datetime):
        # Time-only cells can surface as datetimes on the epoch day
        if value.date() == EXCEL_EPOCH_DATE:
            return _time_to_text(value.time())
        if value.time() == time(0, 0):
            return value.strftime("%d/%m/%Y")
        return value.strftime("%d/%m/%Y %H:%M")
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _read_rows(worksheet: Worksheet) -> list[tuple[int, list[str]]]:
    """Read (row_number, cell texts) pairs; the header row is always kept."""
    rows: list[tuple[int, list[str]]] = []
    for row_number, values in enumerate(worksheet.iter_rows(values_only=True), start=1):
        cells = [_cell_to_text(v) for v in values]
        if rows and not any(c.strip() for c in cells):
            continue
        rows.append((row_number, cells))

    # A sheet whose first rows are blank has its header at the first non-blank row
    while rows and not any(c.strip() for c in rows[0][1]):
        rows.pop(0)
    return rows


def _match_headers(header_row: Sequence[str], config: ConverterConfig) -> dict[str, int]:
    """Map each configured header to its column index, reporting every missing one."""
    actual: dict[str, int] = {}
    for index, header in enumerate(header_row):
        key = header.strip().lower()
        if key and key not in actual:
            actual[key] = index

    column_index: dict[str, int] = {}
    missing: list[str] = []
    for spec in config.fields:
        index = actual.get(spec.header.strip().lower())
        if index is None:
            missing.append(spec.header)
        else:
            column_index[spec.field_name] = index

    if missing:
        raise ConversionError(
            f"Excel file must contain columns: {', '.join(config.headers)}. "
            f"Missing: {', '.join(missing)}"
        )
    return column_index


def _parse_row(
    cells: Sequence[str],
    row_number: int,
    config: ConverterConfig,
    column_index: dict[str, int],
) -> ConvertedRecord:
    record: ConvertedRecord = {}
    for spec in config.fields:
        index = column_index[spec.field_name]
        value = cells[index].strip() if index < len(cells) else ""

        if not value:
            if spec.required:
                raise ConversionError(
                    f"Error in row {row_number}: Missing required field '{spec.header}'",
                    row_number=row_number,
                ).with_context(field=spec.header)
            record[spec.field_name] = value
            continue

        try:
            _run_validators(spec.validators, value, row_number)
        except FieldValidationError as e:
            raise ConversionError(
                f"Error in row {row_number}: {e.message}",
                row_number=row_number,
                cause=e,
            ).with_context(field=e.field) from e

        record[spec.field_name] = value
    return record


def _run_validators(validators: Iterable[FieldValidator], value: str, row_number: int) -> None:
    for validator in validators:
        validator(value, row_number)


__all__ = [
    "ConvertedRecord",
    "FieldSpec",
    "ConverterConfig",
    "load_excel_workbook",
    "convert_excel_to_json",
    "convert_sheet",
]

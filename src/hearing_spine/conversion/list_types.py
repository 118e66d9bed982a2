"""
Conversion configs for the manually uploaded (non-strategic) list types.

Each list type declares its columns once as a ``ConverterConfig``; the
registry bootstrap (``register_default_converters``) binds the configs to
list type ids. Most list types read a single worksheet. The London
Administrative Court and Court of Appeal (Civil Division) lists have two
tabs each and convert to an object of named record lists.
"""

from __future__ import annotations

from collections.abc import Sequence

from openpyxl.worksheet.worksheet import Worksheet

from hearing_spine.conversion.engine import (
    ConvertedRecord,
    ConverterConfig,
    FieldSpec,
    convert_sheet,
    load_excel_workbook,
)
from hearing_spine.conversion.registry import ConverterRegistry
from hearing_spine.conversion.validators import (
    DD_MM_YYYY_DESCRIPTION,
    DD_MM_YYYY_PATTERN,
    FieldValidator,
    date_format,
    no_html_tags,
    time_format,
    time_format_simple,
)
from hearing_spine.core.errors import ConversionError

CARE_STANDARDS_TRIBUNAL_LIST_ID = 9
RCJ_STANDARD_LIST_IDS = tuple(range(10, 18))
LONDON_ADMINISTRATIVE_COURT_LIST_ID = 18
COURT_OF_APPEAL_CIVIL_LIST_ID = 19
ADMINISTRATIVE_COURT_LIST_IDS = tuple(range(20, 24))


def _text_field(header: str, field_name: str, required: bool = True) -> FieldSpec:
    return FieldSpec(header, field_name, required=required, validators=[no_html_tags(header)])


# =============================================================================
# Care Standards Tribunal weekly hearing list
# =============================================================================

CARE_STANDARDS_TRIBUNAL_CONFIG = ConverterConfig(
    fields=[
        FieldSpec(
            "Date",
            "date",
            validators=[date_format(DD_MM_YYYY_PATTERN, DD_MM_YYYY_DESCRIPTION)],
        ),
        _text_field("Case name", "caseName"),
        _text_field("Hearing length", "hearingLength"),
        _text_field("Hearing type", "hearingType"),
        _text_field("Venue", "venue"),
        _text_field("Additional information", "additionalInformation"),
    ],
    min_rows=1,
)


# =============================================================================
# RCJ 7-field family
# =============================================================================


def _rcj_fields(time_validator: FieldValidator) -> list[FieldSpec]:
    return [
        _text_field("Venue", "venue"),
        _text_field("Judge", "judge"),
        FieldSpec("Time", "time", validators=[time_validator]),
        _text_field("Case Number", "caseNumber"),
        _text_field("Case Details", "caseDetails"),
        _text_field("Hearing Type", "hearingType"),
        _text_field("Additional Information", "additionalInformation", required=False),
    ]


# RCJ standard daily cause lists and the regional Administrative Court lists
RCJ_CONFIG = ConverterConfig(fields=_rcj_fields(time_format()), min_rows=1)

# Tabs of multi-sheet workbooks may legitimately be empty
RCJ_CONFIG_SIMPLE_TIME = ConverterConfig(fields=_rcj_fields(time_format_simple()), min_rows=0)

FUTURE_JUDGMENTS_CONFIG = ConverterConfig(
    fields=[
        FieldSpec(
            "Date",
            "date",
            validators=[date_format(DD_MM_YYYY_PATTERN, "dd/MM/yyyy (e.g., 15/01/2025)")],
        ),
        *_rcj_fields(time_format_simple()),
    ],
    min_rows=0,
)


# =============================================================================
# Multi-sheet converters
# =============================================================================


def _pick_sheet(worksheets: Sequence[Worksheet], title: str, fallback_index: int) -> Worksheet | None:
    """Find a tab by title (case-insensitive), falling back to its position."""
    for sheet in worksheets:
        if sheet.title.strip().lower() == title.lower():
            return sheet
    if fallback_index < len(worksheets):
        return worksheets[fallback_index]
    return None


def _convert_tabs(
    buffer: bytes,
    tabs: Sequence[tuple[str, str, ConverterConfig]],
) -> dict[str, list[ConvertedRecord]]:
    """Convert each (key, tab title, config); the first tab is mandatory."""
    workbook = load_excel_workbook(buffer)
    try:
        worksheets = list(workbook.worksheets)
        if not worksheets:
            raise ConversionError("Excel file must contain at least one worksheet")

        result: dict[str, list[ConvertedRecord]] = {}
        for index, (key, title, config) in enumerate(tabs):
            sheet = _pick_sheet(worksheets, title, index)
            result[key] = convert_sheet(sheet, config) if sheet is not None else []
        return result
    finally:
        workbook.close()


def convert_london_administrative_court(buffer: bytes) -> dict[str, list[ConvertedRecord]]:
    return _convert_tabs(
        buffer,
        [
            ("mainHearings", "Main hearings", RCJ_CONFIG_SIMPLE_TIME),
            ("planningCourt", "Planning Court", RCJ_CONFIG_SIMPLE_TIME),
        ],
    )


def convert_court_of_appeal_civil(buffer: bytes) -> dict[str, list[ConvertedRecord]]:
    return _convert_tabs(
        buffer,
        [
            ("dailyHearings", "Daily hearings", RCJ_CONFIG_SIMPLE_TIME),
            ("futureJudgments", "Notice for future judgments", FUTURE_JUDGMENTS_CONFIG),
        ],
    )


# =============================================================================
# Bootstrap
# =============================================================================


def register_default_converters(registry: ConverterRegistry) -> ConverterRegistry:
    """Register every shipped list-type converter with ``registry``."""
    registry.register(CARE_STANDARDS_TRIBUNAL_LIST_ID, CARE_STANDARDS_TRIBUNAL_CONFIG)

    for list_type_id in RCJ_STANDARD_LIST_IDS + ADMINISTRATIVE_COURT_LIST_IDS:
        registry.register(list_type_id, RCJ_CONFIG)

    registry.register(
        LONDON_ADMINISTRATIVE_COURT_LIST_ID,
        RCJ_CONFIG_SIMPLE_TIME,
        convert_london_administrative_court,
    )
    registry.register(
        COURT_OF_APPEAL_CIVIL_LIST_ID,
        RCJ_CONFIG_SIMPLE_TIME,
        convert_court_of_appeal_civil,
    )
    return registry


__all__ = [
    "CARE_STANDARDS_TRIBUNAL_LIST_ID",
    "RCJ_STANDARD_LIST_IDS",
    "LONDON_ADMINISTRATIVE_COURT_LIST_ID",
    "COURT_OF_APPEAL_CIVIL_LIST_ID",
    "ADMINISTRATIVE_COURT_LIST_IDS",
    "CARE_STANDARDS_TRIBUNAL_CONFIG",
    "RCJ_CONFIG",
    "RCJ_CONFIG_SIMPLE_TIME",
    "FUTURE_JUDGMENTS_CONFIG",
    "convert_london_administrative_court",
    "convert_court_of_appeal_civil",
    "register_default_converters",
]

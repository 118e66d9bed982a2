"""Spreadsheet conversion: field validators, the converter engine and the list-type registry."""

from hearing_spine.conversion.engine import (
    ConvertedRecord,
    ConverterConfig,
    FieldSpec,
    convert_excel_to_json,
    convert_sheet,
)
from hearing_spine.conversion.registry import (
    ConverterRegistry,
    ListTypeConverter,
    build_converter_registry,
)
from hearing_spine.conversion.validators import (
    DD_MM_YYYY_PATTERN,
    date_format,
    no_html_tags,
    time_format,
    time_format_simple,
)

__all__ = [
    "ConvertedRecord",
    "ConverterConfig",
    "FieldSpec",
    "convert_excel_to_json",
    "convert_sheet",
    "ConverterRegistry",
    "ListTypeConverter",
    "build_converter_registry",
    "DD_MM_YYYY_PATTERN",
    "date_format",
    "no_html_tags",
    "time_format",
    "time_format_simple",
]

"""
Row-aware field validators for spreadsheet conversion.

A validator is any callable ``(value, row_number) -> None`` that raises
``FieldValidationError`` when the trimmed cell value is not acceptable.
Validators are attached to a ``FieldSpec`` as an ordered list; adding a
rule to a field means appending another callable, never branching on type.

The factories here bind the field's display name into the validator so the
message can name the column the uploader has to fix.

Examples:
    >>> check = no_html_tags("Venue")
    >>> check("Court 1", 2)
    >>> check("<b>Court 1</b>", 2)
    Traceback (most recent call last):
    ...
    FieldValidationError: Invalid content in 'Venue' in row 2: HTML tags are not allowed
"""

from __future__ import annotations

import re
from collections.abc import Callable
from datetime import date

from hearing_spine.core.errors import FieldValidationError

FieldValidator = Callable[[str, int], None]

HTML_TAG_PATTERN = re.compile(r"<[^>]+>")
DD_MM_YYYY_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")
DD_MM_YYYY_DESCRIPTION = "dd/MM/yyyy (e.g., 02/01/2025)"

# 9am, 9:30am, 10.15pm; no space before am/pm, trailing whitespace tolerated
TIME_PATTERN = re.compile(r"^(\d{1,2})(?:[:.](\d{2}))?([ap]m)\s*$", re.IGNORECASE)
TIME_DESCRIPTION = "h:mma (e.g., 9:30am) or ha (e.g., 2pm)"


def no_html_tags(field: str) -> FieldValidator:
    """Reject values containing anything shaped like ``<tag>``."""

    def validate(value: str, row_number: int) -> None:
        if HTML_TAG_PATTERN.search(value):
            raise FieldValidationError(
                f"Invalid content in '{field}' in row {row_number}: HTML tags are not allowed",
                row_number=row_number,
                field=field,
                reason="HTML tags are not allowed",
            )

    return validate


def date_format(
    pattern: re.Pattern[str] | str,
    description: str,
    field: str = "Date",
) -> FieldValidator:
    """
    Validate a ``day/month/year`` date against ``pattern`` and the calendar.

    The pattern decides the textual shape (e.g. two-digit day and month,
    four-digit year). A value with the right shape is then checked as a real
    date, so ``31/04/2025`` and ``29/02/2025`` fail while ``29/02/2024``
    passes.
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern

    def validate(value: str, row_number: int) -> None:
        if not compiled.search(value):
            raise FieldValidationError(
                f"Invalid date format '{value}' in row {row_number}. Expected format: {description}",
                row_number=row_number,
                field=field,
                reason=f"Expected format: {description}",
            )

        try:
            day, month, year = (int(part) for part in value.split("/"))
            date(year, month, day)
        except ValueError as e:
            raise FieldValidationError(
                f"Invalid date '{value}' in row {row_number}. Date does not exist in calendar",
                row_number=row_number,
                field=field,
                reason="Date does not exist in calendar",
                cause=e,
            ) from e

    return validate


def _time_error(value: str, row_number: int, field: str) -> FieldValidationError:
    return FieldValidationError(
        f"Invalid time format '{value}' in row {row_number}. Expected format: {TIME_DESCRIPTION}",
        row_number=row_number,
        field=field,
        reason=f"Expected format: {TIME_DESCRIPTION}",
    )


def time_format(field: str = "Time") -> FieldValidator:
    """12-hour clock time with am/pm; hour must be 1-12 and minutes 00-59."""

    def validate(value: str, row_number: int) -> None:
        match = TIME_PATTERN.match(value)
        if not match:
            raise _time_error(value, row_number, field)

        hour = int(match.group(1))
        minutes = int(match.group(2) or 0)
        if not 1 <= hour <= 12 or minutes > 59:
            raise _time_error(value, row_number, field)

    return validate


def time_format_simple(field: str = "Time") -> FieldValidator:
    """12-hour clock time with am/pm, shape only (no hour range check)."""

    def validate(value: str, row_number: int) -> None:
        if not TIME_PATTERN.match(value):
            raise _time_error(value, row_number, field)

    return validate


__all__ = [
    "FieldValidator",
    "HTML_TAG_PATTERN",
    "DD_MM_YYYY_PATTERN",
    "DD_MM_YYYY_DESCRIPTION",
    "TIME_PATTERN",
    "TIME_DESCRIPTION",
    "no_html_tags",
    "date_format",
    "time_format",
    "time_format_simple",
]

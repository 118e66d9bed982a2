"""CSV download of SJP press cases."""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from datetime import date, datetime

from hearing_spine.sjp.models import SjpCase

CSV_HEADER = "Name,Date of Birth,Reference,Address,Prosecutor,Reporting Restriction,Offence"
DEFAULT_DATE_FORMAT = "%d/%m/%Y"

# Leading characters a spreadsheet would evaluate as a formula
_FORMULA_PREFIXES = ("=", "+", "-", "@")


def _guard(value: str | None) -> str:
    if value is None:
        return ""
    text = str(value)
    if text.startswith(_FORMULA_PREFIXES):
        return f"'{text}"
    return text


def _write_row(values: Sequence[str | bool]) -> str:
    # Text is always quoted; booleans are numbers to the csv module and stay bare
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    writer.writerow(values)
    return buffer.getvalue()[: -len("\n")]


def escape_csv_field(value: str | None) -> str:
    """Quote a value for CSV, neutralising formula injection and embedded quotes."""
    return _write_row([_guard(value)])


def case_to_csv_row(case: SjpCase, date_format: str = DEFAULT_DATE_FORMAT) -> str:
    date_of_birth = case.date_of_birth.strftime(date_format) if case.date_of_birth else None
    offence_titles = "; ".join(offence.title for offence in case.offences)
    return _write_row(
        [
            _guard(case.name),
            _guard(date_of_birth),
            _guard(case.reference),
            _guard(case.address),
            _guard(case.prosecutor),
            case.reporting_restriction,
            _guard(offence_titles),
        ]
    )


def generate_csv(cases: Iterable[SjpCase], date_format: str = DEFAULT_DATE_FORMAT) -> str:
    """Header plus one row per case, joined with ``\\n`` (no trailing newline)."""
    rows = [CSV_HEADER]
    rows.extend(case_to_csv_row(case, date_format) for case in cases)
    return "\n".join(rows)


def export_file_name(content_date: date | datetime | str) -> str:
    """``sjp-press-list-YYYY-MM-DD.csv`` for the list's content date."""
    if isinstance(content_date, datetime):
        day = content_date.date().isoformat()
    elif isinstance(content_date, date):
        day = content_date.isoformat()
    else:
        day = str(content_date).split("T")[0]
    return f"sjp-press-list-{day}.csv"


__all__ = [
    "CSV_HEADER",
    "DEFAULT_DATE_FORMAT",
    "escape_csv_field",
    "case_to_csv_row",
    "generate_csv",
    "export_file_name",
]

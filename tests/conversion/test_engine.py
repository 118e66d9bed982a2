"""Tests for the configuration-driven spreadsheet converter."""

from datetime import datetime, time

import pytest

from hearing_spine.conversion.engine import ConverterConfig, FieldSpec, convert_excel_to_json
from hearing_spine.conversion.list_types import CARE_STANDARDS_TRIBUNAL_CONFIG, RCJ_CONFIG
from hearing_spine.conversion.validators import no_html_tags
from hearing_spine.core.errors import ConversionError
from tests._support.factories import CST_HEADERS, RCJ_HEADERS, build_xlsx, cst_row, rcj_row


class TestConverterConfig:
    def test_duplicate_field_names_rejected(self):
        with pytest.raises(ValueError, match="Duplicate field name"):
            ConverterConfig(fields=[FieldSpec("A", "a"), FieldSpec("B", "a")])

    def test_negative_min_rows_rejected(self):
        with pytest.raises(ValueError):
            ConverterConfig(fields=[FieldSpec("A", "a")], min_rows=-1)

    def test_validators_stored_as_tuple(self):
        spec = FieldSpec("A", "a", validators=[no_html_tags("A")])
        assert isinstance(spec.validators, tuple)


class TestHappyPath:
    def test_rows_converted_in_order(self):
        buffer = build_xlsx([RCJ_HEADERS, rcj_row(venue="Court 1"), rcj_row(venue="Court 2", additional="Remote")])
        records = convert_excel_to_json(buffer, RCJ_CONFIG)
        assert [r["venue"] for r in records] == ["Court 1", "Court 2"]
        assert records[0] == {
            "venue": "Court 1",
            "judge": "Mr Justice Smith",
            "time": "10:30am",
            "caseNumber": "KB-2025-000123",
            "caseDetails": "Smith v Jones",
            "hearingType": "Application",
            "additionalInformation": "",
        }
        assert records[1]["additionalInformation"] == "Remote"

    def test_headers_matched_case_insensitively_in_any_order(self):
        config = ConverterConfig(fields=[FieldSpec("Venue", "venue"), FieldSpec("Judge", "judge")])
        buffer = build_xlsx([["  JUDGE ", "venue"], ["Judge A", "Court 3"]])
        assert convert_excel_to_json(buffer, config) == [{"venue": "Court 3", "judge": "Judge A"}]

    def test_values_trimmed_and_numbers_rendered(self):
        config = ConverterConfig(fields=[FieldSpec("Case Number", "caseNumber"), FieldSpec("Name", "name")])
        buffer = build_xlsx([["Case Number", "Name"], [12345, "  Padded  "]])
        assert convert_excel_to_json(buffer, config) == [{"caseNumber": "12345", "name": "Padded"}]

    @pytest.mark.parametrize(
        "cell, expected",
        [
            (time(10, 30), "10:30am"),
            (time(14, 15), "2:15pm"),
            (time(0, 5), "12:05am"),
            (datetime(1899, 12, 30, 9, 0), "9:00am"),
        ],
    )
    def test_time_cells_rendered_as_12_hour_clock(self, cell, expected):
        buffer = build_xlsx([RCJ_HEADERS, rcj_row(time=cell)])
        (record,) = convert_excel_to_json(buffer, RCJ_CONFIG)
        assert record["time"] == expected

    def test_date_cells_rendered_day_first(self):
        config = ConverterConfig(fields=[FieldSpec("Date", "date")])
        buffer = build_xlsx([["Date"], [datetime(2025, 1, 2)]])
        assert convert_excel_to_json(buffer, config) == [{"date": "02/01/2025"}]

    def test_blank_rows_skipped(self):
        buffer = build_xlsx([CST_HEADERS, cst_row(), [None] * 6, cst_row(case_name="Second")])
        records = convert_excel_to_json(buffer, CARE_STANDARDS_TRIBUNAL_CONFIG)
        assert [r["caseName"] for r in records] == ["A Local Authority v B", "Second"]

    def test_extra_columns_ignored(self):
        config = ConverterConfig(fields=[FieldSpec("Venue", "venue")])
        buffer = build_xlsx([["Venue", "Notes"], ["Court 1", "ignored"]])
        assert convert_excel_to_json(buffer, config) == [{"venue": "Court 1"}]

    def test_zero_min_rows_allows_header_only(self):
        config = ConverterConfig(fields=[FieldSpec("Venue", "venue")], min_rows=0)
        assert convert_excel_to_json(build_xlsx([["Venue"]]), config) == []


class TestFailFast:
    def test_missing_headers_all_reported(self):
        buffer = build_xlsx([["Venue", "Judge"], ["Court 1", "Judge A"]])
        with pytest.raises(ConversionError) as exc:
            convert_excel_to_json(buffer, RCJ_CONFIG)
        assert str(exc.value) == (
            "Excel file must contain columns: Venue, Judge, Time, Case Number, Case Details, "
            "Hearing Type, Additional Information. Missing: Time, Case Number, Case Details, "
            "Hearing Type, Additional Information"
        )

    def test_headers_checked_before_row_count(self):
        with pytest.raises(ConversionError, match="Missing: Case name"):
            convert_excel_to_json(build_xlsx([["Date"]]), CARE_STANDARDS_TRIBUNAL_CONFIG)

    def test_min_rows(self):
        with pytest.raises(ConversionError) as exc:
            convert_excel_to_json(build_xlsx([CST_HEADERS]), CARE_STANDARDS_TRIBUNAL_CONFIG)
        assert str(exc.value) == "Excel file must contain at least 1 data row"

    def test_min_rows_plural(self):
        config = ConverterConfig(fields=[FieldSpec("Venue", "venue")], min_rows=3)
        with pytest.raises(ConversionError, match="at least 3 data rows"):
            convert_excel_to_json(build_xlsx([["Venue"], ["Court 1"]]), config)

    def test_missing_required_field(self):
        buffer = build_xlsx([RCJ_HEADERS, rcj_row(), rcj_row(judge="  ")])
        with pytest.raises(ConversionError) as exc:
            convert_excel_to_json(buffer, RCJ_CONFIG)
        assert str(exc.value) == "Error in row 3: Missing required field 'Judge'"
        assert exc.value.row_number == 3

    def test_html_rejected_with_row_number(self):
        buffer = build_xlsx([RCJ_HEADERS, rcj_row(), rcj_row(), rcj_row(case_details="<b>Smith</b>")])
        with pytest.raises(ConversionError) as exc:
            convert_excel_to_json(buffer, RCJ_CONFIG)
        assert "HTML tags are not allowed" in str(exc.value)
        assert str(exc.value).startswith("Error in row 4: ")
        assert exc.value.row_number == 4

    def test_first_failure_wins(self):
        buffer = build_xlsx([RCJ_HEADERS, rcj_row(time="25pm"), rcj_row(venue="<i>x</i>")])
        with pytest.raises(ConversionError) as exc:
            convert_excel_to_json(buffer, RCJ_CONFIG)
        assert str(exc.value) == (
            "Error in row 2: Invalid time format '25pm' in row 2. "
            "Expected format: h:mma (e.g., 9:30am) or ha (e.g., 2pm)"
        )

    def test_row_numbers_count_skipped_blank_rows(self):
        buffer = build_xlsx([CST_HEADERS, cst_row(), [None] * 6, cst_row(date="31/04/2025")])
        with pytest.raises(ConversionError, match="^Error in row 4: Invalid date '31/04/2025' in row 4"):
            convert_excel_to_json(buffer, CARE_STANDARDS_TRIBUNAL_CONFIG)

    def test_optional_empty_value_skips_validators(self):
        config = ConverterConfig(
            fields=[FieldSpec("Venue", "venue"), FieldSpec("Notes", "notes", required=False, validators=[no_html_tags("Notes")])]
        )
        assert convert_excel_to_json(build_xlsx([["Venue", "Notes"], ["Court 1", None]]), config) == [
            {"venue": "Court 1", "notes": ""}
        ]

    def test_unreadable_buffer(self):
        with pytest.raises(ConversionError, match="Unable to read Excel file"):
            convert_excel_to_json(b"definitely not a zip", RCJ_CONFIG)

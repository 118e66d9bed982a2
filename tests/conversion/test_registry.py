"""Tests for the list-type converter registry and its bootstrap."""

import pytest
from structlog.testing import capture_logs

from hearing_spine.conversion.engine import ConverterConfig, FieldSpec
from hearing_spine.conversion.registry import ConverterRegistry, build_converter_registry
from hearing_spine.core.errors import ConversionError, ConverterNotFoundError, RegistryError
from tests._support.factories import CST_HEADERS, RCJ_HEADERS, build_xlsx, cst_row, rcj_row

VENUE_CONFIG = ConverterConfig(fields=[FieldSpec("Venue", "venue")])


class TestRegistration:
    def test_register_and_lookup(self):
        registry = ConverterRegistry()
        registry.register(42, VENUE_CONFIG)
        assert registry.has_converter_for_list_type(42)
        assert 42 in registry
        assert registry.get_converter_for_list_type(42).config is VENUE_CONFIG
        assert registry.get_converter_for_list_type(43) is None

    def test_default_convert_uses_first_sheet(self):
        registry = ConverterRegistry()
        registry.register(42, VENUE_CONFIG)
        buffer = build_xlsx([["Venue"], ["Court 1"]])
        assert registry.convert_excel_for_list_type(42, buffer) == [{"venue": "Court 1"}]

    def test_custom_convert_function(self):
        registry = ConverterRegistry()
        registry.register(42, VENUE_CONFIG, lambda buffer: {"size": len(buffer)})
        assert registry.convert_excel_for_list_type(42, b"abc") == {"size": 3}

    def test_duplicate_registration_rejected(self):
        registry = ConverterRegistry()
        registry.register(42, VENUE_CONFIG)
        with pytest.raises(RegistryError, match="already registered"):
            registry.register(42, VENUE_CONFIG)

    def test_frozen_registry_rejects_registration(self):
        registry = ConverterRegistry().freeze()
        assert registry.frozen
        with pytest.raises(RegistryError, match="frozen"):
            registry.register(1, VENUE_CONFIG)

    def test_registration_logged(self):
        with capture_logs() as logs:
            ConverterRegistry().register(7, VENUE_CONFIG)
        assert {"event": "converter_registered", "list_type_id": 7, "fields": 1, "log_level": "debug"} in logs


class TestDispatch:
    def test_unknown_list_type(self):
        with pytest.raises(ConverterNotFoundError) as exc:
            ConverterRegistry().convert_excel_for_list_type(999, b"")
        assert str(exc.value) == "No converter found for list type ID: 999"

    def test_converter_errors_propagate_unchanged(self, registry):
        with pytest.raises(ConversionError, match="Unable to read Excel file"):
            registry.convert_excel_for_list_type(9, b"not a workbook")

    async def test_async_dispatch(self, registry):
        buffer = build_xlsx([CST_HEADERS, cst_row()])
        records = await registry.aconvert_excel_for_list_type(9, buffer)
        assert records[0]["caseName"] == "A Local Authority v B"


class TestBootstrap:
    def test_shipped_converters(self, registry):
        assert registry.list_type_ids() == list(range(9, 24))
        assert len(registry) == 15
        assert registry.frozen

    def test_each_call_builds_a_fresh_registry(self):
        assert build_converter_registry() is not build_converter_registry()

    @pytest.mark.parametrize("list_type_id", [10, 11, 12, 13, 14, 15, 16, 17, 20, 21, 22, 23])
    def test_rcj_family_converts(self, registry, list_type_id):
        buffer = build_xlsx([RCJ_HEADERS, rcj_row()])
        records = registry.convert_excel_for_list_type(list_type_id, buffer)
        assert records[0]["caseNumber"] == "KB-2025-000123"

    def test_rcj_family_uses_strict_time(self, registry):
        buffer = build_xlsx([RCJ_HEADERS, rcj_row(time="13:00pm")])
        with pytest.raises(ConversionError, match="Invalid time format"):
            registry.convert_excel_for_list_type(10, buffer)

    def test_rcj_family_requires_a_row(self, registry):
        with pytest.raises(ConversionError, match="at least 1 data row"):
            registry.convert_excel_for_list_type(14, build_xlsx([RCJ_HEADERS]))

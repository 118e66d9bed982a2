"""Tests for list-type and location reference data."""

import json

import pytest

from hearing_spine.core.errors import ConfigError
from hearing_spine.reference import (
    KNOWN_LIST_TYPES,
    InMemoryLocationDirectory,
    Language,
    Provenance,
    Sensitivity,
    find_list_type,
)


class TestListTypes:
    def test_ids_unique_and_contiguous(self):
        assert [lt.id for lt in KNOWN_LIST_TYPES] == list(range(1, 26))
        assert len({lt.name for lt in KNOWN_LIST_TYPES}) == 25

    def test_find_by_name_or_id(self):
        assert find_list_type("CARE_STANDARDS_TRIBUNAL_WEEKLY_HEARING_LIST").id == 9
        assert find_list_type(24).name == "SJP_PRESS_LIST"
        assert find_list_type("NOPE") is None

    def test_url_path_and_welsh_name(self):
        cst = find_list_type(9)
        assert cst.url_path == "care-standards-tribunal-weekly-hearing-list"
        assert cst.welsh_friendly_name == "Rhestr Gwrandawiadau Wythnosol y Tribiwnlys Safonau Gofal"
        assert cst.is_non_strategic

    def test_enums(self):
        assert [p.value for p in Provenance] == ["XHIBIT", "MANUAL_UPLOAD", "SNL", "COMMON_PLATFORM"]
        assert [s.value for s in Sensitivity] == ["PUBLIC", "PRIVATE", "CLASSIFIED"]
        assert [lang.value for lang in Language] == ["ENGLISH", "WELSH", "BILINGUAL"]


class TestLocationFile:
    def test_list_of_records(self, tmp_path):
        path = tmp_path / "locations.json"
        path.write_text(json.dumps([{"locationId": 1, "name": "A", "welshName": "B", "regions": [1]}]))
        directory = InMemoryLocationDirectory.from_json_file(path)
        location = directory.get_location_by_id(1)
        assert (location.name, location.welsh_name, location.regions) == ("A", "B", (1,))

    def test_wrapped_records(self, tmp_path):
        path = tmp_path / "locations.json"
        path.write_text(json.dumps({"locations": [{"location_id": "5", "name": "Cardiff"}]}))
        assert InMemoryLocationDirectory.from_json_file(path).get_location_by_id(5).name == "Cardiff"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="Unable to load locations file"):
            InMemoryLocationDirectory.from_json_file(tmp_path / "missing.json")

    def test_malformed_record(self, tmp_path):
        path = tmp_path / "locations.json"
        path.write_text(json.dumps([{"name": "No id"}]))
        with pytest.raises(ConfigError, match="Invalid location record"):
            InMemoryLocationDirectory.from_json_file(path)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "locations.json"
        path.write_text(json.dumps({"locations": "nope"}))
        with pytest.raises(ConfigError):
            InMemoryLocationDirectory.from_json_file(path)

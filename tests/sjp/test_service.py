"""Tests for SJP search, filtering, sorting and pagination."""

from datetime import date

import pytest

from hearing_spine.core.errors import ArtefactNotFoundError
from hearing_spine.sjp.models import LONDON_POSTCODES, SearchFilters
from hearing_spine.sjp.parser import extract_press_cases
from hearing_spine.sjp.service import SjpCaseService, apply_filters, collation_key, is_london_postcode
from tests._support.factories import sjp_document, sjp_hearing


@pytest.fixture
def service(store):
    return SjpCaseService(store, today=lambda: date(2025, 1, 20))


@pytest.fixture
def mixed_list(store):
    hearings = [
        sjp_hearing(forenames="Zoe", surname="Zimmer", postcode="BS8 1AA", prosecutor="TV Licensing", case_urn="TVL001"),
        sjp_hearing(forenames="Émile", surname="Adams", postcode="E1 2AA", prosecutor="DVLA", case_urn="DVL002"),
        sjp_hearing(forenames="bob", surname="Brown", postcode="SW1A 1AA", prosecutor="TV Licensing", case_urn="TVL003"),
        sjp_hearing(forenames="Carol", surname="Clark", postcode="EX1 1AA", prosecutor="DVLA", case_urn="DVL004"),
        sjp_hearing(forenames="Dan", surname="Doe", postcode=None, prosecutor=None, case_urn="XYZ005"),
    ]
    store.save_json("mixed", sjp_document(hearings, per_sitting=2))
    return "mixed"


class TestHelpers:
    def test_collation_key_folds_accents_and_case(self):
        assert collation_key("Émile") == collation_key("emile") == "emile"
        assert collation_key(None) == ""

    @pytest.mark.parametrize(
        "postcode, expected",
        [("E1", True), ("EC1A", True), ("SW1A", True), ("WC2", True), ("N1", True), ("EX1", False), ("NE1", False), ("WD3", False), ("BS8", False), (None, False)],
    )
    def test_london_postcode(self, postcode, expected):
        assert is_london_postcode(postcode) is expected


class TestFilters:
    def _cases(self):
        return extract_press_cases(
            sjp_document(
                [
                    sjp_hearing(surname="Avon", postcode="BS8 1AA", prosecutor="TV Licensing"),
                    sjp_hearing(surname="East", postcode="E1 2AA", prosecutor="DVLA"),
                ]
            )
        )

    def test_london_sentinel(self):
        result = apply_filters(self._cases(), SearchFilters(postcodes=(LONDON_POSTCODES,)))
        assert [c.postcode for c in result] == ["E1"]

    def test_prefix(self):
        result = apply_filters(self._cases(), SearchFilters(postcodes=("bs8",)))
        assert [c.postcode for c in result] == ["BS8"]

    def test_multiple_postcodes_are_alternatives(self):
        result = apply_filters(self._cases(), SearchFilters(postcodes=("BS", LONDON_POSTCODES)))
        assert len(result) == 2

    def test_prosecutor_exact(self):
        assert [c.name for c in apply_filters(self._cases(), SearchFilters(prosecutors=("DVLA",)))] == ["John East"]
        assert apply_filters(self._cases(), SearchFilters(prosecutors=("dvla",))) == []

    def test_no_filters(self):
        assert len(apply_filters(self._cases(), None)) == 2
        assert len(apply_filters(self._cases(), SearchFilters())) == 2
        assert SearchFilters().is_empty


class TestPressCases:
    def test_sorted_by_name_accent_insensitive(self, service, mixed_list):
        page = service.get_press_cases(mixed_list)
        assert [c.name for c in page.cases] == [
            "bob Brown",
            "Carol Clark",
            "Dan Doe",
            "Émile Adams",
            "Zoe Zimmer",
        ]

    def test_search_matches_name_or_reference(self, service, mixed_list):
        assert [c.name for c in service.get_press_cases(mixed_list, SearchFilters(search_query="ZIMMER")).cases] == ["Zoe Zimmer"]
        assert [c.reference for c in service.get_press_cases(mixed_list, SearchFilters(search_query="dvl")).cases] == [
            "DVL004",
            "DVL002",
        ]

    def test_filters_combine(self, service, mixed_list):
        filters = SearchFilters(postcodes=(LONDON_POSTCODES,), prosecutors=("TV Licensing",))
        page = service.get_press_cases(mixed_list, filters)
        assert [c.name for c in page.cases] == ["bob Brown"]
        assert page.total_cases == 1

    def test_missing_artefact(self, service):
        with pytest.raises(ArtefactNotFoundError):
            service.get_press_cases("nope")


class TestPagination:
    @pytest.fixture
    def big_list(self, store):
        hearings = [sjp_hearing(surname=f"Person{i:03d}", postcode="E1 1AA") for i in range(300)]
        store.save_json("big", sjp_document(hearings, per_sitting=50))
        return "big"

    def test_pages_of_200(self, service, big_list):
        first = service.get_press_cases(big_list, page=1)
        second = service.get_press_cases(big_list, page=2)
        assert len(first.cases) == 200
        assert len(second.cases) == 100
        assert first.total_cases == second.total_cases == 300
        assert first.total_pages == 2
        assert first.cases[0].name == "John Person000"
        assert second.cases[0].name == "John Person200"

    def test_page_past_end_is_empty(self, service, big_list):
        page = service.get_press_cases(big_list, page=3)
        assert page.cases == []
        assert page.total_cases == 300

    @pytest.mark.parametrize("page_number", [0, -5])
    def test_page_below_one_is_first_page(self, service, big_list, page_number):
        page = service.get_press_cases(big_list, page=page_number)
        assert page.page == 1
        assert page.cases[0].name == "John Person000"

    def test_filtered_total(self, service, big_list):
        page = service.get_press_cases(big_list, SearchFilters(search_query="Person1"))
        assert page.total_cases == 100

    def test_unpaginated_export_variant(self, service, big_list):
        assert len(service.get_all_press_cases(big_list)) == 300

    def test_custom_page_size(self, store, big_list):
        assert len(SjpCaseService(store, page_size=50).get_press_cases(big_list).cases) == 50

    def test_invalid_page_size(self, store):
        with pytest.raises(ValueError):
            SjpCaseService(store, page_size=0)


class TestPublicCases:
    def test_sort_by_postcode_desc(self, service, mixed_list):
        page = service.get_public_cases(mixed_list, sort_by="postcode", sort_order="desc")
        assert [c.postcode for c in page.cases] == ["SW1A", "EX1", "E1", "BS8", None]

    def test_sort_by_prosecutor_missing_first(self, service, mixed_list):
        page = service.get_public_cases(mixed_list, sort_by="prosecutor")
        assert page.cases[0].prosecutor is None
        assert [c.prosecutor for c in page.cases[1:3]] == ["DVLA", "DVLA"]

    def test_unknown_sort_field(self, service, mixed_list):
        with pytest.raises(ValueError, match="Unsupported sort field"):
            service.get_public_cases(mixed_list, sort_by="date_of_birth")

    def test_public_cases_filtered(self, service, mixed_list):
        page = service.get_public_cases(mixed_list, SearchFilters(postcodes=("EX",)))
        assert [c.name for c in page.cases] == ["Carol Clark"]


class TestAuxiliaryQueries:
    def test_unique_prosecutors(self, service, mixed_list):
        assert service.get_unique_prosecutors(mixed_list) == ["DVLA", "TV Licensing"]

    def test_unique_postcodes(self, service, mixed_list):
        summary = service.get_unique_postcodes(mixed_list)
        assert summary.postcodes == ["BS8", "E1", "EX1", "SW1A"]
        assert summary.london_postcodes == ["E1", "SW1A"]
        assert summary.has_london_postcodes is True

    def test_no_london_postcodes(self, service, store):
        store.save_json("bristol", sjp_document([sjp_hearing(postcode="BS8 1AA")]))
        summary = service.get_unique_postcodes("bristol")
        assert summary.has_london_postcodes is False
        assert summary.london_postcodes == []

    def test_list_metadata(self, service, mixed_list):
        metadata = service.get_list_metadata(mixed_list)
        assert metadata.artefact_id == mixed_list
        assert metadata.list_kind == "press"
        assert metadata.case_count == 5
        assert metadata.publication_date == "2025-01-20T09:00:00Z"

"""Single Justice Procedure press and public lists: extraction, filtering and export."""

from hearing_spine.sjp.export import export_file_name, generate_csv
from hearing_spine.sjp.models import (
    LONDON_POSTCODES,
    CasePage,
    PostcodeSummary,
    SearchFilters,
    SjpCase,
    SjpListMetadata,
    SjpOffence,
    SjpPublicCase,
)
from hearing_spine.sjp.parser import (
    determine_list_kind,
    extract_all_hearings,
    extract_case_count,
    extract_press_cases,
    extract_public_cases,
)
from hearing_spine.sjp.service import SjpCaseService, apply_filters

__all__ = [
    "LONDON_POSTCODES",
    "CasePage",
    "PostcodeSummary",
    "SearchFilters",
    "SjpCase",
    "SjpListMetadata",
    "SjpOffence",
    "SjpPublicCase",
    "SjpCaseService",
    "apply_filters",
    "determine_list_kind",
    "extract_all_hearings",
    "extract_case_count",
    "extract_press_cases",
    "extract_public_cases",
    "export_file_name",
    "generate_csv",
]

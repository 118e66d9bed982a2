"""
Reference data: list types, publication enums and the location directory.

The list-type catalogue is static. Locations come from an external
directory; ``InMemoryLocationDirectory`` serves the built-in seed or a JSON
file of location records and is what the CLI and tests use.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Protocol

from hearing_spine.core.errors import ConfigError
from hearing_spine.core.logging import get_logger

logger = get_logger(__name__)


class Provenance(str, Enum):
    XHIBIT = "XHIBIT"
    MANUAL_UPLOAD = "MANUAL_UPLOAD"
    SNL = "SNL"
    COMMON_PLATFORM = "COMMON_PLATFORM"


class Sensitivity(str, Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    CLASSIFIED = "CLASSIFIED"


class Language(str, Enum):
    ENGLISH = "ENGLISH"
    WELSH = "WELSH"
    BILINGUAL = "BILINGUAL"


# =============================================================================
# List types
# =============================================================================


@dataclass(frozen=True)
class ListType:
    id: int
    name: str
    english_friendly_name: str
    welsh_friendly_name: str
    provenance: str
    url_path: str
    is_non_strategic: bool = False


def _list_type(
    list_type_id: int,
    name: str,
    english: str,
    welsh: str | None = None,
    provenance: str = "MANUAL_UPLOAD",
    is_non_strategic: bool = True,
) -> ListType:
    return ListType(
        id=list_type_id,
        name=name,
        english_friendly_name=english,
        welsh_friendly_name=welsh or english,
        provenance=provenance,
        url_path=name.lower().replace("_", "-"),
        is_non_strategic=is_non_strategic,
    )


KNOWN_LIST_TYPES: tuple[ListType, ...] = (
    _list_type(1, "CIVIL_DAILY_CAUSE_LIST", "Civil Daily Cause List", provenance="CFT_IDAM", is_non_strategic=False),
    _list_type(2, "FAMILY_DAILY_CAUSE_LIST", "Family Daily Cause List", provenance="CFT_IDAM", is_non_strategic=False),
    _list_type(3, "CRIME_DAILY_LIST", "Crime Daily List", provenance="CFT_IDAM", is_non_strategic=False),
    _list_type(4, "MAGISTRATES_PUBLIC_LIST", "Magistrates Public List", provenance="CFT_IDAM", is_non_strategic=False),
    _list_type(5, "CROWN_WARNED_LIST", "Crown Warned List", provenance="CFT_IDAM", is_non_strategic=False),
    _list_type(6, "CROWN_DAILY_LIST", "Crown Daily List", provenance="CFT_IDAM", is_non_strategic=False),
    _list_type(7, "CROWN_FIRM_LIST", "Crown Firm List", provenance="CFT_IDAM", is_non_strategic=False),
    _list_type(
        8,
        "CIVIL_AND_FAMILY_DAILY_CAUSE_LIST",
        "Civil and Family Daily Cause List",
        "Rhestr Achos Dyddiol Sifil a Theulu",
        provenance="CFT_IDAM",
        is_non_strategic=False,
    ),
    _list_type(
        9,
        "CARE_STANDARDS_TRIBUNAL_WEEKLY_HEARING_LIST",
        "Care Standards Tribunal Weekly Hearing List",
        "Rhestr Gwrandawiadau Wythnosol y Tribiwnlys Safonau Gofal",
    ),
    _list_type(10, "CIVIL_COURTS_RCJ_DAILY_CAUSE_LIST", "Civil Courts at the RCJ Daily Cause List"),
    _list_type(11, "COUNTY_COURT_LONDON_CIVIL_DAILY_CAUSE_LIST", "County Court at Central London Civil Daily Cause List"),
    _list_type(12, "COURT_OF_APPEAL_CRIMINAL_DAILY_CAUSE_LIST", "Court of Appeal (Criminal Division) Daily Cause List"),
    _list_type(13, "FAMILY_DIVISION_HIGH_COURT_DAILY_CAUSE_LIST", "Family Division of the High Court Daily Cause List"),
    _list_type(14, "KINGS_BENCH_DIVISION_DAILY_CAUSE_LIST", "King's Bench Division Daily Cause List"),
    _list_type(15, "KINGS_BENCH_MASTERS_DAILY_CAUSE_LIST", "King's Bench Masters Daily Cause List"),
    _list_type(16, "MAYOR_CITY_CIVIL_DAILY_CAUSE_LIST", "Mayor's & City Civil Daily Cause List"),
    _list_type(17, "SENIOR_COURTS_COSTS_OFFICE_DAILY_CAUSE_LIST", "Senior Courts Costs Office Daily Cause List"),
    _list_type(18, "LONDON_ADMINISTRATIVE_COURT_DAILY_CAUSE_LIST", "London Administrative Court Daily Cause List"),
    _list_type(19, "COURT_OF_APPEAL_CIVIL_DAILY_CAUSE_LIST", "Court of Appeal (Civil Division) Daily Cause List"),
    _list_type(20, "BIRMINGHAM_ADMINISTRATIVE_COURT_DAILY_CAUSE_LIST", "Birmingham Administrative Court Daily Cause List"),
    _list_type(21, "LEEDS_ADMINISTRATIVE_COURT_DAILY_CAUSE_LIST", "Leeds Administrative Court Daily Cause List"),
    _list_type(
        22,
        "BRISTOL_CARDIFF_ADMINISTRATIVE_COURT_DAILY_CAUSE_LIST",
        "Bristol and Cardiff Administrative Court Daily Cause List",
    ),
    _list_type(23, "MANCHESTER_ADMINISTRATIVE_COURT_DAILY_CAUSE_LIST", "Manchester Administrative Court Daily Cause List"),
    _list_type(
        24,
        "SJP_PRESS_LIST",
        "Single Justice Procedure Press List",
        "Rhestr y Wasg Gweithdrefn Un Ynad",
        provenance="COMMON_PLATFORM",
        is_non_strategic=False,
    ),
    _list_type(
        25,
        "SJP_PUBLIC_LIST",
        "Single Justice Procedure Public List",
        "Rhestr Gyhoeddus Gweithdrefn Un Ynad",
        provenance="COMMON_PLATFORM",
        is_non_strategic=False,
    ),
)


def find_list_type(name_or_id: str | int, list_types: Iterable[ListType] = KNOWN_LIST_TYPES) -> ListType | None:
    """Look up a list type by its ``name`` or integer id."""
    for list_type in list_types:
        if list_type.name == name_or_id or list_type.id == name_or_id:
            return list_type
    return None


# =============================================================================
# Locations
# =============================================================================


@dataclass(frozen=True)
class Location:
    location_id: int
    name: str
    welsh_name: str = ""
    regions: tuple[int, ...] = field(default_factory=tuple)
    sub_jurisdictions: tuple[int, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Location:
        """Build from a record using either ``locationId`` or ``location_id`` keys."""
        try:
            location_id = int(data.get("locationId", data.get("location_id")))
            name = str(data["name"])
        except (KeyError, TypeError, ValueError) as e:
            raise ConfigError(f"Invalid location record: {dict(data)!r}", cause=e) from e
        return cls(
            location_id=location_id,
            name=name,
            welsh_name=str(data.get("welshName", data.get("welsh_name", "")) or ""),
            regions=tuple(data.get("regions", ())),
            sub_jurisdictions=tuple(data.get("subJurisdictions", data.get("sub_jurisdictions", ()))),
        )


class LocationDirectory(Protocol):
    """Anything that can answer "does this court exist?"."""

    def get_location_by_id(self, location_id: int) -> Location | None: ...


class InMemoryLocationDirectory:
    """Location directory backed by a dict, loaded from records or a JSON file."""

    def __init__(self, locations: Iterable[Location] = ()):
        self._locations = {location.location_id: location for location in locations}

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> InMemoryLocationDirectory:
        return cls(Location.from_dict(record) for record in records)

    @classmethod
    def from_json_file(cls, path: str | Path) -> InMemoryLocationDirectory:
        """
        Load ``[{"locationId": 1, "name": ...}, ...]`` or ``{"locations": [...]}``.

        Raises:
            ConfigError: file missing, not JSON, or records malformed
        """
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ConfigError(f"Unable to load locations file: {path}", cause=e) from e

        records = raw.get("locations", []) if isinstance(raw, dict) else raw
        if not isinstance(records, list):
            raise ConfigError(f"Locations file must contain a list of records: {path}")

        directory = cls.from_records(records)
        logger.info("locations_loaded", path=str(path), count=len(directory))
        return directory

    @classmethod
    def default(cls) -> InMemoryLocationDirectory:
        return cls(DEFAULT_LOCATIONS)

    def get_location_by_id(self, location_id: int) -> Location | None:
        return self._locations.get(location_id)

    def __len__(self) -> int:
        return len(self._locations)


DEFAULT_LOCATIONS: tuple[Location, ...] = (
    Location(1, "Oxford Combined Court Centre", "Canolfan Llysoedd Cyfun Rhydychen", (3,), (1, 4)),
    Location(2, "Birmingham Civil and Family Justice Centre", "Canolfan Cyfiawnder Sifil a Theulu Birmingham", (2,), (1, 2)),
    Location(3, "Manchester Civil Justice Centre", "Canolfan Cyfiawnder Sifil Manceinion", (4,), (1,)),
    Location(4, "Royal Courts of Justice", "Llysoedd Barn Brenhinol", (1,), (1, 4, 5)),
    Location(5, "Cardiff Civil and Family Justice Centre", "Canolfan Cyfiawnder Sifil a Theulu Caerdydd", (5,), (1, 2)),
    Location(6, "Leeds Combined Court Centre", "Canolfan Llysoedd Cyfun Leeds", (4,), (1, 4)),
    Location(7, "Bristol Civil and Family Justice Centre", "Canolfan Cyfiawnder Sifil a Theulu Bryste", (3,), (1, 2)),
    Location(8, "Liverpool Civil and Family Court", "Llys Sifil a Theulu Lerpwl", (4,), (1, 2)),
    Location(9, "Single Justice Procedure", "Gweithdrefn Un Ynad", (1, 2, 3, 4, 5), (7,)),
    Location(10, "Newcastle Combined Court Centre", "Canolfan Llysoedd Cyfun Newcastle", (4,), (1, 4)),
)


__all__ = [
    "Provenance",
    "Sensitivity",
    "Language",
    "ListType",
    "KNOWN_LIST_TYPES",
    "find_list_type",
    "Location",
    "LocationDirectory",
    "InMemoryLocationDirectory",
    "DEFAULT_LOCATIONS",
]

"""Settings for hearing-spine.

Configuration is explicit, validated and environment-driven. Every field
can be overridden with an ``HEARING_SPINE_`` prefixed environment variable
or a ``.env`` file; unknown keys are ignored so a shared ``.env`` does not
break startup.

Examples:
    >>> from hearing_spine.core.settings import get_settings
    >>> settings = get_settings()
    >>> settings.cases_per_page
    200

Tags:
    settings, configuration, pydantic, environment, hearing-spine
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MAX_PAYLOAD_BYTES = 10 * 1024 * 1024
CASES_PER_PAGE = 200


class HearingSpineSettings(BaseSettings):
    """Runtime configuration.

    Fields
    ──────
    storage_dir       : Flat directory holding one file per artefact
    converted_dir     : Directory for JSON produced from spreadsheet uploads
    max_payload_bytes : Ceiling for inbound publication payloads
    cases_per_page    : SJP list page size
    log_level         : structlog log level
    json_logs         : Force JSON (True) / console (False) rendering; None = auto
    locations_file    : Optional JSON file of location reference data
    """

    model_config = SettingsConfigDict(
        env_prefix="HEARING_SPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Storage ──────────────────────────────────────────────────
    storage_dir: Path = Field(
        default_factory=lambda: Path.cwd() / "storage" / "temp" / "uploads",
        description="Artefact file store root",
    )
    converted_dir: Path | None = Field(
        default=None,
        description="Converted JSON store root; defaults to storage_dir/converted",
    )

    # ── Limits ───────────────────────────────────────────────────
    max_payload_bytes: int = Field(default=MAX_PAYLOAD_BYTES, gt=0)
    cases_per_page: int = Field(default=CASES_PER_PAGE, gt=0)

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool | None = None

    # ── Reference data ───────────────────────────────────────────
    locations_file: Path | None = None

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return value

    @property
    def resolved_converted_dir(self) -> Path:
        return self.converted_dir or self.storage_dir / "converted"


@lru_cache(maxsize=1)
def get_settings() -> HearingSpineSettings:
    """Return the process-wide settings, loading them on first use."""
    return HearingSpineSettings()


def reset_settings() -> None:
    """Forget cached settings (tests change the environment between cases)."""
    get_settings.cache_clear()


__all__ = [
    "CASES_PER_PAGE",
    "MAX_PAYLOAD_BYTES",
    "HearingSpineSettings",
    "get_settings",
    "reset_settings",
]

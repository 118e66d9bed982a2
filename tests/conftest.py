"""
Shared pytest fixtures for hearing-spine tests.

This module provides:
- Isolation of structlog configuration and cached settings between tests
- A temporary artefact store
- Builders for xlsx uploads and SJP documents (see ``tests/_support``)
"""

from __future__ import annotations

import os
import sys
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

# Ensure the package and test helpers are importable without installation
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from hearing_spine.conversion.registry import ConverterRegistry, build_converter_registry
from hearing_spine.core.settings import HearingSpineSettings, reset_settings
from hearing_spine.reference import InMemoryLocationDirectory
from hearing_spine.storage.local import ArtefactStore


@pytest.fixture(autouse=True)
def isolated_runtime(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Reset structlog and settings so no test sees another's configuration."""
    for key in list(os.environ):
        if key.startswith("HEARING_SPINE_"):
            monkeypatch.delenv(key)
    reset_settings()
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    reset_settings()


@pytest.fixture
def store(tmp_path: Path) -> ArtefactStore:
    return ArtefactStore(tmp_path / "uploads")


@pytest.fixture
def settings(tmp_path: Path) -> HearingSpineSettings:
    return HearingSpineSettings(
        storage_dir=tmp_path / "uploads",
        converted_dir=tmp_path / "converted",
    )


@pytest.fixture
def registry() -> ConverterRegistry:
    return build_converter_registry()


@pytest.fixture
def locations() -> InMemoryLocationDirectory:
    return InMemoryLocationDirectory.default()

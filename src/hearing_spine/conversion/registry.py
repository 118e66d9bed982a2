"""
List-type converter registry.

Maps an integer list-type identifier to the converter that turns an uploaded
spreadsheet for that list type into JSON. The registry is populated once,
by explicit ``register()`` calls made from ``build_converter_registry()``,
then frozen. After ``freeze()`` it is read-only, so concurrent request
handlers share it without locking.

Manifesto:
    A central registry lets upload handlers dispatch on the list type without
    importing every list-type module. Registration is an explicit bootstrap
    step, never an import side effect, so startup order is deterministic and
    tests build exactly the registry they need.

Examples:
    >>> registry = build_converter_registry()
    >>> registry.has_converter_for_list_type(9)
    True
    >>> registry.convert_excel_for_list_type(999, b"")
    Traceback (most recent call last):
    ...
    ConverterNotFoundError: No converter found for list type ID: 999

Tags:
    registry, conversion, list-types, dispatch, hearing-spine

Doc-Types:
    - API Reference
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from typing import Any

from hearing_spine.conversion.engine import ConverterConfig, convert_excel_to_json
from hearing_spine.core.errors import ConverterNotFoundError, RegistryError
from hearing_spine.core.logging import get_logger

logger = get_logger(__name__)

ConvertFunction = Callable[[bytes], Any]


@dataclass(frozen=True)
class ListTypeConverter:
    """A registered (config, convert) pair for one list type."""

    config: ConverterConfig
    convert: ConvertFunction


class ConverterRegistry:
    """Write-once-at-startup, read-many map of list type id to converter."""

    def __init__(self) -> None:
        self._converters: dict[int, ListTypeConverter] = {}
        self._frozen = False

    def register(
        self,
        list_type_id: int,
        config: ConverterConfig,
        convert: ConvertFunction | None = None,
    ) -> ListTypeConverter:
        """
        Register a converter for ``list_type_id``.

        ``convert`` defaults to applying ``config`` to the first worksheet.
        Multi-sheet list types pass their own function.
        """
        if self._frozen:
            raise RegistryError(
                f"Converter registry is frozen; cannot register list type ID: {list_type_id}"
            )
        if list_type_id in self._converters:
            raise RegistryError(f"Converter for list type ID {list_type_id} is already registered")

        if convert is None:
            convert = partial(convert_excel_to_json, config=config)

        converter = ListTypeConverter(config=config, convert=convert)
        self._converters[list_type_id] = converter
        logger.debug("converter_registered", list_type_id=list_type_id, fields=len(config.fields))
        return converter

    def freeze(self) -> "ConverterRegistry":
        """End the bootstrap phase. Further registration raises ``RegistryError``."""
        self._frozen = True
        logger.debug("converter_registry_frozen", registered=len(self._converters))
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def has_converter_for_list_type(self, list_type_id: int) -> bool:
        return list_type_id in self._converters

    def get_converter_for_list_type(self, list_type_id: int) -> ListTypeConverter | None:
        return self._converters.get(list_type_id)

    def convert_excel_for_list_type(self, list_type_id: int, buffer: bytes) -> Any:
        """Dispatch ``buffer`` to the list type's converter; its errors propagate unchanged."""
        converter = self._converters.get(list_type_id)
        if converter is None:
            raise ConverterNotFoundError(list_type_id)
        return converter.convert(buffer)

    async def aconvert_excel_for_list_type(self, list_type_id: int, buffer: bytes) -> Any:
        """Run the conversion in a worker thread so async handlers are not blocked."""
        return await asyncio.to_thread(self.convert_excel_for_list_type, list_type_id, buffer)

    def list_type_ids(self) -> list[int]:
        return sorted(self._converters)

    def __contains__(self, list_type_id: object) -> bool:
        return list_type_id in self._converters

    def __len__(self) -> int:
        return len(self._converters)


def build_converter_registry() -> ConverterRegistry:
    """Create the registry with every shipped list-type converter, frozen."""
    from hearing_spine.conversion.list_types import register_default_converters

    registry = ConverterRegistry()
    register_default_converters(registry)
    registry.freeze()
    logger.info("converter_registry_built", list_type_ids=registry.list_type_ids())
    return registry


__all__ = [
    "ConvertFunction",
    "ListTypeConverter",
    "ConverterRegistry",
    "build_converter_registry",
]

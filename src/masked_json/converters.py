"""Serialization converters that route a string field through a mask strategy."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, ClassVar

from pydantic_core import core_schema

from .strategies import CharMask, HashMask, LiteralMask

if TYPE_CHECKING:
    from pydantic_core import CoreSchema

    from .strategies import MaskStrategy

logger = logging.getLogger(__name__)


class MaskConverter:
    """Reads a field as-is and writes it through a mask strategy."""

    strategy_type: ClassVar[type] = object

    def __init__(self, strategy: MaskStrategy):
        if not isinstance(strategy, self.strategy_type):
            raise TypeError(
                f"{type(self).__name__} expects a {self.strategy_type.__name__}, got {type(strategy).__name__}"
            )
        self.strategy = strategy

    def read(self, value: str | None) -> str | None:
        """Masking is one-directional: whatever text is there is returned."""
        return value

    def write(self, value: str | None) -> str | None:
        return self.strategy.apply(value)

    def attach(self, schema: CoreSchema) -> CoreSchema:
        """Wrap a field schema so this converter handles both directions."""
        return core_schema.no_info_after_validator_function(
            self.read,
            schema,
            serialization=core_schema.plain_serializer_function_ser_schema(
                self.write,
                info_arg=False,
                when_used="always",
            ),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.strategy!r})"


class LiteralMaskConverter(MaskConverter):
    strategy_type = LiteralMask


class CharMaskConverter(MaskConverter):
    strategy_type = CharMask


class HashMaskConverter(MaskConverter):
    strategy_type = HashMask


_CONVERTERS: dict[str, type[MaskConverter]] = {
    "literal": LiteralMaskConverter,
    "char": CharMaskConverter,
    "hash": HashMaskConverter,
}


def converter_for(strategy: MaskStrategy) -> MaskConverter:
    """Create the converter matching a strategy's kind."""
    converter = _CONVERTERS[strategy.kind](strategy)
    logger.debug("Created %r", converter)
    return converter

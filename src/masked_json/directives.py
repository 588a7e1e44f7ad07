"""Declarative field masking.

A :class:`Mask` placed in ``typing.Annotated`` metadata binds a string field
to a masking strategy::

    class User(BaseModel):
        password: Annotated[str | None, Mask()] = None
        token: Annotated[str | None, Mask("*redacted*")] = None
        card: Annotated[str | None, Mask(char="*", unmasked_end=4)] = None
        email: Annotated[str | None, Mask(hash_type=HashType.SHA256)] = None

pydantic resolves the directive when it builds the owning type's schema and
plugs the matching converter in place of the default string serializer.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import types
import typing
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Annotated, Any, Union, get_args, get_origin

from pydantic import BaseModel

from .converters import converter_for
from .errors import MaskConfigurationError
from .hashing import resolve_hash_type
from .strategies import CharMask, HashMask, LiteralMask
from .types import HashType

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from pydantic import GetCoreSchemaHandler
    from pydantic_core import CoreSchema

    from .strategies import MaskStrategy

logger = logging.getLogger(__name__)

_UNION_TYPES = (Union, types.UnionType)


def _is_string_type(annotation: Any) -> bool:
    origin = get_origin(annotation)
    if origin is Annotated:
        return _is_string_type(get_args(annotation)[0])
    if origin in _UNION_TYPES:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        return len(members) == 1 and _is_string_type(members[0])
    if origin is not None:
        return False
    return isinstance(annotation, type) and issubclass(annotation, str)


def _type_name(annotation: Any) -> str:
    if get_origin(annotation) is None and isinstance(annotation, type):
        return annotation.__name__
    return repr(annotation).replace("typing.", "")


class Mask:
    """Annotation metadata selecting exactly one masking strategy.

    Args:
        literal: Replacement text; when no other form is given and this is
            None, masked values are written as null
        char: Mask character, selects character masking
        unmasked_start: Leading characters left in plain text
        unmasked_end: Trailing characters left in plain text
        hash_type: Digest algorithm, selects hash masking
        salt_length: Length of the random salt added before hashing
        save_salt: Prefix the digest with the hex-encoded salt
    """

    __slots__ = ("strategy",)

    def __init__(
        self,
        literal: str | None = None,
        *,
        char: str | None = None,
        unmasked_start: int = 0,
        unmasked_end: int = 0,
        hash_type: HashType | str | None = None,
        salt_length: int = 0,
        save_salt: bool = False,
    ):
        given = {"literal": literal, "char": char, "hash_type": hash_type}
        forms = [name for name, value in given.items() if value is not None]
        if len(forms) > 1:
            raise MaskConfigurationError(f"Mask accepts only one of literal, char or hash_type; got {', '.join(forms)}")

        strategy: MaskStrategy
        if hash_type is not None:
            strategy = HashMask(hash_type=resolve_hash_type(hash_type), salt_length=salt_length, save_salt=save_salt)
        elif char is not None:
            strategy = CharMask(mask_char=char, unmasked_start=unmasked_start, unmasked_end=unmasked_end)
        else:
            strategy = LiteralMask(replacement=literal)
        self.strategy = strategy

    @classmethod
    def using(cls, strategy: MaskStrategy) -> Mask:
        """Build a directive from an existing strategy."""
        mask = cls.__new__(cls)
        mask.strategy = strategy
        return mask

    def check_field_type(self, annotation: Any, field_name: str | None = None) -> None:
        """Raise MaskConfigurationError unless ``annotation`` is a (nullable) string."""
        if _is_string_type(annotation):
            return
        where = f"'{field_name}'" if field_name else "a field"
        raise MaskConfigurationError(
            f"The 'Mask' annotation can only be applied to 'str' fields, but {where} is declared as '{_type_name(annotation)}'",
            field_name=field_name,
            field_type=annotation,
        )

    def __get_pydantic_core_schema__(self, source_type: Any, handler: GetCoreSchemaHandler) -> CoreSchema:
        field_name = getattr(handler, "field_name", None)
        self.check_field_type(source_type, field_name)
        logger.debug("Resolved %s mask for field %s", self.strategy.kind, field_name or "<anonymous>")
        return converter_for(self.strategy).attach(handler(source_type))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Mask) and other.strategy == self.strategy

    def __hash__(self) -> int:
        return hash(self.strategy)

    def __repr__(self) -> str:
        return f"Mask({self.strategy!r})"


@dataclass(frozen=True)
class FieldMaskDirective:
    """A mask strategy bound to one field of one type."""

    owner: type
    field_name: str
    strategy: MaskStrategy


def _find_masks(annotation: Any) -> Iterator[tuple[Mask, Any]]:
    """Yield each Mask in an annotation with the type it annotates."""
    if get_origin(annotation) is Annotated:
        base, *metadata = get_args(annotation)
        for item in metadata:
            if isinstance(item, Mask):
                yield item, base
        yield from _find_masks(base)
    elif get_origin(annotation) in _UNION_TYPES:
        for arg in get_args(annotation):
            yield from _find_masks(arg)


def _collect(owner: type) -> Iterator[FieldMaskDirective]:
    if isinstance(owner, type) and issubclass(owner, BaseModel):
        for name, info in owner.model_fields.items():
            for item in info.metadata:
                if isinstance(item, Mask):
                    yield FieldMaskDirective(owner, name, item.strategy)
            for mask, _ in _find_masks(info.annotation):
                yield FieldMaskDirective(owner, name, mask.strategy)
    elif dataclasses.is_dataclass(owner):
        hints = typing.get_type_hints(owner, include_extras=True)
        for f in dataclasses.fields(owner):
            for mask, base in _find_masks(hints.get(f.name, f.type)):
                mask.check_field_type(base, f.name)
                yield FieldMaskDirective(owner, f.name, mask.strategy)


class DirectiveRegistry:
    """Per-type cache of resolved field directives.

    Readers use the current immutable snapshot without locking; a miss
    computes the directives and publishes a new snapshot under the lock.
    """

    def __init__(self) -> None:
        self._snapshot: Mapping[type, tuple[FieldMaskDirective, ...]] = MappingProxyType({})
        self._lock = threading.Lock()

    def directives_for(self, owner: type) -> tuple[FieldMaskDirective, ...]:
        cached = self._snapshot.get(owner)
        if cached is not None:
            return cached

        directives = tuple(_collect(owner))
        with self._lock:
            snapshot = dict(self._snapshot)
            snapshot.setdefault(owner, directives)
            self._snapshot = MappingProxyType(snapshot)
        logger.debug("Registered %d mask directive(s) for %s", len(directives), owner.__qualname__)
        return self._snapshot[owner]

    def strategy_for(self, owner: type, field_name: str) -> MaskStrategy | None:
        for directive in self.directives_for(owner):
            if directive.field_name == field_name:
                return directive.strategy
        return None

    def clear(self) -> None:
        with self._lock:
            self._snapshot = MappingProxyType({})


default_registry = DirectiveRegistry()


def masked_fields(owner: type) -> tuple[FieldMaskDirective, ...]:
    """Return the mask directives declared on a pydantic model or dataclass."""
    return default_registry.directives_for(owner)

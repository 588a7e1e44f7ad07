"""Core functionality for masked-json: path masking and the serialization façade."""

from __future__ import annotations

import functools
import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter
from pydantic.alias_generators import to_camel

from .errors import PathResolutionMiss
from .hashing import resolve_hash_type
from .models import MaskSpec, SerializationOptions
from .paths import clone, read_member, resolve_parent, write_member
from .strategies import CharMask, HashMask, LiteralMask, MaskStrategy
from .types import DEFAULT_MASK_CHAR, HashType, MaskedPaths

logger = logging.getLogger(__name__)


@functools.lru_cache(maxsize=256)
def _adapter(tp: Any) -> TypeAdapter:
    return TypeAdapter(tp)


def _camel_key(key: Any) -> Any:
    # Keys without inner underscores are explicit aliases or already camelCase
    if isinstance(key, str) and "_" in key.strip("_"):
        return to_camel(key)
    return key


def _shape(data: Any, drop_nulls: bool, camel_case: bool) -> Any:
    """Drop null mapping entries and rename keys over JSON-mode data."""
    if isinstance(data, dict):
        shaped = {}
        for key, item in data.items():
            if drop_nulls and item is None:
                continue
            shaped[_camel_key(key) if camel_case else key] = _shape(item, drop_nulls, camel_case)
        return shaped
    if isinstance(data, list):
        return [_shape(item, drop_nulls, camel_case) for item in data]
    return data


def serialize(value: Any, options: SerializationOptions | None = None) -> str:
    """Serialize a value graph to JSON text.

    Fields carrying a :class:`~masked_json.directives.Mask` are written
    through their strategy; everything else is written verbatim. Unless
    ``include_null_values`` is set, null entries are left out at every
    level, dict values included. With ``use_original_names`` off, fields are
    written under their alias, or in camelCase when they have none.
    """
    if options is None:
        options = SerializationOptions()
    if value is None:
        return "null"

    data = _adapter(type(value)).dump_python(
        value,
        mode="json",
        by_alias=not options.use_original_names,
        exclude_none=not options.include_null_values,
    )
    data = _shape(data, not options.include_null_values, not options.use_original_names)

    if options.indented:
        return json.dumps(data, indent=2, ensure_ascii=False)
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def deserialize(text: str | bytes, type_: Any) -> Any:
    """Parse JSON text into ``type_``. Masked fields read back as-is."""
    return _adapter(type_).validate_json(text)


def mask_path(root: Any, path: str, strategy: MaskStrategy) -> None:
    """Mask the string leaf at ``path`` in place.

    Literal masking overwrites the leaf even when it is null; other
    strategies leave a null leaf untouched.

    Raises:
        PathResolutionMiss: If the path does not lead to a writable string leaf
    """
    parent, member = resolve_parent(root, path)
    current = read_member(parent, member)
    if current is not None and not isinstance(current, str):
        raise PathResolutionMiss(path, str(member), f"leaf is {type(current).__name__}, not str")

    if isinstance(strategy, LiteralMask):
        masked = strategy.replacement
    elif current is None:
        return
    else:
        masked = strategy.apply(current)

    write_member(parent, member, masked, path)


def _normalize_paths(masked_paths: Iterable[str] | str | None) -> MaskedPaths:
    if masked_paths is None:
        return []
    if isinstance(masked_paths, str):
        return [masked_paths]
    return list(masked_paths)


def mask_and_serialize(
    root: Any,
    masked_paths: Iterable[str] | str | None,
    strategy: MaskStrategy | None = None,
    options: SerializationOptions | None = None,
    *,
    strict: bool = False,
) -> str:
    """Mask the given paths on a clone of ``root`` and serialize the clone.

    The caller's object is never modified. Paths that do not resolve are
    skipped unless ``strict`` is set, in which case the miss is raised.

    Args:
        root: Object graph to serialize
        masked_paths: Dotted paths of string fields to mask
        strategy: Masking strategy (defaults to writing null)
        options: Serialization options
        strict: Raise PathResolutionMiss instead of skipping unresolved paths

    Returns:
        JSON text
    """
    paths = _normalize_paths(masked_paths)
    if root is None or not paths:
        return serialize(root, options)

    if strategy is None:
        strategy = LiteralMask()

    sanitized = clone(root)
    for path in paths:
        try:
            mask_path(sanitized, path, strategy)
        except PathResolutionMiss as e:
            if strict:
                raise
            logger.debug("Skipping masked path: %s", e)

    return serialize(sanitized, options)


def to_json(
    source: Any,
    *masked_paths: str,
    mask: str | None = None,
    indented: bool = False,
    use_original_names: bool = True,
    include_null_values: bool = False,
    strict: bool = False,
) -> str:
    """Serialize ``source`` with the given paths replaced by ``mask`` (null by default)."""
    options = SerializationOptions(
        indented=indented,
        use_original_names=use_original_names,
        include_null_values=include_null_values,
    )
    return mask_and_serialize(source, masked_paths, LiteralMask(replacement=mask), options, strict=strict)


def to_char_masked_json(
    source: Any,
    *masked_paths: str,
    mask_char: str = DEFAULT_MASK_CHAR,
    unmasked_start: int = 0,
    unmasked_end: int = 0,
    indented: bool = False,
    use_original_names: bool = True,
    include_null_values: bool = False,
    strict: bool = False,
) -> str:
    """Serialize ``source`` with the given paths masked character by character."""
    options = SerializationOptions(
        indented=indented,
        use_original_names=use_original_names,
        include_null_values=include_null_values,
    )
    strategy = CharMask(mask_char=mask_char, unmasked_start=unmasked_start, unmasked_end=unmasked_end)
    return mask_and_serialize(source, masked_paths, strategy, options, strict=strict)


def to_hash_masked_json(
    source: Any,
    *masked_paths: str,
    hash_type: HashType | str = HashType.SHA256,
    salt_length: int = 0,
    save_salt: bool = False,
    indented: bool = False,
    use_original_names: bool = True,
    include_null_values: bool = False,
    strict: bool = False,
) -> str:
    """Serialize ``source`` with the given paths replaced by their hex digests."""
    options = SerializationOptions(
        indented=indented,
        use_original_names=use_original_names,
        include_null_values=include_null_values,
    )
    strategy = HashMask(hash_type=resolve_hash_type(hash_type), salt_length=salt_length, save_salt=save_salt)
    return mask_and_serialize(source, masked_paths, strategy, options, strict=strict)


def load_spec(path: Path) -> MaskSpec:
    """Load a YAML masking spec from file."""
    data = yaml.safe_load(path.read_text())
    return MaskSpec(**(data or {}))


def apply_spec(spec: MaskSpec, document: Any) -> str:
    """Mask a document according to a spec and return the JSON text."""
    return mask_and_serialize(
        document,
        spec.masked_paths,
        spec.strategy,
        spec.options,
        strict=spec.strict,
    )

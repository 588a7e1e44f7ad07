"""Cloning and dotted-path navigation over object graphs."""

from __future__ import annotations

import copy
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from typing import Any

from pydantic import BaseModel, ValidationError

from .errors import PathResolutionMiss
from .types import PATH_SEPARATOR

_MISSING = object()


def clone(obj: Any) -> Any:
    """Return a structurally independent copy of an object graph."""
    if isinstance(obj, BaseModel):
        return obj.model_copy(deep=True)
    return copy.deepcopy(obj)


def split_path(path: str) -> list[str]:
    """Split a dotted path into segments, rejecting empty ones."""
    if not isinstance(path, str) or not path:
        raise PathResolutionMiss(str(path), reason="path is empty")
    segments = path.split(PATH_SEPARATOR)
    for segment in segments:
        if not segment.strip():
            raise PathResolutionMiss(path, segment, "empty segment")
    return segments


def _match_key(mapping: Mapping, segment: str) -> Any:
    if segment in mapping:
        return segment
    folded = segment.casefold()
    for key in mapping:
        if isinstance(key, str) and key.casefold() == folded:
            return key
    return _MISSING


def _match_index(sequence: Sequence, segment: str) -> Any:
    try:
        index = int(segment)
    except ValueError:
        return _MISSING
    if -len(sequence) <= index < len(sequence):
        return index
    return _MISSING


def _match_attribute(obj: Any, segment: str) -> Any:
    if isinstance(obj, BaseModel):
        fields = type(obj).model_fields
        if segment in fields:
            return segment
        for name, info in fields.items():
            if segment in (info.alias, info.serialization_alias):
                return name
        folded = segment.casefold()
        for name in fields:
            if name.casefold() == folded:
                return name
        return _MISSING

    if hasattr(obj, segment):
        return segment
    folded = segment.casefold()
    for name in getattr(obj, "__dict__", {}):
        if name.casefold() == folded:
            return name
    return _MISSING


def _member(node: Any, segment: str) -> Any:
    """Resolve one segment to the key, index or attribute name it selects."""
    if isinstance(node, (str, bytes, int, float, bool)):
        return _MISSING
    if isinstance(node, Mapping):
        return _match_key(node, segment)
    if isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
        return _match_index(node, segment)
    return _match_attribute(node, segment)


def _read(node: Any, member: Any) -> Any:
    if isinstance(node, (Mapping, Sequence)):
        return node[member]
    return getattr(node, member)


def resolve_parent(root: Any, path: str) -> tuple[Any, Any]:
    """Walk a path and return the container of its leaf plus the leaf's key.

    Raises:
        PathResolutionMiss: If any segment cannot be followed
    """
    segments = split_path(path)
    node = root
    for i, segment in enumerate(segments):
        if node is None:
            raise PathResolutionMiss(path, segment, "parent is null")
        member = _member(node, segment)
        if member is _MISSING:
            raise PathResolutionMiss(path, segment)
        if i == len(segments) - 1:
            return node, member
        node = _read(node, member)
    raise PathResolutionMiss(path)  # pragma: no cover


def read_member(parent: Any, member: Any) -> Any:
    return _read(parent, member)


def write_member(parent: Any, member: Any, value: Any, path: str = "") -> None:
    """Replace a member value, raising PathResolutionMiss if the container refuses."""
    try:
        if isinstance(parent, Mapping):
            if not isinstance(parent, MutableMapping):
                raise TypeError("mapping is read-only")
            parent[member] = value
        elif isinstance(parent, Sequence):
            if not isinstance(parent, MutableSequence):
                raise TypeError("sequence is read-only")
            parent[member] = value
        else:
            setattr(parent, member, value)
    except (AttributeError, TypeError, ValidationError) as e:
        raise PathResolutionMiss(path, str(member), f"cannot assign: {e}") from e


def get_by_path(root: Any, path: str) -> Any | None:
    """Return the value at a dotted path, or None if it does not resolve."""
    try:
        parent, member = resolve_parent(root, path)
        return _read(parent, member)
    except PathResolutionMiss:
        return None


def set_by_path(root: Any, path: str, value: Any) -> bool:
    """Set the value at a dotted path; return False if the path does not resolve."""
    try:
        parent, member = resolve_parent(root, path)
        write_member(parent, member, value, path)
    except PathResolutionMiss:
        return False
    return True

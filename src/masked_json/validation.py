"""Semantic validation for masking specs."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from .types import PATH_SEPARATOR

if TYPE_CHECKING:
    from .models import MaskSpec
    from .types import Errors

_SEGMENT_PATTERN = re.compile(r"^(?:[A-Za-z_][A-Za-z0-9_]*|-?\d+)$")


def semantic_validate(spec: MaskSpec, strict: bool = False) -> Errors:
    """
    Perform semantic validation on a masking spec.

    Args:
        spec: The specification to validate
        strict: Whether to perform strict validation

    Returns:
        A list of validation errors, empty if valid
    """
    errors = []

    errors.extend(validate_unique_paths(spec))
    errors.extend(validate_path_syntax(spec))

    if strict:
        errors.extend(validate_strict_rules(spec))

    return errors


def validate_unique_paths(spec: MaskSpec) -> Errors:
    """Validate that each masked path is listed once."""
    errors = []
    seen = set()

    for path in spec.masked_paths:
        if path in seen:
            errors.append(f"Duplicate masked path: '{path}'")
        else:
            seen.add(path)

    return errors


def validate_path_syntax(spec: MaskSpec) -> Errors:
    """
    Validate dotted path syntax.

    Rules:
    - paths must not be empty
    - segments must not be empty (no leading, trailing or doubled dots)
    """
    errors = []

    for path in spec.masked_paths:
        if not path.strip():
            errors.append("Masked path must not be empty")
            continue
        if any(not segment.strip() for segment in path.split(PATH_SEPARATOR)):
            errors.append(f"Invalid masked path '{path}': empty segment")

    return errors


def validate_strict_rules(spec: MaskSpec) -> Errors:
    """
    Perform additional strict validations.

    Rules:
    - Every segment should be an identifier or a list index
    - A salted hash should keep its salt, otherwise the value cannot be verified
    """
    errors = []

    for path in spec.masked_paths:
        bad = [s for s in path.split(PATH_SEPARATOR) if s.strip() and not _SEGMENT_PATTERN.match(s)]
        if bad:
            errors.append(f"Masked path '{path}' has non-identifier segment(s): {', '.join(bad)}")

    strategy = spec.strategy
    if strategy.kind == "hash" and strategy.salt_length > 0 and not strategy.save_salt:
        errors.append("Salted hash masking without save_salt produces values that cannot be verified")

    return errors

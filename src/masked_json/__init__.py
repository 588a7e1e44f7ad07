"""masked-json - Selective value masking for JSON serialization."""

__version__ = "0.1.0"

from .types import HashType
from .errors import MaskingError, MaskConfigurationError, PathResolutionMiss, UnsupportedAlgorithmError
from .strategies import LiteralMask, CharMask, HashMask, MaskStrategy, mask_chars
from .directives import Mask, FieldMaskDirective, DirectiveRegistry, masked_fields
from .models import SerializationOptions, MaskSpec
from .core import (
    serialize,
    deserialize,
    mask_and_serialize,
    to_json,
    to_char_masked_json,
    to_hash_masked_json,
    load_spec,
    apply_spec,
)

__all__ = [
    "HashType",
    "MaskingError",
    "MaskConfigurationError",
    "PathResolutionMiss",
    "UnsupportedAlgorithmError",
    "LiteralMask",
    "CharMask",
    "HashMask",
    "MaskStrategy",
    "mask_chars",
    "Mask",
    "FieldMaskDirective",
    "DirectiveRegistry",
    "masked_fields",
    "SerializationOptions",
    "MaskSpec",
    "serialize",
    "deserialize",
    "mask_and_serialize",
    "to_json",
    "to_char_masked_json",
    "to_hash_masked_json",
    "load_spec",
    "apply_spec",
]

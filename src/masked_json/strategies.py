"""Masking strategies applied to string values on the write path."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .hashing import generate_hash, resolve_hash_type, to_hash
from .types import DEFAULT_MASK_CHAR, HashType


def mask_chars(value: str | None, mask_char: str = DEFAULT_MASK_CHAR, unmasked_start: int = 0, unmasked_end: int = 0) -> str | None:
    """Replace the middle of a string with a mask character.

    The first ``unmasked_start`` and last ``unmasked_end`` characters are kept.
    Negative offsets count as zero. Values too short to leave anything
    masked are returned unchanged.
    """
    unmasked_start = max(unmasked_start, 0)
    unmasked_end = max(unmasked_end, 0)
    if not value:
        return value

    if unmasked_start + unmasked_end >= len(value):
        return value

    middle = mask_char * (len(value) - unmasked_start - unmasked_end)
    end = value[len(value) - unmasked_end:] if unmasked_end else ""
    return value[:unmasked_start] + middle + end


class _Strategy(BaseModel):
    model_config = ConfigDict(frozen=True)

    def apply(self, value: str | None) -> str | None:
        raise NotImplementedError


class LiteralMask(_Strategy):
    """Replace the value with a literal, or with null when no literal is set."""

    kind: Literal["literal"] = "literal"
    replacement: str | None = None

    def apply(self, value: str | None) -> str | None:
        if value is None or self.replacement is None:
            return None
        return self.replacement


class CharMask(_Strategy):
    """Mask every character except optional leading and trailing ones."""

    kind: Literal["char"] = "char"
    mask_char: str = Field(default=DEFAULT_MASK_CHAR, min_length=1, max_length=1)
    unmasked_start: int = 0
    unmasked_end: int = 0

    @field_validator("unmasked_start", "unmasked_end")
    @classmethod
    def _clamp(cls, v: int) -> int:
        return max(v, 0)

    def apply(self, value: str | None) -> str | None:
        return mask_chars(value, self.mask_char, self.unmasked_start, self.unmasked_end)


class HashMask(_Strategy):
    """Replace the value with its hex digest, optionally salted."""

    kind: Literal["hash"] = "hash"
    hash_type: HashType = HashType.SHA256
    salt_length: int = 0
    save_salt: bool = False

    @field_validator("hash_type", mode="before")
    @classmethod
    def _resolve_hash_type(cls, v: Any) -> HashType:
        return resolve_hash_type(v)

    @field_validator("salt_length")
    @classmethod
    def _clamp(cls, v: int) -> int:
        return max(v, 0)

    def apply(self, value: str | None) -> str | None:
        if value is None:
            return None
        if self.salt_length == 0:
            return generate_hash(self.hash_type, value)
        return to_hash(value, self.hash_type, self.salt_length, self.save_salt)


MaskStrategy = Annotated[Union[LiteralMask, CharMask, HashMask], Field(discriminator="kind")]

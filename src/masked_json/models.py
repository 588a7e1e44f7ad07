"""Configuration models for masked-json."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from .strategies import LiteralMask, MaskStrategy


class SerializationOptions(BaseModel):
    """Output formatting options passed to the serializer."""

    indented: bool = False
    use_original_names: bool = True
    include_null_values: bool = False


class MaskSpec(BaseModel):
    """A reusable masking job: which paths to mask, how, and how to format the output."""

    version: str = "1"
    masked_paths: list[str] = Field(default_factory=list)
    strategy: MaskStrategy = Field(default_factory=LiteralMask)
    options: SerializationOptions = Field(default_factory=SerializationOptions)
    strict: bool = False

    @field_validator("masked_paths", mode="before")
    @classmethod
    def _split_paths(cls, v: object) -> object:
        """Accept a single path or a comma-separated string."""
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return v

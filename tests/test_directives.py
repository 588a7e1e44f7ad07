"""Tests for declarative field masking."""

import json
from dataclasses import dataclass
from typing import Annotated, Optional

import pytest
from pydantic import BaseModel

from masked_json.core import deserialize, serialize
from masked_json.directives import DirectiveRegistry, FieldMaskDirective, Mask, masked_fields
from masked_json.errors import MaskConfigurationError, UnsupportedAlgorithmError
from masked_json.models import SerializationOptions
from masked_json.strategies import CharMask, HashMask, LiteralMask
from masked_json.types import HashType

SHA256_SECRET = "2bb80d537b1da3e38bd30361aa855686bde0eacd7162fef6a25fe97bf527a25b"
SHA384_SECRET = "58a775ba4112be3005ae4407ce757d88fda71d40497bb8026ecac54d4e3ffc7232ce8de3ab5acb30ae39760fee7c53ed"
SHA512_SECRET = "bd2b1aaf7ef4f09be9f52ce2d8d599674d81aa9d6a4421696dc4d93dd0619d682ce56b4d64a9ef097761ced99e0f67265b5f76085e5b0ee7ca4696b2ad6fe2b2"


class LiteralSample(BaseModel):
    id: int = 0
    secret1: Annotated[Optional[str], Mask()] = None
    secret2: Annotated[Optional[str], Mask("***masked***")] = None
    secret3: Annotated[Optional[str], Mask("")] = None


class CharInner(BaseModel):
    value: Optional[str] = None
    secret_a: Annotated[Optional[str], Mask(char="~")] = None


class CharSample(BaseModel):
    id: int = 0
    name: Optional[str] = None
    secret1: Annotated[Optional[str], Mask(char="*")] = None
    secret2: Annotated[Optional[str], Mask(char="#")] = None
    secret3: Annotated[Optional[str], Mask(char="*", unmasked_start=3)] = None
    secret4: Annotated[Optional[str], Mask(char="*", unmasked_end=3)] = None
    secret5: Annotated[Optional[str], Mask(char="*", unmasked_start=2, unmasked_end=2)] = None
    inner: Optional[CharInner] = None


class HashInner(BaseModel):
    value: Optional[str] = None
    secret_a: Annotated[Optional[str], Mask(hash_type=HashType.SHA256)] = None


class HashSample(BaseModel):
    id: int = 0
    name: Optional[str] = None
    secret0: Annotated[Optional[str], Mask(hash_type=HashType.SHA256)] = None
    secret1: Annotated[Optional[str], Mask(hash_type=HashType.SHA256)] = None
    secret2: Annotated[Optional[str], Mask(hash_type=HashType.SHA384)] = None
    secret3: Annotated[Optional[str], Mask(hash_type=HashType.SHA512)] = None
    secret4: Annotated[Optional[str], Mask(hash_type=HashType.SHA256, salt_length=4)] = None
    secret5: Annotated[Optional[str], Mask(hash_type=HashType.SHA256, salt_length=4, save_salt=True)] = None
    secret6: Annotated[Optional[str], Mask(hash_type="sha256", salt_length=4, save_salt=True)] = None
    inner: Optional[HashInner] = None


@dataclass
class Card:
    holder: str
    number: Annotated[str, Mask(char="*", unmasked_end=4)]


def test_literal_mask_on_fields():
    """Test literal masking of model fields."""
    sample = LiteralSample(id=123, secret1="secret1", secret2="secret2", secret3="secret3")

    clone = deserialize(serialize(sample), LiteralSample)

    assert clone.id == 123
    assert clone.secret1 is None
    assert clone.secret2 == "***masked***"
    assert clone.secret3 == ""


def test_literal_mask_keeps_null_fields_null():
    """Test that a null field is never replaced by the literal."""
    sample = LiteralSample(id=1)

    data = json.loads(serialize(sample, SerializationOptions(include_null_values=True)))

    assert data["secret2"] is None
    assert data["secret3"] is None


def test_char_mask_on_nested_fields():
    """Test character masking, including on a nested model."""
    sample = CharSample(
        id=123,
        name="whatever",
        secret1="secret",
        secret2="secret",
        secret3="secret",
        secret4="secret",
        secret5="secret",
        inner=CharInner(value="something", secret_a="secret"),
    )

    clone = deserialize(serialize(sample), CharSample)

    assert clone.id == 123
    assert clone.name == "whatever"
    assert clone.secret1 == "******"
    assert clone.secret2 == "######"
    assert clone.secret3 == "sec***"
    assert clone.secret4 == "***ret"
    assert clone.secret5 == "se**et"
    assert clone.inner.value == "something"
    assert clone.inner.secret_a == "~~~~~~"


def test_hash_mask_on_fields():
    """Test hash masking of model fields."""
    sample = HashSample(
        id=123,
        name="whatever",
        secret0=None,
        secret1="secret",
        secret2="secret",
        secret3="secret",
        secret4="secret",
        secret5="secret",
        secret6="secret",
        inner=HashInner(value="something", secret_a="secret"),
    )

    clone = deserialize(serialize(sample), HashSample)

    assert clone.id == 123
    assert clone.name == "whatever"
    assert clone.secret0 is None
    assert clone.secret1 == SHA256_SECRET
    assert clone.secret2 == SHA384_SECRET
    assert clone.secret3 == SHA512_SECRET
    assert clone.secret4 != clone.secret1
    assert len(clone.secret4) == 64
    assert len(clone.secret5) == 72
    assert len(clone.secret6) == 72
    assert clone.inner.value == "something"
    assert clone.inner.secret_a == SHA256_SECRET


def test_masking_applies_to_python_dumps():
    """Test that model_dump goes through the same converters."""
    sample = CharSample(secret1="abc")

    assert sample.model_dump()["secret1"] == "***"
    # The instance itself keeps the plain value
    assert sample.secret1 == "abc"


def test_masked_value_reads_back_as_is():
    """Test that deserialization does not unmask or re-mask."""
    clone = deserialize('{"secret5": "se**et", "secret2": "plain"}', CharSample)

    assert clone.secret5 == "se**et"
    assert clone.secret2 == "plain"


def test_mask_on_stdlib_dataclass():
    """Test that directives work on standard library dataclasses."""
    text = serialize(Card(holder="Joe Doe", number="4111111111111111"))

    assert json.loads(text) == {"holder": "Joe Doe", "number": "************1111"}


def test_mask_on_optional_inner_annotation():
    """Test a directive nested inside Optional."""

    class Token(BaseModel):
        token: Optional[Annotated[str, Mask("x")]] = None

    assert json.loads(serialize(Token(token="abc"))) == {"token": "x"}
    assert [d.field_name for d in masked_fields(Token)] == ["token"]


def test_mask_rejects_non_string_field():
    """Test that a directive on a non-string field fails when the type is built."""
    with pytest.raises(MaskConfigurationError) as exc_info:

        class Bad(BaseModel):
            count: Annotated[int, Mask()] = 0

    assert exc_info.value.field_name == "count"
    assert "int" in str(exc_info.value)
    assert "count" in str(exc_info.value)


def test_mask_rejects_list_of_strings():
    """Test that containers of strings are not accepted."""
    with pytest.raises(MaskConfigurationError):

        class Bad(BaseModel):
            tags: Annotated[Optional[list[str]], Mask(char="*")] = None


def test_mask_rejects_conflicting_forms():
    """Test that a directive picks exactly one strategy."""
    with pytest.raises(MaskConfigurationError):
        Mask(char="*", hash_type=HashType.SHA256)
    with pytest.raises(MaskConfigurationError):
        Mask("literal", char="*")


def test_mask_rejects_unsupported_algorithm():
    """Test that unsupported algorithms surface directly."""
    with pytest.raises(UnsupportedAlgorithmError):
        Mask(hash_type="md5")


def test_mask_strategy_selection():
    """Test which strategy each directive form builds."""
    assert Mask().strategy == LiteralMask()
    assert Mask("x").strategy == LiteralMask(replacement="x")
    assert Mask(char="#", unmasked_start=-1).strategy == CharMask(mask_char="#")
    assert Mask(hash_type=HashType.SHA512, salt_length=2).strategy == HashMask(hash_type=HashType.SHA512, salt_length=2)
    assert Mask.using(CharMask()) == Mask(char="*")


def test_masked_fields_lists_directives():
    """Test directive discovery on a model."""
    directives = masked_fields(CharSample)

    assert [d.field_name for d in directives] == ["secret1", "secret2", "secret3", "secret4", "secret5"]
    assert directives[4] == FieldMaskDirective(CharSample, "secret5", CharMask(unmasked_start=2, unmasked_end=2))
    assert masked_fields(CharSample) is directives


def test_registry_on_dataclasses():
    """Test directive discovery and type checking on stdlib dataclasses."""
    registry = DirectiveRegistry()

    assert registry.strategy_for(Card, "number") == CharMask(unmasked_end=4)
    assert registry.strategy_for(Card, "holder") is None

    @dataclass
    class BadCard:
        number: Annotated[int, Mask()]

    with pytest.raises(MaskConfigurationError):
        registry.directives_for(BadCard)


def test_registry_clear():
    """Test that clearing the registry recomputes directives."""
    registry = DirectiveRegistry()
    first = registry.directives_for(LiteralSample)

    registry.clear()
    second = registry.directives_for(LiteralSample)

    assert first == second
    assert first is not second

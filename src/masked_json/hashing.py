"""SHA-2 hashing helpers with optional random salt."""

from __future__ import annotations

import hashlib
import hmac
import string

from .errors import UnsupportedAlgorithmError
from .password import generate_password
from .types import DEFAULT_SALT_LENGTH, HASH_HEX_LENGTH, HashType

_HASH_FACTORIES = {
    HashType.SHA256: hashlib.sha256,
    HashType.SHA384: hashlib.sha384,
    HashType.SHA512: hashlib.sha512,
}


def resolve_hash_type(value: HashType | str) -> HashType:
    """Map an algorithm name such as ``"sha512"`` or ``"SHA-384"`` to a HashType."""
    if isinstance(value, HashType):
        return value
    if isinstance(value, str):
        name = value.strip().upper().replace("-", "").replace("_", "")
        try:
            return HashType(name)
        except ValueError:
            pass
    raise UnsupportedAlgorithmError(value)


def generate_hash(hash_type: HashType | str, plain_text: str, salt: str | None = None) -> str:
    """Hash plain text, optionally prefixed with a salt.

    Args:
        hash_type: Hash algorithm
        plain_text: Text to hash
        salt: Salt added in front of the plain text before hashing

    Returns:
        Lower-case hex digest (the salt is not included)
    """
    if plain_text is None:
        raise TypeError("plain_text must not be None")

    factory = _HASH_FACTORIES[resolve_hash_type(hash_type)]
    if salt:
        plain_text = salt + plain_text
    return factory(plain_text.encode("utf-8")).hexdigest()


def to_hash(
    plain_text: str,
    hash_type: HashType | str = HashType.SHA256,
    salt_length: int = DEFAULT_SALT_LENGTH,
    save_salt: bool = True,
) -> str:
    """Hash plain text with a random salt.

    Args:
        plain_text: Text to hash
        hash_type: Hash algorithm
        salt_length: Length of the random salt; 0 or less disables salting
        save_salt: Prefix the result with the hex-encoded salt

    Returns:
        Hex digest, preceded by the hex-encoded salt when ``save_salt`` is set
    """
    salt = generate_password(salt_length) if salt_length > 0 else None
    digest = generate_hash(hash_type, plain_text, salt)

    if salt is None or not save_salt:
        return digest
    return salt.encode("utf-8").hex() + digest


def verify_hash(hash_type: HashType | str, plain_text: str, hash_value: str) -> bool:
    """Check plain text against a value produced by :func:`to_hash`.

    A hex-encoded salt in front of the digest is detected from the length of
    ``hash_value`` and applied before comparing.
    """
    if not hash_value or any(ch not in string.hexdigits for ch in hash_value):
        return False

    hash_type = resolve_hash_type(hash_type)
    digest_length = HASH_HEX_LENGTH[hash_type]
    salt_hex_length = len(hash_value) - digest_length
    if salt_hex_length < 0:
        return False

    salt = None
    if salt_hex_length > 0:
        try:
            salt = bytes.fromhex(hash_value[:salt_hex_length]).decode("utf-8")
        except ValueError:
            return False
        hash_value = hash_value[salt_hex_length:]

    expected = generate_hash(hash_type, plain_text, salt)
    return hmac.compare_digest(expected, hash_value.lower())

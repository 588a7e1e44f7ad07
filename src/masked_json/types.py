"""Type definitions for masked-json."""

from enum import Enum

# Constants
DEFAULT_MASK_CHAR = "*"
DEFAULT_SALT_LENGTH = 8
PATH_SEPARATOR = "."


class HashType(str, Enum):
    """Supported digest algorithms."""

    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"


# Length of the lower-case hex digest produced by each algorithm
HASH_HEX_LENGTH: dict[HashType, int] = {
    HashType.SHA256: 64,
    HashType.SHA384: 96,
    HashType.SHA512: 128,
}


# Type aliases
MaskedPaths = list[str]
Errors = list[str]

"""Exceptions raised by masked-json."""

from __future__ import annotations


class MaskingError(Exception):
    """Base class for all masking errors."""


class MaskConfigurationError(MaskingError, TypeError):
    """A mask directive was declared on a field it cannot handle."""

    def __init__(self, message: str, *, field_name: str | None = None, field_type: object = None):
        super().__init__(message)
        self.field_name = field_name
        self.field_type = field_type


class PathResolutionMiss(MaskingError, LookupError):
    """A dotted path does not resolve to a writable string leaf."""

    def __init__(self, path: str, segment: str | None = None, reason: str = "not found"):
        self.path = path
        self.segment = segment
        self.reason = reason
        where = f" at segment '{segment}'" if segment is not None else ""
        super().__init__(f"Cannot resolve path '{path}'{where}: {reason}")


class UnsupportedAlgorithmError(MaskingError, ValueError):
    """A digest algorithm outside the supported SHA-2 family was requested."""

    def __init__(self, algorithm: object):
        self.algorithm = algorithm
        super().__init__(
            f"Unsupported hash algorithm '{algorithm}'. Expected one of: SHA256, SHA384, SHA512"
        )

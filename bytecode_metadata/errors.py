"""
Error taxonomy for metadata extraction.

Every malformed-input path surfaces as one of these exceptions; nothing in the
decoder exits the process or prints. All of them derive from ``ValueError`` so
callers that only care about "bad input" can catch that.
"""

from typing import Optional


class MetadataError(ValueError):
    """Base class for all metadata extraction failures."""


class InsufficientData(MetadataError):
    """The buffer is too short to even hold the trailer length field."""

    def __init__(self, length: int, required: int = 2):
        self.length = length
        self.required = required
        super().__init__(
            f"Insufficient data: need at least {required} bytes, got {length}"
        )


class TrailerOverrun(MetadataError):
    """The declared trailer length does not fit in the buffer."""

    def __init__(self, declared_length: int, available: int):
        self.declared_length = declared_length
        self.available = available
        super().__init__(
            f"Declared metadata length {declared_length} exceeds the "
            f"{available} bytes available before the length field"
        )


class MalformedStructuredData(MetadataError):
    """The trailer is not a well-formed CBOR map of the expected shape."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class InvalidVersionLength(MetadataError):
    """The ``solc`` field is present but is not exactly three bytes."""

    def __init__(self, length: int, expected: int = 3):
        self.length = length
        self.expected = expected
        super().__init__(
            f"Incorrect number of bytes for Solidity version: "
            f"expected {expected}, got {length}"
        )


class BytecodeInputError(MetadataError):
    """Bytecode could not be acquired or decoded from its textual form."""

"""Solidity compiler version carried in the ``solc`` metadata field."""

from dataclasses import dataclass
from typing import Dict, Optional

from .errors import InvalidVersionLength

# Number of bytes that denote the version of the Solidity compiler
SOLIDITY_VERSION_LEN = 3


@dataclass(frozen=True)
class CompilerVersion:
    """A ``major.minor.patch`` compiler release, one byte per component."""
    major: int
    minor: int
    patch: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def to_dict(self) -> Dict[str, int]:
        return {"major": self.major, "minor": self.minor, "patch": self.patch}


def parse_compiler_version(raw: Optional[bytes]) -> Optional[CompilerVersion]:
    """
    Interpret the raw ``solc`` bytes as a compiler version.

    Returns None when the field is absent. Release builds of solc store the
    version as exactly three bytes; anything else raises InvalidVersionLength.
    """
    if raw is None:
        return None

    if len(raw) != SOLIDITY_VERSION_LEN:
        raise InvalidVersionLength(len(raw), SOLIDITY_VERSION_LEN)

    major, minor, patch = bytes(raw)
    return CompilerVersion(major=major, minor=minor, patch=patch)

"""
Contract Metadata Extraction

Top-level entry point: locates the CBOR trailer in contract bytecode, decodes
it, and assembles the normalized ``Metadata`` view. Extraction is a pure
function of the input bytes.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .decoder import decode_trailer
from .digest import Digest, normalize_digest
from .errors import MetadataError
from .trailer import BytesLike, locate_trailer
from .version import CompilerVersion, parse_compiler_version

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Metadata:
    """High-level view of the metadata Solidity embeds in contract bytecode."""
    digest: Optional[Digest] = None
    experimental: bool = False
    compiler_version: Optional[CompilerVersion] = None

    @classmethod
    def from_bytecode(cls, bytecode: BytesLike) -> "Metadata":
        return extract_metadata(bytecode)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "digest": self.digest.to_dict() if self.digest else None,
            "experimental": self.experimental,
            "compiler_version": (
                self.compiler_version.to_dict() if self.compiler_version else None
            ),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def extract_metadata(bytecode: BytesLike) -> Metadata:
    """
    Extract Solidity metadata from raw contract bytecode.

    Args:
        bytecode: Contract bytecode as bytes (decode hex text first)

    Returns:
        Metadata with the canonical digest, experimental flag and compiler version

    Raises:
        InsufficientData, TrailerOverrun: The trailer cannot be located
        MalformedStructuredData: The trailer is not a CBOR map of the expected shape
        InvalidVersionLength: The ``solc`` field is not three bytes
    """
    trailer = locate_trailer(bytecode)
    fields = decode_trailer(trailer)

    digest = normalize_digest(fields)
    compiler_version = parse_compiler_version(fields.compiler_version_bytes)

    metadata = Metadata(
        digest=digest,
        experimental=bool(fields.experimental_flag),
        compiler_version=compiler_version,
    )
    logger.debug("Extracted metadata: %s", metadata)
    return metadata


def try_extract_metadata(bytecode: BytesLike) -> Optional[Metadata]:
    """Like ``extract_metadata`` but returns None when no valid trailer is found."""
    try:
        return extract_metadata(bytecode)
    except MetadataError as e:
        logger.info("No usable metadata trailer: %s", e)
        return None

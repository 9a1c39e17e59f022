"""
Solidity Bytecode Metadata Extraction

Locates and decodes the CBOR metadata trailer that the Solidity compiler
appends to contract bytecode, yielding the metadata digest (IPFS or Swarm),
the compiler version and the experimental-features flag.
"""

from .errors import (
    BytecodeInputError,
    InsufficientData,
    InvalidVersionLength,
    MalformedStructuredData,
    MetadataError,
    TrailerOverrun,
)
from .digest import Digest, DigestKind, gateway_url, normalize_digest
from .metadata import Metadata, extract_metadata, try_extract_metadata
from .trailer import RawTrailerView, locate_trailer
from .decoder import DecodedFields, decode_trailer
from .version import CompilerVersion, parse_compiler_version

__version__ = "1.0.0"
__author__ = "Smart Contract Metadata Team"

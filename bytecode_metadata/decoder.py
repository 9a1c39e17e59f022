"""
CBOR Trailer Decoder

Decodes the metadata trailer as a CBOR map and pulls out the keys the Solidity
compiler is known to emit. The metadata format is ad hoc and newer compilers
may add keys, so anything unrecognized is skipped rather than rejected.
"""

import io
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import cbor2

from .errors import MalformedStructuredData
from .trailer import RawTrailerView

logger = logging.getLogger(__name__)

# CBOR map keys written by solc
IPFS_KEY = "ipfs"
SWARM_V0_KEY = "bzzr0"
SWARM_V1_KEY = "bzzr1"
EXPERIMENTAL_KEY = "experimental"
SOLC_KEY = "solc"

# Expected Python type of each recognized value after CBOR decoding
_FIELD_TYPES: Dict[str, type] = {
    IPFS_KEY: bytes,
    SWARM_V0_KEY: bytes,
    SWARM_V1_KEY: bytes,
    EXPERIMENTAL_KEY: bool,
    SOLC_KEY: bytes,
}


@dataclass(frozen=True)
class DecodedFields:
    """Recognized trailer fields, each independently optional."""
    ipfs_digest_bytes: Optional[bytes] = None
    swarm_v0_digest_bytes: Optional[bytes] = None
    swarm_v1_digest_bytes: Optional[bytes] = None
    experimental_flag: Optional[bool] = None
    compiler_version_bytes: Optional[bytes] = None


def _checked_value(key: str, value: Any) -> Any:
    """Return ``value`` if it has the type expected for ``key``."""
    if value is None:
        # CBOR null reads as "not present"
        return None

    expected = _FIELD_TYPES[key]
    if not isinstance(value, expected):
        raise MalformedStructuredData(
            f"Metadata field '{key}' has type {type(value).__name__}, "
            f"expected {expected.__name__}"
        )
    return value


def decode_cbor_map(data: bytes) -> Dict[Any, Any]:
    """
    Decode ``data`` as exactly one CBOR map.

    Raises:
        MalformedStructuredData: Not valid CBOR, a map key repeats, bytes are
            left over after the item, or the top-level item is not a map
    """
    fp = io.BytesIO(data)
    # read_size=1 keeps fp.tell() at the end of the decoded item
    decoder = cbor2.CBORDecoder(fp, read_size=1, allow_duplicate_keys=False)
    try:
        decoded = decoder.decode()
    except cbor2.CBORDecodeError as e:
        raise MalformedStructuredData("Failed to decode CBOR metadata", cause=e) from e

    consumed = fp.tell()
    if consumed != len(data):
        raise MalformedStructuredData(
            f"{len(data) - consumed} trailing bytes after CBOR metadata"
        )
    if not isinstance(decoded, dict):
        raise MalformedStructuredData(
            f"CBOR metadata is a {type(decoded).__name__}, expected a map"
        )
    return decoded


def decode_trailer(trailer: Union[RawTrailerView, bytes]) -> DecodedFields:
    """
    Decode a located trailer into its recognized fields.

    Args:
        trailer: The trailer view from ``locate_trailer`` or the raw CBOR bytes

    Returns:
        DecodedFields with every recognized key that was present

    Raises:
        MalformedStructuredData: The bytes are not a CBOR map, or a recognized
            key holds a value of the wrong type
    """
    data = trailer.data if isinstance(trailer, RawTrailerView) else bytes(trailer)
    cbor_map = decode_cbor_map(data)

    values: Dict[str, Any] = {}
    for key, value in cbor_map.items():
        if key in _FIELD_TYPES:
            values[key] = _checked_value(key, value)
        else:
            logger.debug("Ignoring unrecognized metadata key %r", key)

    fields = DecodedFields(
        ipfs_digest_bytes=values.get(IPFS_KEY),
        swarm_v0_digest_bytes=values.get(SWARM_V0_KEY),
        swarm_v1_digest_bytes=values.get(SWARM_V1_KEY),
        experimental_flag=values.get(EXPERIMENTAL_KEY),
        compiler_version_bytes=values.get(SOLC_KEY),
    )
    logger.debug(
        "Decoded metadata fields: %s",
        sorted(k for k, v in values.items() if v is not None),
    )
    return fields

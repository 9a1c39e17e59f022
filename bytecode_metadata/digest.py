"""
Metadata Digest Normalization

A trailer may in principle carry several digest fields even though real
compiler output has at most one. This module picks the single canonical
digest, preferring IPFS over Swarm and the newer Swarm revision over the
older one, and renders it for display.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

import base58

from .decoder import DecodedFields

logger = logging.getLogger(__name__)

# URL prefix used to build IPFS gateway URLs
DEFAULT_IPFS_GATEWAY_URL_PREFIX = "https://ipfs.io/ipfs"


class DigestKind(Enum):
    """Content-addressed stores a metadata digest can point into."""
    IPFS = "ipfs"
    SWARM = "bzz"


@dataclass(frozen=True)
class Digest:
    """
    The canonical digest of the contract's metadata document.

    ``value`` is the base58 CID for IPFS digests and the lowercase hex
    hash for Swarm digests.
    """
    kind: DigestKind
    value: str

    @classmethod
    def ipfs(cls, digest_bytes: bytes) -> "Digest":
        # The human-readable CID is the base58 form of the multihash bytes
        return cls(DigestKind.IPFS, base58.b58encode(bytes(digest_bytes)).decode("ascii"))

    @classmethod
    def swarm(cls, digest_bytes: bytes) -> "Digest":
        return cls(DigestKind.SWARM, bytes(digest_bytes).hex())

    @property
    def is_ipfs(self) -> bool:
        return self.kind is DigestKind.IPFS

    @property
    def is_swarm(self) -> bool:
        return self.kind is DigestKind.SWARM

    def __str__(self) -> str:
        return f"{self.kind.value}://{self.value}"

    def to_dict(self) -> Dict[str, str]:
        return {"kind": self.kind.name.lower(), "value": self.value, "uri": str(self)}


def normalize_digest(fields: DecodedFields) -> Optional[Digest]:
    """
    Choose one canonical digest from the decoded trailer fields.

    Precedence: ``ipfs``, then ``bzzr1``, then ``bzzr0``. Never raises;
    returns None when no digest field is present.
    """
    candidates = [
        name for name, value in (
            ("ipfs", fields.ipfs_digest_bytes),
            ("bzzr1", fields.swarm_v1_digest_bytes),
            ("bzzr0", fields.swarm_v0_digest_bytes),
        )
        if value is not None
    ]
    if len(candidates) > 1:
        logger.warning(
            "Metadata carries %d digests (%s); using %s",
            len(candidates), ", ".join(candidates), candidates[0],
        )

    if fields.ipfs_digest_bytes is not None:
        return Digest.ipfs(fields.ipfs_digest_bytes)
    if fields.swarm_v1_digest_bytes is not None:
        return Digest.swarm(fields.swarm_v1_digest_bytes)
    if fields.swarm_v0_digest_bytes is not None:
        return Digest.swarm(fields.swarm_v0_digest_bytes)
    return None


def gateway_url(digest: Digest, prefix: str = DEFAULT_IPFS_GATEWAY_URL_PREFIX) -> Optional[str]:
    """Build an HTTP gateway URL for an IPFS digest; None for Swarm digests."""
    if not digest.is_ipfs:
        return None
    return f"{prefix.rstrip('/')}/{digest.value}"

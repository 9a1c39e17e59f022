"""
Metadata Trailer Locator

Solidity appends its metadata to the bytecode as

    <code> <CBOR-encoded map> <2-byte big-endian length of the CBOR map>

This module finds the byte range of the CBOR map using that trailing length
field. It never reads outside the buffer: the declared length is checked
against the buffer size before any slicing happens.
"""

import logging
from dataclasses import dataclass, field
from typing import Union

from .errors import InsufficientData, TrailerOverrun

logger = logging.getLogger(__name__)

# Number of bytes that hold the length of the CBOR data
CBOR_LENGTH_FIELD_SIZE = 2

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True)
class RawTrailerView:
    """A ``[start, end)`` window onto the CBOR trailer of a bytecode buffer."""
    start: int
    end: int
    declared_length: int
    data: bytes = field(repr=False)

    def __len__(self) -> int:
        return self.end - self.start


def locate_trailer(bytecode: BytesLike) -> RawTrailerView:
    """
    Find the CBOR metadata trailer at the end of a bytecode buffer.

    Args:
        bytecode: Raw contract bytecode (not hex text)

    Returns:
        RawTrailerView covering the CBOR bytes, excluding the length field

    Raises:
        InsufficientData: The buffer is shorter than the length field itself
        TrailerOverrun: The declared length does not fit in the buffer
    """
    buffer = bytes(bytecode)
    total = len(buffer)

    if total < CBOR_LENGTH_FIELD_SIZE:
        raise InsufficientData(total, CBOR_LENGTH_FIELD_SIZE)

    declared_length = int.from_bytes(buffer[-CBOR_LENGTH_FIELD_SIZE:], byteorder="big")
    available = total - CBOR_LENGTH_FIELD_SIZE

    if declared_length > available:
        raise TrailerOverrun(declared_length, available)

    end = available
    start = end - declared_length
    logger.debug(
        "Located %d-byte metadata trailer at [%d, %d) of %d-byte bytecode",
        declared_length, start, end, total,
    )
    return RawTrailerView(
        start=start,
        end=end,
        declared_length=declared_length,
        data=buffer[start:end],
    )

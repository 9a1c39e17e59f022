"""
Bytecode Acquisition

Helpers that turn the various places bytecode comes from (files, standard
input, a JSON-RPC node) into the raw bytes that ``extract_metadata`` expects.
Textual input is hex, with or without a ``0x`` prefix.
"""

import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional, Union

from eth_utils import decode_hex, to_checksum_address
from web3 import Web3

from .errors import BytecodeInputError

logger = logging.getLogger(__name__)


def decode_hex_bytecode(text: Union[str, bytes]) -> bytes:
    """
    Decode hex-encoded bytecode, tolerating a ``0x`` prefix and surrounding whitespace.

    Raises:
        BytecodeInputError: The text is not valid hex
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("ascii")
        except UnicodeDecodeError as e:
            raise BytecodeInputError("Bytecode text is not ASCII hex") from e

    clean = text.strip()
    if clean[:2] in ("0x", "0X"):
        clean = clean[2:]

    try:
        return decode_hex(clean)
    except ValueError as e:
        raise BytecodeInputError(f"Invalid hex bytecode: {e}") from e


def read_bytecode(
    path: Optional[Union[str, Path]] = None,
    raw: bool = False,
    stdin: Optional[BinaryIO] = None,
) -> bytes:
    """
    Read bytecode from a file, or from standard input when no path is given.

    Args:
        path: File holding the bytecode
        raw: Treat the input as literal bytes instead of hex text
        stdin: Binary stream to read from instead of ``sys.stdin``

    Returns:
        Raw bytecode bytes
    """
    if path is not None:
        path = Path(path)
        logger.debug("Reading bytecode from %s (raw=%s)", path, raw)
        if raw:
            return path.read_bytes()
        return decode_hex_bytecode(path.read_text(encoding="utf-8"))

    stream = stdin if stdin is not None else sys.stdin.buffer
    logger.debug("Reading bytecode from standard input (raw=%s)", raw)
    if raw:
        return stream.read()
    # Hex on standard input is a single line
    return decode_hex_bytecode(stream.readline())


def fetch_bytecode(rpc_url: str, address: str, timeout: float = 30.0) -> bytes:
    """
    Fetch deployed runtime bytecode with ``eth_getCode``.

    Raises:
        BytecodeInputError: Invalid address, RPC failure, or no code at the address
    """
    try:
        checksum_address = to_checksum_address(address)
    except ValueError as e:
        raise BytecodeInputError(f"Invalid contract address: {address}") from e

    web3 = Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))
    try:
        code = bytes(web3.eth.get_code(checksum_address))
    except Exception as e:
        raise BytecodeInputError(f"Failed to fetch bytecode from {rpc_url}: {e}") from e

    if not code:
        raise BytecodeInputError(f"No bytecode found at address: {checksum_address}")

    logger.info("Fetched %d bytes of bytecode for %s", len(code), checksum_address)
    return code

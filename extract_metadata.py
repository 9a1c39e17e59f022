#!/usr/bin/env python3
"""
Extract Solidity metadata from contract bytecode.

Reads bytecode (hex text by default, literal bytes with --raw) from a file,
standard input, or a JSON-RPC node, decodes the CBOR metadata trailer and
prints the metadata digest.

Usage:
    # Hex bytecode on standard input
    echo 0x6080...0033 | python extract_metadata.py

    # Raw bytecode file, full metadata dump
    python extract_metadata.py --raw --metadata --bytecode Contract.bin

    # IPFS digest as a gateway URL
    python extract_metadata.py --gateway --bytecode Contract.hex

    # Deployed contract
    python extract_metadata.py --rpc https://eth.llamarpc.com --address 0x1234...
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from bytecode_metadata import MetadataError, extract_metadata, gateway_url
from bytecode_metadata.bytecode_input import fetch_bytecode, read_bytecode
from bytecode_metadata.digest import DEFAULT_IPFS_GATEWAY_URL_PREFIX

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path("settings.yaml")

# Environment variables that override settings file values
_ENV_OVERRIDES = {
    "IPFS_GATEWAY_URL_PREFIX": "IPFS_GATEWAY_URL_PREFIX",
    "ETH_RPC_URL": "ETH_RPC_URL",
    "METADATA_LOG_FILE": "LOG_FILE",
}


def setup_logging(verbose: bool = False, log_file: Optional[str] = None):
    """Configure logging to stderr and, optionally, a file."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


class SettingsError(ValueError):
    """Raised when the settings file cannot be used."""


def load_settings(settings_path: Optional[Path] = None) -> dict:
    """
    Load settings from settings.yaml and environment variables.

    The default settings.yaml is optional. A path passed explicitly must exist.

    Raises:
        SettingsError: Missing explicit file, invalid YAML, a document that is
            not a mapping, or an RPC_TIMEOUT that is not a number
    """
    settings = {
        "IPFS_GATEWAY_URL_PREFIX": DEFAULT_IPFS_GATEWAY_URL_PREFIX,
        "ETH_RPC_URL": None,
        "LOG_FILE": None,
        "RPC_TIMEOUT": 30.0,
    }
    if settings_path:
        settings_path = Path(settings_path)
        if not settings_path.exists():
            raise SettingsError(f"Settings file not found: {settings_path}")
    else:
        settings_path = DEFAULT_SETTINGS_PATH

    if settings_path.exists():
        try:
            with open(settings_path, "r") as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise SettingsError(f"Invalid settings file {settings_path}: {e}") from e
        if loaded is not None and not isinstance(loaded, dict):
            raise SettingsError(
                f"Settings file {settings_path} must contain a mapping, "
                f"got {type(loaded).__name__}"
            )
        settings.update(loaded or {})

    # Environment variables override file settings
    for env_name, key in _ENV_OVERRIDES.items():
        if os.getenv(env_name):
            settings[key] = os.getenv(env_name)

    try:
        settings["RPC_TIMEOUT"] = float(settings["RPC_TIMEOUT"])
    except (TypeError, ValueError) as e:
        raise SettingsError(
            f"RPC_TIMEOUT must be a number, got {settings['RPC_TIMEOUT']!r}"
        ) from e

    return settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract Solidity metadata from contract bytecode"
    )
    parser.add_argument(
        "-r", "--raw",
        action="store_true",
        help="Interpret input (standard input or --bytecode) as literal bytes",
    )
    parser.add_argument(
        "-m", "--metadata",
        action="store_true",
        help="Print the decoded metadata as JSON",
    )
    parser.add_argument(
        "-g", "--gateway",
        action="store_true",
        help="Display IPFS digests as URLs to the configured IPFS web gateway",
    )
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "-b", "--bytecode",
        type=str,
        default=None,
        help="File containing bytecode (interpretation depends on --raw)",
    )
    source.add_argument(
        "--rpc",
        type=str,
        default=None,
        help="JSON-RPC endpoint to fetch deployed bytecode from (needs --address)",
    )
    parser.add_argument(
        "--address", type=str, default=None, help="Contract address for --rpc"
    )
    parser.add_argument(
        "--settings", type=str, default=None, help="Path to settings YAML file"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def render_digest(metadata, use_gateway: bool, gateway_prefix: str) -> Optional[str]:
    """Textual form of the metadata digest, or None when there is none."""
    if metadata.digest is None:
        return None
    if use_gateway and metadata.digest.is_ipfs:
        return gateway_url(metadata.digest, gateway_prefix)
    return str(metadata.digest)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args.settings)
    except (SettingsError, OSError) as e:
        setup_logging(args.verbose)
        logger.error("%s", e)
        return 1
    setup_logging(args.verbose, settings.get("LOG_FILE"))

    rpc_url = args.rpc
    if args.address and not rpc_url and not args.bytecode:
        rpc_url = settings.get("ETH_RPC_URL")
    if args.address and not rpc_url:
        parser.error("--address requires --rpc (or ETH_RPC_URL)")
    if rpc_url and not args.address:
        parser.error("--rpc requires --address")

    try:
        if rpc_url:
            bytecode = fetch_bytecode(
                rpc_url, args.address, timeout=settings["RPC_TIMEOUT"]
            )
        else:
            bytecode = read_bytecode(args.bytecode, raw=args.raw)

        metadata = extract_metadata(bytecode)
    except (MetadataError, OSError) as e:
        logger.error("%s", e)
        return 1

    if args.metadata:
        print(metadata.to_json())

    rendered = render_digest(
        metadata, args.gateway, settings["IPFS_GATEWAY_URL_PREFIX"]
    )
    if rendered:
        print(rendered)

    return 0


if __name__ == "__main__":
    sys.exit(main())

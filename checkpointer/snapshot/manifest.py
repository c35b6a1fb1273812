# MIT License
# Copyright (c) 2025 Hashborn

"""
Snapshot Manifest Reader

Recovers the state root and block number from the MANIFEST a Parity/OpenEthereum
node writes for its periodic warp-sync snapshot. The node owns and rotates the
file; it is only ever read here.

Version 2 manifest (RLP list):
    [version, state_hashes, block_hashes, state_root, block_number, block_hash]

See: https://openethereum.github.io/Warp-Sync-Snapshot-Format
"""

import os
import logging
from pathlib import Path
from typing import Union

import rlp
from rlp.exceptions import RLPException

from .types import ManifestInfo
from ..protocol.types.common import ManifestReadError, DecodeError, FormatError
from ..protocol.config.params import (
    MANIFEST_VERSION, MANIFEST_DB_DIR, MANIFEST_RELATIVE_PATH, MANIFEST_MIN_ITEMS,
    MANIFEST_IDX_VERSION, MANIFEST_IDX_STATE_HASHES, MANIFEST_IDX_BLOCK_HASHES,
    MANIFEST_IDX_STATE_ROOT, MANIFEST_IDX_BLOCK_NUMBER, MANIFEST_IDX_BLOCK_HASH,
    WORD_SIZE,
)

logger = logging.getLogger(__name__)


def manifest_path(parity_dir: Union[str, Path], chain_name: str) -> Path:
    """<parity_dir>/chains/<chain_name>/db/906a34e69aec8c0d/snapshot/current/MANIFEST"""
    return Path(parity_dir) / "chains" / chain_name / "db" / MANIFEST_DB_DIR / MANIFEST_RELATIVE_PATH


class ManifestReader:
    """
    Reads the current snapshot MANIFEST of one chain.
    """

    def __init__(self, parity_dir: Union[str, Path], chain_name: str):
        """
        Args:
            parity_dir: Node data directory (PARITY_DIR)
            chain_name: Chain spec name inside the data directory (CHAIN_NAME)
        """
        self.path = manifest_path(parity_dir, chain_name)

    def read(self) -> ManifestInfo:
        """
        Read and decode the manifest.

        Raises:
            ManifestReadError: file missing or unreadable
            DecodeError: bytes are not a valid RLP list
            FormatError: unknown version or malformed state root
        """
        try:
            with open(self.path, "rb") as f:
                encoded = f.read()
        except OSError as e:
            raise ManifestReadError(f"Unable to read MANIFEST at {self.path}: {e}") from e

        logger.debug(f"Read {len(encoded)} bytes from {self.path}")
        return parse_manifest(encoded)

    def exists(self) -> bool:
        return os.path.isfile(self.path)


def parse_manifest(encoded: bytes) -> ManifestInfo:
    """Decode raw MANIFEST bytes. See ManifestReader.read for the failure modes."""
    try:
        decoded = rlp.decode(encoded)
    except RLPException as e:
        raise DecodeError(f"MANIFEST is not valid RLP: {e}") from e

    if not isinstance(decoded, list) or not decoded:
        raise DecodeError("MANIFEST must decode to a non-empty RLP list")

    version = decoded[MANIFEST_IDX_VERSION]
    # The version tag is checked before anything else is interpreted
    if not isinstance(version, bytes) or version.hex() != f"{MANIFEST_VERSION:02x}":
        shown = version.hex() if isinstance(version, bytes) else "<list>"
        raise FormatError(f"Unable to process MANIFEST: unsupported version {shown!r}")

    if len(decoded) < MANIFEST_MIN_ITEMS:
        raise DecodeError(
            f"MANIFEST has {len(decoded)} items, expected at least {MANIFEST_MIN_ITEMS}"
        )

    state_root = decoded[MANIFEST_IDX_STATE_ROOT]
    block_number = decoded[MANIFEST_IDX_BLOCK_NUMBER]
    if not isinstance(state_root, bytes) or not isinstance(block_number, bytes):
        raise DecodeError("MANIFEST state root and block number must be byte strings")

    if len(state_root) != WORD_SIZE:
        raise FormatError(f"MANIFEST state root is {len(state_root)} bytes, expected {WORD_SIZE}")

    block_hash = None
    if len(decoded) > MANIFEST_IDX_BLOCK_HASH and isinstance(decoded[MANIFEST_IDX_BLOCK_HASH], bytes):
        block_hash = decoded[MANIFEST_IDX_BLOCK_HASH].hex()

    return ManifestInfo(
        version=MANIFEST_VERSION,
        block_number=int.from_bytes(block_number, "big"),
        state_hash=state_root.hex(),
        block_hash=block_hash,
        state_chunks=_count(decoded[MANIFEST_IDX_STATE_HASHES]),
        block_chunks=_count(decoded[MANIFEST_IDX_BLOCK_HASHES]),
    )


def _count(item) -> int:
    return len(item) if isinstance(item, list) else 0

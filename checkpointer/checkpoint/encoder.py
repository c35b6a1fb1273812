"""
saveCheckpoint call encoding.

The anchor contract exposes

    function saveCheckpoint(uint256 blockNumber, bytes32 stateHash, uint256 chainId)

and the call data is the 4-byte selector followed by the three arguments, each
in its own 32-byte word:

    73bf9915 | blockNumber (uint256, BE) | stateHash (bytes32) | chainId (uint256, BE)
"""

import math
from typing import Optional

from ..protocol.types.common import EncodingError
from ..protocol.config.params import SAVE_CHECKPOINT_SELECTOR, WORD_SIZE, MAX_UINT256


def encode_uint256(value, field: str) -> str:
    """Returns value as 64 lowercase hex chars, zero-padded on the left."""
    if isinstance(value, bool) or not isinstance(value, int):
        if isinstance(value, float) and math.isnan(value):
            raise EncodingError(f"{field} is NaN")
        raise EncodingError(f"{field} must be an integer, got {type(value).__name__}")
    if value < 0:
        raise EncodingError(f"{field} must be non-negative, got {value}")
    if value > MAX_UINT256:
        raise EncodingError(f"{field} does not fit in uint256")
    return format(value, "x").rjust(WORD_SIZE * 2, "0")


def encode_checkpoint_call(block_number: int, state_hash: str, chain_id: Optional[int] = None) -> bytes:
    """
    Build the saveCheckpoint call payload (always 100 bytes for a 32-byte state hash).

    Args:
        block_number: Snapshot block height
        state_hash: State root as hex; its length is checked by the manifest reader
        chain_id: Source chain id, 0 when not given

    Raises:
        EncodingError: negative, non-integer or oversized numbers, non-hex state hash
    """
    if chain_id is None:
        chain_id = 0

    block_word = encode_uint256(block_number, "block_number")
    chain_word = encode_uint256(chain_id, "chain_id")

    if not isinstance(state_hash, str):
        raise EncodingError(f"state_hash must be a hex string, got {type(state_hash).__name__}")
    if state_hash.startswith(("0x", "0X")):
        state_hash = state_hash[2:]

    try:
        return SAVE_CHECKPOINT_SELECTOR + bytes.fromhex(block_word + state_hash + chain_word)
    except ValueError as e:
        raise EncodingError(f"state_hash is not valid hex: {e}") from e


def payload_hex(payload: bytes) -> str:
    """0x-prefixed hex form, as submitted in the transaction data field."""
    return "0x" + payload.hex()

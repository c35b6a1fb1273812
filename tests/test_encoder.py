"""
Tests for saveCheckpoint call encoding.
"""
import pytest
from pydantic import ValidationError

from checkpointer.checkpoint.encoder import encode_checkpoint_call, encode_uint256, payload_hex
from checkpointer.protocol.config.params import SAVE_CHECKPOINT_SELECTOR, PAYLOAD_SIZE
from checkpointer.protocol.types.checkpoint import Checkpoint
from checkpointer.protocol.types.common import EncodingError

STATE_HASH = "ab" * 32


def test_selector_constant():
    assert SAVE_CHECKPOINT_SELECTOR.hex() == "73bf9915"
    assert PAYLOAD_SIZE == 100


def test_field_layout_with_chain_id_unset():
    payload = encode_checkpoint_call(0x1A2B, STATE_HASH)
    h = payload.hex()

    assert h[:8] == "73bf9915"
    assert h[8:72] == "0" * 60 + "1a2b"
    assert h[72:136] == STATE_HASH
    assert h[136:200] == "0" * 64


def test_explicit_zero_chain_id_matches_default():
    assert encode_checkpoint_call(5, STATE_HASH, 0) == encode_checkpoint_call(5, STATE_HASH, None)


def test_chain_id_is_encoded():
    payload = encode_checkpoint_call(5, STATE_HASH, 17)
    assert payload[-32:] == (17).to_bytes(32, "big")


def test_encoding_is_deterministic():
    a = encode_checkpoint_call(123456, STATE_HASH, 3)
    b = encode_checkpoint_call(123456, STATE_HASH, 3)
    assert a == b


@pytest.mark.parametrize("block_number,chain_id", [
    (0, None),
    (1, 1),
    (30000, 42),
    (2**64, 2**32),
    (2**256 - 1, 2**256 - 1),
])
def test_payload_is_always_100_bytes(block_number, chain_id):
    assert len(encode_checkpoint_call(block_number, STATE_HASH, chain_id)) == 100


def test_prefixed_state_hash_is_accepted():
    assert encode_checkpoint_call(1, "0x" + STATE_HASH) == encode_checkpoint_call(1, STATE_HASH)


@pytest.mark.parametrize("bad", [-1, float("nan"), 1.5, "100", None, True, 2**256])
def test_bad_block_number_fails_fast(bad):
    with pytest.raises(EncodingError):
        encode_checkpoint_call(bad, STATE_HASH)


@pytest.mark.parametrize("bad", [-1, float("nan"), "0", False])
def test_bad_chain_id_fails_fast(bad):
    with pytest.raises(EncodingError):
        encode_checkpoint_call(1, STATE_HASH, bad)


def test_non_hex_state_hash_fails():
    with pytest.raises(EncodingError):
        encode_checkpoint_call(1, "zz" * 32)


def test_encode_uint256_padding():
    assert encode_uint256(255, "x") == "0" * 62 + "ff"


def test_payload_hex_prefix():
    assert payload_hex(encode_checkpoint_call(100, STATE_HASH)).startswith("0x73bf9915")


def test_checkpoint_payload_and_immutability():
    cp = Checkpoint(block_number=100, state_hash=STATE_HASH)
    assert cp.chain_id == 0
    assert cp.payload() == encode_checkpoint_call(100, STATE_HASH, 0)

    with pytest.raises(ValidationError):
        cp.block_number = 101

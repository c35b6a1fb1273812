import pytest
import rlp
from unittest.mock import Mock
from eth_utils import to_checksum_address

from checkpointer.snapshot.manifest import manifest_path

STATE_HASH = "ab" * 32
BLOCK_HASH = "cd" * 32
CONTRACT = to_checksum_address("0x" + "12" * 20)
SIGNER_ADDRESS = to_checksum_address("0x" + "34" * 20)
CHAIN_NAME = "private"


def encode_manifest(version=b"\x02", state_root=bytes.fromhex(STATE_HASH),
                    block_number=b"\x64", block_hash=bytes.fromhex(BLOCK_HASH),
                    state_hashes=None, block_hashes=None) -> bytes:
    return rlp.encode([
        version,
        state_hashes if state_hashes is not None else [b"\x01" * 32, b"\x02" * 32],
        block_hashes if block_hashes is not None else [b"\x03" * 32],
        state_root,
        block_number,
        block_hash,
    ])


def write_manifest(parity_dir, data: bytes, chain_name: str = CHAIN_NAME):
    path = manifest_path(parity_dir, chain_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


@pytest.fixture
def parity_dir(tmp_path):
    """A node data dir holding a valid version 2 manifest (block 100)."""
    d = tmp_path / "parity"
    write_manifest(d, encode_manifest())
    return d


@pytest.fixture
def fake_signer():
    signer = Mock()
    signer.get_address.return_value = SIGNER_ADDRESS
    signer.sign_transaction.return_value = b"\xf8signed"
    return signer


@pytest.fixture
def fake_chain():
    chain = Mock()
    chain.get_nonce.return_value = 7
    chain.send_signed.return_value = "0x" + "ee" * 32
    return chain

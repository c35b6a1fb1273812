# MIT License
# Copyright (c) 2025 Hashborn

import os

# saveCheckpoint(uint256 blockNumber, bytes32 stateHash, uint256 chainId)
SAVE_CHECKPOINT_SELECTOR = bytes.fromhex("73bf9915")

WORD_SIZE = 32
PAYLOAD_SIZE = len(SAVE_CHECKPOINT_SELECTOR) + 3 * WORD_SIZE  # 100 bytes
MAX_UINT256 = 2**256 - 1

# Parity warp-sync snapshot layout
MANIFEST_VERSION = 0x02
MANIFEST_DB_DIR = "906a34e69aec8c0d"
MANIFEST_RELATIVE_PATH = os.path.join("snapshot", "current", "MANIFEST")

# RLP list positions inside a version 2 MANIFEST
MANIFEST_IDX_VERSION = 0
MANIFEST_IDX_STATE_HASHES = 1
MANIFEST_IDX_BLOCK_HASHES = 2
MANIFEST_IDX_STATE_ROOT = 3
MANIFEST_IDX_BLOCK_NUMBER = 4
MANIFEST_IDX_BLOCK_HASH = 5
MANIFEST_MIN_ITEMS = MANIFEST_IDX_BLOCK_NUMBER + 1

# Anchor transaction defaults
DEFAULT_GAS_PRICE = 20_000_000_000  # 20 gwei
DEFAULT_GAS_LIMIT = 100_000
DEFAULT_PRIVATE_HOST = "http://localhost:8545"
DEFAULT_PUBLIC_HOST = "http://localhost:8546"
DEFAULT_RPC_TIMEOUT = 10.0
DEFAULT_KEY_NAME = "checkpoint"
DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_INTERVAL_SEC = 60

KEYSTORE_DIR = os.path.expanduser("~/.checkpointer/keys")

# MIT License
# Copyright (c) 2025 Hashborn

"""
Minimal Ethereum JSON-RPC client.

Used both for the anchor chain (nonce lookup, raw transaction broadcast) and
for the source chain (current head, for status reporting).
"""

import itertools
import logging
import requests
from typing import Any, List, Optional

from ..protocol.types.common import RpcError
from ..protocol.config.params import DEFAULT_RPC_TIMEOUT

logger = logging.getLogger(__name__)


class ChainClient:
    def __init__(self, url: str, timeout: float = DEFAULT_RPC_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._ids = itertools.count(1)

    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """Performs a JSON-RPC call and returns its `result`."""
        body = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        try:
            resp = self.session.post(self.url, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            raise RpcError(f"{method}: connection error to {self.url}: {e}") from e

        if resp.status_code != 200:
            raise RpcError(f"{method}: node error {resp.status_code}: {resp.text}")

        try:
            data = resp.json()
        except ValueError as e:
            raise RpcError(f"{method}: invalid JSON response: {e}") from e

        if data.get("error"):
            err = data["error"]
            raise RpcError(f"{method}: {err.get('message', err)}", code=err.get("code"))
        if "result" not in data:
            raise RpcError(f"{method}: response has no result")

        logger.debug(f"{method} -> {data['result']}")
        return data["result"]

    # --- Account state ---
    def get_nonce(self, address: str) -> int:
        # "pending" counts transactions still in the node's pool
        result = self.call("eth_getTransactionCount", [address, "pending"])
        return _hex_to_int(result, "eth_getTransactionCount")

    # --- Submission ---
    def send_signed(self, raw_tx: bytes) -> str:
        """Broadcasts a signed transaction, returns its hash."""
        return self.call("eth_sendRawTransaction", ["0x" + raw_tx.hex()])

    # --- Chain head ---
    def block_number(self) -> int:
        return _hex_to_int(self.call("eth_blockNumber"), "eth_blockNumber")


def _hex_to_int(value: Any, method: str) -> int:
    try:
        return int(value, 16)
    except (TypeError, ValueError) as e:
        raise RpcError(f"{method}: unexpected result {value!r}") from e

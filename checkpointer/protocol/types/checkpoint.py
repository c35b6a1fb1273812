from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Any


class Checkpoint(BaseModel):
    """A (block height, state root) commitment destined for the anchor chain."""
    model_config = ConfigDict(frozen=True)

    block_number: int
    state_hash: str      # 64 hex chars, no 0x prefix
    chain_id: int = 0    # identifies the source chain inside the contract

    def payload(self) -> bytes:
        from ...checkpoint.encoder import encode_checkpoint_call
        return encode_checkpoint_call(self.block_number, self.state_hash, self.chain_id)


class TransactionEnvelope(BaseModel):
    model_config = ConfigDict(frozen=True)

    nonce: int
    gas_price: int
    gas_limit: int
    to: str              # checkpoint contract address
    value: int = 0
    data: bytes
    chain_id: Optional[int] = None  # anchor chain id for EIP-155, unprotected if None

    def to_tx_dict(self) -> Dict[str, Any]:
        """Returns the field names expected by Ethereum signing libraries."""
        tx = {
            "nonce": self.nonce,
            "gasPrice": self.gas_price,
            "gas": self.gas_limit,
            "to": self.to,
            "value": self.value,
            "data": self.data,
        }
        if self.chain_id is not None:
            tx["chainId"] = self.chain_id
        return tx


class CheckpointReceipt(BaseModel):
    """Report of one successful checkpoint cycle."""
    block_number: int
    state_hash: str
    chain_id: int
    tx_hash: str
    timestamp: datetime = Field(default_factory=datetime.now)

    def summary(self) -> str:
        return (
            f"Checkpointed block {self.block_number} with state hash {self.state_hash} "
            f"(tx {self.tx_hash}, at {self.timestamp.isoformat(timespec='seconds')})"
        )

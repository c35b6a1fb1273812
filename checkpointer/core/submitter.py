import logging
from typing import Optional, Protocol

from ..protocol.types.checkpoint import Checkpoint, TransactionEnvelope
from ..protocol.types.common import NonceFetchError, SigningError, BroadcastError

logger = logging.getLogger(__name__)


class Signer(Protocol):
    def get_address(self) -> str: ...
    def sign_transaction(self, envelope: TransactionEnvelope) -> bytes: ...


class AnchorChain(Protocol):
    def get_nonce(self, address: str) -> int: ...
    def send_signed(self, raw_tx: bytes) -> str: ...


class TransactionSubmitter:
    """
    Wraps a checkpoint into a saveCheckpoint transaction and broadcasts it.

    Every submission fetches a fresh nonce, signs once and broadcasts once.
    Nothing is kept between submissions, so a failed step is only retried by
    the next scheduled cycle.
    """

    def __init__(self,
                 signer: Signer,
                 chain: AnchorChain,
                 contract: str,
                 gas_price: int,
                 gas_limit: int,
                 anchor_chain_id: Optional[int] = None):
        self.signer = signer
        self.chain = chain
        self.contract = contract
        self.gas_price = gas_price
        self.gas_limit = gas_limit
        self.anchor_chain_id = anchor_chain_id

    def build_envelope(self, payload: bytes, nonce: int) -> TransactionEnvelope:
        return TransactionEnvelope(
            nonce=nonce,
            gas_price=self.gas_price,
            gas_limit=self.gas_limit,
            to=self.contract,
            value=0,
            data=payload,
            chain_id=self.anchor_chain_id,
        )

    def submit(self, checkpoint: Checkpoint) -> str:
        """
        Returns the broadcast transaction hash.

        Raises:
            EncodingError: checkpoint values cannot be encoded
            NonceFetchError: account nonce lookup failed (nothing signed)
            SigningError: signing failed (nothing broadcast)
            BroadcastError: the node rejected or never received the transaction
        """
        # Encode first: a bad checkpoint must not cost an RPC round trip
        payload = checkpoint.payload()

        # 1. Nonce
        try:
            address = self.signer.get_address()
            nonce = self.chain.get_nonce(address)
        except Exception as e:
            raise NonceFetchError(f"Failed to fetch nonce: {e}") from e

        # 2. Envelope
        envelope = self.build_envelope(payload, nonce)

        # 3. Sign
        try:
            raw_tx = self.signer.sign_transaction(envelope)
        except Exception as e:
            raise SigningError(f"Failed to sign checkpoint transaction (nonce {nonce}): {e}") from e

        # 4. Broadcast
        try:
            tx_hash = self.chain.send_signed(raw_tx)
        except Exception as e:
            raise BroadcastError(f"Failed to broadcast checkpoint transaction (nonce {nonce}): {e}") from e

        logger.info(f"Broadcast checkpoint tx {tx_hash} from {address} (nonce {nonce})")
        return tx_hash


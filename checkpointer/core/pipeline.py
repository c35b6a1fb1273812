import logging
from typing import Optional

from pydantic import ValidationError

from ..snapshot.manifest import ManifestReader
from ..snapshot.types import ManifestInfo
from ..protocol.types.checkpoint import Checkpoint, CheckpointReceipt
from ..protocol.types.common import EncodingError
from .submitter import TransactionSubmitter

logger = logging.getLogger(__name__)


class CheckpointPipeline:
    """
    One checkpoint cycle: MANIFEST -> Checkpoint -> signed transaction.

    Holds no state between cycles; the reader and submitter are read-only
    after construction.
    """

    def __init__(self,
                 reader: ManifestReader,
                 submitter: TransactionSubmitter,
                 chain_id: Optional[int] = None):
        self.reader = reader
        self.submitter = submitter
        self.chain_id = chain_id

    def build_checkpoint(self, info: ManifestInfo) -> Checkpoint:
        chain_id = 0 if self.chain_id is None else self.chain_id
        try:
            return Checkpoint(
                block_number=info.block_number,
                state_hash=info.state_hash,
                chain_id=chain_id,
            )
        except ValidationError as e:
            raise EncodingError(f"Invalid checkpoint values: {e}") from e

    def run_cycle(self) -> CheckpointReceipt:
        """Blocking. Raises a CycleError subclass on any failure."""
        info = self.reader.read()
        logger.debug(f"Snapshot manifest: block {info.block_number}, state root {info.state_hash}")

        checkpoint = self.build_checkpoint(info)
        tx_hash = self.submitter.submit(checkpoint)

        return CheckpointReceipt(
            block_number=checkpoint.block_number,
            state_hash=checkpoint.state_hash,
            chain_id=checkpoint.chain_id,
            tx_hash=tx_hash,
        )

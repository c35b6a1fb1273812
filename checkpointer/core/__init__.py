from .pipeline import CheckpointPipeline
from .scheduler import CheckpointScheduler
from .submitter import TransactionSubmitter

__all__ = ["CheckpointPipeline", "CheckpointScheduler", "TransactionSubmitter"]

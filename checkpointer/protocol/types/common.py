from enum import Enum


class SchedulerState(str, Enum):
    IDLE = "IDLE"
    RUNNING = "RUNNING"


class CycleOutcome(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    SKIPPED = "skipped"


class CheckpointError(Exception):
    pass

class ConfigurationError(CheckpointError):
    """Required settings are missing or invalid. Fatal at startup."""
    pass

class CycleError(CheckpointError):
    """Base for everything that may fail inside a single checkpoint cycle."""
    pass

# Manifest Reader
class ManifestError(CycleError):
    pass

class ManifestReadError(ManifestError):
    pass

class DecodeError(ManifestError):
    pass

class FormatError(ManifestError):
    pass

# Checkpoint Encoder
class EncodingError(CycleError):
    pass

# Transaction Submitter
class SubmissionError(CycleError):
    pass

class NonceFetchError(SubmissionError):
    pass

class SigningError(SubmissionError):
    pass

class BroadcastError(SubmissionError):
    pass


class RpcError(Exception):
    """Transport or JSON-RPC level failure talking to a chain node."""

    def __init__(self, message: str, code: int = None):
        super().__init__(message)
        self.code = code

# MIT License
# Copyright (c) 2025 Hashborn

"""
Wiring of the checkpoint pipeline from Settings, and the process entry points.
"""

import signal
import asyncio
import logging
from typing import Optional

from ..config import Settings, load_settings
from ..cli.keystore import KeyStore
from ..protocol.crypto.keys import LocalSigner
from ..protocol.types.checkpoint import CheckpointReceipt
from ..protocol.types.common import ConfigurationError
from ..rpc.client import ChainClient
from ..snapshot.manifest import ManifestReader
from .pipeline import CheckpointPipeline
from .scheduler import CheckpointScheduler
from .submitter import TransactionSubmitter

logger = logging.getLogger(__name__)


def load_signer(settings: Settings) -> LocalSigner:
    """PRIVATE_KEY wins over the keystore entry KEY_NAME."""
    try:
        if settings.private_key:
            return LocalSigner.from_hex(settings.private_key)

        key = KeyStore(settings.keystore_dir).get_key(settings.key_name)
        if not key:
            raise ConfigurationError(
                f"Signer key '{settings.key_name}' not found in {settings.keystore_dir} "
                f"(create one with 'checkpointer keys add {settings.key_name}' or set PRIVATE_KEY)"
            )
        return LocalSigner.from_hex(key["private_key"])
    except ValueError as e:
        raise ConfigurationError(f"Invalid signer key: {e}") from e


def build_pipeline(settings: Settings, chain_id: Optional[int] = None,
                   signer=None, anchor_client=None) -> CheckpointPipeline:
    """
    Validate settings and assemble reader, submitter and pipeline.

    Raises:
        ConfigurationError: before anything touches the network or the manifest
    """
    settings.require_snapshot_location()
    settings.require_submission()
    if chain_id is not None and (isinstance(chain_id, bool) or not isinstance(chain_id, int)):
        raise ConfigurationError(f"chain_id must be an integer, got {chain_id!r}")

    signer = signer or load_signer(settings)
    anchor_client = anchor_client or ChainClient(settings.public_host, timeout=settings.rpc_timeout)

    reader = ManifestReader(settings.parity_dir, settings.chain_name)
    submitter = TransactionSubmitter(
        signer=signer,
        chain=anchor_client,
        contract=settings.contract,
        gas_price=settings.gas_price,
        gas_limit=settings.gas_limit,
        anchor_chain_id=settings.anchor_chain_id,
    )
    logger.info(
        f"Checkpointing {reader.path} to {settings.contract} on {settings.public_host} "
        f"as {signer.get_address()}"
    )
    return CheckpointPipeline(reader, submitter, chain_id=chain_id)


async def serve(scheduler: CheckpointScheduler):
    """Run the scheduler until SIGINT/SIGTERM."""
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, scheduler.stop)
        except (NotImplementedError, RuntimeError):
            # No signal handlers on this platform/thread; KeyboardInterrupt still applies
            logger.debug(f"Signal handler for {sig!r} not installed")
    await scheduler.run()


def run(interval_seconds: float, chain_id: Optional[int] = None,
        settings: Optional[Settings] = None, run_immediately: bool = False):
    """
    Start checkpointing every `interval_seconds` until interrupted.

    Args:
        interval_seconds: Seconds between checkpoint cycles
        chain_id: Source chain id written into each checkpoint (0 if None)
        settings: Defaults to config.json in the working directory plus the environment

    Raises:
        ConfigurationError: missing settings; no cycle is run
    """
    settings = settings or load_settings()
    pipeline = build_pipeline(settings, chain_id=chain_id)
    scheduler = CheckpointScheduler(pipeline, interval_seconds, run_immediately=run_immediately)
    try:
        asyncio.run(serve(scheduler))
    except KeyboardInterrupt:
        logger.info("Interrupted")


def run_once(chain_id: Optional[int] = None, settings: Optional[Settings] = None) -> CheckpointReceipt:
    """Run a single checkpoint cycle. Errors propagate to the caller."""
    settings = settings or load_settings()
    pipeline = build_pipeline(settings, chain_id=chain_id)
    receipt = pipeline.run_cycle()
    logger.info(receipt.summary())
    return receipt

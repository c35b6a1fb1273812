import time
import asyncio
import logging
from typing import Callable, Optional, Set

from ..observability import metrics
from ..protocol.types.checkpoint import CheckpointReceipt
from ..protocol.types.common import SchedulerState, ConfigurationError, CycleError
from .pipeline import CheckpointPipeline

logger = logging.getLogger(__name__)


class CheckpointScheduler:
    """
    Runs a checkpoint cycle every `interval` seconds.

    Ticks follow a fixed cadence on the loop's monotonic clock and do not wait
    for the previous cycle. A tick that finds a cycle still RUNNING is skipped
    and logged, so at most one cycle is ever in flight. The blocking pipeline
    runs in a worker thread to keep the loop responsive.

    Cycle failures are logged and reported through on_failure; the scheduler
    goes back to IDLE and waits for the next tick. A ConfigurationError stops
    the scheduler and is re-raised from run().

    A stopped scheduler is not restarted; build a new one.
    """

    def __init__(self, pipeline: CheckpointPipeline, interval: float, run_immediately: bool = False):
        if interval <= 0:
            raise ConfigurationError(f"Checkpoint interval must be positive, got {interval}")
        self.pipeline = pipeline
        self.interval = interval
        self.run_immediately = run_immediately
        self.state = SchedulerState.IDLE
        self.ticks = 0
        self.fatal_error: Optional[ConfigurationError] = None

        self.on_success: Optional[Callable[[CheckpointReceipt], None]] = None
        self.on_failure: Optional[Callable[[BaseException], None]] = None
        self.on_skip: Optional[Callable[[int], None]] = None

        self._stop_event = asyncio.Event()
        self._current: Optional[asyncio.Task] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def stop(self):
        if not self._stop_event.is_set():
            logger.info("Stopping checkpoint scheduler")
        self._stop_event.set()

    async def run(self):
        """Tick until stop(). Returns once the in-flight cycle has settled."""
        loop = asyncio.get_running_loop()
        next_tick = loop.time() + (0 if self.run_immediately else self.interval)
        logger.info(f"Checkpoint scheduler started (interval {self.interval}s)")

        try:
            while not self._stop_event.is_set():
                delay = next_tick - loop.time()
                if delay > 0:
                    try:
                        await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
                        break
                    except asyncio.TimeoutError:
                        pass
                if self._stop_event.is_set():
                    break
                next_tick += self.interval
                self.tick()
        finally:
            if self.state == SchedulerState.RUNNING:
                logger.info("Waiting for in-flight checkpoint cycle to settle...")
            await self.wait_idle()

        logger.info(f"Checkpoint scheduler stopped after {self.ticks} ticks")
        if self.fatal_error is not None:
            raise self.fatal_error

    async def wait_idle(self):
        """Wait for the in-flight cycle, if any, to settle."""
        if self._current is not None:
            await asyncio.gather(self._current, return_exceptions=True)

    def tick(self) -> bool:
        """
        Start a cycle unless one is still running. Must be called on the loop.

        Returns:
            True if a cycle was started
        """
        self.ticks += 1
        if self.state == SchedulerState.RUNNING:
            logger.warning(f"Tick {self.ticks}: previous checkpoint cycle still running, skipping")
            metrics.record_skip()
            self._notify(self.on_skip, self.ticks)
            return False

        self.state = SchedulerState.RUNNING
        task = asyncio.create_task(self._run_cycle(self.ticks))
        self._current = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return True

    async def _run_cycle(self, tick: int):
        started = time.monotonic()
        try:
            receipt = await asyncio.to_thread(self.pipeline.run_cycle)
        except ConfigurationError as e:
            logger.error(f"Tick {tick}: configuration error, stopping scheduler: {e}")
            metrics.record_failure(e, time.monotonic() - started)
            self.fatal_error = e
            self._notify(self.on_failure, e)
            self.stop()
        except CycleError as e:
            logger.error(f"Tick {tick}: checkpoint cycle failed: {type(e).__name__}: {e}")
            metrics.record_failure(e, time.monotonic() - started)
            self._notify(self.on_failure, e)
        except Exception as e:
            logger.exception(f"Tick {tick}: unexpected error in checkpoint cycle: {e}")
            metrics.record_failure(e, time.monotonic() - started)
            self._notify(self.on_failure, e)
        else:
            logger.info(receipt.summary())
            metrics.record_success(receipt.block_number, time.monotonic() - started)
            self._notify(self.on_success, receipt)
        finally:
            self.state = SchedulerState.IDLE

    def _notify(self, callback: Optional[Callable], arg):
        if callback is None:
            return
        try:
            callback(arg)
        except Exception as e:
            logger.error(f"Error in scheduler callback {getattr(callback, '__name__', callback)}: {e}")

# MIT License
# Copyright (c) 2025 Hashborn

"""
Prometheus Metrics Exporter

Metrics:
- Checkpoint cycles by outcome (success / failure / skipped)
- Failures by error type
- Last checkpointed block number and time
- Cycle duration
"""

from prometheus_client import Counter, Gauge, Histogram, CollectorRegistry, start_http_server

from ..protocol.types.common import CycleOutcome

# Create registry for metrics
metrics_registry = CollectorRegistry()

# ═══════════════════════════════════════════════════════════════════
# CHECKPOINT METRICS
# ═══════════════════════════════════════════════════════════════════

cycles_total = Counter(
    'checkpointer_cycles_total',
    'Checkpoint cycles by outcome',
    ['outcome'],
    registry=metrics_registry
)

cycle_failures_total = Counter(
    'checkpointer_cycle_failures_total',
    'Failed checkpoint cycles by error type',
    ['error'],
    registry=metrics_registry
)

cycle_duration_seconds = Histogram(
    'checkpointer_cycle_duration_seconds',
    'Wall time of a checkpoint cycle (manifest read to broadcast)',
    buckets=[0.1, 0.5, 1, 2, 5, 10, 30, 60],
    registry=metrics_registry
)

last_checkpoint_block = Gauge(
    'checkpointer_last_checkpoint_block',
    'Block number of the last successfully broadcast checkpoint',
    registry=metrics_registry
)

last_checkpoint_timestamp = Gauge(
    'checkpointer_last_checkpoint_timestamp_seconds',
    'Unix time of the last successfully broadcast checkpoint',
    registry=metrics_registry
)


def record_success(block_number: int, duration: float):
    cycles_total.labels(outcome=CycleOutcome.SUCCESS.value).inc()
    cycle_duration_seconds.observe(duration)
    last_checkpoint_block.set(block_number)
    last_checkpoint_timestamp.set_to_current_time()


def record_failure(error: BaseException, duration: float):
    cycles_total.labels(outcome=CycleOutcome.FAILURE.value).inc()
    cycle_failures_total.labels(error=type(error).__name__).inc()
    cycle_duration_seconds.observe(duration)


def record_skip():
    cycles_total.labels(outcome=CycleOutcome.SKIPPED.value).inc()


def start_metrics_server(port: int, addr: str = "0.0.0.0"):
    """Expose metrics_registry on http://<addr>:<port>/metrics."""
    start_http_server(port, addr=addr, registry=metrics_registry)

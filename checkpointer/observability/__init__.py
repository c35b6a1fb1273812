# MIT License
# Copyright (c) 2025 Hashborn

"""
Observability Module

Prometheus metrics for the checkpoint scheduler.
"""

from .metrics import metrics_registry, record_success, record_failure, record_skip, start_metrics_server

__all__ = ['metrics_registry', 'record_success', 'record_failure', 'record_skip', 'start_metrics_server']

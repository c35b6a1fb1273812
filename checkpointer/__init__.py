# MIT License
# Copyright (c) 2025 Hashborn

"""
State checkpointer.

Commits the state root of a node's latest snapshot to a contract on a separate
anchor chain at a fixed interval.
"""

__version__ = "0.1.0"

from .core.service import run, run_once

__all__ = ["run", "run_once", "__version__"]

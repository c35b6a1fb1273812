# MIT License
# Copyright (c) 2025 Hashborn

"""
Snapshot MANIFEST access.

Reads the block number and state root of the node's latest warp-sync snapshot.
"""

from .manifest import ManifestReader, manifest_path, parse_manifest
from .types import ManifestInfo

__all__ = ["ManifestReader", "ManifestInfo", "manifest_path", "parse_manifest"]

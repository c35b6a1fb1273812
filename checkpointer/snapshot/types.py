# MIT License
# Copyright (c) 2025 Hashborn

"""
Snapshot Manifest Data Structures
"""

from pydantic import BaseModel, Field
from typing import Optional


class ManifestInfo(BaseModel):
    """
    Fields recovered from a node's warp-sync snapshot MANIFEST.
    """
    version: int = Field(..., description="Manifest format version tag")
    block_number: int = Field(..., description="Block height the snapshot was taken at")
    state_hash: str = Field(..., description="State root at block_number (hex, no 0x)")
    block_hash: Optional[str] = Field(default=None, description="Hash of block_number (hex, no 0x)")
    state_chunks: int = Field(default=0, description="Number of state chunk hashes listed")
    block_chunks: int = Field(default=0, description="Number of block chunk hashes listed")

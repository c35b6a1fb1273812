# MIT License
# Copyright (c) 2025 Hashborn

"""
Runtime settings.

Loaded from a JSON file using the same upper-case keys as the environment
(PARITY_DIR, CHAIN_NAME, CONTRACT, GAS_PRICE, GAS_LIMIT, PRIVATE_HOST,
PUBLIC_HOST, ...). Environment variables win over the file.
"""

import os
import json
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from eth_utils import is_address, to_checksum_address
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .protocol.types.common import ConfigurationError
from .protocol.config.params import (
    DEFAULT_GAS_PRICE, DEFAULT_GAS_LIMIT, DEFAULT_PRIVATE_HOST, DEFAULT_PUBLIC_HOST,
    DEFAULT_RPC_TIMEOUT, DEFAULT_KEY_NAME, DEFAULT_CONFIG_FILE, KEYSTORE_DIR,
)

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    # Source chain snapshot location
    parity_dir: Optional[str] = Field(default=None, alias="PARITY_DIR")
    chain_name: Optional[str] = Field(default=None, alias="CHAIN_NAME")

    # Anchor chain transaction
    contract: Optional[str] = Field(default=None, alias="CONTRACT")
    gas_price: int = Field(default=DEFAULT_GAS_PRICE, alias="GAS_PRICE")
    gas_limit: int = Field(default=DEFAULT_GAS_LIMIT, alias="GAS_LIMIT")
    anchor_chain_id: Optional[int] = Field(default=None, alias="ANCHOR_CHAIN_ID")

    # Endpoints
    private_host: str = Field(default=DEFAULT_PRIVATE_HOST, alias="PRIVATE_HOST")
    public_host: str = Field(default=DEFAULT_PUBLIC_HOST, alias="PUBLIC_HOST")
    rpc_timeout: float = Field(default=DEFAULT_RPC_TIMEOUT, alias="RPC_TIMEOUT")

    # Signer
    key_name: str = Field(default=DEFAULT_KEY_NAME, alias="KEY_NAME")
    keystore_dir: str = Field(default=KEYSTORE_DIR, alias="KEYSTORE_DIR")
    private_key: Optional[str] = Field(default=None, alias="PRIVATE_KEY", repr=False)

    @field_validator("gas_price", "gas_limit", "anchor_chain_id", mode="before")
    @classmethod
    def _parse_quantity(cls, v):
        # Accepts 123, "123" and "0x7b"
        if isinstance(v, str):
            v = v.strip()
            if v == "":
                return None
            return int(v, 16) if v.lower().startswith("0x") else int(v)
        return v

    @field_validator("contract")
    @classmethod
    def _checksum_contract(cls, v):
        if v is None or v == "":
            return None
        if not is_address(v):
            raise ValueError(f"not an address: {v}")
        return to_checksum_address(v)

    @field_validator("parity_dir", "chain_name", "private_key")
    @classmethod
    def _blank_is_unset(cls, v):
        if v is not None and v.strip() == "":
            return None
        return v

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Settings":
        try:
            return cls.model_validate(dict(data))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None,
             environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Load settings from a JSON file (optional) and the environment.

        Args:
            path: config.json location; a missing file is only an error if given explicitly
            environ: environment mapping (default: os.environ)
        """
        environ = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        if path is not None:
            path = Path(path)
            if path.exists():
                try:
                    with open(path, "r") as f:
                        data.update(json.load(f))
                except (OSError, ValueError) as e:
                    raise ConfigurationError(f"Unable to read config file {path}: {e}") from e
                logger.debug(f"Loaded configuration from {path}")
            else:
                raise ConfigurationError(f"Config file not found: {path}")

        for field in cls.model_fields.values():
            if field.alias in environ:
                data[field.alias] = environ[field.alias]

        return cls.from_mapping(data)

    def require_snapshot_location(self) -> None:
        if not self.parity_dir or not self.chain_name:
            raise ConfigurationError("Insufficient configuration for finding snapshot (PARITY_DIR and CHAIN_NAME are required)")

    def require_submission(self) -> None:
        if not self.contract:
            raise ConfigurationError("CONTRACT is required to submit checkpoints")
        if not self.public_host:
            raise ConfigurationError("PUBLIC_HOST is required to submit checkpoints")
        if self.gas_price < 0 or self.gas_limit <= 0:
            raise ConfigurationError("GAS_PRICE must be >= 0 and GAS_LIMIT > 0")


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
    """Settings from `path`, or from ./config.json when present, plus the environment."""
    if path is None and Path(DEFAULT_CONFIG_FILE).exists():
        path = DEFAULT_CONFIG_FILE
    return Settings.load(path)

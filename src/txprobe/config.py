"""
Configuration management for the transaction type probe.

Supports configuration via environment variables and .env files.
"""

from typing import Any, Optional

import httpx
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from txprobe.errors import ConfigError


SEPOLIA_CHAIN_ID = 11155111
DEFAULT_FEE_MULTIPLIER = 2


class ProbeConfig(BaseSettings):
    """
    Configuration settings for a probe run.

    Every setting maps to the upper-cased environment variable of the same
    name (RPC_URL, PRIVATE_KEY, TO_ADDRESS, ...).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Required settings
    rpc_url: str = Field(
        ...,
        min_length=1,
        description="JSON-RPC endpoint of the node under test"
    )
    private_key: str = Field(
        ...,
        min_length=1,
        repr=False,
        description="Hex-encoded signing key of the sending account"
    )
    to_address: str = Field(
        ...,
        min_length=1,
        description="Recipient of every probe transaction"
    )

    # Transfer settings
    amount_eth: str = Field(
        default="0.001",
        description="Value sent with each probe transaction, in ether"
    )
    chain_id: int = Field(
        default=SEPOLIA_CHAIN_ID,
        ge=1,
        description="Chain ID used when signing"
    )
    gas_limit: int = Field(
        default=21_000,
        ge=21_000,
        description="Gas limit attached to every probe transaction"
    )

    # Reserved fee settings (read, not applied to fees)
    priority_gwei: str = Field(
        default="2",
        description="Reserved priority fee in gwei"
    )
    fee_multiplier: int = Field(
        default=DEFAULT_FEE_MULTIPLIER,
        description="Reserved max-fee multiplier"
    )

    # Timing settings
    receipt_timeout_seconds: float = Field(
        default=120.0,
        ge=0,
        description="How long to poll for a receipt before reporting pending"
    )
    poll_interval_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Delay between receipt polls"
    )
    rpc_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for a single JSON-RPC request"
    )

    # Logging settings
    log_level: str = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )

    @field_validator("rpc_url")
    @classmethod
    def _check_rpc_url(cls, value: str) -> str:
        """The endpoint must be an absolute http(s) URL with a host."""
        value = value.strip()
        try:
            url = httpx.URL(value)
        except httpx.InvalidURL as e:
            raise ValueError(str(e)) from e
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError(f"expected an http(s) URL with a host, got {value!r}")
        return value

    @field_validator("fee_multiplier", mode="before")
    @classmethod
    def _fallback_fee_multiplier(cls, value: Any) -> int:
        """An unparseable multiplier falls back to the default."""
        try:
            return int(str(value).strip())
        except (TypeError, ValueError):
            return DEFAULT_FEE_MULTIPLIER

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level {value!r}")
        return level


def load_config(**overrides: Any) -> ProbeConfig:
    """
    Build a configuration from the environment plus explicit overrides.

    Overrides set to None are ignored so that CLI flags only replace
    values that were actually given.

    Raises:
        ConfigError: If a required variable is missing or a value is invalid
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    try:
        return ProbeConfig(**values)
    except ValidationError as e:
        raise _to_config_error(e) from e


def _to_config_error(error: ValidationError) -> ConfigError:
    missing = []
    invalid = []
    for item in error.errors():
        name = str(item["loc"][0]).upper() if item["loc"] else "CONFIG"
        if item["type"] == "missing":
            missing.append(name)
        else:
            invalid.append(f"invalid {name}: {item['msg']}")

    if missing:
        return ConfigError(", ".join(missing) + " not set")
    return ConfigError("; ".join(invalid))


# Global config instance
_config: Optional[ProbeConfig] = None


def get_config() -> ProbeConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: ProbeConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config

"""Application configuration using pydantic-settings.

One EVM private key drives every operation. Chains come from the built-in
registry merged with ``CHAIN_OVERRIDES`` (a JSON object keyed by chain name).
"""

from enum import Enum
from functools import lru_cache
from typing import Any, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EncryptionMode(str, Enum):
    """How transaction encryption is decided."""

    MANUAL = "manual"          # Only when the request asks for it
    AUTOMATIC = "automatic"    # Every submitted transaction

    def should_encrypt(self, requested: Optional[bool]) -> bool:
        """Resolve the per-request flag against the mode."""
        if self is EncryptionMode.AUTOMATIC:
            return True
        return bool(requested)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ======================
    # Environment
    # ======================
    environment: str = Field(default="development", description="Runtime environment")
    debug: bool = Field(default=False, description="Enable debug logging")

    # ======================
    # Wallet
    # ======================
    evm_wallet_private_key: Optional[str] = Field(
        default=None, description="0x-prefixed private key used to sign every transaction"
    )

    # ======================
    # Chains
    # ======================
    default_chain: str = Field(default="fair-testnet", description="Chain used when none is given")
    chain_overrides: dict[str, dict[str, Any]] = Field(
        default_factory=dict,
        description="Per-chain overrides merged over the built-in registry (JSON)",
    )

    # ======================
    # Encryption (BITE)
    # ======================
    encryption_mode: EncryptionMode = Field(
        default=EncryptionMode.AUTOMATIC,
        description="automatic = encrypt everything, manual = encrypt on request",
    )
    encryptor_backend: Optional[str] = Field(
        default=None,
        description="Encryption backend as 'package.module:ClassName'",
    )

    # ======================
    # RPC
    # ======================
    rpc_timeout: float = Field(default=30.0, description="JSON-RPC request timeout in seconds")
    receipt_timeout: float = Field(default=120.0, description="Max seconds to wait for a receipt")
    receipt_poll_interval: float = Field(default=2.0, description="Seconds between receipt polls")
    submission_lock_timeout: float = Field(
        default=60.0, description="Max seconds to wait for the account submission lock"
    )

    # ======================
    # Gas
    # ======================
    gas_limit: int = Field(default=1_000_000, description="Gas limit for submitted transactions")
    gas_price: int = Field(default=1_000_000, description="Legacy gas price in wei")

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment.lower() == "production"

    @property
    def has_wallet(self) -> bool:
        """Check if a signing key is configured."""
        return bool(self.evm_wallet_private_key and self.evm_wallet_private_key.startswith("0x"))

    def get_safe_dict(self) -> dict:
        """Return settings dict with secrets redacted."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "wallet_configured": self.has_wallet,
            "evm_wallet_private_key": "***" if self.evm_wallet_private_key else "(not set)",
            "default_chain": self.default_chain,
            "chain_overrides": sorted(self.chain_overrides),
            "encryption": {
                "mode": self.encryption_mode.value,
                "backend": self.encryptor_backend or "(not set)",
            },
            "rpc": {
                "timeout": self.rpc_timeout,
                "receipt_timeout": self.receipt_timeout,
                "receipt_poll_interval": self.receipt_poll_interval,
            },
            "gas": {"limit": self.gas_limit, "price": self.gas_price},
        }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

"""Chain registry for the supported EVM networks.

The built-in set covers the SKALE fair testnet with its Uniswap V2 router.
Callers may override or extend it per chain; token tables merge key-wise.
"""

import logging
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping, Optional

from web3 import Web3

from fairkit.errors import ChainConfigError, RouterNotConfigured, UnsupportedChain

logger = logging.getLogger(__name__)

NATIVE_DECIMALS = 18


@dataclass(frozen=True)
class ChainConfig:
    """Configuration for one EVM chain."""

    name: str
    chain_id: str
    native_symbol: str
    rpc_url: str
    explorer_url: str = ""
    tokens: Mapping[str, str] = field(default_factory=dict)  # symbol -> address
    router_address: Optional[str] = None  # Uniswap V2 router
    encryption_default: bool = False

    @property
    def wrapped_native_symbol(self) -> str:
        return "W" + self.native_symbol

    @property
    def has_router(self) -> bool:
        return bool(self.router_address) and Web3.is_address(self.router_address)

    def token_address(self, symbol: str) -> Optional[str]:
        """Look up a token address by symbol (case-sensitive)."""
        return self.tokens.get(symbol)

    def known_symbols(self) -> list[str]:
        """Token table symbols plus the native symbol."""
        return [*self.tokens.keys(), self.native_symbol]

    def explorer_tx_url(self, tx_hash: str) -> str:
        base = self.explorer_url.rstrip("/")
        return f"{base}/tx/{tx_hash}" if base else tx_hash


# ======================
# Built-in Chains
# ======================

DEFAULT_CHAINS: dict[str, dict[str, Any]] = {
    "fair-testnet": {
        "chain_id": "1328435889",
        "native_symbol": "FAIR",
        "rpc_url": "https://testnet-v1.skalenodes.com/v1/idealistic-dual-miram",
        "explorer_url": "https://idealistic-dual-miram.explorer.testnet-v1.skalenodes.com/",
        "tokens": {
            "USDC": "0x389E0Ec8a0226E96528761b5954830727d892117",
            "SKL": "0x2770Fc13a45be852Db0bB90A85D463C03CCa4fA6",
            "USDT": "0x1D13d5697490C94f5Aa6f38bEEB4D6Ef4535a40c",
            "WFAIR": "0x4706C664ab84B7d6b9a7911cFB47b1f81335b208",
        },
        "router_address": "0x05BD86b5e9A6a8E838ef50cAEB96a502271349D0",
        "encryption_default": False,
    },
}

_CHAIN_FIELDS = {f.name for f in fields(ChainConfig)} - {"name"}


def merge_chain_configs(
    defaults: Mapping[str, Mapping[str, Any]],
    overrides: Optional[Mapping[str, Mapping[str, Any]]] = None,
) -> dict[str, dict[str, Any]]:
    """Merge override entries over defaults.

    Scalar fields from the override win; token tables are merged so an
    override only needs to list new or changed symbols.
    """
    overrides = overrides or {}
    merged: dict[str, dict[str, Any]] = {}

    for chain_name in dict.fromkeys([*defaults.keys(), *overrides.keys()]):
        base = dict(defaults.get(chain_name, {}))
        extra = dict(overrides.get(chain_name, {}))

        unknown = set(extra) - _CHAIN_FIELDS
        if unknown:
            logger.warning(f"Ignoring unknown fields for chain {chain_name}: {sorted(unknown)}")

        entry = {**base, **{k: v for k, v in extra.items() if k in _CHAIN_FIELDS}}
        entry["tokens"] = {**base.get("tokens", {}), **extra.get("tokens", {})}
        merged[chain_name] = entry

    return merged


class ChainRegistry:
    """Read-only chain lookup built once at startup."""

    def __init__(self, overrides: Optional[Mapping[str, Mapping[str, Any]]] = None):
        merged = merge_chain_configs(DEFAULT_CHAINS, overrides)

        if not merged:
            raise ChainConfigError("At least one chain must be configured")

        chains: dict[str, ChainConfig] = {}
        for chain_name, entry in merged.items():
            chain_id = str(entry.get("chain_id") or "").strip()
            rpc_url = str(entry.get("rpc_url") or "").strip()

            if not chain_id:
                raise ChainConfigError(f'Chain "{chain_name}" is missing a valid "chain_id"')
            if not rpc_url:
                raise ChainConfigError(f'Chain "{chain_name}" is missing a valid "rpc_url"')
            if not entry.get("native_symbol"):
                raise ChainConfigError(f'Chain "{chain_name}" is missing a "native_symbol"')

            chains[chain_name] = ChainConfig(
                name=chain_name,
                chain_id=chain_id,
                native_symbol=entry["native_symbol"],
                rpc_url=rpc_url,
                explorer_url=entry.get("explorer_url", ""),
                tokens=MappingProxyType(dict(entry["tokens"])),
                router_address=entry.get("router_address"),
                encryption_default=bool(entry.get("encryption_default", False)),
            )

        self._chains = MappingProxyType(chains)
        logger.debug(f"Chain registry initialized: {list(chains)}")

    def __contains__(self, chain_name: object) -> bool:
        return self.is_supported(chain_name)

    def is_supported(self, chain_name) -> bool:
        return bool(chain_name) and chain_name in self._chains

    def get(self, chain_name: Optional[str]) -> ChainConfig:
        """Get a chain by name. Raises ``UnsupportedChain`` if not found."""
        if not self.is_supported(chain_name):
            raise UnsupportedChain(chain_name)
        return self._chains[chain_name]

    def names(self) -> list[str]:
        return list(self._chains)

    def all(self) -> list[ChainConfig]:
        return list(self._chains.values())

    def router_address(self, chain_name: str) -> str:
        chain = self.get(chain_name)
        if not chain.has_router:
            raise RouterNotConfigured(chain_name)
        return chain.router_address

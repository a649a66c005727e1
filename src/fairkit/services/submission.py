"""Helpers shared by the transaction-producing services."""

from typing import Optional

from fairkit.chains import ChainConfig
from fairkit.config import EncryptionMode
from fairkit.evm.wallet import WalletProvider


def encryption_for(
    wallet: WalletProvider,
    chain: ChainConfig,
    requested: bool,
    mode: Optional[EncryptionMode] = None,
) -> bool:
    """Decide whether a submission is encrypted.

    An explicit ``mode`` wins for this call. Otherwise a chain flagged
    ``encryption_default`` encrypts everything, and any other chain
    follows the wallet's configured mode.
    """
    if mode is None:
        mode = EncryptionMode.AUTOMATIC if chain.encryption_default else wallet.encryption_mode
    return mode.should_encrypt(requested)


def is_missing_hash(tx_hash: Optional[str]) -> bool:
    """True for None, empty, bare "0x" or an all-zero hash."""
    if not tx_hash:
        return True
    digits = tx_hash[2:] if tx_hash.lower().startswith("0x") else tx_hash
    return not digits or set(digits) == {"0"}

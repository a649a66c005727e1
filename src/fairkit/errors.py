"""Error taxonomy.

Every error carries a stable ``kind`` so presentation layers can map it to
user copy without matching message text.
"""

from typing import Optional


class FairKitError(Exception):
    """Base class for all domain errors."""

    kind = "FairKitError"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ======================
# Configuration
# ======================


class ChainConfigError(FairKitError):
    """A registered chain is missing a required field."""

    kind = "ChainConfigError"


class WalletNotConfigured(FairKitError):
    """No usable private key is available."""

    kind = "WalletNotConfigured"

    def __init__(self, message: str = "EVM_WALLET_PRIVATE_KEY is missing"):
        super().__init__(message)


# ======================
# Lookup
# ======================


class UnsupportedChain(FairKitError):
    kind = "UnsupportedChain"

    def __init__(self, chain_name: Optional[str]):
        self.chain_name = chain_name
        super().__init__(f"Chain '{chain_name}' is not supported")


class UnsupportedToken(FairKitError):
    kind = "UnsupportedToken"

    def __init__(self, token: str, chain_name: str):
        self.token = token
        self.chain_name = chain_name
        super().__init__(f"Token {token} is not supported on chain {chain_name}")


class RouterNotConfigured(FairKitError):
    kind = "RouterNotConfigured"

    def __init__(self, chain_name: str):
        self.chain_name = chain_name
        super().__init__(f"Chain {chain_name} has no swap router configured")


# ======================
# Request validation
# ======================


class MissingRecipient(FairKitError):
    kind = "MissingRecipient"

    def __init__(self, message: str = "Recipient address is required"):
        super().__init__(message)


class MissingToken(FairKitError):
    kind = "MissingToken"

    def __init__(self, message: str = "Both input and output tokens are required"):
        super().__init__(message)


class MissingAmount(FairKitError):
    kind = "MissingAmount"

    def __init__(self, message: str = "Amount is required"):
        super().__init__(message)


class InvalidAmount(FairKitError):
    kind = "InvalidAmount"

    def __init__(self, amount: str):
        self.amount = amount
        super().__init__(f"Amount '{amount}' is not a decimal number")


class ZeroAmount(FairKitError):
    kind = "ZeroAmount"

    def __init__(self, message: str = "Amount must be greater than 0"):
        super().__init__(message)


class NegativeAmount(FairKitError):
    kind = "NegativeAmount"

    def __init__(self, message: str = "Amount cannot be negative"):
        super().__init__(message)


class SameTokenSwap(FairKitError):
    kind = "SameTokenSwap"

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Cannot swap {token} for itself")


class SameAddressSwap(FairKitError):
    """Both sides resolved to one contract, e.g. FAIR and WFAIR."""

    kind = "SameAddressSwap"

    def __init__(self, input_token: str, output_token: str, address: str):
        self.address = address
        super().__init__(
            f"{input_token} and {output_token} resolve to the same contract {address}"
        )


class InvalidSlippage(FairKitError):
    kind = "InvalidSlippage"

    def __init__(self, slippage):
        self.slippage = slippage
        super().__init__(f"Slippage must be between 0 and 50 percent, got {slippage}")


# ======================
# Execution
# ======================


class QuoteUnavailable(FairKitError):
    kind = "QuoteUnavailable"

    def __init__(self, reason: str = "Unable to calculate swap amounts"):
        super().__init__(
            f"{reason}. Please check if liquidity exists for this pair."
        )


class TransactionNotSubmitted(FairKitError):
    kind = "TransactionNotSubmitted"

    def __init__(self, message: str = "Transaction hash not received"):
        super().__init__(message)


class SwapNotSubmitted(FairKitError):
    kind = "SwapNotSubmitted"

    def __init__(self, message: str = "Swap transaction hash not received"):
        super().__init__(message)


class TransactionReverted(FairKitError):
    kind = "TransactionReverted"

    def __init__(self, tx_hash: str):
        self.tx_hash = tx_hash
        super().__init__(f"Transaction {tx_hash} reverted")


class EncryptionFailed(FairKitError):
    kind = "EncryptionFailed"

    def __init__(self, reason: str):
        super().__init__(f"Failed to encrypt transaction: {reason}")

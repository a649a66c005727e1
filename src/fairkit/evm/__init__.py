"""EVM collaborators: ABI descriptors, JSON-RPC client, encryption, wallet."""

from fairkit.evm.encryption import EncryptedTransaction, PlainTransaction, TransactionEncryptor
from fairkit.evm.rpc import EVMClient, ReceiptTimeout, RPCError
from fairkit.evm.wallet import (
    EVMTransaction,
    SentTransaction,
    WalletProvider,
    create_wallet_provider,
)

__all__ = [
    "EVMClient",
    "RPCError",
    "ReceiptTimeout",
    "EncryptedTransaction",
    "PlainTransaction",
    "TransactionEncryptor",
    "EVMTransaction",
    "SentTransaction",
    "WalletProvider",
    "create_wallet_provider",
]

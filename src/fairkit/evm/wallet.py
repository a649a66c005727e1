"""Wallet provider: one signing account across the registered chains.

Holds the account, the chain registry, per-chain RPC clients and the
encryption backend. Services build unsigned transactions; this module
encrypts (when asked), signs and broadcasts them.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import httpx
from eth_abi.exceptions import DecodingError
from eth_account import Account
from web3 import Web3

from fairkit.chains import ChainConfig, ChainRegistry
from fairkit.config import EncryptionMode, Settings, get_settings
from fairkit.errors import TransactionReverted, WalletNotConfigured
from fairkit.evm.abi import ContractFunction
from fairkit.evm.encryption import (
    PlainTransaction,
    TransactionEncryptor,
    encrypt_transaction,
    load_encryptor,
)
from fairkit.evm.rpc import EVMClient, RPCError, receipt_succeeded
from fairkit.utils.locks import AccountSubmissionLock

logger = logging.getLogger(__name__)

_EMPTY_ADDRESS_VALUES = ("null", "undefined")


@dataclass
class EVMTransaction:
    """Unsigned transaction built by a service."""

    to: str
    data: str = "0x"
    value: int = 0
    gas: Optional[int] = None
    gas_price: Optional[int] = None


@dataclass
class SentTransaction:
    """Broadcast outcome."""

    tx_hash: Optional[str]
    encrypted: bool


class WalletProvider:
    """Signs and submits transactions for a single EVM account."""

    def __init__(
        self,
        private_key: str,
        registry: Optional[ChainRegistry] = None,
        encryptor: Optional[TransactionEncryptor] = None,
        encryption_mode: Optional[EncryptionMode] = None,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not private_key:
            raise WalletNotConfigured()

        self.account = Account.from_key(private_key)
        self.settings = settings or get_settings()
        self.registry = registry or ChainRegistry(self.settings.chain_overrides)
        self.encryptor = encryptor
        self.encryption_mode = encryption_mode or self.settings.encryption_mode
        self._transport = transport
        self._clients: dict[str, EVMClient] = {}

    def __repr__(self) -> str:
        return f"WalletProvider(address={self.address}, mode={self.encryption_mode.value})"

    @property
    def address(self) -> str:
        return self.account.address

    def get_chain(self, chain_name: str) -> ChainConfig:
        return self.registry.get(chain_name)

    def get_client(self, chain_name: str) -> EVMClient:
        """Return a (cached) RPC client for the given chain."""
        if chain_name in self._clients:
            return self._clients[chain_name]

        chain = self.registry.get(chain_name)
        client = EVMClient(chain.rpc_url, timeout=self.settings.rpc_timeout, transport=self._transport)
        self._clients[chain_name] = client
        return client

    def describe(self) -> str:
        """Wallet summary handed to the agent as context."""
        chains = ", ".join(self.registry.names())
        return f"Wallet Address: {self.address}\nSupported chains: {chains}"

    # ======================
    # Address handling
    # ======================

    def format_address(self, address: Optional[str], chain_name: Optional[str] = None) -> str:
        """Normalize a caller-supplied address, falling back to our own.

        Empty values, "null"/"undefined" and token symbols mistakenly passed
        as addresses resolve to the wallet address. 0x-prefixed strings are
        used as-is; the RPC layer rejects malformed ones.
        """
        if address is None:
            logger.debug("Address is None, using wallet's own address")
            return self.address

        text = str(address).strip()
        if not text or text.lower() in _EMPTY_ADDRESS_VALUES:
            logger.debug(f"Address '{text}' is empty, using wallet's own address")
            return self.address

        if text.startswith("0x") and len(text) == 42:
            return text

        if chain_name and self.registry.is_supported(chain_name):
            symbols = {s.upper() for s in self.registry.get(chain_name).known_symbols()}
            if text.upper() in symbols:
                logger.debug(f"'{text}' is a token symbol, not an address; using wallet's own address")
                return self.address

        if text.startswith("0x"):
            logger.warning(f"Address '{text}' is not a standard EVM address but will be used as is")
            return text

        logger.warning(f"Could not resolve address '{text}', falling back to wallet address")
        return self.address

    # ======================
    # Reads
    # ======================

    async def get_native_balance(self, chain_name: str, address: Optional[str] = None) -> int:
        """Native balance in wei for ``address`` (default: own account)."""
        client = self.get_client(chain_name)
        return await client.get_balance(address or self.address)

    async def read_contract(
        self,
        chain_name: str,
        address: str,
        function: ContractFunction,
        args: Sequence[Any] = (),
    ) -> Any:
        """Call a view function and decode its return value."""
        client = self.get_client(chain_name)
        raw = await client.call(address, function.encode(args))
        try:
            return function.decode(raw)
        except DecodingError as e:
            # Plain accounts and non-ERC-20 contracts answer eth_call with 0x
            logger.warning(f"Undecodable {function.signature} result from {address}: {e}")
            raise RPCError(
                "eth_call", f"{function.signature} on {address} returned empty or malformed data"
            ) from e

    # ======================
    # Writes
    # ======================

    async def send_transaction(
        self,
        chain_name: str,
        transaction: EVMTransaction,
        encrypt: bool,
    ) -> SentTransaction:
        """Encrypt (if requested), sign and broadcast a transaction."""
        chain = self.registry.get(chain_name)
        client = self.get_client(chain_name)

        to, data = transaction.to, transaction.data or "0x"
        if encrypt:
            encrypted = await encrypt_transaction(
                self.encryptor, chain.rpc_url, PlainTransaction(to=to, data=data)
            )
            to, data = encrypted.to, encrypted.data
            logger.debug(f"Transaction to {transaction.to} encrypted for {chain_name}")

        async with AccountSubmissionLock(
            self.address,
            timeout=self.settings.submission_lock_timeout,
            operation=f"send on {chain_name}",
        ):
            nonce = await client.get_transaction_count(self.address, "pending")

            tx = {
                "nonce": nonce,
                "gasPrice": transaction.gas_price or self.settings.gas_price,
                "gas": transaction.gas or self.settings.gas_limit,
                "to": Web3.to_checksum_address(to),
                "value": int(transaction.value),
                "data": data,
                "chainId": int(chain.chain_id),
            }

            logger.info(
                f"Signing transaction on {chain_name}: nonce={nonce}, to={tx['to']}, "
                f"value={tx['value']}, encrypted={encrypt}"
            )
            signed = self.account.sign_transaction(tx)
            tx_hash = await client.send_raw_transaction(Web3.to_hex(signed.raw_transaction))

        logger.info(f"Transaction broadcast on {chain_name}: {tx_hash}")
        return SentTransaction(tx_hash=tx_hash, encrypted=encrypt)

    async def wait_for_tx(self, chain_name: str, tx_hash: str) -> dict:
        """Block until mined. Raises ``TransactionReverted`` on status 0."""
        client = self.get_client(chain_name)
        receipt = await client.wait_for_receipt(
            tx_hash,
            timeout=self.settings.receipt_timeout,
            poll_interval=self.settings.receipt_poll_interval,
        )
        if not receipt_succeeded(receipt):
            raise TransactionReverted(tx_hash)
        return receipt


def create_wallet_provider(
    settings: Optional[Settings] = None,
    encryptor: Optional[TransactionEncryptor] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> WalletProvider:
    """Build the wallet provider from configuration.

    Raises:
        WalletNotConfigured: no 0x-prefixed private key is configured
    """
    settings = settings or get_settings()
    if not settings.has_wallet:
        raise WalletNotConfigured()

    if encryptor is None:
        encryptor = load_encryptor(settings.encryptor_backend)

    return WalletProvider(
        settings.evm_wallet_private_key,
        registry=ChainRegistry(settings.chain_overrides),
        encryptor=encryptor,
        encryption_mode=settings.encryption_mode,
        settings=settings,
        transport=transport,
    )

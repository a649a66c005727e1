"""Pytest configuration and fixtures."""

import json
import os
from typing import Any, Callable, Optional
from unittest.mock import AsyncMock

import httpx
import pytest
from eth_abi import decode as abi_decode

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "true"
os.environ["ENCRYPTION_MODE"] = "manual"

# Well-known development key (first Hardhat/Anvil account)
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

os.environ["EVM_WALLET_PRIVATE_KEY"] = TEST_PRIVATE_KEY

from fairkit.config import EncryptionMode, Settings
from fairkit.evm.abi import ERC20_APPROVE
from fairkit.evm.encryption import EncryptedTransaction, PlainTransaction, TransactionEncryptor
from fairkit.evm.wallet import SentTransaction, WalletProvider
from fairkit.utils.locks import clear_account_locks

CHAIN = "fair-testnet"
ROUTER = "0x05BD86b5e9A6a8E838ef50cAEB96a502271349D0"
USDC = "0x389E0Ec8a0226E96528761b5954830727d892117"
SKL = "0x2770Fc13a45be852Db0bB90A85D463C03CCa4fA6"
USDT = "0x1D13d5697490C94f5Aa6f38bEEB4D6Ef4535a40c"
WFAIR = "0x4706C664ab84B7d6b9a7911cFB47b1f81335b208"
RECIPIENT = "0x1234567890123456789012345678901234567890"


@pytest.fixture(autouse=True)
def reset_locks():
    """Account locks are process-wide; start each test clean."""
    clear_account_locks()
    yield
    clear_account_locks()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        evm_wallet_private_key=TEST_PRIVATE_KEY,
        encryption_mode=EncryptionMode.MANUAL,
        receipt_timeout=1.0,
        receipt_poll_interval=0.0,
    )


class FakeEncryptor(TransactionEncryptor):
    """Encryptor that tags the call data so tests can see it was applied."""

    def __init__(self):
        self.calls: list[tuple[str, PlainTransaction]] = []

    async def encrypt(self, rpc_url: str, transaction: PlainTransaction) -> EncryptedTransaction:
        self.calls.append((rpc_url, transaction))
        return EncryptedTransaction(
            to="0x0000000000000000000000000000000000000401",
            data="0xe0" + transaction.data[2:],
        )


class FakeChainState:
    """In-memory ERC-20 and router state behind ``WalletProvider`` reads and sends.

    Reads dispatch on the contract function name. Sends are recorded and
    answered with sequential hashes; an approve call updates the allowance.
    """

    def __init__(self, owner: str):
        self.owner = owner
        self.decimals: dict[str, int] = {
            USDC.lower(): 6,
            USDT.lower(): 6,
            SKL.lower(): 18,
            WFAIR.lower(): 18,
        }
        self.balances: dict[tuple[str, str], int] = {}
        self.native_balances: dict[str, int] = {}
        self.allowances: dict[str, int] = {}
        self.amount_out: Optional[int] = 1_000_000
        self.quote_error: Optional[Exception] = None
        self.sent: list[tuple[str, Any, bool]] = []
        self.hash_override: Optional[Callable[[int], Optional[str]]] = None

    async def read_contract(self, chain_name, address, function, args=()):
        name = function.name
        token = address.lower()
        if name == "decimals":
            return self.decimals[token]
        if name == "balanceOf":
            return self.balances.get((token, args[0].lower()), 0)
        if name == "allowance":
            return self.allowances.get(token, 0)
        if name == "getAmountsOut":
            if self.quote_error is not None:
                raise self.quote_error
            return [args[0], self.amount_out]
        raise AssertionError(f"unexpected read {name}")

    async def get_native_balance(self, chain_name, address=None):
        return self.native_balances.get((address or self.owner).lower(), 0)

    async def send_transaction(self, chain_name, transaction, encrypt):
        self.sent.append((chain_name, transaction, encrypt))
        payload = bytes.fromhex(transaction.data[2:])
        if payload[:4] == ERC20_APPROVE.selector:
            _, amount = abi_decode(["address", "uint256"], payload[4:])
            self.allowances[transaction.to.lower()] = amount
        index = len(self.sent)
        if self.hash_override is not None:
            tx_hash = self.hash_override(index)
        else:
            tx_hash = "0x" + f"{index:064x}"
        return SentTransaction(tx_hash=tx_hash, encrypted=encrypt)

    async def wait_for_tx(self, chain_name, tx_hash):
        return {"status": "0x1", "transactionHash": tx_hash}


@pytest.fixture
def chain_state() -> FakeChainState:
    return FakeChainState(TEST_ADDRESS)


@pytest.fixture
def wallet(settings, chain_state) -> WalletProvider:
    """Real wallet provider whose network-facing methods hit ``chain_state``."""
    provider = WalletProvider(TEST_PRIVATE_KEY, settings=settings)
    provider.read_contract = AsyncMock(side_effect=chain_state.read_contract)
    provider.get_native_balance = AsyncMock(side_effect=chain_state.get_native_balance)
    provider.send_transaction = AsyncMock(side_effect=chain_state.send_transaction)
    provider.wait_for_tx = AsyncMock(side_effect=chain_state.wait_for_tx)
    return provider


class RPCStub:
    """JSON-RPC endpoint for ``httpx.MockTransport``.

    ``results`` maps a method to a value or to a callable taking params.
    Every request is recorded in ``calls``.
    """

    def __init__(self, results: Optional[dict[str, Any]] = None):
        self.results = results or {}
        self.calls: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.calls.append(payload)
        method = payload["method"]

        if method not in self.results:
            return httpx.Response(
                200,
                json={"jsonrpc": "2.0", "id": payload["id"], "error": {"code": -32601, "message": "method not found"}},
            )

        result = self.results[method]
        if callable(result):
            result = result(payload["params"])
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": payload["id"], "result": result})

    def methods(self) -> list[str]:
        return [call["method"] for call in self.calls]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture
def rpc_stub() -> RPCStub:
    return RPCStub()

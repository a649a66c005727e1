"""Async JSON-RPC client for EVM chains.

Each call opens a short-lived ``httpx.AsyncClient``. Failures are raised as
``RPCError`` and never retried here; callers re-run the whole operation.
"""

import asyncio
import itertools
import logging
import time
from typing import Any, Optional

import httpx
from eth_utils import decode_hex

logger = logging.getLogger(__name__)

_request_ids = itertools.count(1)


class RPCError(Exception):
    """Raised when a JSON-RPC call fails at the HTTP or protocol level."""

    def __init__(self, method: str, message: str, code: Optional[int] = None):
        self.method = method
        self.code = code
        super().__init__(f"{method} failed: {message}")


class ReceiptTimeout(RPCError):
    """Raised when a receipt does not appear within the wait window."""

    def __init__(self, tx_hash: str, timeout: float):
        self.tx_hash = tx_hash
        super().__init__(
            "eth_getTransactionReceipt",
            f"no receipt for {tx_hash} after {timeout}s",
        )


class EVMClient:
    """Minimal async client for one chain's RPC endpoint."""

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self._transport = transport

    async def request(self, method: str, params: list) -> Any:
        """Send one JSON-RPC request and return its ``result``."""
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(_request_ids),
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.rpc_url, json=payload)
        except httpx.HTTPError as e:
            raise RPCError(method, str(e) or e.__class__.__name__) from e

        if response.status_code != 200:
            raise RPCError(method, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise RPCError(method, "invalid JSON response") from e

        if data.get("error"):
            error = data["error"]
            if isinstance(error, dict):
                raise RPCError(method, error.get("message", str(error)), error.get("code"))
            raise RPCError(method, str(error))

        if "result" not in data:
            raise RPCError(method, "response has no result")

        return data["result"]

    # ======================
    # Reads
    # ======================

    async def get_balance(self, address: str, block: str = "latest") -> int:
        """Native balance in wei."""
        result = await self.request("eth_getBalance", [address, block])
        return int(result, 16)

    async def call(self, to: str, data: str, block: str = "latest") -> bytes:
        """Execute a read-only contract call and return the raw return data."""
        result = await self.request("eth_call", [{"to": to, "data": data}, block])
        return decode_hex(result or "0x")

    async def get_transaction_count(self, address: str, block: str = "pending") -> int:
        result = await self.request("eth_getTransactionCount", [address, block])
        return int(result, 16)

    async def gas_price(self) -> int:
        result = await self.request("eth_gasPrice", [])
        return int(result, 16)

    async def get_transaction_receipt(self, tx_hash: str) -> Optional[dict]:
        return await self.request("eth_getTransactionReceipt", [tx_hash])

    # ======================
    # Writes
    # ======================

    async def send_raw_transaction(self, raw_tx_hex: str) -> Optional[str]:
        """Broadcast a signed transaction and return its hash."""
        if not raw_tx_hex.startswith("0x"):
            raw_tx_hex = f"0x{raw_tx_hex}"
        return await self.request("eth_sendRawTransaction", [raw_tx_hex])

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float = 120.0,
        poll_interval: float = 2.0,
    ) -> dict:
        """Poll until the transaction is mined.

        Raises:
            ReceiptTimeout: no receipt within ``timeout`` seconds
        """
        deadline = time.monotonic() + timeout

        while True:
            receipt = await self.get_transaction_receipt(tx_hash)
            if receipt is not None:
                logger.debug(f"Receipt for {tx_hash}: status={receipt.get('status')}")
                return receipt

            if time.monotonic() >= deadline:
                raise ReceiptTimeout(tx_hash, timeout)

            await asyncio.sleep(poll_interval)


def receipt_succeeded(receipt: dict) -> bool:
    """Whether a receipt reports success (status 0x1)."""
    status = receipt.get("status")
    if status is None:
        return True  # pre-Byzantium receipts carry no status
    if isinstance(status, str):
        return int(status, 16) == 1
    return int(status) == 1

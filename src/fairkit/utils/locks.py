"""Per-account submission locks.

Nonce lookup, signing and broadcast for one account run under a single
asyncio lock so concurrent transfers and swaps in this process never
reuse a nonce.
"""

import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Global lock registry: lowercased address -> asyncio.Lock
_account_locks: dict[str, asyncio.Lock] = {}
_registry_lock = asyncio.Lock()


async def get_account_lock(address: str) -> asyncio.Lock:
    """Get or create the lock for an account address."""
    key = address.lower()
    async with _registry_lock:
        if key not in _account_locks:
            _account_locks[key] = asyncio.Lock()
        return _account_locks[key]


class LockTimeoutError(Exception):
    """Raised when a lock cannot be acquired within the timeout period."""

    pass


class AccountSubmissionLock:
    """Context manager for exclusive transaction submission from one account.

    Example:
        async with AccountSubmissionLock(address, operation="swap"):
            nonce = await client.get_transaction_count(address)
            ...
            await client.send_raw_transaction(raw)
    """

    def __init__(
        self,
        address: str,
        timeout: Optional[float] = 60.0,
        operation: str = "submit",
    ):
        """Initialize the lock.

        Args:
            address: Sending account address
            timeout: Maximum time to wait for lock (None = wait forever)
            operation: Description of the operation for logging
        """
        self.address = address
        self.timeout = timeout
        self.operation = operation
        self._lock: Optional[asyncio.Lock] = None
        self._acquired = False

    async def __aenter__(self) -> "AccountSubmissionLock":
        """Acquire the lock."""
        self._lock = await get_account_lock(self.address)

        try:
            if self.timeout:
                await asyncio.wait_for(self._lock.acquire(), timeout=self.timeout)
            else:
                await self._lock.acquire()
            self._acquired = True
            logger.debug(f"Lock acquired for {self.address}: {self.operation}")
            return self

        except asyncio.TimeoutError:
            logger.warning(
                f"Lock timeout for {self.address} after {self.timeout}s: {self.operation}"
            )
            raise LockTimeoutError(
                f"Could not acquire submission lock for {self.address} within {self.timeout}s"
            )

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Release the lock."""
        if self._acquired and self._lock:
            self._lock.release()
            self._acquired = False
            logger.debug(f"Lock released for {self.address}: {self.operation}")
        return False


def clear_account_locks() -> None:
    """Clear all account locks (useful for testing)."""
    _account_locks.clear()

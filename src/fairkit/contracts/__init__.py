"""Request and response contracts.

Requests are validated once at the edge; services never inspect raw maps.
"""

from fairkit.contracts.balances import BalanceRequest, BalanceResult
from fairkit.contracts.swaps import SwapRequest, SwapResult
from fairkit.contracts.transfers import TransferRequest, TransferResult

__all__ = [
    "BalanceRequest",
    "BalanceResult",
    "TransferRequest",
    "TransferResult",
    "SwapRequest",
    "SwapResult",
]

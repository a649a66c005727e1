"""Domain services: balances, quotes, transfers and swaps."""

from fairkit.services.balance_service import BalanceService
from fairkit.services.quote_service import Quote, QuoteService
from fairkit.services.swap_service import PreparedSwap, SwapPlan, SwapRoute, SwapService, plan_swap
from fairkit.services.token_resolver import ResolvedToken, resolve_token
from fairkit.services.transfer_service import TransferService

__all__ = [
    "BalanceService",
    "Quote",
    "QuoteService",
    "PreparedSwap",
    "SwapPlan",
    "SwapRoute",
    "SwapService",
    "plan_swap",
    "ResolvedToken",
    "resolve_token",
    "TransferService",
]

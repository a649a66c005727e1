"""Quote calculator for Uniswap V2 exact-input swaps.

Quotes come from the router's ``getAmountsOut`` over a two-hop path. The
minimum accepted output applies slippage in basis points with integer math.
"""

import logging
import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from fairkit.errors import InvalidSlippage, QuoteUnavailable
from fairkit.evm.abi import ROUTER_GET_AMOUNTS_OUT
from fairkit.evm.wallet import WalletProvider

logger = logging.getLogger(__name__)

DEFAULT_SLIPPAGE = Decimal("0.5")
MAX_SLIPPAGE = Decimal("50")
BASIS_POINTS = 10_000

SlippageLike = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class Quote:
    """Router quote in base units."""

    amount_in: int
    amount_out: int
    amount_out_min: int
    path: tuple[str, str]
    slippage: Decimal


def validate_slippage(slippage: SlippageLike) -> Decimal:
    """Return slippage as Decimal, raising ``InvalidSlippage`` outside [0, 50]."""
    try:
        value = Decimal(str(slippage))
    except ArithmeticError as e:
        raise InvalidSlippage(slippage) from e

    if not value.is_finite() or value < 0 or value > MAX_SLIPPAGE:
        raise InvalidSlippage(slippage)
    return value


def slippage_multiplier(slippage: SlippageLike) -> int:
    """floor((100 - slippage) * 100): 0.5 -> 9950, 0 -> 10000, 50 -> 5000."""
    value = validate_slippage(slippage)
    return math.floor((Decimal(100) - value) * 100)


def minimum_amount_out(amount_out: int, slippage: SlippageLike) -> int:
    return amount_out * slippage_multiplier(slippage) // BASIS_POINTS


class QuoteService:
    """Fetches router quotes and applies slippage."""

    def __init__(self, wallet: WalletProvider):
        self.wallet = wallet

    async def calculate_amount_out(
        self,
        amount_in: int,
        input_address: str,
        output_address: str,
        slippage: SlippageLike,
        chain_name: str,
    ) -> Quote:
        """Quote an exact-input swap.

        Raises:
            InvalidSlippage: slippage outside [0, 50]
            RouterNotConfigured: chain has no router
            QuoteUnavailable: the router call failed (commonly no liquidity)
        """
        slippage = validate_slippage(slippage)
        router = self.wallet.registry.router_address(chain_name)
        path = (input_address, output_address)

        try:
            amounts = await self.wallet.read_contract(
                chain_name, router, ROUTER_GET_AMOUNTS_OUT, [amount_in, list(path)]
            )
            amount_out = int(amounts[1])
        except Exception as e:
            logger.error(f"getAmountsOut failed on {chain_name} for {path}: {e}")
            raise QuoteUnavailable() from e

        amount_out_min = minimum_amount_out(amount_out, slippage)
        logger.debug(
            f"Quote on {chain_name}: in={amount_in} out={amount_out} min={amount_out_min} "
            f"slippage={slippage}%"
        )

        return Quote(
            amount_in=amount_in,
            amount_out=amount_out,
            amount_out_min=amount_out_min,
            path=path,
            slippage=slippage,
        )

"""Swap executor for Uniswap V2 style routers.

Flow:
1. Validate the request (tokens, amount, slippage)
2. Resolve both tokens; native sides use the wrapped-native address
3. Quote via ``getAmountsOut`` and apply slippage
4. Pick the router function from which sides are native
5. Approve the router for exactly ``amount_in`` when the input is ERC-20
6. Submit the swap and wait for its receipt
"""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from fairkit.chains import ChainConfig
from fairkit.config import EncryptionMode
from fairkit.contracts.swaps import SwapRequest, SwapResult
from fairkit.errors import (
    MissingToken,
    SameAddressSwap,
    SameTokenSwap,
    SwapNotSubmitted,
    TransactionNotSubmitted,
)
from fairkit.evm.abi import (
    ERC20_ALLOWANCE,
    ERC20_APPROVE,
    ERC20_DECIMALS,
    ROUTER_SWAP_EXACT_ETH_FOR_TOKENS,
    ROUTER_SWAP_EXACT_TOKENS_FOR_ETH,
    ROUTER_SWAP_EXACT_TOKENS_FOR_TOKENS,
    ContractFunction,
)
from fairkit.evm.wallet import EVMTransaction, WalletProvider
from fairkit.services.quote_service import DEFAULT_SLIPPAGE, Quote, QuoteService, validate_slippage
from fairkit.services.submission import encryption_for, is_missing_hash
from fairkit.services.token_resolver import ResolvedToken, resolve_token
from fairkit.utils.amounts import echo_amount, format_units, parse_amount, to_base_units

logger = logging.getLogger(__name__)

SWAP_DEADLINE_SECONDS = 300


class SwapRoute(str, Enum):
    """Router entry point, keyed by which side is native."""

    ETH_FOR_TOKENS = "swapExactETHForTokens"
    TOKENS_FOR_ETH = "swapExactTokensForETH"
    TOKENS_FOR_TOKENS = "swapExactTokensForTokens"


_ROUTE_FUNCTIONS: dict[SwapRoute, ContractFunction] = {
    SwapRoute.ETH_FOR_TOKENS: ROUTER_SWAP_EXACT_ETH_FOR_TOKENS,
    SwapRoute.TOKENS_FOR_ETH: ROUTER_SWAP_EXACT_TOKENS_FOR_ETH,
    SwapRoute.TOKENS_FOR_TOKENS: ROUTER_SWAP_EXACT_TOKENS_FOR_TOKENS,
}


@dataclass(frozen=True)
class SwapPlan:
    """Router call shape for one swap."""

    route: SwapRoute

    @property
    def function(self) -> ContractFunction:
        return _ROUTE_FUNCTIONS[self.route]

    @property
    def sends_value(self) -> bool:
        return self.route is SwapRoute.ETH_FOR_TOKENS

    @property
    def needs_approval(self) -> bool:
        """ERC-20 input must be approved; native input travels as value."""
        return self.route is not SwapRoute.ETH_FOR_TOKENS

    def build_args(
        self,
        amount_in: int,
        amount_out_min: int,
        path: list[str],
        recipient: str,
        deadline: int,
    ) -> list[Any]:
        if self.sends_value:
            return [amount_out_min, path, recipient, deadline]
        return [amount_in, amount_out_min, path, recipient, deadline]

    def value(self, amount_in: int) -> int:
        return amount_in if self.sends_value else 0


def plan_swap(input_token: ResolvedToken, output_token: ResolvedToken) -> SwapPlan:
    if input_token.is_native:
        return SwapPlan(SwapRoute.ETH_FOR_TOKENS)
    if output_token.is_native:
        return SwapPlan(SwapRoute.TOKENS_FOR_ETH)
    return SwapPlan(SwapRoute.TOKENS_FOR_TOKENS)


def swap_deadline(now: Optional[float] = None) -> int:
    """Unix seconds five minutes from now."""
    current = time.time() if now is None else now
    return int(current) + SWAP_DEADLINE_SECONDS


@dataclass(frozen=True)
class PreparedSwap:
    """A validated, quoted swap that has not been submitted yet."""

    chain: ChainConfig
    input_token: ResolvedToken
    output_token: ResolvedToken
    router: str
    output_decimals: int
    quote: Quote
    plan: SwapPlan

    @property
    def amount_out(self) -> str:
        return format_units(self.quote.amount_out, self.output_decimals)

    @property
    def amount_out_min(self) -> str:
        return format_units(self.quote.amount_out_min, self.output_decimals)


class SwapService:
    """Executes exact-input swaps through a chain's router."""

    def __init__(self, wallet: WalletProvider, quotes: Optional[QuoteService] = None):
        self.wallet = wallet
        self.quotes = quotes or QuoteService(wallet)

    async def prepare(self, request: SwapRequest) -> PreparedSwap:
        """Validate, resolve and quote a swap without sending anything.

        Raises:
            UnsupportedChain: unknown chain
            MissingToken / SameTokenSwap / SameAddressSwap
            MissingAmount / InvalidAmount / ZeroAmount / NegativeAmount
            InvalidSlippage: slippage outside [0, 50]
            UnsupportedToken: unknown token symbol
            RouterNotConfigured: chain has no router
            QuoteUnavailable: the router could not quote the pair
        """
        chain = self.wallet.get_chain(request.chain)

        if request.input_token is None or request.output_token is None:
            raise MissingToken()
        if request.input_token.lower() == request.output_token.lower():
            raise SameTokenSwap(request.input_token)

        parse_amount(request.amount)
        slippage = (
            DEFAULT_SLIPPAGE if request.slippage is None else validate_slippage(request.slippage)
        )

        input_token = resolve_token(request.input_token, chain)
        output_token = resolve_token(request.output_token, chain)
        if input_token.address.lower() == output_token.address.lower():
            raise SameAddressSwap(request.input_token, request.output_token, input_token.address)

        router = self.wallet.registry.router_address(chain.name)

        input_decimals = await self.wallet.read_contract(chain.name, input_token.address, ERC20_DECIMALS)
        output_decimals = await self.wallet.read_contract(chain.name, output_token.address, ERC20_DECIMALS)
        amount_in = to_base_units(request.amount, input_decimals)

        quote = await self.quotes.calculate_amount_out(
            amount_in, input_token.address, output_token.address, slippage, chain.name
        )

        return PreparedSwap(
            chain=chain,
            input_token=input_token,
            output_token=output_token,
            router=router,
            output_decimals=output_decimals,
            quote=quote,
            plan=plan_swap(input_token, output_token),
        )

    async def swap(
        self,
        request: SwapRequest,
        encryption_mode: Optional[EncryptionMode] = None,
    ) -> SwapResult:
        """Execute a swap and wait for it to be mined.

        Args:
            request: Validated swap request
            encryption_mode: Override for the wallet's encryption mode

        Returns:
            SwapResult for the confirmed swap

        Raises:
            Everything ``prepare`` raises, plus
            TransactionNotSubmitted: approval broadcast returned no hash
            SwapNotSubmitted: swap broadcast returned no hash
            TransactionReverted: approval or swap receipt status 0
        """
        prepared = await self.prepare(request)
        chain, plan, quote = prepared.chain, prepared.plan, prepared.quote
        encrypt = encryption_for(self.wallet, chain, request.encrypt, encryption_mode)

        logger.info(
            f"Swapping {request.amount} {request.input_token} -> {request.output_token} on "
            f"{chain.name} via {plan.route.value}: out={quote.amount_out} min={quote.amount_out_min}"
        )

        approval_hash = None
        if plan.needs_approval:
            approval_hash = await self.ensure_allowance(
                chain.name, prepared.input_token.address, prepared.router, quote.amount_in, encrypt
            )

        args = plan.build_args(
            quote.amount_in,
            quote.amount_out_min,
            list(quote.path),
            self.wallet.address,
            swap_deadline(),
        )
        transaction = EVMTransaction(
            to=prepared.router,
            data=plan.function.encode(args),
            value=plan.value(quote.amount_in),
        )

        sent = await self.wallet.send_transaction(chain.name, transaction, encrypt)
        if is_missing_hash(sent.tx_hash):
            raise SwapNotSubmitted()

        await self.wallet.wait_for_tx(chain.name, sent.tx_hash)
        logger.info(f"Swap confirmed on {chain.name}: {sent.tx_hash}")

        return SwapResult(
            chain=chain.name,
            tx_hash=sent.tx_hash,
            route=plan.route.value,
            input_token=request.input_token,
            output_token=request.output_token,
            amount_in=echo_amount(request.amount),
            amount_out=prepared.amount_out,
            amount_out_min=prepared.amount_out_min,
            approval_tx_hash=approval_hash,
            encryption_requested=request.encrypt,
            encrypted=sent.encrypted,
        )

    async def ensure_allowance(
        self,
        chain_name: str,
        token_address: str,
        spender: str,
        amount: int,
        encrypt: bool,
    ) -> Optional[str]:
        """Approve ``spender`` for exactly ``amount`` if the allowance is short.

        Returns:
            Approval tx hash if an approval was sent, None otherwise
        """
        allowance = await self.wallet.read_contract(
            chain_name, token_address, ERC20_ALLOWANCE, [self.wallet.address, spender]
        )
        if allowance >= amount:
            logger.info(f"Token already approved: allowance={allowance}")
            return None

        logger.info(f"Approving token: {token_address} for {spender} amount={amount}")
        transaction = EVMTransaction(
            to=token_address,
            data=ERC20_APPROVE.encode([spender, amount]),
            value=0,
        )
        sent = await self.wallet.send_transaction(chain_name, transaction, encrypt)
        if is_missing_hash(sent.tx_hash):
            raise TransactionNotSubmitted("Approval transaction hash not received")

        await self.wallet.wait_for_tx(chain_name, sent.tx_hash)
        logger.info(f"Approval confirmed: {sent.tx_hash}")
        return sent.tx_hash

"""Agent actions: balance, transfer and swap.

Each action renders its prompt, asks the injected extractor (the language
model) for parameters, builds a typed request and runs the matching
service. Failures come back as an unsuccessful ``ActionResult`` with copy
chosen by error kind.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel

from fairkit.agent.intents import (
    build_balance_request,
    build_swap_request,
    build_transfer_request,
    parse_key_value_xml,
)
from fairkit.agent.templates import (
    BALANCE_TEMPLATE,
    SWAP_TEMPLATE,
    TRANSFER_TEMPLATE,
    render_template,
)
from fairkit.config import EncryptionMode
from fairkit.errors import FairKitError
from fairkit.evm.rpc import ReceiptTimeout, RPCError
from fairkit.evm.wallet import WalletProvider
from fairkit.services import BalanceService, SwapService, TransferService
from fairkit.utils.locks import LockTimeoutError

logger = logging.getLogger(__name__)

# Prompt in, raw model output out
ParameterExtractor = Callable[[str], Awaitable[str]]

ACTION_ERRORS = (FairKitError, RPCError, LockTimeoutError, ValueError)

INVALID_CONTENT = "Invalid content"


@dataclass
class ActionResult:
    """What an action reports back to the conversation."""

    success: bool
    text: str
    content: dict[str, Any] = field(default_factory=dict)


class WalletInfoProvider:
    """Supplies wallet context to the prompts."""

    def __init__(self, wallet: WalletProvider):
        self.wallet = wallet

    def get(self) -> str:
        return self.wallet.describe()


# ======================
# Error copy
# ======================

_KIND_COPY: dict[str, Callable[[FairKitError], str]] = {
    "UnsupportedToken": lambda e: f"Token not supported. {e.message}",
    "QuoteUnavailable": lambda e: (
        "Insufficient liquidity for this trading pair. Try a different pair or smaller amount."
    ),
    "TransactionReverted": lambda e: (
        f"{e.message}. For swaps this is usually slippage; try increasing slippage tolerance."
    ),
    "MissingRecipient": lambda e: "Please provide a recipient wallet address.",
    "EncryptionFailed": lambda e: f"{e.message}. The transaction was not sent.",
    "WalletNotConfigured": lambda e: "No wallet is configured. Set EVM_WALLET_PRIVATE_KEY.",
}


def describe_error(exc: Exception) -> str:
    """User-facing copy for a failed operation."""
    if isinstance(exc, ReceiptTimeout):
        return (
            f"Transaction {exc.tx_hash} was sent but not confirmed in time. "
            "Check the explorer before retrying."
        )

    if isinstance(exc, RPCError):
        lowered = str(exc).lower()
        if "insufficient funds" in lowered:
            return (
                "Insufficient funds for the transaction. Please check your balance "
                "and try again with a smaller amount."
            )
        if "underpriced" in lowered:
            return "Transaction underpriced. Please try again with a higher gas price."
        if "invalid address" in lowered:
            return "The address provided is invalid. Please provide a valid wallet address."
        if "malformed data" in lowered:
            return "The token address did not respond like an ERC-20 contract. Please check the address."
        return f"Network error: {exc}"

    if isinstance(exc, LockTimeoutError):
        return "Another transaction from this wallet is still being submitted. Please try again."

    if isinstance(exc, FairKitError):
        copy = _KIND_COPY.get(exc.kind)
        return copy(exc) if copy else exc.message

    return str(exc)


# ======================
# Actions
# ======================


class Action(ABC):
    """Base action: extract parameters, build a request, execute."""

    name: str = ""
    description: str = ""
    similes: tuple[str, ...] = ()
    template: str = ""
    failure_prefix: str = ""

    def __init__(
        self,
        wallet: WalletProvider,
        extractor: ParameterExtractor,
        default_chain: Optional[str] = None,
        encryption_mode: Optional[EncryptionMode] = None,
    ):
        self.wallet = wallet
        self.extractor = extractor
        self.wallet_info = WalletInfoProvider(wallet)
        self.default_chain = default_chain or wallet.settings.default_chain
        self.encryption_mode = encryption_mode

    def validate(self) -> bool:
        """Whether the action can run at all."""
        return True

    async def extract(self, text: str, recent_messages: str = "") -> Optional[dict[str, str]]:
        prompt = render_template(
            self.template,
            recent_messages=recent_messages or text,
            wallet_info=self.wallet_info.get(),
            default_chain=self.default_chain,
        )
        output = await self.extractor(prompt)
        content = parse_key_value_xml(output)
        logger.debug(f"{self.name} extracted content: {content}")
        return content

    async def handle(self, text: str, recent_messages: str = "") -> ActionResult:
        """Run the action for one user message."""
        logger.info(f"Starting {self.name} action")

        content = await self.extract(text, recent_messages)
        if content is None:
            logger.error(f"Invalid content for {self.name} action")
            return ActionResult(
                success=False,
                text=f"Unable to process {self.name} request. Invalid content provided.",
                content={"error": INVALID_CONTENT},
            )

        try:
            request = self.build_request(content, text)
            return await self.execute(request)
        except ACTION_ERRORS as e:
            logger.error(f"Error during {self.name}: {e}")
            message = describe_error(e)
            return ActionResult(
                success=False,
                text=f"{self.failure_prefix}{message}",
                content={"error": message, "kind": getattr(e, "kind", type(e).__name__)},
            )

    @abstractmethod
    def build_request(self, content: dict[str, str], text: str) -> BaseModel:
        ...

    @abstractmethod
    async def execute(self, request: Any) -> ActionResult:
        ...


class GetBalanceAction(Action):
    name = "getBalance"
    description = "Get the balance of a token for the given address"
    similes = ("GET_BALANCE", "CHECK_BALANCE")
    template = BALANCE_TEMPLATE
    failure_prefix = "Get balance failed: "

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.service = BalanceService(self.wallet)

    def build_request(self, content, text):
        return build_balance_request(content, self.default_chain)

    async def execute(self, request) -> ActionResult:
        result = await self.service.get_balance(request)
        return ActionResult(
            success=True,
            text=f"Balance of {result.address} on {result.chain}:\n{result.token}: {result.amount}",
            content=result.model_dump(),
        )


class TransferAction(Action):
    name = "transfer"
    description = "Transfer native or ERC-20 tokens to an address on the same chain"
    similes = ("TRANSFER", "SEND_TOKENS", "TOKEN_TRANSFER", "MOVE_TOKENS")
    template = TRANSFER_TEMPLATE
    failure_prefix = "Transfer failed: "

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.service = TransferService(self.wallet)

    def validate(self) -> bool:
        return self.wallet.settings.has_wallet

    def build_request(self, content, text):
        return build_transfer_request(content, text, self.default_chain)

    async def execute(self, request) -> ActionResult:
        result = await self.service.transfer(request, encryption_mode=self.encryption_mode)
        explorer = self.wallet.get_chain(result.chain).explorer_tx_url(result.tx_hash)
        return ActionResult(
            success=True,
            text=(
                f"Successfully transferred {result.amount} {result.token} to {result.recipient}\n"
                f"Transaction Hash: {result.tx_hash}\n"
                f"Transaction Encryption: {result.encrypted}\n"
                f"Explorer: {explorer}"
            ),
            content=result.model_dump(),
        )


class SwapAction(Action):
    name = "swap"
    description = "Swap tokens using the Uniswap V2 router on the specified chain"
    similes = ("SWAP", "EXCHANGE", "TRADE", "CONVERT_TOKENS", "ENCRYPT_SWAP")
    template = SWAP_TEMPLATE
    failure_prefix = "Swap failed: "

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.service = SwapService(self.wallet)

    def validate(self) -> bool:
        return self.wallet.settings.has_wallet

    def build_request(self, content, text):
        return build_swap_request(content, text, self.default_chain)

    async def execute(self, request) -> ActionResult:
        result = await self.service.swap(request, encryption_mode=self.encryption_mode)
        explorer = self.wallet.get_chain(result.chain).explorer_tx_url(result.tx_hash)
        return ActionResult(
            success=True,
            text=(
                f"Successfully swapped {result.amount_in} {result.input_token} for "
                f"{result.amount_out} {result.output_token}\n"
                f"Transaction Hash: {result.tx_hash}\n"
                f"Transaction Encryption: {result.encrypted}\n"
                f"Explorer: {explorer}"
            ),
            content=result.model_dump(),
        )


def create_actions(
    wallet: WalletProvider,
    extractor: ParameterExtractor,
    default_chain: Optional[str] = None,
) -> list[Action]:
    """All actions, sharing one wallet and extractor."""
    return [
        action_cls(wallet, extractor, default_chain=default_chain)
        for action_cls in (GetBalanceAction, TransferAction, SwapAction)
    ]

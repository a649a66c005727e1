"""Intent extraction: model output and raw text to typed requests.

The model returns untyped key/value content; this module merges it with
what can be read directly from the user's text and produces validated
request contracts. Nothing past this module inspects raw maps.
"""

import logging
import re
from typing import Optional

from fairkit.contracts import BalanceRequest, SwapRequest, TransferRequest
from fairkit.contracts.common import none_if_blank, to_bool

logger = logging.getLogger(__name__)

RESPONSE_PATTERN = re.compile(r"<response>(.*?)</response>", re.DOTALL | re.IGNORECASE)
TAG_PATTERN = re.compile(r"<(\w+)>(.*?)</\1>", re.DOTALL)

SWAP_PATTERN = re.compile(
    r"swap\s+([0-9.]+)\s+([a-zA-Z0-9]+)\s+(?:for|to)\s+([a-zA-Z0-9]+)", re.IGNORECASE
)
TRANSFER_PATTERN = re.compile(
    r"transfer\s+([0-9.]+)\s+([a-zA-Z0-9]+)\s+to\s+(0x[a-fA-F0-9]{40})", re.IGNORECASE
)

ENCRYPTION_KEYWORDS = (
    "bite enable",
    "bite encrypt",
    "encrypt",
    "encrypted",
    "bite true",
    "mev protect",
    "mev protection",
    "bite",
)


def parse_key_value_xml(text: Optional[str]) -> Optional[dict[str, str]]:
    """Parse the first ``<response>`` block into a flat dict.

    Returns None when the text has no response block.
    """
    if not text:
        return None
    match = RESPONSE_PATTERN.search(text)
    if not match:
        return None
    return {key: value.strip() for key, value in TAG_PATTERN.findall(match.group(1))}


def wants_encryption(text: str) -> bool:
    """True if the user's text asks for BITE encryption or MEV protection."""
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in ENCRYPTION_KEYWORDS)


def match_swap(text: str) -> dict[str, str]:
    """Read "swap <amount> <token> for|to <token>" straight from the text."""
    match = SWAP_PATTERN.search(text or "")
    if not match:
        return {}
    amount, input_token, output_token = match.groups()
    return {
        "amount": amount,
        "input_token": input_token.upper(),
        "output_token": output_token.upper(),
    }


def match_transfer(text: str) -> dict[str, str]:
    """Read "transfer <amount> <token> to 0x..." straight from the text."""
    match = TRANSFER_PATTERN.search(text or "")
    if not match:
        return {}
    amount, token, to_address = match.groups()
    return {"amount": amount, "token": token.upper(), "to_address": to_address}


def _first(*values) -> Optional[str]:
    for value in values:
        value = none_if_blank(value)
        if value is not None:
            return value
    return None


def _chain(content: dict, default_chain: str) -> str:
    chain = none_if_blank(content.get("chain"))
    return chain.strip().lower() if chain else default_chain


def build_balance_request(content: dict, default_chain: str) -> BalanceRequest:
    return BalanceRequest(
        chain=_chain(content, default_chain),
        address=content.get("address"),
        token=_first(content.get("token"), content.get("tokenSymbol")),
    )


def build_transfer_request(content: dict, text: str, default_chain: str) -> TransferRequest:
    """Merge model content with the text itself.

    A token read directly from "transfer N TOKEN to 0x..." wins over the
    model's; encryption is requested by the model's flag or by keyword.
    """
    direct = match_transfer(text)
    request = TransferRequest(
        chain=_chain(content, default_chain),
        to_address=_first(content.get("toAddress"), direct.get("to_address")),
        amount=_first(content.get("amount"), direct.get("amount")),
        token=_first(direct.get("token"), content.get("token"), content.get("tokenSymbol")),
        data=content.get("data"),
        encrypt=to_bool(content.get("isBite")) or wants_encryption(text),
    )
    logger.debug(f"Transfer request from intent: {request}")
    return request


def build_swap_request(content: dict, text: str, default_chain: str) -> SwapRequest:
    """Model content first, falling back to "swap N A for B" in the text."""
    direct = match_swap(text)
    request = SwapRequest(
        chain=_chain(content, default_chain),
        input_token=_first(content.get("inputToken"), direct.get("input_token")),
        output_token=_first(content.get("outputToken"), direct.get("output_token")),
        amount=_first(content.get("amount"), direct.get("amount")),
        slippage=content.get("slippage"),
        encrypt=to_bool(content.get("isBite")) or wants_encryption(text),
    )
    logger.debug(f"Swap request from intent: {request}")
    return request

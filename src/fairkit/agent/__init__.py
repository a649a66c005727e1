"""Conversational agent edge: prompts, intent extraction and actions."""

from fairkit.agent.actions import (
    Action,
    ActionResult,
    GetBalanceAction,
    SwapAction,
    TransferAction,
    WalletInfoProvider,
    create_actions,
    describe_error,
)

__all__ = [
    "Action",
    "ActionResult",
    "GetBalanceAction",
    "SwapAction",
    "TransferAction",
    "WalletInfoProvider",
    "create_actions",
    "describe_error",
]

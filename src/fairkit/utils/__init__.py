"""Utility modules for fairkit."""

from fairkit.utils.amounts import echo_amount, format_units, parse_amount, to_base_units
from fairkit.utils.locks import AccountSubmissionLock, LockTimeoutError, get_account_lock

__all__ = [
    "AccountSubmissionLock",
    "LockTimeoutError",
    "get_account_lock",
    "echo_amount",
    "format_units",
    "parse_amount",
    "to_base_units",
]

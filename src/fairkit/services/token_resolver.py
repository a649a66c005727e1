"""Token reference resolution.

A token reference is a symbol from the chain's token table, the chain's
native symbol, or a literal 0x address. Native references resolve to the
wrapped-native contract because the router only speaks ERC-20; the
``is_native`` flag then picks the execution path.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fairkit.chains import ChainConfig
from fairkit.contracts.common import none_if_blank
from fairkit.errors import MissingToken, UnsupportedToken

logger = logging.getLogger(__name__)

ADDRESS_PREFIX = "0x"
ADDRESS_LENGTH = 42


@dataclass(frozen=True)
class ResolvedToken:
    """A token reference reduced to an on-chain address."""

    address: str
    is_native: bool


def is_address_reference(reference: str) -> bool:
    """Shape check only: 0x prefix and 40 hex-digit length."""
    return reference.startswith(ADDRESS_PREFIX) and len(reference) == ADDRESS_LENGTH


def is_native_reference(reference: Optional[str], chain: ChainConfig) -> bool:
    """Blank references and the native symbol (any case) mean native."""
    reference = none_if_blank(reference)
    if reference is None:
        return True
    return reference.strip().lower() == chain.native_symbol.lower()


def resolve_token(
    reference: Optional[str],
    chain: ChainConfig,
    default_native: bool = False,
) -> ResolvedToken:
    """Resolve a token reference on a chain.

    Args:
        reference: Symbol, native symbol, 0x address, or blank
        chain: Chain to resolve against
        default_native: Treat blank references as the native token
            (transfers and balances); otherwise blank is ``MissingToken``

    Raises:
        MissingToken: blank reference without ``default_native``
        UnsupportedToken: symbol not in the chain's token table
    """
    reference = none_if_blank(reference)
    if reference is None:
        if not default_native:
            raise MissingToken()
        reference = chain.native_symbol

    reference = reference.strip()

    if is_address_reference(reference):
        return ResolvedToken(address=reference, is_native=False)

    if reference.lower() == chain.native_symbol.lower():
        wrapped = chain.token_address(chain.wrapped_native_symbol)
        if not wrapped:
            raise UnsupportedToken(chain.wrapped_native_symbol, chain.name)
        return ResolvedToken(address=wrapped, is_native=True)

    address = chain.token_address(reference)
    if not address:
        raise UnsupportedToken(reference, chain.name)

    logger.debug(f"Resolved {reference} on {chain.name} to {address}")
    return ResolvedToken(address=address, is_native=False)

"""Balance reader.

Native balances come from ``eth_getBalance`` at 18 decimals; ERC-20
balances read ``balanceOf`` and ``decimals`` from the token itself.
"""

import logging

from fairkit.chains import NATIVE_DECIMALS
from fairkit.contracts.balances import BalanceRequest, BalanceResult
from fairkit.evm.abi import ERC20_BALANCE_OF, ERC20_DECIMALS
from fairkit.evm.wallet import WalletProvider
from fairkit.services.token_resolver import resolve_token
from fairkit.utils.amounts import format_units

logger = logging.getLogger(__name__)


class BalanceService:
    """Reads balances for any address on a registered chain."""

    def __init__(self, wallet: WalletProvider):
        self.wallet = wallet

    async def get_balance(self, request: BalanceRequest) -> BalanceResult:
        """Get one token balance.

        Args:
            request: chain, optional address (default: own wallet) and
                optional token (default: native)

        Returns:
            BalanceResult with a human-readable amount
        """
        chain = self.wallet.get_chain(request.chain)
        address = self.wallet.format_address(request.address, chain.name)
        token = resolve_token(request.token, chain, default_native=True)

        if token.is_native:
            raw = await self.wallet.get_native_balance(chain.name, address)
            amount = format_units(raw, NATIVE_DECIMALS)
            label = chain.native_symbol
        else:
            amount = await self.get_token_balance(chain.name, address, token.address)
            label = request.token

        logger.info(f"Balance of {address} on {chain.name}: {amount} {label}")
        return BalanceResult(chain=chain.name, address=address, token=label, amount=amount)

    async def get_token_balance(self, chain_name: str, address: str, token_address: str) -> str:
        """ERC-20 balance formatted with the token's own decimals."""
        raw = await self.wallet.read_contract(chain_name, token_address, ERC20_BALANCE_OF, [address])
        decimals = await self.wallet.read_contract(chain_name, token_address, ERC20_DECIMALS)
        return format_units(raw, decimals)

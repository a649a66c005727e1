"""Transfer executor for native and ERC-20 tokens.

Native transfers send value directly (optionally with extra call data).
ERC-20 transfers call ``transfer(recipient, amount)`` on the token with
zero value. Both wait for the receipt before reporting success.
"""

import logging
from typing import Optional

from fairkit.chains import NATIVE_DECIMALS, ChainConfig
from fairkit.config import EncryptionMode
from fairkit.contracts.transfers import TransferRequest, TransferResult
from fairkit.errors import MissingAmount, MissingRecipient, TransactionNotSubmitted
from fairkit.evm.abi import ERC20_DECIMALS, ERC20_TRANSFER
from fairkit.evm.wallet import EVMTransaction, WalletProvider
from fairkit.services.submission import encryption_for, is_missing_hash
from fairkit.services.token_resolver import is_native_reference, resolve_token
from fairkit.utils.amounts import echo_amount, parse_amount, to_base_units

logger = logging.getLogger(__name__)


def extra_call_data(data: Optional[str]) -> Optional[str]:
    """Extra data is honoured only when 0x-prefixed and non-empty."""
    if data and data.startswith("0x") and data != "0x":
        return data
    return None


class TransferService:
    """Sends native coins and ERC-20 tokens from the wallet."""

    def __init__(self, wallet: WalletProvider):
        self.wallet = wallet

    async def transfer(
        self,
        request: TransferRequest,
        encryption_mode: Optional[EncryptionMode] = None,
    ) -> TransferResult:
        """Execute a transfer and wait for it to be mined.

        Args:
            request: Validated transfer request
            encryption_mode: Override for the wallet's encryption mode

        Returns:
            TransferResult for the confirmed transaction

        Raises:
            UnsupportedChain: unknown chain
            MissingRecipient: no recipient given
            MissingAmount / InvalidAmount / ZeroAmount / NegativeAmount
            UnsupportedToken: unknown token symbol
            TransactionNotSubmitted: broadcast returned no hash
            TransactionReverted: receipt status 0
        """
        chain = self.wallet.get_chain(request.chain)

        if request.to_address is None:
            raise MissingRecipient()
        recipient = self.wallet.format_address(request.to_address, chain.name)

        if request.amount is not None:
            parse_amount(request.amount)

        encrypt = encryption_for(self.wallet, chain, request.encrypt, encryption_mode)
        data = extra_call_data(request.data)

        if is_native_reference(request.token, chain):
            token_label = chain.native_symbol
            transaction = self._native_transfer(recipient, request.amount, data)
        else:
            token_label = request.token
            transaction = await self._token_transfer(chain, recipient, request.token, request.amount)
            data = None

        logger.info(
            f"Transferring {request.amount} {token_label} to {recipient} on {chain.name} "
            f"(encrypt={encrypt})"
        )

        sent = await self.wallet.send_transaction(chain.name, transaction, encrypt)
        if is_missing_hash(sent.tx_hash):
            raise TransactionNotSubmitted()

        await self.wallet.wait_for_tx(chain.name, sent.tx_hash)
        logger.info(f"Transfer confirmed on {chain.name}: {sent.tx_hash}")

        return TransferResult(
            chain=chain.name,
            tx_hash=sent.tx_hash,
            recipient=recipient,
            token=token_label,
            amount=echo_amount(request.amount),
            data=data,
            encryption_requested=request.encrypt,
            encrypted=sent.encrypted,
        )

    def _native_transfer(self, recipient: str, amount: Optional[str], data: Optional[str]) -> EVMTransaction:
        if amount is None:
            raise MissingAmount()
        return EVMTransaction(
            to=recipient,
            data=data or "0x",
            value=to_base_units(amount, NATIVE_DECIMALS),
        )

    async def _token_transfer(
        self,
        chain: ChainConfig,
        recipient: str,
        token: str,
        amount: Optional[str],
    ) -> EVMTransaction:
        resolved = resolve_token(token, chain)
        if amount is None:
            raise MissingAmount()

        decimals = await self.wallet.read_contract(chain.name, resolved.address, ERC20_DECIMALS)
        value = to_base_units(amount, decimals)
        return EVMTransaction(
            to=resolved.address,
            data=ERC20_TRANSFER.encode([recipient, value]),
            value=0,
        )

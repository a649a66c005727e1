"""Tests for the transfer executor."""

import pytest
from eth_abi import decode as abi_decode

from fairkit.chains import ChainRegistry
from fairkit.config import EncryptionMode
from fairkit.contracts import TransferRequest
from fairkit.errors import (
    InvalidAmount,
    MissingAmount,
    MissingRecipient,
    NegativeAmount,
    TransactionNotSubmitted,
    UnsupportedChain,
    UnsupportedToken,
    ZeroAmount,
)
from fairkit.evm.abi import ERC20_TRANSFER
from fairkit.services.transfer_service import TransferService, extra_call_data

from tests.conftest import CHAIN, RECIPIENT, USDC


def decode_transfer(data: str):
    payload = bytes.fromhex(data[2:])
    assert payload[:4] == ERC20_TRANSFER.selector
    return abi_decode(["address", "uint256"], payload[4:])


class TestNativeTransfer:
    """Tests for native FAIR transfers."""

    @pytest.mark.asyncio
    async def test_native_transfer_manual_mode(self, wallet, chain_state):
        request = TransferRequest(chain=CHAIN, to_address=RECIPIENT, amount="1.0")

        result = await TransferService(wallet).transfer(request)

        _, tx, encrypt = chain_state.sent[0]
        assert tx.to == RECIPIENT
        assert tx.value == 10**18
        assert tx.data == "0x"
        assert encrypt is False
        assert result.encrypted is False
        assert result.encryption_requested is False
        assert result.amount == "1.0"
        assert result.token == "FAIR"

    @pytest.mark.asyncio
    async def test_native_transfer_waits_for_receipt(self, wallet, chain_state):
        request = TransferRequest(chain=CHAIN, to_address=RECIPIENT, amount="2")

        result = await TransferService(wallet).transfer(request)

        wallet.wait_for_tx.assert_awaited_once_with(CHAIN, result.tx_hash)
        assert result.amount == "2.0"

    @pytest.mark.asyncio
    async def test_extra_data_is_attached(self, wallet, chain_state):
        request = TransferRequest(
            chain=CHAIN, to_address=RECIPIENT, amount="1", data="0xdeadbeef"
        )

        result = await TransferService(wallet).transfer(request)

        assert chain_state.sent[0][1].data == "0xdeadbeef"
        assert result.data == "0xdeadbeef"

    @pytest.mark.parametrize("data", [None, "null", "0x", "deadbeef", ""])
    def test_invalid_extra_data_ignored(self, data):
        assert extra_call_data(data) is None


class TestTokenTransfer:
    """Tests for ERC-20 transfers."""

    @pytest.mark.asyncio
    async def test_usdc_transfer_encodes_base_units(self, wallet, chain_state):
        request = TransferRequest(chain=CHAIN, to_address=RECIPIENT, amount="100.0", token="USDC")

        result = await TransferService(wallet).transfer(request)

        _, tx, _ = chain_state.sent[0]
        recipient, value = decode_transfer(tx.data)
        assert tx.to == USDC
        assert tx.value == 0
        assert recipient.lower() == RECIPIENT.lower()
        assert value == 100_000_000
        assert result.amount == "100.0"
        assert result.token == "USDC"
        wallet.wait_for_tx.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_unsupported_token(self, wallet, chain_state):
        request = TransferRequest(chain=CHAIN, to_address=RECIPIENT, amount="1", token="DOGE")

        with pytest.raises(UnsupportedToken):
            await TransferService(wallet).transfer(request)

        assert chain_state.sent == []


class TestTransferValidation:
    """Tests for request validation before any network call."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("to_address", [None, "", "null", "undefined"])
    async def test_missing_recipient(self, wallet, to_address):
        request = TransferRequest(chain=CHAIN, to_address=to_address, amount="1")

        with pytest.raises(MissingRecipient):
            await TransferService(wallet).transfer(request)

        wallet.send_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "amount,error",
        [("0", ZeroAmount), ("-5", NegativeAmount), ("lots", InvalidAmount)],
    )
    async def test_bad_amount(self, wallet, amount, error):
        request = TransferRequest(chain=CHAIN, to_address=RECIPIENT, amount=amount)

        with pytest.raises(error):
            await TransferService(wallet).transfer(request)

        wallet.send_transaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_amount(self, wallet):
        request = TransferRequest(chain=CHAIN, to_address=RECIPIENT)

        with pytest.raises(MissingAmount):
            await TransferService(wallet).transfer(request)

    @pytest.mark.asyncio
    async def test_amount_below_token_precision(self, wallet, chain_state):
        request = TransferRequest(chain=CHAIN, to_address=RECIPIENT, amount="0.0000001", token="USDC")

        with pytest.raises(ZeroAmount, match="smallest unit"):
            await TransferService(wallet).transfer(request)

        assert chain_state.sent == []

    @pytest.mark.asyncio
    async def test_unsupported_chain(self, wallet):
        request = TransferRequest(chain="mainnet", to_address=RECIPIENT, amount="1")

        with pytest.raises(UnsupportedChain):
            await TransferService(wallet).transfer(request)


class TestTransferSubmission:
    """Tests for broadcast outcomes and encryption."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("tx_hash", [None, "", "0x", "0x" + "0" * 64])
    async def test_missing_hash_raises_without_waiting(self, wallet, chain_state, tx_hash):
        chain_state.hash_override = lambda index: tx_hash
        request = TransferRequest(chain=CHAIN, to_address=RECIPIENT, amount="1")

        with pytest.raises(TransactionNotSubmitted):
            await TransferService(wallet).transfer(request)

        wallet.wait_for_tx.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_manual_mode_honours_request_flag(self, wallet, chain_state):
        request = TransferRequest(chain=CHAIN, to_address=RECIPIENT, amount="1", encrypt=True)

        result = await TransferService(wallet).transfer(request)

        assert chain_state.sent[0][2] is True
        assert result.encrypted is True

    @pytest.mark.asyncio
    async def test_automatic_mode_forces_encryption(self, wallet, chain_state):
        request = TransferRequest(chain=CHAIN, to_address=RECIPIENT, amount="1", encrypt=False)

        result = await TransferService(wallet).transfer(
            request, encryption_mode=EncryptionMode.AUTOMATIC
        )

        assert chain_state.sent[0][2] is True
        assert result.encrypted is True
        assert result.encryption_requested is False

    @pytest.mark.asyncio
    async def test_chain_encryption_default(self, wallet, chain_state):
        wallet.registry = ChainRegistry({"fair-testnet": {"encryption_default": True}})
        request = TransferRequest(chain=CHAIN, to_address=RECIPIENT, amount="1")

        result = await TransferService(wallet).transfer(request)

        assert result.encrypted is True

    @pytest.mark.asyncio
    async def test_explicit_manual_mode_overrides_chain_default(self, wallet, chain_state):
        wallet.registry = ChainRegistry({"fair-testnet": {"encryption_default": True}})
        request = TransferRequest(chain=CHAIN, to_address=RECIPIENT, amount="1")

        result = await TransferService(wallet).transfer(
            request, encryption_mode=EncryptionMode.MANUAL
        )

        assert result.encrypted is False

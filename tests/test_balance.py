"""Tests for the balance reader."""

import pytest

from fairkit.contracts import BalanceRequest
from fairkit.errors import UnsupportedChain, UnsupportedToken
from fairkit.services.balance_service import BalanceService

from tests.conftest import CHAIN, RECIPIENT, TEST_ADDRESS, USDC


class TestNativeBalance:
    """Tests for native FAIR balances."""

    @pytest.mark.asyncio
    async def test_own_native_balance(self, wallet, chain_state):
        chain_state.native_balances[TEST_ADDRESS.lower()] = 1_500_000_000_000_000_000

        result = await BalanceService(wallet).get_balance(BalanceRequest(chain=CHAIN))

        assert result.address == TEST_ADDRESS
        assert result.token == "FAIR"
        assert result.amount == "1.5"

    @pytest.mark.asyncio
    async def test_native_balance_of_other_address(self, wallet, chain_state):
        chain_state.native_balances[RECIPIENT.lower()] = 10**18

        result = await BalanceService(wallet).get_balance(
            BalanceRequest(chain=CHAIN, address=RECIPIENT, token="fair")
        )

        assert result.address == RECIPIENT
        assert result.amount == "1"
        wallet.get_native_balance.assert_awaited_once_with(CHAIN, RECIPIENT)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("address", ["null", "undefined", "", "USDC", "fair"])
    async def test_placeholder_address_uses_wallet(self, wallet, address):
        result = await BalanceService(wallet).get_balance(
            BalanceRequest(chain=CHAIN, address=address)
        )

        assert result.address == TEST_ADDRESS


class TestTokenBalance:
    """Tests for ERC-20 balances."""

    @pytest.mark.asyncio
    async def test_usdc_balance_uses_token_decimals(self, wallet, chain_state):
        chain_state.balances[(USDC.lower(), TEST_ADDRESS.lower())] = 100_000_000

        result = await BalanceService(wallet).get_balance(
            BalanceRequest(chain=CHAIN, token="USDC")
        )

        assert result.token == "USDC"
        assert result.amount == "100"
        names = [call.args[2].name for call in wallet.read_contract.await_args_list]
        assert names == ["balanceOf", "decimals"]

    @pytest.mark.asyncio
    async def test_token_by_address_echoes_reference(self, wallet, chain_state):
        chain_state.balances[(USDC.lower(), TEST_ADDRESS.lower())] = 250_000

        result = await BalanceService(wallet).get_balance(
            BalanceRequest(chain=CHAIN, token=USDC)
        )

        assert result.token == USDC
        assert result.amount == "0.25"

    @pytest.mark.asyncio
    async def test_unsupported_token(self, wallet):
        with pytest.raises(UnsupportedToken):
            await BalanceService(wallet).get_balance(BalanceRequest(chain=CHAIN, token="DOGE"))

        wallet.read_contract.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unsupported_chain(self, wallet):
        with pytest.raises(UnsupportedChain):
            await BalanceService(wallet).get_balance(BalanceRequest(chain="mainnet"))

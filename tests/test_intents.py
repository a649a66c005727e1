"""Tests for intent parsing and request building."""

import pytest

from fairkit.agent.intents import (
    build_balance_request,
    build_swap_request,
    build_transfer_request,
    match_swap,
    match_transfer,
    parse_key_value_xml,
    wants_encryption,
)

from tests.conftest import RECIPIENT

DEFAULT_CHAIN = "fair-testnet"


class TestParseKeyValueXml:
    def test_flat_response(self):
        text = """Sure, here you go:
        <response>
            <chain>fair-testnet</chain>
            <token> USDC </token>
            <address>null</address>
        </response>"""

        assert parse_key_value_xml(text) == {
            "chain": "fair-testnet",
            "token": "USDC",
            "address": "null",
        }

    @pytest.mark.parametrize("text", [None, "", "no xml here", "<chain>x</chain>"])
    def test_no_response_block(self, text):
        assert parse_key_value_xml(text) is None

    def test_empty_response_block(self):
        assert parse_key_value_xml("<response></response>") == {}


class TestTextMatching:
    """Tests for reading parameters straight from the user's message."""

    @pytest.mark.parametrize(
        "text",
        ["please encrypt this", "Use MEV protection", "send it with BITE", "bite enable"],
    )
    def test_encryption_keywords(self, text):
        assert wants_encryption(text)

    @pytest.mark.parametrize("text", ["send 1 FAIR to bob", "", None])
    def test_no_encryption_keywords(self, text):
        assert not wants_encryption(text)

    def test_match_swap(self):
        assert match_swap("Swap 1.5 fair for usdc please") == {
            "amount": "1.5",
            "input_token": "FAIR",
            "output_token": "USDC",
        }

    def test_match_swap_with_to(self):
        assert match_swap("swap 10 USDT to SKL")["output_token"] == "SKL"

    def test_match_swap_no_match(self):
        assert match_swap("what is my balance") == {}

    def test_match_transfer(self):
        assert match_transfer(f"transfer 100 usdc to {RECIPIENT}") == {
            "amount": "100",
            "token": "USDC",
            "to_address": RECIPIENT,
        }

    def test_match_transfer_requires_full_address(self):
        assert match_transfer("transfer 1 FAIR to 0x1234") == {}


class TestBuildRequests:
    """Tests for merging model content with the message text."""

    def test_balance_request_defaults(self):
        request = build_balance_request({"chain": "null", "token": ""}, DEFAULT_CHAIN)

        assert request.chain == DEFAULT_CHAIN
        assert request.token is None
        assert request.address is None

    def test_balance_request_token_symbol_fallback(self):
        request = build_balance_request({"chain": "FAIR-Testnet", "tokenSymbol": "SKL"}, DEFAULT_CHAIN)

        assert request.chain == "fair-testnet"
        assert request.token == "SKL"

    def test_transfer_token_from_text_wins(self):
        content = {"toAddress": RECIPIENT, "amount": "100", "token": "WFAIR", "isBite": "false"}

        request = build_transfer_request(content, f"transfer 100 usdc to {RECIPIENT}", DEFAULT_CHAIN)

        assert request.token == "USDC"
        assert request.amount == "100"
        assert request.to_address == RECIPIENT
        assert request.encrypt is False

    def test_transfer_falls_back_to_text(self):
        content = {"toAddress": "null", "amount": "null", "token": "null"}

        request = build_transfer_request(content, f"Transfer 2.5 FAIR to {RECIPIENT}", DEFAULT_CHAIN)

        assert request.to_address == RECIPIENT
        assert request.amount == "2.5"
        assert request.token == "FAIR"

    def test_transfer_without_token_is_native(self):
        content = {"toAddress": RECIPIENT, "amount": "1"}

        request = build_transfer_request(content, "send one coin", DEFAULT_CHAIN)

        assert request.token is None

    @pytest.mark.parametrize(
        "is_bite,text,expected",
        [
            ("true", "send 1 FAIR", True),
            ("false", "send 1 FAIR, encrypted", True),
            ("false", "send 1 FAIR", False),
            (None, "send 1 FAIR", False),
        ],
    )
    def test_transfer_encrypt_flag(self, is_bite, text, expected):
        content = {"toAddress": RECIPIENT, "amount": "1", "isBite": is_bite}

        assert build_transfer_request(content, text, DEFAULT_CHAIN).encrypt is expected

    def test_swap_model_content_wins(self):
        content = {
            "chain": "fair-testnet",
            "inputToken": "USDC",
            "outputToken": "SKL",
            "amount": "5",
            "slippage": "1",
            "isBite": "true",
        }

        request = build_swap_request(content, "swap 1 FAIR for USDT", DEFAULT_CHAIN)

        assert (request.input_token, request.output_token, request.amount) == ("USDC", "SKL", "5")
        assert str(request.slippage) == "1"
        assert request.encrypt is True

    def test_swap_falls_back_to_text(self):
        content = {"inputToken": "null", "outputToken": "", "amount": "undefined", "slippage": "null"}

        request = build_swap_request(content, "swap 0.1 fair for usdc", DEFAULT_CHAIN)

        assert (request.input_token, request.output_token, request.amount) == ("FAIR", "USDC", "0.1")
        assert request.slippage is None
        assert request.chain == DEFAULT_CHAIN

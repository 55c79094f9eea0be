"""
Tests for the local keyword matcher.
"""

from decimal import Decimal

import pytest

from agentchain.executor import sanitize_amount
from agentchain.routing import KeywordMatcher, signals_privacy, signals_transfer
from agentchain.routing.fallback import extract_amount, extract_hex_tokens, extract_ticker

TX = "0x" + "5f" * 32


class TestSignals:
    """Tests for privacy and transfer signals."""

    @pytest.mark.parametrize(
        "prompt",
        [
            "privately send 10 to 0xabc",
            "send it secretly",
            "make this transfer hidden",
            "a stealth payment please",
            "Confidential transfer of 5",
            "keep it PRIVATE",
        ],
    )
    def test_privacy_words(self, prompt):
        assert signals_privacy(prompt)

    def test_privacy_needs_whole_words(self):
        assert not signals_privacy("what is the privatization rate")
        assert not signals_privacy("send 5 to 0xabc")

    def test_transfer_words(self):
        assert signals_transfer("please pay bob")
        assert signals_transfer("Send 5 SHM")
        assert not signals_transfer("what is the sender address")


class TestExtraction:
    """Tests for parameter extraction helpers."""

    def test_hex_tokens_strip_trailing_punctuation(self):
        assert extract_hex_tokens("send to 0xAbC123, now.") == ["0xAbC123"]

    def test_amount_ignores_hex_digits(self):
        assert extract_amount("send to 0x1234 the amount 2.5") == "2.5"

    def test_amount_missing(self):
        assert extract_amount("send to 0xabc") is None

    def test_amount_keeps_thousands_separators(self):
        assert extract_amount("send 1,000 to 0xabc") == "1,000"
        assert extract_amount("pay 2,500,000.75 now") == "2,500,000.75"
        assert extract_amount("send 5, then 10") == "5"

    def test_uppercase_ticker(self):
        assert extract_ticker("price of ETH please") == "ETH"

    def test_pool_pair(self):
        assert extract_ticker("liquidity for SHM/USDT") == "SHM-USDT"

    def test_lowercase_ticker_after_word(self):
        assert extract_ticker("what is the price of btc") == "BTC"

    def test_no_ticker(self):
        assert extract_ticker("how are you") is None


class TestKeywordMatcher:
    """Tests for KeywordMatcher."""

    @pytest.fixture
    def matcher(self, registry):
        return KeywordMatcher(registry)

    def test_public_transfer(self, matcher):
        decision = matcher.match("send 5 to 0xAbC...123")

        assert decision.tool == "send_transaction"
        assert decision.params == {"to": "0xAbC...123", "amount": "5"}
        assert decision.private is False
        assert decision.source == "keyword"

    def test_transfer_with_thousands_separator(self, matcher):
        decision = matcher.match("send 1,000 to 0xAbC...123")

        assert decision.tool == "send_transaction"
        assert decision.params == {"to": "0xAbC...123", "amount": "1,000"}
        assert sanitize_amount(decision.params["amount"]) == Decimal("1000")

    def test_private_transfer(self, matcher):
        decision = matcher.match("privately send 10 to 0xAbC...123")

        assert decision.tool == "confidential_execute"
        assert decision.params == {"to": "0xAbC...123", "value": "10"}
        assert decision.private is True

    @pytest.mark.parametrize("word", ["secretly", "hidden", "stealth", "private"])
    def test_privacy_never_yields_public_transfer(self, matcher, word):
        decision = matcher.match(f"{word} transfer 3 to 0xAbC")
        assert decision.tool == "confidential_execute"

    def test_balance_with_address(self, matcher):
        decision = matcher.match("balance of 0x742d35Cc6634C0532925a3b844Bc454e4438f44e")
        assert decision.tool == "get_balance"
        assert decision.params == {"address": "0x742d35Cc6634C0532925a3b844Bc454e4438f44e"}

    def test_hex_digits_do_not_trigger_keywords(self, matcher):
        # "fee" inside the hash must not select estimate_gas
        decision = matcher.match(f"is {TX[:10]}fee0 confirmed")
        assert decision.tool == "get_transaction_status"

    def test_transaction_status_prefers_full_hash(self, matcher):
        decision = matcher.match(f"status of 0xabc and {TX}")
        assert decision.tool == "get_transaction_status"
        assert decision.params == {"hash": TX}

    def test_token_price(self, matcher):
        decision = matcher.match("check price of ETH")
        assert decision.tool == "get_token_price"
        assert decision.params == {"symbol": "ETH"}

    def test_liquidity(self, matcher):
        decision = matcher.match("check liquidity for WETH-USDC")
        assert decision.tool == "check_liquidity"
        assert decision.params == {"pool": "WETH-USDC"}

    def test_specific_tools_checked_first(self, matcher):
        # "cost" would match estimate_gas, but deploy is more specific
        decision = matcher.match("deploy my token, whatever the cost")
        assert decision.tool == "deploy_contract"

    def test_encrypt_input_value(self, matcher):
        decision = matcher.match("encrypt 42")
        assert decision.tool == "encrypt_input"
        assert decision.params == {"value": "42"}

    def test_default_is_public_transfer(self, matcher):
        decision = matcher.match("hello there")
        assert decision.tool == "send_transaction"

    def test_default_is_confidential_under_privacy(self, matcher):
        decision = matcher.match("do it privately")
        assert decision.tool in ("encrypt_input", "confidential_execute")
        assert decision.tool != "send_transaction"

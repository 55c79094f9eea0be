"""
Keyword Matcher (local routing fallback).

Used when the language-model collaborator cannot be reached at all. It
picks a tool deterministically from the catalog keywords and pulls the
obvious parameters (address, amount, ticker, hash) out of the prompt.

Matching order:
1. Privacy signal + transfer intent -> confidential_execute
2. Tools with specific keywords (SPECIFIC_TOOL_IDS)
3. All tools in declaration order
4. Default transfer tool (confidential under privacy)

Addresses and hashes are removed before keyword matching so hex digits
cannot trigger keywords such as "fee".
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Any

from agentchain.tools import (
    CONFIDENTIAL_TRANSFER_TOOL,
    PUBLIC_TRANSFER_TOOL,
    SPECIFIC_TOOL_IDS,
)

from .decision import Decision
from .prompts import PRIVACY_KEYWORDS

if TYPE_CHECKING:
    from agentchain.tools import Tool, ToolRegistry

logger = logging.getLogger(__name__)

_PRIVACY_PATTERN = re.compile(
    r"\b(?:" + "|".join(re.escape(word) for word in PRIVACY_KEYWORDS) + r")\b",
    re.IGNORECASE,
)
_HEX_TOKEN_PATTERN = re.compile(r"0x\S+", re.IGNORECASE)
_TX_HASH_PATTERN = re.compile(r"^0x[0-9a-f]{64}$", re.IGNORECASE)
_AMOUNT_PATTERN = re.compile(
    r"(?<![\w.])(\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:\.\d+)?|\.\d+)(?![\w])"
)
_TICKER_PATTERN = re.compile(r"\b([A-Z][A-Z0-9]{1,9})(?:[-/]([A-Z][A-Z0-9]{1,9}))?\b")
_TICKER_AFTER_WORD_PATTERN = re.compile(
    r"\b(?:of|for|on|in)\s+([a-z][a-z0-9]{1,9}(?:[-/][a-z][a-z0-9]{1,9})?)\b",
    re.IGNORECASE,
)
_TRAILING_PUNCTUATION = ".,;:!?)]}'\""

# Uppercase words that are not tickers
_NON_TICKERS = frozenset({"I", "OK", "ID", "TX", "DAO", "FHE", "EVM", "USD", "LIVE"})

#: Words signalling an intent to move value
TRANSFER_WORDS: tuple[str, ...] = ("send", "transfer", "pay", "give")


def signals_privacy(text: str) -> bool:
    """Whether the prompt asks for a private/hidden/secret/stealth action."""
    return bool(_PRIVACY_PATTERN.search(text))


def signals_transfer(text: str) -> bool:
    lowered = text.lower()
    return any(re.search(rf"\b{word}\b", lowered) for word in TRANSFER_WORDS)


def extract_hex_tokens(text: str) -> list[str]:
    """All 0x-prefixed tokens, trailing punctuation stripped."""
    tokens = []
    for match in _HEX_TOKEN_PATTERN.finditer(text):
        token = match.group(0).rstrip(_TRAILING_PUNCTUATION)
        if len(token) > 2:
            tokens.append(token)
    return tokens


def extract_amount(text: str) -> str | None:
    """
    First numeric amount, ignoring anything inside 0x tokens.

    Thousands separators are kept ("1,000"); sanitize_amount strips them.
    """
    without_hex = _HEX_TOKEN_PATTERN.sub(" ", text)
    match = _AMOUNT_PATTERN.search(without_hex)
    return match.group(1) if match else None


def extract_ticker(text: str) -> str | None:
    """
    Best-effort ticker/pool from the prompt.

    Prefers uppercase tokens ("ETH", "SHM-USDT"); otherwise the word after
    "of"/"for"/"on"/"in" ("price of eth").
    """
    without_hex = _HEX_TOKEN_PATTERN.sub(" ", text)

    for match in _TICKER_PATTERN.finditer(without_hex):
        base, quote = match.group(1), match.group(2)
        if base in _NON_TICKERS:
            continue
        return f"{base}-{quote}" if quote else base

    match = _TICKER_AFTER_WORD_PATTERN.search(without_hex)
    if match:
        return match.group(1).replace("/", "-").upper()
    return None


class KeywordMatcher:
    """
    Deterministic prompt-to-tool matcher.

    Example:
        matcher = KeywordMatcher(create_default_registry())
        decision = matcher.match("send 5 to 0xAbC...123")
        # Decision(tool="send_transaction", params={"to": "0xAbC...123", "amount": "5"})
    """

    def __init__(self, registry: ToolRegistry):
        self._registry = registry

    def select_tool(self, prompt: str) -> Tool | None:
        """Choose a tool for the prompt (None only if the catalog lacks defaults)."""
        text = _HEX_TOKEN_PATTERN.sub(" ", prompt).lower()
        private = signals_privacy(prompt)

        if private and signals_transfer(prompt):
            tool = self._registry.get(CONFIDENTIAL_TRANSFER_TOOL)
            if tool is not None:
                return tool

        for tool_id in SPECIFIC_TOOL_IDS:
            tool = self._registry.get(tool_id)
            if tool is not None and tool.matches(text):
                return tool

        for tool in self._registry:
            if tool.matches(text):
                return tool

        default_id = CONFIDENTIAL_TRANSFER_TOOL if private else PUBLIC_TRANSFER_TOOL
        return self._registry.get(default_id)

    def extract_params(self, tool: Tool, prompt: str) -> dict[str, Any]:
        """Pull the parameters the tool cares about out of the prompt."""
        params: dict[str, Any] = {}
        hex_tokens = extract_hex_tokens(prompt)

        if tool.moves_value:
            if hex_tokens:
                params["to"] = hex_tokens[0]
            amount = extract_amount(prompt)
            if amount is not None:
                params["value" if tool.is_confidential else "amount"] = amount

        if tool.id == "get_balance" and hex_tokens:
            params["address"] = hex_tokens[0]

        if tool.id == "get_transaction_status" and hex_tokens:
            hashes = [token for token in hex_tokens if _TX_HASH_PATTERN.match(token)]
            params["hash"] = hashes[0] if hashes else hex_tokens[0]

        if tool.id in ("get_token_price", "check_liquidity"):
            ticker = extract_ticker(prompt)
            if ticker is not None:
                params["pool" if tool.id == "check_liquidity" else "symbol"] = ticker

        if tool.id == "encrypt_input":
            amount = extract_amount(prompt)
            if amount is not None:
                params["value"] = amount

        return params

    def match(self, prompt: str) -> Decision:
        """Route a prompt without the language model."""
        private = signals_privacy(prompt)
        tool = self.select_tool(prompt)

        if tool is None:
            logger.warning("[keyword_matcher] No tool matched and no default available")
            return Decision(
                thought="Local keyword routing found no matching tool",
                explanation="I could not match your request to an available tool.",
                private=private,
                source="keyword",
            )

        params = self.extract_params(tool, prompt)
        logger.info(f"[keyword_matcher] Matched tool: {tool.id} params={sorted(params)}")

        mode = "private" if tool.is_confidential else "public"
        return Decision(
            thought=f"Language model unavailable; matched '{tool.name}' by keywords ({mode} tool).",
            tool=tool.id,
            params=params,
            explanation=f"{tool.name}: {tool.description}",
            private=private or tool.is_confidential,
            source="keyword",
        )


__all__ = [
    "KeywordMatcher",
    "TRANSFER_WORDS",
    "extract_amount",
    "extract_hex_tokens",
    "extract_ticker",
    "signals_privacy",
    "signals_transfer",
]

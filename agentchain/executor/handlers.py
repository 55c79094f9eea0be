"""
Tool handlers.

One coroutine per tool id, all with the same signature:

    async def handler(ctx: ToolContext, params: dict, options: ExecuteOptions) -> str

Handlers return the human-readable result or raise a typed
AgentChainError. IntegrationError from HTTP/RPC collaborators is left to
ToolExecutor, which maps it to UpstreamUnavailableError; encryption
failures are raised here as EncryptionFailedError because only the
handler knows the call was an encryption.

Value-moving handlers validate preconditions before any external call
and short-circuit in simulation mode without calling the signer.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from agentchain.config.chains import DECISION_LOGGER_ADDRESS, SHARDEUM_EVM, ChainPreset
from agentchain.errors import (
    AgentChainError,
    EncryptionFailedError,
    RecipientNotFoundError,
    UpstreamUnavailableError,
    WalletNotConnectedError,
)
from agentchain.integrations.base import IntegrationError
from agentchain.integrations.chain import TRANSFER_GAS
from agentchain.integrations.inco import ZERO_ADDRESS, HandleType, normalize_for_handle
from agentchain.tools import CONFIDENTIAL_TRANSFER_TOOL, PUBLIC_TRANSFER_TOOL

from .amounts import format_gwei, format_units, require_base_units, sanitize_amount

if TYPE_CHECKING:
    from agentchain.integrations.chain import ChainReader, Signer
    from agentchain.integrations.coinbase import CoinbasePriceClient
    from agentchain.integrations.dexscreener import DexScreenerClient
    from agentchain.integrations.inco import ConfidentialCompute

logger = logging.getLogger(__name__)

SIMULATION_MARKER = "[SIMULATION MODE]"
LIVE_CONFIRM_NOTE = "Status: Ready to Execute (Switch to LIVE to confirm)."

_ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
_PREVIEW_CHARS = 32

#: Symbols served from canned testnet data (no DEX lists them)
TESTNET_LIQUIDITY_SYMBOLS = frozenset({"SHM", "SHARDEUM"})


@dataclass(frozen=True, slots=True)
class ExecuteOptions:
    """
    Per-call execution options.

    Attributes:
        simulate: Preview value-moving tools without touching the signer
        reasoning: The routed thought; encrypted on the private path
    """

    simulate: bool = False
    reasoning: str = ""


@dataclass(slots=True)
class ToolContext:
    """
    Collaborators available to handlers.

    Any collaborator may be None; handlers that need it fail with a typed
    error. signer is None until a wallet is connected.
    """

    chain: ChainReader | None = None
    signer: Signer | None = None
    prices: CoinbasePriceClient | None = None
    liquidity: DexScreenerClient | None = None
    confidential: ConfidentialCompute | None = None
    preset: ChainPreset = SHARDEUM_EVM
    logger_address: str = DECISION_LOGGER_ADDRESS

    @property
    def symbol(self) -> str:
        return self.preset.native_symbol


ToolHandler = Callable[[ToolContext, dict[str, Any], ExecuteOptions], Awaitable[str]]


# =============================================================================
# Helpers
# =============================================================================


def _require_chain(ctx: ToolContext) -> ChainReader:
    if ctx.chain is None:
        raise UpstreamUnavailableError("Provider not ready", service="chain")
    return ctx.chain


def _require_signer(ctx: ToolContext) -> Signer:
    if ctx.signer is None:
        raise WalletNotConnectedError()
    return ctx.signer


def _require_recipient(params: dict[str, Any]) -> str:
    recipient = str(params.get("to") or "").strip()
    if not recipient:
        raise RecipientNotFoundError()
    if not _ADDRESS_PATTERN.match(recipient):
        raise RecipientNotFoundError(
            f"Recipient not found: '{recipient}' is not a valid 0x address"
        )
    return recipient


def _transfer_amount(params: dict[str, Any], *keys: str) -> Decimal:
    raw = next((params[key] for key in keys if params.get(key) not in (None, "")), None)
    return sanitize_amount(raw)


def _preview(ciphertext: str) -> str:
    return f"{ciphertext[:_PREVIEW_CHARS]}... [TRUNCATED]"


def _ciphertext_bytes(ciphertext: str) -> bytes:
    body = ciphertext[2:] if ciphertext.lower().startswith("0x") else ciphertext
    try:
        return bytes.fromhex(body)
    except ValueError:
        return ciphertext.encode("utf-8")


async def _encrypt(
    ctx: ToolContext,
    value: int | bool | str,
    handle_type: HandleType,
    account: str | None,
) -> str:
    """Normalize and encrypt one value, raising EncryptionFailedError on any failure."""
    if ctx.confidential is None:
        raise EncryptionFailedError(
            "Encryption failed: confidential compute is not configured", service="inco"
        )

    try:
        normalized = normalize_for_handle(value, handle_type)
    except ValueError as e:
        raise EncryptionFailedError(f"Encryption failed: {e}", service="inco") from e

    try:
        ciphertext = await ctx.confidential.encrypt(
            normalized,
            account_address=account or ZERO_ADDRESS,
            dapp_address=ctx.logger_address or ZERO_ADDRESS,
            handle_type=handle_type,
        )
    except IntegrationError as e:
        raise EncryptionFailedError(
            f"Encryption failed: {e.args[0]}",
            service=e.integration,
            status_code=e.status_code,
        ) from e
    except AgentChainError:
        raise
    except Exception as e:
        logger.error(f"[tool_executor] Confidential compute error: {e}", exc_info=True)
        raise EncryptionFailedError(f"Encryption failed: {e}", service="inco") from e

    if not ciphertext:
        raise EncryptionFailedError("Encryption failed: received empty ciphertext", service="inco")
    return ciphertext


# =============================================================================
# Read-only handlers
# =============================================================================


async def get_wallet_address(ctx: ToolContext, params: dict[str, Any], options: ExecuteOptions) -> str:
    if ctx.signer is None:
        return "Wallet not connected"
    return await ctx.signer.get_address()


async def get_balance(ctx: ToolContext, params: dict[str, Any], options: ExecuteOptions) -> str:
    chain = _require_chain(ctx)

    address = str(params.get("address") or "").strip()
    if not address and ctx.signer is not None:
        address = await ctx.signer.get_address()
    if not address:
        raise WalletNotConnectedError("No address provided and wallet not connected")

    balance = await chain.get_balance(address)
    return f"{format_units(balance, ctx.preset.decimals)} {ctx.symbol}"


async def get_network(ctx: ToolContext, params: dict[str, Any], options: ExecuteOptions) -> str:
    network = await _require_chain(ctx).get_network()
    name = network.name if network.name != "unknown" else ctx.preset.name
    return f"{name} (Chain ID: {network.chain_id})"


async def estimate_gas(ctx: ToolContext, params: dict[str, Any], options: ExecuteOptions) -> str:
    gas_price = await _require_chain(ctx).get_gas_price()
    return f"Current Gas Price: {format_gwei(gas_price)} Gwei"


async def get_transaction_status(
    ctx: ToolContext, params: dict[str, Any], options: ExecuteOptions
) -> str:
    tx_hash = str(params.get("hash") or "").strip()
    if not tx_hash:
        return "Please provide a transaction hash."

    receipt = await _require_chain(ctx).get_transaction_receipt(tx_hash)
    if receipt is None:
        return "Transaction Pending or Not Found"

    status = "Success" if receipt.succeeded else "Failed"
    return f"Status: {status} (Block: {receipt.block_number})"


async def get_token_price(ctx: ToolContext, params: dict[str, Any], options: ExecuteOptions) -> str:
    if ctx.prices is None:
        raise UpstreamUnavailableError("Price oracle not configured", service="coinbase")

    symbol = str(params.get("symbol") or "ETH").strip().upper()
    quote = await ctx.prices.get_quote(symbol)
    if quote is None:
        return f'No price data found for "{symbol}" on Coinbase.'

    return (
        f"Market Data for {quote.symbol}:\n"
        f"• Spot Price: ${quote.spot}\n"
        f"• Buy Price:  ${quote.buy or 'N/A'} (with spread)\n"
        f"• Sell Price: ${quote.sell or 'N/A'}\n"
        f"Source: Coinbase API (Live)"
    )


def _format_usd(value: float | None) -> str:
    if value is None:
        return "N/A"
    return f"{value:,.0f}"


async def check_liquidity(ctx: ToolContext, params: dict[str, Any], options: ExecuteOptions) -> str:
    query = str(params.get("pool") or params.get("symbol") or "ETH").strip().upper()
    base_symbol = re.split(r"[-/]", query, maxsplit=1)[0]

    if base_symbol in TESTNET_LIQUIDITY_SYMBOLS:
        return (
            "Shardeum Sphinx/EVM Testnet Data:\n"
            "• Top Pool: SHM-USDT (Simulated)\n"
            "• Liquidity: ~$500,000 (Testnet)\n"
            "• 24h Vol: ~$12,000\n"
            "Note: Real DexScreener data not available for Testnet assets."
        )

    if ctx.liquidity is None:
        raise UpstreamUnavailableError("Liquidity oracle not configured", service="dexscreener")

    pools = await ctx.liquidity.search_pools(query)
    if not pools:
        return (
            f'No liquidity pools found for "{query}" on DexScreener.\n'
            "Try searching for:\n"
            '• Wrapped assets: "WETH", "WBTC"\n'
            '• Popular tokens: "PEPE", "SOL", "USDC"'
        )

    top = pools[0]
    return (
        f"Top Pool ({top.dex_id}): {top.base_symbol}/{top.quote_symbol}\n"
        f"• Liquidity: ${_format_usd(top.liquidity_usd)}\n"
        f"• Price: ${top.price_usd or 'N/A'}\n"
        f"• 24h Vol: ${_format_usd(top.volume_24h)}\n"
        f"• URL: {top.url or 'N/A'}"
    )


# =============================================================================
# Value-moving handlers
# =============================================================================


async def send_transaction(ctx: ToolContext, params: dict[str, Any], options: ExecuteOptions) -> str:
    # Live transfers report a missing wallet ahead of a malformed recipient
    signer = None if options.simulate else _require_signer(ctx)
    recipient = _require_recipient(params)
    amount = _transfer_amount(params, "amount", "value")
    value_wei = require_base_units(amount, ctx.preset.decimals)

    if signer is None:
        fee = "unknown"
        if ctx.chain is not None:
            gas_price = await ctx.chain.get_gas_price()
            fee = format_units(TRANSFER_GAS * (gas_price or 1), ctx.preset.decimals)
        return (
            f"{SIMULATION_MARKER}: Transaction Validated.\n"
            f"• Recipient: {recipient}\n"
            f"• Amount: {amount} {ctx.symbol}\n"
            f"• Estimated Gas: {TRANSFER_GAS} units\n"
            f"• Est. Fee: ~{fee} {ctx.symbol}\n"
            f"• Risk Assessment: Low (Standard Transfer)\n"
            f"{LIVE_CONFIRM_NOTE}"
        )

    intent = options.reasoning or f"Standard {ctx.symbol} Transfer"

    logger.info(f"[tool_executor] Sending {amount} {ctx.symbol} publicly")
    tx_hash = await signer.send_transaction(recipient, value_wei, intent.encode("utf-8"))

    return (
        "Public Transaction Sent!\n"
        f"• Hash: {tx_hash}\n"
        f"• Explorer: {ctx.preset.tx_url(tx_hash)}\n"
        f"• Intent: {intent}"
    )


async def confidential_execute(
    ctx: ToolContext, params: dict[str, Any], options: ExecuteOptions
) -> str:
    amount = _transfer_amount(params, "value", "amount")
    value_wei = require_base_units(amount, ctx.preset.decimals)
    target = str(params.get("to") or "").strip()

    if options.simulate:
        return (
            f"{SIMULATION_MARKER}: Private Execution Validated.\n"
            f"• Target: {target or 'Decision Logger'}\n"
            f"• Hidden Amount: {amount} {ctx.symbol}\n"
            "• Encryption: Inco FHE (Simulated)\n"
            "• Privacy Overhead: ~15% higher gas\n"
            f"{LIVE_CONFIRM_NOTE}"
        )

    signer = _require_signer(ctx)
    account = await signer.get_address()

    amount_ciphertext = await _encrypt(ctx, value_wei, HandleType.EUINT256, account)
    thought_ciphertext = await _encrypt(
        ctx, options.reasoning or "Private Execution", HandleType.EUINT256, account
    )

    logger.info(f"[tool_executor] Moving {amount} {ctx.symbol} with encrypted intent")
    tx_hash = await signer.log_confidential_decision(
        _ciphertext_bytes(thought_ciphertext), value_wei
    )

    return (
        "Stealth Transaction Executed\n"
        f"• Funds Moved: {amount} {ctx.symbol}\n"
        "• Privacy Level: High (Intent Scrambled)\n"
        f"• Encrypted Amount: {_preview(amount_ciphertext)}\n"
        f"• Encrypted Intent: {_preview(thought_ciphertext)}\n"
        f"• Blockchain Proof: Tx {tx_hash[:10]}... ({ctx.preset.tx_url(tx_hash)})\n"
        "Your reasoning is locked behind Inco encryption. Only you can reveal the strategy."
    )


async def encrypt_input(ctx: ToolContext, params: dict[str, Any], options: ExecuteOptions) -> str:
    value = params.get("value")
    if value is None or value == "":
        value = 1337
    type_name = str(params.get("type") or "uint32")
    handle_type = HandleType.from_type_name(type_name)

    account = await ctx.signer.get_address() if ctx.signer is not None else None
    ciphertext = await _encrypt(ctx, value, handle_type, account)

    return (
        "Data secured with Inco Lightning!\n"
        f"• Input: {value}\n"
        f"• Status: INCO_ENCRYPTED_{type_name.upper()}\n"
        f"• Ciphertext: {_preview(ciphertext)}"
    )


# =============================================================================
# Canned handlers
# =============================================================================


def canned(text: str) -> ToolHandler:
    """Handler that always returns fixed text (demo tools without a backend)."""

    async def handler(ctx: ToolContext, params: dict[str, Any], options: ExecuteOptions) -> str:
        return text

    return handler


DEFAULT_HANDLERS: dict[str, ToolHandler] = {
    "get_wallet_address": get_wallet_address,
    "get_balance": get_balance,
    "get_network": get_network,
    "estimate_gas": estimate_gas,
    PUBLIC_TRANSFER_TOOL: send_transaction,
    "get_transaction_status": get_transaction_status,
    "generate_token_contract": canned("Drafted ERC-20 Token Contract [Mock]"),
    "estimate_deploy_cost": canned("Estimated Deployment Cost: 0.05 SHM"),
    "deploy_contract": canned("Contract Deployed at: 0x742d35Cc6634C0532925a3b844Bc454e4438f44e"),
    "analyze_prompt": canned("Intent Analyzed: User wishes to perform financial action."),
    "validate_constraints": canned("Validation Passed: Balance sufficient, Slippage < 1%."),
    "generate_explanation": canned("Explanation: Market conditions are favorable."),
    "encrypt_input": encrypt_input,
    CONFIDENTIAL_TRANSFER_TOOL: confidential_execute,
    "selective_disclosure": canned("Result Revealed: 100 Tokens. Inputs remain hidden."),
    "submit_agent_profile": canned("Agent Profile Submitted to DAO for review."),
    "list_approved_agents": canned(
        "Active Agents: [TradeMaster AI, YieldOptimizer, ShardGuardian]"
    ),
    "get_token_price": get_token_price,
    "check_liquidity": check_liquidity,
}

#: Handlers that move value and therefore honour ExecuteOptions.simulate
SIMULATED_TOOL_IDS = frozenset({PUBLIC_TRANSFER_TOOL, CONFIDENTIAL_TRANSFER_TOOL})


__all__ = [
    "DEFAULT_HANDLERS",
    "ExecuteOptions",
    "LIVE_CONFIRM_NOTE",
    "SIMULATED_TOOL_IDS",
    "SIMULATION_MARKER",
    "ToolContext",
    "ToolHandler",
    "canned",
]

"""
Tests for ToolExecutor and the tool handlers.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from agentchain.config import DECISION_LOGGER_ADDRESS
from agentchain.errors import (
    EncryptionFailedError,
    MissingAmountError,
    RecipientNotFoundError,
    UpstreamUnavailableError,
    WalletNotConnectedError,
)
from agentchain.executor import (
    NOT_IMPLEMENTED,
    SIMULATION_MARKER,
    ExecuteOptions,
    ToolContext,
    ToolExecutor,
)
from agentchain.integrations import (
    HandleType,
    IntegrationError,
    LiquidityPool,
    PriceQuote,
    TransactionReceipt,
)
from conftest import RECIPIENT, TX_HASH, WALLET, FakeConfidential

SIMULATE = ExecuteOptions(simulate=True)


class TestDispatch:
    """Tests for dispatch by tool id."""

    @pytest.mark.asyncio
    async def test_unknown_tool_returns_sentinel(self, executor):
        assert await executor.execute("no_such_tool", {}) == NOT_IMPLEMENTED

    @pytest.mark.asyncio
    async def test_none_tool_returns_sentinel(self, executor):
        assert await executor.execute(None) == NOT_IMPLEMENTED

    @pytest.mark.asyncio
    async def test_unwired_tool_returns_sentinel(self, registry, tool_context):
        executor = ToolExecutor(registry, tool_context, handlers={})

        assert executor.missing_handlers() == registry.list_ids()
        assert await executor.execute("get_network", {}) == NOT_IMPLEMENTED

    def test_every_catalog_tool_is_wired(self, executor):
        assert executor.missing_handlers() == []

    @pytest.mark.asyncio
    async def test_register_handler(self, executor):
        async def handler(ctx, params, options):
            return f"custom {params['x']}"

        executor.register_handler("get_network", handler)

        assert await executor.execute("get_network", {"x": 1}) == "custom 1"

    def test_set_signer(self, executor, signer):
        assert not executor.has_signer
        executor.set_signer(signer)
        assert executor.has_signer
        assert executor.context.signer is signer

    @pytest.mark.asyncio
    async def test_canned_tools(self, executor):
        result = await executor.execute("list_approved_agents", {})
        assert "TradeMaster AI" in result


class TestReadTools:
    """Tests for read-only handlers."""

    @pytest.mark.asyncio
    async def test_wallet_address_without_signer(self, executor):
        assert await executor.execute("get_wallet_address") == "Wallet not connected"

    @pytest.mark.asyncio
    async def test_wallet_address_with_signer(self, executor, signer):
        executor.set_signer(signer)
        assert await executor.execute("get_wallet_address") == WALLET

    @pytest.mark.asyncio
    async def test_balance_of_given_address(self, executor, chain):
        result = await executor.execute("get_balance", {"address": RECIPIENT})

        assert result == "5.0 SHM"
        assert chain.calls == [f"get_balance:{RECIPIENT}"]

    @pytest.mark.asyncio
    async def test_balance_defaults_to_wallet(self, executor, chain, signer):
        executor.set_signer(signer)
        await executor.execute("get_balance", {})
        assert chain.calls == [f"get_balance:{WALLET}"]

    @pytest.mark.asyncio
    async def test_balance_without_address_or_wallet(self, executor):
        with pytest.raises(WalletNotConnectedError):
            await executor.execute("get_balance", {})

    @pytest.mark.asyncio
    async def test_network_falls_back_to_preset_name(self, executor):
        result = await executor.execute("get_network")
        assert result == "Shardeum EVM Testnet (Chain ID: 8119)"

    @pytest.mark.asyncio
    async def test_estimate_gas(self, executor):
        assert await executor.execute("estimate_gas") == "Current Gas Price: 2.0 Gwei"

    @pytest.mark.asyncio
    async def test_transaction_status(self, executor, chain):
        chain.receipts[TX_HASH] = TransactionReceipt(tx_hash=TX_HASH, status=1, block_number=10)

        assert await executor.execute("get_transaction_status", {"hash": TX_HASH}) == (
            "Status: Success (Block: 10)"
        )
        assert await executor.execute("get_transaction_status", {"hash": "0xdead"}) == (
            "Transaction Pending or Not Found"
        )

    @pytest.mark.asyncio
    async def test_transaction_status_needs_hash(self, executor):
        result = await executor.execute("get_transaction_status", {})
        assert result == "Please provide a transaction hash."

    @pytest.mark.asyncio
    async def test_chain_missing_is_upstream_unavailable(self, registry):
        executor = ToolExecutor(registry, ToolContext())
        with pytest.raises(UpstreamUnavailableError):
            await executor.execute("estimate_gas")

    @pytest.mark.asyncio
    async def test_integration_error_maps_to_upstream_unavailable(self, executor, chain):
        chain.get_gas_price = AsyncMock(
            side_effect=IntegrationError("RPC down", "chain", status_code=502)
        )

        with pytest.raises(UpstreamUnavailableError) as exc_info:
            await executor.execute("estimate_gas")

        assert exc_info.value.service == "chain"
        assert exc_info.value.status_code == 502


class TestOracleTools:
    """Tests for price and liquidity handlers."""

    @pytest.mark.asyncio
    async def test_token_price(self, executor):
        prices = MagicMock()
        prices.get_quote = AsyncMock(
            return_value=PriceQuote(symbol="ETH", spot="3120.55", buy="3130.00", sell="3110.10")
        )
        executor.context.prices = prices

        result = await executor.execute("get_token_price", {"symbol": "eth"})

        prices.get_quote.assert_awaited_once_with("ETH")
        assert "Market Data for ETH" in result
        assert "$3120.55" in result

    @pytest.mark.asyncio
    async def test_token_price_defaults_to_eth(self, executor):
        prices = MagicMock()
        prices.get_quote = AsyncMock(return_value=None)
        executor.context.prices = prices

        result = await executor.execute("get_token_price", {})

        prices.get_quote.assert_awaited_once_with("ETH")
        assert result == 'No price data found for "ETH" on Coinbase.'

    @pytest.mark.asyncio
    async def test_token_price_without_oracle(self, executor):
        with pytest.raises(UpstreamUnavailableError):
            await executor.execute("get_token_price", {"symbol": "BTC"})

    @pytest.mark.asyncio
    async def test_liquidity_testnet_symbol_is_canned(self, executor):
        result = await executor.execute("check_liquidity", {"pool": "SHM-USDT"})
        assert "Shardeum Sphinx/EVM Testnet Data" in result

    @pytest.mark.asyncio
    async def test_liquidity_top_pool(self, executor):
        liquidity = MagicMock()
        liquidity.search_pools = AsyncMock(
            return_value=[
                LiquidityPool(
                    dex_id="uniswap",
                    base_symbol="WETH",
                    quote_symbol="USDC",
                    price_usd="3120.5",
                    liquidity_usd=1234567.0,
                    volume_24h=89000.0,
                    url="https://dexscreener.com/ethereum/0xpool",
                )
            ]
        )
        executor.context.liquidity = liquidity

        result = await executor.execute("check_liquidity", {"pool": "weth"})

        assert "Top Pool (uniswap): WETH/USDC" in result
        assert "$1,234,567" in result

    @pytest.mark.asyncio
    async def test_liquidity_no_pools(self, executor):
        liquidity = MagicMock()
        liquidity.search_pools = AsyncMock(return_value=[])
        executor.context.liquidity = liquidity

        result = await executor.execute("check_liquidity", {"pool": "ZZZZ"})

        assert result.startswith('No liquidity pools found for "ZZZZ"')


class TestPublicTransfer:
    """Tests for send_transaction."""

    @pytest.mark.asyncio
    async def test_simulation_touches_no_signer(self, executor, chain, signer):
        executor.set_signer(signer)

        result = await executor.execute(
            "send_transaction", {"to": RECIPIENT, "amount": "5"}, SIMULATE
        )

        assert SIMULATION_MARKER in result
        assert "Est. Fee: ~0.000042 SHM" in result
        assert signer.mutations == 0
        assert chain.calls == ["get_gas_price"]

    @pytest.mark.asyncio
    async def test_simulation_needs_no_wallet(self, executor):
        result = await executor.execute(
            "send_transaction", {"to": RECIPIENT, "amount": "5"}, SIMULATE
        )
        assert SIMULATION_MARKER in result

    @pytest.mark.asyncio
    async def test_simulation_validates_recipient(self, executor):
        with pytest.raises(RecipientNotFoundError):
            await executor.execute("send_transaction", {"to": "bob", "amount": "5"}, SIMULATE)

    @pytest.mark.asyncio
    async def test_live_without_wallet(self, executor):
        with pytest.raises(WalletNotConnectedError):
            await executor.execute("send_transaction", {"to": "0xAbC...123", "amount": "5"})

    @pytest.mark.asyncio
    async def test_live_missing_recipient(self, executor, signer):
        executor.set_signer(signer)

        with pytest.raises(RecipientNotFoundError):
            await executor.execute("send_transaction", {"amount": "5"})
        assert signer.mutations == 0

    @pytest.mark.asyncio
    async def test_live_missing_amount(self, executor, signer):
        executor.set_signer(signer)

        with pytest.raises(MissingAmountError):
            await executor.execute("send_transaction", {"to": RECIPIENT})
        assert signer.mutations == 0

    @pytest.mark.asyncio
    async def test_live_dust_amount_is_rejected(self, executor, signer):
        executor.set_signer(signer)

        with pytest.raises(MissingAmountError):
            await executor.execute(
                "send_transaction", {"to": RECIPIENT, "amount": "0.0000000000000000001"}
            )
        assert signer.sent == []

    @pytest.mark.asyncio
    async def test_live_sends_value_with_intent(self, executor, signer):
        executor.set_signer(signer)

        result = await executor.execute(
            "send_transaction",
            {"to": RECIPIENT, "amount": "5 SHM"},
            ExecuteOptions(reasoning="Paying the invoice"),
        )

        assert signer.sent == [(RECIPIENT, 5 * 10**18, b"Paying the invoice")]
        assert "Public Transaction Sent!" in result
        assert TX_HASH in result
        assert f"https://explorer-evm.shardeum.org/tx/{TX_HASH}" in result


class TestConfidentialTransfer:
    """Tests for confidential_execute."""

    @pytest.mark.asyncio
    async def test_simulation_touches_nothing(self, executor, signer, confidential):
        executor.set_signer(signer)

        result = await executor.execute(
            "confidential_execute", {"to": RECIPIENT, "value": "10"}, SIMULATE
        )

        assert SIMULATION_MARKER in result
        assert confidential.calls == []
        assert signer.mutations == 0

    @pytest.mark.asyncio
    async def test_live_without_wallet(self, executor, confidential):
        with pytest.raises(WalletNotConnectedError):
            await executor.execute("confidential_execute", {"to": RECIPIENT, "value": "10"})
        assert confidential.calls == []

    @pytest.mark.asyncio
    async def test_live_encrypts_amount_and_reasoning(self, executor, signer, confidential):
        executor.set_signer(signer)
        thought = "Move funds quietly before the announcement"

        result = await executor.execute(
            "confidential_execute",
            {"to": RECIPIENT, "value": "10"},
            ExecuteOptions(reasoning=thought),
        )

        assert len(confidential.calls) == 2
        amount_call, thought_call = confidential.calls
        assert amount_call["value"] == 10 * 10**18
        assert amount_call["handle_type"] is HandleType.EUINT256
        assert amount_call["account_address"] == WALLET
        assert amount_call["dapp_address"] == DECISION_LOGGER_ADDRESS
        assert isinstance(thought_call["value"], int)

        assert len(signer.confidential) == 1
        payload, value_wei = signer.confidential[0]
        assert value_wei == 10 * 10**18
        assert payload == bytes.fromhex("02" * 40)

        assert f"Tx {TX_HASH[:10]}..." in result
        assert thought not in result

    @pytest.mark.asyncio
    async def test_live_dust_amount_is_rejected(self, executor, signer, confidential):
        executor.set_signer(signer)

        with pytest.raises(MissingAmountError):
            await executor.execute("confidential_execute", {"value": "0.0000000000000000001"})
        assert confidential.calls == []
        assert signer.confidential == []

    @pytest.mark.asyncio
    async def test_amount_alias(self, executor, signer):
        executor.set_signer(signer)
        await executor.execute("confidential_execute", {"amount": "2"})
        assert signer.confidential[0][1] == 2 * 10**18

    @pytest.mark.asyncio
    async def test_encryption_integration_failure(self, registry, chain, signer):
        confidential = FakeConfidential(error=IntegrationError("bridge down", "inco"))
        executor = ToolExecutor(
            registry, ToolContext(chain=chain, signer=signer, confidential=confidential)
        )

        with pytest.raises(EncryptionFailedError):
            await executor.execute("confidential_execute", {"value": "1"})
        assert signer.mutations == 0

    @pytest.mark.asyncio
    async def test_encryption_unexpected_failure(self, registry, chain, signer):
        confidential = FakeConfidential(error=RuntimeError("wasm trap"))
        executor = ToolExecutor(
            registry, ToolContext(chain=chain, signer=signer, confidential=confidential)
        )

        with pytest.raises(EncryptionFailedError):
            await executor.execute("confidential_execute", {"value": "1"})
        assert signer.mutations == 0

    @pytest.mark.asyncio
    async def test_confidential_compute_not_configured(self, registry, chain, signer):
        executor = ToolExecutor(registry, ToolContext(chain=chain, signer=signer))

        with pytest.raises(EncryptionFailedError):
            await executor.execute("confidential_execute", {"value": "1"})


class TestOtherPrivateTools:
    """Tests for encrypt_input and generic simulation."""

    @pytest.mark.asyncio
    async def test_encrypt_input_defaults(self, executor, confidential):
        result = await executor.execute("encrypt_input", {})

        assert confidential.calls[0]["value"] == 1337
        assert confidential.calls[0]["handle_type"] is HandleType.EUINT32
        assert "INCO_ENCRYPTED_UINT32" in result
        assert "[TRUNCATED]" in result

    @pytest.mark.asyncio
    async def test_encrypt_input_value_too_wide(self, executor):
        with pytest.raises(EncryptionFailedError):
            await executor.execute("encrypt_input", {"value": "300", "type": "uint8"})

    @pytest.mark.asyncio
    async def test_simulated_write_tool_is_previewed(self, executor):
        result = await executor.execute("deploy_contract", {}, SIMULATE)

        assert result.startswith(f"{SIMULATION_MARKER}: Deploy Token validated.")

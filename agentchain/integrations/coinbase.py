"""
Coinbase price oracle client.

Reads public spot/buy/sell prices:
    GET /v2/prices/{SYMBOL}-USD/{spot|buy|sell}
    -> {"data": {"base": "ETH", "currency": "USD", "amount": "3120.55"}}

An unknown symbol answers 4xx; that is reported as "no data" (None),
not as an error.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from .base import (
    IntegrationClient,
    IntegrationConfig,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

COINBASE_API_URL = "https://api.coinbase.com"


@dataclass(frozen=True, slots=True)
class PriceQuote:
    """Spot/buy/sell prices for one symbol, in USD (strings as returned)."""

    symbol: str
    spot: str
    buy: str | None = None
    sell: str | None = None
    currency: str = "USD"


class CoinbasePriceClient(IntegrationClient):
    """
    Async client for Coinbase public price endpoints.

    Example:
        async with CoinbasePriceClient() as client:
            quote = await client.get_quote("ETH")
            if quote:
                print(quote.spot)
    """

    def __init__(
        self,
        config: IntegrationConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(config or IntegrationConfig(base_url=COINBASE_API_URL), transport=transport)

    @property
    def name(self) -> str:
        return "coinbase"

    async def get_price(self, symbol: str, side: str = "spot", currency: str = "USD") -> str | None:
        """
        Fetch one price side.

        Returns:
            Amount string, or None when Coinbase has no price for the pair
        """
        pair = f"{symbol.upper()}-{currency.upper()}"
        try:
            response = await self._request("GET", f"/v2/prices/{pair}/{side}")
        except (NotFoundError, ValidationError):
            logger.info(f"[coinbase] No {side} price for {pair}")
            return None

        data = response.json().get("data") or {}
        amount = data.get("amount")
        return str(amount) if amount is not None else None

    async def get_quote(self, symbol: str, currency: str = "USD") -> PriceQuote | None:
        """
        Fetch spot, buy and sell prices concurrently.

        Returns:
            PriceQuote, or None if no spot price exists for the symbol
        """
        spot, buy, sell = await asyncio.gather(
            self.get_price(symbol, "spot", currency),
            self.get_price(symbol, "buy", currency),
            self.get_price(symbol, "sell", currency),
        )
        if spot is None:
            return None

        return PriceQuote(
            symbol=symbol.upper(),
            spot=spot,
            buy=buy,
            sell=sell,
            currency=currency.upper(),
        )

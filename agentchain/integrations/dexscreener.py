"""
DexScreener liquidity oracle client.

    GET /latest/dex/search?q=<query>
    -> {"pairs": [{"dexId", "baseToken", "quoteToken", "priceUsd",
                   "liquidity": {"usd"}, "volume": {"h24"}, "url"}, ...]}

Missing pairs (empty list, null, or 4xx) are a normal outcome.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .base import (
    IntegrationClient,
    IntegrationConfig,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

DEXSCREENER_API_URL = "https://api.dexscreener.com"


@dataclass(frozen=True, slots=True)
class LiquidityPool:
    """Summary of one DEX pair."""

    dex_id: str
    base_symbol: str
    quote_symbol: str
    price_usd: str | None = None
    liquidity_usd: float | None = None
    volume_24h: float | None = None
    url: str | None = None

    @classmethod
    def from_pair(cls, pair: dict[str, Any]) -> LiquidityPool:
        return cls(
            dex_id=str(pair.get("dexId", "unknown")),
            base_symbol=str((pair.get("baseToken") or {}).get("symbol", "?")),
            quote_symbol=str((pair.get("quoteToken") or {}).get("symbol", "?")),
            price_usd=pair.get("priceUsd"),
            liquidity_usd=(pair.get("liquidity") or {}).get("usd"),
            volume_24h=(pair.get("volume") or {}).get("h24"),
            url=pair.get("url"),
        )


class DexScreenerClient(IntegrationClient):
    """
    Async client for the DexScreener search API.

    Example:
        async with DexScreenerClient() as client:
            pools = await client.search_pools("WETH")
    """

    def __init__(
        self,
        config: IntegrationConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(
            config or IntegrationConfig(base_url=DEXSCREENER_API_URL),
            transport=transport,
        )

    @property
    def name(self) -> str:
        return "dexscreener"

    async def search_pools(self, query: str) -> list[LiquidityPool]:
        """
        Search pairs matching a symbol or pair name.

        Returns:
            Pools in DexScreener's ranking order (empty when none exist)
        """
        try:
            response = await self._request("GET", "/latest/dex/search", params={"q": query})
        except (NotFoundError, ValidationError):
            logger.info(f"[dexscreener] No pairs for '{query}'")
            return []

        pairs = response.json().get("pairs") or []
        return [LiquidityPool.from_pair(pair) for pair in pairs if isinstance(pair, dict)]

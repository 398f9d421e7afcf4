"""CoinGecko client: market listing, single-asset lookup, and price history.

Every call goes through a JsonTransport. A non-success status or a body of
the wrong shape raises SourceUnavailable("coingecko", ...).
"""

from typing import Any

from cryptoboard.config import AggregatorSettings
from cryptoboard.exceptions import SourceUnavailable
from cryptoboard.logging import get_logger
from cryptoboard.sources.transport import HttpResponse, JsonTransport
from cryptoboard.sources.types import (
    ChartSample,
    CoinMarketEntry,
    parse_market_chart,
    parse_market_listing,
)

logger = get_logger(__name__)

SOURCE = "coingecko"


class CoinGeckoClient:
    """Thin typed wrapper over the CoinGecko v3 public API.

    Args:
        transport: JSON fetch capability.
        settings: Base URL, quote currency, and listing order.
    """

    def __init__(self, transport: JsonTransport, settings: AggregatorSettings) -> None:
        self._transport = transport
        self._settings = settings
        self._base_url = settings.base_url.rstrip("/")

    @property
    def vs_currency(self) -> str:
        return self._settings.vs_currency

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        response: HttpResponse = await self._transport.get_json(
            f"{self._base_url}{path}", params=params
        )
        if not response.ok:
            raise SourceUnavailable(SOURCE, f"{path} returned HTTP {response.status}")
        return response.body

    async def fetch_markets(
        self,
        page: int = 1,
        per_page: int = 100,
        ids: list[str] | None = None,
    ) -> list[CoinMarketEntry]:
        """Fetch one page of /coins/markets, optionally restricted to ``ids``."""
        params: dict[str, Any] = {
            "vs_currency": self._settings.vs_currency,
            "order": self._settings.market_order,
            "per_page": per_page,
            "page": page,
            "sparkline": "false",
            "price_change_percentage": "24h",
        }
        if ids:
            params["ids"] = ",".join(ids)

        body = await self._get("/coins/markets", params)
        entries = parse_market_listing(body, SOURCE)
        logger.debug("coingecko_markets_fetched", page=page, count=len(entries), ids=ids)
        return entries

    async def fetch_market_chart(self, coin_id: str, days: int) -> list[ChartSample]:
        """Fetch /coins/{id}/market_chart price samples for the last ``days`` days."""
        body = await self._get(
            f"/coins/{coin_id}/market_chart",
            {"vs_currency": self._settings.vs_currency, "days": days},
        )
        samples = parse_market_chart(body, SOURCE)
        logger.debug("coingecko_chart_fetched", coin_id=coin_id, days=days, count=len(samples))
        return samples

"""Upstream source layer -- primary venue via ccxt, CoinGecko via aiohttp."""

from cryptoboard.sources.coingecko import CoinGeckoClient
from cryptoboard.sources.transport import AiohttpTransport, HttpResponse, JsonTransport
from cryptoboard.sources.types import ChartSample, CoinMarketEntry, VenueTicker
from cryptoboard.sources.venue import CcxtVenueClient, VenueClient

__all__ = [
    "AiohttpTransport",
    "CcxtVenueClient",
    "ChartSample",
    "CoinGeckoClient",
    "CoinMarketEntry",
    "HttpResponse",
    "JsonTransport",
    "VenueClient",
    "VenueTicker",
]

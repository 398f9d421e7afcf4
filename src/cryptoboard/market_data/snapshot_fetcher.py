"""Ranked market listing from the aggregator, one page per call."""

from cryptoboard.logging import get_logger
from cryptoboard.sources.coingecko import CoinGeckoClient
from cryptoboard.sources.types import CoinMarketEntry

logger = get_logger(__name__)


class MarketSnapshotFetcher:
    """Fetches a single page of the market-cap ranked listing.

    No pagination loop: callers ask for exactly the page they display.
    Raises SourceUnavailable on a non-success response.
    """

    def __init__(self, coingecko: CoinGeckoClient) -> None:
        self._coingecko = coingecko

    async def get_market_listing(self, page: int, page_size: int) -> list[CoinMarketEntry]:
        if page < 1 or page_size < 1:
            raise ValueError(f"page and page_size must be positive (got {page}, {page_size})")
        entries = await self._coingecko.fetch_markets(page=page, per_page=page_size)
        logger.info("market_listing_fetched", page=page, count=len(entries))
        return entries

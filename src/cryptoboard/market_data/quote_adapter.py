"""Pinned-asset quote with a single fallback hop.

Tries the primary venue's 24h ticker for the pinned pair first. Any
SourceUnavailable from that attempt (network error, non-success status,
missing last price) is logged and the CoinGecko listing-of-one for the
pinned id is used instead, priced in USD and labelled as USDT
(USD≈USDT). No retries and no backoff beyond that one hop.
"""

from cryptoboard.config import BoardSettings
from cryptoboard.exceptions import SourceUnavailable
from cryptoboard.logging import get_logger
from cryptoboard.models import AssetQuote, QuoteSource
from cryptoboard.sources.coingecko import CoinGeckoClient
from cryptoboard.sources.types import CoinMarketEntry, VenueTicker
from cryptoboard.sources.venue import VenueClient

logger = get_logger(__name__)


def quote_from_venue(ticker: VenueTicker, pair: str) -> AssetQuote:
    """Normalize a primary venue ticker."""
    if ticker.last < 0:
        raise SourceUnavailable("venue", f"{pair} has negative last price {ticker.last}")
    return AssetQuote(
        symbol_pair=pair,
        price=ticker.last,
        change_24h_pct=ticker.percentage,
        volume_24h=ticker.quote_volume,
        source=QuoteSource.PRIMARY,
    )


def quote_from_listing(entry: CoinMarketEntry, pair: str, note: str) -> AssetQuote:
    """Normalize a CoinGecko listing entry into a disclosed fallback quote."""
    if entry.current_price is None:
        raise SourceUnavailable("coingecko", f"{entry.id} has no current price")
    if entry.current_price < 0:
        raise SourceUnavailable("coingecko", f"{entry.id} has negative price {entry.current_price}")
    return AssetQuote(
        symbol_pair=f"{pair}*",
        price=entry.current_price,
        change_24h_pct=entry.price_change_percentage_24h,
        volume_24h=entry.total_volume,
        source=QuoteSource.SECONDARY_FALLBACK,
        note=note,
    )


class PinnedQuoteAdapter:
    """Produces the pinned asset's AssetQuote from venue, else aggregator.

    Args:
        venue: Primary venue client.
        coingecko: Secondary aggregator client (fallback).
        settings: Pinned asset identity and disclosure note.
    """

    def __init__(
        self,
        venue: VenueClient,
        coingecko: CoinGeckoClient,
        settings: BoardSettings,
    ) -> None:
        self._venue = venue
        self._coingecko = coingecko
        self._settings = settings

    async def get_pinned_quote(self) -> AssetQuote:
        """Return the pinned quote; raise SourceUnavailable only if both sources fail."""
        pair = self._settings.pinned_pair
        try:
            ticker = await self._venue.fetch_ticker(pair)
            return quote_from_venue(ticker, pair)
        except SourceUnavailable as e:
            logger.warning("primary_quote_failed", pair=pair, error=str(e))

        asset_id = self._settings.pinned_asset_id
        try:
            entries = await self._coingecko.fetch_markets(page=1, per_page=1, ids=[asset_id])
            entry = next((e for e in entries if e.id == asset_id), None)
            if entry is None:
                raise SourceUnavailable("coingecko", f"{asset_id} not listed")
            quote = quote_from_listing(entry, pair, self._settings.fallback_note)
        except SourceUnavailable as e:
            logger.error("pinned_quote_unavailable", asset_id=asset_id, error=str(e))
            raise SourceUnavailable(
                f"pinned:{asset_id}", f"primary and fallback quote sources failed ({e})"
            ) from e

        logger.info("pinned_quote_fallback_used", pair=pair, price=str(quote.price))
        return quote

"""Merges the pinned quote with the market listing into one Snapshot.

Each refresh:
  1. FAN-OUT: listing and pinned quote requests are started together
  2. FAN-IN: both are awaited; any failure aborts the refresh
  3. MERGE: pinned row built from quote fields + listing metadata
  4. DEDUP: the pinned id is removed from the listing, pinned row prepended
  5. PUBLISH: the new Snapshot replaces the old one in a single assignment

The row list is blanked (snapshot=None, loading=True) as soon as a refresh
starts and stays blank if the refresh fails; the error is reported through
``state.error`` rather than by keeping stale rows on screen.
"""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass

from cryptoboard.config import BoardSettings
from cryptoboard.exceptions import AggregationFailure, SourceUnavailable
from cryptoboard.logging import get_logger
from cryptoboard.market_data.quote_adapter import PinnedQuoteAdapter
from cryptoboard.market_data.snapshot_fetcher import MarketSnapshotFetcher
from cryptoboard.models import AssetQuote, MarketRow, Snapshot
from cryptoboard.sources.types import CoinMarketEntry

logger = get_logger(__name__)


@dataclass(frozen=True)
class AggregatorState:
    """What the presentation layer reads: latest snapshot, loading flag, last error."""

    snapshot: Snapshot | None
    loading: bool
    error: str | None


def row_from_listing(entry: CoinMarketEntry, quote_currency: str) -> MarketRow:
    """Map a listing entry to a MarketRow; the pair is always <SYMBOL>/<quote>."""
    return MarketRow(
        id=entry.id,
        display_name=entry.name,
        symbol=entry.symbol,
        pair_label=f"{entry.symbol.upper()}/{quote_currency}",
        image_ref=entry.image,
        price=entry.current_price,
        change_24h_pct=entry.price_change_percentage_24h,
        volume_24h=entry.total_volume,
        rank=entry.market_cap_rank,
    )


def build_snapshot(
    listing: Sequence[CoinMarketEntry],
    quote: AssetQuote,
    settings: BoardSettings,
) -> Snapshot:
    """Merge listing and pinned quote into an ordered Snapshot.

    Price, change and volume of the pinned row come from the quote (the quote
    wins over the listing price). Name, image and rank come from the listing
    entry when present; the name falls back to ``pinned_display_name``.
    Every other entry keeps its listing order.
    """
    pinned_id = settings.pinned_asset_id
    listed = next((entry for entry in listing if entry.id == pinned_id), None)

    pinned_row = MarketRow(
        id=pinned_id,
        display_name=listed.name if listed is not None else settings.pinned_display_name,
        symbol=settings.pinned_symbol,
        pair_label=settings.pinned_pair,
        image_ref=listed.image if listed is not None else None,
        price=quote.price,
        change_24h_pct=quote.change_24h_pct,
        volume_24h=quote.volume_24h,
        rank=listed.market_cap_rank if listed is not None else None,
        quote=quote,
    )

    rest = tuple(
        row_from_listing(entry, settings.quote_currency)
        for entry in listing
        if entry.id != pinned_id
    )
    return Snapshot(rows=(pinned_row, *rest))


class Aggregator:
    """Owns the published Snapshot and drives refreshes.

    Overlapping refreshes are allowed. A refresh only publishes if no
    newer refresh has already published, so the board never goes back
    to older data.

    Args:
        quote_adapter: Pinned-asset quote source.
        snapshot_fetcher: Market listing source.
        settings: Pinned identity and listing page parameters.
    """

    def __init__(
        self,
        quote_adapter: PinnedQuoteAdapter,
        snapshot_fetcher: MarketSnapshotFetcher,
        settings: BoardSettings,
    ) -> None:
        self._quote_adapter = quote_adapter
        self._snapshot_fetcher = snapshot_fetcher
        self._settings = settings
        self._snapshot: Snapshot | None = None
        self._loading = False
        self._error: str | None = None
        self._generation = 0
        self._published_generation = 0

    @property
    def snapshot(self) -> Snapshot | None:
        return self._snapshot

    @property
    def state(self) -> AggregatorState:
        return AggregatorState(
            snapshot=self._snapshot, loading=self._loading, error=self._error
        )

    async def refresh(self) -> Snapshot:
        """Run one fan-out/fan-in refresh and publish the merged Snapshot.

        Raises:
            AggregationFailure: If the listing, the pinned quote, or both
                failed. Nothing is published in that case.
        """
        self._generation += 1
        generation = self._generation

        self._snapshot = None
        self._loading = True
        self._error = None
        logger.info("refresh_started", generation=generation)

        try:
            listing_task = asyncio.create_task(
                self._snapshot_fetcher.get_market_listing(
                    self._settings.listing_page, self._settings.listing_page_size
                )
            )
            quote_task = asyncio.create_task(self._quote_adapter.get_pinned_quote())
            results = await asyncio.gather(listing_task, quote_task, return_exceptions=True)

            failures: list[SourceUnavailable] = []
            for result in results:
                if isinstance(result, SourceUnavailable):
                    failures.append(result)
                elif isinstance(result, BaseException):
                    raise result

            if failures:
                failure = AggregationFailure(failures)
                if generation == self._generation:
                    self._error = str(failure)
                logger.error("refresh_failed", generation=generation, error=str(failure))
                raise failure

            listing, quote = results
            snapshot = build_snapshot(listing, quote, self._settings)

            if generation > self._published_generation:
                self._snapshot = snapshot
                self._published_generation = generation
                logger.info(
                    "snapshot_published",
                    generation=generation,
                    rows=len(snapshot),
                    pinned_source=quote.source.value,
                )
            else:
                logger.debug(
                    "stale_snapshot_dropped",
                    generation=generation,
                    published=self._published_generation,
                )
            return snapshot
        finally:
            if generation == self._generation:
                self._loading = False

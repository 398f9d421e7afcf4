"""Market data layer -- pinned quote, market listing, snapshot merge, and price history."""

from cryptoboard.market_data.aggregator import Aggregator, AggregatorState, build_snapshot
from cryptoboard.market_data.history import HistoryFetcher
from cryptoboard.market_data.quote_adapter import PinnedQuoteAdapter
from cryptoboard.market_data.snapshot_fetcher import MarketSnapshotFetcher

__all__ = [
    "Aggregator",
    "AggregatorState",
    "HistoryFetcher",
    "MarketSnapshotFetcher",
    "PinnedQuoteAdapter",
    "build_snapshot",
]

"""Tests for MarketSnapshotFetcher."""

from unittest.mock import AsyncMock

import pytest

from cryptoboard.exceptions import SourceUnavailable
from cryptoboard.market_data.snapshot_fetcher import MarketSnapshotFetcher
from cryptoboard.sources.coingecko import CoinGeckoClient


@pytest.fixture
def coingecko(listing) -> AsyncMock:
    client = AsyncMock(spec=CoinGeckoClient)
    client.fetch_markets.return_value = listing
    return client


@pytest.mark.asyncio
async def test_requests_exactly_one_page(coingecko: AsyncMock, listing) -> None:
    fetcher = MarketSnapshotFetcher(coingecko)
    entries = await fetcher.get_market_listing(1, 100)
    coingecko.fetch_markets.assert_awaited_once_with(page=1, per_page=100)
    assert entries == listing


@pytest.mark.asyncio
async def test_failure_propagates(coingecko: AsyncMock) -> None:
    coingecko.fetch_markets.side_effect = SourceUnavailable("coingecko", "HTTP 500")
    with pytest.raises(SourceUnavailable):
        await MarketSnapshotFetcher(coingecko).get_market_listing(1, 100)


@pytest.mark.asyncio
async def test_rejects_non_positive_page(coingecko: AsyncMock) -> None:
    with pytest.raises(ValueError):
        await MarketSnapshotFetcher(coingecko).get_market_listing(0, 100)
    coingecko.fetch_markets.assert_not_awaited()

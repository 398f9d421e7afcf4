"""Shared test fixtures for the crypto board."""

from decimal import Decimal

import pytest

from cryptoboard.config import AggregatorSettings, AppSettings, BoardSettings, VenueSettings
from cryptoboard.sources.types import CoinMarketEntry

PINNED_ID = "vanar-chain"


def make_entry(
    coin_id: str,
    symbol: str | None = None,
    name: str | None = None,
    price: str | None = "1",
    change: str | None = "0",
    rank: int | None = None,
    volume: str | None = "1000",
    image: str | None = None,
) -> CoinMarketEntry:
    """Build a CoinMarketEntry with sensible defaults."""
    return CoinMarketEntry(
        id=coin_id,
        symbol=symbol if symbol is not None else coin_id[:4],
        name=name if name is not None else coin_id.replace("-", " ").title(),
        image=image,
        current_price=Decimal(price) if price is not None else None,
        price_change_percentage_24h=Decimal(change) if change is not None else None,
        total_volume=Decimal(volume) if volume is not None else None,
        market_cap_rank=rank,
    )


def make_listing(count: int = 100, pinned_at: int | None = 40) -> list[CoinMarketEntry]:
    """A ranked listing of ``count`` coins, the pinned one at ``pinned_at``."""
    listing = []
    for i in range(count):
        if i == pinned_at:
            listing.append(
                make_entry(
                    PINNED_ID,
                    symbol="vanry",
                    name="Vanar Chain",
                    price="12.34",
                    change="3.5",
                    rank=i + 1,
                    image="https://img.example/vanry.png",
                )
            )
        else:
            change = "1.5" if i % 2 == 0 else "-2.25"
            listing.append(
                make_entry(f"coin-{i}", symbol=f"c{i}", name=f"Coin {i}", change=change, rank=i + 1)
            )
    return listing


@pytest.fixture
def board_settings() -> BoardSettings:
    """BoardSettings with defaults (pinned VANRY, 100-row page, 400ms debounce)."""
    return BoardSettings()


@pytest.fixture
def mock_settings() -> AppSettings:
    """Return AppSettings with test defaults."""
    return AppSettings(
        log_level="DEBUG",
        venue=VenueSettings(exchange_id="binance"),
        aggregator=AggregatorSettings(),
        board=BoardSettings(),
    )


@pytest.fixture
def entry_factory():
    """The make_entry builder, for tests that need custom listing entries."""
    return make_entry


@pytest.fixture
def listing() -> list[CoinMarketEntry]:
    """100-coin listing with the pinned coin at position 40 (rank 41, price 12.34)."""
    return make_listing()

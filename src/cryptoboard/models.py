"""Shared data models for the crypto market board.

All monetary values use Decimal. Raw provider payloads never reach these
types; see cryptoboard.sources.types for the per-source DTOs.
"""

import time
from collections.abc import Iterator
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum, IntEnum


class QuoteSource(str, Enum):
    """Where the pinned asset's quote came from."""

    PRIMARY = "primary"
    SECONDARY_FALLBACK = "secondary_fallback"


class ChangeDirection(str, Enum):
    """24h change filter."""

    ALL = "all"
    UP = "up"
    DOWN = "down"


class LookbackWindow(IntEnum):
    """History lookback window in days."""

    ONE_DAY = 1
    WEEK = 7
    MONTH = 30
    QUARTER = 90


@dataclass(frozen=True)
class AssetQuote:
    """Normalized quote for the pinned asset.

    A note is only ever attached to a fallback quote; it discloses the
    USD≈USDT approximation.
    """

    symbol_pair: str
    price: Decimal
    change_24h_pct: Decimal | None
    volume_24h: Decimal | None
    source: QuoteSource
    note: str | None = None

    def __post_init__(self) -> None:
        if self.price < 0:
            raise ValueError(f"negative price for {self.symbol_pair}: {self.price}")
        if self.note is not None and self.source is not QuoteSource.SECONDARY_FALLBACK:
            raise ValueError("note is only allowed on secondary fallback quotes")


@dataclass(frozen=True)
class MarketRow:
    """One row of the market board."""

    id: str
    display_name: str
    symbol: str
    pair_label: str
    image_ref: str | None = None
    price: Decimal | None = None
    change_24h_pct: Decimal | None = None
    volume_24h: Decimal | None = None
    rank: int | None = None
    quote: AssetQuote | None = None  # pinned row only

    @property
    def source(self) -> QuoteSource | None:
        return self.quote.source if self.quote is not None else None

    @property
    def note(self) -> str | None:
        return self.quote.note if self.quote is not None else None


@dataclass(frozen=True)
class Snapshot:
    """One complete merged view of all rows, pinned row first.

    Immutable: a refresh replaces the whole snapshot.
    """

    rows: tuple[MarketRow, ...]
    taken_at: float = field(default_factory=time.time)

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[MarketRow]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> MarketRow:
        return self.rows[index]

    @property
    def pinned(self) -> MarketRow:
        return self.rows[0]

    def find(self, asset_id: str) -> MarketRow | None:
        for row in self.rows:
            if row.id == asset_id:
                return row
        return None


@dataclass(frozen=True)
class HistoryPoint:
    """A single (timestamp, price) sample of a price chart."""

    timestamp_ms: int
    price: Decimal


@dataclass(frozen=True)
class HistorySeries:
    """Price samples for one asset and lookback window, oldest first."""

    asset_id: str
    lookback_days: int
    points: tuple[HistoryPoint, ...] = ()

    def __len__(self) -> int:
        return len(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points


@dataclass
class SelectionState:
    """Which asset has its chart panel open, and over which window."""

    selected_asset_id: str | None = None
    lookback_days: LookbackWindow = LookbackWindow.WEEK

    @property
    def is_open(self) -> bool:
        return self.selected_asset_id is not None


@dataclass
class FilterState:
    """Applied (already debounced) search term and change-direction filter."""

    search_term: str = ""
    change_direction: ChangeDirection = ChangeDirection.ALL


@dataclass
class SessionState:
    """Process-wide UI state, owned by the BoardController."""

    filter: FilterState = field(default_factory=FilterState)
    selection: SelectionState = field(default_factory=SelectionState)

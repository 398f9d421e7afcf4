"""Typed payloads for each upstream source, and the parsers that build them.

All monetary values use Decimal. Parsers raise SourceUnavailable when a
field the board depends on is missing or malformed, so raw dicts never
leave the sources package.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from cryptoboard.exceptions import SourceUnavailable


@dataclass(frozen=True)
class VenueTicker:
    """24h ticker for one trading pair on the primary venue."""

    symbol: str
    last: Decimal
    percentage: Decimal | None
    quote_volume: Decimal | None


@dataclass(frozen=True)
class CoinMarketEntry:
    """One record of the aggregator's /coins/markets listing."""

    id: str
    symbol: str
    name: str
    image: str | None
    current_price: Decimal | None
    price_change_percentage_24h: Decimal | None
    total_volume: Decimal | None
    market_cap_rank: int | None


@dataclass(frozen=True)
class ChartSample:
    """One [timestamp_ms, price] pair from /coins/{id}/market_chart."""

    timestamp_ms: int
    price: Decimal


def to_decimal(value: Any) -> Decimal | None:
    """Convert a JSON number/string to Decimal, None for null or non-numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def to_int(value: Any) -> int | None:
    """Convert a JSON number to int, None for null, bool, non-numeric or NaN/Infinity."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return int(value)


def parse_venue_ticker(raw: Any, source: str) -> VenueTicker:
    """Build a VenueTicker from a ccxt unified ticker dict.

    Missing, non-numeric or negative ``last`` means the venue gave us
    nothing usable.
    """
    if not isinstance(raw, dict):
        raise SourceUnavailable(source, "ticker payload is not an object")
    last = to_decimal(raw.get("last"))
    if last is None:
        raise SourceUnavailable(source, "ticker payload has no last price")
    if last < 0:
        raise SourceUnavailable(source, f"ticker payload has negative last price {last}")
    return VenueTicker(
        symbol=str(raw.get("symbol") or ""),
        last=last,
        percentage=to_decimal(raw.get("percentage")),
        quote_volume=to_decimal(raw.get("quoteVolume")),
    )


def parse_coin_market_entry(raw: Any, source: str) -> CoinMarketEntry:
    """Build a CoinMarketEntry; id, symbol and name are required."""
    if not isinstance(raw, dict):
        raise SourceUnavailable(source, "market entry is not an object")
    try:
        coin_id = str(raw["id"])
        symbol = str(raw["symbol"])
        name = str(raw["name"])
    except KeyError as e:
        raise SourceUnavailable(source, f"market entry missing {e.args[0]}") from e

    return CoinMarketEntry(
        id=coin_id,
        symbol=symbol,
        name=name,
        image=raw.get("image") or None,
        current_price=to_decimal(raw.get("current_price")),
        price_change_percentage_24h=to_decimal(raw.get("price_change_percentage_24h")),
        total_volume=to_decimal(raw.get("total_volume")),
        market_cap_rank=to_int(raw.get("market_cap_rank")),
    )


def parse_market_listing(raw: Any, source: str) -> list[CoinMarketEntry]:
    if not isinstance(raw, list):
        raise SourceUnavailable(source, "market listing is not an array")
    return [parse_coin_market_entry(item, source) for item in raw]


def parse_market_chart(raw: Any, source: str) -> list[ChartSample]:
    """Extract the ``prices`` samples, preserving the source order.

    A payload without ``prices`` is an empty chart, not an error. Samples
    that are not a [number, number] pair are skipped.
    """
    if not isinstance(raw, dict):
        raise SourceUnavailable(source, "market chart is not an object")

    prices = raw.get("prices") or []
    if not isinstance(prices, list):
        raise SourceUnavailable(source, "market chart prices is not an array")

    samples: list[ChartSample] = []
    for item in prices:
        if not isinstance(item, (list, tuple)) or len(item) < 2:
            continue
        timestamp_ms = to_int(item[0])
        price = to_decimal(item[1])
        if timestamp_ms is None or price is None:
            continue
        samples.append(ChartSample(timestamp_ms=timestamp_ms, price=price))
    return samples

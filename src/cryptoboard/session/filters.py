"""Change-direction and text search filtering over snapshot rows.

Pure and order-preserving: rows are only dropped, never reordered, so
applying the same FilterState twice gives the same result as once.
"""

from collections.abc import Iterable
from decimal import Decimal

from cryptoboard.models import ChangeDirection, FilterState, MarketRow

_ZERO = Decimal("0")


def _matches_direction(row: MarketRow, direction: ChangeDirection) -> bool:
    change = row.change_24h_pct if row.change_24h_pct is not None else _ZERO
    if direction is ChangeDirection.UP:
        return change >= 0
    if direction is ChangeDirection.DOWN:
        return change <= 0
    return True


def _matches_term(row: MarketRow, term: str) -> bool:
    return (
        term in row.display_name.lower()
        or term in row.symbol.lower()
        or term in row.pair_label.lower()
    )


def filter_rows(rows: Iterable[MarketRow], state: FilterState) -> tuple[MarketRow, ...]:
    """Return the rows visible under ``state``.

    Missing 24h change counts as zero, so it passes both "up" and "down".
    The search term is trimmed and matched case-insensitively against the
    display name, symbol and pair label.
    """
    direction = ChangeDirection(state.change_direction)
    term = state.search_term.strip().lower()
    return tuple(
        row
        for row in rows
        if _matches_direction(row, direction) and (not term or _matches_term(row, term))
    )

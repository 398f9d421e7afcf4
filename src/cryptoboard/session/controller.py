"""Top-level board controller.

Owns the single SessionState (filter + selection) and wires it to the
Aggregator, the search Debouncer, the SelectionMachine and the NoticeBoard.
The presentation layer talks only to this object.
"""

from __future__ import annotations

import asyncio

from cryptoboard.config import BoardSettings
from cryptoboard.exceptions import SourceUnavailable, UnknownAsset
from cryptoboard.logging import get_logger
from cryptoboard.market_data.aggregator import Aggregator, AggregatorState
from cryptoboard.market_data.history import HistoryFetcher
from cryptoboard.models import (
    ChangeDirection,
    FilterState,
    LookbackWindow,
    MarketRow,
    SelectionState,
    SessionState,
)
from cryptoboard.session.debounce import Debouncer
from cryptoboard.session.filters import filter_rows
from cryptoboard.session.notices import NoticeBoard
from cryptoboard.session.selection import HistoryPanel, SelectionMachine

logger = get_logger(__name__)


class BoardController:
    """Session-level facade over the board's data and UI state.

    Args:
        aggregator: Snapshot owner.
        history: History source for the chart panel.
        settings: Debounce delay, default lookback, notice TTL.
    """

    def __init__(
        self,
        aggregator: Aggregator,
        history: HistoryFetcher,
        settings: BoardSettings,
    ) -> None:
        self._aggregator = aggregator
        self._settings = settings
        self._session = SessionState(
            filter=FilterState(),
            selection=SelectionState(
                lookback_days=LookbackWindow(settings.default_lookback_days)
            ),
        )
        self._notices = NoticeBoard(ttl_seconds=settings.notice_ttl_seconds)
        self._selection = SelectionMachine(self._session.selection, history, self._notices)
        self._search = Debouncer[str](
            settings.search_debounce_ms / 1000, self._apply_search_term
        )

    # ──────────────────────────────────────────────
    # State access
    # ──────────────────────────────────────────────

    @property
    def session(self) -> SessionState:
        return self._session

    @property
    def notices(self) -> NoticeBoard:
        return self._notices

    @property
    def selection(self) -> SelectionMachine:
        return self._selection

    @property
    def board_state(self) -> AggregatorState:
        return self._aggregator.state

    def visible_rows(self) -> tuple[MarketRow, ...]:
        """Rows of the current snapshot under the applied filter; empty while loading."""
        snapshot = self._aggregator.snapshot
        if snapshot is None:
            return ()
        return filter_rows(snapshot, self._session.filter)

    def pinned_row(self) -> MarketRow | None:
        snapshot = self._aggregator.snapshot
        return snapshot.pinned if snapshot is not None else None

    def history_panel(self) -> HistoryPanel:
        return self._selection.panel

    # ──────────────────────────────────────────────
    # Refresh
    # ──────────────────────────────────────────────

    async def refresh(self) -> AggregatorState:
        """Run one refresh; failures land in ``board_state.error``, not as exceptions."""
        try:
            await self._aggregator.refresh()
        except SourceUnavailable as e:
            logger.warning("board_refresh_failed", error=str(e))
        return self._aggregator.state

    # ──────────────────────────────────────────────
    # Filtering
    # ──────────────────────────────────────────────

    def type_search(self, raw: str) -> None:
        """Feed raw search input; applied after the debounce window."""
        self._search.push(raw)

    def set_search(self, term: str) -> None:
        """Apply a search term immediately, dropping any pending debounced input."""
        self._search.cancel()
        self._apply_search_term(term)

    def set_change_direction(self, direction: ChangeDirection | str) -> None:
        self._session.filter.change_direction = ChangeDirection(direction)

    def _apply_search_term(self, term: str) -> None:
        self._session.filter.search_term = term
        logger.debug("search_term_applied", term=term)

    # ──────────────────────────────────────────────
    # Selection
    # ──────────────────────────────────────────────

    def select(self, asset_id: str) -> asyncio.Task | None:  # type: ignore[type-arg]
        """Open the chart panel for a row of the current snapshot."""
        snapshot = self._aggregator.snapshot
        if snapshot is None or snapshot.find(asset_id) is None:
            raise UnknownAsset(asset_id)
        return self._selection.select(asset_id)

    def set_lookback(self, days: int) -> asyncio.Task | None:  # type: ignore[type-arg]
        return self._selection.set_lookback(days)

    def dismiss(self) -> None:
        self._selection.dismiss()

    async def close(self) -> None:
        self._search.cancel()
        await self._selection.close()

"""Tests for BoardController: refresh reporting, debounced search, selection wiring."""

import asyncio
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from cryptoboard.config import BoardSettings
from cryptoboard.exceptions import HistoryUnavailable, SourceUnavailable, UnknownAsset
from cryptoboard.market_data.aggregator import Aggregator
from cryptoboard.market_data.history import HistoryFetcher
from cryptoboard.market_data.quote_adapter import PinnedQuoteAdapter
from cryptoboard.market_data.snapshot_fetcher import MarketSnapshotFetcher
from cryptoboard.models import AssetQuote, ChangeDirection, HistoryPoint, HistorySeries, QuoteSource
from cryptoboard.session.controller import BoardController
from cryptoboard.session.selection import PanelStatus

QUOTE = AssetQuote(
    symbol_pair="VANRY/USDT",
    price=Decimal("0.0345"),
    change_24h_pct=Decimal("2"),
    volume_24h=Decimal("1000"),
    source=QuoteSource.PRIMARY,
)


@pytest.fixture
def settings() -> BoardSettings:
    return BoardSettings(search_debounce_ms=30, default_lookback_days=7)


@pytest.fixture
def quote_adapter() -> AsyncMock:
    adapter = AsyncMock(spec=PinnedQuoteAdapter)
    adapter.get_pinned_quote.return_value = QUOTE
    return adapter


@pytest.fixture
def snapshot_fetcher(listing) -> AsyncMock:
    fetcher = AsyncMock(spec=MarketSnapshotFetcher)
    fetcher.get_market_listing.return_value = listing
    return fetcher


@pytest.fixture
def history() -> AsyncMock:
    fetcher = AsyncMock(spec=HistoryFetcher)

    async def get_history(asset_id: str, lookback_days: int) -> HistorySeries:
        return HistorySeries(
            asset_id=asset_id,
            lookback_days=lookback_days,
            points=(HistoryPoint(1700000000000, Decimal("1")),),
        )

    fetcher.get_history.side_effect = get_history
    return fetcher


@pytest.fixture
def controller(
    quote_adapter: AsyncMock,
    snapshot_fetcher: AsyncMock,
    history: AsyncMock,
    settings: BoardSettings,
) -> BoardController:
    aggregator = Aggregator(quote_adapter, snapshot_fetcher, settings)
    return BoardController(aggregator, history, settings)


class TestInitialState:
    def test_session_defaults(self, controller: BoardController) -> None:
        session = controller.session
        assert session.filter.search_term == ""
        assert session.filter.change_direction is ChangeDirection.ALL
        assert session.selection.selected_asset_id is None
        assert int(session.selection.lookback_days) == 7

    def test_no_rows_before_first_refresh(self, controller: BoardController) -> None:
        assert controller.visible_rows() == ()
        assert controller.pinned_row() is None


class TestRefresh:
    @pytest.mark.asyncio
    async def test_refresh_populates_rows(self, controller: BoardController) -> None:
        state = await controller.refresh()

        assert state.error is None
        rows = controller.visible_rows()
        assert len(rows) == 100
        assert rows[0].id == "vanar-chain"
        assert controller.pinned_row().price == Decimal("0.0345")

    @pytest.mark.asyncio
    async def test_refresh_failure_is_reported_not_raised(
        self, controller: BoardController, snapshot_fetcher: AsyncMock
    ) -> None:
        await controller.refresh()
        snapshot_fetcher.get_market_listing.side_effect = SourceUnavailable("coingecko", "HTTP 500")

        state = await controller.refresh()

        assert state.error is not None
        assert "coingecko" in state.error
        assert state.snapshot is None
        assert controller.visible_rows() == ()


class TestFiltering:
    @pytest.mark.asyncio
    async def test_typed_search_applies_after_pause(self, controller: BoardController) -> None:
        await controller.refresh()

        for partial in ("v", "va", "van"):
            controller.type_search(partial)
        assert len(controller.visible_rows()) == 100

        await asyncio.sleep(0.1)
        assert controller.session.filter.search_term == "van"
        assert [r.id for r in controller.visible_rows()] == ["vanar-chain"]

    @pytest.mark.asyncio
    async def test_set_search_overrides_pending_input(self, controller: BoardController) -> None:
        await controller.refresh()
        controller.type_search("van")
        controller.set_search("coin 99")
        await asyncio.sleep(0.1)

        assert controller.session.filter.search_term == "coin 99"
        assert [r.display_name for r in controller.visible_rows()] == ["Coin 99"]

    @pytest.mark.asyncio
    async def test_change_direction(self, controller: BoardController) -> None:
        await controller.refresh()
        controller.set_change_direction("down")
        rows = controller.visible_rows()
        assert rows
        assert all(r.change_24h_pct is None or r.change_24h_pct <= 0 for r in rows)
        assert "vanar-chain" not in [r.id for r in rows]

    def test_invalid_direction(self, controller: BoardController) -> None:
        with pytest.raises(ValueError):
            controller.set_change_direction("sideways")


class TestSelection:
    @pytest.mark.asyncio
    async def test_select_requires_snapshot_row(self, controller: BoardController) -> None:
        with pytest.raises(UnknownAsset):
            controller.select("vanar-chain")

        await controller.refresh()
        with pytest.raises(UnknownAsset):
            controller.select("not-listed")

    @pytest.mark.asyncio
    async def test_select_and_change_lookback(
        self, controller: BoardController, history: AsyncMock
    ) -> None:
        await controller.refresh()

        controller.select("coin-1")
        await controller.selection.wait()
        controller.set_lookback(90)
        panel = await controller.selection.wait()

        assert [c.args for c in history.get_history.await_args_list] == [("coin-1", 7), ("coin-1", 90)]
        assert panel.status is PanelStatus.READY
        assert panel.series.lookback_days == 90
        assert controller.session.selection.selected_asset_id == "coin-1"

    @pytest.mark.asyncio
    async def test_history_failure_posts_notice(
        self, controller: BoardController, history: AsyncMock
    ) -> None:
        await controller.refresh()
        history.get_history.side_effect = HistoryUnavailable("coin-1", 7, "HTTP 429")

        controller.select("coin-1")
        panel = await controller.selection.wait()

        assert panel.status is PanelStatus.NO_DATA
        assert len(controller.notices.active()) == 1

    @pytest.mark.asyncio
    async def test_dismiss_and_close(self, controller: BoardController) -> None:
        await controller.refresh()
        controller.select("coin-1")
        controller.dismiss()
        assert controller.history_panel().status is PanelStatus.CLOSED
        await controller.close()

"""Chart panel state machine: Closed <-> Open(asset, lookback).

Transitions:
  Closed --select(asset)--> Open(asset, lookback)   loads history
  Open   --select(other)--> Open(other, lookback)   reloads history
  Open   --set_lookback--> Open(asset, new)          reloads history
  Open   --dismiss-------> Closed                    drops any in-flight load

Every load takes a fresh request id and cancels the previous task. A
result is only applied if its request id is still the current one, so a
slow response for an earlier (asset, lookback) pair can never replace the
series of the current one.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum

import structlog

from cryptoboard.exceptions import HistoryUnavailable
from cryptoboard.logging import get_logger
from cryptoboard.market_data.history import HistoryFetcher
from cryptoboard.models import HistorySeries, LookbackWindow, SelectionState
from cryptoboard.session.notices import NoticeBoard

logger = get_logger(__name__)

CHART_FAILED_MESSAGE = "Failed to load chart data"


class PanelStatus(str, Enum):
    CLOSED = "closed"
    LOADING = "loading"
    READY = "ready"
    NO_DATA = "no_data"


@dataclass(frozen=True)
class HistoryPanel:
    """What the chart panel shows right now."""

    status: PanelStatus
    series: HistorySeries | None = None


class SelectionMachine:
    """Drives HistoryFetcher from changes to a shared SelectionState.

    Args:
        state: Selection cell owned by the session controller (mutated in place).
        history: History source.
        notices: Where chart failures are reported.
    """

    def __init__(
        self,
        state: SelectionState,
        history: HistoryFetcher,
        notices: NoticeBoard,
    ) -> None:
        self._state = state
        self._history = history
        self._notices = notices
        self._request_id = 0
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]
        self._panel = HistoryPanel(PanelStatus.CLOSED)

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def panel(self) -> HistoryPanel:
        return self._panel

    @property
    def request_id(self) -> int:
        return self._request_id

    def select(self, asset_id: str) -> asyncio.Task | None:  # type: ignore[type-arg]
        """Open (or switch) the panel to ``asset_id``.

        Re-selecting the asset already shown is a no-op unless its last
        load ended with no data, in which case it retries.
        """
        if (
            asset_id == self._state.selected_asset_id
            and self._panel.status in (PanelStatus.LOADING, PanelStatus.READY)
        ):
            return self._task
        self._state.selected_asset_id = asset_id
        return self._reload()

    def set_lookback(self, days: int) -> asyncio.Task | None:  # type: ignore[type-arg]
        """Change the lookback window; reloads only while the panel is open.

        Raises:
            ValueError: If ``days`` is not one of the supported windows.
        """
        window = LookbackWindow(days)
        if window == self._state.lookback_days:
            return self._task
        self._state.lookback_days = window
        if not self._state.is_open:
            return None
        return self._reload()

    def dismiss(self) -> None:
        """Close the panel and abandon any in-flight load."""
        self._state.selected_asset_id = None
        self._supersede()
        self._panel = HistoryPanel(PanelStatus.CLOSED)

    async def wait(self) -> HistoryPanel:
        """Wait for the current load (if any) to finish; return the panel."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.wait({task})
        return self._panel

    async def close(self) -> None:
        task = self._task
        self._supersede()
        if task is not None:
            await asyncio.wait({task})

    def _supersede(self) -> None:
        self._request_id += 1
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _reload(self) -> asyncio.Task:  # type: ignore[type-arg]
        self._supersede()
        asset_id = self._state.selected_asset_id
        days = int(self._state.lookback_days)
        self._panel = HistoryPanel(PanelStatus.LOADING)
        self._task = asyncio.create_task(self._load(self._request_id, asset_id, days))
        return self._task

    async def _load(self, request_id: int, asset_id: str, days: int) -> None:
        structlog.contextvars.bind_contextvars(history_request=request_id)
        try:
            series = await self._history.get_history(asset_id, days)
        except HistoryUnavailable as e:
            if request_id != self._request_id:
                logger.debug("stale_history_failure_ignored", asset_id=asset_id, days=days)
                return
            logger.warning("history_load_failed", asset_id=asset_id, days=days, error=str(e))
            self._panel = HistoryPanel(PanelStatus.NO_DATA)
            self._notices.post(CHART_FAILED_MESSAGE)
            return

        if request_id != self._request_id:
            logger.debug("stale_history_discarded", asset_id=asset_id, days=days)
            return

        status = PanelStatus.READY if not series.is_empty else PanelStatus.NO_DATA
        self._panel = HistoryPanel(status, series)
        logger.info("history_displayed", asset_id=asset_id, days=days, points=len(series))

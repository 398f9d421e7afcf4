"""Price history for one asset over a lookback window."""

from cryptoboard.exceptions import HistoryUnavailable, SourceUnavailable
from cryptoboard.logging import get_logger
from cryptoboard.models import HistoryPoint, HistorySeries, LookbackWindow
from cryptoboard.sources.coingecko import CoinGeckoClient

logger = get_logger(__name__)


class HistoryFetcher:
    """Fetches and maps market_chart samples 1:1 to HistoryPoints.

    Samples are taken in the order the source returns them (oldest first);
    they are not re-sorted. Timestamp formatting is left to presentation.
    """

    def __init__(self, coingecko: CoinGeckoClient) -> None:
        self._coingecko = coingecko

    async def get_history(self, asset_id: str, lookback_days: int) -> HistorySeries:
        """Return the series for ``asset_id``; raise HistoryUnavailable on failure."""
        days = LookbackWindow(lookback_days)
        try:
            samples = await self._coingecko.fetch_market_chart(asset_id, int(days))
        except SourceUnavailable as e:
            raise HistoryUnavailable(asset_id, int(days), str(e)) from e

        points = tuple(HistoryPoint(timestamp_ms=s.timestamp_ms, price=s.price) for s in samples)
        logger.debug("history_loaded", asset_id=asset_id, days=int(days), points=len(points))
        return HistorySeries(asset_id=asset_id, lookback_days=int(days), points=points)

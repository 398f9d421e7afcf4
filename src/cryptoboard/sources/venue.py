"""Primary venue ticker client via ccxt async.

The board only needs one public endpoint (24h ticker for the pinned pair),
so no API keys and no market loading beyond what ccxt does on first call.
"""

from abc import ABC, abstractmethod

import ccxt
import ccxt.async_support as ccxt_async

from cryptoboard.config import VenueSettings
from cryptoboard.exceptions import SourceTimeout, SourceUnavailable
from cryptoboard.logging import get_logger
from cryptoboard.sources.types import VenueTicker, parse_venue_ticker

logger = get_logger(__name__)


class VenueClient(ABC):
    """Abstract primary-venue client."""

    name: str = "venue"

    @abstractmethod
    async def fetch_ticker(self, symbol: str) -> VenueTicker:
        """Fetch the 24h ticker for a unified pair symbol (e.g. "VANRY/USDT")."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources (CRITICAL for ccxt async)."""
        ...


class CcxtVenueClient(VenueClient):
    """Concrete venue client wrapping a ccxt async exchange."""

    def __init__(self, settings: VenueSettings) -> None:
        exchange_cls = getattr(ccxt_async, settings.exchange_id, None)
        if exchange_cls is None:
            raise ValueError(f"Unknown ccxt exchange id: {settings.exchange_id}")

        self.name = settings.exchange_id
        self._exchange = exchange_cls(
            {
                "enableRateLimit": True,
                "timeout": int(settings.timeout_seconds * 1000),
                "options": {"defaultType": "spot"},
            }
        )

    @property
    def exchange(self) -> ccxt_async.Exchange:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    async def fetch_ticker(self, symbol: str) -> VenueTicker:
        try:
            raw = await self._exchange.fetch_ticker(symbol)
        except ccxt.RequestTimeout as e:
            raise SourceTimeout(self.name, f"{symbol}: {e}") from e
        except ccxt.BaseError as e:
            raise SourceUnavailable(self.name, f"{symbol}: {e}") from e

        ticker = parse_venue_ticker(raw, self.name)
        logger.debug("venue_ticker_fetched", venue=self.name, symbol=symbol, last=str(ticker.last))
        return ticker

    async def close(self) -> None:
        logger.info("closing_venue_connection", venue=self.name)
        await self._exchange.close()

"""Entry point for the crypto board.

Wires all components together, embeds the FastAPI dashboard, and runs the
initial refresh inside the FastAPI lifespan so the board is populated as
soon as the server is up.

Component wiring order (in _build_components):
1. AiohttpTransport (shared CoinGecko HTTP session)
2. CoinGeckoClient (listing, listing-of-one, market chart)
3. CcxtVenueClient (primary venue ticker)
4. PinnedQuoteAdapter (venue first, CoinGecko fallback)
5. MarketSnapshotFetcher (ranked listing page)
6. Aggregator (snapshot merge and publish)
7. HistoryFetcher (price chart series)
8. BoardController (session state, filter, selection, notices)
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import uvicorn
from fastapi import FastAPI

from cryptoboard.config import AppSettings
from cryptoboard.logging import get_logger, setup_logging
from cryptoboard.market_data.aggregator import Aggregator
from cryptoboard.market_data.history import HistoryFetcher
from cryptoboard.market_data.quote_adapter import PinnedQuoteAdapter
from cryptoboard.market_data.snapshot_fetcher import MarketSnapshotFetcher
from cryptoboard.session.controller import BoardController
from cryptoboard.sources.coingecko import CoinGeckoClient
from cryptoboard.sources.transport import AiohttpTransport
from cryptoboard.sources.venue import CcxtVenueClient


def _build_components(settings: AppSettings) -> dict[str, Any]:
    """Build all board components from settings.

    Does not touch the network; the first refresh happens in the lifespan
    (dashboard mode) or run() (headless mode).

    Args:
        settings: Application-wide settings.

    Returns:
        Dict mapping component names to instances.
    """
    headers: dict[str, str] = {}
    api_key = settings.aggregator.api_key.get_secret_value()
    if api_key:
        headers["x-cg-demo-api-key"] = api_key

    transport = AiohttpTransport(settings.aggregator.timeout_seconds, headers=headers)
    coingecko = CoinGeckoClient(transport, settings.aggregator)
    venue = CcxtVenueClient(settings.venue)

    quote_adapter = PinnedQuoteAdapter(venue, coingecko, settings.board)
    snapshot_fetcher = MarketSnapshotFetcher(coingecko)
    aggregator = Aggregator(quote_adapter, snapshot_fetcher, settings.board)
    history = HistoryFetcher(coingecko)
    controller = BoardController(aggregator, history, settings.board)

    return {
        "transport": transport,
        "coingecko": coingecko,
        "venue": venue,
        "quote_adapter": quote_adapter,
        "snapshot_fetcher": snapshot_fetcher,
        "aggregator": aggregator,
        "history": history,
        "controller": controller,
    }


async def _shutdown(components: dict[str, Any]) -> None:
    await components["controller"].close()
    await components["venue"].close()
    await components["transport"].close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run the initial refresh on startup; close network clients on shutdown."""
    logger = get_logger("cryptoboard.main")
    components = app.state.components
    app.state.controller = components["controller"]

    refresh_task = asyncio.create_task(components["controller"].refresh())
    logger.info("lifespan_started")

    yield

    if not refresh_task.done():
        refresh_task.cancel()
    await asyncio.wait({refresh_task})
    await _shutdown(components)
    logger.info("cryptoboard_stopped")


async def run() -> None:
    """Run the board.

    With the dashboard enabled (DASHBOARD_ENABLED=true, the default) the
    JSON API is served by uvicorn on the same event loop. Otherwise a single
    refresh is performed and the pinned row and row count are logged.
    """
    settings = AppSettings()
    setup_logging(settings.log_level)
    logger = get_logger("cryptoboard.main")

    components = _build_components(settings)

    if settings.dashboard.enabled:
        from cryptoboard.dashboard.app import create_dashboard_app

        app = create_dashboard_app(lifespan=lifespan)
        app.state.settings = settings
        app.state.components = components

        logger.info(
            "starting_with_dashboard",
            host=settings.dashboard.host,
            port=settings.dashboard.port,
            pinned=settings.board.pinned_asset_id,
        )

        config = uvicorn.Config(
            app,
            host=settings.dashboard.host,
            port=settings.dashboard.port,
            log_level="warning",  # Suppress uvicorn access logs
        )
        server = uvicorn.Server(config)
        await server.serve()
    else:
        controller: BoardController = components["controller"]
        try:
            state = await controller.refresh()
            pinned = controller.pinned_row()
            logger.info(
                "board_loaded",
                rows=len(state.snapshot) if state.snapshot is not None else 0,
                pinned_price=str(pinned.price) if pinned is not None else None,
                pinned_source=pinned.source.value if pinned is not None and pinned.source else None,
                error=state.error,
            )
        finally:
            await _shutdown(components)


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()

"""Structured logging setup: structlog over stdlib logging, contextvars-aware.

Refresh generations and history loads run as overlapping coroutines.
Each event carries its own key/value context (e.g. generation or
history_request), so interleaved lines can be told apart. aiohttp and
ccxt log through stdlib and are routed through the same renderer.
"""

import logging
import os

import structlog


def setup_logging(log_level: str = "INFO") -> None:
    """Configure structlog and route stdlib records through its formatter.

    Request-scoped fields (e.g. the history request id) are bound with
    structlog.contextvars so they follow the coroutine, not the thread.
    LOG_FORMAT selects the renderer: "json" or "console" (default).
    """
    log_format = os.environ.get("LOG_FORMAT", "console").lower()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    # aiohttp/ccxt chatter stays out of INFO output
    for noisy in ("aiohttp", "ccxt"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)

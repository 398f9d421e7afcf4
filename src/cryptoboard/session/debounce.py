"""Quiescence debouncer for raw search input.

Every push cancels the pending timer and schedules a new one on the running
event loop; the latest value is applied only once no new value has arrived
for the whole delay.
"""

import asyncio
from collections.abc import Callable
from typing import Generic, TypeVar

from cryptoboard.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Must stay non-zero and under a second to keep typing responsive
MAX_DELAY_SECONDS = 1.0


class Debouncer(Generic[T]):
    """Applies the most recent pushed value after ``delay_seconds`` of silence.

    Args:
        delay_seconds: Quiescence window, 0 < delay < 1.
        apply: Called on the event loop with the settled value.
    """

    def __init__(self, delay_seconds: float, apply: Callable[[T], None]) -> None:
        if not 0 < delay_seconds < MAX_DELAY_SECONDS:
            raise ValueError(
                f"debounce delay must be in (0, {MAX_DELAY_SECONDS}) seconds, got {delay_seconds}"
            )
        self._delay = delay_seconds
        self._apply = apply
        self._handle: asyncio.TimerHandle | None = None
        self._latest: T | None = None

    @property
    def delay_seconds(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def push(self, value: T) -> None:
        """Record a new raw value and restart the quiescence timer."""
        self._latest = value
        if self._handle is not None:
            self._handle.cancel()
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self._delay, self._fire)

    def flush(self) -> None:
        """Apply the pending value immediately, if any."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._fire()

    def cancel(self) -> None:
        """Drop the pending value without applying it."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        value = self._latest
        try:
            self._apply(value)  # type: ignore[arg-type]
        except Exception:
            logger.warning("debounced_apply_failed", exc_info=True)

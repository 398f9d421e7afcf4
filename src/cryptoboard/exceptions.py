"""Custom exceptions for the crypto market board.

All source-layer and session-layer exceptions live here
to avoid circular imports between modules.
"""


class BoardError(Exception):
    """Base exception for all board errors."""


class SourceUnavailable(BoardError):
    """Raised when an upstream call fails (network, non-success status, or missing field)."""

    def __init__(self, source: str, detail: str = "") -> None:
        self.source = source
        self.detail = detail
        message = f"{source} unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class SourceTimeout(SourceUnavailable):
    """Raised when an upstream call exceeds the transport timeout."""


class AggregationFailure(SourceUnavailable):
    """Raised when one or both concurrent fetches of a refresh fail.

    Carries every underlying failure so the single user-visible error can
    name all of them.
    """

    def __init__(self, failures: list[SourceUnavailable]) -> None:
        self.failures = failures
        super().__init__(
            "refresh",
            "; ".join(str(failure) for failure in failures),
        )


class HistoryUnavailable(BoardError):
    """Raised when the price history for an asset cannot be loaded."""

    def __init__(self, asset_id: str, lookback_days: int, detail: str = "") -> None:
        self.asset_id = asset_id
        self.lookback_days = lookback_days
        super().__init__(
            f"history for {asset_id} ({lookback_days}d) unavailable"
            + (f": {detail}" if detail else "")
        )


class UnknownAsset(BoardError):
    """Raised when a selection names an asset absent from the current snapshot."""

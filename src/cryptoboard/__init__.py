"""Crypto market board: pinned-asset quote with fallback, merged market listing, price history."""

__version__ = "0.1.0"

"""FastAPI dashboard -- JSON API over the board controller."""

"""Session layer -- filtering, debounced search, chart selection, and notices."""

from cryptoboard.session.controller import BoardController
from cryptoboard.session.debounce import Debouncer
from cryptoboard.session.filters import filter_rows
from cryptoboard.session.notices import Notice, NoticeBoard
from cryptoboard.session.selection import HistoryPanel, PanelStatus, SelectionMachine

__all__ = [
    "BoardController",
    "Debouncer",
    "HistoryPanel",
    "Notice",
    "NoticeBoard",
    "PanelStatus",
    "SelectionMachine",
    "filter_rows",
]

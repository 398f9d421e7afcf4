"""Tests for NoticeBoard auto-dismissal."""

from cryptoboard.session.notices import NoticeBoard


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def test_notice_expires_after_ttl() -> None:
    clock = FakeClock()
    board = NoticeBoard(ttl_seconds=4.0, clock=clock)
    notice = board.post("Failed to load chart data")

    assert board.active() == [notice]
    clock.now += 3.9
    assert board.active() == [notice]
    clock.now += 0.2
    assert board.active() == []


def test_notices_listed_oldest_first_with_unique_ids() -> None:
    clock = FakeClock()
    board = NoticeBoard(clock=clock)
    first = board.post("one")
    second = board.post("two", level="info")
    assert [n.id for n in board.active()] == [first.id, second.id]
    assert first.id != second.id
    assert second.level == "info"


def test_dismiss() -> None:
    board = NoticeBoard(clock=FakeClock())
    notice = board.post("one")
    assert board.dismiss(notice.id) is True
    assert board.dismiss(notice.id) is False
    assert board.active() == []

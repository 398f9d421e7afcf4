"""Transient, auto-dismissing user notices (e.g. chart load failures)."""

import itertools
import time
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class Notice:
    id: int
    message: str
    level: str
    created_at: float
    expires_at: float


class NoticeBoard:
    """Holds notices until their TTL lapses. Expired notices are pruned on read.

    Args:
        ttl_seconds: How long each notice stays visible.
        clock: Time source, injectable for tests.
    """

    def __init__(self, ttl_seconds: float = 4.0, clock: Callable[[], float] = time.time) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._ids = itertools.count(1)
        self._notices: list[Notice] = []

    def post(self, message: str, level: str = "error") -> Notice:
        now = self._clock()
        notice = Notice(
            id=next(self._ids),
            message=message,
            level=level,
            created_at=now,
            expires_at=now + self._ttl,
        )
        self._notices.append(notice)
        return notice

    def active(self) -> list[Notice]:
        now = self._clock()
        self._notices = [n for n in self._notices if n.expires_at > now]
        return list(self._notices)

    def dismiss(self, notice_id: int) -> bool:
        before = len(self._notices)
        self._notices = [n for n in self._notices if n.id != notice_id]
        return len(self._notices) != before

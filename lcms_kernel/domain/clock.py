"""
Clock -- source of curated ion timestamps.

Services receive a ``Clock`` at construction and never read the wall clock
themselves, so a test can pin every ``created_at`` it asserts on.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

# 2024-01-01T12:00:00Z
DEFAULT_TEST_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class Clock(ABC):
    """Hands out timezone-aware UTC timestamps."""

    @abstractmethod
    def now_utc(self) -> datetime:
        ...


class SystemClock(Clock):
    """Wall-clock time in UTC."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Clock that only moves when told to.

    ``now_utc()`` returns the start time until ``advance()`` is called.
    The start time must be timezone-aware; it is normalized to UTC.
    """

    def __init__(self, start: datetime | None = None):
        start = start or DEFAULT_TEST_TIME
        if start.tzinfo is None:
            raise ValueError("DeterministicClock needs a timezone-aware start time")
        self._current = start.astimezone(timezone.utc)

    def now_utc(self) -> datetime:
        return self._current

    def advance(self, seconds: float = 1) -> None:
        self._current += timedelta(seconds=seconds)

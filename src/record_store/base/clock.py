# src/record_store/base/clock.py

from datetime import datetime, timedelta, timezone
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Source of the current instant. Implementations return aware UTC datetimes."""

    def now(self) -> datetime: ...


class SystemClock:
    """Clock backed by the system time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)

    def __repr__(self) -> str:
        return "SystemClock()"


class FixedClock:
    """
    Clock frozen at a given instant until moved explicitly.

    Naive datetimes are interpreted as UTC.
    """

    def __init__(self, instant: datetime):
        self._instant = _as_utc(instant)

    def now(self) -> datetime:
        return self._instant

    def set(self, instant: datetime) -> None:
        self._instant = _as_utc(instant)

    def advance(self, **kwargs: float) -> datetime:
        """Moves the clock forward by `timedelta(**kwargs)` and returns the new instant."""
        self._instant = self._instant + timedelta(**kwargs)
        return self._instant

    def __repr__(self) -> str:
        return f"FixedClock({self._instant.isoformat()!r})"


def _as_utc(instant: datetime) -> datetime:
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


DEFAULT_CLOCK: Clock = SystemClock()

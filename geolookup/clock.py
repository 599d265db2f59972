"""
Design (clock.py)
- Purpose: Per-row live local time ("HH:MM:SS", 24h) for the row's timezone, refreshed
           by the shared TickScheduler instead of a private timer.
- Inputs: TickScheduler, an IANA timezone name (or None), optional on_change hook.
- Outputs: RowClock.time (str; "" when no timezone or an unknown one).
- Side effects: Holds at most one scheduler subscription at a time.
- Thread-safety: Event-loop thread only (same as the scheduler).
"""

import logging
from datetime import datetime, timezone as dt_timezone
from typing import Callable
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .ticks import TickScheduler

logger = logging.getLogger(__name__)

TIME_FORMAT = "%H:%M:%S"


def _utc_now() -> datetime:
    return datetime.now(dt_timezone.utc)


def make_zone(name: str) -> ZoneInfo | None:
    """Return the ZoneInfo for name, or None when the zone is not recognized."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        logger.debug("unrecognized timezone %r: %s", name, exc)
        return None


class RowClock:
    """
    Design (RowClock)
    - State:
        _timezone: current zone name (None = stopped)
        _zone: ZoneInfo bound to _timezone (None when unset or unknown)
        _unsubscribe: handle from TickScheduler.subscribe, or None
        time: last formatted value
    - Changing the timezone tears down the old subscription and re-subscribes, then
      repaints at once when the scheduler was already ticking for other clocks.
    """

    def __init__(
        self,
        scheduler: TickScheduler,
        timezone: str | None = None,
        on_change: Callable[[str], None] | None = None,
        now: Callable[[], datetime] = _utc_now,
    ):
        self._scheduler = scheduler
        self._on_change = on_change
        self._now = now
        self._timezone: str | None = None
        self._zone: ZoneInfo | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self.time = ""
        if timezone:
            self.set_timezone(timezone)

    @property
    def timezone(self) -> str | None:
        return self._timezone

    @property
    def subscribed(self) -> bool:
        return self._unsubscribe is not None

    def set_timezone(self, timezone: str | None) -> None:
        if timezone == self._timezone:
            return
        self._stop()
        self._timezone = timezone
        self._zone = make_zone(timezone) if timezone else None
        if self._zone is None:
            self._publish("")
            return
        ticking = self._scheduler.running
        self._unsubscribe = self._scheduler.subscribe(self._update)
        # a running scheduler skips the immediate tick for late subscribers
        if ticking:
            self._update()

    def dispose(self) -> None:
        self._stop()
        self._timezone = None
        self._zone = None

    def _stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _update(self) -> None:
        if self._zone is None:
            self._publish("")
            return
        self._publish(self._now().astimezone(self._zone).strftime(TIME_FORMAT))

    def _publish(self, value: str) -> None:
        changed = value != self.time
        self.time = value
        if changed and self._on_change is not None:
            self._on_change(value)

"""
Shared periodic tick broadcaster.

Design:
- One TickScheduler drives every live clock in the app, so N clocks never mean N timers.
- Reference counted: the underlying timer starts when the first subscriber arrives
  and stops as soon as the last one leaves.
- The very first subscriber (0 -> 1) is called synchronously inside subscribe() so it
  can paint without waiting a full interval. Later subscribers wait for the next tick.
- The timer backend is injected: AsyncioTimer in the app, a manual fake in tests.
- Thread-safety: single event-loop thread only. The registry may be mutated from
  inside a callback during a broadcast.
"""

import asyncio
import itertools
import logging
from typing import Callable, Dict, Protocol

from .config import TICK_INTERVAL_SEC

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class Timer(Protocol):
    def start(self, interval: float, callback: Callable[[], None]) -> None: ...

    def stop(self) -> None: ...


class AsyncioTimer:
    """Repeating timer built on loop.call_later; holds at most one pending handle."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None
        self._interval = 0.0
        self._callback: Callable[[], None] | None = None

    def start(self, interval: float, callback: Callable[[], None]) -> None:
        self.stop()
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._interval = interval
        self._callback = callback
        self._handle = self._loop.call_later(interval, self._fire)

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._callback = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    def _fire(self) -> None:
        callback = self._callback
        if callback is None:
            return
        # re-arm first so a callback that stops the timer wins
        self._handle = self._loop.call_later(self._interval, self._fire)
        callback()


class TickScheduler:
    """
    Design (TickScheduler)
    - State:
        _subscribers: {token -> callback}, insertion ordered (order is not part of the contract)
        _timer: injected backend; started on 0 -> 1 subscribers, stopped on 1 -> 0
        _running: whether the backend is currently started
    """

    def __init__(self, timer: Timer, interval: float = TICK_INTERVAL_SEC):
        self._timer = timer
        self._interval = interval
        self._subscribers: Dict[int, TickCallback] = {}
        self._tokens = itertools.count(1)
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: TickCallback) -> Callable[[], None]:
        """
        Purpose: Register callback for every tick.
        Outputs: unsubscribe() -> None; idempotent; after it returns the callback is never called again.
        Side effects: On the first subscriber, calls callback once immediately and starts the timer.
        """
        token = next(self._tokens)
        self._subscribers[token] = callback

        if len(self._subscribers) == 1 and not self._running:
            self._tick()
            # the immediate tick may already have unsubscribed everyone
            if self._subscribers:
                self._timer.start(self._interval, self._tick)
                self._running = True

        def unsubscribe() -> None:
            if self._subscribers.pop(token, None) is None:
                return
            if not self._subscribers and self._running:
                self._timer.stop()
                self._running = False

        return unsubscribe

    def _tick(self) -> None:
        for token, callback in list(self._subscribers.items()):
            # skip anything unsubscribed earlier in this same broadcast
            if token not in self._subscribers:
                continue
            try:
                callback()
            except Exception:
                logger.exception("tick subscriber failed")

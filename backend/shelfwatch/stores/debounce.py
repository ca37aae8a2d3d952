"""Cancelable trailing-edge debounce on top of an asyncio loop."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, Protocol

DEFAULT_DEBOUNCE_S = 0.1


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class Debouncer:
    """Run ``callback`` once, ``delay`` seconds after the last ``schedule()``.

    Every ``schedule()`` cancels the pending timer and arms a new one, so a
    burst of calls collapses into a single run. Without an explicit
    scheduler the running asyncio loop is used.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[[], None],
        loop: Scheduler | None = None,
    ) -> None:
        if delay < 0:
            raise ValueError("delay must be non-negative")
        self.delay = delay
        self._callback = callback
        self._loop = loop
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def schedule(self) -> None:
        self.cancel()
        loop = self._loop if self._loop is not None else asyncio.get_running_loop()
        self._handle = loop.call_later(self.delay, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def flush(self) -> None:
        """Run a pending callback now instead of waiting for the timer."""
        if self._handle is None:
            return
        self.cancel()
        self._callback()

    def _fire(self) -> None:
        self._handle = None
        self._callback()


__all__ = ["DEFAULT_DEBOUNCE_S", "Debouncer", "Scheduler", "TimerHandle"]

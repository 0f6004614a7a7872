"""Per-key debounced callbacks (cancel-and-reschedule)."""

from typing import Any, Callable, Dict, Hashable, Protocol

SCROLL_DEBOUNCE_DELAY = 1.0


class TimerHandle(Protocol):
    """Anything with a stop() method, e.g. textual.timer.Timer."""

    def stop(self) -> Any: ...


SetTimer = Callable[[float, Callable[[], None]], TimerHandle]


class Debouncer:
    """Coalesce rapid calls per key; only the last one fires.

    Each call for a key stops the pending timer for that key and schedules
    a new one, so the callback runs once after `delay` seconds of quiet.
    """

    def __init__(self, delay: float, set_timer: SetTimer) -> None:
        self._delay = delay
        self._set_timer = set_timer
        self._timers: Dict[Hashable, TimerHandle] = {}
        self._callbacks: Dict[Hashable, Callable[[], None]] = {}

    @property
    def delay(self) -> float:
        return self._delay

    def call(self, key: Hashable, callback: Callable[[], None]) -> None:
        """Schedule callback for key, superseding any pending one."""
        self.cancel(key)
        self._callbacks[key] = callback
        self._timers[key] = self._set_timer(
            self._delay, lambda: self._fire(key, callback)
        )

    def cancel(self, key: Hashable) -> bool:
        """Drop the pending callback for key. Returns True if one was pending."""
        timer = self._timers.pop(key, None)
        self._callbacks.pop(key, None)
        if timer is None:
            return False
        timer.stop()
        return True

    def pending(self, key: Hashable) -> bool:
        return key in self._callbacks

    def flush(self) -> None:
        """Run every pending callback now."""
        for key in list(self._callbacks):
            timer = self._timers.pop(key, None)
            if timer is not None:
                timer.stop()
            self._fire(key, self._callbacks[key])

    def _fire(self, key: Hashable, callback: Callable[[], None]) -> None:
        # A stale timer must not run a callback that superseded it
        if self._callbacks.get(key) is not callback:
            return
        self._timers.pop(key, None)
        del self._callbacks[key]
        callback()

"""
Tickers: what decides *when* the detection loop runs its next tick.

A ticker has one job: schedule(callback) runs the callback once, later, and
hands back a handle whose cancel() stops it from firing. The loop keeps that
handle as its cancellation token and reschedules itself after every tick.

  - AsyncioTicker: real time, on an asyncio event loop (call_later)
  - ManualTicker: nothing fires until advance() is called. Drives tests and
    UIs that already have their own refresh cycle (e.g. a Streamlit rerun).
"""

import asyncio

from voicelive.config import TICK_INTERVAL


class AsyncioTicker:
    """Schedules ticks every `interval` seconds on an asyncio event loop."""

    def __init__(self, interval=TICK_INTERVAL, loop=None):
        self.interval = interval
        self._loop = loop

    def schedule(self, callback):
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(self.interval, callback)


class _ManualHandle:
    def __init__(self, ticker, callback):
        self._ticker = ticker
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True
        if self._ticker._pending is self:
            self._ticker._pending = None


class ManualTicker:
    """
    Holds at most one pending tick until someone calls advance().

    Scheduling while a tick is pending replaces it: the loop only ever has
    one tick in flight.
    """

    def __init__(self):
        self._pending = None

    @property
    def pending(self):
        return self._pending is not None

    def schedule(self, callback):
        if self._pending is not None:
            self._pending.cancel()
        self._pending = _ManualHandle(self, callback)
        return self._pending

    def advance(self, ticks=1):
        """
        Fire up to `ticks` pending callbacks, one after another.

        Returns:
            How many ticks actually fired (stops early once nothing is pending).
        """
        fired = 0
        for _ in range(ticks):
            handle = self._pending
            if handle is None:
                break
            self._pending = None
            handle.callback()
            fired += 1
        return fired

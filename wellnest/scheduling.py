"""Timer sources for playback ticks.

Both schedulers hand back handles with a ``cancel()`` method, the same shape
as ``asyncio.TimerHandle``.
"""
import asyncio
import heapq
import itertools


class TimerHandle:
    def __init__(self, when, callback, args):
        self.when = when
        self._callback = callback
        self._args = args
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def cancelled(self):
        return self._cancelled

    def _run(self):
        self._callback(*self._args)


class ManualScheduler:
    """Virtual clock advanced by the host.

    The Streamlit page sleeps one second and calls ``advance(1)``; tests call
    ``advance`` directly.
    """

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()

    def call_later(self, delay, callback, *args):
        handle = TimerHandle(self.now + max(0.0, delay), callback, args)
        heapq.heappush(self._queue, (handle.when, next(self._seq), handle))
        return handle

    def advance(self, seconds):
        """Move the clock forward, running every timer that falls due in order."""
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, handle = heapq.heappop(self._queue)
            self.now = when
            if not handle.cancelled():
                handle._run()
        self.now = target

    @property
    def pending(self):
        return sum(1 for _, _, h in self._queue if not h.cancelled())


class AsyncioScheduler:
    """Schedules on a running asyncio event loop."""

    def __init__(self, loop=None):
        self._loop = loop

    def call_later(self, delay, callback, *args):
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback, *args)

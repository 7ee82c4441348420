import asyncio
import time
from datetime import datetime, timedelta, timezone

from core.notifications import Notification


class ScriptedPoller:
    """Poller that reveals notifications as wall-clock time passes.

    ``events`` is a list of ``(at_seconds, text)``. An event becomes visible
    once ``at_seconds`` have elapsed since the poller was created, and its
    timestamp is ``t0 + at_seconds``, so negative offsets model stale events
    from an earlier run. Unlike the real poller it does not filter by
    ``since``.
    """

    def __init__(self, events=(), failures: int = 0, latency: float = 0.0, hang: bool = False):
        self.t0 = datetime.now(timezone.utc)
        self._start = time.monotonic()
        self._events = list(events)
        self._failures = failures
        self._latency = latency
        self._hang = hang
        self.calls = 0

    async def poll(self, since):
        self.calls += 1
        if self._hang:
            await asyncio.Event().wait()
        if self._latency:
            await asyncio.sleep(self._latency)
        if self._failures > 0:
            self._failures -= 1
            raise ConnectionError("connection reset by peer")

        elapsed = time.monotonic() - self._start
        return [
            Notification(text=text, timestamp=self.t0 + timedelta(seconds=at))
            for at, text in self._events
            if at <= elapsed
        ]

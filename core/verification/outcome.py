"""Value types shared by watchers and the race coordinator."""

import asyncio
from dataclasses import dataclass
from datetime import datetime

TIMEOUT_MESSAGE = "timeout"


@dataclass(frozen=True)
class Outcome:
    """Terminal result of a verification attempt."""
    is_error: bool
    message: str

    @classmethod
    def timeout(cls) -> "Outcome":
        return cls(is_error=True, message=TIMEOUT_MESSAGE)

    @property
    def timed_out(self) -> bool:
        return self.is_error and self.message == TIMEOUT_MESSAGE


@dataclass(frozen=True)
class WatchSpec:
    """What one watcher looks for and how long it may look.

    ``is_error`` marks a failure pattern: a match on it produces an error
    outcome carrying the server message.
    """
    pattern: str
    since: datetime
    poll_interval: float
    timeout: float
    is_error: bool = False

    def __post_init__(self):
        if not isinstance(self.since, datetime):
            raise TypeError(f"since must be a datetime, got {type(self.since).__name__}")
        # Notification timestamps are aware; a naive since is local time, as from datetime.now()
        if self.since.tzinfo is None:
            object.__setattr__(self, "since", self.since.astimezone())


class OutcomeSink:
    """Single-delivery slot. The first writer wins, later writers are no-ops."""

    def __init__(self):
        self._future: asyncio.Future = asyncio.get_running_loop().create_future()

    def deliver(self, outcome: Outcome) -> bool:
        if self._future.done():
            return False
        self._future.set_result(outcome)
        return True

    @property
    def resolved(self) -> bool:
        return self._future.done()

    async def wait(self) -> Outcome:
        return await asyncio.shield(self._future)


class CancelSignal:
    """Broadcast stop request. Setting it more than once is harmless."""

    def __init__(self):
        self._event = asyncio.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    async def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds, returning early if cancelled."""
        try:
            await asyncio.wait_for(self._event.wait(), timeout)
        except asyncio.TimeoutError:
            pass
        return self._event.is_set()

"""Notification Watcher - polls the PCC notification feed for one pattern.

A watcher runs as an asyncio task. It stops on the first of:
  - a notification containing its pattern (delivers a match outcome)
  - its timeout elapsing (delivers a timeout outcome)
  - the shared cancel signal being set (delivers nothing)

Delivery goes through a shared single-slot sink, so a watcher that loses the
race simply has its outcome dropped.
"""

import asyncio
import logging
import time
from typing import Callable

from core.notifications import Notification, NotificationPoller

from .outcome import CancelSignal, Outcome, OutcomeSink, WatchSpec

logger = logging.getLogger(__name__)


class NotificationWatcher:
    """Watches the notification feed for a single pattern.

    Usage:
        watcher = NotificationWatcher(spec, poller)
        task = asyncio.create_task(watcher.watch(sink, cancel))
    """

    def __init__(
        self,
        spec: WatchSpec,
        poller: NotificationPoller,
        name: str = "",
        clock: Callable[[], float] = time.monotonic,
    ):
        self.spec = spec
        self.name = name or spec.pattern
        self._poller = poller
        self._clock = clock
        self.polls = 0

    def _find_match(self, notifications: list[Notification]) -> Notification | None:
        for notification in notifications:
            # Never match events from before this run, even if the poller lets them through
            if notification.timestamp < self.spec.since:
                continue
            if notification.matches(self.spec.pattern):
                return notification
        return None

    async def watch(self, sink: OutcomeSink, cancel: CancelSignal):
        """Poll until match, timeout or cancellation."""
        start = self._clock()

        while not cancel.cancelled:
            self.polls += 1
            try:
                notifications = await self._poller.poll(self.spec.since)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"Watcher '{self.name}' poll failed, retrying: {e}")
                notifications = []

            if cancel.cancelled:
                logger.debug(f"Watcher '{self.name}' cancelled after {self.polls} polls")
                return

            match = self._find_match(notifications)
            if match is not None:
                delivered = sink.deliver(Outcome(is_error=self.spec.is_error, message=match.text))
                logger.info(f"Watcher '{self.name}' matched: {match.text}"
                            + ("" if delivered else " (race already resolved)"))
                return

            elapsed = self._clock() - start
            if elapsed >= self.spec.timeout:
                if sink.deliver(Outcome.timeout()):
                    logger.info(f"Watcher '{self.name}' timed out after {elapsed:.1f}s")
                return

            remaining = self.spec.timeout - elapsed
            if await cancel.wait(min(self.spec.poll_interval, remaining)):
                break

        logger.debug(f"Watcher '{self.name}' cancelled after {self.polls} polls")

"""Race Coordinator - runs several watchers and keeps the first outcome.

Every watcher in a race shares one OutcomeSink and one CancelSignal. The
first outcome delivered wins; everyone else is told to stop. There is no
priority between success and failure patterns: if both show up in the same
poll tick, whichever watcher delivers first decides the race.
"""

import asyncio
import logging
import time
from typing import Callable

from core.notifications import NotificationPoller

from .outcome import CancelSignal, Outcome, OutcomeSink, WatchSpec
from .watcher import NotificationWatcher

logger = logging.getLogger(__name__)


class RaceCoordinator:
    """Races one watcher per WatchSpec against each other and a deadline.

    Usage:
        coordinator = RaceCoordinator(poller)
        outcome = await coordinator.race("nodeAdd", [success_spec, failure_spec])
        if outcome.is_error:
            ...
    """

    def __init__(self, poller: NotificationPoller, clock: Callable[[], float] = time.monotonic):
        self._poller = poller
        self._clock = clock

    async def race(self, action: str, specs: list[WatchSpec]) -> Outcome:
        if not specs:
            raise ValueError(f"Race '{action}' needs at least one watch spec")

        sink = OutcomeSink()
        cancel = CancelSignal()
        grace = max(spec.poll_interval for spec in specs)
        deadline = max(spec.timeout for spec in specs) + grace

        tasks = []
        for spec in specs:
            watcher = NotificationWatcher(spec, self._poller, name=f"{action}:{spec.pattern}", clock=self._clock)
            tasks.append(asyncio.create_task(watcher.watch(sink, cancel)))

        logger.info(f"Race '{action}' started with {len(tasks)} watchers (timeout {deadline - grace:.0f}s)")
        start = self._clock()
        waiter = asyncio.ensure_future(sink.wait())
        crash = None
        try:
            crash = await self._first_result(waiter, tasks, deadline)
            if crash is None and not sink.resolved:
                # No watcher reported in time (stuck poller); resolve the race ourselves
                sink.deliver(Outcome.timeout())
        finally:
            waiter.cancel()
            cancel.cancel()
            await self._reap(action, tasks, grace)

        if crash is not None:
            raise crash
        outcome = await sink.wait()

        elapsed = self._clock() - start
        if outcome.is_error:
            logger.warning(f"Race '{action}' failed after {elapsed:.1f}s: {outcome.message}")
        else:
            logger.info(f"Race '{action}' succeeded after {elapsed:.1f}s: {outcome.message}")
        return outcome

    @staticmethod
    async def _first_result(waiter: asyncio.Future, tasks: list[asyncio.Task], deadline: float) -> BaseException | None:
        """Wait for the first outcome, a crashed watcher, or the deadline.

        Returns the exception of a crashed watcher, or None otherwise.
        """
        loop = asyncio.get_running_loop()
        end = loop.time() + deadline
        running = set(tasks)

        while not waiter.done() and running:
            remaining = end - loop.time()
            if remaining <= 0:
                return None
            done, running = await asyncio.wait(
                running | {waiter}, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
            )
            running.discard(waiter)
            for task in done:
                if task is waiter or task.cancelled():
                    continue
                exc = task.exception()
                if exc is not None:
                    return exc
        return None

    @staticmethod
    async def _reap(action: str, tasks: list[asyncio.Task], grace: float):
        """Give cancelled watchers one poll interval to exit, then force them."""
        done, pending = await asyncio.wait(tasks, timeout=grace)

        if pending:
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            logger.debug(f"Race '{action}': force-cancelled {len(pending)} watchers")

        for task in done:
            if task.cancelled():
                continue
            exc = task.exception()
            if exc is not None:
                logger.error(f"Race '{action}': watcher crashed: {exc!r}")


async def race(action: str, specs: list[WatchSpec], poller: NotificationPoller) -> Outcome:
    """Convenience wrapper around RaceCoordinator.race."""
    return await RaceCoordinator(poller).race(action, specs)

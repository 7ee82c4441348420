"""Per-run state handed to every scenario."""

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from core.notifications import NotificationPoller


class ScenarioFailed(Exception):
    """A scenario assertion failed. Fails that scenario only, not the run."""


class ScenarioSkipped(Exception):
    """A scenario chose not to run (dry run, missing configuration)."""


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ScenarioContext:
    """Everything a scenario needs, passed explicitly instead of module globals.

    Selections made by one scenario (the node Portus went to, the node that
    PXE booted) are recorded here for the scenarios that follow it.
    """
    client: Any
    poller: NotificationPoller
    settings: Any
    portus_node_id: int | None = None
    portus_installed_at: datetime | None = None
    pxeboot_node_id: int | None = None
    pxeboot_started_at: datetime | None = None
    notes: list[str] = field(default_factory=list)

    def skip_if_dry_run(self):
        if self.settings.dry_run:
            raise ScenarioSkipped("dry run")

    async def call(self, func, *args):
        """Run a blocking client call without stalling the event loop."""
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, lambda: func(*args))

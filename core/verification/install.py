"""Installation checks built on the race coordinator."""

import logging
from datetime import datetime

from core.notifications import NotificationPoller

from .outcome import Outcome, WatchSpec
from .race import RaceCoordinator

logger = logging.getLogger(__name__)

NODE_ADD = "nodeAdd"


class VerificationTimeout(Exception):
    """The expected notification never showed up."""

    def __init__(self, node_ref, expected: str, timeout: float):
        self.node_ref = node_ref
        self.expected = expected
        self.timeout = timeout
        super().__init__(f"timeout after {timeout:.0f}s waiting for '{expected}' on node {node_ref}")


async def check_installed(
    node_ref,
    timeout: float,
    expected_notification: str,
    since: datetime,
    poller: NotificationPoller,
    poll_interval: float = 5.0,
) -> bool:
    """Wait for a single install notification.

    There is no failure notification to race against here: not seeing the
    event before the timeout is the negative signal.

    Returns:
        True once the notification is seen

    Raises:
        VerificationTimeout: if it never shows up
    """
    spec = WatchSpec(
        pattern=expected_notification,
        since=since,
        poll_interval=poll_interval,
        timeout=timeout,
    )
    outcome = await RaceCoordinator(poller).race(f"install:{node_ref}", [spec])
    if outcome.timed_out:
        raise VerificationTimeout(node_ref, expected_notification, timeout)
    return True


async def verify_add_node(poller: NotificationPoller, since: datetime, settings, action: str = NODE_ADD) -> Outcome:
    """Race the node-add success notification against the failure one."""
    if action != NODE_ADD:
        raise ValueError(f"Unknown verification action: {action}")

    specs = [
        WatchSpec(
            pattern=settings.pxeboot_node_add_notification,
            since=since,
            poll_interval=settings.poll_interval_seconds,
            timeout=settings.pxeboot_timeout_seconds,
        ),
        WatchSpec(
            pattern=settings.pxeboot_node_add_failed_notification,
            since=since,
            poll_interval=settings.poll_interval_seconds,
            timeout=settings.pxeboot_timeout_seconds,
            is_error=True,
        ),
    ]
    outcome = await RaceCoordinator(poller).race(action, specs)
    if not outcome.is_error:
        logger.info(f"Node added successfully: {outcome.message}")
    return outcome

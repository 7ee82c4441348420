"""Notification pollers - the capability the verification engine watches through.

The engine only needs ``await poller.poll(since)``. The PCC implementation
wraps the blocking REST client and runs it in the default executor so a
slow server never stalls the other watchers sharing the event loop.
"""

import asyncio
import logging
from datetime import datetime
from typing import Protocol

from .models import Notification

logger = logging.getLogger(__name__)


class NotificationPoller(Protocol):
    async def poll(self, since: datetime) -> list[Notification]:
        ...


class PccNotificationPoller:
    """Polls the PCC notification history for events newer than ``since``."""

    def __init__(self, client):
        self._client = client

    async def poll(self, since: datetime) -> list[Notification]:
        loop = asyncio.get_event_loop()
        raw = await loop.run_in_executor(None, self._client.get_notifications, since)
        notifications = []
        for item in raw:
            try:
                notification = Notification.from_api(item)
            except ValueError as e:
                logger.debug(f"Skipping notification with bad timestamp: {e}")
                continue
            if notification.timestamp >= since:
                notifications.append(notification)
        return notifications

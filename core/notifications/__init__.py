"""Notification feed for PCC - records and pollers."""

from .models import Notification, parse_timestamp
from .poller import NotificationPoller, PccNotificationPoller

__all__ = [
    "Notification",
    "parse_timestamp",
    "NotificationPoller",
    "PccNotificationPoller",
]

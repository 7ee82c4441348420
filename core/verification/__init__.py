"""Asynchronous verification engine - watch PCC notifications until an action settles."""

from .install import NODE_ADD, VerificationTimeout, check_installed, verify_add_node
from .outcome import TIMEOUT_MESSAGE, CancelSignal, Outcome, OutcomeSink, WatchSpec
from .race import RaceCoordinator, race
from .watcher import NotificationWatcher

__all__ = [
    "NODE_ADD",
    "TIMEOUT_MESSAGE",
    "CancelSignal",
    "NotificationWatcher",
    "Outcome",
    "OutcomeSink",
    "RaceCoordinator",
    "VerificationTimeout",
    "WatchSpec",
    "check_installed",
    "race",
    "verify_add_node",
]

"""PCC REST API integration."""

from .client import INTERFACE_STATUS_DOWN, INTERFACE_STATUS_UP, PccClient, PccError

__all__ = ["INTERFACE_STATUS_DOWN", "INTERFACE_STATUS_UP", "PccClient", "PccError"]

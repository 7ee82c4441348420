"""Notification records as emitted by the PCC server."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def parse_timestamp(value: Any) -> datetime:
    """Convert a PCC timestamp (epoch millis or ISO-8601) to an aware datetime."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if isinstance(value, str) and value:
        if value.isdigit():
            return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    raise ValueError(f"Unsupported notification timestamp: {value!r}")


@dataclass(frozen=True)
class Notification:
    """A timestamped text event describing progress of an asynchronous action."""
    text: str
    timestamp: datetime
    id: int | None = None
    level: str = ""
    target_id: int | None = None
    source: str = ""

    @classmethod
    def from_api(cls, data: dict) -> "Notification":
        return cls(
            text=data.get("message", ""),
            timestamp=parse_timestamp(data.get("createdAt")),
            id=data.get("id"),
            level=data.get("level", ""),
            target_id=data.get("targetId"),
            source=data.get("service", ""),
        )

    def matches(self, pattern: str) -> bool:
        return pattern in self.text

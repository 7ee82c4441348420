"""Tests for notification parsing and the PCC-backed poller."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from core.notifications import Notification, PccNotificationPoller, parse_timestamp


class TestParseTimestamp:
    def test_epoch_millis(self):
        assert parse_timestamp(1_600_000_000_000) == datetime(2020, 9, 13, 12, 26, 40, tzinfo=timezone.utc)

    def test_digit_string(self):
        assert parse_timestamp("1600000000000") == parse_timestamp(1_600_000_000_000)

    def test_iso_with_z(self):
        assert parse_timestamp("2020-09-13T12:26:40Z") == datetime(2020, 9, 13, 12, 26, 40, tzinfo=timezone.utc)

    def test_naive_datetime_assumed_utc(self):
        assert parse_timestamp(datetime(2020, 1, 1)).tzinfo == timezone.utc

    def test_missing(self):
        with pytest.raises(ValueError):
            parse_timestamp(None)


class TestNotification:
    def test_from_api(self):
        n = Notification.from_api({
            "id": 91,
            "message": "Node added successfully: i58",
            "level": "info",
            "targetId": 12,
            "service": "pccserver",
            "createdAt": 1_600_000_000_000,
        })
        assert n.text == "Node added successfully: i58"
        assert n.id == 91
        assert n.target_id == 12
        assert n.matches("added successfully")
        assert not n.matches("failed")


class TestPccNotificationPoller:
    @pytest.mark.asyncio
    async def test_filters_by_since_and_skips_bad_rows(self):
        since = datetime.now(timezone.utc)
        ms = lambda dt: int(dt.timestamp() * 1000)  # noqa: E731
        client = MagicMock()
        client.get_notifications.return_value = [
            {"message": "old", "createdAt": ms(since - timedelta(minutes=5))},
            {"message": "new", "createdAt": ms(since + timedelta(seconds=2))},
            {"message": "broken"},
        ]
        notifications = await PccNotificationPoller(client).poll(since)
        assert [n.text for n in notifications] == ["new"]
        client.get_notifications.assert_called_once_with(since)

"""Tests for the PCC REST client, with the HTTP session mocked out."""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from integrations.pcc import PccClient, PccError


def _response(payload=None, status_code=200, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.reason = "OK" if status_code == 200 else "Error"
    resp.text = text
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    return resp


@pytest.fixture
def session():
    s = MagicMock()
    s.post.return_value = _response({"token": "tok-123"})
    return s


@pytest.fixture
def client(session):
    return PccClient(base_url="https://pcc:9999/", username="admin", password="pw", verify_tls=True, session=session)


class TestGateway:
    def test_logs_in_lazily_and_sends_token(self, client, session):
        session.request.return_value = _response({"status": 200, "data": [{"id": 1}]})

        assert client.get_nodes() == [{"id": 1}]

        session.post.assert_called_once()
        assert session.post.call_args.args[0] == "https://pcc:9999/security/auth"
        method, url = session.request.call_args.args
        assert (method, url) == ("GET", "https://pcc:9999/pccserver/node")
        assert session.request.call_args.kwargs["headers"]["Authorization"] == "Bearer tok-123"

    def test_non_200_envelope_raises(self, client, session):
        session.request.return_value = _response({"status": 400, "error": "record not found"})
        with pytest.raises(PccError) as excinfo:
            client.get_portus_node_by_id(3)
        assert excinfo.value.status == 400
        assert excinfo.value.not_found

    def test_transport_error_is_wrapped(self, client, session):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(PccError):
            client.get_hardware_inventory()

    def test_non_json_body(self, client, session):
        session.request.return_value = _response(None, status_code=502, text="<html>bad gateway</html>")
        with pytest.raises(PccError) as excinfo:
            client.get_nodes()
        assert excinfo.value.status == 502

    def test_login_without_token(self, session):
        session.post.return_value = _response({})
        with pytest.raises(PccError):
            PccClient(base_url="https://pcc", session=session).login()


class TestEndpoints:
    def test_get_notifications_passes_since_in_millis(self, client, session):
        session.request.return_value = _response({"status": 200, "data": None})
        since = datetime(2020, 9, 13, 12, 26, 40, tzinfo=timezone.utc)

        assert client.get_notifications(since) == []
        assert session.request.call_args.kwargs["params"]["from"] == 1_600_000_000_000

    def test_delete_portus_force(self, client, session):
        session.request.return_value = _response({"status": 200, "data": None})
        client.delete_portus_node(5, force=True)
        assert session.request.call_args.args == ("DELETE", "https://pcc:9999/pccserver/portus/5")
        assert session.request.call_args.kwargs["params"] == {"force": "true"}

    def test_find_security_key(self, client, session):
        session.request.return_value = _response({"status": 200, "data": [{"alias": "a", "id": 1}, {"alias": "b", "id": 2}]})
        assert client.find_security_key("b")["id"] == 2
        with pytest.raises(PccError):
            client.find_security_key("c")

    def test_node_helpers(self):
        assert PccClient.is_node_online({"nodeAvailabilityStatus": {"connectionStatus": "online"}})
        assert not PccClient.is_node_online({})
        assert PccClient.is_invader({"model": "PS-3001 Invader"})
        assert not PccClient.is_invader({"model": "SYS-6019"})


class TestInterfaces:
    IFACES = [
        {"interface": {"id": 10, "macAddress": "aa:bb:cc:00:00:01"}},
        {"interface": {"id": 11, "macAddress": "aa:bb:cc:00:00:02"}},
    ]

    def test_get_iface_by_id(self, client, session):
        session.request.return_value = _response({"status": 200, "data": {"interfaces": self.IFACES}})
        assert client.get_iface_by_id(4, 11)["interface"]["macAddress"] == "aa:bb:cc:00:00:02"
        with pytest.raises(PccError):
            client.get_iface_by_id(4, 99)

    def test_get_iface_by_mac(self):
        assert PccClient.get_iface_by_mac_address("aa:bb:cc:00:00:01", self.IFACES)["interface"]["id"] == 10
        with pytest.raises(PccError):
            PccClient.get_iface_by_mac_address("", self.IFACES)
        with pytest.raises(PccError):
            PccClient.get_iface_by_mac_address("ff:ff:ff:ff:ff:ff", self.IFACES)

    def test_set_iface_apply_posts_then_applies(self, client, session):
        session.request.return_value = _response({"status": 200, "data": None})
        client.set_iface_apply({"nodeId": 4, "interfaceId": 10, "ifName": "eth0"})
        urls = [c.args[1] for c in session.request.call_args_list]
        assert urls == ["https://pcc:9999/pccserver/interface", "https://pcc:9999/pccserver/interface/apply"]
        assert session.request.call_args.kwargs["json"] == {"nodeId": 4}

    def test_set_iface_admin(self, client, session):
        session.request.return_value = _response({"status": 200, "data": None})
        client.set_iface_admin(4, 10, "down")
        assert session.request.call_args.args[1] == "https://pcc:9999/pccserver/interface/down"
        with pytest.raises(ValueError):
            client.set_iface_admin(4, 10, "sideways")

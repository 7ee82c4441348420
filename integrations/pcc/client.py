"""PCC REST API client.

Every call goes through the PCC gateway, which wraps payloads in an
envelope of the form {"status": ..., "message": ..., "error": ..., "data": ...}.
Non-200 statuses are raised as PccError so scenarios can assert on them.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any

import requests
import urllib3

from config.settings import settings

logger = logging.getLogger(__name__)

INTERFACE_STATUS_UP = "up"
INTERFACE_STATUS_DOWN = "down"
RECORD_NOT_FOUND = "record not found"


class PccError(Exception):
    """A PCC call failed or returned a non-200 envelope."""

    def __init__(self, message: str, status: int | None = None):
        self.status = status
        self.message = message
        super().__init__(message if status is None else f"[{status}] {message}")

    @property
    def not_found(self) -> bool:
        return RECORD_NOT_FOUND in self.message.lower()


class PccClient:
    """Thin wrapper over the PCC HTTP API used by the blackbox scenarios."""

    def __init__(
        self,
        base_url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        verify_tls: bool | None = None,
        timeout: int | None = None,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or settings.pcc_url).rstrip("/")
        self._username = username if username is not None else settings.pcc_username
        self._password = password if password is not None else settings.pcc_password
        self._timeout = timeout or settings.pcc_request_timeout
        self._session = session or requests.Session()
        self._session.verify = settings.pcc_verify_tls if verify_tls is None else verify_tls
        self._token: str | None = None

        if not self._session.verify:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    # ==================== Gateway ====================

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def login(self) -> str:
        """Authenticate and cache the bearer token."""
        try:
            resp = self._session.post(
                f"{self.base_url}/security/auth",
                json={"username": self._username, "password": self._password},
                headers={"Content-Type": "application/json"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise PccError(f"PCC login failed: {e}") from e

        token = resp.json().get("token")
        if not token:
            raise PccError("PCC login returned no token", resp.status_code)
        self._token = token
        logger.info(f"Logged in to PCC at {self.base_url} as {self._username}")
        return token

    def _gateway(self, method: str, endpoint: str, body: Any = None, params: dict | None = None,
                 files: dict | None = None) -> Any:
        if self._token is None:
            self.login()

        headers = self._headers()
        if files:
            headers.pop("Content-Type")

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        logger.debug(f"PCC {method} {url}")
        try:
            resp = self._session.request(
                method,
                url,
                headers=headers,
                json=body if files is None else None,
                data=body if files is not None else None,
                params=params,
                files=files,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            raise PccError(f"{method} {endpoint} failed: {e}") from e

        try:
            envelope = resp.json()
        except ValueError:
            raise PccError(f"{method} {endpoint} returned non-JSON body: {resp.text[:200]}", resp.status_code)

        status = envelope.get("status", resp.status_code)
        if status != 200:
            message = envelope.get("error") or envelope.get("message") or resp.reason
            raise PccError(message, status)
        return envelope.get("data")

    def _get(self, endpoint: str, params: dict | None = None) -> Any:
        return self._gateway("GET", endpoint, params=params)

    def _post(self, endpoint: str, body: Any = None) -> Any:
        return self._gateway("POST", endpoint, body)

    def _delete(self, endpoint: str, params: dict | None = None) -> Any:
        return self._gateway("DELETE", endpoint, params=params)

    # ==================== Notifications ====================

    def get_notifications(self, since: datetime, limit: int = 50) -> list[dict]:
        """Notification history newer than ``since``, newest first."""
        data = self._get("pccserver/notifications/history", {
            "page": 0,
            "limit": limit,
            "sortBy": "createdAt",
            "sortDir": "desc",
            "from": int(since.timestamp() * 1000),
        })
        return data or []

    # ==================== Nodes ====================

    def get_nodes(self) -> list[dict]:
        return self._get("pccserver/node") or []

    def get_node(self, node_id: int) -> dict:
        return self._get(f"pccserver/node/{node_id}")

    @staticmethod
    def is_node_online(node: dict) -> bool:
        return str(node.get("nodeAvailabilityStatus", {}).get("connectionStatus", "")).lower() == "online"

    @staticmethod
    def is_invader(node: dict) -> bool:
        return "invader" in str(node.get("model", "")).lower()

    # ==================== Portus ====================

    def install_portus(self, configuration: dict) -> dict:
        logger.info(f"Installing Portus '{configuration.get('name')}' on node {configuration.get('nodeID')}")
        return self._post("pccserver/portus", configuration)

    def get_portus_nodes(self) -> list[dict]:
        return self._get("pccserver/portus") or []

    def get_portus_node_by_id(self, portus_id: int) -> dict:
        return self._get(f"pccserver/portus/{portus_id}")

    def delete_portus_node(self, portus_id: int, force: bool = False) -> Any:
        return self._delete(f"pccserver/portus/{portus_id}", {"force": str(force).lower()})

    # ==================== Hardware inventory / storage ====================

    def get_hardware_inventory(self) -> list[dict]:
        return self._get("pccserver/hardware-inventory") or []

    def get_storage_node(self, node_id: int) -> dict:
        return self._get(f"pccserver/storage/node/{node_id}") or {}

    # ==================== Keys, certificates, auth profiles ====================

    def find_security_key(self, alias: str) -> dict:
        for key in self._get("key-manager/keys/describe") or []:
            if key.get("alias") == alias:
                return key
        raise PccError(f"security key '{alias}' not found")

    def find_certificate(self, alias: str) -> dict:
        for cert in self._get("pccserver/certificate") or []:
            if cert.get("alias") == alias:
                return cert
        raise PccError(f"certificate '{alias}' not found")

    def upload_security_key(self, alias: str, path: str | Path, description: str = "") -> Any:
        path = Path(path)
        with open(path, "rb") as f:
            return self._gateway(
                "POST",
                f"key-manager/keys/upload/private/{alias}",
                body={"description": description},
                files={"key": (path.name, f, "application/octet-stream")},
            )

    def upload_certificate(self, alias: str, path: str | Path, description: str = "") -> Any:
        path = Path(path)
        with open(path, "rb") as f:
            return self._gateway(
                "POST",
                f"pccserver/certificate/upload/{alias}",
                body={"description": description},
                files={"file": (path.name, f, "application/octet-stream")},
            )

    def get_auth_profile_by_name(self, name: str) -> dict:
        for profile in self._get("user-management/auth/profiles") or []:
            if profile.get("name") == name:
                return profile
        raise PccError(f"auth profile '{name}' not found")

    # ==================== Interfaces ====================

    def get_ifaces_by_node_id(self, node_id: int) -> list[dict]:
        try:
            node = self.get_node(node_id)
        except PccError as e:
            raise PccError(f"get_ifaces_by_node_id failed: {e.message}", e.status) from e
        return (node or {}).get("interfaces") or []

    def get_iface_by_id(self, node_id: int, iface_id: int) -> dict:
        for iface in self.get_ifaces_by_node_id(node_id):
            if iface.get("interface", {}).get("id") == iface_id:
                return iface
        raise PccError(f"error getting interface {iface_id} on node {node_id}")

    @staticmethod
    def get_iface_by_mac_address(mac: str, ifaces: list[dict]) -> dict:
        if not mac:
            raise PccError(f"Invalid mac [{mac}]")
        for iface in ifaces:
            if iface.get("interface", {}).get("macAddress") == mac:
                return iface
        raise PccError(f"couldn't find mac [{mac}]")

    def set_iface(self, request: dict) -> Any:
        return self._post("pccserver/interface", request)

    def apply_iface(self, node_id: int) -> Any:
        return self._post("pccserver/interface/apply", {"nodeId": node_id})

    def set_iface_apply(self, request: dict) -> Any:
        """Configure an interface and push the change to the node."""
        self.set_iface(request)
        return self.apply_iface(request["nodeId"])

    def set_iface_admin(self, node_id: int, iface_id: int, up_down: str) -> Any:
        if up_down not in (INTERFACE_STATUS_UP, INTERFACE_STATUS_DOWN):
            raise ValueError(f"Invalid admin status: {up_down}")
        request = {"nodeId": node_id, "interfaceId": iface_id, "adminStatus": up_down}
        return self._post(f"pccserver/interface/{up_down}", request)

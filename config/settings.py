from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # PCC server
    pcc_address: str = "172.17.2.238"
    pcc_port: int = 9999
    pcc_username: str = "admin"
    pcc_password: str = ""
    pcc_verify_tls: bool = False
    pcc_request_timeout: int = 30

    # Run mode
    dry_run: bool = False

    # Notification polling
    poll_interval_seconds: float = 5.0

    # Node add (PXE boot)
    pxeboot_timeout_seconds: int = 900
    pxeboot_node_add_notification: str = "Node added successfully"
    pxeboot_node_add_failed_notification: str = "Node add failed"

    # Portus
    portus_timeout_seconds: int = 600
    portus_notification: str = "Portus correctly installed"
    portus_delete_timeout_seconds: int = 600
    portus_delete_poll_seconds: int = 30
    portus_port: int = 5000
    portus_database_password: str = "portus"
    portus_admin_state: str = "enabled"
    auth_profile_name: str = ""
    portus_key_alias: str = "test_portus_key"
    portus_cert_alias: str = "test_portus_crt"
    portus_key_path: str = "config/portus.key"
    portus_cert_path: str = "config/portus.crt"

    # BMC (ipmitool)
    bmc_username: str = "ADMIN"
    bmc_password: str = "ADMIN"
    bmc_ips: list[str] = []

    @property
    def pcc_url(self) -> str:
        return f"https://{self.pcc_address}:{self.pcc_port}"

    model_config = {"env_file": "config/.env", "extra": "ignore"}


settings = Settings()

"""BMC control through ipmitool - PXE boot and power cycle of test servers."""

import logging
import subprocess

logger = logging.getLogger(__name__)


class BmcError(Exception):
    """An ipmitool command failed."""


def _ipmitool(bmc_ip: str, username: str, password: str, *args: str, timeout: int = 60) -> str:
    cmd = [
        "ipmitool", "-I", "lanplus",
        "-H", bmc_ip,
        "-U", username,
        "-P", password,
        *args,
    ]
    logger.info(f"ipmitool {bmc_ip}: {' '.join(args)}")
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        raise BmcError(f"ipmitool {' '.join(args)} on {bmc_ip} failed: {e}") from e

    if result.returncode != 0:
        raise BmcError(
            f"ipmitool {' '.join(args)} on {bmc_ip} exited {result.returncode}: "
            f"{(result.stdout + result.stderr).strip()}"
        )
    return result.stdout


def pxeboot(bmc_ip: str, username: str, password: str) -> str:
    """Set next boot to PXE and power cycle the server."""
    output = _ipmitool(bmc_ip, username, password, "chassis", "bootdev", "pxe")
    output += _ipmitool(bmc_ip, username, password, "chassis", "power", "cycle")
    return output


def power_cycle(bmc_ip: str, username: str, password: str) -> str:
    return _ipmitool(bmc_ip, username, password, "chassis", "power", "cycle")

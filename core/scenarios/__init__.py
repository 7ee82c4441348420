"""Blackbox scenarios against a live PCC server."""

from .context import ScenarioContext, ScenarioFailed, ScenarioSkipped
from .hardware_inventory import (
    check_hardware_inventory,
    check_node_add,
    check_storage,
    power_cycle_node,
    pxeboot_node,
)
from .portus import (
    check_portus,
    delete_all_portus,
    install_portus,
    upload_portus_cert,
    upload_portus_key,
)

SCENARIOS = {
    "uploadPortusKey": upload_portus_key,
    "uploadPortusCert": upload_portus_cert,
    "addPortus": install_portus,
    "checkPortus": check_portus,
    "delAllPortus": delete_all_portus,
    "pxebootNode": pxeboot_node,
    "checkNodeAdd": check_node_add,
    "checkHardwareInventory": check_hardware_inventory,
    "checkStorage": check_storage,
    "powerCycleNode": power_cycle_node,
}

SUITES = {
    "portus": ["uploadPortusKey", "uploadPortusCert", "addPortus", "checkPortus"],
    "hardwareInventory": ["pxebootNode", "checkNodeAdd", "checkHardwareInventory", "checkStorage", "powerCycleNode"],
}

__all__ = [
    "SCENARIOS",
    "SUITES",
    "ScenarioContext",
    "ScenarioFailed",
    "ScenarioSkipped",
]

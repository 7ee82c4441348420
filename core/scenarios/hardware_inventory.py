"""Hardware inventory scenarios - PXE boot a server and check PCC picks it up."""

import logging

from core.verification import verify_add_node
from integrations.pcc import PccError
from integrations.servers.bmc import BmcError, power_cycle, pxeboot

from .context import ScenarioContext, ScenarioFailed, ScenarioSkipped, utcnow

logger = logging.getLogger(__name__)


def _first_bmc(ctx: ScenarioContext) -> str:
    if not ctx.settings.bmc_ips:
        raise ScenarioSkipped("no BMC addresses configured")
    return ctx.settings.bmc_ips[0]


async def pxeboot_node(ctx: ScenarioContext):
    ctx.skip_if_dry_run()
    bmc_ip = _first_bmc(ctx)
    ctx.pxeboot_started_at = utcnow()
    try:
        await ctx.call(pxeboot, bmc_ip, ctx.settings.bmc_username, ctx.settings.bmc_password)
    except BmcError as e:
        raise ScenarioFailed(f"PXE boot failed: {e}") from e


async def check_node_add(ctx: ScenarioContext):
    ctx.skip_if_dry_run()
    since = ctx.pxeboot_started_at or utcnow()
    outcome = await verify_add_node(ctx.poller, since, ctx.settings)
    if outcome.is_error:
        raise ScenarioFailed(f"Node addition failed: {outcome.message}")


async def check_hardware_inventory(ctx: ScenarioContext):
    ctx.skip_if_dry_run()
    try:
        inventory = await ctx.call(ctx.client.get_hardware_inventory)
    except PccError as e:
        raise ScenarioFailed(f"GetHardwareInventory failed: {e}") from e

    for bmc_ip in ctx.settings.bmc_ips:
        for hw in inventory:
            hw_ip = hw.get("bus", {}).get("bmc", {}).get("ipcfg", {}).get("ipaddress")
            if hw_ip == bmc_ip:
                ctx.pxeboot_node_id = hw.get("nodeID")
                logger.info(f"Hardware inventory with node id {ctx.pxeboot_node_id} persisted")
                return

    raise ScenarioFailed("Hardware inventory for the PXE booted server not persisted")


async def check_storage(ctx: ScenarioContext):
    ctx.skip_if_dry_run()
    if ctx.pxeboot_node_id is None:
        raise ScenarioFailed("No PXE booted node selected")

    try:
        storage = await ctx.call(ctx.client.get_storage_node, ctx.pxeboot_node_id)
    except PccError as e:
        raise ScenarioFailed(f"GetStorageNode failed: {e}") from e

    if not storage.get("children"):
        raise ScenarioFailed(f"Inventory for node {ctx.pxeboot_node_id} not persisted in storage inventory")
    logger.info(f"Inventory for node {ctx.pxeboot_node_id} persisted in storage inventory")


async def power_cycle_node(ctx: ScenarioContext):
    ctx.skip_if_dry_run()
    bmc_ip = _first_bmc(ctx)
    try:
        await ctx.call(power_cycle, bmc_ip, ctx.settings.bmc_username, ctx.settings.bmc_password)
    except BmcError as e:
        raise ScenarioFailed(f"Power cycle failed: {e}") from e

"""Portus registry scenarios - upload credentials, install, verify, delete."""

import asyncio
import logging
import time

from core.verification import VerificationTimeout, check_installed
from integrations.pcc import PccError

from .context import ScenarioContext, ScenarioFailed, utcnow

logger = logging.getLogger(__name__)


async def upload_portus_key(ctx: ScenarioContext):
    ctx.skip_if_dry_run()
    s = ctx.settings
    try:
        await ctx.call(ctx.client.upload_security_key, s.portus_key_alias, s.portus_key_path)
    except (PccError, OSError) as e:
        raise ScenarioFailed(f"Upload of Portus key failed: {e}") from e


async def upload_portus_cert(ctx: ScenarioContext):
    ctx.skip_if_dry_run()
    s = ctx.settings
    try:
        await ctx.call(ctx.client.upload_certificate, s.portus_cert_alias, s.portus_cert_path)
    except (PccError, OSError) as e:
        raise ScenarioFailed(f"Upload of Portus certificate failed: {e}") from e


async def _portus_configuration(ctx: ScenarioContext, node: dict) -> dict:
    s = ctx.settings
    node_id = node["id"]
    config = {
        "nodeID": node_id,
        "name": f"portus_{node_id}",
        "port": s.portus_port,
        "databasePassword": s.portus_database_password,
        "adminState": s.portus_admin_state,
    }

    if not s.auth_profile_name:
        logger.info("Authentication profile not configured, Portus will be installed without it")
    else:
        try:
            config["authenticationProfile"] = await ctx.call(ctx.client.get_auth_profile_by_name, s.auth_profile_name)
        except PccError as e:
            logger.warning(f"Missing authentication profile {s.auth_profile_name}, installing without it: {e}")

    try:
        cert = await ctx.call(ctx.client.find_certificate, s.portus_cert_alias)
        config["registryCertId"] = cert["id"]
    except PccError as e:
        logger.warning(f"Get certificate {s.portus_cert_alias} failed: {e}")

    try:
        key = await ctx.call(ctx.client.find_security_key, s.portus_key_alias)
        config["registryKeyId"] = key["id"]
    except PccError as e:
        logger.warning(f"Get private key {s.portus_key_alias} failed: {e}")

    return config


async def install_portus(ctx: ScenarioContext):
    """Install Portus on the first online node that is not an Invader."""
    ctx.skip_if_dry_run()
    client = ctx.client

    nodes = await ctx.call(client.get_nodes)
    for node in nodes:
        if client.is_invader(node) or not client.is_node_online(node):
            continue

        config = await _portus_configuration(ctx, node)
        logger.info(f"Installing Portus on node {node['id']}")
        ctx.portus_installed_at = utcnow()
        try:
            await ctx.call(client.install_portus, config)
        except PccError as e:
            raise ScenarioFailed(f"Failed to install Portus: {e}") from e
        ctx.portus_node_id = node["id"]
        return

    raise ScenarioFailed("No online non-Invader node available for Portus")


async def check_portus(ctx: ScenarioContext):
    ctx.skip_if_dry_run()
    if ctx.portus_node_id is None:
        raise ScenarioFailed("Portus was not installed in this run")

    try:
        node = await ctx.call(ctx.client.get_node, ctx.portus_node_id)
    except PccError as e:
        raise ScenarioFailed(f"Failed to get node {ctx.portus_node_id}: {e}") from e
    if ctx.client.is_invader(node) or not ctx.client.is_node_online(node):
        raise ScenarioFailed(f"Portus node {ctx.portus_node_id} is offline or an Invader")

    s = ctx.settings
    since = ctx.portus_installed_at or utcnow()
    try:
        await check_installed(
            ctx.portus_node_id,
            s.portus_timeout_seconds,
            s.portus_notification,
            since,
            ctx.poller,
            poll_interval=s.poll_interval_seconds,
        )
    except VerificationTimeout as e:
        raise ScenarioFailed(f"Portus installation has failed: {e}") from e
    logger.info(f"Portus correctly installed on node {ctx.portus_node_id}")


async def _wait_portus_deleted(ctx: ScenarioContext, portus_id: int):
    s = ctx.settings
    deadline = time.monotonic() + s.portus_delete_timeout_seconds
    while time.monotonic() < deadline:
        await asyncio.sleep(min(s.portus_delete_poll_seconds, max(deadline - time.monotonic(), 0)))
        try:
            await ctx.call(ctx.client.get_portus_node_by_id, portus_id)
        except PccError as e:
            if e.not_found:
                return
            raise ScenarioFailed(f"Failed to get Portus {portus_id}: {e}") from e
        logger.debug(f"Portus {portus_id} still present")
    raise ScenarioFailed(f"Timeout deleting Portus {portus_id}")


async def delete_all_portus(ctx: ScenarioContext):
    ctx.skip_if_dry_run()
    try:
        portus_configs = await ctx.call(ctx.client.get_portus_nodes)
    except PccError as e:
        raise ScenarioFailed(f"Failed to get Portus nodes: {e}") from e

    for portus in portus_configs:
        logger.info(f"Deleting Portus {portus.get('name')}")
        try:
            await ctx.call(ctx.client.delete_portus_node, portus["id"], True)
        except PccError as e:
            raise ScenarioFailed(f"Failed to delete Portus {portus.get('name')}: {e}") from e
        await _wait_portus_deleted(ctx, portus["id"])

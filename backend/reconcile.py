"""
Reconcile desired pool payloads against what a router currently carries.

Changed pools are returned explicitly so callers can report or apply them;
nothing is accumulated across routers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from config_loader import RoutingConfig, RouterConfig
from converter import generate_dhcp_options
from models import PoolDeviceConfig
from prioritizer import PoolPlan, merge_routes
from renderers import OutputFormat

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    router: str
    updated_pools: list[str] = field(default_factory=list)     # option 121 differs
    unchanged_pools: list[str] = field(default_factory=list)
    missing_pools: list[str] = field(default_factory=list)     # on device, not in config
    absent_pools: list[str] = field(default_factory=list)      # in config, not on device
    commands: list[str] = field(default_factory=list)
    missing_commands: list[str] = field(default_factory=list)


def _device_plan(config: RoutingConfig, router: RouterConfig, device: PoolDeviceConfig) -> PoolPlan:
    """Plan for a pool only the device knows about: its gateway plus inherited routes."""
    routes = merge_routes(
        default_gateway=device.default_gateway,
        fallback_routes=[(r.network, r.gateway) for r in config.global_config.append_routes],
        parent_disable_fallback=router.disable_append_routes,
        scope=device.name,
    )
    return PoolPlan(router=router.name, pool=device.name, routes=routes)


def reconcile_router(
    config: RoutingConfig,
    router: RouterConfig,
    device_pools: dict[str, PoolDeviceConfig],
    with_option_249: bool = False,
) -> ReconcileResult:
    result = ReconcileResult(router=router.name)
    fallback = [(r.network, r.gateway) for r in config.global_config.append_routes]

    for pool_name, pool in router.pools.items():
        device = device_pools.get(pool_name)
        if device is None:
            logger.warning("Pool %s is configured for %s but not present on the device", pool_name, router.name)
            result.absent_pools.append(pool_name)
            continue

        routes = merge_routes(
            default_gateway=pool.default_gateway or device.default_gateway,
            scoped_routes=[(r.network, r.gateway) for r in pool.common_routes],
            fallback_routes=fallback,
            disable_fallback=pool.disable_append_routes,
            parent_disable_fallback=router.disable_append_routes,
            scope=pool_name,
        )
        if not routes:
            continue

        conversion = generate_dhcp_options(
            routes.networks, routes.gateways, OutputFormat.JUNOS, with_option_249, pool_name,
        )
        if not conversion.payload:
            continue
        if conversion.payload == (device.option_121 or ""):
            result.unchanged_pools.append(pool_name)
            continue

        logger.info("Pool %s on %s: option 121 %s -> %s",
                    pool_name, router.name, device.option_121 or "(unset)", conversion.payload)
        result.updated_pools.append(pool_name)
        result.commands.extend(conversion.lines)

    for pool_name, device in device_pools.items():
        if pool_name in router.pools:
            continue
        result.missing_pools.append(pool_name)
        plan = _device_plan(config, router, device)
        if not plan.routes:
            continue
        conversion = generate_dhcp_options(
            plan.routes.networks, plan.routes.gateways, OutputFormat.JUNOS, with_option_249, pool_name,
        )
        result.missing_commands.extend(conversion.lines)

    return result

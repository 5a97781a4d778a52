"""
Route Prioritizer — merge route tiers for one pool into a single ordered list.

Tiers, highest precedence first:
1. DefaultGateway: synthesizes 0.0.0.0/0 via the pool's default gateway
2. ScopedRoutes:   the pool's own common-routes
3. FallbackRoutes: global append-routes inherited by every pool

The first tier to claim a network wins; wire order is construction order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Iterator, Optional

from validator import DEFAULT_NETWORK, is_default_network, is_valid_gateway

if TYPE_CHECKING:
    from config_loader import RoutingConfig

logger = logging.getLogger(__name__)


class RouteTier(str, Enum):
    DEFAULT_GATEWAY = "default-gateway"
    SCOPED = "common-routes"
    FALLBACK = "append-routes"


@dataclass
class MergedRoutes:
    """Ordered merge result, split into the parallel lists the codec takes."""
    scope: str = ""
    networks: list[str] = field(default_factory=list)
    gateways: list[str] = field(default_factory=list)
    tiers: list[RouteTier] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.networks)

    def pairs(self) -> list[tuple[str, str]]:
        return list(zip(self.networks, self.gateways))

    @property
    def has_default_route(self) -> bool:
        return DEFAULT_NETWORK in self.networks


@dataclass
class PoolPlan:
    router: str
    pool: str
    routes: MergedRoutes


def _insert_tier(merged: dict[str, tuple[str, RouteTier]], routes: Iterable[tuple[str, str]],
                 tier: RouteTier, scope: str) -> None:
    for network, gateway in routes:
        network = network.strip()
        if is_default_network(network):
            logger.error(
                "[%s] %s entry %s via %s ignored: default route may only come from default-gateway",
                scope, tier.value, network, gateway,
            )
            continue
        if not is_valid_gateway(gateway):
            logger.error("[%s] %s entry %s has invalid gateway %s", scope, tier.value, network, gateway)
            continue
        if network in merged:
            logger.debug("[%s] %s entry %s shadowed by %s", scope, tier.value, network, merged[network][1].value)
            continue
        merged[network] = (gateway.strip(), tier)


def merge_routes(
    default_gateway: Optional[str] = None,
    scoped_routes: Iterable[tuple[str, str]] = (),
    fallback_routes: Iterable[tuple[str, str]] = (),
    disable_fallback: bool = False,
    parent_disable_fallback: bool = False,
    scope: str = "",
) -> MergedRoutes:
    """
    Merge the three tiers for one scope.

    disable_fallback is the scope's own opt-out and suppresses both scoped and
    fallback routes; parent_disable_fallback suppresses fallback routes only.
    """
    merged: dict[str, tuple[str, RouteTier]] = {}

    if default_gateway:
        if is_valid_gateway(default_gateway):
            merged[DEFAULT_NETWORK] = (default_gateway.strip(), RouteTier.DEFAULT_GATEWAY)
        else:
            logger.error("[%s] invalid default gateway %s skipped", scope, default_gateway)

    if not disable_fallback:
        _insert_tier(merged, scoped_routes, RouteTier.SCOPED, scope)
        if not parent_disable_fallback:
            _insert_tier(merged, fallback_routes, RouteTier.FALLBACK, scope)

    result = MergedRoutes(scope=scope)
    for network, (gateway, tier) in merged.items():
        result.networks.append(network)
        result.gateways.append(gateway)
        result.tiers.append(tier)
    return result


def plan_pools(config: "RoutingConfig") -> Iterator[PoolPlan]:
    """Yield a merged plan for every pool in file order. Empty pools are skipped."""
    fallback = [(r.network, r.gateway) for r in config.global_config.append_routes]
    for router in config.routers:
        for pool_name, pool in router.pools.items():
            routes = merge_routes(
                default_gateway=pool.default_gateway,
                scoped_routes=[(r.network, r.gateway) for r in pool.common_routes],
                fallback_routes=fallback,
                disable_fallback=pool.disable_append_routes,
                parent_disable_fallback=router.disable_append_routes,
                scope=pool_name,
            )
            if not routes:
                logger.info("Pool %s on %s has no eligible routes, skipped", pool_name, router.name)
                continue
            yield PoolPlan(router=router.name, pool=pool_name, routes=routes)

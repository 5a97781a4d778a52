"""Merge → encode → render pipeline shared by the CLI and the HTTP API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from config_loader import RoutingConfig
from prioritizer import PoolPlan, plan_pools
from renderers import OutputFormat, parse_format, render
from route_codec import encode_routes
from validator import is_loopback_gateway

logger = logging.getLogger(__name__)

NO_DEFAULT_ROUTE_WARNING = (
    "No default route (0.0.0.0/0) specified in option 121. Clients like MikroTik may "
    "ignore option 3 (Router) per RFC 3442, causing loss of Internet access."
)


@dataclass
class ConversionResult:
    payload: str = ""
    saw_default_route: bool = False
    lines: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    loopback_gateways: list[str] = field(default_factory=list)


@dataclass
class PoolOutput:
    plan: PoolPlan
    result: ConversionResult


def generate_dhcp_options(
    networks: Sequence[str],
    gateways: Sequence[str],
    fmt: Union[str, OutputFormat] = OutputFormat.DEFAULT,
    with_option_249: bool = False,
    pool_name: Optional[str] = None,
) -> ConversionResult:
    """Encode the routes and render them. Nothing renders if no route survived."""
    fmt = parse_format(fmt)
    encoded = encode_routes(networks, gateways)
    result = ConversionResult(
        payload=encoded.payload,
        saw_default_route=encoded.saw_default_route,
        skipped=encoded.skipped,
        loopback_gateways=[gw for gw in gateways[:len(networks)] if is_loopback_gateway(gw)],
    )
    result.lines = render(encoded.payload, fmt, with_option_249, pool_name)
    return result


def render_config(
    config: RoutingConfig,
    fmt: Union[str, OutputFormat] = OutputFormat.JUNOS,
    with_option_249: bool = False,
) -> list[PoolOutput]:
    """Render every pool in the configuration, in file order."""
    fmt = parse_format(fmt)
    outputs = []
    for plan in plan_pools(config):
        result = generate_dhcp_options(
            plan.routes.networks, plan.routes.gateways, fmt, with_option_249, plan.pool,
        )
        if not result.payload:
            logger.warning("Pool %s on %s produced no valid routes", plan.pool, plan.router)
            continue
        outputs.append(PoolOutput(plan=plan, result=result))
    return outputs

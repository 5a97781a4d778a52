"""
Per-vendor render functions.

Each takes (payload, with_option_249, pool_name) and returns config lines.
The payload is already normalized: lower-case hex, no 0x prefix, non-empty.
"""

from __future__ import annotations

import logging
from typing import Optional

from route_codec import Route, decode_payload, significant_octets

from . import OutputFormat, Renderer

logger = logging.getLogger(__name__)

DEFAULT_JUNOS_POOL = "lan-pool"
DEFAULT_CISCO_POOL = "mypool"

ISC_DECL_121 = "option rfc3442-classless-static-routes code 121 = array of unsigned integer 8;"
ISC_DECL_249 = "option ms-classless-static-routes code 249 = array of unsigned integer 8;"


def render_default(payload: str, with_option_249: bool, pool_name: Optional[str] = None) -> list[str]:
    lines = [f"aggregate_opt_121 : 0x{payload}"]
    if with_option_249:
        lines.append(f"aggregate_opt_249 : 0x{payload}")
    return lines


def _isc_fields(route: Route) -> str:
    n = significant_octets(route.prefix_length)
    fields = [route.prefix_length, *route.network_octets[:n], *route.gateway_octets]
    return ",".join(str(f) for f in fields)


def render_isc(payload: str, with_option_249: bool, pool_name: Optional[str] = None) -> list[str]:
    decoded = decode_payload(payload)
    if decoded.error:
        logger.warning("ISC rendering from partially decoded payload: %s", decoded.error)
    if not decoded.routes:
        return []

    values = ", ".join(_isc_fields(r) for r in decoded.routes)
    lines = [ISC_DECL_121]
    if with_option_249:
        lines.append(ISC_DECL_249)
    lines.append(f"option rfc3442-classless-static-routes {values};")
    if with_option_249:
        lines.append(f"option ms-classless-static-routes {values};")
    return lines


def render_routeros(payload: str, with_option_249: bool, pool_name: Optional[str] = None) -> list[str]:
    lines = [f"/ip dhcp-server option add code=121 name=aggregate_opt_121 value=0x{payload}"]
    if with_option_249:
        lines.append(f"/ip dhcp-server option add code=249 name=aggregate_opt_249 value=0x{payload}")
    return lines


def render_junos(payload: str, with_option_249: bool, pool_name: Optional[str] = None) -> list[str]:
    pool = pool_name or DEFAULT_JUNOS_POOL
    prefix = f"set access address-assignment pool {pool} family inet dhcp-attributes"
    lines = [f"{prefix} option 121 hex-string {payload}"]
    if with_option_249:
        lines.append(f"{prefix} option 249 hex-string {payload}")
    return lines


def render_cisco(payload: str, with_option_249: bool, pool_name: Optional[str] = None) -> list[str]:
    lines = [f"ip dhcp pool {pool_name or DEFAULT_CISCO_POOL}", f" option 121 hex {payload}"]
    if with_option_249:
        lines.append(f" option 249 hex {payload}")
    return lines


def render_windows(payload: str, with_option_249: bool, pool_name: Optional[str] = None) -> list[str]:
    lines = [f"Set-DhcpServerv4OptionValue -OptionId 121 -Value 0x{payload}"]
    if with_option_249:
        lines.append(f"Set-DhcpServerv4OptionValue -OptionId 249 -Value 0x{payload}")
    return lines


RENDERERS: dict[OutputFormat, Renderer] = {
    OutputFormat.DEFAULT: render_default,
    OutputFormat.ISC: render_isc,
    OutputFormat.ROUTEROS: render_routeros,
    OutputFormat.JUNOS: render_junos,
    OutputFormat.CISCO: render_cisco,
    OutputFormat.WINDOWS: render_windows,
}

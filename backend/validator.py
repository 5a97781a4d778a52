"""
Validator — shared sanity checks for route input.

Used by the route codec (encode path) and the prioritizer (merge path).
Checks are strict dotted-quad: four decimal octets 0-255, masks 0-32.
Gateways 0.0.0.0 and 255.255.255.255 are never valid next hops.
"""

from __future__ import annotations

import ipaddress
import re

DEFAULT_NETWORK = "0.0.0.0/0"

# Gateways no DHCP client can use as a next hop
DISALLOWED_GATEWAYS = frozenset({"0.0.0.0", "255.255.255.255"})

_IPV4_RE = re.compile(r'^(\d{1,3})\.(\d{1,3})\.(\d{1,3})\.(\d{1,3})$')
_CIDR_RE = re.compile(r'^(\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3})/(\d{1,2})$')


class RouteValidationError(ValueError):
    """A single network or gateway failed validation."""


def parse_ipv4(text: str, what: str = "address") -> tuple[int, int, int, int]:
    """Parse a dotted quad into four octets, raising RouteValidationError."""
    m = _IPV4_RE.match(text.strip()) if isinstance(text, str) else None
    if not m:
        raise RouteValidationError(f"Invalid {what} format: {text}")
    octets = tuple(int(g) for g in m.groups())
    for raw, octet in zip(m.groups(), octets):
        if octet > 255:
            raise RouteValidationError(f"Invalid {what} octet: {raw}")
    return octets


def parse_cidr(text: str) -> tuple[tuple[int, int, int, int], int]:
    """Parse 'a.b.c.d/m' into (octets, mask)."""
    m = _CIDR_RE.match(text.strip()) if isinstance(text, str) else None
    if not m:
        raise RouteValidationError(f"Invalid network format: {text}")
    mask = int(m.group(2))
    if mask > 32:
        raise RouteValidationError(f"Invalid subnet mask: {mask}")
    return parse_ipv4(m.group(1), "network"), mask


def parse_gateway(text: str) -> tuple[int, int, int, int]:
    octets = parse_ipv4(text, "gateway")
    if ".".join(str(o) for o in octets) in DISALLOWED_GATEWAYS:
        raise RouteValidationError(f"Disallowed gateway: {text}")
    return octets


def is_valid_gateway(text: str) -> bool:
    try:
        parse_gateway(text)
    except RouteValidationError:
        return False
    return True


def is_default_network(text: str) -> bool:
    """True for an explicit default route ('0.0.0.0/0' or any '/0')."""
    try:
        _, mask = parse_cidr(text)
    except RouteValidationError:
        return False
    return mask == 0


def is_loopback_gateway(text: str) -> bool:
    try:
        return ipaddress.IPv4Address(text.strip()).is_loopback
    except (ipaddress.AddressValueError, AttributeError):
        return False

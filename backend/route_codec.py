"""
Route Codec — RFC 3442 classless static route encoding (DHCP options 121/249).

Wire format, per route, hex-encoded lower-case with no separators:

    [mask byte][significant network octets][4 gateway octets]

Option 249 (Microsoft) carries a byte-identical payload. Encode and decode are
pure functions: whether a default route (mask 0) was seen is part of the
result, not codec state.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Sequence

from validator import RouteValidationError, parse_cidr, parse_gateway

logger = logging.getLogger(__name__)

_HEX_RE = re.compile(r'^[0-9a-f]+$')


def significant_octets(mask: int) -> int:
    """Number of network-address bytes transmitted for a prefix length."""
    if mask < 0 or mask > 32:
        raise ValueError(f"Subnet mask out of range: {mask}")
    return (mask + 7) // 8


def to_hex(n: int) -> str:
    return f"{n:02x}"


@dataclass(frozen=True)
class Route:
    """One decoded route. network is always a full dotted quad."""
    network: str
    prefix_length: int
    gateway: str

    @property
    def cidr(self) -> str:
        return f"{self.network}/{self.prefix_length}"

    @property
    def network_octets(self) -> list[int]:
        return [int(o) for o in self.network.split(".")]

    @property
    def gateway_octets(self) -> list[int]:
        return [int(o) for o in self.gateway.split(".")]

    def __str__(self) -> str:
        return f"{self.cidr} via {self.gateway}"


@dataclass
class EncodeResult:
    payload: str = ""
    saw_default_route: bool = False
    skipped: list[str] = field(default_factory=list)  # "network,gateway" inputs rejected


@dataclass
class DecodeResult:
    routes: list[Route] = field(default_factory=list)
    saw_default_route: bool = False
    error: Optional[str] = None

    def lines(self) -> list[str]:
        return [str(r) for r in self.routes]


def encode_route(network: str, gateway: str) -> str:
    """Encode a single route record. Raises RouteValidationError."""
    net_octets, mask = parse_cidr(network)
    gw_octets = parse_gateway(gateway)

    parts = [to_hex(mask)]
    parts.extend(to_hex(o) for o in net_octets[:significant_octets(mask)])
    parts.extend(to_hex(o) for o in gw_octets)
    return "".join(parts)


def encode_routes(networks: Sequence[str], gateways: Sequence[str]) -> EncodeResult:
    """
    Encode parallel network/gateway lists into one aggregate payload.

    Invalid routes are logged and skipped; the rest are encoded in input
    order. Only min(len(networks), len(gateways)) pairs are considered.
    """
    result = EncodeResult()
    if len(networks) != len(gateways):
        logger.warning(
            "Mismatch between networks (%d) and gateways (%d) count; extra entries ignored",
            len(networks), len(gateways),
        )

    records: list[str] = []
    for network, gateway in zip(networks, gateways):
        try:
            record = encode_route(network, gateway)
        except RouteValidationError as e:
            logger.error("Skipping route %s via %s: %s", network, gateway, e)
            result.skipped.append(f"{network},{gateway}")
            continue

        logger.debug("Route %s via %s -> %s", network, gateway, record)
        if record.startswith("00"):
            result.saw_default_route = True
        records.append(record)

    result.payload = "".join(records)
    if result.payload:
        logger.debug("Aggregate payload: %s", result.payload)
    return result


def is_hex_payload(hex_str: str) -> bool:
    """True for a normalized payload: lower-case hex digits only."""
    return bool(_HEX_RE.match(hex_str))


def normalize_payload(payload: str) -> str:
    """Strip an optional 0x/0X prefix and lower-case the rest."""
    hex_str = payload.strip().lower()
    if hex_str.startswith("0x"):
        hex_str = hex_str[2:]
    return hex_str


def decode_payload(payload: Optional[str]) -> DecodeResult:
    """
    Decode an option 121/249 payload into routes.

    Non-hex or empty input yields an empty result with .error set. Decoding
    stops at the first out-of-range mask (with .error set) or at a truncated
    trailing record (no error); routes decoded up to that point are kept.
    """
    result = DecodeResult()
    hex_str = normalize_payload(payload) if isinstance(payload, str) else ""
    if not is_hex_payload(hex_str):
        result.error = f"Invalid hex option format: {payload!r}"
        logger.error(result.error)
        return result

    index = 0
    length = len(hex_str)
    while index < length:
        if index + 2 > length:
            logger.debug("Trailing partial byte at offset %d ignored", index)
            break
        mask = int(hex_str[index:index + 2], 16)
        if mask > 32:
            result.error = f"Subnet mask out of range: {mask} at offset {index}"
            logger.error(result.error)
            break
        index += 2

        n = significant_octets(mask)
        record_end = index + 2 * (n + 4)
        if record_end > length:
            logger.debug("Incomplete route record at offset %d ignored", index - 2)
            break

        destination = [int(hex_str[i:i + 2], 16) for i in range(index, index + 2 * n, 2)]
        destination += [0] * (4 - n)
        index += 2 * n
        gateway = [int(hex_str[i:i + 2], 16) for i in range(index, index + 8, 2)]
        index += 8

        if mask == 0:
            result.saw_default_route = True
        result.routes.append(Route(
            network=".".join(str(o) for o in destination),
            prefix_length=mask,
            gateway=".".join(str(o) for o in gateway),
        ))

    return result

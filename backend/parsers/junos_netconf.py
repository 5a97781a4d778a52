"""Parse Junos address-assignment configuration XML into pool models."""

from __future__ import annotations

import logging
import re
from xml.etree import ElementTree as ET

from models import PoolDeviceConfig

logger = logging.getLogger(__name__)

GET_POOLS_RPC = (
    "<rpc>"
    "<get-configuration>"
    "<configuration>"
    "<access>"
    "<address-assignment>"
    "<pool/>"
    "</address-assignment>"
    "</access>"
    "</configuration>"
    "</get-configuration>"
    "</rpc>"
)

_COMMENT_RE = re.compile(r'<!--.*?-->', re.DOTALL)
_REPLY_RE = re.compile(r'<rpc-reply\b.*</rpc-reply>', re.DOTALL)


def _to_xml_root(xml: str) -> ET.Element:
    """Parse a reply, tolerating CLI echo and prompt text around it."""
    xml = _COMMENT_RE.sub("", xml)
    m = _REPLY_RE.search(xml)
    if m:
        xml = m.group(0)
    return ET.fromstring(xml.strip())


def _txt(node: ET.Element | None, path: str, default: str = "") -> str:
    if node is None:
        return default
    child = node.find(path)
    if child is None or child.text is None:
        return default
    return child.text.strip()


def _option_hex(attrs: ET.Element | None, code: str) -> str:
    if attrs is None:
        return ""
    for option in attrs.findall("{*}option"):
        if _txt(option, "{*}name") == code:
            return _txt(option, "{*}hex-string").lower()
    return ""


def parse_address_pools(xml: str, router: str = "") -> dict[str, PoolDeviceConfig]:
    """
    Extract inet pools from a get-configuration reply.

    Pools without family/inet or without a default gateway (dhcp-attributes
    router) are skipped with a warning.
    """
    if not xml or not xml.strip():
        logger.error("Empty NETCONF response for router %s", router)
        return {}

    try:
        root = _to_xml_root(xml)
    except ET.ParseError as e:
        logger.error("Failed to parse NETCONF response for router %s: %s", router, e)
        return {}

    pools: dict[str, PoolDeviceConfig] = {}
    for i, pool in enumerate(root.findall(".//{*}address-assignment/{*}pool")):
        inet = pool.find("{*}family/{*}inet")
        if inet is None:
            continue
        name = _txt(pool, "{*}name")
        if not name:
            logger.warning("Pool #%d has empty <name> in NETCONF response for %s", i + 1, router)
            continue

        attrs = inet.find("{*}dhcp-attributes")
        default_gateway = _txt(attrs, "{*}router/{*}name")
        if not default_gateway:
            logger.warning("Pool %s has no default-gateway in NETCONF response for %s", name, router)
            continue

        pools[name] = PoolDeviceConfig(
            name=name,
            default_gateway=default_gateway,
            network=_txt(inet, "{*}network") or None,
            option_121=_option_hex(attrs, "121") or None,
            option_249=_option_hex(attrs, "249") or None,
        )
        logger.debug("Parsed pool %s on %s: %s", name, router, pools[name])

    logger.debug("Found %d pool(s) in NETCONF response for %s", len(pools), router)
    return pools

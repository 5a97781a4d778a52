"""
Config Loader — Parse the routers YAML file into global/router/pool records.

Layout:
  global → append-routes, credentials, apply-method, domain
  routers → [ {name, credentials, disable-append-routes, pools → {name → pool}} ]

Route entries are {network, gateway} mappings. Structural problems raise
ConfigError; a single malformed route entry is logged and skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from models import ApplyMethod, StaticRoute

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """The configuration file is unreadable or structurally invalid."""


@dataclass
class GlobalConfig:
    username: Optional[str] = None
    password: Optional[str] = None
    apply_method: Optional[ApplyMethod] = None
    domain: Optional[str] = None
    append_routes: list[StaticRoute] = field(default_factory=list)


@dataclass
class PoolConfig:
    default_gateway: Optional[str] = None
    common_routes: list[StaticRoute] = field(default_factory=list)
    disable_append_routes: bool = False


@dataclass
class RouterConfig:
    name: str
    username: Optional[str] = None
    password: Optional[str] = None
    apply_method: Optional[ApplyMethod] = None
    disable_append_routes: bool = False
    pools: dict[str, PoolConfig] = field(default_factory=dict)

    def hostname(self, domain: Optional[str] = None) -> str:
        """Router name, qualified with the global domain when one is set."""
        if domain and "." not in self.name:
            return f"{self.name}.{domain}"
        return self.name


@dataclass
class RoutingConfig:
    """Complete parsed configuration."""
    global_config: GlobalConfig = field(default_factory=GlobalConfig)
    routers: list[RouterConfig] = field(default_factory=list)

    def get_router(self, name: str) -> Optional[RouterConfig]:
        for router in self.routers:
            if router.name == name:
                return router
        return None

    def credentials(self, router: RouterConfig) -> tuple[str, str]:
        """Router credentials, falling back to the global ones."""
        g = self.global_config
        return (router.username or g.username or "", router.password or g.password or "")

    def apply_method(self, router: RouterConfig) -> ApplyMethod:
        return router.apply_method or self.global_config.apply_method or ApplyMethod.NETCONF


def _parse_apply_method(value: Any) -> Optional[ApplyMethod]:
    if value is None:
        return None
    try:
        return ApplyMethod(str(value).strip().lower())
    except ValueError:
        raise ConfigError(f"Unknown apply-method: {value}") from None


def _parse_routes(raw: Any, where: str) -> list[StaticRoute]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigError(f"{where}: expected a list of routes, found {type(raw).__name__}")

    routes = []
    for i, entry in enumerate(raw):
        if not isinstance(entry, dict):
            logger.error("%s[%d]: expected mapping with network/gateway, found %r", where, i, entry)
            continue
        try:
            routes.append(StaticRoute(network=str(entry["network"]), gateway=str(entry["gateway"])))
        except (KeyError, ValidationError) as e:
            logger.error("%s[%d]: incomplete route entry %r (%s)", where, i, entry, e)
    return routes


def _parse_bool(value: Any, where: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ConfigError(f"{where}: expected true/false, found {value!r}")
    return value


def _parse_pool(name: str, raw: Any) -> PoolConfig:
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Invalid pool {name}: expected mapping, found {type(raw).__name__}")
    gateway = raw.get("default-gateway")
    return PoolConfig(
        default_gateway=str(gateway) if gateway is not None else None,
        common_routes=_parse_routes(raw.get("common-routes"), f"pool {name} common-routes"),
        disable_append_routes=_parse_bool(raw.get("disable-append-routes"), f"pool {name} disable-append-routes"),
    )


def _parse_router(raw: Any) -> RouterConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"Invalid router configuration, expected mapping but found {type(raw).__name__}")
    name = raw.get("name")
    if not name:
        raise ConfigError("Router entry without a name")

    pools_raw = raw.get("pools") or {}
    if not isinstance(pools_raw, dict):
        raise ConfigError(f"Router {name}: pools must be a mapping of pool name to pool")

    return RouterConfig(
        name=str(name),
        username=raw.get("username"),
        password=raw.get("password"),
        apply_method=_parse_apply_method(raw.get("apply-method")),
        disable_append_routes=_parse_bool(raw.get("disable-append-routes"), f"router {name} disable-append-routes"),
        pools={str(pool_name): _parse_pool(str(pool_name), pool) for pool_name, pool in pools_raw.items()},
    )


def parse_routing_config(raw: Any) -> RoutingConfig:
    """Build a RoutingConfig from an already-loaded YAML document."""
    config = RoutingConfig()
    if raw is None:
        return config
    if not isinstance(raw, dict):
        raise ConfigError(f"Top level must be a mapping, found {type(raw).__name__}")

    global_raw = raw.get("global")
    if global_raw is not None:
        if not isinstance(global_raw, dict):
            raise ConfigError("global section must be a mapping")
        config.global_config = GlobalConfig(
            username=global_raw.get("username"),
            password=global_raw.get("password"),
            apply_method=_parse_apply_method(global_raw.get("apply-method")),
            domain=global_raw.get("domain"),
            append_routes=_parse_routes(global_raw.get("append-routes"), "global append-routes"),
        )

    if "routers" not in raw:
        logger.debug("No routers section in configuration")
        return config

    routers_raw = raw["routers"]
    if not isinstance(routers_raw, list):
        found = type(routers_raw).__name__ if routers_raw is not None else "null"
        raise ConfigError(f"Invalid routers configuration, expected list but found {found}")

    config.routers = [_parse_router(r) for r in routers_raw]
    return config


def loads_routing_config(text: str) -> RoutingConfig:
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e
    return parse_routing_config(raw)


def load_routing_config(path: str | Path) -> RoutingConfig:
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as e:
        raise ConfigError(f"Failed to load config {path}: {e}") from e
    return loads_routing_config(text)

"""
Data models for the DHCP Route Converter.

Routes are carried as plain network/gateway string pairs; the codec and the
validator decide whether they are usable. Device-side pool state comes from
Junos configuration XML.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from renderers import OutputFormat


class ApplyMethod(str, Enum):
    """How a router's pool configuration is retrieved."""
    NETCONF = "netconf"      # ssh -s netconf, port 830
    TELNET = "telnet"        # CLI '| display xml'


class StaticRoute(BaseModel):
    network: str             # CIDR, e.g. 192.168.0.0/16
    gateway: str


# --- Device Models ---

class PoolDeviceConfig(BaseModel):
    """Address-assignment pool as configured on a device."""
    name: str
    default_gateway: Optional[str] = None
    network: Optional[str] = None
    option_121: Optional[str] = None
    option_249: Optional[str] = None


# --- API Models ---

class EncodeRequest(BaseModel):
    routes: list[StaticRoute] = Field(default_factory=list)
    default_gateway: Optional[str] = None
    format: str = OutputFormat.DEFAULT.value
    pool_name: Optional[str] = None
    with_option_249: bool = False


class EncodeResponse(BaseModel):
    payload: str
    saw_default_route: bool
    lines: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)


class DecodeRequest(BaseModel):
    payload: str


class DecodeResponse(BaseModel):
    routes: list[str] = Field(default_factory=list)
    saw_default_route: bool = False


class ConfigRenderRequest(BaseModel):
    config: str              # YAML document
    format: str = OutputFormat.JUNOS.value
    with_option_249: bool = False


class PoolRecord(BaseModel):
    router: str
    pool: str
    payload: str
    saw_default_route: bool
    lines: list[str] = Field(default_factory=list)


class ConfigRenderResponse(BaseModel):
    pools: list[PoolRecord] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

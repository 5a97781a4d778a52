"""Device collectors — fetch DHCP pool configuration from routers."""

from .junos_collector import JunosPoolCollector

__all__ = ["JunosPoolCollector"]

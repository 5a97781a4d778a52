"""Parsers for device configuration payloads."""

from .junos_netconf import GET_POOLS_RPC, parse_address_pools

__all__ = ["GET_POOLS_RPC", "parse_address_pools"]

#!/usr/bin/env python3
"""
Pool dump — fetch DHCP pools from a Junos router and decode their option 121.

Usage: python3 scripts/pool_dump.py HOST USERNAME PASSWORD [netconf|telnet]
"""

import asyncio
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))
from collectors.junos_collector import JunosPoolCollector
from models import ApplyMethod
from route_codec import decode_payload


def main():
    if len(sys.argv) < 4:
        print(__doc__.strip())
        sys.exit(1)

    host, username, password = sys.argv[1:4]
    method = ApplyMethod(sys.argv[4]) if len(sys.argv) > 4 else ApplyMethod.NETCONF

    print(f"Connecting to {host} ({method.value})...")
    collector = JunosPoolCollector(host, username, password, method)
    pools = asyncio.run(collector.get_pools())

    print(f"\n{'='*60}")
    print(f"{len(pools)} pools")
    print(f"{'='*60}\n")

    for name, pool in pools.items():
        print(f"{name}: network={pool.network or '-'} router={pool.default_gateway}")
        if not pool.option_121:
            print("  option 121: not set")
            continue
        decoded = decode_payload(pool.option_121)
        for route in decoded.lines():
            print(f"  {route}")
        if not decoded.saw_default_route:
            print("  WARNING: no default route in option 121")


if __name__ == "__main__":
    main()

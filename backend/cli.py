"""
Command-line front end.

Usage: dhcp-route-converter [-tdo [FORMAT] ROUTES] [-fdo HEX] [--config FILE] ...
Results go to stdout; diagnostics go to stderr through logging.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional

from collectors import JunosPoolCollector
from config_loader import ConfigError, load_routing_config
from converter import NO_DEFAULT_ROUTE_WARNING, ConversionResult, generate_dhcp_options, render_config
from prioritizer import merge_routes
from reconcile import reconcile_router
from renderers import OutputFormat
from renderers.formats import DEFAULT_CISCO_POOL, DEFAULT_JUNOS_POOL
from route_codec import decode_payload

logger = logging.getLogger(__name__)

EPILOG = """\
Route priority (highest to lowest):
  1. default gateway (--add-default-gateway, --add-default-multi-pool, pool default-gateway)
  2. common routes (ROUTES, --common-routes, pool common-routes)
  3. append routes (global append-routes in the config file)
If several routes name the same network, the higher priority one is used.

Examples:
  dhcp-route-converter -tdo --junos=r540pool1 10.0.0.0/8,127.0.0.10 --add-default-gateway=94.176.198.17
  dhcp-route-converter -tdo --isc 192.168.1.0/24,10.0.0.1 --with-option-249
  dhcp-route-converter --add-default-multi-pool=r540pool1:94.176.198.17,r540pool_static1:94.176.199.33 \\
      --common-routes=10.0.0.0/8,127.0.0.10
  dhcp-route-converter -fdo 080a7f00000a0cac107f0000ac
  dhcp-route-converter --config=routers.yaml --with-option-249
  dhcp-route-converter --config=routers.yaml --get-config --print
"""


class CliError(Exception):
    """Invalid combination of command-line arguments."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dhcp-route-converter",
        description="Convert network routes to DHCP options 121/249 and back.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-tdo", "--to-dhcp-options", action="store_true",
                        help="convert network/gateway pairs to DHCP options")
    parser.add_argument("routes", nargs="?", metavar="ROUTES",
                        help="comma-separated network,gateway pairs, e.g. 10.0.0.0/8,127.0.0.10")
    parser.add_argument("-fdo", "--from-dhcp-options", metavar="HEX",
                        help="decode a hex option 121/249 payload into routes")

    fmt = parser.add_mutually_exclusive_group()
    fmt.add_argument("--isc", dest="format", action="store_const", const=OutputFormat.ISC,
                     help="ISC dhcpd format")
    fmt.add_argument("--routeros", dest="format", action="store_const", const=OutputFormat.ROUTEROS,
                     help="MikroTik RouterOS format")
    fmt.add_argument("--junos", nargs="?", const=DEFAULT_JUNOS_POOL, metavar="POOL",
                     help=f"Juniper JunOS format; pool only as --junos=POOL (default: {DEFAULT_JUNOS_POOL})")
    fmt.add_argument("--cisco", nargs="?", const=DEFAULT_CISCO_POOL, metavar="POOL",
                     help=f"Cisco IOS format; pool only as --cisco=POOL (default: {DEFAULT_CISCO_POOL})")
    fmt.add_argument("--windows", dest="format", action="store_const", const=OutputFormat.WINDOWS,
                     help="Windows DHCP PowerShell format")
    fmt.add_argument("--format", dest="format", type=OutputFormat, choices=list(OutputFormat),
                     metavar="FORMAT", help="output format by name")

    parser.add_argument("--config", metavar="FILE", help="YAML file with routers and pools")
    parser.add_argument("--get-config", action="store_true",
                        help="with --config: fetch pools from each router and print only changed pools")
    parser.add_argument("--print", dest="print_missing", action="store_true",
                        help="with --get-config: also print pools found only on the device")
    parser.add_argument("--common-routes", metavar="ROUTES",
                        help="comma-separated network,gateway pairs shared by the output")
    parser.add_argument("--add-default-gateway", metavar="GATEWAY",
                        help="add a default route 0.0.0.0/0 via GATEWAY")
    parser.add_argument("--add-default-multi-pool", metavar="POOL:GW,...",
                        help="one JunOS record per pool, each with its own default gateway")
    parser.add_argument("--with-option-249", action="store_true",
                        help="also emit option 249 (Microsoft) next to option 121")
    parser.add_argument("--without-warn-no-default-route", action="store_true",
                        help="do not warn when no default route is present")
    parser.add_argument("--with-warning-loopback", action="store_true",
                        help="warn about gateways in 127.0.0.0/8")
    parser.add_argument("-d", "--debug", action="store_true", help="debug output on stderr")
    return parser


POOL_SWITCHES = {"--junos": DEFAULT_JUNOS_POOL, "--cisco": DEFAULT_CISCO_POOL}


def pin_pool_switches(argv: list[str]) -> list[str]:
    """
    Give bare --junos/--cisco their default pool explicitly.

    The pool is only taken from the --junos=POOL form; in
    `-tdo --cisco 192.168.1.0/24,192.168.0.1` the word after the switch
    is ROUTES, not a pool name.
    """
    return [f"{arg}={POOL_SWITCHES[arg]}" if arg in POOL_SWITCHES else arg for arg in argv]


def parse_route_pairs(text: str) -> list[tuple[str, str]]:
    parts = [p.strip() for p in text.split(",") if p.strip()]
    if len(parts) % 2 != 0:
        raise CliError(f"Incomplete network/gateway pair in: {text}")
    return list(zip(parts[0::2], parts[1::2]))


def _selected_format(args: argparse.Namespace, default: OutputFormat) -> tuple[OutputFormat, Optional[str]]:
    if args.junos is not None:
        return OutputFormat.JUNOS, args.junos
    if args.cisco is not None:
        return OutputFormat.CISCO, args.cisco
    return args.format or default, None


def _check_conflicts(args: argparse.Namespace) -> None:
    if args.add_default_gateway and args.add_default_multi_pool:
        raise CliError("--add-default-gateway and --add-default-multi-pool cannot be used together")
    if args.config and (args.add_default_multi_pool or args.common_routes or args.add_default_gateway):
        raise CliError("--config cannot be used with --add-default-multi-pool, --add-default-gateway, or --common-routes")
    if args.routes and args.common_routes:
        raise CliError("ROUTES and --common-routes cannot be used at the same time")
    if args.get_config and not args.config:
        raise CliError("--get-config requires --config")
    if not args.to_dhcp_options and not args.add_default_multi_pool and (
            args.routes or args.common_routes or args.add_default_gateway):
        raise CliError("ROUTES, --common-routes and --add-default-gateway require -tdo/--to-dhcp-options")


def _emit(result: ConversionResult, args: argparse.Namespace, scope: str = "") -> None:
    for line in result.lines:
        print(line)
    label = f"Pool {scope}: " if scope else ""
    if result.payload and not result.saw_default_route and not args.without_warn_no_default_route:
        logger.warning("%s%s", label, NO_DEFAULT_ROUTE_WARNING)
    if args.with_warning_loopback:
        for gw in result.loopback_gateways:
            logger.warning("%sGateway %s is in the loopback range 127.0.0.0/8", label, gw)


def run_convert(args: argparse.Namespace) -> int:
    pairs = parse_route_pairs(args.routes or args.common_routes or "")
    routes = merge_routes(default_gateway=args.add_default_gateway, scoped_routes=pairs)
    fmt, pool_name = _selected_format(args, OutputFormat.DEFAULT)
    result = generate_dhcp_options(routes.networks, routes.gateways, fmt, args.with_option_249, pool_name)
    _emit(result, args)
    return 0 if result.payload else 1


def run_multi_pool(args: argparse.Namespace) -> int:
    common = parse_route_pairs(args.common_routes or "")
    emitted = 0
    for pool_pair in args.add_default_multi_pool.split(","):
        parts = pool_pair.strip().split(":")
        if len(parts) != 2 or not all(parts):
            logger.error("Invalid pool format: %s", pool_pair)
            continue
        pool_name, gateway = parts
        routes = merge_routes(default_gateway=gateway, scoped_routes=common, scope=pool_name)
        if not routes:
            continue
        result = generate_dhcp_options(
            routes.networks, routes.gateways, OutputFormat.JUNOS, args.with_option_249, pool_name,
        )
        _emit(result, args, pool_name)
        emitted += bool(result.payload)
    return 0 if emitted else 1


def run_config(args: argparse.Namespace) -> int:
    config = load_routing_config(args.config)
    fmt, _ = _selected_format(args, OutputFormat.JUNOS)
    for output in render_config(config, fmt, args.with_option_249):
        _emit(output.result, args, output.plan.pool)
    return 0


def run_get_config(args: argparse.Namespace) -> int:
    config = load_routing_config(args.config)
    failures = 0
    for router in config.routers:
        username, password = config.credentials(router)
        collector = JunosPoolCollector(
            host=router.hostname(config.global_config.domain),
            username=username,
            password=password,
            method=config.apply_method(router),
        )
        try:
            device_pools = asyncio.run(collector.get_pools())
        except Exception:
            failures += 1
            continue

        result = reconcile_router(config, router, device_pools, args.with_option_249)
        logger.info("%s: %d updated, %d unchanged, %d only on device",
                    router.name, len(result.updated_pools), len(result.unchanged_pools),
                    len(result.missing_pools))
        for line in result.commands:
            print(line)
        if args.print_missing:
            for line in result.missing_commands:
                print(line)
    return 1 if failures else 0


def run_decode(args: argparse.Namespace) -> int:
    result = decode_payload(args.from_dhcp_options)
    for route in result.lines():
        print(f"Route: {route}")
    return 1 if result.error else 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(pin_pool_switches(sys.argv[1:] if argv is None else list(argv)))

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    try:
        _check_conflicts(args)
        if args.config and args.get_config:
            return run_get_config(args)
        if args.config:
            return run_config(args)
        if args.add_default_multi_pool:
            return run_multi_pool(args)
        if args.to_dhcp_options:
            return run_convert(args)
        if args.from_dhcp_options is not None:
            return run_decode(args)
    except (CliError, ConfigError) as e:
        logger.error(str(e))
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Vendor format renderers — turn an option 121 payload into DHCP server config."""

from __future__ import annotations

from enum import Enum
from typing import Callable, Optional, Union

from route_codec import is_hex_payload, normalize_payload
from validator import RouteValidationError


class OutputFormat(str, Enum):
    DEFAULT = "default"
    ISC = "isc"
    ROUTEROS = "routeros"
    JUNOS = "junos"
    CISCO = "cisco"
    WINDOWS = "windows"


class UnknownFormatError(ValueError):
    """Raised for a render format outside OutputFormat."""


Renderer = Callable[[str, bool, Optional[str]], list[str]]


def parse_format(value: Union[str, OutputFormat]) -> OutputFormat:
    if isinstance(value, OutputFormat):
        return value
    try:
        return OutputFormat(str(value).strip().lower())
    except ValueError:
        raise UnknownFormatError(f"Unknown format: {value}") from None


from .formats import RENDERERS  # noqa: E402


def render(payload: str, fmt: Union[str, OutputFormat] = OutputFormat.DEFAULT,
           with_option_249: bool = False, pool_name: Optional[str] = None) -> list[str]:
    """
    Render payload in the given format. An empty payload renders nothing;
    a payload with non-hex characters raises RouteValidationError.
    """
    fmt = parse_format(fmt)
    renderer = RENDERERS.get(fmt)
    if renderer is None:
        raise UnknownFormatError(f"Unknown format: {fmt}")
    payload = normalize_payload(payload or "")
    if not payload:
        return []
    if not is_hex_payload(payload):
        raise RouteValidationError(f"Invalid hex payload: {payload!r}")
    return renderer(payload, with_option_249, pool_name)


__all__ = ["OutputFormat", "UnknownFormatError", "parse_format", "render", "Renderer"]

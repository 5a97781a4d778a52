import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from config_loader import load_routing_config
from converter import generate_dhcp_options, render_config
from models import StaticRoute
from renderers import OutputFormat, UnknownFormatError


FIXTURES = Path(__file__).parent / "fixtures"

STATIC_PAYLOAD = "005eb0c721" "10c0a80a0000c0" "080a7f00000a" "0cac107f0000ac"


def test_generate_default_format():
    result = generate_dhcp_options(["10.0.0.0/8", "172.16.0.0/12"], ["127.0.0.10", "127.0.0.172"], with_option_249=True)
    assert result.payload == "080a7f00000a0cac107f0000ac"
    assert result.lines == [
        "aggregate_opt_121 : 0x080a7f00000a0cac107f0000ac",
        "aggregate_opt_249 : 0x080a7f00000a0cac107f0000ac",
    ]
    assert result.saw_default_route is False
    assert result.loopback_gateways == ["127.0.0.10", "127.0.0.172"]


def test_generate_junos_with_pool():
    result = generate_dhcp_options(["0.0.0.0/0"], ["94.176.198.17"], "junos", pool_name="r540pool1")
    assert result.saw_default_route is True
    assert result.lines == [
        "set access address-assignment pool r540pool1 family inet dhcp-attributes option 121 hex-string 005eb0c611",
    ]


def test_generate_nothing_valid():
    result = generate_dhcp_options(["10.0.0.0/40"], ["10.0.0.1"], OutputFormat.ISC)
    assert result.payload == ""
    assert result.lines == []
    assert result.skipped == ["10.0.0.0/40,10.0.0.1"]


def test_generate_unknown_format():
    with pytest.raises(UnknownFormatError):
        generate_dhcp_options(["10.0.0.0/8"], ["10.0.0.1"], "bind")


class TestRenderConfig:

    def setup_method(self):
        self.config = load_routing_config(FIXTURES / "routers.yml")

    def test_junos_by_default(self):
        outputs = render_config(self.config)
        assert [o.plan.pool for o in outputs] == ["r540pool1", "r540pool_static1", "r560pool1"]
        assert [o.result.payload for o in outputs] == ["005eb0c611", STATIC_PAYLOAD, "005eb0c601"]
        assert outputs[1].result.lines == [
            f"set access address-assignment pool r540pool_static1 family inet dhcp-attributes option 121 hex-string {STATIC_PAYLOAD}",
        ]
        assert all(o.result.saw_default_route for o in outputs)

    def test_other_format(self):
        outputs = render_config(self.config, OutputFormat.CISCO, with_option_249=True)
        assert outputs[0].result.lines == [
            "ip dhcp pool r540pool1",
            " option 121 hex 005eb0c611",
            " option 249 hex 005eb0c611",
        ]

    def test_pool_with_no_valid_routes_skipped(self, caplog):
        self.config.routers[1].pools["r560pool1"].default_gateway = None
        self.config.routers[1].disable_append_routes = False
        self.config.global_config.append_routes = [StaticRoute(network="10.0.0.0/40", gateway="127.0.0.10")]
        outputs = render_config(self.config)
        assert [o.plan.pool for o in outputs] == ["r540pool1", "r540pool_static1"]
        assert "Pool r560pool1 on r560 produced no valid routes" in caplog.text

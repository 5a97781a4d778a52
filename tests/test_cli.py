import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import cli
from cli import CliError, main, parse_route_pairs
from parsers.junos_netconf import parse_address_pools


FIXTURES = Path(__file__).parent / "fixtures"
CONFIG = str(FIXTURES / "routers.yml")


def test_parse_route_pairs():
    assert parse_route_pairs("10.0.0.0/8, 127.0.0.10,172.16.0.0/12,127.0.0.172") == [
        ("10.0.0.0/8", "127.0.0.10"),
        ("172.16.0.0/12", "127.0.0.172"),
    ]
    with pytest.raises(CliError):
        parse_route_pairs("10.0.0.0/8,127.0.0.10,172.16.0.0/12")


class TestToDhcpOptions:

    def test_default_format(self, capsys, caplog):
        assert main(["-tdo", "10.0.0.0/8,127.0.0.10,172.16.0.0/12,127.0.0.172", "--with-option-249"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "aggregate_opt_121 : 0x080a7f00000a0cac107f0000ac",
            "aggregate_opt_249 : 0x080a7f00000a0cac107f0000ac",
        ]
        assert "No default route" in caplog.text

    def test_warning_can_be_disabled(self, capsys, caplog):
        main(["-tdo", "192.168.1.0/24,10.0.0.1", "--without-warn-no-default-route"])
        assert "No default route" not in caplog.text

    def test_loopback_warning(self, capsys, caplog):
        main(["-tdo", "10.0.0.0/8,127.0.0.10", "--with-warning-loopback"])
        assert "127.0.0.10 is in the loopback range" in caplog.text

    def test_default_gateway_goes_first(self, capsys, caplog):
        main(["-tdo", "--junos=r540pool1", "10.0.0.0/8,127.0.0.10", "--add-default-gateway=94.176.198.17"])
        assert capsys.readouterr().out.splitlines() == [
            "set access address-assignment pool r540pool1 family inet dhcp-attributes "
            "option 121 hex-string 005eb0c611080a7f00000a",
        ]
        assert "No default route" not in caplog.text

    def test_isc(self, capsys):
        main(["-tdo", "--isc", "192.168.1.0/24,10.0.0.1"])
        out = capsys.readouterr().out.splitlines()
        assert out[-1] == "option rfc3442-classless-static-routes 24,192,168,1,10,0,0,1;"

    def test_cisco_default_pool(self, capsys):
        main(["-tdo", "192.168.1.0/24,10.0.0.1", "--cisco"])
        assert capsys.readouterr().out.splitlines()[0] == "ip dhcp pool mypool"

    def test_bare_cisco_switch_before_routes(self, capsys):
        assert main(["-tdo", "--cisco", "192.168.1.0/24,192.168.0.1"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "ip dhcp pool mypool",
            " option 121 hex 18c0a801c0a80001",
        ]

    def test_bare_junos_switch_before_routes(self, capsys):
        assert main(["-tdo", "--junos", "10.0.0.0/8,127.0.0.10"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "set access address-assignment pool lan-pool family inet dhcp-attributes "
            "option 121 hex-string 080a7f00000a",
        ]

    def test_pool_only_from_equals_form(self, capsys):
        main(["-tdo", "--cisco=office", "192.168.1.0/24,192.168.0.1"])
        assert capsys.readouterr().out.splitlines()[0] == "ip dhcp pool office"

    def test_routes_require_to_dhcp_options(self, capsys, caplog):
        assert main(["192.168.1.0/24,10.0.0.1"]) == 1
        assert capsys.readouterr().out == ""
        assert "require -tdo/--to-dhcp-options" in caplog.text

    def test_format_by_name(self, capsys):
        main(["-tdo", "--format", "windows", "192.168.1.0/24,10.0.0.1"])
        assert capsys.readouterr().out.startswith("Set-DhcpServerv4OptionValue -OptionId 121")

    def test_no_valid_routes(self, capsys):
        assert main(["-tdo", "192.168.1.0/24,0.0.0.0"]) == 1
        assert capsys.readouterr().out == ""


class TestFromDhcpOptions:

    def test_decode(self, capsys):
        assert main(["-fdo", "0x080a7f00000a0cac107f0000ac"]) == 0
        assert capsys.readouterr().out.splitlines() == [
            "Route: 10.0.0.0/8 via 127.0.0.10",
            "Route: 172.16.0.0/12 via 127.0.0.172",
        ]

    def test_decode_invalid(self, capsys, caplog):
        assert main(["-fdo", "invalidhex"]) == 1
        assert capsys.readouterr().out == ""
        assert "Invalid hex option format" in caplog.text


def test_multi_pool(capsys, caplog):
    rc = main([
        "--add-default-multi-pool=r540pool1:94.176.198.17,broken,r540pool_static1:94.176.199.33",
        "--common-routes=10.0.0.0/8,127.0.0.10",
    ])
    assert rc == 0
    assert capsys.readouterr().out.splitlines() == [
        "set access address-assignment pool r540pool1 family inet dhcp-attributes "
        "option 121 hex-string 005eb0c611080a7f00000a",
        "set access address-assignment pool r540pool_static1 family inet dhcp-attributes "
        "option 121 hex-string 005eb0c721080a7f00000a",
    ]
    assert "Invalid pool format: broken" in caplog.text


def test_config(capsys):
    assert main(["--config", CONFIG]) == 0
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 3
    assert out[0].endswith("pool r540pool1 family inet dhcp-attributes option 121 hex-string 005eb0c611")
    assert out[2].endswith("option 121 hex-string 005eb0c601")


def test_config_missing_file(caplog):
    assert main(["--config", "/nonexistent/routers.yml"]) == 1
    assert "Failed to load config" in caplog.text


class FakeCollector:
    hosts: list[str] = []

    def __init__(self, host, username="", password="", method=None):
        self.host = host
        FakeCollector.hosts.append(host)

    async def get_pools(self):
        if self.host.startswith("r560"):
            raise ConnectionError("timed out")
        return parse_address_pools((FIXTURES / "junos-pools.xml").read_text(), self.host)


class TestGetConfig:

    def setup_method(self):
        FakeCollector.hosts = []

    def test_prints_changed_pools(self, monkeypatch, capsys):
        monkeypatch.setattr(cli, "JunosPoolCollector", FakeCollector)
        rc = main(["--config", CONFIG, "--get-config"])
        out = capsys.readouterr().out.splitlines()
        assert rc == 1  # r560 unreachable
        assert FakeCollector.hosts == ["r540.example.net", "r560.example.net"]
        assert len(out) == 1
        assert "pool r540pool_static1 " in out[0]

    def test_print_includes_device_only_pools(self, monkeypatch, capsys):
        monkeypatch.setattr(cli, "JunosPoolCollector", FakeCollector)
        main(["--config", CONFIG, "--get-config", "--print"])
        out = capsys.readouterr().out.splitlines()
        assert len(out) == 2
        assert "pool r540pool_guest " in out[1]


@pytest.mark.parametrize("argv,message", [
    (["--add-default-gateway=10.0.0.1", "--add-default-multi-pool=p:10.0.0.1"], "cannot be used together"),
    (["--config", CONFIG, "--common-routes=10.0.0.0/8,127.0.0.10"], "--config cannot be used"),
    (["-tdo", "10.0.0.0/8,127.0.0.10", "--common-routes=10.0.0.0/8,127.0.0.10"], "at the same time"),
    (["--get-config"], "requires --config"),
])
def test_conflicting_arguments(argv, message, caplog):
    assert main(argv) == 1
    assert message in caplog.text


def test_no_arguments_prints_help(capsys):
    assert main([]) == 0
    assert "Route priority" in capsys.readouterr().out

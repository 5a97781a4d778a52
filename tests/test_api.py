import sys
from pathlib import Path

from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

import main


FIXTURES = Path(__file__).parent / "fixtures"

client = TestClient(main.app)


def test_encode():
    resp = client.post("/api/encode", json={
        "routes": [{"network": "10.0.0.0/8", "gateway": "127.0.0.10"}],
        "default_gateway": "94.176.198.17",
        "format": "junos",
        "pool_name": "r540pool1",
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["payload"] == "005eb0c611080a7f00000a"
    assert body["saw_default_route"] is True
    assert body["lines"] == [
        "set access address-assignment pool r540pool1 family inet dhcp-attributes "
        "option 121 hex-string 005eb0c611080a7f00000a",
    ]


def test_encode_reports_skipped_routes():
    resp = client.post("/api/encode", json={
        "routes": [
            {"network": "192.168.1.0/24", "gateway": "10.0.0.1"},
            {"network": "192.168.1.0/40", "gateway": "10.0.0.1"},
        ],
    })
    body = resp.json()
    assert body["payload"] == "18c0a8010a000001"
    assert body["skipped"] == ["192.168.1.0/40,10.0.0.1"]
    assert body["saw_default_route"] is False


def test_encode_unknown_format():
    resp = client.post("/api/encode", json={"routes": [], "format": "dnsmasq"})
    assert resp.status_code == 400


def test_decode():
    resp = client.post("/api/decode", json={"payload": "0x18c0a8010a000001"})
    assert resp.status_code == 200
    assert resp.json() == {"routes": ["192.168.1.0/24 via 10.0.0.1"], "saw_default_route": False}


def test_decode_invalid():
    resp = client.post("/api/decode", json={"payload": "invalidhex"})
    assert resp.status_code == 422


def test_config_render():
    resp = client.post("/api/config/render", json={"config": (FIXTURES / "routers.yml").read_text()})
    assert resp.status_code == 200
    body = resp.json()
    assert [p["pool"] for p in body["pools"]] == ["r540pool1", "r540pool_static1", "r560pool1"]
    assert body["pools"][2]["router"] == "r560"
    assert body["warnings"] == []


def test_config_render_warns_without_default_route():
    config = """
global:
  append-routes:
    - network: 10.0.0.0/8
      gateway: 127.0.0.10
routers:
  - name: r540
    pools:
      r540pool1: {}
"""
    resp = client.post("/api/config/render", json={"config": config, "format": "routeros"})
    body = resp.json()
    assert body["pools"][0]["lines"] == [
        "/ip dhcp-server option add code=121 name=aggregate_opt_121 value=0x080a7f00000a",
    ]
    assert body["warnings"][0].startswith("r540pool1: No default route")


def test_config_render_bad_config():
    resp = client.post("/api/config/render", json={"config": "routers: {r540: {}}"})
    assert resp.status_code == 400
    assert "expected list" in resp.json()["detail"]


def test_formats_and_health():
    assert client.get("/api/formats").json()["formats"] == ["default", "isc", "routeros", "junos", "cisco", "windows"]
    assert client.get("/api/health").json()["status"] == "ok"

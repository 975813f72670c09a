import pytest

from core.config import AuditConfig
from core.errors import ParseFailure
from core.models import RUN_DEGRADED, RUN_OK
from probes.network import NetworkProbe, parse_latency
from shared.network import guess_link_type, primary_interface

PING_LINUX = """\
PING 8.8.8.8 (8.8.8.8) 56(84) bytes of data.
64 bytes from 8.8.8.8: icmp_seq=1 ttl=117 time={ms} ms

--- 8.8.8.8 ping statistics ---
1 packets transmitted, 1 received, 0% packet loss, time 0ms
"""


def _iface(name, isup=True, ipv4=None, speed=0):
    addresses = [{"family": "IPv4", "address": ipv4}] if ipv4 else []
    return {"name": name, "isup": isup, "speed_mbps": speed, "addresses": addresses}


def test_parse_latency_windows_sub_millisecond():
    assert parse_latency("Reply from 1.1.1.1: bytes=32 time<1ms TTL=57") == 1.0


def test_parse_latency_without_reply():
    with pytest.raises(ParseFailure):
        parse_latency("Request timed out.")


def test_primary_interface_prefers_up_with_ipv4():
    ifaces = [_iface("docker0", isup=False, ipv4="172.17.0.1"), _iface("enp0s31f6"),
              _iface("wlp2s0", ipv4="10.0.0.5")]
    assert primary_interface(ifaces)["name"] == "wlp2s0"
    assert primary_interface([]) is None


def test_link_type():
    assert guess_link_type("wlp2s0") == "WiFi"
    assert guess_link_type("en0", "IEEE80211") == "WiFi"
    assert guess_link_type("enp0s31f6") == "Ethernet"


def test_linux_healthy(fake, make_probe):
    fake.on("network", "linux", "latency", PING_LINUX.format(ms="12.4"), host="8.8.8.8")
    [result] = make_probe(NetworkProbe, "linux").probe()
    assert result.status == RUN_OK
    assert result.score == 100
    assert result.metrics["interface"] == "eth0"
    assert result.metrics["latency_ms"] == 12.4
    assert result.label == "Ethernet (1000 Mbps)"


def test_slow_latency(fake, make_probe):
    fake.on("network", "linux", "latency", PING_LINUX.format(ms="150"), host="8.8.8.8")
    [result] = make_probe(NetworkProbe, "linux").probe()
    assert result.score == 70


def test_ping_host_from_config(fake, make_probe):
    fake.on("network", "windows", "latency", "Reply from 1.1.1.1: bytes=32 time=9ms TTL=57", host="1.1.1.1")
    [result] = make_probe(NetworkProbe, "windows", AuditConfig(ping_host="1.1.1.1")).probe()
    assert result.metrics["latency_ms"] == 9.0
    assert result.status == RUN_OK


def test_unreachable_host_is_degraded_not_failed(fake, make_probe):
    [result] = make_probe(NetworkProbe, "linux").probe()
    assert result.status == RUN_DEGRADED
    assert "latency_ms" in result.notes
    assert result.score == 100


def test_link_down_skips_ping(fake, make_probe, monkeypatch):
    monkeypatch.setattr(NetworkProbe, "interfaces", lambda self: [_iface("eth0", isup=False)])
    [result] = make_probe(NetworkProbe, "linux").probe()
    assert result.metrics["link_up"] is False
    assert result.score == 0
    assert fake.calls == []


def test_no_interface_reports_nothing(fake, make_probe, monkeypatch):
    monkeypatch.setattr(NetworkProbe, "interfaces", lambda self: [_iface("lo", ipv4="127.0.0.1")])
    assert make_probe(NetworkProbe, "linux").probe() == []

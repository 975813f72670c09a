"""
Network probe: link state and speed from psutil, latency from one ping.

An unreachable ping host is a missing measurement, not a failure.
"""
from core.errors import ParseFailure
from core.scoring import Check
from helpers.logger import get_logger
from probes.base import Probe, Reading
from probes.parsing import float_or_none, search
from shared.network import get_net_addr, guess_link_type, is_loopback, primary_interface

log = get_logger(__name__)


def parse_latency(text: str) -> float:
    # "time=12.3 ms" on unix, "time=12ms" / "time<1ms" on Windows
    value = float_or_none(search(r"time[=<]\s*([\d.]+)\s*ms", text))
    if value is None:
        raise ParseFailure("no round-trip time in ping output")
    return value


def latency_severity(ms: float) -> float:
    if ms < 30:
        return 0.0
    if ms < 100:
        return 0.3
    if ms < 300:
        return 0.6
    return 1.0


class NetworkProbe(Probe):
    name = "network"
    components = ("NETWORK",)
    expected = {"link_up": None, "latency_ms": "latency"}

    def interfaces(self):
        return get_net_addr()

    def adapter_names(self) -> dict:
        if self.platform != "macos":
            return {}
        try:
            from shared.mac import get_mac_network_info
            return get_mac_network_info()
        except Exception as e:
            log.debug("SystemConfiguration unavailable: %s", e)
            return {}

    def collect(self):
        interfaces = [i for i in self.interfaces() if not is_loopback(i)]
        if not interfaces:
            return []

        reading = Reading("NETWORK")
        primary = primary_interface(interfaces)
        named = self.adapter_names().get(primary["name"], {})
        reading.put("interface", primary["name"])
        reading.put("type", guess_link_type(primary["name"], named.get("type")))
        reading.put("link_up", primary["isup"])
        reading.put("interface_count", len(interfaces))
        if primary["speed_mbps"]:
            reading.put("speed_mbps", primary["speed_mbps"])

        if primary["isup"]:
            ping = self.text(reading, "latency", host=self.config.ping_host)
            if ping:
                self.extract(reading, "latency_ms", parse_latency, ping)

        speed = reading.metrics.get("speed_mbps")
        reading.label = " ".join(p for p in (
            named.get("name") or reading.metrics["type"],
            f"({speed} Mbps)" if speed else None,
        ) if p)
        return [self.finish(reading)]

    def checks(self, metrics):
        checks = []
        if "link_up" in metrics:
            checks.append(Check("link", 50, 0.0 if metrics["link_up"] else 1.0))
        if "latency_ms" in metrics:
            checks.append(Check("latency", 50, latency_severity(metrics["latency_ms"])))
        return checks

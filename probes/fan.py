"""Fan probe: pass/fail on fan alarms or a non-OK WMI status."""
import re

from probes.base import FAIL_SCORE, PASS_SCORE, Probe, Reading
from probes.parsing import records

_SENSORS_FAN = re.compile(r"^([^:\n]*fan[^:\n]*):\s+(\d+)\s*RPM(.*)$", re.I | re.M)
_POWERMETRICS_FAN = re.compile(r"^Fan:\s*([\d.]+)\s*rpm", re.I | re.M)


def parse_fans(platform: str, text: str) -> list[dict]:
    fans = []
    if platform == "linux":
        for name, rpm, rest in _SENSORS_FAN.findall(text):
            fans.append({"name": name.strip(), "rpm": int(rpm), "ok": "ALARM" not in rest})
    elif platform == "macos":
        for i, rpm in enumerate(_POWERMETRICS_FAN.findall(text)):
            fans.append({"name": f"fan{i + 1}", "rpm": round(float(rpm)), "ok": True})
    else:
        for rec in records(text):
            status = rec.get("Status") or "OK"
            fans.append({"name": rec.get("Name") or "Fan", "ok": status.upper() == "OK"})
    return fans


class FanProbe(Probe):
    name = "fan"
    components = ("FAN",)
    expected = {"fan_count": "sensors"}

    def collect(self):
        reading = Reading("FAN")
        output = self.run_command(reading, "sensors")
        if not output.ok:
            return [self.finish(reading)]
        fans = parse_fans(self.platform, output.output)
        if not fans:
            # fanless machine, or no readable fan sensor
            return []

        failing = [f["name"] for f in fans if not f["ok"]]
        rpms = [f["rpm"] for f in fans if "rpm" in f]
        reading.put("fan_count", len(fans))
        if rpms:
            reading.put("rpm", rpms)
        reading.put("failed", bool(failing))
        if failing:
            reading.put("failing", failing)
        reading.label = f"{len(fans)} fan(s)"
        return [self.finish(reading)]

    def score(self, metrics):
        if "failed" not in metrics:
            return None
        return FAIL_SCORE if metrics["failed"] else PASS_SCORE

"""
CPU probe: model from native tools, core counts and clocks from psutil.
Temperature prefers the CPU sensor chip psutil exposes on Linux and falls
back to the platform command. Usage is a short psutil sample on Linux, where
/proc/stat only holds totals since boot, and a native reading elsewhere.
"""
import re

from core.scoring import Check, ramp
from probes.base import Probe, Reading
from probes.parsing import float_or_none, key_values, records, require, search
from shared.hardware import get_cpu_info, get_cpu_temperature, get_cpu_usage

SAFE_TEMP_C = 80.0
CRITICAL_TEMP_C = 100.0
PINNED_USAGE_PCT = 95.0


def parse_model(platform: str, text: str) -> str:
    if platform == "linux":
        kv = key_values(text)
        model = kv.get("model name") or kv.get("Model") or kv.get("Hardware")
    elif platform == "windows":
        model = next((r.get("Name") for r in records(text) if r.get("Name")), None)
    else:
        model = text.strip() or None
    return require(model, "CPU model")


def parse_temperature(platform: str, text: str) -> float:
    if platform == "linux":
        # millidegrees
        raw = float_or_none(text.splitlines()[0] if text else None)
        return round(require(raw, "thermal zone") / 1000.0, 1)
    if platform == "macos":
        raw = search(r"CPU die temperature:\s*([\d.]+)", text)
        return round(require(float_or_none(raw), "CPU die temperature"), 1)
    # MSAcpi_ThermalZoneTemperature reports tenths of a kelvin
    values = [float_or_none(r.get("CurrentTemperature")) for r in records(text)]
    values = [v for v in values if v]
    kelvin10 = require(max(values) if values else None, "thermal zone")
    return round((kelvin10 - 2732) / 10.0, 1)


def parse_usage(platform: str, text: str) -> float:
    if platform == "macos":
        # the first `top -l` sample is an average since boot, the last one is current
        samples = re.findall(r"CPU usage:.*?([\d.]+)%\s*idle", text)
        idle = float_or_none(samples[-1] if samples else None)
        return round(100.0 - require(idle, "CPU idle"), 1)
    loads = [float_or_none(r.get("LoadPercentage")) for r in records(text)]
    loads = [v for v in loads if v is not None]
    return round(sum(require(loads or None, "LoadPercentage")) / len(loads), 1)


class CpuProbe(Probe):
    name = "cpu"
    components = ("CPU",)
    # usage is read from psutil where the platform has no usage command
    expected = {"model": "model", "temperature_c": "temperature", "usage_pct": None}

    def collect(self):
        reading = Reading("CPU")
        for key, value in get_cpu_info().items():
            reading.put(key, value)

        model = self.text(reading, "model")
        if model:
            self.extract(reading, "model", parse_model, self.platform, model)
        sensor_temp = get_cpu_temperature()
        if sensor_temp is not None:
            reading.put("temperature_c", sensor_temp)
        else:
            temp = self.text(reading, "temperature")
            if temp:
                self.extract(reading, "temperature_c", parse_temperature, self.platform, temp)

        if self.supports("usage"):
            usage = self.text(reading, "usage")
            if usage:
                self.extract(reading, "usage_pct", parse_usage, self.platform, usage)
        else:
            reading.put("usage_pct", get_cpu_usage())

        reading.label = reading.metrics.get("model")
        return [self.finish(reading)]

    def checks(self, metrics):
        checks = []
        if "temperature_c" in metrics:
            checks.append(Check("temperature", 60, ramp(metrics["temperature_c"], SAFE_TEMP_C, CRITICAL_TEMP_C)))
        if "usage_pct" in metrics:
            # pinned at idle means a runaway process or throttling, not wear
            checks.append(Check("usage", 40, 1.0 if metrics["usage_pct"] >= PINNED_USAGE_PCT else 0.0))
        return checks

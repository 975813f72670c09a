"""
GPU probe: one result per display adapter.

Temperature and utilisation only exist where nvidia-smi does, so they are
expected from NVIDIA adapters alone; other adapters score on driver state.
"""
import re

from core.scoring import Check, ramp
from probes.base import Probe, Reading
from probes.parsing import bytes_to_gb, float_or_none, int_or_none, records

SAFE_GPU_TEMP_C = 85.0
PINNED_GPU_PCT = 98.0

_LSPCI_DISPLAY = re.compile(r"^\S+\s+(?:VGA compatible controller|3D controller|Display controller):\s*(.+)$")


def parse_adapters(platform: str, text: str) -> list[dict]:
    adapters: list[dict] = []
    if platform == "linux":
        current = None
        for line in text.splitlines():
            m = _LSPCI_DISPLAY.match(line)
            if m:
                current = {"model": re.sub(r"\s*\(rev \w+\)$", "", m.group(1).strip()),
                           "driver_status": "missing"}
                adapters.append(current)
            elif line[:1] not in ("\t", " "):
                current = None
            elif current is not None and "Kernel driver in use:" in line:
                current["driver"] = line.split(":", 1)[1].strip()
                current["driver_status"] = "OK"
    elif platform == "macos":
        for chunk in text.split("Chipset Model:")[1:]:
            lines = chunk.splitlines()
            adapter = {"model": lines[0].strip()}
            vram = re.search(r"VRAM \([^)]*\):\s*(\d+)\s*(MB|GB)", chunk)
            if vram:
                size = int(vram.group(1))
                adapter["vram_gb"] = size if vram.group(2) == "GB" else round(size / 1024, 1)
            cores = re.search(r"Total Number of Cores:\s*(\d+)", chunk)
            if cores:
                adapter["cores"] = int(cores.group(1))
            if "Metal" in chunk:
                adapter["driver_status"] = "OK"
            adapters.append(adapter)
    else:
        for rec in records(text):
            if not rec.get("Name"):
                continue
            adapters.append({
                "model": rec["Name"],
                "vram_gb": bytes_to_gb(int_or_none(rec.get("AdapterRAM"))),
                "driver_version": rec.get("DriverVersion") or None,
                "driver_status": rec.get("Status") or None,
            })
    return adapters


def parse_nvidia_smi(text: str) -> list[dict]:
    rows = []
    for line in text.splitlines():
        parts = [p.strip() for p in line.split(",")]
        if len(parts) < 3:
            continue
        rows.append({
            "model": parts[0],
            "temperature_c": float_or_none(parts[1]),
            "utilization_pct": float_or_none(parts[2]),
        })
    return rows


def driver_severity(status: str) -> float:
    if status.upper() == "OK":
        return 0.0
    if status == "missing":
        return 0.5
    return 1.0


class GpuProbe(Probe):
    name = "gpu"
    components = ("GPU",)
    expected = {"model": "adapters", "driver_status": "adapters"}
    sensor_metrics = {"temperature_c": "sensors", "utilization_pct": "sensors"}

    def collect(self):
        enumeration = Reading("GPU")
        listing = self.run_command(enumeration, "adapters")
        if not listing.ok:
            return [self.finish(enumeration)]
        adapters = parse_adapters(self.platform, listing.output)
        if not adapters:
            # no display adapter at all: nothing to score
            return []

        nvidia = [a for a in adapters if "nvidia" in a["model"].lower()]
        sensors = Reading("GPU")
        if nvidia and self.supports("sensors"):
            output = self.text(sensors, "sensors")
            for adapter, row in zip(nvidia, parse_nvidia_smi(output) if output else []):
                adapter["temperature_c"] = row["temperature_c"]
                adapter["utilization_pct"] = row["utilization_pct"]

        results = []
        for adapter in adapters:
            reading = Reading("GPU", label=adapter["model"])
            reading.attempts.append(listing)
            expected = dict(self.expected)
            if "nvidia" in adapter["model"].lower():
                reading.attempts.extend(sensors.attempts)
                expected.update(self.sensor_metrics)
            for key, value in adapter.items():
                reading.put(key, value)
            results.append(self.finish(reading, expected))
        return results

    def checks(self, metrics):
        checks = []
        if "driver_status" in metrics:
            checks.append(Check("driver", 20, driver_severity(metrics["driver_status"])))
        if "temperature_c" in metrics:
            checks.append(Check("temperature", 50, ramp(metrics["temperature_c"], SAFE_GPU_TEMP_C, 100.0)))
        if "utilization_pct" in metrics:
            checks.append(Check("utilization", 30, 1.0 if metrics["utilization_pct"] >= PINNED_GPU_PCT else 0.0))
        return checks

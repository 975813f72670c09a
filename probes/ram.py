"""RAM probe: capacity from psutil, module type/speed and ECC counters from native tools."""
import re

from core.errors import ParseFailure
from core.scoring import Check
from probes.base import Probe, Reading
from probes.parsing import int_or_none, key_values, records, require
from shared.hardware import get_memory_info

# Win32_PhysicalMemory.SMBIOSMemoryType
SMBIOS_MEMORY_TYPES = {
    20: "DDR", 21: "DDR2", 24: "DDR3", 26: "DDR4", 29: "LPDDR3",
    30: "LPDDR4", 34: "DDR5", 35: "LPDDR5",
}
_TYPE_RE = re.compile(r"^(?:LP)?DDR\d*\w*$", re.I)


def parse_modules(platform: str, text: str) -> dict:
    """Memory type, speed (MT/s) and slot usage, whichever the tool reports."""
    types: list[str] = []
    speeds: list[int] = []
    slots = used = 0

    if platform == "linux":
        for block in re.split(r"^Memory Device\s*$", text, flags=re.M)[1:]:
            kv = key_values(block)
            slots += 1
            if "No Module" in kv.get("Size", "No Module"):
                continue
            used += 1
            if _TYPE_RE.match(kv.get("Type", "")):
                types.append(kv["Type"])
            speed = int_or_none(kv.get("Speed"))
            if speed:
                speeds.append(speed)
    elif platform == "macos":
        types = re.findall(r"Type:\s*((?:LP)?DDR\w*)", text)
        speeds = [int(s) for s in re.findall(r"Speed:\s*(\d+)", text)]
        sizes = re.findall(r"^\s*Size:\s*(.+)$", text, flags=re.M)
        slots = len(sizes)
        used = len([s for s in sizes if "Empty" not in s])
    else:
        for rec in records(text):
            slots += 1
            used += 1
            mem_type = SMBIOS_MEMORY_TYPES.get(int_or_none(rec.get("SMBIOSMemoryType")) or 0)
            if mem_type:
                types.append(mem_type)
            speed = int_or_none(rec.get("Speed"))
            if speed:
                speeds.append(speed)

    parsed = {
        "type": types[0].upper() if types else None,
        "speed_mts": max(speeds) if speeds else None,
        "slots": slots or None,
        "slots_used": used or None,
    }
    require(parsed["type"] or parsed["speed_mts"] or parsed["slots"], "memory modules")
    return parsed


def parse_error_counters(text: str) -> dict:
    values = [int_or_none(line) for line in text.splitlines() if line.strip()]
    if len(values) < 2 or None in values[:2]:
        raise ParseFailure("EDAC counters incomplete")
    return {"corrected_errors": values[0], "uncorrected_errors": values[1]}


class RamProbe(Probe):
    name = "ram"
    components = ("RAM",)
    expected = {"type": "modules", "speed_mts": "modules", "corrected_errors": "errors"}

    def collect(self):
        reading = Reading("RAM")
        for key, value in get_memory_info().items():
            reading.put(key, value)

        modules = self.text(reading, "modules")
        if modules:
            self.extract_all(reading, "modules", parse_modules, self.platform, modules)

        if self.supports("errors"):
            counters = self.text(reading, "errors")
            if counters:
                self.extract_all(reading, "ecc counters", parse_error_counters, counters)

        parts = [f"{reading.metrics['total_gb']} GB" if "total_gb" in reading.metrics else None,
                 reading.metrics.get("type")]
        reading.label = " ".join(p for p in parts if p) or None
        return [self.finish(reading)]

    def checks(self, metrics):
        checks = []
        if "corrected_errors" in metrics:
            ce = metrics["corrected_errors"]
            if metrics.get("uncorrected_errors"):
                severity = 1.0
            elif ce:
                severity = 0.3 + 0.05 * ce
            else:
                severity = 0.0
            checks.append(Check("errors", 70, severity))
        if "total_gb" in metrics:
            total = metrics["total_gb"]
            severity = 0.6 if total < 4.5 else 0.3 if total < 7.5 else 0.0
            checks.append(Check("capacity", 30, severity))
        return checks

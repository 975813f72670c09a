"""
Battery probe: wear from cycle count against rated cycle life, and capacity
degradation as full-charge capacity against design capacity.

Desktops have no battery; the probe then returns nothing rather than a score.
"""
from core.errors import ParseFailure
from core.scoring import Check
from probes.base import Probe, Reading
from probes.parsing import float_or_none, int_or_none, key_values, records, require


def list_batteries(platform: str, text: str) -> list[str]:
    if platform == "linux":
        return [n for n in text.split() if n.startswith(("BAT", "CMB"))]
    if platform == "macos":
        return ["InternalBattery"] if "Battery Information" in text else []
    return [r.get("DeviceID") or r.get("Name") or "Battery" for r in records(text)]


def _pct(actual, design) -> float | None:
    if actual is None or not design:
        return None
    return round(actual / design * 100, 1)


def parse_uevent(text: str) -> dict:
    kv = key_values(text, sep="=")

    def get(key):
        return kv.get("POWER_SUPPLY_" + key)

    # charge_* in uAh, energy_* in uWh; report mAh / mWh
    unit, full, design = "mAh", int_or_none(get("CHARGE_FULL")), int_or_none(get("CHARGE_FULL_DESIGN"))
    if design is None:
        unit, full, design = "mWh", int_or_none(get("ENERGY_FULL")), int_or_none(get("ENERGY_FULL_DESIGN"))
    parsed = {
        "cycle_count": int_or_none(get("CYCLE_COUNT")),
        "full_capacity": full // 1000 if full is not None else None,
        "design_capacity": design // 1000 if design else None,
        "capacity_unit": unit if design else None,
        "capacity_pct": _pct(full, design),
        "charge_status": (get("STATUS") or "").lower() or None,
        "model": " ".join(p for p in (get("MANUFACTURER"), get("MODEL_NAME")) if p) or None,
    }
    require(parsed["cycle_count"] if parsed["cycle_count"] is not None else parsed["capacity_pct"],
            "battery counters")
    return parsed


def parse_power_profile(text: str) -> dict:
    """system_profiler SPPowerDataType."""
    kv = key_values(text)
    return {
        "cycle_count": int_or_none(kv.get("Cycle Count")),
        "condition": kv.get("Condition"),
        "capacity_pct": float_or_none(kv.get("Maximum Capacity")),
        "full_capacity": int_or_none(kv.get("Full Charge Capacity (mAh)")),
        "charge_status": "charging" if kv.get("Charging") == "Yes" else None,
    }


def parse_ioreg(text: str) -> dict:
    kv = key_values(text, sep="=")
    design = int_or_none(kv.get("DesignCapacity"))
    full = int_or_none(kv.get("AppleRawMaxCapacity") or kv.get("NominalChargeCapacity"))
    parsed = {
        "design_capacity": design,
        "full_capacity": full,
        "capacity_unit": "mAh" if design else None,
        "capacity_pct": _pct(full, design),
        "cycle_count": int_or_none(kv.get("CycleCount")),
        "rated_cycles": int_or_none(kv.get("DesignCycleCount9C")),
    }
    require(design or parsed["cycle_count"], "AppleSmartBattery")
    return parsed


def parse_windows_battery(text: str) -> dict:
    kv = key_values(text)
    design = int_or_none(kv.get("DesignedCapacity"))
    full = int_or_none(kv.get("FullChargedCapacity"))
    parsed = {
        "design_capacity": design,
        "full_capacity": full,
        "capacity_unit": "mWh" if design else None,
        "capacity_pct": _pct(full, design),
        "cycle_count": int_or_none(kv.get("CycleCount")),
        "model": kv.get("DeviceName") or None,
    }
    if parsed["capacity_pct"] is None and parsed["cycle_count"] is None:
        raise ParseFailure("battery WMI classes returned nothing")
    return parsed


class BatteryProbe(Probe):
    name = "battery"
    components = ("BATTERY",)
    expected = {"cycle_count": "info", "capacity_pct": "info"}

    def collect(self):
        enumeration = Reading("BATTERY")
        listing = self.run_command(enumeration, "list")
        if not listing.ok:
            return [self.failed("BATTERY", "could not enumerate batteries", attempts=enumeration.attempts)]
        devices = list_batteries(self.platform, listing.output)
        if not devices:
            return []
        return [self._audit_battery(device, listing.output) for device in devices]

    def _audit_battery(self, device: str, listing: str):
        reading = Reading("BATTERY")
        if self.platform == "macos":
            self.extract_all(reading, "power profile", parse_power_profile, listing)

        info = self.text(reading, "info", device=device)
        if info:
            parser = {"linux": parse_uevent, "macos": parse_ioreg}.get(self.platform, parse_windows_battery)
            self.extract_all(reading, "battery info", parser, info)

        reading.metrics.setdefault("rated_cycles", self.config.battery_rated_cycles)
        health = reading.metrics.get("capacity_pct")
        reading.label = " ".join(p for p in (
            reading.metrics.get("model") or device,
            f"{health:g}%" if health is not None else None,
        ) if p)
        return self.finish(reading)

    def checks(self, metrics):
        checks = []
        if "cycle_count" in metrics:
            rated = metrics.get("rated_cycles") or self.config.battery_rated_cycles
            checks.append(Check("cycles", 50, metrics["cycle_count"] / rated))
        if "capacity_pct" in metrics:
            checks.append(Check("capacity", 50, 1.0 - metrics["capacity_pct"] / 100))
        return checks

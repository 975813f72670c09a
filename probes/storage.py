"""
Storage probe: one ComponentResult per internal disk.

Disks are enumerated with the platform's block-device tool, then each one is
read with smartctl. Bad sectors weigh the most: a single reallocated sector
already costs more than a proportional deduction would, because it is the
signal that disqualifies a drive for resale.
"""
import json
import math
import re

from core.errors import ParseFailure
from core.scoring import Check, deducted_score, ramp
from probes.base import FAIL_SCORE, Probe, Reading
from probes.parsing import float_or_none, int_or_none, key_values, records, require

HOT_DISK_C = 55.0

# normalised VALUE column of these attributes is remaining life in percent
_WEAR_ATTRIBUTES = (
    "Wear_Leveling_Count", "Media_Wearout_Indicator", "Percent_Lifetime_Remain",
    "SSD_Life_Left", "Remaining_Lifetime_Perc",
)
_TEMP_ATTRIBUTES = ("Temperature_Celsius", "Airflow_Temperature_Cel")


def _media_type(rotational, transport: str | None) -> str:
    if rotational in (True, 1, "1", "true"):
        return "HDD"
    if transport and transport.lower() == "nvme":
        return "NVMe"
    return "SSD"


def parse_disk_list(platform: str, text: str) -> list[dict]:
    disks: list[dict] = []
    if platform == "linux":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ParseFailure(f"lsblk output is not JSON: {e}") from e
        for dev in data.get("blockdevices", []):
            name = dev.get("name") or ""
            if dev.get("type") != "disk" or re.match(r"(loop|zram|ram|sr)", name):
                continue
            if (dev.get("tran") or "").lower() == "usb":
                continue
            disks.append({
                "device": name,
                "model": (dev.get("model") or "").strip() or None,
                "media_type": _media_type(dev.get("rota"), dev.get("tran")),
                "size": dev.get("size"),
            })
    elif platform == "macos":
        for device, desc in re.findall(r"^/dev/(disk\d+)\s*\(([^)]*)\)", text, flags=re.M):
            if "internal" in desc and "physical" in desc:
                disks.append({"device": device})
    else:
        for rec in records(text):
            if rec.get("Index") is None or "Removable" in rec.get("MediaType", ""):
                continue
            size = int_or_none(rec.get("Size"))
            disks.append({
                "device": rec["Index"],
                "model": rec.get("Model") or None,
                "size": f"{round(size / 1e9)}G" if size else None,
                "status": rec.get("Status") or None,
            })
    return disks


def parse_diskutil_info(text: str) -> dict:
    kv = key_values(text)
    solid = kv.get("Solid State")
    protocol = kv.get("Protocol", "")
    info = {
        "model": kv.get("Device / Media Name") or kv.get("Media Name"),
        "size": (kv.get("Disk Size") or "").split("(")[0].strip() or None,
    }
    if solid is not None:
        info["media_type"] = "HDD" if solid == "No" else (
            "NVMe" if "PCI" in protocol or "Fabric" in protocol else "SSD")
    return info


def _ata_attributes(text: str) -> dict[str, tuple[int, int | None]]:
    """ATTRIBUTE_NAME -> (normalised VALUE, first integer of RAW_VALUE)."""
    attrs = {}
    for line in text.splitlines():
        parts = line.split()
        if len(parts) >= 10 and parts[0].isdigit() and parts[2].startswith("0x"):
            value = int_or_none(parts[3])
            if value is not None:
                attrs[parts[1]] = (value, int_or_none(parts[9]))
    return attrs


def parse_smart(text: str) -> dict:
    """SMART verdict, wear-derived health, bad sectors, temperature and TB written."""
    smart: dict = {}

    verdict = re.search(r"overall-health self-assessment test result:\s*(\w+)", text)
    if verdict:
        smart["smart_passed"] = verdict.group(1).upper() == "PASSED"
    else:
        status = re.search(r"SMART Health Status:\s*(\w+)", text)
        if status:
            smart["smart_passed"] = status.group(1).upper() == "OK"

    attrs = _ata_attributes(text)
    if attrs:
        wear = next((attrs[a][0] for a in _WEAR_ATTRIBUTES if a in attrs), None)
        if wear is not None:
            smart["health_pct"] = max(0, min(100, wear))
        bad = [attrs[a][1] for a in ("Reallocated_Sector_Ct", "Current_Pending_Sector") if a in attrs]
        if bad and None not in bad:
            smart["bad_sectors"] = sum(bad)
        temp = next((attrs[a][1] for a in _TEMP_ATTRIBUTES if a in attrs), None)
        if temp is not None:
            smart["temperature_c"] = float(temp)
        lbas = attrs.get("Total_LBAs_Written")
        if lbas and lbas[1] is not None:
            smart["tb_written"] = round(lbas[1] * 512 / 1e12, 2)
    else:
        kv = key_values(text)
        used = int_or_none(kv.get("Percentage Used"))
        if used is not None:
            smart["health_pct"] = max(0, 100 - used)
        media_errors = int_or_none(kv.get("Media and Data Integrity Errors"))
        if media_errors is not None:
            smart["bad_sectors"] = media_errors
        temp = float_or_none(kv.get("Temperature"))
        if temp is not None:
            smart["temperature_c"] = temp
        # one NVMe data unit is 1000 * 512 bytes
        units = int_or_none((kv.get("Data Units Written") or "").split("[")[0])
        if units is not None:
            smart["tb_written"] = round(units * 512000 / 1e12, 2)

    return require(smart or None, "SMART data")


def bad_sector_severity(count: int) -> float:
    if count <= 0:
        return 0.0
    return min(1.0, 0.7 + 0.1 * math.log2(count))


class StorageProbe(Probe):
    name = "storage"
    components = ("STORAGE",)
    expected = {
        "smart_passed": "smart",
        "health_pct": "smart",
        "bad_sectors": "smart",
        "temperature_c": "smart",
    }

    def collect(self):
        enumeration = Reading("STORAGE")
        listing = self.text(enumeration, "list")
        if not listing:
            return [self.failed("STORAGE", "could not enumerate disks", attempts=enumeration.attempts)]
        try:
            disks = parse_disk_list(self.platform, listing)
        except ParseFailure as e:
            return [self.failed("STORAGE", str(e), attempts=enumeration.attempts)]

        return [self._audit_disk(disk) for disk in disks]

    def _audit_disk(self, disk: dict):
        reading = Reading("STORAGE")
        reading.put("device", disk["device"])
        for key in ("model", "media_type", "size"):
            reading.put(key, disk.get(key))

        if self.supports("info"):
            info = self.text(reading, "info", device=disk["device"])
            if info:
                self.extract_all(reading, "disk info", parse_diskutil_info, info)

        smart = self.text(reading, "smart", device=disk["device"])
        if smart:
            self.extract_all(reading, "smart", parse_smart, smart)
        if disk.get("status") and "smart_passed" not in reading.metrics:
            reading.put("smart_passed", disk["status"].upper() == "OK")

        tbw = reading.metrics.get("tb_written")
        if tbw is not None and self.config.storage_rated_tbw:
            reading.put("endurance_used_pct", round(tbw / self.config.storage_rated_tbw * 100, 1))

        reading.label = reading.metrics.get("model") or str(disk["device"])
        expected = dict(self.expected)
        if reading.metrics.get("media_type") == "HDD":
            expected.pop("health_pct")
        return self.finish(reading, expected)

    def checks(self, metrics):
        checks = []
        if "bad_sectors" in metrics:
            checks.append(Check("bad_sectors", 45, bad_sector_severity(metrics["bad_sectors"])))
        if "health_pct" in metrics:
            checks.append(Check("health", 25, ramp(90 - metrics["health_pct"], 0, 50)))
        if "smart_passed" in metrics:
            checks.append(Check("smart_status", 20, 0.0 if metrics["smart_passed"] else 1.0))
        if "temperature_c" in metrics:
            checks.append(Check("temperature", 5, ramp(metrics["temperature_c"], HOT_DISK_C, HOT_DISK_C + 15)))
        if "endurance_used_pct" in metrics:
            checks.append(Check("endurance", 5, metrics["endurance_used_pct"] / 100))
        return checks

    def score(self, metrics):
        # Check weights are points out of 100: a missing metric leaves its
        # points untouched instead of inflating the others.
        score = deducted_score(self.checks(metrics))
        if score is not None and metrics.get("smart_passed") is False:
            score = min(score, FAIL_SCORE)
        return score

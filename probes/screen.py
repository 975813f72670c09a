"""
Screen probe.

Without dedicated hardware there is no dead-pixel test, so the score rests on
resolution sanity unless a technician supplied a dead/stuck pixel count from
a manual check (config.screen_dead_pixels).
"""
import math
import re

from core.scoring import Check
from probes.base import Probe, Reading
from probes.parsing import int_or_none, key_values, records

_INTERNAL_CONNECTORS = ("eDP", "LVDS", "DSI")


def parse_displays(platform: str, text: str) -> list[dict]:
    """Connected displays, internal panel first."""
    displays: list[dict] = []
    if platform == "linux":
        for m in re.finditer(r"^(\S+) connected(?: primary)?\s*(?:(\d+)x(\d+)\+\S*)?(.*)$", text, flags=re.M):
            connector, width, height, rest = m.groups()
            d = {"connector": connector,
                 "panel": "internal" if connector.startswith(_INTERNAL_CONNECTORS) else "external"}
            if width:
                d["width"], d["height"] = int(width), int(height)
            size = re.search(r"(\d+)mm x (\d+)mm", rest or "")
            if size and int(size.group(1)):
                d["size_in"] = round(math.hypot(int(size.group(1)), int(size.group(2))) / 25.4, 1)
            displays.append(d)
    elif platform == "macos":
        blocks: list[list[str]] = []
        for chunk in text.split("Displays:")[1:]:
            for line in chunk.splitlines():
                s = line.strip()
                if s.endswith(":"):
                    blocks.append([])
                elif s and blocks:
                    blocks[-1].append(s)
        for block in blocks:
            kv = key_values("\n".join(block))
            res = re.search(r"(\d+)\s*x\s*(\d+)", kv.get("Resolution", ""))
            if not res:
                continue
            d = {"width": int(res.group(1)), "height": int(res.group(2))}
            built_in = ("built-in" in kv.get("Display Type", "").lower() or kv.get("Built-In") == "Yes"
                        or kv.get("Connection Type") == "Internal")
            d["panel"] = "internal" if built_in else "external"
            if kv.get("Display Type"):
                d["type"] = kv["Display Type"]
            elif "Retina" in kv.get("Resolution", ""):
                d["type"] = "Retina"
            displays.append(d)
    else:
        for rec in records(text):
            width = int_or_none(rec.get("CurrentHorizontalResolution"))
            height = int_or_none(rec.get("CurrentVerticalResolution"))
            if width and height:
                displays.append({"width": width, "height": height, "adapter": rec.get("Name")})
    displays.sort(key=lambda d: d.get("panel") != "internal")
    return displays


def resolution_severity(width: int, height: int) -> float:
    if width >= 1280 and height >= 720:
        return 0.0
    if width >= 1024 and height >= 600:
        return 0.3
    # implausibly low: usually a driver fallback or a bad EDID
    return 0.6


def dead_pixel_severity(count: int) -> float:
    return 0.0 if count <= 0 else min(1.0, 0.4 + 0.1 * count)


class ScreenProbe(Probe):
    name = "screen"
    components = ("SCREEN",)
    expected = {"resolution": "displays"}

    def collect(self):
        reading = Reading("SCREEN")
        output = self.run_command(reading, "displays")
        if not output.ok:
            return [self.finish(reading)]
        displays = parse_displays(self.platform, output.output)
        if not displays:
            return []

        main = displays[0]
        for key in ("connector", "panel", "type", "size_in", "adapter"):
            reading.put(key, main.get(key))
        if "width" in main:
            reading.put("width", main["width"])
            reading.put("height", main["height"])
            reading.put("resolution", f"{main['width']}x{main['height']}")
        reading.put("display_count", len(displays))
        reading.put("dead_pixels", self.config.screen_dead_pixels)

        reading.label = " ".join(str(p) for p in (
            reading.metrics.get("resolution"), reading.metrics.get("type") or reading.metrics.get("panel"),
        ) if p) or None
        return [self.finish(reading)]

    def checks(self, metrics):
        checks = []
        if "width" in metrics and "height" in metrics:
            checks.append(Check("resolution", 40, resolution_severity(metrics["width"], metrics["height"])))
        if "dead_pixels" in metrics:
            checks.append(Check("dead_pixels", 60, dead_pixel_severity(metrics["dead_pixels"])))
        return checks

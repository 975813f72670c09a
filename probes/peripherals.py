"""
Peripherals probe: keyboard, touchpad, USB, webcam and audio.

These are largely binary-health parts, so each one scores PASS_SCORE when the
OS enumerates it in a working state and FAIL_SCORE when it reports an error.
A device the OS does not list at all is left out of the report (desktops have
no touchpad, many have no webcam).
"""
import re

from probes.base import FAIL_SCORE, PASS_SCORE, Probe, Reading
from probes.parsing import records

_TOUCHPAD_HINTS = ("touchpad", "trackpad", "touch pad", "synaptics", "glidepoint", "precision")


def _input_blocks(text: str) -> list[dict]:
    """/proc/bus/input/devices: one block per device, N:/H: lines."""
    blocks = []
    for chunk in re.split(r"\n\s*\n", text):
        name = re.search(r'^N: Name="([^"]*)"', chunk, flags=re.M)
        handlers = re.search(r"^H: Handlers=(.*)$", chunk, flags=re.M)
        if name:
            blocks.append({"name": name.group(1), "handlers": handlers.group(1).split() if handlers else []})
    return blocks


def _headers(text: str) -> list[str]:
    """system_profiler section headers ("Name:" lines with no value)."""
    return [s[:-1] for s in (l.strip() for l in text.splitlines()) if s.endswith(":")]


def _linux_devices(kind: str, text: str) -> list[dict]:
    if kind == "KEYBOARD":
        return [{"name": b["name"], "ok": True} for b in _input_blocks(text)
                if "kbd" in b["handlers"] and "keyboard" in b["name"].lower()]
    if kind == "TOUCHPAD":
        return [{"name": b["name"], "ok": True} for b in _input_blocks(text)
                if any(h in b["name"].lower() for h in _TOUCHPAD_HINTS)]
    if kind == "USB":
        return [{"name": m.strip() or "USB device", "ok": True}
                for m in re.findall(r"^Bus \d+ Device \d+: ID [0-9a-fA-F]{4}:[0-9a-fA-F]{4}(.*)$", text, flags=re.M)]
    if kind == "WEBCAM":
        return [{"name": n, "ok": True} for n in text.split() if re.fullmatch(r"video\d+", n)]
    cards = re.findall(r"^card \d+: [^\[]*\[([^\]]+)\]", text, flags=re.M)
    return [{"name": name.strip(), "ok": True} for name in dict.fromkeys(cards)]


def _macos_devices(kind: str, text: str) -> list[dict]:
    headers = _headers(text)
    if kind == "KEYBOARD":
        names = [h for h in headers if "keyboard" in h.lower()]
    elif kind == "TOUCHPAD":
        names = [h for h in headers if "trackpad" in h.lower()]
    elif kind == "USB":
        names = [h for h in headers if h != "USB"]
    elif kind == "WEBCAM":
        names = [h for h in headers if h != "Camera"] if re.search(r"(Model|Unique) ID:", text) else []
    else:
        names = [h for h in headers if h not in ("Audio", "Devices")] if "Output" in text else []
    return [{"name": n, "ok": True} for n in names]


def _windows_devices(kind: str, text: str) -> list[dict]:
    rows = records(text, sep=":") if kind == "WEBCAM" else records(text)
    devices = []
    for row in rows:
        name = row.get("Name") or row.get("FriendlyName") or kind.title()
        if kind == "TOUCHPAD" and not any(h in name.lower() for h in _TOUCHPAD_HINTS):
            continue
        status = row.get("Status") or "OK"
        devices.append({"name": name, "ok": status.upper() == "OK"})
    return devices


def parse_devices(platform: str, kind: str, text: str) -> list[dict]:
    parser = {"linux": _linux_devices, "macos": _macos_devices}.get(platform, _windows_devices)
    return parser(kind, text)


class PeripheralsProbe(Probe):
    name = "peripherals"
    components = ("KEYBOARD", "TOUCHPAD", "USB", "WEBCAM", "AUDIO")

    def collect(self):
        results = []
        for kind in self.active_kinds():
            key = kind.lower()
            if not self.supports(key):
                continue
            reading = Reading(kind)
            output = self.run_command(reading, key)
            if not output.ok:
                results.append(self.finish(reading, {"devices": key}))
                continue
            devices = parse_devices(self.platform, kind, output.output)
            if not devices:
                continue
            failing = [d["name"] for d in devices if not d["ok"]]
            reading.put("devices", len(devices))
            reading.put("names", [d["name"] for d in devices][:5])
            reading.put("failed", bool(failing))
            if failing:
                reading.put("failing", failing)
            reading.label = devices[0]["name"]
            results.append(self.finish(reading, {"devices": key}))
        return results

    def score(self, metrics):
        if "failed" not in metrics:
            return None
        return FAIL_SCORE if metrics["failed"] else PASS_SCORE

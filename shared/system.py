"""
    Platform detection and machine identity.
"""
import platform
import socket
import time

import psutil

from core.models import MachineInfo
from helpers.executor import CommandExecutor
from helpers.logger import get_logger
from probes.commands import IDENTITY_COMMANDS
from probes.parsing import key_values

log = get_logger(__name__)


def get_os(system: str | None = None) -> str | None:
    """
        Normalised platform id ("linux", "macos", "windows") or None when unsupported.
        Computed once per audit and passed down, never read from module state.
    """
    operating_system = platform.system() if system is None else system
    switcher = {
        "Windows": "windows",
        "Linux": "linux",
        "Darwin": "macos",
    }
    return switcher.get(operating_system)


def get_system_info():
    """Identity fields the interpreter can answer without any external tool."""
    system_info = {
        "hostname": socket.gethostname() or platform.node() or None,
        "os_name": f"{platform.system()} {platform.release()}".strip() or None,
        "os_version": platform.version() or None,
        "architecture": platform.machine() or None,
    }
    try:
        system_info["uptime_s"] = int(time.time() - psutil.boot_time())
    except (OSError, RuntimeError) as e:
        log.debug("boot time unavailable: %s", e)
    return system_info


def _clean(value) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    # DMI placeholders vendors leave behind
    if not value or value.lower() in ("to be filled by o.e.m.", "default string", "system serial number", "none"):
        return None
    return value


def get_machine_info(os_id: str | None, executor: CommandExecutor | None = None,
                     timeout_s: float | None = None) -> MachineInfo:
    """
        Best-effort machine identity. Every field is optional and a failing
        source only leaves its fields empty.
    """
    executor = executor or CommandExecutor()
    info = get_system_info()

    if os_id == "linux":
        for field, cmd in IDENTITY_COMMANDS["linux"].items():
            info[field] = executor.run(cmd, timeout_s)
    elif os_id == "macos":
        kv = key_values(executor.run(IDENTITY_COMMANDS["macos"]["hardware"], timeout_s))
        if kv:
            info["manufacturer"] = "Apple"
            info["model"] = " ".join(p for p in (kv.get("Model Name"), kv.get("Model Identifier")) if p)
            info["serial_number"] = kv.get("Serial Number (system)")
            info["bios_version"] = kv.get("System Firmware Version") or kv.get("Boot ROM Version")
        mac_version = platform.mac_ver()[0]
        if mac_version:
            info["os_name"] = f"macOS {mac_version}"
    elif os_id == "windows":
        try:
            from shared.windows import get_windows_machine_info
            info.update({k: v for k, v in get_windows_machine_info().items() if v})
        except Exception as e:
            log.warning("WMI identity lookup failed: %s", e)

    uptime = info.pop("uptime_s", None)
    return MachineInfo(
        hostname=_clean(info.get("hostname")),
        manufacturer=_clean(info.get("manufacturer")),
        model=_clean(info.get("model")),
        serial_number=_clean(info.get("serial_number")),
        bios_version=_clean(info.get("bios_version")),
        os_name=_clean(info.get("os_name")),
        os_version=_clean(info.get("os_version")),
        architecture=_clean(info.get("architecture")),
        uptime_s=uptime,
    )

"""
Probe registry.

The fixed, ordered set of probe families. `select()` resolves the capability
table for one platform and hands back ready-to-run probe instances; the order
here is the order components appear in the report.
"""
from __future__ import annotations

from core.config import AuditConfig
from helpers.executor import CommandExecutor
from helpers.logger import get_logger
from probes.base import Probe
from probes.battery import BatteryProbe
from probes.commands import commands_for
from probes.cpu import CpuProbe
from probes.fan import FanProbe
from probes.gpu import GpuProbe
from probes.network import NetworkProbe
from probes.peripherals import PeripheralsProbe
from probes.ram import RamProbe
from probes.screen import ScreenProbe
from probes.storage import StorageProbe

log = get_logger(__name__)

DEFAULT_PROBES: tuple[type[Probe], ...] = (
    CpuProbe,
    RamProbe,
    StorageProbe,
    BatteryProbe,
    ScreenProbe,
    GpuProbe,
    NetworkProbe,
    FanProbe,
    PeripheralsProbe,
)


class ProbeRegistry:
    def __init__(self, probes: tuple[type[Probe], ...] = DEFAULT_PROBES):
        self.probes = tuple(probes)

    def select(self, platform: str | None, config: AuditConfig,
               executor: CommandExecutor) -> list[Probe]:
        """Probes applicable to `platform`, in registry order. Unsupported platform -> []."""
        if platform is None:
            log.warning("unsupported platform, no probe selected")
            return []

        selected = []
        for probe_cls in self.probes:
            commands = commands_for(probe_cls.name, platform)
            if commands is None:
                log.debug("%s: not applicable on %s", probe_cls.name, platform)
                continue
            if not config.probe_enabled(probe_cls.name, probe_cls.components):
                log.info("%s: disabled by configuration", probe_cls.name)
                continue
            selected.append(probe_cls(platform, commands, executor, config))
        return selected

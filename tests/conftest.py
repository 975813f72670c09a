import threading
import time
from dataclasses import dataclass

import pytest

from core.config import AuditConfig
from helpers.executor import CommandExecutor, CommandResult
from probes.commands import COMMANDS, IDENTITY_COMMANDS, commands_for


@dataclass
class Scripted:
    output: str = ""
    failure: str | None = None
    delay: float = 0.0
    block: threading.Event | None = None


class FakeExecutor(CommandExecutor):
    """Answers from a script keyed by argv; anything unscripted is CommandUnavailable."""

    def __init__(self):
        super().__init__(timeout_s=1.0)
        self.scripted: dict[tuple[str, ...], Scripted] = {}
        self.calls: list[tuple[str, ...]] = []
        self._lock = threading.Lock()

    def on(self, probe, platform, key, output="", failure=None, delay=0.0, block=None, **params):
        argv = tuple(part.format(**params) for part in COMMANDS[(probe, platform)][key])
        self.scripted[argv] = Scripted(output, failure, delay, block)
        return argv

    def on_identity(self, platform, key, output):
        self.scripted[tuple(IDENTITY_COMMANDS[platform][key])] = Scripted(output)

    def execute(self, cmd, timeout_s=None):
        cmd = tuple(cmd)
        with self._lock:
            self.calls.append(cmd)
        entry = self.scripted.get(cmd)
        if entry is None:
            return CommandResult(cmd=cmd, failure="CommandUnavailable", detail="not scripted")
        if entry.block is not None:
            entry.block.wait(5)
        if entry.delay:
            time.sleep(entry.delay)
        if entry.failure:
            return CommandResult(cmd=cmd, failure=entry.failure, detail="scripted failure")
        return CommandResult(cmd=cmd, output=entry.output.strip(), rc=0)


@pytest.fixture
def fake():
    return FakeExecutor()


@pytest.fixture
def config():
    return AuditConfig()


@pytest.fixture
def make_probe(fake, config):
    def _make(probe_cls, platform, cfg=None):
        return probe_cls(platform, commands_for(probe_cls.name, platform), fake, cfg or config)
    return _make


HOST_INTERFACES = [
    {"name": "lo", "isup": True, "speed_mbps": 0,
     "addresses": [{"family": "IPv4", "address": "127.0.0.1"}]},
    {"name": "eth0", "isup": True, "speed_mbps": 1000,
     "addresses": [{"family": "IPv4", "address": "192.168.1.20"},
                   {"family": "MAC", "address": "aa:bb:cc:dd:ee:ff"}]},
]


@pytest.fixture(autouse=True)
def host_facts(monkeypatch):
    """psutil facts pinned so probe scores do not depend on the test machine."""
    monkeypatch.setattr("probes.cpu.get_cpu_info", lambda: {"cores": 4, "threads": 8, "freq_mhz": 2400})
    monkeypatch.setattr("probes.cpu.get_cpu_usage", lambda: 20.0)
    monkeypatch.setattr("probes.cpu.get_cpu_temperature", lambda: None)
    monkeypatch.setattr("probes.ram.get_memory_info", lambda: {"total_gb": 16.0, "used_gb": 6.2})
    monkeypatch.setattr("probes.network.NetworkProbe.interfaces", lambda self: [dict(i) for i in HOST_INTERFACES])
    monkeypatch.setattr("probes.network.NetworkProbe.adapter_names", lambda self: {})

# core/models.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Literal, Any

ComponentKind = Literal[
    "CPU", "RAM", "STORAGE", "BATTERY", "SCREEN", "GPU", "NETWORK", "FAN",
    "KEYBOARD", "TOUCHPAD", "USB", "WEBCAM", "AUDIO",
]
Status = Literal["RUN_OK", "RUN_DEGRADED", "RUN_FAILED"]
Verdict = Literal["excellent", "bon", "correct", "attention", "critique", "non_testé"]

COMPONENT_KINDS: tuple[str, ...] = (
    "CPU", "RAM", "STORAGE", "BATTERY", "SCREEN", "GPU", "NETWORK", "FAN",
    "KEYBOARD", "TOUCHPAD", "USB", "WEBCAM", "AUDIO",
)
RUN_OK: Status = "RUN_OK"
RUN_DEGRADED: Status = "RUN_DEGRADED"
RUN_FAILED: Status = "RUN_FAILED"


@dataclass
class ComponentResult:
    component: ComponentKind
    score: int
    status: Status = RUN_OK
    label: str | None = None
    metrics: dict[str, Any] = field(default_factory=dict)
    notes: str | None = None
    evidence: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self):
        if self.component not in COMPONENT_KINDS:
            raise ValueError(f"unknown component kind: {self.component!r}")
        self.score = max(0, min(100, int(self.score)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "component": self.component,
            "label": self.label,
            "score": self.score,
            "status": self.status,
            "metrics": dict(self.metrics),
            "notes": self.notes,
            "evidence": list(self.evidence),
        }


@dataclass
class MachineInfo:
    hostname: str | None = None
    manufacturer: str | None = None
    model: str | None = None
    serial_number: str | None = None
    bios_version: str | None = None
    os_name: str | None = None
    os_version: str | None = None
    architecture: str | None = None
    uptime_s: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "hostname": self.hostname,
            "manufacturer": self.manufacturer,
            "model": self.model,
            "serialNumber": self.serial_number,
            "biosVersion": self.bios_version,
            "os": self.os_name,
            "osVersion": self.os_version,
            "architecture": self.architecture,
            "uptime": self.uptime_s,
        }


@dataclass
class AuditResult:
    machine: MachineInfo
    components: list[ComponentResult]
    score_global: int
    verdict: Verdict
    duration_ms: int
    platform: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "machine": self.machine.to_dict(),
            "platform": self.platform,
            "components": [c.to_dict() for c in self.components],
            "scoreGlobal": self.score_global,
            "verdict": self.verdict,
            "duration": self.duration_ms,
        }

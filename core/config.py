"""
Audit configuration.

Every setting has a default; `AuditConfig.from_env()` lets the environment
override them, and main.py layers CLI flags on top.
"""
from __future__ import annotations
import os
from dataclasses import dataclass, field, replace


def _names(value: str | None) -> frozenset[str]:
    if not value:
        return frozenset()
    return frozenset(v.strip().lower() for v in value.split(",") if v.strip())


def _float_or(value: str | None, default: float | None) -> float | None:
    if value is None or not value.strip():
        return default
    return float(value)


@dataclass(frozen=True)
class AuditConfig:
    audit_timeout_s: float = 60.0
    command_timeout_s: float = 15.0
    allow: frozenset[str] = field(default_factory=frozenset)
    deny: frozenset[str] = field(default_factory=frozenset)
    ping_host: str = "8.8.8.8"
    battery_rated_cycles: int = 1000
    storage_rated_tbw: float | None = None
    screen_dead_pixels: int | None = None
    log_level: str = "INFO"

    def __post_init__(self):
        if self.audit_timeout_s <= 0:
            raise ValueError("audit_timeout_s must be positive")
        if self.command_timeout_s <= 0:
            raise ValueError("command_timeout_s must be positive")
        if self.battery_rated_cycles <= 0:
            raise ValueError("battery_rated_cycles must be positive")
        if self.storage_rated_tbw is not None and self.storage_rated_tbw <= 0:
            raise ValueError("storage_rated_tbw must be positive")
        if self.screen_dead_pixels is not None and self.screen_dead_pixels < 0:
            raise ValueError("screen_dead_pixels cannot be negative")
        # accept any iterable of names, store them normalised
        object.__setattr__(self, "allow", frozenset(n.lower() for n in self.allow))
        object.__setattr__(self, "deny", frozenset(n.lower() for n in self.deny))

    @classmethod
    def from_env(cls, environ=None) -> "AuditConfig":
        env = os.environ if environ is None else environ
        default = cls()
        cycles = env.get("AUDIT_BATTERY_RATED_CYCLES")
        return cls(
            audit_timeout_s=_float_or(env.get("AUDIT_TIMEOUT_S"), default.audit_timeout_s),
            command_timeout_s=_float_or(env.get("AUDIT_COMMAND_TIMEOUT_S"), default.command_timeout_s),
            allow=_names(env.get("AUDIT_ALLOW")),
            deny=_names(env.get("AUDIT_DENY")),
            ping_host=env.get("AUDIT_PING_HOST") or default.ping_host,
            battery_rated_cycles=int(cycles) if cycles else default.battery_rated_cycles,
            storage_rated_tbw=_float_or(env.get("AUDIT_STORAGE_RATED_TBW"), None),
            log_level=env.get("AUDIT_LOG_LEVEL") or default.log_level,
        )

    def with_overrides(self, **changes) -> "AuditConfig":
        """Copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def is_enabled(self, *names: str) -> bool:
        """
        A probe or component kind runs unless denied, and, when an allow list
        is set, only if one of its names is on it.
        """
        lowered = {n.lower() for n in names}
        if lowered & self.deny:
            return False
        if self.allow and not lowered & self.allow:
            return False
        return True

    def probe_enabled(self, probe_name: str, kinds) -> bool:
        """True when at least one of the probe's component kinds may run."""
        return any(self.is_enabled(probe_name, kind) for kind in kinds)

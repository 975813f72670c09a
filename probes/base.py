"""
Probe base class.

A probe gathers raw text for one component family through the executor,
extracts typed metrics into a Reading, and turns the Reading into one or more
ComponentResults. Subclasses implement `collect()` and `checks()`; status,
neutral scoring and failure handling live here so every family behaves the
same way.
"""
from __future__ import annotations
import time
from typing import Any, Callable

from core.config import AuditConfig
from core.errors import CommandTimeout, ParseFailure, UnsupportedMetric
from core.models import ComponentResult, RUN_DEGRADED, RUN_FAILED, RUN_OK
from core.scoring import NEUTRAL_SCORE, Check, weighted_score
from helpers.executor import CommandExecutor, CommandResult
from helpers.logger import get_logger

log = get_logger(__name__)

PASS_SCORE = 100
FAIL_SCORE = 40


class Reading:
    """Metrics gathered for one component instance and the commands behind them."""

    def __init__(self, component: str, label: str | None = None):
        self.component = component
        self.label = label
        self.metrics: dict[str, Any] = {}
        self.attempts: list[CommandResult] = []
        self.problems: list[str] = []

    def put(self, key: str, value: Any) -> None:
        # unknown stays absent, never defaulted
        if value is not None:
            self.metrics[key] = value


class Probe:
    name: str = ""
    components: tuple[str, ...] = ()
    # metric name -> command key that feeds it; drives RUN_OK vs RUN_DEGRADED
    expected: dict[str, str | None] = {}

    def __init__(self, platform: str, commands: dict[str, list[str]],
                 executor: CommandExecutor, config: AuditConfig | None = None):
        self.platform = platform
        self.commands = commands
        self.executor = executor
        self.config = config or AuditConfig()
        self._cache: dict[tuple[str, ...], CommandResult] = {}
        # time.monotonic() after which no further command is started
        self.deadline: float | None = None

    def __repr__(self):
        return f"<{type(self).__name__} {self.platform}>"

    # -- public contract --

    def probe(self) -> list[ComponentResult]:
        """Never raises: unexpected errors become RUN_FAILED results."""
        try:
            results = self.collect()
        except Exception as e:
            log.exception("%s probe crashed", self.name)
            return self.failed_results(f"probe error: {type(e).__name__}: {e}")
        for r in results:
            if r.status != RUN_OK:
                log.warning("%s %s: %s (%s)", r.component, r.label or "", r.status, r.notes)
        return results

    def active_kinds(self) -> list[str]:
        return [k for k in self.components if self.config.is_enabled(self.name, k)]

    def failed_results(self, notes: str) -> list[ComponentResult]:
        return [self.failed(kind, notes) for kind in self.active_kinds()]

    # -- for subclasses --

    def collect(self) -> list[ComponentResult]:
        raise NotImplementedError

    def checks(self, metrics: dict[str, Any]) -> list[Check]:
        return []

    def score(self, metrics: dict[str, Any]) -> int | None:
        return weighted_score(self.checks(metrics))

    def supports(self, key: str) -> bool:
        return key in self.commands

    def run_command(self, reading: Reading, key: str, **params) -> CommandResult:
        """Run the platform command for `key`; repeated argv within a probe is served from cache."""
        if key not in self.commands:
            raise UnsupportedMetric(f"{self.name}: no '{key}' command on {self.platform}")
        argv = tuple(part.format(**params) for part in self.commands[key])
        result = self._cache.get(argv)
        if result is None:
            timeout_s = self.config.command_timeout_s
            if self.deadline is not None:
                remaining = self.deadline - time.monotonic()
                if remaining <= 0:
                    result = CommandResult(cmd=argv, failure=CommandTimeout.__name__,
                                           detail="audit budget exhausted, not started")
                    reading.attempts.append(result)
                    return result
                timeout_s = min(timeout_s, remaining)
            result = self.executor.execute(argv, timeout_s=timeout_s)
            self._cache[argv] = result
        reading.attempts.append(result)
        return result

    def text(self, reading: Reading, key: str, **params) -> str:
        """Command output, or "" when unsupported or failed."""
        try:
            return self.run_command(reading, key, **params).output
        except UnsupportedMetric as e:
            reading.problems.append(str(e))
            return ""

    def extract(self, reading: Reading, metric: str, fn: Callable[..., Any], *args) -> Any:
        """Store fn(*args) under `metric`; a parse failure only omits the metric."""
        try:
            value = fn(*args)
        except (ParseFailure, UnsupportedMetric) as e:
            log.debug("%s: %s omitted (%s)", self.name, metric, e)
            reading.problems.append(f"{metric}: {e}")
            return None
        reading.put(metric, value)
        return value

    def extract_all(self, reading: Reading, what: str, fn: Callable[..., dict], *args) -> dict:
        """extract() for parsers returning several metrics at once."""
        try:
            values = fn(*args)
        except (ParseFailure, UnsupportedMetric) as e:
            log.debug("%s: %s omitted (%s)", self.name, what, e)
            reading.problems.append(f"{what}: {e}")
            return {}
        for key, value in values.items():
            reading.put(key, value)
        return values

    def failed(self, component: str, notes: str, label: str | None = None,
               attempts: list[CommandResult] | None = None) -> ComponentResult:
        return ComponentResult(
            component=component,
            label=label,
            score=NEUTRAL_SCORE,
            status=RUN_FAILED,
            notes=notes,
            evidence=[a.evidence() for a in attempts or []],
        )

    def finish(self, reading: Reading, expected: dict[str, str | None] | None = None) -> ComponentResult:
        expected = self.expected if expected is None else expected
        # a None command key marks a metric read from psutil, expected everywhere
        wanted = [m for m, key in expected.items() if key is None or key in self.commands]
        obtained = [m for m in wanted if m in reading.metrics]

        if reading.attempts and all(a.empty for a in reading.attempts) and not obtained:
            reasons = sorted({a.failure or "empty output" for a in reading.attempts})
            return self.failed(reading.component, "no usable output: " + ", ".join(reasons),
                               label=reading.label, attempts=reading.attempts)

        notes = list(reading.problems)
        status = RUN_OK
        missing = [m for m in wanted if m not in reading.metrics]
        if missing:
            status = RUN_DEGRADED
            notes.insert(0, "missing: " + ", ".join(missing))

        score = self.score(reading.metrics)
        if score is None:
            score = NEUTRAL_SCORE
            status = RUN_DEGRADED
            notes.append("no scoreable metric, neutral score applied")

        return ComponentResult(
            component=reading.component,
            label=reading.label,
            score=score,
            status=status,
            metrics=dict(reading.metrics),
            notes="; ".join(notes) if status != RUN_OK and notes else None,
            evidence=[a.evidence() for a in reading.attempts],
        )

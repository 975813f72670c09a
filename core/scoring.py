"""
Scoring primitives for probes and the global aggregator.

A probe scores its component from a list of Checks. Each Check has a weight
(its share of the 100-point budget) and a severity between 0 (healthy) and
1 (worst). Checks whose metric could not be measured are simply not passed
in, so the remaining weights are re-normalised among what is available.
deducted_score() reads the weights as fixed points instead, for families
where one missing metric must not soften the others.
"""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable

from core.models import ComponentResult, Verdict

NEUTRAL_SCORE = 50
NOT_TESTED: Verdict = "non_testé"

# Storage and battery dominate resale risk, peripherals barely move the needle.
# STORAGE outweighs every other kind together: a drive scoring 45 keeps an
# otherwise perfect machine below 70.
COMPONENT_WEIGHTS: dict[str, int] = {
    "STORAGE": 75,
    "BATTERY": 20,
    "CPU": 10,
    "RAM": 10,
    "SCREEN": 5,
    "GPU": 3,
    "NETWORK": 2,
    "FAN": 2,
    "KEYBOARD": 2,
    "TOUCHPAD": 1,
    "USB": 1,
    "WEBCAM": 1,
    "AUDIO": 1,
}

# lower bound (inclusive) of each band, highest first
VERDICT_BANDS: tuple[tuple[int, Verdict], ...] = (
    (90, "excellent"),
    (70, "bon"),
    (50, "correct"),
    (30, "attention"),
    (0, "critique"),
)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))


def ramp(value: float, start: float, end: float) -> float:
    """Severity growing linearly from 0 at `start` to 1 at `end`."""
    if value <= start:
        return 0.0
    if value >= end:
        return 1.0
    return (value - start) / (end - start)


@dataclass(frozen=True)
class Check:
    name: str
    weight: float
    severity: float

    def __post_init__(self):
        object.__setattr__(self, "severity", max(0.0, min(1.0, float(self.severity))))

    @property
    def deduction(self) -> float:
        return self.weight * self.severity


def weighted_score(checks: Iterable[Check]) -> int | None:
    """100 minus the re-normalised weighted deductions; None with no checks."""
    checks = [c for c in checks if c.weight > 0]
    if not checks:
        return None
    total = sum(c.weight for c in checks)
    lost = sum(c.deduction for c in checks)
    return clamp_score(100.0 * (1.0 - lost / total))


def deducted_score(checks: Iterable[Check]) -> int | None:
    """100 minus the raw deductions, weights read as points; None with no checks."""
    checks = list(checks)
    if not checks:
        return None
    return clamp_score(100.0 - sum(c.deduction for c in checks))


def verdict_for(score_global: int) -> Verdict:
    for floor, verdict in VERDICT_BANDS:
        if score_global >= floor:
            return verdict
    return "critique"


def aggregate(components: Iterable[ComponentResult]) -> tuple[int, Verdict]:
    """
    Weighted global score and its verdict band.

    Only components present in the audit contribute to the denominator, so a
    machine is never penalised for hardware it does not have. Pure function.
    """
    weighted = 0.0
    total = 0
    for comp in components:
        weight = COMPONENT_WEIGHTS.get(comp.component, 1)
        weighted += weight * comp.score
        total += weight
    if total == 0:
        return 0, NOT_TESTED
    score_global = clamp_score(weighted / total)
    return score_global, verdict_for(score_global)

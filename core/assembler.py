"""
Report assembler.

Runs every selected probe concurrently under one overall budget, resolves the
machine identity alongside them, and assembles the AuditResult. Probes still
running when the budget expires are reported as RUN_FAILED with the neutral
score instead of being awaited. Every probe shares the budget deadline, so a
straggler cannot run commands past it.
"""
from __future__ import annotations
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait

from core.config import AuditConfig
from core.models import AuditResult, ComponentResult, MachineInfo
from core.registry import ProbeRegistry
from core.scoring import NOT_TESTED, aggregate
from helpers.executor import CommandExecutor
from helpers.logger import get_logger
from shared.system import get_machine_info, get_os, get_system_info

log = get_logger(__name__)

# sentinel: detect the platform of the running host
AUTO = "auto"


def _minimal_machine() -> MachineInfo:
    try:
        info = get_system_info()
    except Exception as e:
        log.warning("system info unavailable: %s", e)
        return MachineInfo()
    return MachineInfo(
        hostname=info.get("hostname"),
        os_name=info.get("os_name"),
        os_version=info.get("os_version"),
        architecture=info.get("architecture"),
        uptime_s=info.get("uptime_s"),
    )


def _machine_from(future: Future, done) -> MachineInfo:
    if future not in done:
        log.warning("machine identity did not finish within the audit budget")
        return _minimal_machine()
    error = future.exception()
    if error is not None:
        log.warning("machine identity failed: %s", error)
        return _minimal_machine()
    return future.result()


def run_audit(config: AuditConfig | None = None, platform: str | None = AUTO,
              executor: CommandExecutor | None = None,
              registry: ProbeRegistry | None = None) -> AuditResult:
    """
    Run one full audit and return its AuditResult. Never raises.

    `platform` is detected once when left to AUTO; pass "linux", "macos",
    "windows" or None (unsupported) to inject it.
    """
    started = time.monotonic()
    config = config or AuditConfig()
    os_id = get_os() if platform == AUTO else platform
    executor = executor or CommandExecutor(config.command_timeout_s)
    registry = registry or ProbeRegistry()
    log.info("audit started (platform=%s, budget=%ss)", os_id, config.audit_timeout_s)

    try:
        components, machine = _collect(config, os_id, executor, registry)
        score_global, verdict = aggregate(components)
    except Exception:
        log.exception("audit assembly failed")
        components, machine = [], _minimal_machine()
        score_global, verdict = 0, NOT_TESTED

    duration_ms = int((time.monotonic() - started) * 1000)
    log.info("audit finished in %d ms: score %s (%s)", duration_ms, score_global, verdict)
    return AuditResult(
        machine=machine,
        components=components,
        score_global=score_global,
        verdict=verdict,
        duration_ms=duration_ms,
        platform=os_id,
    )


def _collect(config: AuditConfig, os_id: str | None, executor: CommandExecutor,
             registry: ProbeRegistry) -> tuple[list[ComponentResult], MachineInfo]:
    probes = registry.select(os_id, config, executor)
    # one slot per probe, filled in registry order whatever the completion order
    slots: list[list[ComponentResult] | None] = [None] * len(probes)
    budget = config.audit_timeout_s
    deadline = time.monotonic() + budget
    for probe in probes:
        probe.deadline = deadline

    pool = ThreadPoolExecutor(max_workers=len(probes) + 1, thread_name_prefix="probe")
    try:
        identity = pool.submit(get_machine_info, os_id, executor, min(config.command_timeout_s, budget))
        futures = [pool.submit(probe.probe) for probe in probes]
        done, _ = wait([identity, *futures], timeout=budget)

        for index, (probe, future) in enumerate(zip(probes, futures)):
            if future not in done:
                log.warning("%s probe still running after %ss, reported as failed", probe.name, budget)
                slots[index] = probe.failed_results(f"timed out after {budget}s audit budget")
                continue
            error = future.exception()
            if error is not None:
                log.error("%s probe raised %s: %s", probe.name, type(error).__name__, error)
                slots[index] = probe.failed_results(f"probe error: {type(error).__name__}: {error}")
                continue
            slots[index] = future.result()

        machine = _machine_from(identity, done)
    finally:
        # stragglers are abandoned; the deadline cuts their running command and blocks new ones
        pool.shutdown(wait=False, cancel_futures=True)

    components = [result for slot in slots for result in slot or []]
    return components, machine

from core.config import AuditConfig
from core.registry import DEFAULT_PROBES, ProbeRegistry


def test_unsupported_platform_selects_nothing(fake):
    assert ProbeRegistry().select(None, AuditConfig(), fake) == []


def test_every_probe_applies_on_every_platform(fake):
    for platform in ("linux", "macos", "windows"):
        probes = ProbeRegistry().select(platform, AuditConfig(), fake)
        assert [type(p) for p in probes] == list(DEFAULT_PROBES)
        assert all(p.platform == platform for p in probes)


def test_commands_resolved_per_platform(fake):
    linux = {p.name: p for p in ProbeRegistry().select("linux", AuditConfig(), fake)}
    windows = {p.name: p for p in ProbeRegistry().select("windows", AuditConfig(), fake)}
    assert linux["storage"].commands["list"][0] == "lsblk"
    assert windows["storage"].commands["list"][0] == "wmic"
    assert "errors" in linux["ram"].commands
    assert "errors" not in windows["ram"].commands


def test_denied_probe_is_not_selected(fake):
    names = [p.name for p in ProbeRegistry().select("linux", AuditConfig(deny={"gpu", "fan"}), fake)]
    assert "gpu" not in names
    assert "fan" not in names
    assert "cpu" in names


def test_fixed_order_is_report_order(fake):
    names = [p.name for p in ProbeRegistry().select("macos", AuditConfig(), fake)]
    assert names == ["cpu", "ram", "storage", "battery", "screen", "gpu", "network", "fan", "peripherals"]

import pytest

from core.config import AuditConfig


def test_defaults():
    cfg = AuditConfig()
    assert cfg.audit_timeout_s == 60.0
    assert cfg.command_timeout_s == 15.0
    assert cfg.ping_host == "8.8.8.8"
    assert cfg.battery_rated_cycles == 1000
    assert cfg.storage_rated_tbw is None


def test_from_env():
    cfg = AuditConfig.from_env({
        "AUDIT_TIMEOUT_S": "30",
        "AUDIT_COMMAND_TIMEOUT_S": "5.5",
        "AUDIT_DENY": "Webcam, usb",
        "AUDIT_PING_HOST": "1.1.1.1",
        "AUDIT_BATTERY_RATED_CYCLES": "500",
        "AUDIT_STORAGE_RATED_TBW": "600",
        "AUDIT_LOG_LEVEL": "DEBUG",
    })
    assert cfg.audit_timeout_s == 30.0
    assert cfg.command_timeout_s == 5.5
    assert cfg.deny == frozenset({"webcam", "usb"})
    assert cfg.ping_host == "1.1.1.1"
    assert cfg.battery_rated_cycles == 500
    assert cfg.storage_rated_tbw == 600.0
    assert cfg.log_level == "DEBUG"


def test_empty_env_gives_defaults():
    assert AuditConfig.from_env({}) == AuditConfig()


@pytest.mark.parametrize("field", ["audit_timeout_s", "command_timeout_s"])
def test_non_positive_timeouts_rejected(field):
    with pytest.raises(ValueError):
        AuditConfig(**{field: 0})


def test_with_overrides_skips_none():
    cfg = AuditConfig().with_overrides(audit_timeout_s=10, ping_host=None)
    assert cfg.audit_timeout_s == 10
    assert cfg.ping_host == "8.8.8.8"


def test_deny_by_kind_or_probe_name():
    cfg = AuditConfig(deny={"WEBCAM", "fan"})
    assert not cfg.is_enabled("peripherals", "WEBCAM")
    assert cfg.is_enabled("peripherals", "USB")
    assert not cfg.probe_enabled("fan", ("FAN",))


def test_allow_list_restricts():
    cfg = AuditConfig(allow={"storage", "battery"})
    assert cfg.probe_enabled("storage", ("STORAGE",))
    assert not cfg.probe_enabled("cpu", ("CPU",))
    assert not cfg.probe_enabled("peripherals", ("KEYBOARD", "USB"))

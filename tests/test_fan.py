from core.models import RUN_FAILED, RUN_OK
from probes.fan import FanProbe, parse_fans

SENSORS = """\
thinkpad-isa-0000
Adapter: ISA adapter
fan1:        2900 RPM

coretemp-isa-0000
Adapter: ISA adapter
Package id 0:  +45.0°C  (high = +100.0°C, crit = +100.0°C)
"""

SENSORS_ALARM = """\
nct6775-isa-0290
Adapter: ISA adapter
fan1:                     0 RPM  (min =  600 RPM)  ALARM
fan2:                  1150 RPM  (min =    0 RPM)
"""


def test_parse_sensors_alarm():
    fans = parse_fans("linux", SENSORS_ALARM)
    assert fans == [
        {"name": "fan1", "rpm": 0, "ok": False},
        {"name": "fan2", "rpm": 1150, "ok": True},
    ]


def test_linux_spinning_fan_passes(fake, make_probe):
    fake.on("fan", "linux", "sensors", SENSORS)
    [result] = make_probe(FanProbe, "linux").probe()
    assert result.status == RUN_OK
    assert result.score == 100
    assert result.metrics["rpm"] == [2900]
    assert result.metrics["failed"] is False


def test_linux_alarm_fails(fake, make_probe):
    fake.on("fan", "linux", "sensors", SENSORS_ALARM)
    [result] = make_probe(FanProbe, "linux").probe()
    assert result.score == 40
    assert result.metrics["failing"] == ["fan1"]


def test_macos(fake, make_probe):
    fake.on("fan", "macos", "sensors", "**** SMC sensors ****\n\nFan: 1197.56 rpm\nCPU die temperature: 48.02 C")
    [result] = make_probe(FanProbe, "macos").probe()
    assert result.metrics["rpm"] == [1198]
    assert result.score == 100


def test_windows_error_status(fake, make_probe):
    fake.on("fan", "windows", "sensors", "Name=Cooling Device\nStatus=Error\n")
    [result] = make_probe(FanProbe, "windows").probe()
    assert result.score == 40
    assert "rpm" not in result.metrics


def test_fanless_reports_nothing(fake, make_probe):
    fake.on("fan", "linux", "sensors", "coretemp-isa-0000\nPackage id 0:  +45.0°C")
    assert make_probe(FanProbe, "linux").probe() == []


def test_sensors_missing(fake, make_probe):
    [result] = make_probe(FanProbe, "linux").probe()
    assert result.status == RUN_FAILED
    assert result.score == 50

from core.config import AuditConfig
from core.models import RUN_DEGRADED, RUN_FAILED, RUN_OK
from probes.screen import ScreenProbe, parse_displays

XRANDR = """\
Screen 0: minimum 320 x 200, current 3840 x 1080, maximum 16384 x 16384
HDMI-1 connected 1920x1080+1920+0 (normal left inverted right x axis y axis) 527mm x 296mm
   1920x1080     60.00*+
eDP-1 connected primary 1920x1080+0+0 (normal left inverted right x axis y axis) 344mm x 194mm
   1920x1080     60.02*+  60.01    59.97
DP-1 disconnected (normal left inverted right x axis y axis)
"""

SP_DISPLAYS = """\
Graphics/Displays:

    Apple M1 Pro:

      Chipset Model: Apple M1 Pro
      Type: GPU
      Bus: Built-In
      Total Number of Cores: 16
      Metal Support: Metal 3
      Displays:
        Color LCD:
          Display Type: Built-in Liquid Retina XDR Display
          Resolution: 3024 x 1964 Retina
          Main Display: Yes
          Connection Type: Internal
"""


def test_xrandr_puts_internal_panel_first():
    displays = parse_displays("linux", XRANDR)
    assert [d["connector"] for d in displays] == ["eDP-1", "HDMI-1"]
    assert displays[0]["panel"] == "internal"
    assert displays[0]["size_in"] == 15.5


def test_linux(fake, make_probe):
    fake.on("screen", "linux", "displays", XRANDR)
    [result] = make_probe(ScreenProbe, "linux").probe()
    assert result.status == RUN_OK
    assert result.score == 100
    assert result.metrics["resolution"] == "1920x1080"
    assert result.metrics["display_count"] == 2
    assert result.label == "1920x1080 internal"


def test_dead_pixels_from_manual_check(fake, make_probe):
    fake.on("screen", "linux", "displays", XRANDR)
    [result] = make_probe(ScreenProbe, "linux", AuditConfig(screen_dead_pixels=2)).probe()
    assert result.metrics["dead_pixels"] == 2
    assert result.score == 64


def test_macos(fake, make_probe):
    fake.on("screen", "macos", "displays", SP_DISPLAYS)
    [result] = make_probe(ScreenProbe, "macos").probe()
    assert result.status == RUN_OK
    assert result.metrics["resolution"] == "3024x1964"
    assert result.metrics["panel"] == "internal"
    assert result.metrics["type"] == "Built-in Liquid Retina XDR Display"


def test_windows_low_resolution(fake, make_probe):
    fake.on("screen", "windows", "displays", """\
CurrentHorizontalResolution=1024
CurrentVerticalResolution=600
Name=Intel(R) UHD Graphics 620
""")
    [result] = make_probe(ScreenProbe, "windows").probe()
    assert result.metrics["adapter"] == "Intel(R) UHD Graphics 620"
    assert result.score == 70


def test_connected_display_without_mode_is_degraded(fake, make_probe):
    fake.on("screen", "linux", "displays", "eDP-1 connected (normal left inverted right x axis y axis)")
    [result] = make_probe(ScreenProbe, "linux").probe()
    assert result.status == RUN_DEGRADED
    assert result.score == 50


def test_headless_reports_nothing(fake, make_probe):
    fake.on("screen", "linux", "displays", "Screen 0: minimum 320 x 200\nDP-1 disconnected")
    assert make_probe(ScreenProbe, "linux").probe() == []


def test_xrandr_missing(fake, make_probe):
    [result] = make_probe(ScreenProbe, "linux").probe()
    assert result.status == RUN_FAILED
    assert result.score == 50

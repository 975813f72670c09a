from core.config import AuditConfig
from core.models import RUN_FAILED, RUN_OK
from probes.commands import COMMANDS
from probes.peripherals import PeripheralsProbe

INPUT_DEVICES = """\
I: Bus=0011 Vendor=0001 Product=0001 Version=ab54
N: Name="AT Translated Set 2 keyboard"
P: Phys=isa0060/serio0/input0
H: Handlers=sysrq kbd event3 leds

I: Bus=0018 Vendor=06cb Product=cd8b Version=0100
N: Name="SYNA8004:00 06CB:CD8B Touchpad"
H: Handlers=mouse1 event8

I: Bus=0019 Vendor=0000 Product=0001 Version=0000
N: Name="Power Button"
H: Handlers=kbd event2
"""

LSUSB = """\
Bus 002 Device 001: ID 1d6b:0003 Linux Foundation 3.0 root hub
Bus 001 Device 003: ID 04f2:b604 Chicony Electronics Co., Ltd Integrated Camera
"""

APLAY = """\
**** List of PLAYBACK Hardware Devices ****
card 0: PCH [HDA Intel PCH], device 0: ALC257 Analog [ALC257 Analog]
card 0: PCH [HDA Intel PCH], device 3: HDMI 0 [HDMI 0]
"""


def script_linux(fake, dev="autofs\nvideo0\nvideo1\nzero"):
    fake.on("peripherals", "linux", "keyboard", INPUT_DEVICES)
    fake.on("peripherals", "linux", "usb", LSUSB)
    fake.on("peripherals", "linux", "webcam", dev)
    fake.on("peripherals", "linux", "audio", APLAY)


def test_linux_all_present(fake, make_probe):
    script_linux(fake)
    results = make_probe(PeripheralsProbe, "linux").probe()
    assert [r.component for r in results] == ["KEYBOARD", "TOUCHPAD", "USB", "WEBCAM", "AUDIO"]
    assert all(r.status == RUN_OK and r.score == 100 for r in results)
    by_kind = {r.component: r for r in results}
    assert by_kind["KEYBOARD"].label == "AT Translated Set 2 keyboard"
    assert by_kind["USB"].metrics["devices"] == 2
    assert by_kind["WEBCAM"].metrics["names"] == ["video0", "video1"]
    assert by_kind["AUDIO"].metrics["devices"] == 1


def test_shared_command_runs_once(fake, make_probe):
    script_linux(fake)
    make_probe(PeripheralsProbe, "linux").probe()
    input_argv = tuple(COMMANDS[("peripherals", "linux")]["keyboard"])
    assert fake.calls.count(input_argv) == 1


def test_absent_webcam_is_left_out(fake, make_probe):
    script_linux(fake, dev="autofs\nnull\nzero")
    kinds = [r.component for r in make_probe(PeripheralsProbe, "linux").probe()]
    assert "WEBCAM" not in kinds


def test_denied_kind_is_never_probed(fake, make_probe):
    script_linux(fake)
    results = make_probe(PeripheralsProbe, "linux", AuditConfig(deny={"webcam"})).probe()
    assert "WEBCAM" not in [r.component for r in results]
    assert ("ls", "/dev") not in fake.calls


def test_windows_status_and_failures(fake, make_probe):
    fake.on("peripherals", "windows", "keyboard", "Name=Enhanced (101- or 102-key)\nStatus=OK")
    fake.on("peripherals", "windows", "touchpad",
            "Name=HID-compliant mouse\nStatus=OK\n\nName=Synaptics SMBus TouchPad\nStatus=OK")
    fake.on("peripherals", "windows", "webcam", "FriendlyName : Integrated Webcam\nStatus       : Error")
    fake.on("peripherals", "windows", "audio", "Name=Realtek Audio\nStatus=OK")
    by_kind = {r.component: r for r in make_probe(PeripheralsProbe, "windows").probe()}
    assert by_kind["TOUCHPAD"].metrics["names"] == ["Synaptics SMBus TouchPad"]
    assert by_kind["WEBCAM"].score == 40
    assert by_kind["WEBCAM"].metrics["failing"] == ["Integrated Webcam"]
    assert by_kind["USB"].status == RUN_FAILED
    assert by_kind["USB"].score == 50
    assert by_kind["AUDIO"].score == 100


def test_macos(fake, make_probe):
    fake.on("peripherals", "macos", "keyboard", """\
SPI:

    Apple Internal Keyboard / Trackpad:

      Vendor ID: 0x05ac

USB:

    USB 3.1 Bus:

      Host Controller Driver: AppleT8103USBXHCI
""")
    fake.on("peripherals", "macos", "usb", "USB:\n\n    USB 3.1 Bus:\n\n      Host Controller Driver: AppleT8103USBXHCI")
    fake.on("peripherals", "macos", "webcam", """\
Camera:

    FaceTime HD Camera:

      Model ID: UVC Camera VendorID_1452 ProductID_34068
""")
    fake.on("peripherals", "macos", "audio", """\
Audio:

    Devices:

        MacBook Pro Speakers:

          Default Output Device: Yes
          Output Channels: 2
""")
    by_kind = {r.component: r for r in make_probe(PeripheralsProbe, "macos").probe()}
    assert set(by_kind) == {"KEYBOARD", "TOUCHPAD", "USB", "WEBCAM", "AUDIO"}
    assert by_kind["TOUCHPAD"].label == "Apple Internal Keyboard / Trackpad"
    assert by_kind["WEBCAM"].label == "FaceTime HD Camera"
    assert by_kind["AUDIO"].label == "MacBook Pro Speakers"

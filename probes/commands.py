"""
Capability table: which native command each probe runs on each platform.

Keyed by (probe name, platform). Templates may contain `{placeholders}`
filled in by the probe (device names, ping host). A probe whose name has no
entry for the detected platform is not applicable there; a command key
missing from a probe's entry marks the metrics it feeds as unsupported on
that platform.
"""

LINUX = "linux"
MACOS = "macos"
WINDOWS = "windows"

_WMIC_TEMP = ["wmic", "/namespace:\\\\root\\wmi", "PATH", "MSAcpi_ThermalZoneTemperature",
              "get", "CurrentTemperature", "/format:list"]
_NVIDIA_SMI = ["nvidia-smi", "--query-gpu=name,temperature.gpu,utilization.gpu",
               "--format=csv,noheader,nounits"]
_POWERMETRICS_SMC = ["powermetrics", "--samplers", "smc", "-i1", "-n1"]
_WIN_BATTERY = (
    "$s = Get-CimInstance -Namespace root/wmi -ClassName BatteryStaticData;"
    "$f = Get-CimInstance -Namespace root/wmi -ClassName BatteryFullChargedCapacity;"
    "$c = Get-CimInstance -Namespace root/wmi -ClassName BatteryCycleCount;"
    "'DesignedCapacity : ' + $s.DesignedCapacity;"
    "'FullChargedCapacity : ' + $f.FullChargedCapacity;"
    "'CycleCount : ' + $c.CycleCount;"
    "'DeviceName : ' + $s.DeviceName"
)

COMMANDS: dict[tuple[str, str], dict[str, list[str]]] = {
    # -- CPU --
    ("cpu", LINUX): {
        "model": ["cat", "/proc/cpuinfo"],
        # fallback when psutil finds no CPU sensor chip
        "temperature": ["cat", "/sys/class/thermal/thermal_zone0/temp"],
    },
    ("cpu", MACOS): {
        "model": ["sysctl", "-n", "machdep.cpu.brand_string"],
        "temperature": _POWERMETRICS_SMC,
        "usage": ["top", "-l", "2", "-n", "0"],
    },
    ("cpu", WINDOWS): {
        "model": ["wmic", "cpu", "get", "Name", "/format:list"],
        "temperature": _WMIC_TEMP,
        "usage": ["wmic", "cpu", "get", "LoadPercentage", "/format:list"],
    },
    # -- RAM --
    ("ram", LINUX): {
        "modules": ["dmidecode", "-t", "memory"],
        "errors": ["cat", "/sys/devices/system/edac/mc/mc0/ce_count",
                   "/sys/devices/system/edac/mc/mc0/ue_count"],
    },
    ("ram", MACOS): {
        "modules": ["system_profiler", "SPMemoryDataType"],
    },
    ("ram", WINDOWS): {
        "modules": ["wmic", "memorychip", "get", "Capacity,Speed,SMBIOSMemoryType", "/format:list"],
    },
    # -- Storage --
    ("storage", LINUX): {
        "list": ["lsblk", "-J", "-d", "-o", "NAME,SIZE,TYPE,ROTA,TRAN,MODEL"],
        "smart": ["smartctl", "-a", "/dev/{device}"],
    },
    ("storage", MACOS): {
        "list": ["diskutil", "list", "physical"],
        "info": ["diskutil", "info", "{device}"],
        "smart": ["smartctl", "-a", "/dev/{device}"],
    },
    ("storage", WINDOWS): {
        "list": ["wmic", "diskdrive", "get", "Index,Model,Size,MediaType,Status", "/format:list"],
        "smart": ["smartctl", "-a", "/dev/pd{device}"],
    },
    # -- Battery --
    ("battery", LINUX): {
        "list": ["ls", "/sys/class/power_supply"],
        "info": ["cat", "/sys/class/power_supply/{device}/uevent"],
    },
    ("battery", MACOS): {
        "list": ["system_profiler", "SPPowerDataType"],
        "info": ["ioreg", "-rn", "AppleSmartBattery"],
    },
    ("battery", WINDOWS): {
        "list": ["wmic", "path", "Win32_Battery", "get", "DeviceID,Name", "/format:list"],
        "info": ["powershell", "-NoProfile", "-Command", _WIN_BATTERY],
    },
    # -- Screen --
    ("screen", LINUX): {
        "displays": ["xrandr", "--query"],
    },
    ("screen", MACOS): {
        "displays": ["system_profiler", "SPDisplaysDataType"],
    },
    ("screen", WINDOWS): {
        "displays": ["wmic", "path", "Win32_VideoController", "get",
                     "Name,CurrentHorizontalResolution,CurrentVerticalResolution", "/format:list"],
    },
    # -- GPU --
    ("gpu", LINUX): {
        "adapters": ["lspci", "-k"],
        "sensors": _NVIDIA_SMI,
    },
    ("gpu", MACOS): {
        "adapters": ["system_profiler", "SPDisplaysDataType"],
    },
    ("gpu", WINDOWS): {
        "adapters": ["wmic", "path", "Win32_VideoController", "get",
                     "Name,AdapterRAM,DriverVersion,Status", "/format:list"],
        "sensors": _NVIDIA_SMI,
    },
    # -- Network --
    ("network", LINUX): {
        "latency": ["ping", "-c", "1", "-W", "2", "{host}"],
    },
    ("network", MACOS): {
        "latency": ["ping", "-c", "1", "-t", "2", "{host}"],
    },
    ("network", WINDOWS): {
        "latency": ["ping", "-n", "1", "-w", "2000", "{host}"],
    },
    # -- Fan --
    ("fan", LINUX): {
        "sensors": ["sensors"],
    },
    ("fan", MACOS): {
        "sensors": _POWERMETRICS_SMC,
    },
    ("fan", WINDOWS): {
        "sensors": ["wmic", "path", "Win32_Fan", "get", "Name,Status", "/format:list"],
    },
    # -- Peripherals --
    ("peripherals", LINUX): {
        "keyboard": ["cat", "/proc/bus/input/devices"],
        "touchpad": ["cat", "/proc/bus/input/devices"],
        "usb": ["lsusb"],
        "webcam": ["ls", "/dev"],
        "audio": ["aplay", "-l"],
    },
    ("peripherals", MACOS): {
        "keyboard": ["system_profiler", "SPSPIDataType", "SPUSBDataType"],
        "touchpad": ["system_profiler", "SPSPIDataType", "SPUSBDataType"],
        "usb": ["system_profiler", "SPUSBDataType"],
        "webcam": ["system_profiler", "SPCameraDataType"],
        "audio": ["system_profiler", "SPAudioDataType"],
    },
    ("peripherals", WINDOWS): {
        "keyboard": ["wmic", "path", "Win32_Keyboard", "get", "Name,Status", "/format:list"],
        "touchpad": ["wmic", "path", "Win32_PointingDevice", "get", "Name,Status", "/format:list"],
        "usb": ["wmic", "path", "Win32_USBController", "get", "Name,Status", "/format:list"],
        "webcam": ["powershell", "-NoProfile", "-Command",
                   "Get-PnpDevice -Class Camera,Image -PresentOnly | Format-List FriendlyName,Status"],
        "audio": ["wmic", "sounddev", "get", "Name,Status", "/format:list"],
    },
}


# machine identity is not a probe, but it is resolved the same way
IDENTITY_COMMANDS: dict[str, dict[str, list[str]]] = {
    LINUX: {
        "manufacturer": ["cat", "/sys/devices/virtual/dmi/id/sys_vendor"],
        "model": ["cat", "/sys/devices/virtual/dmi/id/product_name"],
        "serial_number": ["cat", "/sys/devices/virtual/dmi/id/product_serial"],
        "bios_version": ["cat", "/sys/devices/virtual/dmi/id/bios_version"],
    },
    MACOS: {
        "hardware": ["system_profiler", "SPHardwareDataType"],
    },
}


def commands_for(probe: str, platform: str) -> dict[str, list[str]] | None:
    return COMMANDS.get((probe, platform))

import psutil


def get_cpu_info():
    """
        Core counts and clock speeds from psutil.
        Used by the CPU probe for the metrics no native command is needed for.
        cpu_freq() can be None (some VMs, Apple Silicon), those keys are then left out.
    """
    cpu_info = {
        "cores": psutil.cpu_count(logical=False),
        "threads": psutil.cpu_count(logical=True),
    }
    freq = psutil.cpu_freq()
    if freq is not None:
        if freq.current:
            cpu_info["freq_mhz"] = round(freq.current)
        if freq.max:
            cpu_info["freq_max_mhz"] = round(freq.max)
    return {k: v for k, v in cpu_info.items() if v is not None}


def get_memory_info():
    """Installed and in-use memory in GB."""
    mem = psutil.virtual_memory()
    return {
        "total_gb": round(mem.total / (1024 ** 3), 1),
        "used_gb": round((mem.total - mem.available) / (1024 ** 3), 1),
    }


def get_cpu_usage(interval=1.0):
    """System-wide CPU usage in percent, sampled over `interval` seconds (blocks)."""
    return round(psutil.cpu_percent(interval=interval), 1)


# thermal_zone0 is often the chassis or the PCH, these chips belong to the CPU
CPU_SENSOR_CHIPS = ("coretemp", "k10temp", "zenpower", "cpu_thermal")
PACKAGE_LABELS = ("Package", "Tdie", "Tctl")


def get_cpu_temperature():
    """
        CPU package temperature in °C from the CPU's own sensor chip, or None.
        sensors_temperatures() only exists on Linux and FreeBSD.
    """
    sensors = getattr(psutil, "sensors_temperatures", None)
    if sensors is None:
        return None
    chips = sensors()
    for chip in CPU_SENSOR_CHIPS:
        entries = chips.get(chip)
        if not entries:
            continue
        for prefix in PACKAGE_LABELS:
            for entry in entries:
                if entry.label.startswith(prefix):
                    return round(entry.current, 1)
        # per-core readings only
        return round(max(entry.current for entry in entries), 1)
    return None

"""
    Report formatting functions
"""
from core.models import AuditResult, ComponentResult, RUN_OK

MACHINE_LABELS = {
    "hostname": "Hostname",
    "manufacturer": "Manufacturer",
    "model": "Model",
    "serial_number": "Serial",
    "bios_version": "BIOS",
    "os_name": "OS",
    "os_version": "OS version",
    "architecture": "Architecture",
    "uptime_s": "Uptime",
}


def format_uptime(seconds):
    if seconds is None:
        return None
    days, rest = divmod(int(seconds), 86400)
    hours, rest = divmod(rest, 3600)
    minutes = rest // 60
    return f"{days}d {hours}h {minutes}m" if days else f"{hours}h {minutes}m"


def print_helper(print_line, dict_item):
    print(f"\n{print_line}:")
    for key, value in dict_item.items():
        if value is not None:
            print(f"  {key}: {value}")


def format_component(result: ComponentResult, verbose=False):
    name = result.component + (f" ({result.label})" if result.label else "")
    line = f"  {result.score:>3}/100  {name}"
    if result.status != RUN_OK:
        line += f"  [{result.status}]"
    lines = [line]
    if result.notes:
        lines.append(f"           {result.notes}")
    if verbose:
        for key, value in result.metrics.items():
            lines.append(f"           {key}: {value}")
    return "\n".join(lines)


def print_report(report: AuditResult, verbose=False):
    machine = {}
    for attr, label in MACHINE_LABELS.items():
        value = getattr(report.machine, attr)
        machine[label] = format_uptime(value) if attr == "uptime_s" else value
    print_helper("System Information", machine)

    print("\nComponents:")
    if not report.components:
        print("  no component could be tested")
    for result in report.components:
        print(format_component(result, verbose))

    print(f"\nGlobal score: {report.score_global}/100 ({report.verdict})")
    print(f"Audit duration: {report.duration_ms} ms")

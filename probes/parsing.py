"""
Text extraction helpers shared by the probes.

Native tools print three shapes we care about:
  - "Key : Value" / "Key: Value" lines (system_profiler, ioreg, powershell Format-List)
  - "Key=Value" records separated by blank lines (wmic ... /format:list)
  - whitespace tables (smartctl attributes, lspci, /proc files)

Helpers return None for anything they cannot read; callers decide whether
that is a ParseFailure or simply an absent field.
"""
import re
from typing import Any

from core.errors import ParseFailure

_INT_RE = re.compile(r"-?\d+")
_FLOAT_RE = re.compile(r"-?\d+(?:\.\d+)?")


def int_or_none(v: Any) -> int | None:
    if v is None:
        return None
    if isinstance(v, bool):
        return int(v)
    if isinstance(v, int):
        return v
    m = _INT_RE.search(str(v).replace(",", ""))
    return int(m.group()) if m else None


def float_or_none(v: Any) -> float | None:
    if v is None:
        return None
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return float(v)
    m = _FLOAT_RE.search(str(v).replace(",", ""))
    return float(m.group()) if m else None


def require(value, what: str):
    """Turn a None extraction into a ParseFailure."""
    if value is None:
        raise ParseFailure(f"could not read {what}")
    return value


def key_values(text: str, sep: str = ":") -> dict[str, str]:
    """
    Parse "Key <sep> Value" lines into a dict.
    First occurrence wins, which matches "first device" semantics of most tools.
    """
    kv: dict[str, str] = {}
    for line in text.splitlines():
        s = line.strip()
        if sep not in s:
            continue
        key, val = s.split(sep, 1)
        key = key.strip(' \t|"')
        val = val.strip()
        if key and key not in kv:
            kv[key] = val
    return kv


def records(text: str, sep: str = "=") -> list[dict[str, str]]:
    """
    Parse blank-line separated records (wmic /format:list, Format-List).
    Records with no non-empty value are dropped.
    """
    out: list[dict[str, str]] = []
    current: dict[str, str] = {}
    for line in text.splitlines() + [""]:
        s = line.strip()
        if not s:
            if any(current.values()):
                out.append(current)
            current = {}
            continue
        if sep not in s:
            continue
        key, val = s.split(sep, 1)
        current[key.strip()] = val.strip()
    return out


def search(pattern: str, text: str, flags: int = 0) -> str | None:
    m = re.search(pattern, text, flags)
    return m.group(1).strip() if m else None


def bytes_to_gb(n: int | float | None, ndigits: int = 1) -> float | None:
    if n is None:
        return None
    return round(n / (1024 ** 3), ndigits)

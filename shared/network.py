from typing import Any
import psutil
import socket

_LOOPBACK_PREFIXES = ("lo", "Loopback")
_WIFI_HINTS = ("wl", "wi-fi", "wifi", "wireless", "airport")


def _family_to_label(fam: object) -> str:
    """
    Convert a psutil "address family" value into a human-readable label.

    psutil returns families as platform-specific values (enums / ints):
      - AF_INET   -> IPv4
      - AF_INET6  -> IPv6
      - AF_LINK   -> MAC (macOS/BSD)
      - AF_PACKET -> MAC (Linux)
    """
    if fam == socket.AF_INET:
        return "IPv4"
    if fam == socket.AF_INET6:
        return "IPv6"

    # MAC address family differs per OS; the enum name tells us.
    name = getattr(fam, "name", None)
    if isinstance(name, str) and ("LINK" in name or "PACKET" in name):
        return "MAC"
    return str(fam)


def get_net_addr() -> list[dict[str, Any]]:
    """
    Return a JSON-friendly inventory of network interfaces.

    Data sources:
      - psutil.net_if_addrs(): interface name -> address entries (MAC/IPv4/IPv6)
      - psutil.net_if_stats(): interface name -> isup / speed (Mbps) / mtu

    Output shape (per interface):
      {
        "name": "en0",
        "isup": True,
        "speed_mbps": 1000,       # 0 when the driver does not say
        "addresses": [{"family": "IPv4", "address": "192.168.1.10"}, ...]
      }
    """
    results: list[dict[str, Any]] = []
    if_addr = psutil.net_if_addrs()
    if_stats = psutil.net_if_stats()

    for iface_name, addr_list in if_addr.items():
        # Some interfaces (odd/virtual ones) have no stats entry.
        stats = if_stats.get(iface_name)
        results.append({
            "name": iface_name,
            "isup": bool(stats and stats.isup),
            "speed_mbps": stats.speed if stats else 0,
            "addresses": [
                {"family": _family_to_label(a.family), "address": a.address}
                for a in addr_list
            ],
        })
    return results


def is_loopback(iface: dict[str, Any]) -> bool:
    if iface["name"].startswith(_LOOPBACK_PREFIXES):
        return True
    ips = [a["address"] for a in iface["addresses"] if a["family"] in ("IPv4", "IPv6")]
    return bool(ips) and all(ip.startswith("127.") or ip == "::1" for ip in ips)


def guess_link_type(name: str, sc_type: str | None = None) -> str:
    if sc_type:
        return "WiFi" if sc_type == "IEEE80211" else "Ethernet"
    return "WiFi" if name.lower().startswith(_WIFI_HINTS) else "Ethernet"


def primary_interface(interfaces: list[dict[str, Any]]) -> dict[str, Any] | None:
    """First physical interface that is up and holds an IPv4 address, else the first up one."""
    candidates = [i for i in interfaces if not is_loopback(i)]
    up = [i for i in candidates if i["isup"]]
    with_ip = [i for i in up if any(a["family"] == "IPv4" for a in i["addresses"])]
    for group in (with_ip, up, candidates):
        if group:
            return group[0]
    return None

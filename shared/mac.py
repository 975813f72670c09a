"""
    macOS specific helpers (pyobjc).
"""


def get_mac_network_info():
    """
    Interface display names and types from SystemConfiguration.
    Returns {bsd_name: {"name": "Wi-Fi", "type": "IEEE80211"}}.
    """
    import SystemConfiguration

    network_info = {}
    for network in SystemConfiguration.SCNetworkInterfaceCopyAll():
        bsd_name = SystemConfiguration.SCNetworkInterfaceGetBSDName(network)
        if not bsd_name:
            continue
        network_info[str(bsd_name)] = {
            "name": str(SystemConfiguration.SCNetworkInterfaceGetLocalizedDisplayName(network) or bsd_name),
            "type": str(SystemConfiguration.SCNetworkInterfaceGetInterfaceType(network) or ""),
        }
    return network_info

def get_windows_machine_info():
    """
        Machine identity on Windows using WMI.
        Identity and Context - who/what is this Windows machine.

        Returns:
            dict: manufacturer, model, serial number, BIOS version and OS caption/version.
    """
    import wmi

    c = wmi.WMI()
    system = c.Win32_ComputerSystem()[0]
    bios = c.Win32_BIOS()[0]
    os_info = c.Win32_OperatingSystem()[0]
    return {
        "manufacturer": system.Manufacturer,
        "model": system.Model,
        "serial_number": bios.SerialNumber,
        "bios_version": bios.SMBIOSBIOSVersion,
        "os_name": os_info.Caption,
        "os_version": os_info.Version,
        "architecture": os_info.OSArchitecture,
    }

"""
    Shared utility functions for local system identification.
"""
import platform


def get_os():
    """
        Returns a short key for the current operating system.
        Used as a switch for OS-specific command flags (ping differs per OS).
    """
    operating_system = platform.system()
    switcher = {
        "Windows": "windows",
        "Linux": "linux",
        "Darwin": "mac",
    }
    return switcher.get(operating_system, "unknown")

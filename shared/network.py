import logging
import socket
import subprocess

import psutil

from helpers.commands import run_cmd
from shared.system import get_os

logger = logging.getLogger(__name__)

LOOPBACK_NAMES = {"localhost", ".", "127.0.0.1", "::1"}


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

    # MAC address family differs per OS. Sometimes the family is an Enum
    # whose .name contains "AF_LINK" (macOS/BSD) or "AF_PACKET" (Linux).
    name = getattr(fam, "name", None)
    if isinstance(name, str) and ("LINK" in name or "PACKET" in name):
        return "MAC"

    return str(fam)


def local_addresses() -> set[str]:
    """
    Every IP address bound to a local interface, lower-cased.

    Data source is psutil.net_if_addrs(): interface name -> list of address
    entries. MAC entries are dropped. IPv6 link-local addresses carry a
    "%scope" suffix on some platforms, which is stripped.
    """
    addresses: set[str] = set()
    for addr_list in psutil.net_if_addrs().values():
        for a in addr_list:
            if _family_to_label(a.family) not in ("IPv4", "IPv6"):
                continue
            addresses.add(a.address.split("%", 1)[0].lower())
    return addresses


def local_names() -> set[str]:
    hostname = socket.gethostname().lower()
    names = {hostname, hostname.split(".", 1)[0]}
    fqdn = socket.getfqdn().lower()
    if fqdn:
        names.add(fqdn)
    return names


def is_local_target(name: str) -> bool:
    """True when the target name refers to the machine running the assessment."""
    candidate = name.strip().lower()
    if candidate in LOOPBACK_NAMES:
        return True
    if candidate in local_names():
        return True
    return candidate in local_addresses()


def _ping_command(target: str, timeout_s: int) -> list[str]:
    if get_os() == "windows":
        # -w is in milliseconds on Windows
        return ["ping", "-n", "1", "-w", str(timeout_s * 1000), target]
    return ["ping", "-c", "1", "-W", str(timeout_s), target]


def is_reachable(target: str, timeout_s: int = 2) -> bool:
    """Single ICMP echo; True when the host answered."""
    cmd = _ping_command(target, timeout_s)
    try:
        rc, stdout, _stderr = run_cmd(cmd, timeout_s=timeout_s + 5)
    except subprocess.TimeoutExpired:
        logger.debug("ping to %s timed out", target)
        return False
    except OSError as e:
        logger.warning("ping to %s could not run: %s", target, e)
        return False
    logger.debug("ping %s rc=%s", target, rc)
    if rc != 0:
        return False
    if get_os() == "windows":
        # rc is 0 when a gateway answers "Destination host unreachable"
        return "TTL=" in stdout.upper()
    return True

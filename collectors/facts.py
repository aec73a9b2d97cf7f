"""
    Host fact collection.

    Hardware and Capacity - what is inside the target machine, asked through
    a QueryTransport so the same collector works for WMI or a test double.
"""
import logging
from typing import Any, Callable, Protocol

from core.errors import QueryError, TransportError, Unreachable
from core.models import RawFacts, Target
from shared.network import is_reachable

logger = logging.getLogger(__name__)


class QueryTransport(Protocol):
    def query(
        self,
        target: str,
        wmi_class: str,
        properties: list[str],
        where: str | None = None,
    ) -> list[dict[str, Any]]: ...

    def create_process(self, target: str, command_line: str) -> int: ...


def _as_int(value: Any) -> int:
    # WMI reports uint64 values (Capacity, FreeSpace) as strings; an empty slot counts as 0
    if value is None or value == "":
        return 0
    return int(value)


def _required_int(target: Target, query: str, row: dict[str, Any], prop: str) -> int:
    value = row.get(prop)
    if value is None or value == "":
        raise QueryError(target.name, query, f"{prop} missing")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise QueryError(target.name, query, f"{prop} is not a number: {value!r}") from e


class FactCollector:
    def __init__(
        self,
        transport: QueryTransport,
        reachable: Callable[[str], bool] = is_reachable,
    ):
        self.transport = transport
        self.reachable = reachable

    def _run_query(
        self,
        target: Target,
        query: str,
        wmi_class: str,
        properties: list[str],
        where: str | None = None,
    ) -> list[dict[str, Any]]:
        try:
            rows = self.transport.query(target.name, wmi_class, properties, where)
        except TransportError as e:
            raise QueryError(target.name, query, str(e)) from e
        logger.debug("%s: %s returned %d row(s)", target, wmi_class, len(rows))
        return rows

    def collect(self, target: Target) -> RawFacts:
        """
            Gather processor, memory, OS and system-volume facts for one host.

            Raises Unreachable when the host does not answer the reachability
            check and QueryError naming the first query that failed. A partial
            fact set is never returned.
        """
        if not self.reachable(target.name):
            raise Unreachable(target.name)

        processors = self._run_query(
            target, "processor", "Win32_Processor",
            ["AddressWidth", "DataWidth", "MaxClockSpeed"],
        )
        if not processors:
            raise QueryError(target.name, "processor", "no processor reported")

        # Win32_ComputerSystem.TotalPhysicalMemory under-reports, so sum the modules
        modules = self._run_query(
            target, "memory", "Win32_PhysicalMemory", ["Capacity"],
        )
        total_memory = sum(_as_int(m.get("Capacity")) for m in modules)

        systems = self._run_query(
            target, "operating_system", "Win32_OperatingSystem",
            ["Caption", "SystemDrive"],
        )
        if not systems:
            raise QueryError(target.name, "operating_system", "no operating system reported")
        os_info = systems[0]
        system_drive = os_info.get("SystemDrive") or "C:"

        volumes = self._run_query(
            target, "system_volume", "Win32_LogicalDisk", ["DeviceID", "FreeSpace"],
            where=f"DeviceID = '{system_drive}'",
        )
        if not volumes:
            raise QueryError(target.name, "system_volume", f"volume {system_drive} not found")

        cpu = processors[0]
        return RawFacts(
            target=target,
            address_width=_required_int(target, "processor", cpu, "AddressWidth"),
            data_width=_required_int(target, "processor", cpu, "DataWidth"),
            max_clock_mhz=max(
                _required_int(target, "processor", p, "MaxClockSpeed") for p in processors
            ),
            total_memory_bytes=total_memory,
            free_disk_bytes=_required_int(target, "system_volume", volumes[0], "FreeSpace"),
            os_caption=os_info.get("Caption") or "",
            system_drive=system_drive,
        )

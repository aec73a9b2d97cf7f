import logging
import threading
from typing import Any

import pythoncom
import wmi

from core.errors import TransportError

logger = logging.getLogger(__name__)


class WmiTransport:
    """
        Query and process-creation transport over WMI.

        Connections are cached per worker thread and per host: COM objects
        must not cross threads, and each thread needs CoInitialize before
        it may touch WMI. Hosts are reached with the credentials of the
        account running the assessment.
    """

    def __init__(self):
        self._local = threading.local()

    def _connect(self, target: str):
        connections = getattr(self._local, "connections", None)
        if connections is None:
            pythoncom.CoInitialize()
            connections = self._local.connections = {}
        if target not in connections:
            try:
                connections[target] = wmi.WMI(computer=target)
            except wmi.x_wmi as e:
                raise TransportError(f"cannot connect to {target}: {e}") from e
            logger.debug("opened WMI connection to %s", target)
        return connections[target]

    def query(
        self,
        target: str,
        wmi_class: str,
        properties: list[str],
        where: str | None = None,
    ) -> list[dict[str, Any]]:
        """Run a WQL SELECT and return one dict per instance."""
        c = self._connect(target)
        wql = f"SELECT {', '.join(properties)} FROM {wmi_class}"
        if where:
            wql = f"{wql} WHERE {where}"
        try:
            instances = c.query(wql)
        except wmi.x_wmi as e:
            raise TransportError(f"{wql} failed on {target}: {e}") from e

        rows = []
        for instance in instances:
            rows.append({prop: getattr(instance, prop, None) for prop in properties})
        return rows

    def create_process(self, target: str, command_line: str) -> int:
        """
            Start a process on the target through Win32_Process.Create.
            Returns the method's ReturnValue; 0 means the process started.
        """
        c = self._connect(target)
        try:
            process_id, return_value = c.Win32_Process.Create(CommandLine=command_line)
        except wmi.x_wmi as e:
            raise TransportError(f"Win32_Process.Create failed on {target}: {e}") from e
        logger.debug("%s: started pid=%s rv=%s: %s", target, process_id, return_value, command_line)
        return int(return_value)

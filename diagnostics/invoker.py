"""
    Runs the external capability diagnostic tool (dxdiag) against a host and
    returns the raw report it wrote.

    Two synchronization strategies, picked per target:
      - local:  spawn the tool, block until it exits, read the temp file.
      - remote: Win32_Process.Create on the host, then poll the admin share
                until the report appears or the timeout elapses.

    Each remote run writes to its own uniquely named file, so two runs
    against the same host never share an output path.
"""
from __future__ import annotations

import logging
import os
import subprocess
import tempfile
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PureWindowsPath
from typing import Callable

from collectors.facts import QueryTransport
from core.errors import (
    InvocationRejected,
    InvocationTimeout,
    MalformedOutput,
    TransportError,
)
from helpers.commands import run_cmd
from shared.files import FileAccess
from shared.network import is_local_target

logger = logging.getLogger(__name__)

DEFAULT_TOOL = "dxdiag"
DEFAULT_TIMEOUT_S = 30.0
DEFAULT_POLL_INTERVAL_S = 1.0
DEFAULT_REMOTE_DIRECTORY = r"C:\Windows\Temp"


class InvocationState(str, Enum):
    NOT_STARTED = "not_started"
    LAUNCHED = "launched"
    SUCCEEDED = "succeeded"
    REJECTED = "rejected"
    TIMED_OUT = "timed_out"


_TRANSITIONS = {
    InvocationState.NOT_STARTED: {InvocationState.LAUNCHED, InvocationState.REJECTED},
    InvocationState.LAUNCHED: {
        InvocationState.SUCCEEDED,
        InvocationState.REJECTED,
        InvocationState.TIMED_OUT,
    },
}


@dataclass
class Invocation:
    target: str
    local: bool | None = None
    output_path: str | None = None
    state: InvocationState = InvocationState.NOT_STARTED
    history: list[InvocationState] = field(default_factory=list)

    def advance(self, new_state: InvocationState) -> None:
        allowed = _TRANSITIONS.get(self.state, set())
        if new_state not in allowed:
            raise RuntimeError(
                f"invalid invocation transition {self.state.value} -> {new_state.value}"
            )
        self.history.append(self.state)
        self.state = new_state
        logger.debug("%s: invocation %s", self.target, new_state.value)

    @property
    def finished(self) -> bool:
        return self.state in (
            InvocationState.SUCCEEDED,
            InvocationState.REJECTED,
            InvocationState.TIMED_OUT,
        )


def _read_report(target: str, read: Callable[[], bytes]) -> bytes:
    try:
        return read()
    except OSError as e:
        raise MalformedOutput(f"{target}: could not read diagnostic report: {e}") from e


class DiagnosticInvoker:
    def __init__(
        self,
        transport: QueryTransport,
        files: FileAccess,
        tool: str = DEFAULT_TOOL,
        timeout: float = DEFAULT_TIMEOUT_S,
        poll_interval: float = DEFAULT_POLL_INTERVAL_S,
        remote_directory: str = DEFAULT_REMOTE_DIRECTORY,
        is_local: Callable[[str], bool] = is_local_target,
        runner: Callable[..., tuple[int, str, str]] = run_cmd,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.transport = transport
        self.files = files
        self.tool = tool
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.remote_directory = remote_directory
        self.is_local = is_local
        self.runner = runner
        self.clock = clock
        self.sleep = sleep

    def tool_args(self, output_path: str) -> list[str]:
        return [self.tool, "/whql:off", "/x", output_path]

    def invoke(self, target: str) -> bytes:
        """Run the tool against target and return the report bytes."""
        return self.run(Invocation(target=target))

    def run(self, invocation: Invocation) -> bytes:
        if invocation.state is not InvocationState.NOT_STARTED:
            raise RuntimeError(f"invocation for {invocation.target} already started")
        invocation.local = self.is_local(invocation.target)
        if invocation.local:
            return self._run_local(invocation)
        return self._run_remote(invocation)

    def _run_local(self, invocation: Invocation) -> bytes:
        fd, path = tempfile.mkstemp(prefix="capability-report-", suffix=".xml")
        os.close(fd)
        invocation.output_path = path
        output = Path(path)
        cmd = self.tool_args(path)
        try:
            invocation.advance(InvocationState.LAUNCHED)
            try:
                rc, stdout, stderr = self.runner(cmd, timeout_s=None)
            except OSError as e:
                invocation.advance(InvocationState.REJECTED)
                raise InvocationRejected(invocation.target, None, str(e)) from e
            if rc != 0:
                logger.debug("local tool run failed: rc=%s stdout=%r stderr=%r", rc, stdout, stderr)
                invocation.advance(InvocationState.REJECTED)
                raise InvocationRejected(invocation.target, rc, stderr)
            invocation.advance(InvocationState.SUCCEEDED)
            return _read_report(invocation.target, output.read_bytes)
        finally:
            try:
                output.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("could not remove %s: %s", path, e)

    def remote_output_path(self) -> str:
        name = f"capability-report-{uuid.uuid4().hex}.xml"
        return str(PureWindowsPath(self.remote_directory, name))

    def _run_remote(self, invocation: Invocation) -> bytes:
        target = invocation.target
        path = self.remote_output_path()
        invocation.output_path = path
        command_line = subprocess.list2cmdline(self.tool_args(path))

        try:
            return_value = self.transport.create_process(target, command_line)
        except TransportError as e:
            invocation.advance(InvocationState.REJECTED)
            raise InvocationRejected(target, None, str(e)) from e
        if return_value != 0:
            invocation.advance(InvocationState.REJECTED)
            raise InvocationRejected(target, return_value)
        invocation.advance(InvocationState.LAUNCHED)

        deadline = self.clock() + self.timeout
        while not self._output_present(target, path):
            if self.clock() >= deadline:
                invocation.advance(InvocationState.TIMED_OUT)
                # the tool may still finish and write the report later
                self._cleanup_remote(target, path)
                raise InvocationTimeout(target, path, self.timeout)
            self.sleep(self.poll_interval)

        invocation.advance(InvocationState.SUCCEEDED)
        try:
            return _read_report(target, lambda: self.files.read_bytes(target, path))
        finally:
            self._cleanup_remote(target, path)

    def _output_present(self, target: str, path: str) -> bool:
        try:
            return self.files.exists(target, path)
        except OSError as e:
            logger.debug("%s: share check for %s failed: %s", target, path, e)
            return False

    def _cleanup_remote(self, target: str, path: str) -> None:
        try:
            self.files.delete(target, path)
        except FileNotFoundError:
            logger.debug("%s: %s already gone", target, path)
        except OSError as e:
            logger.warning("%s: could not remove %s: %s", target, path, e)

"""Pytest configuration and fixtures."""

import logging

import pytest

from core.errors import TransportError
from core.models import GIB, RawFacts, RequirementProfile, Target
from helpers.verbose import LOGGER_ROOTS

DXDIAG_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<DxDiag>
  <SystemInformation>
    <MachineName>WS01</MachineName>
    <DirectXVersion>DirectX 11</DirectXVersion>
  </SystemInformation>
  <DisplayDevices>
    <DisplayDevice>
      <CardName>Intel(R) HD Graphics 4000</CardName>
      <DriverModel>WDDM 1.2</DriverModel>
    </DisplayDevice>
  </DisplayDevices>
</DxDiag>
"""


def default_rows():
    return {
        "Win32_Processor": [
            {"AddressWidth": 64, "DataWidth": 64, "MaxClockSpeed": 2000},
        ],
        "Win32_PhysicalMemory": [
            {"Capacity": str(1 * GIB)},
            {"Capacity": str(1 * GIB)},
        ],
        "Win32_OperatingSystem": [
            {"Caption": "Microsoft Windows 7 Professional", "SystemDrive": "C:"},
        ],
        "Win32_LogicalDisk": [
            {"DeviceID": "C:", "FreeSpace": str(21 * GIB)},
        ],
    }


class FakeTransport:
    """In-memory QueryTransport. per_target overrides rows for named hosts."""

    def __init__(self, rows=None, per_target=None, fail_on=None, create_result=0):
        self.rows = rows if rows is not None else default_rows()
        self.per_target = per_target or {}
        self.fail_on = fail_on
        self.create_result = create_result
        self.queries = []
        self.processes = []

    def query(self, target, wmi_class, properties, where=None):
        self.queries.append((target, wmi_class, where))
        if wmi_class == self.fail_on:
            raise TransportError(f"access denied for {wmi_class}")
        rows = self.per_target.get(target, self.rows)
        return [dict(r) for r in rows.get(wmi_class, [])]

    def create_process(self, target, command_line):
        self.processes.append((target, command_line))
        if isinstance(self.create_result, Exception):
            raise self.create_result
        return self.create_result


class FakeFiles:
    """
    In-memory FileAccess.

    appear_after: number of exists() calls that report False before the
    file shows up. None means it never shows up.
    """

    def __init__(self, content=DXDIAG_XML, appear_after=0, delete_error=None):
        self.content = content
        self.appear_after = appear_after
        self.delete_error = delete_error
        self.exists_calls = 0
        self.read = []
        self.deleted = []

    def exists(self, target, path):
        self.exists_calls += 1
        if self.appear_after is None:
            return False
        return self.exists_calls > self.appear_after

    def read_bytes(self, target, path):
        self.read.append((target, path))
        return self.content

    def delete(self, target, path):
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted.append((target, path))


class FakeClock:
    """Monotonic clock that only moves when sleep() is called."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture(autouse=True)
def cleanup_loggers():
    """Undo setup_logger() after each test so caplog still sees records."""
    yield

    for name in LOGGER_ROOTS:
        logger = logging.getLogger(name)
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
        logger.propagate = True


@pytest.fixture
def fake_transport():
    return FakeTransport


@pytest.fixture
def fake_files():
    return FakeFiles


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def dxdiag_xml():
    return DXDIAG_XML


@pytest.fixture
def profile():
    return RequirementProfile()


@pytest.fixture
def make_facts():
    def _make(**overrides):
        values = dict(
            target=Target("ws01"),
            address_width=64,
            data_width=64,
            max_clock_mhz=2000,
            total_memory_bytes=2 * GIB,
            free_disk_bytes=21 * GIB,
            os_caption="Microsoft Windows 7 Professional",
            system_drive="C:",
        )
        values.update(overrides)
        return RawFacts(**values)

    return _make

"""
    Parser for the XML report written by `dxdiag /x <file>`.

    Only two fields matter for the assessment:
      - DxDiag/SystemInformation/DirectXVersion   e.g. "DirectX 12"
      - DxDiag/DisplayDevices/DisplayDevice/DriverModel   e.g. "WDDM 2.7"

    Report files come from remote hosts, so parsing goes through defusedxml.
"""
import re
from xml.etree.ElementTree import ParseError

import defusedxml.ElementTree as DefusedET
from defusedxml import DefusedXmlException

from core.errors import MalformedOutput
from core.models import DiagnosticReport

INTERFACE_VERSION_PATH = "SystemInformation/DirectXVersion"
DRIVER_MODEL_PATH = "DisplayDevices/DisplayDevice/DriverModel"

INTERFACE_VERSION_PREFIX = "DirectX"
DRIVER_MODEL_PREFIX = "WDDM"

_NUMBER = re.compile(r"^\d+(\.\d+)?$")


def numeric_version(text: str, prefix: str = "") -> float | None:
    """
        Strip the textual prefix and read what is left as a number.

        Returns None for anything that is not a plain number ("Unknown",
        "12.x", empty). None is the explicit "cannot compare" value that the
        evaluator treats as requirement not met.
    """
    value = text.strip()
    if prefix and value.lower().startswith(prefix.lower()):
        value = value[len(prefix):].strip()
    if not _NUMBER.match(value):
        return None
    return float(value)


def _field(root, path: str) -> str:
    node = root.find(path)
    if node is None:
        raise MalformedOutput(f"report has no {path} element")
    return (node.text or "").strip()


def parse_report(raw: bytes) -> DiagnosticReport:
    """Parse dxdiag XML output. Raises MalformedOutput when it is unusable."""
    if not raw or not raw.strip():
        raise MalformedOutput("report is empty")
    try:
        root = DefusedET.fromstring(raw)
    except (ParseError, DefusedXmlException) as e:
        raise MalformedOutput(f"report is not valid XML: {e}") from e
    if root.tag != "DxDiag":
        raise MalformedOutput(f"unexpected root element <{root.tag}>")

    interface_text = _field(root, INTERFACE_VERSION_PATH)
    driver_text = _field(root, DRIVER_MODEL_PATH)
    return DiagnosticReport(
        interface_version_text=interface_text,
        driver_model_text=driver_text,
        interface_version=numeric_version(interface_text, INTERFACE_VERSION_PREFIX),
        driver_model_version=numeric_version(driver_text, DRIVER_MODEL_PREFIX),
    )

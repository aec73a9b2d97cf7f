import pytest

from core.errors import MalformedOutput
from diagnostics.dxdiag import numeric_version, parse_report


def test_parse_report_extracts_versions(dxdiag_xml):
    report = parse_report(dxdiag_xml)

    assert report.interface_version_text == "DirectX 11"
    assert report.driver_model_text == "WDDM 1.2"
    assert report.interface_version == 11.0
    assert report.driver_model_version == 1.2


def test_parse_report_uses_first_display_device():
    raw = b"""<DxDiag>
      <SystemInformation><DirectXVersion>DirectX 12</DirectXVersion></SystemInformation>
      <DisplayDevices>
        <DisplayDevice><DriverModel>WDDM 2.7</DriverModel></DisplayDevice>
        <DisplayDevice><DriverModel>WDDM 1.0</DriverModel></DisplayDevice>
      </DisplayDevices>
    </DxDiag>"""
    assert parse_report(raw).driver_model_version == 2.7


def test_non_numeric_version_is_kept_but_not_comparable():
    raw = b"""<DxDiag>
      <SystemInformation><DirectXVersion>Unknown</DirectXVersion></SystemInformation>
      <DisplayDevices><DisplayDevice><DriverModel>WDDM 1.1</DriverModel></DisplayDevice></DisplayDevices>
    </DxDiag>"""
    report = parse_report(raw)

    assert report.interface_version_text == "Unknown"
    assert report.interface_version is None
    assert report.driver_model_version == 1.1


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"   \n",
        b"<DxDiag><SystemInformation>",
        b"not xml at all",
        b"<Other/>",
    ],
)
def test_unusable_output_is_malformed(raw):
    with pytest.raises(MalformedOutput):
        parse_report(raw)


def test_missing_driver_model_is_malformed():
    raw = b"""<DxDiag>
      <SystemInformation><DirectXVersion>DirectX 11</DirectXVersion></SystemInformation>
      <DisplayDevices/>
    </DxDiag>"""
    with pytest.raises(MalformedOutput, match="DriverModel"):
        parse_report(raw)


def test_entity_expansion_is_refused():
    raw = b"""<?xml version="1.0"?>
<!DOCTYPE DxDiag [<!ENTITY a "aaaaaaaaaa"><!ENTITY b "&a;&a;&a;&a;&a;">]>
<DxDiag><SystemInformation><DirectXVersion>&b;</DirectXVersion></SystemInformation></DxDiag>"""
    with pytest.raises(MalformedOutput):
        parse_report(raw)


@pytest.mark.parametrize(
    "text, prefix, expected",
    [
        ("DirectX 9", "DirectX", 9.0),
        ("directx 12", "DirectX", 12.0),
        ("WDDM 1.3", "WDDM", 1.3),
        (" 2.0 ", "WDDM", 2.0),
        ("WDDM", "WDDM", None),
        ("12.x", "DirectX", None),
        ("Unknown", "WDDM", None),
        ("", "", None),
    ],
)
def test_numeric_version(text, prefix, expected):
    assert numeric_version(text, prefix) == expected

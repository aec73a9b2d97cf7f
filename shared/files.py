"""
    Remote file access through a host's administrative share.

    A path such as C:\\Windows\\Temp\\out.xml on host "ws01" is reached as
    \\\\ws01\\C$\\Windows\\Temp\\out.xml.
"""
from pathlib import Path, PureWindowsPath
from typing import Protocol


class FileAccess(Protocol):
    def exists(self, target: str, path: str) -> bool: ...

    def read_bytes(self, target: str, path: str) -> bytes: ...

    def delete(self, target: str, path: str) -> None: ...


def admin_share_path(target: str, path: str, share: str | None = None) -> PureWindowsPath:
    """
        Map a drive-rooted path on the target to its UNC form.
        share defaults to the drive's hidden admin share (C: -> C$).
    """
    local = PureWindowsPath(path)
    if not local.drive or not local.drive.endswith(":"):
        raise ValueError(f"expected a drive-rooted path, got {path!r}")
    share_name = share or f"{local.drive[0].upper()}$"
    rest = local.parts[1:]
    return PureWindowsPath(f"\\\\{target}\\{share_name}\\", *rest)


class AdminShareFiles:
    def __init__(self, share: str | None = None):
        self.share = share

    def _resolve(self, target: str, path: str) -> Path:
        return Path(str(admin_share_path(target, path, self.share)))

    def exists(self, target: str, path: str) -> bool:
        return self._resolve(target, path).exists()

    def read_bytes(self, target: str, path: str) -> bytes:
        return self._resolve(target, path).read_bytes()

    def delete(self, target: str, path: str) -> None:
        self._resolve(target, path).unlink()

"""Extraction of zip archives into a directory, guarding against path traversal."""

from __future__ import annotations

import io
import os
import zipfile
from collections.abc import Callable

_RWE_PERM = 0o755
_DEFAULT_FILE_PERM = 0o644


def sanitize_archive_path(dir_path: str, file_name: str) -> str:
    """Return the destination of file_name inside dir_path, refusing paths that escape it."""
    dest_path = os.path.normpath(dir_path + os.sep + file_name)
    if dest_path.startswith(os.path.normpath(dir_path)):
        return dest_path
    raise ValueError(f"content filepath is tainted: {file_name}")


def _file_mode(info: zipfile.ZipInfo) -> int:
    mode = (info.external_attr >> 16) & 0o777
    return mode or _DEFAULT_FILE_PERM


def _extract_member(archive: zipfile.ZipFile, info: zipfile.ZipInfo, dir_path: str, keep: Callable[[str], bool]) -> None:
    dest_path = sanitize_archive_path(dir_path, info.filename)
    if info.filename.endswith("/"):
        os.makedirs(dest_path, mode=_RWE_PERM, exist_ok=True)
        return

    data = archive.read(info)
    if not keep(dest_path):
        return

    fd = os.open(dest_path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _file_mode(info))
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)


def unzip_to_dir(data: bytes, dir_path: str, keep: Callable[[str], bool]) -> None:
    """Extract the zip archive data into dir_path, creating it if needed.

    Only files whose destination path satisfies keep are written.
    """
    os.makedirs(dir_path, mode=_RWE_PERM, exist_ok=True)
    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        for info in archive.infolist():
            _extract_member(archive, info, dir_path, keep)
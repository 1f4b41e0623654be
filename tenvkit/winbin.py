"""Executable naming on Windows."""

from __future__ import annotations

import sys
from typing import TextIO

SUFFIX = ".exe"


def _on_windows() -> bool:
    return sys.platform == "win32"


def binary_name(exec_name: str) -> str:
    """Return exec_name with the executable suffix added on Windows."""
    return exec_name + SUFFIX if _on_windows() else exec_name


def write_suffix_to(writer: TextIO) -> int:
    """Write the executable suffix on Windows; return the number of characters written."""
    if not _on_windows():
        return 0
    return writer.write(SUFFIX)
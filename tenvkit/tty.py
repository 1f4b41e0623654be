"""Terminal detection for an output stream."""

from __future__ import annotations

import io
import os
import stat
import sys
from typing import TextIO

MSG_DETECT_ERR = "Failed to detect TTY mode, assume output is redirected :"


def detect(stream: TextIO | None = None) -> bool:
    """Tell whether stream (standard output by default) is a character device."""
    if stream is None:
        stream = sys.stdout
    try:
        mode = os.fstat(stream.fileno()).st_mode
    except (OSError, ValueError, AttributeError, io.UnsupportedOperation) as err:
        print(MSG_DETECT_ERR, err)
        return False
    return stat.S_ISCHR(mode)
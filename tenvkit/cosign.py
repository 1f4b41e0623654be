"""Signature verification by calling the cosign executable."""

from __future__ import annotations

import contextlib
import os
import shutil
import subprocess
import tempfile

from tenvkit.loghelper import Displayer, Level

COSIGN_EXEC_NAME = "cosign"
VERIFIED = "Verified OK"


class CosignError(Exception):
    """cosign did not confirm the signature."""

    def __init__(self, message: str = "cosign check failed") -> None:
        super().__init__(message)


class CosignNotInstalledError(Exception):
    """The cosign executable is not on the PATH."""

    def __init__(self, message: str = "cosign executable not found") -> None:
        super().__init__(message)


def _temp_file(stack: contextlib.ExitStack, name: str, data: bytes) -> str:
    fd, path = tempfile.mkstemp(prefix=name)
    stack.callback(_remove_quietly, path)
    with os.fdopen(fd, "wb") as handle:
        handle.write(data)
    return path


def _remove_quietly(path: str) -> None:
    with contextlib.suppress(OSError):
        os.remove(path)


def check(
    data: bytes,
    data_sig: bytes,
    data_cert: bytes,
    cert_identity: str,
    cert_oidc_issuer: str,
    displayer: Displayer,
) -> None:
    """Verify data against its signature and certificate with cosign; raise on failure."""
    executable = shutil.which(COSIGN_EXEC_NAME)
    if executable is None:
        raise CosignNotInstalledError()

    with contextlib.ExitStack() as stack:
        data_path = _temp_file(stack, "data", data)
        sig_path = _temp_file(stack, "data.sig", data_sig)
        cert_path = _temp_file(stack, "data.cert", data_cert)

        args = [
            executable,
            "verify-blob",
            "--certificate-identity", cert_identity,
            "--signature", sig_path,
            "--certificate", cert_path,
            "--certificate-oidc-issuer", cert_oidc_issuer,
            data_path,
        ]
        try:
            completed = subprocess.run(args, capture_output=True, text=True, check=False)
            stdout, stderr = completed.stdout or "", completed.stderr or ""
        except OSError:
            stdout, stderr = "", ""

    displayer.log(Level.DEBUG, "cosign output", "stdOut", stdout, "stdErr", stderr)

    if VERIFIED not in stderr:
        raise CosignError()
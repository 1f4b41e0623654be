"""Run a tool as a child process, forwarding I/O, interrupts and its exit status.

Under GitHub Actions the child's output and exit code are also written to the
GITHUB_OUTPUT file.
"""

from __future__ import annotations

import codecs
import contextlib
import os
import random
import signal
import subprocess
import sys
import threading
from collections.abc import Callable, Iterator, Sequence
from typing import IO, NoReturn, TextIO

GITHUB_OUTPUT = "GITHUB_OUTPUT"
DELIMITER_PREFIX = "ghadelimeter_"

_RW_PERM = 0o600
_CHUNK_SIZE = 4096


class DelimiterError(ValueError):
    """The key or value contains the multiline delimiter."""

    def __init__(self, message: str = "key and value should not contains delimiter") -> None:
        super().__init__(message)


def write_multiline(stream: TextIO, key: str, value: str) -> None:
    """Write a key and a multiline value in GitHub Actions output syntax."""
    delimiter = DELIMITER_PREFIX + str(random.randint(0, 2**63 - 1))
    if delimiter in key or delimiter in value:
        raise DelimiterError()
    stream.write(f"{key}<<{delimiter}\n{value}\n{delimiter}\n")


def _report_failure(path: str, err: object, exit_code: int) -> int:
    print("Failure during", path, "call :", err)
    return exit_code or 1


class _Tee(threading.Thread):
    """Copies a child's pipe to a text stream while keeping what passed through."""

    def __init__(self, source: IO[bytes], target: TextIO) -> None:
        super().__init__(daemon=True)
        self._source = source
        self._target = target
        self._chunks: list[bytes] = []

    def run(self) -> None:
        decoder = codecs.getincrementaldecoder("utf-8")("replace")
        with self._source:
            for chunk in iter(lambda: self._source.read1(_CHUNK_SIZE), b""):
                self._chunks.append(chunk)
                self._target.write(decoder.decode(chunk))
                self._target.flush()
        self._target.write(decoder.decode(b"", final=True))
        self._target.flush()

    @property
    def text(self) -> str:
        return b"".join(self._chunks).decode("utf-8", "replace")


@contextlib.contextmanager
def _forward_interrupts(process: subprocess.Popen) -> Iterator[None]:
    """Pass the first interrupt on to the child, kill it on the following ones."""
    interrupted = False

    def handler(signum: int, frame: object) -> None:
        nonlocal interrupted
        with contextlib.suppress(OSError, ValueError):
            if interrupted:
                process.kill()
            else:
                process.send_signal(signal.SIGINT)
        interrupted = True

    try:
        previous = signal.signal(signal.SIGINT, handler)
        installed = True
    except ValueError:
        # Handlers can only be installed from the main thread.
        previous, installed = None, False
    try:
        yield
    finally:
        if installed:
            signal.signal(signal.SIGINT, previous)


def _open_github_output(getenv: Callable[[str], str]) -> TextIO | None:
    try:
        fd = os.open(getenv(GITHUB_OUTPUT) or "", os.O_APPEND | os.O_CREAT | os.O_WRONLY, _RW_PERM)
    except OSError as err:
        print("Ignore GITHUB_ACTIONS, fail to open GITHUB_OUTPUT :", err)
        return None
    return os.fdopen(fd, "a", encoding="utf-8")


def _spawn(cmd: Sequence[str], capture: bool) -> tuple[int, str, str]:
    """Run cmd and return its exit code with the captured stdout and stderr."""
    path = cmd[0]
    pipe = subprocess.PIPE if capture else None
    try:
        process = subprocess.Popen(list(cmd), stdout=pipe, stderr=pipe)
    except (OSError, ValueError) as err:
        return _report_failure(path, err, 0), "", ""

    tees: list[_Tee] = []
    if capture:
        tees = [_Tee(process.stdout, sys.stdout), _Tee(process.stderr, sys.stderr)]
        for tee in tees:
            tee.start()

    with _forward_interrupts(process):
        exit_code = process.wait()

    for tee in tees:
        tee.join()
    if tees:
        return exit_code, tees[0].text, tees[1].text
    return exit_code, "", ""


def _write_outputs(stream: TextIO, path: str, exit_code: int, out: str, err: str) -> int:
    try:
        write_multiline(stream, "stderr", err)
        write_multiline(stream, "stdout", out)
        write_multiline(stream, "exitcode", str(exit_code))
    except (DelimiterError, OSError) as error:
        return _report_failure(path, error, exit_code)

    if exit_code not in (0, 2):
        return _report_failure(path, f"exited with code {exit_code}", exit_code)
    return exit_code


def _execute(cmd: Sequence[str], gha: bool, getenv: Callable[[str], str]) -> int:
    output = _open_github_output(getenv) if gha else None
    if output is None:
        return _spawn(cmd, capture=False)[0]

    with output:
        exit_code, out, err = _spawn(cmd, capture=True)
        return _write_outputs(output, cmd[0], exit_code, out, err)


def run(cmd: Sequence[str], gha: bool, getenv: Callable[[str], str]) -> NoReturn:
    """Run cmd and exit with its exit status; never returns."""
    sys.exit(_execute(cmd, gha, getenv))
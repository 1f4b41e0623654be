import os
import subprocess
from unittest import mock

import pytest

from tenvkit.cosign import CosignError, CosignNotInstalledError, check
from tenvkit.loghelper import INERT_DISPLAYER, Displayer, Level

IDENTITY = "https://github.com/opentofu/opentofu/.github/workflows/release.yml@refs/heads/v1.6"
ISSUER = "https://token.actions.githubusercontent.com"

DATA = b"0123abcd  tofu_1.6.0_linux_amd64.zip\n"
DATA_SIG = b"signature-bytes-placeholder"
DATA_CERT = b"-----BEGIN CERTIFICATE-----\nplaceholder\n-----END CERTIFICATE-----\n"


class _Recorder(Displayer):
    def __init__(self):
        self.logs = []

    def display(self, msg):
        pass

    def is_debug(self):
        return True

    def log(self, level, msg, *args):
        self.logs.append((level, msg, args))

    def flush(self, log_mode):
        pass


class _FakeCosign:
    """Accepts only the expected identity, issuer and unaltered files."""

    def __init__(self):
        self.calls = []

    def __call__(self, args, **kwargs):
        files = {}
        for flag in ("--signature", "--certificate"):
            with open(args[args.index(flag) + 1], "rb") as handle:
                files[flag] = handle.read()
        with open(args[-1], "rb") as handle:
            files["data"] = handle.read()
        self.calls.append((list(args), files))
        identity = args[args.index("--certificate-identity") + 1]
        issuer = args[args.index("--certificate-oidc-issuer") + 1]
        valid = (
            identity == IDENTITY
            and issuer == ISSUER
            and files["--signature"] == DATA_SIG
            and files["--certificate"] == DATA_CERT
            and files["data"] == DATA
        )
        stderr = "Verified OK\n" if valid else "error: none of the expected identities matched\n"
        return subprocess.CompletedProcess(args, 0 if valid else 1, stdout="", stderr=stderr)


@mock.patch("shutil.which", return_value="/usr/local/bin/cosign")
def test_cosign_check_correct(_which):
    fake = _FakeCosign()
    recorder = _Recorder()
    with mock.patch("subprocess.run", side_effect=fake):
        assert check(DATA, DATA_SIG, DATA_CERT, IDENTITY, ISSUER, recorder) is None

    args, files = fake.calls[0]
    assert args[:3] == ["/usr/local/bin/cosign", "verify-blob", "--certificate-identity"]
    assert files == {"--signature": DATA_SIG, "--certificate": DATA_CERT, "data": DATA}
    assert not any(os.path.exists(path) for path in (args[5], args[7], args[-1]))
    assert recorder.logs == [(Level.DEBUG, "cosign output", ("stdOut", "", "stdErr", "Verified OK\n"))]


@pytest.mark.parametrize(
    "data_sig, data_cert, identity, issuer",
    [
        (DATA_SIG, DATA_CERT[1:], IDENTITY, ISSUER),
        (DATA_SIG, DATA_CERT, "me", ISSUER),
        (DATA_SIG, DATA_CERT, IDENTITY, "http://myself.com"),
        (DATA_SIG[1:], DATA_CERT, IDENTITY, ISSUER),
    ],
)
@mock.patch("shutil.which", return_value="/usr/local/bin/cosign")
def test_cosign_check_errors(_which, data_sig, data_cert, identity, issuer):
    fake = _FakeCosign()
    with mock.patch("subprocess.run", side_effect=fake):
        with pytest.raises(CosignError):
            check(DATA, data_sig, data_cert, identity, issuer, INERT_DISPLAYER)
    args, _ = fake.calls[0]
    assert not os.path.exists(args[-1])


@mock.patch("shutil.which", return_value=None)
def test_cosign_not_installed(_which):
    with mock.patch("subprocess.run") as run:
        with pytest.raises(CosignNotInstalledError):
            check(DATA, DATA_SIG, DATA_CERT, IDENTITY, ISSUER, INERT_DISPLAYER)
    assert run.call_count == 0


@mock.patch("shutil.which", return_value="/usr/local/bin/cosign")
def test_cosign_launch_failure_is_check_failure(_which):
    with mock.patch("subprocess.run", side_effect=OSError("cannot launch")):
        with pytest.raises(CosignError):
            check(DATA, DATA_SIG, DATA_CERT, IDENTITY, ISSUER, INERT_DISPLAYER)
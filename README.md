# tenvkit

Building blocks for a command-line version manager of infrastructure tools
(OpenTofu, Terraform, Terragrunt and Atmos): reading settings from the
environment, resolving remote mirrors, listing releases from GitHub or from an
HTML index, downloading and checking artifacts, unpacking archives, and running
a tool as a child process.

## Installation

```
pip install tenvkit
```

For running the test suite:

```
pip install "tenvkit[test]"
pytest
```

## Modules at a glance

| Module | Purpose |
| --- | --- |
| `tenvkit.names` | Tool names and the API error classes (`ApiError`, `AssetNotFoundError`, `UnexpectedReturnError`, `RateLimitError`). |
| `tenvkit.envutils` | `Getenv`: environment lookups with fallbacks and strict boolean parsing (`parse_bool`). |
| `tenvkit.loghelper` | `Displayer` implementations: `BasicDisplayer`, `InertDisplayer` and `RecordingDisplayer` (holds messages back until `flush`). |
| `tenvkit.sorting` | `reverser`: flip a three-way comparison function. |
| `tenvkit.pathfilter` | `name_equal`: match a path by its last component (`/` or `\` separated). |
| `tenvkit.winbin` | `binary_name`: add `.exe` on Windows. |
| `tenvkit.tty` | `detect`: is the output stream a character device? |
| `tenvkit.download` | `fetch_bytes`, `fetch_json`, request options and URL rewriting for mirrors. |
| `tenvkit.htmlquery` | Extract text or attribute values from an HTML listing with a CSS selector. |
| `tenvkit.github` | `list_releases` and `asset_download_urls` through the GitHub REST API, paging through results. |
| `tenvkit.remote` | `RemoteConfig`: remote URL, list URL, install and list modes, and rewrite rules. |
| `tenvkit.archive` | `unzip_to_dir`: zip extraction with a path filter, refusing paths that escape the target directory. |
| `tenvkit.checksum` | `check_sha256` against a `SHA256SUMS` listing. |
| `tenvkit.cosign` | Verify a blob with the `cosign` executable found on the `PATH`. |
| `tenvkit.cmdproxy` | `run`: start a tool, forward interrupts, exit with its status, and record its output for GitHub Actions. |
| `tenvkit.changelog_check` | The `tenvkit-changelog-check` command described below. |

## Examples

### Reading settings from the environment

```python
import os
from tenvkit.envutils import Getenv

getenv = Getenv(os.environ.get)
root = getenv.fallback("TENV_ROOT", "TOFUENV_ROOT", "TFENV_ROOT")
auto_install = getenv.bool_fallback(False, "TENV_AUTO_INSTALL", "TOFUENV_AUTO_INSTALL")
```

An unparsable boolean raises `ValueError`.

### Rewriting download URLs for a mirror

```python
from tenvkit.download import new_url_transformer

transform = new_url_transformer("https://releases.example.com", "http://localhost:8080")
transform("https://releases.example.com/terraform/1.7.0/terraform_1.7.0_linux_386.zip")
# 'http://localhost:8080/terraform/1.7.0/terraform_1.7.0_linux_386.zip'
```

URLs that do not start with the old base are returned unchanged.

### Remote configuration

```python
from tenvkit.remote import default_remote_config

conf = default_remote_config("https://api.example.com/repos/tool/releases", "https://example.com")
conf.remote_url()    # the default URL, without trailing slash
conf.install_mode()  # "api"
conf.list_mode()     # "api"
```

A URL set in `forced_remote_url` wins over one from the environment, which
wins over the `data` mapping read from a configuration file, which wins over
the default.

### Checking a download

```python
from tenvkit.checksum import check_sha256, ChecksumError, NoChecksumError

try:
    check_sha256(archive_bytes, sums_bytes, "tofu_1.6.0_linux_amd64.zip")
except NoChecksumError:
    ...  # the sums listing has no line for this file name
except ChecksumError:
    ...  # the digest does not match
```

### Unpacking an archive

```python
from tenvkit.archive import unzip_to_dir
from tenvkit.pathfilter import name_equal

unzip_to_dir(zip_bytes, "/path/to/versions/1.6.0", name_equal("tofu"))
```

Only members whose destination path satisfies the filter are written;
directory entries are always created.

## Changelog check

The package ships a small command for pull-request pipelines. It verifies that
a pull request adds `.changelog/<number>.txt`, unless the pull request carries
the `workflow/skip-changelog-entry` or `dependencies` label, and comments on
the pull request accordingly:

```
tenvkit-changelog-check 123
```

It reads `GITHUB_OWNER`, `GITHUB_REPO` and `GITHUB_TOKEN` from the environment
and exits with status 0 when a changelog entry is present (or not required),
and 1 otherwise.

## What the package does not do

- It has no version manager command of its own: there is no `install`, `use`,
  `list` or `uninstall` command, and no detection of the version required by a
  project. The modules are the pieces such a command is built from.
- It does not serialise concurrent installs: no lock file is taken around
  work in a versions directory.
- It does not verify PGP signatures; signature checks go through `cosign` only.
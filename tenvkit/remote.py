"""Remote locations of tool releases: defaults, environment, flags and a config file."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from tenvkit.download import RequestOption, URLTransformer, new_url_transformer, no_transform, with_basic_auth
from tenvkit.envutils import Getenv

INSTALL_MODE_DIRECT = "direct"
LIST_MODE_HTML = "html"
MODE_API = "api"

SLASH_RELEASES = "/releases"
BASE_GITHUB_URL = "https://github.com"
DEFAULT_GITHUB_URL = "https://api.github.com/repos/"
DEFAULT_HASHICORP_URL = "https://releases.hashicorp.com"
DEFAULT_TERRAGRUNT_GITHUB_URL = DEFAULT_GITHUB_URL + "gruntwork-io/terragrunt" + SLASH_RELEASES
DEFAULT_TOFU_GITHUB_URL = DEFAULT_GITHUB_URL + "opentofu/opentofu" + SLASH_RELEASES
DEFAULT_ATMOS_GITHUB_URL = DEFAULT_GITHUB_URL + "cloudposse/atmos" + SLASH_RELEASES


class UnknownInstallModeError(ValueError):
    """The configured install mode is not supported."""

    def __init__(self, message: str = "unknown install mode") -> None:
        super().__init__(message)


class UnknownListModeError(ValueError):
    """The configured list mode is not supported."""

    def __init__(self, message: str = "unknown list mode") -> None:
        super().__init__(message)


def map_get_default(mapping: Mapping[str, str] | None, key: str, default: str) -> str:
    """Return the stripped value under key, or default when it is missing or blank."""
    value = (mapping or {}).get(key, "").strip()
    return value or default


@dataclass
class RemoteConfig:
    """Where a tool's releases are listed and installed from.

    A value given by flag beats one from the environment, which beats one from
    the configuration file data, which beats the default.
    """

    default_url: str
    default_base_url: str
    data: dict[str, str] | None = field(default_factory=dict)
    install_mode_env: str = ""
    list_mode_env: str = ""
    list_url_env: str = ""
    remote_url_env: str = ""
    forced_remote_url: str = ""

    def _value(self, name: str, forced: str, default: str) -> str:
        return forced or map_get_default(self.data, name, default)

    def remote_url(self) -> str:
        url = self.forced_remote_url or self._value("url", self.remote_url_env, self.default_url)
        return url.rstrip("/")

    def list_url(self) -> str:
        return self._value("list_url", self.list_url_env, self.remote_url()).rstrip("/")

    def install_mode(self) -> str:
        default = MODE_API
        if self.default_base_url == BASE_GITHUB_URL and self.remote_url() != self.default_url:
            default = INSTALL_MODE_DIRECT
        return self._value("install_mode", self.install_mode_env, default)

    def list_mode(self) -> str:
        default = MODE_API if self.list_url() == self.default_url else LIST_MODE_HTML
        return self._value("list_mode", self.list_mode_env, default)

    def rewrite_rule(self) -> URLTransformer:
        """Return the transformer applied to download URLs found while listing."""
        data = self.data or {}
        old_base = data.get("old_base_url", "")
        new_base = data.get("new_base_url", "")
        if old_base and new_base:
            return new_url_transformer(old_base, new_base)

        if self.install_mode() == INSTALL_MODE_DIRECT:
            return no_transform

        list_url = self.list_url()
        remote_url = self.remote_url()
        default_list = list_url == self.default_url
        default_remote = remote_url == self.default_url
        if default_list and default_remote:
            return no_transform

        return new_url_transformer(self.default_base_url, remote_url if default_list else list_url)


def default_remote_config(default_url: str, default_base_url: str) -> RemoteConfig:
    return RemoteConfig(default_url=default_url, default_base_url=default_base_url)


def remote_config_from_env(
    getenv: Getenv,
    remote_url_env: str,
    list_url_env: str,
    install_mode_env: str,
    list_mode_env: str,
    default_url: str,
    default_base_url: str,
) -> RemoteConfig:
    """Build a remote configuration reading the named environment variables."""
    return RemoteConfig(
        default_url=default_url,
        default_base_url=default_base_url,
        install_mode_env=getenv(install_mode_env),
        list_mode_env=getenv(list_mode_env),
        list_url_env=getenv(list_url_env),
        remote_url_env=getenv(remote_url_env),
    )


def basic_auth_options(getenv: Getenv, user_env: str, pass_env: str) -> list[RequestOption]:
    """Return a basic authorization option when both user and password are set."""
    username, secret = getenv(user_env), getenv(pass_env)
    if not username or not secret:
        return []
    return [with_basic_auth(username, secret)]
"""Reading releases and release assets from the GitHub REST API."""

from __future__ import annotations

import itertools
import re
from collections.abc import Callable, Iterable, MutableMapping, Sequence
from typing import Any

import urllib.request

from tenvkit.download import _join_path, fetch_json, no_display
from tenvkit.names import MSG_FETCH_RELEASE, AssetNotFoundError, RateLimitError, UnexpectedReturnError

DOWNLOAD = "download"
RELEASES = "releases"

PAGE_QUERY = "?page="

_VERSION_PATTERN = re.compile(r"\d+(?:\.\d+){0,2}(?:-[0-9A-Za-z.\-]+)?(?:\+[0-9A-Za-z.\-]+)?")


def _find_version(value: str) -> str:
    match = _VERSION_PATTERN.search(value)
    return match.group(0) if match else ""


def _authorization_header(token: str) -> str:
    return "Bearer " + token if token else ""


def _check_rate_limit(response: Any) -> None:
    if response.headers.get("X-Ratelimit-Remaining") == "0":
        raise RateLimitError()


def _api_get(call_url: str, authorization: str) -> Any:
    def set_headers(request: urllib.request.Request) -> None:
        request.add_header("Accept", "application/vnd.github+json")
        if authorization:
            request.add_header("Authorization", authorization)
        request.add_header("X-GitHub-Api-Version", "2022-11-28")

    return fetch_json(call_url, no_display, _check_rate_limit, set_headers)


def extract_assets(
    assets: MutableMapping[str, str],
    searched: Iterable[str],
    waited: int,
    value: Any,
) -> bool:
    """Record the download URLs of searched assets found in one page of results.

    Return True once waited assets are known, False when the next page is needed.
    """
    if not isinstance(value, list):
        raise UnexpectedReturnError()
    if not value:
        raise AssetNotFoundError()

    searched_set = set(searched)
    for item in value:
        name = item.get("name") if isinstance(item, dict) else None
        if not isinstance(name, str):
            raise UnexpectedReturnError()
        if name not in searched_set:
            continue

        download_url = item.get("browser_download_url")
        if not isinstance(download_url, str):
            raise UnexpectedReturnError()
        assets[name] = download_url

        if len(assets) == waited:
            return True

    return False


def extract_version(value: Any) -> str:
    """Return the version found in a release's tag name, or an empty string."""
    tag = value.get("tag_name") if isinstance(value, dict) else None
    return _find_version(tag) if isinstance(tag, str) else ""


def extract_releases(releases: Sequence[str], value: Any) -> tuple[list[str], bool]:
    """Add the versions of one page of releases.

    Return the extended list and whether a further page may hold more releases.
    """
    if not isinstance(value, list):
        raise UnexpectedReturnError()
    if not value:
        return list(releases), False

    found = []
    for item in value:
        version = extract_version(item)
        if not version:
            raise UnexpectedReturnError()
        found.append(version)

    return [*releases, *found], True


def asset_download_urls(
    tag: str,
    searched_asset_names: Sequence[str],
    release_url: str,
    token: str,
    display: Callable[[str], None],
) -> list[str]:
    """Return the download URLs of the named assets of the release tagged tag."""
    release_tag_url = _join_path(release_url, "tags", tag)
    display(MSG_FETCH_RELEASE + release_tag_url)

    authorization = _authorization_header(token)
    value = _api_get(release_tag_url, authorization)

    base_assets_url = value.get("assets_url") if isinstance(value, dict) else None
    if not isinstance(base_assets_url, str):
        raise UnexpectedReturnError()

    waited = len(searched_asset_names)
    searched = set(searched_asset_names)
    assets: dict[str, str] = {}
    for page in itertools.count(1):
        page_value = _api_get(f"{base_assets_url}{PAGE_QUERY}{page}", authorization)
        if extract_assets(assets, searched, waited, page_value):
            return [assets[name] for name in searched_asset_names]
    raise AssertionError("unreachable")


def list_releases(release_url: str, token: str) -> list[str]:
    """Return the versions of every release, reading all result pages."""
    authorization = _authorization_header(token)
    releases: list[str] = []
    for page in itertools.count(1):
        value = _api_get(f"{release_url}{PAGE_QUERY}{page}", authorization)
        releases, more = extract_releases(releases, value)
        if not more:
            return releases
    raise AssertionError("unreachable")
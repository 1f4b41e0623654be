import http.server
import json
import threading

import pytest

from tenvkit.github import (
    asset_download_urls,
    extract_assets,
    extract_releases,
    extract_version,
    list_releases,
)
from tenvkit.names import AssetNotFoundError, RateLimitError, UnexpectedReturnError

BASE = "https://github.com/opentofu/opentofu/releases/download/v1.6.0/"

ASSETS = [
    {"name": "tofu_1.6.0_386.apk", "browser_download_url": BASE + "tofu_1.6.0_386.apk"},
    {"name": "tofu_1.6.0_386.deb", "browser_download_url": BASE + "tofu_1.6.0_386.deb"},
    {"name": "tofu_1.6.0_amd64.apk", "browser_download_url": BASE + "tofu_1.6.0_amd64.apk"},
    {"name": "tofu_1.6.0_amd64.apk.gpgsig", "browser_download_url": BASE + "tofu_1.6.0_amd64.apk.gpgsig"},
]

RELEASES = [
    {"tag_name": "v1.6.0", "name": "v1.6.0"},
    {"tag_name": "v1.6.0-rc1", "name": "v1.6.0-rc1"},
    {"tag_name": "v1.6.0-beta5", "name": "v1.6.0-beta5"},
    {"tag_name": "v1.6.0-alpha5", "name": "v1.6.0-alpha5"},
]

RELEASE = {
    "tag_name": "v1.6.0",
    "assets_url": "https://api.github.com/repos/opentofu/opentofu/releases/135322574/assets",
}


class _Handler(http.server.BaseHTTPRequestHandler):
    def do_GET(self):
        self.server.seen.append((self.path, self.headers))
        status, headers, payload = self.server.routes.get(self.path, (404, {}, {"message": "Not Found"}))
        body = json.dumps(payload).encode()
        self.send_response(status)
        for name, value in headers.items():
            self.send_header(name, value)
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, *args):
        pass


@pytest.fixture
def server():
    httpd = http.server.ThreadingHTTPServer(("127.0.0.1", 0), _Handler)
    httpd.routes = {}
    httpd.seen = []
    httpd.url = f"http://127.0.0.1:{httpd.server_address[1]}"
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield httpd
    finally:
        httpd.shutdown()
        httpd.server_close()


def test_extract_assets_empty():
    with pytest.raises(AssetNotFoundError):
        extract_assets({}, {"tofu_1.6.0_386.deb", "tofu_1.6.0_amd64.apk.gpgsig"}, 2, [])


def test_extract_assets_missing():
    assets = {}
    done = extract_assets(assets, {"tofu_1.6.0_386.deb", "any_name.zip"}, 2, ASSETS)
    assert done is False
    assert assets == {"tofu_1.6.0_386.deb": BASE + "tofu_1.6.0_386.deb"}


def test_extract_assets_present():
    assets = {}
    done = extract_assets(assets, {"tofu_1.6.0_386.deb", "tofu_1.6.0_amd64.apk.gpgsig"}, 2, ASSETS)
    assert done is True
    assert assets["tofu_1.6.0_386.deb"] == (
        "https://github.com/opentofu/opentofu/releases/download/v1.6.0/tofu_1.6.0_386.deb"
    )
    assert assets["tofu_1.6.0_amd64.apk.gpgsig"] == (
        "https://github.com/opentofu/opentofu/releases/download/v1.6.0/tofu_1.6.0_amd64.apk.gpgsig"
    )


@pytest.mark.parametrize("value", [{"name": "x"}, [{"id": 1}], [{"name": "a"}], "text"])
def test_extract_assets_bad_shape(value):
    with pytest.raises(UnexpectedReturnError):
        extract_assets({}, {"a"}, 1, value)


def test_extract_releases_empty():
    releases, more = extract_releases(["value"], [])
    assert releases == ["value"]
    assert more is False


def test_extract_releases_present():
    releases, more = extract_releases([], RELEASES)
    assert more is True
    assert sorted(releases) == sorted(["1.6.0-alpha5", "1.6.0-beta5", "1.6.0-rc1", "1.6.0"])


def test_extract_releases_bad_entry():
    with pytest.raises(UnexpectedReturnError):
        extract_releases([], [{"tag_name": "nightly"}])


def test_extract_releases_not_a_list():
    with pytest.raises(UnexpectedReturnError):
        extract_releases([], {"tag_name": "v1.6.0"})


def test_extract_version():
    assert extract_version(RELEASE) == "1.6.0"


def test_extract_version_without_tag():
    assert extract_version({"name": "v1.6.0"}) == ""


def test_list_releases_reads_all_pages(server):
    server.routes["/releases?page=1"] = (200, {}, RELEASES[:2])
    server.routes["/releases?page=2"] = (200, {}, RELEASES[2:])
    server.routes["/releases?page=3"] = (200, {}, [])
    releases = list_releases(server.url + "/releases", "token")
    assert releases == ["1.6.0", "1.6.0-rc1", "1.6.0-beta5", "1.6.0-alpha5"]
    _, headers = server.seen[0]
    assert headers.get("Authorization") == "Bearer token"
    assert headers.get("Accept") == "application/vnd.github+json"


def test_list_releases_without_token_sends_no_authorization(server):
    server.routes["/releases?page=1"] = (200, {}, [])
    assert list_releases(server.url + "/releases", "") == []
    _, headers = server.seen[0]
    assert headers.get("Authorization") is None


def test_rate_limit_raises(server):
    server.routes["/releases?page=1"] = (403, {"X-RateLimit-Remaining": "0"}, {"message": "limit"})
    with pytest.raises(RateLimitError):
        list_releases(server.url + "/releases", "")


def test_asset_download_urls_across_pages(server):
    server.routes["/releases/tags/v1.6.0"] = (200, {}, {"assets_url": server.url + "/assets"})
    server.routes["/assets?page=1"] = (200, {}, ASSETS[:2])
    server.routes["/assets?page=2"] = (200, {}, ASSETS[2:])
    shown = []
    urls = asset_download_urls(
        "v1.6.0",
        ["tofu_1.6.0_amd64.apk.gpgsig", "tofu_1.6.0_386.deb"],
        server.url + "/releases",
        "",
        shown.append,
    )
    assert urls == [BASE + "tofu_1.6.0_amd64.apk.gpgsig", BASE + "tofu_1.6.0_386.deb"]
    assert shown == ["Fetching release information from " + server.url + "/releases/tags/v1.6.0"]


def test_asset_download_urls_missing_asset(server):
    server.routes["/releases/tags/v1.6.0"] = (200, {}, {"assets_url": server.url + "/assets"})
    server.routes["/assets?page=1"] = (200, {}, ASSETS)
    server.routes["/assets?page=2"] = (200, {}, [])
    with pytest.raises(AssetNotFoundError):
        asset_download_urls("v1.6.0", ["any_name.zip"], server.url + "/releases", "", lambda msg: None)


def test_asset_download_urls_without_assets_url(server):
    server.routes["/releases/tags/v1.6.0"] = (200, {}, {"tag_name": "v1.6.0"})
    with pytest.raises(UnexpectedReturnError):
        asset_download_urls("v1.6.0", ["a"], server.url + "/releases", "", lambda msg: None)
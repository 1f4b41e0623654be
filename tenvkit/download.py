"""HTTP downloads with request options, response checks and URL rewriting."""

from __future__ import annotations

import base64
import contextlib
import json
import logging
import posixpath
import urllib.error
import urllib.parse
import urllib.request
from collections.abc import Callable, Iterable
from typing import Any

RequestOption = Callable[[urllib.request.Request], None]
ResponseChecker = Callable[[Any], None]
URLTransformer = Callable[[str], str]

_LOGGER = logging.getLogger(__name__)


def no_display(msg: str) -> None:
    """A display function that shows nothing to the user; the message goes to debug logging."""
    _LOGGER.debug("%s", msg)


def no_check(response: Any) -> None:
    """A response checker that accepts every response."""
    _LOGGER.debug("response accepted without check, status %s", getattr(response, "status", None))


def no_transform(value: str) -> str:
    """The identity URL transformer."""
    return str(value)


def _join_path(base_url: str, *elements: str) -> str:
    """Join path elements onto the path of base_url and clean the result."""
    parts = urllib.parse.urlsplit(base_url)
    elems = [parts.path, *elements]
    rooted = elems[0].startswith("/")
    joined = "/" + "/".join(elem for elem in elems if elem).lstrip("/")
    path = posixpath.normpath(joined)
    if path.startswith("//"):
        path = "/" + path.lstrip("/")
    if not rooted:
        path = path[1:]
    if elems[-1].endswith("/") and not path.endswith("/"):
        path += "/"
    return urllib.parse.urlunsplit(parts._replace(path=path))


def new_url_transformer(prev_base_url: str, base_url: str) -> URLTransformer:
    """Return a transformer replacing the prefix prev_base_url with base_url."""
    if not prev_base_url or not base_url:
        return no_transform

    prev_len = len(prev_base_url)

    def transform(url_value: str) -> str:
        if not url_value.startswith(prev_base_url):
            return url_value
        return _join_path(base_url, url_value[prev_len:])

    return transform


def apply_url_transformer(transformer: URLTransformer, *args: str) -> list[str]:
    """Transform every URL in args, keeping their order."""
    return [transformer(base_url) for base_url in args]


def with_basic_auth(username: str, password: str) -> RequestOption:
    """Return a request option adding a basic authorization header."""
    credentials = base64.b64encode(f"{username}:{password}".encode()).decode("ascii")

    def option(request: urllib.request.Request) -> None:
        request.add_header("Authorization", "Basic " + credentials)

    return option


def fetch_bytes(
    url: str,
    display: Callable[[str], None],
    checker: ResponseChecker,
    *args: RequestOption,
) -> bytes:
    """GET url and return its body; the checker may reject the response by raising."""
    display("Downloading " + url)

    request = urllib.request.Request(url, method="GET")
    options: Iterable[RequestOption] = args
    for option in options:
        option(request)

    try:
        response = urllib.request.urlopen(request)
    except urllib.error.HTTPError as err:
        # Error statuses are still responses: the checker decides about them.
        response = err

    with contextlib.closing(response):
        checker(response)
        return response.read()


def fetch_json(
    url: str,
    display: Callable[[str], None],
    checker: ResponseChecker,
    *args: RequestOption,
) -> Any:
    """GET url and decode its body as JSON."""
    return json.loads(fetch_bytes(url, display, checker, *args))
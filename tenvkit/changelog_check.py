"""Check that a pull request carries a changelog entry, and say so in a comment.

Reads GITHUB_OWNER, GITHUB_REPO and GITHUB_TOKEN from the environment and takes
the pull request number as its only argument. Exits with 0 when a changelog
entry is present or not required, and with 1 otherwise.
"""

from __future__ import annotations

import json
import os
import sys
import urllib.request
from collections.abc import Iterable, Sequence
from typing import Any

API_URL = "https://api.github.com"

CHANGELOG_ENTRY_FILE_FORMAT = ".changelog/{}.txt"
CHANGELOG_PROCESS_DOCUMENTATION = "contributing/changelog-process.md"
CHANGELOG_DETECTED_MESSAGE = "changelog detected :white_check_mark:"
MISSING_MARKER = "no changelog entry is attached to"

SKIP_LABELS = ("workflow/skip-changelog-entry", "dependencies")

MISSING_MESSAGE = (
    "Oops! It looks like no changelog entry is attached to"
    " this PR. Please include a release note as described in "
    + CHANGELOG_PROCESS_DOCUMENTATION
    + ".\n\nExample: "
    "\n\n~~~\n```release-note:TYPE\nRelease note"
    "\n```\n~~~\n\n"
    "If you do not require a release note to be included and you have permission, "
    "please add the `workflow/skip-changelog-entry` label. Otherwise, a maintainer "
    "will add the label or ask you for one when they review the PR."
)


def _log(msg: str) -> None:
    print(msg, file=sys.stderr)


def has_skip_label(label_names: Iterable[str]) -> bool:
    """Tell whether any of the labels makes a changelog entry unnecessary."""
    return any(name in SKIP_LABELS for name in label_names)


def changelog_entry_name(pr_number: int) -> str:
    """Return the path of the changelog entry expected for a pull request."""
    return CHANGELOG_ENTRY_FILE_FORMAT.format(pr_number)


class _GitHubClient:
    """Minimal client for the pull request and issue comment endpoints."""

    def __init__(self, owner: str, repo: str, token: str) -> None:
        self._base = f"{API_URL}/repos/{owner}/{repo}"
        self._token = token

    def _call(self, method: str, path: str, payload: Any = None) -> Any:
        data = None if payload is None else json.dumps(payload).encode()
        request = urllib.request.Request(self._base + path, data=data, method=method)
        request.add_header("Accept", "application/vnd.github+json")
        request.add_header("Authorization", "Bearer " + self._token)
        if data is not None:
            request.add_header("Content-Type", "application/json")
        with urllib.request.urlopen(request) as response:
            body = response.read()
        return json.loads(body) if body else None

    def pull_request(self, number: int) -> dict[str, Any]:
        value = self._call("GET", f"/pulls/{number}")
        return value if isinstance(value, dict) else {}

    def pull_request_files(self, number: int) -> list[dict[str, Any]]:
        return _objects(self._call("GET", f"/pulls/{number}/files"))

    def comments(self, number: int) -> list[dict[str, Any]]:
        return _objects(self._call("GET", f"/issues/{number}/comments"))

    def edit_comment(self, comment_id: int, body: str) -> None:
        self._call("PATCH", f"/issues/comments/{comment_id}", {"body": body})

    def create_comment(self, number: int, body: str) -> None:
        self._call("POST", f"/issues/{number}/comments", {"body": body})


def _objects(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _names(objects: Iterable[dict[str, Any]], key: str) -> list[str]:
    return [value for value in (obj.get(key) for obj in objects) if isinstance(value, str)]


def _run(client: _GitHubClient, owner: str, repo: str, pr_number: int) -> int:
    try:
        pull_request = client.pull_request(pr_number)
    except (OSError, ValueError) as err:
        _log(f"error retrieving pull request {owner}/{repo}#{pr_number}: {err}")
        return 1

    labels = _objects(pull_request.get("labels"))
    for name in _names(labels, "name"):
        if has_skip_label([name]):
            _log(f"{name} label found, exiting as changelog is not required")
            return 0

    try:
        files = client.pull_request_files(pr_number)
    except (OSError, ValueError):
        files = []
    entry_present = changelog_entry_name(pr_number) in _names(files, "filename")

    try:
        comments = client.comments(pr_number)
    except (OSError, ValueError):
        comments = []

    success_already_present = False
    for comment in comments:
        body = comment.get("body")
        body = body if isinstance(body, str) else ""
        if MISSING_MARKER in body:
            if entry_present:
                try:
                    client.edit_comment(comment.get("id"), CHANGELOG_DETECTED_MESSAGE)
                except (OSError, ValueError):
                    pass
                return 0
            _log("no change in status of changelog checks; exiting")
            return 1
        if CHANGELOG_DETECTED_MESSAGE in body:
            success_already_present = True

    if entry_present:
        if not success_already_present:
            try:
                client.create_comment(pr_number, CHANGELOG_DETECTED_MESSAGE)
            except (OSError, ValueError):
                pass
        _log(f"changelog found for {pr_number}, skipping remainder of checks")
        return 0

    try:
        client.create_comment(pr_number, MISSING_MESSAGE)
    except (OSError, ValueError) as err:
        _log(f"failed to comment on pull request {owner}/{repo}#{pr_number}: {err}")
    return 1


def main(argv: Sequence[str] | None = None) -> int:
    """Run the check for the pull request number in argv; return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    if not args:
        _log("Usage: changelog-check PR#")
        return 1

    pr = args[0]
    try:
        pr_number = int(pr)
    except ValueError as err:
        _log(f"error parsing PR {pr!r} as a number: {err}")
        return 1

    settings = {name: os.environ.get(name, "") for name in ("GITHUB_OWNER", "GITHUB_REPO", "GITHUB_TOKEN")}
    for name, value in settings.items():
        if not value:
            _log(f"{name} not set")
            return 1

    owner, repo = settings["GITHUB_OWNER"], settings["GITHUB_REPO"]
    client = _GitHubClient(owner, repo, settings["GITHUB_TOKEN"])
    return _run(client, owner, repo, pr_number)


if __name__ == "__main__":
    sys.exit(main())
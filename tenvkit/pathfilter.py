"""Path predicates working on both '/' and '\\' separated paths."""

from __future__ import annotations

from collections.abc import Callable


def name_equal(target_name: str) -> Callable[[str], bool]:
    """Return a predicate telling whether a path's last component is target_name."""

    def matches(path: str) -> bool:
        index = path.rfind("/")
        if index == -1:
            index = path.rfind("\\")
        return path[index + 1 :] == target_name

    return matches
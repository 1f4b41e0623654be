"""Environment lookups with fallbacks and boolean parsing."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType

_TRUE_VALUES = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_VALUES = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_EMPTY_ENV: Mapping[str, str] = MappingProxyType({})


def parse_bool(value: str) -> bool:
    """Parse a boolean the strict way: 1, t, true and 0, f, false in a few casings."""
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"invalid boolean value: {value!r}")


def empty_getenv(key: str) -> str:
    """A lookup in an environment that holds nothing."""
    return _EMPTY_ENV.get(key, "")


class Getenv:
    """Wraps a lookup function; missing values read as the empty string."""

    def __init__(self, lookup: Callable[[str], str | None]) -> None:
        self._lookup = lookup

    def __call__(self, key: str) -> str:
        return self._lookup(key) or ""

    def as_bool(self, default: bool, key: str) -> bool:
        """Read one key as a boolean, or return default when it is unset."""
        value = self(key)
        return parse_bool(value) if value else default

    def bool_fallback(self, default: bool, *args: str) -> bool:
        """Read the first set key among args as a boolean, or return default."""
        value = self.fallback(*args)
        return parse_bool(value) if value else default

    def fallback(self, *args: str) -> str:
        """Return the value of the first key that is set, or the empty string."""
        return next((value for value in map(self, args) if value), "")

    def present(self, key: str) -> bool:
        return self(key) != ""
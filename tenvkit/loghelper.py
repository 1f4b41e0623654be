"""Displayers: user-facing messages and levelled logs, optionally recorded for later."""

from __future__ import annotations

import abc
import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TextIO

ERROR = "error"

GREEN = "32"

TRACE_LOGGING_LEVEL = 5


class Level(enum.IntEnum):
    NO_LEVEL = 0
    TRACE = 1
    DEBUG = 2
    INFO = 3
    WARN = 4
    ERROR = 5
    OFF = 10

    @property
    def logging_level(self) -> int | None:
        """The matching standard logging level, or None when nothing is logged."""
        return _LOGGING_LEVELS.get(self)


_LOGGING_LEVELS = {
    Level.TRACE: TRACE_LOGGING_LEVEL,
    Level.DEBUG: logging.DEBUG,
    Level.INFO: logging.INFO,
    Level.WARN: logging.WARNING,
    Level.ERROR: logging.ERROR,
}

_LEVEL_NAMES = {
    "trace": Level.TRACE,
    "debug": Level.DEBUG,
    "info": Level.INFO,
    "warn": Level.WARN,
    "warning": Level.WARN,
    "error": Level.ERROR,
    "off": Level.OFF,
}


def level_from_string(value: str) -> Level:
    """Parse a level name, case-insensitively; unknown names give NO_LEVEL."""
    return _LEVEL_NAMES.get(value.strip().lower(), Level.NO_LEVEL)


def level_warn_or_debug(debug: bool) -> Level:
    return Level.DEBUG if debug else Level.WARN


def std_display(msg: str) -> None:
    print(msg)


def build_display_func(stream: TextIO, color: str | None = GREEN) -> Callable[[str], None]:
    """Return a function writing one line to stream, coloured when stream is a terminal."""

    def display(msg: str) -> None:
        isatty = getattr(stream, "isatty", None)
        if color and isatty is not None and isatty():
            stream.write(f"\x1b[{color}m{msg}\x1b[0m\n")
        else:
            stream.write(f"{msg}\n")

    return display


def _format_pairs(msg: str, args: tuple[Any, ...]) -> str:
    if not args:
        return msg
    parts = [f"{key}={value}" for key, value in zip(args[::2], args[1::2])]
    if len(args) % 2:
        parts.append(f"EXTRA_VALUE_AT_END={args[-1]}")
    return f"{msg}: {' '.join(parts)}"


class Displayer(abc.ABC):
    @abc.abstractmethod
    def display(self, msg: str) -> None: ...

    @abc.abstractmethod
    def is_debug(self) -> bool: ...

    @abc.abstractmethod
    def log(self, level: Level, msg: str, *args: Any) -> None: ...

    @abc.abstractmethod
    def flush(self, log_mode: bool) -> None: ...


class BasicDisplayer(Displayer):
    """Sends messages to a display function and logs to a standard logger."""

    def __init__(self, logger: logging.Logger, display: Callable[[str], None]) -> None:
        self._logger = logger
        self._display = display

    def display(self, msg: str) -> None:
        self._display(msg)

    def is_debug(self) -> bool:
        return self._logger.isEnabledFor(logging.DEBUG)

    def log(self, level: Level, msg: str, *args: Any) -> None:
        logging_level = Level(level).logging_level
        if logging_level is not None:
            self._logger.log(logging_level, "%s", _format_pairs(msg, args))

    def flush(self, log_mode: bool) -> None:
        pass


class InertDisplayer(Displayer):
    """Discards everything."""

    def display(self, msg: str) -> None:
        pass

    def is_debug(self) -> bool:
        return False

    def log(self, level: Level, msg: str, *args: Any) -> None:
        pass

    def flush(self, log_mode: bool) -> None:
        pass


INERT_DISPLAYER = InertDisplayer()


class _LogWrapper(Displayer):
    """Turns displayed messages into debug logs."""

    def __init__(self, inner: Displayer) -> None:
        self._inner = inner

    def display(self, msg: str) -> None:
        self._inner.log(Level.DEBUG, msg)

    def is_debug(self) -> bool:
        return self._inner.is_debug()

    def log(self, level: Level, msg: str, *args: Any) -> None:
        self._inner.log(level, msg, *args)

    def flush(self, log_mode: bool) -> None:
        self._inner.flush(log_mode)


@dataclass(frozen=True)
class _Record:
    level: Level
    message: str
    args: tuple[Any, ...] = ()


class RecordingDisplayer(Displayer):
    """Holds messages back until the first flush, then passes them straight on."""

    def __init__(self, displayer: Displayer) -> None:
        self._target = displayer
        self._records: list[_Record] | None = []

    def display(self, msg: str) -> None:
        if self._records is None:
            self._target.display(msg)
        else:
            self._records.append(_Record(Level.NO_LEVEL, msg))

    def is_debug(self) -> bool:
        return self._target.is_debug()

    def log(self, level: Level, msg: str, *args: Any) -> None:
        if self._records is None:
            self._target.log(level, msg, *args)
        else:
            self._records.append(_Record(level, msg, args))

    def flush(self, log_mode: bool) -> None:
        """Replay the recorded messages; with log_mode, displays become debug logs."""
        if self._records is None:
            self._target.flush(log_mode)
            return
        if log_mode:
            self._target = _LogWrapper(self._target)
        records, self._records = self._records, None
        for record in records:
            if record.level == Level.NO_LEVEL:
                self._target.display(record.message)
            else:
                self._target.log(record.level, record.message, *record.args)
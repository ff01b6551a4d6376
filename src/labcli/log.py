"""Leveled terminal logging for lab.

Messages at ``warning`` and above go to stderr, everything else to stdout.
The threshold comes from ``--log-level`` or ``LAB_LOG_LEVEL`` (default
``info``). Colour is dropped with ``--no-color``, ``NO_COLOR`` or
``LAB_NO_COLOR``.
"""

from __future__ import annotations

import os
import sys
from enum import IntEnum

from rich.console import Console
from rich.text import Text


class LogLevel(IntEnum):
    TRACE = 10
    DEBUG = 20
    INFO = 30
    SUCCESS = 35
    WARNING = 40
    ERROR = 50


LEVEL_NAMES = ("trace", "debug", "info", "success", "warning", "error")

_ALIASES = {"warn": LogLevel.WARNING}
_STYLES = {
    LogLevel.TRACE: "dim",
    LogLevel.DEBUG: "cyan",
    LogLevel.INFO: "",
    LogLevel.SUCCESS: "green",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}
_DEFAULT_LEVEL = LogLevel.INFO

_configured_level: LogLevel | None = None
_no_color_override: bool | None = None


def parse_level(value: str | None) -> LogLevel:
    """Map a level name to ``LogLevel``; unknown or empty names mean ``info``.

    Example:
        >>> parse_level("Debug"), parse_level("warn"), parse_level("loud")
        (<LogLevel.DEBUG: 20>, <LogLevel.WARNING: 40>, <LogLevel.INFO: 30>)
    """
    name = (value or "").strip().lower()
    if name in LEVEL_NAMES:
        return LogLevel[name.upper()]
    return _ALIASES.get(name, _DEFAULT_LEVEL)


def configured_level() -> LogLevel:
    global _configured_level
    if _configured_level is None:
        _configured_level = parse_level(os.environ.get("LAB_LOG_LEVEL"))
    return _configured_level


def set_level(value: str | None) -> None:
    global _configured_level
    _configured_level = parse_level(value)


def set_no_color(value: bool) -> None:
    """Force colour off; ``False`` defers to the environment again."""
    global _no_color_override
    _no_color_override = True if value else None


def no_color() -> bool:
    if _no_color_override is not None:
        return _no_color_override
    return any(os.environ.get(name) for name in ("NO_COLOR", "LAB_NO_COLOR"))


def console(*, stderr: bool = False) -> Console:
    """Return a Rich console for stdout (or stderr) honouring colour settings."""
    return Console(
        file=sys.stderr if stderr else sys.stdout,
        soft_wrap=True,
        highlight=False,
        no_color=no_color(),
    )


def emit(level: LogLevel, message: str, *, style: str | None = None) -> None:
    if level < configured_level():
        return
    text = Text(message, style=style if style is not None else _STYLES[level])
    console(stderr=level >= LogLevel.WARNING).print(text)


def trace(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.TRACE, message, style=style)


def debug(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.DEBUG, message, style=style)


def info(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.INFO, message, style=style)


def success(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.SUCCESS, message, style=style)


def warning(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.WARNING, message, style=style)


def error(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.ERROR, message, style=style)

# File: src/mstair/runpoint/xlogging/logger_formatter.py
"""
Formatter adding call-site fields and colours to log records.

Extra format fields:
- %(fileAndLine)s: project-relative "path/to/file.py:42"
- %(receiverAndFunction)s: "Klass.method()" or "function()"
- %(funcLong)s, %(receiver)s, %(package)s: parts of the call-site name
- %(levelName)s: coloured level name
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from types import TracebackType
from typing import Any, Literal

import pytz
from colorama import Fore

import mstair.runpoint.base.config as cfg
from mstair.runpoint.base.fs_helpers import fs_relpath_or_absolute

from .logger_constants import K_COLOR, K_FUNC_LONG, K_PACKAGE, K_RECEIVER


__all__ = ["CoreFormatter", "get_color_code", "rgb_code"]

DEFAULT_LOG_FORMAT = "%(levelName)s %(asctime)s %(fileAndLine)s %(receiverAndFunction)s %(message)s"
DEFAULT_LOG_DATEFMT = "%H:%M:%S"

FormatStyle = Literal["%", "{", "$"]


def rgb_code(r: int, g: int, b: int) -> str:
    """
    Convert RGB values to ANSI escape code for terminal color output.

    :param r: Red component (0-255)
    :param g: Green component (0-255)
    :param b: Blue component (0-255)
    :return str: ANSI escape code for the specified RGB color.
    """
    return f"\033[38;2;{max(0, min(255, r))};{max(0, min(255, g))};{max(0, min(255, b))}m"


RGB_CALL_SITE = rgb_code(4 << 4, 8 << 4, 10 << 4)
RGB_FUNCTION = rgb_code(3 << 4, 12 << 4, 10 << 4)
COLOR_MAP: dict[str | None, str] = {
    "fileAndLine": RGB_CALL_SITE,
    "receiverAndFunction": RGB_FUNCTION,
    "TRACE": rgb_code(96, 0, 64),
    "DEBUG": rgb_code(128, 128, 128),
    "INFO": rgb_code(184, 184, 216),
    "WARNING": rgb_code(192, 176, 0),
    "ERROR": rgb_code(224, 128, 0),
    "CRITICAL": rgb_code(255, 64, 64),
    None: Fore.RESET,
}


def get_color_code(key: str | None = None) -> str:
    """
    Return the ANSI code for `key`, or "" when output is not interactive.

    Keys are COLOR_MAP entries, "#rrggbb" hex colours, or colorama Fore names
    ("red", "light_blue", "bright_green").
    """
    if not cfg.in_desktop_mode():
        return ""
    if not key or key == "RESET":
        return Fore.RESET
    if key in COLOR_MAP:
        return COLOR_MAP[key]
    if key.startswith("#") and len(key) == 7:
        try:
            return rgb_code(*[int(key[i : i + 2], 16) for i in (1, 3, 5)])
        except ValueError:
            return Fore.RESET

    clean_key = key.upper().replace("BRIGHT", "LIGHT").replace("_", "")
    if clean_key.startswith("LIGHT"):
        clean_key = clean_key.removesuffix("EX") + "_EX"
    color = getattr(Fore, clean_key, None)
    return color if isinstance(color, str) else Fore.RESET


def _colored(key: str | None, text: str) -> str:
    return get_color_code(key) + text + get_color_code()


class CoreFormatter(logging.Formatter):
    """
    Formatter for CoreLogger records.

    Works with plain logging.Logger records as well; missing call-site
    attributes fall back to the record's funcName.
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: FormatStyle = "%",
        validate: bool = True,
        *,
        defaults: dict[str, Any] | None = None,
        tz: str | None = None,
    ) -> None:
        """
        :param fmt: Format string, defaults to DEFAULT_LOG_FORMAT.
        :param datefmt: Date format for %(asctime)s.
        :param style: Format string style.
        :param validate: Whether to validate the format string.
        :param defaults: Default values for custom fields.
        :param tz: Timezone name for timestamps; defaults to LOG_TIMEZONE or UTC.
        """
        super().__init__(
            fmt=fmt or DEFAULT_LOG_FORMAT,
            datefmt=datefmt,
            style=style,
            validate=validate,
            defaults=defaults,
        )
        self.tz = pytz.timezone(tz or os.environ.get("LOG_TIMEZONE", "UTC"))

    def format(self, record: logging.LogRecord) -> str:
        record.fileAndLine = self.format_file_and_line(record.pathname, record.lineno)
        record.receiverAndFunction = self.format_receiver_and_function(record)
        record.levelName = _colored(record.levelname, record.levelname)
        for key in (K_RECEIVER, K_PACKAGE, K_FUNC_LONG):
            if not hasattr(record, key):
                setattr(record, key, "")

        try:
            message = super().format(record)
        except Exception as exc:
            return format_logging_error(record, exc)
        return _colored(getattr(record, K_COLOR, None) or record.levelname, message)

    @staticmethod
    def format_file_and_line(file: str, lineno: int) -> str:
        if not file:
            return "<unknown file>:0"
        return _colored("fileAndLine", f"{fs_relpath_or_absolute(file)}:{lineno}")

    @staticmethod
    def format_receiver_and_function(record: logging.LogRecord) -> str:
        """
        Return "Klass.method()", "Klass()" for constructors, "function()" otherwise.

        Module-level code renders as "<module>".
        """
        receiver: str = getattr(record, K_RECEIVER, "") or ""
        function: str = record.funcName or ""
        if function == "<module>":
            text = function
        elif receiver and function == "__init__":
            text = f"{receiver}()"
        elif receiver:
            text = f"{receiver}.{function}()"
        else:
            text = f"{function}()"
        return _colored("receiverAndFunction", text)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        moment = datetime.fromtimestamp(record.created, self.tz)
        text = moment.strftime(datefmt or DEFAULT_LOG_DATEFMT)
        return _colored(record.levelname, text)

    def formatException(
        self,
        ei: (
            tuple[type[BaseException], BaseException, TracebackType | None]
            | tuple[None, None, None]
            | BaseException
            | bool
            | None
        ),
    ) -> str:
        """Normalize `ei` to a stdlib-compatible 3-tuple, then format."""
        if ei is True:
            ei = sys.exc_info()
        elif ei is False or ei is None:
            ei = (None, None, None)
        elif isinstance(ei, BaseException):
            ei = (type(ei), ei, ei.__traceback__)
        return super().formatException(ei)  # type: ignore[arg-type]


def format_logging_error(record: logging.LogRecord, exc: Exception) -> str:
    """
    Describe a record that could not be formatted instead of raising.

    :param record: The LogRecord that failed to format
    :param exc: The exception that occurred during formatting
    """
    lines = [
        "Internal error: Failed to format log record",
        f"{getattr(record, 'pathname', '<unknown>')}:{getattr(record, 'lineno', '?')}",
        f"{type(exc).__name__}: {exc}",
        f"record.msg: {getattr(record, 'msg', None)!r}",
        f"record.args: {getattr(record, 'args', None)!r}",
    ]
    return "\n>> " + "\n>> ".join(lines) + "\n"


# End of file: src/mstair/runpoint/xlogging/logger_formatter.py

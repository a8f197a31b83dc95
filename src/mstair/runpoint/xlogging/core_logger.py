# File: src/mstair/runpoint/xlogging/core_logger.py
"""
Logging with call-site resolution through captured stacks.

Example:
    >>> from mstair.runpoint.xlogging.core_logger import CoreLogger
    >>> logger = CoreLogger(__name__)
    >>> logger.info("Application started")
    >>>
    >>> with logger.prefix_with("[INIT]"):
    ...     logger.debug("Loading configuration")

Features:
- Custom TRACE level
- Call site resolved with PCounter; records carry receiver, package and funcLong
- Context-local prefix context manager

Design:
- Only the root logger owns handlers/formatters; CoreLogger instances propagate.
- Log levels are controlled per-logger (via environment and LogLevelConfig).
- initialize_root() is the only entry point for root setup; its state lives on
  the root logger, never in a module global.
"""

from __future__ import annotations

import contextvars
import logging
import os
import sys
import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, TextIO

from mstair.runpoint.base import config as cfg
from mstair.runpoint.core.frame import UNRESOLVED_FRAME, Frame
from mstair.runpoint.core.pcounter import DEFAULT_TRACE_STACK_DEPTH
from mstair.runpoint.core.shortcuts import default_tracer

from .logger_constants import (
    K_FUNC_LONG,
    K_PACKAGE,
    K_RECEIVER,
    TRACE,
    initialize_logger_constants,
)
from .logger_formatter import CoreFormatter
from .logger_util import LogLevelConfig


__all__: list[str] = [
    "CoreLogger",
    "find_caller_frame",
    "initialize_root",
]

_LOG_KWARGS_FORBIDDEN: set[str] = {"filename", "lineno", "msg", "args", "levelname", "levelno"}
_LOG_KWARGS_STANDARD: set[str] = {"exc_info", "stack_info", "stacklevel", "extra"}
_LOG_ROOT_ATTR_NAME = "_runpoint_corelogger_initialized"
_NOISE_MODULES: tuple[str, ...] = ("logging", __name__)

_cached_caller_frame: contextvars.ContextVar[Frame | None] = contextvars.ContextVar(
    "cached_caller_frame", default=None
)
_log_prefix: contextvars.ContextVar[str] = contextvars.ContextVar("log_prefix", default="")


class CoreLogger(logging.Logger):
    """
    Application logger that extends logging.Logger with:

    - TRACE level.
    - Call-site info from a captured stack, skipping logging internals.
    - Prefix context manager for scoped message prefixes.

    Handlers are not attached directly; all CoreLogger instances propagate
    to the root logger, which holds a single stderr handler per initialize_root().
    """

    def __init__(
        self,
        name: str,
        level: int | str = logging.NOTSET,
    ) -> None:
        """
        :param name: The name of the logger, typically the module name.
        :param level: Initial level; NOTSET resolves it from LogLevelConfig.
        """
        initialize_logger_constants()
        if level in (logging.NOTSET, "NOTSET", ""):
            level = LogLevelConfig.get_instance().get_effective_level(name)
        super().__init__(name, level)

        root_level = logging.getLogger().getEffectiveLevel()
        if self.level < root_level:
            self.setLevel(root_level)

    def __repr__(self) -> str:
        level = self.getEffectiveLevel()
        return f"<{self.__class__.__name__} '{self.name}' {logging.getLevelName(level)}={level}>"

    def log(self, level: int, msg: object, *args: Any, **kwargs: Any) -> None:
        """
        Emit a record whose location is the resolved call site.

        `stacklevel` counts frames outside logging internals: 1 is the code
        that called this logger, 2 its caller, and so on. Unknown keyword
        arguments are moved into `extra`.
        """
        initialize_root()
        if cfg.in_analysis_mode() or not self.isEnabledFor(level):
            return

        extra = _split_extra(kwargs)
        frame = find_caller_frame(kwargs.pop("stacklevel", 1))
        extra.setdefault(K_RECEIVER, frame.receiver)
        extra.setdefault(K_PACKAGE, frame.package)
        extra.setdefault(K_FUNC_LONG, frame.func_long)

        if prefix := _log_prefix.get():
            msg = f"{prefix}{msg}"

        token = _cached_caller_frame.set(frame)
        try:
            super().log(level, msg, *args, stacklevel=1, extra=extra, **kwargs)
        finally:
            _cached_caller_frame.reset(token)

    def findCaller(
        self,
        stack_info: bool = False,
        stacklevel: int = 1,
    ) -> tuple[str, int, str, str | None]:
        """
        Use the Frame resolved by the preceding log() call.

        The cached frame is cleared as soon as log() returns; falls back to
        logging's own stack walk when called outside log().
        """
        frame = _cached_caller_frame.get()
        if frame is None:
            return super().findCaller(stack_info=stack_info, stacklevel=stacklevel)

        sinfo: str | None = None
        if stack_info:
            sinfo = "Stack (most recent call last):\n" + "".join(traceback.format_stack()).rstrip()
        return (frame.file or "<unknown file>", frame.line, frame.function or "<unknown>", sinfo)

    def trace(self, msg: object, *args: Any, **kwargs: Any) -> None:
        """Log a message at TRACE level (below DEBUG)."""
        self.log(TRACE, msg, *args, **kwargs)

    def debug(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self.log(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self.log(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self.log(logging.ERROR, msg, *args, **kwargs)

    def critical(self, msg: object, *args: Any, **kwargs: Any) -> None:
        self.log(logging.CRITICAL, msg, *args, **kwargs)

    def exception(self, msg: object, *args: Any, exc_info: Any = True, **kwargs: Any) -> None:
        """Log at ERROR level with exception info."""
        self.log(logging.ERROR, msg, *args, exc_info=exc_info, **kwargs)

    @contextmanager
    def prefix_with(self, prefix: str) -> Iterator[None]:
        """
        Prefix all log messages emitted within the current context.

        Nested prefixes accumulate ("[A] > [B] > message").
        """
        token = _log_prefix.set(f"{_log_prefix.get()}{prefix} > ")
        try:
            yield
        finally:
            _log_prefix.reset(token)


def find_caller_frame(stacklevel: int = 1) -> Frame:
    """
    Return the `stacklevel`-th frame outside logging internals.

    Frames from the standard logging package and this module are skipped, as
    are frames without a module (exec'd "<string>" code). The search depth does
    not follow set_trace_stack_depth(). Returns UNRESOLVED_FRAME when the
    stack is exhausted.
    """
    remaining = max(1, stacklevel)
    here = default_tracer().capture(depth=remaining + DEFAULT_TRACE_STACK_DEPTH)
    for frame in here.frames():
        if _is_noise_frame(frame):
            continue
        remaining -= 1
        if remaining == 0:
            return frame
    return UNRESOLVED_FRAME


def _is_noise_frame(frame: Frame) -> bool:
    module = frame.module
    if not module or frame.file == "<string>":
        return True
    return any(module == m or module.startswith(m + ".") for m in _NOISE_MODULES)


def _split_extra(kwargs: dict[str, Any]) -> dict[str, Any]:
    """
    Move non-standard keyword arguments into a fresh `extra` dict and return it.

    :raises ValueError: If a keyword would overwrite a reserved LogRecord attribute.
    """
    extra: dict[str, Any] = dict(kwargs.pop("extra", None) or {})
    for key in [k for k in kwargs if k not in _LOG_KWARGS_STANDARD]:
        if key in _LOG_KWARGS_FORBIDDEN:
            raise ValueError(f"Invalid keyword argument '{key}={kwargs[key]!r}'")
        extra[key] = kwargs.pop(key)
    return extra


def initialize_root(
    fmt: str | None = None,
    datefmt: str | None = None,
    level: int | str | None = None,
    force: bool = False,
) -> None:
    """
    Idempotently configure the root logger for CoreLogger.

    - Ensures exactly one stderr StreamHandler with CoreFormatter exists.
    - If `force=True`, removes and recreates the stderr handler.
    - Sets root level to `level` if provided, otherwise WARNING if NOTSET.
    - Does not modify non-stderr handlers owned by the host application.

    :param fmt: Format string. Defaults to LOG_FORMAT or the formatter default.
    :param datefmt: Date format. Defaults to LOG_DATEFMT or the formatter default.
    :param level: Root logger level (int or name).
    :param force: Reinitialize even if already initialized.
    """
    root = logging.getLogger()
    if getattr(root, _LOG_ROOT_ATTR_NAME, False) and not force:
        return
    setattr(root, _LOG_ROOT_ATTR_NAME, True)
    initialize_logger_constants()

    stderr_handlers: list[logging.StreamHandler[TextIO]] = [
        h for h in root.handlers if isinstance(h, logging.StreamHandler) and h.stream is sys.stderr
    ]
    if force:
        for h in stderr_handlers:
            root.removeHandler(h)
        stderr_handlers = []

    formatter = CoreFormatter(
        fmt or os.environ.get("LOG_FORMAT") or None,
        datefmt or os.environ.get("LOG_DATEFMT") or None,
    )
    if not stderr_handlers:
        handler: logging.StreamHandler[TextIO] = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)
        root.addHandler(handler)
    elif not any(isinstance(h.formatter, CoreFormatter) for h in stderr_handlers):
        stderr_handlers[0].setFormatter(formatter)

    if level is not None:
        if isinstance(level, str):
            level = logging.getLevelNamesMapping().get(level.upper(), logging.WARNING)
        root.setLevel(level)
    elif root.level == logging.NOTSET:
        root.setLevel(logging.WARNING)


# End of file: src/mstair/runpoint/xlogging/core_logger.py

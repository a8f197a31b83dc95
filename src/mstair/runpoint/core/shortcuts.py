# File: src/mstair/runpoint/core/shortcuts.py
"""
Module: mstair.runpoint.core.shortcuts

Process-wide defaults and one-call helpers.

The free functions capture a single frame (the caller's) and query it
immediately:

    >>> from mstair.runpoint.core import shortcuts as rp
    >>> def handler():
    ...     return rp.function(), rp.package()
    >>> handler()  # doctest: +SKIP
    ('handler', '__main__')
"""

from __future__ import annotations

import threading

from mstair.runpoint.base import config as cfg

from .frame import Frame
from .pcounter import DEFAULT_TRACE_STACK_DEPTH, PCounter, StackTracer


__all__ = [
    "default_tracer",
    "directory",
    "file",
    "filename",
    "func_full",
    "func_long",
    "function",
    "line",
    "pack_full",
    "package",
    "pc",
    "receiver",
    "set_trace_stack_depth",
    "trace_stack_depth",
]

_default_tracer: StackTracer | None = None
_default_tracer_lock = threading.Lock()


def default_tracer() -> StackTracer:
    """Return the process-wide tracer, creating it from configuration on first use."""
    global _default_tracer
    if _default_tracer is None:
        with _default_tracer_lock:
            if _default_tracer is None:
                depth = cfg.trace_stack_depth_from_environment(DEFAULT_TRACE_STACK_DEPTH)
                _default_tracer = StackTracer(depth)
    return _default_tracer


def set_trace_stack_depth(depth: int) -> int:
    """
    Set the max depth of captured stacks for the default tracer.

    :return int: The previous depth.
    :raises ValueError: If depth is less than 1.
    """
    return default_tracer().set_depth(depth)


def trace_stack_depth() -> int:
    return default_tracer().depth


def pc(skip: int = 0) -> PCounter:
    """
    Capture the caller's stack with the default tracer.

    :param skip: Extra frames to skip above the caller of pc().
    :raises ValueError: If skip is negative.
    """
    if skip < 0:
        raise ValueError(f"skip must not be negative: {skip}")
    return default_tracer().capture(skip + 1)


def _caller_frame(skip: int) -> Frame:
    """Resolve one frame, `skip` frames above the caller of this function."""
    return default_tracer().capture(skip + 1, depth=1).first_frame()


def func_full() -> str:
    """
    Return the qualified name of the calling function.

    Example:
        "mstair/runpoint/core/test_shortcuts.(TestFreeFunctions).test_func_full"
    """
    return _caller_frame(1).func_full


def pack_full() -> str:
    """Return the package path of the calling function, e.g. "mstair/runpoint/core"."""
    return _caller_frame(1).pack_full


def package() -> str:
    """Return the package name of the calling function."""
    return _caller_frame(1).package


def func_long() -> str:
    """
    Return the long name of the calling function.

    Example:
        "func_long"
        "func_long.<lambda>"
        "(PCounter).func_long"
    """
    return _caller_frame(1).func_long


def receiver() -> str:
    """Return the receiver (class) of the calling method, or ""."""
    return _caller_frame(1).receiver


def function() -> str:
    """Return the name of the calling function."""
    return _caller_frame(1).function


def directory() -> str:
    """Return the directory of the calling function's source file."""
    return _caller_frame(1).dir


def file() -> str:
    """Return the source file path of the calling function."""
    return _caller_frame(1).file


def filename() -> str:
    """Return the source file name of the calling function."""
    return _caller_frame(1).filename


def line() -> int:
    """Return the line number of the call site."""
    return _caller_frame(1).line


# End of file: src/mstair/runpoint/core/shortcuts.py

# File: src/mstair/runpoint/base/config.py
"""
Execution context detection and environment-driven settings.

Context flags live in thread-local state, so an override set on one thread is
invisible to the others. Settings come from the process environment after a
.env file has been loaded (python-dotenv).

Exports:
- analysis_mode_context() / in_analysis_mode(): silence CoreLogger while code
  is being inspected rather than run.
- in_test_mode(): running under pytest or CI, with a per-thread override.
- in_desktop_mode(): whether log output gets ANSI colours, with a per-thread override.
- trace_stack_depth_from_environment(): default capture depth (RUNPOINT_TRACE_STACK_DEPTH).
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Final, Literal

from mstair.runpoint.base.fs_helpers import fs_load_dotenv


__all__ = [
    "ENV_TRACE_STACK_DEPTH",
    "analysis_mode_context",
    "in_analysis_mode",
    "in_desktop_mode",
    "in_test_mode",
    "trace_stack_depth_from_environment",
]

ENV_TRACE_STACK_DEPTH: Final[str] = "RUNPOINT_TRACE_STACK_DEPTH"

_thread_state = threading.local()


@dataclass
class ContextFlags:
    """Per-thread execution context."""

    analysis_depth: int = 0
    test_mode: bool | None = None
    desktop_mode: bool | None = None


def _flags() -> ContextFlags:
    flags: ContextFlags | None = getattr(_thread_state, "flags", None)
    if flags is None:
        flags = _thread_state.flags = ContextFlags()
    return flags


def _apply_override(
    name: Literal["test_mode", "desktop_mode"],
    unset_override: bool,
    override: bool | None,
) -> bool | None:
    """Update the named override on this thread and return the one in effect."""
    flags = _flags()
    if unset_override:
        setattr(flags, name, None)
    if override is not None:
        setattr(flags, name, override)
    return getattr(flags, name)


@contextmanager
def analysis_mode_context() -> Iterator[None]:
    """
    Mark the current thread as analysing code for the duration of the block.

    CoreLogger emits nothing while active. Blocks may nest.
    """
    flags = _flags()
    flags.analysis_depth += 1
    try:
        yield
    finally:
        flags.analysis_depth -= 1


def in_analysis_mode() -> bool:
    return _flags().analysis_depth > 0


def in_test_mode(*, unset_override: bool = False, override: bool | None = None) -> bool:
    """
    Report whether the process runs under a test harness.

    Analysis mode always reports False. Otherwise a thread override wins, then
    pytest being imported, then PYTEST_CURRENT_TEST or CI=true.

    :param unset_override: Drop this thread's override before deciding.
    :param override: Store True or False as this thread's override.
    """
    if in_analysis_mode():
        return False
    forced = _apply_override("test_mode", unset_override, override)
    if forced is not None:
        return forced
    if "pytest" in sys.modules:
        return True
    return bool(os.environ.get("PYTEST_CURRENT_TEST")) or os.environ.get("CI") == "true"


def in_desktop_mode(*, unset_override: bool = False, override: bool | None = None) -> bool:
    """
    Report whether log output should be coloured for a human reader.

    A thread override wins. NO_COLOR and analysis mode disable colour; test
    mode enables it; otherwise colour follows whether stderr is a terminal.

    :param unset_override: Drop this thread's override before deciding.
    :param override: Store True or False as this thread's override.
    """
    forced = _apply_override("desktop_mode", unset_override, override)
    if forced is not None:
        return forced
    if os.environ.get("NO_COLOR") or in_analysis_mode():
        return False
    if in_test_mode():
        return True
    return bool(getattr(sys.stderr, "isatty", lambda: False)())


def trace_stack_depth_from_environment(default: int) -> int:
    """
    Return the capture depth configured by RUNPOINT_TRACE_STACK_DEPTH.

    Invalid values (not an integer, or less than 1) are reported as a warning
    and `default` is returned.

    :param default: Depth to use when the variable is unset or invalid.
    """
    fs_load_dotenv()
    raw = os.environ.get(ENV_TRACE_STACK_DEPTH, "").strip()
    if not raw:
        return default
    try:
        depth = int(raw, 10)
    except ValueError:
        depth = 0
    if depth < 1:
        logging.getLogger(__name__).warning(
            "Ignoring %s=%r: expected an integer greater than 0, using %d",
            ENV_TRACE_STACK_DEPTH,
            raw,
            default,
        )
        return default
    return depth


# End of file: src/mstair/runpoint/base/config.py

# File: src/mstair/runpoint/xlogging/logger_factory.py
"""
Logger factory for creating and configuring CoreLogger instances.

Loggers created without a name are named after the calling module, resolved
from a captured stack.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from mstair.runpoint.base.caller_module_name_and_level import caller_module_name_and_level
from mstair.runpoint.xlogging.core_logger import CoreLogger


__all__ = ["create_logger", "get_caller_logger_name"]


def create_logger(
    name: str | None = None,
    *,
    level: int | str | None = None,
    stacklevel: int = 1,
) -> CoreLogger:
    """
    Return a CoreLogger with a consistent, context-aware name.

    Handles:
    - Normal imports (uses given name)
    - Direct script execution (__main__ -> script stem)
    - Anonymous loggers (uses the calling module's name)

    :param name: Logger name; None or "" infers it from the caller.
    :param level: Optional level applied to the logger.
    :param stacklevel: Which caller names an anonymous logger (1 = direct caller).
    :raises TypeError: If an incompatible logger already holds the name.
    """
    logger_name = name or get_caller_logger_name(stacklevel=stacklevel + 1)
    if logger_name == "__main__":
        logger_name = _script_stem()

    existing = logging.Logger.manager.loggerDict.get(logger_name)
    if isinstance(existing, CoreLogger):
        logger = existing
    else:
        logger = _get_core_logger_from_logging(logger_name)

    if level is not None:
        logger.setLevel(level)
    return logger


def get_caller_logger_name(*, stacklevel: int = 1) -> str:
    """Resolve the default logger name based on caller context."""
    name = caller_module_name_and_level(stacklevel=stacklevel + 1)[0]
    if not name or name == "__main__":
        name = _script_stem()
    return name


def _get_core_logger_from_logging(name: str) -> CoreLogger:
    """
    Create or retrieve a CoreLogger through logging.getLogger().

    Temporarily sets CoreLogger as the logger class so the new logger joins
    the logging hierarchy (parent links, propagation, caplog).

    :raises TypeError: If getLogger() returns another Logger type.
    """
    logging_class = logging.getLoggerClass()
    logging.setLoggerClass(CoreLogger)
    try:
        logger = logging.getLogger(name)
    finally:
        logging.setLoggerClass(logging_class)
    if not isinstance(logger, CoreLogger):
        raise TypeError(f"Failed to create CoreLogger: {logger!r}")
    return logger


def _script_stem() -> str:
    arg0 = sys.argv[0] if sys.argv and sys.argv[0] else sys.executable
    return Path(arg0 or "embedded_main").stem


# End of file: src/mstair/runpoint/xlogging/logger_factory.py

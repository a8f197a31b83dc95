# File: src/mstair/runpoint/xlogging/logger_constants.py

import logging


# LogRecord attributes filled from the resolved call-site Frame
K_RECEIVER = "receiver"
K_PACKAGE = "package"
K_FUNC_LONG = "funcLong"
K_COLOR = "color"

TRACE = logging.DEBUG - 1  # (9) LOG.trace() will not output at DEBUG level


_logging_constants_initialized = False


def initialize_logger_constants() -> None:
    """Register the TRACE level name if not already registered."""
    global _logging_constants_initialized
    if _logging_constants_initialized:
        return
    _logging_constants_initialized = True
    if "TRACE" not in logging.getLevelNamesMapping():
        logging.addLevelName(TRACE, "TRACE")


# End of file: src/mstair/runpoint/xlogging/logger_constants.py

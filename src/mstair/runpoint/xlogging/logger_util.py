# File: src/mstair/runpoint/xlogging/logger_util.py
"""
Environment variable-driven log level configuration.

Two sources are supported:
- Pattern DSL strings in LOG_LEVEL / LOG_LEVELS, e.g. "mstair.runpoint.*:DEBUG; INFO"
- Per-logger overrides in variables like LOG_LEVEL_<NAME>, where "_" becomes
  "." and "__" becomes "_" (LOG_LEVEL_MSTAIR_RUNPOINT -> mstair.runpoint)

Precedence: exact > ancestor > glob (longest fixed prefix) > default > fallback.
"""

from __future__ import annotations

import fnmatch
import logging
import os
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Final, NamedTuple

from mstair.runpoint.base.fs_helpers import fs_load_dotenv
from mstair.runpoint.xlogging.logger_constants import initialize_logger_constants


__all__ = ["LogLevelConfig", "LogPatternLevel"]

_FRAGMENT_SEPARATOR_RX: Final[re.Pattern[str]] = re.compile(r"[;, ]+")
_ASSIGNMENT_OPERATOR_RX: Final[re.Pattern[str]] = re.compile(r"[:=]+")
_ENV_NAME_RX: Final[re.Pattern[str]] = re.compile(r"^LOG_LEVELS?(?P<SUFFIX>(?:_[A-Z][A-Z0-9_]*)*)$")

_log_level_config_instance: LogLevelConfig | None = None


class LogPatternLevel(NamedTuple):
    """Mapping from a logger-name pattern to an integer log level."""

    pattern: str
    level: int


def _env_var_module(name: str) -> str | None:
    """Return the logger name targeted by a LOG_LEVEL* variable, "" for root, None if no match."""
    match = _ENV_NAME_RX.match(name)
    if match is None:
        return None
    suffix = match["SUFFIX"].lstrip("_")
    if not suffix or suffix == "ROOT":
        return ""
    return suffix.replace("__", "\0").replace("_", ".").replace("\0", "_").lower()


def _glob_specificity(pattern: str) -> int:
    """Length of fixed prefix before any wildcard (for glob tiebreaks)."""
    return min((i for i, ch in enumerate(pattern) if ch in "*?["), default=len(pattern))


def _is_glob_pattern(pattern: str) -> bool:
    return any(ch in pattern for ch in "*?[")


def _ancestors(logger_name: str) -> Iterator[str]:
    """Yield ancestor names of a dotted logger path, most specific first."""
    parts = logger_name.split(".")
    while len(parts) > 1:
        parts = parts[:-1]
        yield ".".join(parts)


@dataclass(slots=True)
class LogLevelConfig:
    """
    Resolve per-logger levels from environment variables.

    The mapping is built from the environment on construction unless one is
    given explicitly. The empty pattern "" holds the default level.
    """

    pattern_to_level: dict[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.pattern_to_level:
            self.update_from_environment()

    @classmethod
    def get_instance(cls) -> LogLevelConfig:
        """Return the shared LogLevelConfig instance, creating it if needed."""
        global _log_level_config_instance
        if _log_level_config_instance is None:
            initialize_logger_constants()
            _log_level_config_instance = cls()
        return _log_level_config_instance

    def update_from_environment(self) -> None:
        """Rebuild pattern->level mappings from the current environment."""
        fs_load_dotenv()
        self.pattern_to_level.clear()
        # Reverse order: LOG_LEVEL_<NAME>, then LOG_LEVELS, then LOG_LEVEL; later writes win
        for name, value in sorted(os.environ.items(), reverse=True):
            module = _env_var_module(name)
            if module is None:
                continue
            for item in self.parse_dsl(value, module=module):
                self.pattern_to_level[item.pattern] = item.level

    @staticmethod
    def parse_dsl(value: str, *, module: str = "") -> Iterator[LogPatternLevel]:
        """
        Parse "pattern:LEVEL" fragments separated by ";", "," or spaces.

        A bare LEVEL applies to `module` ("" = default). Unknown levels are skipped.
        """
        initialize_logger_constants()
        level_map = logging.getLevelNamesMapping()
        for fragment in _FRAGMENT_SEPARATOR_RX.split(value):
            fragment = fragment.strip()
            if not fragment:
                continue
            parts = _ASSIGNMENT_OPERATOR_RX.split(fragment, maxsplit=1)
            pattern = parts[0].strip().strip("'\"") if len(parts) == 2 else ""
            level_txt = parts[-1].strip().strip("'\"").upper()

            if module:
                pattern = f"{module}.{pattern}" if pattern not in {"", "root"} else module
            if pattern.lower() == "root":
                pattern = ""

            level = int(level_txt) if level_txt.isdigit() else level_map.get(level_txt, logging.NOTSET)
            if level == logging.NOTSET:
                continue
            yield LogPatternLevel(pattern, level)

    def get_effective_level(self, logger_name: str, *, default: int = logging.WARNING) -> int:
        """Return the configured level for `logger_name`."""
        name_lc = logger_name.lower()
        named = {k.lower(): v for k, v in self.pattern_to_level.items() if k}

        if name_lc in named:
            return named[name_lc]

        for ancestor in _ancestors(name_lc):
            if ancestor in named:
                return named[ancestor]

        best: tuple[int, int] | None = None
        for pattern, level in named.items():
            if _is_glob_pattern(pattern) and fnmatch.fnmatch(name_lc, pattern):
                score = _glob_specificity(pattern)
                if best is None or score > best[0]:
                    best = (score, level)
        if best is not None:
            return best[1]

        return self.pattern_to_level.get("", default)


# End of file: src/mstair/runpoint/xlogging/logger_util.py

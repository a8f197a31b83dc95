# File: src/mstair/runpoint/base/fs_helpers.py
"""
File system helpers used by configuration and log formatting.
"""

from __future__ import annotations

import logging
from functools import cache
from pathlib import Path
from typing import IO, TypeAlias

import dotenv


__all__ = [
    "StrPath",
    "fs_find_project_root",
    "fs_load_dotenv",
    "fs_relpath_or_absolute",
]

StrPath: TypeAlias = str | Path


def fs_load_dotenv(
    *,
    logger: logging.Logger | None = None,
    dotenv_path: StrPath | None = None,
    stream: IO[str] | None = None,
    verbose: bool = False,
    override: bool = False,
) -> bool:
    """
    Parse a .env file and load the variables found into the environment.

    :param logger: Logger for dotenv warnings; supplying one enables verbose output.
    :param dotenv_path: Absolute or relative path to the .env file.
    :param stream: Text stream with .env content, used if `dotenv_path` is None.
    :param verbose: Whether to warn when the .env file is missing.
    :param override: Whether .env values replace existing environment variables.
    :return: True if at least one environment variable is set else False

    If both `dotenv_path` and `stream` are None, `find_dotenv()` locates the file
    starting from the current working directory.
    """
    if logger is not None:
        dotenv.main.logger = logger
        verbose = True
    if dotenv_path is None and stream is None:
        dotenv_path = dotenv.find_dotenv(usecwd=True)
    return dotenv.load_dotenv(
        dotenv_path=dotenv_path,
        stream=stream,
        verbose=verbose,
        override=override,
    )


@cache
def fs_find_project_root(start_dir: Path) -> Path | None:
    """
    Return the nearest directory at or above `start_dir` holding a pyproject.toml.

    Results are cached per start directory.
    """
    for dir in [start_dir, *start_dir.parents]:
        if (dir / "pyproject.toml").is_file():
            return dir
    return None


def fs_relpath_or_absolute(file: StrPath) -> str:
    """
    Return `file` relative to its project root as a POSIX path, else absolute.

    Pseudo-files such as "<string>" or "<frozen importlib._bootstrap>" are
    returned unchanged.
    """
    text = str(file)
    if not text or text.startswith("<"):
        return text
    path = Path(text).absolute()
    root = fs_find_project_root(path.parent)
    if root is not None:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            pass
    return path.as_posix()


# End of file: src/mstair/runpoint/base/fs_helpers.py

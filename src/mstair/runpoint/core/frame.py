# File: src/mstair/runpoint/core/frame.py
"""
Module: mstair.runpoint.core.frame

Resolved metadata for one captured stack frame.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass, field

from .funcname import EMPTY_FUNC_NAME_PARTS, FuncNameParts, split_func_full
from .host_runtime import FrameAddress, ResolvedFrame, resolve


__all__ = [
    "UNRESOLVED_FRAME",
    "Frame",
    "Resolver",
]

Resolver = Callable[[FrameAddress], ResolvedFrame]


@dataclass(frozen=True, slots=True)
class Frame:
    """
    Immutable view of one resolved frame.

    Name components are split from `func_full` once, at construction. An
    unresolved frame reports empty strings and line 0 from every accessor.
    """

    func_full: str = ""
    """Qualified function name, e.g. "mstair/runpoint/core/frame.(Frame).dir"."""

    file: str = ""
    """Source file path as recorded in the code object."""

    line: int = 0
    """Source line number, 0 if unknown."""

    _parts: FuncNameParts = field(
        default=EMPTY_FUNC_NAME_PARTS, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "_parts", split_func_full(self.func_full))

    @classmethod
    def from_address(cls, address: FrameAddress, resolver: Resolver = resolve) -> Frame:
        """Resolve `address` with `resolver` and wrap the result."""
        func_full, file, line = resolver(address)
        return cls(func_full=func_full, file=file, line=line)

    @property
    def pack_full(self) -> str:
        return self._parts.pack_full

    @property
    def package(self) -> str:
        return self._parts.package

    @property
    def func_long(self) -> str:
        return self._parts.func_long

    @property
    def receiver(self) -> str:
        return self._parts.receiver

    @property
    def function(self) -> str:
        return self._parts.function

    @property
    def module(self) -> str:
        """Dotted module name, e.g. "mstair.runpoint.core.frame"."""
        return self._parts.pack_full.replace("/", ".")

    @property
    def dir(self) -> str:
        """Directory containing `file`; empty when the file is unknown."""
        return os.path.dirname(self.file) if self.file else ""

    @property
    def filename(self) -> str:
        """Base name of `file`; empty when the file is unknown."""
        return os.path.basename(self.file) if self.file else ""

    @property
    def is_resolved(self) -> bool:
        return bool(self.func_full or self.file or self.line)

    def __str__(self) -> str:
        return f"{self.file}:{self.line} {self.func_full}"


UNRESOLVED_FRAME = Frame()


# End of file: src/mstair/runpoint/core/frame.py

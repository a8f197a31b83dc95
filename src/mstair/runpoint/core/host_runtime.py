# File: src/mstair/runpoint/core/host_runtime.py
"""
Module: mstair.runpoint.core.host_runtime

Stack capture and address resolution on top of the CPython frame model.

- capture_addresses(): walk the live stack and copy one FrameAddress per frame.
- resolve(): turn one FrameAddress into (func_full, file, line).

A FrameAddress holds the code object, the offset of the last executed
instruction and the module name. It never holds the frame itself, so captured
stacks do not keep locals alive.
"""

from __future__ import annotations

import inspect
from types import CodeType, FrameType
from typing import NamedTuple


__all__ = [
    "NULL_ADDRESS",
    "UNRESOLVED",
    "FrameAddress",
    "ResolvedFrame",
    "capture_addresses",
    "line_for_offset",
    "qualified_func_name",
    "render_func_long",
    "resolve",
]

_LOCALS_MARKER = ".<locals>."


class FrameAddress(NamedTuple):
    """Opaque token for one activation record at capture time."""

    code: CodeType | None
    """Code object executing in the frame, None for the null address."""

    offset: int
    """Byte offset of the last executed instruction (f_lasti)."""

    module: str
    """Name of the module whose globals the frame ran with."""

    @property
    def is_null(self) -> bool:
        return self.code is None


class ResolvedFrame(NamedTuple):
    """Result of resolving one FrameAddress."""

    func_full: str
    file: str
    line: int


NULL_ADDRESS = FrameAddress(None, -1, "")
UNRESOLVED = ResolvedFrame("", "", 0)


def capture_addresses(skip: int, max_depth: int) -> tuple[FrameAddress, ...]:
    """
    Capture up to `max_depth` frame addresses from the current stack.

    :param skip: Frames to skip above the immediate caller (0 = the caller itself).
    :param max_depth: Maximum number of addresses; values below 1 are treated as 1.
    :return tuple[FrameAddress, ...]: Addresses, nearest frame first; empty if the
        stack is shorter than `skip`.
    """
    max_depth = max(1, max_depth)
    frame: FrameType | None = inspect.currentframe()
    try:
        for _ in range(max(0, skip) + 1):
            if frame is None:
                break
            frame = frame.f_back

        addresses: list[FrameAddress] = []
        while frame is not None and len(addresses) < max_depth:
            addresses.append(FrameAddress(frame.f_code, frame.f_lasti, _frame_module_name(frame)))
            frame = frame.f_back
        return tuple(addresses)

    finally:
        # Break reference cycle: frame -> f_locals -> frame
        del frame


def resolve(address: FrameAddress) -> ResolvedFrame:
    """
    Resolve an address to its qualified function name, file and line.

    The null address (or any address without a code object) resolves to UNRESOLVED.
    """
    code = address.code
    if code is None:
        return UNRESOLVED
    return ResolvedFrame(
        func_full=qualified_func_name(address.module, code),
        file=_get_code_attr(code, "co_filename"),
        line=line_for_offset(code, address.offset),
    )


def qualified_func_name(module: str, code: CodeType) -> str:
    """
    Render "<pack_full>.<func_long>" for a code object defined in `module`.

    The dotted module name becomes a "/" separated package path so that the
    first "." after the last "/" separates package and long name. A missing
    module name renders as ".<func_long>".
    """
    qualname = _get_code_attr(code, "co_qualname") or _get_code_attr(code, "co_name", "<unknown>")
    return f"{module.replace('.', '/')}.{render_func_long(qualname)}"


def render_func_long(qualname: str) -> str:
    """
    Convert a Python __qualname__ to a long function name.

    The innermost named scope (a def or a method of a local class) is the
    head; anonymous scopes nested inside it (<lambda>, <genexpr>, ...) follow
    as closure suffixes.

    Examples:
        "walk"                                  -> "walk"
        "PCounter.walk"                         -> "(PCounter).walk"
        "Outer.Inner.walk"                      -> "(Outer.Inner).walk"
        "walk.<locals>.<lambda>"                -> "walk.<lambda>"
        "walk.<locals>.visit"                   -> "visit"
        "walk.<locals>.visit.<locals>.<lambda>" -> "visit.<lambda>"
        "walk.<locals>.Local.meth"              -> "(Local).meth"
    """
    scopes = qualname.split(_LOCALS_MARKER)
    named = [i for i, scope in enumerate(scopes) if not scope.startswith("<")]
    start = named[-1] if named else 0
    *klass, function = scopes[start].split(".")
    func_long = f"({'.'.join(klass)}).{function}" if klass else function
    for suffix in scopes[start + 1 :]:
        func_long += "." + suffix
    return func_long


def line_for_offset(code: CodeType, offset: int) -> int:
    """Return the source line covering the instruction at `offset`, or 0."""
    if offset < 0:
        return 0
    for start, end, lineno in code.co_lines():
        if start <= offset < end:
            return lineno or 0
    return 0


def _get_code_attr(code: CodeType | None, attr: str, default: str = "") -> str:
    val = getattr(code, attr, default)
    return val if isinstance(val, str) else default


def _frame_module_name(frame: FrameType) -> str:
    name = frame.f_globals.get("__name__", "")
    return name if isinstance(name, str) else ""


# End of file: src/mstair/runpoint/core/host_runtime.py

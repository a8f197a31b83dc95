# File: src/mstair/runpoint/core/funcname.py
"""
Decomposition of qualified function names.

A qualified function name has the shape ``<pack_full>.<func_long>``. The
package path may contain ``/`` separated segments; the boundary between the
package path and the long name is the first ``.`` after the last ``/``.

The long name is an optional parenthesized receiver, the function name, and
zero or more closure suffixes:

    >>> parts = split_func_full("mstair/runpoint/core/pcounter.(PCounter).walk_frames.<lambda>")
    >>> parts.package, parts.receiver, parts.function
    ('pcounter', 'PCounter', 'walk_frames')
    >>> parts.func_long
    '(PCounter).walk_frames.<lambda>'
"""

from __future__ import annotations

from typing import NamedTuple


__all__ = [
    "EMPTY_FUNC_NAME_PARTS",
    "FuncNameParts",
    "split_func_full",
]


class FuncNameParts(NamedTuple):
    """Components of a qualified function name."""

    pack_full: str
    """Full package path, e.g. "mstair/runpoint/core/frame"."""

    package: str
    """Last segment of the package path, e.g. "frame"."""

    func_long: str
    """Receiver, function name and closure suffixes, e.g. "(Frame).dir.<lambda>"."""

    receiver: str
    """Receiver type without parentheses, e.g. "Frame"; empty for plain functions."""

    function: str
    """Innermost named function, never a closure suffix, e.g. "dir"."""


EMPTY_FUNC_NAME_PARTS = FuncNameParts("", "", "", "", "")


def split_func_full(name: str) -> FuncNameParts:
    """
    Split a qualified function name into its components.

    Names that do not match the grammar yield EMPTY_FUNC_NAME_PARTS. Malformed
    receivers (an unbalanced "(") yield best-effort parts; this never raises.

    :param name: Qualified function name as reported by the host runtime.
    :return FuncNameParts: (pack_full, package, func_long, receiver, function).
    """
    if not name:
        return EMPTY_FUNC_NAME_PARTS

    boundary = name.find(".", name.rfind("/") + 1)
    if boundary < 0:
        return EMPTY_FUNC_NAME_PARTS

    pack_full, func_long = name[:boundary], name[boundary + 1 :]
    package = pack_full.rsplit("/", 1)[-1] if pack_full else ""

    receiver = ""
    rest = func_long
    if rest.startswith("("):
        close = _find_closing_paren(rest)
        if close < 0:
            return FuncNameParts(pack_full, package, func_long, rest[1:], "")
        receiver = rest[1:close]
        rest = rest[close + 1 :]
        if rest.startswith("."):
            rest = rest[1:]

    function = rest.split(".", 1)[0]
    return FuncNameParts(pack_full, package, func_long, receiver, function)


def _find_closing_paren(text: str) -> int:
    """Return the index of the ")" balancing the "(" at text[0], or -1."""
    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index
    return -1


# End of file: src/mstair/runpoint/core/funcname.py

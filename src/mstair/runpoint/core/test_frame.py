# File: src/mstair/runpoint/core/test_frame.py
"""
Tests for Frame accessors and the unresolved sentinel.
"""

from __future__ import annotations

import dataclasses
import os

import pytest

from mstair.runpoint.core.frame import UNRESOLVED_FRAME, Frame
from mstair.runpoint.core.host_runtime import NULL_ADDRESS, FrameAddress, ResolvedFrame


FILE = os.path.join(os.sep, "srv", "app", "handlers.py")


@pytest.fixture
def method_frame() -> Frame:
    return Frame(func_full="app/web/handlers.(Handler).get.<lambda>", file=FILE, line=42)


def test_name_components(method_frame: Frame) -> None:
    assert method_frame.func_full == "app/web/handlers.(Handler).get.<lambda>"
    assert method_frame.pack_full == "app/web/handlers"
    assert method_frame.package == "handlers"
    assert method_frame.func_long == "(Handler).get.<lambda>"
    assert method_frame.receiver == "Handler"
    assert method_frame.function == "get"
    assert method_frame.module == "app.web.handlers"


def test_file_components(method_frame: Frame) -> None:
    assert method_frame.file == FILE
    assert method_frame.dir == os.path.join(os.sep, "srv", "app")
    assert method_frame.filename == "handlers.py"
    assert method_frame.line == 42
    assert method_frame.is_resolved


def test_unresolved_frame_is_empty() -> None:
    frame = UNRESOLVED_FRAME
    assert not frame.is_resolved
    for value in (
        frame.func_full,
        frame.pack_full,
        frame.package,
        frame.func_long,
        frame.receiver,
        frame.function,
        frame.module,
        frame.dir,
        frame.file,
        frame.filename,
    ):
        assert value == ""
    assert frame.line == 0


def test_unparseable_name_keeps_file_and_line() -> None:
    frame = Frame(func_full="noboundary", file=FILE, line=3)
    assert frame.function == ""
    assert frame.package == ""
    assert frame.filename == "handlers.py"
    assert frame.line == 3


def test_frames_are_immutable_values(method_frame: Frame) -> None:
    same = Frame(func_full=method_frame.func_full, file=FILE, line=42)
    assert same == method_frame
    assert hash(same) == hash(method_frame)
    with pytest.raises(dataclasses.FrozenInstanceError):
        method_frame.line = 7  # type: ignore[misc]


def test_from_address_uses_resolver() -> None:
    seen: list[FrameAddress] = []

    def resolver(address: FrameAddress) -> ResolvedFrame:
        seen.append(address)
        return ResolvedFrame("pkg/mod.run", "/src/mod.py", 9)

    address = FrameAddress(None, 10, "pkg.mod")
    frame = Frame.from_address(address, resolver)
    assert seen == [address]
    assert frame == Frame("pkg/mod.run", "/src/mod.py", 9)


def test_from_null_address_with_default_resolver() -> None:
    assert Frame.from_address(NULL_ADDRESS) == UNRESOLVED_FRAME


def test_str(method_frame: Frame) -> None:
    assert str(method_frame) == f"{FILE}:42 app/web/handlers.(Handler).get.<lambda>"


# End of file: src/mstair/runpoint/core/test_frame.py

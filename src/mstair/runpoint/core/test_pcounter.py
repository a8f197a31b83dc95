# File: src/mstair/runpoint/core/test_pcounter.py
"""
Tests for PCounter and StackTracer, using both live captures and
recording fakes for the capture and resolve primitives.
"""

from __future__ import annotations

import inspect
import logging
import threading

import pytest

from mstair.runpoint.core.frame import UNRESOLVED_FRAME, Frame
from mstair.runpoint.core.host_runtime import FrameAddress, ResolvedFrame
from mstair.runpoint.core.pcounter import DEFAULT_TRACE_STACK_DEPTH, PCounter, StackTracer


class CountingResolver:
    """Resolves FrameAddress(None, n, module) to "<module path>.f<n>" and counts calls."""

    def __init__(self) -> None:
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, address: FrameAddress) -> ResolvedFrame:
        with self._lock:
            self.calls += 1
        pack_full = address.module.replace(".", "/")
        return ResolvedFrame(f"{pack_full}.f{address.offset}", f"/src/{address.module}.py", address.offset)


class RecordingCapturer:
    def __init__(self, available: int = 100) -> None:
        self.requests: list[tuple[int, int]] = []
        self.available = available

    def __call__(self, skip: int, max_depth: int) -> tuple[FrameAddress, ...]:
        self.requests.append((skip, max_depth))
        count = max(0, min(max_depth, self.available - skip))
        return tuple(FrameAddress(None, skip + i, "pkg.mod") for i in range(count))


def _addresses(count: int) -> list[FrameAddress]:
    return [FrameAddress(None, i + 1, "app.svc") for i in range(count)]


# ----------------------------------------------------------------------
# PCounter
# ----------------------------------------------------------------------


def test_first_frame_is_memoized() -> None:
    resolver = CountingResolver()
    here = PCounter(_addresses(3), resolver=resolver)
    assert resolver.calls == 0

    assert here.function == "f1"
    assert here.package == "svc"
    assert here.pack_full == "app/svc"
    assert here.func_full == "app/svc.f1"
    assert here.func_long == "f1"
    assert here.receiver == ""
    assert here.module == "app.svc"
    assert here.file == "/src/app.svc.py"
    assert here.filename == "app.svc.py"
    assert here.dir == "/src"
    assert here.line == 1
    assert resolver.calls == 1
    assert here.first_frame() is here.first_frame()


def test_empty_counter_degrades_to_unresolved() -> None:
    resolver = CountingResolver()
    here = PCounter(resolver=resolver)
    assert here.depth == 0
    assert here.first_frame() == UNRESOLVED_FRAME
    assert here.func_full == ""
    assert here.line == 0
    assert here.walk_frames(lambda frame: True) == 0
    assert resolver.calls == 0


def test_walk_frames_visits_nearest_first() -> None:
    resolver = CountingResolver()
    here = PCounter(_addresses(4), resolver=resolver)
    seen: list[str] = []
    assert here.walk_frames(lambda frame: seen.append(frame.function)) == 4
    assert seen == ["f1", "f2", "f3", "f4"]


def test_walk_frames_stops_when_visitor_returns_false() -> None:
    here = PCounter(_addresses(5), resolver=CountingResolver())
    seen: list[int] = []

    def visit(frame: Frame) -> bool:
        seen.append(frame.line)
        return frame.line < 2

    assert here.walk_frames(visit) == 2
    assert seen == [1, 2]


def test_walk_frames_ignores_falsy_non_false_results() -> None:
    here = PCounter(_addresses(3), resolver=CountingResolver())
    assert here.walk_frames(lambda frame: 0) == 3
    assert here.walk_frames(lambda frame: None) == 3


def test_walk_frames_none_visitor_is_noop() -> None:
    resolver = CountingResolver()
    here = PCounter(_addresses(3), resolver=resolver)
    assert here.walk_frames(None) == 0
    assert resolver.calls == 0


def test_walk_frames_resolves_afresh_and_leaves_memo_alone() -> None:
    resolver = CountingResolver()
    here = PCounter(_addresses(2), resolver=resolver)
    here.walk_frames(lambda frame: True)
    here.walk_frames(lambda frame: True)
    assert resolver.calls == 4
    assert "empty" in repr(here)
    here.first_frame()
    assert resolver.calls == 5


def test_concurrent_first_frame_resolves_once() -> None:
    resolver = CountingResolver()
    here = PCounter(_addresses(1), resolver=resolver)
    start = threading.Barrier(6)
    frames: list[Frame] = []

    def reader() -> None:
        start.wait()
        frames.append(here.first_frame())

    threads = [threading.Thread(target=reader) for _ in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert resolver.calls == 1
    assert len(frames) == 6
    assert all(frame is frames[0] for frame in frames)


def test_frames_generator() -> None:
    here = PCounter(_addresses(3), resolver=CountingResolver())
    assert [frame.line for frame in here.frames()] == [1, 2, 3]
    assert here.addresses == tuple(_addresses(3))


def test_live_capture_reports_this_function() -> None:
    tracer = StackTracer()
    here, expected_line = tracer.capture(), inspect.currentframe().f_lineno  # type: ignore[union-attr]
    assert here.function == "test_live_capture_reports_this_function"
    assert here.package == "test_pcounter"
    assert here.receiver == ""
    assert here.module == __name__
    assert here.file == __file__
    assert here.line == expected_line


class TestLiveMethodCapture:
    def test_receiver_is_class_name(self) -> None:
        here = StackTracer().capture()
        assert here.receiver == "TestLiveMethodCapture"
        assert here.function == "test_receiver_is_class_name"
        assert here.func_long == "(TestLiveMethodCapture).test_receiver_is_class_name"


# ----------------------------------------------------------------------
# StackTracer
# ----------------------------------------------------------------------


def test_tracer_default_depth() -> None:
    assert StackTracer().depth == DEFAULT_TRACE_STACK_DEPTH == 32


def test_capture_requests_depth_and_skips_itself() -> None:
    capturer = RecordingCapturer()
    tracer = StackTracer(5, capturer=capturer, resolver=CountingResolver())
    here = tracer.capture()
    assert capturer.requests == [(1, 5)]
    assert here.depth == 5

    tracer.capture(2, depth=3)
    assert capturer.requests[-1] == (3, 3)


def test_capture_past_the_stack_is_empty() -> None:
    capturer = RecordingCapturer(available=4)
    tracer = StackTracer(capturer=capturer, resolver=CountingResolver())
    here = tracer.capture(10)
    assert here.depth == 0
    assert here.function == ""


def test_capture_rejects_negative_skip() -> None:
    with pytest.raises(ValueError):
        StackTracer().capture(-1)


def test_set_depth_returns_previous_and_spares_existing_handles() -> None:
    capturer = RecordingCapturer()
    tracer = StackTracer(4, capturer=capturer, resolver=CountingResolver())
    before = tracer.capture()
    assert tracer.set_depth(2) == 4
    after = tracer.capture()
    assert tracer.depth == 2
    assert before.depth == 4
    assert after.depth == 2


def test_set_depth_logs_change(caplog: pytest.LogCaptureFixture) -> None:
    tracer = StackTracer(4)
    with caplog.at_level(logging.DEBUG, logger="mstair.runpoint.core.pcounter"):
        tracer.set_depth(9)
    assert "4 -> 9" in caplog.text


@pytest.mark.parametrize("depth", [0, -3])
def test_invalid_depth_is_rejected_and_state_kept(depth: int) -> None:
    tracer = StackTracer(6)
    with pytest.raises(ValueError):
        tracer.set_depth(depth)
    assert tracer.depth == 6
    with pytest.raises(ValueError):
        StackTracer(depth)
    with pytest.raises(ValueError):
        tracer.capture(depth=depth)


@pytest.mark.parametrize("depth", [2.5, "8", True])
def test_non_integer_depth_is_rejected(depth: object) -> None:
    with pytest.raises(TypeError):
        StackTracer().set_depth(depth)  # type: ignore[arg-type]


# End of file: src/mstair/runpoint/core/test_pcounter.py

# File: src/mstair/runpoint/core/pcounter.py
"""
Module: mstair.runpoint.core.pcounter

Captured call stacks with lazily resolved frame metadata.

- PCounter: owns the addresses captured at construction. The first frame is
  resolved on first access and memoized; walk_frames() and frames() resolve
  the whole stack afresh on every call.
- StackTracer: capture factory holding the maximum capture depth.

Example:
    >>> tracer = StackTracer(depth=8)
    >>> here = tracer.capture()
    >>> here.function, here.line  # doctest: +SKIP
    ('handle_request', 42)
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator

from .frame import UNRESOLVED_FRAME, Frame, Resolver
from .host_runtime import FrameAddress, capture_addresses, resolve
from .once import OnceValue


__all__ = [
    "DEFAULT_TRACE_STACK_DEPTH",
    "Capturer",
    "PCounter",
    "StackTracer",
]

DEFAULT_TRACE_STACK_DEPTH = 32

Capturer = Callable[[int, int], tuple[FrameAddress, ...]]


class PCounter:
    """
    A captured call stack.

    The address tuple is immutable and may be shared freely between threads.
    The memoized first frame is resolved at most once, even under concurrent
    first access.
    """

    __slots__ = ("_addresses", "_first", "_resolver")

    def __init__(self, addresses: Iterable[FrameAddress] = (), *, resolver: Resolver = resolve):
        """
        :param addresses: Captured addresses, nearest frame first.
        :param resolver: Maps one address to (func_full, file, line).
        """
        self._addresses: tuple[FrameAddress, ...] = tuple(addresses)
        self._resolver = resolver
        self._first: OnceValue[Frame] = OnceValue(self._resolve_first)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} depth={self.depth} first={self._first!r}>"

    @property
    def addresses(self) -> tuple[FrameAddress, ...]:
        return self._addresses

    @property
    def depth(self) -> int:
        """Number of captured addresses."""
        return len(self._addresses)

    def first_frame(self) -> Frame:
        """Return the frame nearest the capture site, resolving it on first call."""
        return self._first.get()

    def _resolve_first(self) -> Frame:
        if not self._addresses:
            return UNRESOLVED_FRAME
        return Frame.from_address(self._addresses[0], self._resolver)

    @property
    def func_full(self) -> str:
        """
        Qualified name of the function.

        Example:
            "mstair/runpoint/core/pcounter.(PCounter).walk_frames.<lambda>"
        """
        return self.first_frame().func_full

    @property
    def pack_full(self) -> str:
        """Package path, e.g. "mstair/runpoint/core/pcounter"."""
        return self.first_frame().pack_full

    @property
    def package(self) -> str:
        """Package name, e.g. "pcounter"."""
        return self.first_frame().package

    @property
    def func_long(self) -> str:
        """Long name, e.g. "(PCounter).walk_frames.<lambda>"."""
        return self.first_frame().func_long

    @property
    def receiver(self) -> str:
        """Receiver type, e.g. "PCounter"."""
        return self.first_frame().receiver

    @property
    def function(self) -> str:
        """Function name, e.g. "walk_frames"."""
        return self.first_frame().function

    @property
    def module(self) -> str:
        return self.first_frame().module

    @property
    def dir(self) -> str:
        return self.first_frame().dir

    @property
    def file(self) -> str:
        return self.first_frame().file

    @property
    def filename(self) -> str:
        return self.first_frame().filename

    @property
    def line(self) -> int:
        return self.first_frame().line

    def walk_frames(self, visit: Callable[[Frame], object] | None) -> int:
        """
        Resolve every captured address and pass each frame to `visit`.

        Frames are visited nearest first. The memoized first frame is neither
        read nor populated. If `visit` returns exactly False the walk stops
        after that frame.

        :param visit: Callback receiving one Frame per address; None is a no-op.
        :return int: Number of frames visited.
        """
        if visit is None:
            return 0
        num = 0
        for frame in self.frames():
            num += 1
            if visit(frame) is False:
                break
        return num

    def frames(self) -> Iterator[Frame]:
        """Yield a freshly resolved Frame for each captured address."""
        for address in self._addresses:
            yield Frame.from_address(address, self._resolver)


class StackTracer:
    """
    Factory for PCounter instances.

    Holds the maximum number of addresses a capture requests. Changing the
    depth never affects handles that were already captured.
    """

    def __init__(
        self,
        depth: int = DEFAULT_TRACE_STACK_DEPTH,
        *,
        capturer: Capturer = capture_addresses,
        resolver: Resolver = resolve,
    ) -> None:
        """
        :param depth: Maximum capture depth, at least 1.
        :param capturer: Primitive returning addresses for (skip, max_depth).
        :param resolver: Primitive resolving one address.
        :raises ValueError: If depth is less than 1.
        """
        self._depth = _validate_depth(depth)
        self._lock = threading.Lock()
        self._capturer = capturer
        self._resolver = resolver

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} depth={self.depth}>"

    @property
    def depth(self) -> int:
        with self._lock:
            return self._depth

    def set_depth(self, depth: int) -> int:
        """
        Set the maximum capture depth.

        :param depth: New depth, at least 1.
        :return int: The previous depth.
        :raises ValueError: If depth is less than 1 (the depth is left unchanged).
        """
        _validate_depth(depth)
        with self._lock:
            previous, self._depth = self._depth, depth
        if previous != depth:
            logging.getLogger(__name__).debug("trace stack depth %d -> %d", previous, depth)
        return previous

    def capture(self, skip: int = 0, *, depth: int | None = None) -> PCounter:
        """
        Capture the stack of the calling code.

        :param skip: Extra frames to skip above the caller of capture().
        :param depth: Per-call depth; defaults to the tracer's depth at call time.
        :return PCounter: Handle owning the (possibly empty) captured stack.
        :raises ValueError: If skip is negative or depth is less than 1.
        """
        if skip < 0:
            raise ValueError(f"skip must not be negative: {skip}")
        max_depth = self.depth if depth is None else _validate_depth(depth)
        # +1 skips this method's own frame
        return PCounter(self._capturer(skip + 1, max_depth), resolver=self._resolver)


def _validate_depth(depth: int) -> int:
    if isinstance(depth, bool) or not isinstance(depth, int):
        raise TypeError(f"depth must be an int, got {type(depth).__name__}")
    if depth < 1:
        raise ValueError(f"depth must be greater than 0: {depth}")
    return depth


# End of file: src/mstair/runpoint/core/pcounter.py

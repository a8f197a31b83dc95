# File: src/mstair/runpoint/base/caller_module_name_and_level.py

from __future__ import annotations

from mstair.runpoint.core import shortcuts as rp
from mstair.runpoint.core.pcounter import DEFAULT_TRACE_STACK_DEPTH


__all__ = [
    "caller_module_name_and_level",
]


def caller_module_name_and_level(
    *, stacklevel: int = 1, skip_module_frames: bool = True
) -> tuple[str, int]:
    """
    Resolve the name of the calling module and return it along with its actual stacklevel.

    This function walks a captured stack, skipping `<module>` frames if requested,
    and returns the module of the first meaningful frame it finds. It also returns the
    absolute stack level at which that frame was located - useful for logging
    frameworks that require accurate stacklevel adjustment.

    :param stacklevel: Number of meaningful (non-<module>) frames to skip.
    :param skip_module_frames: Skip top-level frames like `<module>`. Default is True.
    :return tuple[str, int]: (module name or "", number of frames walked from this call)
    """
    if stacklevel < 1:
        raise ValueError("stacklevel must be greater than 0")

    # Sized from stacklevel, not from set_trace_stack_depth(); first frame is this function
    here = rp.default_tracer().capture(depth=stacklevel + DEFAULT_TRACE_STACK_DEPTH)
    frames = here.frames()
    current = next(frames, None)
    resolved_level = 0
    for _ in range(stacklevel):
        # Skip "<module>" frames if requested
        while skip_module_frames and current is not None and current.function == "<module>":
            current = next(frames, None)
            resolved_level += 1

        if current is None:
            break

        current = next(frames, None)
        resolved_level += 1

    resolved_name = current.module if current is not None else ""
    return resolved_name, resolved_level


# End of file: src/mstair/runpoint/base/caller_module_name_and_level.py

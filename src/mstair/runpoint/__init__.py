"""
package: mstair.runpoint
"""

# <AUTOGEN_INIT>
from mstair.runpoint import (
    base,
    core,
    xlogging,
)


__all__ = [
    "base",
    "core",
    "xlogging",
]
# </AUTOGEN_INIT>

from mstair.runpoint.core.frame import UNRESOLVED_FRAME, Frame
from mstair.runpoint.core.funcname import FuncNameParts, split_func_full
from mstair.runpoint.core.pcounter import DEFAULT_TRACE_STACK_DEPTH, PCounter, StackTracer
from mstair.runpoint.core.shortcuts import (
    default_tracer,
    directory,
    file,
    filename,
    func_full,
    func_long,
    function,
    line,
    pack_full,
    package,
    pc,
    receiver,
    set_trace_stack_depth,
    trace_stack_depth,
)


__all__ += [
    "DEFAULT_TRACE_STACK_DEPTH",
    "UNRESOLVED_FRAME",
    "Frame",
    "FuncNameParts",
    "PCounter",
    "StackTracer",
    "default_tracer",
    "directory",
    "file",
    "filename",
    "func_full",
    "func_long",
    "function",
    "line",
    "pack_full",
    "package",
    "pc",
    "receiver",
    "set_trace_stack_depth",
    "split_func_full",
    "trace_stack_depth",
]

__version__ = "0.1.0"

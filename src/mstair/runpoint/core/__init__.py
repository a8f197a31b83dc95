"""
package: mstair.runpoint.core
"""

# <AUTOGEN_INIT>
from mstair.runpoint.core import (
    frame,
    funcname,
    host_runtime,
    once,
    pcounter,
    shortcuts,
)


__all__ = [
    "frame",
    "funcname",
    "host_runtime",
    "once",
    "pcounter",
    "shortcuts",
]
# </AUTOGEN_INIT>

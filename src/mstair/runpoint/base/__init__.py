"""
package: mstair.runpoint.base
"""

# <AUTOGEN_INIT>
from mstair.runpoint.base import (
    caller_module_name_and_level,
    config,
    fs_helpers,
)


__all__ = [
    "caller_module_name_and_level",
    "config",
    "fs_helpers",
]
# </AUTOGEN_INIT>

"""
Commandant: git-style hierarchical command-line parsing with generated help.

Declare commands and options on a Commander, then parse an argument vector
into a nested dict keyed by command symbol. See commander.py for an example.
"""
from collections import namedtuple

from . import commander, commands, faults, options
from .options import *
from .commands import *
from .commander import *
from .faults import *

__title__ = "commandant"
__license__ = "MIT"
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

VersionInfo = namedtuple("VersionInfo", "major minor micro releaselevel serial metadata")
# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__title__",
    "__license__",
    "__version__",
    "version_info",
    *options.__all__,
    *commands.__all__,
    *commander.__all__,
    *faults.__all__,
)

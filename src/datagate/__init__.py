"""
datagate - schema-validated data access over interchangeable storage drivers.

The public API lives in :mod:`datagate.core` and is re-exported here.
"""

__version__ = "0.1.0"

from datagate.core import *  # noqa: F401,F403
from datagate.core import __all__  # noqa: F401

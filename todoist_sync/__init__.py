"""
TodoistSync: optimistic local mutations of Todoist entities, synchronized
with the server in batches.
"""

from pyrollup import rollup

from . import config, core
from .config import *  # noqa
from .core import *  # noqa

__all__ = rollup(core, config)

__canonical_children__ = [
    "core",
    "config",
]

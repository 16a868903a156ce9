"""
This module implements the local cache and command queue used to mutate
Todoist entities optimistically.
"""

from pyrollup import rollup

from . import command, entity, exceptions, section, session
from .command import *  # noqa
from .entity import *  # noqa
from .exceptions import *  # noqa
from .section import *  # noqa
from .session import *  # noqa

__all__ = rollup(
    session,
    section,
    command,
    entity,
    exceptions,
)

__canonical_children__ = [
    "session",
    "section",
    "command",
    "entity",
    "exceptions",
]

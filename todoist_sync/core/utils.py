"""
Common utilities.
"""

import uuid

__all__ = [
    "SECTION_MARKER",
    "generate_uuid",
    "generate_temp_id",
]

SECTION_MARKER = "#"
"""
Marker prefixed to a section's name when displayed.
"""


def generate_uuid() -> str:
    """
    Generate a unique token for a command. Used by the server to suppress
    duplicate submissions, so it must never be reused.
    """
    return str(uuid.uuid4())


def generate_temp_id() -> str:
    """
    Generate the value of a temporary id, assigned to an entity before the
    server has acknowledged its creation.
    """
    return str(uuid.uuid4())

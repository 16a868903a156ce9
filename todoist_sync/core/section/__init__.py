from pyrollup import rollup

from . import client, section
from .client import *  # noqa
from .section import *  # noqa

__all__ = rollup(section, client)
__canonical_syms__ = __all__

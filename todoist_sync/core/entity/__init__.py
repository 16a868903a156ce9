from pyrollup import rollup

from . import entity, types
from .entity import *  # noqa
from .types import *  # noqa

__all__ = rollup(entity, types)
__canonical_syms__ = __all__

"""Services package: the composition registry and its wiring errors.

Keep this package minimal; domain services live in their own packages and
are wired together in `inspection_lib.main`.
"""
from .container import Registry
from .errors import CyclicDependencyError, UnregisteredTypeError

__all__ = [
    "Registry",
    "CyclicDependencyError",
    "UnregisteredTypeError",
]

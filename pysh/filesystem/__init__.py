"""
pysh Filesystem Module

Search-path lookup and path expansion.
"""

from .path_resolver import ExecutableResolver, expand_home, resolve

__all__ = [
    'ExecutableResolver',
    'expand_home',
    'resolve',
]

"""
Path Resolver Module

Resolves command names against the directories of the PATH search
path and expands home-relative paths.

Author: YSNRFD
Version: 1.0.0
"""

import os
from typing import Optional, List, Mapping

from pysh.exceptions import HomeNotSetError
from pysh.logger import get_logger


class ExecutableResolver:
    """
    Looks up executables along the command search path.

    The search path is read from the environment on every call so
    that changes to PATH made during a session are honoured.

    Example:
        >>> resolver = ExecutableResolver()
        >>> resolver.lookup('ls')
        '/usr/bin/ls'
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ if environ is not None else os.environ
        self._logger = get_logger('path')

    def search_path(self) -> List[str]:
        """Directories listed in PATH, in order, empty entries skipped."""
        raw = self._environ.get('PATH', '')
        return [d for d in raw.split(os.pathsep) if d]

    def lookup(self, name: str) -> Optional[str]:
        """
        Find the executable file for a command name.

        Args:
            name: Command name (no directory separators)

        Returns:
            Absolute path of the first match, or None
        """
        if not name or os.sep in name:
            return None

        for directory in self.search_path():
            candidate = os.path.join(directory, name)
            if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
                return os.path.abspath(candidate)

        return None

    def list_all(self) -> set[str]:
        """
        Names of every entry in every search directory.

        Directories that cannot be listed contribute nothing.
        """
        names: set[str] = set()

        for directory in self.search_path():
            try:
                with os.scandir(directory) as entries:
                    for entry in entries:
                        names.add(entry.name)
            except OSError as e:
                self._logger.debug(
                    f"Skipping unreadable search directory: {e.strerror}",
                    context={'dir': directory}
                )

        return names


def expand_home(path: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Expand a leading ``~`` or ``~/`` to the value of HOME.

    Other paths are returned unchanged; ``~user`` forms are not expanded.

    Raises:
        HomeNotSetError: If expansion is needed and HOME is not set
    """
    if path != '~' and not path.startswith('~/'):
        return path

    env = environ if environ is not None else os.environ
    home = env.get('HOME')
    if not home:
        raise HomeNotSetError('HOME')

    return home + path[1:]


def resolve(path: str, cwd: str) -> str:
    """Make a path absolute relative to cwd and normalize it."""
    if not os.path.isabs(path):
        path = os.path.join(cwd, path)
    return os.path.normpath(path)

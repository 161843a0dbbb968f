"""
pysh Exception Hierarchy

All custom exceptions inherit from PyshError.

Architecture:
    PyshError (Base)
    ├── ConfigError
    │   └── ConfigValidationError
    └── ShellException
        ├── HomeNotSetError
        ├── DirectoryNotFoundError
        ├── CommandNotFoundError
        ├── RedirectionError
        └── ExecutionError
"""

from .core_exceptions import (
    PyshError,
    ConfigError,
    ConfigValidationError,
)

from .shell_exceptions import (
    ShellException,
    HomeNotSetError,
    DirectoryNotFoundError,
    CommandNotFoundError,
    RedirectionError,
    ExecutionError,
)

__all__ = [
    # Core exceptions
    "PyshError",
    "ConfigError",
    "ConfigValidationError",
    # Shell exceptions
    "ShellException",
    "HomeNotSetError",
    "DirectoryNotFoundError",
    "CommandNotFoundError",
    "RedirectionError",
    "ExecutionError",
]

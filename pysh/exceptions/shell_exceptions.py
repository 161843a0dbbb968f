"""
Shell Exceptions

Exceptions related to command dispatch, builtins, path expansion and
I/O redirection.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any

from .core_exceptions import PyshError


class ShellException(PyshError):
    """
    Base exception for all shell-related errors.

    This is the parent class for all exceptions raised while a
    command line is being dispatched.

    Attributes:
        message: Human-readable error description
        command: Command name associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if command:
            ctx["command"] = command
        super().__init__(
            message=message,
            error_code=error_code or 2000,
            recoverable=True,
            context=ctx
        )
        self.command = command


class HomeNotSetError(ShellException):
    """
    The HOME environment variable is not set.

    Raised by home-directory expansion (``~`` and ``~/...``). It is
    kept distinct from DirectoryNotFoundError so callers can report
    a different diagnostic.

    Example:
        >>> raise HomeNotSetError()
    """

    def __init__(
        self,
        variable: str = "HOME",
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Environment variable not found: {variable}",
            error_code=2001,
            context=context
        )
        self.variable = variable


class DirectoryNotFoundError(ShellException):
    """
    The target directory does not exist.

    Example:
        >>> raise DirectoryNotFoundError("/no/such/dir", command="cd")
    """

    def __init__(
        self,
        path: str,
        command: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Directory not found: {path}",
            command=command,
            error_code=2002,
            context=context
        )
        self.path = path


class CommandNotFoundError(ShellException):
    """Neither a builtin nor an executable on the search path."""

    def __init__(
        self,
        command: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Command not found: {command}",
            command=command,
            error_code=2003,
            context=context
        )


class RedirectionError(ShellException):
    """
    A redirection target could not be opened.

    Example:
        >>> raise RedirectionError("/root/x", "Permission denied")
    """

    def __init__(
        self,
        path: str,
        reason: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["path"] = path
        super().__init__(
            message=f"Cannot open {path}: {reason}",
            error_code=2004,
            context=ctx
        )
        self.path = path
        self.reason = reason


class ExecutionError(ShellException):
    """An external command could not be started or waited for."""

    def __init__(
        self,
        command: str,
        reason: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Execution error: {reason}",
            command=command,
            error_code=2005,
            context=context
        )
        self.reason = reason

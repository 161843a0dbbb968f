"""
Core Exceptions

Base exception for pysh and the errors raised while loading and
validating configuration at start-up.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class PyshError(Exception):
    """
    Base exception for all pysh errors.

    Attributes:
        message: Human-readable error description
        error_code: Numeric error code for programmatic handling
        recoverable: Whether the shell can keep running after the error
        context: Additional context about the error

    Example:
        >>> raise PyshError("Shell subsystem failure", error_code=1000)
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[int] = None,
        recoverable: bool = True,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code or 0
        self.recoverable = recoverable
        self.context = context or {}

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base = f"{base} ({context_str})"
        return base

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code}, "
            f"recoverable={self.recoverable})"
        )


class ConfigError(PyshError):
    """
    Configuration could not be loaded.

    Raised when the configuration file is missing, unreadable or
    is not valid JSON.

    Example:
        >>> raise ConfigError("Configuration file not found", path="pysh.json")
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if path:
            ctx["path"] = path
        super().__init__(
            message=message,
            error_code=1001,
            recoverable=False,
            context=ctx
        )
        self.path = path


class ConfigValidationError(ConfigError):
    """Raised when a configuration key or value is invalid."""

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if key:
            ctx["key"] = key
        super().__init__(message=message, context=ctx)
        self.error_code = 1002
        self.key = key

"""
pysh Core Module

Core components shared by every subsystem:
- Configuration Loader
"""

from .config_loader import (
    ConfigLoader,
    Config,
    ShellConfig,
    CompletionConfig,
    LoggingConfig,
    get_config,
)

__all__ = [
    'ConfigLoader',
    'Config',
    'ShellConfig',
    'CompletionConfig',
    'LoggingConfig',
    'get_config',
]

"""
pysh - A small POSIX-flavoured interactive shell

Parses command lines with shell quoting and redirection, runs builtins
and external programs, and completes command names on Tab.
"""

__version__ = "1.0.0"
__author__ = "YSNRFD"

# Import main components for convenience
from .shell.parser import CommandParser, ParsedCommand, parse
from .shell.completion import CompletionIndex, CompletionKind, CompletionOutcome
from .shell.shell import Shell, create_shell

__all__ = [
    'CommandParser',
    'ParsedCommand',
    'parse',
    'CompletionIndex',
    'CompletionKind',
    'CompletionOutcome',
    'Shell',
    'create_shell',
]

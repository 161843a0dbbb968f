"""
pysh Shell Module

Provides the interactive command-line shell:
- Command parsing
- Built-in commands
- I/O redirection
- Command history
- Tab completion
"""

from .parser import (
    CommandParser,
    Lexer,
    LexState,
    ParsedCommand,
    Redirection,
    Token,
    TokenType,
    assemble,
    parse,
    tokenize,
)
from .completion import (
    CompletionIndex,
    CompletionKind,
    CompletionOutcome,
    ReadlineCompleter,
    TrieNode,
)
from .history import CommandHistory
from .builtins import BuiltinCommands
from .shell import Shell, create_shell

__all__ = [
    'CommandParser',
    'Lexer',
    'LexState',
    'ParsedCommand',
    'Redirection',
    'Token',
    'TokenType',
    'assemble',
    'parse',
    'tokenize',
    'CompletionIndex',
    'CompletionKind',
    'CompletionOutcome',
    'ReadlineCompleter',
    'TrieNode',
    'CommandHistory',
    'BuiltinCommands',
    'Shell',
    'create_shell',
]

"""
Command Parser Module

Parses a shell command line into a structured command.

Parsing happens in two stages. The Lexer turns the raw line into a
flat token stream, and CommandParser.assemble() folds the tokens into
a ParsedCommand holding the command name, its arguments and any
stdout/stderr redirection targets.

Quoting rules:
- Outside quotes, a backslash escapes the next character, whatever it is.
- Inside double quotes, a backslash escapes only ``"`` and ``\\``; before
  any other character it is kept.
- Inside single quotes, nothing is special except the closing quote.

Parsing never fails. A redirect operator with no target is dropped and
an unterminated quote ends the word at end of input.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional


class TokenType(Enum):
    """Token types for command parsing."""
    WORD = "word"
    OUTPUT_REDIRECT = "output_redirect"
    ERROR_REDIRECT = "error_redirect"
    PIPE = "pipe"
    BACKGROUND = "background"


@dataclass(frozen=True)
class Token:
    """A lexed token. ``append`` only applies to the redirect types."""
    type: TokenType
    value: str
    append: bool = False

    @classmethod
    def word(cls, text: str) -> 'Token':
        return cls(TokenType.WORD, text)

    @classmethod
    def output_redirect(cls, append: bool = False) -> 'Token':
        return cls(TokenType.OUTPUT_REDIRECT, '>>' if append else '>', append)

    @classmethod
    def error_redirect(cls, append: bool = False) -> 'Token':
        return cls(TokenType.ERROR_REDIRECT, '2>>' if append else '2>', append)

    @classmethod
    def pipe(cls) -> 'Token':
        return cls(TokenType.PIPE, '|')

    @classmethod
    def background(cls) -> 'Token':
        return cls(TokenType.BACKGROUND, '&')


class Redirection(NamedTuple):
    """A file redirection target."""
    path: str
    append: bool = False


# Characters that may appear in a word without quoting when a command
# is written back out as a line
_SAFE_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    "@%+=:,./-_~"
)


def quote(word: str) -> str:
    """Quote a word so that the Lexer reads it back unchanged."""
    if word and all(c in _SAFE_CHARS for c in word):
        return word
    return "'" + word.replace("'", "'\\''") + "'"


@dataclass
class ParsedCommand:
    """
    A parsed command line.

    ``command`` is empty only when the line held no words; callers
    treat that as a no-op.
    """
    command: str = ""
    args: List[str] = field(default_factory=list)
    output_redirect: Optional[Redirection] = None
    error_redirect: Optional[Redirection] = None

    @property
    def is_empty(self) -> bool:
        return not self.command

    def to_line(self) -> str:
        """Write the command back out as a line that parses to an equal command."""
        parts = []

        if self.command:
            parts.append(quote(self.command))
        parts.extend(quote(arg) for arg in self.args)

        if self.output_redirect is not None:
            parts.append('>>' if self.output_redirect.append else '>')
            parts.append(quote(self.output_redirect.path))

        if self.error_redirect is not None:
            parts.append('2>>' if self.error_redirect.append else '2>')
            parts.append(quote(self.error_redirect.path))

        return ' '.join(parts)


class LexState(Enum):
    """Quote context of the lexer while reading a word."""
    UNQUOTED = "unquoted"
    SINGLE_QUOTED = "single_quoted"
    DOUBLE_QUOTED = "double_quoted"


class Lexer:
    """
    Converts one command line into a token stream.

    Example:
        >>> [t.value for t in Lexer("echo hi 2>> err.log").tokenize()]
        ['echo', 'hi', '2>>', 'err.log']
    """

    WHITESPACE = frozenset(' \t')
    OPERATORS = frozenset('>|&')

    def __init__(self, line: str):
        self._chars = line
        self._pos = 0

    def _peek(self, offset: int = 0) -> Optional[str]:
        index = self._pos + offset
        if index < len(self._chars):
            return self._chars[index]
        return None

    def _advance(self) -> Optional[str]:
        if self._pos < len(self._chars):
            char = self._chars[self._pos]
            self._pos += 1
            return char
        return None

    def tokenize(self) -> List[Token]:
        """Convert the line into tokens."""
        tokens: List[Token] = []

        while self._pos < len(self._chars):
            char = self._peek()

            if char in self.WHITESPACE:
                self._advance()
                continue

            if char == '>':
                self._advance()
                tokens.append(Token.output_redirect(self._consume_append()))
                continue

            # 1> and 2> only count as operators at the start of a word
            if char in ('1', '2') and self._peek(1) == '>':
                self._advance()
                self._advance()
                append = self._consume_append()
                if char == '1':
                    tokens.append(Token.output_redirect(append))
                else:
                    tokens.append(Token.error_redirect(append))
                continue

            if char == '|':
                self._advance()
                tokens.append(Token.pipe())
                continue

            if char == '&':
                self._advance()
                tokens.append(Token.background())
                continue

            word = self._read_word()
            if word is not None:
                tokens.append(Token.word(word))

        return tokens

    def _consume_append(self) -> bool:
        """Consume the second ``>`` of an append operator, if present."""
        if self._peek() == '>':
            self._advance()
            return True
        return False

    def _read_word(self) -> Optional[str]:
        """
        Read one word, honouring quotes and escapes.

        Returns None when nothing but a dangling escape was consumed.
        """
        chars: List[str] = []
        state = LexState.UNQUOTED
        quoted = False

        while self._pos < len(self._chars):
            char = self._peek()

            if state is LexState.UNQUOTED:
                if char in self.WHITESPACE or char in self.OPERATORS:
                    break
                self._advance()
                if char == "'":
                    state = LexState.SINGLE_QUOTED
                    quoted = True
                elif char == '"':
                    state = LexState.DOUBLE_QUOTED
                    quoted = True
                elif char == '\\':
                    escaped = self._advance()
                    if escaped is not None:
                        chars.append(escaped)
                else:
                    chars.append(char)

            elif state is LexState.SINGLE_QUOTED:
                self._advance()
                if char == "'":
                    state = LexState.UNQUOTED
                else:
                    chars.append(char)

            else:
                self._advance()
                if char == '"':
                    state = LexState.UNQUOTED
                elif char == '\\':
                    if self._peek() in ('"', '\\'):
                        chars.append(self._advance())
                    else:
                        # The following character is read on the next pass
                        chars.append('\\')
                else:
                    chars.append(char)

        if chars or quoted:
            return ''.join(chars)
        return None


class CommandParser:
    """
    Parses shell command lines.

    Handles:
    - Command and arguments
    - Output redirection (>, >>, 1>, 1>>)
    - Error redirection (2>, 2>>)
    - Quoted strings and escapes

    Pipe (|) and background (&) tokens are recognized but ignored.

    Example:
        >>> cmd = CommandParser.parse("echo hello > output.txt")
        >>> cmd.command, cmd.args, cmd.output_redirect
        ('echo', ['hello'], Redirection(path='output.txt', append=False))
    """

    @staticmethod
    def tokenize(line: str) -> List[Token]:
        return Lexer(line).tokenize()

    @staticmethod
    def assemble(tokens: List[Token]) -> ParsedCommand:
        """
        Fold a token stream into a command.

        The first word becomes the command, later words its arguments.
        A redirect takes the following word as its target; without one
        it is dropped. A later redirect of the same kind replaces an
        earlier one.
        """
        cmd = ParsedCommand()
        i = 0

        while i < len(tokens):
            token = tokens[i]

            if token.type == TokenType.WORD:
                if not cmd.command:
                    cmd.command = token.value
                else:
                    cmd.args.append(token.value)

            elif token.type in (TokenType.OUTPUT_REDIRECT, TokenType.ERROR_REDIRECT):
                if i + 1 < len(tokens) and tokens[i + 1].type == TokenType.WORD:
                    target = Redirection(tokens[i + 1].value, token.append)
                    if token.type == TokenType.OUTPUT_REDIRECT:
                        cmd.output_redirect = target
                    else:
                        cmd.error_redirect = target
                    i += 1

            i += 1

        return cmd

    @classmethod
    def parse(cls, line: str) -> ParsedCommand:
        """
        Parse a command line.

        Args:
            line: Command line string

        Returns:
            ParsedCommand, with an empty command if the line had no words
        """
        return cls.assemble(cls.tokenize(line))


def tokenize(line: str) -> List[Token]:
    """Convert a line into tokens."""
    return CommandParser.tokenize(line)


def assemble(tokens: List[Token]) -> ParsedCommand:
    """Build a command from a token stream."""
    return CommandParser.assemble(tokens)


def parse(line: str) -> ParsedCommand:
    """Parse a line into a command."""
    return CommandParser.parse(line)

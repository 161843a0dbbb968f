"""
Command Completion Module

Tab completion over the names of known commands.

The CompletionIndex keeps every builtin name and every entry of the
PATH search directories in a prefix trie. A completion request walks
the trie along the partial word and answers with one of:

- NO_MATCH: nothing starts with the word
- COMPLETE: exactly one match, returned with a trailing space
- EXTEND_PREFIX: several matches sharing a longer common prefix
- AMBIGUOUS: several matches and nothing to add
- SHOW_ALL: the same as AMBIGUOUS, but a second request came within
  the double-press window, so every match should be listed

ReadlineCompleter adapts those outcomes to the ``readline`` completer
protocol.

Author: YSNRFD
Version: 1.0.0
"""

import sys
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional, TextIO, Tuple

from pysh.core.rwlock import ReadWriteLock
from pysh.filesystem.path_resolver import ExecutableResolver
from pysh.logger import get_logger


DEFAULT_DOUBLE_PRESS_WINDOW = 0.5


class TrieNode:
    """
    One node of the prefix trie.

    ``value`` is set only on terminal nodes and holds the full name
    that ends there.
    """

    def __init__(self):
        self.children: dict[str, 'TrieNode'] = {}
        self.terminal = False
        self.value: Optional[str] = None

    def insert(self, name: str) -> bool:
        """Insert a name below this node. Returns True if it was new."""
        node = self
        for char in name:
            child = node.children.get(char)
            if child is None:
                child = TrieNode()
                node.children[char] = child
            node = child

        added = not node.terminal
        node.terminal = True
        node.value = name
        return added

    def find(self, prefix: str) -> Optional['TrieNode']:
        """Node reached by following prefix, or None."""
        node = self
        for char in prefix:
            node = node.children.get(char)
            if node is None:
                return None
        return node

    def collect(self) -> List[str]:
        """All names stored at or below this node, pre-order."""
        results: List[str] = []
        stack = [self]

        while stack:
            node = stack.pop()
            if node.terminal:
                results.append(node.value)
            stack.extend(node.children.values())

        return results


def longest_common_prefix(names: List[str]) -> str:
    """
    Longest prefix shared by every name.

    Sorts a copy of the names, then shrinks the first one until every
    other name starts with it.
    """
    if not names:
        return ""

    ordered = sorted(names)
    prefix = ordered[0]
    for name in ordered[1:]:
        while not name.startswith(prefix):
            prefix = prefix[:-1]
    return prefix


class CompletionKind(Enum):
    """What a completion request resolved to."""
    NO_MATCH = "no_match"
    COMPLETE = "complete"
    EXTEND_PREFIX = "extend_prefix"
    AMBIGUOUS = "ambiguous"
    SHOW_ALL = "show_all"


@dataclass(frozen=True)
class CompletionOutcome:
    """Result of CompletionIndex.complete()."""
    kind: CompletionKind
    text: str = ""
    matches: Tuple[str, ...] = ()

    @classmethod
    def no_match(cls) -> 'CompletionOutcome':
        return cls(CompletionKind.NO_MATCH)

    @classmethod
    def complete(cls, text: str) -> 'CompletionOutcome':
        return cls(CompletionKind.COMPLETE, text=text)

    @classmethod
    def extend_prefix(cls, prefix: str) -> 'CompletionOutcome':
        return cls(CompletionKind.EXTEND_PREFIX, text=prefix)

    @classmethod
    def ambiguous(cls) -> 'CompletionOutcome':
        return cls(CompletionKind.AMBIGUOUS)

    @classmethod
    def show_all(cls, matches: Iterable[str]) -> 'CompletionOutcome':
        return cls(CompletionKind.SHOW_ALL, matches=tuple(matches))


class CompletionIndex:
    """
    Prefix index of command names.

    Built once from the builtin names; refresh() rebuilds it in full
    from the builtins plus every entry of the search directories.
    Lookups share a readers/writer lock with refresh(), and the
    double-press timestamp belongs to the instance so independent
    shells do not interfere.

    Example:
        >>> index = CompletionIndex(['cd', 'cat', 'car'])
        >>> index.complete('ca', now=0.0).kind
        <CompletionKind.AMBIGUOUS: 'ambiguous'>
        >>> index.complete('ca', now=0.1).matches
        ('car', 'cat')
    """

    def __init__(
        self,
        builtins: Iterable[str] = (),
        resolver: Optional[ExecutableResolver] = None,
        double_press_window: float = DEFAULT_DOUBLE_PRESS_WINDOW,
    ):
        self._logger = get_logger('completion')
        self._builtins = frozenset(builtins)
        self._resolver = resolver if resolver is not None else ExecutableResolver()
        self._double_press_window = double_press_window

        self._lock = ReadWriteLock()
        self._root = TrieNode()
        self._size = 0

        self._press_lock = threading.Lock()
        self._last_ambiguous: Optional[float] = None

        for name in self._builtins:
            self._insert(self._root, name)

    @property
    def double_press_window(self) -> float:
        return self._double_press_window

    def _insert(self, root: TrieNode, name: str) -> None:
        if name and root.insert(name):
            self._size += 1

    def insert(self, name: str) -> None:
        """Add a name. Inserting a known name again changes nothing."""
        with self._lock.write_locked():
            self._insert(self._root, name)

    def refresh(self) -> None:
        """
        Rebuild the index from the builtins and the search path.

        The directories are scanned before the lock is taken; the new
        trie then replaces the old one under exclusive access.
        """
        names = set(self._builtins)
        names.update(self._resolver.list_all())

        with self._lock.write_locked():
            self._root = TrieNode()
            self._size = 0
            for name in names:
                self._insert(self._root, name)

        self._logger.debug("Completion index refreshed", context={'names': len(names)})

    def names(self) -> set[str]:
        """Every name currently in the index."""
        with self._lock.read_locked():
            return set(self._root.collect())

    def __contains__(self, name: str) -> bool:
        with self._lock.read_locked():
            node = self._root.find(name)
            return node is not None and node.terminal

    def __len__(self) -> int:
        with self._lock.read_locked():
            return self._size

    def complete(self, partial: str, now: Optional[float] = None) -> CompletionOutcome:
        """
        Work out what a partial word should expand to.

        Args:
            partial: The word being typed
            now: Monotonic timestamp in seconds of this request

        Returns:
            CompletionOutcome describing the suggestion
        """
        if now is None:
            now = time.monotonic()

        with self._lock.read_locked():
            node = self._root.find(partial)
            matches = node.collect() if node is not None else []

        if not matches:
            return CompletionOutcome.no_match()

        if len(matches) == 1:
            return CompletionOutcome.complete(matches[0] + " ")

        matches.sort()
        common = longest_common_prefix(matches)
        if len(common) > len(partial):
            return CompletionOutcome.extend_prefix(common)

        if self._is_double_press(now):
            return CompletionOutcome.show_all(matches)
        return CompletionOutcome.ambiguous()

    def _is_double_press(self, now: float) -> bool:
        """Record an ambiguous request and report whether it followed another quickly."""
        with self._press_lock:
            last = self._last_ambiguous
            self._last_ambiguous = now

        return last is not None and 0 <= now - last < self._double_press_window


class ReadlineCompleter:
    """
    Bridges CompletionIndex to ``readline.set_completer``.

    readline calls the completer with increasing ``state`` until it
    returns None; only state 0 carries a suggestion. Ambiguous requests
    ring the terminal bell, and SHOW_ALL prints the matches above a
    fresh prompt.

    Example:
        >>> completer = ReadlineCompleter(index, prompt=lambda: '$ ')
        >>> readline.set_completer(completer)
    """

    def __init__(
        self,
        index: CompletionIndex,
        prompt: Callable[[], str] = lambda: "$ ",
        line_buffer: Optional[Callable[[], str]] = None,
        output: Optional[TextIO] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._index = index
        self._prompt = prompt
        self._line_buffer = line_buffer
        self._output = output
        self._clock = clock

    @property
    def output(self) -> TextIO:
        return self._output if self._output is not None else sys.stdout

    def __call__(self, text: str, state: int) -> Optional[str]:
        if state != 0:
            return None

        outcome = self._index.complete(text, self._clock())

        if outcome.kind in (CompletionKind.COMPLETE, CompletionKind.EXTEND_PREFIX):
            return outcome.text

        if outcome.kind == CompletionKind.SHOW_ALL:
            buffer = self._line_buffer() if self._line_buffer else text
            self.output.write("\n" + "  ".join(outcome.matches) + "\n")
            self.output.write(self._prompt() + buffer)
            self.output.flush()
            return None

        # NO_MATCH and AMBIGUOUS
        self.output.write("\a")
        self.output.flush()
        return None

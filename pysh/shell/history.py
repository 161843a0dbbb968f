"""
Command History Module

Remembers the lines entered in a session and moves them to and from
history files.

Author: YSNRFD
Version: 1.0.0
"""

from typing import List, Optional

from pysh.logger import get_logger


class CommandHistory:
    """
    In-memory command history.

    Blank lines are not remembered. Once ``max_size`` entries are held
    the oldest ones are dropped. append_file() only writes the entries
    added since the previous append.

    Example:
        >>> history = CommandHistory()
        >>> history.add("echo hi")
        >>> history.last(1)
        [(1, 'echo hi')]
    """

    def __init__(self, max_size: int = 1000):
        self._entries: List[str] = []
        self._max_size = max_size
        # Number of entries dropped from the front; keeps numbering stable
        self._offset = 0
        self._appended = 0
        self._logger = get_logger('history')

    def __len__(self) -> int:
        return len(self._entries)

    def add(self, line: str) -> None:
        """Remember one line."""
        line = line.strip()
        if not line:
            return

        self._entries.append(line)
        self._trim()

    def _trim(self) -> None:
        if self._max_size and len(self._entries) > self._max_size:
            excess = len(self._entries) - self._max_size
            del self._entries[:excess]
            self._offset += excess
            self._appended = max(0, self._appended - excess)

    def entries(self) -> List[str]:
        """All remembered lines, oldest first."""
        return list(self._entries)

    def last(self, count: Optional[int] = None) -> List[tuple[int, str]]:
        """
        The most recent entries with their 1-based history numbers.

        Args:
            count: How many entries; None or a negative value means all
        """
        start = 0
        if count is not None and 0 <= count < len(self._entries):
            start = len(self._entries) - count

        return [
            (self._offset + i + 1, line)
            for i, line in enumerate(self._entries[start:], start=start)
        ]

    def mark_appended(self) -> None:
        """Treat every current entry as already written by append_file()."""
        self._appended = len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._offset = 0
        self._appended = 0

    def read_file(self, path: str) -> int:
        """
        Append the non-blank lines of a history file.

        Returns:
            Number of lines read

        Raises:
            OSError: If the file cannot be read
        """
        with open(path, 'r', encoding='utf-8') as f:
            lines = [line.strip() for line in f]

        count = 0
        for line in lines:
            if line:
                self._entries.append(line)
                count += 1
        self._trim()

        self._logger.debug(f"Read {count} history entries", context={'path': path})
        return count

    def write_file(self, path: str) -> None:
        """
        Replace a history file with every entry.

        Raises:
            OSError: If the file cannot be written
        """
        with open(path, 'w', encoding='utf-8') as f:
            for line in self._entries:
                f.write(line + "\n")
        self._appended = len(self._entries)

    def append_file(self, path: str) -> None:
        """
        Append the entries added since the previous append.

        Raises:
            OSError: If the file cannot be written
        """
        with open(path, 'a', encoding='utf-8') as f:
            for line in self._entries[self._appended:]:
                f.write(line + "\n")
        self._appended = len(self._entries)

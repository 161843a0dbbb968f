#!/usr/bin/env python3
"""
History Tests

Run with: python -m pytest pysh/tests/test_history.py -v
"""

import os
import tempfile
import unittest

from pysh.shell.history import CommandHistory


class TestCommandHistory(unittest.TestCase):
    """Test the in-memory history."""

    def test_add_and_entries(self):
        history = CommandHistory()
        history.add("echo a")
        history.add("  ")
        history.add("pwd\n")

        self.assertEqual(history.entries(), ["echo a", "pwd"])
        self.assertEqual(len(history), 2)

    def test_last(self):
        history = CommandHistory()
        for line in ("one", "two", "three"):
            history.add(line)

        self.assertEqual(history.last(2), [(2, "two"), (3, "three")])
        self.assertEqual(history.last(), [(1, "one"), (2, "two"), (3, "three")])
        self.assertEqual(history.last(10), history.last())
        self.assertEqual(history.last(0), [])

    def test_max_size_keeps_numbering(self):
        history = CommandHistory(max_size=2)
        for line in ("one", "two", "three"):
            history.add(line)

        self.assertEqual(history.entries(), ["two", "three"])
        self.assertEqual(history.last(), [(2, "two"), (3, "three")])

    def test_clear(self):
        history = CommandHistory()
        history.add("x")
        history.clear()
        self.assertEqual(history.entries(), [])


class TestHistoryFiles(unittest.TestCase):
    """Test reading and writing history files."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self._tmp.name, "history.txt")

    def tearDown(self):
        self._tmp.cleanup()

    def read(self):
        with open(self.path) as f:
            return f.read()

    def test_write_and_read(self):
        history = CommandHistory()
        history.add("echo a")
        history.add("echo b")
        history.write_file(self.path)

        self.assertEqual(self.read(), "echo a\necho b\n")

        restored = CommandHistory()
        self.assertEqual(restored.read_file(self.path), 2)
        self.assertEqual(restored.entries(), ["echo a", "echo b"])

    def test_read_skips_blank_lines(self):
        with open(self.path, "w") as f:
            f.write("ls\n\n  \ncd /\n")

        history = CommandHistory()
        history.read_file(self.path)
        self.assertEqual(history.entries(), ["ls", "cd /"])

    def test_append_only_new_entries(self):
        history = CommandHistory()
        history.add("one")
        history.append_file(self.path)
        history.add("two")
        history.add("three")
        history.append_file(self.path)
        history.append_file(self.path)

        self.assertEqual(self.read(), "one\ntwo\nthree\n")

    def test_mark_appended_skips_loaded_entries(self):
        with open(self.path, "w") as f:
            f.write("ls\n")

        history = CommandHistory()
        history.read_file(self.path)
        history.mark_appended()
        history.add("pwd")
        history.append_file(self.path)

        self.assertEqual(self.read(), "ls\npwd\n")

    def test_read_missing_file(self):
        with self.assertRaises(OSError):
            CommandHistory().read_file(os.path.join(self._tmp.name, "missing"))


if __name__ == '__main__':
    unittest.main()

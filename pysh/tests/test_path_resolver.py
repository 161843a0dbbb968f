#!/usr/bin/env python3
"""
Path Resolver Tests

Run with: python -m pytest pysh/tests/test_path_resolver.py -v
"""

import os
import stat
import tempfile
import unittest

from pysh.exceptions import DirectoryNotFoundError, HomeNotSetError, ShellException
from pysh.filesystem.path_resolver import ExecutableResolver, expand_home, resolve


def make_file(directory, name, executable=True):
    path = os.path.join(directory, name)
    with open(path, "w") as f:
        f.write("#!/bin/sh\n")
    if executable:
        os.chmod(path, os.stat(path).st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@unittest.skipUnless(os.name == "posix", "execute permission bits are POSIX-only")
class TestExecutableResolver(unittest.TestCase):
    """Test search-path lookup."""

    def setUp(self):
        self._first = tempfile.TemporaryDirectory()
        self._second = tempfile.TemporaryDirectory()
        self.first = self._first.name
        self.second = self._second.name

    def tearDown(self):
        self._first.cleanup()
        self._second.cleanup()

    def resolver(self, *dirs):
        return ExecutableResolver({"PATH": os.pathsep.join(dirs)})

    def test_search_path_skips_empty_entries(self):
        resolver = ExecutableResolver({"PATH": os.pathsep.join(["", self.first, "", self.second])})
        self.assertEqual(resolver.search_path(), [self.first, self.second])

    def test_no_path(self):
        resolver = ExecutableResolver({})
        self.assertEqual(resolver.search_path(), [])
        self.assertIsNone(resolver.lookup("ls"))
        self.assertEqual(resolver.list_all(), set())

    def test_lookup_finds_executable(self):
        path = make_file(self.second, "tool")
        self.assertEqual(self.resolver(self.first, self.second).lookup("tool"), path)

    def test_lookup_prefers_earlier_directory(self):
        earlier = make_file(self.first, "tool")
        make_file(self.second, "tool")
        self.assertEqual(self.resolver(self.first, self.second).lookup("tool"), earlier)

    def test_lookup_skips_non_executable(self):
        make_file(self.first, "tool", executable=False)
        later = make_file(self.second, "tool")
        self.assertEqual(self.resolver(self.first, self.second).lookup("tool"), later)

    def test_lookup_missing(self):
        resolver = self.resolver(self.first)
        self.assertIsNone(resolver.lookup("nothing-here"))
        self.assertIsNone(resolver.lookup(""))
        self.assertIsNone(resolver.lookup("sub/tool"))

    def test_lookup_ignores_directories(self):
        os.mkdir(os.path.join(self.first, "subdir"))
        self.assertIsNone(self.resolver(self.first).lookup("subdir"))

    def test_list_all(self):
        make_file(self.first, "a")
        make_file(self.first, "b", executable=False)
        make_file(self.second, "c")

        names = self.resolver(self.first, self.second).list_all()
        self.assertEqual(names, {"a", "b", "c"})

    def test_list_all_skips_unreadable_directories(self):
        make_file(self.second, "c")
        missing = os.path.join(self.first, "missing")
        not_a_dir = make_file(self.first, "plain")

        names = self.resolver(missing, not_a_dir, self.second).list_all()
        self.assertEqual(names, {"c"})


class TestExpandHome(unittest.TestCase):
    """Test home-directory expansion."""

    ENV = {"HOME": "/home/user"}

    def test_tilde(self):
        self.assertEqual(expand_home("~", self.ENV), "/home/user")

    def test_tilde_slash(self):
        self.assertEqual(expand_home("~/src/pysh", self.ENV), "/home/user/src/pysh")

    def test_other_paths_unchanged(self):
        for path in ("/tmp", "rel/~", "~user", "", "a~"):
            self.assertEqual(expand_home(path, self.ENV), path)

    def test_unchanged_paths_need_no_home(self):
        self.assertEqual(expand_home("/tmp", {}), "/tmp")

    def test_home_not_set(self):
        """Test missing HOME is reported distinctly from a missing directory."""
        with self.assertRaises(HomeNotSetError) as ctx:
            expand_home("~/x", {})

        self.assertIsInstance(ctx.exception, ShellException)
        self.assertNotIsInstance(ctx.exception, DirectoryNotFoundError)
        self.assertEqual(ctx.exception.variable, "HOME")


class TestResolve(unittest.TestCase):

    def test_relative(self):
        self.assertEqual(resolve("b/../c", "/a"), os.path.normpath("/a/c"))

    def test_absolute(self):
        self.assertEqual(resolve("/x/./y", "/a"), os.path.normpath("/x/y"))


if __name__ == '__main__':
    unittest.main()

#!/usr/bin/env python3
"""
Core Tests

Exceptions, logging and configuration.

Run with: python -m pytest pysh/tests/test_core.py -v
"""

import json
import logging
import os
import tempfile
import unittest
from unittest import mock

from pysh.core.config_loader import CONFIG_ENV_VAR, Config, ConfigLoader, get_config
from pysh.exceptions import (
    CommandNotFoundError,
    ConfigError,
    ConfigValidationError,
    DirectoryNotFoundError,
    ExecutionError,
    HomeNotSetError,
    PyshError,
    RedirectionError,
    ShellException,
)
from pysh.logger import LogFormatter, Logger, LogLevel, get_logger


class TestExceptions(unittest.TestCase):
    """Test the exception hierarchy."""

    def test_base_exception(self):
        exc = PyshError("Test error", error_code=1000, context={"k": "v"})

        self.assertEqual(exc.message, "Test error")
        self.assertEqual(exc.error_code, 1000)
        self.assertTrue(exc.recoverable)
        self.assertEqual(str(exc), "[Error 1000] Test error (k=v)")

    def test_shell_exceptions(self):
        exc = DirectoryNotFoundError("/missing", command="cd")
        self.assertEqual(exc.path, "/missing")
        self.assertEqual(exc.command, "cd")
        self.assertEqual(exc.error_code, 2002)

        exc = HomeNotSetError()
        self.assertEqual(exc.message, "Environment variable not found: HOME")

        exc = RedirectionError("out.txt", "Permission denied")
        self.assertEqual(exc.reason, "Permission denied")
        self.assertIn("out.txt", str(exc))

        exc = CommandNotFoundError("frob")
        self.assertEqual(exc.command, "frob")

        exc = ExecutionError("frob", "Exec format error")
        self.assertEqual(exc.reason, "Exec format error")

    def test_hierarchy(self):
        for cls in (HomeNotSetError, DirectoryNotFoundError, CommandNotFoundError,
                    RedirectionError, ExecutionError):
            self.assertTrue(issubclass(cls, ShellException))
            self.assertTrue(issubclass(cls, PyshError))

        self.assertTrue(issubclass(ConfigValidationError, ConfigError))
        self.assertFalse(issubclass(HomeNotSetError, DirectoryNotFoundError))

    def test_config_error_is_not_recoverable(self):
        exc = ConfigError("bad", path="/etc/pysh.json")
        self.assertFalse(exc.recoverable)
        self.assertEqual(exc.context["path"], "/etc/pysh.json")


class TestLogger(unittest.TestCase):
    """Test the logging system."""

    def tearDown(self):
        Logger.reset()

    def test_logger_singleton(self):
        log1 = Logger('test1')
        log2 = get_logger('test1')

        self.assertIs(log1, log2)
        self.assertEqual(log1.subsystem, 'test1')
        self.assertIsNot(log1, Logger('test2'))

    def test_log_levels(self):
        self.assertTrue(LogLevel.ERROR > LogLevel.INFO)
        self.assertTrue(LogLevel.DEBUG < LogLevel.WARNING)

    def test_level_from_name(self):
        self.assertEqual(LogLevel.from_name("debug"), LogLevel.DEBUG)
        self.assertEqual(LogLevel.from_name(" Error "), LogLevel.ERROR)
        self.assertEqual(LogLevel.from_name("verbose"), LogLevel.WARNING)
        self.assertEqual(LogLevel.from_name("verbose", LogLevel.INFO), LogLevel.INFO)

    def test_formatter(self):
        record = logging.LogRecord('pysh.shell', logging.INFO, __file__, 1, "hello", None, None)
        record.subsystem = 'shell'
        record.context = {'cwd': '/tmp'}

        text = LogFormatter(use_colors=False).format(record)

        self.assertIn("INFO", text)
        self.assertTrue(text.endswith("[shell] hello {cwd=/tmp}"))

    def test_file_output(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_file = os.path.join(tmp, "logs", "pysh.log")
            Logger.reset()
            Logger.initialize(level=LogLevel.DEBUG, log_file=log_file, console_output=False)

            get_logger('test').info("hello", context={'a': 1})
            Logger.reset()

            with open(log_file) as f:
                text = f.read()

        self.assertIn("[test] hello {a=1}", text)

    def test_initialize_once(self):
        Logger.reset()
        Logger.initialize(console_output=True)
        Logger.initialize(console_output=True)

        handlers = [h for h in logging.getLogger('pysh').handlers if h in Logger._handlers]
        self.assertEqual(len(handlers), 1)


class TestConfig(unittest.TestCase):
    """Test the configuration system."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        ConfigLoader().reset()

    def tearDown(self):
        ConfigLoader().reset()
        self._tmp.cleanup()

    def write(self, content):
        path = os.path.join(self._tmp.name, "pysh.json")
        with open(path, "w") as f:
            f.write(content if isinstance(content, str) else json.dumps(content))
        return path

    def test_default_config(self):
        config = Config()

        self.assertEqual(config.shell.prompt, "$ ")
        self.assertEqual(config.shell.history_size, 1000)
        self.assertTrue(config.shell.enable_autocomplete)
        self.assertEqual(config.completion.double_press_window_ms, 500)
        self.assertEqual(config.logging.level, "WARNING")

    def test_loader_singleton(self):
        self.assertIs(ConfigLoader(), ConfigLoader())
        self.assertEqual(get_config().shell.prompt, "$ ")

    def test_load_partial_file(self):
        path = self.write({"shell": {"prompt": "pysh> "}, "completion": {"double_press_window_ms": 300}})

        config = ConfigLoader().load(path)

        self.assertEqual(config.shell.prompt, "pysh> ")
        self.assertEqual(config.shell.history_size, 1000)
        self.assertEqual(config.completion.double_press_window_ms, 300)
        self.assertIs(get_config(), config)

    def test_unknown_sections_ignored(self):
        config = ConfigLoader().load(self.write({"theme": {"name": "dark"}}))
        self.assertEqual(config.shell.prompt, "$ ")

    def test_missing_file(self):
        with self.assertRaises(ConfigError):
            ConfigLoader().load(os.path.join(self._tmp.name, "missing.json"))

    def test_invalid_json(self):
        with self.assertRaises(ConfigError):
            ConfigLoader().load(self.write("{not json"))

    def test_non_object_root(self):
        with self.assertRaises(ConfigError):
            ConfigLoader().load(self.write("[1, 2]"))

    def test_validation(self):
        with self.assertRaises(ConfigValidationError) as ctx:
            ConfigLoader().load(self.write({"shell": {"history_size": -1}}))
        self.assertEqual(ctx.exception.key, "shell.history_size")

        with self.assertRaises(ConfigValidationError):
            ConfigLoader().load(self.write({"completion": {"double_press_window_ms": "fast"}}))

    def test_get_and_set(self):
        loader = ConfigLoader()

        self.assertEqual(loader.get("shell.prompt"), "$ ")
        self.assertIsNone(loader.get("shell.nothing"))

        loader.set("shell.prompt", "% ")
        self.assertEqual(get_config().shell.prompt, "% ")

        with self.assertRaises(ConfigValidationError):
            loader.set("shell.nothing", 1)

    def test_section_must_be_object(self):
        for section in ("shell", "completion", "logging"):
            for value in (None, [], "x", 3):
                with self.assertRaises(ConfigValidationError) as ctx:
                    ConfigLoader().load(self.write({section: value}))
                self.assertEqual(ctx.exception.key, section)

    def test_wrong_field_types(self):
        cases = [
            ({"shell": {"history_size": True}}, "shell.history_size"),
            ({"shell": {"history_size": 1.5}}, "shell.history_size"),
            ({"completion": {"double_press_window_ms": False}}, "completion.double_press_window_ms"),
            ({"shell": {"prompt": 7}}, "shell.prompt"),
            ({"logging": {"level": 10}}, "logging.level"),
            ({"shell": {"history_file": 5}}, "shell.history_file"),
            ({"logging": {"log_file": 5}}, "logging.log_file"),
            ({"shell": {"enable_autocomplete": "yes"}}, "shell.enable_autocomplete"),
            ({"completion": {"refresh_on_start": 1}}, "completion.refresh_on_start"),
            ({"logging": {"console_output": None}}, "logging.console_output"),
        ]

        for data, key in cases:
            with self.subTest(key=key, data=data):
                with self.assertRaises(ConfigValidationError) as ctx:
                    ConfigLoader().load(self.write(data))
                self.assertEqual(ctx.exception.key, key)
                self.assertIsInstance(ctx.exception, ConfigError)

    def test_null_paths_accepted(self):
        config = ConfigLoader().load(self.write({
            "shell": {"history_file": None, "history_size": 0},
            "logging": {"log_file": None, "console_output": False},
        }))

        self.assertIsNone(config.shell.history_file)
        self.assertEqual(config.shell.history_size, 0)
        self.assertFalse(config.logging.console_output)

    def test_load_default_from_environment(self):
        path = self.write({"shell": {"prompt": "env> "}})

        with mock.patch.dict(os.environ, {CONFIG_ENV_VAR: path}):
            config = ConfigLoader().load_default()

        self.assertEqual(config.shell.prompt, "env> ")
        self.assertEqual(ConfigLoader().path, path)

    def test_load_default_without_file(self):
        with mock.patch.dict(os.environ, {"HOME": self._tmp.name}):
            os.environ.pop(CONFIG_ENV_VAR, None)
            config = ConfigLoader().load_default()

        self.assertEqual(config.shell.prompt, "$ ")


if __name__ == '__main__':
    unittest.main()

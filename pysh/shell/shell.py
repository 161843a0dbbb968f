"""
pysh Shell Module

The interactive command-line shell.

Author: YSNRFD
Version: 1.0.0
"""

import io
import os
import subprocess
import sys
from contextlib import ExitStack, contextmanager
from typing import Iterator, Mapping, Optional, TextIO, Tuple

from .builtins import BuiltinCommands
from .completion import CompletionIndex, ReadlineCompleter
from .history import CommandHistory
from .parser import CommandParser, ParsedCommand, Redirection
from pysh.core.config_loader import Config, get_config
from pysh.exceptions import (
    CommandNotFoundError,
    DirectoryNotFoundError,
    HomeNotSetError,
    ExecutionError,
    RedirectionError,
    ShellException,
)
from pysh.filesystem.path_resolver import ExecutableResolver, expand_home, resolve
from pysh.logger import get_logger


class Shell:
    """
    pysh Interactive Shell.

    Provides:
    - Command parsing
    - Built-in commands
    - External command execution
    - Output and error redirection
    - Command history
    - Tab completion of command names

    Example:
        >>> shell = Shell()
        >>> shell.run()
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        environ: Optional[Mapping[str, str]] = None,
        cwd: Optional[str] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self._config = config if config is not None else get_config()
        self._logger = get_logger('shell')
        self._environ = environ if environ is not None else os.environ
        self._stdout = stdout
        self._stderr = stderr

        self._resolver = ExecutableResolver(self._environ)
        self._builtins = BuiltinCommands(self)
        self._history = CommandHistory(self._config.shell.history_size)
        self._completion = CompletionIndex(
            self._builtins.names(),
            self._resolver,
            double_press_window=self._config.completion.double_press_window_ms / 1000.0,
        )
        if self._config.completion.refresh_on_start:
            self._completion.refresh()

        self._cwd = os.path.abspath(cwd) if cwd else os.getcwd()
        self._running = False
        self._exiting = False
        self._exit_code = 0
        self._last_status = 0

    @property
    def config(self) -> Config:
        return self._config

    @property
    def cwd(self) -> str:
        return self._cwd

    @cwd.setter
    def cwd(self, value: str):
        self._cwd = value

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ

    @property
    def resolver(self) -> ExecutableResolver:
        return self._resolver

    @property
    def builtins(self) -> BuiltinCommands:
        return self._builtins

    @property
    def history(self) -> CommandHistory:
        return self._history

    @property
    def completion(self) -> CompletionIndex:
        return self._completion

    @property
    def prompt(self) -> str:
        return self._config.shell.prompt

    @property
    def exiting(self) -> bool:
        return self._exiting

    @property
    def exit_code(self) -> int:
        return self._exit_code

    @property
    def last_status(self) -> int:
        return self._last_status

    @property
    def history_file(self) -> Optional[str]:
        """HISTFILE if set, else the configured history file."""
        return self._environ.get('HISTFILE') or self._config.shell.history_file

    def change_directory(self, target: str) -> str:
        """
        Change the shell's working directory.

        Args:
            target: Directory, possibly relative or starting with ~

        Returns:
            The new absolute working directory

        Raises:
            HomeNotSetError: If target needs HOME and it is unset
            DirectoryNotFoundError: If target is not a directory
        """
        path = resolve(expand_home(target, self._environ), self._cwd)

        if not os.path.isdir(path):
            raise DirectoryNotFoundError(path, command='cd')

        self.cwd = path
        self._logger.debug("Changed directory", context={'cwd': path})
        return path

    def refresh_completions(self) -> None:
        """Rebuild the completion index from the current PATH."""
        self._completion.refresh()

    def request_exit(self, code: int = 0) -> None:
        """Request the shell to exit."""
        self._exiting = True
        self._exit_code = code

    def stop(self) -> None:
        """Stop the shell."""
        self._running = False

    def run(self) -> int:
        """
        Run the interactive shell.

        This is the main REPL loop.

        Returns:
            The exit code requested by ``exit`` (0 on end of input)
        """
        self._running = True
        history_path = self._history_path()
        if history_path:
            self._load_history(history_path)

        if self._config.shell.enable_autocomplete:
            self._setup_readline()

        while self._running and not self._exiting:
            try:
                try:
                    line = input(self.prompt)
                except EOFError:
                    print(file=self.stdout)
                    break
                except KeyboardInterrupt:
                    print(file=self.stdout)
                    continue

                self._history.add(line)
                self.execute_line(line)
                if history_path:
                    self._append_history(history_path)

            except KeyboardInterrupt:
                print(file=self.stdout)
            except Exception as e:
                self._logger.exception(f"Shell error: {e}", e)
                print(f"pysh: error: {e}", file=self.stderr)

        self._running = False
        if history_path:
            self._save_history(history_path)
        return self._exit_code

    def _setup_readline(self) -> None:
        """Install tab completion and seed readline's history."""
        import readline

        completer = ReadlineCompleter(
            self._completion,
            prompt=lambda: self.prompt,
            line_buffer=readline.get_line_buffer,
            output=self.stdout,
        )
        readline.set_completer(completer)
        readline.set_completer_delims(' \t\n')

        if readline.__doc__ and 'libedit' in readline.__doc__:
            readline.parse_and_bind("bind ^I rl_complete")
        else:
            readline.parse_and_bind("tab: complete")

        for line in self._history.entries():
            readline.add_history(line)

    def _history_path(self) -> Optional[str]:
        """The history file as an absolute path, or None when there is none."""
        path = self.history_file
        if not path:
            return None

        try:
            return resolve(expand_home(path, self._environ), self._cwd)
        except HomeNotSetError:
            self._logger.warning("HOME not set, history file disabled", context={'path': path})
            return None

    def _load_history(self, path: str) -> None:
        if not os.path.exists(path):
            return

        try:
            self._history.read_file(path)
        except OSError as e:
            self._logger.warning(f"Cannot read history file: {e}", context={'path': path})
            return

        # Lines already in the file must not be appended to it again
        self._history.mark_appended()

    def _append_history(self, path: str) -> None:
        try:
            self._history.append_file(path)
        except OSError as e:
            self._logger.warning(f"Cannot append to history file: {e}", context={'path': path})

    def _save_history(self, path: str) -> None:
        try:
            self._history.write_file(path)
        except OSError as e:
            self._logger.warning(f"Cannot write history file: {e}", context={'path': path})

    def execute_line(self, line: str) -> int:
        """
        Execute a command line.

        Args:
            line: Command line string

        Returns:
            Exit code
        """
        cmd = CommandParser.parse(line)

        if cmd.is_empty:
            return 0

        status = self.execute_command(cmd)
        self._last_status = status
        return status

    def execute_command(self, cmd: ParsedCommand) -> int:
        """
        Execute a parsed command, builtin first, then the search path.

        Args:
            cmd: Parsed command

        Returns:
            Exit code
        """
        try:
            with self._redirected(cmd) as (out, err):
                if self._builtins.is_builtin(cmd.command):
                    return self._builtins.execute(cmd.command, cmd.args, out, err)
                try:
                    return self._execute_external(cmd, out, err)
                except CommandNotFoundError as e:
                    print(f"{e.command}: command not found", file=err)
                    return 127

        except RedirectionError as e:
            print(f"pysh: {e.path}: {e.reason}", file=self.stderr)
            return 1
        except ExecutionError as e:
            print(f"pysh: {cmd.command}: {e.reason}", file=self.stderr)
            return 126
        except ShellException as e:
            print(f"pysh: {e.message}", file=self.stderr)
            return 1

    @contextmanager
    def _redirected(self, cmd: ParsedCommand) -> Iterator[Tuple[TextIO, TextIO]]:
        """Open the redirect targets of a command, yielding (stdout, stderr)."""
        with ExitStack() as stack:
            out = self.stdout
            err = self.stderr

            if cmd.output_redirect is not None:
                out = stack.enter_context(self._open_target(cmd.output_redirect))
            if cmd.error_redirect is not None:
                err = stack.enter_context(self._open_target(cmd.error_redirect))

            yield out, err

    def _open_target(self, target: Redirection) -> TextIO:
        path = resolve(expand_home(target.path, self._environ), self._cwd)
        mode = 'a' if target.append else 'w'

        try:
            return open(path, mode, encoding='utf-8')
        except OSError as e:
            raise RedirectionError(target.path, e.strerror or str(e))

    def _find_executable(self, name: str) -> Optional[str]:
        if os.sep in name:
            path = resolve(expand_home(name, self._environ), self._cwd)
            if os.path.isfile(path) and os.access(path, os.X_OK):
                return path
            return None
        return self._resolver.lookup(name)

    def _execute_external(self, cmd: ParsedCommand, out: TextIO, err: TextIO) -> int:
        """
        Run an executable and wait for it to finish.

        Raises:
            CommandNotFoundError: If no executable matches the command
            ExecutionError: If the executable cannot be started
        """
        path = self._find_executable(cmd.command)
        if path is None:
            raise CommandNotFoundError(cmd.command)

        stdout_target = _passable(out)
        stderr_target = _passable(err)
        for stream in (out, err):
            stream.flush()

        self._logger.debug("Executing", context={'path': path, 'args': len(cmd.args)})

        try:
            result = subprocess.run(
                [cmd.command, *cmd.args],
                executable=path,
                cwd=self._cwd,
                env=dict(self._environ),
                stdout=stdout_target,
                stderr=stderr_target,
                text=True,
            )
        except OSError as e:
            raise ExecutionError(cmd.command, e.strerror or str(e))

        if stdout_target is subprocess.PIPE and result.stdout:
            out.write(result.stdout)
        if stderr_target is subprocess.PIPE and result.stderr:
            err.write(result.stderr)

        if result.returncode < 0:
            return 128 - result.returncode
        return result.returncode

    def run_script(self, script: str) -> int:
        """
        Run a script (multiple commands).

        Args:
            script: Script content

        Returns:
            Last exit code, or the code passed to ``exit``
        """
        exit_code = 0

        for line in script.split('\n'):
            line = line.strip()
            if line and not line.startswith('#'):
                exit_code = self.execute_line(line)
            if self._exiting:
                return self._exit_code

        return exit_code


def _passable(stream: TextIO):
    """The stream itself if a child process can inherit it, else a pipe."""
    try:
        stream.fileno()
    except (AttributeError, OSError, io.UnsupportedOperation):
        return subprocess.PIPE
    return stream


def create_shell(config: Optional[Config] = None) -> Shell:
    """Factory function to create a shell."""
    return Shell(config)

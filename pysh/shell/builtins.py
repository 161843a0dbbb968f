"""
Shell Built-in Commands

Implements the commands the shell runs itself instead of starting
a new process.

Author: YSNRFD
Version: 1.0.0
"""

import sys
from typing import Callable, List, Optional, TextIO

from pysh.exceptions import DirectoryNotFoundError, HomeNotSetError, ShellException
from pysh.filesystem.path_resolver import expand_home, resolve


BuiltinFunc = Callable[[List[str], TextIO, TextIO], int]


class BuiltinCommands:
    """
    Built-in shell commands.

    The set is closed: every builtin is a method registered by name
    in the table below. Each one receives its arguments plus the
    output and error streams chosen by the shell's redirections and
    returns an exit status.
    """

    def __init__(self, shell):
        """
        Initialize built-in commands.

        Args:
            shell: The shell instance
        """
        self._shell = shell
        self._commands: dict[str, BuiltinFunc] = {
            'cd': self.cmd_cd,
            'echo': self.cmd_echo,
            'pwd': self.cmd_pwd,
            'exit': self.cmd_exit,
            'type': self.cmd_type,
            'history': self.cmd_history,
        }

    def names(self) -> List[str]:
        """Names of all built-in commands."""
        return list(self._commands)

    def is_builtin(self, name: str) -> bool:
        """Check if a command is built-in."""
        return name in self._commands

    def execute(
        self,
        name: str,
        args: List[str],
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None
    ) -> int:
        """
        Execute a built-in command.

        Args:
            name: Command name
            args: Command arguments
            stdout: Stream for normal output (default sys.stdout)
            stderr: Stream for diagnostics (default sys.stderr)

        Returns:
            Exit code
        """
        cmd = self._commands.get(name)
        if cmd is None:
            return 127

        out = stdout if stdout is not None else sys.stdout
        err = stderr if stderr is not None else sys.stderr

        try:
            return cmd(args, out, err)
        except ShellException as e:
            print(f"{name}: {e.message}", file=err)
            return 1

    # Command implementations

    def cmd_cd(self, args: List[str], out: TextIO, err: TextIO) -> int:
        """Change directory; no argument means HOME."""
        target = args[0] if args else '~'

        try:
            self._shell.change_directory(target)
        except HomeNotSetError:
            print("cd: HOME not set", file=err)
            return 1
        except DirectoryNotFoundError:
            print(f"cd: {target}: No such file or directory", file=err)
            return 1

        return 0

    def cmd_echo(self, args: List[str], out: TextIO, err: TextIO) -> int:
        """Print arguments separated by single spaces."""
        print(" ".join(args), file=out)
        return 0

    def cmd_pwd(self, args: List[str], out: TextIO, err: TextIO) -> int:
        """Print working directory."""
        print(self._shell.cwd, file=out)
        return 0

    def cmd_exit(self, args: List[str], out: TextIO, err: TextIO) -> int:
        """Exit the shell; a missing or non-numeric code means 0."""
        code = 0
        if args:
            try:
                code = int(args[0])
            except ValueError:
                code = 0

        self._shell.request_exit(code)
        return code

    def cmd_type(self, args: List[str], out: TextIO, err: TextIO) -> int:
        """Report whether each name is a builtin or an executable."""
        status = 0

        for name in args:
            if self.is_builtin(name):
                print(f"{name} is a shell builtin", file=out)
                continue

            path = self._shell.resolver.lookup(name)
            if path:
                print(f"{name} is {path}", file=out)
            else:
                print(f"{name}: not found", file=out)
                status = 1

        return status

    def cmd_history(self, args: List[str], out: TextIO, err: TextIO) -> int:
        """
        Display or transfer command history.

        history [n]       list the last n entries (all by default)
        history -r FILE   append the lines of FILE to the history
        history -w FILE   write the whole history to FILE
        history -a FILE   append entries not yet appended to FILE
        """
        history = self._shell.history

        if args and args[0] in ('-r', '-w', '-a'):
            option = args[0]
            if len(args) < 2:
                print(f"history: {option}: option requires an argument", file=err)
                return 2

            path = resolve(expand_home(args[1], self._shell.environ), self._shell.cwd)
            try:
                if option == '-r':
                    history.read_file(path)
                elif option == '-w':
                    history.write_file(path)
                else:
                    history.append_file(path)
            except OSError as e:
                print(f"history: {args[1]}: {e.strerror or e}", file=err)
                return 1
            return 0

        count = None
        if args:
            try:
                count = int(args[0])
            except ValueError:
                print(f"history: {args[0]}: numeric argument required", file=err)
                return 2

        for number, line in history.last(count):
            print(f"{number:5d}  {line}", file=out)
        return 0

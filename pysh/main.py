#!/usr/bin/env python3
"""
pysh - main entry point

Usage:
    pysh [--config FILE] [-c COMMAND]

Start-up sequence:
1. Load configuration ($PYSH_CONFIG, ~/.pysh.json or --config)
2. Initialize logging
3. Build the shell and its completion index
4. Run one command (-c) or the interactive loop

Author: YSNRFD
Version: 1.0.0
"""

import sys
from typing import List, Optional

from pysh.core.config_loader import ConfigLoader
from pysh.exceptions import ConfigError
from pysh.logger import Logger, LogLevel
from pysh.shell.shell import Shell


USAGE = "usage: pysh [--config FILE] [-c COMMAND]"


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for pysh.

    Returns:
        Process exit status
    """
    args = list(sys.argv[1:] if argv is None else argv)
    config_path = None
    command = None

    while args:
        arg = args.pop(0)
        if arg in ('-h', '--help'):
            print(USAGE)
            return 0
        if arg in ('--config', '-c'):
            if not args:
                print(f"pysh: {arg}: option requires an argument", file=sys.stderr)
                print(USAGE, file=sys.stderr)
                return 2
            value = args.pop(0)
            if arg == '--config':
                config_path = value
            else:
                command = value
            continue

        print(f"pysh: unknown option: {arg}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 2

    loader = ConfigLoader()
    try:
        config = loader.load(config_path) if config_path else loader.load_default()
    except ConfigError as e:
        print(f"pysh: {e}", file=sys.stderr)
        return 1

    Logger.initialize(
        level=LogLevel.from_name(config.logging.level),
        log_file=config.logging.log_file,
        console_output=config.logging.console_output,
    )

    shell = Shell(config)

    if command is not None:
        return shell.run_script(command)

    try:
        return shell.run()
    except KeyboardInterrupt:
        print("\n\nInterrupted")
        return 130


if __name__ == '__main__':
    sys.exit(main())

#!/usr/bin/env python3
"""
minish - A minimal interactive command interpreter

This is the main entry point for minish.

Usage:
    minish [--config PATH]

The configuration file may also be named by the MINISH_CONFIG
environment variable; without either the built-in defaults are used.

Author: YSNRFD
Version: 1.0.0
"""

import os
import sys
from typing import List, Optional

from minish.core.config_loader import ConfigLoader
from minish.exceptions import ConfigError, FatalShellError
from minish.logger import Logger, LogLevel, get_logger
from minish.shell.shell import Shell


USAGE = "usage: minish [--config PATH]"


def parse_args(argv: List[str]) -> Optional[str]:
    """
    Extract the configuration path from the command line.

    Raises:
        ConfigError: On an unknown option or a missing path
    """
    config_path = os.environ.get('MINISH_CONFIG') or None
    args = list(argv)

    while args:
        arg = args.pop(0)
        if arg == '--config':
            if not args:
                raise ConfigError("--config requires a path")
            config_path = args.pop(0)
        elif arg.startswith('--config='):
            config_path = arg.split('=', 1)[1]
        else:
            raise ConfigError(f"unknown argument: {arg}")

    return config_path


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for minish.

    Startup sequence:
    1. Load configuration
    2. Initialize logging
    3. Run the session
    4. Map fatal errors to the exit status
    """
    if argv is None:
        argv = sys.argv[1:]

    loader = ConfigLoader()
    try:
        config_path = parse_args(argv)
        if config_path:
            loader.load(config_path)
    except ConfigError as e:
        sys.stderr.write(f"minish: {e.message}\n{USAGE}\n")
        return 1

    config = loader.config
    try:
        Logger.initialize(
            level=LogLevel.from_name(config.logging.level),
            log_file=config.logging.log_file,
            console_output=config.logging.console_output,
        )
    except OSError as e:
        sys.stderr.write(f"minish: Cannot open log file: {e.strerror or e}\n")
        return 1
    logger = get_logger('main')
    logger.info("Starting minish", context={'config': config_path or 'defaults'})

    shell = Shell(config=config)

    try:
        return shell.run()
    except FatalShellError as e:
        logger.critical(f"Fatal: {e.message}", context={'exit_code': e.exit_code})
        return e.exit_code
    except KeyboardInterrupt:
        sys.stdout.write("\n")
        return 130


if __name__ == '__main__':
    sys.exit(main())

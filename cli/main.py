"""CLI entry point."""

import sys
import os

from common.logging_config import setup_logging
from cli.commands import dispatch_command
from cli.parser import ParseError, parse_tokens
from cli.repl import repl_loop


def main() -> None:
    """Entry point for CLI.

    With arguments, runs a single command (e.g. ``datafile package hello.txt``);
    without, starts the interactive REPL.
    """
    args = sys.argv[1:]
    debug = '--debug' in args
    if debug:
        args = [arg for arg in args if arg != '--debug']
    log_level = 'DEBUG' if debug else os.getenv('LOG_LEVEL', 'INFO')
    
    logger = setup_logging('cli', log_level=log_level)
    setup_logging('packager', log_level=log_level)
    
    if debug:
        logger.info("Debug logging enabled")
    
    if args:
        try:
            cmd_obj = parse_tokens(args)
        except ParseError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(2)
        result = dispatch_command(cmd_obj)
        print(result)
        if result.startswith(("Error:", "MISMATCH:")):
            sys.exit(1)
        return

    logger.info("CLI starting...")
    try:
        repl_loop()
    except Exception as e:
        logger.error(f"CLI error: {e}", exc_info=True)
        raise
    finally:
        logger.info("CLI exiting")


if __name__ == "__main__":
    main()

"""Command parser for CLI input."""

import shlex

from cli.models import (
    CommandRequest,
    InspectCommand,
    ListCommand,
    NextCommand,
    PackageCommand,
    StatusCommand,
    UnpackageCommand,
    VerifyCommand,
)


class ParseError(Exception):
    """Raised when command parsing fails."""

    pass


def parse_command(input_line: str) -> CommandRequest:
    """Parse user input into a CommandRequest object.

    Args:
        input_line: Raw user input from REPL or the command line

    Returns:
        CommandRequest object

    Raises:
        ParseError: If command syntax is invalid
    """
    if not input_line.strip():
        raise ParseError("Empty command")

    try:
        tokens = shlex.split(input_line)
    except ValueError as e:
        raise ParseError(f"Invalid syntax: {e}")

    if not tokens:
        raise ParseError("Empty command")

    return parse_tokens(tokens)


def parse_tokens(tokens: list[str]) -> CommandRequest:
    """Parse an already split command line (e.g. sys.argv[1:])."""
    if not tokens:
        raise ParseError("Empty command")

    command_name, args = tokens[0], tokens[1:]

    if command_name == "package":
        return PackageCommand(file_path=_single_path(command_name, args, "<file>"))
    elif command_name == "unpackage":
        return UnpackageCommand(archive_path=_single_path(command_name, args, "<archive>"))
    elif command_name == "inspect":
        return InspectCommand(archive_path=_single_path(command_name, args, "<archive>"))
    elif command_name == "verify":
        return VerifyCommand(archive_path=_single_path(command_name, args, "<archive>"))
    elif command_name == "list":
        _no_args(command_name, args)
        return ListCommand()
    elif command_name == "status":
        _no_args(command_name, args)
        return StatusCommand()
    elif command_name == "next":
        return _parse_next(args)
    else:
        raise ParseError(f"Unknown command: {command_name}")


def _single_path(command_name: str, args: list[str], placeholder: str) -> str:
    if len(args) != 1:
        raise ParseError(f"{command_name} requires exactly 1 argument: {placeholder}")
    return args[0]


def _no_args(command_name: str, args: list[str]) -> None:
    if args:
        raise ParseError(f"{command_name} takes no arguments")


def _parse_next(args: list[str]) -> NextCommand:
    """Parse 'next [max_size]' command."""
    if len(args) > 1:
        raise ParseError("next takes at most 1 argument: [max_size]")
    if not args:
        return NextCommand()

    try:
        max_size = int(args[0])
    except ValueError:
        raise ParseError(f"max_size must be an integer, got '{args[0]}'")
    if max_size <= 0:
        raise ParseError("max_size must be positive")
    return NextCommand(max_size=max_size)

"""CLI constants and configuration."""

from pathlib import Path

from prompt_toolkit.styles import Style

COMMANDS = ["package", "unpackage", "inspect", "verify", "list", "status", "next", "clear", "exit", "help"]

STYLE = Style.from_dict(
    {
        "prompt": "#2E8B57 bold",
        "command": "#0088ff bold",
    }
)

GREEN = "\033[32m"
RESET = "\033[0m"

DEFAULT_CONFIG_PATH = Path.home() / '.datafile' / 'config.json'

WELCOME_TITLE = f"{GREEN}Data File Packager{RESET}"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "datafile> "

HELP_TEXT = """Available commands:
  package <file>                      Package a file with its metadata into data/<hash>
  unpackage <archive>                 Extract the payload to data/ and the metadata aside
  inspect <archive>                   Show the metadata of a packaged archive
  verify <archive>                    Check that the archive name matches its content hash
  list                                List data files waiting in data/
  status                              Show storage usage of the data directory
  next [max_size]                     Show the next file to transfer (size limit in bytes)
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  package reports/hello.txt
  inspect data/9f86d081884c7d659a2feaa0c55ad015a3bf4f1b2b0b822cd15d6c15b0f00a08
  next 1048576"""

"""Command request data types for CLI."""

from dataclasses import dataclass
from typing import Literal, Optional, Union


@dataclass(frozen=True)
class PackageCommand:
    """Package a data file."""

    file_path: str
    command: Literal["package"] = "package"


@dataclass(frozen=True)
class UnpackageCommand:
    """Unpackage an archive."""

    archive_path: str
    command: Literal["unpackage"] = "unpackage"


@dataclass(frozen=True)
class InspectCommand:
    """Show archive metadata."""

    archive_path: str
    command: Literal["inspect"] = "inspect"


@dataclass(frozen=True)
class VerifyCommand:
    """Verify an archive's content address."""

    archive_path: str
    command: Literal["verify"] = "verify"


@dataclass(frozen=True)
class ListCommand:
    """List data files."""

    command: Literal["list"] = "list"


@dataclass(frozen=True)
class StatusCommand:
    """Show storage information."""

    command: Literal["status"] = "status"


@dataclass(frozen=True)
class NextCommand:
    """Select the next file for transfer."""

    max_size: Optional[int] = None
    command: Literal["next"] = "next"


CommandRequest = Union[
    PackageCommand,
    UnpackageCommand,
    InspectCommand,
    VerifyCommand,
    ListCommand,
    StatusCommand,
    NextCommand,
]

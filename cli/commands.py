"""Command handler functions for CLI operations."""

from pathlib import Path
from typing import Optional

from common.logging_config import get_logger
from cli.config import Config
from cli.constants import DEFAULT_CONFIG_PATH
from cli.models import (
    InspectCommand,
    ListCommand,
    NextCommand,
    PackageCommand,
    StatusCommand,
    UnpackageCommand,
    VerifyCommand,
)
from cli.utils import format_file_size, format_timestamp_ms
from packager.content_address import verify_content_address
from packager.exceptions import DataFileError
from packager.metadata import read_archive_metadata
from packager.packager import DataFilePackager
from packager.repository import DataFileRepository, is_complete

logger = get_logger(__name__)


_packager: Optional[DataFilePackager] = None
_repository: Optional[DataFileRepository] = None


def get_packager() -> DataFilePackager:
    """
    Get or create global DataFilePackager instance.

    Returns:
        DataFilePackager instance
    """
    global _packager
    if _packager is None:
        logger.debug("Creating new DataFilePackager instance")
        _packager = DataFilePackager(Config(DEFAULT_CONFIG_PATH).get_packager_config())
    return _packager


def get_repository() -> DataFileRepository:
    """
    Get or create global DataFileRepository instance.

    Returns:
        DataFileRepository instance
    """
    global _repository
    if _repository is None:
        _repository = DataFileRepository(get_packager().config)
    return _repository


def handle_package(cmd: PackageCommand, packager: Optional[DataFilePackager] = None) -> str:
    """
    Handle 'package' command.

    Args:
        cmd: PackageCommand with file_path
        packager: Optional DataFilePackager for dependency injection (testing)

    Returns:
        Success or error message
    """
    logger.info(f"Executing package command: {cmd.file_path}")
    if packager is None:
        packager = get_packager()
    try:
        packaged = packager.package(cmd.file_path)
    except DataFileError as e:
        logger.error(f"Packaging {cmd.file_path} failed: {e}")
        return f"Error: {e}"
    return f"Packaged: {Path(cmd.file_path).name} -> {packaged} ({format_file_size(packaged.stat().st_size)})"


def handle_unpackage(cmd: UnpackageCommand, packager: Optional[DataFilePackager] = None) -> str:
    """
    Handle 'unpackage' command.

    Args:
        cmd: UnpackageCommand with archive_path
        packager: Optional DataFilePackager for dependency injection (testing)

    Returns:
        Success or error message
    """
    logger.info(f"Executing unpackage command: {cmd.archive_path}")
    if packager is None:
        packager = get_packager()
    try:
        extracted = packager.unpackage(cmd.archive_path)
    except DataFileError as e:
        logger.error(f"Unpackaging {cmd.archive_path} failed: {e}")
        return f"Error: {e}"
    return f"Unpackaged: {extracted}"


def handle_inspect(cmd: InspectCommand) -> str:
    """
    Handle 'inspect' command.

    Returns:
        Metadata listing or error message
    """
    try:
        metadata = read_archive_metadata(cmd.archive_path)
    except DataFileError as e:
        return f"Error: {e}"
    return "\n".join([
        f"File name:  {metadata.file_name}",
        f"Created:    {format_timestamp_ms(metadata.creation_timestamp)} ({metadata.creation_timestamp})",
        f"Origin UID: {metadata.origin_uid}",
    ])


def handle_verify(cmd: VerifyCommand) -> str:
    """
    Handle 'verify' command.

    Returns:
        Verification verdict or error message
    """
    try:
        matches = verify_content_address(cmd.archive_path)
    except DataFileError as e:
        return f"Error: {e}"
    if matches:
        return f"OK: {Path(cmd.archive_path).name} matches its content hash"
    return f"MISMATCH: {Path(cmd.archive_path).name} does not match its content hash"


def handle_list(cmd: ListCommand, repository: Optional[DataFileRepository] = None) -> str:
    """
    Handle 'list' command.

    Args:
        cmd: ListCommand
        repository: Optional DataFileRepository for dependency injection (testing)

    Returns:
        Formatted list of data files
    """
    if repository is None:
        repository = get_repository()
    data_files = repository.list_data_files()
    if not data_files:
        return "No data files found"

    lines = [f"Found {len(data_files)} data file(s):"]
    for path in data_files:
        state = "" if is_complete(path) else " [incomplete]"
        lines.append(f"  {path.name}  {format_file_size(path.stat().st_size)}{state}")
    return "\n".join(lines)


def handle_status(cmd: StatusCommand, repository: Optional[DataFileRepository] = None) -> str:
    """
    Handle 'status' command.

    Args:
        cmd: StatusCommand
        repository: Optional DataFileRepository for dependency injection (testing)

    Returns:
        Storage summary or error message
    """
    if repository is None:
        repository = get_repository()
    try:
        info = repository.storage_information()
    except DataFileError as e:
        return f"Error: {e}"
    return "\n".join([
        f"Data directory:   {repository.data_dir}",
        f"Total space:      {format_file_size(info.total_space)}",
        f"Free space:       {format_file_size(info.free_space)}",
        f"Data files:       {format_file_size(repository.data_files_size())}",
        f"Incomplete files: {format_file_size(info.incomplete_files_space)}",
    ])


def handle_next(cmd: NextCommand, repository: Optional[DataFileRepository] = None) -> str:
    """
    Handle 'next' command.

    Without a size limit the free space of the device is used.

    Args:
        cmd: NextCommand with optional max_size
        repository: Optional DataFileRepository for dependency injection (testing)

    Returns:
        Chosen file or an explanation why there is none
    """
    if repository is None:
        repository = get_repository()
    try:
        max_size = cmd.max_size or repository.storage_information().free_space
        selected = repository.select_next_file_for_transfer(max_size)
    except DataFileError as e:
        return f"Error: {e}"
    if selected is None:
        return "No file to transfer"
    return f"Next file: {selected.name} ({format_file_size(selected.stat().st_size)})"


def dispatch_command(cmd_obj) -> str:
    """Dispatch parsed command to appropriate handler."""
    if isinstance(cmd_obj, PackageCommand):
        return handle_package(cmd_obj)
    elif isinstance(cmd_obj, UnpackageCommand):
        return handle_unpackage(cmd_obj)
    elif isinstance(cmd_obj, InspectCommand):
        return handle_inspect(cmd_obj)
    elif isinstance(cmd_obj, VerifyCommand):
        return handle_verify(cmd_obj)
    elif isinstance(cmd_obj, ListCommand):
        return handle_list(cmd_obj)
    elif isinstance(cmd_obj, StatusCommand):
        return handle_status(cmd_obj)
    elif isinstance(cmd_obj, NextCommand):
        return handle_next(cmd_obj)
    else:
        return f"Unknown command type: {type(cmd_obj)}"

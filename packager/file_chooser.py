"""Policies for picking the next data file to transfer."""

from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Union

from common.constants import DEFAULT_UPLOAD_PRIORITY
from common.logging_config import get_logger
from packager.exceptions import InvalidConfigurationError
from packager.metadata import read_archive_metadata

logger = get_logger(__name__)

FileChooser = Callable[[List[Path]], Optional[Path]]


class UploadPriority(str, Enum):
    SMALLEST_FIRST = "SMALLEST_FIRST"
    LARGEST_FIRST = "LARGEST_FIRST"
    OLDEST_FIRST = "OLDEST_FIRST"
    NEWEST_FIRST = "NEWEST_FIRST"


def _file_size(path: Path) -> int:
    return path.stat().st_size


def _creation_timestamp(path: Path) -> int:
    return read_archive_metadata(path).creation_timestamp


def _choose(data_files: List[Path], key: Callable[[Path], int], prefer_greater: bool) -> Optional[Path]:
    # Strict comparison: on ties the earliest candidate wins.
    if not data_files:
        return None
    result = data_files[0]
    result_value = key(result)
    for candidate in data_files[1:]:
        value = key(candidate)
        better = value > result_value if prefer_greater else value < result_value
        if better:
            result, result_value = candidate, value
    return result


def choose_smallest(data_files: List[Path]) -> Optional[Path]:
    return _choose(data_files, _file_size, prefer_greater=False)


def choose_largest(data_files: List[Path]) -> Optional[Path]:
    return _choose(data_files, _file_size, prefer_greater=True)


def choose_oldest(data_files: List[Path]) -> Optional[Path]:
    """Pick the archive whose metadata has the earliest CreationTimestamp."""
    return _choose(data_files, _creation_timestamp, prefer_greater=False)


def choose_newest(data_files: List[Path]) -> Optional[Path]:
    """Pick the archive whose metadata has the latest CreationTimestamp."""
    return _choose(data_files, _creation_timestamp, prefer_greater=True)


_CHOOSERS = {
    UploadPriority.SMALLEST_FIRST: choose_smallest,
    UploadPriority.LARGEST_FIRST: choose_largest,
    UploadPriority.OLDEST_FIRST: choose_oldest,
    UploadPriority.NEWEST_FIRST: choose_newest,
}


def create_file_chooser(priority: Union[UploadPriority, str, None] = None) -> FileChooser:
    """
    Get the chooser for an upload priority.

    Args:
        priority: UploadPriority member or its name; None selects the default

    Returns:
        Callable picking one file out of a candidate list

    Raises:
        InvalidConfigurationError: If priority is not a known upload priority
    """
    if priority is None:
        priority = DEFAULT_UPLOAD_PRIORITY
    try:
        priority = UploadPriority(priority)
    except ValueError as e:
        logger.error(f"Choosing upload priority failed, the given upload priority is {priority!r}")
        raise InvalidConfigurationError(f"Unexpected upload priority value: {priority!r}") from e

    logger.debug(f"Given upload priority is {priority.value}")
    return _CHOOSERS[priority]

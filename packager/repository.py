"""Lists and manages the packaged data files held in the data directory."""

import re
import shutil
from pathlib import Path
from typing import List, Optional

from common.constants import INCOMPLETE_FILE_SUFFIX, STORAGE_BUFFER_BYTES
from common.logging_config import get_logger
from common.types import StorageInformation
from packager.config import PackagerConfig
from packager.exceptions import IOFailureError
from packager.file_chooser import create_file_chooser

logger = get_logger(__name__)

_DATA_FILE_NAME = re.compile(rf"[0-9a-f]{{64}}(\.{re.escape(INCOMPLETE_FILE_SUFFIX)})?")


def is_data_file_name(name: str) -> bool:
    """
    Check whether name is a content-addressed archive name, with or without
    the incomplete-transfer suffix. Extracted payloads and staging
    directories share the data directory and never match.
    """
    return _DATA_FILE_NAME.fullmatch(name) is not None


def is_complete(path: Path) -> bool:
    """
    Check whether a data file has been fully transferred.

    Returns:
        False if the name carries the incomplete-transfer suffix
    """
    return not path.name.endswith(INCOMPLETE_FILE_SUFFIX)


def incomplete_file_name(name: str) -> str:
    """
    Name under which a partially received copy of name is stored.

    Args:
        name: Data file name (usually a content hash)

    Returns:
        Name with the incomplete-transfer suffix appended
    """
    return f"{name}.{INCOMPLETE_FILE_SUFFIX}"


class DataFileRepository:
    """
    View over the data directory: complete archives waiting to be sent,
    incomplete ones still being received, and the space they take.

    Staging directories live in the same directory and are ignored.
    """

    def __init__(self, config: PackagerConfig, buffer_space: int = STORAGE_BUFFER_BYTES):
        """
        Args:
            config: Packager configuration (data_dir and upload_priority are used)
            buffer_space: Bytes to keep free when accepting new files
        """
        self.config = config
        self.data_dir = config.data_dir
        self.buffer_space = buffer_space

    def list_data_files(self) -> List[Path]:
        """
        List all data files in the data directory.

        Returns:
            Content-addressed regular files sorted by name; empty if the
            directory is missing
        """
        if not self.data_dir.is_dir():
            return []
        return sorted(
            path for path in self.data_dir.iterdir()
            if path.is_file() and is_data_file_name(path.name)
        )

    def complete_data_files(self) -> List[Path]:
        return [path for path in self.list_data_files() if is_complete(path)]

    def incomplete_data_files(self) -> List[Path]:
        return [path for path in self.list_data_files() if not is_complete(path)]

    def complete_data_files_smaller_than(self, max_file_size: int) -> List[Path]:
        """
        Get complete files strictly smaller than max_file_size bytes.
        """
        return [
            path for path in self.complete_data_files()
            if path.stat().st_size < max_file_size
        ]

    def has_files_to_send(self) -> bool:
        has_files = bool(self.complete_data_files())
        logger.debug(f"Files to send in {self.data_dir}: {has_files}")
        return has_files

    def retrieve(self, file_id: str) -> Optional[Path]:
        """
        Find the data file with the given ID.

        The name is compared by prefix, as an incomplete file carries a
        suffix after its ID.

        Args:
            file_id: Content hash of the archive

        Returns:
            Path of the data file, or None if not found
        """
        for path in self.list_data_files():
            if path.name.startswith(file_id):
                logger.debug(f"Data file {file_id} found inside the repository")
                return path
        return None

    def data_files_size(self) -> int:
        return sum(path.stat().st_size for path in self.list_data_files())

    def incomplete_data_files_size(self) -> int:
        return sum(path.stat().st_size for path in self.incomplete_data_files())

    def storage_information(self) -> StorageInformation:
        """
        Get capacity and usage of the device holding the data directory.

        Raises:
            IOFailureError: If the device cannot be queried
        """
        queried = self.data_dir if self.data_dir.exists() else self.config.agent_root
        try:
            usage = shutil.disk_usage(queried)
        except OSError as e:
            raise IOFailureError(f"Cannot read storage information for {queried}: {e}") from e
        return StorageInformation(
            total_space=usage.total,
            free_space=usage.free,
            incomplete_files_space=self.incomplete_data_files_size(),
        )

    def has_enough_space_available(self, target_size: int) -> bool:
        """
        Check whether target_size bytes fit while keeping the buffer free.
        """
        free_space = self.storage_information().free_space
        logger.debug(
            f"Free space: {free_space}, buffer: {self.buffer_space}, target size: {target_size}"
        )
        return free_space - self.buffer_space >= target_size

    def delete_incomplete_files_for_space(self, file_id: str, file_size: int) -> bool:
        """
        Delete incomplete files, least recently modified first, until
        file_size bytes fit. The incomplete copy of file_id is kept.

        Args:
            file_id: ID of the file about to be received
            file_size: Size of that file in bytes

        Returns:
            True once enough space is available, False if deleting every
            candidate was not enough

        Raises:
            IOFailureError: If an incomplete file cannot be deleted
        """
        candidates = sorted(self.incomplete_data_files(), key=lambda path: path.stat().st_mtime)
        logger.debug("Deleting incomplete files to make space")
        for path in candidates:
            if path.name.startswith(file_id):
                continue
            try:
                path.unlink()
            except OSError as e:
                logger.warning(f"File {path.name} could not be deleted")
                raise IOFailureError(f"File {path.name} could not be deleted: {e}") from e
            logger.debug(f"Deleted file {path.name}")

            if self.has_enough_space_available(file_size):
                logger.debug("Enough space is available now")
                return True
        return False

    def select_next_file_for_transfer(self, max_file_size: int) -> Optional[Path]:
        """
        Choose the next complete data file to send.

        Args:
            max_file_size: Files must be strictly smaller than this

        Returns:
            Chosen file, or None if there is no candidate

        Raises:
            InvalidConfigurationError: If the configured upload priority is unknown
        """
        candidates = self.complete_data_files_smaller_than(max_file_size)
        logger.info(f"Number of candidate files: {len(candidates)}")
        if not candidates:
            return None

        chooser = create_file_chooser(self.config.upload_priority)
        selected = chooser(candidates)
        if selected is not None:
            logger.info(f"Chosen file: {selected.name}")
        return selected

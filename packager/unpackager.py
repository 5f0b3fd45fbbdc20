"""Extracts a packaged archive: payload to the data directory, metadata aside."""

import shutil
import zipfile
from pathlib import Path, PurePosixPath
from typing import Optional, Union

from common.logging_config import get_logger
from packager.config import PackagerConfig
from packager.exceptions import ArchiveFormatError, IOFailureError
from packager.metadata import metadata_entry_names
from packager.retry_policy import RetryPolicy

logger = get_logger(__name__)


def _destination_for(root: Path, entry_name: str) -> Path:
    """
    Resolve an archive entry name below root.

    Raises:
        ArchiveFormatError: If the name is absolute or climbs out of root
    """
    relative = PurePosixPath(entry_name)
    if relative.is_absolute() or ".." in relative.parts or not relative.parts:
        raise ArchiveFormatError(f"Unsafe entry name in archive: {entry_name!r}")
    return root.joinpath(*relative.parts)


def _extract_exclusive(archive: zipfile.ZipFile, entry: zipfile.ZipInfo, destination: Path) -> Path:
    """
    Write entry to destination, failing with FileExistsError if it exists.

    A partially written file is removed before the error propagates.
    """
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IOFailureError(f"Cannot create directory {destination.parent}: {e}") from e

    try:
        target = open(destination, "xb")
    except FileExistsError:
        raise
    except OSError as e:
        raise IOFailureError(f"Cannot create {destination}: {e}") from e

    try:
        with target, archive.open(entry) as source:
            shutil.copyfileobj(source, target)
    except zipfile.BadZipFile as e:
        destination.unlink(missing_ok=True)
        raise ArchiveFormatError(f"Corrupt entry {entry.filename}: {e}") from e
    except OSError as e:
        destination.unlink(missing_ok=True)
        raise IOFailureError(f"Cannot extract {entry.filename} to {destination}: {e}") from e
    except BaseException:
        destination.unlink(missing_ok=True)
        raise
    return destination


class Unpackager:
    """
    Reverses packaging. Metadata entries go to the configured metadata
    directory and never overwrite an existing file there; the payload entry
    goes to the shared data directory and never overwrites either, waiting
    out a same-named payload under the retry policy instead.
    """

    def __init__(self, config: PackagerConfig, retry_policy: Optional[RetryPolicy] = None):
        self.config = config
        self.retry_policy = retry_policy or RetryPolicy.from_config(config)

    def unpackage(self, archive_path: Union[str, Path]) -> Path:
        """
        Extract a packaged archive.

        Args:
            archive_path: Path of the archive to unpack

        Returns:
            Path of the extracted payload

        Raises:
            ResourceExhaustedError: If the payload name stays taken across all retries
            ArchiveFormatError: If the archive is unreadable, unsafe or has no payload
            IOFailureError: If a filesystem operation fails
        """
        working_dir = self.config.data_dir
        payload_path: Optional[Path] = None

        try:
            archive = zipfile.ZipFile(archive_path)
        except zipfile.BadZipFile as e:
            raise ArchiveFormatError(f"Not a valid archive: {archive_path}") from e
        except OSError as e:
            raise IOFailureError(f"Cannot open archive {archive_path}: {e}") from e

        with archive:
            entries = [entry for entry in archive.infolist() if not entry.is_dir()]
            sidecars = metadata_entry_names(entry.filename for entry in entries)
            for entry in entries:
                if entry.filename in sidecars:
                    self._extract_metadata(archive, entry)
                    continue

                destination = _destination_for(working_dir, entry.filename)
                payload_path = self.retry_policy.run(
                    lambda: _extract_exclusive(archive, entry, destination),
                    FileExistsError,
                    f"extraction of {entry.filename} to {working_dir}",
                )
                logger.debug(f"Extracted payload {entry.filename} to {payload_path}")

        if payload_path is None:
            raise ArchiveFormatError(f"No payload entry found in {archive_path}")
        return payload_path

    def _extract_metadata(self, archive: zipfile.ZipFile, entry: zipfile.ZipInfo) -> Optional[Path]:
        destination = _destination_for(self.config.metadata_dir, entry.filename)
        try:
            return _extract_exclusive(archive, entry, destination)
        except FileExistsError:
            logger.debug(f"Metadata file {destination} already exists, skipping")
            return None

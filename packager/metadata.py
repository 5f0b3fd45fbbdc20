"""Writes the metadata sidecar for a payload and reads it back from archives."""

import zipfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, Set, Union

from pydantic import ValidationError

from common.constants import METADATA_SUFFIX
from common.logging_config import get_logger
from packager.exceptions import ArchiveFormatError, IOFailureError, MetadataNotFoundError
from packager.schemas import DataFileMetadata

logger = get_logger(__name__)


def current_timestamp_ms() -> int:
    """Current UTC time as milliseconds since the Unix epoch."""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def metadata_file_name(payload_name: str) -> str:
    return payload_name + METADATA_SUFFIX


def metadata_entry_names(names: Iterable[str]) -> Set[str]:
    """
    Pick the sidecar entries out of an archive listing.

    An entry is a sidecar when it ends in .json and the name without that
    suffix is also an entry, so a payload that is itself a .json file is
    not mistaken for metadata.
    """
    names = set(names)
    return {
        name for name in names
        if name.endswith(METADATA_SUFFIX) and name[:-len(METADATA_SUFFIX)] in names
    }


class MetadataWriter:
    """Produces the sidecar metadata record for a payload file."""

    def __init__(self, origin_uid: str, clock: Callable[[], int] = current_timestamp_ms):
        """
        Args:
            origin_uid: Identifier of this node
            clock: Returns the creation timestamp in epoch milliseconds
        """
        self.origin_uid = origin_uid
        self.clock = clock

    def build(self, payload_name: str) -> DataFileMetadata:
        return DataFileMetadata(
            file_name=payload_name,
            creation_timestamp=self.clock(),
            origin_uid=self.origin_uid,
        )

    def write_metadata(self, payload_name: str, destination_dir: Path) -> Path:
        """
        Write <payload_name>.json into destination_dir.

        Args:
            payload_name: Original payload file name
            destination_dir: Directory receiving the sidecar

        Returns:
            Path of the written metadata file

        Raises:
            IOFailureError: If the file cannot be written
        """
        metadata = self.build(payload_name)
        path = Path(destination_dir) / metadata_file_name(payload_name)
        try:
            path.write_text(metadata.to_json(), encoding="utf-8")
        except OSError as e:
            raise IOFailureError(f"Cannot write metadata file {path}: {e}") from e
        logger.debug(f"Wrote metadata for {payload_name} to {path}")
        return path


def read_archive_metadata(archive_path: Union[str, Path]) -> DataFileMetadata:
    """
    Read the metadata sidecar of a packaged archive without extracting it.

    Args:
        archive_path: Path to a packaged archive

    Returns:
        The parsed DataFileMetadata

    Raises:
        ArchiveFormatError: If the file is not a readable archive
        MetadataNotFoundError: If no sidecar exists or it cannot be parsed
        IOFailureError: If the file cannot be opened
    """
    try:
        with zipfile.ZipFile(archive_path) as archive:
            infos = archive.infolist()
            sidecars = metadata_entry_names(info.filename for info in infos)
            entry = next((info for info in infos if info.filename in sidecars), None)
            if entry is None:
                entry = next((info for info in infos if info.filename.endswith(METADATA_SUFFIX)), None)
            if entry is None:
                raise MetadataNotFoundError(f"No metadata file found in {archive_path}")
            raw = archive.read(entry)
    except zipfile.BadZipFile as e:
        raise ArchiveFormatError(f"Not a valid archive: {archive_path}") from e
    except OSError as e:
        raise IOFailureError(f"Cannot read archive {archive_path}: {e}") from e

    try:
        return DataFileMetadata.from_json(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValidationError) as e:
        logger.error(f"Error while reading the metadata file of {archive_path}: {e}")
        raise MetadataNotFoundError(f"Unreadable metadata in {archive_path}") from e

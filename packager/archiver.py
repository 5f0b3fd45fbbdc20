"""Compresses a staging directory into a single zip archive."""

import os
import tempfile
import zipfile
from pathlib import Path

from common.constants import TEMPORARY_ARCHIVE_PREFIX
from common.logging_config import get_logger
from packager.exceptions import IOFailureError

logger = get_logger(__name__)


def compress(directory: Path) -> Path:
    """
    Pack every regular file under directory into a new archive inside it.

    Entries are written one at a time in sorted relative-path order, with
    POSIX separators and no directory entries. Files are listed before the
    archive is created, and the archive gets a fresh exclusive name, so it
    never contains itself nor overwrites a staged file of the same name.

    Args:
        directory: Directory holding the payload copy and its metadata

    Returns:
        Path of the created archive

    Raises:
        IOFailureError: If a file cannot be read or the archive written
    """
    directory = Path(directory)
    try:
        members = sorted(
            (path for path in directory.rglob("*") if path.is_file()),
            key=lambda path: path.relative_to(directory).as_posix(),
        )
        fd, name = tempfile.mkstemp(prefix=TEMPORARY_ARCHIVE_PREFIX, suffix=".zip", dir=directory)
        os.close(fd)
        archive_path = Path(name)
        logger.debug(f"Packaging {len(members)} file(s) in {archive_path}")
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for member in members:
                archive.write(member, arcname=member.relative_to(directory).as_posix())
    except OSError as e:
        raise IOFailureError(f"Cannot create archive in {directory}: {e}") from e
    return archive_path

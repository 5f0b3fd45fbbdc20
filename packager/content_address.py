"""Names archives after the SHA-256 digest of their own bytes."""

import os
from pathlib import Path
from typing import Union

from common.logging_config import get_logger
from packager.checksum import compute_file_checksum
from packager.exceptions import IOFailureError

logger = get_logger(__name__)


def address_by_content(archive_path: Path, final_root: Path) -> Path:
    """
    Hash a finished archive and move it to final_root/<hash>.

    The hash is taken over the complete file after compression has finished
    and before the move. A stored archive is never overwritten: when
    final_root/<hash> already exists it holds the same bytes, so the new
    copy is dropped and the existing path returned.

    Args:
        archive_path: Completed archive
        final_root: Shared output directory

    Returns:
        Path of the content-addressed archive

    Raises:
        IOFailureError: If hashing or moving fails
    """
    archive_path = Path(archive_path)
    final_root = Path(final_root)
    try:
        digest = compute_file_checksum(archive_path)
        final_path = final_root / digest
        if final_path.exists():
            logger.info(f"Archive {digest} is already stored, discarding duplicate")
            archive_path.unlink()
            return final_path
        final_root.mkdir(parents=True, exist_ok=True)
        os.rename(archive_path, final_path)
    except OSError as e:
        raise IOFailureError(f"Cannot store archive {archive_path} by content: {e}") from e

    logger.debug(f"Packaged file moved and renamed to {final_path}")
    return final_path


def verify_content_address(path: Union[str, Path]) -> bool:
    """
    Check that a stored archive's name still equals the hash of its bytes.

    Args:
        path: Content-addressed archive

    Returns:
        True if the name matches the recomputed digest, False otherwise

    Raises:
        IOFailureError: If the file cannot be read
    """
    path = Path(path)
    try:
        digest = compute_file_checksum(path)
    except OSError as e:
        raise IOFailureError(f"Cannot read {path}: {e}") from e
    matches = digest == path.name.lower()
    if not matches:
        logger.warning(f"Content address mismatch for {path.name}: actual digest {digest}")
    return matches

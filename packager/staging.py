"""Allocates exclusive-use staging directories for packaging operations."""

import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from common.logging_config import get_logger
from packager.exceptions import IOFailureError
from packager.retry_policy import RetryPolicy

logger = get_logger(__name__)


class StagingAllocator:
    """
    Hands out one directory per in-flight packaging operation, named after
    the payload. Creation of that directory is the only coordination between
    concurrent operations on files sharing a name.

    Creation uses mkdir without exist_ok, which is atomic on local
    filesystems: of two racing callers exactly one succeeds and the other
    sees a collision. The residual gap is on filesystems without atomic
    mkdir (some network mounts), where both callers may proceed.
    """

    def __init__(self, staging_root: Path, retry_policy: RetryPolicy):
        """
        Args:
            staging_root: Directory under which staging directories are created
            retry_policy: Policy applied when the name is already taken
        """
        self.staging_root = Path(staging_root)
        self.retry_policy = retry_policy

    def allocate(self, name: str) -> Path:
        """
        Create the staging directory for name, waiting out collisions.

        Args:
            name: Payload file name

        Returns:
            Path of the newly created directory

        Raises:
            ResourceExhaustedError: If the directory persists across all retries
            IOFailureError: If name is not a usable file name, the root cannot be
                created, or a file blocks the name
        """
        if name in ("", ".", "..") or "/" in name:
            raise IOFailureError(f"Not a valid payload file name: {name!r}")

        try:
            self.staging_root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise IOFailureError(f"Cannot create staging root {self.staging_root}: {e}") from e

        path = self.staging_root / name

        def _create() -> Path:
            try:
                path.mkdir()
            except FileExistsError:
                if path.is_dir():
                    raise
                raise IOFailureError(f"A non-directory already occupies {path}")
            except OSError as e:
                raise IOFailureError(f"Cannot create staging directory {path}: {e}") from e
            return path

        directory = self.retry_policy.run(_create, FileExistsError, f"staging directory {path}")
        logger.debug(f"Allocated staging directory {directory}")
        return directory

    def release(self, path: Path) -> None:
        """
        Recursively delete a staging directory.

        Raises:
            IOFailureError: If the directory cannot be removed
        """
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            logger.warning(f"Staging directory {path} was already removed")
        except OSError as e:
            raise IOFailureError(f"Cannot remove staging directory {path}: {e}") from e
        logger.debug(f"Released staging directory {path}")

    @contextmanager
    def staging_directory(self, name: str) -> Iterator[Path]:
        """
        Allocate a staging directory for the duration of a with-block.

        The directory is removed when the block exits, whether it completes
        or raises.
        """
        path = self.allocate(name)
        try:
            yield path
        finally:
            self.release(path)

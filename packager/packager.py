"""Packages data files with their metadata into content-addressed archives."""

import shutil
from pathlib import Path
from typing import Optional, Union

from common.logging_config import get_logger
from packager.archiver import compress
from packager.config import PackagerConfig
from packager.content_address import address_by_content
from packager.exceptions import IOFailureError
from packager.metadata import MetadataWriter
from packager.retry_policy import RetryPolicy
from packager.staging import StagingAllocator
from packager.unpackager import Unpackager

logger = get_logger(__name__)


class DataFilePackager:
    """
    Packages/unpackages data files with their metadata.

    Packaging copies the source into a staging directory named after it,
    writes the metadata sidecar next to it, zips both, and moves the zip to
    ``data_dir/<sha256 of the zip>``. The staging directory is removed on
    every exit path.
    """

    def __init__(
        self,
        config: PackagerConfig,
        retry_policy: Optional[RetryPolicy] = None,
        metadata_writer: Optional[MetadataWriter] = None,
    ):
        """
        Args:
            config: Explicit packager configuration
            retry_policy: Collision policy (built from config if None)
            metadata_writer: Sidecar writer (built from config.device_id if None)
        """
        self.config = config
        self.retry_policy = retry_policy or RetryPolicy.from_config(config)
        self.staging = StagingAllocator(config.data_dir, self.retry_policy)
        self.metadata_writer = metadata_writer or MetadataWriter(config.device_id)
        self.unpackager = Unpackager(config, self.retry_policy)

    def package(self, source_path: Union[str, Path]) -> Path:
        """
        Package a data file with its metadata.

        Args:
            source_path: Path of the data file to package

        Returns:
            Path of the content-addressed archive

        Raises:
            ResourceExhaustedError: If the staging directory stays taken
            IOFailureError: If copying, writing, compressing or moving fails
        """
        source_path = Path(source_path)
        data_file_name = source_path.name
        logger.info(f"Packaging {source_path}")

        with self.staging.staging_directory(data_file_name) as staging_dir:
            copied_path = staging_dir / data_file_name
            try:
                shutil.copyfile(source_path, copied_path)
            except OSError as e:
                raise IOFailureError(f"Cannot copy {source_path} to {copied_path}: {e}") from e

            self.metadata_writer.write_metadata(data_file_name, staging_dir)
            archive_path = compress(staging_dir)
            packaged_path = address_by_content(archive_path, self.config.data_dir)

        logger.info(f"Packaged {data_file_name} as {packaged_path.name}")
        return packaged_path

    def unpackage(self, archive_path: Union[str, Path]) -> Path:
        """
        Unpackage an archive produced by package().

        Returns:
            Path of the extracted payload
        """
        logger.info(f"Unpackaging {archive_path}")
        return self.unpackager.unpackage(archive_path)

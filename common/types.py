"""Shared data type definitions (StorageInformation)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StorageInformation:
    """
    Snapshot of the storage device holding the data directory.

    Attributes:
        total_space: Total device capacity in bytes
        free_space: Bytes currently free on the device
        incomplete_files_space: Bytes taken by partially transferred files
    """
    total_space: int
    free_space: int
    incomplete_files_space: int

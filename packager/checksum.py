"""Provides SHA-256 checksum calculation and verification helpers."""

import hashlib
from pathlib import Path
from typing import BinaryIO, Union

from common.constants import HASH_PIECE_SIZE


def compute_checksum(data: bytes) -> str:
    """
    Compute SHA-256 checksum for given data.
    
    Args:
        data: Bytes to compute checksum for
        
    Returns:
        Hexadecimal string representation of SHA-256 hash
    """
    return hashlib.sha256(data).hexdigest()


def compute_stream_checksum(stream: BinaryIO, piece_size: int = HASH_PIECE_SIZE) -> str:
    """
    Compute SHA-256 checksum over the remaining bytes of a binary stream.

    Args:
        stream: Readable binary stream
        piece_size: Size of each read in bytes (default 64KB)

    Returns:
        Hexadecimal string representation of SHA-256 hash
    """
    calculator = IncrementalChecksumCalculator()
    while True:
        piece = stream.read(piece_size)
        if not piece:
            break
        calculator.update(piece)
    return calculator.finalize()


def compute_file_checksum(path: Union[str, Path]) -> str:
    """
    Compute SHA-256 checksum of a file's full content.

    Args:
        path: File to hash

    Returns:
        Hexadecimal string representation of SHA-256 hash

    Raises:
        OSError: If the file cannot be read
    """
    with open(path, 'rb') as f:
        return compute_stream_checksum(f)


def verify_file_checksum(path: Union[str, Path], expected: str) -> bool:
    """
    Verify that a file's content matches expected checksum.
    
    Args:
        path: File to verify
        expected: Expected SHA-256 checksum (hex string)
        
    Returns:
        True if checksum matches, False otherwise
    """
    return compute_file_checksum(path) == expected.lower()


class IncrementalChecksumCalculator:
    """
    Calculate SHA-256 checksum incrementally for streaming data.
    
    Usage:
        calculator = IncrementalChecksumCalculator()
        calculator.update(piece1)
        calculator.update(piece2)
        final_checksum = calculator.finalize()
    """
    
    def __init__(self):
        self._hasher = hashlib.sha256()
        self._finalized = False
    
    def update(self, data: bytes) -> None:
        if self._finalized:
            raise ValueError("Cannot update after finalization")
        self._hasher.update(data)
    
    def finalize(self) -> str:
        self._finalized = True
        return self._hasher.hexdigest()

"""Custom exception classes for the data file packager."""


class DataFileError(Exception):
    """
    Base exception class for all data-file packaging errors.
    """
    pass


class ResourceExhaustedError(DataFileError):
    """
    Raised when a bounded retry loop (staging directory creation, payload
    extraction) runs out of attempts because a name collision persisted.
    """
    pass


class IOFailureError(DataFileError, OSError):
    """
    Raised when an underlying filesystem operation (copy, move, write,
    delete) fails for a reason other than a retried name collision.
    """
    pass


class ArchiveFormatError(DataFileError):
    """
    Raised when an archive cannot be read, holds an unsafe entry name, or
    has no payload entry.
    """
    pass


class MetadataNotFoundError(DataFileError):
    """
    Raised when a packaged archive carries no readable metadata sidecar.
    """
    pass


class InvalidConfigurationError(DataFileError):
    """
    Raised when a configuration value is missing or malformed.
    """
    pass

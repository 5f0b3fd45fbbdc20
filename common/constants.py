"""Project-wide constants (directory names, retry bounds, archive layout)."""

DATA_DIR_NAME: str = "data"
DEFAULT_METADATA_DIR_NAME: str = "metadata"

METADATA_SUFFIX: str = ".json"
TEMPORARY_ARCHIVE_PREFIX: str = "zipped-"
INCOMPLETE_FILE_SUFFIX: str = "dhincomplete"

MAX_COLLISION_RETRIES: int = 3
COLLISION_WAIT_SECONDS: float = 5.0

HASH_PIECE_SIZE: int = 64 * 1024  # 64 KiB read size for streaming hashes

# Space kept free on the storage device when accepting incoming files.
STORAGE_BUFFER_BYTES: int = 100 * 1024 * 1024

DEFAULT_UPLOAD_PRIORITY: str = "SMALLEST_FIRST"

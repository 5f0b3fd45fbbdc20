"""Configuration settings for packaging and unpackaging data files."""

import os
import socket
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from common.constants import (
    COLLISION_WAIT_SECONDS,
    DATA_DIR_NAME,
    DEFAULT_METADATA_DIR_NAME,
    DEFAULT_UPLOAD_PRIORITY,
    MAX_COLLISION_RETRIES,
)
from packager.exceptions import InvalidConfigurationError


@dataclass(frozen=True)
class PackagerConfig:
    """
    Explicit configuration handed to the packager, unpackager and repository.

    Attributes:
        agent_root: Root directory of the agent installation
        device_id: Identifier of this node, recorded as the archive origin
        metadata_dir: Where extracted metadata sidecars are written
        max_retries: Retries allowed after a name collision
        retry_wait_seconds: Wait between collision retries
        upload_priority: Name of the policy used to pick the next file to send
    """
    agent_root: Path
    device_id: str
    metadata_dir: Path
    max_retries: int = MAX_COLLISION_RETRIES
    retry_wait_seconds: float = COLLISION_WAIT_SECONDS
    upload_priority: str = DEFAULT_UPLOAD_PRIORITY

    @property
    def data_dir(self) -> Path:
        """Staging root, final archive store and extraction directory."""
        return self.agent_root / DATA_DIR_NAME

    @classmethod
    def from_env(cls, agent_root: Optional[Path] = None) -> "PackagerConfig":
        """
        Build configuration from DATAFILE_* environment variables.

        Args:
            agent_root: Overrides DATAFILE_AGENT_ROOT when given

        Returns:
            PackagerConfig instance

        Raises:
            InvalidConfigurationError: If a numeric variable is malformed
        """
        if agent_root is None:
            agent_root = Path(os.getenv("DATAFILE_AGENT_ROOT", os.getcwd()))
        agent_root = Path(agent_root)

        metadata_dir = os.getenv("DATAFILE_METADATA_DIR")

        return cls(
            agent_root=agent_root,
            device_id=os.getenv("DATAFILE_DEVICE_ID") or socket.gethostname(),
            metadata_dir=Path(metadata_dir) if metadata_dir else agent_root / DEFAULT_METADATA_DIR_NAME,
            max_retries=_parse_number(
                "DATAFILE_MAX_RETRIES", os.getenv("DATAFILE_MAX_RETRIES"), int, MAX_COLLISION_RETRIES
            ),
            retry_wait_seconds=_parse_number(
                "DATAFILE_RETRY_WAIT_SECONDS", os.getenv("DATAFILE_RETRY_WAIT_SECONDS"), float,
                COLLISION_WAIT_SECONDS
            ),
            upload_priority=os.getenv("DATAFILE_UPLOAD_PRIORITY", DEFAULT_UPLOAD_PRIORITY),
        )


def _parse_number(name: str, raw: Optional[str], kind: type, default):
    if raw is None or raw == "":
        return default
    try:
        value = kind(raw)
    except ValueError as e:
        raise InvalidConfigurationError(f"{name} must be a number, got {raw!r}") from e
    if value < 0:
        raise InvalidConfigurationError(f"{name} must not be negative, got {raw!r}")
    return value

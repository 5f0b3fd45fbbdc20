"""Shared pytest fixtures for all tests."""

import json
import zipfile

import pytest
from pathlib import Path

from cli.config import Config
from packager.config import PackagerConfig
from packager.packager import DataFilePackager
from packager.retry_policy import RetryPolicy


@pytest.fixture
def agent_root(tmp_path):
    """
    Create temporary agent root directory.

    Returns:
        Path to agent root (data/ is created lazily by the packager)
    """
    root = tmp_path / 'agent'
    root.mkdir()
    return root


@pytest.fixture
def packager_config(agent_root):
    """
    Create packager configuration rooted in the temporary agent root.
    """
    return PackagerConfig(
        agent_root=agent_root,
        device_id='device-001',
        metadata_dir=agent_root / 'metadata',
    )


@pytest.fixture
def sleeps():
    """
    List receiving every delay the retry policy waits for.
    """
    return []


@pytest.fixture
def retry_policy(sleeps):
    """
    Retry policy with the production bounds (3 retries, 5s) that records
    waits instead of blocking.
    """
    return RetryPolicy(max_retries=3, wait_seconds=5, sleep=sleeps.append)


@pytest.fixture
def packager(packager_config, retry_policy):
    return DataFilePackager(packager_config, retry_policy=retry_policy)


@pytest.fixture
def sample_file(tmp_path):
    """
    Create the 10-byte hello.txt payload outside the agent root.

    Returns:
        Path to sample text file
    """
    source_dir = tmp_path / 'source'
    source_dir.mkdir()
    file_path = source_dir / 'hello.txt'
    file_path.write_bytes(b'helloworld')
    return file_path


@pytest.fixture
def make_archive(tmp_path):
    """
    Factory writing a hand-built zip archive.

    Usage:
        path = make_archive('a.zip', {'a.txt': b'data', 'a.txt.json': {...}})

    Dict values are JSON encoded, bytes are stored as-is.
    """
    archive_dir = tmp_path / 'archives'
    archive_dir.mkdir(exist_ok=True)

    def _make(name: str, entries: dict) -> Path:
        path = archive_dir / name
        with zipfile.ZipFile(path, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
            for entry_name, content in entries.items():
                if isinstance(content, dict):
                    content = json.dumps(content).encode('utf-8')
                archive.writestr(entry_name, content)
        return path

    return _make


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary CLI config directory.

    Returns:
        Path to temporary .datafile directory
    """
    config_dir = tmp_path / '.datafile'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary CLI config instance.

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')

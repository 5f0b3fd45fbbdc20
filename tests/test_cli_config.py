"""Tests for CLI configuration module."""

import json

import pytest
from pathlib import Path

from cli.config import Config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ['DATAFILE_AGENT_ROOT', 'DATAFILE_DEVICE_ID', 'DATAFILE_METADATA_DIR',
                 'DATAFILE_MAX_RETRIES', 'DATAFILE_RETRY_WAIT_SECONDS', 'DATAFILE_UPLOAD_PRIORITY']:
        monkeypatch.delenv(name, raising=False)


def test_config_creates_default_file(tmp_path):
    """Test that config file is created with defaults if missing."""
    config_path = tmp_path / '.datafile' / 'config.json'
    config = Config(config_path)

    assert config_path.exists()
    assert config.data == Config.DEFAULT_CONFIG


def test_config_loads_existing_file(tmp_path):
    """Test loading existing config file."""
    config_path = tmp_path / '.datafile' / 'config.json'
    config_path.parent.mkdir(parents=True)

    with open(config_path, 'w') as f:
        json.dump({'device_id': 'node-9', 'max_retries': 5}, f)

    config = Config(config_path)

    assert config.data['device_id'] == 'node-9'
    assert config.data['max_retries'] == 5
    assert config.data['retry_wait_seconds'] is None


def test_config_handles_corrupted_file(tmp_path):
    """Test recovery from corrupted config file."""
    config_path = tmp_path / '.datafile' / 'config.json'
    config_path.parent.mkdir(parents=True)

    with open(config_path, 'w') as f:
        f.write('{ invalid json content')

    config = Config(config_path)
    assert config.data == Config.DEFAULT_CONFIG

    backup_path = config_path.with_suffix('.json.bak')
    assert backup_path.exists()


def test_config_set_persists_value(temp_config):
    """Test saving a value to file."""
    temp_config.set('device_id', 'node-1')

    with open(temp_config.config_path, 'r') as f:
        data = json.load(f)
    assert data['device_id'] == 'node-1'


def test_config_set_rejects_unknown_key(temp_config):
    with pytest.raises(KeyError):
        temp_config.set('unknown_key', 'value')


def test_packager_config_from_file_values(temp_config, tmp_path):
    temp_config.data.update({
        'agent_root': str(tmp_path / 'agent'),
        'device_id': 'node-1',
        'metadata_dir': str(tmp_path / 'meta'),
        'max_retries': 2,
        'retry_wait_seconds': 1.5,
        'upload_priority': 'LARGEST_FIRST',
    })

    config = temp_config.get_packager_config()

    assert config.agent_root == tmp_path / 'agent'
    assert config.device_id == 'node-1'
    assert config.metadata_dir == tmp_path / 'meta'
    assert config.max_retries == 2
    assert config.retry_wait_seconds == 1.5
    assert config.upload_priority == 'LARGEST_FIRST'


def test_packager_config_falls_back_to_environment(temp_config, tmp_path, monkeypatch):
    monkeypatch.setenv('DATAFILE_AGENT_ROOT', str(tmp_path / 'env-root'))
    monkeypatch.setenv('DATAFILE_DEVICE_ID', 'env-device')

    config = temp_config.get_packager_config()

    assert config.agent_root == Path(tmp_path / 'env-root')
    assert config.device_id == 'env-device'
    assert config.metadata_dir == tmp_path / 'env-root' / 'metadata'
    assert config.max_retries == 3


def test_config_directory_created_if_missing(tmp_path):
    """Test that config directory is created if it doesn't exist."""
    config_path = tmp_path / 'nested' / 'deep' / '.datafile' / 'config.json'

    assert not config_path.parent.exists()

    Config(config_path)
    assert config_path.parent.exists()
    assert config_path.exists()

"""Tests for CLI command handlers."""

import hashlib
from pathlib import Path
from unittest.mock import Mock

from cli.commands import (
    handle_inspect,
    handle_list,
    handle_next,
    handle_package,
    handle_status,
    handle_unpackage,
    handle_verify,
)
from cli.models import (
    InspectCommand,
    ListCommand,
    NextCommand,
    PackageCommand,
    StatusCommand,
    UnpackageCommand,
    VerifyCommand,
)
from packager.exceptions import ResourceExhaustedError
from packager.packager import DataFilePackager
from packager.repository import DataFileRepository, incomplete_file_name


def test_handle_package(packager, sample_file):
    """Test package command handler with a real packager."""
    result = handle_package(PackageCommand(file_path=str(sample_file)), packager=packager)

    assert result.startswith('Packaged: hello.txt -> ')


def test_handle_package_reports_errors():
    """Test package command handler with mocked packager."""
    mock_packager = Mock(spec=DataFilePackager)
    mock_packager.package.side_effect = ResourceExhaustedError('staging directory busy')

    result = handle_package(PackageCommand(file_path='hello.txt'), packager=mock_packager)

    assert result == 'Error: staging directory busy'
    mock_packager.package.assert_called_once_with('hello.txt')


def test_handle_unpackage():
    mock_packager = Mock(spec=DataFilePackager)
    mock_packager.unpackage.return_value = Path('/agent/data/hello.txt')

    result = handle_unpackage(UnpackageCommand(archive_path='data/abc'), packager=mock_packager)

    assert result == f"Unpackaged: {Path('/agent/data/hello.txt')}"
    mock_packager.unpackage.assert_called_once_with('data/abc')


def test_handle_inspect(packager, sample_file):
    packaged = packager.package(sample_file)

    result = handle_inspect(InspectCommand(archive_path=str(packaged)))

    assert 'File name:  hello.txt' in result
    assert 'Origin UID: device-001' in result


def test_handle_inspect_not_an_archive(tmp_path):
    path = tmp_path / 'plain'
    path.write_bytes(b'nope')

    assert handle_inspect(InspectCommand(archive_path=str(path))).startswith('Error:')


def test_handle_verify(packager, sample_file):
    packaged = packager.package(sample_file)

    assert handle_verify(VerifyCommand(archive_path=str(packaged))).startswith('OK:')

    packaged.write_bytes(packaged.read_bytes() + b'tampered')
    assert handle_verify(VerifyCommand(archive_path=str(packaged))).startswith('MISMATCH:')


def test_handle_list(packager_config):
    repository = DataFileRepository(packager_config)
    assert handle_list(ListCommand(), repository=repository) == 'No data files found'

    packager_config.data_dir.mkdir(parents=True)
    complete = hashlib.sha256(b'complete').hexdigest()
    incomplete = hashlib.sha256(b'incomplete').hexdigest()
    (packager_config.data_dir / complete).write_bytes(b'x' * 10)
    (packager_config.data_dir / incomplete_file_name(incomplete)).write_bytes(b'x')
    (packager_config.data_dir / 'hello.txt').write_bytes(b'extracted')

    result = handle_list(ListCommand(), repository=repository)

    assert 'Found 2 data file(s)' in result
    assert f'{complete}  10 B' in result
    assert f'{incomplete}.dhincomplete  1 B [incomplete]' in result
    assert 'hello.txt' not in result


def test_handle_status(packager_config):
    repository = DataFileRepository(packager_config)

    result = handle_status(StatusCommand(), repository=repository)

    assert 'Free space:' in result
    assert 'Incomplete files: 0 B' in result


def test_handle_next(packager_config):
    repository = DataFileRepository(packager_config)
    packager_config.data_dir.mkdir(parents=True)

    assert handle_next(NextCommand(max_size=100), repository=repository) == 'No file to transfer'

    small = hashlib.sha256(b'small').hexdigest()
    (packager_config.data_dir / small).write_bytes(b'x' * 5)
    (packager_config.data_dir / hashlib.sha256(b'large').hexdigest()).write_bytes(b'x' * 50)

    assert handle_next(NextCommand(max_size=100), repository=repository) == (
        f'Next file: {small} (5 B)'
    )

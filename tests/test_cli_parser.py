"""Tests for CLI command parsing."""

import pytest

from cli.models import (
    InspectCommand,
    ListCommand,
    NextCommand,
    PackageCommand,
    StatusCommand,
    UnpackageCommand,
    VerifyCommand,
)
from cli.parser import ParseError, parse_command, parse_tokens


def test_parse_package():
    assert parse_command('package uploads/hello.txt') == PackageCommand(file_path='uploads/hello.txt')


def test_parse_quoted_path():
    assert parse_command('package "my file.txt"') == PackageCommand(file_path='my file.txt')


def test_parse_archive_commands():
    assert parse_command('unpackage data/abc') == UnpackageCommand(archive_path='data/abc')
    assert parse_command('inspect data/abc') == InspectCommand(archive_path='data/abc')
    assert parse_command('verify data/abc') == VerifyCommand(archive_path='data/abc')


def test_parse_argumentless_commands():
    assert parse_command('list') == ListCommand()
    assert parse_command('status') == StatusCommand()


def test_parse_next():
    assert parse_command('next') == NextCommand()
    assert parse_command('next 1048576') == NextCommand(max_size=1048576)


def test_parse_tokens_from_argv():
    assert parse_tokens(['package', 'a b.txt']) == PackageCommand(file_path='a b.txt')


@pytest.mark.parametrize('line', [
    '',
    '   ',
    'package',
    'package a b',
    'list extra',
    'status now',
    'next big',
    'next 0',
    'next 1 2',
    'upload file.txt',
    'package "unterminated',
])
def test_invalid_commands(line):
    with pytest.raises(ParseError):
        parse_command(line)

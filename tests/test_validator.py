"""
Tests for directory validation in validator.py
"""
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from mediasort.models import AppConfig, ErrorKind, SetupError
from mediasort.validator import (
    ensure_directory,
    ensure_valid_input_directory,
    ensure_valid_output_directory,
    is_valid_directory,
)


@pytest.fixture
def base_config(tmp_path: Path) -> AppConfig:
    return AppConfig(input_dir=tmp_path, output_dir=tmp_path, quiet=True)


def test_is_valid_directory(tmp_path):
    assert is_valid_directory(tmp_path, False)
    assert is_valid_directory(tmp_path, True)


def test_is_valid_directory_none():
    assert not is_valid_directory(None, False)


def test_is_valid_directory_missing(tmp_path):
    assert not is_valid_directory(tmp_path / "missing", False)


def test_is_valid_directory_regular_file(tmp_path):
    file = tmp_path / "a.jpg"
    file.touch()
    assert not is_valid_directory(file, False)


def test_is_valid_directory_not_readable(tmp_path):
    with patch("mediasort.validator.os.access", return_value=False):
        assert not is_valid_directory(tmp_path, False)


def test_is_valid_directory_not_writable(tmp_path):
    def access(path, mode):
        return mode != os.W_OK

    with patch("mediasort.validator.os.access", side_effect=access):
        assert is_valid_directory(tmp_path, False)
        assert not is_valid_directory(tmp_path, True)


def test_is_valid_directory_verbose_output(tmp_path, capsys):
    cfg = AppConfig(verbose=True)
    is_valid_directory(tmp_path / "missing", False, cfg)
    assert "Directory does not exist" in capsys.readouterr().out


def test_ensure_valid_input_directory(base_config, tmp_path):
    ensure_valid_input_directory(tmp_path, base_config)

    with pytest.raises(SetupError) as exc_info:
        ensure_valid_input_directory(tmp_path / "missing", base_config)
    assert exc_info.value.kind is ErrorKind.INVALID_INPUT_DIRECTORY


def test_ensure_valid_input_directory_does_not_need_write(base_config, tmp_path):
    def access(path, mode):
        return mode != os.W_OK

    with patch("mediasort.validator.os.access", side_effect=access):
        ensure_valid_input_directory(tmp_path, base_config)


def test_ensure_valid_output_directory_missing(base_config, tmp_path):
    with pytest.raises(SetupError) as exc_info:
        ensure_valid_output_directory(tmp_path / "missing", base_config)

    assert exc_info.value.kind is ErrorKind.INVALID_OUTPUT_DIRECTORY
    assert not (tmp_path / "missing").exists()


def test_ensure_valid_output_directory_not_writable(base_config, tmp_path):
    with patch("mediasort.validator.os.access", return_value=False):
        with pytest.raises(SetupError) as exc_info:
            ensure_valid_output_directory(tmp_path, base_config)
    assert exc_info.value.kind is ErrorKind.INVALID_OUTPUT_DIRECTORY


def test_ensure_valid_output_directory_creates(tmp_path):
    cfg = AppConfig(create_output_dir=True, quiet=True)
    target = tmp_path / "a" / "b"

    ensure_valid_output_directory(target, cfg)

    assert target.is_dir()


def test_ensure_valid_output_directory_create_fails(tmp_path):
    cfg = AppConfig(create_output_dir=True, quiet=True)
    blocker = tmp_path / "file"
    blocker.touch()

    with pytest.raises(SetupError) as exc_info:
        ensure_valid_output_directory(blocker / "sub", cfg)
    assert exc_info.value.kind is ErrorKind.INVALID_OUTPUT_DIRECTORY


def test_ensure_valid_output_directory_test_mode_does_not_create(tmp_path):
    cfg = AppConfig(create_output_dir=True, test=True, quiet=True)
    target = tmp_path / "a" / "b"

    ensure_valid_output_directory(target, cfg)

    assert not (tmp_path / "a").exists()


def test_ensure_valid_output_directory_test_mode_checks_parent(tmp_path):
    cfg = AppConfig(create_output_dir=True, test=True, quiet=True)
    blocker = tmp_path / "file"
    blocker.touch()

    with pytest.raises(SetupError) as exc_info:
        ensure_valid_output_directory(blocker / "sub", cfg)
    assert exc_info.value.kind is ErrorKind.INVALID_OUTPUT_DIRECTORY


def test_ensure_valid_output_directory_test_mode_parent_not_writable(tmp_path):
    cfg = AppConfig(create_output_dir=True, test=True, quiet=True)

    with patch("mediasort.validator.os.access", return_value=False):
        with pytest.raises(SetupError) as exc_info:
            ensure_valid_output_directory(tmp_path / "new", cfg)
    assert exc_info.value.kind is ErrorKind.INVALID_OUTPUT_DIRECTORY


def test_ensure_directory_creates_and_repeats(tmp_path):
    target = tmp_path / "2020-03-04"

    assert ensure_directory(target)
    assert ensure_directory(target)
    assert target.is_dir()


def test_ensure_directory_blocked_by_file(tmp_path):
    target = tmp_path / "2020-03-04"
    target.touch()

    assert not ensure_directory(target)

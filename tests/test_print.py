"""
Tests for output formatting in print.py
"""
import dataclasses
import datetime
import time
from pathlib import Path

import pytest

from mediasort.models import (
    AppConfig,
    CaptureDate,
    DateSource,
    MediaFile,
    ProcessingResult,
)
from mediasort.print import (
    get_elapsed_time,
    get_status,
    print_created_dir,
    print_delete_file,
    print_file_error,
    print_folder_info,
    print_footer,
    print_header,
    print_process_file,
    print_progress,
    print_version,
    print_warning,
    printe,
)


@pytest.fixture
def base_config(tmp_path: Path) -> AppConfig:
    """Provide base AppConfig for tests."""
    return AppConfig(input_dir=tmp_path / "in", output_dir=tmp_path / "out", quiet=False)


@pytest.fixture
def media_file(tmp_path: Path) -> MediaFile:
    path = tmp_path / "a.jpg"
    path.write_bytes(b"content")
    return MediaFile.from_path(path)


def test_get_status():
    assert "ON" in get_status(True)
    assert "OFF" in get_status(False)


def test_get_elapsed_time():
    start_time = time.time() - 0.5  # 500ms ago
    elapsed, factor = get_elapsed_time(start_time)

    assert factor == "ms"
    assert float(elapsed) >= 500
    assert float(elapsed) < 600


def test_get_elapsed_time_seconds():
    start_time = time.time() - 2.0
    elapsed, factor = get_elapsed_time(start_time)

    assert factor == "s"
    assert 2.0 <= float(elapsed) < 3.0


def test_print_progress(base_config, capsys):
    print_progress(1, 4, "a.jpg", base_config)
    output = capsys.readouterr().out
    assert "File 1 of 4: a.jpg (25%)" in output


def test_print_progress_zero_total(base_config, capsys):
    print_progress(0, 0, "x", base_config, show_percentage=True)
    assert "(0%)" in capsys.readouterr().out


def test_printe_exits_with_code(capsys):
    with pytest.raises(SystemExit) as exc_info:
        printe("Output directory is invalid", 3)
    assert exc_info.value.code == 3
    assert "Output directory is invalid" in capsys.readouterr().err


def test_printe_zero_goes_to_stdout(capsys):
    with pytest.raises(SystemExit) as exc_info:
        printe("bye", 0)
    assert exc_info.value.code == 0
    assert "bye" in capsys.readouterr().out


def test_print_version(capsys):
    cfg = AppConfig(script_name="mediasort", script_version="1.2.3", script_date="", script_author="")
    print_version(cfg)
    output = capsys.readouterr().out
    assert "mediasort" in output
    assert "1.2.3" in output


def test_print_header(base_config, capsys):
    config = dataclasses.replace(base_config, delete_originals=True)
    print_header(config)
    output = capsys.readouterr().out

    assert "Input directory" in output
    assert "Output directory" in output
    assert "yyyy-MM-dd" in output
    assert "Delete originals" in output
    assert "Create output directory" not in output


def test_print_header_quiet(base_config, capsys):
    print_header(dataclasses.replace(base_config, quiet=True))
    output = capsys.readouterr().out
    assert "Settings:" not in output


def test_print_header_settings(base_config, capsys):
    print_header(dataclasses.replace(base_config, show_settings=True))
    output = capsys.readouterr().out
    assert "RAW Settings:" in output
    assert "date_format" in output


def test_print_folder_info(base_config, capsys):
    print_folder_info(5, 3, base_config)
    output = capsys.readouterr().out
    assert "Total files" in output
    assert "3" in output


def test_print_warning_quiet(base_config, capsys):
    print_warning("careful", dataclasses.replace(base_config, quiet=True))
    assert capsys.readouterr().out == ""


def test_print_process_file_verbose(base_config, media_file, capsys):
    config = dataclasses.replace(base_config, verbose=True)
    date = CaptureDate(datetime.datetime(2020, 3, 4, 10, 11, 12), DateSource.METADATA)

    print_process_file(media_file, date, "2020-03-04", 1, 1, config)
    output = capsys.readouterr().out

    assert "a.jpg" in output
    assert "2020-03-04 10:11:12" in output
    assert "metadata" in output
    assert "2020-03-04" in output


def test_print_process_file_progress(base_config, media_file, capsys):
    date = CaptureDate(datetime.datetime(2020, 3, 4), DateSource.MODIFIED)
    print_process_file(media_file, date, "2020-03-04", 2, 4, base_config)
    output = capsys.readouterr().out

    assert "File 2 of 4" in output
    assert "a.jpg" in output
    assert "2020-03-04" in output


def test_print_created_dir(base_config, capsys):
    print_created_dir("2020-03-04", base_config)
    assert capsys.readouterr().out == ""
    print_created_dir("2020-03-04", dataclasses.replace(base_config, verbose=True))
    assert "Created directory" in capsys.readouterr().out


def test_print_file_error_shown_when_quiet(base_config, capsys):
    print_file_error("a.jpg", "Disk full", dataclasses.replace(base_config, quiet=True))
    err = capsys.readouterr().err
    assert "a.jpg" in err
    assert "Disk full" in err


def test_print_delete_file(base_config, media_file, capsys):
    print_delete_file(media_file, "Permission denied", base_config)
    assert "Could not delete" in capsys.readouterr().err

    print_delete_file(media_file, None, dataclasses.replace(base_config, verbose=True))
    assert "Deleted" in capsys.readouterr().out


def test_print_footer(base_config, media_file, capsys):
    config = dataclasses.replace(base_config, delete_originals=True)
    result = ProcessingResult(
        processed=[media_file],
        skipped=[("b.jpg", "File system error")],
        created_dirs=["2020-03-04"],
        deleted=[media_file],
    )

    print_footer(result, config)
    output = capsys.readouterr().out

    assert "Copied files: 1" in output
    assert "Skipped files: 1" in output
    assert "Directories created: 1" in output
    assert "Deleted originals: 1" in output
    assert "Completed in" in output


def test_print_footer_test_mode(base_config, capsys):
    print_footer(ProcessingResult(), dataclasses.replace(base_config, test=True))
    output = capsys.readouterr().out
    assert "Test mode (no changes made)." in output
    assert "Copied files: 0" in output

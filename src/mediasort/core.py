#!/usr/bin/env python3
"""
Copy media files into date-named folders using the embedded capture date.
Falls back to the file modification time when no capture date is found.
Requires: PyExifTool Python library (ExifTool command-line tool is optional).
"""

import os
import shutil
import subprocess
from pathlib import Path

import exiftool
from exiftool.exceptions import ExifToolException

from mediasort.args import get_config
from mediasort.models import (
    AppConfig,
    MediaFile,
    ProcessingResult,
    SetupError,
    get_normalized_extension,
)
from mediasort.print import (
    print_created_dir,
    print_delete_file,
    print_file_error,
    print_folder_info,
    print_footer,
    print_header,
    print_process_file,
    print_version,
    print_warning,
    printe,
)
from mediasort.resolver import DateResolver, get_bucket_name
from mediasort.validator import (
    ensure_directory,
    ensure_valid_input_directory,
    ensure_valid_output_directory,
)


def skip_file_with_error(name: str, error: str, result: ProcessingResult, cfg: AppConfig) -> None:
    """Record a file as skipped and report why."""
    result.skipped.append((name, error))
    print_file_error(name, error, cfg)


def check_exiftool_availability() -> bool:
    """Check if ExifTool command-line tool is available."""
    try:
        subprocess.run(["exiftool", "-ver"], capture_output=True, check=True)
    except (subprocess.SubprocessError, FileNotFoundError):
        return False
    return True


def start_exiftool(cfg: AppConfig) -> exiftool.ExifToolHelper | None:
    """
    Start one ExifTool process for the whole run.

    Returns None when ExifTool cannot be started; dates then come from
    file modification times only.
    """
    if not check_exiftool_availability():
        print_warning(
            "ExifTool command-line tool is not installed or not in PATH, "
            "using file modification times.",
            cfg,
        )
        return None
    et = exiftool.ExifToolHelper()
    try:
        et.run()
    except (ExifToolException, OSError) as e:
        print_warning(f"ExifTool failed to start ({e}), using file modification times.", cfg)
        return None
    return et


def get_file_list(directory: Path) -> list[Path]:
    """Get a sorted list of files in the specified directory."""
    files = [directory / file for file in os.listdir(directory) if (directory / file).is_file()]
    return sorted(files, key=lambda x: x.name.lower())


def get_media_files(file_list: list[Path], cfg: AppConfig) -> list[Path]:
    """Filter files by recognized media extension, case-insensitive."""
    return [f for f in file_list if get_normalized_extension(f) in cfg.extensions]


def copy_to_output(
    media_files: list[Path], resolver: DateResolver, cfg: AppConfig, result: ProcessingResult
) -> None:
    """Copy each media file into its date folder, recording successes in result."""
    total_items = len(media_files)
    ready_dirs: set[Path] = set()

    for item, path in enumerate(media_files, start=1):
        try:
            file = MediaFile.from_path(path)
        except OSError as e:
            skip_file_with_error(path.name, f"Cannot read file: {e}", result, cfg)
            continue

        date = resolver.resolve(file)
        subdir = get_bucket_name(date, cfg)
        target_dir = cfg.output_dir / subdir
        if not target_dir.resolve().is_relative_to(cfg.output_dir.resolve()):
            skip_file_with_error(
                file.name, f"Folder '{subdir}' is outside the output directory.", result, cfg
            )
            continue
        print_process_file(file, date, subdir, item, total_items, cfg)

        if cfg.test:
            result.processed.append(file)
            continue

        if target_dir not in ready_dirs:
            existed = target_dir.is_dir()
            if not ensure_directory(target_dir, cfg):
                skip_file_with_error(
                    file.name, f"Cannot create or write directory '{subdir}'.", result, cfg
                )
                continue
            ready_dirs.add(target_dir)
            if not existed:
                result.created_dirs.append(subdir)
                print_created_dir(subdir, cfg)

        try:
            shutil.copy2(file.path, target_dir / file.name)
        except PermissionError:
            skip_file_with_error(file.name, "Permission denied: cannot copy file.", result, cfg)
            continue
        except FileNotFoundError:
            skip_file_with_error(file.name, "Source file no longer exists.", result, cfg)
            continue
        except OSError as e:
            skip_file_with_error(file.name, f"File system error: {e}", result, cfg)
            continue

        result.processed.append(file)


def delete_files(files: list[MediaFile], cfg: AppConfig, result: ProcessingResult) -> None:
    """Delete the given files, continuing past individual failures."""
    if cfg.verbose:
        print(f"{cfg.indent}There are {len(files)} files to be deleted")
    for file in files:
        try:
            file.path.unlink()
        except OSError as e:
            result.delete_failures.append((file, str(e)))
            print_delete_file(file, str(e), cfg)
            continue
        result.deleted.append(file)
        print_delete_file(file, None, cfg)


def run(cfg: AppConfig) -> ProcessingResult:
    """
    Sort the media files of the input directory into the output directory.

    Raises:
        SetupError: If the input or output directory is not usable.
    """
    ensure_valid_input_directory(cfg.input_dir, cfg)
    ensure_valid_output_directory(cfg.output_dir, cfg)

    result = ProcessingResult()
    file_list = get_file_list(cfg.input_dir)
    media_files = get_media_files(file_list, cfg)
    print_folder_info(len(file_list), len(media_files), cfg)

    et = start_exiftool(cfg) if media_files else None
    try:
        copy_to_output(media_files, DateResolver(cfg, et), cfg, result)
    finally:
        if et is not None and et.running:
            et.terminate()

    if cfg.delete_originals and not cfg.test:
        delete_files(result.processed, cfg, result)

    return result


def main(argv: list[str] | None = None) -> None:
    """Main function to run the sorting process."""
    try:
        cfg = get_config(argv)
        if cfg.show_version:
            print_version(cfg)
            return
        print_header(cfg)
        result = run(cfg)
    except SetupError as e:
        printe(str(e), int(e.kind))
        return

    print_footer(result, cfg)
    if result.count == 0 and not cfg.quiet:
        print("No files were copied.")


if __name__ == "__main__":
    main()

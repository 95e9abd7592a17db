"""
Output logic for MediaSort.
"""

import sys
import time

from mediasort.models import (
    AppConfig,
    CaptureDate,
    DateSource,
    MediaFile,
    ProcessingResult,
    colorize,
    colors,
)


def get_status(value: bool) -> str:
    """Get colored ON/OFF status."""
    return colorize("ON", colors.green) if value else colorize("OFF", colors.red)


def get_elapsed_time(start_time: float) -> tuple[str, str]:
    """Get elapsed time since script start."""
    elapsed_time = (time.time() - start_time) * 1000
    time_factor = "ms" if elapsed_time < 1000 else "s"
    elapsed_time = elapsed_time / 1000 if elapsed_time >= 1000 else elapsed_time
    return f"{elapsed_time:.2f}", time_factor


def print_progress(
    item: int, total: int, message: str, cfg: AppConfig, show_percentage: bool = True
) -> None:
    """Print progress of file processing."""
    if show_percentage:
        percentage = (item / total) * 100 if total > 0 else 0
        msg = (
            f"{cfg.terminal_clear}{cfg.indent}File {item} of {total}: {message} ({percentage:.0f}%)"
        )
    else:
        msg = f"{cfg.terminal_clear}{cfg.indent}File {item} of {total}: {message}"
    print(msg, end="", flush=True)


def printe(message: str, exit_code: int = 1) -> None:
    """Print error message and exit with given exit code."""
    msg = message if exit_code == 0 else f"{colorize('Error', colors.red)}: {message}"
    print(msg, file=sys.stderr if exit_code else sys.stdout)
    sys.exit(exit_code)


def print_version(cfg: AppConfig) -> None:
    date_str = f" ({cfg.script_date})" if cfg.script_date else ""
    author = f" by {colorize(cfg.script_author, colors.cyan)}" if cfg.script_author else ""
    print(
        f"{colorize(cfg.script_name, colors.green)} "
        f"version {colorize(cfg.script_version, colors.cyan)}{date_str}{author}"
    )


def print_settings(cfg: AppConfig) -> None:
    """Print settings using AppConfig internal method."""
    cfg.print_config(show_all=False)


def print_header(cfg: AppConfig) -> None:
    """Print the header information based on current configuration."""
    print(
        f"{colorize('Media Sorter', colors.green)} ({colorize(cfg.script_name, colors.green)}) v{cfg.script_version}"
    )
    if cfg.show_settings and not cfg.quiet:
        print_settings(cfg)
    if cfg.quiet:
        return
    print(f"{colorize('Settings:', colors.yellow)}")
    if cfg.config_file is not None:
        print(f"{cfg.indent}Configuration file: {colorize(str(cfg.config_file), colors.cyan)}")
    print(f"{cfg.indent}Input directory: {colorize(str(cfg.input_dir), colors.cyan)}")
    print(f"{cfg.indent}Output directory: {colorize(str(cfg.output_dir), colors.cyan)}")
    print(f"{cfg.indent}Folder pattern: {colorize(cfg.date_format, colors.cyan)}")
    if cfg.verbose:
        print(f"{cfg.indent}Verbose mode: {get_status(cfg.verbose)}")
    if cfg.test or cfg.verbose:
        print(f"{cfg.indent}Test mode: {get_status(cfg.test)}")
    if cfg.verbose or cfg.create_output_dir:
        print(f"{cfg.indent}Create output directory: {get_status(cfg.create_output_dir)}")
    if cfg.verbose or cfg.delete_originals:
        print(f"{cfg.indent}Delete originals: {get_status(cfg.delete_originals)}")
    if cfg.verbose or cfg.use_filename_date:
        print(f"{cfg.indent}Date from file name: {get_status(cfg.use_filename_date)}")
    if cfg.verbose:
        print(f"{cfg.indent}Include extensions: {colorize(', '.join(cfg.extensions), colors.cyan)}")


def print_folder_info(file_count: int, media_count: int, cfg: AppConfig) -> None:
    """Print input folder summary."""
    if cfg.quiet:
        return
    print(f"{colorize('Folder info:', colors.yellow)}")
    print(f"{cfg.indent}Path: {colorize(str(cfg.input_dir), colors.cyan)}")
    print(f"{cfg.indent}Total files: {colorize(str(file_count), colors.cyan)}")
    print(f"{cfg.indent}Matching files: {colorize(str(media_count), colors.cyan)}")


def print_warning(message: str, cfg: AppConfig) -> None:
    if not cfg.quiet:
        print(f"{colorize('Warning', colors.yellow)}: {message}")


def print_process_file(
    file: MediaFile, date: CaptureDate, subdir: str, item: int, total_items: int, cfg: AppConfig
) -> None:
    """Print processing information for a single file."""
    if cfg.quiet:
        return
    arr = colorize("→", colors.yellow)
    if cfg.verbose:
        old = colorize(f"{file.name:<13}", colors.cyan)
        date_color = colors.cyan if date.source is DateSource.METADATA else colors.magenta
        date_str = colorize(f"{date.value} {date.source.value}", date_color)
        print(f"{cfg.indent}{old} ({date_str}) {arr} {colorize(subdir, colors.cyan)}/{file.name}")
    else:
        message = f"{colorize(file.name, colors.cyan)} {arr} {colorize(subdir, colors.cyan)}"
        print_progress(item, total_items, message, cfg)


def print_created_dir(subdir: str, cfg: AppConfig) -> None:
    if cfg.verbose:
        print(f"{cfg.indent}Created directory: {colorize(subdir, colors.cyan)}")


def print_file_error(name: str, error: str, cfg: AppConfig) -> None:
    """Print a per-file failure; shown even in quiet mode."""
    print(
        f"{cfg.terminal_clear}{cfg.indent}Failed to process file "
        f"{colorize(name, colors.cyan)}: {colorize(error, colors.red)}",
        file=sys.stderr,
    )


def print_delete_file(file: MediaFile, error: str | None, cfg: AppConfig) -> None:
    if error is not None:
        print(
            f"{cfg.indent}Could not delete {colorize(str(file.path), colors.cyan)}: "
            f"{colorize(error, colors.red)}",
            file=sys.stderr,
        )
    elif cfg.verbose:
        print(f"{cfg.indent}Deleted {colorize(str(file.path), colors.cyan)}")


def print_footer(result: ProcessingResult, cfg: AppConfig) -> None:
    """Print the footer summary based on the run result and configuration."""
    time_elapsed, time_factor = get_elapsed_time(cfg.start_time)
    if not cfg.verbose and not cfg.quiet and result.processed:
        print(f"{cfg.terminal_clear}{cfg.indent}Done.")
    print(f"{colorize('Summary:', colors.yellow)}")
    if cfg.test:
        print(f"{cfg.indent}Test mode (no changes made).")
    print(f"{cfg.indent}Copied files: {result.count}")
    if not cfg.quiet:
        print(f"{cfg.indent}Skipped files: {len(result.skipped)}")
        print(f"{cfg.indent}Directories created: {len(result.created_dirs)}")
        if cfg.delete_originals:
            print(f"{cfg.indent}Deleted originals: {len(result.deleted)}")
            if result.delete_failures:
                print(f"{cfg.indent}Failed deletions: {len(result.delete_failures)}")
        print(f"{cfg.indent}Completed in: {colorize(time_elapsed, colors.cyan)} {time_factor}.")

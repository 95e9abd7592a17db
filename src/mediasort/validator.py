"""
Directory checks that gate every write made by MediaSort.
"""

import os
from pathlib import Path

from mediasort.models import AppConfig, ErrorKind, SetupError, colorize, colors


def _report(message: str, path: Path, cfg: AppConfig | None) -> None:
    if cfg is not None and cfg.verbose:
        print(f"{cfg.indent}{message}: {colorize(str(path.absolute()), colors.cyan)}")


def is_valid_directory(
    path: Path | None, require_writable: bool, cfg: AppConfig | None = None
) -> bool:
    """
    Check that path is an existing, readable (and optionally writable) directory.

    Args:
        path: Directory to check
        require_writable: Whether write access is also required
        cfg: Configuration used for diagnostic output only

    Returns:
        True if all applicable checks pass
    """
    if path is None:
        if cfg is not None and cfg.verbose:
            print(f"{cfg.indent}Null directories not permitted")
        return False

    if not path.exists():
        _report("Directory does not exist", path, cfg)
        return False

    if not path.is_dir():
        _report("Not a directory", path, cfg)
        return False

    if not os.access(path, os.R_OK):
        _report("Not readable", path, cfg)
        return False

    if require_writable and not os.access(path, os.W_OK):
        _report("Not writable", path, cfg)
        return False

    return True


def ensure_valid_input_directory(path: Path | None, cfg: AppConfig) -> None:
    """Raise SetupError unless path is a readable directory."""
    if not is_valid_directory(path, False, cfg):
        raise SetupError(
            ErrorKind.INVALID_INPUT_DIRECTORY,
            f"Input directory '{colorize(str(path), colors.cyan)}' "
            "does not exist, is not a directory or is not readable.",
        )


def _get_existing_parent(path: Path) -> Path | None:
    for parent in path.parents:
        if parent.exists():
            return parent
    return None


def ensure_valid_output_directory(path: Path | None, cfg: AppConfig) -> None:
    """
    Raise SetupError unless path is a writable directory.

    When create_output_dir is enabled a missing directory is created first.
    In test mode nothing is created; the nearest existing parent must be
    writable instead.
    """
    if path is not None and cfg.create_output_dir and not path.exists():
        if cfg.test:
            parent = _get_existing_parent(path)
            if not is_valid_directory(parent, True, cfg):
                raise SetupError(
                    ErrorKind.INVALID_OUTPUT_DIRECTORY,
                    f"Output directory '{colorize(str(path), colors.cyan)}' "
                    "cannot be created: no writable parent directory.",
                )
            return
        try:
            path.mkdir(parents=True, exist_ok=True)
            if cfg.verbose:
                print(f"{cfg.indent}Created output directory: {colorize(str(path), colors.cyan)}")
        except OSError as e:
            raise SetupError(
                ErrorKind.INVALID_OUTPUT_DIRECTORY,
                f"Cannot create output directory '{colorize(str(path), colors.cyan)}': {e}",
            ) from e

    if not is_valid_directory(path, True, cfg):
        raise SetupError(
            ErrorKind.INVALID_OUTPUT_DIRECTORY,
            f"Output directory '{colorize(str(path), colors.cyan)}' "
            "does not exist, is not a directory or is not writable.",
        )


def ensure_directory(path: Path, cfg: AppConfig | None = None) -> bool:
    """
    Create path if absent, then check that it is a writable directory.

    Safe to call repeatedly for the same path.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        if cfg is not None and cfg.verbose:
            print(f"{cfg.indent}Cannot create directory {path}: {e}")
        return False
    return is_valid_directory(path, True, cfg)

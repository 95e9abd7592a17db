"""
Configuration loading for MediaSort.

Settings come from a key/value configuration file (``config.properties`` by
default) and may be overridden on the command line.
"""

import argparse
import configparser
import dataclasses
import re
from pathlib import Path
from typing import Any, NoReturn

from mediasort.models import AppConfig, ErrorKind, SetupError, colorize, colors, get_date_format

DEFAULT_CONFIG_FILE = "config.properties"

PROPERTY_INPUT_DIRECTORY = "inputDirectory"
PROPERTY_OUTPUT_DIRECTORY = "outputDirectory"
PROPERTY_CREATE_OUTPUT_DIR = "createOutputDir"
PROPERTY_DELETE_ORIGINALS = "deleteOriginals"
PROPERTY_DATE_FORMAT = "dateFormat"
PROPERTY_USE_FILENAME_DATE = "useFilenameDate"

_SECTION = "mediasort"


def get_default_value(field_name: str) -> Any:
    """Extract default value from AppConfig dataclass field."""
    f = AppConfig.__dataclass_fields__[field_name]
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()
    return f.default


def get_default_info(default_val: Any) -> str:
    """Generate a string with default settings for help message."""
    return f"(default: '{colorize(str(default_val), colors.yellow)}')"


# Key, then "=", ":" or whitespace, then the value
_PROPERTY_LINE_RE = re.compile(r"([^=:\s]+)(?:\s*[=:]\s*|\s+)?(.*)")


def _normalize_properties(text: str) -> str:
    """
    Rewrite Java-style properties text as ``key=value`` lines.

    Leading whitespace is ignored, ``#`` and ``!`` start comments, the
    separator may be ``=``, ``:`` or whitespace, and a line ending in an
    odd number of backslashes continues on the next line.
    """
    lines: list[str] = []
    logical = ""
    for raw in text.splitlines():
        line = raw.lstrip()
        if not logical and (not line or line.startswith(("#", "!"))):
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2:
            logical += line[:-1]
            continue
        lines.append(logical + line)
        logical = ""
    if logical:
        lines.append(logical)

    pairs = []
    for line in lines:
        match = _PROPERTY_LINE_RE.match(line)
        if match:
            pairs.append(f"{match.group(1)}={match.group(2).rstrip()}")
    return "\n".join(pairs)


def load_properties(path: Path) -> dict[str, str]:
    """
    Read a key/value configuration file in Java properties syntax.

    Lines are ``key=value``, ``key: value`` or ``key value``; ``#`` and ``!``
    start comments. Keys are case-sensitive and a repeated key keeps its
    last value.

    Raises:
        SetupError: If the file cannot be read or parsed.
    """
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    parser.optionxform = str  # type: ignore[assignment,method-assign]
    try:
        text = path.read_text(encoding="utf-8")
        parser.read_string(f"[{_SECTION}]\n{_normalize_properties(text)}", source=str(path))
    except OSError as e:
        raise SetupError(
            ErrorKind.NO_PARAMETERS, f"Cannot read configuration file '{path}': {e}"
        ) from e
    except configparser.Error as e:
        raise SetupError(
            ErrorKind.NO_PARAMETERS, f"Invalid configuration file '{path}': {e}"
        ) from e
    return dict(parser[_SECTION])


def parse_bool(key: str, value: str) -> bool:
    """Interpret a boolean property value."""
    normalized = value.strip().lower()
    if normalized in configparser.ConfigParser.BOOLEAN_STATES:
        return configparser.ConfigParser.BOOLEAN_STATES[normalized]
    raise SetupError(ErrorKind.NO_PARAMETERS, f"Invalid boolean value for '{key}': {value}")


def _get_path(value: str | None) -> Path | None:
    if value is None or not value.strip():
        return None
    return Path(value.strip()).expanduser().resolve()


class ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that reports usage errors as configuration errors."""

    def error(self, message: str) -> NoReturn:
        raise SetupError(ErrorKind.NO_PARAMETERS, f"{self.prog}: {message}")


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="mediasort",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="Copy media files into date-named folders using the EXIF capture date,\n"
        "falling back to the file modification time.\n"
        f"Uses the {colorize('ExifTool', colors.green)} command-line tool through "
        f"{colorize('PyExifTool', colors.green)} when available.",
        epilog=f"Example: {colorize('mediasort', colors.green)} -c photos.properties -d yyyy/MM",
    )
    parser.add_argument(
        "-c",
        "--config",
        dest="config_file",
        type=str,
        default=None,
        metavar="FILE",
        help=f"Configuration file {get_default_info(DEFAULT_CONFIG_FILE)}",
    )
    parser.add_argument(
        "-i",
        "--input",
        dest="input_dir",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory to scan (overrides inputDirectory)",
    )
    parser.add_argument(
        "-o",
        "--output",
        dest="output_dir",
        type=str,
        default=None,
        metavar="DIR",
        help="Directory to place sorted files in (overrides outputDirectory)",
    )
    parser.add_argument(
        "-C",
        "--create-output",
        dest="create_output_dir",
        action="store_true",
        default=None,
        help="Create the output directory if it does not exist",
    )
    parser.add_argument(
        "-x",
        "--delete-originals",
        dest="delete_originals",
        action="store_true",
        default=None,
        help="Delete source files after they were copied successfully",
    )

    def_date_format = get_default_value("date_format")
    parser.add_argument(
        "-d",
        "--date-format",
        dest="date_format",
        type=str,
        default=None,
        metavar="PATTERN",
        help=f"Pattern for destination folder names {get_default_info(def_date_format)}",
    )
    parser.add_argument(
        "-F",
        "--filename-date",
        dest="use_filename_date",
        action="store_true",
        default=None,
        help="Use a leading YYYY-MM-DD in the file name before the modification time",
    )
    parser.add_argument(
        "-t",
        "--test",
        dest="test",
        action="store_true",
        help="Test mode: show what would be done without making changes",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        dest="quiet",
        action="store_true",
        help="Quiet mode (suppress non-error messages)",
    )
    parser.add_argument(
        "-S",
        "--settings",
        dest="show_settings",
        action="store_true",
        help="Show raw settings (variable values)",
    )
    parser.add_argument(
        "-v", "--version", dest="show_version", action="store_true", help="Print version and exit"
    )
    parser.add_argument(
        "-V",
        "--verbose",
        dest="verbose",
        action="store_true",
        help="Print detailed information during processing",
    )
    return parser


def _read_config_file(args: argparse.Namespace) -> tuple[dict[str, str], Path | None]:
    """Load the configuration file named on the command line, or the default one."""
    if args.config_file is not None:
        path = Path(args.config_file).expanduser()
        if not path.is_file():
            raise SetupError(
                ErrorKind.NO_PARAMETERS,
                f"Configuration file '{colorize(str(path), colors.cyan)}' does not exist.",
            )
        return load_properties(path), path.resolve()

    path = Path(DEFAULT_CONFIG_FILE)
    if path.is_file():
        return load_properties(path), path.resolve()

    # The default file may be omitted when both directories are given
    if args.input_dir is not None and args.output_dir is not None:
        return {}, None
    raise SetupError(
        ErrorKind.NO_PARAMETERS,
        f"No parameters: '{DEFAULT_CONFIG_FILE}' not found "
        "and input/output directories not given.",
    )


_FLAG_FIELDS: dict[str, str] = {
    PROPERTY_CREATE_OUTPUT_DIR: "create_output_dir",
    PROPERTY_DELETE_ORIGINALS: "delete_originals",
    PROPERTY_USE_FILENAME_DATE: "use_filename_date",
}


def get_config(argv: list[str] | None = None) -> AppConfig:
    """
    Parse command line arguments and the configuration file into an AppConfig.

    Raises:
        SetupError: If the configuration is missing, unreadable or invalid.
    """
    args = build_parser().parse_args(argv)

    if args.show_version:
        return AppConfig(show_version=True)

    properties, config_file = _read_config_file(args)

    input_dir = _get_path(args.input_dir or properties.get(PROPERTY_INPUT_DIRECTORY))
    output_dir = _get_path(args.output_dir or properties.get(PROPERTY_OUTPUT_DIRECTORY))
    if input_dir is None or output_dir is None:
        missing = PROPERTY_INPUT_DIRECTORY if input_dir is None else PROPERTY_OUTPUT_DIRECTORY
        raise SetupError(ErrorKind.NO_PARAMETERS, f"No parameters: '{missing}' is not set.")

    def flag(cli_value: bool | None, key: str) -> bool:
        if cli_value is not None:
            return cli_value
        if key in properties:
            return parse_bool(key, properties[key])
        return bool(get_default_value(_FLAG_FIELDS[key]))

    date_format = (
        args.date_format
        or properties.get(PROPERTY_DATE_FORMAT, "").strip()
        or get_default_value("date_format")
    )
    try:
        get_date_format(date_format)
    except ValueError as e:
        raise SetupError(ErrorKind.NO_PARAMETERS, str(e)) from e

    if args.quiet and args.verbose:
        raise SetupError(ErrorKind.NO_PARAMETERS, "Cannot use both quiet mode and verbose mode.")

    return AppConfig(
        input_dir=input_dir,
        output_dir=output_dir,
        create_output_dir=flag(args.create_output_dir, PROPERTY_CREATE_OUTPUT_DIR),
        delete_originals=flag(args.delete_originals, PROPERTY_DELETE_ORIGINALS),
        date_format=date_format,
        use_filename_date=flag(args.use_filename_date, PROPERTY_USE_FILENAME_DATE),
        config_file=config_file,
        quiet=args.quiet,
        show_settings=args.show_settings,
        test=args.test,
        verbose=args.verbose,
    )

import datetime
import enum
import re
import time
import tomllib
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any


@lru_cache(maxsize=1)
def _get_pyproject_data() -> dict[str, Any]:
    """
    Load data from pyproject.toml located in the project root.
    Cached to prevent multiple file reads.
    Assumes structure: project_root/src/mediasort/models.py
    """
    try:
        pyproject_path = Path(__file__).parents[2] / "pyproject.toml"

        if not pyproject_path.is_file():
            return {}

        with open(pyproject_path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _get_script_version() -> str:
    """Get version from the [project] section."""
    data = _get_pyproject_data()
    return str(data.get("project", {}).get("version", "0.0.0"))


def _get_script_date() -> str:
    """Get release date from the [tool.mediasort] section."""
    data = _get_pyproject_data()
    return str(data.get("tool", {}).get("mediasort", {}).get("date", ""))


def _get_script_name() -> str:
    data = _get_pyproject_data()
    return str(data.get("project", {}).get("name", "mediasort"))


def _get_script_author() -> str:
    """Get first author name from [project.authors]."""
    data = _get_pyproject_data()
    authors = data.get("project", {}).get("authors", [])
    if isinstance(authors, list) and len(authors) > 0:
        return str(authors[0].get("name", ""))
    return ""


# Extension -> whether the format can carry an embedded capture date.
# GIF and BMP have no EXIF block, so metadata lookup is skipped for them.
METADATA_CAPABLE: dict[str, bool] = {
    "gif": False,
    "png": True,
    "bmp": False,
    "jpg": True,
    "jpeg": True,
    "mp4": True,
    "3gp": True,
}

# Named bucket templates
DIRECTORY_TEMPLATES: dict[str, str] = {
    "YYYYMMDD": "%Y%m%d",
    "YYYY-MM-DD": "%Y-%m-%d",
    "YYYY.MM.DD": "%Y.%m.%d",
    "YYYY_MM_DD": "%Y_%m_%d",
    "YYYY-MM": "%Y-%m",
    "YYYY/MM/DD": "%Y/%m/%d",
    "YYYY/MM": "%Y/%m",
}

# Java SimpleDateFormat letters understood in dateFormat patterns
PATTERN_TOKENS: dict[str, str] = {
    "yyyy": "%Y",
    "yy": "%y",
    "MM": "%m",
    "dd": "%d",
    "HH": "%H",
    "mm": "%M",
    "ss": "%S",
}

# Runs of one pattern letter, e.g. "yyyy" or "M"
_PATTERN_RUN_RE = re.compile(r"([A-Za-z])\1*")


def _translate_pattern_run(match: re.Match[str], pattern: str) -> str:
    run = match.group(0)
    if run not in PATTERN_TOKENS:
        raise ValueError(f"Date format '{pattern}' contains unsupported field '{run}'")
    return PATTERN_TOKENS[run]


def is_relative_bucket(format_str: str) -> bool:
    """Return True when the folder pattern stays below the output directory."""
    if format_str.startswith(("/", "\\")) or re.match(r"[A-Za-z]:", format_str):
        return False
    return ".." not in re.split(r"[/\\]", format_str)


def get_date_format(pattern: str) -> str:
    """
    Translate a bucket pattern into a strftime format string.

    Accepts a named template (``YYYY-MM-DD``), a Java-style pattern
    (``yyyy-MM-dd``) or a raw strftime string (``%Y/%m``). In Java-style
    patterns every run of letters must be one of PATTERN_TOKENS.

    Raises:
        ValueError: If the pattern contains no date field, an unknown field,
            or would place folders outside the output directory.
    """
    if pattern in DIRECTORY_TEMPLATES:
        format_str = DIRECTORY_TEMPLATES[pattern]
    elif "%" in pattern:
        format_str = pattern
    else:
        format_str = _PATTERN_RUN_RE.sub(lambda m: _translate_pattern_run(m, pattern), pattern)
        if "%" not in format_str:
            raise ValueError(f"Date format '{pattern}' does not contain any date field")
    if not is_relative_bucket(format_str):
        raise ValueError(f"Date format '{pattern}' must be a relative folder name without '..'")
    return format_str


@dataclass
class Colors:
    """Terminal color codes."""

    reset: str = "\033[0m"
    red: str = "\033[31m"
    green: str = "\033[32m"
    yellow: str = "\033[33m"
    cyan: str = "\033[36m"
    magenta: str = "\033[35m"


# global Colors instance
colors = Colors()


def colorize(text: str, color: str) -> str:
    """Wrap text in color codes."""
    return f"{color}{text}{colors.reset}"


def get_normalized_extension(path: Path) -> str:
    """
    Extract and normalize file extension from path.

    Args:
        path: Path object to extract extension from

    Returns:
        Lowercase extension without leading dot
    """
    return path.suffix.lstrip(".").lower()


class ErrorKind(enum.IntEnum):
    """Setup failures; the value is the process exit code."""

    SUCCESS = 0
    NO_PARAMETERS = 1
    INVALID_INPUT_DIRECTORY = 2
    INVALID_OUTPUT_DIRECTORY = 3


class SetupError(Exception):
    """Fatal error found before any file is processed."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class DateSource(str, enum.Enum):
    """Where a capture date came from."""

    METADATA = "metadata"
    FILENAME = "filename"
    MODIFIED = "modified"


@dataclass(frozen=True)
class AppConfig:
    """Application configuration with default values."""

    # Settings
    input_dir: Path = field(default_factory=Path.cwd)
    output_dir: Path = field(default_factory=Path.cwd)
    create_output_dir: bool = False
    delete_originals: bool = False
    date_format: str = "yyyy-MM-dd"
    use_filename_date: bool = False
    extensions: tuple[str, ...] = tuple(METADATA_CAPABLE)
    exif_date_tags: tuple[str, ...] = ("EXIF:DateTimeOriginal",)
    config_file: Path | None = None

    # Formatting
    indent: str = "    "
    terminal_clear: str = "\r\033[K\r"

    # Flags
    quiet: bool = False
    show_version: bool = False
    show_settings: bool = False
    test: bool = False
    verbose: bool = False

    # Runtime metadata
    script_name: str = field(default_factory=_get_script_name)
    script_version: str = field(default_factory=_get_script_version)
    script_date: str = field(default_factory=_get_script_date)
    script_author: str = field(default_factory=_get_script_author)

    # Runtime state
    start_time: float = field(default_factory=time.time)

    @property
    def bucket_format(self) -> str:
        """strftime format used for destination subdirectory names."""
        return get_date_format(self.date_format)

    def print_config(self, show_all: bool = False) -> None:
        """
        Print all configuration properties alphabetically.
        """
        print(f"{colorize('RAW Settings:', colors.yellow)}")

        for key in sorted(self.__dict__.keys()):
            if not show_all and key.startswith("_"):
                continue
            if key == "terminal_clear":
                continue

            value = getattr(self, key)
            print(f"{self.indent}{key}: {colorize(str(value), colors.cyan)}")


@dataclass(frozen=True)
class MediaFile:
    """A media file as observed on disk at the start of its processing."""

    path: Path
    name: str
    modified: datetime.datetime

    @classmethod
    def from_path(cls, path: Path) -> "MediaFile":
        """
        Observe a file on disk.

        Raises:
            OSError: If the file cannot be stat'ed.
        """
        path = path.absolute()
        st = path.stat()
        return cls(
            path=path,
            name=path.name,
            modified=datetime.datetime.fromtimestamp(st.st_mtime),
        )

    @property
    def extension(self) -> str:
        return get_normalized_extension(self.path)

    @property
    def stem(self) -> str:
        return self.path.stem


@dataclass(frozen=True)
class CaptureDate:
    """Resolved date of a media file and where it was found."""

    value: datetime.datetime
    source: DateSource

    def format(self, format_str: str) -> str:
        return self.value.strftime(format_str)


@dataclass
class ProcessingResult:
    """Outcome of a single run."""

    processed: list[MediaFile] = field(default_factory=list)
    skipped: list[tuple[str, str]] = field(default_factory=list)  # (file name, reason)
    created_dirs: list[str] = field(default_factory=list)
    deleted: list[MediaFile] = field(default_factory=list)
    delete_failures: list[tuple[MediaFile, str]] = field(default_factory=list)

    @property
    def count(self) -> int:
        """Number of files successfully copied."""
        return len(self.processed)

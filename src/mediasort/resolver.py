"""
Capture date resolution for media files.

Dates are taken from embedded metadata (read with ExifTool), optionally from a
leading YYYY-MM-DD token in the file name, and finally from the file's
modification time.
"""

import datetime
import re
from typing import Any

import exiftool
from exiftool.exceptions import ExifToolException

from mediasort.models import METADATA_CAPABLE, AppConfig, CaptureDate, DateSource, MediaFile

FILENAME_DATE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})")


def parse_exif_date(value: Any) -> datetime.datetime | None:
    """
    Parse an EXIF date value such as ``2020:03:04 10:11:12``.

    Trailing sub-seconds or time zone suffixes are ignored.
    Returns None when the value cannot be interpreted.
    """
    date_str = str(value).strip()

    # Validate minimum length to avoid index errors
    if len(date_str) < 19:
        return None

    # Handle EXIF date format: YYYY:MM:DD HH:MM:SS -> YYYY-MM-DD HH:MM:SS
    if ":" in date_str[:10] and date_str[4:5] == ":":
        date_str = date_str.replace(":", "-", 2)

    try:
        return datetime.datetime.strptime(date_str[:19], "%Y-%m-%d %H:%M:%S")
    except ValueError:
        return None


def parse_filename_date(stem: str) -> datetime.datetime | None:
    """Parse a leading ``YYYY-MM-DD`` token from a file name without extension."""
    match = FILENAME_DATE_RE.match(stem)
    if not match:
        return None
    try:
        return datetime.datetime.strptime(match.group(1), "%Y-%m-%d")
    except ValueError:
        return None


def is_metadata_capable(file: MediaFile) -> bool:
    return METADATA_CAPABLE.get(file.extension, False)


class DateResolver:
    """
    Decides the capture date of each media file.

    A single ExifTool process is shared across all files of a run.
    """

    def __init__(self, config: AppConfig, et: exiftool.ExifToolHelper | None = None):
        self.cfg = config
        self.et = et

    def resolve(self, file: MediaFile) -> CaptureDate:
        """
        Resolve the capture date of a file. Never fails.

        Order: embedded metadata, file name (when enabled), modification time.
        """
        if is_metadata_capable(file):
            date = self.get_metadata_date(file)
            if date is not None:
                return CaptureDate(date, DateSource.METADATA)

        if self.cfg.use_filename_date:
            date = parse_filename_date(file.stem)
            if date is not None:
                return CaptureDate(date, DateSource.FILENAME)
            if self.cfg.verbose:
                print(f"{self.cfg.indent}Could not interpret file name: {file.name}")

        return CaptureDate(file.modified, DateSource.MODIFIED)

    def read_metadata(self, file: MediaFile) -> dict[str, Any] | None:
        """Read the configured date tags. Returns None if nothing could be read."""
        if self.et is None:
            return None
        try:
            data = self.et.get_tags(str(file.path), tags=list(self.cfg.exif_date_tags))
        except (ExifToolException, OSError, ValueError) as e:
            if self.cfg.verbose:
                print(f"{self.cfg.indent}Could not read metadata from {file.name}: {e}")
            return None
        if not data:
            return None
        return data[0]

    def get_metadata_date(self, file: MediaFile) -> datetime.datetime | None:
        metadata = self.read_metadata(file)
        if not metadata:
            return None

        for tag in self.cfg.exif_date_tags:
            if tag in metadata:
                date = parse_exif_date(metadata[tag])
                if date is not None:
                    return date
                if self.cfg.verbose:
                    print(f"{self.cfg.indent}Invalid date in {tag}: {metadata[tag]}")
        return None


def get_bucket_name(date: CaptureDate, cfg: AppConfig) -> str:
    """Format a capture date into the destination subdirectory name."""
    return date.format(cfg.bucket_format)

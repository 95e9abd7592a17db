"""
MediaSort - copy media files into date-based folders

MediaSort reads the capture date embedded in photos and videos and copies
each file into an output folder named after that date, falling back to the
file modification time when no capture date is available.
"""

from .core import main, run

__all__ = ["main", "run"]

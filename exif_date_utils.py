#!/usr/bin/env python3
"""
EXIF Date Utilities
Shared functions for EXIF date-time strings and JPEG file selection.
"""

from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Union

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"
DISPLAY_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

JPEG_EXTENSIONS = {".jpg", ".jpeg"}


def parse_exif_datetime(date_value: Union[str, bytes, None]) -> Optional[datetime]:
    """
    Parse EXIF date-time value: '2024:01:03 10:00:00'

    Args:
        date_value: Raw tag value, either bytes (piexif) or str (Pillow, exifread)

    Returns:
        Parsed datetime object or None if parsing fails
    """
    if date_value is None:
        return None

    if isinstance(date_value, bytes):
        date_value = date_value.decode("ascii", errors="ignore")

    # Remove null terminator and padding
    clean_date = date_value.strip().rstrip("\x00").strip()

    try:
        return datetime.strptime(clean_date, EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def format_exif_datetime(dt: datetime) -> str:
    """
    Format date in fixed-width EXIF format: 'YYYY:MM:DD HH:MM:SS'

    Sub-second and timezone components are dropped.

    Args:
        dt: Datetime object to format

    Returns:
        Formatted date string in EXIF format
    """
    return dt.strftime(EXIF_DATETIME_FORMAT)


def format_display_datetime(dt: Optional[datetime], placeholder: str = "Unknown") -> str:
    """Format date for tables and summaries, or the placeholder when absent."""
    if dt is None:
        return placeholder
    return dt.strftime(DISPLAY_DATETIME_FORMAT)


def is_jpeg_file(file_path: Path) -> bool:
    """Check if a path names an existing JPEG file (case-insensitive extension)."""
    return file_path.is_file() and file_path.suffix.lower() in JPEG_EXTENSIONS


def find_jpeg_files(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """
    Expand user-supplied paths into JPEG files.

    Files are kept when they carry a JPEG extension, directories are scanned
    one level deep. Order follows the input, then file name within a directory.

    Args:
        paths: Files and/or directories

    Returns:
        List of Path objects for found JPEG files
    """
    discovered_jpeg_files = []

    for raw_path in paths:
        current_path = Path(raw_path)
        if current_path.is_dir():
            for child_path in sorted(current_path.iterdir()):
                if is_jpeg_file(child_path):
                    discovered_jpeg_files.append(child_path)
        elif is_jpeg_file(current_path):
            discovered_jpeg_files.append(current_path)

    return discovered_jpeg_files

#!/usr/bin/env python3
"""
Timestamp Extractor

Reads the EXIF "date/time original" capture timestamp from JPEG photos.
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

import exifread
import piexif
from PIL import ExifTags, Image

from exif_date_utils import parse_exif_datetime


class TimestampExtractor:
    """Reads capture timestamps, trying piexif, then Pillow, then exifread."""

    def __init__(self):
        self.errors: List[str] = []

    def extract(self, file_path: Union[str, Path]) -> Optional[datetime]:
        """
        Read the DateTimeOriginal field of a photo.

        Missing metadata, an unparsable value and an undecodable file all
        resolve to None. Reader failures are recorded in self.errors.

        Args:
            file_path: Path to the photo file

        Returns:
            Capture timestamp, or None if it is absent
        """
        file_path = Path(file_path)

        for reader in (
            self._extract_with_piexif,
            self._extract_with_pillow,
            self._extract_with_exifread,
        ):
            try:
                capture_timestamp = reader(file_path)
            except Exception as e:
                self.errors.append(
                    f"Could not read EXIF from {file_path} ({reader.__name__}): {e}"
                )
                continue

            if capture_timestamp is not None:
                return capture_timestamp

        return None

    def _extract_with_piexif(self, file_path: Path) -> Optional[datetime]:
        """Extract DateTimeOriginal from the piexif EXIF dictionary."""
        exif_dict = piexif.load(str(file_path))
        raw_value = exif_dict.get("Exif", {}).get(piexif.ExifIFD.DateTimeOriginal)
        return parse_exif_datetime(raw_value)

    def _extract_with_pillow(self, file_path: Path) -> Optional[datetime]:
        """Extract DateTimeOriginal from the Pillow Exif IFD."""
        with Image.open(file_path) as image:
            exif_ifd = image.getexif().get_ifd(ExifTags.IFD.Exif)
            return parse_exif_datetime(exif_ifd.get(ExifTags.Base.DateTimeOriginal))

    def _extract_with_exifread(self, file_path: Path) -> Optional[datetime]:
        """Extract DateTimeOriginal using exifread as last resort."""
        with open(file_path, "rb") as file_handle:
            exif_tags = exifread.process_file(file_handle, details=False)

        tag_value = exif_tags.get("EXIF DateTimeOriginal")
        if tag_value is None:
            return None
        return parse_exif_datetime(str(tag_value))

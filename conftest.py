"""
Configuration for pytest.

Test docstrings are shown as test names in reports, and the make_jpeg fixture
writes small real JPEG files with chosen EXIF content.
"""

from datetime import datetime

import piexif
import pytest
from PIL import Image

from exif_date_utils import format_exif_datetime

CAMERA_MAKE = b"CampSnap"
CAMERA_MODEL = b"V8"
DIGITIZED_DATE = b"2020:05:05 05:05:05"


def pytest_collection_modifyitems(items):
    """Modify test items to use docstrings as human-readable test names."""
    for item in items:
        docstring = item.function.__doc__
        if docstring:
            summary = next(
                (
                    line.strip()
                    for line in docstring.strip().splitlines()
                    if line.strip()
                ),
                None,
            )
            if summary:
                if hasattr(item, "callspec"):
                    # For parameterized tests, preserve parameter id from the original nodeid
                    start = item.nodeid.find("[")
                    parameter_part = item.nodeid[start:] if start != -1 else ""
                    item._nodeid = summary + parameter_part
                else:
                    item._nodeid = summary


def write_test_jpeg(file_path, date_taken=None, with_exif=True, raw_date_taken=None):
    """
    Write a 16x16 JPEG.

    Args:
        file_path: Target path
        date_taken: DateTimeOriginal to store, or None to leave it out
        with_exif: If False, the file carries no EXIF block at all
        raw_date_taken: Bytes stored verbatim as DateTimeOriginal
    """
    image = Image.new("RGB", (16, 16), color=(200, 80, 40))

    if not with_exif:
        image.save(file_path, "JPEG")
        return file_path

    exif_dict = {
        "0th": {
            piexif.ImageIFD.Make: CAMERA_MAKE,
            piexif.ImageIFD.Model: CAMERA_MODEL,
        },
        "Exif": {piexif.ExifIFD.DateTimeDigitized: DIGITIZED_DATE},
        "GPS": {},
        "1st": {},
        "thumbnail": None,
    }
    if date_taken is not None:
        exif_dict["Exif"][piexif.ExifIFD.DateTimeOriginal] = format_exif_datetime(
            date_taken
        ).encode("ascii")
    elif raw_date_taken is not None:
        exif_dict["Exif"][piexif.ExifIFD.DateTimeOriginal] = raw_date_taken

    image.save(file_path, "JPEG", exif=piexif.dump(exif_dict))
    return file_path


@pytest.fixture
def make_jpeg():
    """Factory fixture around write_test_jpeg."""
    return write_test_jpeg


@pytest.fixture
def fixed_now():
    """Clock pinned to 2024-01-10 10:00:00."""
    return lambda: datetime(2024, 1, 10, 10, 0, 0)

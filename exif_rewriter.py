#!/usr/bin/env python3
"""
EXIF Date Rewriter

Replaces the capture timestamp of an in-memory JPEG without re-encoding.
Only the EXIF APP1 segment is regenerated; every other JPEG segment (JFIF
APP0 included) and the compressed scan data are carried over byte for byte.
"""

import struct
from datetime import datetime
from typing import List

import piexif
from piexif._common import get_exif_seg, split_into_segments

from date_shift_errors import RewriteFailure
from exif_date_utils import format_exif_datetime

JPEG_SOI_MARKER = b"\xff\xd8"
APP0_MARKER = b"\xff\xe0"
APP1_MARKER = b"\xff\xe1"


def build_app1_segment(exif_bytes: bytes) -> bytes:
    """Wrap piexif.dump output ('Exif\\0\\0' + TIFF data) in an APP1 segment."""
    return APP1_MARKER + struct.pack(">H", len(exif_bytes) + 2) + exif_bytes


def splice_app1_segment(
    image_bytes: bytes, segments: List[bytes], new_app1: bytes
) -> bytes:
    """
    Put new_app1 in place of the existing Exif segment.

    Without an Exif segment the new one goes right after APP0, or right after
    the SOI marker when there is no APP0.

    Args:
        image_bytes: Complete JPEG file content
        segments: image_bytes split by piexif's split_into_segments
        new_app1: Complete APP1 segment to store

    Returns:
        New JPEG file content
    """
    old_app1 = get_exif_seg(segments)
    if old_app1 is not None:
        return image_bytes.replace(old_app1, new_app1, 1)

    insert_position = len(JPEG_SOI_MARKER)
    if len(segments) > 1 and segments[1][0:2] == APP0_MARKER:
        insert_position += len(segments[1])

    return image_bytes[:insert_position] + new_app1 + image_bytes[insert_position:]


class ExifDateRewriter:
    """Lossless DateTimeOriginal rewriter backed by piexif."""

    def rewrite_capture_timestamp(
        self, image_bytes: bytes, new_timestamp: datetime
    ) -> bytes:
        """
        Return a copy of a JPEG with DateTimeOriginal set to new_timestamp.

        Args:
            image_bytes: Complete JPEG file content
            new_timestamp: Timestamp to store, written as 'YYYY:MM:DD HH:MM:SS'

        Returns:
            New JPEG file content

        Raises:
            RewriteFailure: If the data is not a JPEG or piexif rejects it
        """
        # piexif treats non-JPEG bytes as a file name, so check the marker first
        if image_bytes[0:2] != JPEG_SOI_MARKER:
            raise RewriteFailure("Data is not a JPEG image")

        try:
            segments = split_into_segments(image_bytes)
            exif_dict = piexif.load(image_bytes)
        except Exception as e:
            raise RewriteFailure(f"Could not load EXIF: {e}") from e

        exif_dict.setdefault("Exif", {})[piexif.ExifIFD.DateTimeOriginal] = (
            format_exif_datetime(new_timestamp).encode("ascii")
        )

        try:
            new_app1 = build_app1_segment(piexif.dump(exif_dict))
        except Exception as e:
            raise RewriteFailure(f"Could not write EXIF: {e}") from e

        return splice_app1_segment(image_bytes, segments, new_app1)

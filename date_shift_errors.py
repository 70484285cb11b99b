#!/usr/bin/env python3
"""
Exceptions shared by the date shifting modules.
"""


class DateShiftError(Exception):
    """Base exception for the time taken updater."""

    pass


class UnreadableMetadata(DateShiftError):
    """Exception raised when a photo has no parseable capture timestamp."""

    pass


class FileAccessError(DateShiftError):
    """Exception raised when a source or destination cannot be read or written."""

    pass


class RewriteFailure(DateShiftError):
    """Exception raised when the EXIF block cannot be rewritten or swapped in."""

    pass


class NoPhotosSelectedError(DateShiftError):
    """Exception raised when an update is requested before selecting photos."""

    pass

#!/usr/bin/env python3
"""
Batch Date Shifter

Computes a single time offset for a batch of photos and applies it to every
photo's EXIF capture timestamp, either in place or as copies in a folder.
"""

import os
import shutil
import tempfile
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from date_shift_errors import FileAccessError, RewriteFailure, UnreadableMetadata
from exif_rewriter import ExifDateRewriter

NO_USABLE_DATE_MESSAGE = "no usable original date"
OUT_OF_RANGE_MESSAGE = "new date is out of range"
MAX_MANUAL_DAYS = timedelta.max.days


class RecordStatus(Enum):
    """Processing state of a single photo."""

    UNKNOWN = "Unknown"
    PENDING = "Pending"
    UPDATED = "Updated"
    ERROR = "Error"


@dataclass(frozen=True)
class PhotoRecord:
    """One selected photo and its original and shifted capture timestamps."""

    source_path: Path
    original_timestamp: Optional[datetime] = None
    computed_timestamp: Optional[datetime] = None
    status: RecordStatus = RecordStatus.UNKNOWN
    error_message: Optional[str] = None

    @property
    def file_name(self) -> str:
        return self.source_path.name


@dataclass(frozen=True)
class AutomaticOffset:
    """Shift the batch so its most recent photo lands on the current time."""


@dataclass(frozen=True)
class ManualOffset:
    """Shift the batch forward by a whole number of days."""

    days: int = 0

    def __post_init__(self):
        # Negative and unrepresentable day counts are ignored
        if self.days < 0 or self.days > MAX_MANUAL_DAYS:
            object.__setattr__(self, "days", 0)


TimeOffsetPolicy = Union[AutomaticOffset, ManualOffset]


@dataclass(frozen=True)
class InPlace:
    """Rewrite each original file."""


@dataclass(frozen=True)
class CopyToFolder:
    """Write updated copies into a destination folder."""

    destination: Path


WriteMode = Union[InPlace, CopyToFolder]


@dataclass
class BatchResult:
    """Outcome counts of one apply call."""

    success_count: int = 0
    error_count: int = 0
    per_file_errors: List[Tuple[str, str]] = field(default_factory=list)
    records: List[PhotoRecord] = field(default_factory=list)


def parse_manual_days(value: Union[int, str, None]) -> int:
    """
    Parse a user-entered day count.

    Args:
        value: Integer or text such as '3'

    Returns:
        Non-negative day count; blank, malformed, negative or out of range
        input gives 0
    """
    if value is None:
        return 0

    try:
        days = int(str(value).strip())
    except ValueError:
        return 0

    if days < 0 or days > MAX_MANUAL_DAYS:
        return 0
    return days


def find_most_recent_timestamp(records: Sequence[PhotoRecord]) -> Optional[datetime]:
    """Return the latest original timestamp in the batch, or None."""
    known_timestamps = [
        record.original_timestamp
        for record in records
        if record.original_timestamp is not None
    ]
    if not known_timestamps:
        return None
    return max(known_timestamps)


def compute_delta(
    records: Sequence[PhotoRecord], policy: TimeOffsetPolicy, now: datetime
) -> timedelta:
    """
    Compute the single offset applied to every photo of the batch.

    Automatic: now minus the most recent original timestamp, zero when no photo
    has one. The result is negative when the clock is behind a photo's date.
    Manual: the configured number of days.

    Args:
        records: Photos of the batch
        policy: AutomaticOffset or ManualOffset
        now: Current time

    Returns:
        timedelta to add to every original timestamp
    """
    if isinstance(policy, ManualOffset):
        return timedelta(days=policy.days)

    if isinstance(policy, AutomaticOffset):
        most_recent_timestamp = find_most_recent_timestamp(records)
        if most_recent_timestamp is None:
            return timedelta(0)
        return now - most_recent_timestamp

    raise TypeError(f"Unsupported time offset policy: {policy!r}")


def preview(records: Sequence[PhotoRecord], delta: timedelta) -> List[PhotoRecord]:
    """
    Compute the new timestamp of every photo without touching the files.

    Args:
        records: Photos of the batch
        delta: Offset from compute_delta

    Returns:
        New records; those with an original timestamp are PENDING with
        computed_timestamp = original_timestamp + delta, the rest UNKNOWN.
        A shifted date past the datetime range marks the record ERROR.
    """
    previewed_records = []

    for record in records:
        if record.original_timestamp is None:
            previewed_records.append(
                replace(
                    record,
                    computed_timestamp=None,
                    status=RecordStatus.UNKNOWN,
                    error_message=None,
                )
            )
            continue

        try:
            computed_timestamp = record.original_timestamp + delta
        except OverflowError:
            previewed_records.append(
                replace(
                    record,
                    computed_timestamp=None,
                    status=RecordStatus.ERROR,
                    error_message=OUT_OF_RANGE_MESSAGE,
                )
            )
            continue

        previewed_records.append(
            replace(
                record,
                computed_timestamp=computed_timestamp,
                status=RecordStatus.PENDING,
                error_message=None,
            )
        )

    return previewed_records


class BatchDateShifter:
    """Writes previewed timestamps to disk, one file at a time."""

    def __init__(self, rewriter=None):
        """
        Initialize the shifter.

        Args:
            rewriter: Object with rewrite_capture_timestamp(bytes, datetime) -> bytes,
                defaults to the piexif backed ExifDateRewriter
        """
        self.rewriter = rewriter if rewriter is not None else ExifDateRewriter()

    def apply(self, records: Sequence[PhotoRecord], mode: WriteMode) -> BatchResult:
        """
        Write every record's computed timestamp according to the write mode.

        A failing file is recorded and the batch carries on with the next one.

        Args:
            records: Previewed photos
            mode: InPlace or CopyToFolder

        Returns:
            BatchResult with counts, per-file errors and the final records

        Raises:
            FileAccessError: If the destination folder cannot be created; no
                file has been touched at that point
        """
        if isinstance(mode, CopyToFolder):
            destination = Path(mode.destination)
            self._create_destination(destination)
        elif not isinstance(mode, InPlace):
            raise TypeError(f"Unsupported write mode: {mode!r}")

        result = BatchResult()

        for record in records:
            if self._shift_failed_in_preview(record):
                processed_record = record
            elif isinstance(mode, CopyToFolder):
                processed_record = self._process_copy(record, destination)
            else:
                processed_record = self._process_in_place(record)

            result.records.append(processed_record)
            if processed_record.status is RecordStatus.ERROR:
                result.error_count += 1
                result.per_file_errors.append(
                    (processed_record.file_name, processed_record.error_message)
                )
            else:
                result.success_count += 1

        return result

    def _shift_failed_in_preview(self, record: PhotoRecord) -> bool:
        """Dated records that preview could not shift are reported, not written."""
        return (
            record.status is RecordStatus.ERROR
            and record.original_timestamp is not None
            and record.computed_timestamp is None
        )

    def _create_destination(self, destination: Path):
        """Create the destination folder with its parents."""
        try:
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileAccessError(
                f"Could not create destination folder {destination}: {e}"
            ) from e

    def _process_in_place(self, record: PhotoRecord) -> PhotoRecord:
        """Rewrite one original file through a temporary file."""
        try:
            if record.computed_timestamp is None:
                raise UnreadableMetadata(NO_USABLE_DATE_MESSAGE)
            self._check_writable(record.source_path)
            image_bytes = self._read_source(record.source_path)
            new_image_bytes = self.rewriter.rewrite_capture_timestamp(
                image_bytes, record.computed_timestamp
            )
            self._write_atomically(
                record.source_path, new_image_bytes, record.source_path
            )
        except Exception as e:
            return self._failed(record, str(e))

        return replace(record, status=RecordStatus.UPDATED, error_message=None)

    def _process_copy(self, record: PhotoRecord, destination: Path) -> PhotoRecord:
        """Write one updated copy, or a verbatim copy when the date is unknown."""
        target_path = destination / record.file_name

        try:
            if record.computed_timestamp is None:
                # Copying a file onto itself would fail with SameFileError
                if record.source_path.resolve() != target_path.resolve():
                    self._copy_verbatim(record.source_path, target_path)
                return record

            image_bytes = self._read_source(record.source_path)
            new_image_bytes = self.rewriter.rewrite_capture_timestamp(
                image_bytes, record.computed_timestamp
            )
            self._write_atomically(target_path, new_image_bytes, record.source_path)
        except Exception as e:
            return self._failed(record, str(e))

        return replace(record, status=RecordStatus.UPDATED, error_message=None)

    def _failed(self, record: PhotoRecord, message: str) -> PhotoRecord:
        return replace(record, status=RecordStatus.ERROR, error_message=message)

    def _check_writable(self, file_path: Path):
        """Check that the source file exists and may be overwritten."""
        if not file_path.is_file():
            raise FileAccessError(f"File not found: {file_path}")
        if not os.access(file_path, os.W_OK):
            raise FileAccessError(f"File is not writable: {file_path}")

    def _read_source(self, file_path: Path) -> bytes:
        try:
            return file_path.read_bytes()
        except OSError as e:
            raise FileAccessError(f"Could not read {file_path}: {e}") from e

    def _copy_verbatim(self, source_path: Path, target_path: Path):
        try:
            shutil.copy2(source_path, target_path)
        except OSError as e:
            raise FileAccessError(
                f"Could not copy {source_path} to {target_path}: {e}"
            ) from e

    def _write_atomically(self, target_path: Path, data: bytes, mode_source: Path):
        """
        Write data to a temporary file beside the target, then swap it in.

        The target is never opened for writing, so a failure at any step
        leaves it exactly as it was.

        Args:
            target_path: File to create or replace
            data: New file content
            mode_source: File whose permission bits the result takes over
        """
        try:
            temp_descriptor, temp_name = tempfile.mkstemp(
                prefix=f".{target_path.name}.", suffix=".tmp", dir=target_path.parent
            )
        except OSError as e:
            raise FileAccessError(
                f"Could not create temporary file in {target_path.parent}: {e}"
            ) from e

        temp_path = Path(temp_name)
        replaced = False
        try:
            with os.fdopen(temp_descriptor, "wb") as temp_file:
                temp_file.write(data)
                temp_file.flush()
                os.fsync(temp_file.fileno())
            shutil.copymode(mode_source, temp_path)
            os.replace(temp_path, target_path)
            replaced = True
        except OSError as e:
            raise RewriteFailure(f"Could not replace {target_path}: {e}") from e
        finally:
            if not replaced and temp_path.exists():
                temp_path.unlink()

#!/usr/bin/env python3
"""
Photo Session

Holds the mutable state of one interactive run: the selected photos, their
extracted timestamps and the active offset policy. Policy changes recompute
the preview from the cached timestamps and never re-read the files.
"""

from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union

from batch_date_shifter import (
    AutomaticOffset,
    BatchDateShifter,
    BatchResult,
    ManualOffset,
    PhotoRecord,
    TimeOffsetPolicy,
    WriteMode,
    compute_delta,
    find_most_recent_timestamp,
    parse_manual_days,
    preview,
)
from date_shift_errors import NoPhotosSelectedError
from exif_date_utils import find_jpeg_files, format_display_datetime
from timestamp_extractor import TimestampExtractor

SECONDS_PER_DAY = 24 * 60 * 60


class PhotoSession:
    """Selection, policy and preview state behind the command-line tool."""

    def __init__(
        self,
        extractor=None,
        shifter: Optional[BatchDateShifter] = None,
        now: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize an empty session.

        Args:
            extractor: Object with extract(path) -> Optional[datetime]
            shifter: BatchDateShifter used by apply
            now: Clock used by the automatic policy
        """
        self.extractor = extractor if extractor is not None else TimestampExtractor()
        self.shifter = shifter if shifter is not None else BatchDateShifter()
        self.now = now
        self.policy: TimeOffsetPolicy = AutomaticOffset()
        self.records: List[PhotoRecord] = []
        # Clock reading taken at selection time, reused by every recompute
        self.reference_time: Optional[datetime] = None

    @property
    def delta(self):
        return compute_delta(self.records, self.policy, self.reference_time)

    def select(self, paths: Iterable[Union[str, Path]]) -> List[PhotoRecord]:
        """
        Replace the batch with the JPEG files among paths.

        Each file's timestamp is extracted exactly once here.

        Args:
            paths: Files and/or directories chosen by the user

        Returns:
            Previewed records of the new batch
        """
        self.records = [
            PhotoRecord(
                source_path=file_path,
                original_timestamp=self.extractor.extract(file_path),
            )
            for file_path in find_jpeg_files(paths)
        ]
        self.reference_time = self.now()
        return self._recompute()

    def use_automatic(self) -> List[PhotoRecord]:
        self.policy = AutomaticOffset()
        return self._recompute()

    def use_manual(self, days: Union[int, str, None]) -> List[PhotoRecord]:
        """Switch to a manual offset; malformed or negative input counts as 0 days."""
        self.policy = ManualOffset(parse_manual_days(days))
        return self._recompute()

    def _recompute(self) -> List[PhotoRecord]:
        self.records = preview(self.records, self.delta)
        return self.records

    def rows(self) -> List[Tuple[str, str, str, str]]:
        """Table rows: file name, date taken, new date, status."""
        return [
            (
                record.file_name,
                format_display_datetime(record.original_timestamp),
                format_display_datetime(record.computed_timestamp),
                record.status.value,
            )
            for record in self.records
        ]

    def summary(self) -> List[str]:
        """Header lines describing the most recent photo and the offset."""
        if not self.records:
            return ["No photos selected"]

        most_recent_timestamp = find_most_recent_timestamp(self.records)
        if most_recent_timestamp is None:
            return ["No valid dates found in photos"]

        summary_lines = [
            f"Most recent photo: {format_display_datetime(most_recent_timestamp)}"
        ]
        if isinstance(self.policy, ManualOffset):
            summary_lines.append(f"Days to add: {self.policy.days}")
        else:
            # Whole days, truncated toward zero
            days_since = int(self.delta.total_seconds() / SECONDS_PER_DAY)
            summary_lines.append(f"Days since then: {days_since}")

        return summary_lines

    def apply(self, mode: WriteMode) -> BatchResult:
        """
        Write the previewed timestamps.

        Raises:
            NoPhotosSelectedError: If no photos are selected
            FileAccessError: If the destination folder cannot be created
        """
        if not self.records:
            raise NoPhotosSelectedError("Please select photos first.")

        result = self.shifter.apply(self.records, mode)
        self.records = result.records
        return result

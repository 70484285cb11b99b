#!/usr/bin/env python3
"""
Tests for the campsnap_time_updater command-line tool.
"""

import shutil
import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from campsnap_time_updater import main
from photo_session import PhotoSession
from timestamp_extractor import TimestampExtractor

DATE_A = datetime(2024, 1, 1, 10, 0, 0)
DATE_B = datetime(2024, 1, 3, 10, 0, 0)


class TestCommandLine:
    """Test suite for the command-line entry point."""

    def setup_method(self):
        """Set up test environment before each test."""
        self.test_directory = Path(tempfile.mkdtemp())
        self.photo_directory = self.test_directory / "photos"
        self.photo_directory.mkdir()

    def teardown_method(self):
        """Clean up after each test."""
        shutil.rmtree(self.test_directory)

    def create_photos(self, make_jpeg):
        make_jpeg(self.photo_directory / "A.jpg", DATE_A)
        make_jpeg(self.photo_directory / "B.jpg", DATE_B)

    def run_main(self, argv, fixed_now):
        main(argv, session=PhotoSession(now=fixed_now))

    def test_dry_run_prints_preview_only(self, make_jpeg, fixed_now, capsys):
        """Dry run prints the summary and table without writing files."""
        # Arrange
        self.create_photos(make_jpeg)

        # Act
        self.run_main([str(self.photo_directory), "--dry-run"], fixed_now)

        # Assert
        output = capsys.readouterr().out
        assert "Most recent photo: 2024-01-03 10:00:00" in output
        assert "Days since then: 7" in output
        assert "2024-01-08 10:00:00" in output
        assert "[DRY RUN]" in output
        assert not (self.photo_directory / "updated").exists()
        assert TimestampExtractor().extract(self.photo_directory / "A.jpg") == DATE_A

    def test_default_copies_to_updated_folder(self, make_jpeg, fixed_now, capsys):
        """Default mode copies updated photos into the updated subfolder."""
        # Arrange
        self.create_photos(make_jpeg)

        # Act
        self.run_main([str(self.photo_directory)], fixed_now)

        # Assert
        output = capsys.readouterr().out
        assert "Process completed." in output
        assert "Successfully updated: 2" in output
        assert "Errors: 0" in output
        extractor = TimestampExtractor()
        assert extractor.extract(
            self.photo_directory / "updated" / "A.jpg"
        ) == datetime(2024, 1, 8, 10, 0, 0)
        assert extractor.extract(self.photo_directory / "A.jpg") == DATE_A

    def test_manual_days_with_destination(self, make_jpeg, fixed_now, capsys):
        """Days option with a destination writes copies shifted by that many days."""
        # Arrange
        self.create_photos(make_jpeg)
        destination = self.test_directory / "out"

        # Act
        self.run_main(
            [str(self.photo_directory), "--days", "3", "--dest", str(destination)],
            fixed_now,
        )

        # Assert
        assert "Days to add: 3" in capsys.readouterr().out
        extractor = TimestampExtractor()
        assert extractor.extract(destination / "A.jpg") == datetime(
            2024, 1, 4, 10, 0, 0
        )
        assert extractor.extract(destination / "B.jpg") == datetime(
            2024, 1, 6, 10, 0, 0
        )

    def test_in_place_modifies_originals(self, make_jpeg, fixed_now):
        """In-place option rewrites the original photos."""
        # Arrange
        self.create_photos(make_jpeg)

        # Act
        self.run_main([str(self.photo_directory), "--in-place"], fixed_now)

        # Assert
        assert TimestampExtractor().extract(
            self.photo_directory / "B.jpg"
        ) == datetime(2024, 1, 10, 10, 0, 0)
        assert not (self.photo_directory / "updated").exists()

    def test_in_place_errors_exit_with_status_one(self, make_jpeg, fixed_now, capsys):
        """In-place run with an undated photo reports it in red and exits with 1."""
        # Arrange
        self.create_photos(make_jpeg)
        make_jpeg(self.photo_directory / "C.jpg", with_exif=False)

        # Act
        with pytest.raises(SystemExit) as exit_info:
            self.run_main([str(self.photo_directory), "--in-place"], fixed_now)

        # Assert
        assert exit_info.value.code == 1
        output = capsys.readouterr().out
        assert "Successfully updated: 2" in output
        assert "Errors: 1" in output
        assert "C.jpg: no usable original date" in output

    def test_out_of_range_days_reports_errors(self, make_jpeg, fixed_now, capsys):
        """Days option pushing dates past year 9999 reports each photo as an error."""
        # Arrange
        self.create_photos(make_jpeg)

        # Act
        with pytest.raises(SystemExit) as exit_info:
            self.run_main(
                [str(self.photo_directory), "--days", "3000000", "--in-place"],
                fixed_now,
            )

        # Assert
        assert exit_info.value.code == 1
        output = capsys.readouterr().out
        assert "Days to add: 3000000" in output
        assert "Errors: 2" in output
        assert "A.jpg: new date is out of range" in output
        assert TimestampExtractor().extract(self.photo_directory / "A.jpg") == DATE_A

    def test_no_photos_exits_with_status_one(self, fixed_now, capsys):
        """Running without any JPEG exits with 1 and asks to select photos."""
        # Arrange
        (self.photo_directory / "notes.txt").write_text("not a photo")

        # Act
        with pytest.raises(SystemExit) as exit_info:
            self.run_main([str(self.photo_directory)], fixed_now)

        # Assert
        assert exit_info.value.code == 1
        captured = capsys.readouterr()
        assert "No photos selected" in captured.out
        assert "Please select photos first." in captured.err

    def test_destination_failure_exits_with_status_one(
        self, make_jpeg, fixed_now, capsys
    ):
        """Unusable destination folder exits with 1 before touching any file."""
        # Arrange
        self.create_photos(make_jpeg)
        blocking_file = self.test_directory / "blocker"
        blocking_file.write_bytes(b"not a folder")

        # Act
        with pytest.raises(SystemExit) as exit_info:
            self.run_main(
                [str(self.photo_directory), "--dest", str(blocking_file / "out")],
                fixed_now,
            )

        # Assert
        assert exit_info.value.code == 1
        assert "Could not create destination folder" in capsys.readouterr().err

    def test_in_place_and_dest_are_exclusive(self, fixed_now):
        """In-place and destination options cannot be combined."""
        # Act & Assert
        with pytest.raises(SystemExit) as exit_info:
            self.run_main(
                [str(self.photo_directory), "--in-place", "--dest", "out"], fixed_now
            )
        assert exit_info.value.code == 2

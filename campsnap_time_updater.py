#!/usr/bin/env python3
"""
CampSnap Time Taken Updater

Shifts the EXIF "date taken" of a batch of JPEG photos by one offset: either
so the most recent photo lands on the current time, or by a number of days.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from batch_date_shifter import BatchResult, CopyToFolder, InPlace
from date_shift_errors import FileAccessError, NoPhotosSelectedError
from photo_session import PhotoSession

DEFAULT_DESTINATION_NAME = "updated"


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Shift the EXIF date taken of JPEG photos",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s /path/to/photos                   # Latest photo becomes "now", copies go to /path/to/photos/updated
  %(prog)s a.jpg b.jpg --days 3              # Add 3 days
  %(prog)s /path/to/photos --dest /tmp/out   # Copy updated photos to /tmp/out
  %(prog)s /path/to/photos --in-place        # Rewrite the original photos
  %(prog)s /path/to/photos --dry-run         # Preview the new dates only
        """,
    )

    parser.add_argument(
        "paths", nargs="+", help="JPEG files or folders containing JPEG files"
    )
    parser.add_argument(
        "--days",
        help="Add this many days instead of shifting the latest photo to now. "
        "Negative or malformed values count as 0.",
    )

    output_group = parser.add_mutually_exclusive_group()
    output_group.add_argument(
        "--in-place",
        action="store_true",
        help="Modify the original photos",
    )
    output_group.add_argument(
        "--dest",
        help=f"Copy updated photos to this folder "
        f"(default: <first photo folder>/{DEFAULT_DESTINATION_NAME})",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the new dates without writing any file",
    )

    return parser


def print_table(rows):
    """Print the preview table."""
    headers = ("File Name", "Date Taken", "New Date", "Status")
    widths = [
        max([len(headers[column])] + [len(row[column]) for row in rows])
        for column in range(len(headers))
    ]

    print("  ".join(header.ljust(width) for header, width in zip(headers, widths)))
    print("  ".join("-" * width for width in widths))
    for row in rows:
        print("  ".join(cell.ljust(width) for cell, width in zip(row, widths)))


def print_result(result: BatchResult):
    """Print the completion summary with errors in red."""
    print("=" * 60)
    print("Process completed.")
    print(f"Successfully updated: {result.success_count}")
    print(f"Errors: {result.error_count}")

    if result.per_file_errors:
        print()
        print(
            f"\033[91mERRORS ENCOUNTERED ({len(result.per_file_errors)}):\033[0m"
        )  # Red text
        for file_name, message in result.per_file_errors:
            print(f"\033[91m  {file_name}: {message}\033[0m")  # Red text


def default_destination(session: PhotoSession) -> Path:
    return session.records[0].source_path.parent / DEFAULT_DESTINATION_NAME


def main(argv: Optional[List[str]] = None, session: Optional[PhotoSession] = None):
    """Main entry point for the script."""
    parsed_arguments = build_argument_parser().parse_args(argv)
    session = session if session is not None else PhotoSession()

    session.select(parsed_arguments.paths)
    if parsed_arguments.days is not None:
        session.use_manual(parsed_arguments.days)

    for summary_line in session.summary():
        print(summary_line)

    if not session.records:
        print("Error: Please select photos first.", file=sys.stderr)
        sys.exit(1)

    print(f"Found {len(session.records)} photos")
    print()
    print_table(session.rows())
    print()

    if parsed_arguments.dry_run:
        print("[DRY RUN] No files were modified.")
        return

    if parsed_arguments.in_place:
        mode = InPlace()
    else:
        destination = (
            Path(parsed_arguments.dest)
            if parsed_arguments.dest
            else default_destination(session)
        )
        mode = CopyToFolder(destination)
        print(f"Destination: {destination}")

    try:
        result = session.apply(mode)
    except (FileAccessError, NoPhotosSelectedError) as error:
        print(f"Error: {error}", file=sys.stderr)
        sys.exit(1)

    print_result(result)

    if result.error_count:
        sys.exit(1)


if __name__ == "__main__":
    main()

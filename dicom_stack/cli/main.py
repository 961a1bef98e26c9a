"""DICOM Stack - Command Line Interface

Loads a set of DICOM slice files, reports which ones were rejected and
prints the playback order of the valid slices.
"""

import argparse
import json
import sys
from collections.abc import Sequence
from pathlib import Path

from dicom_stack import __version__
from dicom_stack.core.config import get_settings
from dicom_stack.core.decoder import SliceDecoder
from dicom_stack.core.models import DecodedSlice
from dicom_stack.core.pipeline import BatchResult, collect_inputs, load_series
from dicom_stack.utils.logger import configure_logging, get_logger


def format_optional(value: float | int | None) -> str:
    """Format an optional metadata value for table output."""
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def slice_to_dict(index: int, item: DecodedSlice) -> dict:
    return {
        "index": index,
        "source_name": item.source_name,
        "image_position_z": item.image_position_z,
        "slice_location": item.slice_location,
        "instance_number": item.instance_number,
        "rows": item.rows,
        "columns": item.columns,
        "rescale_slope": item.rescale_slope,
        "rescale_intercept": item.rescale_intercept,
    }


def batch_to_dict(batch: BatchResult) -> dict:
    return {
        "total": batch.total,
        "loaded": batch.loaded_count,
        "rejected": batch.rejected_count,
        "summary": batch.summary(),
        "slices": [slice_to_dict(i, s) for i, s in enumerate(batch.slices)],
        "rejections": [
            {
                "source_name": r.source_name,
                "reason": r.reason,
                "error_code": r.error_code,
            }
            for r in batch.rejected
        ],
    }


def print_batch(batch: BatchResult) -> None:
    """Print the ordered slice table and rejection list."""
    print("\n" + "=" * 70)
    print(f"  DICOM Stack v{__version__} - Slice Order")
    print("=" * 70)
    print(f"  {'#':>4}  {'Name':<28} {'Z':>9} {'Loc':>9} {'Inst':>6}  Size")
    for index, item in enumerate(batch.slices):
        print(
            f"  {index:>4}  {item.source_name[:28]:<28} "
            f"{format_optional(item.image_position_z):>9} "
            f"{format_optional(item.slice_location):>9} "
            f"{format_optional(item.instance_number):>6}  "
            f"{item.rows}x{item.columns}"
        )

    if batch.rejected:
        print("\n  Rejected:")
        for rejected in batch.rejected:
            print(f"    - {rejected.source_name}: [{rejected.error_code}] {rejected.reason}")

    print("=" * 70)
    print(f"  {batch.summary()}")
    print("=" * 70 + "\n")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dicom-stack",
        description="Decode and order DICOM slices for volume playback",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  dicom-stack order scans/series01/
  dicom-stack order scans/ --recursive --workers 8 --json
""",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    order_parser = subparsers.add_parser(
        "order", help="Decode slice files and print their playback order"
    )
    order_parser.add_argument(
        "paths", nargs="+", type=Path, help="DICOM files or directories"
    )
    order_parser.add_argument(
        "-w", "--workers", type=int, metavar="N", help="Concurrent decode workers"
    )
    order_parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        default=None,
        help="Scan directories recursively",
    )
    order_parser.add_argument(
        "--json", action="store_true", help="Emit the result as JSON"
    )
    order_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default from settings)",
    )
    return parser


def run_order(args: argparse.Namespace) -> int:
    settings = get_settings()
    configure_logging(
        log_level=args.log_level or settings.logging.log_level.value,
        json_format=settings.logging.log_format == "json",
    )
    logger = get_logger(__name__)

    recursive = settings.pipeline.recursive if args.recursive is None else True
    workers = args.workers or settings.pipeline.max_workers

    try:
        inputs = collect_inputs(
            args.paths, suffixes=settings.pipeline.file_suffixes, recursive=recursive
        )
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not inputs:
        print("Error: No DICOM files selected", file=sys.stderr)
        return 1

    logger.info("loading_slices", files=len(inputs), workers=workers)
    decoder = SliceDecoder(max_file_size=settings.decoder.max_file_size_bytes)
    batch = load_series(inputs, max_workers=workers, decoder=decoder)

    if args.json:
        print(json.dumps(batch_to_dict(batch), indent=2))
    else:
        print_batch(batch)

    return 0 if batch.slices else 1


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    if args.command == "order":
        return run_order(args)
    parser.error(f"unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())

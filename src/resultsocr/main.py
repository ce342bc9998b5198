"""CLI entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from .core import DEFAULT_DEBUG_DIR, ConversionError, convert_table
from .image_proc import DEFAULT_TARGET_WIDTH
from .tables import TableType

logger = logging.getLogger("resultsocr")


@dataclass(frozen=True)
class ResolvedArgs:
    table_type: TableType
    event_id: str
    input_path: Path
    output_path: Path
    debug: bool
    debug_dir: Path
    target_width: int
    verbose: bool = False


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resultsocr",
        description="Convert a results or standings table screenshot into CSV via OCR.",
    )
    parser.add_argument(
        "--type",
        dest="table_type",
        required=True,
        choices=[member.value for member in TableType],
        help="Table shape captured in the screenshot.",
    )
    parser.add_argument("--input", required=True, help="Path to the source PNG.")
    parser.add_argument("--output", required=True, help="Path for the CSV output.")
    parser.add_argument(
        "--event_id",
        "--event-id",
        dest="event_id",
        default="",
        help="Event identifier written to every row (required for --type race).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Write raw OCR text, parsed rows and the preprocessed image, and print a preview.",
    )
    parser.add_argument(
        "--debug-dir",
        default=str(DEFAULT_DEBUG_DIR),
        help=f"Debug output directory (default: {DEFAULT_DEBUG_DIR}).",
    )
    parser.add_argument(
        "--width",
        type=int,
        default=DEFAULT_TARGET_WIDTH,
        help=f"Width the screenshot is scaled to before OCR (default: {DEFAULT_TARGET_WIDTH}).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def resolve_args(argv: Sequence[str] | None = None) -> ResolvedArgs:
    """Parse and validate CLI arguments; usage errors exit with status 2."""
    parser = build_parser()
    args = parser.parse_args(argv)

    table_type = TableType.parse(args.table_type)
    event_id = args.event_id.strip()
    if table_type is TableType.RACE and not event_id:
        parser.error("--event_id is required for --type race")
    if not args.input.strip():
        parser.error("--input must not be empty")
    if not args.output.strip():
        parser.error("--output must not be empty")
    if args.width <= 0:
        parser.error("--width must be a positive integer")

    return ResolvedArgs(
        table_type=table_type,
        event_id=event_id,
        input_path=Path(args.input).resolve(),
        output_path=Path(args.output).resolve(),
        debug=args.debug,
        debug_dir=Path(args.debug_dir).resolve(),
        target_width=args.width,
        verbose=args.verbose,
    )


def setup_logging(verbose: bool = False) -> None:
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def main(argv: Sequence[str] | None = None) -> int:
    config = resolve_args(argv)
    setup_logging(config.verbose)

    logger.info("Type:     %s", config.table_type.value)
    logger.info("Input:    %s", config.input_path)
    logger.info("Output:   %s", config.output_path)
    if config.event_id:
        logger.info("Event ID: %s", config.event_id)
    logger.info("Debug:    %s", config.debug)

    if not config.input_path.is_file():
        raise SystemExit(f"Input file not found: {config.input_path}")

    try:
        stats = convert_table(
            config.input_path,
            config.output_path,
            config.table_type,
            event_id=config.event_id,
            debug=config.debug,
            debug_dir=config.debug_dir,
            target_width=config.target_width,
        )
    except ConversionError as exc:
        raise SystemExit(f"{exc.stage} failed: {exc}") from exc

    print(f"Wrote {stats['row_count']} row(s) to {stats['csv_path']}.")
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Pipeline orchestration."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from .image_proc import DEFAULT_TARGET_WIDTH, preprocess_image, save_debug_image
from .ocr_engine import DEFAULT_LANGUAGE, run_ocr
from .output import format_preview, write_csv, write_debug_outputs
from .parser import parse_table
from .tables import TableType, headers_for

logger = logging.getLogger(__name__)

DEFAULT_DEBUG_DIR = Path("output") / "debug"


class ConversionError(RuntimeError):
    """A pipeline stage failed; ``stage`` names it for the operator."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(message)
        self.stage = stage


def convert_table(
    input_path: Path,
    output_path: Path,
    table_type: TableType,
    *,
    event_id: str = "",
    debug: bool = False,
    debug_dir: Path | None = None,
    target_width: int = DEFAULT_TARGET_WIDTH,
    language: str = DEFAULT_LANGUAGE,
) -> dict[str, object]:
    """Run image -> OCR -> rows -> CSV for one screenshot and return stats."""
    input_path = Path(input_path)
    output_path = Path(output_path)

    logger.info("Preprocessing image %s", input_path)
    try:
        image_bytes = preprocess_image(input_path, target_width=target_width)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise ConversionError("Image preprocessing", str(exc)) from exc

    logger.info("Running OCR (this may take a moment)")
    try:
        ocr_text = run_ocr(image_bytes, language=language)
    except (OSError, RuntimeError, ValueError) as exc:
        raise ConversionError("Text recognition", str(exc)) from exc
    ocr_line_count = len(ocr_text.split("\n"))
    logger.info("OCR extracted %d line(s)", ocr_line_count)

    headers = headers_for(table_type)
    rows = parse_table(ocr_text, table_type, event_id=event_id)
    try:
        stats: dict[str, object] = write_csv(output_path, headers, rows)
    except OSError as exc:
        raise ConversionError("CSV write", str(exc)) from exc
    logger.info("CSV written to %s", output_path)
    stats["ocr_line_count"] = ocr_line_count

    if debug:
        target_dir = Path(debug_dir) if debug_dir is not None else DEFAULT_DEBUG_DIR
        stem = input_path.stem
        try:
            debug_paths = write_debug_outputs(target_dir, stem, ocr_text, rows)
            debug_paths["preprocessed_image"] = str(
                save_debug_image(target_dir, stem, image_bytes)
            )
        except OSError as exc:
            raise ConversionError("Debug output", str(exc)) from exc
        for label, path in debug_paths.items():
            logger.info("Debug %s: %s", label, path)
        print(f"Preview (first {min(5, len(rows))} rows):")
        for line in format_preview(rows):
            print(f"  {line}")
        stats["debug"] = debug_paths

    return stats

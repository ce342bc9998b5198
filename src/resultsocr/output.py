"""CSV output and debug artifacts."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path
from typing import Mapping, Sequence


def to_csv(headers: Sequence[str], rows: Sequence[Mapping[str, str]]) -> str:
    """Render rows in header order; missing values become empty cells."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    # A bare "\r" is not quoted when the terminator is "\n".
    quoting_writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        values = [row.get(header, "") for header in headers]
        if any("\r" in value for value in values):
            quoting_writer.writerow(values)
        else:
            writer.writerow(values)
    return buffer.getvalue()


def write_csv(
    csv_path: Path,
    headers: Sequence[str],
    rows: Sequence[Mapping[str, str]],
) -> dict[str, object]:
    """Write rows to ``csv_path`` and return stats."""
    content = to_csv(headers, rows)
    csv_path = Path(csv_path)
    csv_path.parent.mkdir(parents=True, exist_ok=True)
    with csv_path.open("w", newline="", encoding="utf-8") as handle:
        handle.write(content)
    return {"row_count": len(rows), "csv_path": str(csv_path)}


def write_debug_outputs(
    debug_dir: Path,
    stem: str,
    ocr_text: str,
    rows: Sequence[Mapping[str, str]],
) -> dict[str, str]:
    """Persist the raw OCR text and the parsed rows next to each other."""
    output_dir = Path(debug_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    ocr_path = output_dir / f"{stem}.ocr.txt"
    json_path = output_dir / f"{stem}.parsed.json"
    ocr_path.write_text(ocr_text, encoding="utf-8")
    json_path.write_text(
        json.dumps([dict(row) for row in rows], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    return {"ocr_text": str(ocr_path), "parsed_json": str(json_path)}


def format_preview(rows: Sequence[Mapping[str, str]], limit: int = 5) -> list[str]:
    preview: list[str] = []
    for row in rows[:limit]:
        position = row.get("position") or "?"
        name = row.get("driver_name") or row.get("team") or "?"
        points = row.get("points") or "-"
        preview.append(f"P{position} | {name} | {points} pts")
    return preview

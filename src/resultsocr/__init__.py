"""Results table OCR package."""

from . import cleaner, core, image_proc, main, ocr_engine, output, parser, tables

__all__ = [
    "core",
    "main",
    "image_proc",
    "ocr_engine",
    "cleaner",
    "parser",
    "output",
    "tables",
]

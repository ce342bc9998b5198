"""Image preprocessing helpers."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from PIL import Image, ImageFilter, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_TARGET_WIDTH = 3000


def load_image(path: Path) -> Image.Image:
    """Open a raster image and decode it eagerly."""
    image_path = Path(path)
    if not image_path.is_file():
        raise FileNotFoundError(f"Input image not found: {image_path}")
    try:
        with Image.open(image_path) as handle:
            handle.load()
            return handle.copy()
    except UnidentifiedImageError as exc:
        raise ValueError(f"Not a readable image: {image_path}") from exc


def _resize_to_width(image: Image.Image, target_width: int) -> Image.Image:
    if target_width <= 0:
        raise ValueError("target_width must be a positive integer.")
    width, height = image.size
    target_height = max(1, int(round(height * target_width / width)))
    return image.resize((target_width, target_height), Image.LANCZOS)


def enhance_for_ocr(image: Image.Image, *, target_width: int = DEFAULT_TARGET_WIDTH) -> Image.Image:
    """Greyscale, stretch contrast, sharpen and scale to ``target_width``.

    Smaller screenshots are enlarged as well; tesseract reads the dense
    table fonts far better at this size.
    """
    enhanced = image.convert("L")
    enhanced = ImageOps.autocontrast(enhanced)
    enhanced = enhanced.filter(ImageFilter.SHARPEN)
    return _resize_to_width(enhanced, target_width)


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def preprocess_image(path: Path, *, target_width: int = DEFAULT_TARGET_WIDTH) -> bytes:
    """Load ``path`` and return the OCR-ready image as PNG bytes."""
    image = load_image(path)
    logger.debug("Loaded %s (%dx%d, mode %s)", path, image.width, image.height, image.mode)
    enhanced = enhance_for_ocr(image, target_width=target_width)
    return encode_png(enhanced)


def save_debug_image(debug_dir: Path, stem: str, data: bytes) -> Path:
    """Save the preprocessed buffer for visual inspection."""
    output_dir = Path(debug_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    image_path = output_dir / f"{stem}.preprocessed.png"
    image_path.write_bytes(data)
    return image_path

"""OCR helpers."""

from __future__ import annotations

import io
import logging
import os
from types import TracebackType
from typing import Any

from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "eng"
# Assume a single uniform block of text; dense tables fragment under the
# default paragraph segmentation.
DEFAULT_PAGE_SEGMENTATION_MODE = 6
TESSERACT_CMD_ENV = "TESSERACT_CMD"


class RecognitionError(RuntimeError):
    """Raised when the OCR engine fails on an image."""


def _load_pytesseract():
    try:
        import pytesseract
    except ImportError as exc:
        raise RuntimeError(
            "pytesseract is not installed. Install with `pip install pytesseract` "
            "and make sure the tesseract binary is on PATH."
        ) from exc
    tesseract_cmd = os.environ.get(TESSERACT_CMD_ENV)
    if tesseract_cmd:
        pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
    return pytesseract


class RecognitionSession:
    """One recognition pass over one image.

    The decoded image is held only between construction and
    :meth:`terminate`; use the session as a context manager so it is
    released whether recognition succeeds or not.
    """

    def __init__(
        self,
        image_bytes: bytes,
        *,
        language: str = DEFAULT_LANGUAGE,
        page_segmentation_mode: int = DEFAULT_PAGE_SEGMENTATION_MODE,
    ) -> None:
        self.language = language
        self.page_segmentation_mode = page_segmentation_mode
        self._engine: Any = _load_pytesseract()
        self._image: Image.Image | None = Image.open(io.BytesIO(image_bytes))

    @property
    def config(self) -> str:
        return f"--psm {self.page_segmentation_mode}"

    @property
    def closed(self) -> bool:
        return self._image is None

    def recognize(self) -> str:
        if self._image is None:
            raise RecognitionError("Recognition session has already been terminated.")
        try:
            text = self._engine.image_to_string(
                self._image, lang=self.language, config=self.config
            )
        except Exception as exc:
            raise RecognitionError(f"Tesseract recognition failed: {exc}") from exc
        return str(text)

    def terminate(self) -> None:
        if self._image is not None:
            self._image.close()
            self._image = None

    def __enter__(self) -> "RecognitionSession":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.terminate()


def run_ocr(
    image_bytes: bytes,
    *,
    language: str = DEFAULT_LANGUAGE,
    page_segmentation_mode: int = DEFAULT_PAGE_SEGMENTATION_MODE,
) -> str:
    """Recognize a preprocessed image and return its text, one table row per line."""
    with RecognitionSession(
        image_bytes, language=language, page_segmentation_mode=page_segmentation_mode
    ) as session:
        logger.debug("Running tesseract (lang=%s, %s)", language, session.config)
        return session.recognize()

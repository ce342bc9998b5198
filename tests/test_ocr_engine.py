import io

import pytest
from PIL import Image

from resultsocr import ocr_engine


def _png_bytes():
    buffer = io.BytesIO()
    Image.new("L", (10, 10), 255).save(buffer, format="PNG")
    return buffer.getvalue()


class _FakeTesseract:
    last_kwargs = None
    last_size = None

    @staticmethod
    def image_to_string(image, **kwargs):
        _FakeTesseract.last_kwargs = kwargs
        _FakeTesseract.last_size = image.size
        return "1 L.Hamilton MERCEDES 25\n2 G.Russell MERCEDES 18\n"


class _BrokenTesseract:
    @staticmethod
    def image_to_string(image, **kwargs):
        raise OSError("tesseract is not installed or it's not in your PATH")


@pytest.fixture
def terminations(monkeypatch):
    calls = []
    original = ocr_engine.RecognitionSession.terminate

    def _tracking_terminate(self):
        calls.append(self)
        original(self)

    monkeypatch.setattr(ocr_engine.RecognitionSession, "terminate", _tracking_terminate)
    return calls


def test_run_ocr_uses_block_segmentation(monkeypatch, terminations):
    monkeypatch.setattr(ocr_engine, "_load_pytesseract", lambda: _FakeTesseract)

    text = ocr_engine.run_ocr(_png_bytes())

    assert text.splitlines()[0] == "1 L.Hamilton MERCEDES 25"
    assert _FakeTesseract.last_kwargs == {"lang": "eng", "config": "--psm 6"}
    assert _FakeTesseract.last_size == (10, 10)
    assert len(terminations) == 1
    assert terminations[0].closed


def test_run_ocr_passes_language(monkeypatch, terminations):
    monkeypatch.setattr(ocr_engine, "_load_pytesseract", lambda: _FakeTesseract)

    ocr_engine.run_ocr(_png_bytes(), language="deu")

    assert _FakeTesseract.last_kwargs["lang"] == "deu"


def test_run_ocr_releases_session_on_failure(monkeypatch, terminations):
    monkeypatch.setattr(ocr_engine, "_load_pytesseract", lambda: _BrokenTesseract)

    with pytest.raises(ocr_engine.RecognitionError, match="not in your PATH"):
        ocr_engine.run_ocr(_png_bytes())

    assert len(terminations) == 1
    assert terminations[0].closed


def test_session_cannot_be_reused(monkeypatch):
    monkeypatch.setattr(ocr_engine, "_load_pytesseract", lambda: _FakeTesseract)

    session = ocr_engine.RecognitionSession(_png_bytes())
    session.terminate()

    with pytest.raises(ocr_engine.RecognitionError, match="terminated"):
        session.recognize()


def test_load_pytesseract_honours_env_override(monkeypatch):
    pytesseract = pytest.importorskip("pytesseract")
    monkeypatch.setattr(pytesseract.pytesseract, "tesseract_cmd", "tesseract")
    monkeypatch.setenv(ocr_engine.TESSERACT_CMD_ENV, "/opt/tesseract/bin/tesseract")

    module = ocr_engine._load_pytesseract()

    assert module.pytesseract.tesseract_cmd == "/opt/tesseract/bin/tesseract"

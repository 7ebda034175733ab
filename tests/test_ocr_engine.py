"""Tests for the EasyOCR wrapper, with the reader replaced by a fake."""

import numpy as np
import pytest

from src.nwminimap.core import ocr_engine
from src.nwminimap.core.ocr_engine import CHAR_ALLOWLIST, UPSCALE_FACTOR, OcrEngine


class FakeReader:
    results = []
    calls = []

    def __init__(self, languages, gpu=False):
        self.languages = languages
        self.gpu = gpu

    def readtext(self, image, **kwargs):
        FakeReader.calls.append((image.shape, kwargs))
        return FakeReader.results


class BrokenReader:
    def __init__(self, *args, **kwargs):
        raise RuntimeError("model files missing")


@pytest.fixture
def fake_reader(monkeypatch):
    FakeReader.results = []
    FakeReader.calls = []
    monkeypatch.setattr(ocr_engine.easyocr, "Reader", FakeReader)
    return FakeReader


def box(x):
    return [[x, 0], [x + 10, 0], [x + 10, 10], [x, 10]]


def test_reader_defaults_to_english_cpu(fake_reader):
    engine = OcrEngine()
    assert engine.available
    assert engine.reader.languages == ["en"]
    assert engine.reader.gpu is False


def test_fragments_are_joined_left_to_right(fake_reader):
    fake_reader.results = [
        (box(120), "6000.456,", 0.8),
        (box(0), "[8500.123,", 0.9),
    ]
    engine = OcrEngine()
    assert engine.read_text(np.zeros((16, 277, 3), dtype=np.uint8)) == "[8500.123, 6000.456,"


def test_recognition_is_restricted_and_upscaled(fake_reader):
    engine = OcrEngine()
    engine.read_text(np.zeros((16, 277, 4), dtype=np.uint8))
    shape, kwargs = fake_reader.calls[0]
    assert shape == (16 * UPSCALE_FACTOR, 277 * UPSCALE_FACTOR, 3)
    assert kwargs["allowlist"] == CHAR_ALLOWLIST


def test_nothing_recognised_gives_empty_text(fake_reader):
    assert OcrEngine()(np.zeros((16, 277, 3), dtype=np.uint8)) == ""


def test_empty_image_gives_empty_text(fake_reader):
    assert OcrEngine().read_text(np.zeros((0, 0, 3), dtype=np.uint8)) == ""
    assert fake_reader.calls == []


def test_reader_failure_leaves_engine_unavailable(monkeypatch):
    monkeypatch.setattr(ocr_engine.easyocr, "Reader", BrokenReader)
    engine = OcrEngine()
    assert not engine.available
    assert engine.read_text(np.zeros((16, 277, 3), dtype=np.uint8)) == ""


def test_readtext_error_gives_empty_text(fake_reader, monkeypatch):
    engine = OcrEngine()

    def fail(*args, **kwargs):
        raise RuntimeError("inference failed")

    monkeypatch.setattr(engine.reader, "readtext", fail)
    assert engine.read_text(np.zeros((16, 277, 3), dtype=np.uint8)) == ""

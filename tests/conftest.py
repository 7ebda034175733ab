"""Shared fixtures for the NWMinimap test suite."""

import numpy as np
import pytest


@pytest.fixture
def strip():
    """A small RGB capture with a pale text colour on a dark background."""
    image = np.full((4, 6, 3), 30, dtype=np.uint8)
    image[1:3, 1:5] = (255, 253, 228)
    return image


class FakeRecognizer:
    """OCR stand-in that replays texts and records the images it was given."""

    def __init__(self, *texts):
        self.texts = list(texts)
        self.images = []

    def __call__(self, image):
        self.images.append(image.copy())
        if not self.texts:
            return ""
        return self.texts.pop(0)


@pytest.fixture
def recognizer_factory():
    return FakeRecognizer

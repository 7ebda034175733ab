# -*- coding: utf-8 -*-
"""
src/nwminimap/core/ocr_engine.py

Thin wrapper around EasyOCR that reads the coordinate strip as plain text.

Recognition is restricted to the characters the HUD can print for a
position, which removes a whole class of letter/digit confusions.
"""

import logging
from typing import List, Optional

import cv2
import easyocr
import numpy as np

logger = logging.getLogger(__name__)

# Characters the position readout is made of.
CHAR_ALLOWLIST = "[]0123456789,. "

# The strip is only 16 px high; EasyOCR's detector needs more to work with.
UPSCALE_FACTOR = 3


class OcrEngine:
    """
    Holds a single EasyOCR reader for the lifetime of the tracking session.

    Loading the model is slow, so the instance should be created once and
    reused for every cycle.
    """

    def __init__(self, languages: Optional[List[str]] = None, gpu: bool = False):
        if languages is None:
            languages = ['en']

        logger.info(f"Initializing EasyOCR Reader for languages: {languages}...")
        try:
            self.reader = easyocr.Reader(languages, gpu=gpu)
            logger.info("EasyOCR Reader initialized successfully.")
        except Exception as e:
            logger.critical(f"Failed to initialize EasyOCR Reader: {e}")
            logger.critical("Please ensure you have the necessary model files and dependencies.")
            self.reader = None

    @property
    def available(self) -> bool:
        return self.reader is not None

    def read_text(self, image: np.ndarray) -> str:
        """
        Recognises the text in an RGB(A) image.

        Args:
            image (np.ndarray): The captured strip, raw or pre-filtered.

        Returns:
            str: The recognised fragments joined left to right with spaces,
            or an empty string when nothing was found or OCR failed.
        """
        if self.reader is None:
            logger.error("OcrEngine is not initialized. Cannot read text.")
            return ""

        if image is None or image.size == 0:
            logger.warning("read_text called with an empty image.")
            return ""

        if image.shape[2] == 4:
            image = cv2.cvtColor(image, cv2.COLOR_RGBA2RGB)
        h, w = image.shape[:2]
        upscaled = cv2.resize(
            image,
            (w * UPSCALE_FACTOR, h * UPSCALE_FACTOR),
            interpolation=cv2.INTER_CUBIC
        )

        try:
            ocr_results = self.reader.readtext(
                upscaled,
                detail=1,
                paragraph=False,
                allowlist=CHAR_ALLOWLIST,
            )
        except Exception as e:
            logger.error(f"An error occurred during OCR processing: {e}")
            return ""

        # Sort fragments by the x of their top-left corner
        ocr_results = sorted(ocr_results, key=lambda result: result[0][0][0])
        text = " ".join(fragment for _, fragment, _ in ocr_results)
        logger.debug(f"OCR read {text!r}")
        return text

    __call__ = read_text

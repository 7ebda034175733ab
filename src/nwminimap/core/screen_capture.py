# -*- coding: utf-8 -*-
"""
src/nwminimap/core/screen_capture.py

Grabs the small screen strip where the game prints the player position.

The game is expected to run full-screen on the primary monitor; the strip is
anchored to the monitor's top-right corner. If the game process is not
running, or the grab fails, no image is returned and the caller simply skips
the cycle.
"""

import logging
from typing import Dict, Optional

import cv2
import mss
import mss.exception
import numpy as np
import psutil

logger = logging.getLogger(__name__)

DEFAULT_PROCESS_NAME = "NewWorld"

# Position strip geometry, in pixels
DEFAULT_X_OFFSET = 265  # distance from the right edge of the screen
DEFAULT_Y_OFFSET = 20   # distance from the top edge of the screen
DEFAULT_WIDTH = 277
DEFAULT_HEIGHT = 16


def find_process(process_name: str) -> Optional[psutil.Process]:
    """
    Returns the first running process whose name matches, ignoring case and
    a trailing '.exe'.
    """
    wanted = process_name.lower()
    for proc in psutil.process_iter(['name']):
        name = (proc.info.get('name') or '').lower()
        if name.endswith('.exe'):
            name = name[:-4]
        if name == wanted:
            return proc
    return None


class ScreenCapturer:
    """Captures the fixed-size position strip from the game's screen."""

    def __init__(
        self,
        process_name: str = DEFAULT_PROCESS_NAME,
        x_offset: int = DEFAULT_X_OFFSET,
        y_offset: int = DEFAULT_Y_OFFSET,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
    ):
        self.process_name = process_name
        self.x_offset = x_offset
        self.y_offset = y_offset
        self.width = width
        self.height = height

    def capture_region(self, monitor: Dict[str, int]) -> Dict[str, int]:
        """Builds the mss region for the strip on the given monitor."""
        return {
            "top": monitor["top"] + self.y_offset,
            "left": monitor["left"] + monitor["width"] - self.x_offset,
            "width": self.width,
            "height": self.height,
        }

    def grab(self) -> Optional[np.ndarray]:
        """
        Captures the strip.

        Returns:
            Optional[np.ndarray]: An (height, width, 3) RGB image, or None if
            the game is not running or the capture failed.
        """
        if find_process(self.process_name) is None:
            logger.debug(f"Process '{self.process_name}' not found, skipping capture.")
            return None

        try:
            # mss handles are not shareable across threads, so open one per grab
            with mss.mss() as sct:
                # monitors[0] is the virtual screen spanning all monitors
                region = self.capture_region(sct.monitors[1])
                sct_img = sct.grab(region)
                img = np.array(sct_img)
        except mss.exception.ScreenShotError as e:
            logger.warning(f"Failed to capture screen: {e}")
            return None

        # mss returns BGRA
        return cv2.cvtColor(img, cv2.COLOR_BGRA2RGB)

    __call__ = grab

# -*- coding: utf-8 -*-
"""
src/nwminimap/utils/clipboard_manager.py

Copies the current player position to the system clipboard, in the same
"[x, y]" form the game uses, so it can be pasted into chat or a notes app.
"""

import logging
from typing import Optional

import pyperclip

from ..core.position_parser import Candidate

logger = logging.getLogger(__name__)


def format_position(position: Candidate) -> str:
    return f"[{position.x:.0f}, {position.y:.0f}]"


def copy_position(position: Optional[Candidate]) -> bool:
    """
    Copies a validated position to the clipboard.

    Returns:
        bool: True if the text was copied, False if there is no position yet
        or the clipboard is unavailable.
    """
    if position is None:
        logger.info("No position has been validated yet, nothing to copy.")
        return False

    text = format_position(position)
    try:
        pyperclip.copy(text)
        logger.info(f"Copied position to clipboard: '{text}'")
        return True
    except pyperclip.PyperclipException as e:
        # Happens on systems without a clipboard mechanism (e.g. no xclip/xsel on Linux)
        logger.error(f"Failed to copy position to clipboard: {e}")
        return False

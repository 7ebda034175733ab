# -*- coding: utf-8 -*-
"""
src/nwminimap/utils/hotkey_manager.py

Global hotkeys for NWMinimap, built on 'pynput'.

The game keeps keyboard focus while the minimap is in use, so tracking is
toggled through a system-wide hotkey rather than a window shortcut. pynput
invokes the callbacks on its own listener thread; callers that touch Qt
objects must forward the event to the GUI thread (the app does so with a
signal).
"""

import logging
from typing import Callable, Dict, Optional

from pynput import keyboard

logger = logging.getLogger(__name__)


class HotkeyManager:
    """
    Listens for a set of global hotkeys on a background thread.

    Attributes:
        bindings (Dict[str, Callable[[], None]]): Hotkey strings in pynput
            syntax (e.g. '<ctrl>+<alt>+m') mapped to their callbacks.
        listener (Optional[keyboard.GlobalHotKeys]): The running listener.
    """

    def __init__(self, bindings: Optional[Dict[str, Callable[[], None]]] = None):
        self.bindings: Dict[str, Callable[[], None]] = dict(bindings or {})
        self.listener: Optional[keyboard.GlobalHotKeys] = None

    def bind(self, hotkey_str: str, callback: Callable[[], None]):
        """Adds or replaces a binding. Takes effect on the next start()."""
        self.bindings[hotkey_str] = callback

    def _make_handler(self, hotkey_str: str) -> Callable[[], None]:
        def handler():
            logger.debug(f"Hotkey '{hotkey_str}' activated.")
            try:
                self.bindings[hotkey_str]()
            except Exception as e:
                logger.error(f"Error executing callback for '{hotkey_str}': {e}", exc_info=True)
        return handler

    def start(self) -> bool:
        """
        Starts (or restarts) the listener thread.

        Returns:
            bool: False if no binding is set or pynput rejected a hotkey.
        """
        if self.listener and self.listener.is_alive():
            self.stop()

        if not self.bindings:
            logger.warning("No hotkeys bound, listener not started.")
            return False

        try:
            self.listener = keyboard.GlobalHotKeys(
                {hotkey: self._make_handler(hotkey) for hotkey in self.bindings}
            )
            self.listener.start()
            logger.info(f"Global hotkey listener started for {', '.join(self.bindings)}.")
            return True
        except Exception as e:
            # pynput raises ValueError for malformed hotkey strings
            logger.error(f"Failed to start hotkey listener: {e}", exc_info=True)
            self.listener = None
            return False

    def stop(self):
        if self.listener and self.listener.is_alive():
            logger.info("Stopping global hotkey listener.")
            self.listener.stop()
        self.listener = None

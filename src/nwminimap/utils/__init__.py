# -*- coding: utf-8 -*-
"""
The Utilities Package for NWMinimap.

Desktop integration helpers that sit outside the tracking pipeline:

- hotkey_manager: Global hotkeys (pynput) to toggle tracking while the game
                  has focus.
- clipboard_manager: Copies the current position to the clipboard (pyperclip).
"""

# -*- coding: utf-8 -*-
"""
The GUI Package for NWMinimap.

This package contains the user interface, built using the PyQt6 framework and
its WebEngine module: the frameless window that hosts the web map and the
debug panel.
"""

from .minimap_window import MinimapWindow

__all__ = [
    "MinimapWindow",
]

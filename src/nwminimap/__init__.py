"""
NWMinimap Application Package.

A standalone minimap for New World: it reads the player position from the
game's HUD with OCR, filters out misreads, and keeps a web map centred on the
player.

The GUI entry point is `src.nwminimap.app.MinimapApp`; it is not imported
here so that the headless core can be used without a Qt installation.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]

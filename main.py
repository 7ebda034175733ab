import argparse
import logging
import sys

from PyQt6.QtWidgets import QApplication

# QtWebEngine must be imported before the QApplication is created, which the
# app module does through the minimap window.
try:
    from src.nwminimap.app import MinimapApp
    from src.nwminimap.config import Config
except ImportError as e:
    print(f"Error: Could not import the main application class 'MinimapApp'.")
    print(f"Please ensure the project structure is correct (e.g., src/nwminimap/app.py exists).")
    print(f"Details: {e}")
    sys.exit(1)


def main():
    """
    The main entry point for the NWMinimap application.

    Configures logging, loads the user configuration, creates the
    QApplication and the main controller, and runs the Qt event loop.
    """
    parser = argparse.ArgumentParser(description="Standalone minimap that follows the player via OCR.")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log every tracking cycle (DEBUG level)",
    )
    args, qt_args = parser.parse_known_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    app = QApplication(sys.argv[:1] + qt_args)

    # The app lives in the system tray; closing the map window only hides it.
    app.setQuitOnLastWindowClosed(False)

    # Keep a reference so the controller is not garbage collected
    minimap_app = MinimapApp(app, Config())

    sys.exit(app.exec())


if __name__ == '__main__':
    main()

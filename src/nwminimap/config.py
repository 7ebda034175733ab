# -*- coding: utf-8 -*-
"""
src/nwminimap/config.py

Module for handling application configuration.

This module defines default settings for NWMinimap, such as the game process
to watch, the screen strip to capture and the map display preferences. It
loads user-defined settings from a configuration file (config.ini), creating
one with default values on the first run, and saves display preferences that
change at runtime.
"""

import configparser
import logging
import platform
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

# --- Constants ---
APP_NAME = "NWMinimap"
DEFAULT_CONFIG_FILENAME = "config.ini"
DEFAULT_HOTKEY = "<ctrl>+<alt>+m"
DEFAULT_MAP_URL = "https://mapgenie.io/new-world/maps/aeternum?x=-0.9&y=0.9&zoom=13.5"
DEFAULT_WINDOW_SIZE = (320, 320)
MIN_WINDOW_SIZE = 100


def get_app_dir() -> Path:
    """
    Gets the application's data directory in a cross-platform way.

    - Windows: %APPDATA%/NWMinimap
    - macOS: ~/Library/Application Support/NWMinimap
    - Linux: ~/.config/NWMinimap

    Returns:
        Path: A Path object to the application's data directory.
    """
    if platform.system() == "Windows":
        app_dir = Path.home() / "AppData" / "Roaming" / APP_NAME
    elif platform.system() == "Darwin":  # macOS
        app_dir = Path.home() / "Library" / "Application Support" / APP_NAME
    else:  # Linux and other Unix-like
        app_dir = Path.home() / ".config" / APP_NAME

    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


class Config:
    """
    Manages application configuration by loading defaults and overriding
    them with settings from a user-specific config file.
    """

    def __init__(self, app_dir: Optional[Path] = None):
        """
        Initializes the configuration manager.

        Args:
            app_dir (Optional[Path]): Directory holding config.ini. Defaults
                                      to the per-user application directory.
        """
        self.parser = configparser.ConfigParser()
        self.app_dir = app_dir if app_dir is not None else get_app_dir()
        self.config_file_path = self.app_dir / DEFAULT_CONFIG_FILENAME

        self._load_defaults()
        self._load_from_file()

    def _load_defaults(self):
        """Sets the default configuration values in the parser object."""
        self.parser["General"] = {
            "process_name": "NewWorld",
            "hotkey": DEFAULT_HOTKEY,
            "start_enabled": "True",
        }
        self.parser["Capture"] = {
            "x_offset": "265",
            "y_offset": "20",
            "width": "277",
            "height": "16",
        }
        self.parser["Tracking"] = {
            "accepted_interval": "0.3",
            "missed_interval": "0.2",
            "hue_fallback": "False",
        }
        self.parser["OCR"] = {
            "languages": "en",
            "gpu": "False",
        }
        self.parser["Display"] = {
            "map_url": DEFAULT_MAP_URL,
            "opacity": "80",
            "debug": "False",
            "window_x": "",
            "window_y": "",
            "width": str(DEFAULT_WINDOW_SIZE[0]),
            "height": str(DEFAULT_WINDOW_SIZE[1]),
            "ui_visible": "True",
        }

    def _load_from_file(self):
        """
        Loads settings from the config.ini file, overriding defaults.
        If the file doesn't exist, it will be created with default values.
        """
        if not self.config_file_path.exists():
            self.save()
        else:
            self.parser.read(self.config_file_path)

    def save(self):
        """Writes the current configuration to the config file."""
        try:
            with open(self.config_file_path, 'w') as configfile:
                configfile.write(f"# {APP_NAME} Configuration File\n")
                configfile.write("# You can edit these values. Restart the app for changes to take effect.\n\n")
                self.parser.write(configfile)
        except IOError as e:
            # Non-critical, the app keeps running with in-memory settings
            logger.error(f"Could not write to config file at {self.config_file_path}: {e}")

    # --- Properties to access settings easily and with correct types ---

    @property
    def process_name(self) -> str:
        """Name of the game process whose screen is sampled."""
        return self.parser.get("General", "process_name", fallback="NewWorld")

    @property
    def hotkey(self) -> str:
        """The global hotkey combination that toggles tracking."""
        return self.parser.get("General", "hotkey", fallback=DEFAULT_HOTKEY)

    @property
    def start_enabled(self) -> bool:
        return self.parser.getboolean("General", "start_enabled", fallback=True)

    @start_enabled.setter
    def start_enabled(self, value: bool):
        self.parser.set("General", "start_enabled", str(bool(value)))

    @property
    def capture_x_offset(self) -> int:
        """Distance of the position strip from the right edge of the screen."""
        return self.parser.getint("Capture", "x_offset", fallback=265)

    @property
    def capture_y_offset(self) -> int:
        """Distance of the position strip from the top edge of the screen."""
        return self.parser.getint("Capture", "y_offset", fallback=20)

    @property
    def capture_width(self) -> int:
        return self.parser.getint("Capture", "width", fallback=277)

    @property
    def capture_height(self) -> int:
        return self.parser.getint("Capture", "height", fallback=16)

    @property
    def accepted_interval(self) -> float:
        """Seconds to wait after a cycle that updated the position."""
        return self.parser.getfloat("Tracking", "accepted_interval", fallback=0.3)

    @property
    def missed_interval(self) -> float:
        """Seconds to wait after a cycle that did not update the position."""
        return self.parser.getfloat("Tracking", "missed_interval", fallback=0.2)

    @property
    def hue_fallback(self) -> bool:
        """Whether to try the hue filter as a fourth OCR attempt."""
        return self.parser.getboolean("Tracking", "hue_fallback", fallback=False)

    @property
    def ocr_languages(self) -> List[str]:
        raw = self.parser.get("OCR", "languages", fallback="en")
        return [lang.strip() for lang in raw.split(",") if lang.strip()]

    @property
    def ocr_gpu(self) -> bool:
        return self.parser.getboolean("OCR", "gpu", fallback=False)

    @property
    def map_url(self) -> str:
        return self.parser.get("Display", "map_url", fallback=DEFAULT_MAP_URL)

    @property
    def opacity(self) -> int:
        """Window opacity in percent, clamped to 10-100."""
        value = self.parser.getint("Display", "opacity", fallback=80)
        return max(10, min(100, value))

    @opacity.setter
    def opacity(self, value: int):
        self.parser.set("Display", "opacity", str(int(value)))

    @property
    def debug(self) -> bool:
        """Whether the debug panel (capture preview and log) is shown."""
        return self.parser.getboolean("Display", "debug", fallback=False)

    @property
    def window_position(self) -> Optional[Tuple[int, int]]:
        """Last saved top-left corner of the map window, None until it was moved."""
        x = self.parser.get("Display", "window_x", fallback="").strip()
        y = self.parser.get("Display", "window_y", fallback="").strip()
        if not x or not y:
            return None
        try:
            return int(x), int(y)
        except ValueError:
            logger.warning(f"Ignoring invalid window position ({x}, {y}) in {self.config_file_path}")
            return None

    @window_position.setter
    def window_position(self, value: Tuple[int, int]):
        x, y = value
        self.parser.set("Display", "window_x", str(int(x)))
        self.parser.set("Display", "window_y", str(int(y)))

    @property
    def window_size(self) -> Tuple[int, int]:
        """Last saved map window size, never smaller than MIN_WINDOW_SIZE."""
        width = self.parser.getint("Display", "width", fallback=DEFAULT_WINDOW_SIZE[0])
        height = self.parser.getint("Display", "height", fallback=DEFAULT_WINDOW_SIZE[1])
        return max(MIN_WINDOW_SIZE, width), max(MIN_WINDOW_SIZE, height)

    @window_size.setter
    def window_size(self, value: Tuple[int, int]):
        width, height = value
        self.parser.set("Display", "width", str(int(width)))
        self.parser.set("Display", "height", str(int(height)))

    @property
    def ui_visible(self) -> bool:
        """False leaves only the map, without the top bar or background."""
        return self.parser.getboolean("Display", "ui_visible", fallback=True)

    @ui_visible.setter
    def ui_visible(self, value: bool):
        self.parser.set("Display", "ui_visible", str(bool(value)))

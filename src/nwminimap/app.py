# -*- coding: utf-8 -*-
"""
src/nwminimap/app.py

Core application controller for NWMinimap.

This module contains the main application class, `MinimapApp`, which owns
the tracking pipeline and its background worker, the minimap window, the
system tray icon and the global hotkey. Tracking results and hotkey presses
arrive on background threads and are forwarded to the GUI thread through
Qt signals, so the pipeline never touches a widget directly.
"""

import logging
from pathlib import Path

from PyQt6.QtCore import QObject, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QIcon
from PyQt6.QtWidgets import QApplication, QMenu, QSystemTrayIcon

from .config import APP_NAME, Config
from .core.ocr_engine import OcrEngine
from .core.pipeline import (
    DEFAULT_VARIANTS,
    HUE_DISTANCE_VARIANT,
    CycleResult,
    ExtractionPipeline,
    TrackingWorker,
)
from .core.screen_capture import ScreenCapturer
from .gui.minimap_window import MinimapWindow
from .utils.clipboard_manager import copy_position
from .utils.hotkey_manager import HotkeyManager

logger = logging.getLogger(__name__)

CURRENT_PATH = Path(__file__).resolve().parent
PROJECT_ROOT = CURRENT_PATH.parent.parent
ICON_FILE = PROJECT_ROOT / "assets" / "icon.png"

# Move/resize events are saved once they stop arriving for this long
GEOMETRY_SAVE_DELAY_MS = 500


class MinimapApp(QObject):
    """
    The main application controller. Manages the worker, UI and settings.
    """
    # Emitted from the worker thread, delivered on the GUI thread
    result_ready = pyqtSignal(object)
    # Emitted from the pynput listener thread
    toggle_requested = pyqtSignal()

    def __init__(self, app: QApplication, config: Config):
        super().__init__()
        self.app = app
        self.config = config

        # Core components
        self.ocr_engine = OcrEngine(config.ocr_languages, gpu=config.ocr_gpu)
        self.capturer = ScreenCapturer(
            process_name=config.process_name,
            x_offset=config.capture_x_offset,
            y_offset=config.capture_y_offset,
            width=config.capture_width,
            height=config.capture_height,
        )
        variants = DEFAULT_VARIANTS
        if config.hue_fallback:
            variants = variants + (HUE_DISTANCE_VARIANT,)
        self.pipeline = ExtractionPipeline(self.capturer.grab, self.ocr_engine.read_text, variants)
        self.worker = TrackingWorker(
            self.pipeline,
            on_result=self.result_ready.emit,
            accepted_interval=config.accepted_interval,
            missed_interval=config.missed_interval,
        )

        # UI
        self.window = MinimapWindow(
            config.map_url,
            opacity=config.opacity,
            debug=config.debug,
            size=config.window_size,
            position=config.window_position,
            ui_visible=config.ui_visible,
        )
        self.geometry_save_timer = QTimer(self)
        self.geometry_save_timer.setSingleShot(True)
        self.geometry_save_timer.setInterval(GEOMETRY_SAVE_DELAY_MS)
        self.geometry_save_timer.timeout.connect(self.config.save)

        self.result_ready.connect(self.on_result)
        self.toggle_requested.connect(self.toggle_tracking)
        self.window.toggle_requested.connect(self.toggle_tracking)
        self.window.opacity_changed.connect(self.on_opacity_changed)
        self.window.geometry_changed.connect(self.on_geometry_changed)
        self.window.ui_visible_changed.connect(self.on_ui_visible_changed)
        self.setup_tray_icon()

        self.hotkeys = HotkeyManager({config.hotkey: self.toggle_requested.emit})
        self.hotkeys.start()

        self.window.show()
        if config.start_enabled:
            self.start_tracking()
        else:
            self.window.set_tracking(False)

    def setup_tray_icon(self):
        """Creates and configures the system tray icon and its menu."""
        self.tray_icon = QSystemTrayIcon()

        if ICON_FILE.exists():
            self.tray_icon.setIcon(QIcon(str(ICON_FILE)))
        else:
            logger.warning(f"Icon file not found at {ICON_FILE}")
            self.tray_icon.setIcon(QIcon.fromTheme("applications-games"))

        self.tray_icon.setToolTip(f"{APP_NAME} - Press {self.config.hotkey} to start/stop tracking")

        menu = QMenu()

        show_action = QAction("Show Map", self.app)
        show_action.triggered.connect(self.show_window)
        menu.addAction(show_action)

        toggle_action = QAction("Start/Stop Tracking", self.app)
        toggle_action.triggered.connect(self.toggle_tracking)
        menu.addAction(toggle_action)

        copy_action = QAction("Copy Position", self.app)
        copy_action.triggered.connect(lambda: copy_position(self.pipeline.last_position))
        menu.addAction(copy_action)

        menu.addSeparator()

        quit_action = QAction("Quit", self.app)
        quit_action.triggered.connect(self.quit_app)
        menu.addAction(quit_action)

        self.tray_icon.setContextMenu(menu)
        self.tray_icon.show()

        if not self.ocr_engine.available:
            self.tray_icon.showMessage(
                f"{APP_NAME} Error",
                "Could not initialize the OCR engine. The map will not follow the player.",
                QSystemTrayIcon.MessageIcon.Critical
            )

    def show_window(self):
        self.window.show()
        self.window.raise_()

    def start_tracking(self):
        self.worker.start()
        self.window.set_tracking(True)
        self._save_tracking_state(True)

    def stop_tracking(self):
        self.worker.stop(wait=False)
        self.window.set_tracking(False)
        self._save_tracking_state(False)

    def toggle_tracking(self):
        if self.worker.is_running:
            self.stop_tracking()
        else:
            self.start_tracking()

    def _save_tracking_state(self, running: bool):
        if self.config.start_enabled != running:
            self.config.start_enabled = running
            self.config.save()

    def on_result(self, result: CycleResult):
        self.window.show_result(result)

    def on_opacity_changed(self, opacity: int):
        self.config.opacity = opacity
        self.config.save()

    def on_geometry_changed(self, x: int, y: int, width: int, height: int):
        self.config.window_position = (x, y)
        self.config.window_size = (width, height)
        self.geometry_save_timer.start()

    def on_ui_visible_changed(self, visible: bool):
        self.config.ui_visible = visible
        self.config.save()

    def quit_app(self):
        """Stops all background threads and quits the application."""
        logger.info(f"Quitting {APP_NAME}...")
        self.hotkeys.stop()
        self.worker.stop(timeout=2.0)
        if self.geometry_save_timer.isActive():
            self.geometry_save_timer.stop()
            self.config.save()
        self.tray_icon.hide()
        self.app.quit()

# -*- coding: utf-8 -*-
"""
src/nwminimap/gui/minimap_window.py

Defines the MinimapWindow, a small frameless always-on-top window that hosts
the interactive web map.

The map page is driven entirely through JavaScript: panning to a
latitude/longitude, rotating the player arrow, and hiding the page chrome
once loading has finished. All methods must be called on the GUI thread;
the application controller delivers tracking results through a queued
signal.

The window reports its own position, size and UI visibility through signals
so the controller can persist them; while the temporary big size is active
nothing is reported, and switching back restores the previous geometry.
"""

import logging
from typing import Optional, Tuple

import numpy as np
from PyQt6.QtCore import QEvent, QObject, QPoint, QSize, Qt, QUrl, pyqtSignal
from PyQt6.QtGui import QImage, QMouseEvent, QMoveEvent, QPixmap, QResizeEvent
from PyQt6.QtWebEngineWidgets import QWebEngineView
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPlainTextEdit,
    QPushButton,
    QSlider,
    QVBoxLayout,
    QWidget,
)

from ..core.pipeline import CycleResult

logger = logging.getLogger(__name__)

DEFAULT_SIZE = (320, 320)
# Large enough to use the map page's own side panel
BIG_SIZE = (785, 735)
MAX_LOG_LINES = 200

ON_SYMBOL = "⬤"   # filled circle
OFF_SYMBOL = "◯"  # empty circle
UI_SHOWN_SYMBOL = "▼"
UI_HIDDEN_SYMBOL = "▲"
ENLARGE_SYMBOL = "🗚"
SHRINK_SYMBOL = "🗛"

WINDOW_STYLE = """
    #minimap {{
        background-color: {background};
    }}
    QLabel, QPlainTextEdit {{
        background-color: #000000;
        color: #E0E0E0;
    }}
    QPushButton {{
        background-color: #000000;
        color: #E0E0E0;
        border: none;
        padding: 2px 6px;
    }}
"""

# Page elements that clutter a minimap-sized view
HIDDEN_SELECTORS = [
    ".ncmp__banner",
    ".social",
    ".tools-panel",
    ".mapboxgl-ctrl-top-right",
    ".mapboxgl-ctrl-group",
    "#right-sidebar",
    "#blobby-left",
    "#header",
    "#distance-tool-control",
    "#add-note-control",
]

PLAYER_ARROW_HTML = (
    "<div id='playerPosArrow' style='position: fixed; top: 50%; left: 50%; "
    "transform: translate(-50%, -50%); color: white; font-size: 20px; "
    "margin: -10px;'>⮝</div>"
)


def build_setup_script(selectors=HIDDEN_SELECTORS) -> str:
    """JavaScript run once the map page has loaded."""
    hide = "".join(
        f"document.querySelectorAll('{selector}').forEach((el) => {{el.style.visibility = 'hidden';}});"
        for selector in selectors
    )
    return (
        "var style = document.createElement('style');"
        "style.innerHTML = '::-webkit-scrollbar{display:none}';"
        "document.body.appendChild(style);"
        + hide
        + "document.body.style.background = 'transparent';"
        + "if (!document.getElementById('playerPosArrow')) {"
        + f"document.getElementById('app').insertAdjacentHTML('afterend', \"{PLAYER_ARROW_HTML}\");"
        + "}"
    )


def pan_script(lat: float, lng: float) -> str:
    return f"window.mapManager.panToLatLng({lat!r},{lng!r});"


def heading_script(degrees: int) -> str:
    return (
        "document.getElementById('playerPosArrow').style.transform = "
        f"'translate(-50%, -50%) rotate({int(degrees)}deg)';"
    )


def to_qimage(image: np.ndarray) -> QImage:
    """Copies an RGB(A) numpy image into a QImage."""
    image = np.ascontiguousarray(image)
    h, w, channels = image.shape
    fmt = QImage.Format.Format_RGBA8888 if channels == 4 else QImage.Format.Format_RGB888
    # QImage does not own the numpy buffer, so copy before it goes away
    return QImage(image.data, w, h, image.strides[0], fmt).copy()


class MinimapWindow(QWidget):
    """
    The map rendering surface.

    Signals:
        toggle_requested: the on/off button was clicked.
        opacity_changed(int): the opacity slider moved (10-100).
        geometry_changed(int, int, int, int): the window moved or was resized
            (x, y, width, height). Not emitted while the big size is active.
        ui_visible_changed(bool): the top bar and background were shown/hidden.
    """
    toggle_requested = pyqtSignal()
    opacity_changed = pyqtSignal(int)
    geometry_changed = pyqtSignal(int, int, int, int)
    ui_visible_changed = pyqtSignal(bool)

    def __init__(
        self,
        map_url: str,
        opacity: int = 80,
        debug: bool = False,
        size: Tuple[int, int] = DEFAULT_SIZE,
        position: Optional[Tuple[int, int]] = None,
        ui_visible: bool = True,
        parent: QWidget = None,
    ):
        super().__init__(parent)
        self.map_url = map_url
        self.debug = debug
        self.ui_visible = True
        self.big_size = False
        self.map_ready = False
        self._drag_origin: Optional[QPoint] = None
        self._normal_geometry: Optional[Tuple[QPoint, QSize]] = None

        self._setup_window_properties()
        self._setup_ui(opacity)
        self.set_opacity(opacity)
        self.set_ui_visible(ui_visible, notify=False)

        self.resize(*size)
        if position is not None:
            self.move(*position)

    def _setup_window_properties(self):
        self.setWindowTitle("NWMinimap")
        self.setObjectName("minimap")
        self.setWindowFlags(
            Qt.WindowType.FramelessWindowHint |
            Qt.WindowType.WindowStaysOnTopHint |
            Qt.WindowType.Tool
        )
        # Lets the map float over the game once the UI is hidden
        self.setAttribute(Qt.WidgetAttribute.WA_TranslucentBackground)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground)

    def _create_map_view(self) -> QWidget:
        view = QWebEngineView()
        view.page().setBackgroundColor(Qt.GlobalColor.transparent)
        view.loadFinished.connect(self._on_load_finished)
        view.setUrl(QUrl(self.map_url))
        return view

    def _setup_ui(self, opacity: int):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(2)

        # Top row: the hide button stays, everything else lives in ui_bar
        top_row = QHBoxLayout()
        self.hide_button = QPushButton(UI_SHOWN_SYMBOL)
        self.hide_button.setToolTip("Hide/show the controls")
        self.hide_button.clicked.connect(self.toggle_ui)
        top_row.addWidget(self.hide_button)

        self.ui_bar = QWidget()
        bar_layout = QHBoxLayout(self.ui_bar)
        bar_layout.setContentsMargins(0, 0, 0, 0)

        self.move_label = QLabel("NWMinimap")
        self.move_label.setCursor(Qt.CursorShape.SizeAllCursor)
        self.move_label.setToolTip("Drag to move, double-click for debug info")
        self.move_label.installEventFilter(self)
        bar_layout.addWidget(self.move_label)
        bar_layout.addStretch()

        self.opacity_slider = QSlider(Qt.Orientation.Horizontal)
        self.opacity_slider.setRange(10, 100)
        self.opacity_slider.setValue(opacity)
        self.opacity_slider.setFixedWidth(80)
        self.opacity_slider.valueChanged.connect(self._on_opacity_slider)
        bar_layout.addWidget(self.opacity_slider)

        self.toggle_button = QPushButton(ON_SYMBOL)
        self.toggle_button.setToolTip("Start/stop tracking")
        self.toggle_button.clicked.connect(self.toggle_requested)
        bar_layout.addWidget(self.toggle_button)

        self.resize_button = QPushButton(ENLARGE_SYMBOL)
        self.resize_button.setToolTip("Toggle big size")
        self.resize_button.clicked.connect(self.toggle_big_size)
        bar_layout.addWidget(self.resize_button)

        close_button = QPushButton("✕")
        close_button.clicked.connect(self.close)
        bar_layout.addWidget(close_button)

        top_row.addWidget(self.ui_bar, stretch=1)
        layout.addLayout(top_row)

        self.loading_label = QLabel("Loading map...")
        self.loading_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.loading_label)

        self.web_view = self._create_map_view()
        self.web_view.setVisible(False)
        layout.addWidget(self.web_view, stretch=1)

        # Debug panel: last processed capture and a log of accepted positions
        self.debug_panel = QWidget()
        debug_layout = QVBoxLayout(self.debug_panel)
        debug_layout.setContentsMargins(0, 0, 0, 0)
        self.capture_preview = QLabel()
        self.capture_preview.setMinimumHeight(20)
        debug_layout.addWidget(self.capture_preview)
        self.log_view = QPlainTextEdit()
        self.log_view.setReadOnly(True)
        self.log_view.setMaximumBlockCount(MAX_LOG_LINES)
        self.log_view.setFixedHeight(80)
        debug_layout.addWidget(self.log_view)
        self.debug_panel.setVisible(self.debug)
        layout.addWidget(self.debug_panel)

        self.setLayout(layout)

    def _on_load_finished(self, ok: bool):
        if not ok:
            logger.error(f"Failed to load map page {self.map_url}")
            self.loading_label.setText("Could not load the map.")
            return
        self.web_view.page().runJavaScript(build_setup_script())
        self.loading_label.setVisible(False)
        self.web_view.setVisible(True)
        self.map_ready = True
        logger.info("Map page loaded.")

    def _on_opacity_slider(self, value: int):
        self.set_opacity(value)
        self.opacity_changed.emit(value)

    # --- Map surface commands ---

    def pan_to(self, lat: float, lng: float):
        if not self.map_ready:
            return
        self.web_view.page().runJavaScript(pan_script(lat, lng))

    def set_heading(self, degrees: int):
        if not self.map_ready:
            return
        self.web_view.page().runJavaScript(heading_script(degrees))

    def set_opacity(self, opacity: int):
        self.setWindowOpacity(opacity / 100)

    def set_tracking(self, running: bool):
        self.toggle_button.setText(ON_SYMBOL if running else OFF_SYMBOL)

    def set_debug(self, enabled: bool):
        self.debug = enabled
        self.debug_panel.setVisible(enabled)

    def show_result(self, result: CycleResult):
        """Slot for tracking results, called on the GUI thread."""
        if result.accepted:
            self.pan_to(result.geo.lat, result.geo.lng)
            self.set_heading(result.heading_degrees)

        if self.debug:
            if result.accepted and result.image is not None:
                self.capture_preview.setPixmap(QPixmap.fromImage(to_qimage(result.image)))
                self.log_view.appendPlainText(
                    f"{result.position.x:.0f}, {result.position.y:.0f} ({result.variant})"
                )
            else:
                self.capture_preview.clear()

    # --- Window state ---

    def set_ui_visible(self, visible: bool, notify: bool = True):
        """Shows or hides the controls and the black background."""
        self.ui_visible = visible
        self.ui_bar.setVisible(visible)
        self.hide_button.setText(UI_SHOWN_SYMBOL if visible else UI_HIDDEN_SYMBOL)
        self.setStyleSheet(WINDOW_STYLE.format(background="#000000" if visible else "transparent"))
        if notify:
            self.ui_visible_changed.emit(visible)

    def toggle_ui(self):
        self.set_ui_visible(not self.ui_visible)

    def toggle_big_size(self):
        """Switches to a big window and back to the previous geometry."""
        if not self.big_size:
            self._normal_geometry = (self.pos(), self.size())
            self.big_size = True
            self.resize(*BIG_SIZE)
            self.resize_button.setText(SHRINK_SYMBOL)
        else:
            if self._normal_geometry is not None:
                position, size = self._normal_geometry
                self.resize(size)
                self.move(position)
            self.big_size = False
            self.resize_button.setText(ENLARGE_SYMBOL)

    def _report_geometry(self):
        if self.big_size:
            return
        self.geometry_changed.emit(self.x(), self.y(), self.width(), self.height())

    def moveEvent(self, event: QMoveEvent):
        super().moveEvent(event)
        self._report_geometry()

    def resizeEvent(self, event: QResizeEvent):
        super().resizeEvent(event)
        self._report_geometry()

    # --- Dragging, and debug toggling on the title label ---

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            self._drag_origin = event.globalPosition().toPoint() - self.frameGeometry().topLeft()
            event.accept()

    def mouseMoveEvent(self, event: QMouseEvent):
        if self._drag_origin is not None:
            self.move(event.globalPosition().toPoint() - self._drag_origin)
            event.accept()

    def mouseReleaseEvent(self, event: QMouseEvent):
        self._drag_origin = None

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if obj is self.move_label and event.type() == QEvent.Type.MouseButtonDblClick:
            self.set_debug(not self.debug)
            return True
        return super().eventFilter(obj, event)

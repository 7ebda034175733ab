"""Tests for the map window: JavaScript helpers, window state and debug toggling."""

import os

import numpy as np
import pytest

pytest.importorskip("PyQt6.QtWebEngineWidgets")

from PyQt6.QtCore import QEvent, QPoint, QPointF, QSize, Qt  # noqa: E402
from PyQt6.QtGui import QMouseEvent, QMoveEvent, QResizeEvent  # noqa: E402
from PyQt6.QtWidgets import QApplication, QWidget  # noqa: E402

from src.nwminimap.gui.minimap_window import (  # noqa: E402
    BIG_SIZE,
    UI_HIDDEN_SYMBOL,
    UI_SHOWN_SYMBOL,
    MinimapWindow,
    build_setup_script,
    heading_script,
    pan_script,
    to_qimage,
)


class OfflineWindow(MinimapWindow):
    """Uses a plain widget instead of the web engine view."""

    def _create_map_view(self):
        return QWidget()


@pytest.fixture(scope="module")
def qapp():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    return QApplication.instance() or QApplication([])


@pytest.fixture
def window(qapp):
    window = OfflineWindow("about:blank", size=(500, 400), position=(50, 60))
    yield window
    window.close()
    window.deleteLater()


def double_click(widget):
    event = QMouseEvent(
        QEvent.Type.MouseButtonDblClick,
        QPointF(5, 5),
        QPointF(5, 5),
        Qt.MouseButton.LeftButton,
        Qt.MouseButton.LeftButton,
        Qt.KeyboardModifier.NoModifier,
    )
    QApplication.sendEvent(widget, event)


def test_pan_script():
    assert pan_script(0.5, -0.25) == "window.mapManager.panToLatLng(0.5,-0.25);"


def test_heading_script_rotates_player_arrow():
    script = heading_script(125)
    assert "playerPosArrow" in script
    assert "rotate(125deg)" in script


def test_setup_script_hides_chrome_and_adds_arrow():
    script = build_setup_script(["#header"])
    assert "document.querySelectorAll('#header')" in script
    assert "id='playerPosArrow'" in script


def test_to_qimage_copies_pixels():
    image = np.zeros((16, 277, 3), dtype=np.uint8)
    image[0, 0] = (255, 0, 0)
    qimage = to_qimage(image)
    assert (qimage.width(), qimage.height()) == (277, 16)
    assert qimage.pixelColor(0, 0).red() == 255
    assert qimage.pixelColor(0, 0).green() == 0


class TestWindowState:

    def test_saved_geometry_is_restored(self, window):
        assert window.size() == QSize(500, 400)
        assert window.pos() == QPoint(50, 60)

    def test_move_and_resize_are_reported(self, window):
        reported = []
        window.geometry_changed.connect(lambda *geometry: reported.append(geometry))

        window.moveEvent(QMoveEvent(QPoint(50, 60), QPoint(0, 0)))
        window.resizeEvent(QResizeEvent(QSize(500, 400), QSize(320, 320)))
        assert reported == [(50, 60, 500, 400), (50, 60, 500, 400)]

    def test_big_size_is_not_reported_and_is_undone(self, window):
        reported = []
        window.geometry_changed.connect(lambda *geometry: reported.append(geometry))

        window.toggle_big_size()
        assert window.big_size
        assert window.size() == QSize(*BIG_SIZE)
        window.resizeEvent(QResizeEvent(QSize(*BIG_SIZE), QSize(500, 400)))
        assert reported == []

        window.toggle_big_size()
        assert not window.big_size
        assert window.size() == QSize(500, 400)
        assert window.pos() == QPoint(50, 60)

    def test_hiding_the_ui_keeps_only_the_hide_button(self, window):
        states = []
        window.ui_visible_changed.connect(states.append)

        window.toggle_ui()
        assert window.ui_bar.isHidden()
        assert not window.hide_button.isHidden()
        assert window.hide_button.text() == UI_HIDDEN_SYMBOL
        assert "transparent" in window.styleSheet()

        window.toggle_ui()
        assert not window.ui_bar.isHidden()
        assert window.hide_button.text() == UI_SHOWN_SYMBOL
        assert states == [False, True]

    def test_starts_with_saved_ui_visibility(self, qapp):
        window = OfflineWindow("about:blank", ui_visible=False)
        assert not window.ui_visible
        assert window.ui_bar.isHidden()
        window.deleteLater()


class TestDebugToggle:

    def test_double_click_on_title_toggles_debug(self, window):
        double_click(window.move_label)
        assert window.debug
        assert not window.debug_panel.isHidden()

        double_click(window.move_label)
        assert not window.debug

    def test_double_click_on_controls_is_ignored(self, window):
        double_click(window.toggle_button)
        double_click(window.opacity_slider)
        assert not window.debug

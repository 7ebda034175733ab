"""Tests for copying the position to the clipboard."""

import pyperclip

from src.nwminimap.core.position_parser import Candidate
from src.nwminimap.utils import clipboard_manager
from src.nwminimap.utils.clipboard_manager import copy_position, format_position


class TestClipboard:

    def test_format_matches_hud(self):
        assert format_position(Candidate(8500.0, 6000.0)) == "[8500, 6000]"

    def test_copy_position(self, monkeypatch):
        copied = []
        monkeypatch.setattr(clipboard_manager.pyperclip, "copy", copied.append)
        assert copy_position(Candidate(8500, 6000))
        assert copied == ["[8500, 6000]"]

    def test_nothing_to_copy(self, monkeypatch):
        copied = []
        monkeypatch.setattr(clipboard_manager.pyperclip, "copy", copied.append)
        assert not copy_position(None)
        assert copied == []

    def test_clipboard_unavailable(self, monkeypatch):
        def fail(text):
            raise pyperclip.PyperclipException("no clipboard")

        monkeypatch.setattr(clipboard_manager.pyperclip, "copy", fail)
        assert not copy_position(Candidate(8500, 6000))

# -*- coding: utf-8 -*-
"""
The Core Processing Package for NWMinimap.

This package holds the signal-extraction pipeline, from the captured screen
strip to a position on the web map. None of it depends on the GUI.

Modules:
- `image_processor`: Black/white colour filters that prepare the strip for OCR.
- `ocr_engine`: EasyOCR wrapper that turns an image into raw text.
- `position_parser`: Parses raw OCR text into an (x, y) candidate.
- `position_validator`: Hysteresis state machine against OCR noise and teleports.
- `projection`: Game coordinates to latitude/longitude, plus heading.
- `screen_capture`: Grabs the position strip from the game's screen.
- `pipeline`: One sampling cycle and the background worker that repeats it.
"""

# The OCR engine and screen capturer pull in heavy native dependencies and
# are imported from their modules directly.
from .pipeline import CycleResult, ExtractionPipeline, TrackingWorker
from .position_parser import Candidate, parse_position
from .position_validator import TrackerState, validate
from .projection import GeoCoordinate, HeadingTracker, game_to_lat_lng

__all__ = [
    "Candidate",
    "CycleResult",
    "ExtractionPipeline",
    "GeoCoordinate",
    "HeadingTracker",
    "TrackerState",
    "TrackingWorker",
    "game_to_lat_lng",
    "parse_position",
    "validate",
]

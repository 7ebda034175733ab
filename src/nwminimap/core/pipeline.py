# -*- coding: utf-8 -*-
"""
src/nwminimap/core/pipeline.py

Orchestrates one sampling cycle, capture -> preprocess/OCR -> parse ->
validate -> project, and the background worker that repeats it.

Every stage can fail without consequence: a missing capture, empty OCR text,
an unparsable reading or a validator rejection all end the cycle with
"not updated", and the worker simply tries again a little sooner.
"""

import logging
import threading
from typing import Callable, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .image_processor import (
    YELLOW_HUE,
    threshold_by_hue_distance,
    threshold_by_range,
    threshold_by_reference_color,
)
from .position_parser import Candidate, parse_position
from .position_validator import TrackerState, validate
from .projection import GeoCoordinate, HeadingTracker, game_to_lat_lng

logger = logging.getLogger(__name__)

# Colour of the HUD position text and how far a pixel may stray from it.
HUD_TEXT_COLOR = (255, 253, 228)
HUD_TEXT_MAX_SQUARED_DISTANCE = 15000

# Light pixels that survive a dark, busy background.
HUD_TEXT_RANGE = (160, 140, 100, 255, 255, 255)

HUE_TOLERANCE = 10

ACCEPTED_INTERVAL = 0.3
MISSED_INTERVAL = 0.2

ImageSource = Callable[[], Optional[np.ndarray]]
TextRecognizer = Callable[[np.ndarray], str]


class PreprocessVariant(NamedTuple):
    """
    One OCR attempt. `from_original` starts from a fresh copy of the capture;
    otherwise the variant keeps filtering the previous attempt's buffer.
    """
    name: str
    from_original: bool
    apply: Optional[Callable[[np.ndarray], np.ndarray]]


RAW_VARIANT = PreprocessVariant("raw", True, None)
REFERENCE_COLOR_VARIANT = PreprocessVariant(
    "reference-color", False,
    lambda img: threshold_by_reference_color(img, HUD_TEXT_COLOR, HUD_TEXT_MAX_SQUARED_DISTANCE),
)
RGB_RANGE_VARIANT = PreprocessVariant(
    "rgb-range", True,
    lambda img: threshold_by_range(img, *HUD_TEXT_RANGE),
)
HUE_DISTANCE_VARIANT = PreprocessVariant(
    "hue-distance", True,
    lambda img: threshold_by_hue_distance(img, YELLOW_HUE, HUE_TOLERANCE),
)

DEFAULT_VARIANTS = (RAW_VARIANT, REFERENCE_COLOR_VARIANT, RGB_RANGE_VARIANT)


class CycleResult(NamedTuple):
    accepted: bool
    candidate: Optional[Candidate] = None
    position: Optional[Candidate] = None
    geo: Optional[GeoCoordinate] = None
    heading_degrees: Optional[int] = None
    image: Optional[np.ndarray] = None
    variant: Optional[str] = None


class ExtractionPipeline:
    """
    Owns the validator state and heading for one tracking session.

    Only one thread may call `run_cycle()`; the worker below guarantees that.
    """

    def __init__(
        self,
        image_source: ImageSource,
        recognizer: TextRecognizer,
        variants: Sequence[PreprocessVariant] = DEFAULT_VARIANTS,
        state: Optional[TrackerState] = None,
    ):
        self.image_source = image_source
        self.recognizer = recognizer
        self.variants = tuple(variants)
        self.state = state if state is not None else TrackerState()
        self.heading = HeadingTracker()
        self.last_position: Optional[Candidate] = None

    def extract_candidate(
        self, original: np.ndarray
    ) -> Tuple[Optional[Candidate], np.ndarray, Optional[str]]:
        """
        Tries each preprocessing variant in turn until one parses.

        Returns the candidate (or None), the buffer of the last attempt and
        the name of the variant that produced the candidate.
        """
        image = None
        for variant in self.variants:
            if image is None or variant.from_original:
                image = original.copy()
            if variant.apply is not None:
                variant.apply(image)

            candidate = parse_position(self.recognizer(image))
            if candidate is not None:
                logger.debug(f"Variant '{variant.name}' produced {tuple(candidate)}")
                return candidate, image, variant.name
        return None, image, None

    def process_image(self, original: np.ndarray) -> CycleResult:
        """Runs everything after capture on an already acquired image."""
        candidate, image, variant = self.extract_candidate(original)
        if candidate is None:
            return CycleResult(False, image=image)

        if candidate == self.last_position:
            return CycleResult(False, candidate=candidate, image=image, variant=variant)

        result = validate(candidate, self.state)
        self.state = result.state
        if not result.accepted:
            return CycleResult(False, candidate=candidate, image=image, variant=variant)

        position = result.position
        geo = game_to_lat_lng(position.x, position.y)
        self.heading.update(position.x, position.y)
        self.last_position = position
        logger.debug(f"Accepted {tuple(position)} -> {geo.lat:.6f}, {geo.lng:.6f}")
        return CycleResult(
            True,
            candidate=candidate,
            position=position,
            geo=geo,
            heading_degrees=self.heading.display_degrees,
            image=image,
            variant=variant,
        )

    def run_cycle(self) -> CycleResult:
        """Acquires one image and runs it through the pipeline."""
        original = self.image_source()
        if original is None:
            return CycleResult(False)
        return self.process_image(original)


class TrackingWorker:
    """
    Runs the pipeline on a background thread until stopped.

    `on_result` is invoked on the worker thread after every cycle; GUI code
    must hand the result over to its own thread (e.g. through a Qt signal).
    Stopping is cooperative: a cycle that is already running completes.
    Every start gets its own stop event, and cycles are serialized, so a
    thread that is still finishing after `stop()` never overlaps the next run.
    """

    def __init__(
        self,
        pipeline: ExtractionPipeline,
        on_result: Optional[Callable[[CycleResult], None]] = None,
        accepted_interval: float = ACCEPTED_INTERVAL,
        missed_interval: float = MISSED_INTERVAL,
    ):
        self.pipeline = pipeline
        self.on_result = on_result
        self.accepted_interval = accepted_interval
        self.missed_interval = missed_interval
        self._stop_event = threading.Event()
        self._cycle_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

    @property
    def is_running(self) -> bool:
        return (
            self._thread is not None
            and self._thread.is_alive()
            and not self._stop_event.is_set()
        )

    def start(self):
        if self.is_running:
            logger.warning("Tracking worker is already running.")
            return
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self.run, args=(self._stop_event,), name="tracking-worker", daemon=True
        )
        self._thread.start()
        logger.info("Tracking worker started.")

    def stop(self, timeout: Optional[float] = None, wait: bool = True):
        """
        Asks the worker to stop.

        Args:
            timeout (Optional[float]): Longest time to wait for the thread.
            wait (bool): Join the thread. Pass False on the GUI thread so a
                         running OCR cycle does not block the event loop.
        """
        self._stop_event.set()
        thread = self._thread
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("Tracking worker is still finishing its last cycle.")
        logger.info("Tracking worker stopped.")

    def run_once(self) -> CycleResult:
        with self._cycle_lock:
            try:
                result = self.pipeline.run_cycle()
            except Exception as e:
                logger.error(f"Tracking cycle failed: {e}", exc_info=True)
                result = CycleResult(False)

        if self.on_result is not None:
            try:
                self.on_result(result)
            except Exception as e:
                logger.error(f"Error delivering tracking result: {e}", exc_info=True)
        return result

    def run(self, stop_event: Optional[threading.Event] = None):
        if stop_event is None:
            stop_event = self._stop_event
        while not stop_event.is_set():
            result = self.run_once()
            interval = self.accepted_interval if result.accepted else self.missed_interval
            stop_event.wait(interval)

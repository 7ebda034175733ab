"""Behavioural tests for the OCR preprocessing filters."""

import numpy as np
import pytest

from src.nwminimap.core.image_processor import (
    rgb_to_hue,
    threshold_by_hue_distance,
    threshold_by_range,
    threshold_by_reference_color,
)

BLACK = (0, 0, 0)
WHITE = (255, 255, 255)


def pixel(image, y, x):
    return tuple(int(v) for v in image[y, x, :3])


class TestThresholdByReferenceColor:

    def test_text_colour_turns_black_background_white(self, strip):
        threshold_by_reference_color(strip, (255, 253, 228), 15000)
        assert pixel(strip, 1, 1) == BLACK
        assert pixel(strip, 0, 0) == WHITE

    def test_mutates_in_place_and_returns_same_array(self, strip):
        result = threshold_by_reference_color(strip, (255, 253, 228), 15000)
        assert result is strip

    def test_distance_bound_is_inclusive(self):
        image = np.array([[[10, 0, 0], [11, 0, 0]]], dtype=np.uint8)
        threshold_by_reference_color(image, (0, 0, 0), 100)
        assert pixel(image, 0, 0) == BLACK   # 10^2 == 100
        assert pixel(image, 0, 1) == WHITE   # 11^2 > 100

    def test_no_uint8_overflow_in_distance(self):
        image = np.array([[[0, 0, 0]]], dtype=np.uint8)
        threshold_by_reference_color(image, (255, 255, 255), 100)
        assert pixel(image, 0, 0) == WHITE

    def test_alpha_channel_becomes_opaque(self):
        image = np.zeros((2, 2, 4), dtype=np.uint8)
        threshold_by_reference_color(image, (0, 0, 0), 0)
        assert np.all(image[..., 3] == 255)
        assert np.all(image[..., :3] == 0)

    def test_output_is_strictly_binary(self):
        rng = np.random.default_rng(1)
        image = rng.integers(0, 256, (16, 277, 3), dtype=np.uint8)
        threshold_by_reference_color(image, (255, 253, 228), 15000)
        assert set(np.unique(image)) <= {0, 255}

    def test_zero_sized_image_raises(self):
        with pytest.raises(ValueError, match="zero-sized"):
            threshold_by_reference_color(np.zeros((0, 5, 3), dtype=np.uint8), (0, 0, 0), 10)

    def test_wrong_channel_count_raises(self):
        with pytest.raises(ValueError, match="Expected an"):
            threshold_by_reference_color(np.zeros((5, 5), dtype=np.uint8), (0, 0, 0), 10)


class TestThresholdByRange:

    def test_inside_cube_turns_black(self):
        image = np.array([[[200, 200, 200], [100, 200, 200]]], dtype=np.uint8)
        threshold_by_range(image, 160, 140, 100, 255, 255, 255)
        assert pixel(image, 0, 0) == BLACK
        assert pixel(image, 0, 1) == WHITE

    def test_bounds_are_inclusive(self):
        image = np.array([[[160, 140, 100], [255, 255, 255], [159, 140, 100]]], dtype=np.uint8)
        threshold_by_range(image, 160, 140, 100, 255, 255, 255)
        assert pixel(image, 0, 0) == BLACK
        assert pixel(image, 0, 1) == BLACK
        assert pixel(image, 0, 2) == WHITE

    def test_every_channel_must_match(self):
        image = np.array([[[200, 100, 200]]], dtype=np.uint8)
        threshold_by_range(image, 160, 140, 100, 255, 255, 255)
        assert pixel(image, 0, 0) == WHITE


class TestRgbToHue:

    @pytest.mark.parametrize("rgb, expected", [
        ((255, 0, 0), 0.0),
        ((255, 255, 0), 60.0),
        ((0, 255, 0), 120.0),
        ((0, 0, 255), 240.0),
        ((255, 0, 255), 300.0),
        ((128, 128, 128), 0.0),
    ])
    def test_primary_and_grey_hues(self, rgb, expected):
        hue = rgb_to_hue(np.array([[rgb]], dtype=np.uint8))
        assert hue[0, 0] == pytest.approx(expected)

    def test_does_not_mutate_input(self):
        image = np.array([[[255, 253, 228]]], dtype=np.uint8)
        before = image.copy()
        rgb_to_hue(image)
        assert np.array_equal(image, before)


class TestThresholdByHueDistance:

    def test_yellowish_text_turns_black(self):
        image = np.array([[[255, 255, 0], [0, 0, 255]]], dtype=np.uint8)
        threshold_by_hue_distance(image, 60.0, 10)
        assert pixel(image, 0, 0) == BLACK
        assert pixel(image, 0, 1) == WHITE

    def test_tolerance_is_strict(self):
        # Pure red has hue 0, exactly 1.5 * 40 = 60 degrees from yellow
        image = np.array([[[255, 0, 0]]], dtype=np.uint8)
        threshold_by_hue_distance(image, 60.0, 40)
        assert pixel(image, 0, 0) == WHITE

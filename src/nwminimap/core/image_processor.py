# -*- coding: utf-8 -*-
"""
src/nwminimap/core/image_processor.py

Pixel filters that turn the captured coordinate strip into a pure
black/white mask before it is handed to the OCR engine.

Every filter works on an owned numpy array of shape (H, W, 3) or (H, W, 4)
in RGB(A) channel order and mutates it in place. Pixels that match the
filter's colour rule become black (0, 0, 0), everything else becomes white
(255, 255, 255). The alpha channel, when present, is forced to opaque.
"""

import logging
from typing import Tuple

import numpy as np

logger = logging.getLogger(__name__)

BLACK = 0
WHITE = 255

# Hue of pure yellow (255, 255, 0), in degrees. The coordinate text in the
# game HUD is a pale yellow, which is what the hue filter is tuned for.
YELLOW_HUE = 60.0


def _check_image(image: np.ndarray) -> None:
    """Raises ValueError for anything that is not a non-empty RGB(A) array."""
    if not isinstance(image, np.ndarray):
        raise ValueError(f"Expected numpy.ndarray, got {type(image).__name__}")
    if image.ndim != 3 or image.shape[2] not in (3, 4):
        raise ValueError(f"Expected an (H, W, 3|4) image, got shape {image.shape}")
    if image.shape[0] == 0 or image.shape[1] == 0:
        raise ValueError("Cannot filter a zero-sized image")


def _apply_mask(image: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """Writes black where mask is True and white elsewhere."""
    image[..., :3] = np.where(mask[..., np.newaxis], BLACK, WHITE).astype(image.dtype)
    if image.shape[2] == 4:
        image[..., 3] = WHITE
    return image


def threshold_by_reference_color(
    image: np.ndarray,
    reference_color: Tuple[int, int, int],
    max_squared_distance: int,
) -> np.ndarray:
    """
    Blackens every pixel close to a reference colour.

    The distance is the squared Euclidean distance in RGB space; pixels whose
    distance is less than or equal to `max_squared_distance` turn black.

    Args:
        image (np.ndarray): RGB(A) image, modified in place.
        reference_color (Tuple[int, int, int]): The (r, g, b) text colour.
        max_squared_distance (int): Inclusive squared-distance threshold.

    Returns:
        np.ndarray: The same array, for call chaining.
    """
    _check_image(image)
    rgb = image[..., :3].astype(np.int32)
    reference = np.asarray(reference_color, dtype=np.int32)
    distance = np.sum((rgb - reference) ** 2, axis=-1)
    return _apply_mask(image, distance <= max_squared_distance)


def threshold_by_range(
    image: np.ndarray,
    r_min: int, g_min: int, b_min: int,
    r_max: int, g_max: int, b_max: int,
) -> np.ndarray:
    """
    Blackens every pixel whose channels all fall inside an RGB cube.

    Bounds are inclusive on both ends. Returns the same (mutated) array.
    """
    _check_image(image)
    r = image[..., 0]
    g = image[..., 1]
    b = image[..., 2]
    inside = (
        (r >= r_min) & (r <= r_max)
        & (g >= g_min) & (g <= g_max)
        & (b >= b_min) & (b <= b_max)
    )
    return _apply_mask(image, inside)


def rgb_to_hue(rgb: np.ndarray) -> np.ndarray:
    """
    Computes the HSL/HSV hue in degrees [0, 360) for every pixel.

    Grey pixels (max == min) get a hue of 0. When several channels share the
    maximum, red wins over green and green wins over blue.
    """
    rgb = rgb.astype(np.float64)
    r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
    c_max = np.max(rgb, axis=-1)
    c_min = np.min(rgb, axis=-1)
    delta = c_max - c_min
    # Avoid the division warning for grey pixels; they are zeroed below.
    safe_delta = np.where(delta == 0, 1.0, delta)

    hue = np.select(
        [r == c_max, g == c_max],
        [(g - b) / safe_delta, 2.0 + (b - r) / safe_delta],
        default=4.0 + (r - g) / safe_delta,
    ) * 60.0
    hue = np.where(hue < 0.0, hue + 360.0, hue)
    return np.where(delta == 0, 0.0, hue)


def threshold_by_hue_distance(
    image: np.ndarray,
    hue_target: float = YELLOW_HUE,
    tolerance_range: float = 10.0,
) -> np.ndarray:
    """
    Blackens every pixel whose hue is within 1.5 x `tolerance_range` degrees
    of `hue_target`. The comparison is strict and does not wrap around 360.
    """
    _check_image(image)
    hue = rgb_to_hue(image[..., :3])
    return _apply_mask(image, np.abs(hue - hue_target) < 1.5 * tolerance_range)


if __name__ == '__main__':
    # python -m src.nwminimap.core.image_processor
    logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(levelname)s - %(message)s')

    strip = np.zeros((16, 277, 3), dtype=np.uint8)
    strip[:, :100] = (255, 253, 228)
    strip[:, 100:200] = (200, 180, 120)
    strip[:, 200:] = (30, 30, 30)

    for name, apply in (
        ("reference colour", lambda img: threshold_by_reference_color(img, (255, 253, 228), 15000)),
        ("rgb range", lambda img: threshold_by_range(img, 160, 140, 100, 255, 255, 255)),
        ("hue distance", lambda img: threshold_by_hue_distance(img)),
    ):
        result = apply(strip.copy())
        black = np.count_nonzero(np.all(result[..., :3] == BLACK, axis=-1))
        logger.info(f"{name}: {black} of {result.shape[0] * result.shape[1]} pixels kept as text")

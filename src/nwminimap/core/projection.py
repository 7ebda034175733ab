# -*- coding: utf-8 -*-
"""
src/nwminimap/core/projection.py

Converts validated game coordinates into the latitude/longitude pair the web
map expects, and derives the player's heading from consecutive positions.

Game coordinates are first remapped linearly into the map's tile-pixel space
using two calibration boxes, then un-projected with the inverse spherical
Mercator transform used by the map's tile layer.
"""

import math
from typing import NamedTuple, Optional, Tuple

# In-game bounding box used for calibration. Top is numerically larger than
# bottom because the game's y axis grows northwards.
GAME_LEFT = 4812
GAME_RIGHT = 13952
GAME_TOP = 7944
GAME_BOTTOM = 4532

# The same box in tile-pixel space.
MAP_TOP_LEFT = (127.23117148476692, 127.33160664985246)
MAP_BOTTOM_RIGHT = (127.7893259452204, 127.53969981310864)

TILE_SIZE = 256
EARTH_RADIUS = 6371000

# Visual rotation factor for the arrow on the map. This is not a radians to
# degrees conversion; it is the value the map overlay was tuned with.
HEADING_DISPLAY_SCALE = 80


class GeoCoordinate(NamedTuple):
    lat: float
    lng: float


def lerp(a: float, b: float, t: float) -> float:
    return a * (1 - t) + b * t


def inverse_lerp(a: float, b: float, value: float) -> float:
    """Unclamped inverse of lerp()."""
    return (value - a) / (b - a)


def remap(in_min: float, in_max: float, out_min: float, out_max: float, value: float) -> float:
    return lerp(out_min, out_max, inverse_lerp(in_min, in_max, value))


def game_to_map(x: float, y: float) -> Tuple[float, float]:
    """Maps a game coordinate into tile-pixel space, one axis at a time."""
    map_x = remap(GAME_LEFT, GAME_RIGHT, MAP_TOP_LEFT[0], MAP_BOTTOM_RIGHT[0], x)
    map_y = remap(GAME_TOP, GAME_BOTTOM, MAP_TOP_LEFT[1], MAP_BOTTOM_RIGHT[1], y)
    return map_x, map_y


def map_to_lat_lng(map_x: float, map_y: float) -> GeoCoordinate:
    """Inverse spherical Mercator: tile-pixel space to degrees."""
    e = 0.5 / (math.pi * EARTH_RADIUS)
    untransformed_x = (map_x / TILE_SIZE - 0.5) / e
    untransformed_y = (map_y / TILE_SIZE - 0.5) / -e

    to_degrees = 180 / math.pi
    lng = untransformed_x * to_degrees / EARTH_RADIUS
    lat = (2 * math.atan(math.exp(untransformed_y / EARTH_RADIUS)) - math.pi / 2) * to_degrees
    return GeoCoordinate(lat, lng)


def game_to_lat_lng(x: float, y: float) -> GeoCoordinate:
    """Projects a validated game coordinate onto the web map."""
    return map_to_lat_lng(*game_to_map(x, y))


class HeadingTracker:
    """
    Keeps the last known heading and the position it was derived from.

    The heading is atan2(dx, dy) in radians, so 0 points along +y (north in
    game space). A zero-length move keeps the previous heading.
    """

    def __init__(self):
        self.heading: float = 0.0
        self.last_position: Optional[Tuple[float, float]] = None

    def update(self, x: float, y: float) -> float:
        if self.last_position is not None:
            dx = x - self.last_position[0]
            dy = y - self.last_position[1]
            if dx != 0 or dy != 0:
                self.heading = math.atan2(dx, dy)
        self.last_position = (x, y)
        return self.heading

    @property
    def display_degrees(self) -> int:
        """Rotation to apply to the map arrow, truncated towards zero."""
        return int(self.heading * HEADING_DISPLAY_SCALE)

#!/usr/bin/env python3
"""
Top-down camera for turning pointer positions into aim points.

The camera hovers above the play plane and looks straight down the -z axis.
screen_to_world takes a fixed distance from the camera, the same way the aim
projection always uses the camera's height above the stage, so the aim point
lands on the play plane.
"""
from typing import Optional, Tuple

from .constants import (
    CAMERA_DISTANCE,
    DEFAULT_METERS_PER_PIXEL,
    MIN_METERS_PER_PIXEL,
    MAX_METERS_PER_PIXEL,
    VIEW_WIDTH,
    VIEW_HEIGHT,
)
from .vector_utils import Vec3, clamp


class Camera:
    """
    Orthographic top-down camera mapping world (x, y) to screen pixels.
    """

    def __init__(self, center=(0.0, 0.0), meters_per_pixel=DEFAULT_METERS_PER_PIXEL,
                 height: float = CAMERA_DISTANCE):
        self.center = [center[0], center[1]]
        self.mpp = meters_per_pixel
        self.height = float(height)
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def world_to_screen(self, pos) -> Tuple[int, int]:
        cx, cy = self.center
        mpp = self.mpp
        px = (pos[0] - cx) / mpp + self.viewport_size[0] / 2
        py = (pos[1] - cy) / mpp + self.viewport_size[1] / 2
        return (int(px), int(py))

    def screen_to_world(self, screen: Tuple[int, int], distance: Optional[float] = None) -> Vec3:
        """Project a screen pixel to the point `distance` below the camera (default: its height)."""
        if distance is None:
            distance = self.height
        cx, cy = self.center
        mpp = self.mpp
        wx = (screen[0] - self.viewport_size[0] / 2) * mpp + cx
        wy = (screen[1] - self.viewport_size[1] / 2) * mpp + cy
        return (wx, wy, self.height - distance)

    def zoom(self, factor, pivot_screen: Optional[Tuple[int, int]] = None):
        factor = clamp(factor, 0.05, 20.0)
        before = None
        if pivot_screen is not None:
            before = self.screen_to_world(pivot_screen)
        self.mpp = clamp(self.mpp * (1.0 / factor), MIN_METERS_PER_PIXEL, MAX_METERS_PER_PIXEL)
        if pivot_screen is not None and before is not None:
            after = self.screen_to_world(pivot_screen)
            self.center[0] += (before[0] - after[0])
            self.center[1] += (before[1] - after[1])

    def frame(self, points, margin: float = 1.3) -> None:
        """Centre and zoom so every (x, y, ...) point is visible."""
        points = list(points)
        if not points:
            return
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        minx, maxx = min(xs), max(xs)
        miny, maxy = min(ys), max(ys)
        width_m = (maxx - minx) * margin + 1.0
        height_m = (maxy - miny) * margin + 1.0
        mpp_x = width_m / max(self.viewport_size[0], 1)
        mpp_y = height_m / max(self.viewport_size[1], 1)
        self.center = [(minx + maxx) / 2, (miny + maxy) / 2]
        self.mpp = clamp(max(mpp_x, mpp_y), MIN_METERS_PER_PIXEL, MAX_METERS_PER_PIXEL)

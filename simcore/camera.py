#!/usr/bin/env python3
"""
Top-down view of the ecliptic (x-z) plane.

Screen x follows world x and screen y follows world z; the world y component
is dropped when projecting. Points picked on screen come back on the y = 0
plane, where spawned asteroids and the spaceship are placed.
"""
from typing import Optional, Tuple

from .constants import (
    DEFAULT_UNITS_PER_PIXEL,
    MAX_UNITS_PER_PIXEL,
    MIN_UNITS_PER_PIXEL,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from .vector_utils import Vec3, clamp

MIN_ZOOM_STEP = 0.05
MAX_ZOOM_STEP = 20.0


class Camera2D:
    """
    Orthographic camera looking down +y.

    `center` is the (x, z) world point drawn at the middle of the viewport and
    `upp` is the scale in world units per pixel.
    """

    def __init__(self, center=(0.0, 0.0), units_per_pixel=DEFAULT_UNITS_PER_PIXEL):
        self.center = [center[0], center[1]]
        self.upp = units_per_pixel
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def _half_viewport(self) -> Tuple[float, float]:
        return self.viewport_size[0] / 2, self.viewport_size[1] / 2

    def world_to_screen(self, pos: Vec3) -> Tuple[int, int]:
        half_w, half_h = self._half_viewport()
        return (int(half_w + (pos[0] - self.center[0]) / self.upp),
                int(half_h + (pos[2] - self.center[1]) / self.upp))

    def screen_to_world(self, screen: Tuple[int, int]) -> Vec3:
        half_w, half_h = self._half_viewport()
        return (self.center[0] + (screen[0] - half_w) * self.upp,
                0.0,
                self.center[1] + (screen[1] - half_h) * self.upp)

    def zoom(self, factor, pivot_screen: Optional[Tuple[int, int]] = None):
        """Scale the view by `factor` (>1 zooms in), holding `pivot_screen` fixed."""
        step = clamp(factor, MIN_ZOOM_STEP, MAX_ZOOM_STEP)
        new_upp = clamp(self.upp / step, MIN_UNITS_PER_PIXEL, MAX_UNITS_PER_PIXEL)
        if pivot_screen is None:
            self.upp = new_upp
            return

        # Re-anchor so the pivot's world point lands on the same pixel
        anchor_x, _, anchor_z = self.screen_to_world(pivot_screen)
        half_w, half_h = self._half_viewport()
        self.upp = new_upp
        self.center[0] = anchor_x - (pivot_screen[0] - half_w) * new_upp
        self.center[1] = anchor_z - (pivot_screen[1] - half_h) * new_upp

    def pan_pixels(self, dx_pixels, dy_pixels):
        """Drag the view; content follows the pointer."""
        self.center[0] -= dx_pixels * self.upp
        self.center[1] -= dy_pixels * self.upp

    def follow(self, pos: Vec3) -> None:
        self.center[0] = pos[0]
        self.center[1] = pos[2]

    def fit_radius(self, radius: float, margin: float = 1.1) -> None:
        """Scale so a circle of `radius` around the center fits the shorter side."""
        half_extent = min(self.viewport_size) / 2
        if radius <= 0 or half_extent <= 0:
            return
        self.upp = clamp(radius * margin / half_extent, MIN_UNITS_PER_PIXEL, MAX_UNITS_PER_PIXEL)

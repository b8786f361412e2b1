"""Zoom/pan state of the annotation canvas."""
from __future__ import annotations

import logging
from typing import Optional

from config import DEFAULT_CANVAS_CONFIG, CanvasConfig
from workbench.geometry import Point, Rect, clamp
from workbench.models import ViewTransform

logger = logging.getLogger(__name__)


class TransformManager:
    """Owns the view transform and applies pointer-anchored zoom steps."""

    def __init__(self, config: Optional[CanvasConfig] = None) -> None:
        self._config = config or DEFAULT_CANVAS_CONFIG
        self._transform = ViewTransform()

    @property
    def zoom(self) -> float:
        return self._transform.zoom

    @property
    def pan(self) -> Point:
        return self._transform.pan

    @property
    def transform(self) -> ViewTransform:
        return ViewTransform(zoom=self._transform.zoom, pan=self._transform.pan)

    def set_pan(self, pan: Point) -> None:
        # Unbounded on purpose: the page may be panned fully off-screen.
        self._transform.pan = pan

    def reset(self) -> None:
        self._transform = ViewTransform()

    def zoom_at(self, screen_point: Point, direction: int) -> bool:
        """
        Step the zoom by one increment keeping the local point under screen_point fixed.

        Returns False (and changes nothing) when the zoom is already at the bound.
        """
        if direction == 0:
            return False
        step = self._config.zoom_step if direction > 0 else -self._config.zoom_step
        current = self._transform.zoom
        next_zoom = clamp(current + step, self._config.min_zoom, self._config.max_zoom)
        if abs(next_zoom - current) < 1e-9:
            return False

        local = self._transform.to_local(screen_point)
        self._transform = ViewTransform(
            zoom=next_zoom,
            pan=Point(screen_point.x - next_zoom * local.x, screen_point.y - next_zoom * local.y),
        )
        logger.debug("Zoom %.2f -> %.2f at (%.1f, %.1f)", current, next_zoom, screen_point.x, screen_point.y)
        return True

    def content_rect(self, local_size: Optional[tuple[float, float]]) -> Optional[Rect]:
        """Screen-space bounding rect of content laid out at the local origin."""
        if local_size is None:
            return None
        width, height = local_size
        if width <= 0 or height <= 0:
            return None
        origin = self._transform.to_screen(Point(0.0, 0.0))
        zoom = self._transform.zoom
        return Rect(origin.x, origin.y, width * zoom, height * zoom)

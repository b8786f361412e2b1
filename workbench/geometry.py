"""Small geometry helpers shared by the canvas core (no Qt dependency)."""
from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """A 2D point or offset."""

    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle given by its top-left corner and size."""

    x: float
    y: float
    width: float
    height: float

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, point: Point) -> bool:
        return self.x <= point.x <= self.right and self.y <= point.y <= self.bottom


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]; high wins if the range is inverted."""
    return max(low, min(value, high)) if low <= high else high


def screen_to_fraction(point: Point, rect: Rect) -> Point:
    """Map a screen point to fractions of rect (0..1 inside the rect)."""
    return Point((point.x - rect.x) / rect.width, (point.y - rect.y) / rect.height)


def fraction_to_screen(fraction: Point, rect: Rect) -> Point:
    return Point(rect.x + fraction.x * rect.width, rect.y + fraction.y * rect.height)


def is_unit_fraction(point: Point) -> bool:
    """Return True if both coordinates lie in [0, 1]."""
    return 0.0 <= point.x <= 1.0 and 0.0 <= point.y <= 1.0

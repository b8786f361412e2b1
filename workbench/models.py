"""Records describing a workbench page and the markers placed on it."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from workbench.geometry import Point, clamp


class MarkerCategory(str, Enum):
    """Where the marked text sits relative to speech bubbles."""

    OUTSIDE = "outside"
    INSIDE = "inside"


class MarkerStatus(str, Enum):
    """Translation progress of a single marker."""

    EMPTY = "empty"
    TRANSLATED = "translated"
    PROOFED = "proofed"


class WorkbenchMode(str, Enum):
    """Whether the workbench allows edits or only viewing."""

    TRANSLATE = "translate"
    READ = "read"


@dataclass
class MarkerPosition:
    """Marker rectangle as fractions of the image's intrinsic size."""

    x: float
    y: float
    width: float
    height: float

    def clamped(self) -> "MarkerPosition":
        """Return a copy moved (and if needed shrunk) into the unit square."""
        width = clamp(self.width, 0.0, 1.0)
        height = clamp(self.height, 0.0, 1.0)
        return MarkerPosition(
            x=clamp(self.x, 0.0, 1.0 - width),
            y=clamp(self.y, 0.0, 1.0 - height),
            width=width,
            height=height,
        )

    @property
    def top_left(self) -> Point:
        return Point(self.x, self.y)


@dataclass
class Marker:
    """
    Rectangular annotation over a page image (a translation "source").
    """

    id: int  # unique within a page, generated monotonically
    position: MarkerPosition
    category: MarkerCategory = MarkerCategory.INSIDE
    status: MarkerStatus = MarkerStatus.EMPTY
    translation_text: str = ""
    proof_text: str = ""  # meaningful only while status is PROOFED


@dataclass
class PageRecord:
    """Page supplied by the host: image reference plus its markers."""

    image_reference: str
    page_index: int
    page_count: int
    title: str = ""
    markers: List[Marker] = field(default_factory=list)

    def get_marker(self, marker_id: int) -> Optional[Marker]:
        """Find a marker by its identifier or return None if missing."""
        for marker in self.markers:
            if marker.id == marker_id:
                return marker
        return None

    def __len__(self) -> int:
        return len(self.markers)


@dataclass
class ViewTransform:
    """Map from local canvas coordinates to screen pixels: screen = zoom * local + pan."""

    zoom: float = 1.0
    pan: Point = Point(0.0, 0.0)

    def to_screen(self, local: Point) -> Point:
        return Point(self.zoom * local.x + self.pan.x, self.zoom * local.y + self.pan.y)

    def to_local(self, screen: Point) -> Point:
        return Point((screen.x - self.pan.x) / self.zoom, (screen.y - self.pan.y) / self.zoom)


@dataclass
class PageProgress:
    """Marker counts for the current page."""

    total: int = 0
    translated: int = 0
    proofed: int = 0

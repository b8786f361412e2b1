"""Marker list ownership: creation, removal, selection and drag repositioning."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from config import DEFAULT_CANVAS_CONFIG, CanvasConfig
from workbench.geometry import Point, Rect, clamp, fraction_to_screen, is_unit_fraction, screen_to_fraction
from workbench.models import Marker, MarkerCategory, MarkerPosition

logger = logging.getLogger(__name__)


@dataclass
class _DragSession:
    marker_id: int
    pointer_id: int
    offset: Point  # pointer minus the marker's top-left, screen px
    start_position: MarkerPosition


def derive_labels(markers: Iterable[Marker]) -> Dict[int, str]:
    """
    Number markers per category in list order, e.g. "inside-1", "outside-1", "inside-2".

    Labels are recomputed from the list every time and never stored on markers.
    """
    counters: Dict[MarkerCategory, int] = {category: 0 for category in MarkerCategory}
    labels: Dict[int, str] = {}
    for marker in markers:
        counters[marker.category] += 1
        labels[marker.id] = f"{marker.category.value}-{counters[marker.category]}"
    return labels


class MarkerEngine:
    """Owns the markers of the current page and the active selection."""

    def __init__(self, config: Optional[CanvasConfig] = None) -> None:
        self._config = config or DEFAULT_CANVAS_CONFIG
        self._markers: List[Marker] = []
        self._selected_id: Optional[int] = None
        self._next_id: int = 1
        self._drag: Optional[_DragSession] = None

    # -------------------- list / selection --------------------
    @property
    def markers(self) -> List[Marker]:
        return self._markers

    @property
    def selected_id(self) -> Optional[int]:
        return self._selected_id

    def load(self, markers: List[Marker]) -> None:
        """Adopt a page's marker list (kept by reference so edits reach the host)."""
        self._markers = markers
        for marker in self._markers:
            marker.position = marker.position.clamped()
        self._next_id = max((m.id for m in self._markers), default=0) + 1
        self._selected_id = self._markers[0].id if self._markers else None
        self._drag = None

    def get(self, marker_id: Optional[int]) -> Optional[Marker]:
        if marker_id is None:
            return None
        for marker in self._markers:
            if marker.id == marker_id:
                return marker
        return None

    def selected_marker(self) -> Optional[Marker]:
        return self.get(self._selected_id)

    def select(self, marker_id: Optional[int]) -> bool:
        """Make marker_id active; returns True if the selection changed."""
        if marker_id == self._selected_id:
            return False
        if marker_id is not None and self.get(marker_id) is None:
            return False
        self._selected_id = marker_id
        return True

    # -------------------- creation / removal --------------------
    def create_at(
        self,
        screen_point: Point,
        rect: Optional[Rect],
        category: MarkerCategory = MarkerCategory.INSIDE,
    ) -> Optional[Marker]:
        """Insert a default-sized marker at the tapped point; None if the point is off the image."""
        if rect is None or rect.is_empty():
            return None
        fraction = screen_to_fraction(screen_point, rect)
        if not is_unit_fraction(fraction):
            return None

        nudge = self._config.marker_nudge
        position = MarkerPosition(
            x=fraction.x - nudge,
            y=fraction.y - nudge,
            width=self._config.marker_width,
            height=self._config.marker_height,
        ).clamped()
        marker = Marker(id=self._next_id, position=position, category=category)
        self._next_id += 1
        self._markers.append(marker)
        self._selected_id = marker.id
        logger.debug("Created marker %s at (%.3f, %.3f)", marker.id, position.x, position.y)
        return marker

    def remove(self, marker_id: int) -> bool:
        marker = self.get(marker_id)
        if marker is None:
            return False
        if self._drag is not None and self._drag.marker_id == marker_id:
            self._drag = None
        self._markers.remove(marker)
        if self._selected_id == marker_id:
            self._selected_id = self._markers[0].id if self._markers else None
        logger.debug("Removed marker %s", marker_id)
        return True

    # -------------------- geometry --------------------
    def marker_screen_rect(self, marker: Marker, rect: Rect) -> Rect:
        top_left = fraction_to_screen(marker.position.top_left, rect)
        return Rect(
            top_left.x,
            top_left.y,
            marker.position.width * rect.width,
            marker.position.height * rect.height,
        )

    def hit_test(self, screen_point: Point, rect: Optional[Rect]) -> Optional[int]:
        """Return the id of the topmost marker under screen_point, if any."""
        if rect is None or rect.is_empty():
            return None
        for marker in reversed(self._markers):
            if self.marker_screen_rect(marker, rect).contains(screen_point):
                return marker.id
        return None

    # -------------------- drag --------------------
    @property
    def is_dragging(self) -> bool:
        return self._drag is not None

    @property
    def drag_pointer_id(self) -> Optional[int]:
        return self._drag.pointer_id if self._drag is not None else None

    def begin_drag(self, marker_id: int, pointer_id: int, screen_point: Point, rect: Optional[Rect]) -> bool:
        if self._drag is not None or rect is None or rect.is_empty():
            return False
        marker = self.get(marker_id)
        if marker is None:
            return False
        top_left = fraction_to_screen(marker.position.top_left, rect)
        self._drag = _DragSession(
            marker_id=marker_id,
            pointer_id=pointer_id,
            offset=screen_point - top_left,
            start_position=MarkerPosition(**vars(marker.position)),
        )
        return True

    def update_drag(self, screen_point: Point, rect: Optional[Rect]) -> bool:
        if self._drag is None or rect is None or rect.is_empty():
            return False
        marker = self.get(self._drag.marker_id)
        if marker is None:
            self._drag = None
            return False
        top_left = screen_to_fraction(screen_point - self._drag.offset, rect)
        position = marker.position
        marker.position = MarkerPosition(
            x=clamp(top_left.x, 0.0, 1.0 - position.width),
            y=clamp(top_left.y, 0.0, 1.0 - position.height),
            width=position.width,
            height=position.height,
        )
        return True

    def end_drag(self) -> None:
        self._drag = None

    def cancel_drag(self) -> bool:
        """Abort the drag and put the marker back where it started."""
        if self._drag is None:
            return False
        marker = self.get(self._drag.marker_id)
        if marker is not None:
            marker.position = self._drag.start_position
        self._drag = None
        return True

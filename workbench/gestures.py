"""Tap-versus-pan disambiguation for pointer presses on the canvas background."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Protocol, Tuple

from config import DEFAULT_CANVAS_CONFIG, CanvasConfig
from workbench.geometry import Point, Rect
from workbench.transform import TransformManager

logger = logging.getLogger(__name__)


class PointerButton(Enum):
    PRIMARY = auto()
    SECONDARY = auto()
    OTHER = auto()


@dataclass(frozen=True)
class PointerEvent:
    """Toolkit-neutral pointer event in canvas screen coordinates."""

    pointer_id: int
    x: float
    y: float
    button: PointerButton = PointerButton.PRIMARY

    @property
    def point(self) -> Point:
        return Point(self.x, self.y)


class PointerSurface(Protocol):
    """What the gesture logic needs from the widget hosting the canvas."""

    def capture_pointer(self, pointer_id: int) -> None: ...

    def release_pointer(self, pointer_id: int) -> None: ...

    def content_size(self) -> Optional[Tuple[float, float]]:
        """Unscaled size of the page image in local coordinates; None until mounted."""
        ...


@dataclass
class GestureSession:
    pointer_id: int
    start_point: Point
    pan_at_start: Point
    has_crossed_threshold: bool = False


class GestureDisambiguator:
    """
    Turns one down/move/up stream into either a pan or a tap.

    A press that travels further than the panning threshold pans the view for the
    rest of the session; a press that never does is reported as a tap at the
    release point, provided that point is on the page.
    """

    def __init__(
        self,
        transform: TransformManager,
        surface: PointerSurface,
        config: Optional[CanvasConfig] = None,
    ) -> None:
        self._transform = transform
        self._surface = surface
        self._config = config or DEFAULT_CANVAS_CONFIG
        self._session: Optional[GestureSession] = None

    @property
    def session(self) -> Optional[GestureSession]:
        return self._session

    @property
    def is_active(self) -> bool:
        return self._session is not None

    def content_rect(self) -> Optional[Rect]:
        return self._transform.content_rect(self._surface.content_size())

    def pointer_down(self, event: PointerEvent) -> bool:
        if self._session is not None or event.button is not PointerButton.PRIMARY:
            return False
        self._surface.capture_pointer(event.pointer_id)
        self._session = GestureSession(
            pointer_id=event.pointer_id,
            start_point=event.point,
            pan_at_start=self._transform.pan,
        )
        return True

    def pointer_move(self, event: PointerEvent) -> bool:
        """Returns True if the pan changed."""
        session = self._session
        if session is None or session.pointer_id != event.pointer_id:
            return False
        if not session.has_crossed_threshold:
            if event.point.distance_to(session.start_point) < self._config.panning_threshold:
                return False
            session.has_crossed_threshold = True
        self._transform.set_pan(session.pan_at_start + (event.point - session.start_point))
        return True

    def pointer_up(self, event: PointerEvent) -> Optional[Point]:
        """Close the session; returns the release point if it was a tap on the page."""
        session = self._session
        if session is None or session.pointer_id != event.pointer_id:
            return None
        self._session = None
        self._surface.release_pointer(event.pointer_id)
        if session.has_crossed_threshold:
            return None
        rect = self.content_rect()
        if rect is None or not rect.contains(event.point):
            return None
        return event.point

    def pointer_cancel(self, event: Optional[PointerEvent] = None) -> bool:
        """Drop the session and undo any pan it applied."""
        session = self._session
        if session is None:
            return False
        if event is not None and session.pointer_id != event.pointer_id:
            return False
        self._session = None
        self._surface.release_pointer(session.pointer_id)
        if session.has_crossed_threshold:
            self._transform.set_pan(session.pan_at_start)
        logger.debug("Gesture for pointer %s cancelled", session.pointer_id)
        return True

    def wheel(self, screen_point: Point, direction: int) -> bool:
        if self._surface.content_size() is None:
            return False
        return self._transform.zoom_at(screen_point, direction)

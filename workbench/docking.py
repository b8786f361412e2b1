"""Placement of the floating marker editor relative to the selected marker."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from config import DEFAULT_CANVAS_CONFIG, CanvasConfig
from workbench.geometry import Point, Rect, clamp

Size = Tuple[float, float]

MANUAL_MOVE_MIN_PX = 1.0


@dataclass
class EditorAnchor:
    """Panel top-left in percent of the viewport."""

    x_pct: float
    y_pct: float
    manually_moved: bool = False


@dataclass
class _MoveSession:
    pointer_id: int
    start_point: Point
    anchor_at_start: EditorAnchor


class EditorDock:
    """Tracks where the editor panel sits and whether the user moved it by hand."""

    def __init__(self, config: Optional[CanvasConfig] = None) -> None:
        self._config = config or DEFAULT_CANVAS_CONFIG
        self._anchor = self._default_anchor()
        self._visible = False
        self._move: Optional[_MoveSession] = None

    @property
    def anchor(self) -> EditorAnchor:
        return self._anchor

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def is_moving(self) -> bool:
        return self._move is not None

    def _default_anchor(self) -> EditorAnchor:
        x_pct, y_pct = self._config.editor_default_anchor
        return EditorAnchor(x_pct=x_pct, y_pct=y_pct)

    def reset(self) -> None:
        self._anchor = self._default_anchor()
        self._visible = False
        self._move = None

    def on_selection_changed(
        self,
        marker_rect: Optional[Rect],
        viewport: Size,
        panel_size: Size = (0.0, 0.0),
    ) -> None:
        """
        Re-dock next to the newly selected marker unless the panel was moved by hand.

        A manual placement survives exactly one selection change; the flag is
        cleared either way so the following change docks again.
        """
        self._move = None
        if marker_rect is None:
            self.reset()
            return
        self._visible = True
        if not self._anchor.manually_moved:
            self._anchor = self._dock_anchor(marker_rect, viewport, panel_size)
        self._anchor.manually_moved = False

    def follow(self, marker_rect: Optional[Rect], viewport: Size, panel_size: Size = (0.0, 0.0)) -> None:
        """Keep the panel next to a marker that moved (zoom, pan, drag)."""
        if marker_rect is None or not self._visible or self._anchor.manually_moved or self._move is not None:
            return
        self._anchor = self._dock_anchor(marker_rect, viewport, panel_size)

    def _dock_anchor(self, marker_rect: Rect, viewport: Size, panel_size: Size) -> EditorAnchor:
        view_w, view_h = viewport
        if view_w <= 0 or view_h <= 0:
            return self._default_anchor()
        margin = self._config.editor_margin_pct
        panel_w_pct = panel_size[0] / view_w * 100.0
        panel_h_pct = panel_size[1] / view_h * 100.0
        x_pct = (marker_rect.right + self._config.editor_gap) / view_w * 100.0
        y_pct = marker_rect.y / view_h * 100.0
        return EditorAnchor(
            x_pct=clamp(x_pct, margin, max(margin, 100.0 - margin - panel_w_pct)),
            y_pct=clamp(y_pct, margin, max(margin, 100.0 - margin - panel_h_pct)),
        )

    # -------------------- manual move --------------------
    def begin_move(self, pointer_id: int, screen_point: Point) -> bool:
        if self._move is not None or not self._visible:
            return False
        self._move = _MoveSession(
            pointer_id=pointer_id,
            start_point=screen_point,
            anchor_at_start=EditorAnchor(self._anchor.x_pct, self._anchor.y_pct, self._anchor.manually_moved),
        )
        return True

    def update_move(self, pointer_id: int, screen_point: Point, viewport: Size) -> bool:
        move = self._move
        view_w, view_h = viewport
        if move is None or move.pointer_id != pointer_id or view_w <= 0 or view_h <= 0:
            return False
        delta = screen_point - move.start_point
        moved = self._anchor.manually_moved or max(abs(delta.x), abs(delta.y)) > MANUAL_MOVE_MIN_PX
        self._anchor = EditorAnchor(
            x_pct=clamp(move.anchor_at_start.x_pct + delta.x / view_w * 100.0, 0.0, 100.0),
            y_pct=clamp(move.anchor_at_start.y_pct + delta.y / view_h * 100.0, 0.0, 100.0),
            manually_moved=moved,
        )
        return True

    def end_move(self, pointer_id: int) -> bool:
        if self._move is None or self._move.pointer_id != pointer_id:
            return False
        self._move = None
        return True

    def cancel_move(self) -> bool:
        if self._move is None:
            return False
        self._anchor = self._move.anchor_at_start
        self._move = None
        return True

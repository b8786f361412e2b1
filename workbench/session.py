"""State container for the translation workbench canvas.

Owns the current page, view transform, marker engine, gesture state and the
editor dock, routes toolkit-neutral pointer events between them and notifies
subscribers about changes. Widgets only forward events and repaint.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, Dict, List, Optional

from config import DEFAULT_CANVAS_CONFIG, CanvasConfig
from workbench import status as marker_status
from workbench.docking import EditorDock, Size
from workbench.geometry import Point, Rect
from workbench.gestures import GestureDisambiguator, PointerButton, PointerEvent, PointerSurface
from workbench.markers import MarkerEngine, derive_labels
from workbench.models import Marker, MarkerStatus, PageProgress, PageRecord, WorkbenchMode
from workbench.transform import TransformManager

logger = logging.getLogger(__name__)

EVENT_CHANGED = "changed"
EVENT_SELECTION_CHANGED = "selection_changed"
EVENT_PAGE_INDEX_CHANGED = "page_index_changed"
EVENT_BACK = "back"

Listener = Callable[..., None]


class WorkbenchSession:
    """Everything the canvas needs for one open page."""

    def __init__(
        self,
        surface: PointerSurface,
        config: Optional[CanvasConfig] = None,
        mode: WorkbenchMode = WorkbenchMode.TRANSLATE,
    ) -> None:
        self._config = config or DEFAULT_CANVAS_CONFIG
        self._surface = surface
        self._mode = mode
        self.transform = TransformManager(self._config)
        self.gestures = GestureDisambiguator(self.transform, surface, self._config)
        self.markers = MarkerEngine(self._config)
        self.dock = EditorDock(self._config)
        self._page: Optional[PageRecord] = None
        self._viewport: Size = (0.0, 0.0)
        self._panel_size: Size = (0.0, 0.0)
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    # -------------------- observers --------------------
    def subscribe(self, event: str, callback: Listener) -> Callable[[], None]:
        """Register callback for event; returns a function that unregisters it."""
        self._listeners[event].append(callback)

        def unsubscribe() -> None:
            callbacks = self._listeners.get(event, [])
            if callback in callbacks:
                callbacks.remove(callback)

        return unsubscribe

    def _emit(self, event: str, *args: Any) -> None:
        for callback in list(self._listeners.get(event, [])):
            callback(*args)

    def _changed(self) -> None:
        self._emit(EVENT_CHANGED)

    # -------------------- page / mode --------------------
    @property
    def page(self) -> Optional[PageRecord]:
        return self._page

    @property
    def mode(self) -> WorkbenchMode:
        return self._mode

    @property
    def editable(self) -> bool:
        return self._mode is WorkbenchMode.TRANSLATE and self._page is not None

    def set_mode(self, mode: WorkbenchMode) -> None:
        if mode is self._mode:
            return
        self._mode = mode
        if mode is WorkbenchMode.READ:
            self._abort_drag()
        self._changed()

    def load_page(self, page: PageRecord) -> None:
        """Replace the whole page: markers, transform, selection and pending gestures."""
        self.pointer_cancel()
        self._page = page
        self.transform.reset()
        self.markers.load(page.markers)
        self.dock.reset()
        logger.info(
            "Loaded page %s/%s (%s markers) from %s",
            page.page_index + 1,
            page.page_count,
            len(page.markers),
            page.image_reference,
        )
        self._selection_changed()
        self._changed()

    def labels(self) -> Dict[int, str]:
        return derive_labels(self.markers.markers)

    def progress(self) -> PageProgress:
        markers = self.markers.markers
        return PageProgress(
            total=len(markers),
            translated=sum(1 for m in markers if m.status is not MarkerStatus.EMPTY),
            proofed=sum(1 for m in markers if m.status is MarkerStatus.PROOFED),
        )

    # -------------------- geometry --------------------
    def content_rect(self) -> Optional[Rect]:
        return self.gestures.content_rect()

    def marker_rect(self, marker: Optional[Marker]) -> Optional[Rect]:
        rect = self.content_rect()
        if marker is None or rect is None:
            return None
        return self.markers.marker_screen_rect(marker, rect)

    def set_viewport(self, viewport: Size, panel_size: Optional[Size] = None) -> None:
        self._viewport = viewport
        if panel_size is not None:
            self._panel_size = panel_size
        self._follow_selected()

    def _follow_selected(self) -> None:
        self.dock.follow(self.marker_rect(self.markers.selected_marker()), self._viewport, self._panel_size)

    def _selection_changed(self) -> None:
        selected = self.markers.selected_marker()
        self.dock.on_selection_changed(self.marker_rect(selected), self._viewport, self._panel_size)
        self._emit(EVENT_SELECTION_CHANGED, self.markers.selected_id)

    # -------------------- pointer routing --------------------
    def pointer_down(self, event: PointerEvent) -> bool:
        if self._page is None:
            return False
        if self.gestures.is_active or self.markers.is_dragging:
            return False
        marker_id = self.markers.hit_test(event.point, self.content_rect())
        if marker_id is None:
            return self.gestures.pointer_down(event)

        # The marker consumes the press so no canvas gesture opens for it.
        if event.button is PointerButton.SECONDARY:
            if self.editable:
                self.remove(marker_id)
            return True
        if event.button is not PointerButton.PRIMARY:
            return True
        self.select(marker_id)
        if self.editable and self.markers.begin_drag(marker_id, event.pointer_id, event.point, self.content_rect()):
            self._surface.capture_pointer(event.pointer_id)
        return True

    def pointer_move(self, event: PointerEvent) -> bool:
        if self.markers.is_dragging:
            if self.markers.drag_pointer_id != event.pointer_id:
                return False
            if not self.markers.update_drag(event.point, self.content_rect()):
                return False
        elif not self.gestures.pointer_move(event):
            return False
        self._follow_selected()
        self._changed()
        return True

    def pointer_up(self, event: PointerEvent) -> bool:
        if self.markers.is_dragging:
            if self.markers.drag_pointer_id != event.pointer_id:
                return False
            self.markers.end_drag()
            self._surface.release_pointer(event.pointer_id)
            self._changed()
            return True

        was_active = self.gestures.is_active
        tap_point = self.gestures.pointer_up(event)
        if tap_point is None or not self.editable:
            return was_active
        marker = self.markers.create_at(tap_point, self.content_rect())
        if marker is not None:
            self._selection_changed()
            self._changed()
        return True

    def pointer_cancel(self, event: Optional[PointerEvent] = None) -> bool:
        """Abort any open gesture, marker drag or editor move, restoring prior state."""
        cancelled = self.gestures.pointer_cancel(event)
        if self.markers.is_dragging and (event is None or self.markers.drag_pointer_id == event.pointer_id):
            cancelled = self._abort_drag() or cancelled
        cancelled = self.dock.cancel_move() or cancelled
        if cancelled:
            self._changed()
        return cancelled

    def _abort_drag(self) -> bool:
        pointer_id = self.markers.drag_pointer_id
        if not self.markers.cancel_drag():
            return False
        if pointer_id is not None:
            self._surface.release_pointer(pointer_id)
        return True

    def wheel(self, screen_point: Point, direction: int) -> bool:
        if not self.gestures.wheel(screen_point, direction):
            return False
        self._follow_selected()
        self._changed()
        return True

    def zoom_step(self, direction: int) -> bool:
        """Toolbar zoom: anchored at the viewport centre."""
        width, height = self._viewport
        return self.wheel(Point(width / 2.0, height / 2.0), direction)

    def reset_view(self) -> None:
        self.transform.reset()
        self._follow_selected()
        self._changed()

    # -------------------- selection / removal --------------------
    def select(self, marker_id: Optional[int]) -> bool:
        if not self.markers.select(marker_id):
            return False
        self._selection_changed()
        self._changed()
        return True

    def clear_selection(self) -> bool:
        return self.select(None)

    def remove(self, marker_id: int) -> bool:
        if not self.editable:
            return False
        previous = self.markers.selected_id
        if not self.markers.remove(marker_id):
            return False
        if self.markers.selected_id != previous:
            self._selection_changed()
        self._changed()
        return True

    def remove_selected(self) -> bool:
        selected = self.markers.selected_id
        return selected is not None and self.remove(selected)

    # -------------------- text / status --------------------
    def set_translation_text(self, text: str) -> bool:
        marker = self.markers.selected_marker()
        if marker is None or not self.editable:
            return False
        marker_status.set_translation_text(marker, text)
        self._changed()
        return True

    def set_proof_text(self, text: str) -> bool:
        marker = self.markers.selected_marker()
        if marker is None or not self.editable:
            return False
        marker_status.set_proof_text(marker, text)
        self._changed()
        return True

    def toggle_proof(self) -> bool:
        marker = self.markers.selected_marker()
        if marker is None or not self.editable:
            return False
        if not marker_status.toggle_proof(marker):
            return False
        self._changed()
        return True

    # -------------------- editor panel --------------------
    def editor_pointer_down(self, pointer_id: int, screen_point: Point) -> bool:
        return self.dock.begin_move(pointer_id, screen_point)

    def editor_pointer_move(self, pointer_id: int, screen_point: Point) -> bool:
        if not self.dock.update_move(pointer_id, screen_point, self._viewport):
            return False
        self._changed()
        return True

    def editor_pointer_up(self, pointer_id: int) -> bool:
        return self.dock.end_move(pointer_id)

    # -------------------- navigation --------------------
    def request_page(self, index: int) -> bool:
        page = self._page
        if page is None:
            return False
        if index < 0 or index >= page.page_count:
            logger.warning("Ignoring navigation to page %s (page count %s)", index, page.page_count)
            return False
        if index == page.page_index:
            return False
        logger.debug("Requesting page %s", index)
        self._emit(EVENT_PAGE_INDEX_CHANGED, index)
        return True

    def go_previous(self) -> bool:
        return self._page is not None and self.request_page(self._page.page_index - 1)

    def go_next(self) -> bool:
        return self._page is not None and self.request_page(self._page.page_index + 1)

    def go_back(self) -> None:
        self.pointer_cancel()
        self._emit(EVENT_BACK)

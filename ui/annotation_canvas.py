"""Canvas widget that draws the page with its markers and feeds pointer input to the workbench session."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from PySide6 import QtCore, QtGui, QtWidgets
from PySide6.QtCore import Signal

from config import CanvasConfig
from workbench.gestures import PointerButton, PointerEvent
from workbench.geometry import Point, Rect
from workbench.models import Marker, MarkerStatus, PageRecord, WorkbenchMode
from workbench.session import EVENT_CHANGED, EVENT_SELECTION_CHANGED, WorkbenchSession

logger = logging.getLogger(__name__)

MOUSE_POINTER_ID = 0

STATUS_COLORS = {
    MarkerStatus.EMPTY: QtGui.QColor(220, 70, 70),
    MarkerStatus.TRANSLATED: QtGui.QColor(0, 120, 215),
    MarkerStatus.PROOFED: QtGui.QColor(40, 160, 80),
}


def _to_qrect(rect: Rect) -> QtCore.QRectF:
    return QtCore.QRectF(rect.x, rect.y, rect.width, rect.height)


def _button_of(event: QtGui.QMouseEvent) -> PointerButton:
    button = event.button()
    if button == QtCore.Qt.MouseButton.LeftButton:
        return PointerButton.PRIMARY
    if button == QtCore.Qt.MouseButton.RightButton:
        return PointerButton.SECONDARY
    return PointerButton.OTHER


class AnnotationCanvas(QtWidgets.QWidget):
    """Pan/zoom surface for one page image; the session holds all state."""

    selectionChanged = Signal(object)  # marker id or None
    stateChanged = Signal()

    def __init__(
        self,
        config: Optional[CanvasConfig] = None,
        mode: WorkbenchMode = WorkbenchMode.TRANSLATE,
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._pixmap: Optional[QtGui.QPixmap] = None
        self._base_size: Optional[Tuple[float, float]] = None
        self._filter_installed: bool = False
        self.session = WorkbenchSession(self, config, mode)
        self._unsubscribers: List[Callable[[], None]] = [
            self.session.subscribe(EVENT_CHANGED, self._on_session_changed),
            self.session.subscribe(EVENT_SELECTION_CHANGED, self.selectionChanged.emit),
        ]

        self.setFocusPolicy(QtCore.Qt.FocusPolicy.StrongFocus)
        self.setContextMenuPolicy(QtCore.Qt.ContextMenuPolicy.PreventContextMenu)
        self.setMinimumSize(200, 200)
        self.setAutoFillBackground(True)

    # -------------------- pointer surface --------------------
    def capture_pointer(self, pointer_id: int) -> None:
        self.grabMouse()

    def release_pointer(self, pointer_id: int) -> None:
        if QtWidgets.QWidget.mouseGrabber() is self:
            self.releaseMouse()

    def content_size(self) -> Optional[Tuple[float, float]]:
        if not self.isVisible():
            return None
        return self._base_size

    # -------------------- page --------------------
    def set_page(self, page: PageRecord) -> None:
        """Load the page image and hand the record to the session."""
        if not Path(page.image_reference).is_file():
            raise FileNotFoundError(f"Image file not found: {page.image_reference}")
        pixmap = QtGui.QPixmap(page.image_reference)
        if pixmap.isNull():
            raise ValueError(f"Failed to load image: {page.image_reference}")
        self._pixmap = pixmap
        self._update_base_size()
        self.session.load_page(page)

    def clear_page(self) -> None:
        self.session.pointer_cancel()
        self._pixmap = None
        self._base_size = None
        self.update()

    def _update_base_size(self) -> None:
        """Fit the pixmap inside the widget at zoom 1, anchored at the top-left."""
        if self._pixmap is None or self._pixmap.width() <= 0 or self._pixmap.height() <= 0:
            self._base_size = None
            return
        scale = min(self.width() / self._pixmap.width(), self.height() / self._pixmap.height())
        scale = max(0.01, scale)
        self._base_size = (self._pixmap.width() * scale, self._pixmap.height() * scale)

    def viewport_size(self) -> Tuple[float, float]:
        return (float(self.width()), float(self.height()))

    # -------------------- lifetime --------------------
    def showEvent(self, event: QtGui.QShowEvent) -> None:  # type: ignore[override]
        super().showEvent(event)
        app = QtWidgets.QApplication.instance()
        if app is not None and not self._filter_installed:
            app.installEventFilter(self)
            self._filter_installed = True

    def hideEvent(self, event: QtGui.QHideEvent) -> None:  # type: ignore[override]
        self.session.pointer_cancel()
        self._remove_app_filter()
        super().hideEvent(event)

    def _remove_app_filter(self) -> None:
        app = QtWidgets.QApplication.instance()
        if app is not None and self._filter_installed:
            app.removeEventFilter(self)
        self._filter_installed = False

    def dispose(self) -> None:
        """Detach from the application and the session before the widget goes away."""
        self.session.pointer_cancel()
        self._remove_app_filter()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def eventFilter(self, obj: QtCore.QObject, event: QtCore.QEvent) -> bool:  # type: ignore[override]
        # Interruptions while a press is in flight abort it without committing anything.
        if event.type() in (
            QtCore.QEvent.Type.ApplicationDeactivate,
            QtCore.QEvent.Type.TouchCancel,
        ):
            if self.session.pointer_cancel():
                logger.debug("Pointer interaction interrupted by %s", event.type())
        return super().eventFilter(obj, event)

    # -------------------- input --------------------
    def _pointer_event(self, event: QtGui.QMouseEvent) -> PointerEvent:
        pos = event.position()
        return PointerEvent(MOUSE_POINTER_ID, pos.x(), pos.y(), _button_of(event))

    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        self.setFocus(QtCore.Qt.FocusReason.MouseFocusReason)
        if self.session.pointer_down(self._pointer_event(event)):
            event.accept()
            return
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        pos = event.position()
        if self.session.pointer_move(PointerEvent(MOUSE_POINTER_ID, pos.x(), pos.y())):
            event.accept()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        if self.session.pointer_up(self._pointer_event(event)):
            event.accept()
            return
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event: QtGui.QWheelEvent) -> None:  # type: ignore[override]
        delta = event.angleDelta().y()
        if delta == 0:
            super().wheelEvent(event)
            return
        pos = event.position()
        self.session.wheel(Point(pos.x(), pos.y()), 1 if delta > 0 else -1)
        event.accept()

    def keyPressEvent(self, event: QtGui.QKeyEvent) -> None:  # type: ignore[override]
        key = event.key()
        if key in (QtCore.Qt.Key.Key_Delete, QtCore.Qt.Key.Key_Backspace):
            self.session.remove_selected()
            return
        if key == QtCore.Qt.Key.Key_Escape:
            self.session.clear_selection()
            return
        super().keyPressEvent(event)

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._update_base_size()
        self.session.set_viewport(self.viewport_size())
        self.update()

    # -------------------- painting --------------------
    def _on_session_changed(self) -> None:
        self.update()
        self.stateChanged.emit()

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:  # type: ignore[override]
        painter = QtGui.QPainter(self)
        painter.fillRect(self.rect(), QtGui.QColor(48, 48, 48))
        rect = self.session.content_rect()
        if self._pixmap is None or rect is None:
            painter.end()
            return

        painter.setRenderHint(QtGui.QPainter.RenderHint.SmoothPixmapTransform, True)
        painter.drawPixmap(_to_qrect(rect), self._pixmap, QtCore.QRectF(self._pixmap.rect()))

        painter.setRenderHint(QtGui.QPainter.RenderHint.Antialiasing, True)
        labels = self.session.labels()
        selected_id = self.session.markers.selected_id
        for marker in self.session.markers.markers:
            self._paint_marker(painter, marker, labels.get(marker.id, ""), marker.id == selected_id)
        painter.end()

    def _paint_marker(self, painter: QtGui.QPainter, marker: Marker, label: str, selected: bool) -> None:
        marker_rect = self.session.marker_rect(marker)
        if marker_rect is None:
            return
        qrect = _to_qrect(marker_rect)
        color = QtGui.QColor(STATUS_COLORS[marker.status])

        fill = QtGui.QColor(color)
        fill.setAlpha(60 if selected else 30)
        pen = QtGui.QPen(color)
        pen.setWidthF(2.5 if selected else 1.5)
        if not selected:
            pen.setStyle(QtCore.Qt.PenStyle.DashLine)
        painter.setPen(pen)
        painter.setBrush(fill)
        painter.drawRect(qrect)

        if label:
            metrics = painter.fontMetrics()
            tag = QtCore.QRectF(
                qrect.left(),
                qrect.top() - metrics.height() - 2,
                metrics.horizontalAdvance(label) + 8,
                metrics.height() + 2,
            )
            painter.setPen(QtCore.Qt.PenStyle.NoPen)
            painter.setBrush(color)
            painter.drawRect(tag)
            painter.setPen(QtCore.Qt.GlobalColor.white)
            painter.drawText(tag, QtCore.Qt.AlignmentFlag.AlignCenter, label)

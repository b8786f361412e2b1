"""Translation workbench: toolbar, annotation canvas and floating editor."""
from __future__ import annotations

from typing import Callable, List, Optional

from PySide6 import QtWidgets
from PySide6.QtCore import Signal

from config import CanvasConfig
from ui.annotation_canvas import AnnotationCanvas
from ui.floating_editor import FloatingEditor
from ui.page_toolbar import PageToolsToolbar
from workbench.models import PageRecord, WorkbenchMode
from workbench.session import EVENT_BACK, EVENT_PAGE_INDEX_CHANGED


class WorkbenchView(QtWidgets.QWidget):
    """
    Hosts one page at a time. Navigation is only requested here; the owner answers
    pageIndexChanged by supplying the next record through set_page().
    """

    pageIndexChanged = Signal(int)
    backRequested = Signal()

    def __init__(
        self,
        config: Optional[CanvasConfig] = None,
        mode: WorkbenchMode = WorkbenchMode.TRANSLATE,
        parent: Optional[QtWidgets.QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.toolbar = PageToolsToolbar(self)
        self.canvas = AnnotationCanvas(config, mode, self)
        self.editor = FloatingEditor(self.canvas)
        session = self.canvas.session

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)
        layout.addWidget(self.toolbar)
        layout.addWidget(self.canvas, 1)

        self.toolbar.backRequested.connect(session.go_back)
        self.toolbar.previousRequested.connect(session.go_previous)
        self.toolbar.nextRequested.connect(session.go_next)
        self.toolbar.zoomInRequested.connect(lambda: session.zoom_step(1))
        self.toolbar.zoomOutRequested.connect(lambda: session.zoom_step(-1))
        self.toolbar.zoomResetRequested.connect(session.reset_view)
        self.canvas.stateChanged.connect(self._refresh_toolbar)

        self._unsubscribers: List[Callable[[], None]] = [
            session.subscribe(EVENT_PAGE_INDEX_CHANGED, self.pageIndexChanged.emit),
            session.subscribe(EVENT_BACK, self.backRequested.emit),
        ]
        self.toolbar.set_mode(mode)

    def set_page(self, page: PageRecord) -> None:
        self.canvas.set_page(page)
        self._refresh_toolbar()

    def set_mode(self, mode: WorkbenchMode) -> None:
        self.canvas.session.set_mode(mode)
        self.toolbar.set_mode(mode)

    def _refresh_toolbar(self) -> None:
        session = self.canvas.session
        page = session.page
        if page is not None:
            self.toolbar.set_page_info(page.title, page.page_index, page.page_count)
        self.toolbar.set_zoom(session.transform.zoom)
        self.toolbar.set_progress(session.progress())

    def dispose(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.canvas.dispose()

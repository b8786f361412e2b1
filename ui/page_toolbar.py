"""Toolbar with page navigation, zoom controls and page progress."""
from __future__ import annotations

from typing import Dict, Optional

from PySide6 import QtCore, QtWidgets

from workbench.models import PageProgress, WorkbenchMode

TOOLTIPS: Dict[str, str] = {
    "back": "Leave the workbench",
    "prev": "Previous page",
    "next": "Next page",
    "zoom_in": "Zoom in",
    "zoom_out": "Zoom out",
    "zoom_reset": "Reset view",
}


class PageToolsToolbar(QtWidgets.QWidget):
    """Compact toolbar above the annotation canvas."""

    backRequested = QtCore.Signal()
    previousRequested = QtCore.Signal()
    nextRequested = QtCore.Signal()
    zoomInRequested = QtCore.Signal()
    zoomOutRequested = QtCore.Signal()
    zoomResetRequested = QtCore.Signal()

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self._build_ui()

    # -------------------- setup helpers -------------------- #
    def _build_ui(self) -> None:
        layout = QtWidgets.QHBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.setSpacing(4)

        self.btn_back = self._make_tool_button("⬅", "back")
        self.btn_prev = self._make_tool_button("<", "prev")
        self.lbl_page = QtWidgets.QLabel("", self)
        self.btn_next = self._make_tool_button(">", "next")
        self.btn_back.clicked.connect(self.backRequested)
        self.btn_prev.clicked.connect(self.previousRequested)
        self.btn_next.clicked.connect(self.nextRequested)
        for widget in (self.btn_back, self.btn_prev, self.lbl_page, self.btn_next):
            layout.addWidget(widget)

        layout.addSpacing(8)
        self.btn_zoom_out = self._make_tool_button("➖", "zoom_out")
        self.lbl_zoom = QtWidgets.QLabel("100%", self)
        self.lbl_zoom.setMinimumWidth(44)
        self.lbl_zoom.setAlignment(QtCore.Qt.AlignmentFlag.AlignCenter)
        self.btn_zoom_in = self._make_tool_button("➕", "zoom_in")
        self.btn_zoom_reset = self._make_tool_button("🔁", "zoom_reset")
        self.btn_zoom_out.clicked.connect(self.zoomOutRequested)
        self.btn_zoom_in.clicked.connect(self.zoomInRequested)
        self.btn_zoom_reset.clicked.connect(self.zoomResetRequested)
        for widget in (self.btn_zoom_out, self.lbl_zoom, self.btn_zoom_in, self.btn_zoom_reset):
            layout.addWidget(widget)

        layout.addStretch(1)
        self.lbl_progress = QtWidgets.QLabel("", self)
        self.lbl_progress.setStyleSheet("color: #666;")
        self.lbl_mode = QtWidgets.QLabel("", self)
        layout.addWidget(self.lbl_progress)
        layout.addSpacing(8)
        layout.addWidget(self.lbl_mode)

    def _make_tool_button(self, text: str, tooltip_key: str) -> QtWidgets.QToolButton:
        btn = QtWidgets.QToolButton(self)
        btn.setText(text)
        btn.setAutoRaise(True)
        btn.setCursor(QtCore.Qt.CursorShape.PointingHandCursor)
        font = btn.font()
        font.setPointSize(max(font.pointSize() + 2, 10))
        btn.setFont(font)
        btn.setToolButtonStyle(QtCore.Qt.ToolButtonStyle.ToolButtonTextOnly)
        tooltip = TOOLTIPS.get(tooltip_key, "")
        btn.setToolTip(tooltip)
        btn.setStatusTip(tooltip)
        return btn

    # -------------------- state helpers -------------------- #
    def set_page_info(self, title: str, page_index: int, page_count: int) -> None:
        """Update page label and enable previous/next according to the range."""
        self.lbl_page.setText(f"{title}  ({page_index + 1} / {page_count})")
        self.btn_prev.setEnabled(page_index > 0)
        self.btn_next.setEnabled(page_index + 1 < page_count)

    def set_zoom(self, zoom: float) -> None:
        self.lbl_zoom.setText(f"{round(zoom * 100)}%")

    def set_progress(self, progress: PageProgress) -> None:
        self.lbl_progress.setText(
            f"{progress.translated}/{progress.total} translated · {progress.proofed} proofed"
        )

    def set_mode(self, mode: WorkbenchMode) -> None:
        self.lbl_mode.setText("Read only" if mode is WorkbenchMode.READ else "")

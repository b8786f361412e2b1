"""Floating panel for editing the selected marker's translation and proof text."""
from __future__ import annotations

from typing import Optional, cast

from PySide6 import QtCore, QtGui, QtWidgets

from ui.annotation_canvas import MOUSE_POINTER_ID, AnnotationCanvas
from workbench.geometry import Point
from workbench.models import MarkerStatus

STATUS_TEXT = {
    MarkerStatus.EMPTY: "Empty",
    MarkerStatus.TRANSLATED: "Translated",
    MarkerStatus.PROOFED: "Proofed",
}


class FloatingEditor(QtWidgets.QFrame):
    """
    Editor panel living on top of the canvas.

    Its position comes from the session's editor dock; dragging the header moves it
    by hand, which keeps it in place for the rest of the current selection.
    """

    def __init__(self, canvas: AnnotationCanvas) -> None:
        super().__init__(canvas)
        self._canvas = canvas
        self._session = canvas.session

        self.setObjectName("floatingEditor")
        self.setFrameShape(QtWidgets.QFrame.Shape.StyledPanel)
        # Presses on the panel never reach the canvas underneath.
        self.setAttribute(QtCore.Qt.WidgetAttribute.WA_NoMousePropagation, True)
        self.setAutoFillBackground(True)
        self.setFixedWidth(260)

        self._header = QtWidgets.QLabel(self)
        self._header.setCursor(QtGui.QCursor(QtCore.Qt.CursorShape.SizeAllCursor))
        self._header.setStyleSheet("font-weight: bold; padding: 2px;")
        self._status_label = QtWidgets.QLabel(self)
        self._status_label.setStyleSheet("color: #666;")

        self.translation_edit = QtWidgets.QPlainTextEdit(self)
        self.translation_edit.setPlaceholderText("Translation")
        self.translation_edit.setFixedHeight(72)
        self.proof_edit = QtWidgets.QPlainTextEdit(self)
        self.proof_edit.setPlaceholderText("Proofread text")
        self.proof_edit.setFixedHeight(56)
        self.btn_proof = QtWidgets.QPushButton(self)

        header_layout = QtWidgets.QHBoxLayout()
        header_layout.setContentsMargins(0, 0, 0, 0)
        header_layout.addWidget(self._header, 1)
        header_layout.addWidget(self._status_label)

        layout = QtWidgets.QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(4)
        layout.addLayout(header_layout)
        layout.addWidget(self.translation_edit)
        layout.addWidget(self.proof_edit)
        layout.addWidget(self.btn_proof)

        self.translation_edit.textChanged.connect(self._on_translation_edited)
        self.proof_edit.textChanged.connect(self._on_proof_edited)
        self.btn_proof.clicked.connect(self._on_proof_clicked)
        self._header.installEventFilter(self)
        canvas.selectionChanged.connect(self._on_selection_changed)
        canvas.stateChanged.connect(self._sync)

        self.adjustSize()
        self.hide()

    # -------------------- state sync --------------------
    def panel_size(self) -> tuple[float, float]:
        return (float(self.width()), float(self.height()))

    def _on_selection_changed(self, marker_id: Optional[int]) -> None:
        self._load_texts()
        self._sync()

    def _load_texts(self) -> None:
        marker = self._session.markers.selected_marker()
        for edit, text in (
            (self.translation_edit, marker.translation_text if marker else ""),
            (self.proof_edit, marker.proof_text if marker else ""),
        ):
            if edit.toPlainText() == text:
                continue
            edit.blockSignals(True)
            edit.setPlainText(text)
            edit.blockSignals(False)

    def _sync(self) -> None:
        marker = self._session.markers.selected_marker()
        if marker is None or not self._session.dock.visible:
            self.hide()
            return

        editable = self._session.editable
        self._header.setText(self._session.labels().get(marker.id, ""))
        self._status_label.setText(STATUS_TEXT[marker.status])
        self.translation_edit.setReadOnly(not editable)
        self.proof_edit.setReadOnly(not editable)
        if marker.status is MarkerStatus.PROOFED:
            self.btn_proof.setText("Un-proof")
            self.btn_proof.setEnabled(editable)
        else:
            self.btn_proof.setText("Mark proofed")
            self.btn_proof.setEnabled(
                editable and bool(marker.proof_text.strip() or marker.translation_text.strip())
            )
        self._reposition()
        self.show()
        self.raise_()

    def _reposition(self) -> None:
        anchor = self._session.dock.anchor
        x = int(anchor.x_pct / 100.0 * self._canvas.width())
        y = int(anchor.y_pct / 100.0 * self._canvas.height())
        self.move(x, y)

    def resizeEvent(self, event: QtGui.QResizeEvent) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        self._session.set_viewport(self._canvas.viewport_size(), self.panel_size())

    # -------------------- edits --------------------
    def _on_translation_edited(self) -> None:
        self._session.set_translation_text(self.translation_edit.toPlainText())

    def _on_proof_edited(self) -> None:
        self._session.set_proof_text(self.proof_edit.toPlainText())

    def _on_proof_clicked(self) -> None:
        if self._session.toggle_proof():
            self._load_texts()
            self._sync()

    # -------------------- mouse --------------------
    def mousePressEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        event.accept()

    def mouseMoveEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        event.accept()

    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:  # type: ignore[override]
        event.accept()

    # -------------------- header drag --------------------
    def _canvas_point(self, event: QtGui.QMouseEvent) -> Point:
        pos = self._canvas.mapFromGlobal(event.globalPosition().toPoint())
        return Point(float(pos.x()), float(pos.y()))

    def eventFilter(self, obj: QtCore.QObject, event: QtCore.QEvent) -> bool:  # type: ignore[override]
        if obj is not self._header:
            return super().eventFilter(obj, event)
        event_type = event.type()
        if event_type in (QtCore.QEvent.Type.MouseButtonPress, QtCore.QEvent.Type.MouseButtonDblClick):
            me = cast(QtGui.QMouseEvent, event)
            if me.button() == QtCore.Qt.MouseButton.LeftButton and event_type == QtCore.QEvent.Type.MouseButtonPress:
                self._session.editor_pointer_down(MOUSE_POINTER_ID, self._canvas_point(me))
            return True
        if event_type == QtCore.QEvent.Type.MouseMove:
            me = cast(QtGui.QMouseEvent, event)
            if self._session.dock.is_moving and self._session.editor_pointer_move(
                MOUSE_POINTER_ID, self._canvas_point(me)
            ):
                self._reposition()
            return True
        if event_type == QtCore.QEvent.Type.MouseButtonRelease:
            if self._session.dock.is_moving:
                self._session.editor_pointer_up(MOUSE_POINTER_ID)
            return True
        return super().eventFilter(obj, event)

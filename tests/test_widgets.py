from __future__ import annotations

from pathlib import Path
from typing import Iterator, List

import pytest
from PySide6 import QtCore, QtGui, QtWidgets
from PySide6.QtTest import QTest

from conftest import make_marker
from main import apply_theme
from settings_manager import load_global_settings
from ui.main_window import MainWindow
from ui.workbench_view import WorkbenchView
from workbench.models import Marker, PageRecord, WorkbenchMode

NO_MODIFIER = QtCore.Qt.KeyboardModifier.NoModifier
LEFT = QtCore.Qt.MouseButton.LeftButton
RIGHT = QtCore.Qt.MouseButton.RightButton


@pytest.fixture
def page_image(tmp_path: Path) -> Path:
    image = QtGui.QImage(400, 300, QtGui.QImage.Format.Format_RGB32)
    image.fill(QtGui.QColor("white"))
    path = tmp_path / "page.png"
    assert image.save(str(path))
    return path


@pytest.fixture
def markers() -> List[Marker]:
    # Marker 2 covers the right part of the page, where the editor docks.
    return [make_marker(1, x=0.05, y=0.05, w=0.1, h=0.1), make_marker(2, x=0.3, y=0.0, w=0.7, h=1.0)]


@pytest.fixture
def view(qapp, page_image: Path, markers: List[Marker]) -> Iterator[WorkbenchView]:
    widget = WorkbenchView()
    widget.resize(900, 700)
    widget.show()
    qapp.processEvents()
    widget.set_page(PageRecord(str(page_image), 0, 1, "Demo", markers))
    qapp.processEvents()
    yield widget
    widget.dispose()
    widget.close()
    widget.deleteLater()
    qapp.processEvents()


def _click(widget: QtWidgets.QWidget, button: QtCore.Qt.MouseButton, pos: QtCore.QPoint = QtCore.QPoint()) -> None:
    QTest.mouseClick(widget, button, NO_MODIFIER, pos)


@pytest.mark.parametrize("button", [LEFT, RIGHT])
def test_clicks_on_editor_chrome_do_not_reach_canvas(view: WorkbenchView, markers: List[Marker], button) -> None:
    editor = view.editor
    assert editor.isVisible()
    session = view.canvas.session

    _click(editor._status_label, button)
    _click(editor, button, QtCore.QPoint(2, 2))
    _click(editor._header, button)

    assert [m.id for m in markers] == [1, 2]
    assert session.markers.selected_id == 1
    assert session.gestures.session is None
    assert not session.dock.is_moving


def test_header_press_and_release_still_moves_editor(view: WorkbenchView) -> None:
    editor = view.editor
    header = editor._header
    start = header.rect().center()

    QTest.mousePress(header, LEFT, NO_MODIFIER, start)
    assert view.canvas.session.dock.is_moving
    QTest.mouseRelease(header, LEFT, NO_MODIFIER, start)

    assert not view.canvas.session.dock.is_moving
    assert len(view.canvas.session.markers.markers) == 2


def test_background_tap_on_canvas_creates_one_marker(view: WorkbenchView, markers: List[Marker]) -> None:
    canvas = view.canvas
    rect = canvas.session.content_rect()
    assert rect is not None
    point = QtCore.QPoint(int(rect.x + rect.width * 0.1), int(rect.y + rect.height * 0.9))
    assert not view.editor.geometry().contains(point)

    _click(canvas, LEFT, point)

    assert [m.id for m in markers] == [1, 2, 3]
    assert canvas.session.markers.selected_id == 3


def test_read_only_choice_is_saved_as_default_mode(qapp, tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    window = MainWindow(settings_path=path)
    try:
        window.action_read_mode.trigger()
        assert load_global_settings(path)["general"]["mode"] == "read"
        assert window.workbench.canvas.session.mode is WorkbenchMode.READ

        window.action_read_mode.trigger()
        assert load_global_settings(path)["general"]["mode"] == "translate"
    finally:
        window.workbench.dispose()
        window.deleteLater()


def test_apply_theme_loads_bundled_stylesheets(qapp) -> None:
    try:
        assert apply_theme(qapp, "dark") is True
        assert "floatingEditor" in qapp.styleSheet()
        assert apply_theme(qapp, "light") is True
        assert apply_theme(qapp, "neon") is False
        assert qapp.styleSheet() == ""
    finally:
        apply_theme(qapp, "system")

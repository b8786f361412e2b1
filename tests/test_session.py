from __future__ import annotations

from typing import List, Optional

import pytest

from conftest import FakeSurface, make_marker, make_page
from workbench.geometry import Point
from workbench.gestures import PointerButton, PointerEvent
from workbench.models import MarkerStatus, WorkbenchMode
from workbench.session import (
    EVENT_BACK,
    EVENT_CHANGED,
    EVENT_PAGE_INDEX_CHANGED,
    EVENT_SELECTION_CHANGED,
    WorkbenchSession,
)


def _tap(session: WorkbenchSession, x: float, y: float, pointer_id: int = 1) -> None:
    session.pointer_down(PointerEvent(pointer_id, x, y))
    session.pointer_up(PointerEvent(pointer_id, x, y))


def test_translation_proof_and_drag_scenario(session: WorkbenchSession, surface: FakeSurface) -> None:
    page = make_page([make_marker(1, x=0.18, y=0.18, w=0.32, h=0.12)])
    session.load_page(page)
    marker = page.markers[0]
    assert session.markers.selected_id == 1

    session.set_translation_text("hello")
    assert marker.status is MarkerStatus.TRANSLATED
    assert session.toggle_proof() is True
    assert marker.status is MarkerStatus.PROOFED
    assert marker.proof_text == "hello"

    assert session.pointer_down(PointerEvent(1, 150, 110)) is True
    assert session.gestures.session is None
    session.pointer_move(PointerEvent(1, 150 + 600, 110 + 20))
    session.pointer_up(PointerEvent(1, 150 + 600, 110 + 20))

    assert marker.position.x == 1 - 0.32
    assert marker.position.y == pytest.approx((108 + 20) / 600)
    assert surface.captured == [1]
    assert surface.released == [1]
    assert not session.markers.is_dragging


def test_tap_creates_one_marker_at_release_point_through_inverse_transform(session: WorkbenchSession) -> None:
    page = make_page()
    session.load_page(page)
    session.transform.set_pan(Point(20, 10))
    session.wheel(Point(0, 0), 1)
    pan_before = session.transform.pan
    local = session.transform.transform.to_local(Point(120, 80))

    _tap(session, 120, 80)

    assert len(page.markers) == 1
    created = page.markers[0]
    assert created.position.x == pytest.approx(local.x / 800 - 0.01)
    assert created.position.y == pytest.approx(local.y / 600 - 0.01)
    assert session.markers.selected_id == created.id
    assert session.transform.pan == pan_before


def test_press_beyond_threshold_pans_and_creates_nothing(session: WorkbenchSession) -> None:
    page = make_page()
    session.load_page(page)

    session.pointer_down(PointerEvent(1, 400, 300))
    session.pointer_move(PointerEvent(1, 420, 330))
    session.pointer_up(PointerEvent(1, 420, 330))

    assert page.markers == []
    assert session.transform.pan == Point(20, 30)


def test_tap_uses_release_coordinates(session: WorkbenchSession) -> None:
    page = make_page()
    session.load_page(page)

    session.pointer_down(PointerEvent(1, 400, 300))
    session.pointer_move(PointerEvent(1, 403, 300))
    session.pointer_up(PointerEvent(1, 403, 300))

    assert page.markers[0].position.x == pytest.approx(403 / 800 - 0.01)


def test_secondary_press_on_marker_removes_it(session: WorkbenchSession) -> None:
    page = make_page([make_marker(1), make_marker(2, x=0.6)])
    session.load_page(page)

    assert session.pointer_down(PointerEvent(1, 100, 70, PointerButton.SECONDARY)) is True

    assert [m.id for m in page.markers] == [2]
    assert session.markers.selected_id == 2
    assert session.gestures.session is None


def test_primary_press_on_marker_selects_it(session: WorkbenchSession) -> None:
    page = make_page([make_marker(1), make_marker(2, x=0.6)])
    session.load_page(page)
    selections: List[Optional[int]] = []
    session.subscribe(EVENT_SELECTION_CHANGED, selections.append)

    session.pointer_down(PointerEvent(1, 500, 70))
    session.pointer_up(PointerEvent(1, 500, 70))

    assert session.markers.selected_id == 2
    assert selections == [2]
    assert len(page.markers) == 2


def test_canvas_press_ignored_while_marker_drag_open(session: WorkbenchSession) -> None:
    session.load_page(make_page([make_marker(1)]))
    session.pointer_down(PointerEvent(1, 100, 70))

    assert session.pointer_down(PointerEvent(2, 600, 500)) is False
    assert session.gestures.session is None


def test_cancel_aborts_drag_without_moving_marker(session: WorkbenchSession, surface: FakeSurface) -> None:
    page = make_page([make_marker(1, x=0.1, y=0.1)])
    session.load_page(page)

    session.pointer_down(PointerEvent(1, 100, 70))
    session.pointer_move(PointerEvent(1, 500, 400))
    assert session.pointer_cancel(PointerEvent(1, 500, 400)) is True

    assert page.markers[0].position.x == pytest.approx(0.1)
    assert page.markers[0].position.y == pytest.approx(0.1)
    assert surface.released == [1]
    assert session.pointer_up(PointerEvent(1, 500, 400)) is False


def test_read_mode_blocks_edits_but_allows_selection_and_pan(session: WorkbenchSession) -> None:
    page = make_page([make_marker(1), make_marker(2, x=0.6)])
    session.load_page(page)
    session.set_mode(WorkbenchMode.READ)

    _tap(session, 700, 500)
    session.pointer_down(PointerEvent(1, 100, 70, PointerButton.SECONDARY))
    session.pointer_down(PointerEvent(1, 500, 70))
    session.pointer_move(PointerEvent(1, 700, 300))
    session.pointer_up(PointerEvent(1, 700, 300))

    assert [m.id for m in page.markers] == [1, 2]
    assert session.markers.selected_id == 2
    assert page.markers[1].position.x == pytest.approx(0.6)
    assert session.set_translation_text("nope") is False
    assert session.toggle_proof() is False

    session.pointer_down(PointerEvent(1, 700, 500))
    session.pointer_move(PointerEvent(1, 650, 450))
    session.pointer_up(PointerEvent(1, 650, 450))
    assert session.transform.pan == Point(-50, -50)


def test_load_page_resets_transform_selection_and_keeps_marker_list(session: WorkbenchSession) -> None:
    first = make_page([make_marker(1)])
    session.load_page(first)
    session.wheel(Point(10, 10), 1)
    session.transform.set_pan(Point(99, 99))

    second = make_page([make_marker(7), make_marker(8)], page_index=1)
    session.load_page(second)

    assert session.transform.zoom == 1.0
    assert session.transform.pan == Point(0, 0)
    assert session.markers.selected_id == 7
    assert session.markers.markers is second.markers
    assert not session.dock.anchor.manually_moved

    session.load_page(make_page([], page_index=2))
    assert session.markers.selected_id is None
    assert not session.dock.visible


def test_operations_without_page_or_mounted_canvas_are_noops() -> None:
    surface = FakeSurface(size=None)
    session = WorkbenchSession(surface)
    assert session.pointer_down(PointerEvent(1, 10, 10)) is False
    assert session.wheel(Point(10, 10), 1) is False

    page = make_page()
    session.load_page(page)
    _tap(session, 10, 10)
    assert page.markers == []
    assert session.transform.zoom == 1.0


def test_navigation_requests_are_emitted_within_range(session: WorkbenchSession) -> None:
    requested: List[int] = []
    backs: List[bool] = []
    session.subscribe(EVENT_PAGE_INDEX_CHANGED, requested.append)
    session.subscribe(EVENT_BACK, lambda: backs.append(True))
    session.load_page(make_page(page_index=0, page_count=2))

    assert session.go_previous() is False
    assert session.go_next() is True
    assert session.request_page(5) is False
    session.go_back()

    assert requested == [1]
    assert backs == [True]


def test_unsubscribe_stops_notifications(session: WorkbenchSession) -> None:
    calls: List[int] = []
    unsubscribe = session.subscribe(EVENT_CHANGED, lambda: calls.append(1))
    session.load_page(make_page())
    count = len(calls)

    unsubscribe()
    unsubscribe()
    _tap(session, 100, 100)

    assert count > 0
    assert len(calls) == count


def test_progress_counts_statuses(session: WorkbenchSession) -> None:
    page = make_page(
        [
            make_marker(1),
            make_marker(2, status=MarkerStatus.TRANSLATED),
            make_marker(3, status=MarkerStatus.PROOFED),
        ]
    )
    session.load_page(page)

    progress = session.progress()
    assert (progress.total, progress.translated, progress.proofed) == (3, 2, 1)


def test_editor_docks_on_new_marker_and_honours_manual_move(session: WorkbenchSession) -> None:
    session.load_page(make_page())
    _tap(session, 200, 150)
    assert session.dock.visible
    docked = session.dock.anchor.x_pct

    session.editor_pointer_down(1, Point(500, 100))
    session.editor_pointer_move(1, Point(540, 100))
    session.editor_pointer_up(1)
    assert session.dock.anchor.manually_moved
    assert session.dock.anchor.x_pct == pytest.approx(docked + 5.0)

    session.wheel(Point(0, 0), 1)
    assert session.dock.anchor.x_pct == pytest.approx(docked + 5.0)

    session.clear_selection()
    assert not session.dock.visible

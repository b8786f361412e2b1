from __future__ import annotations

import pytest

from conftest import FakeSurface
from workbench.geometry import Point
from workbench.gestures import GestureDisambiguator, PointerButton, PointerEvent
from workbench.transform import TransformManager


def _gestures(surface: FakeSurface) -> tuple[GestureDisambiguator, TransformManager]:
    transform = TransformManager()
    return GestureDisambiguator(transform, surface), transform


def test_short_press_is_a_tap_at_release_point(surface: FakeSurface) -> None:
    gestures, transform = _gestures(surface)

    assert gestures.pointer_down(PointerEvent(1, 100, 100)) is True
    assert gestures.pointer_move(PointerEvent(1, 102, 101)) is False
    tap = gestures.pointer_up(PointerEvent(1, 103, 102))

    assert tap == Point(103, 102)
    assert transform.pan == Point(0.0, 0.0)
    assert surface.captured == [1]
    assert surface.released == [1]
    assert gestures.session is None


def test_press_past_threshold_pans_by_displacement(surface: FakeSurface) -> None:
    gestures, transform = _gestures(surface)
    transform.set_pan(Point(5, 5))

    gestures.pointer_down(PointerEvent(1, 100, 100))
    assert gestures.pointer_move(PointerEvent(1, 104, 103)) is True  # distance 5
    assert gestures.session is not None and gestures.session.has_crossed_threshold
    assert transform.pan == Point(9, 8)

    gestures.pointer_move(PointerEvent(1, 160, 40))
    assert gestures.pointer_up(PointerEvent(1, 160, 40)) is None
    assert transform.pan == Point(65, -55)


def test_panning_is_irreversible_within_session(surface: FakeSurface) -> None:
    gestures, transform = _gestures(surface)

    gestures.pointer_down(PointerEvent(1, 100, 100))
    gestures.pointer_move(PointerEvent(1, 130, 100))
    gestures.pointer_move(PointerEvent(1, 100, 100))

    assert gestures.pointer_up(PointerEvent(1, 100, 100)) is None
    assert transform.pan == Point(0, 0)


def test_tap_outside_content_rect_is_dropped(surface: FakeSurface) -> None:
    gestures, _ = _gestures(surface)

    gestures.pointer_down(PointerEvent(1, 900, 100))
    assert gestures.pointer_up(PointerEvent(1, 900, 100)) is None


def test_tap_without_mounted_content_is_dropped() -> None:
    surface = FakeSurface(size=None)
    gestures, _ = _gestures(surface)

    gestures.pointer_down(PointerEvent(1, 10, 10))
    assert gestures.pointer_up(PointerEvent(1, 10, 10)) is None


def test_second_pointer_is_ignored_while_session_open(surface: FakeSurface) -> None:
    gestures, transform = _gestures(surface)

    gestures.pointer_down(PointerEvent(1, 100, 100))
    assert gestures.pointer_down(PointerEvent(2, 300, 300)) is False
    assert gestures.pointer_move(PointerEvent(2, 400, 400)) is False
    assert gestures.pointer_up(PointerEvent(2, 400, 400)) is None
    assert transform.pan == Point(0, 0)
    assert gestures.session is not None and gestures.session.pointer_id == 1


def test_secondary_button_does_not_open_session(surface: FakeSurface) -> None:
    gestures, _ = _gestures(surface)
    assert gestures.pointer_down(PointerEvent(1, 100, 100, PointerButton.SECONDARY)) is False
    assert gestures.session is None
    assert surface.captured == []


def test_cancel_discards_session_and_restores_pan(surface: FakeSurface) -> None:
    gestures, transform = _gestures(surface)
    transform.set_pan(Point(3, 4))

    gestures.pointer_down(PointerEvent(1, 100, 100))
    gestures.pointer_move(PointerEvent(1, 150, 150))
    assert transform.pan == Point(53, 54)

    assert gestures.pointer_cancel(PointerEvent(1, 150, 150)) is True
    assert transform.pan == Point(3, 4)
    assert gestures.session is None
    assert surface.released == [1]
    assert gestures.pointer_up(PointerEvent(1, 150, 150)) is None


def test_wheel_zooms_only_when_content_is_mounted() -> None:
    surface = FakeSurface(size=None)
    gestures, transform = _gestures(surface)
    assert gestures.wheel(Point(10, 10), 1) is False
    assert transform.zoom == 1.0

    surface.size = (800, 600)
    assert gestures.wheel(Point(10, 10), 1) is True
    assert transform.zoom == pytest.approx(1.12)

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)
if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

from workbench.models import Marker, MarkerPosition, PageRecord  # noqa: E402
from workbench.session import WorkbenchSession  # noqa: E402


class FakeSurface:
    """Stands in for the canvas widget: fixed content size, records pointer capture."""

    def __init__(self, size: Optional[Tuple[float, float]] = (800.0, 600.0)) -> None:
        self.size = size
        self.captured: List[int] = []
        self.released: List[int] = []

    def capture_pointer(self, pointer_id: int) -> None:
        self.captured.append(pointer_id)

    def release_pointer(self, pointer_id: int) -> None:
        self.released.append(pointer_id)

    def content_size(self) -> Optional[Tuple[float, float]]:
        return self.size


@pytest.fixture
def surface() -> FakeSurface:
    return FakeSurface()


def make_page(markers: Optional[List[Marker]] = None, page_index: int = 0, page_count: int = 3) -> PageRecord:
    return PageRecord(
        image_reference="page.png",
        page_index=page_index,
        page_count=page_count,
        title="Demo",
        markers=markers if markers is not None else [],
    )


def make_marker(marker_id: int, x: float = 0.1, y: float = 0.1, w: float = 0.2, h: float = 0.1, **kwargs) -> Marker:
    return Marker(id=marker_id, position=MarkerPosition(x, y, w, h), **kwargs)


@pytest.fixture(scope="session")
def qapp():
    """One QApplication for all widget tests, rendered offscreen."""
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6 import QtWidgets

    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication([])
    yield app


@pytest.fixture
def session(surface: FakeSurface) -> WorkbenchSession:
    s = WorkbenchSession(surface)
    s.set_viewport((800.0, 600.0), (260.0, 200.0))
    return s

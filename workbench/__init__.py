"""Annotation canvas core for the translation workbench (no Qt dependency)."""

from workbench.gestures import PointerButton, PointerEvent
from workbench.markers import derive_labels
from workbench.models import (
    Marker,
    MarkerCategory,
    MarkerPosition,
    MarkerStatus,
    PageRecord,
    WorkbenchMode,
)
from workbench.session import WorkbenchSession

__all__ = [
    "Marker",
    "MarkerCategory",
    "MarkerPosition",
    "MarkerStatus",
    "PageRecord",
    "PointerButton",
    "PointerEvent",
    "WorkbenchMode",
    "WorkbenchSession",
    "derive_labels",
]

"""Default configuration for the Blume translation workbench."""
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

# Application identity
APP_NAME = "Blume Translation Workbench"
APP_VERSION = "0.2.0"

# Paths
BASE_PATH = Path(__file__).resolve().parent
STYLES_DIR = BASE_PATH / "ui" / "styles"

# Project files
PROJECT_META_FILENAME = "project.yaml"


@dataclass
class CanvasConfig:
    """Tuning constants for the annotation canvas and its floating editor."""

    zoom_step: float = 0.12
    min_zoom: float = 0.4
    max_zoom: float = 4.0
    panning_threshold: float = 5.0  # screen px travelled before a press becomes a pan
    marker_width: float = 0.08  # new marker size, fraction of the image
    marker_height: float = 0.06
    marker_nudge: float = 0.01  # tap point lands this far inside the new marker's top-left
    editor_gap: float = 12.0  # screen px between marker and docked editor
    editor_margin_pct: float = 2.0
    editor_default_anchor: Tuple[float, float] = (68.0, 10.0)


DEFAULT_CANVAS_CONFIG = CanvasConfig()


def get_styles_dir() -> Path:
    """Return the directory holding the bundled theme stylesheets."""
    return STYLES_DIR

"""Utility helpers for loading and storing user settings in YAML."""
from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict

import yaml

from config import DEFAULT_CANVAS_CONFIG, PROJECT_META_FILENAME, CanvasConfig

logger = logging.getLogger(__name__)

# Global config file placed next to the main sources.
CONFIG_PATH = Path(__file__).resolve().parent / "config.yaml"

# Default shape of the settings tree used across the application.
DEFAULT_SETTINGS: Dict[str, Any] = {
    "general": {
        "log_level": "INFO",
        "mode": "translate",  # "translate" or "read"
    },
    "canvas": {
        "zoom_step": DEFAULT_CANVAS_CONFIG.zoom_step,
        "min_zoom": DEFAULT_CANVAS_CONFIG.min_zoom,
        "max_zoom": DEFAULT_CANVAS_CONFIG.max_zoom,
        "panning_threshold": DEFAULT_CANVAS_CONFIG.panning_threshold,
        "marker_width": DEFAULT_CANVAS_CONFIG.marker_width,
        "marker_height": DEFAULT_CANVAS_CONFIG.marker_height,
        "marker_nudge": DEFAULT_CANVAS_CONFIG.marker_nudge,
    },
    "editor": {
        "gap": DEFAULT_CANVAS_CONFIG.editor_gap,
        "margin_pct": DEFAULT_CANVAS_CONFIG.editor_margin_pct,
        "default_anchor": list(DEFAULT_CANVAS_CONFIG.editor_default_anchor),
    },
    "appearance": {
        "theme": "system",
    },
}


def _merge_dicts(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    """Deep-merge two dictionaries without mutating the inputs."""
    merged = deepcopy(base)
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def _read_yaml(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: top level is not a mapping", path)
        return {}
    return data


def load_global_settings(path: Path | None = None) -> Dict[str, Any]:
    """Load global settings from config.yaml (or return defaults)."""
    path = path or CONFIG_PATH
    settings = deepcopy(DEFAULT_SETTINGS)
    if not path.is_file():
        return settings
    return _merge_dicts(settings, _read_yaml(path))


def save_global_settings(settings: Dict[str, Any], path: Path | None = None) -> None:
    """Persist settings into the global config.yaml."""
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(settings, allow_unicode=True, sort_keys=False),
        encoding="utf-8",
    )


def save_default_mode(mode: str, path: Path | None = None) -> Dict[str, Any]:
    """Store the workbench mode used for titles without their own, keeping the rest of config.yaml."""
    settings = load_global_settings(path)
    general = settings.get("general")
    if not isinstance(general, dict):
        general = settings["general"] = {}
    general["mode"] = mode
    save_global_settings(settings, path)
    return settings


def load_project_settings(project_folder: Path | None) -> Dict[str, Any]:
    """Load settings stored alongside project metadata."""
    if project_folder is None:
        return {}
    meta_path = project_folder / PROJECT_META_FILENAME
    if not meta_path.is_file():
        return {}
    settings = _read_yaml(meta_path).get("settings", {})
    return settings if isinstance(settings, dict) else {}


def load_effective_settings(project_folder: Path | None, path: Path | None = None) -> Dict[str, Any]:
    """Return global settings merged with project-level overrides (if any)."""
    global_settings = load_global_settings(path)
    project_settings = load_project_settings(project_folder)
    if not project_settings:
        return global_settings
    return _merge_dicts(global_settings, project_settings)


def _coerce_float(section: str, key: str, value: Any, fallback: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        logger.warning("Invalid %s.%s value %r, using %s", section, key, value, fallback)
        return fallback
    if parsed < 0:
        logger.warning("Negative %s.%s value %s ignored, using %s", section, key, parsed, fallback)
        return fallback
    return parsed


def canvas_config_from_settings(settings: Dict[str, Any]) -> CanvasConfig:
    """Build the canvas tuning constants from a settings tree."""
    canvas = settings.get("canvas", {}) if isinstance(settings, dict) else {}
    editor = settings.get("editor", {}) if isinstance(settings, dict) else {}
    canvas = canvas if isinstance(canvas, dict) else {}
    editor = editor if isinstance(editor, dict) else {}

    values: Dict[str, Any] = {}
    for f in fields(CanvasConfig):
        if f.name.startswith("editor_"):
            continue
        fallback = getattr(DEFAULT_CANVAS_CONFIG, f.name)
        values[f.name] = _coerce_float("canvas", f.name, canvas.get(f.name, fallback), fallback)

    gap = DEFAULT_CANVAS_CONFIG.editor_gap
    values["editor_gap"] = _coerce_float("editor", "gap", editor.get("gap", gap), gap)
    margin = DEFAULT_CANVAS_CONFIG.editor_margin_pct
    values["editor_margin_pct"] = _coerce_float("editor", "margin_pct", editor.get("margin_pct", margin), margin)
    anchor = editor.get("default_anchor")
    if isinstance(anchor, (list, tuple)) and len(anchor) == 2:
        values["editor_default_anchor"] = (
            _coerce_float("editor", "default_anchor", anchor[0], DEFAULT_CANVAS_CONFIG.editor_default_anchor[0]),
            _coerce_float("editor", "default_anchor", anchor[1], DEFAULT_CANVAS_CONFIG.editor_default_anchor[1]),
        )
    else:
        values["editor_default_anchor"] = DEFAULT_CANVAS_CONFIG.editor_default_anchor

    if values["min_zoom"] <= 0:
        logger.warning("Non-positive canvas.min_zoom ignored, using %s", DEFAULT_CANVAS_CONFIG.min_zoom)
        values["min_zoom"] = DEFAULT_CANVAS_CONFIG.min_zoom
    if values["min_zoom"] > values["max_zoom"]:
        values["min_zoom"], values["max_zoom"] = values["max_zoom"], values["min_zoom"]
    return CanvasConfig(**values)

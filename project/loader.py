"""Project loading with chapter/page detection."""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from config import PROJECT_META_FILENAME
from project.models import PageInfo, TitleProject
from workbench.models import WorkbenchMode

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}
_CHAPTER_RE = re.compile(r"^\d+$")
_DIGITS_RE = re.compile(r"(\d+)")


def natural_key(name: str) -> List[Any]:
    """Sort key that orders "page2" before "page10"."""
    return [int(part) if part.isdigit() else part.lower() for part in _DIGITS_RE.split(name)]


def load_project_meta(folder_path: Path) -> Optional[Dict[str, Any]]:
    """Load project metadata from project.yaml if present."""
    meta_path = folder_path / PROJECT_META_FILENAME
    if not meta_path.is_file():
        return None
    try:
        with meta_path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Malformed {PROJECT_META_FILENAME} in {folder_path}: {exc}") from exc
    return data if isinstance(data, dict) else {}


def _iter_chapter_dirs(title_folder: Path) -> List[Path]:
    """
    Return chapter folders inside a title folder, sorted by numeric name.

    A chapter folder name must consist only of digits.
    """
    chapters: List[Tuple[int, Path]] = []
    for child in title_folder.iterdir():
        if not child.is_dir():
            continue
        if not _CHAPTER_RE.match(child.name):
            continue
        chapters.append((int(child.name), child))
    chapters.sort(key=lambda x: x[0])
    return [p for _, p in chapters]


def _iter_images(folder: Path) -> List[Path]:
    images = [p for p in folder.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS]
    return sorted(images, key=lambda p: natural_key(p.name))


def parse_mode(raw: Any) -> WorkbenchMode:
    try:
        return WorkbenchMode(str(raw).lower())
    except ValueError:
        logger.warning("Unknown workbench mode %r, using translate", raw)
        return WorkbenchMode.TRANSLATE


def open_project_from_folder(
    folder_path: Path, default_mode: WorkbenchMode = WorkbenchMode.TRANSLATE
) -> TitleProject:
    """
    Load a title project from the provided folder path.

    Supports two layouts:
    1) Preferred: title folder contains chapter subfolders named with digits, each containing page images.
    2) Legacy: images directly inside the folder (treated as chapter 1).
    """
    if not folder_path.is_dir():
        raise FileNotFoundError(f"Folder not found: {folder_path}")

    folder_path = folder_path.resolve()
    title_id = folder_path.name
    meta = load_project_meta(folder_path) or {}

    pages: List[PageInfo] = []
    chapter_dirs = _iter_chapter_dirs(folder_path)
    if chapter_dirs:
        for chapter_dir in chapter_dirs:
            for page_in_chapter, file_path in enumerate(_iter_images(chapter_dir)):
                pages.append(
                    PageInfo(
                        index=len(pages),
                        file_path=file_path,
                        chapter_number=int(chapter_dir.name),
                        page_in_chapter=page_in_chapter,
                    )
                )
    else:
        for page_in_chapter, file_path in enumerate(_iter_images(folder_path)):
            pages.append(PageInfo(index=len(pages), file_path=file_path, page_in_chapter=page_in_chapter))

    if not pages:
        raise ValueError(f"No page images found in {folder_path}")

    meta_path = folder_path / PROJECT_META_FILENAME
    project = TitleProject(
        title_id=str(meta.get("title_id", title_id)),
        title_name=str(meta.get("title_name", title_id)),
        folder_path=folder_path,
        pages=pages,
        mode=parse_mode(meta["mode"]) if "mode" in meta else default_mode,
        meta_path=meta_path if meta_path.is_file() else None,
    )
    logger.info("Opened project '%s' with %s pages", project.title_name, len(pages))
    return project

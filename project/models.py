"""Host-side project models: the pages a workbench can navigate between."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from workbench.models import Marker, PageRecord, WorkbenchMode


@dataclass
class PageInfo:
    """Metadata for a single page within a title project."""

    index: int  # global index within the title (0-based)
    file_path: Path  # path to the page image
    chapter_number: int = 1
    page_in_chapter: int = 0
    markers: List[Marker] = field(default_factory=list)  # live list edited by the workbench


@dataclass
class TitleProject:
    """Represents an opened title: ordered pages plus display metadata."""

    title_id: str  # internal identifier (usually folder name)
    title_name: str
    folder_path: Path
    pages: List[PageInfo]
    mode: WorkbenchMode = WorkbenchMode.TRANSLATE
    meta_path: Optional[Path] = None  # path to project.yaml if it exists

    def get_page_count(self) -> int:
        """Return the number of pages in the project."""
        return len(self.pages)

    def get_page(self, index: int) -> PageInfo:
        """Return a page by index or raise IndexError if out of bounds."""
        if index < 0 or index >= len(self.pages):
            raise IndexError(f"Page index {index} out of range for project '{self.title_id}'")
        return self.pages[index]

    def page_record(self, index: int) -> PageRecord:
        """Build the record handed to the workbench; markers are shared, not copied."""
        page = self.get_page(index)
        return PageRecord(
            image_reference=str(page.file_path),
            page_index=page.index,
            page_count=self.get_page_count(),
            title=self.title_name,
            markers=page.markers,
        )

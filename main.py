"""Entry point for the Blume translation workbench desktop application."""
import logging
import sys
from pathlib import Path
from typing import List, Optional

from PySide6 import QtWidgets

from config import get_styles_dir
from project.loader import parse_mode
from settings_manager import canvas_config_from_settings, load_effective_settings
from ui.main_window import MainWindow

logger = logging.getLogger(__name__)

THEMES = ("system", "light", "dark")


def apply_theme(app: QtWidgets.QApplication, theme: str) -> bool:
    """Apply light/dark stylesheet to the whole application; "system" keeps the platform look."""
    theme = str(theme or "system").lower()
    if theme not in THEMES:
        logger.warning("Unknown theme %r, using system", theme)
        theme = "system"

    # Always clear the previous stylesheet before applying a new one to avoid stacking rules.
    app.setStyleSheet("")
    if theme == "system":
        return False
    qss_path = get_styles_dir() / f"{theme}.qss"
    if not qss_path.is_file():
        logger.warning("Stylesheet %s is missing", qss_path)
        return False
    app.setStyleSheet(qss_path.read_text(encoding="utf-8"))
    return True


def configure_logging(level_name: str) -> None:
    level = getattr(logging, str(level_name).upper(), logging.INFO)
    logging.basicConfig(
        level=level if isinstance(level, int) else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Start the Qt application; an optional argument opens a title folder right away."""
    argv = list(sys.argv if argv is None else argv)
    folder = Path(argv[1]) if len(argv) > 1 else None

    settings = load_effective_settings(folder)
    configure_logging(settings.get("general", {}).get("log_level", "INFO"))

    app = QtWidgets.QApplication(argv)
    apply_theme(app, settings.get("appearance", {}).get("theme", "system"))

    window = MainWindow(
        canvas_config=canvas_config_from_settings(settings),
        default_mode=parse_mode(settings.get("general", {}).get("mode", "translate")),
    )
    window.show()
    if folder is not None:
        window.open_project(folder)
    return int(app.exec())


if __name__ == "__main__":
    raise SystemExit(main())

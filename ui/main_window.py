"""Main application window: opens a title folder and hosts the translation workbench."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PySide6 import QtCore, QtGui, QtWidgets

from config import APP_NAME, APP_VERSION, CanvasConfig
from project.loader import open_project_from_folder
from project.models import TitleProject
from settings_manager import save_default_mode
from ui.workbench_view import WorkbenchView
from workbench.models import WorkbenchMode

logger = logging.getLogger(__name__)


class MainWindow(QtWidgets.QMainWindow):
    """
    Main window. Owns the opened project (the page source) and answers the
    workbench's navigation requests by supplying page records.
    """

    def __init__(
        self,
        canvas_config: Optional[CanvasConfig] = None,
        default_mode: WorkbenchMode = WorkbenchMode.TRANSLATE,
        settings_path: Optional[Path] = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.resize(1200, 860)

        self.current_project: Optional[TitleProject] = None
        self.current_page_index: int = 0
        self._default_mode = default_mode
        self._settings_path = settings_path

        self._init_actions()
        self._init_menu_bar()
        self._init_central_widgets(canvas_config)

    # -------------------- setup --------------------
    def _init_actions(self) -> None:
        self.action_open_folder = QtGui.QAction("Open title folder…", self)
        self.action_open_folder.setShortcut(QtGui.QKeySequence.StandardKey.Open)
        self.action_open_folder.triggered.connect(self._on_open_folder_triggered)

        self.action_read_mode = QtGui.QAction("Read only", self)
        self.action_read_mode.setCheckable(True)
        self.action_read_mode.setChecked(self._default_mode is WorkbenchMode.READ)
        self.action_read_mode.toggled.connect(self._on_read_mode_toggled)
        self.action_read_mode.triggered.connect(self._on_read_mode_triggered)

        self.action_exit = QtGui.QAction("Exit", self)
        self.action_exit.triggered.connect(self.close)

        self.action_about = QtGui.QAction("About", self)
        self.action_about.triggered.connect(self._on_about)

    def _init_menu_bar(self) -> None:
        menu_bar = self.menuBar()

        self.menu_file = menu_bar.addMenu("File")
        self.menu_file.addAction(self.action_open_folder)
        self.menu_file.addSeparator()
        self.menu_file.addAction(self.action_exit)

        self.menu_view = menu_bar.addMenu("View")
        self.menu_view.addAction(self.action_read_mode)

        self.menu_help = menu_bar.addMenu("Help")
        self.menu_help.addAction(self.action_about)

    def _init_central_widgets(self, canvas_config: Optional[CanvasConfig]) -> None:
        self.welcome = QtWidgets.QWidget(self)
        welcome_layout = QtWidgets.QVBoxLayout(self.welcome)
        welcome_layout.addStretch(1)
        btn_open = QtWidgets.QPushButton("Open title folder…", self.welcome)
        btn_open.clicked.connect(self._on_open_folder_triggered)
        welcome_layout.addWidget(btn_open, 0, QtCore.Qt.AlignmentFlag.AlignCenter)
        welcome_layout.addStretch(1)

        self.workbench = WorkbenchView(canvas_config, self._default_mode, self)
        self.workbench.pageIndexChanged.connect(self._on_page_index_changed)
        self.workbench.backRequested.connect(self._on_back_requested)

        self.stack = QtWidgets.QStackedWidget(self)
        self.stack.addWidget(self.welcome)
        self.stack.addWidget(self.workbench)
        self.setCentralWidget(self.stack)

    # -------------------- project / navigation --------------------
    def open_project(self, folder_path: Path) -> bool:
        try:
            project = open_project_from_folder(folder_path, self._default_mode)
        except (FileNotFoundError, ValueError) as exc:
            logger.warning("Cannot open project %s: %s", folder_path, exc)
            QtWidgets.QMessageBox.critical(self, "Error", str(exc))
            return False

        self.current_project = project
        self.stack.setCurrentWidget(self.workbench)
        self.action_read_mode.setChecked(project.mode is WorkbenchMode.READ)
        self.workbench.set_mode(project.mode)
        if not self._show_page(0):
            self._on_back_requested()
            return False
        self.statusBar().showMessage(f"Opened '{project.title_name}'", 3000)
        return True

    def _show_page(self, index: int) -> bool:
        project = self.current_project
        if project is None:
            return False
        try:
            self.workbench.set_page(project.page_record(index))
        except (FileNotFoundError, ValueError, IndexError) as exc:
            logger.warning("Cannot show page %s: %s", index, exc)
            QtWidgets.QMessageBox.critical(self, "Error", str(exc))
            return False
        self.current_page_index = index
        return True

    def _on_page_index_changed(self, index: int) -> None:
        self._show_page(index)

    def _on_back_requested(self) -> None:
        self.workbench.canvas.clear_page()
        self.current_project = None
        self.current_page_index = 0
        self.stack.setCurrentWidget(self.welcome)

    def _on_open_folder_triggered(self) -> None:
        dialog = QtWidgets.QFileDialog(self)
        dialog.setFileMode(QtWidgets.QFileDialog.FileMode.Directory)
        dialog.setOption(QtWidgets.QFileDialog.Option.ShowDirsOnly, True)
        if dialog.exec() != QtWidgets.QDialog.DialogCode.Accepted:
            return
        selected = dialog.selectedFiles()
        if not selected:
            return
        self.open_project(Path(selected[0]))

    def _on_read_mode_toggled(self, checked: bool) -> None:
        self.workbench.set_mode(WorkbenchMode.READ if checked else WorkbenchMode.TRANSLATE)

    def _on_read_mode_triggered(self, checked: bool) -> None:
        """Remember an explicit choice as the default for titles without a mode of their own."""
        self._default_mode = WorkbenchMode.READ if checked else WorkbenchMode.TRANSLATE
        try:
            save_default_mode(self._default_mode.value, self._settings_path)
        except OSError as exc:
            logger.warning("Cannot save settings: %s", exc)
            self.statusBar().showMessage(f"Cannot save settings: {exc}", 5000)

    def _on_about(self) -> None:
        QtWidgets.QMessageBox.about(self, APP_NAME, f"{APP_NAME} {APP_VERSION}")

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[override]
        self.workbench.dispose()
        super().closeEvent(event)

"""Entry point for the Sunday desktop client."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Callable, Dict, List, Optional

from PIL import Image
from PIL.ImageQt import ImageQt
from PyQt6.QtCore import QPointF, Qt, pyqtSignal
from PyQt6.QtGui import QAction, QColor, QMouseEvent, QPixmap
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QApplication,
    QCheckBox,
    QColorDialog,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFileDialog,
    QFormLayout,
    QGridLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMenu,
    QMessageBox,
    QProgressDialog,
    QPushButton,
    QSpinBox,
    QSplitter,
    QTabWidget,
    QToolBar,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from sunday.api import ApiError, SundayClient, has_role_admin_access
from sunday.config import APP_DIR, LOG_PATH, PREFERENCES_PATH, ClientConfig, ConfigError, load_config
from sunday.debounce import REFRESH_DELAY_MS, SEARCH_DELAY_MS, Debouncer
from sunday.imaging.batch import BatchError, run_batches
from sunday.imaging.compositor import Compositor, pick_color
from sunday.imaging.settings import (
    OUTPUT_FORMATS,
    ImageEditorSettings,
    SettingsError,
    list_image_files,
    load_settings,
    save_settings,
)
from sunday.logging_utils import configure_logging
from sunday.models import Board, BoardFolder, Workspace
from sunday.ordering import board_drop_order, group_by_folder, reorder_folders
from sunday.preferences import PreferenceStore
from sunday.search import SearchResult, search_workspace
from sunday.templates import BUILTIN_TEMPLATES
from sunday.theme import ThemeController, ThemeMode, apply_theme, system_prefers_dark

DEFAULT_IMAGE_SETTINGS = APP_DIR / "settings" / "default.json"
LAST_WORKSPACE_KEY = "last_workspace_id"
ENTRY_ROLE = Qt.ItemDataRole.UserRole
END_POSITION = sys.maxsize

logger = logging.getLogger(__name__)


def _readable_text_color(color_name: str) -> str:
    """Return a text color (black/white) that contrasts with the given background."""

    color = QColor(color_name)
    if not color.isValid():
        return "#202124"
    r, g, b, _ = color.getRgb()
    luminance = 0.2126 * (r / 255) + 0.7152 * (g / 255) + 0.0722 * (b / 255)
    return "#202124" if luminance > 0.6 else "#ffffff"


def create_application(theme: ThemeController) -> QApplication:
    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("Sunday")
    font = app.font()
    font.setPointSize(11)
    app.setFont(font)
    apply_theme(app, theme.is_dark(system_prefers_dark()))
    theme.subscribe(lambda _mode: apply_theme(app, theme.is_dark(system_prefers_dark())))
    return app


class TextInputDialog(QDialog):
    def __init__(self, title: str, label: str, default: str = "", parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(title)
        layout = QFormLayout(self)
        self.input = QLineEdit(default)
        layout.addRow(label, self.input)
        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def text_value(self) -> str:
        return self.input.text().strip()


def ask_text(parent: QWidget, title: str, label: str, default: str = "") -> Optional[str]:
    dialog = TextInputDialog(title, label, default, parent)
    if dialog.exec() != QDialog.DialogCode.Accepted:
        return None
    return dialog.text_value() or None


class BoardDialog(QDialog):
    """Collects name, folder and optional template for a new board."""

    def __init__(
        self,
        folders: List[BoardFolder],
        saved_templates: List,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("New Board")
        layout = QFormLayout(self)
        self.name_input = QLineEdit()
        self.description_input = QLineEdit()
        self.private_input = QCheckBox("Private board")
        self.folder_input = QComboBox()
        self.folder_input.addItem("No folder", None)
        for folder in folders:
            self.folder_input.addItem(folder.name, folder.id)
        self.template_input = QComboBox()
        self.template_input.addItem("Blank board", None)
        for template in BUILTIN_TEMPLATES:
            self.template_input.addItem(f"{template.name} (built-in)", ("builtin", template.id))
        for template in saved_templates:
            self.template_input.addItem(template.name, ("saved", template.id))
        layout.addRow("Name", self.name_input)
        layout.addRow("Description", self.description_input)
        layout.addRow("Folder", self.folder_input)
        layout.addRow("Template", self.template_input)
        layout.addRow("", self.private_input)
        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(self._accept)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _accept(self) -> None:
        if not self.name_input.text().strip():
            QMessageBox.warning(self, "Board", "Name is required.")
            return
        self.accept()


class BoardTree(QTreeWidget):
    """Sidebar of folders and boards; drops are forwarded to the board view."""

    def __init__(self, board_view: "BoardView") -> None:
        super().__init__()
        self.board_view = board_view
        self.setHeaderHidden(True)
        self.setDragDropMode(QAbstractItemView.DragDropMode.InternalMove)
        self.setDropIndicatorShown(True)
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)

    def set_reorderable(self, enabled: bool) -> None:
        self.setDragEnabled(enabled)
        self.setAcceptDrops(enabled)

    def dropEvent(self, event) -> None:  # type: ignore[override]
        dragged = self.currentItem()
        target = self.itemAt(event.position().toPoint())
        indicator = self.dropIndicatorPosition()
        # The backend owns ordering; the tree is rebuilt from it after the call.
        event.ignore()
        if dragged is None or target is None or target is dragged:
            return
        below = indicator == QAbstractItemView.DropIndicatorPosition.BelowItem
        self.board_view.handle_drop(dragged.data(0, ENTRY_ROLE), target.data(0, ENTRY_ROLE), below)


class BoardView(QWidget):
    def __init__(
        self,
        client: SundayClient,
        preferences: PreferenceStore,
        notify: Callable[[str], None],
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.client = client
        self.preferences = preferences
        self.notify = notify
        self.workspaces: List[Workspace] = []
        self.boards: List[Board] = []
        self.folders: List[BoardFolder] = []
        self.current_board: Optional[Board] = None
        self.is_admin = False
        self.refresh_debouncer = Debouncer(REFRESH_DELAY_MS, self.reload_boards, self)
        self.search_debouncer = Debouncer(SEARCH_DELAY_MS, self._run_search, self)
        self._build_ui()

    def _build_ui(self) -> None:
        layout = QVBoxLayout(self)
        top = QHBoxLayout()
        self.workspace_selector = QComboBox()
        self.workspace_selector.currentIndexChanged.connect(self._workspace_selected)
        top.addWidget(QLabel("Workspace"))
        top.addWidget(self.workspace_selector, 1)
        self.new_workspace_btn = QPushButton("New Workspace")
        self.new_workspace_btn.clicked.connect(self._create_workspace)
        self.rename_workspace_btn = QPushButton("Rename")
        self.rename_workspace_btn.clicked.connect(self._rename_workspace)
        self.delete_workspace_btn = QPushButton("Delete")
        self.delete_workspace_btn.clicked.connect(self._delete_workspace)
        self.new_folder_btn = QPushButton("New Folder")
        self.new_folder_btn.clicked.connect(self._create_folder)
        self.new_board_btn = QPushButton("New Board")
        self.new_board_btn.clicked.connect(self._create_board)
        self.templates_btn = QPushButton("Templates")
        self.templates_btn.clicked.connect(self._manage_templates)
        for button in (
            self.new_workspace_btn,
            self.rename_workspace_btn,
            self.delete_workspace_btn,
            self.new_folder_btn,
            self.new_board_btn,
            self.templates_btn,
        ):
            top.addWidget(button)
        layout.addLayout(top)

        self.search_input = QLineEdit()
        self.search_input.setPlaceholderText("Search boards and items…")
        self.search_input.textChanged.connect(self.search_debouncer.trigger)
        layout.addWidget(self.search_input)
        self.search_results = QListWidget()
        self.search_results.setVisible(False)
        self.search_results.setMaximumHeight(180)
        self.search_results.itemDoubleClicked.connect(self._open_search_result)
        layout.addWidget(self.search_results)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        self.board_tree = BoardTree(self)
        self.board_tree.itemClicked.connect(self._tree_item_clicked)
        self.board_tree.customContextMenuRequested.connect(self._tree_context_menu)
        splitter.addWidget(self.board_tree)

        detail = QWidget()
        detail_layout = QVBoxLayout(detail)
        self.board_title = QLabel("Select a board")
        self.board_title.setStyleSheet("font-size: 14pt; font-weight: 600;")
        detail_layout.addWidget(self.board_title)
        self.item_tree = QTreeWidget()
        self.item_tree.itemCollapsed.connect(self._save_collapsed_groups)
        self.item_tree.itemExpanded.connect(self._save_collapsed_groups)
        self.item_tree.header().sectionResized.connect(self._save_column_widths)
        detail_layout.addWidget(self.item_tree)
        splitter.addWidget(detail)
        splitter.setStretchFactor(1, 3)
        layout.addWidget(splitter, 1)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def _report(self, title: str, exc: ApiError) -> None:
        QMessageBox.warning(self, title, exc.message)

    def check_admin(self) -> None:
        is_admin = has_role_admin_access(self.client.config.role)
        if not is_admin:
            try:
                is_admin = self.client.has_admin_access()
            except ApiError as exc:
                logger.warning("Admin check failed: %s", exc.message)
        self.is_admin = is_admin
        self.board_tree.set_reorderable(is_admin)
        for button in (self.delete_workspace_btn, self.new_folder_btn, self.templates_btn):
            button.setEnabled(is_admin)

    def load_workspaces(self) -> None:
        try:
            self.workspaces = self.client.list_workspaces()
        except ApiError as exc:
            self._report("Workspaces", exc)
            return
        last_id = self.preferences.get(LAST_WORKSPACE_KEY)
        self.workspace_selector.blockSignals(True)
        self.workspace_selector.clear()
        selected = 0
        for index, workspace in enumerate(self.workspaces):
            self.workspace_selector.addItem(workspace.name, workspace.id)
            if workspace.id == last_id:
                selected = index
        if self.workspaces:
            self.workspace_selector.setCurrentIndex(selected)
        self.workspace_selector.blockSignals(False)
        if self.workspaces:
            self._workspace_selected(selected)
        else:
            self.board_tree.clear()

    def current_workspace(self) -> Optional[Workspace]:
        index = self.workspace_selector.currentIndex()
        if 0 <= index < len(self.workspaces):
            return self.workspaces[index]
        return None

    def _workspace_selected(self, index: int) -> None:
        workspace = self.current_workspace()
        if workspace is None:
            return
        self.preferences.set(LAST_WORKSPACE_KEY, workspace.id)
        self.current_board = None
        self.board_title.setText("Select a board")
        self.item_tree.clear()
        self.reload_boards()

    def reload_boards(self) -> None:
        workspace = self.current_workspace()
        if workspace is None:
            return
        try:
            self.boards, folders = self.client.list_boards(workspace.id)
        except ApiError as exc:
            self._report("Boards", exc)
            return
        sections, unfiled = group_by_folder(self.boards, folders)
        self.folders = [section.folder for section in sections]
        self.board_tree.clear()
        for section in sections:
            folder_item = QTreeWidgetItem([f"{section.folder.name} ({len(section.boards)})"])
            folder_item.setData(0, ENTRY_ROLE, ("folder", section.folder.id))
            folder_item.setForeground(0, QColor(section.folder.color))
            self.board_tree.addTopLevelItem(folder_item)
            for board in section.boards:
                folder_item.addChild(self._board_item(board))
            folder_item.setExpanded(section.folder.is_expanded)
        for board in unfiled:
            self.board_tree.addTopLevelItem(self._board_item(board))

    def _board_item(self, board: Board) -> QTreeWidgetItem:
        item = QTreeWidgetItem([board.name])
        item.setData(0, ENTRY_ROLE, ("board", board.id))
        item.setToolTip(0, board.description or f"{board.item_count} item(s)")
        return item

    def _find_board(self, board_id: int) -> Optional[Board]:
        return next((b for b in self.boards if b.id == board_id), None)

    def _find_folder(self, folder_id: int) -> Optional[BoardFolder]:
        return next((f for f in self.folders if f.id == folder_id), None)

    def _tree_item_clicked(self, item: QTreeWidgetItem, _column: int) -> None:
        kind, entry_id = item.data(0, ENTRY_ROLE)
        if kind == "board":
            self.open_board(entry_id)

    def open_board(self, board_id: int) -> None:
        try:
            board = self.client.get_board(board_id)
        except ApiError as exc:
            self._report("Board", exc)
            return
        self.current_board = board
        self.board_title.setText(board.name)
        self._populate_items(board)

    def _populate_items(self, board: Board) -> None:
        column_keys: List[str] = []
        for group in board.groups:
            for item in group.items:
                for key in item.column_values:
                    if key not in column_keys:
                        column_keys.append(key)
        tree = self.item_tree
        tree.blockSignals(True)
        tree.header().blockSignals(True)
        tree.clear()
        tree.setColumnCount(1 + len(column_keys))
        tree.setHeaderLabels(["Name", *column_keys])
        collapsed = self.preferences.collapsed_group_ids(board.id)
        for group in sorted(board.groups, key=lambda g: g.position):
            group_item = QTreeWidgetItem([f"{group.title} ({len(group.items)})"])
            group_item.setData(0, ENTRY_ROLE, ("group", group.id))
            group_item.setForeground(0, QColor(group.color))
            tree.addTopLevelItem(group_item)
            for item in sorted(group.items, key=lambda i: i.position):
                values = [str(item.column_values.get(key, "") or "") for key in column_keys]
                row = QTreeWidgetItem([item.name, *values])
                row.setData(0, ENTRY_ROLE, ("item", item.id))
                group_item.addChild(row)
            group_item.setExpanded(group.id not in collapsed and not group.is_collapsed)
        widths = self.preferences.board_column_widths(board.id)
        for index, key in enumerate(["Name", *column_keys]):
            if key in widths:
                tree.setColumnWidth(index, int(widths[key]))
        tree.header().blockSignals(False)
        tree.blockSignals(False)

    def _save_collapsed_groups(self, _item: QTreeWidgetItem) -> None:
        if self.current_board is None:
            return
        collapsed = set()
        for index in range(self.item_tree.topLevelItemCount()):
            group_item = self.item_tree.topLevelItem(index)
            if not group_item.isExpanded():
                collapsed.add(group_item.data(0, ENTRY_ROLE)[1])
        self.preferences.set_collapsed_groups(self.current_board.id, collapsed)

    def _save_column_widths(self, index: int, _old: int, new: int) -> None:
        if self.current_board is None:
            return
        header_item = self.item_tree.headerItem()
        widths = self.preferences.board_column_widths(self.current_board.id)
        widths[header_item.text(index)] = float(new)
        self.preferences.set_column_widths(self.current_board.id, widths)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def _run_search(self, query: str = "") -> None:
        self.search_results.clear()
        if not query.strip():
            self.search_results.setVisible(False)
            return
        results = search_workspace(self.client, self.boards, query)
        if not results:
            self.search_results.setVisible(False)
            self.notify(f'No results found for "{query}"')
            return
        for result in results:
            entry = QListWidgetItem(result.label)
            entry.setData(ENTRY_ROLE, result)
            self.search_results.addItem(entry)
        self.search_results.setVisible(True)

    def _open_search_result(self, entry: QListWidgetItem) -> None:
        result: SearchResult = entry.data(ENTRY_ROLE)
        self.open_board(result.board.id)

    # ------------------------------------------------------------------
    # Workspaces, folders, boards
    # ------------------------------------------------------------------
    def _create_workspace(self) -> None:
        name = ask_text(self, "New Workspace", "Name")
        if not name:
            return
        try:
            self.client.create_workspace(name)
        except ApiError as exc:
            self._report("Workspace", exc)
            return
        self.notify(f"Workspace '{name}' created")
        self.load_workspaces()

    def _rename_workspace(self) -> None:
        workspace = self.current_workspace()
        if workspace is None:
            return
        name = ask_text(self, "Rename Workspace", "Name", workspace.name)
        if not name:
            return
        try:
            self.client.update_workspace(workspace.id, name=name)
        except ApiError as exc:
            self._report("Workspace", exc)
            return
        self.load_workspaces()

    def _delete_workspace(self) -> None:
        workspace = self.current_workspace()
        if workspace is None:
            return
        confirm = QMessageBox.question(
            self,
            "Delete Workspace",
            f"Delete workspace '{workspace.name}' and all of its boards?",
        )
        if confirm != QMessageBox.StandardButton.Yes:
            return
        try:
            self.client.delete_workspace(workspace.id)
        except ApiError as exc:
            self._report("Workspace", exc)
            return
        self.preferences.remove(LAST_WORKSPACE_KEY)
        self.load_workspaces()

    def _create_folder(self) -> None:
        workspace = self.current_workspace()
        if workspace is None:
            return
        name = ask_text(self, "Create Folder", "Folder name")
        if not name:
            return
        try:
            self.client.create_folder(workspace.id, name)
        except ApiError as exc:
            self._report("Folder", exc)
            return
        self.refresh_debouncer.trigger()

    def _rename_folder(self, folder: BoardFolder) -> None:
        name = ask_text(self, "Rename Folder", "Folder name", folder.name)
        if not name:
            return
        try:
            self.client.update_folder(folder.id, name=name)
        except ApiError as exc:
            self._report("Folder", exc)
            return
        self.refresh_debouncer.trigger()

    def _delete_folder(self, folder: BoardFolder) -> None:
        confirm = QMessageBox.question(
            self,
            "Delete Folder",
            f"Delete folder '{folder.name}'? Its boards move to the workspace root.",
        )
        if confirm != QMessageBox.StandardButton.Yes:
            return
        try:
            self.client.delete_folder(folder.id)
        except ApiError as exc:
            self._report("Folder", exc)
            return
        self.refresh_debouncer.trigger()

    def _create_board(self) -> None:
        workspace = self.current_workspace()
        if workspace is None:
            return
        saved = []
        try:
            saved = self.client.list_templates().saved_templates
        except ApiError as exc:
            logger.warning("Saved templates unavailable: %s", exc.message)
        dialog = BoardDialog(self.folders, saved, self)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        name = dialog.name_input.text().strip()
        folder_id = dialog.folder_input.currentData()
        template = dialog.template_input.currentData()
        try:
            if template is None:
                board_id = self.client.create_board(
                    workspace.id,
                    name,
                    description=dialog.description_input.text().strip(),
                    is_private=dialog.private_input.isChecked(),
                    folder_id=folder_id,
                )
            elif template[0] == "builtin":
                board_id = self.client.create_board_from_template(
                    workspace.id, name, template[1], folder_id=folder_id
                )
            else:
                board_id = self.client.create_board_from_saved_template(
                    template[1], workspace.id, name, folder_id=folder_id
                )
        except ApiError as exc:
            self._report("Board", exc)
            return
        self.reload_boards()
        self.open_board(board_id)

    def _rename_board(self, board: Board) -> None:
        name = ask_text(self, "Rename Board", "Name", board.name)
        if not name:
            return
        try:
            self.client.update_board(board.id, name=name)
        except ApiError as exc:
            self._report("Board", exc)
            return
        self.refresh_debouncer.trigger()

    def _archive_board(self, board: Board) -> None:
        try:
            self.client.update_board(board.id, is_archived=True)
        except ApiError as exc:
            self._report("Board", exc)
            return
        self.notify(f"Board '{board.name}' archived")
        self.refresh_debouncer.trigger()

    def _delete_board(self, board: Board) -> None:
        confirm = QMessageBox.question(self, "Delete Board", f"Delete board '{board.name}'?")
        if confirm != QMessageBox.StandardButton.Yes:
            return
        try:
            self.client.delete_board(board.id)
        except ApiError as exc:
            self._report("Board", exc)
            return
        if self.current_board and self.current_board.id == board.id:
            self.current_board = None
            self.board_title.setText("Select a board")
            self.item_tree.clear()
        self.refresh_debouncer.trigger()

    def _move_board(self, board: Board, folder_id: Optional[int]) -> None:
        try:
            self.client.move_board(board.id, folder_id)
        except ApiError as exc:
            self._report("Board", exc)
            return
        self.refresh_debouncer.trigger()

    def _save_board_as_template(self, board: Board) -> None:
        name = ask_text(self, "Save as Template", "Template name", board.name)
        if not name:
            return
        try:
            self.client.save_board_as_template(board.id, name)
        except ApiError as exc:
            self._report("Template", exc)
            return
        self.notify(f"Template '{name}' saved")

    def _manage_templates(self) -> None:
        dialog = TemplateManagerDialog(self.client, self)
        dialog.exec()

    def _tree_context_menu(self, point) -> None:
        item = self.board_tree.itemAt(point)
        if item is None:
            return
        kind, entry_id = item.data(0, ENTRY_ROLE)
        menu = QMenu(self)
        if kind == "folder":
            folder = self._find_folder(entry_id)
            if folder is None or not self.is_admin:
                return
            menu.addAction("Rename").triggered.connect(lambda: self._rename_folder(folder))
            menu.addAction("Delete").triggered.connect(lambda: self._delete_folder(folder))
        else:
            board = self._find_board(entry_id)
            if board is None:
                return
            menu.addAction("Rename").triggered.connect(lambda: self._rename_board(board))
            move_menu = menu.addMenu("Move to folder")
            move_menu.addAction("No folder").triggered.connect(lambda: self._move_board(board, None))
            for folder in self.folders:
                move_menu.addAction(folder.name).triggered.connect(
                    lambda _checked=False, fid=folder.id: self._move_board(board, fid)
                )
            menu.addAction("Save as template").triggered.connect(lambda: self._save_board_as_template(board))
            menu.addAction("Archive").triggered.connect(lambda: self._archive_board(board))
            menu.addAction("Delete").triggered.connect(lambda: self._delete_board(board))
        menu.exec(self.board_tree.viewport().mapToGlobal(point))

    # ------------------------------------------------------------------
    # Drag and drop
    # ------------------------------------------------------------------
    def handle_drop(self, dragged, target, below: bool) -> None:
        workspace = self.current_workspace()
        if workspace is None or dragged is None or target is None:
            return
        dragged_kind, dragged_id = dragged
        target_kind, target_id = target
        try:
            if dragged_kind == "folder":
                self._drop_folder(dragged_id, target_kind, target_id, below)
            else:
                self._drop_board(workspace, dragged_id, target_kind, target_id, below)
        except ApiError as exc:
            self._report("Reorder", exc)
        self.refresh_debouncer.trigger()

    def _drop_folder(self, folder_id: int, target_kind: str, target_id: int, below: bool) -> None:
        folder_ids = [f.id for f in self.folders]
        if folder_id not in folder_ids:
            return
        old_index = folder_ids.index(folder_id)
        if target_kind == "board":
            board = self._find_board(target_id)
            if board is None or board.folder_id not in folder_ids:
                new_index = len(folder_ids)
            else:
                new_index = folder_ids.index(board.folder_id)
        else:
            new_index = folder_ids.index(target_id) + (1 if below else 0)
        self.folders = reorder_folders(self.folders, old_index, new_index)
        self.client.reorder_folders([f.id for f in self.folders])

    def _drop_board(
        self, workspace: Workspace, board_id: int, target_kind: str, target_id: int, below: bool
    ) -> None:
        board = self._find_board(board_id)
        if board is None:
            return
        if target_kind == "folder":
            folder_id: Optional[int] = target_id
            target_position = END_POSITION
        else:
            target = self._find_board(target_id)
            if target is None:
                return
            folder_id = target.folder_id
            target_position = target.position + (1 if below else 0)
        order = board_drop_order(self.boards, board, target_position, folder_id)
        self.client.reorder_boards(workspace.id, order, folder_id=folder_id)


class TemplateManagerDialog(QDialog):
    """Lists board templates and deletes saved ones."""

    def __init__(self, client: SundayClient, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.client = client
        self.setWindowTitle("Board Templates")
        self.resize(480, 420)
        layout = QVBoxLayout(self)
        self.template_list = QListWidget()
        layout.addWidget(self.template_list)
        buttons = QHBoxLayout()
        self.delete_btn = QPushButton("Delete")
        self.delete_btn.clicked.connect(self._delete_selected)
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.accept)
        buttons.addStretch()
        buttons.addWidget(self.delete_btn)
        buttons.addWidget(close_btn)
        layout.addLayout(buttons)
        self.refresh()

    def refresh(self) -> None:
        self.template_list.clear()
        try:
            templates = self.client.list_templates()
        except ApiError as exc:
            QMessageBox.warning(self, "Templates", exc.message)
            return
        for template in templates.all_templates:
            label = f"{template.name} · {template.category}"
            if template.is_builtin:
                label += " (built-in)"
            entry = QListWidgetItem(label)
            entry.setData(ENTRY_ROLE, template)
            entry.setToolTip(template.description or "")
            self.template_list.addItem(entry)

    def _delete_selected(self) -> None:
        entry = self.template_list.currentItem()
        if entry is None:
            return
        template = entry.data(ENTRY_ROLE)
        if template.is_builtin:
            QMessageBox.information(self, "Templates", "Built-in templates cannot be deleted.")
            return
        confirm = QMessageBox.question(self, "Delete Template", f"Delete '{template.name}'?")
        if confirm != QMessageBox.StandardButton.Yes:
            return
        try:
            self.client.delete_template(int(template.id))
        except ApiError as exc:
            QMessageBox.warning(self, "Templates", exc.message)
            return
        self.refresh()


class PreviewLabel(QLabel):
    clicked = pyqtSignal(QPointF)

    def mousePressEvent(self, event: QMouseEvent) -> None:  # type: ignore[override]
        self.clicked.emit(event.position())
        super().mousePressEvent(event)


INT_FIELDS = [
    ("font_size", "Font size", 1, 1000),
    ("letter_spacing", "Letter spacing", -100, 500),
    ("x_start", "Background X", -10000, 10000),
    ("y_start", "Background Y", -10000, 10000),
    ("width", "Background width", 1, 10000),
    ("height", "Background height", 1, 10000),
    ("bg_rotation", "Background rotation", -360, 360),
    ("bg_transparency", "Background alpha", 0, 255),
    ("text_x", "Text X", -10000, 10000),
    ("text_y", "Text Y", -10000, 10000),
    ("text_rotation", "Text rotation", -360, 360),
    ("text_transparency", "Text alpha", 0, 255),
    ("watermark_size", "Watermark width", 1, 10000),
    ("watermark_x", "Watermark X", -10000, 10000),
    ("watermark_y", "Watermark Y", -10000, 10000),
    ("watermark_rotation", "Watermark rotation", -360, 360),
    ("watermark_transparency", "Watermark alpha", 0, 255),
]


class ImageBatchView(QWidget):
    """Batch labeling of an image folder, one output pass per batch."""

    def __init__(self, notify: Callable[[str], None], parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.notify = notify
        self.settings = ImageEditorSettings()
        self.image_files: List[Path] = []
        self.preview_index = 0
        self.preview_source: Optional[Image.Image] = None
        self._preview_qimage = None
        self.eyedropper_target = ""
        self.spin_boxes: Dict[str, QSpinBox] = {}
        self.preview_debouncer = Debouncer(SEARCH_DELAY_MS, self.update_preview, self)
        self._build_ui()
        if DEFAULT_IMAGE_SETTINGS.exists():
            try:
                self.settings = load_settings(DEFAULT_IMAGE_SETTINGS)
            except SettingsError as exc:
                logger.warning("Default image settings not loaded: %s", exc)
        self._populate_form()

    def _build_ui(self) -> None:
        layout = QHBoxLayout(self)
        controls = QVBoxLayout()

        paths = QGroupBox("Folders")
        paths_layout = QGridLayout(paths)
        self.input_folder = QLineEdit()
        self.output_folder = QLineEdit()
        self.font_path = QLineEdit()
        self.watermark_path = QLineEdit()
        rows = [
            ("Input folder", self.input_folder, self._browse_input),
            ("Output folder", self.output_folder, self._browse_output),
            ("Font file", self.font_path, self._browse_font),
            ("Watermark", self.watermark_path, self._browse_watermark),
        ]
        for row, (label, field_input, handler) in enumerate(rows):
            browse = QPushButton("Browse")
            browse.clicked.connect(handler)
            paths_layout.addWidget(QLabel(label), row, 0)
            paths_layout.addWidget(field_input, row, 1)
            paths_layout.addWidget(browse, row, 2)
        self.output_format = QComboBox()
        self.output_format.addItems(list(OUTPUT_FORMATS))
        paths_layout.addWidget(QLabel("Output format"), len(rows), 0)
        paths_layout.addWidget(self.output_format, len(rows), 1)
        controls.addWidget(paths)

        overlay = QGroupBox("Overlay")
        overlay_layout = QFormLayout(overlay)
        for name, label, minimum, maximum in INT_FIELDS:
            spin = QSpinBox()
            spin.setRange(minimum, maximum)
            spin.valueChanged.connect(lambda _v: self.preview_debouncer.trigger())
            self.spin_boxes[name] = spin
            overlay_layout.addRow(label, spin)
        self.text_color_btn = QPushButton()
        self.text_color_btn.clicked.connect(lambda: self._pick_color("text"))
        self.bg_color_btn = QPushButton()
        self.bg_color_btn.clicked.connect(lambda: self._pick_color("bg"))
        text_pick = QPushButton("Pick from image")
        text_pick.clicked.connect(lambda: self._start_eyedropper("text"))
        bg_pick = QPushButton("Pick from image")
        bg_pick.clicked.connect(lambda: self._start_eyedropper("bg"))
        text_row = QHBoxLayout()
        text_row.addWidget(self.text_color_btn)
        text_row.addWidget(text_pick)
        bg_row = QHBoxLayout()
        bg_row.addWidget(self.bg_color_btn)
        bg_row.addWidget(bg_pick)
        overlay_layout.addRow("Text color", text_row)
        overlay_layout.addRow("Background color", bg_row)
        self.disable_background = QCheckBox("Disable background")
        self.disable_font = QCheckBox("Disable text")
        self.disable_watermark = QCheckBox("Disable watermark")
        for checkbox in (self.disable_background, self.disable_font, self.disable_watermark):
            checkbox.toggled.connect(lambda _c: self.preview_debouncer.trigger())
            overlay_layout.addRow("", checkbox)
        controls.addWidget(overlay)

        actions = QHBoxLayout()
        load_btn = QPushButton("Load Settings")
        load_btn.clicked.connect(self._load_settings)
        save_btn = QPushButton("Save Settings")
        save_btn.clicked.connect(self._save_settings)
        self.process_btn = QPushButton("Process All Batches")
        self.process_btn.clicked.connect(self._process_all)
        actions.addWidget(load_btn)
        actions.addWidget(save_btn)
        actions.addWidget(self.process_btn)
        controls.addLayout(actions)
        layout.addLayout(controls, 2)

        right = QVBoxLayout()
        batches = QGroupBox("Batches")
        batches_layout = QVBoxLayout(batches)
        self.batch_list = QListWidget()
        self.batch_list.currentRowChanged.connect(lambda _r: self.update_preview())
        batches_layout.addWidget(self.batch_list)
        batch_buttons = QHBoxLayout()
        add_btn = QPushButton("Add Batch")
        add_btn.clicked.connect(self._add_batch)
        remove_btn = QPushButton("Remove")
        remove_btn.clicked.connect(self._remove_batch)
        batch_buttons.addWidget(add_btn)
        batch_buttons.addWidget(remove_btn)
        batches_layout.addLayout(batch_buttons)
        right.addWidget(batches)

        self.preview = PreviewLabel("No preview")
        self.preview.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.preview.setMinimumSize(480, 320)
        self.preview.clicked.connect(self._preview_clicked)
        right.addWidget(self.preview, 1)
        nav = QHBoxLayout()
        prev_btn = QPushButton("Previous")
        prev_btn.clicked.connect(lambda: self._step_preview(-1))
        next_btn = QPushButton("Next")
        next_btn.clicked.connect(lambda: self._step_preview(1))
        self.preview_caption = QLabel("")
        nav.addWidget(prev_btn)
        nav.addWidget(self.preview_caption, 1)
        nav.addWidget(next_btn)
        right.addLayout(nav)
        layout.addLayout(right, 3)

    # ------------------------------------------------------------------
    # Form binding
    # ------------------------------------------------------------------
    def _populate_form(self) -> None:
        settings = self.settings
        self.input_folder.setText(settings.input_folder)
        self.output_folder.setText(settings.output_folder)
        self.font_path.setText(settings.font_path)
        self.watermark_path.setText(settings.watermark_path)
        self.output_format.setCurrentText(settings.output_format)
        for name, spin in self.spin_boxes.items():
            spin.blockSignals(True)
            spin.setValue(getattr(settings, name))
            spin.blockSignals(False)
        self.disable_background.setChecked(settings.disable_background)
        self.disable_font.setChecked(settings.disable_font)
        self.disable_watermark.setChecked(settings.disable_watermark)
        self._update_color_buttons()
        self._refresh_batches()
        self._load_image_files()

    def _read_form(self) -> None:
        settings = self.settings
        settings.input_folder = self.input_folder.text().strip()
        settings.output_folder = self.output_folder.text().strip()
        settings.font_path = self.font_path.text().strip()
        settings.watermark_path = self.watermark_path.text().strip()
        settings.output_format = self.output_format.currentText()
        for name, spin in self.spin_boxes.items():
            setattr(settings, name, spin.value())
        settings.disable_background = self.disable_background.isChecked()
        settings.disable_font = self.disable_font.isChecked()
        settings.disable_watermark = self.disable_watermark.isChecked()

    def _update_color_buttons(self) -> None:
        for button, color in (
            (self.text_color_btn, self.settings.text_color),
            (self.bg_color_btn, self.settings.bg_color),
        ):
            button.setText(color)
            button.setStyleSheet(
                f"QPushButton {{ background-color: {color}; color: {_readable_text_color(color)}; }}"
            )

    def _refresh_batches(self) -> None:
        self.batch_list.blockSignals(True)
        self.batch_list.clear()
        for batch in self.settings.batches:
            self.batch_list.addItem(f"{batch.suffix.upper()} · {batch.phone_number}")
        self.batch_list.blockSignals(False)
        if self.settings.batches:
            self.batch_list.setCurrentRow(0)

    # ------------------------------------------------------------------
    # Browsing
    # ------------------------------------------------------------------
    def _browse_input(self) -> None:
        folder = QFileDialog.getExistingDirectory(self, "Input folder", self.input_folder.text())
        if folder:
            self.input_folder.setText(folder)
            self._read_form()
            self._load_image_files()

    def _browse_output(self) -> None:
        folder = QFileDialog.getExistingDirectory(self, "Output folder", self.output_folder.text())
        if folder:
            self.output_folder.setText(folder)

    def _browse_font(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Font file", "", "Fonts (*.ttf *.otf)")
        if path:
            self.font_path.setText(path)
            self.preview_debouncer.trigger()

    def _browse_watermark(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self, "Watermark", "", "Images (*.png *.jpg *.jpeg *.webp *.bmp *.gif)"
        )
        if path:
            self.watermark_path.setText(path)
            self.preview_debouncer.trigger()

    def _load_image_files(self) -> None:
        self.image_files = list_image_files(self.settings.input_folder)
        self.preview_index = 0
        self.update_preview()

    def _step_preview(self, step: int) -> None:
        if not self.image_files:
            return
        self.preview_index = (self.preview_index + step) % len(self.image_files)
        self.update_preview()

    # ------------------------------------------------------------------
    # Batches
    # ------------------------------------------------------------------
    def _add_batch(self) -> None:
        dialog = QDialog(self)
        dialog.setWindowTitle("Add Batch")
        form = QFormLayout(dialog)
        phone_input = QLineEdit()
        phone_input.setPlaceholderText("(888) 555-1234")
        suffix_input = QLineEdit()
        suffix_input.setPlaceholderText("DFW")
        form.addRow("Phone number", phone_input)
        form.addRow("Suffix", suffix_input)
        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Ok | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.accepted.connect(dialog.accept)
        buttons.rejected.connect(dialog.reject)
        form.addWidget(buttons)
        if dialog.exec() != QDialog.DialogCode.Accepted:
            return
        try:
            self.settings.add_batch(phone_input.text(), suffix_input.text())
        except ValueError as exc:
            QMessageBox.warning(self, "Add Batch", str(exc))
            return
        self._refresh_batches()
        self.batch_list.setCurrentRow(len(self.settings.batches) - 1)

    def _remove_batch(self) -> None:
        row = self.batch_list.currentRow()
        if row < 0:
            return
        self.settings.remove_batch(row)
        self._refresh_batches()
        self.update_preview()

    # ------------------------------------------------------------------
    # Preview and colors
    # ------------------------------------------------------------------
    def update_preview(self) -> None:
        self._read_form()
        row = self.batch_list.currentRow()
        if not self.image_files or not self.settings.batches or row < 0:
            self.preview_source = None
            self.preview.setPixmap(QPixmap())
            self.preview.setText("No preview")
            self.preview_caption.setText("")
            return
        path = self.image_files[self.preview_index]
        batch = self.settings.batches[row]
        try:
            with Image.open(path) as source:
                self.preview_source = source.convert("RGB")
            rendered = Compositor(self.settings).compose(self.preview_source, batch.phone_number)
        except OSError as exc:
            logger.warning("Preview failed for %s: %s", path, exc)
            self.preview.setText(f"Cannot preview {path.name}")
            return
        self._preview_qimage = ImageQt(rendered)
        pixmap = QPixmap.fromImage(self._preview_qimage).scaled(
            self.preview.size(),
            Qt.AspectRatioMode.KeepAspectRatio,
            Qt.TransformationMode.SmoothTransformation,
        )
        self.preview.setPixmap(pixmap)
        self.preview_caption.setText(
            f"{path.name} ({self.preview_index + 1}/{len(self.image_files)})"
        )

    def _pick_color(self, target: str) -> None:
        current = self.settings.text_color if target == "text" else self.settings.bg_color
        color = QColorDialog.getColor(QColor(current), self)
        if color.isValid():
            self._apply_color(target, color.name())

    def _start_eyedropper(self, target: str) -> None:
        if self.preview_source is None:
            self.notify("Load an image to pick a color from it")
            return
        self.eyedropper_target = target
        self.preview.setCursor(Qt.CursorShape.CrossCursor)
        self.notify("Click the preview to pick a color")

    def _preview_clicked(self, position: QPointF) -> None:
        if not self.eyedropper_target or self.preview_source is None:
            return
        size = self.preview.size()
        color = pick_color(
            self.preview_source, (position.x(), position.y()), (size.width(), size.height())
        )
        self._apply_color(self.eyedropper_target, color)
        self.eyedropper_target = ""
        self.preview.unsetCursor()

    def _apply_color(self, target: str, color: str) -> None:
        if target == "text":
            self.settings.text_color = color
        else:
            self.settings.bg_color = color
        self._update_color_buttons()
        self.update_preview()

    # ------------------------------------------------------------------
    # Settings files and processing
    # ------------------------------------------------------------------
    def _load_settings(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Load Settings", "", "Settings (*.json)")
        if not path:
            return
        try:
            self.settings = load_settings(Path(path))
        except SettingsError as exc:
            QMessageBox.critical(self, "Load Settings", f"Failed to load settings: {exc}")
            return
        self._populate_form()
        self.notify(f"Settings loaded from {path}")

    def _save_settings(self) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self, "Save Settings", "image_editor_settings.json", "Settings (*.json)"
        )
        if not path:
            return
        self._read_form()
        try:
            save_settings(self.settings, Path(path))
        except OSError as exc:
            QMessageBox.critical(self, "Save Settings", str(exc))
            return
        self.notify(f"Settings saved to {path}")

    def _process_all(self) -> None:
        self._read_form()
        progress = QProgressDialog("Starting…", "", 0, 100, self)
        progress.setCancelButton(None)
        progress.setWindowTitle("Processing")
        progress.setWindowModality(Qt.WindowModality.WindowModal)
        progress.setMinimumDuration(0)

        def on_progress(done: int, total: int, status: str) -> None:
            progress.setMaximum(total)
            progress.setValue(done)
            progress.setLabelText(status)
            QApplication.processEvents()

        self.process_btn.setEnabled(False)
        try:
            report = run_batches(self.settings, on_progress)
        except BatchError as exc:
            QMessageBox.warning(self, "Batch", str(exc))
            return
        except OSError as exc:
            QMessageBox.critical(self, "Batch", f"Error: {exc}")
            return
        finally:
            progress.close()
            self.process_btn.setEnabled(True)
        message = f"Successfully processed {report.processed} images!"
        if report.failures:
            message += f" {len(report.failures)} could not be read."
        self.notify(message)


class MainWindow(QMainWindow):
    def __init__(
        self, client: SundayClient, preferences: PreferenceStore, theme: ThemeController
    ) -> None:
        super().__init__()
        self.client = client
        self.preferences = preferences
        self.theme = theme
        self.setWindowTitle("Sunday")
        self.resize(1280, 820)
        self._init_ui()
        self._create_menus()
        self.theme.subscribe(lambda _mode: self._update_theme_action())

    def _init_ui(self) -> None:
        tabs = QTabWidget()
        self.board_view = BoardView(self.client, self.preferences, self.notify)
        self.image_view = ImageBatchView(self.notify)
        tabs.addTab(self.board_view, "Boards")
        tabs.addTab(self.image_view, "Batch Images")
        self.setCentralWidget(tabs)

    def _create_menus(self) -> None:
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)
        refresh_action = toolbar.addAction("Refresh")
        refresh_action.triggered.connect(lambda: self.board_view.refresh_debouncer.trigger())
        toolbar.addSeparator()
        self.theme_action = QAction(self)
        self.theme_action.triggered.connect(lambda: self.theme.toggle())
        toolbar.addAction(self.theme_action)
        self._update_theme_action()

    def _update_theme_action(self) -> None:
        if self.theme.mode is ThemeMode.SYSTEM:
            label = "Theme: System"
        else:
            label = "Theme: Dark" if self.theme.mode is ThemeMode.DARK else "Theme: Light"
        self.theme_action.setText(label)

    def notify(self, message: str) -> None:
        self.statusBar().showMessage(message, 4000)

    def start(self) -> None:
        self.board_view.check_admin()
        self.board_view.load_workspaces()


def main() -> None:
    configure_logging(LOG_PATH)
    logging.info("Starting Sunday client")
    preferences = PreferenceStore(PREFERENCES_PATH)
    theme = ThemeController(preferences)
    app = create_application(theme)
    try:
        config = load_config()
    except ConfigError as exc:
        logging.error("Configuration error: %s", exc)
        QMessageBox.critical(None, "Configuration", str(exc))
        config = ClientConfig()
    client = SundayClient(config)
    window = MainWindow(client, preferences, theme)
    window.show()
    window.start()
    app.exec()


if __name__ == "__main__":
    main()

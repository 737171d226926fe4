from __future__ import annotations

import logging
from pathlib import Path

from PyQt6.QtCore import QByteArray, Qt, QUrl
from PyQt6.QtGui import QAction, QActionGroup, QKeySequence
from PyQt6.QtWidgets import (
    QApplication,
    QFileDialog,
    QMainWindow,
    QMenu,
    QMessageBox,
    QSplitter,
    QStatusBar,
    QTextBrowser,
    QTextEdit,
    QToolBar,
)

from mdinline.domain.errors import ExportError
from mdinline.domain.interfaces import (
    IExportSettingsStore,
    IFileService,
    IMarkdownRenderer,
    ISettingsService,
)
from mdinline.domain.models import Document, ExportSettings
from mdinline.services.ambient_styles import AmbientStyles
from mdinline.services.export.pipeline import InlineExportPipeline
from mdinline.services.ui.export_settings_dialog import ExportSettingsDialog
from mdinline.utils.constants import MAX_RECENTS, THEME_LABELS

logger = logging.getLogger(__name__)

STATUS_TIMEOUT_MS = 3000
ERROR_STATUS_TIMEOUT_MS = 8000


class MainWindow(QMainWindow):
    """Thin PyQt window that delegates work to injected services (DIP)."""

    def __init__(
        self,
        renderer: IMarkdownRenderer,
        file_service: IFileService,
        settings: ISettingsService,
        *,
        export_pipeline: InlineExportPipeline,
        export_settings: IExportSettingsStore,
        ambient: AmbientStyles,
        start_path: Path | None = None,
        app_title: str = "mdinline",
    ) -> None:
        super().__init__()
        self._app_title = app_title
        self.setWindowTitle(app_title)
        self.resize(1100, 700)

        self.renderer = renderer
        self.file_service = file_service
        self.settings = settings
        self.export_pipeline = export_pipeline
        self.export_settings = export_settings
        self.ambient = ambient

        self.doc = Document(path=None, text="", modified=False)
        self.recents: list[str] = self.settings.get_recent()

        # Widgets
        self.editor = QTextEdit(self)
        self.editor.setAcceptRichText(False)
        self.editor.setTabStopDistance(4 * self.editor.fontMetrics().horizontalAdvance(" "))

        self.preview = self._create_preview_widget()

        self.splitter = QSplitter(self)
        self.splitter.setOrientation(Qt.Orientation.Horizontal)
        self.splitter.addWidget(self.editor)
        self.splitter.addWidget(self.preview)
        self.splitter.setStretchFactor(0, 1)
        self.splitter.setStretchFactor(1, 1)
        self.setCentralWidget(self.splitter)

        self.editor.textChanged.connect(self._on_text_changed)

        self._build_actions()
        self._build_toolbar()
        self._build_menu()
        self.setStatusBar(QStatusBar(self))

        # Restore UI state
        geo = self.settings.get_geometry()
        if isinstance(geo, (bytes, bytearray)):
            self.restoreGeometry(QByteArray(geo))
        split = self.settings.get_splitter()
        if isinstance(split, (bytes, bytearray)):
            self.splitter.restoreState(QByteArray(split))

        if start_path:
            self._open_path(start_path)
        else:
            self._render_preview()

        self.setAcceptDrops(True)

    # ---------- UI creation ----------
    def _build_actions(self):
        self.act_new = QAction(
            "New", self, shortcut=QKeySequence.StandardKey.New, triggered=self._new_file
        )
        self.act_open = QAction(
            "Open…",
            self,
            shortcut=QKeySequence.StandardKey.Open,
            triggered=self._open_dialog,
        )
        self.act_save = QAction(
            "Save", self, shortcut=QKeySequence.StandardKey.Save, triggered=self._save
        )
        self.act_save_as = QAction(
            "Save As…",
            self,
            shortcut=QKeySequence.StandardKey.SaveAs,
            triggered=self._save_as,
        )
        self.act_exit = QAction("&Exit", self, shortcut="Ctrl+Q", triggered=self.close)

        self.act_copy_rich = QAction(
            "Copy as Inlined Rich Text",
            self,
            shortcut="Ctrl+Shift+C",
            triggered=self.copy_as_rich_text,
        )
        self.act_copy_rich.setStatusTip("Copy the document as self-contained, inline-styled HTML")
        self.act_export_settings = QAction(
            "Export Settings…", self, triggered=self._show_export_settings
        )

        self.act_toggle_preview = QAction(
            "Toggle Preview",
            self,
            checkable=True,
            checked=True,
            triggered=self._toggle_preview,
        )

        self.theme_group = QActionGroup(self)
        self.theme_group.setExclusive(True)
        self.theme_actions: dict[str, QAction] = {}
        for theme_id in self.ambient.list_themes():
            act = QAction(
                THEME_LABELS.get(theme_id, theme_id),
                self,
                checkable=True,
                checked=theme_id == self.ambient.get_theme(),
                triggered=lambda chk=False, t=theme_id: self.set_theme(t),
            )
            self.theme_group.addAction(act)
            self.theme_actions[theme_id] = act

        self.recent_menu = QMenu("Open Recent", self)

    def _build_toolbar(self):
        tb = QToolBar("Main", self)
        tb.setMovable(False)
        for a in (self.act_new, self.act_open, self.act_save, self.act_save_as):
            tb.addAction(a)
        tb.addSeparator()
        tb.addAction(self.act_copy_rich)
        tb.addAction(self.act_toggle_preview)
        self.addToolBar(tb)

    def _build_menu(self):
        m = self.menuBar()
        filem = m.addMenu("&File")
        filem.addAction(self.act_new)
        filem.addAction(self.act_open)
        filem.addMenu(self.recent_menu)
        filem.addSeparator()
        filem.addAction(self.act_save)
        filem.addAction(self.act_save_as)
        filem.addSeparator()
        filem.addAction(self.act_exit)
        self._refresh_recent_menu()

        exportm = m.addMenu("E&xport")
        exportm.addAction(self.act_copy_rich)
        exportm.addSeparator()
        exportm.addAction(self.act_export_settings)

        viewm = m.addMenu("&View")
        viewm.addAction(self.act_toggle_preview)
        themem = viewm.addMenu("Theme")
        for act in self.theme_actions.values():
            themem.addAction(act)

    def _refresh_recent_menu(self):
        self.recent_menu.clear()
        if not self.recents:
            na = QAction("(empty)", self)
            na.setEnabled(False)
            self.recent_menu.addAction(na)
            return
        for p in self.recents[:MAX_RECENTS]:
            self.recent_menu.addAction(
                QAction(p, self, triggered=lambda chk=False, x=p: self._open_path(Path(x)))
            )

    # ---------- Export command ----------
    def copy_as_rich_text(self) -> bool:
        """Copy the current document to the clipboard as inline-styled rich text."""
        self.doc.text = self.editor.toPlainText()
        self.act_copy_rich.setEnabled(False)
        self.statusBar().showMessage("Exporting…")
        QApplication.processEvents()
        try:
            self.export_pipeline.copy(Document(self.doc.path, self.doc.text, self.doc.modified))
        except ExportError as e:
            logger.error("Rich-text export failed: %s", e)
            self.statusBar().showMessage(f"Export failed: {e}", ERROR_STATUS_TIMEOUT_MS)
            return False
        except Exception as e:
            logger.exception("Rich-text export failed unexpectedly")
            self.statusBar().showMessage(f"Export failed: {e}", ERROR_STATUS_TIMEOUT_MS)
            return False
        finally:
            self.act_copy_rich.setEnabled(True)
        self.statusBar().showMessage("Copied inlined rich text to clipboard", STATUS_TIMEOUT_MS)
        return True

    def _show_export_settings(self) -> None:
        dlg = ExportSettingsDialog(
            self.export_settings.load(), self, on_change=self._save_export_settings
        )
        dlg.show_settings_dialog()

    def _save_export_settings(self, settings: ExportSettings) -> None:
        try:
            self.export_settings.save(settings)
        except Exception as e:
            QMessageBox.critical(self, "Settings Error", f"Failed to save export settings:\n{e}")

    def set_theme(self, theme_id: str) -> None:
        self.ambient.set_theme(theme_id)
        act = self.theme_actions.get(self.ambient.get_theme())
        if act is not None:
            act.setChecked(True)
        self._render_preview()

    # ---------- File ops ----------
    def _new_file(self):
        if not self._confirm_discard():
            return
        self.doc = Document(path=None, text="", modified=False)
        self.editor.setPlainText("")
        self.doc.modified = False
        self._update_title()
        self._render_preview()

    def _open_dialog(self):
        path_str, _ = QFileDialog.getOpenFileName(
            self,
            "Open Markdown",
            "",
            "Markdown (*.md *.markdown *.mdown);;Text (*.txt);;All files (*)",
        )
        if path_str:
            self._open_path(Path(path_str))

    def _open_path(self, path: Path):
        if not self._confirm_discard():
            return
        try:
            text = self.file_service.read_text(path)
        except (OSError, UnicodeDecodeError) as e:
            QMessageBox.critical(self, "Open Error", f"Failed to open file:\n{e}")
            return
        self.doc = Document(path=path, text=text, modified=False)
        self.editor.setPlainText(text)
        self.doc.modified = False
        self._update_title()
        self._render_preview()
        self._add_recent(path)

    def _save(self):
        if self.doc.path is None:
            self._save_as()
            return
        self._write_to(self.doc.path)

    def _save_as(self):
        start = str(self.doc.path) if self.doc.path else ""
        path_str, _ = QFileDialog.getSaveFileName(
            self, "Save As", start, "Markdown (*.md);;All files (*)"
        )
        if not path_str:
            return
        path = Path(path_str)
        if self._write_to(path):
            self.doc.path = path
            self._update_title()
            self._add_recent(path)

    def _write_to(self, path: Path) -> bool:
        try:
            self.file_service.write_text_atomic(path, self.editor.toPlainText())
        except OSError as e:
            QMessageBox.critical(self, "Save Error", f"Failed to save file:\n{e}")
            return False
        self.doc.modified = False
        self._update_title()
        self.statusBar().showMessage(f"Saved: {path}", STATUS_TIMEOUT_MS)
        return True

    def _toggle_preview(self, on: bool):
        self.preview.setVisible(on)

    # ---------- Helpers ----------
    def _render_preview(self):
        html = self.renderer.to_html(self.editor.toPlainText())
        if self.doc.path is not None and hasattr(self.preview, "page"):
            base = QUrl.fromLocalFile(str(self.doc.path.resolve().parent) + "/")
            self.preview.setHtml(html, base)
        else:
            # Both QWebEngineView and QTextBrowser implement setHtml(html).
            self.preview.setHtml(html)

    def _on_text_changed(self):
        self.doc.modified = True
        self._update_title()
        self._render_preview()

    def _update_title(self):
        name = self.doc.path.name if self.doc.path else "Untitled"
        star = " •" if self.doc.modified else ""
        self.setWindowTitle(f"{name}{star} — {self._app_title}")

    def _confirm_discard(self) -> bool:
        if not self.doc.modified:
            return True
        resp = QMessageBox.question(
            self,
            "Discard changes?",
            "You have unsaved changes. Discard them?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        )
        return resp == QMessageBox.StandardButton.Yes

    def _add_recent(self, path: Path):
        s = str(path)
        if s in self.recents:
            self.recents.remove(s)
        self.recents.insert(0, s)
        self.recents = self.recents[:MAX_RECENTS]
        self.settings.set_recent(self.recents)
        self._refresh_recent_menu()

    # ---------- DnD ----------
    def dragEnterEvent(self, e):
        if e.mimeData().hasUrls():
            e.acceptProposedAction()

    def dropEvent(self, e):
        urls = e.mimeData().urls()
        if not urls:
            return
        local = urls[0].toLocalFile()
        if local:
            self._open_path(Path(local))

    # ---------- Close ----------
    def closeEvent(self, event):
        if not self._confirm_discard():
            event.ignore()
            return
        self.settings.set_geometry(bytes(self.saveGeometry()))
        self.settings.set_splitter(bytes(self.splitter.saveState()))
        super().closeEvent(event)

    # ---------- Internal: preview creation ----------
    def _create_preview_widget(self):
        """
        Prefer QWebEngineView (same engine as the export sandbox), fall back to QTextBrowser.
        The app still edits and previews without Qt WebEngine; only the rich-text export needs it.
        """
        try:
            from PyQt6.QtWebEngineWidgets import QWebEngineView
        except ImportError as e:
            logger.warning("Qt WebEngine unavailable (%s); using QTextBrowser preview", e)
            w = QTextBrowser(self)
            w.setOpenExternalLinks(True)
            return w
        return QWebEngineView(self)

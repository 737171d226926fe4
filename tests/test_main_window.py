from __future__ import annotations

from pathlib import Path

import pytest
from PyQt6.QtCore import QSettings
from PyQt6.QtWidgets import QMessageBox

from mdinline.domain.errors import ClipboardUnavailable, SourceUnavailable
from mdinline.domain.models import Document, ExportSettings, ImageHandling
from mdinline.services.ambient_styles import AmbientStyles
from mdinline.services.export.settings_store import SettingsExportSettingsStore
from mdinline.services.file_service import FileService
from mdinline.services.markdown_renderer import MarkdownRenderer
from mdinline.services.settings_service import SettingsService
from mdinline.services.ui.export_settings_dialog import ExportSettingsDialog
from mdinline.services.ui.main_window import MainWindow

# ------------------------------
# Fakes & helpers
# ------------------------------


class FakePipeline:
    """Records what would have been exported; optionally fails."""

    def __init__(self) -> None:
        self.error: Exception | None = None
        self.copied: list[Document] = []

    def copy(self, document: Document) -> str:
        if self.error is not None:
            raise self.error
        self.copied.append(document)
        return "<p>ok</p>"


@pytest.fixture()
def pipeline() -> FakePipeline:
    return FakePipeline()


@pytest.fixture()
def window(qapp, tmp_path, pipeline: FakePipeline) -> MainWindow:
    """MainWindow with file-based QSettings (isolated per test) and a fake export pipeline."""
    qs = QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)
    settings = SettingsService(qs)
    ambient = AmbientStyles()
    w = MainWindow(
        renderer=MarkdownRenderer(ambient=ambient),
        file_service=FileService(),
        settings=settings,
        export_pipeline=pipeline,
        export_settings=SettingsExportSettingsStore(settings),
        ambient=ambient,
        start_path=None,
        app_title="Test",
    )
    w.show()
    qapp.processEvents()
    return w


# ------------------------------
# Core window behavior tests
# ------------------------------


def test_window_initial_state(window: MainWindow):
    assert window.doc.path is None
    assert window.doc.modified is False
    assert window.act_copy_rich.isEnabled()


def test_window_open_save_cycle(tmp_path: Path, window: MainWindow):
    src = tmp_path / "a.md"
    src.write_text("# Hello", encoding="utf-8")

    window._open_path(src)
    assert window.doc.path == src
    assert window.editor.toPlainText().startswith("# Hello")

    # edit -> modified
    window.editor.setPlainText("# Hello\nWorld")
    assert window.doc.modified is True

    dest = tmp_path / "b.md"
    assert window._write_to(dest) is True
    assert dest.read_text(encoding="utf-8").endswith("World")
    assert window.doc.modified is False


def test_window_write_failure_shows_error(monkeypatch, tmp_path: Path, window: MainWindow):
    monkeypatch.setattr(QMessageBox, "critical", lambda *a, **k: None)

    def boom(self, path: Path, text: str) -> None:
        raise OSError("disk full")

    monkeypatch.setattr(type(window.file_service), "write_text_atomic", boom, raising=False)
    assert window._write_to(tmp_path / "bad.md") is False


# ------------------------------
# Rich-text export command
# ------------------------------


def test_copy_exports_current_editor_text(tmp_path: Path, window: MainWindow, pipeline: FakePipeline):
    src = tmp_path / "a.md"
    src.write_text("# Hello", encoding="utf-8")
    window._open_path(src)
    window.editor.setPlainText("# Changed")

    assert window.copy_as_rich_text() is True

    assert pipeline.copied[0].text == "# Changed"
    assert pipeline.copied[0].path == src
    assert window.statusBar().currentMessage() == "Copied inlined rich text to clipboard"
    assert window.act_copy_rich.isEnabled()


def test_copy_failure_reports_reason(window: MainWindow, pipeline: FakePipeline):
    pipeline.error = SourceUnavailable("styles/wechat.css")

    assert window.copy_as_rich_text() is False
    msg = window.statusBar().currentMessage()
    assert msg.startswith("Export failed:")
    assert "styles/wechat.css" in msg
    assert window.act_copy_rich.isEnabled()


def test_copy_clipboard_failure(window: MainWindow, pipeline: FakePipeline):
    pipeline.error = ClipboardUnavailable("locked")
    assert window.copy_as_rich_text() is False
    assert "locked" in window.statusBar().currentMessage()


def test_copy_action_triggers_export(window: MainWindow, pipeline: FakePipeline):
    window.editor.setPlainText("text")
    window.act_copy_rich.trigger()
    assert len(pipeline.copied) == 1


def test_export_settings_saved_on_every_edit(monkeypatch, window: MainWindow):
    seen = []

    def edit(dlg: ExportSettingsDialog) -> int:
        dlg.keep_radio.setChecked(True)
        seen.append(window.export_settings.load().image_handling)
        dlg.style_combo.setCurrentIndex(dlg.style_combo.findData("WeChat"))
        # closing without any confirmation keeps both edits
        return ExportSettingsDialog.DialogCode.Rejected

    monkeypatch.setattr(ExportSettingsDialog, "show_settings_dialog", edit)
    window.act_export_settings.trigger()

    assert seen == [ImageHandling.KEEP_REFERENCE]
    saved = window.export_settings.load()
    assert saved.image_handling is ImageHandling.KEEP_REFERENCE
    assert saved.active_profile_name == "WeChat"


def test_export_settings_untouched_without_edits(monkeypatch, window: MainWindow):
    monkeypatch.setattr(
        ExportSettingsDialog, "show_settings_dialog", lambda dlg: ExportSettingsDialog.DialogCode.Rejected
    )
    window.act_export_settings.trigger()

    assert window.export_settings.load() == ExportSettings()


def test_theme_action_switches_ambient(window: MainWindow):
    window.theme_actions["midnight"].trigger()
    assert window.ambient.get_theme() == "midnight"
    assert window.theme_actions["midnight"].isChecked()


# ------------------------------
# Persistence
# ------------------------------


def test_window_recents_persist_roundtrip(window: MainWindow, tmp_path: Path, qapp, pipeline):
    p = tmp_path / "r.md"
    p.write_text("ok", encoding="utf-8")
    window._open_path(p)
    assert str(p) in window.recents[:1]  # most recent

    window.close()
    qapp.processEvents()

    w2 = MainWindow(
        renderer=window.renderer,
        file_service=FileService(),
        settings=window.settings,  # same SettingsService (file-backed)
        export_pipeline=pipeline,
        export_settings=window.export_settings,
        ambient=window.ambient,
        app_title="Test2",
    )
    assert str(p) in w2.recents[:1]


def test_window_confirm_discard_negative(window: MainWindow, monkeypatch):
    monkeypatch.setattr(QMessageBox, "question", lambda *a, **k: QMessageBox.StandardButton.No)
    window.doc.modified = True
    assert window._confirm_discard() is False


def test_window_confirm_discard_positive(window: MainWindow, monkeypatch):
    monkeypatch.setattr(QMessageBox, "question", lambda *a, **k: QMessageBox.StandardButton.Yes)
    window.doc.modified = True
    assert window._confirm_discard() is True

from __future__ import annotations

from functools import partial
from pathlib import Path

from PyQt6.QtCore import QSettings

from mdinline.domain.interfaces import (
    IExportSettingsStore,
    IFileService,
    IMarkdownRenderer,
    ISettingsService,
)
from mdinline.services.ambient_styles import AmbientStyles
from mdinline.services.config.app_config import AppConfig, build_app_config
from mdinline.services.document_source import document_source_factory
from mdinline.services.export.clipboard_writer import RichTextClipboardWriter
from mdinline.services.export.pipeline import InlineExportPipeline
from mdinline.services.export.sandbox import WebEngineSandbox
from mdinline.services.export.settings_store import SettingsExportSettingsStore
from mdinline.services.file_service import FileService
from mdinline.services.markdown_renderer import MarkdownRenderer
from mdinline.services.settings_service import SettingsService
from mdinline.services.ui.main_window import MainWindow


class Container:
    """
    Lightweight DI container:
      - Wires default services if not provided
      - Builds the rich-text export pipeline from the app config
    """

    def __init__(
        self,
        renderer: IMarkdownRenderer | None = None,
        files: IFileService | None = None,
        settings: ISettingsService | None = None,
        qsettings: QSettings | None = None,
        config: AppConfig | None = None,
        ambient: AmbientStyles | None = None,
        export_settings: IExportSettingsStore | None = None,
        clipboard_writer: RichTextClipboardWriter | None = None,
    ) -> None:
        self.config: AppConfig = config or build_app_config()
        content_root = self.config.content_root()

        self.file_service: IFileService = files or FileService()
        self.settings_service: ISettingsService = settings or SettingsService(
            qsettings or QSettings()
        )
        self.ambient: AmbientStyles = ambient or AmbientStyles(
            theme_id=self.config.theme(),
            snippets_dir=self.config.snippets_dir(content_root),
        )
        self.renderer: IMarkdownRenderer = renderer or MarkdownRenderer(ambient=self.ambient)
        self.export_settings: IExportSettingsStore = export_settings or SettingsExportSettingsStore(
            self.settings_service
        )

        timeout_ms = self.config.load_timeout_ms()
        self.export_pipeline = InlineExportPipeline(
            renderer=self.renderer,
            ambient=self.ambient,
            settings_store=self.export_settings,
            source_factory=document_source_factory(content_root, self.file_service),
            clipboard_writer=clipboard_writer,
            sandbox_factory=partial(
                WebEngineSandbox, load_timeout_ms=timeout_ms, script_timeout_ms=timeout_ms
            ),
        )

    @staticmethod
    def default(
        qsettings: QSettings | None = None,
        *,
        organization: str = "mdinline",
        application: str = "mdinline",
        config: AppConfig | None = None,
    ) -> Container:
        if qsettings is None:
            qsettings = QSettings(organization, application)
        return Container(qsettings=qsettings, config=config)

    # ---------- UI factories ----------

    def build_main_window(
        self,
        *,
        start_path: Path | None = None,
        app_title: str = "mdinline",
    ) -> MainWindow:
        return MainWindow(
            renderer=self.renderer,
            file_service=self.file_service,
            settings=self.settings_service,
            export_pipeline=self.export_pipeline,
            export_settings=self.export_settings,
            ambient=self.ambient,
            start_path=start_path,
            app_title=app_title,
        )

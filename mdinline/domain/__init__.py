"""Domain layer: interfaces, errors and simple models (dataclasses)."""

from .errors import (
    AssetResolutionSkipped,
    ClipboardUnavailable,
    ExportError,
    RenderUnavailable,
    SourceUnavailable,
    StyleSheetUnreadable,
)
from .interfaces import (
    IAmbientStyles,
    IClipboard,
    IDocumentSource,
    IExportSettingsStore,
    IFileService,
    IMarkdownRenderer,
    ISettingsService,
    IStyleEngine,
    IStyleSheet,
)
from .models import Document, ExportSettings, ImageHandling, RenderedNode, StyleProfile

__all__ = [
    "IMarkdownRenderer",
    "IFileService",
    "IDocumentSource",
    "ISettingsService",
    "IExportSettingsStore",
    "IStyleSheet",
    "IAmbientStyles",
    "IStyleEngine",
    "IClipboard",
    "Document",
    "ExportSettings",
    "ImageHandling",
    "RenderedNode",
    "StyleProfile",
    "ExportError",
    "SourceUnavailable",
    "RenderUnavailable",
    "AssetResolutionSkipped",
    "ClipboardUnavailable",
    "StyleSheetUnreadable",
]

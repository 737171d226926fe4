"""Rich-text export: style aggregation, image embedding, sandbox rendering, inlining, clipboard."""

from .asset_resolver import AssetResolver
from .clipboard_writer import QtClipboard, RichTextClipboardWriter
from .pipeline import InlineExportPipeline
from .sandbox import WebEngineSandbox, compose_document
from .settings_store import SettingsExportSettingsStore
from .style_aggregator import StyleAggregator, aggregate_ambient
from .style_inliner import StyleInliner, style_declaration

__all__ = [
    "AssetResolver",
    "InlineExportPipeline",
    "QtClipboard",
    "RichTextClipboardWriter",
    "SettingsExportSettingsStore",
    "StyleAggregator",
    "StyleInliner",
    "WebEngineSandbox",
    "aggregate_ambient",
    "compose_document",
    "style_declaration",
]

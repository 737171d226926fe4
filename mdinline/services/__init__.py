"""Concrete service implementations."""

from .ambient_styles import AmbientStyles, StyleSheet
from .document_source import DocumentSource, document_source_factory
from .file_service import FileService
from .markdown_renderer import MarkdownRenderer
from .settings_service import SettingsService

__all__ = [
    "AmbientStyles",
    "DocumentSource",
    "FileService",
    "MarkdownRenderer",
    "SettingsService",
    "StyleSheet",
    "document_source_factory",
]

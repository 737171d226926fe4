from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Iterable, Protocol, runtime_checkable

from mdinline.domain.models import ExportSettings, RenderedNode


class IMarkdownRenderer(Protocol):
    """Convert Markdown text to HTML."""

    def to_html(self, markdown_text: str) -> str:
        """Full preview document (CSS, theme classes, container)."""
        ...

    def render_fragment(self, markdown_text: str) -> str:
        """Body markup only, including preview affordances such as copy buttons."""
        ...


class IFileService(Protocol):
    """Read/write files. Writes should be atomic when possible."""

    def read_text(self, path: Path) -> str: ...
    def read_bytes(self, path: Path) -> bytes: ...
    def exists(self, path: Path) -> bool: ...
    def write_text_atomic(self, path: Path, text: str) -> None: ...


class IDocumentSource(Protocol):
    """Reads files below a content root and resolves media references to them."""

    @property
    def content_root(self) -> Path: ...

    def read_text(self, path: str | Path) -> str: ...
    def exists(self, path: str | Path) -> bool: ...
    def resolve_reference(self, raw_ref: str, from_path: Path | None) -> Path | None: ...
    def read_binary(self, handle: Path) -> bytes: ...


class ISettingsService(Protocol):
    """Persist and retrieve lightweight UI state."""

    def get_geometry(self) -> bytes | None: ...
    def set_geometry(self, blob: bytes) -> None: ...
    def get_splitter(self) -> bytes | None: ...
    def set_splitter(self, blob: bytes) -> None: ...
    def get_recent(self) -> list[str]: ...
    def set_recent(self, recent: Iterable[str]) -> None: ...
    def get_raw(self, key: str, default: object = None) -> object: ...
    def set_raw(self, key: str, value: object) -> None: ...


class IExportSettingsStore(Protocol):
    def load(self) -> ExportSettings: ...
    def save(self, settings: ExportSettings) -> None: ...


@runtime_checkable
class IStyleSheet(Protocol):
    href: str | None

    def read_rules(self) -> str:
        """Rule text of the sheet; raises StyleSheetUnreadable when it cannot be read."""
        ...


class IAmbientStyles(Protocol):
    """Style sheets and body classes currently driving the live preview."""

    preview_container_class: str

    def style_sheets(self) -> Sequence[IStyleSheet]: ...
    def body_classes(self) -> str: ...


class IStyleEngine(Protocol):
    """
    Narrow view of a CSS-capable engine holding a rendered tree.
    The inliner only reads computed values and writes inline styles through it.
    """

    def root(self) -> RenderedNode: ...
    def children(self, node: RenderedNode) -> Sequence[RenderedNode]: ...
    def computed_value(self, node: RenderedNode, prop: str) -> str | None: ...
    def set_inline_style(self, node: RenderedNode, style: str) -> None: ...
    def remove_matching(self, selectors: Sequence[str]) -> int: ...


class IClipboard(Protocol):
    def set_rich_text(self, html: str, plain: str) -> None: ...
    def has_html(self) -> bool: ...

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from mdinline.domain.errors import StyleSheetUnreadable
from mdinline.domain.interfaces import IAmbientStyles
from mdinline.utils.constants import (
    CSS_PREVIEW,
    DARK_THEMES,
    PREVIEW_CONTAINER_CLASS,
    THEME_CSS,
)

logger = logging.getLogger(__name__)

DEFAULT_SNIPPETS_DIR = ".mdinline/snippets"


@dataclass(frozen=True)
class StyleSheet:
    """An ambient sheet: either inline text or a loader for a file-backed snippet."""

    href: str | None
    text: str | None = None
    loader: Callable[[], str] | None = None

    def read_rules(self) -> str:
        if self.text is not None:
            return self.text
        if self.loader is None:
            raise StyleSheetUnreadable(self.href, "sheet has no content")
        try:
            return self.loader()
        except (OSError, UnicodeDecodeError) as e:
            raise StyleSheetUnreadable(self.href, str(e)) from e


class AmbientStyles(IAmbientStyles):
    """
    The styles the live preview is rendered with: built-in CSS, the active theme,
    then user snippets (*.css in the snippets folder, by file name).
    """

    preview_container_class = PREVIEW_CONTAINER_CLASS

    def __init__(
        self,
        *,
        theme_id: str = "default",
        snippets_dir: Path | None = None,
    ) -> None:
        self._theme_id = theme_id if theme_id in THEME_CSS else "default"
        self._snippets_dir = snippets_dir

    # ---- theme ----

    def list_themes(self) -> list[str]:
        return list(THEME_CSS)

    def get_theme(self) -> str:
        return self._theme_id

    def set_theme(self, theme_id: str) -> None:
        if theme_id not in THEME_CSS:
            logger.warning("Unknown theme %r, keeping %r", theme_id, self._theme_id)
            return
        self._theme_id = theme_id

    def set_snippets_dir(self, snippets_dir: Path | None) -> None:
        self._snippets_dir = snippets_dir

    # ---- IAmbientStyles ----

    def body_classes(self) -> str:
        mode = "theme-dark" if self._theme_id in DARK_THEMES else "theme-light"
        return f"mdinline {mode}"

    def style_sheets(self) -> list[StyleSheet]:
        sheets = [StyleSheet(href=None, text=CSS_PREVIEW)]
        theme_css = THEME_CSS.get(self._theme_id, "")
        if theme_css:
            sheets.append(StyleSheet(href=f"theme:{self._theme_id}", text=theme_css))
        sheets.extend(self._snippet_sheets())
        return sheets

    def _snippet_sheets(self) -> list[StyleSheet]:
        folder = self._snippets_dir
        if folder is None or not folder.is_dir():
            return []
        try:
            files = sorted(p for p in folder.glob("*.css") if p.is_file())
        except OSError as e:
            logger.warning("Cannot list CSS snippets in %s: %s", folder, e)
            return []
        return [
            StyleSheet(href=p.as_uri(), loader=lambda p=p: p.read_text(encoding="utf-8"))
            for p in files
        ]

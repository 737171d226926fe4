from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from PyQt6.QtCore import QMimeData
from PyQt6.QtGui import QGuiApplication, QTextDocumentFragment

from mdinline.domain.errors import ClipboardUnavailable
from mdinline.domain.interfaces import IClipboard

logger = logging.getLogger(__name__)


def html_to_plain(html: str) -> str:
    """Plain-text alternative for targets that only accept text."""
    return QTextDocumentFragment.fromHtml(html).toPlainText()


class QtClipboard(IClipboard):
    """System clipboard through QGuiApplication."""

    def _clipboard(self):
        if QGuiApplication.instance() is None:
            raise ClipboardUnavailable("no Qt application is running")
        cb = QGuiApplication.clipboard()
        if cb is None:
            raise ClipboardUnavailable("the system clipboard is not accessible")
        return cb

    def set_rich_text(self, html: str, plain: str) -> None:
        cb = self._clipboard()
        with _scoped_mime(html, plain) as mime:
            cb.setMimeData(mime)

    def has_html(self) -> bool:
        data = self._clipboard().mimeData()
        return data is not None and data.hasHtml()


@contextmanager
def _scoped_mime(html: str, plain: str) -> Iterator[QMimeData]:
    """
    Payload object handed to the clipboard. The clipboard takes ownership on
    success; if handing it over fails the object is released here.
    """
    mime = QMimeData()
    mime.setHtml(html)
    mime.setText(plain)
    handed_over = False
    try:
        yield mime
        handed_over = True
    finally:
        if not handed_over:
            mime.deleteLater()


class RichTextClipboardWriter:
    """Puts the finished, style-inlined HTML on the rich-text clipboard channel."""

    def __init__(self, clipboard: IClipboard | None = None) -> None:
        self._clipboard = clipboard or QtClipboard()

    def write(self, html: str) -> None:
        plain = html_to_plain(html)
        try:
            self._clipboard.set_rich_text(html, plain)
        except ClipboardUnavailable:
            raise
        except RuntimeError as e:
            raise ClipboardUnavailable(str(e)) from e

        if not self._clipboard.has_html():
            raise ClipboardUnavailable("the clipboard did not accept the HTML payload")
        logger.info("Copied %d characters of HTML to the clipboard", len(html))

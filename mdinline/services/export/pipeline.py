from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from mdinline.domain.interfaces import (
    IAmbientStyles,
    IDocumentSource,
    IExportSettingsStore,
    IMarkdownRenderer,
)
from mdinline.domain.models import Document, ExportSettings, ImageHandling
from mdinline.services.export.asset_resolver import AssetResolver
from mdinline.services.export.clipboard_writer import RichTextClipboardWriter
from mdinline.services.export.sandbox import WebEngineSandbox, compose_document
from mdinline.services.export.style_aggregator import StyleAggregator
from mdinline.services.export.style_inliner import StyleInliner

logger = logging.getLogger(__name__)


async def _passthrough(text: str) -> str:
    return text


class InlineExportPipeline:
    """
    Markdown document -> self-contained, style-inlined HTML on the clipboard.

      1. styles and images are prepared concurrently
      2. the resolved Markdown is rendered into an off-screen sandbox with the CSS
      3. computed styles are burned into inline attributes
      4. the sandbox is torn down, then the HTML goes to the clipboard

    Any failure aborts the run; the sandbox is always torn down first and the
    clipboard is only written once the HTML is complete.
    """

    def __init__(
        self,
        *,
        renderer: IMarkdownRenderer,
        ambient: IAmbientStyles,
        settings_store: IExportSettingsStore,
        source_factory: Callable[[Path | None], IDocumentSource],
        clipboard_writer: RichTextClipboardWriter | None = None,
        sandbox_factory: Callable[[], WebEngineSandbox] = WebEngineSandbox,
        inliner: StyleInliner | None = None,
    ) -> None:
        self._renderer = renderer
        self._ambient = ambient
        self._settings_store = settings_store
        self._source_factory = source_factory
        self._clipboard_writer = clipboard_writer or RichTextClipboardWriter()
        self._sandbox_factory = sandbox_factory
        self._inliner = inliner or StyleInliner()

    def copy(self, document: Document) -> str:
        html = self.export_html(document)
        self._clipboard_writer.write(html)
        return html

    def export_html(self, document: Document) -> str:
        settings = self._settings_store.load()
        source = self._source_factory(document.path)
        logger.info(
            "Exporting %s (style=%r, images=%s)",
            document.path or "<unsaved>",
            settings.active_profile_name,
            settings.image_handling.value,
        )

        markup, css = asyncio.run(self._prepare(document, settings, source))
        body = self._renderer.render_fragment(markup)
        page = compose_document(
            body,
            css,
            self._ambient.body_classes(),
            self._ambient.preview_container_class,
            document.path,
        )

        with self._sandbox_factory() as sandbox:
            sandbox.load(page)
            engine = sandbox.engine(self._inliner.properties)
            self._inliner.inline(engine)
            return engine.serialize()

    async def _prepare(
        self, document: Document, settings: ExportSettings, source: IDocumentSource
    ) -> tuple[str, str]:
        aggregator = StyleAggregator(source, self._ambient)
        if settings.image_handling is ImageHandling.EMBED:
            markup_job = AssetResolver(source).resolve(document.text, document.path)
        else:
            markup_job = _passthrough(document.text)
        markup, css = await asyncio.gather(markup_job, aggregator.aggregate(settings))
        return markup, css

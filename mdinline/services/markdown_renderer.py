# mdinline/services/markdown_renderer.py
from __future__ import annotations

import re
from typing import Literal

import markdown

from mdinline.domain.interfaces import IAmbientStyles, IMarkdownRenderer
from mdinline.services.ambient_styles import AmbientStyles
from mdinline.services.export.style_aggregator import aggregate_ambient
from mdinline.services.wiki_embeds import WikiEmbedExtension
from mdinline.utils.constants import HTML_TEMPLATE

MathEngine = Literal["mathjax", "katex"]

_CODEHILITE_OPEN_RE = re.compile(r'(<div class="codehilite"[^>]*>)')

COPY_BUTTON = '<button class="copy-code-button" type="button">Copy</button>'

COPY_BUTTON_SCRIPT = """
<script>
document.addEventListener("click", function (ev) {
  var btn = ev.target;
  if (!btn.classList || !btn.classList.contains("copy-code-button")) return;
  var pre = btn.parentElement.querySelector("pre");
  if (pre && navigator.clipboard) { navigator.clipboard.writeText(pre.innerText); }
});
</script>
"""


class MarkdownRenderer(IMarkdownRenderer):
    """
    Converts Markdown to HTML with optional LaTeX math support.

    Uses pymdownx.arithmatex to wrap inline ($...$) and display ($$...$$) math,
    and injects MathJax (default) or KaTeX scripts so a JS-capable preview can render it.
    Code blocks get a copy button for the preview; the rich-text export strips it.
    """

    def __init__(
        self,
        math_engine: MathEngine = "mathjax",
        ambient: IAmbientStyles | None = None,
    ) -> None:
        self.math_engine: MathEngine = math_engine
        self.ambient: IAmbientStyles = ambient or AmbientStyles()

    def render_fragment(self, markdown_text: str) -> str:
        exts = [
            "extra",
            "fenced_code",
            "codehilite",
            "toc",
            "sane_lists",
            "smarty",
            "pymdownx.arithmatex",
            WikiEmbedExtension(),
        ]

        ext_cfg = {
            "codehilite": {"guess_lang": True, "noclasses": True},
            # 'generic=True' wraps math in <span class="arithmatex"> / <div class="arithmatex">
            "pymdownx.arithmatex": {
                "generic": True,
                "inline_syntax": ["dollar"],
                "block_syntax": ["dollar"],
            },
        }

        body = markdown.markdown(
            markdown_text,
            extensions=exts,
            extension_configs=ext_cfg,
            output_format="html5",
        )
        return _CODEHILITE_OPEN_RE.sub(lambda m: m.group(1) + COPY_BUTTON, body)

    def to_html(self, markdown_text: str) -> str:
        body = self.render_fragment(markdown_text)
        math_assets = self._math_assets(self.math_engine)
        css = aggregate_ambient(self.ambient)
        return HTML_TEMPLATE.format(
            css=css,
            body_classes=self.ambient.body_classes(),
            container_class=self.ambient.preview_container_class,
            body=math_assets["css"] + body + math_assets["scripts"] + COPY_BUTTON_SCRIPT,
        )

    # -------------------- helpers --------------------

    def _math_assets(self, engine: MathEngine) -> dict[str, str]:
        if engine == "katex":
            katex_css = (
                '<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/katex@0.16.10/dist/katex.min.css" '  # noqa: E501
                'crossorigin="anonymous">'
            )
            katex_js = """
<script defer src="https://cdn.jsdelivr.net/npm/katex@0.16.10/dist/katex.min.js" crossorigin="anonymous"></script>
<script defer src="https://cdn.jsdelivr.net/npm/katex@0.16.10/dist/contrib/auto-render.min.js"
        crossorigin="anonymous"></script>
<script>
document.addEventListener("DOMContentLoaded", function() {
  if (typeof renderMathInElement === "function") {
    renderMathInElement(document.body, {
      delimiters: [
        {left: "\\\\[", right: "\\\\]", display: true},
        {left: "\\\\(", right: "\\\\)", display: false}
      ],
      ignoredTags: ["script", "noscript", "style", "textarea", "pre", "code"]
    });
  }
});
</script>
"""
            return {"css": katex_css, "scripts": katex_js}

        # Default: MathJax v3
        mathjax_cfg = """
<script>
window.MathJax = {
  tex: {
    inlineMath: [['\\\\(', '\\\\)']],
    displayMath: [['\\\\[', '\\\\]']],
    processEscapes: true
  },
  options: {
    skipHtmlTags: ['script', 'noscript', 'style', 'textarea', 'pre', 'code']
  }
};
</script>
"""
        mathjax_js = (
            '<script id="MathJax-script" async '
            'src="https://cdn.jsdelivr.net/npm/mathjax@3/es5/tex-chtml.js"></script>'
        )
        return {"css": "", "scripts": mathjax_cfg + mathjax_js}

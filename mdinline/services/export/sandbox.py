# mdinline/services/export/sandbox.py
from __future__ import annotations

import html as html_lib
import json
import logging
import tempfile
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from PyQt6.QtCore import QEventLoop, Qt, QTimer, QUrl
from PyQt6.QtWidgets import QApplication

from mdinline.domain.errors import RenderUnavailable
from mdinline.domain.interfaces import IStyleEngine
from mdinline.domain.models import RenderedNode
from mdinline.utils.constants import LOAD_TIMEOUT_MS, PREVIEW_CONTAINER_CLASS, SANDBOX_WIDTH

logger = logging.getLogger(__name__)

SANDBOX_TEMPLATE = """<!doctype html>
<html>
<head>
<meta charset="utf-8" />
{base}<style>{css}</style>
</head>
<body class="{body_classes}"><div class="{container_class}">{body}</div></body>
</html>
"""

# Pre-order walk of <body>; keeps element handles in window.__mdinlineNodes by id.
SNAPSHOT_JS = """
(function (props) {
  var nodes = [];
  function walk(el) {
    var id = nodes.length;
    nodes.push(el);
    var cs = window.getComputedStyle(el);
    var computed = {};
    for (var i = 0; i < props.length; i++) {
      computed[props[i]] = cs.getPropertyValue(props[i]);
    }
    var children = [];
    for (var j = 0; j < el.children.length; j++) {
      children.push(walk(el.children[j]));
    }
    return {
      id: id,
      tag: el.tagName.toLowerCase(),
      classes: Array.prototype.slice.call(el.classList),
      computed: computed,
      children: children
    };
  }
  var tree = walk(document.body);
  window.__mdinlineNodes = nodes;
  return JSON.stringify(tree);
})(__ARGS__);
"""

REMOVE_JS = """
(function (selectors) {
  var removed = 0;
  selectors.forEach(function (sel) {
    document.querySelectorAll(sel).forEach(function (el) {
      el.remove();
      removed++;
    });
  });
  return removed;
})(__ARGS__);
"""

APPLY_JS = """
(function (styles) {
  var nodes = window.__mdinlineNodes || [];
  Object.keys(styles).forEach(function (id) {
    var el = nodes[Number(id)];
    if (el) { el.setAttribute("style", styles[id]); }
  });
  delete window.__mdinlineNodes;
  return document.body.innerHTML;
})(__ARGS__);
"""


def _script(template: str, args: object) -> str:
    return template.replace("__ARGS__", json.dumps(args))


def compose_document(
    body_html: str,
    css: str,
    body_classes: str,
    container_class: str = PREVIEW_CONTAINER_CLASS,
    base_path: Path | None = None,
) -> str:
    """
    Standalone page for the sandbox: the aggregated CSS is the only style source,
    the body carries the preview's classes and the content sits in the preview container.
    `base_path` (the exported document) anchors relative links and images.
    """
    base = ""
    if base_path is not None:
        href = QUrl.fromLocalFile(str(Path(base_path).resolve().parent) + "/").toString()
        base = f'<base href="{html_lib.escape(href, quote=True)}" />\n'
    return SANDBOX_TEMPLATE.format(
        base=base,
        css=css,
        body_classes=html_lib.escape(body_classes, quote=True),
        container_class=html_lib.escape(container_class, quote=True),
        body=body_html,
    )


def node_from_json(data: Mapping[str, Any]) -> RenderedNode:
    return RenderedNode(
        node_id=int(data["id"]),
        tag=str(data.get("tag", "")),
        classes=tuple(str(c) for c in data.get("classes", ())),
        computed={str(k): str(v) for k, v in (data.get("computed") or {}).items()},
        children=[node_from_json(c) for c in data.get("children", ())],
    )


class WebEngineSandbox:
    """
    Off-screen Qt WebEngine page owned by a single export.

    Use as a context manager; the view and its temporary folder are torn down
    exactly once on every exit path. Loads and scripts wait on a nested event
    loop with a bounded timeout and raise RenderUnavailable instead of hanging.
    """

    def __init__(
        self,
        *,
        load_timeout_ms: int = LOAD_TIMEOUT_MS,
        script_timeout_ms: int = LOAD_TIMEOUT_MS,
        width: int = SANDBOX_WIDTH,
    ) -> None:
        self._load_timeout_ms = load_timeout_ms
        self._script_timeout_ms = script_timeout_ms
        self._width = width
        self._view = None
        self._tmpdir: tempfile.TemporaryDirectory[str] | None = None
        self._closed = False

    # ---------- lifecycle ----------

    def __enter__(self) -> WebEngineSandbox:
        try:
            self.open()
        except BaseException:
            self.close()
            raise
        return self

    def __exit__(self, *exc: object) -> bool:
        self.close()
        return False

    def open(self) -> None:
        if self._closed:
            raise RenderUnavailable("sandbox was already torn down")
        try:
            from PyQt6.QtWebEngineWidgets import QWebEngineView
        except ImportError as e:
            raise RenderUnavailable("Qt WebEngine is not installed (PyQt6-WebEngine)") from e
        if QApplication.instance() is None:
            raise RenderUnavailable("no QApplication is running")

        self._tmpdir = tempfile.TemporaryDirectory(prefix="mdinline-")
        view = QWebEngineView()
        view.setAttribute(Qt.WidgetAttribute.WA_DontShowOnScreen, True)
        view.resize(self._width, 600)
        self._view = view
        logger.debug("Sandbox opened (%d px wide)", self._width)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        view, self._view = self._view, None
        if view is not None:
            view.stop()
            view.deleteLater()
        if self._tmpdir is not None:
            self._tmpdir.cleanup()
            self._tmpdir = None
        logger.debug("Sandbox torn down")

    @property
    def is_open(self) -> bool:
        return self._view is not None

    def _require_view(self):
        if self._view is None:
            raise RenderUnavailable("sandbox is not open")
        return self._view

    # ---------- blocking helpers ----------

    def _wait(self, what: str, start: Callable[[Callable[..., None]], None], timeout_ms: int) -> Any:
        loop = QEventLoop()
        box: dict[str, Any] = {}

        def done(value: Any = None) -> None:
            box.setdefault("value", value)
            if loop.isRunning():
                loop.quit()

        timer = QTimer()
        timer.setSingleShot(True)
        timer.timeout.connect(loop.quit)

        start(done)
        if "value" not in box:
            timer.start(timeout_ms)
            loop.exec()
            timer.stop()

        if "value" not in box:
            raise RenderUnavailable(f"timed out after {timeout_ms} ms while {what}")
        return box["value"]

    # ---------- operations ----------

    def load(self, html: str) -> None:
        """Load a composed document. setHtml() caps content at 2 MB, so it goes through a temp file."""
        view = self._require_view()
        if self._tmpdir is None:
            raise RenderUnavailable("sandbox is not open")
        page_path = Path(self._tmpdir.name) / "export.html"
        page_path.write_text(html, encoding="utf-8")

        def start(done: Callable[..., None]) -> None:
            view.loadFinished.connect(done)
            view.load(QUrl.fromLocalFile(str(page_path)))

        ok = self._wait("loading the document", start, self._load_timeout_ms)
        if not ok:
            raise RenderUnavailable("the document failed to load")
        logger.debug("Sandbox loaded %d characters of HTML", len(html))

    def run_script(self, script: str) -> Any:
        view = self._require_view()
        page = view.page()
        if page is None:
            raise RenderUnavailable("sandbox page is not accessible")

        def start(done: Callable[..., None]) -> None:
            page.runJavaScript(script, 0, done)

        return self._wait("running a script", start, self._script_timeout_ms)

    def engine(self, properties: Sequence[str]) -> WebEngineStyleEngine:
        return WebEngineStyleEngine(self, properties)


class WebEngineStyleEngine(IStyleEngine):
    """IStyleEngine over a loaded sandbox: one snapshot round trip, one write-back round trip."""

    def __init__(self, sandbox: WebEngineSandbox, properties: Sequence[str]) -> None:
        self._sandbox = sandbox
        self._properties = list(properties)
        self._root: RenderedNode | None = None
        self._styles: dict[int, str] = {}

    def remove_matching(self, selectors: Sequence[str]) -> int:
        removed = self._sandbox.run_script(_script(REMOVE_JS, list(selectors)))
        self._root = None
        return int(removed or 0)

    def root(self) -> RenderedNode:
        if self._root is None:
            raw = self._sandbox.run_script(_script(SNAPSHOT_JS, self._properties))
            if not isinstance(raw, str):
                raise RenderUnavailable("could not read computed styles from the sandbox")
            self._root = node_from_json(json.loads(raw))
        return self._root

    def children(self, node: RenderedNode) -> Sequence[RenderedNode]:
        return node.children

    def computed_value(self, node: RenderedNode, prop: str) -> str | None:
        return node.computed.get(prop)

    def set_inline_style(self, node: RenderedNode, style: str) -> None:
        node.inline_style = style
        self._styles[node.node_id] = style

    def serialize(self) -> str:
        """Write recorded styles into the page and return the body markup."""
        payload = {str(k): v for k, v in self._styles.items()}
        html = self._sandbox.run_script(_script(APPLY_JS, payload))
        if not isinstance(html, str):
            raise RenderUnavailable("could not read the styled document back")
        return html

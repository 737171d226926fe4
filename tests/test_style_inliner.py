from __future__ import annotations

from mdinline.domain.models import RenderedNode
from mdinline.services.export.style_inliner import StyleInliner, is_meaningful, style_declaration
from mdinline.utils.constants import PROPERTY_WHITELIST


class FakeEngine:
    def __init__(self, root: RenderedNode, removable: int = 0) -> None:
        self._root = root
        self.removable = removable
        self.removed_with: list[str] = []
        self.order: list[int] = []
        self.written: dict[int, str] = {}

    def remove_matching(self, selectors):
        self.removed_with = list(selectors)
        return self.removable

    def root(self):
        return self._root

    def children(self, node):
        return node.children

    def computed_value(self, node, prop):
        if prop == "color":
            self.order.append(node.node_id)
        return node.computed.get(prop)

    def set_inline_style(self, node, style):
        node.inline_style = style
        self.written[node.node_id] = style


def _tree() -> RenderedNode:
    # body(0) -> div(1) -> [h1(2), p(3) -> strong(4)], div(5)
    strong = RenderedNode(4, "strong", computed={"font-weight": "700", "color": "rgb(0, 0, 0)"})
    p = RenderedNode(3, "p", children=[strong], computed={"margin-top": "16px", "float": "none"})
    h1 = RenderedNode(2, "h1", computed={"font-size": "32px", "display": "block"})
    inner = RenderedNode(1, "div", children=[h1, p], computed={"text-indent": "normal"})
    other = RenderedNode(5, "div", computed={"line-height": "auto", "width": "10px"})
    return RenderedNode(0, "body", children=[inner, other], computed={"color": "rgb(1, 2, 3)"})


def test_is_meaningful():
    assert is_meaningful("10px")
    assert not is_meaningful(None)
    assert not is_meaningful("  ")
    assert not is_meaningful("none")
    assert not is_meaningful("NORMAL")
    assert not is_meaningful("auto")


def test_style_declaration_whitelist_order_and_format():
    values = {"margin-top": "4px", "color": " red ", "cursor": "pointer", "float": "none"}
    assert style_declaration(values) == "color: red; margin-top: 4px;"


def test_style_declaration_empty_when_nothing_qualifies():
    assert style_declaration({"float": "none", "display": ""}) == ""


def test_pre_order_walk_and_styles_written():
    engine = FakeEngine(_tree())
    styled = StyleInliner().inline(engine)

    assert engine.order == [0, 1, 2, 3, 4, 5]
    assert engine.written == {
        0: "color: rgb(1, 2, 3);",
        2: "font-size: 32px; display: block;",
        3: "margin-top: 16px;",
        4: "color: rgb(0, 0, 0); font-weight: 700;",
    }
    assert styled == 4


def test_written_properties_are_all_whitelisted():
    root = RenderedNode(0, "body", computed={"color": "red", "cursor": "pointer", "width": "5px"})
    engine = FakeEngine(root)
    StyleInliner().inline(engine)

    for decl in engine.written[0].split(";"):
        if decl.strip():
            assert decl.split(":")[0].strip() in PROPERTY_WHITELIST
    assert "cursor" not in engine.written[0]


def test_nodes_with_only_absent_values_keep_no_style():
    engine = FakeEngine(_tree())
    StyleInliner().inline(engine)
    assert 1 not in engine.written
    assert 5 not in engine.written


def test_affordances_removed_before_walk():
    engine = FakeEngine(RenderedNode(0, "body"), removable=2)
    StyleInliner(affordance_selectors=[".copy-code-button"]).inline(engine)
    assert engine.removed_with == [".copy-code-button"]


def test_custom_property_list():
    root = RenderedNode(0, "body", computed={"color": "red", "width": "5px"})
    engine = FakeEngine(root)
    StyleInliner(properties=["width"]).inline(engine)
    assert engine.written == {0: "width: 5px;"}

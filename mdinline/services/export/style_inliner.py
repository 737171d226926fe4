from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from mdinline.domain.interfaces import IStyleEngine
from mdinline.utils.constants import ABSENT_VALUES, AFFORDANCE_SELECTORS, PROPERTY_WHITELIST

logger = logging.getLogger(__name__)


def is_meaningful(value: str | None, absent: Iterable[str] = ABSENT_VALUES) -> bool:
    if value is None:
        return False
    v = value.strip()
    return bool(v) and v.lower() not in absent


def style_declaration(
    values: Mapping[str, str | None],
    properties: Sequence[str] = PROPERTY_WHITELIST,
    absent: Iterable[str] = ABSENT_VALUES,
) -> str:
    """
    Serialize whitelisted values as `prop: value;` pairs joined by one space,
    in whitelist order. Empty string when nothing qualifies.
    """
    absent = frozenset(a.lower() for a in absent)
    parts = [
        f"{prop}: {values[prop].strip()};"  # type: ignore[union-attr]
        for prop in properties
        if is_meaningful(values.get(prop), absent)
    ]
    return " ".join(parts)


class StyleInliner:
    """Burns computed styles into inline `style` attributes, top-down."""

    def __init__(
        self,
        properties: Sequence[str] = PROPERTY_WHITELIST,
        absent: Iterable[str] = ABSENT_VALUES,
        affordance_selectors: Sequence[str] = AFFORDANCE_SELECTORS,
    ) -> None:
        self.properties = tuple(properties)
        self.absent = frozenset(a.lower() for a in absent)
        self.affordance_selectors = tuple(affordance_selectors)

    def inline(self, engine: IStyleEngine) -> int:
        """Returns the number of elements that received a style attribute."""
        removed = engine.remove_matching(self.affordance_selectors) if self.affordance_selectors else 0
        if removed:
            logger.debug("Removed %d preview-only element(s)", removed)

        styled = visited = 0
        stack = [engine.root()]
        while stack:
            node = stack.pop()
            visited += 1
            values = {prop: engine.computed_value(node, prop) for prop in self.properties}
            style = style_declaration(values, self.properties, self.absent)
            if style:
                engine.set_inline_style(node, style)
                styled += 1
            # reversed so the leftmost child is processed next (pre-order)
            stack.extend(reversed(engine.children(node)))

        logger.debug("Inlined styles on %d of %d element(s)", styled, visited)
        return styled

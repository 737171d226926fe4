from __future__ import annotations

import re
import xml.etree.ElementTree as etree
from urllib.parse import quote

from markdown import Markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import InlineProcessor

WIKI_EMBED_RE = r"!\[\[(?P<target>[^\]\n]+?)\]\]"

# ![[pic.png|300]] or ![[pic.png|300x200]]
_SIZE_RE = re.compile(r"^(?P<width>\d+)(?:x(?P<height>\d+))?$")


class WikiEmbedProcessor(InlineProcessor):
    """Turns `![[target|size]]` into an <img>; the `#anchor` and `|size` parts never reach `src`."""

    def handleMatch(self, m: re.Match[str], data: str):  # type: ignore[override]
        target, _, size = m.group("target").partition("|")
        target = target.split("#", 1)[0].strip()
        if not target:
            return None, None, None

        img = etree.Element("img")
        img.set("src", quote(target, safe="/:%"))
        img.set("alt", target)
        sm = _SIZE_RE.match(size.strip())
        if sm:
            img.set("width", sm.group("width"))
            if sm.group("height"):
                img.set("height", sm.group("height"))
        return img, m.start(0), m.end(0)


class WikiEmbedExtension(Extension):
    def extendMarkdown(self, md: Markdown) -> None:
        # above the link/image patterns so `[[...]]` is never read as a reference link
        md.inlinePatterns.register(WikiEmbedProcessor(WIKI_EMBED_RE, md), "wiki_embed", 175)

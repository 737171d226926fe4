from __future__ import annotations

import asyncio
import base64
import logging
import re
from collections.abc import Awaitable
from pathlib import Path
from urllib.parse import unquote

from mdinline.domain.errors import AssetResolutionSkipped
from mdinline.domain.interfaces import IDocumentSource
from mdinline.utils.constants import FALLBACK_MIME_TYPE, MIME_TYPES

logger = logging.getLogger(__name__)

# Wiki embeds are tried first so `![[a.png]]` is never read as the start of `![alt](src)`.
IMAGE_RE = re.compile(r"!\[\[(?P<wiki>.*?)\]\]|!\[(?P<alt>.*?)\]\((?P<src>.*?)\)")

_REMOTE_RE = re.compile(r"^(?:https?|ftp|data):|^//", re.IGNORECASE)
_TITLE_RE = re.compile(r"""^(?P<target>\S+)\s+(?:"[^"]*"|'[^']*'|\([^)]*\))$""")


def is_remote(target: str) -> bool:
    return bool(_REMOTE_RE.match(target.strip()))


def mime_type_for(path: str | Path) -> str:
    ext = Path(path).suffix.lstrip(".").lower()
    return MIME_TYPES.get(ext, FALLBACK_MIME_TYPE)


def clean_target(raw: str, *, wiki: bool) -> str:
    """Strip Markdown decorations that are not part of the file reference."""
    target = raw.strip()
    if wiki:
        # ![[name.png|300]] and ![[note#^block]]
        target = target.split("|", 1)[0].split("#", 1)[0].strip()
        return target
    if target.startswith("<") and target.endswith(">"):
        return target[1:-1].strip()
    m = _TITLE_RE.match(target)
    if m:
        target = m.group("target")
    return target


class AssetResolver:
    """
    Embeds local images referenced from Markdown as base64 data URIs.

    Every reference resolves in its own coroutine; results are joined back by
    their position in the text, so completion order never changes the output.
    References that are remote or cannot be resolved keep their original text.
    """

    def __init__(self, source: IDocumentSource) -> None:
        self._source = source

    async def resolve(self, markdown: str, source_path: Path | None) -> str:
        segments: list[str | Awaitable[str]] = []
        last = 0
        for match in IMAGE_RE.finditer(markdown):
            segments.append(markdown[last : match.start()])
            segments.append(self._resolve_match(match, source_path))
            last = match.end()
        segments.append(markdown[last:])

        pending = {i: seg for i, seg in enumerate(segments) if not isinstance(seg, str)}
        if not pending:
            return markdown

        results = await asyncio.gather(*pending.values())
        resolved = dict(zip(pending.keys(), results))
        logger.debug("Resolved %d image reference(s)", len(resolved))
        return "".join(
            resolved[i] if i in resolved else seg  # type: ignore[misc]
            for i, seg in enumerate(segments)
        )

    async def _resolve_match(self, match: re.Match[str], source_path: Path | None) -> str:
        original = match.group(0)
        wiki = match.group("wiki")
        if wiki is not None:
            raw_target, alt, is_wiki = wiki, wiki, True
        else:
            raw_target, alt, is_wiki = match.group("src"), match.group("alt"), False

        target = clean_target(raw_target, wiki=is_wiki)
        if is_remote(target):
            logger.debug("Leaving remote image as-is: %s", target)
            return original

        try:
            return await self._embed(target, alt, source_path)
        except AssetResolutionSkipped as e:
            logger.warning("Image not embedded: %s", e)
            return original

    async def _embed(self, target: str, alt: str, source_path: Path | None) -> str:
        if not target:
            raise AssetResolutionSkipped(target, "empty reference")
        decoded = unquote(target)
        try:
            handle = await asyncio.to_thread(self._source.resolve_reference, decoded, source_path)
        except (OSError, ValueError) as e:
            raise AssetResolutionSkipped(decoded, str(e)) from e
        if handle is None:
            raise AssetResolutionSkipped(decoded, "no such local file")

        try:
            data = await asyncio.to_thread(self._source.read_binary, handle)
        except OSError as e:
            raise AssetResolutionSkipped(decoded, str(e)) from e

        encoded = base64.b64encode(data).decode("ascii")
        return f"![{alt}](data:{mime_type_for(handle)};base64,{encoded})"

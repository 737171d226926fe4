from __future__ import annotations

import asyncio
import logging

from mdinline.domain.errors import SourceUnavailable, StyleSheetUnreadable
from mdinline.domain.interfaces import IAmbientStyles, IDocumentSource
from mdinline.domain.models import ExportSettings

logger = logging.getLogger(__name__)


def aggregate_ambient(ambient: IAmbientStyles) -> str:
    """Concatenate every readable ambient sheet, in order, separated by blank lines."""
    collected: list[str] = []
    for sheet in ambient.style_sheets():
        try:
            collected.append(sheet.read_rules())
        except StyleSheetUnreadable as e:
            logger.warning("Skipping unreadable style sheet %s: %s", sheet.href, e.reason)
    return "\n\n".join(collected)


class StyleAggregator:
    """
    Decides which CSS text governs an export.

    A named profile replaces the ambient styles entirely; a missing profile file
    is fatal because the user asked for that style explicitly. The "Default"
    selection, an unknown name or a profile without a path use the ambient styles.
    """

    def __init__(self, source: IDocumentSource, ambient: IAmbientStyles) -> None:
        self._source = source
        self._ambient = ambient

    async def aggregate(self, settings: ExportSettings) -> str:
        if not settings.uses_default:
            name = settings.active_profile_name
            profile = settings.find_profile(name)
            if sum(1 for p in settings.profiles if p.name == name) > 1:
                logger.debug("Several style profiles are named %r; using the first", name)
            if profile is None:
                logger.info("No style profile named %r; using preview styles", name)
            elif not profile.path.strip():
                logger.info("Style profile %r has no path; using preview styles", name)
            else:
                return await self._read_profile(profile.path.strip())

        logger.debug("Aggregating preview theme and snippet styles")
        return aggregate_ambient(self._ambient)

    async def _read_profile(self, path: str) -> str:
        if not await asyncio.to_thread(self._source.exists, path):
            raise SourceUnavailable(path)
        try:
            css = await asyncio.to_thread(self._source.read_text, path)
        except (OSError, UnicodeDecodeError) as e:
            raise SourceUnavailable(path, str(e)) from e
        logger.info("Using custom CSS from %s", path)
        return css

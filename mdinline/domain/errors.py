from __future__ import annotations


class ExportError(Exception):
    """Base for failures of the rich-text export. `str()` is shown to the user."""


class SourceUnavailable(ExportError):
    """The selected style profile's CSS file is missing or unreadable."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        self.path = path
        self.reason = reason
        msg = f"Style file not found: {path}" if reason is None else f"Cannot read style file {path}: {reason}"
        super().__init__(msg)


class RenderUnavailable(ExportError):
    """The off-screen rendering sandbox could not be built, loaded or scripted."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Rendering sandbox unavailable: {reason}")


class AssetResolutionSkipped(ExportError):
    """A single local media reference was left as-is. Never aborts an export."""

    def __init__(self, reference: str, reason: str) -> None:
        self.reference = reference
        self.reason = reason
        super().__init__(f"Skipped {reference!r}: {reason}")


class ClipboardUnavailable(ExportError):
    """The system clipboard refused or could not take the rich-text payload."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Clipboard unavailable: {reason}")


class StyleSheetUnreadable(Exception):
    """An ambient style sheet whose rules cannot be read; skipped during aggregation."""

    def __init__(self, href: str | None, reason: str) -> None:
        self.href = href
        self.reason = reason
        super().__init__(f"{href or '<inline>'}: {reason}")

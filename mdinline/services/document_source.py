from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from mdinline.domain.interfaces import IDocumentSource, IFileService
from mdinline.services.file_service import FileService

logger = logging.getLogger(__name__)


def _is_within(path: Path, bases: list[Path]) -> bool:
    resolved = path.resolve()
    return any(resolved.is_relative_to(base) for base in bases)


class DocumentSource(IDocumentSource):
    """
    File access scoped to a content root.

    Reference lookup order:
      1. absolute paths as given
      2. relative to the referencing document's folder
      3. relative to the content root
      4. bare file names: first match anywhere under the root (shallowest, then alphabetical),
         unless `search_by_name` is off or the root is the home folder

    Resolved files must lie inside the content root or the referencing document's
    folder (after following symlinks and `..`); anything else does not resolve.
    """

    def __init__(
        self,
        content_root: Path,
        files: IFileService | None = None,
        *,
        search_by_name: bool = True,
    ) -> None:
        self._root = Path(content_root).expanduser()
        self._files = files or FileService()
        self._search_by_name = search_by_name

    @property
    def content_root(self) -> Path:
        return self._root

    def _abs(self, path: str | Path) -> Path:
        p = Path(path).expanduser()
        return p if p.is_absolute() else self._root / p

    def read_text(self, path: str | Path) -> str:
        return self._files.read_text(self._abs(path))

    def exists(self, path: str | Path) -> bool:
        return self._files.exists(self._abs(path))

    def read_binary(self, handle: Path) -> bytes:
        return self._files.read_bytes(handle)

    def resolve_reference(self, raw_ref: str, from_path: Path | None) -> Path | None:
        ref = raw_ref.strip()
        if not ref:
            return None
        ref_path = Path(ref)

        candidates: list[Path] = []
        if ref_path.is_absolute():
            candidates.append(ref_path)
        else:
            if from_path is not None:
                candidates.append(Path(from_path).parent / ref_path)
            candidates.append(self._root / ref_path)

        allowed = self._allowed_bases(from_path)
        for c in candidates:
            if self._files.exists(c):
                if _is_within(c, allowed):
                    return c
                logger.warning("Ignoring %s: outside the content root", c)

        if self._search_by_name and not ref_path.is_absolute() and len(ref_path.parts) == 1:
            return self._find_by_name(ref_path.name)
        return None

    def _allowed_bases(self, from_path: Path | None) -> list[Path]:
        bases = [self._root.resolve()]
        if from_path is not None:
            bases.append(Path(from_path).parent.resolve())
        return bases

    def _find_by_name(self, name: str) -> Path | None:
        if not self._root.is_dir():
            return None
        if self._root.resolve() == Path.home().resolve():
            logger.debug("Not searching the home folder for %s", name)
            return None
        try:
            root = self._root.resolve()
            matches = [p for p in self._root.rglob(name) if p.is_file() and _is_within(p, [root])]
        except OSError as e:
            logger.warning("Searching %s for %s failed: %s", self._root, name, e)
            return None
        if not matches:
            return None
        matches.sort(key=lambda p: (len(p.relative_to(self._root).parts), str(p)))
        return matches[0]


def document_source_factory(
    configured_root: Path | None, files: IFileService | None = None
) -> Callable[[Path | None], DocumentSource]:
    """
    Build DocumentSource instances per export. Without a configured root the
    exported document's folder is the root. Unsaved documents fall back to the
    user's home folder, without the by-name search over it.
    """

    def make(doc_path: Path | None) -> DocumentSource:
        if configured_root is not None:
            root = configured_root
        elif doc_path is not None:
            root = Path(doc_path).parent
        else:
            return DocumentSource(Path.home(), files, search_by_name=False)
        return DocumentSource(root, files)

    return make

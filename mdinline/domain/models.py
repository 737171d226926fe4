from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any

from mdinline.utils.constants import DEFAULT_PROFILE_NAME


@dataclass
class Document:
    path: Path | None
    text: str
    modified: bool = False


class ImageHandling(str, Enum):
    """How local images are treated when copying rich text."""

    EMBED = "embed"
    KEEP_REFERENCE = "keep-reference"

    @classmethod
    def parse(cls, raw: object, default: ImageHandling | None = None) -> ImageHandling:
        # "base64" / "keep-path" are the spellings used by older settings files.
        aliases = {"base64": cls.EMBED, "keep-path": cls.KEEP_REFERENCE}
        s = str(raw).strip().lower()
        if s in aliases:
            return aliases[s]
        try:
            return cls(s)
        except ValueError:
            return default or cls.EMBED


@dataclass(frozen=True)
class StyleProfile:
    """A named pointer to a CSS file, relative to the content root."""

    name: str
    path: str


DEFAULT_PROFILES: tuple[StyleProfile, ...] = (StyleProfile(name="WeChat", path="styles/wechat.css"),)


@dataclass(frozen=True)
class ExportSettings:
    """
    Immutable export configuration, loaded once and passed into each export.

    `active_profile_name == "Default"` means "use the preview's own styles";
    it never refers to a profile, even one that happens to be named "Default".
    Edits return new instances.
    """

    active_profile_name: str = DEFAULT_PROFILE_NAME
    profiles: tuple[StyleProfile, ...] = DEFAULT_PROFILES
    image_handling: ImageHandling = ImageHandling.EMBED

    @property
    def uses_default(self) -> bool:
        return not self.active_profile_name or self.active_profile_name == DEFAULT_PROFILE_NAME

    def find_profile(self, name: str) -> StyleProfile | None:
        """First profile with a matching name. Names are not required to be unique."""
        for p in self.profiles:
            if p.name == name:
                return p
        return None

    # ---- edits ----

    def with_active(self, name: str) -> ExportSettings:
        return replace(self, active_profile_name=name or DEFAULT_PROFILE_NAME)

    def with_image_handling(self, mode: ImageHandling) -> ExportSettings:
        return replace(self, image_handling=mode)

    def add_profile(self, name: str = "", path: str = "") -> ExportSettings:
        return replace(self, profiles=(*self.profiles, StyleProfile(name=name, path=path)))

    def remove_profile(self, index: int) -> ExportSettings:
        profiles = list(self.profiles)
        removed = profiles.pop(index)
        active = self.active_profile_name
        if removed.name == active and all(p.name != active for p in profiles):
            active = DEFAULT_PROFILE_NAME
        return replace(self, profiles=tuple(profiles), active_profile_name=active)

    def rename_profile(self, index: int, name: str) -> ExportSettings:
        profiles = list(self.profiles)
        old = profiles[index]
        profiles[index] = replace(old, name=name)
        active = self.active_profile_name
        if old.name and old.name == active:
            active = name or DEFAULT_PROFILE_NAME
        return replace(self, profiles=tuple(profiles), active_profile_name=active)

    def update_profile_path(self, index: int, path: str) -> ExportSettings:
        profiles = list(self.profiles)
        profiles[index] = replace(profiles[index], path=path)
        return replace(self, profiles=tuple(profiles))

    # ---- persistence shape ----

    def to_dict(self) -> dict[str, Any]:
        return {
            "activeProfileName": self.active_profile_name,
            "profiles": [{"name": p.name, "path": p.path} for p in self.profiles],
            "imageHandling": self.image_handling.value,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> ExportSettings:
        """Merge a persisted mapping over the defaults; malformed entries are dropped."""
        base = cls()
        if not isinstance(raw, Mapping):
            return base

        active = raw.get("activeProfileName", base.active_profile_name)
        if not isinstance(active, str) or not active:
            active = base.active_profile_name

        profiles = base.profiles
        raw_profiles = raw.get("profiles")
        if isinstance(raw_profiles, list):
            profiles = tuple(
                StyleProfile(name=str(p.get("name", "")), path=str(p.get("path", "")))
                for p in raw_profiles
                if isinstance(p, Mapping)
            )

        mode = ImageHandling.parse(raw.get("imageHandling", base.image_handling.value))
        return cls(active_profile_name=active, profiles=profiles, image_handling=mode)


@dataclass
class RenderedNode:
    """
    One element of the sandbox tree, valid for a single export.

    `computed` holds the engine's resolved values for the properties asked for;
    `inline_style` is what the inliner decided to write back.
    """

    node_id: int
    tag: str
    classes: tuple[str, ...] = ()
    children: list[RenderedNode] = field(default_factory=list)
    computed: dict[str, str] = field(default_factory=dict)
    inline_style: str | None = None

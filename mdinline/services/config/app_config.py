from __future__ import annotations

import re
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from mdinline.services.ambient_styles import DEFAULT_SNIPPETS_DIR
from mdinline.services.config.ini_config_service import IniConfigService
from mdinline.utils.constants import LOAD_TIMEOUT_MS

_VERSION_RE = re.compile(r"^v?(\d+\.\d+\.\d+)(?:[-+].*)?$", re.IGNORECASE)


def _project_root_fallback() -> Path:
    """
    Best-effort project root resolution that also works in PyInstaller:
      - PyInstaller onefile/onedir uses sys._MEIPASS as bundle root
      - dev mode uses this file location to walk upward
    """
    meipass = getattr(sys, "_MEIPASS", None)  # type: ignore[attr-defined]
    if meipass:
        return Path(meipass)

    # mdinline/services/config/app_config.py -> parents[3] = repository root
    return Path(__file__).resolve().parents[3]


def _read_version_file(version_path: Path) -> str | None:
    try:
        raw = version_path.read_text(encoding="utf-8").strip()
    except OSError:
        return None

    m = _VERSION_RE.match(raw)
    if not m:
        return None
    return m.group(1)


@dataclass(frozen=True)
class AppConfig:
    """
    IniConfigService plus typed accessors for the app's own keys.

    [app]      version
    [export]   content_root, snippets_dir, load_timeout_ms, theme
    [logging]  level

    Version precedence: <project_root>/version file, then [app] version, then "0.0.0".
    """

    ini: IniConfigService
    project_root: Path

    def get_version(self) -> str:
        v = _read_version_file(self.project_root / "version")
        if v:
            return v

        v2 = (self.ini.app_version() or "").strip()
        if v2:
            m = _VERSION_RE.match(v2)
            return m.group(1) if m else v2

        return "0.0.0"

    # ---- export ----

    def content_root(self) -> Path | None:
        """Configured content root, or None to use the exported document's folder."""
        raw = (self.ini.get("export", "content_root", "") or "").strip()
        return Path(raw).expanduser() if raw else None

    def snippets_dir(self, content_root: Path | None) -> Path | None:
        raw = (self.ini.get("export", "snippets_dir", "") or "").strip() or DEFAULT_SNIPPETS_DIR
        p = Path(raw).expanduser()
        if p.is_absolute():
            return p
        return content_root / p if content_root is not None else None

    def load_timeout_ms(self) -> int:
        value = self.ini.get_int("export", "load_timeout_ms", LOAD_TIMEOUT_MS)
        return value if value and value > 0 else LOAD_TIMEOUT_MS

    def theme(self) -> str:
        return (self.ini.get("export", "theme", "default") or "default").strip()

    def log_level(self) -> str:
        return (self.ini.get("logging", "level", "WARNING") or "WARNING").strip()

    # ---- delegate IniConfigService methods ----

    def get(self, section: str, key: str, default: str | None = None) -> str | None:
        return self.ini.get(section, key, default)

    def get_int(self, section: str, key: str, default: int | None = None) -> int | None:
        return self.ini.get_int(section, key, default)

    def get_bool(self, section: str, key: str, default: bool | None = None) -> bool | None:
        return self.ini.get_bool(section, key, default)

    def as_dict(self) -> Mapping[str, Mapping[str, str]]:
        return self.ini.as_dict()

    @property
    def loaded_from(self) -> Path | None:
        return self.ini.loaded_from


def build_app_config(
    *, explicit_ini: Path | None = None, project_root: Path | None = None
) -> AppConfig:
    root = project_root or _project_root_fallback()
    ini = IniConfigService(explicit_path=explicit_ini, project_root=root)
    return AppConfig(ini=ini, project_root=root)

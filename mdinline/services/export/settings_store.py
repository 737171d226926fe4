from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from mdinline.domain.interfaces import IExportSettingsStore, ISettingsService
from mdinline.domain.models import ExportSettings
from mdinline.utils.constants import SETTINGS_EXPORT

logger = logging.getLogger(__name__)


@dataclass
class SettingsExportSettingsStore(IExportSettingsStore):
    """
    Persists ExportSettings as one JSON value in the app settings.

    Missing or corrupt data loads as the defaults; partial data is merged over them.
    """

    settings: ISettingsService
    key: str = SETTINGS_EXPORT

    def load(self) -> ExportSettings:
        raw = self.settings.get_raw(self.key, "")
        if not isinstance(raw, str) or not raw.strip():
            return ExportSettings()
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Ignoring corrupt export settings (%s); using defaults", e)
            return ExportSettings()
        return ExportSettings.from_dict(data if isinstance(data, dict) else None)

    def save(self, settings: ExportSettings) -> None:
        self.settings.set_raw(self.key, json.dumps(settings.to_dict(), ensure_ascii=False))
        logger.debug("Saved export settings (active=%r)", settings.active_profile_name)

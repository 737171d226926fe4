from __future__ import annotations

import json

from mdinline.domain.models import ExportSettings, ImageHandling, StyleProfile
from mdinline.services.export.settings_store import SettingsExportSettingsStore
from mdinline.utils.constants import SETTINGS_EXPORT


def test_load_defaults_when_nothing_stored(settings_service):
    assert SettingsExportSettingsStore(settings_service).load() == ExportSettings()


def test_save_then_load(settings_service):
    store = SettingsExportSettingsStore(settings_service)
    s = (
        ExportSettings()
        .add_profile("Newsletter", "css/news.css")
        .with_active("Newsletter")
        .with_image_handling(ImageHandling.KEEP_REFERENCE)
    )
    store.save(s)

    # a fresh store over the same backend sees the same values
    assert SettingsExportSettingsStore(settings_service).load() == s


def test_stored_shape_is_json(settings_service):
    SettingsExportSettingsStore(settings_service).save(ExportSettings())
    raw = settings_service.get_raw(SETTINGS_EXPORT)
    assert json.loads(raw)["activeProfileName"] == "Default"


def test_corrupt_json_loads_defaults(settings_service):
    settings_service.set_raw(SETTINGS_EXPORT, "{not json")
    assert SettingsExportSettingsStore(settings_service).load() == ExportSettings()


def test_partial_json_is_merged(settings_service):
    settings_service.set_raw(SETTINGS_EXPORT, json.dumps({"profiles": [{"name": "A", "path": "a.css"}]}))
    s = SettingsExportSettingsStore(settings_service).load()
    assert s.profiles == (StyleProfile("A", "a.css"),)
    assert s.image_handling is ImageHandling.EMBED

from __future__ import annotations

from mdinline.domain.models import ExportSettings, ImageHandling, StyleProfile
from mdinline.services.ui.export_settings_dialog import DEFAULT_STYLE_LABEL, ExportSettingsDialog


def _dialog(qapp, settings: ExportSettings | None = None, on_change=None) -> ExportSettingsDialog:
    return ExportSettingsDialog(settings or ExportSettings(), on_change=on_change)


def test_initial_state_reflects_settings(qapp):
    dlg = _dialog(qapp, ExportSettings(active_profile_name="WeChat"))

    assert dlg.embed_radio.isChecked()
    assert dlg.profiles_table.rowCount() == 1
    assert dlg.profiles_table.item(0, 0).text() == "WeChat"
    assert dlg.profiles_table.item(0, 1).text() == "styles/wechat.css"
    assert dlg.style_combo.itemText(0) == DEFAULT_STYLE_LABEL
    assert dlg.style_combo.currentData() == "WeChat"


def test_switching_image_mode(qapp):
    dlg = _dialog(qapp)
    dlg.keep_radio.setChecked(True)
    assert dlg.result_settings().image_handling is ImageHandling.KEEP_REFERENCE
    dlg.embed_radio.setChecked(True)
    assert dlg.result_settings().image_handling is ImageHandling.EMBED


def test_selecting_style(qapp):
    dlg = _dialog(qapp)
    dlg.style_combo.setCurrentIndex(dlg.style_combo.findData("WeChat"))
    assert dlg.result_settings().active_profile_name == "WeChat"
    dlg.style_combo.setCurrentIndex(0)
    assert dlg.result_settings().uses_default


def test_add_rename_and_edit_path(qapp):
    dlg = _dialog(qapp)
    dlg.add_btn.click()
    assert dlg.profiles_table.rowCount() == 2

    dlg.profiles_table.item(1, 0).setText("Newsletter")
    dlg.profiles_table.item(1, 1).setText(" css/news.css ")

    s = dlg.result_settings()
    assert s.profiles[1] == StyleProfile("Newsletter", "css/news.css")
    assert dlg.style_combo.findData("Newsletter") > 0


def test_remove_selected_profile(qapp):
    dlg = _dialog(qapp, ExportSettings(active_profile_name="WeChat"))
    dlg.profiles_table.setCurrentCell(0, 0)
    dlg.remove_btn.click()

    s = dlg.result_settings()
    assert s.profiles == ()
    assert s.uses_default
    assert dlg.style_combo.count() == 1


def test_duplicate_names_listed_once(qapp):
    settings = ExportSettings(profiles=(StyleProfile("Blog", "a.css"), StyleProfile("Blog", "b.css")))
    dlg = _dialog(qapp, settings)
    assert dlg.style_combo.count() == 2  # Default + Blog


def test_every_edit_is_reported(qapp):
    changes: list[ExportSettings] = []
    dlg = _dialog(qapp, on_change=changes.append)

    dlg.keep_radio.setChecked(True)
    dlg.style_combo.setCurrentIndex(dlg.style_combo.findData("WeChat"))
    dlg.add_btn.click()
    dlg.profiles_table.item(1, 0).setText("Newsletter")
    dlg.profiles_table.item(1, 1).setText("css/news.css")

    assert len(changes) == 5
    assert changes[0].image_handling is ImageHandling.KEEP_REFERENCE
    assert changes[1].active_profile_name == "WeChat"
    assert len(changes[2].profiles) == 2
    assert changes[-1] == dlg.result_settings()
    assert changes[-1].profiles[1] == StyleProfile("Newsletter", "css/news.css")


def test_removal_is_reported(qapp):
    changes: list[ExportSettings] = []
    dlg = _dialog(qapp, ExportSettings(active_profile_name="WeChat"), on_change=changes.append)
    dlg.profiles_table.setCurrentCell(0, 0)
    dlg.remove_btn.click()

    assert len(changes) == 1
    assert changes[0].profiles == ()
    assert changes[0].uses_default


def test_no_report_without_edits(qapp):
    changes: list[ExportSettings] = []
    dlg = _dialog(qapp, ExportSettings(active_profile_name="WeChat"), on_change=changes.append)
    dlg.close_btn.click()
    assert changes == []


def test_edits_do_not_mutate_input(qapp):
    original = ExportSettings()
    dlg = _dialog(qapp, original)
    dlg.keep_radio.setChecked(True)
    assert original.image_handling is ImageHandling.EMBED

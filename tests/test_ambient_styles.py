from __future__ import annotations

from pathlib import Path

import pytest

from mdinline.domain.errors import StyleSheetUnreadable
from mdinline.services.ambient_styles import AmbientStyles
from mdinline.utils.constants import CSS_PREVIEW, THEME_CSS


def test_builtin_and_theme_sheets_first(tmp_path: Path):
    amb = AmbientStyles(theme_id="paper", snippets_dir=tmp_path / "none")
    sheets = amb.style_sheets()
    assert sheets[0].read_rules() == CSS_PREVIEW
    assert sheets[1].href == "theme:paper"
    assert sheets[1].read_rules() == THEME_CSS["paper"]


def test_snippets_sorted_by_file_name(tmp_path: Path):
    (tmp_path / "b.css").write_text("b{}", encoding="utf-8")
    (tmp_path / "a.css").write_text("a{}", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

    sheets = AmbientStyles(snippets_dir=tmp_path).style_sheets()
    rules = [s.read_rules() for s in sheets if s.href and s.href.startswith("file:")]
    assert rules == ["a{}", "b{}"]


def test_snippet_deleted_after_listing_is_unreadable(tmp_path: Path):
    p = tmp_path / "gone.css"
    p.write_text("x{}", encoding="utf-8")
    sheet = AmbientStyles(snippets_dir=tmp_path).style_sheets()[-1]
    p.unlink()
    with pytest.raises(StyleSheetUnreadable):
        sheet.read_rules()


def test_theme_switching_and_body_classes():
    amb = AmbientStyles()
    assert amb.get_theme() == "default"
    assert amb.body_classes() == "mdinline theme-light"

    amb.set_theme("midnight")
    assert amb.body_classes() == "mdinline theme-dark"

    amb.set_theme("does-not-exist")
    assert amb.get_theme() == "midnight"
    assert set(amb.list_themes()) == set(THEME_CSS)


def test_unknown_initial_theme_uses_default():
    assert AmbientStyles(theme_id="neon").get_theme() == "default"

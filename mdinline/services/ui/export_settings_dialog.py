from __future__ import annotations

from collections.abc import Callable

from PyQt6.QtWidgets import (
    QAbstractItemView,
    QButtonGroup,
    QComboBox,
    QDialog,
    QGridLayout,
    QHBoxLayout,
    QHeaderView,
    QLabel,
    QPushButton,
    QRadioButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
)

from mdinline.domain.models import ExportSettings, ImageHandling
from mdinline.utils.constants import DEFAULT_PROFILE_NAME

DEFAULT_STYLE_LABEL = "Default (follow preview theme)"


class ExportSettingsDialog(QDialog):
    """
    Edit image handling, the active style and the list of named CSS profiles.

    Every edit is handed to `on_change` straight away, so there is nothing to
    confirm or discard when the dialog closes.
    """

    COL_NAME = 0
    COL_PATH = 1

    def __init__(
        self,
        settings: ExportSettings,
        parent=None,
        on_change: Callable[[ExportSettings], None] | None = None,
    ):
        super().__init__(parent)
        self.setWindowTitle("Export Settings")
        self.setModal(True)
        self.resize(560, 420)
        self._settings = settings
        self._on_change = on_change

        # Image handling
        self.embed_radio = QRadioButton("Embed local images (base64)")
        self.keep_radio = QRadioButton("Keep image paths")
        self.image_group = QButtonGroup(self)
        self.image_group.addButton(self.embed_radio)
        self.image_group.addButton(self.keep_radio)

        # Active style
        self.style_combo = QComboBox()

        # Profiles
        self.profiles_table = QTableWidget(0, 2)
        self.profiles_table.setHorizontalHeaderLabels(["Profile name", "CSS file path"])
        self.profiles_table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
        self.profiles_table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.profiles_table.verticalHeader().setVisible(False)

        help_label = QLabel(
            "Paths are relative to the content root, e.g. <code>styles/wechat.css</code>. "
            "Profile names appear in the style list above."
        )
        help_label.setWordWrap(True)

        self.add_btn = QPushButton("Add Profile")
        self.remove_btn = QPushButton("Remove")
        self.close_btn = QPushButton("Close")

        # Layout
        form = QGridLayout()
        form.addWidget(QLabel("Images:"), 0, 0)
        form.addWidget(self.embed_radio, 0, 1)
        form.addWidget(self.keep_radio, 1, 1)
        form.addWidget(QLabel("Export style:"), 2, 0)
        form.addWidget(self.style_combo, 2, 1)

        profile_buttons = QHBoxLayout()
        profile_buttons.addWidget(self.add_btn)
        profile_buttons.addWidget(self.remove_btn)
        profile_buttons.addStretch(1)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        buttons.addWidget(self.close_btn)

        root = QVBoxLayout(self)
        root.addLayout(form)
        root.addWidget(QLabel("<b>Style profiles</b>"))
        root.addWidget(help_label)
        root.addWidget(self.profiles_table)
        root.addLayout(profile_buttons)
        root.addLayout(buttons)

        # Signals
        self.embed_radio.toggled.connect(self._on_image_mode)
        self.style_combo.currentIndexChanged.connect(self._on_style_selected)
        self.profiles_table.itemChanged.connect(self._on_item_changed)
        self.add_btn.clicked.connect(self._on_add)
        self.remove_btn.clicked.connect(self._on_remove)
        self.close_btn.clicked.connect(self.accept)
        self.close_btn.setDefault(True)

        self._populate()

    # ---------- state -> widgets ----------

    def _populate(self) -> None:
        s = self._settings
        self.embed_radio.blockSignals(True)
        self.embed_radio.setChecked(s.image_handling is ImageHandling.EMBED)
        self.keep_radio.setChecked(s.image_handling is ImageHandling.KEEP_REFERENCE)
        self.embed_radio.blockSignals(False)

        self.profiles_table.blockSignals(True)
        self.profiles_table.setRowCount(len(s.profiles))
        for row, p in enumerate(s.profiles):
            self.profiles_table.setItem(row, self.COL_NAME, QTableWidgetItem(p.name))
            self.profiles_table.setItem(row, self.COL_PATH, QTableWidgetItem(p.path))
        self.profiles_table.blockSignals(False)

        self._refresh_style_combo()

    def _refresh_style_combo(self) -> None:
        self.style_combo.blockSignals(True)
        self.style_combo.clear()
        self.style_combo.addItem(DEFAULT_STYLE_LABEL, DEFAULT_PROFILE_NAME)
        seen: set[str] = set()
        for p in self._settings.profiles:
            # duplicates would be unselectable anyway: lookup picks the first match
            if p.name and p.name not in seen:
                seen.add(p.name)
                self.style_combo.addItem(p.name, p.name)
        idx = self.style_combo.findData(self._settings.active_profile_name)
        self.style_combo.setCurrentIndex(idx if idx >= 0 else 0)
        self.style_combo.blockSignals(False)

    # ---------- widgets -> state ----------

    def _on_image_mode(self, embed: bool) -> None:
        mode = ImageHandling.EMBED if embed else ImageHandling.KEEP_REFERENCE
        self._commit(self._settings.with_image_handling(mode))

    def _on_style_selected(self, index: int) -> None:
        name = self.style_combo.itemData(index) or DEFAULT_PROFILE_NAME
        self._commit(self._settings.with_active(str(name)))

    def _on_item_changed(self, item: QTableWidgetItem) -> None:
        row, col, text = item.row(), item.column(), item.text().strip()
        if col == self.COL_NAME:
            self._commit(self._settings.rename_profile(row, text))
            self._refresh_style_combo()
        else:
            self._commit(self._settings.update_profile_path(row, text))

    def _on_add(self) -> None:
        self._commit(self._settings.add_profile())
        self._populate()
        row = len(self._settings.profiles) - 1
        self.profiles_table.setCurrentCell(row, self.COL_NAME)
        self.profiles_table.editItem(self.profiles_table.item(row, self.COL_NAME))

    def _on_remove(self) -> None:
        row = self.profiles_table.currentRow()
        if row < 0 or row >= len(self._settings.profiles):
            return
        self._commit(self._settings.remove_profile(row))
        self._populate()

    def _commit(self, settings: ExportSettings) -> None:
        self._settings = settings
        if self._on_change is not None:
            self._on_change(settings)

    def result_settings(self) -> ExportSettings:
        return self._settings

    def show_settings_dialog(self) -> int:
        """Public API used by MainWindow wiring."""
        return self.exec()

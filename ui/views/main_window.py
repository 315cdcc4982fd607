"""
Main application window with weapon list, crosshair picker and log panel.
"""
import logging
import threading
from typing import List, Optional

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QSplitter,
    QPushButton, QRadioButton, QButtonGroup, QComboBox, QGroupBox,
    QPlainTextEdit
)
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QCloseEvent
import qtawesome as qta

from core.exceptions import CrosshairSwitcherError
from core.models.weapon import ExplosionEffect
from core.services.config_service import ConfigService
from core.services.texture_service import TextureService, ThumbnailScanResult
from core.services.weapon_catalog_service import WeaponCatalogService
from core.services.weapon_loader_service import CatalogLoadResult
from ui.widgets.crosshair_list import CrosshairListWidget
from ui.widgets.log_panel import LogPanel, QtLogHandler
from ui.widgets.styles import APPLY_BUTTON_STYLES, TEXT_PANEL_STYLES
from ui.widgets.weapon_list import WeaponListWidget


class ControlPanel:
    """Apply mode selection, explosion choice and apply buttons."""

    def __init__(self):
        self.group_box = QGroupBox("Apply")
        self._setup_ui()

    def _setup_ui(self):
        layout = QVBoxLayout(self.group_box)
        layout.setSpacing(6)
        layout.setContentsMargins(10, 8, 10, 8)

        self.crosshair_radio = QRadioButton("Apply to crosshairs")
        self.explosion_radio = QRadioButton("Apply to explosions")
        self.crosshair_radio.setChecked(True)

        self.mode_group = QButtonGroup(self.group_box)
        self.mode_group.addButton(self.crosshair_radio)
        self.mode_group.addButton(self.explosion_radio)

        layout.addWidget(self.crosshair_radio)
        layout.addWidget(self.explosion_radio)

        self.explosion_combo = QComboBox()
        self.explosion_combo.setEnabled(False)
        layout.addWidget(self.explosion_combo)

        self.apply_button = QPushButton(qta.icon('fa5s.check'), "Apply")
        self.apply_button.setMinimumHeight(40)
        self.apply_button.setStyleSheet(APPLY_BUTTON_STYLES)
        layout.addWidget(self.apply_button)

        self.apply_class_button = QPushButton("...to all weapons of this class")
        self.apply_slot_button = QPushButton("...to all weapons of this slot")
        self.apply_all_button = QPushButton("...to all weapons")

        for button in self.bulk_buttons:
            button.setStyleSheet("text-align: left; padding-left: 8px;")
            layout.addWidget(button)

        layout.addStretch()

    @property
    def bulk_buttons(self) -> List[QPushButton]:
        return [self.apply_class_button, self.apply_slot_button, self.apply_all_button]

    def set_explosion_mode(self, enabled: bool):
        for button in self.bulk_buttons:
            button.setEnabled(not enabled)
        self.explosion_combo.setEnabled(enabled)

    def set_explosion_choices(self, choices: List[ExplosionEffect]):
        self.explosion_combo.clear()
        for effect in choices:
            self.explosion_combo.addItem(effect.label)

    def selected_explosion(self) -> Optional[ExplosionEffect]:
        label = self.explosion_combo.currentText()
        if not label:
            return None
        return ExplosionEffect.from_label(label)


class MainWindow(QMainWindow):
    """Main application window."""
    catalog_loaded_signal = Signal(object)  # CatalogLoadResult
    crosshairs_loaded_signal = Signal(object)  # ThumbnailScanResult

    def __init__(
            self,
            catalog_service: WeaponCatalogService,
            texture_service: TextureService,
            config_service: ConfigService,
            log_handler: QtLogHandler):
        super().__init__()

        self.logger = logging.getLogger("MainWindow")
        self.catalog_service = catalog_service
        self.texture_service = texture_service
        self.config_service = config_service
        self.log_handler = log_handler

        self.control_panel = ControlPanel()
        self._init_thread: Optional[threading.Thread] = None

        self._setup_ui()
        self._setup_connections()

        self.logger.debug("Main window initialized")

    def _setup_ui(self):
        """Setup main UI layout."""
        self.setWindowTitle("crosshair-switcher")
        self.setWindowIcon(qta.icon('fa5s.crosshairs'))
        self.resize(900, 700)
        self.setMinimumSize(900, 600)

        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)
        main_layout.setContentsMargins(8, 8, 8, 8)

        vertical_splitter = QSplitter(Qt.Orientation.Vertical)
        main_layout.addWidget(vertical_splitter)

        top_row = QWidget()
        top_layout = QHBoxLayout(top_row)
        top_layout.setContentsMargins(0, 0, 0, 0)

        self.weapon_list = WeaponListWidget()
        top_layout.addWidget(self.weapon_list, 3)

        right_column = QVBoxLayout()

        self.info_panel = QPlainTextEdit()
        self.info_panel.setReadOnly(True)
        self.info_panel.setStyleSheet(TEXT_PANEL_STYLES)
        right_column.addWidget(self.info_panel, 1)

        controls_row = QHBoxLayout()
        controls_row.addWidget(self.control_panel.group_box, 1)
        self.crosshair_list = CrosshairListWidget(self.config_service.thumbnail_size)
        controls_row.addWidget(self.crosshair_list, 1)
        right_column.addLayout(controls_row, 1)

        top_layout.addLayout(right_column, 2)
        vertical_splitter.addWidget(top_row)

        self.log_panel = LogPanel()
        self.log_panel.attach(self.log_handler)
        vertical_splitter.addWidget(self.log_panel)
        vertical_splitter.setSizes([500, 200])

    def _setup_connections(self):
        """Setup signal-slot connections."""
        self.weapon_list.itemSelectionChanged.connect(self._on_weapon_clicked)

        self.control_panel.crosshair_radio.toggled.connect(self._on_mode_changed)
        self.control_panel.apply_button.clicked.connect(self._on_apply)
        self.control_panel.apply_class_button.clicked.connect(self._on_apply_class)
        self.control_panel.apply_slot_button.clicked.connect(self._on_apply_slot)
        self.control_panel.apply_all_button.clicked.connect(self._on_apply_all)

        self.catalog_loaded_signal.connect(self._on_catalog_loaded)
        self.crosshairs_loaded_signal.connect(self._on_crosshairs_loaded)

    # Background initialization

    def start_loading(self):
        """Load weapon scripts and crosshair textures off the GUI thread."""
        self._init_thread = threading.Thread(
            target=self._load_worker, name="CatalogInit", daemon=True)
        self._init_thread.start()

    def _load_worker(self):
        try:
            self.catalog_loaded_signal.emit(self.catalog_service.load())
        except CrosshairSwitcherError as e:
            self.logger.error("%s", e)
        except Exception as e:
            self.logger.error("Weapon list initialization failed: %s", e, exc_info=True)

        try:
            self.crosshairs_loaded_signal.emit(self.texture_service.scan_directory())
        except CrosshairSwitcherError as e:
            self.logger.error("%s", e)
        except Exception as e:
            self.logger.error("Crosshair list initialization failed: %s", e, exc_info=True)

    def _on_catalog_loaded(self, result: CatalogLoadResult):
        displays = [self.catalog_service.entry_for(record).display for record in result.records]
        self.weapon_list.populate(result.records, displays)
        self.weapon_list.set_explosion_mode(self.control_panel.explosion_radio.isChecked())

    def _on_crosshairs_loaded(self, result: ThumbnailScanResult):
        self.crosshair_list.populate(result)

    # Event handlers

    def _on_weapon_clicked(self):
        row = self.weapon_list.current_row()
        if row is None:
            return

        try:
            self.info_panel.setPlainText(self.catalog_service.describe(row))
            self.control_panel.set_explosion_choices(self.catalog_service.explosion_choices(row))
        except CrosshairSwitcherError as e:
            self.logger.error("%s", e)

    def _on_mode_changed(self, crosshair_mode: bool):
        explosion_mode = not crosshair_mode
        self.control_panel.set_explosion_mode(explosion_mode)
        self.weapon_list.set_explosion_mode(explosion_mode)

    def _on_apply(self):
        if self.control_panel.crosshair_radio.isChecked():
            self._apply_crosshair(self.catalog_service.all_selected(self.weapon_list.selected_rows()))
            return

        row = self.weapon_list.current_row()
        try:
            record = self.catalog_service.apply_explosion(
                row, self.control_panel.selected_explosion())
            self.weapon_list.update_row(row, record)
            self.control_panel.set_explosion_choices(self.catalog_service.explosion_choices(row))
        except CrosshairSwitcherError as e:
            self.logger.error("%s", e)

    def _on_apply_class(self):
        row = self._require_current_row()
        if row is not None:
            self._apply_crosshair(self.catalog_service.all_class(row))

    def _on_apply_slot(self):
        row = self._require_current_row()
        if row is not None:
            self._apply_crosshair(self.catalog_service.all_slot(row))

    def _on_apply_all(self):
        self._apply_crosshair(self.catalog_service.all_items())

    def _require_current_row(self) -> Optional[int]:
        row = self.weapon_list.current_row()
        if row is None:
            self.logger.error("No weapon selected")
        return row

    def _apply_crosshair(self, rows: List[int]):
        try:
            result = self.catalog_service.apply_crosshair(
                rows, self.crosshair_list.selected_crosshair())
        except CrosshairSwitcherError as e:
            self.logger.error("%s", e)
            return

        for row in rows:
            self.weapon_list.update_row(row, self.catalog_service.record(row))

        if result.failures:
            self.logger.error("%s of %s weapons failed to update",
                              len(result.failures), len(rows))

    def closeEvent(self, event: QCloseEvent):
        """Detach the log handler before the panel is destroyed."""
        logging.getLogger().removeHandler(self.log_handler)
        self.logger.debug("Main window closed")
        super().closeEvent(event)

"""
Weapon table widget listing every loaded weapon script.
"""
import logging
from typing import List, Optional

from PySide6.QtWidgets import QAbstractItemView, QHeaderView, QTableWidget, QTableWidgetItem

from core.models.weapon import WeaponRecord


EXPLOSION_MARKER = "> "


class WeaponListWidget(QTableWidget):
    """Multi-select table with class, display name and crosshair columns."""

    COLUMNS = ("Class", "Weapon", "Crosshair")

    def __init__(self, parent=None):
        super().__init__(0, len(self.COLUMNS), parent)
        self.logger = logging.getLogger("WeaponListWidget")

        self.records: List[WeaponRecord] = []
        self.displays: List[str] = []
        self.explosion_mode = False

        self._setup_ui()

    def _setup_ui(self):
        self.setHorizontalHeaderLabels(self.COLUMNS)
        self.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        self.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.verticalHeader().setVisible(False)
        self.setShowGrid(False)

        header = self.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(1, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)

    def populate(self, records: List[WeaponRecord], displays: List[str]):
        """Fill the table, ``displays`` holds the display name of each record."""
        self.records = list(records)
        self.displays = list(displays)

        self.setRowCount(len(self.records))
        for row, record in enumerate(self.records):
            self._fill_row(row, record)

        self.logger.debug("Weapon list populated with %s rows", len(self.records))

    def update_row(self, row: int, record: WeaponRecord):
        """Show the reloaded state of one weapon."""
        self.records[row] = record
        self._fill_row(row, record)

    def set_explosion_mode(self, enabled: bool):
        """Mark weapons with explosion effects while explosion editing is active."""
        self.explosion_mode = enabled
        for row, record in enumerate(self.records):
            self._fill_row(row, record)

    def _fill_row(self, row: int, record: WeaponRecord):
        weapon_class = record.weapon_class
        if self.explosion_mode and record.uses_explosion:
            weapon_class = EXPLOSION_MARKER + weapon_class

        self.setItem(row, 0, QTableWidgetItem(weapon_class))
        self.setItem(row, 1, QTableWidgetItem(self.displays[row]))
        self.setItem(row, 2, QTableWidgetItem(record.crosshair_file_name))

    def selected_rows(self) -> List[int]:
        return sorted({index.row() for index in self.selectionModel().selectedRows()})

    def current_row(self) -> Optional[int]:
        row = self.currentRow()
        if row < 0 or row >= len(self.records):
            return None
        return row

"""
Crosshair list widget with decoded texture thumbnails.
"""
import logging
from typing import List, Optional

from PySide6.QtCore import QSize, Qt
from PySide6.QtGui import QIcon, QPixmap
from PySide6.QtWidgets import QAbstractItemView, QListWidget, QListWidgetItem
import qtawesome as qta

from core.models.crosshair import CrosshairItem
from core.services.texture_service import ThumbnailScanResult


class CrosshairListWidget(QListWidget):
    """Single-select list of crosshair textures."""

    def __init__(self, icon_size: int = 32, parent=None):
        super().__init__(parent)
        self.logger = logging.getLogger("CrosshairListWidget")
        self.icon_size = icon_size
        self.items: List[CrosshairItem] = []

        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.setIconSize(QSize(icon_size, icon_size))

    def populate(self, result: ThumbnailScanResult):
        """
        Fill the list with scanned crosshairs.

        Textures that failed to decode are listed with a placeholder icon.
        """
        self.clear()
        self.items = list(result.items)

        for crosshair in self.items:
            entry = QListWidgetItem(crosshair.name)
            entry.setIcon(self._icon_for(result.thumbnail_for(crosshair)))
            if crosshair.width and crosshair.height:
                entry.setToolTip(f"{crosshair.width}x{crosshair.height}")
            self.addItem(entry)

        self.logger.debug("Crosshair list populated with %s items", len(self.items))

    def _icon_for(self, png_data: Optional[bytes]) -> QIcon:
        if not png_data:
            return qta.icon('fa5s.question')

        pixmap = QPixmap()
        if not pixmap.loadFromData(png_data, "PNG"):
            return qta.icon('fa5s.question')

        return QIcon(pixmap.scaled(self.icon_size, self.icon_size,
                                   Qt.AspectRatioMode.KeepAspectRatio,
                                   Qt.TransformationMode.SmoothTransformation))

    def selected_crosshair(self) -> Optional[CrosshairItem]:
        row = self.currentRow()
        if row < 0 or row >= len(self.items):
            return None
        return self.items[row]

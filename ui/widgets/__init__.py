"""
Widgets package for reusable UI components.
"""

from .crosshair_list import CrosshairListWidget
from .log_panel import LogPanel, QtLogHandler
from .weapon_list import WeaponListWidget

__all__ = [
    'CrosshairListWidget',
    'LogPanel',
    'QtLogHandler',
    'WeaponListWidget'
]

"""
Views package for user interface views.
"""

from .main_window import MainWindow, ControlPanel

__all__ = [
    'MainWindow',
    'ControlPanel'
]

"""
Log panel widget fed by the logging system.
"""
import html
import logging
from datetime import datetime

from PySide6.QtCore import QObject, Signal
from PySide6.QtWidgets import QPlainTextEdit

from ui.widgets.styles import LOG_COLORS, TEXT_PANEL_STYLES


class LogSignalEmitter(QObject):
    """Carries log lines from any thread to the GUI thread."""
    message_logged = Signal(str, str)  # level label, message


class QtLogHandler(logging.Handler):
    """Logging handler forwarding records to a LogPanel through a Qt signal."""

    def __init__(self, level=logging.INFO):
        super().__init__(level)
        self.emitter = LogSignalEmitter()

    def emit(self, record: logging.LogRecord):
        try:
            label = "Error" if record.levelno >= logging.ERROR else "Info"
            self.emitter.message_logged.emit(label, record.getMessage())
        except Exception:
            self.handleError(record)


class LogPanel(QPlainTextEdit):
    """Read-only panel showing timestamped Info/Error lines."""

    MAX_BLOCKS = 2000

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setMaximumBlockCount(self.MAX_BLOCKS)
        self.setStyleSheet(TEXT_PANEL_STYLES)

    def attach(self, handler: QtLogHandler):
        handler.emitter.message_logged.connect(self.append_message)

    def append_message(self, label: str, message: str):
        timestamp = datetime.now().strftime("%H:%M:%S")
        color = LOG_COLORS.get(label, LOG_COLORS["Info"])
        self.appendHtml(
            f'<span style="color:{color}">[{timestamp}] [{label}]</span> {html.escape(message)}')
        scrollbar = self.verticalScrollBar()
        scrollbar.setValue(scrollbar.maximum())

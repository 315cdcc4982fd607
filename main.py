"""
Crosshair Switcher.
"""
import sys
import logging
import os
from typing import Tuple

from PySide6.QtWidgets import QApplication, QMessageBox
import qdarktheme

from ui.widgets.log_panel import QtLogHandler


LOG_FILE = 'crosshair_switcher.log'


def setup_dark_theme(app: QApplication, theme: str = "dark") -> bool:
    """
    Setup qdarktheme with PySide6 compatibility.

    Args:
        app: QApplication instance
        theme: Theme name ("dark", "light", or "auto" if supported)

    Returns:
        bool: True if theme was applied successfully
    """
    try:
        if hasattr(qdarktheme, 'load_stylesheet'):
            if theme == "auto":
                theme = "dark"
            app.setStyleSheet(qdarktheme.load_stylesheet(theme))
            return True
        else:
            print("Warning: qdarktheme API methods not found")
            return False
    except Exception as e:
        print(f"Warning: Failed to apply qdarktheme: {e}")
        return False


def cleanup_log_file():
    """Clean up the log file at startup."""
    try:
        if os.path.exists(LOG_FILE):
            os.remove(LOG_FILE)
            print(f"Previous log file '{LOG_FILE}' cleaned up")
    except Exception as e:
        print(f"Warning: Could not clean up log file '{LOG_FILE}': {e}")


def setup_logging() -> Tuple[logging.Logger, QtLogHandler]:
    """Configure logging system, including the handler feeding the log panel."""
    cleanup_log_file()

    log_handler = QtLogHandler(logging.INFO)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(LOG_FILE),
            logging.StreamHandler(),
            log_handler
        ]
    )

    logger = logging.getLogger("CrosshairSwitcher")

    # Reduce verbosity of external libraries
    logging.getLogger('PIL').setLevel(logging.WARNING)

    logger.info("Logging system initialized")
    return logger, log_handler


def initialize_system() -> Tuple:
    """Initialize all system services."""
    from data.config_repository import AssociationRepository, ConfigRepository
    from core.services.config_service import ConfigService
    from core.services.patcher_service import PatcherService
    from core.services.texture_service import TextureService
    from core.services.weapon_catalog_service import WeaponCatalogService
    from core.services.weapon_loader_service import WeaponLoaderService

    logger = logging.getLogger("Initialization")
    logger.info("Initializing system...")

    try:
        config_repository = ConfigRepository()
        config_service = ConfigService(config_repository)

        loader_service = WeaponLoaderService(
            config_service.scripts_dir, max_workers=config_service.max_workers)
        patcher_service = PatcherService(loader_service)
        catalog_service = WeaponCatalogService(
            AssociationRepository(), loader_service, patcher_service)

        texture_service = TextureService(
            config_service.thumbnails_dir,
            extension=config_service.texture_extension,
            max_workers=config_service.max_workers)

        logger.info("Scripts folder: %s", config_service.scripts_dir)
        logger.info("Crosshair folder: %s", config_service.thumbnails_dir)

        logger.info("System initialized successfully")
        return config_service, catalog_service, texture_service

    except Exception as e:
        logger.critical("System initialization failed: %s", e, exc_info=True)
        raise


def create_gui(config_service, catalog_service, texture_service, log_handler):
    """Create main GUI window."""
    from ui.views.main_window import MainWindow

    logger = logging.getLogger("GUI")
    logger.debug("Creating GUI...")

    try:
        window = MainWindow(catalog_service, texture_service, config_service, log_handler)
        logger.info("GUI initialized: Weapon list, Crosshair list, Log panel")
        return window

    except Exception as e:
        logger.critical("GUI creation failed: %s", e, exc_info=True)
        raise


def main():
    """Main entry point."""
    logger, log_handler = setup_logging()

    try:
        app = QApplication(sys.argv)

        config_service, catalog_service, texture_service = initialize_system()

        if not setup_dark_theme(app, config_service.theme):
            logger.warning("Failed to apply qdarktheme, using default styling")

        window = create_gui(config_service, catalog_service, texture_service, log_handler)
        window.show()
        window.start_loading()

        logger.info("=== Crosshair Switcher Started ===")

        sys.exit(app.exec())

    except Exception as e:
        logger.critical("Fatal error: %s", e, exc_info=True)
        QMessageBox.critical(None, "Fatal Error",
                             f"A fatal error occurred: {e}")


if __name__ == "__main__":
    main()

"""
Centralized configuration management service.
"""
import logging
from pathlib import Path
from typing import Any, Dict

from data.config_repository import ConfigRepository, VALID_THEMES


DEFAULT_CONFIG = {
    "game_dir": ".",
    "scripts_dir": "scripts",
    "thumbnails_dir": "materials/vgui/replay/thumbnails",
    "texture_extension": ".vtf",
    "thumbnail_size": 32,
    "max_workers": 8,
    "theme": "dark",
}


class ConfigurationValidator:
    """Validates configuration data integrity."""

    @staticmethod
    def validate_path(value: Any) -> bool:
        return isinstance(value, str) and bool(value.strip())

    @staticmethod
    def validate_extension(value: Any) -> bool:
        return isinstance(value, str) and len(value) > 1 and value.startswith(".")

    @staticmethod
    def validate_int_range(value: Any, minimum: int, maximum: int) -> bool:
        if not isinstance(value, int) or isinstance(value, bool):
            return False
        return minimum <= value <= maximum

    @staticmethod
    def validate_theme(value: Any) -> bool:
        return value in VALID_THEMES


class ConfigService:
    """Centralized configuration management service."""

    def __init__(self, config_repository: ConfigRepository):
        self.logger = logging.getLogger("ConfigService")
        self.config_repository = config_repository
        self.config: Dict[str, Any] = {}

        # Load initial configuration
        self.load_config()

    def load_config(self) -> bool:
        """Load configuration, writing a default file when none exists."""
        try:
            self.config = self.config_repository.load_config()
            if not self.config:
                self.logger.warning("Empty or missing configuration file")
                self._create_default_config()
                self.config_repository.save_config(self.config)
                return False

            self._parse_and_validate_config()
            self.logger.info("Configuration loaded successfully")
            return True

        except Exception as e:
            self.logger.error("Configuration loading failed: %s", e)
            raise RuntimeError(f"Failed to load configuration: {e}")

    def _parse_and_validate_config(self) -> None:
        """Replace missing or invalid values with defaults."""
        checks = {
            "game_dir": ConfigurationValidator.validate_path,
            "scripts_dir": ConfigurationValidator.validate_path,
            "thumbnails_dir": ConfigurationValidator.validate_path,
            "texture_extension": ConfigurationValidator.validate_extension,
            "thumbnail_size": lambda v: ConfigurationValidator.validate_int_range(v, 8, 256),
            "max_workers": lambda v: ConfigurationValidator.validate_int_range(v, 1, 64),
            "theme": ConfigurationValidator.validate_theme,
        }

        for key, is_valid in checks.items():
            if key not in self.config:
                self.config[key] = DEFAULT_CONFIG[key]
            elif not is_valid(self.config[key]):
                self.logger.warning(
                    "Invalid %s %r, using default %r", key, self.config[key], DEFAULT_CONFIG[key])
                self.config[key] = DEFAULT_CONFIG[key]

    def _create_default_config(self) -> None:
        """Create default configuration structure."""
        self.config = dict(DEFAULT_CONFIG)
        self.logger.info("Created default configuration")

    @property
    def game_dir(self) -> Path:
        """Game directory, relative values resolve against the config file."""
        game_dir = Path(self.config["game_dir"])
        if not game_dir.is_absolute():
            game_dir = Path(self.config_repository.config_file).resolve().parent / game_dir
        return game_dir

    @property
    def scripts_dir(self) -> Path:
        return self.game_dir / self.config["scripts_dir"]

    @property
    def thumbnails_dir(self) -> Path:
        return self.game_dir / self.config["thumbnails_dir"]

    @property
    def texture_extension(self) -> str:
        return self.config["texture_extension"]

    @property
    def thumbnail_size(self) -> int:
        return self.config["thumbnail_size"]

    @property
    def max_workers(self) -> int:
        return self.config["max_workers"]

    @property
    def theme(self) -> str:
        return self.config["theme"]

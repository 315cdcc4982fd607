"""
Data repositories for configuration and the weapon association catalog.
"""
import os
import json
import logging
from typing import Dict, List, Any
from pathlib import Path

from core.models.association import AssociationEntry


ASSOCIATIONS_FILE = Path(__file__).parent / "associations.json"

VALID_THEMES = ("dark", "light", "auto")


class ConfigRepository:
    """Repository for JSON configuration file management."""

    def __init__(self, config_file: str = "config.json"):
        self.logger = logging.getLogger("ConfigRepository")
        self.config_file = config_file
        self.logger.debug(f"Using settings file {config_file}")

    def load_config(self) -> Dict[str, Any]:
        """
        Read the settings file.

        Returns an empty dict when the file is missing, unreadable or not a
        JSON object, so the caller falls back to defaults. Schema problems
        are only logged; the service replaces the offending values.
        """
        if not os.path.exists(self.config_file):
            self.logger.warning(f"No settings file at {self.config_file}")
            return {}

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            self.logger.error(f"Settings file {self.config_file} is not valid JSON: {e}")
            return {}
        except OSError as e:
            self.logger.error(f"Failed to read settings file {self.config_file}: {e}")
            return {}

        if not isinstance(config, dict):
            self.logger.error(f"Settings in {self.config_file} must be a JSON object")
            return {}

        for problem in self._validate_config_schema(config):
            self.logger.warning(f"Settings: {problem}")

        return config

    def _validate_config_schema(self, config: Dict[str, Any]) -> List[str]:
        """Describe every value the service will replace with a default."""
        errors = []

        for key in ("game_dir", "scripts_dir", "thumbnails_dir"):
            if key in config and not isinstance(config[key], str):
                errors.append(f"'{key}' must be a string")

        extension = config.get("texture_extension")
        if extension is not None and (not isinstance(extension, str) or not extension.startswith(".")):
            errors.append("'texture_extension' must be a string starting with '.'")

        for key, minimum, maximum in (("thumbnail_size", 8, 256), ("max_workers", 1, 64)):
            if key not in config:
                continue
            value = config[key]
            if not isinstance(value, int) or isinstance(value, bool):
                errors.append(f"'{key}' must be an integer")
            elif not (minimum <= value <= maximum):
                errors.append(f"'{key}' must be between {minimum} and {maximum}")

        if "theme" in config and config["theme"] not in VALID_THEMES:
            errors.append(f"'theme' must be one of {', '.join(VALID_THEMES)}")

        return errors

    def save_config(self, config: Dict[str, Any]) -> bool:
        """Write the settings file, returning False when it cannot be written."""
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(config, f, indent=4)
        except OSError as e:
            self.logger.error(f"Failed to write settings file {self.config_file}: {e}")
            return False

        self.logger.info(f"Wrote settings file {self.config_file}")
        return True


class AssociationRepository:
    """Repository for the bundled weapon association catalog."""

    def __init__(self, catalog_file: Path = ASSOCIATIONS_FILE):
        self.logger = logging.getLogger("AssociationRepository")
        self.catalog_file = Path(catalog_file)

    def load_entries(self) -> List[AssociationEntry]:
        """
        Load catalog entries in file order.

        Malformed entries are logged and skipped. An unreadable catalog
        yields an empty list.
        """
        try:
            with open(self.catalog_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            self.logger.error(f"JSON decode error in {self.catalog_file.name}: {e}")
            return []
        except (IOError, OSError) as e:
            self.logger.error(f"Failed to read association catalog {self.catalog_file}: {e}")
            return []

        if not isinstance(data, dict):
            self.logger.error(f"Association catalog root must be an object in {self.catalog_file.name}")
            return []

        entries = []
        for weapon_id, entry_data in data.items():
            try:
                entries.append(AssociationEntry.from_dict(weapon_id, entry_data))
            except (KeyError, TypeError, ValueError) as e:
                self.logger.warning("Invalid association entry %s: %s", weapon_id, e)
                continue

        self.logger.debug("Loaded %s association entries", len(entries))
        return entries

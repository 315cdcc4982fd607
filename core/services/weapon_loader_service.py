"""
Weapon script loading service.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from core.exceptions import (
    CrosshairSwitcherError, MalformedFieldError, MissingRequiredFieldError, NotFoundError
)
from core.models.association import AssociationEntry
from core.models.weapon import ExplosionEffect, WeaponRecord, uses_explosion
from core.services import weapon_script


def parse_crosshair(lines: List[str]) -> str:
    """Current crosshair path fragment, empty if the script has none."""
    index = weapon_script.find_crosshair_file(lines)
    if index is None:
        return ""
    return weapon_script.extract_value(lines[index])


def parse_explosion(lines: List[str]) -> Optional[ExplosionEffect]:
    """Current explosion effect, None if the script has no ExplosionEffect key."""
    index = weapon_script.find_key(lines, weapon_script.EXPLOSION_KEYS[0])
    if index is None:
        return None
    return ExplosionEffect.from_identifier(weapon_script.extract_value(lines[index]))


def load_weapon(path: Path, weapon_class: str, slot: int) -> WeaponRecord:
    """
    Load a weapon record from its script file.

    Args:
        path: Script path, the file stem is the weapon id
        weapon_class: Player class label from the association catalog
        slot: Equip slot number from the association catalog

    Returns:
        Record holding the current crosshair and explosion effect

    Raises:
        NotFoundError: Script does not exist
        FileAccessError: Script could not be read
        MalformedFieldError: A crosshair or explosion key has no value
        MissingRequiredFieldError: Explosion weapon without ExplosionEffect key
    """
    path = Path(path)
    name = path.stem
    lines = weapon_script.split_lines(weapon_script.read_script(path))

    try:
        crosshair = parse_crosshair(lines)
        explosion_effect = parse_explosion(lines) if uses_explosion(name) else None
    except MalformedFieldError as e:
        raise MalformedFieldError(f"Failed to get value in {path.name}: {e}") from e

    if uses_explosion(name) and explosion_effect is None:
        raise MissingRequiredFieldError(f"Expected an explosion type in {path.name}")

    return WeaponRecord(
        name=name,
        path=path,
        weapon_class=weapon_class,
        slot=slot,
        crosshair=crosshair,
        explosion_effect=explosion_effect,
    )


@dataclass
class CatalogLoadResult:
    """Outcome of loading every weapon in the association catalog."""

    records: List[WeaponRecord] = field(default_factory=list)
    failures: List[Tuple[str, Exception]] = field(default_factory=list)


class WeaponLoaderService:
    """Loads weapon records from the game's scripts directory."""

    SCRIPT_EXTENSION = ".txt"

    def __init__(self, scripts_dir: Path, max_workers: int = 8):
        self.logger = logging.getLogger("WeaponLoaderService")
        self.scripts_dir = Path(scripts_dir)
        self.max_workers = max(1, max_workers)

    def script_path(self, weapon_id: str) -> Path:
        return self.scripts_dir / f"{weapon_id}{self.SCRIPT_EXTENSION}"

    def load_entry(self, entry: AssociationEntry) -> WeaponRecord:
        """Load the record for a single catalog entry."""
        return load_weapon(self.script_path(entry.weapon_id), entry.weapon_class, entry.slot)

    def reload(self, record: WeaponRecord) -> WeaponRecord:
        """Re-read a record from disk, keeping its catalog metadata."""
        return load_weapon(record.path, record.weapon_class, record.slot)

    def load_catalog(self, entries: Iterable[AssociationEntry]) -> CatalogLoadResult:
        """
        Load all catalog entries, skipping the ones that fail.

        Records keep the catalog order. Each failure is logged and collected,
        it never stops the remaining loads.

        Raises:
            NotFoundError: Scripts directory is missing
        """
        if not self.scripts_dir.is_dir():
            raise NotFoundError(f"Failed to find `{self.scripts_dir.name}` folder")

        entries = list(entries)
        result = CatalogLoadResult()

        with ThreadPoolExecutor(max_workers=self.max_workers,
                                thread_name_prefix="WeaponLoader") as executor:
            futures = [executor.submit(self.load_entry, entry) for entry in entries]

            for entry, future in zip(entries, futures):
                try:
                    result.records.append(future.result())
                except CrosshairSwitcherError as e:
                    self.logger.error("Skipping %s; %s", entry.weapon_id, e)
                    result.failures.append((entry.weapon_id, e))
                except Exception as e:
                    self.logger.error("Skipping %s; unexpected error: %s",
                                      entry.weapon_id, e, exc_info=True)
                    result.failures.append((entry.weapon_id, e))

        self.logger.info("Loaded %s weapon scripts (%s skipped)",
                         len(result.records), len(result.failures))
        return result

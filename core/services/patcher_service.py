"""
Weapon script patching service for crosshair and explosion changes.
"""
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import List

from core.exceptions import (
    FileAccessError, MalformedFieldError, MissingRequiredFieldError, UnsupportedOperationError
)
from core.models.crosshair import CrosshairItem
from core.models.weapon import ExplosionEffect, WeaponRecord, uses_explosion
from core.services import weapon_script
from core.services.weapon_loader_service import WeaponLoaderService


CROSSHAIR_PATH_PREFIX = "vgui/replay/thumbnails"
DEFAULT_CROSSHAIR_SIZE = 64


def crosshair_reference(crosshair: CrosshairItem) -> str:
    """Script value pointing at a crosshair texture (no extension)."""
    return f"{CROSSHAIR_PATH_PREFIX}/{crosshair.stem}"


def _size_or_default(value: int) -> str:
    return str(value) if value else str(DEFAULT_CROSSHAIR_SIZE)


def _replace_lines(lines: List[str], indexes: List[int], value: str, file_name: str) -> None:
    for index in indexes:
        try:
            lines[index] = weapon_script.replace_value(lines[index], value)
        except MalformedFieldError as e:
            raise MalformedFieldError(f"Failed to replace value in {file_name}: {e}") from e


def patch_crosshair(original_path: Path, crosshair: CrosshairItem) -> str:
    """
    Build new script text pointing the crosshair block at another texture.

    "file" gets the thumbnail reference, "x"/"y" are reset to 0 and
    "width"/"height" take the texture size, or 64 when it is unknown.
    Every other line is returned unchanged.

    Raises:
        NotFoundError: Script does not exist
        FileAccessError: Script could not be read
        MissingRequiredFieldError: Script has no crosshair block
        MalformedFieldError: Block has no "file" key or a key has no value
    """
    original_path = Path(original_path)
    file_name = original_path.name
    lines = weapon_script.split_lines(weapon_script.read_script(original_path))

    if weapon_script.find_crosshair_header(lines) is None:
        raise MissingRequiredFieldError(f"No crosshair block in {file_name}")

    fields = weapon_script.crosshair_block_fields(lines)
    if weapon_script.FILE_KEY not in fields:
        raise MalformedFieldError(f"Crosshair block in {file_name} has no \"file\" key")

    replacements = {
        weapon_script.FILE_KEY: crosshair_reference(crosshair),
        weapon_script.X_KEY: "0",
        weapon_script.Y_KEY: "0",
        weapon_script.WIDTH_KEY: _size_or_default(crosshair.width),
        weapon_script.HEIGHT_KEY: _size_or_default(crosshair.height),
    }

    for key, indexes in fields.items():
        _replace_lines(lines, indexes, replacements[key], file_name)

    return "".join(lines)


def patch_explosion(original_path: Path, effect: ExplosionEffect) -> str:
    """
    Build new script text using another explosion particle effect.

    All ExplosionEffect, ExplosionPlayerEffect and ExplosionWaterEffect
    lines are rewritten in one pass. The default effect is written as a
    different particle name for each of the three keys.

    Raises:
        NotFoundError: Script does not exist
        FileAccessError: Script could not be read
        MissingRequiredFieldError: Script has no ExplosionEffect key
        MalformedFieldError: A key line has no value
    """
    original_path = Path(original_path)
    file_name = original_path.name
    lines = weapon_script.split_lines(weapon_script.read_script(original_path))

    fields = weapon_script.explosion_fields(lines)
    if not fields[weapon_script.EXPLOSION_KEYS[0]]:
        raise MissingRequiredFieldError(f"Expected an explosion type in {file_name}")

    for key, indexes in fields.items():
        identifier = effect.identifier_for(weapon_script.unquote_key(key))
        _replace_lines(lines, indexes, identifier, file_name)

    return "".join(lines)


def write_script(path: Path, text: str) -> None:
    """
    Replace a script's content through a temporary file and rename.

    Raises:
        FileAccessError: Temporary file could not be written or moved
    """
    path = Path(path)
    temp_name = None
    try:
        with tempfile.NamedTemporaryFile('w', encoding='utf-8', newline='',
                                         dir=path.parent, prefix=f".{path.stem}.",
                                         suffix=".tmp", delete=False) as f:
            temp_name = f.name
            f.write(text)
            f.flush()
            os.fsync(f.fileno())

        if path.exists():
            shutil.copymode(path, temp_name)
        os.replace(temp_name, path)
        temp_name = None

    except OSError as e:
        raise FileAccessError(f"Failed to write {path.name}: {e}") from e

    finally:
        if temp_name and os.path.exists(temp_name):
            os.remove(temp_name)


class PatcherService:
    """Applies crosshair and explosion changes to weapon scripts on disk."""

    def __init__(self, loader_service: WeaponLoaderService):
        self.logger = logging.getLogger("PatcherService")
        self.loader_service = loader_service

    def apply_crosshair(self, record: WeaponRecord, crosshair: CrosshairItem) -> WeaponRecord:
        """
        Point a weapon at a new crosshair, write the script and reload it.

        Returns:
            Record reloaded from the patched script
        """
        write_script(record.path, patch_crosshair(record.path, crosshair))
        updated = self.loader_service.reload(record)

        self.logger.info("%s: %s -> %s", record.name, record.crosshair_stem, crosshair.stem)
        return updated

    def apply_explosion(self, record: WeaponRecord, effect: ExplosionEffect) -> WeaponRecord:
        """
        Switch a weapon's explosion effect, write the script and reload it.

        Returns:
            Record reloaded from the patched script

        Raises:
            UnsupportedOperationError: Weapon does not use explosion effects
        """
        if not uses_explosion(record.name):
            raise UnsupportedOperationError(f"{record.name} doesn't use explosions")

        write_script(record.path, patch_explosion(record.path, effect))
        updated = self.loader_service.reload(record)

        previous = record.explosion_effect.label if record.explosion_effect else "None"
        self.logger.info("%s: %s -> %s", record.name, previous, effect.label)
        return updated

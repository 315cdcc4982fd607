"""
Weapon catalog state and bulk apply operations.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from core.exceptions import CrosshairSwitcherError, NotFoundError, SelectionError
from core.models.association import AssociationEntry
from core.models.crosshair import CrosshairItem
from core.models.weapon import ExplosionEffect, WeaponRecord
from core.services.patcher_service import PatcherService
from core.services.weapon_loader_service import CatalogLoadResult, WeaponLoaderService
from data.config_repository import AssociationRepository


@dataclass
class ApplyResult:
    """Outcome of applying one change to a set of weapons."""

    updated: List[str] = field(default_factory=list)
    failures: List[Tuple[str, Exception]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failures


class WeaponCatalogService:
    """
    Holds the loaded weapon records and applies changes to them.

    Records are addressed by their position in the catalog, the same
    order the weapon list shows them in.
    """

    def __init__(self,
                 association_repository: AssociationRepository,
                 loader_service: WeaponLoaderService,
                 patcher_service: PatcherService):
        self.logger = logging.getLogger("WeaponCatalogService")
        self.association_repository = association_repository
        self.loader_service = loader_service
        self.patcher_service = patcher_service

        self.entries: Dict[str, AssociationEntry] = {}
        self.records: List[WeaponRecord] = []

    def load(self) -> CatalogLoadResult:
        """
        Load the association catalog and every weapon script it names.

        Raises:
            NotFoundError: Scripts directory is missing
        """
        entries = self.association_repository.load_entries()
        self.entries = {entry.weapon_id: entry for entry in entries}

        result = self.loader_service.load_catalog(entries)
        self.records = list(result.records)
        return result

    def record(self, index: int) -> WeaponRecord:
        if not 0 <= index < len(self.records):
            raise NotFoundError(f"Item index `{index}` doesn't have any data")
        return self.records[index]

    def entry_for(self, record: WeaponRecord) -> AssociationEntry:
        entry = self.entries.get(record.name)
        if entry is None:
            raise NotFoundError(f"Not in lookup: {record.name}")
        return entry

    def describe(self, index: int) -> str:
        """Info panel text for the record at ``index``."""
        return self.entry_for(self.record(index)).describe()

    def explosion_choices(self, index: int) -> List[ExplosionEffect]:
        """
        Explosion effects offered for a weapon, its current effect first.

        Returns an empty list for weapons without explosions.
        """
        record = self.record(index)
        if not record.uses_explosion:
            return []

        current = record.explosion_effect
        choices = [current] if current is not None else []
        choices.extend(effect for effect in ExplosionEffect.known() if effect != current)
        return choices

    # Selection helpers

    def all_selected(self, indexes: Iterable[int]) -> List[int]:
        """Valid selected indexes in list order."""
        return sorted({index for index in indexes if 0 <= index < len(self.records)})

    def all_class(self, index: int) -> List[int]:
        """Indexes of every weapon sharing the player class of ``index``."""
        weapon_class = self.record(index).weapon_class
        return [i for i, record in enumerate(self.records) if record.weapon_class == weapon_class]

    def all_slot(self, index: int) -> List[int]:
        """Indexes of every weapon sharing the equip slot of ``index``."""
        slot = self.record(index).slot
        return [i for i, record in enumerate(self.records) if record.slot == slot]

    def all_items(self) -> List[int]:
        return list(range(len(self.records)))

    # Apply operations

    def apply_crosshair(self, indexes: List[int], crosshair: Optional[CrosshairItem]) -> ApplyResult:
        """
        Point every weapon in ``indexes`` at ``crosshair``.

        A failing weapon is logged and skipped, the remaining weapons are
        still patched.

        Raises:
            SelectionError: No weapon or no crosshair selected
        """
        if not indexes:
            raise SelectionError("No weapon selected")
        if crosshair is None:
            raise SelectionError("No crosshair selected")

        result = ApplyResult()
        for index in indexes:
            record = self.record(index)
            try:
                self.records[index] = self.patcher_service.apply_crosshair(record, crosshair)
                result.updated.append(record.name)
            except CrosshairSwitcherError as e:
                self.logger.error("%s", e)
                result.failures.append((record.name, e))

        return result

    def apply_explosion(self, index: Optional[int], effect: Optional[ExplosionEffect]) -> WeaponRecord:
        """
        Switch the explosion effect of a single weapon.

        Raises:
            SelectionError: No weapon or no effect selected
            UnsupportedOperationError: Weapon does not use explosions
        """
        if index is None:
            raise SelectionError("No weapon selected")
        if effect is None:
            raise SelectionError("No explosion selected")

        record = self.patcher_service.apply_explosion(self.record(index), effect)
        self.records[index] = record
        return record

"""
Association catalog entry model.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from core.models.weapon import slot_label


@dataclass(frozen=True)
class AssociationEntry:
    """Static description of one weapon script from the bundled catalog."""

    weapon_id: str
    weapon_class: str  # Player class, e.g. "Soldier"
    display: str  # Weapon category shown in the list
    slot: int
    affected: Tuple[str, ...] = field(default_factory=tuple)  # Items sharing this script

    @property
    def slot_label(self) -> str:
        return slot_label(self.slot)

    def describe(self) -> str:
        """Multi-line summary shown in the info panel."""
        affected = "\n  - ".join(self.affected)
        return (f"Class: {self.weapon_class}\n\n"
                f"Weapon Class: {self.weapon_id}\n\n"
                f"Category: {self.display}\n\n"
                f"Slot: {self.slot_label}\n\n"
                f"Affected Weapons:\n  - {affected}")

    @classmethod
    def from_dict(cls, weapon_id: str, data: Dict[str, Any]) -> 'AssociationEntry':
        """Create entry from its JSON object."""
        return cls(
            weapon_id=weapon_id,
            weapon_class=data["class"],
            display=data["display"],
            slot=int(data["slot"]),
            affected=tuple(data.get("all", [])),
        )

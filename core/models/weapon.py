"""
Weapon record and explosion effect models.
"""
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional


# Weapons whose scripts carry the three Explosion*Effect keys
EXPLOSION_WEAPONS = frozenset({
    "tf_weapon_rocketlauncher",
    "tf_weapon_particle_cannon",
    "tf_weapon_rocketlauncher_directhit",
    "tf_weapon_rocketlauncher_airstrike",
    "tf_weapon_grenadelauncher",
    "tf_weapon_cannon",
    "tf_weapon_pipebomblauncher",
})

SLOT_LABELS = {
    1: "Primary",
    2: "Secondary",
    3: "Melee",
    4: "PDA",
    5: "PDA",
    9: "Other",
}


def uses_explosion(weapon_id: str) -> bool:
    """Check if weapon script supports explosion effect substitution."""
    return weapon_id in EXPLOSION_WEAPONS


def slot_label(slot: int) -> str:
    """Get display label for an equip slot number."""
    return SLOT_LABELS.get(slot, "")


class ExplosionKind(Enum):
    """Known explosion particle variants plus the open fallback."""
    DEFAULT = "Default"
    PYRO_POOL = "Pyro Pool"
    MUZZLE_FLASH = "Muzzle Flash"
    SAPPER_DESTROYED = "Sapper Destroyed"
    ELECTRIC_SHOCK = "Electric Shock"
    OTHER = "Other"


# The default variant is written per key, see DEFAULT_EFFECT_BY_KEY
EFFECT_IDENTIFIERS = {
    ExplosionKind.PYRO_POOL: "eotl_pyro_pool_explosion_flash",
    ExplosionKind.MUZZLE_FLASH: "muzzle_minigun_starflash01",
    ExplosionKind.SAPPER_DESTROYED: "ExplosionCore_sapperdestroyed",
    ExplosionKind.ELECTRIC_SHOCK: "electrocuted_red_flash",
}

DEFAULT_EFFECT_BY_KEY = {
    "ExplosionEffect": "ExplosionCore_wall",
    "ExplosionPlayerEffect": "ExplosionCore_MidAir",
    "ExplosionWaterEffect": "ExplosionCore_MidAir_underwater",
}


@dataclass(frozen=True)
class ExplosionEffect:
    """
    Explosion particle effect of a weapon.

    ``raw`` is only set for ``ExplosionKind.OTHER`` and holds the
    unrecognized identifier read from the script.
    """

    kind: ExplosionKind
    raw: Optional[str] = None

    def __post_init__(self):
        if (self.kind is ExplosionKind.OTHER) != (self.raw is not None):
            raise ValueError("raw identifier is required for OTHER and only for OTHER")

    @classmethod
    def known(cls) -> List['ExplosionEffect']:
        """All well-known variants in display order."""
        return [cls(kind) for kind in ExplosionKind if kind is not ExplosionKind.OTHER]

    @classmethod
    def from_identifier(cls, identifier: str) -> 'ExplosionEffect':
        """Map an on-disk ExplosionEffect value to a variant."""
        if identifier == DEFAULT_EFFECT_BY_KEY["ExplosionEffect"]:
            return cls(ExplosionKind.DEFAULT)

        for kind, value in EFFECT_IDENTIFIERS.items():
            if value == identifier:
                return cls(kind)

        return cls(ExplosionKind.OTHER, identifier)

    @classmethod
    def from_label(cls, label: str) -> 'ExplosionEffect':
        """Map a display label back to a variant."""
        for kind in ExplosionKind:
            if kind is not ExplosionKind.OTHER and kind.value == label:
                return cls(kind)

        return cls(ExplosionKind.OTHER, label)

    @property
    def label(self) -> str:
        """Display label."""
        if self.kind is ExplosionKind.OTHER:
            return self.raw
        return self.kind.value

    def identifier_for(self, key: str) -> str:
        """
        On-disk identifier written under the given Explosion*Effect key.

        Args:
            key: One of the keys in DEFAULT_EFFECT_BY_KEY

        Returns:
            Particle system name for that key
        """
        if self.kind is ExplosionKind.DEFAULT:
            return DEFAULT_EFFECT_BY_KEY[key]
        if self.kind is ExplosionKind.OTHER:
            return self.raw
        return EFFECT_IDENTIFIERS[self.kind]

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class WeaponRecord:
    """Current crosshair and explosion state of one weapon script."""

    name: str
    path: Path
    weapon_class: str
    slot: int
    crosshair: str = ""
    explosion_effect: Optional[ExplosionEffect] = None

    @property
    def crosshair_file_name(self) -> str:
        """Last path component of the crosshair reference."""
        return self.crosshair.rsplit("/", 1)[-1]

    @property
    def crosshair_stem(self) -> str:
        """Crosshair file name without extension."""
        return Path(self.crosshair_file_name).stem

    @property
    def uses_explosion(self) -> bool:
        return uses_explosion(self.name)

    @property
    def slot_label(self) -> str:
        return slot_label(self.slot)

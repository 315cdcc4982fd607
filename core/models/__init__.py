"""
Models package for data structures and business objects.
"""

from .association import AssociationEntry
from .crosshair import CrosshairItem
from .weapon import ExplosionEffect, ExplosionKind, WeaponRecord

__all__ = [
    'AssociationEntry',
    'CrosshairItem',
    'ExplosionEffect',
    'ExplosionKind',
    'WeaponRecord'
]

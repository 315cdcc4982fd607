"""
Data package for repositories and data access layer.
"""

from .config_repository import AssociationRepository, ConfigRepository

__all__ = [
    'AssociationRepository',
    'ConfigRepository'
]

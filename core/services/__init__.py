"""
Services package for business logic and application services.
"""

from .config_service import ConfigService
from .patcher_service import PatcherService
from .texture_service import TextureService
from .weapon_catalog_service import WeaponCatalogService
from .weapon_loader_service import WeaponLoaderService

__all__ = [
    'ConfigService',
    'PatcherService',
    'TextureService',
    'WeaponCatalogService',
    'WeaponLoaderService'
]

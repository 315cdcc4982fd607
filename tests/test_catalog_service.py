"""
Tests for catalog selection helpers and bulk apply.
"""
import json
from pathlib import Path

import pytest

from core.exceptions import NotFoundError, SelectionError, UnsupportedOperationError
from core.models.crosshair import CrosshairItem
from core.models.weapon import ExplosionEffect, ExplosionKind
from core.services.patcher_service import PatcherService
from core.services.weapon_catalog_service import WeaponCatalogService
from core.services.weapon_loader_service import WeaponLoaderService
from data.config_repository import AssociationRepository


CATALOG = {
    "tf_weapon_grenadelauncher": {"class": "Demoman", "display": "Grenade Launcher", "slot": 1,
                                  "all": ["Grenade Launcher", "Loch-n-Load"]},
    "tf_weapon_minigun": {"class": "Heavy", "display": "Minigun", "slot": 1, "all": ["Minigun"]},
    "tf_weapon_flaregun": {"class": "Pyro", "display": "Flare Gun", "slot": 2, "all": ["Flare Gun"]},
    "tf_weapon_medigun": {"class": "Medic", "display": "Medi Gun", "slot": 2, "all": ["Medi Gun"]},
}


@pytest.fixture
def catalog_service(tmp_path, scripts_dir):
    catalog_file = tmp_path / "associations.json"
    catalog_file.write_text(json.dumps(CATALOG), encoding="utf-8")

    loader = WeaponLoaderService(scripts_dir, max_workers=2)
    service = WeaponCatalogService(AssociationRepository(catalog_file), loader, PatcherService(loader))
    service.load()
    return service


@pytest.fixture
def item():
    return CrosshairItem("crosshair7.vtf", Path("crosshair7.vtf"), (32, 32))


def test_load_skips_broken_scripts(catalog_service):
    assert [r.name for r in catalog_service.records] == [
        "tf_weapon_grenadelauncher", "tf_weapon_flaregun", "tf_weapon_medigun"]


def test_describe(catalog_service):
    text = catalog_service.describe(0)

    assert text == ("Class: Demoman\n\n"
                    "Weapon Class: tf_weapon_grenadelauncher\n\n"
                    "Category: Grenade Launcher\n\n"
                    "Slot: Primary\n\n"
                    "Affected Weapons:\n  - Grenade Launcher\n  - Loch-n-Load")


def test_selection_helpers(catalog_service):
    assert catalog_service.all_selected([2, 0, 0, 9, -1]) == [0, 2]
    assert catalog_service.all_class(1) == [1]
    assert catalog_service.all_slot(1) == [1, 2]
    assert catalog_service.all_items() == [0, 1, 2]


def test_record_out_of_range(catalog_service):
    with pytest.raises(NotFoundError):
        catalog_service.record(3)


def test_explosion_choices_current_first(catalog_service):
    choices = catalog_service.explosion_choices(0)

    assert [c.label for c in choices] == [
        "Default", "Pyro Pool", "Muzzle Flash", "Sapper Destroyed", "Electric Shock"]
    assert catalog_service.explosion_choices(1) == []


def test_apply_crosshair_continues_after_failure(catalog_service, item):
    result = catalog_service.apply_crosshair(catalog_service.all_items(), item)

    assert result.updated == ["tf_weapon_grenadelauncher", "tf_weapon_flaregun"]
    assert [name for name, _ in result.failures] == ["tf_weapon_medigun"]
    assert not result.success
    assert catalog_service.record(0).crosshair == "vgui/replay/thumbnails/crosshair7"
    assert catalog_service.record(1).crosshair == "vgui/replay/thumbnails/crosshair7"
    assert catalog_service.record(2).crosshair == ""


def test_apply_crosshair_needs_selection(catalog_service, item):
    with pytest.raises(SelectionError, match="No weapon selected"):
        catalog_service.apply_crosshair([], item)

    with pytest.raises(SelectionError, match="No crosshair selected"):
        catalog_service.apply_crosshair([0], None)


def test_apply_explosion(catalog_service):
    record = catalog_service.apply_explosion(0, ExplosionEffect(ExplosionKind.MUZZLE_FLASH))

    assert record.explosion_effect == ExplosionEffect(ExplosionKind.MUZZLE_FLASH)
    assert catalog_service.record(0) == record
    assert catalog_service.explosion_choices(0)[0] == ExplosionEffect(ExplosionKind.MUZZLE_FLASH)


def test_apply_explosion_unsupported_weapon(catalog_service):
    with pytest.raises(UnsupportedOperationError):
        catalog_service.apply_explosion(1, ExplosionEffect(ExplosionKind.PYRO_POOL))


def test_apply_explosion_needs_selection(catalog_service):
    with pytest.raises(SelectionError):
        catalog_service.apply_explosion(None, ExplosionEffect(ExplosionKind.PYRO_POOL))

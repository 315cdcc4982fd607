"""
Tests for the bundled weapon association catalog.
"""
import json

from core.models.weapon import EXPLOSION_WEAPONS, SLOT_LABELS
from data.config_repository import AssociationRepository


def test_bundled_catalog_is_complete():
    entries = AssociationRepository().load_entries()
    weapon_ids = [entry.weapon_id for entry in entries]

    assert len(entries) > 50
    assert len(set(weapon_ids)) == len(weapon_ids)
    assert EXPLOSION_WEAPONS <= set(weapon_ids)
    for entry in entries:
        assert entry.weapon_id.startswith("tf_weapon_")
        assert entry.slot in SLOT_LABELS
        assert entry.weapon_class
        assert entry.affected


def test_entries_keep_file_order(tmp_path):
    catalog_file = tmp_path / "associations.json"
    catalog_file.write_text(
        '{"tf_weapon_b": {"class": "Spy", "display": "B", "slot": 3, "all": ["B"]},'
        ' "tf_weapon_a": {"class": "Scout", "display": "A", "slot": 1, "all": ["A"]}}',
        encoding="utf-8")

    entries = AssociationRepository(catalog_file).load_entries()

    assert [e.weapon_id for e in entries] == ["tf_weapon_b", "tf_weapon_a"]


def test_invalid_entries_are_skipped(tmp_path):
    catalog_file = tmp_path / "associations.json"
    catalog_file.write_text(json.dumps({
        "tf_weapon_ok": {"class": "Sniper", "display": "Ok", "slot": 1, "all": []},
        "tf_weapon_no_class": {"display": "Broken", "slot": 1},
        "tf_weapon_bad_slot": {"class": "Sniper", "display": "Broken", "slot": "primary"},
    }), encoding="utf-8")

    entries = AssociationRepository(catalog_file).load_entries()

    assert [e.weapon_id for e in entries] == ["tf_weapon_ok"]


def test_unreadable_catalog(tmp_path):
    assert AssociationRepository(tmp_path / "missing.json").load_entries() == []

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    assert AssociationRepository(broken).load_entries() == []


def test_bundled_grenade_launcher_entry():
    entries = {e.weapon_id: e for e in AssociationRepository().load_entries()}
    entry = entries["tf_weapon_grenadelauncher"]

    assert entry.weapon_class == "Demoman"
    assert entry.slot_label == "Primary"

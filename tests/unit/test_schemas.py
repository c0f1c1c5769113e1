"""
Unit tests for item record validation.
"""

import pytest
from gearforge.core.models import Item, ItemKind, Inventory, Rarity, Slot, PLAYER
from gearforge.core.result import ErrorCode
from gearforge.items.schemas import (
    ItemValidationError,
    validate_item,
    validate_inventory,
    load_item,
    load_inventory,
)


def record(**fields):
    data = {'id': 'sword', 'name': 'Iron Sword', 'kind': 'weapon', 'damage': 10, 'value': 100}
    data.update(fields)
    return data


class TestLoadItem:
    """Test schema validation on raw records."""

    def test_minimal_record(self):
        item = load_item({'id': 'rope', 'name': 'Rope', 'kind': 'misc'})
        assert item.kind == ItemKind.MISC
        assert item.quantity == 1

    def test_full_record(self):
        item = load_item(record(rarity='rare', upgrade_level=2, equipped=True,
                                slot='main_hand', equipped_by='player'))

        assert item.rarity == Rarity.RARE
        assert item.slot == Slot.MAIN_HAND
        assert item.held_by_player

    def test_nulls_allowed(self):
        item = load_item(record(rarity=None, armor=None, slot=None, equipped_by=None))
        assert item.rarity == Rarity.COMMON

    @pytest.mark.parametrize('fields', [
        {'kind': 'furniture'},
        {'rarity': 'legendary'},
        {'slot': 'tail'},
        {'quantity': 0},
        {'upgrade_level': -1},
        {'damage': -5},
        {'id': ''},
    ])
    def test_schema_rejects(self, fields):
        with pytest.raises(ItemValidationError):
            load_item(record(**fields))

    def test_missing_required(self):
        with pytest.raises(ItemValidationError, match='kind'):
            load_item({'id': 'x', 'name': 'Rope'})

    def test_level_above_ceiling(self):
        with pytest.raises(ItemValidationError, match='ceiling'):
            load_item(record(upgrade_level=6))

    def test_equipped_without_owner(self):
        with pytest.raises(ItemValidationError):
            load_item(record(equipped=True, slot='main_hand'))

    def test_stale_slot_on_free_item(self):
        with pytest.raises(ItemValidationError):
            load_item(record(slot='main_hand'))

    def test_validation_error_is_value_error(self):
        assert issubclass(ItemValidationError, ValueError)


class TestValidateInventory:
    """Test collection invariants."""

    def test_valid(self, armory_items):
        assert validate_inventory(armory_items).success

    def test_duplicate_ids(self, sword):
        result = validate_inventory(Inventory.of(sword, sword.evolve(name='Other Sword')))

        assert not result.success
        assert result.error_code == ErrorCode.VALIDATION_ERROR.value
        assert 'Duplicate' in result.error

    def test_two_items_in_one_slot(self, sword, dagger):
        inventory = Inventory.of(
            sword.evolve(equipped=True, slot=Slot.MAIN_HAND, equipped_by=PLAYER),
            dagger.evolve(equipped=True, slot=Slot.MAIN_HAND, equipped_by=PLAYER),
        )
        assert not validate_inventory(inventory).success

    def test_same_slot_different_owners(self, sword, dagger):
        inventory = Inventory.of(
            sword.evolve(equipped=True, slot=Slot.MAIN_HAND, equipped_by=PLAYER),
            dagger.evolve(equipped=True, slot=Slot.MAIN_HAND, equipped_by='lydia'),
        )
        assert validate_inventory(inventory).success

    def test_bad_item_inside(self, sword):
        broken = Item(id='x', name='Broken', kind=ItemKind.WEAPON, quantity=0)
        assert not validate_inventory(Inventory.of(sword, broken)).success

    def test_validate_item_custom_ceiling(self):
        item = Item(id='x', name='Relic Blade', kind=ItemKind.WEAPON, upgrade_level=8, max_upgrade_level=10)
        assert validate_item(item).success


class TestLoadInventory:
    """Test loading whole snapshots."""

    def test_from_list(self):
        inventory = load_inventory([record(), {'id': 'rope', 'name': 'Rope', 'kind': 'misc'}])
        assert [item.id for item in inventory] == ['sword', 'rope']

    def test_from_object(self):
        assert len(load_inventory({'items': [record()]})) == 1

    def test_wrong_shape(self):
        with pytest.raises(ItemValidationError):
            load_inventory({'things': []})
        with pytest.raises(ItemValidationError):
            load_inventory('sword')

    def test_duplicate_ids(self):
        with pytest.raises(ItemValidationError, match='Duplicate'):
            load_inventory([record(), record()])

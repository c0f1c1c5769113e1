"""
Unit tests for the ownership model (companion assignment).
"""

import pytest
from gearforge.core.models import Item, ItemKind, Inventory, Slot, PLAYER
from gearforge.core.result import ErrorCode
from gearforge.items.ownership import (
    can_assign,
    assign,
    unassign,
    assign_in_inventory,
    unassign_in_inventory,
    companion_equipment,
)


def held(item: Item, owner: str, slot: Slot = Slot.MAIN_HAND) -> Item:
    return item.evolve(equipped=True, slot=slot, equipped_by=owner)


class TestCanAssign:
    """Test can_assign reasons."""

    def test_free_item(self, sword):
        assert can_assign(sword, 'companionA').success

    def test_missing_item(self):
        result = can_assign(None, 'companionA')
        assert result.error_code == ErrorCode.ITEM_NOT_FOUND.value

    def test_equipped_by_player(self, sword):
        result = can_assign(held(sword, PLAYER), 'companionA')
        assert not result.success
        assert result.error_code == 'equipped-by-player'

    def test_owned_by_other_companion(self, sword):
        result = can_assign(held(sword, 'companionB'), 'companionA')
        assert not result.success
        assert result.error_code == 'owned-by-other-companion'

    @pytest.mark.parametrize('companion_id', [PLAYER, '', None])
    def test_rejects_non_companion(self, sword, companion_id):
        result = can_assign(sword, companion_id)
        assert result.error_code == ErrorCode.INVALID_INPUT.value

    def test_player_tag_cannot_bypass_slot_rules(self, greatsword, shield):
        """Assigning to the player tag must not equip around the hand rules."""
        inventory = Inventory.of(shield.evolve(equipped=True, slot=Slot.OFF_HAND, equipped_by=PLAYER), greatsword)
        result = assign_in_inventory(inventory, 'greatsword', PLAYER)

        assert result.error_code == ErrorCode.INVALID_INPUT.value
        assert inventory.get('greatsword').equipped is False

    def test_same_companion_is_allowed(self, sword):
        assert can_assign(held(sword, 'companionA'), 'companionA').success


class TestAssign:
    """Test assign and unassign on single items."""

    def test_assign_free_item(self, sword):
        result = assign(sword, 'companionA')

        assert result.success
        item = result.data
        assert item.equipped is True
        assert item.equipped_by == 'companionA'
        assert item.slot == Slot.MAIN_HAND

    def test_assign_slot_override(self, dagger):
        item = assign(dagger, 'companionA', Slot.OFF_HAND).data
        assert item.slot == Slot.OFF_HAND

    def test_assign_keeps_existing_slot(self, dagger):
        item = assign(held(dagger, 'companionA', Slot.OFF_HAND), 'companionA').data
        assert item.slot == Slot.OFF_HAND

    def test_assign_owned_by_other(self, sword):
        result = assign(held(sword, 'companionB'), 'companionA')
        assert result.error_code == ErrorCode.OWNED_BY_OTHER_COMPANION.value

    def test_assign_player_item(self, sword):
        result = assign(held(sword, PLAYER), 'companionA')
        assert result.error_code == ErrorCode.EQUIPPED_BY_PLAYER.value

    def test_assign_unslottable(self, potion):
        result = assign(potion, 'companionA')
        assert result.error_code == ErrorCode.NO_SLOT_AVAILABLE.value

    def test_input_untouched(self, sword):
        assign(sword, 'companionA')
        assert sword.equipped_by is None

    def test_unassign(self, sword):
        result = unassign(held(sword, 'companionA'))

        assert result.success
        assert result.data.equipped is False
        assert result.data.slot is None
        assert result.data.equipped_by is None

    @pytest.mark.parametrize('owner', [None, PLAYER])
    def test_unassign_not_companion(self, sword, owner):
        item = sword if owner is None else held(sword, owner)
        result = unassign(item)
        assert result.error_code == ErrorCode.NOT_ASSIGNED_TO_COMPANION.value

    def test_unassign_missing(self):
        assert unassign(None).error_code == 'item-not-found'


class TestInventoryAssignment:
    """Test assignment over a snapshot."""

    def test_assign_in_inventory(self, armory_items):
        change = assign_in_inventory(armory_items, 'sword', 'lydia').data

        assert change.item_id == 'sword'
        assert change.inventory.get('sword').equipped_by == 'lydia'
        assert armory_items.get('sword').equipped_by is None

    def test_frees_companion_slot(self, sword, dagger):
        inventory = Inventory.of(held(dagger, 'lydia'), sword)
        change = assign_in_inventory(inventory, 'sword', 'lydia').data

        assert change.displaced == ('dagger',)
        assert change.inventory.get('dagger').equipped is False
        assert [item.id for item in companion_equipment(change.inventory, 'lydia')] == ['sword']

    def test_leaves_player_slot_alone(self, sword, dagger):
        inventory = Inventory.of(held(dagger, PLAYER), sword)
        change = assign_in_inventory(inventory, 'sword', 'lydia').data

        assert change.displaced == ()
        assert change.inventory.get('dagger').equipped_by == PLAYER

    def test_missing_item(self, armory_items):
        result = assign_in_inventory(armory_items, 'ghost', 'lydia')
        assert result.error_code == ErrorCode.ITEM_NOT_FOUND.value

    def test_assign_from_stack(self):
        pile = Item(id='bows', name='Hunting Bow', kind=ItemKind.WEAPON, damage=7, quantity=2)
        change = assign_in_inventory(Inventory.of(pile), 'bows', 'faendal').data

        assert change.item_id != 'bows'
        assert change.inventory.get('bows').quantity == 1
        assert change.inventory.get(change.item_id).equipped_by == 'faendal'

    def test_unassign_in_inventory(self, sword):
        inventory = Inventory.of(held(sword, 'lydia'))
        change = unassign_in_inventory(inventory, 'sword').data

        assert change.companion_id == 'lydia'
        assert change.inventory.get('sword').equipped_by is None

    def test_unassign_in_inventory_rejects_player_gear(self, sword):
        result = unassign_in_inventory(Inventory.of(held(sword, PLAYER)), 'sword')
        assert result.error_code == ErrorCode.NOT_ASSIGNED_TO_COMPANION.value

    def test_companion_equipment_excludes_player(self, sword):
        inventory = Inventory.of(held(sword, PLAYER))
        assert companion_equipment(inventory, PLAYER) == []

"""
Unit tests for the slot manager (player equip/unequip).
"""

import pytest
from gearforge.core.models import Item, ItemKind, Inventory, Slot, Handedness, PLAYER
from gearforge.core.result import ErrorCode
from gearforge.items.slots import (
    check_equip,
    equip,
    unequip,
    list_equippable_for_slot,
    equipment_by_slot,
    off_hand_blocked,
)


def worn(item: Item, slot: Slot, owner: str = PLAYER) -> Item:
    return item.evolve(equipped=True, slot=slot, equipped_by=owner)


class TestEquipValidation:
    """Test equip rejections. None of them may change the snapshot."""

    def test_two_handed_in_off_hand(self, armory_items):
        result = equip(armory_items, 'greatsword', Slot.OFF_HAND)

        assert not result.success
        assert result.error_code == ErrorCode.TWO_HANDED_IN_OFF_HAND.value

    def test_shield_in_main_hand(self, armory_items):
        result = equip(armory_items, 'shield', Slot.MAIN_HAND)

        assert not result.success
        assert result.error_code == ErrorCode.SHIELD_IN_MAIN_HAND.value

    def test_held_by_companion(self, sword):
        inventory = Inventory.of(worn(sword, Slot.MAIN_HAND, 'lydia'))
        result = equip(inventory, 'sword')

        assert result.error_code == ErrorCode.EQUIPPED_BY_COMPANION.value
        assert inventory.get('sword').equipped_by == 'lydia'

    def test_unslottable_item(self, armory_items):
        result = equip(armory_items, 'potion')
        assert result.error_code == ErrorCode.NO_SLOT_AVAILABLE.value

    def test_kind_not_accepted(self, armory_items):
        result = equip(armory_items, 'helmet', Slot.MAIN_HAND)
        assert result.error_code == ErrorCode.SLOT_NOT_ALLOWED.value

    def test_missing_item(self, armory_items):
        result = equip(armory_items, 'ghost')
        assert result.error_code == ErrorCode.ITEM_NOT_FOUND.value

    def test_check_equip_resolves_slot(self, helmet):
        result = check_equip(helmet)
        assert result.success
        assert result.data == Slot.HEAD


class TestEquip:
    """Test successful equips and their side effects."""

    def test_default_slot(self, armory_items):
        result = equip(armory_items, 'helmet')

        assert result.success
        change = result.data
        helmet = change.inventory.get('helmet')
        assert change.slot == Slot.HEAD
        assert helmet.equipped is True
        assert helmet.slot == Slot.HEAD
        assert helmet.equipped_by == PLAYER

    def test_original_snapshot_untouched(self, armory_items):
        equip(armory_items, 'helmet')
        assert armory_items.get('helmet').equipped is False

    def test_replaces_same_slot(self, sword, dagger):
        inventory = Inventory.of(worn(dagger, Slot.MAIN_HAND), sword)
        change = equip(inventory, 'sword', Slot.MAIN_HAND).data

        assert change.displaced == ('dagger',)
        assert change.inventory.get('dagger').equipped is False
        assert change.inventory.get('dagger').slot is None
        assert change.inventory.get('dagger').equipped_by is None
        assert change.inventory.get('sword').slot == Slot.MAIN_HAND

    def test_two_handed_clears_off_hand(self, greatsword, shield, sword):
        inventory = Inventory.of(worn(sword, Slot.MAIN_HAND), worn(shield, Slot.OFF_HAND), greatsword)
        change = equip(inventory, 'greatsword').data

        assert set(change.displaced) == {'sword', 'shield'}
        assert change.inventory.get('shield').equipped is False
        assert change.inventory.get('greatsword').slot == Slot.MAIN_HAND
        assert change.inventory.item_in_slot(Slot.OFF_HAND) is None

    def test_off_hand_clears_two_handed(self, greatsword, dagger):
        inventory = Inventory.of(worn(greatsword, Slot.MAIN_HAND), dagger)
        change = equip(inventory, 'dagger', Slot.OFF_HAND).data

        assert change.displaced == ('greatsword',)
        assert change.inventory.get('greatsword').equipped is False
        assert change.inventory.get('dagger').slot == Slot.OFF_HAND

    def test_off_hand_keeps_one_handed_main(self, sword, shield):
        inventory = Inventory.of(worn(sword, Slot.MAIN_HAND), shield)
        change = equip(inventory, 'shield').data

        assert change.displaced == ()
        assert change.inventory.get('sword').equipped is True
        assert change.inventory.get('shield').slot == Slot.OFF_HAND

    def test_companion_slots_are_separate(self, sword, dagger):
        inventory = Inventory.of(worn(dagger, Slot.MAIN_HAND, 'lydia'), sword)
        change = equip(inventory, 'sword').data

        assert change.displaced == ()
        assert change.inventory.get('dagger').equipped_by == 'lydia'

    def test_move_between_slots(self, dagger):
        inventory = Inventory.of(worn(dagger, Slot.MAIN_HAND))
        change = equip(inventory, 'dagger', Slot.OFF_HAND).data

        assert change.inventory.get('dagger').slot == Slot.OFF_HAND
        assert change.inventory.item_in_slot(Slot.MAIN_HAND) is None

    def test_equip_from_stack(self):
        pile = Item(id='daggers', name='Iron Dagger', kind=ItemKind.WEAPON, damage=4, quantity=2)
        change = equip(Inventory.of(pile), 'daggers', Slot.OFF_HAND).data

        assert change.item_id != 'daggers'
        assert change.inventory.get('daggers').quantity == 1
        assert change.inventory.get('daggers').equipped is False
        single = change.inventory.get(change.item_id)
        assert single.quantity == 1
        assert single.slot == Slot.OFF_HAND

    def test_one_item_per_slot(self, sword, dagger, greatsword):
        inventory = Inventory.of(sword, dagger, greatsword)
        for item_id in ('sword', 'dagger', 'greatsword'):
            inventory = equip(inventory, item_id, Slot.MAIN_HAND).data.inventory
        holders = [item for item in inventory if item.slot == Slot.MAIN_HAND]
        assert [item.id for item in holders] == ['greatsword']


class TestUnequip:
    """Test unequip."""

    def test_unequip(self, sword):
        inventory = Inventory.of(worn(sword, Slot.MAIN_HAND))
        change = unequip(inventory, 'sword').data

        item = change.inventory.get('sword')
        assert change.slot == Slot.MAIN_HAND
        assert item.equipped is False
        assert item.slot is None
        assert item.equipped_by is None

    def test_not_equipped_is_noop(self, sword):
        inventory = Inventory.of(sword)
        result = unequip(inventory, 'sword')

        assert result.success
        assert result.data.slot is None
        assert result.data.inventory == inventory

    def test_strict_mode(self, sword):
        result = unequip(Inventory.of(sword), 'sword', strict=True)
        assert result.error_code == ErrorCode.NOT_EQUIPPED.value

    def test_missing_item(self):
        assert unequip(Inventory(), 'ghost').error_code == 'item-not-found'


class TestListEquippable:
    """Test list_equippable_for_slot."""

    def ids(self, items):
        return [item.id for item in items]

    def test_off_hand(self, armory_items):
        assert self.ids(list_equippable_for_slot(Slot.OFF_HAND, armory_items)) == ['sword', 'dagger', 'shield']

    def test_main_hand(self, armory_items):
        assert self.ids(list_equippable_for_slot(Slot.MAIN_HAND, armory_items)) == ['sword', 'greatsword', 'dagger']

    def test_head(self, armory_items):
        assert self.ids(list_equippable_for_slot(Slot.HEAD, armory_items)) == ['helmet']

    def test_skips_equipped(self, sword, dagger):
        items = [worn(sword, Slot.MAIN_HAND), dagger]
        assert self.ids(list_equippable_for_slot(Slot.MAIN_HAND, items)) == ['dagger']

    def test_heavy_weapon_not_off_hand(self):
        maul = Item(id='maul', name='Orcish Maul', kind=ItemKind.WEAPON, damage=18, weight=20)
        assert list_equippable_for_slot(Slot.OFF_HAND, [maul]) == []

    def test_heavy_weapon_explicit_off_hand_is_allowed(self):
        """Only the candidate list applies the off-hand size rule."""
        maul = Item(id='maul', name='Orcish Maul', kind=ItemKind.WEAPON, damage=18, weight=20)
        change = equip(Inventory.of(maul), 'maul', Slot.OFF_HAND).data

        assert list_equippable_for_slot(Slot.OFF_HAND, [maul]) == []
        assert change.inventory.get('maul').slot == Slot.OFF_HAND

    def test_handedness_hint(self):
        blade = Item(id='b', name='Curved Blade', kind=ItemKind.WEAPON, handedness=Handedness.OFF_HAND_ONLY)
        assert self.ids(list_equippable_for_slot(Slot.OFF_HAND, [blade])) == ['b']


class TestLoadout:
    """Test loadout helpers."""

    def test_equipment_by_slot(self, sword, helmet, dagger):
        inventory = Inventory.of(worn(sword, Slot.MAIN_HAND), worn(helmet, Slot.HEAD), worn(dagger, Slot.OFF_HAND, 'lydia'))
        loadout = equipment_by_slot(inventory)

        assert loadout[Slot.MAIN_HAND].id == 'sword'
        assert loadout[Slot.HEAD].id == 'helmet'
        assert loadout[Slot.OFF_HAND] is None
        assert len(loadout) == len(Slot)
        assert equipment_by_slot(inventory, 'lydia')[Slot.OFF_HAND].id == 'dagger'

    def test_off_hand_blocked(self, greatsword, sword):
        assert off_hand_blocked(Inventory.of(worn(greatsword, Slot.MAIN_HAND)))
        assert not off_hand_blocked(Inventory.of(worn(sword, Slot.MAIN_HAND)))
        assert not off_hand_blocked(Inventory())

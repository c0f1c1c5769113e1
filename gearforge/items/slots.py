"""
Slot manager: player-side equip and unequip.

Enforces one item per (slot, player), and keeps two-handed weapons and the
off-hand mutually exclusive in both directions. Companion equipment goes
through gearforge.items.ownership instead.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from gearforge.core.models import Item, Inventory, Slot, PLAYER
from gearforge.core.result import Result, ErrorCode
from .classification import (
    is_shield,
    is_two_handed_weapon,
    can_equip_in_off_hand,
    can_equip_in_main_hand,
    slot_accepts_kind,
    default_slot_for,
)
from .stacks import take_one

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotChange:
    """
    Outcome of an equip or unequip.

    Attributes:
        inventory: The new snapshot
        item_id: The item that was equipped/unequipped (a new id if a stack was split)
        slot: The slot involved (None for a no-op unequip)
        displaced: Ids of items that were unequipped as a side effect
    """
    inventory: Inventory
    item_id: str
    slot: Optional[Slot]
    displaced: Tuple[str, ...] = field(default_factory=tuple)


def _conflicts(candidate: Item, target: Item, slot: Slot) -> bool:
    """Whether candidate must leave its slot for target to go into slot."""
    if not (candidate.equipped and candidate.equipped_by == PLAYER):
        return False
    if candidate.slot == slot:
        return True
    if slot == Slot.MAIN_HAND and is_two_handed_weapon(target) and candidate.slot == Slot.OFF_HAND:
        return True
    if slot == Slot.OFF_HAND and candidate.slot == Slot.MAIN_HAND and is_two_handed_weapon(candidate):
        return True
    return False


def check_equip(item: Item, target_slot: Optional[Slot] = None) -> Result:
    """
    Validate a player equip without performing it.

    This is looser than list_equippable_for_slot: the off-hand size rule
    (shields and small weapons) only filters the candidate list, so a heavy
    one-handed weapon sent explicitly to the off-hand is accepted. Only
    two-handed weapons are refused there.

    Returns:
        Result.ok(slot) with the resolved slot, or a failure with
        NO_SLOT_AVAILABLE, TWO_HANDED_IN_OFF_HAND, SHIELD_IN_MAIN_HAND,
        EQUIPPED_BY_COMPANION or SLOT_NOT_ALLOWED
    """
    slot = target_slot or default_slot_for(item)
    if slot is None:
        return Result.fail(f"{item.name} cannot be equipped", ErrorCode.NO_SLOT_AVAILABLE)

    if slot == Slot.OFF_HAND and is_two_handed_weapon(item):
        return Result.fail("Cannot equip two-handed weapons in off-hand.", ErrorCode.TWO_HANDED_IN_OFF_HAND)

    if slot == Slot.MAIN_HAND and is_shield(item):
        return Result.fail("Cannot equip shields in main hand.", ErrorCode.SHIELD_IN_MAIN_HAND)

    if item.held_by_companion:
        return Result.fail(
            "Item is equipped by a companion. Unequip from companion first.",
            ErrorCode.EQUIPPED_BY_COMPANION
        )

    if not slot_accepts_kind(slot, item):
        return Result.fail(
            f"{item.kind.value} items cannot go in the {slot.value} slot",
            ErrorCode.SLOT_NOT_ALLOWED
        )

    return Result.ok(slot)


def equip(inventory: Inventory, item_id: str, target_slot: Optional[Slot] = None,
          id_prefix: str = 'item') -> Result:
    """
    Equip an item for the player.

    Validates (each failure leaves the snapshot untouched):
    - the item exists
    - a slot is given or can be inferred
    - no two-handed weapon in the off-hand, no shield in the main hand
    - the item is not held by a companion
    - the slot accepts the item's kind

    Side effects, applied together:
    - the player's current occupant of the slot is unequipped
    - a two-handed weapon going to main-hand unequips the off-hand
    - anything going to off-hand unequips a two-handed main-hand weapon
    - a stacked record gives up one member, which is what gets equipped

    Args:
        inventory: Current snapshot
        item_id: Item to equip
        target_slot: Slot to use (inferred from the item if omitted)
        id_prefix: Prefix for ids minted by a stack split

    Returns:
        Result with SlotChange data
    """
    item = inventory.get(item_id)
    if item is None:
        return Result.fail(f"Item {item_id} not found", ErrorCode.ITEM_NOT_FOUND)

    checked = check_equip(item, target_slot)
    if not checked.success:
        logger.info(f"Equip of {item_id} rejected: {checked.error_code}")
        return checked
    slot: Slot = checked.data

    displaced = [other.released() for other in inventory
                 if other.id != item_id and _conflicts(other, item, slot)]
    cleared = inventory.replace_many(displaced)

    split = take_one(
        cleared,
        item_id,
        transform=lambda piece: piece.evolve(equipped=True, slot=slot, equipped_by=PLAYER),
        id_prefix=id_prefix
    )
    if not split.success:
        return split

    displaced_ids = tuple(other.id for other in displaced)
    logger.debug(f"Equipped {split.data.selected_id} to {slot.value}, displaced {list(displaced_ids)}")
    return Result.ok(SlotChange(
        inventory=split.data.inventory,
        item_id=split.data.selected_id,
        slot=slot,
        displaced=displaced_ids
    ))


def unequip(inventory: Inventory, item_id: str, strict: bool = False) -> Result:
    """
    Unequip an item.

    Args:
        inventory: Current snapshot
        item_id: Item to unequip
        strict: Fail with NOT_EQUIPPED instead of a no-op when the item is not equipped

    Returns:
        Result with SlotChange data
    """
    item = inventory.get(item_id)
    if item is None:
        return Result.fail(f"Item {item_id} not found", ErrorCode.ITEM_NOT_FOUND)

    if not item.equipped:
        if strict:
            return Result.fail(f"{item.name} is not equipped", ErrorCode.NOT_EQUIPPED)
        return Result.ok(SlotChange(inventory=inventory, item_id=item_id, slot=None))

    return Result.ok(SlotChange(
        inventory=inventory.replace(item.released()),
        item_id=item_id,
        slot=item.slot
    ))


def list_equippable_for_slot(slot: Slot, items: Iterable[Item]) -> List[Item]:
    """
    Unequipped candidates for a slot.

    The kind must be accepted by the slot. The off-hand takes only shields
    and small weapons, the main hand takes no shields, and other slots take
    items whose default slot matches.
    """
    candidates = []
    for item in items:
        if item.equipped or not slot_accepts_kind(slot, item):
            continue
        if slot == Slot.OFF_HAND:
            allowed = can_equip_in_off_hand(item)
        elif slot == Slot.MAIN_HAND:
            allowed = can_equip_in_main_hand(item)
        else:
            default = default_slot_for(item)
            allowed = default is None or default == slot
        if allowed:
            candidates.append(item)
    return candidates


def equipment_by_slot(inventory: Inventory, owner: str = PLAYER) -> Dict[Slot, Optional[Item]]:
    """Map every slot to the owner's item in it (None when empty)."""
    loadout: Dict[Slot, Optional[Item]] = {slot: None for slot in Slot}
    for item in inventory.equipped_for(owner):
        loadout[item.slot] = item
    return loadout


def off_hand_blocked(inventory: Inventory, owner: str = PLAYER) -> bool:
    """True while a two-handed weapon fills the owner's main hand."""
    main = inventory.item_in_slot(Slot.MAIN_HAND, owner)
    return main is not None and is_two_handed_weapon(main)


__all__ = [
    'SlotChange',
    'check_equip',
    'equip',
    'unequip',
    'list_equippable_for_slot',
    'equipment_by_slot',
    'off_hand_blocked',
]

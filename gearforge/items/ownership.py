"""
Ownership model: assigning gear to companions.

An item is free (equipped_by None), held by the player, or held by exactly
one companion. Companions track their equipment independently of the
player's slots, so assignment never touches the player's loadout; the
player must unequip an item before a companion can take it.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from gearforge.core.models import Item, Inventory, Slot, PLAYER
from gearforge.core.result import Result, ErrorCode
from .classification import default_slot_for
from .stacks import take_one

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssignmentChange:
    """
    Outcome of an inventory-level assign/unassign.

    Attributes:
        inventory: The new snapshot
        item_id: The item assigned/unassigned (a new id if a stack was split)
        companion_id: The companion involved
        displaced: Ids of the companion's items freed to make room
    """
    inventory: Inventory
    item_id: str
    companion_id: str
    displaced: Tuple[str, ...] = field(default_factory=tuple)


def can_assign(item: Optional[Item], companion_id: str) -> Result:
    """
    Check whether an item may be given to a companion.

    Reasons, in priority order: item-not-found, invalid-input,
    equipped-by-player, owned-by-other-companion. Re-assigning to the
    companion that already holds the item is allowed.

    Returns:
        Result.ok(item) or a failure carrying the reason code
    """
    if item is None:
        return Result.fail("Item not found", ErrorCode.ITEM_NOT_FOUND)

    # The player equips through the slot manager, which checks hand rules
    if not companion_id or companion_id == PLAYER:
        return Result.fail(f"Invalid companion id: {companion_id!r}", ErrorCode.INVALID_INPUT)

    if item.equipped_by == PLAYER:
        return Result.fail(f"{item.name} is equipped by the player", ErrorCode.EQUIPPED_BY_PLAYER)

    if item.equipped_by is not None and item.equipped_by != companion_id:
        return Result.fail(
            f"{item.name} is owned by another companion",
            ErrorCode.OWNED_BY_OTHER_COMPANION
        )

    return Result.ok(item)


def assign(item: Optional[Item], companion_id: str, slot: Optional[Slot] = None) -> Result:
    """
    Give an item to a companion.

    The slot is the override if given, else the item's current slot, else the
    slot inferred from the item's shape.

    Returns:
        Result with the updated Item, or the can_assign failure /
        NO_SLOT_AVAILABLE when the item cannot be slotted at all
    """
    allowed = can_assign(item, companion_id)
    if not allowed.success:
        return allowed

    target_slot = slot or item.slot or default_slot_for(item)
    if target_slot is None:
        return Result.fail(f"{item.name} cannot be equipped", ErrorCode.NO_SLOT_AVAILABLE)

    logger.debug(f"Assigned {item.id} to companion {companion_id} ({target_slot.value})")
    return Result.ok(item.evolve(equipped=True, slot=target_slot, equipped_by=companion_id))


def unassign(item: Optional[Item]) -> Result:
    """
    Take an item back from its companion.

    Returns:
        Result with the released Item, or ITEM_NOT_FOUND /
        NOT_ASSIGNED_TO_COMPANION when it is free or held by the player
    """
    if item is None:
        return Result.fail("Item not found", ErrorCode.ITEM_NOT_FOUND)

    if not item.held_by_companion:
        return Result.fail(
            f"{item.name} is not assigned to a companion",
            ErrorCode.NOT_ASSIGNED_TO_COMPANION
        )

    return Result.ok(item.released())


def assign_in_inventory(inventory: Inventory, item_id: str, companion_id: str,
                        slot: Optional[Slot] = None, id_prefix: str = 'item') -> Result:
    """
    Assign an item of the snapshot to a companion.

    Any other item the companion holds in the same slot is freed, and a
    stacked record gives up one member for the companion.

    Returns:
        Result with AssignmentChange data
    """
    item = inventory.get(item_id)
    checked = assign(item, companion_id, slot)
    if not checked.success:
        logger.info(f"Assignment of {item_id} to {companion_id} rejected: {checked.error_code}")
        return checked
    target_slot = checked.data.slot

    displaced = [other.released() for other in inventory.equipped_for(companion_id)
                 if other.id != item_id and other.slot == target_slot]
    cleared = inventory.replace_many(displaced)

    split = take_one(
        cleared,
        item_id,
        transform=lambda piece: piece.evolve(equipped=True, slot=target_slot, equipped_by=companion_id),
        id_prefix=id_prefix
    )
    if not split.success:
        return split

    return Result.ok(AssignmentChange(
        inventory=split.data.inventory,
        item_id=split.data.selected_id,
        companion_id=companion_id,
        displaced=tuple(other.id for other in displaced)
    ))


def unassign_in_inventory(inventory: Inventory, item_id: str) -> Result:
    """
    Unassign an item of the snapshot from its companion.

    Returns:
        Result with AssignmentChange data
    """
    item = inventory.get(item_id)
    released = unassign(item)
    if not released.success:
        return released

    return Result.ok(AssignmentChange(
        inventory=inventory.replace(released.data),
        item_id=item_id,
        companion_id=item.equipped_by
    ))


def companion_equipment(inventory: Inventory, companion_id: str) -> List[Item]:
    """Items a companion currently holds."""
    if companion_id == PLAYER:
        return []
    return inventory.equipped_for(companion_id)


__all__ = [
    'AssignmentChange',
    'can_assign',
    'assign',
    'unassign',
    'assign_in_inventory',
    'unassign_in_inventory',
    'companion_equipment',
]

"""
Stack manager: individuating one member of a multi-quantity record.

A record with quantity > 1 stands for a pile of identical items. Operations
that act on a single piece (upgrading, equipping) take one member out of the
pile first: the pile keeps its attributes and loses one unit, and a fresh
record with its own id carries the changed piece.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from gearforge.core.models import Item, Inventory, generate_id
from gearforge.core.result import Result, ErrorCode
from .progression import apply_upgrade, UpgradeOutcome

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StackSplit:
    """
    Outcome of taking one member from a record.

    Attributes:
        inventory: The new snapshot
        selected_id: Id of the record now holding the individuated piece
                     (the new selection a UI should keep focused)
        remainder_id: Id of the pile that was reduced, or None if no split happened
    """
    inventory: Inventory
    selected_id: str
    remainder_id: Optional[str] = None

    @property
    def was_split(self) -> bool:
        return self.remainder_id is not None


@dataclass(frozen=True)
class UpgradeReceipt:
    """Outcome of upgrade_in_inventory: the new snapshot plus what happened."""
    inventory: Inventory
    selected_id: str
    cost: int
    outcome: UpgradeOutcome
    was_split: bool = False


def adjust_quantity(inventory: Inventory, item_id: str, delta: int) -> Result:
    """
    Add delta to an item's quantity, removing the record at zero or below.

    Returns:
        Result with the new Inventory, or ITEM_NOT_FOUND
    """
    current = inventory.get(item_id)
    if current is None:
        return Result.fail(f"Item {item_id} not found", ErrorCode.ITEM_NOT_FOUND)

    next_quantity = current.quantity + delta
    if next_quantity <= 0:
        logger.debug(f"{item_id}: quantity reached {next_quantity}, removing record")
        return Result.ok(inventory.remove(item_id))
    return Result.ok(inventory.replace(current.evolve(quantity=next_quantity)))


def take_one(inventory: Inventory, item_id: str,
             transform: Optional[Callable[[Item], Item]] = None,
             id_prefix: str = 'item') -> Result:
    """
    Individuate one member of a record, optionally transforming it.

    With quantity 1 the record itself is transformed in place (same id).
    With quantity > 1 the pile is decremented and a new record is minted
    right after it with quantity 1, no slot and no owner.

    Args:
        inventory: Current snapshot
        item_id: Record to take from
        transform: Applied to the individuated piece (identity if None)
        id_prefix: Prefix for the minted id

    Returns:
        Result with StackSplit data, or ITEM_NOT_FOUND
    """
    current = inventory.get(item_id)
    if current is None:
        return Result.fail(f"Item {item_id} not found", ErrorCode.ITEM_NOT_FOUND)

    transform = transform or (lambda item: item)

    if not current.is_stack:
        return Result.ok(StackSplit(inventory=inventory.replace(transform(current)), selected_id=item_id))

    single = transform(current.released().evolve(id=generate_id(id_prefix), quantity=1))

    reduced = adjust_quantity(inventory, item_id, -1)
    if not reduced.success:
        return reduced

    logger.debug(f"Split {item_id} (x{current.quantity}) into remainder and {single.id}")
    return Result.ok(StackSplit(
        inventory=reduced.data.insert_after(item_id, single),
        selected_id=single.id,
        remainder_id=item_id
    ))


def split_for_upgrade(inventory: Inventory, item_id: str, upgraded: Item,
                      id_prefix: str = 'item') -> Result:
    """
    Store an upgraded item, splitting its stack if it came from one.

    Args:
        inventory: Snapshot that still holds the pre-upgrade record
        item_id: Id of the pre-upgrade record
        upgraded: Post-upgrade attributes (from apply_upgrade)
        id_prefix: Prefix for the minted id

    Returns:
        Result with StackSplit data, or ITEM_NOT_FOUND
    """
    def carry_upgrade(piece: Item) -> Item:
        return upgraded.evolve(
            id=piece.id,
            quantity=1,
            equipped=piece.equipped,
            slot=piece.slot,
            equipped_by=piece.equipped_by
        )

    return take_one(inventory, item_id, transform=carry_upgrade, id_prefix=id_prefix)


def upgrade_in_inventory(inventory: Inventory, item_id: str, id_prefix: str = 'item') -> Result:
    """
    Upgrade one item of the snapshot, splitting stacks as needed.

    Returns:
        Result with UpgradeReceipt data, or ITEM_NOT_FOUND / MAX_UPGRADE_REACHED
    """
    item = inventory.get(item_id)
    if item is None:
        return Result.fail(f"Item {item_id} not found", ErrorCode.ITEM_NOT_FOUND)

    upgraded = apply_upgrade(item)
    if not upgraded.success:
        return upgraded
    outcome: UpgradeOutcome = upgraded.data

    split = split_for_upgrade(inventory, item_id, outcome.item, id_prefix=id_prefix)
    if not split.success:
        return split

    return Result.ok(UpgradeReceipt(
        inventory=split.data.inventory,
        selected_id=split.data.selected_id,
        cost=outcome.cost,
        outcome=outcome,
        was_split=split.data.was_split
    ))


__all__ = [
    'StackSplit',
    'UpgradeReceipt',
    'adjust_quantity',
    'take_one',
    'split_for_upgrade',
    'upgrade_in_inventory',
]

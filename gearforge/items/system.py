"""
Armory system: the host-facing facade over an inventory snapshot.

Chains the progression engine, stack manager, slot manager and ownership
model, keeps the latest snapshot, and publishes an event for every
successful transition. Failed operations leave the snapshot untouched and
publish nothing.
"""

import logging
from typing import Dict, List, Optional

from gearforge.core.config import Config, get_config
from gearforge.core.event_bus import EventBus
from gearforge.core.models import Event, Inventory, Item, Slot, PLAYER
from gearforge.core.result import Result, ErrorCode
from .progression import (
    UpgradeKind,
    check_upgrade_affordable,
    list_upgradeable,
    quote_upgrade,
)
from .stacks import upgrade_in_inventory, UpgradeReceipt
from .slots import equip, unequip, list_equippable_for_slot, equipment_by_slot, SlotChange
from .ownership import assign_in_inventory, unassign_in_inventory, companion_equipment

logger = logging.getLogger(__name__)


class Armory:
    """
    Facade for upgrade, equip and companion operations on one collection.

    The host serializes calls against an Armory; each call reads the current
    snapshot and, on success, replaces it.

    Usage:
        armory = Armory(inventory)
        quote = armory.quote('item_sword')
        result = armory.upgrade('item_sword', gold=500, player_level=4)
        if result.success:
            gold -= result.data.cost
        armory.equip(result.data.selected_id)
    """

    def __init__(self, inventory: Optional[Inventory] = None,
                 event_bus: Optional[EventBus] = None,
                 config: Optional[Config] = None):
        """
        Initialize the armory.

        Args:
            inventory: Starting snapshot (empty if None)
            event_bus: Bus to publish transitions on (a private one if None)
            config: Engine configuration (global config if None)
        """
        self.inventory = inventory or Inventory()
        self.event_bus = event_bus or EventBus()
        self.config = config or get_config()

    def _publish(self, event_type: str, item_id: str, actor_id: Optional[str] = None, **data) -> None:
        self.event_bus.publish(Event.create(event_type, data, item_id=item_id, actor_id=actor_id))

    def get_item(self, item_id: str) -> Optional[Item]:
        return self.inventory.get(item_id)

    def quote(self, item_id: str) -> Result:
        """
        Preview the next upgrade of an item.

        Returns:
            Result with UpgradeQuote data, or ITEM_NOT_FOUND
        """
        item = self.inventory.get(item_id)
        if item is None:
            return Result.fail(f"Item {item_id} not found", ErrorCode.ITEM_NOT_FOUND)
        return Result.ok(quote_upgrade(item))

    def upgrade(self, item_id: str, gold: Optional[int] = None,
                player_level: Optional[int] = None) -> Result:
        """
        Upgrade an item, splitting its stack if needed.

        When gold and player_level are given they are checked first; the
        caller still deducts result.data.cost itself.

        Returns:
            Result with UpgradeReceipt data
        """
        item = self.inventory.get(item_id)
        if item is None:
            return Result.fail(f"Item {item_id} not found", ErrorCode.ITEM_NOT_FOUND)

        if gold is not None or player_level is not None:
            affordable = check_upgrade_affordable(
                item,
                gold if gold is not None else float('inf'),
                player_level if player_level is not None else float('inf')
            )
            if not affordable.success:
                return affordable

        result = upgrade_in_inventory(self.inventory, item_id, id_prefix=self.config.id_prefix)
        if not result.success:
            return result

        receipt: UpgradeReceipt = result.data
        self.inventory = receipt.inventory
        upgraded = receipt.inventory.get(receipt.selected_id)

        if receipt.was_split:
            self._publish('stack.split', item_id, new_item_id=receipt.selected_id,
                          remaining=self.inventory.get(item_id).quantity)

        if receipt.outcome.kind == UpgradeKind.RARITY:
            self._publish('item.rarity_advanced', receipt.selected_id, cost=receipt.cost,
                          rarity=upgraded.rarity.value, upgrade_level=upgraded.upgrade_level)
        else:
            self._publish('item.upgraded', receipt.selected_id, cost=receipt.cost,
                          rarity=upgraded.rarity.value, upgrade_level=upgraded.upgrade_level)

        logger.info(f"Upgraded {receipt.selected_id} for {receipt.cost} gold")
        return result

    def equip(self, item_id: str, slot: Optional[Slot] = None) -> Result:
        """Equip an item for the player. Returns Result with SlotChange data."""
        result = equip(self.inventory, item_id, slot, id_prefix=self.config.id_prefix)
        if not result.success:
            return result

        change: SlotChange = result.data
        self.inventory = change.inventory
        for displaced_id in change.displaced:
            self._publish('item.unequipped', displaced_id, actor_id=PLAYER, reason='displaced')
        self._publish('item.equipped', change.item_id, actor_id=PLAYER, slot=change.slot.value)
        return result

    def unequip(self, item_id: str) -> Result:
        """Unequip an item. Strictness comes from config.strict_unequip."""
        result = unequip(self.inventory, item_id, strict=self.config.strict_unequip)
        if not result.success:
            return result

        change: SlotChange = result.data
        if change.slot is not None:
            self.inventory = change.inventory
            self._publish('item.unequipped', item_id, actor_id=PLAYER, slot=change.slot.value)
        return result

    def assign(self, item_id: str, companion_id: str, slot: Optional[Slot] = None) -> Result:
        """Give an item to a companion. Returns Result with AssignmentChange data."""
        result = assign_in_inventory(self.inventory, item_id, companion_id, slot,
                                     id_prefix=self.config.id_prefix)
        if not result.success:
            return result

        change = result.data
        self.inventory = change.inventory
        for displaced_id in change.displaced:
            self._publish('item.unassigned', displaced_id, actor_id=companion_id, reason='displaced')
        assigned = self.inventory.get(change.item_id)
        self._publish('item.assigned', change.item_id, actor_id=companion_id, slot=assigned.slot.value)
        return result

    def unassign(self, item_id: str) -> Result:
        """Take an item back from its companion."""
        result = unassign_in_inventory(self.inventory, item_id)
        if not result.success:
            return result

        change = result.data
        self.inventory = change.inventory
        self._publish('item.unassigned', item_id, actor_id=change.companion_id)
        return result

    def equippable_for_slot(self, slot: Slot) -> List[Item]:
        return list_equippable_for_slot(slot, self.inventory)

    def upgradeable_items(self) -> List[Item]:
        return list_upgradeable(self.inventory)

    def get_equipped_items(self, owner: str = PLAYER) -> List[Item]:
        if owner != PLAYER:
            return companion_equipment(self.inventory, owner)
        return self.inventory.equipped_for(PLAYER)

    def get_loadout(self, owner: str = PLAYER) -> Dict[Slot, Optional[Item]]:
        return equipment_by_slot(self.inventory, owner)

    def get_item_in_slot(self, slot: Slot, owner: str = PLAYER) -> Optional[Item]:
        return self.inventory.item_in_slot(slot, owner)


__all__ = ['Armory']

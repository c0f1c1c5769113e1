"""
Items package for Gear Forge.

Provides the item-progression and equipment-slot engine:

Engine:
- progression: upgrade ceiling, cost, previews, player-level gating, apply_upgrade
- stacks: splitting a multi-quantity record when one member changes
- slots: player equip/unequip with two-handed and off-hand exclusivity
- ownership: assigning gear to companions and taking it back

Support:
- classification: shield / two-handed / small-weapon detection, default slots
- schemas: JSON Schema and invariant validation for incoming records
- system: Armory facade that keeps a snapshot and publishes events

Philosophy:
Every engine function is pure. It takes an Item or an Inventory snapshot
and returns a Result holding the replacement; nothing is mutated in place.
"""

from .progression import (
    UpgradeKind,
    StatPreview,
    UpgradeOutcome,
    UpgradeQuote,
    get_upgrade_ceiling,
    compute_upgrade_cost,
    can_upgrade,
    preview_upgrade_stats,
    get_required_player_level,
    apply_upgrade,
    check_upgrade_affordable,
    quote_upgrade,
    list_upgradeable,
)
from .stacks import StackSplit, UpgradeReceipt, adjust_quantity, take_one, split_for_upgrade, upgrade_in_inventory
from .slots import SlotChange, check_equip, equip, unequip, list_equippable_for_slot, equipment_by_slot
from .ownership import (
    AssignmentChange,
    can_assign,
    assign,
    unassign,
    assign_in_inventory,
    unassign_in_inventory,
    companion_equipment,
)
from .classification import default_slot_for, is_shield, is_two_handed_weapon, is_small_weapon
from .schemas import ItemValidationError, load_item, load_inventory, validate_item, validate_inventory
from .system import Armory


__all__ = [
    'UpgradeKind',
    'StatPreview',
    'UpgradeOutcome',
    'UpgradeQuote',
    'get_upgrade_ceiling',
    'compute_upgrade_cost',
    'can_upgrade',
    'preview_upgrade_stats',
    'get_required_player_level',
    'apply_upgrade',
    'check_upgrade_affordable',
    'quote_upgrade',
    'list_upgradeable',
    'StackSplit',
    'UpgradeReceipt',
    'adjust_quantity',
    'take_one',
    'split_for_upgrade',
    'upgrade_in_inventory',
    'SlotChange',
    'check_equip',
    'equip',
    'unequip',
    'list_equippable_for_slot',
    'equipment_by_slot',
    'AssignmentChange',
    'can_assign',
    'assign',
    'unassign',
    'assign_in_inventory',
    'unassign_in_inventory',
    'companion_equipment',
    'default_slot_for',
    'is_shield',
    'is_two_handed_weapon',
    'is_small_weapon',
    'ItemValidationError',
    'load_item',
    'load_inventory',
    'validate_item',
    'validate_inventory',
    'Armory',
]

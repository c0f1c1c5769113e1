"""
Item shape classification used by the slot rules.

Items rarely carry explicit shape data, so shields, two-handed weapons and
small off-hand weapons are recognised from the handedness hint when present
and from name keywords otherwise.
"""

from typing import Dict, FrozenSet, Optional, Sequence

from gearforge.core.models import Item, ItemKind, Slot, Handedness

SHIELD_KEYWORDS = ('shield',)
BUCKLER_KEYWORDS = ('buckler',)
TWO_HANDED_KEYWORDS = (
    'greatsword', 'great sword', 'two-handed', 'two handed', 'battleaxe',
    'battle axe', 'warhammer', 'longsword', 'war axe', 'great axe', 'bow',
    'longbow', 'halberd',
)
SMALL_WEAPON_KEYWORDS = ('dagger', 'shortsword', 'sword', 'mace', 'handaxe', 'club', 'knife', 'stiletto')
OFF_HAND_WEAPON_KEYWORDS = ('shield', 'torch')
SMALL_WEAPON_MAX_WEIGHT = 8

HEAD_KEYWORDS = ('helmet', 'hood', 'circlet', 'crown')
RING_KEYWORDS = ('ring', 'band', 'signet')
NECKLACE_KEYWORDS = ('necklace', 'amulet', 'pendant', 'torc', 'chain')
HANDS_KEYWORDS = ('gauntlet', 'glove', 'bracer')
FEET_KEYWORDS = ('boot', 'shoe', 'greave')
CHEST_KEYWORDS = ('armor', 'cuirass', 'mail', 'robe', 'clothes', 'tunic')

# Which kinds each slot accepts
SLOT_KINDS: Dict[Slot, FrozenSet[ItemKind]] = {
    Slot.HEAD: frozenset({ItemKind.APPAREL}),
    Slot.NECKLACE: frozenset({ItemKind.APPAREL}),
    Slot.CHEST: frozenset({ItemKind.APPAREL}),
    Slot.HANDS: frozenset({ItemKind.APPAREL}),
    Slot.MAIN_HAND: frozenset({ItemKind.WEAPON}),
    Slot.OFF_HAND: frozenset({ItemKind.WEAPON, ItemKind.APPAREL}),
    Slot.RING: frozenset({ItemKind.APPAREL}),
    Slot.FEET: frozenset({ItemKind.APPAREL}),
}


def _name_has(item: Item, keywords: Sequence[str]) -> bool:
    name = (item.name or '').lower()
    return any(keyword in name for keyword in keywords)


def is_shield(item: Item) -> bool:
    if item is None:
        return False
    if _name_has(item, BUCKLER_KEYWORDS):
        return True
    return item.kind == ItemKind.APPAREL and _name_has(item, SHIELD_KEYWORDS)


def is_two_handed_weapon(item: Item) -> bool:
    """Weapons that need both hands. An explicit handedness hint wins over the name."""
    if item is None or item.kind != ItemKind.WEAPON:
        return False
    if item.handedness is not None:
        return item.handedness == Handedness.TWO_HANDED
    return _name_has(item, TWO_HANDED_KEYWORDS)


def is_small_weapon(item: Item) -> bool:
    """One-handed weapons light enough for the off-hand."""
    if item is None or item.kind != ItemKind.WEAPON:
        return False
    if is_two_handed_weapon(item):
        return False
    if item.handedness in (Handedness.ONE_HANDED, Handedness.OFF_HAND_ONLY):
        return True
    if _name_has(item, SMALL_WEAPON_KEYWORDS):
        return True
    return bool(item.damage) and (item.weight or 0) <= SMALL_WEAPON_MAX_WEIGHT


def can_equip_in_off_hand(item: Item) -> bool:
    return is_shield(item) or is_small_weapon(item)


def can_equip_in_main_hand(item: Item) -> bool:
    if item is None or is_shield(item):
        return False
    return item.kind == ItemKind.WEAPON


def slot_accepts_kind(slot: Slot, item: Item) -> bool:
    return item.kind in SLOT_KINDS.get(slot, frozenset())


def default_slot_for(item: Item) -> Optional[Slot]:
    """
    Infer where an item goes when the caller names no slot.

    An item that already has a slot keeps it. Only weapons and apparel have
    a default; everything else returns None.
    """
    if item.slot is not None:
        return item.slot
    if not item.kind.is_gear:
        return None

    if item.kind == ItemKind.WEAPON:
        if item.handedness == Handedness.OFF_HAND_ONLY:
            return Slot.OFF_HAND
        if item.handedness is not None:
            return Slot.MAIN_HAND
        if _name_has(item, OFF_HAND_WEAPON_KEYWORDS):
            return Slot.OFF_HAND
        return Slot.MAIN_HAND

    if is_shield(item):
        return Slot.OFF_HAND
    if _name_has(item, HEAD_KEYWORDS):
        return Slot.HEAD
    if _name_has(item, HANDS_KEYWORDS):
        return Slot.HANDS
    if _name_has(item, FEET_KEYWORDS):
        return Slot.FEET
    # Body armour before jewellery so 'Chainmail' is not read as a necklace
    if _name_has(item, CHEST_KEYWORDS):
        return Slot.CHEST
    if _name_has(item, RING_KEYWORDS):
        return Slot.RING
    if _name_has(item, NECKLACE_KEYWORDS):
        return Slot.NECKLACE
    return Slot.CHEST


__all__ = [
    'SLOT_KINDS',
    'is_shield',
    'is_two_handed_weapon',
    'is_small_weapon',
    'can_equip_in_off_hand',
    'can_equip_in_main_hand',
    'slot_accepts_kind',
    'default_slot_for',
]

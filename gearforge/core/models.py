"""
Core data models for Gear Forge.

These models represent the fundamental building blocks:
- Item: A piece of gear, consumable, or trinket with progression and slot state
- Inventory: An immutable snapshot of the caller's item collection
- Event: Immutable record of an engine transition, for presentation subscribers

Items are never mutated. Every engine operation returns a replacement Item or
a new Inventory, leaving the input snapshot untouched.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Dict, Any, Iterator, List, Tuple
import uuid


PLAYER = 'player'
"""Ownership tag for items held by the player (as opposed to a companion id)."""


def generate_id(prefix: str) -> str:
    """
    Generate a unique ID with the given prefix.

    Args:
        prefix: Prefix for the ID (e.g., 'item', 'evt')

    Returns:
        String like 'item_a1b2c3d4e5f6'

    Examples:
        >>> generate_id('item')
        'item_a1b2c3d4e5f6'
    """
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


class ItemKind(Enum):
    """Broad item category. Only weapons and apparel progress or take slots."""

    WEAPON = "weapon"
    APPAREL = "apparel"
    CONSUMABLE = "consumable"
    KEY = "key"
    MISC = "misc"

    @property
    def is_gear(self) -> bool:
        return self in (ItemKind.WEAPON, ItemKind.APPAREL)


class Rarity(Enum):
    """Rarity tiers, declared lowest to highest."""

    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    MYTHIC = "mythic"
    EPIC = "epic"


RARITY_ORDER: Tuple[Rarity, ...] = tuple(Rarity)


class Slot(Enum):
    """Named equipment positions. Each holds at most one item per owner."""

    MAIN_HAND = "main_hand"
    OFF_HAND = "off_hand"
    HEAD = "head"
    CHEST = "chest"
    HANDS = "hands"
    FEET = "feet"
    RING = "ring"
    NECKLACE = "necklace"


class Handedness(Enum):
    """Optional explicit grip hint that overrides name-based inference."""

    ONE_HANDED = "one_handed"
    TWO_HANDED = "two_handed"
    OFF_HAND_ONLY = "off_hand_only"


@dataclass(frozen=True)
class Item:
    """
    A single inventory record.

    A record with quantity > 1 is a homogeneous stack; operations that must
    act on one member split it first (see gearforge.items.stacks).

    Attributes:
        id: Unique identifier, stable for the item's lifetime
        name: Display name, also used for shape inference (shield, greatsword...)
        kind: Item category
        rarity: Current rarity tier
        upgrade_level: Level within the current rarity tier
        max_upgrade_level: Per-item ceiling override (None = kind default)
        damage: Weapon power, if any
        armor: Apparel power, if any
        value: Currency worth, also the base of the upgrade cost formula
        quantity: Stack size (>= 1)
        equipped: Whether the item currently occupies a slot
        slot: Occupied slot (only when equipped)
        equipped_by: None (free), 'player', or a companion id
        weight: Optional carry weight, used to spot small weapons
        handedness: Optional explicit grip hint

    Examples:
        Iron sword: Item.create('Iron Sword', ItemKind.WEAPON, damage=10, value=100)
        Healing potions: Item.create('Potion', ItemKind.CONSUMABLE, quantity=3)
    """
    id: str
    name: str
    kind: ItemKind
    rarity: Rarity = Rarity.COMMON
    upgrade_level: int = 0
    max_upgrade_level: Optional[int] = None
    damage: Optional[float] = None
    armor: Optional[float] = None
    value: Optional[float] = None
    quantity: int = 1
    equipped: bool = False
    slot: Optional[Slot] = None
    equipped_by: Optional[str] = None
    weight: Optional[float] = None
    handedness: Optional[Handedness] = None

    @staticmethod
    def create(name: str, kind: ItemKind, item_id: str = None, **fields: Any) -> 'Item':
        """
        Create a new item with a generated ID.

        Args:
            name: Item name
            kind: Item category
            item_id: Optional specific ID (generated if not provided)
            **fields: Any other Item attribute

        Returns:
            New Item instance
        """
        return Item(id=item_id or generate_id('item'), name=name, kind=kind, **fields)

    def evolve(self, **changes: Any) -> 'Item':
        """Return a copy of this item with the given attributes replaced."""
        return replace(self, **changes)

    def released(self) -> 'Item':
        """Return a copy with no slot and no owner."""
        return replace(self, equipped=False, slot=None, equipped_by=None)

    @property
    def is_stack(self) -> bool:
        return self.quantity > 1

    @property
    def held_by_player(self) -> bool:
        return self.equipped_by == PLAYER

    @property
    def held_by_companion(self) -> bool:
        return self.equipped_by is not None and self.equipped_by != PLAYER

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'id': self.id,
            'name': self.name,
            'kind': self.kind.value,
            'rarity': self.rarity.value,
            'upgrade_level': self.upgrade_level,
            'max_upgrade_level': self.max_upgrade_level,
            'damage': self.damage,
            'armor': self.armor,
            'value': self.value,
            'quantity': self.quantity,
            'equipped': self.equipped,
            'slot': self.slot.value if self.slot else None,
            'equipped_by': self.equipped_by,
            'weight': self.weight,
            'handedness': self.handedness.value if self.handedness else None,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'Item':
        """
        Build an Item from its dictionary form.

        No schema validation happens here; use
        gearforge.items.schemas.load_item for untrusted input.

        Raises:
            KeyError: If id, name or kind is missing
            ValueError: If an enum field holds an unknown value
        """
        slot = data.get('slot')
        handedness = data.get('handedness')
        return Item(
            id=data['id'],
            name=data['name'],
            kind=ItemKind(data['kind']),
            rarity=Rarity(data.get('rarity') or Rarity.COMMON.value),
            upgrade_level=data.get('upgrade_level') or 0,
            max_upgrade_level=data.get('max_upgrade_level'),
            damage=data.get('damage'),
            armor=data.get('armor'),
            value=data.get('value'),
            quantity=data.get('quantity', 1),
            equipped=bool(data.get('equipped', False)),
            slot=Slot(slot) if slot else None,
            equipped_by=data.get('equipped_by'),
            weight=data.get('weight'),
            handedness=Handedness(handedness) if handedness else None,
        )


@dataclass(frozen=True)
class Inventory:
    """
    Immutable snapshot of an item collection.

    Order is preserved; updates return a new Inventory. The host application
    keeps the latest snapshot and re-derives inputs from it before each call.
    """
    items: Tuple[Item, ...] = field(default_factory=tuple)

    @staticmethod
    def of(*items: Item) -> 'Inventory':
        return Inventory(tuple(items))

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, item_id: object) -> bool:
        return any(item.id == item_id for item in self.items)

    def get(self, item_id: str) -> Optional[Item]:
        """Return the item with this id, or None."""
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def replace(self, updated: Item) -> 'Inventory':
        """Swap in an updated version of an existing item (matched by id)."""
        return Inventory(tuple(updated if item.id == updated.id else item for item in self.items))

    def replace_many(self, updated: List[Item]) -> 'Inventory':
        by_id = {item.id: item for item in updated}
        return Inventory(tuple(by_id.get(item.id, item) for item in self.items))

    def add(self, item: Item) -> 'Inventory':
        return Inventory(self.items + (item,))

    def insert_after(self, anchor_id: str, item: Item) -> 'Inventory':
        """Insert item right after anchor_id (appends if the anchor is missing)."""
        result: List[Item] = []
        inserted = False
        for existing in self.items:
            result.append(existing)
            if existing.id == anchor_id:
                result.append(item)
                inserted = True
        if not inserted:
            result.append(item)
        return Inventory(tuple(result))

    def remove(self, item_id: str) -> 'Inventory':
        return Inventory(tuple(item for item in self.items if item.id != item_id))

    def equipped_for(self, owner: str) -> List[Item]:
        """All items currently equipped by owner ('player' or a companion id)."""
        return [item for item in self.items if item.equipped and item.equipped_by == owner]

    def item_in_slot(self, slot: Slot, owner: str = PLAYER) -> Optional[Item]:
        for item in self.equipped_for(owner):
            if item.slot == slot:
                return item
        return None

    def to_list(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self.items]

    @staticmethod
    def from_list(data: List[Dict[str, Any]]) -> 'Inventory':
        return Inventory(tuple(Item.from_dict(entry) for entry in data))


@dataclass
class Event:
    """
    An immutable record of an engine transition.

    Presentation concerns (sound cues, spark animations, toasts) subscribe to
    these instead of being interleaved with the state transition.

    Attributes:
        event_id: Unique identifier
        timestamp: When this event occurred
        event_type: Type of event (e.g., 'item.upgraded')
        item_id: Item involved (if any)
        actor_id: Who the transition was performed for ('player' or companion id)
        data: Event-specific data

    Examples:
        Upgrade: type='item.upgraded', item_id='item_123',
                 data={'cost': 70, 'upgrade_level': 1}
    """
    event_id: str
    timestamp: datetime
    event_type: str
    item_id: Optional[str]
    actor_id: Optional[str]
    data: Dict[str, Any]

    @staticmethod
    def create(event_type: str, data: Dict[str, Any],
               item_id: Optional[str] = None,
               actor_id: Optional[str] = None,
               event_id: str = None) -> 'Event':
        """
        Create a new event.

        Args:
            event_type: Type of event
            data: Event data
            item_id: Related item (optional)
            actor_id: Who this was done for (optional)
            event_id: Optional specific ID

        Returns:
            New Event instance
        """
        return Event(
            event_id=event_id or generate_id('evt'),
            timestamp=now(),
            event_type=event_type,
            item_id=item_id,
            actor_id=actor_id,
            data=data
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'event_id': self.event_id,
            'timestamp': self.timestamp.isoformat(),
            'event_type': self.event_type,
            'item_id': self.item_id,
            'actor_id': self.actor_id,
            'data': self.data
        }


__all__ = [
    'PLAYER',
    'generate_id',
    'now',
    'ItemKind',
    'Rarity',
    'RARITY_ORDER',
    'Slot',
    'Handedness',
    'Item',
    'Inventory',
    'Event',
]

"""
Progression engine: upgrade ceilings, costs, previews, and the upgrade itself.

All functions are pure. An "upgrade" is one of two transitions:
- level increase: below the ceiling, +1 level and a stat bump
- rarity advance: at the ceiling, next rarity tier with level reset to 1 and
  stats preserved (the benefit is the fresh headroom at the new tier)

Currency and player level are never touched here. Callers compare
compute_upgrade_cost / get_required_player_level against their own state
(check_upgrade_affordable packages that comparison) before apply_upgrade.
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any, List

from gearforge.core.models import Item, ItemKind, Rarity, RARITY_ORDER, Inventory
from gearforge.core.result import Result, ErrorCode

logger = logging.getLogger(__name__)

DEFAULT_CEILING = {
    ItemKind.WEAPON: 5,
    ItemKind.APPAREL: 5,
}

DEFAULT_BASE_VALUE = 10
BASE_COST_MULTIPLIER = 0.8
COST_LEVEL_SLOPE = 0.45
COST_LEVEL_GROWTH = 1.08

TYPE_FACTOR = {
    ItemKind.WEAPON: 1.1,
    ItemKind.APPAREL: 0.9,
}

RARITY_FACTOR = {
    Rarity.COMMON: 0.8,
    Rarity.UNCOMMON: 1.0,
    Rarity.RARE: 1.25,
    Rarity.MYTHIC: 1.6,
    Rarity.EPIC: 2.2,
}

# Per-level stat growth, keyed by kind: (stat attribute, per-rarity multiplier)
STAT_GROWTH = {
    ItemKind.WEAPON: ('damage', {
        Rarity.COMMON: 0.06,
        Rarity.UNCOMMON: 0.05,
        Rarity.RARE: 0.04,
        Rarity.MYTHIC: 0.03,
        Rarity.EPIC: 0.02,
    }),
    ItemKind.APPAREL: ('armor', {
        Rarity.COMMON: 0.05,
        Rarity.UNCOMMON: 0.04,
        Rarity.RARE: 0.035,
        Rarity.MYTHIC: 0.03,
        Rarity.EPIC: 0.02,
    }),
}

VALUE_LEVEL_SLOPE = 0.12
MIN_RARITY_VALUE_MULTIPLIER = 1.25
RARITY_VALUE_CARRY = 0.9

FREE_UPGRADE_LEVELS = 3
PLAYER_LEVEL_PER_UPGRADE = 2


class UpgradeKind(Enum):
    """Which branch apply_upgrade took."""

    LEVEL = "level"
    RARITY = "rarity"


@dataclass(frozen=True)
class StatPreview:
    """Forecast of damage/armor after the next upgrade. None = stat not affected."""
    damage: Optional[int | float] = None
    armor: Optional[int | float] = None

    def to_dict(self) -> Dict[str, Any]:
        preview = {}
        if self.damage is not None:
            preview['damage'] = self.damage
        if self.armor is not None:
            preview['armor'] = self.armor
        return preview


@dataclass(frozen=True)
class UpgradeOutcome:
    """
    Result data of apply_upgrade.

    Attributes:
        item: The upgraded item (same id as the input)
        cost: Cost of the pre-transition item, for the caller to deduct
        kind: Level increase or rarity advance
    """
    item: Item
    cost: int
    kind: UpgradeKind


def round_half_up(x: float) -> int:
    """Round halves toward +infinity (2.5 -> 3), unlike Python's banker's round()."""
    return math.floor(x + 0.5)


def _is_finite(x: Optional[float]) -> bool:
    return x is not None and math.isfinite(x)


def next_rarity(rarity: Rarity) -> Optional[Rarity]:
    """Return the tier above rarity, or None at the top tier."""
    index = RARITY_ORDER.index(rarity)
    if index + 1 >= len(RARITY_ORDER):
        return None
    return RARITY_ORDER[index + 1]


def get_upgrade_ceiling(item: Item) -> int:
    """
    Return the maximum upgrade level for the item's current rarity tier.

    A per-item override wins; otherwise weapons and apparel get 5 and every
    other kind 0 (never upgradeable).
    """
    if item.max_upgrade_level is not None:
        return item.max_upgrade_level
    return DEFAULT_CEILING.get(item.kind, 0)


def compute_upgrade_cost(item: Item) -> int:
    """
    Compute the currency cost of the item's next upgrade.

    cost = round(0.8 * value * type_factor * rarity_factor
                 * (1 + 0.45 * level) * 1.08 ** level), at least 1

    Missing or non-finite value falls back to 10.

    Examples:
        >>> compute_upgrade_cost(Item.create('Sword', ItemKind.WEAPON, value=100))
        70
    """
    base_value = item.value if _is_finite(item.value) else DEFAULT_BASE_VALUE
    type_factor = TYPE_FACTOR.get(item.kind, 1.0)
    rarity_factor = RARITY_FACTOR.get(item.rarity, 1.0)
    level = item.upgrade_level

    cost = round_half_up(
        BASE_COST_MULTIPLIER * base_value * type_factor * rarity_factor
        * (1 + COST_LEVEL_SLOPE * level) * COST_LEVEL_GROWTH ** level
    )
    return max(1, cost)


def _at_ceiling(item: Item, ceiling: int) -> bool:
    return item.upgrade_level >= ceiling


def can_upgrade(item: Item) -> bool:
    """
    True if apply_upgrade would succeed.

    Below the ceiling the next upgrade is a level increase; at the ceiling it
    is a rarity advance, possible only below the top tier.
    """
    ceiling = get_upgrade_ceiling(item)
    if ceiling <= 0:
        return False
    if not _at_ceiling(item, ceiling):
        return True
    return next_rarity(item.rarity) is not None


def _grown_stat(item: Item, next_level: int) -> Optional[tuple]:
    growth = STAT_GROWTH.get(item.kind)
    if growth is None:
        return None
    attribute, per_rarity = growth
    current = getattr(item, attribute)
    # Non-finite stats are carried over untouched
    if not _is_finite(current):
        return None
    per_level = per_rarity.get(item.rarity, 0.0)
    return attribute, round_half_up(current * (1 + per_level * next_level))


def preview_upgrade_stats(item: Item) -> StatPreview:
    """
    Forecast damage/armor after the next apply_upgrade, without changing anything.

    Below the ceiling this applies the per-level multiplier for the next
    level. At the ceiling (rarity advance) the current stats are returned
    unchanged. Only meaningful when can_upgrade(item) is True.
    """
    ceiling = get_upgrade_ceiling(item)
    if _at_ceiling(item, ceiling):
        return StatPreview(damage=item.damage, armor=item.armor)

    grown = _grown_stat(item, item.upgrade_level + 1)
    if grown is None:
        return StatPreview()
    attribute, new_value = grown
    return StatPreview(**{attribute: new_value})


def get_required_player_level(item: Item) -> int:
    """
    Player level needed for the next upgrade (0 = no requirement).

    The first three levels are free; after that the requirement is twice the
    level being reached.
    """
    next_level = item.upgrade_level + 1
    if next_level <= FREE_UPGRADE_LEVELS:
        return 0
    return next_level * PLAYER_LEVEL_PER_UPGRADE


def _level_increase(item: Item) -> Item:
    next_level = item.upgrade_level + 1
    changes: Dict[str, Any] = {'upgrade_level': next_level}

    grown = _grown_stat(item, next_level)
    if grown is not None:
        attribute, new_value = grown
        changes[attribute] = max(0, new_value)

    if _is_finite(item.value):
        rarity_factor = RARITY_FACTOR.get(item.rarity, 1.0)
        changes['value'] = round_half_up(
            item.value * (1 + VALUE_LEVEL_SLOPE * next_level * math.sqrt(rarity_factor))
        )

    return item.evolve(**changes)


def _rarity_advance(item: Item, rarity: Rarity) -> Item:
    changes: Dict[str, Any] = {'rarity': rarity, 'upgrade_level': 1}

    if _is_finite(item.value):
        multiplier = max(
            MIN_RARITY_VALUE_MULTIPLIER,
            1 + (RARITY_FACTOR.get(rarity, 1.0) - 1) * RARITY_VALUE_CARRY
        )
        changes['value'] = round_half_up(item.value * multiplier)

    return item.evolve(**changes)


def apply_upgrade(item: Item) -> Result:
    """
    Perform one upgrade step.

    Args:
        item: Item to upgrade (not modified)

    Returns:
        Result with UpgradeOutcome data, or a MAX_UPGRADE_REACHED failure when
        can_upgrade(item) is False. outcome.cost is the cost of the
        pre-transition item.
    """
    if not can_upgrade(item):
        logger.info(f"Upgrade refused for {item.id}: max upgrade reached")
        return Result.fail(
            f"{item.name} cannot be upgraded any further",
            ErrorCode.MAX_UPGRADE_REACHED
        )

    cost = compute_upgrade_cost(item)
    ceiling = get_upgrade_ceiling(item)

    if _at_ceiling(item, ceiling):
        rarity = next_rarity(item.rarity)
        updated = _rarity_advance(item, rarity)
        kind = UpgradeKind.RARITY
        logger.debug(f"{item.id}: rarity {item.rarity.value} -> {rarity.value} (cost {cost})")
    else:
        updated = _level_increase(item)
        kind = UpgradeKind.LEVEL
        logger.debug(f"{item.id}: level {item.upgrade_level} -> {updated.upgrade_level} (cost {cost})")

    return Result.ok(UpgradeOutcome(item=updated, cost=cost, kind=kind))


def check_upgrade_affordable(item: Item, gold: int, player_level: int) -> Result:
    """
    Run the caller-side preconditions for an upgrade.

    The engine never enforces these itself; this helper just packages the
    comparison so UIs surface consistent reasons.

    Returns:
        Result.ok({'cost': ..., 'required_level': ...}) or a failure with
        MAX_UPGRADE_REACHED, PLAYER_LEVEL_TOO_LOW or INSUFFICIENT_GOLD
    """
    if not can_upgrade(item):
        return Result.fail(f"{item.name} cannot be upgraded any further", ErrorCode.MAX_UPGRADE_REACHED)

    required_level = get_required_player_level(item)
    if required_level > 0 and player_level < required_level:
        return Result.fail(
            f"Requires player level {required_level} to perform this upgrade",
            ErrorCode.PLAYER_LEVEL_TOO_LOW
        )

    cost = compute_upgrade_cost(item)
    if gold < cost:
        return Result.fail(f"Upgrade costs {cost} gold, only {gold} available", ErrorCode.INSUFFICIENT_GOLD)

    return Result.ok({'cost': cost, 'required_level': required_level})


@dataclass(frozen=True)
class UpgradeQuote:
    """Everything a blacksmith screen shows before the player confirms."""
    item_id: str
    can_upgrade: bool
    cost: int
    required_player_level: int
    ceiling: int
    preview: StatPreview
    next_rarity: Optional[Rarity] = None

    @property
    def is_rarity_advance(self) -> bool:
        return self.next_rarity is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'item_id': self.item_id,
            'can_upgrade': self.can_upgrade,
            'cost': self.cost,
            'required_player_level': self.required_player_level,
            'ceiling': self.ceiling,
            'preview': self.preview.to_dict(),
            'next_rarity': self.next_rarity.value if self.next_rarity else None,
        }


def quote_upgrade(item: Item) -> UpgradeQuote:
    upgradeable = can_upgrade(item)
    ceiling = get_upgrade_ceiling(item)
    advancing = upgradeable and _at_ceiling(item, ceiling)
    return UpgradeQuote(
        item_id=item.id,
        can_upgrade=upgradeable,
        cost=compute_upgrade_cost(item),
        required_player_level=get_required_player_level(item),
        ceiling=ceiling,
        preview=preview_upgrade_stats(item) if upgradeable else StatPreview(),
        next_rarity=next_rarity(item.rarity) if advancing else None
    )


def list_upgradeable(inventory: Inventory) -> List[Item]:
    """Weapons and apparel a blacksmith would list, whether or not they are maxed."""
    return [item for item in inventory if item.kind.is_gear]


__all__ = [
    'UpgradeKind',
    'StatPreview',
    'UpgradeOutcome',
    'UpgradeQuote',
    'quote_upgrade',
    'round_half_up',
    'next_rarity',
    'get_upgrade_ceiling',
    'compute_upgrade_cost',
    'can_upgrade',
    'preview_upgrade_stats',
    'get_required_player_level',
    'apply_upgrade',
    'check_upgrade_affordable',
    'list_upgradeable',
]
